"""Interactive Selector - pick, multi-select and combine commit message candidates."""

import os
import sys
from dataclasses import dataclass, field
from typing import Callable, Optional

from aic import AicError
from aic.cli.terminal import CBreak, TerminalError, read_key, term_cols, truncate
from aic.output import bold, dim, info, success, warning

# Keys 1-9 and 0 address at most ten candidates
MAX_VISIBLE = 10

# "> [1] [x] " in front of every candidate
PREFIX_WIDTH = 10
MIN_TEXT_WIDTH = 10

HEADER = "Commit message suggestions:"
COMBINED_HEADER = "Combined suggestions:"


class SelectionError(AicError):
    """Raised when there is nothing to select from."""
    pass


class SelectionCanceled(SelectionError):
    """Raised when the user aborts the selection with Ctrl+C."""
    pass


@dataclass
class SelectionState:
    """Cursor and checked set over the visible candidates."""
    candidates: list[str]
    cursor: int = 0
    checked: set[int] = field(default_factory=set)

    def __post_init__(self):
        self.candidates = list(self.candidates)[:MAX_VISIBLE]

    @property
    def count(self) -> int:
        return len(self.candidates)

    @property
    def current(self) -> str:
        return self.candidates[self.cursor]

    def move(self, delta: int) -> None:
        self.cursor = min(max(self.cursor + delta, 0), self.count - 1)

    def toggle(self) -> None:
        self.checked ^= {self.cursor}

    def checked_in_order(self) -> list[str]:
        """Checked candidates in on-screen order, not the order they were checked."""
        return [self.candidates[i] for i in sorted(self.checked)]

    def replace(self, candidates: list[str]) -> None:
        """Swap in a new list; cursor and checked marks refer to the old one."""
        self.candidates = list(candidates)[:MAX_VISIBLE]
        self.cursor = 0
        self.checked = set()


def range_label(count: int) -> str:
    return "1-9,0" if count == MAX_VISIBLE else f"1-{count}"


def digit_index(key: str, count: int) -> Optional[int]:
    """Candidate index addressed by a digit key, or None when it addresses nothing."""
    if key == "0":
        return MAX_VISIBLE - 1 if count == MAX_VISIBLE else None
    value = int(key)
    if 1 <= value <= count:
        return value - 1
    return None


def parse_choice(answer: str, count: int) -> int:
    """Index picked at the line prompt; anything unusable means the first."""
    answer = answer.strip()
    if not answer:
        return 0
    if answer == "0" and count == MAX_VISIBLE:
        return MAX_VISIBLE - 1
    try:
        value = int(answer)
    except ValueError:
        return 0
    if 1 <= value <= count:
        return value - 1
    return 0


def instructions_line(state: SelectionState, cols: int) -> str:
    """Key help under the menu, never wider than the terminal.

    A wrapped line would add a row the re-render does not move back over,
    so narrow terminals get a compact form and anything longer is cut.
    """
    extra = ",0" if state.count == MAX_VISIBLE else ""
    checked = len(state.checked)
    multi = f" – {checked} selected; Enter combines" if checked >= 2 else ""
    text = (f"Use ↑/↓ or j/k, Space to toggle select, numbers to pick (1-9{extra}), "
            f"Enter to confirm{multi}.")
    if len(text) > cols:
        enter = f"Enter combines {checked}" if checked >= 2 else "Enter confirms"
        text = f"↑/↓ j/k move, Space toggles, 1-9{extra} pick, {enter}"
    return truncate(text, cols)


class Selector:
    """Lets the user choose one candidate.

    Falls back to a numbered line prompt when stdin is not a terminal or
    cbreak mode cannot be engaged. `combine` receives the checked candidates
    and returns the replacement list; its errors propagate to the caller.
    """

    def __init__(self,
                 combine: Optional[Callable[[list[str]], list[str]]] = None,
                 stdin=None,
                 stdout=None,
                 cbreak: Callable = CBreak,
                 reader: Optional[Callable[[int], bytes]] = None,
                 non_interactive: bool = False,
                 columns: Optional[int] = None):
        self.combine = combine
        self.stdin = stdin or sys.stdin
        self.stdout = stdout or sys.stdout
        self.cbreak = cbreak
        self.non_interactive = non_interactive
        self.columns = columns
        self._reader = reader

    def select(self, candidates: list[str]) -> str:
        if not candidates:
            raise SelectionError("no suggestions to select")

        state = SelectionState(candidates)

        if self.non_interactive:
            self._print_list(state.candidates, HEADER)
            return state.candidates[0]

        if not self._stdin_is_tty():
            return self._line_prompt(state.candidates, HEADER)

        return self._interactive(state)

    def _stdin_is_tty(self) -> bool:
        return hasattr(self.stdin, 'isatty') and self.stdin.isatty()

    def _read(self, n: int) -> bytes:
        if self._reader is not None:
            return self._reader(n)
        return os.read(self.stdin.fileno(), n)

    def _engage(self):
        term = self.cbreak(self.stdin)
        try:
            term.__enter__()
        except TerminalError:
            return None
        return term

    def _interactive(self, state: SelectionState) -> str:
        term = self._engage()
        if term is None:
            return self._line_prompt(state.candidates, HEADER)

        try:
            self._write_lines(self._lines(state))
            while True:
                try:
                    key = read_key(self._read)
                except KeyboardInterrupt:
                    raise SelectionCanceled("selection canceled")
                except OSError:
                    return state.current

                if key == "eof":
                    return state.current
                if key == "interrupt":
                    raise SelectionCanceled("selection canceled")

                if key.isdigit():
                    index = digit_index(key, state.count)
                    if index is not None:
                        return state.candidates[index]
                elif key == "up":
                    state.move(-1)
                elif key == "down":
                    state.move(1)
                elif key == "space":
                    state.toggle()
                elif key == "enter":
                    if len(state.checked) >= 2 and self.combine is not None:
                        term.restore()
                        combined = self.combine(state.checked_in_order())
                        if not combined:
                            raise SelectionError("no suggestions to select")
                        state.replace(combined)
                        term = self._engage()
                        if term is None:
                            return self._line_prompt(state.candidates, COMBINED_HEADER)
                        self._write_lines(self._lines(state))
                        continue
                    if len(state.checked) == 1:
                        return state.candidates[next(iter(state.checked))]
                    return state.current

                self._rerender(state)
        finally:
            if term is not None:
                term.restore()

    def _lines(self, state: SelectionState) -> list[str]:
        cols = self.columns or term_cols(self.stdout, self.stdin)
        width = max(cols - PREFIX_WIDTH, MIN_TEXT_WIDTH)

        lines = [bold(HEADER)]
        for i, candidate in enumerate(state.candidates):
            label = "0" if i == MAX_VISIBLE - 1 else str(i + 1)
            box = "[x]" if i in state.checked else "[ ]"
            text = truncate(candidate, width)
            if i == state.cursor:
                lines.append(f"{warning('> ')}[{label}] {box} {success(bold(text))}")
            else:
                lines.append(f"  [{label}] {box} {info(text)}")

        lines.append(dim(instructions_line(state, cols)))
        return lines

    def _write(self, text: str) -> None:
        self.stdout.write(text)
        self.stdout.flush()

    def _write_lines(self, lines: list[str]) -> None:
        self._write("".join(line + "\n" for line in lines))

    def _rerender(self, state: SelectionState) -> None:
        """Redraw the menu over its previous rendering."""
        lines = self._lines(state)
        total = len(lines)
        self._write(f"\033[{total}A" + "\033[2K\r\n" * total + f"\033[{total}A")
        self._write_lines(lines)

    def _print_list(self, candidates: list[str], header: str) -> None:
        lines = [bold(header)]
        for i, candidate in enumerate(candidates, 1):
            lines.append(f"  {warning(f'[{i}]')} {info(candidate)}")
        self._write_lines(lines)

    def _line_prompt(self, candidates: list[str], header: str) -> str:
        self._print_list(candidates, header)
        label = range_label(len(candidates))
        self._write(f"\n{bold('?')} Choose a commit message {warning(f'[{label}]')} {dim('[default: 1]')}: ")
        try:
            answer = self.stdin.readline()
        except (OSError, ValueError):
            answer = ""
        return candidates[parse_choice(answer, len(candidates))]
