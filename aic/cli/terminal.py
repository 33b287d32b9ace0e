"""Terminal helpers for the interactive selector: cbreak mode, width, key decoding."""

import os
import sys

from aic import AicError

MIN_USABLE_COLUMNS = 20
DEFAULT_COLUMNS = 80

ESC = b"\x1b"
CTRL_C = b"\x03"


class TerminalError(AicError):
    """Raised when the terminal cannot be switched into cbreak mode."""
    pass


class CBreak:
    """Context manager holding stdin in cbreak mode (no line buffering, no echo).

    restore() may be called early and any number of times; only the first
    call touches the terminal.
    """

    def __init__(self, stream=None):
        self.stream = stream or sys.stdin
        self._fd = None
        self._saved = None

    def __enter__(self) -> 'CBreak':
        try:
            import termios
            import tty
        except ImportError:
            raise TerminalError("cbreak mode is not supported on this platform")
        try:
            fd = self.stream.fileno()
            saved = termios.tcgetattr(fd)
            tty.setcbreak(fd)
        except (termios.error, OSError, ValueError, AttributeError) as e:
            raise TerminalError(f"cannot enable cbreak mode: {e}")
        self._fd = fd
        self._saved = saved
        return self

    def restore(self) -> None:
        if self._saved is None:
            return
        import termios
        saved, self._saved = self._saved, None
        try:
            termios.tcsetattr(self._fd, termios.TCSADRAIN, saved)
        except termios.error:
            # Terminal already gone; nothing left to restore
            pass

    def __exit__(self, *args):
        self.restore()


def _stream_columns(stream) -> int:
    try:
        return os.get_terminal_size(stream.fileno()).columns
    except (AttributeError, ValueError, OSError):
        return 0


def term_cols(stdout=None, stdin=None, environ=None) -> int:
    """Usable terminal width: stdout, then stdin, then $COLUMNS, then 80.

    Widths of 20 or less are treated as unknown.
    """
    environ = os.environ if environ is None else environ
    for stream in (stdout or sys.stdout, stdin or sys.stdin):
        cols = _stream_columns(stream)
        if cols > MIN_USABLE_COLUMNS:
            return cols
    try:
        cols = int(environ.get("COLUMNS", ""))
    except ValueError:
        cols = 0
    if cols > MIN_USABLE_COLUMNS:
        return cols
    return DEFAULT_COLUMNS


def truncate(text: str, width: int) -> str:
    """Cut text to width characters, marking the cut with an ellipsis."""
    if len(text) <= width:
        return text
    return text[:max(width - 1, 0)] + "…"


def read_key(read) -> str:
    """Decode one keypress from read(n) -> bytes.

    Returns 'up', 'down', 'space', 'enter', 'interrupt', 'eof', a digit
    character, or 'other'.
    """
    b = read(1)
    if not b:
        return "eof"
    if b == CTRL_C:
        return "interrupt"
    if b in (b"\r", b"\n"):
        return "enter"
    if b == b" ":
        return "space"
    if b == b"k":
        return "up"
    if b == b"j":
        return "down"
    if b.isdigit():
        return b.decode("ascii")
    if b == ESC:
        if read(1) != b"[":
            return "other"
        final = read(1)
        if final == b"A":
            return "up"
        if final == b"B":
            return "down"
        return "other"
    return "other"
