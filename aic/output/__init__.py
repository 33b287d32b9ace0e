"""Terminal Output Formatting Package"""

import os
import re
import sys
import threading


class Colors:
    """ANSI escape codes for terminal colors."""
    RESET = '\033[0m'
    BOLD = '\033[1m'
    DIM = '\033[2m'
    RED = '\033[31m'
    GREEN = '\033[32m'
    YELLOW = '\033[33m'
    CYAN = '\033[36m'
    MAGENTA = '\033[35m'


def _supports_color() -> bool:
    if os.environ.get('NO_COLOR') or os.environ.get('AIC_NO_COLOR'):
        return False
    if os.environ.get('FORCE_COLOR'):
        return True
    if not hasattr(sys.stdout, 'isatty') or not sys.stdout.isatty():
        return False
    if sys.platform == 'win32':
        try:
            import ctypes
            kernel32 = ctypes.windll.kernel32
            kernel32.SetConsoleMode(kernel32.GetStdHandle(-11), 7)
            return True
        except Exception:
            return False
    return True


def _supports_unicode() -> bool:
    if sys.platform == 'win32':
        try:
            '✓'.encode(sys.stdout.encoding or 'utf-8')
            return True
        except (UnicodeEncodeError, LookupError):
            return False
    return True


COLORS_ENABLED = _supports_color()
UNICODE_ENABLED = _supports_unicode()

CHECK = '✓' if UNICODE_ENABLED else '[OK]'
CROSS = '✗' if UNICODE_ENABLED else '[X]'
ARROW = '→' if UNICODE_ENABLED else '->'


def disable_colors() -> None:
    """Turn colour off for the rest of the process (--no-color)."""
    global COLORS_ENABLED
    COLORS_ENABLED = False


def _colorize(text: str, *codes: str) -> str:
    if not COLORS_ENABLED:
        return text
    return f"{''.join(codes)}{text}{Colors.RESET}"


def success(text: str) -> str:
    return _colorize(text, Colors.GREEN)


def error(text: str) -> str:
    return _colorize(text, Colors.RED)


def warning(text: str) -> str:
    return _colorize(text, Colors.YELLOW)


def info(text: str) -> str:
    return _colorize(text, Colors.CYAN)


def dim(text: str) -> str:
    return _colorize(text, Colors.DIM)


def bold(text: str) -> str:
    return _colorize(text, Colors.BOLD)


def print_success(message: str) -> None:
    print(f"{success(CHECK)} {message}")


def print_error(message: str) -> None:
    print(f"{error(CROSS)} {error(message)}", file=sys.stderr)


def print_warning(message: str) -> None:
    text = f"{warning('⚠')} {warning(message)}" if UNICODE_ENABLED else f"[!] {message}"
    print(text, file=sys.stderr)


def print_hint(message: str) -> None:
    print(f"  {dim(ARROW)} {dim(message)}", file=sys.stderr)


COMMIT_TYPE_COLORS = {
    'feat': Colors.GREEN,
    'fix': Colors.RED,
    'refactor': Colors.YELLOW,
    'docs': Colors.CYAN,
    'test': Colors.MAGENTA,
    'perf': Colors.GREEN,
    'chore': Colors.DIM,
    'style': Colors.DIM,
    'ci': Colors.CYAN,
    'build': Colors.CYAN,
    'revert': Colors.YELLOW,
}


def colorize_commit_type(message: str) -> str:
    """Color the conventional type prefix of a one-line commit message."""
    if not COLORS_ENABLED:
        return message
    match = re.match(r'^(\w+)(\([^)]*\))?(!?:)', message)
    if match:
        color = COMMIT_TYPE_COLORS.get(match.group(1))
        if color:
            prefix = match.group(0)
            return _colorize(prefix, Colors.BOLD, color) + message[len(prefix):]
    return message


class Spinner:
    """Animated spinner for long operations. Use as context manager.

    On a non-tty stream nothing animates; only the final status line of
    stop() is written.
    """
    FRAMES_UNICODE = ['⠋', '⠙', '⠹', '⠸', '⠼', '⠴', '⠦', '⠧', '⠇', '⠏']
    FRAMES_ASCII = ['-', '\\', '|', '/']

    def __init__(self, message: str = "", stream=None):
        self.message = message
        self._stream = stream or sys.stderr
        self._thread = None
        self._stop_event = threading.Event()
        self._lock = threading.Lock()
        self._stopped = False
        self._frames = self.FRAMES_UNICODE if UNICODE_ENABLED else self.FRAMES_ASCII

    def _is_tty(self) -> bool:
        return hasattr(self._stream, 'isatty') and self._stream.isatty()

    def _spin(self):
        idx = 0
        while not self._stop_event.is_set():
            frame = self._frames[idx % len(self._frames)]
            print(f'\r\033[K{info(frame)} {self.message}', end='', flush=True, file=self._stream)
            idx += 1
            self._stop_event.wait(0.08)

    def start(self) -> 'Spinner':
        if self._is_tty():
            self._stop_event.clear()
            self._thread = threading.Thread(target=self._spin, daemon=True)
            self._thread.start()
        return self

    def stop(self, ok: bool = True) -> None:
        """Stop animating and print one status line. Safe to call twice."""
        with self._lock:
            if self._stopped:
                return
            self._stopped = True
        self._stop_event.set()
        if self._thread:
            self._thread.join()
        if self._is_tty():
            print('\r\033[K', end='', flush=True, file=self._stream)
        if self.message:
            icon = success(CHECK) if ok else error(CROSS)
            print(f"{icon} {self.message}", file=self._stream, flush=True)

    def __enter__(self):
        return self.start()

    def __exit__(self, exc_type, *args):
        self.stop(ok=exc_type is None)


__all__ = [
    "Colors", "COLORS_ENABLED", "UNICODE_ENABLED",
    "CHECK", "CROSS", "ARROW",
    "disable_colors",
    "success", "error", "warning", "info", "dim", "bold",
    "print_success", "print_error", "print_warning", "print_hint",
    "colorize_commit_type", "Spinner", "COMMIT_TYPE_COLORS",
]
