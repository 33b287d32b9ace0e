"""CLI Utility Functions"""

import os
import shutil
import subprocess
import sys
import tempfile

# Tried in order; the first one installed and succeeding wins
CLIPBOARD_TOOLS = [
    ['pbcopy'],
    ['wl-copy'],
    ['xclip', '-selection', 'clipboard'],
    ['xsel', '--clipboard', '--input'],
    ['clip'],
]


def copy_to_clipboard(text: str, which=shutil.which, run=subprocess.run) -> tuple[bool, str]:
    """Copy text to clipboard. Returns (success, failure_reason)."""
    found = False
    reason = ""
    for command in CLIPBOARD_TOOLS:
        if not which(command[0]):
            continue
        found = True
        try:
            run(command, input=text.encode('utf-8'), check=True)
            return True, ""
        except (subprocess.CalledProcessError, OSError) as e:
            reason = f"Clipboard command failed: {e}"

    if not found:
        if sys.platform.startswith('linux'):
            return False, "Install wl-clipboard, xclip or xsel"
        return False, "No clipboard tool found"
    return False, reason


def edit_message(message: str) -> str | None:
    """Open message in user's editor. Returns edited text or None on failure."""
    editor = os.environ.get('VISUAL') or os.environ.get('EDITOR')
    if not editor:
        editor = 'notepad' if sys.platform == 'win32' else 'vi'

    tmp = tempfile.NamedTemporaryFile(mode='w', suffix='.gitcommit', delete=False, encoding='utf-8')
    try:
        tmp.write(message)
        tmp.close()
        # Editors configured with flags ("code --wait") need splitting
        subprocess.run([*editor.split(), tmp.name], check=True)
        with open(tmp.name, 'r', encoding='utf-8') as f:
            edited = f.read().strip()
        return edited if edited else None
    except (subprocess.CalledProcessError, OSError):
        return None
    finally:
        try:
            os.unlink(tmp.name)
        except OSError as e:
            # Log to stderr so temp files don't silently accumulate
            print(f"Warning: Could not delete temp file {tmp.name}: {e}", file=sys.stderr)
