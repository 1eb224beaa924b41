import logging
import os
import sys

from seashell.config import HISTORY_FILE, MAX_HISTORY

try:
    import readline
except ImportError:  # pragma: no cover - platforms without GNU readline
    readline = None

log = logging.getLogger(__name__)


def init_readline():
    """Configure readline line editing for an interactive terminal"""
    if readline is None or not sys.stdin.isatty():
        return False
    try:
        # arrow keys walk the history
        readline.parse_and_bind("\\e[A: previous-history")
        readline.parse_and_bind("\\e[B: next-history")

        # Ctrl+Left/Right jump between words
        readline.parse_and_bind("\\e[1;5D: backward-word")
        readline.parse_and_bind("\\e[1;5C: forward-word")

        readline.parse_and_bind("set editing-mode emacs")
    except Exception as e:
        print(f"Warning: Could not configure readline: {e}", file=sys.stderr)
        return False
    return True


def save_history(path=HISTORY_FILE):
    """Write the history to a file"""
    if readline is None:
        return
    try:
        readline.set_history_length(MAX_HISTORY)
        readline.write_history_file(path)
    except OSError as e:
        print(f"Warning: Could not save history: {e}", file=sys.stderr)


def load_history(path=HISTORY_FILE):
    """Load the history from a file"""
    if readline is None:
        return
    try:
        if os.path.exists(path):
            readline.read_history_file(path)
            readline.set_history_length(MAX_HISTORY)
    except OSError as e:
        print(f"Warning: Could not load history: {e}", file=sys.stderr)


def show_history():
    """Print the whole history. Returns False if there is no history support."""
    if readline is None:
        return False
    hlen = readline.get_current_history_length()
    for i in range(1, hlen + 1):
        print(f"{i}\t{readline.get_history_item(i)}")
    return True


def prefill(text):
    """Put `text` on the next prompt's edit line, ready to be completed."""
    if readline is None:
        return

    def hook():
        readline.insert_text(text)
        readline.set_startup_hook(None)

    log.debug("prefilling next line with %r", text)
    readline.set_startup_hook(hook)


def read_line(prompt_text):
    """
    Read one finished line from the user.
    Returns None on end of input (Ctrl+D).
    """
    try:
        return input(prompt_text)
    except EOFError:
        print()
        return None
