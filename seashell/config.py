import os

SHELL_NAME = "seashell"

HISTORY_FILE = os.path.expanduser(
    os.environ.get("SEASHELL_HISTORY", "~/.seashell_history")
)
MAX_HISTORY = int(os.environ.get("SEASHELL_HISTORY_SIZE", "1000"))

LOG_LEVEL = os.environ.get("SEASHELL_LOG_LEVEL", "WARNING").upper()

# Exit statuses reported back to the read-eval loop
STATUS_LAUNCHED = 0
SIGNALED_BASE = 128
