import logging
import os
import shutil

from seashell.errors import CommandNotFound

log = logging.getLogger(__name__)


def resolve_command(name, search_path=None):
    """
    Find the executable file that `name` refers to.

    Names containing a path separator are checked as given. Bare names are
    looked up in `search_path` (a PATH-style string), which defaults to the
    current value of $PATH. Raises CommandNotFound when nothing matches.
    """
    if not name:
        raise CommandNotFound(name)

    if os.sep in name:
        found = shutil.which(name)
    else:
        if search_path is None:
            search_path = os.environ.get("PATH", "")
        if not search_path:
            raise CommandNotFound(name)
        found = shutil.which(name, path=search_path)

    if found is None:
        raise CommandNotFound(name)

    log.debug("resolved %s -> %s", name, found)
    return found
