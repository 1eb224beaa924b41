import enum
import os
from contextlib import ExitStack, redirect_stdout
from functools import partial

from seashell.config import SHELL_NAME
from seashell.errors import BuiltinInPipeline, RedirectFailed
from seashell.history import show_history


class BuiltinResult(enum.Enum):
    SUCCESS = "success"
    EXIT = "exit"
    NOT_HANDLED = "not-handled"


def builtin_help(args, background):
    """Print help message"""
    print(f"""{SHELL_NAME} help:
 Built-in commands:
  cd [dir]      : change directory
  exit          : exit shell
  help          : print this help
  history       : show command history
  jobs          : list background jobs

Features:
  Pipes using |
  Redirection using > >> <
  Background with & at the end of the line
""")
    return BuiltinResult.SUCCESS


def builtin_cd(args, background):
    """Change directory"""
    path = args[0] if args else os.environ.get("HOME") or os.path.expanduser("~")
    try:
        os.chdir(os.path.expanduser(path))
    except OSError as e:
        print(f"-{SHELL_NAME}: cd: {path}: {e.strerror}")
    return BuiltinResult.SUCCESS


def builtin_exit(args, background):
    return BuiltinResult.EXIT


def builtin_history(args, background):
    """Show command history"""
    if not show_history():
        return BuiltinResult.NOT_HANDLED
    return BuiltinResult.SUCCESS


def builtin_jobs(args, background, jobs=None):
    """List background jobs"""
    if jobs is None:
        print("No background jobs.")
    else:
        jobs.show()
    return BuiltinResult.SUCCESS


BUILTINS = {
    "cd": builtin_cd,
    "exit": builtin_exit,
    "help": builtin_help,
    "history": builtin_history,
    "jobs": builtin_jobs,
}


def dispatch_builtin(pipeline, jobs=None):
    """
    Run the pipeline in-process if its command is a builtin.
    Returns: BuiltinResult (NOT_HANDLED means run it as an external command)
    """
    if pipeline.is_empty:
        return BuiltinResult.NOT_HANDLED

    if len(pipeline.stages) > 1:
        for stage in pipeline.stages:
            if stage.name in BUILTINS:
                raise BuiltinInPipeline(stage.name)
        return BuiltinResult.NOT_HANDLED

    stage = pipeline.stages[0]
    handler = BUILTINS.get(stage.name)
    if handler is None:
        return BuiltinResult.NOT_HANDLED
    if handler is builtin_jobs:
        handler = partial(builtin_jobs, jobs=jobs)

    with ExitStack() as stack:
        if stage.stdout:
            mode = "a" if stage.stdout.append else "w"
            try:
                out = open(os.path.expanduser(stage.stdout.path), mode)
            except OSError as e:
                raise RedirectFailed(stage.stdout.path, e.strerror) from e
            stack.enter_context(out)
            stack.enter_context(redirect_stdout(out))
        return handler(stage.args, pipeline.background)
