import argparse
import logging
import os
import signal
import socket
import sys

from seashell import __version__
from seashell.builtin import BuiltinResult, dispatch_builtin
from seashell.config import LOG_LEVEL, SHELL_NAME, SIGNALED_BASE
from seashell.errors import ShellError
from seashell.executor import execute_pipeline
from seashell.history import init_readline, load_history, prefill, read_line, save_history
from seashell.job_control import JobTable
from seashell.parser import format_pipeline, parse_command

log = logging.getLogger(__name__)


def prompt():
    """Generate shell prompt"""
    user = os.getenv("USER") or os.getenv("USERNAME") or "user"
    host = socket.gethostname()
    try:
        cwd = os.getcwd()
    except OSError:
        # the working directory was removed under us
        cwd = os.getenv("PWD") or "?"
    return f"{user}@{host}:{cwd} {SHELL_NAME}$ "


class Shell:
    """The read-eval loop. Owns the background job table and the last status."""

    def __init__(self, debug=False, use_history=True):
        self.debug = debug
        self.use_history = use_history
        self.jobs = JobTable()
        self.last_status = 0

    def run_line(self, line):
        """
        Parse and run one input line.
        Returns False when the shell should exit, True otherwise.
        """
        try:
            return self._run(line)
        except ShellError as e:
            print(f"{SHELL_NAME}: {e}", file=sys.stderr)
            log.debug("line %r failed: %r", line, e)
            self.last_status = e.status
            return True

    def _run(self, line):
        pipeline = parse_command(line)
        if self.debug:
            print(format_pipeline(pipeline), file=sys.stderr)

        if pipeline.is_empty:
            return True

        if pipeline.request_autocomplete:
            prefill(pipeline.text)
            return True

        result = dispatch_builtin(pipeline, self.jobs)
        if result is BuiltinResult.EXIT:
            return False
        if result is BuiltinResult.SUCCESS:
            self.last_status = 0
            return True

        self.last_status = execute_pipeline(pipeline, self.jobs)
        if self.last_status != 0:
            print(f"{SHELL_NAME}: process exited with code {self.last_status}", file=sys.stderr)
        return True

    def main_loop(self):
        """Read lines until end of input or `exit`. Returns the shell's exit code."""
        if self.use_history:
            init_readline()
            load_history()

        try:
            while True:
                try:
                    self.jobs.reap()
                    line = read_line(prompt())
                    if line is None:
                        break
                    if not self.run_line(line):
                        break
                except KeyboardInterrupt:
                    print()
                    self.last_status = SIGNALED_BASE + signal.SIGINT
                except OSError as e:
                    print(f"{SHELL_NAME}: {e}", file=sys.stderr)
                    log.debug("unexpected error in shell loop", exc_info=True)
                    self.last_status = 1
        finally:
            if self.use_history:
                save_history()
            self.jobs.terminate_all()
        return 0


def parse_args(argv=None):
    parser = argparse.ArgumentParser(prog=SHELL_NAME, description="A small interactive command shell.")
    parser.add_argument("-c", dest="command", metavar="LINE", help="run one line and exit with its status")
    parser.add_argument("--debug", action="store_true", help="log debug output and dump parsed pipelines")
    parser.add_argument("--no-history", action="store_true", help="do not load or save the history file")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.debug else LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    if args.command is not None:
        shell = Shell(debug=args.debug, use_history=False)
        shell.run_line(args.command)
        return shell.last_status

    shell = Shell(debug=args.debug, use_history=not args.no_history)
    return shell.main_loop()
