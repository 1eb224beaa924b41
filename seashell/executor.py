import errno
import logging
import os
import subprocess

from seashell.config import STATUS_LAUNCHED
from seashell.errors import ExecFailed, ForkFailed, RedirectFailed
from seashell.job_control import exit_status
from seashell.parser import ReadFrom
from seashell.resolver import resolve_command

log = logging.getLogger(__name__)


def open_redirect(redirect):
    """Open a redirect target and return the raw descriptor."""
    path = os.path.expanduser(redirect.path)
    if isinstance(redirect, ReadFrom):
        flags = os.O_RDONLY
    elif redirect.append:
        flags = os.O_WRONLY | os.O_CREAT | os.O_APPEND
    else:
        flags = os.O_WRONLY | os.O_CREAT | os.O_TRUNC
    try:
        return os.open(path, flags, 0o644)
    except OSError as e:
        raise RedirectFailed(redirect.path, e.strerror) from e


def run_external(stage, path, stdin=None, stdout=None, background=False):
    """
    Start one stage as a child process.
    Returns: Popen object
    """
    try:
        return subprocess.Popen(
            stage.argv,
            executable=path,
            stdin=stdin,
            stdout=stdout,
            close_fds=True,
            # background jobs must not get the terminal's Ctrl+C
            start_new_session=background,
        )
    except OSError as e:
        if e.errno in (errno.EAGAIN, errno.ENOMEM):
            raise ForkFailed(f"cannot start process ({e.strerror})", stage.name) from e
        raise ExecFailed(f"cannot execute ({e.strerror or e})", stage.name) from e


def _kill_all(procs):
    for p in procs:
        if p.poll() is None:
            p.kill()
        p.wait()


def _wait_all(procs):
    for p in procs:
        while True:
            try:
                p.wait()
                break
            except KeyboardInterrupt:
                # the children got the SIGINT too; keep waiting for them
                log.debug("interrupted while waiting for %d", p.pid)


def launch_pipeline(pipeline):
    """
    Start every stage of `pipeline`, wired stage to stage with pipes.

    Nothing is started unless every command resolves and every redirect
    opens. If a later stage fails to start, the stages already running are
    killed before the error is raised.
    Returns: list of Popen objects in stage order
    """
    stages = pipeline.stages
    last = len(stages) - 1
    paths = [resolve_command(stage.name) for stage in stages]

    owned = []
    procs = []
    try:
        def open_all(redirects):
            fds = []
            for redirect in redirects:
                fd = open_redirect(redirect) if redirect else None
                if fd is not None:
                    owned.append(fd)
                fds.append(fd)
            return fds

        # inputs first: a missing input must not leave an output truncated
        in_fds = open_all([stage.stdin for stage in stages])
        out_fds = open_all([stage.stdout for stage in stages])

        pipes = []
        for _ in range(last):
            try:
                r, w = os.pipe()
            except OSError as e:
                raise ForkFailed(f"cannot create pipe ({e.strerror})") from e
            owned.extend((r, w))
            pipes.append((r, w))

        for idx, (stage, path) in enumerate(zip(stages, paths)):
            if in_fds[idx] is not None:
                stdin = in_fds[idx]
            elif idx > 0:
                stdin = pipes[idx - 1][0]
            elif pipeline.background:
                stdin = subprocess.DEVNULL
            else:
                stdin = None

            if out_fds[idx] is not None:
                stdout = out_fds[idx]
            elif idx < last:
                stdout = pipes[idx][1]
            else:
                stdout = None

            p = run_external(stage, path, stdin, stdout, pipeline.background)
            log.debug("started %s as pid %d", stage.name, p.pid)
            procs.append(p)
    except BaseException:
        _kill_all(procs)
        raise
    finally:
        # children hold their own copies; the parent must drop every end so
        # readers see EOF once their writer exits
        for fd in owned:
            os.close(fd)

    return procs


def execute_pipeline(pipeline, jobs=None):
    """
    Execute a parsed pipeline.
    Returns: exit status of the last stage, or STATUS_LAUNCHED for a
    background pipeline (recorded in `jobs` for later reaping)
    """
    if pipeline.is_empty:
        return 0

    procs = launch_pipeline(pipeline)

    if pipeline.background:
        if jobs is not None:
            jobs.add(procs, pipeline.text)
        return STATUS_LAUNCHED

    _wait_all(procs)
    status = exit_status(procs[-1].returncode)
    log.debug("pipeline %r finished with status %d", pipeline.text, status)
    return status
