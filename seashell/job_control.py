import logging
import signal
import subprocess

import psutil

from seashell.config import SIGNALED_BASE

log = logging.getLogger(__name__)

TERMINATE_TIMEOUT = 2.0


def exit_status(returncode):
    """Map a Popen returncode to a shell status; signals become 128 + N."""
    if returncode < 0:
        return SIGNALED_BASE - returncode
    return returncode


class Job:
    def __init__(self, procs, text):
        self.procs = list(procs)
        self.text = text

    @property
    def pid(self):
        return self.procs[-1].pid

    def poll(self):
        """Reap whatever has finished. Returns True once every stage is gone."""
        done = [p.poll() is not None for p in self.procs]
        return all(done)

    @property
    def status(self):
        return exit_status(self.procs[-1].returncode)


class JobTable:
    """Background pipelines launched by the shell, keyed by last-stage pid."""

    def __init__(self):
        self.jobs = {}

    def __len__(self):
        return len(self.jobs)

    def add(self, procs, text):
        job = Job(procs, text)
        self.jobs[job.pid] = job
        print(f"[{job.pid}] started in background: {text}")
        log.debug("background job %d: %s", job.pid, [p.pid for p in job.procs])
        return job

    def reap(self):
        """Collect finished jobs without blocking. Returns the finished Jobs."""
        finished = []
        for pid, job in list(self.jobs.items()):
            if job.poll():
                del self.jobs[pid]
                finished.append(job)
                print(f"[{pid}] done ({job.status}): {job.text}")
                log.debug("reaped job %d with status %d", pid, job.status)
        return finished

    def show(self):
        """Print the running background jobs"""
        if not self.jobs:
            print("No background jobs.")
            return

        print(f"{'PID':<8} {'Command'}")
        print("-" * 40)
        for pid, job in self.jobs.items():
            try:
                status = psutil.Process(pid).status()
            except psutil.NoSuchProcess:
                status = "terminated"
            except psutil.AccessDenied:
                status = "unknown"
            print(f"{pid:<8} {job.text}  [{status}]")

    def terminate_all(self):
        """Send SIGTERM to every stage of every job still running, then reap them."""
        for pid, job in list(self.jobs.items()):
            for p in job.procs:
                if p.poll() is None:
                    try:
                        p.send_signal(signal.SIGTERM)
                    except ProcessLookupError:
                        pass
            for p in job.procs:
                try:
                    p.wait(timeout=TERMINATE_TIMEOUT)
                except subprocess.TimeoutExpired:
                    p.kill()
                    p.wait()
            print(f"Terminated background job [{pid}]")
            del self.jobs[pid]
