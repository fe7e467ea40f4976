import os
import signal

import psutil

from Ush import report
from Ush.errors import LaunchError


def decode_status(status):
    """
    Turn a raw wait status into an exit code.
    Death by signal N gives -N.
    """
    if os.WIFSIGNALED(status):
        return -os.WTERMSIG(status)
    if os.WIFEXITED(status):
        return os.WEXITSTATUS(status)
    return status


class Child:
    """Handle on a process forked by the shell."""

    def __init__(self, pid, name):
        self.pid = pid
        self.name = name
        self.code = None

    @property
    def done(self):
        return self.code is not None

    @property
    def failed(self):
        return self.done and self.code != 0

    def record(self, status):
        self.code = decode_status(status)
        return self.code

    def wait(self):
        if not self.done:
            _, status = os.waitpid(self.pid, 0)
            self.record(status)
        return self.code

    def poll(self):
        """Reap without blocking. Returns the exit code or None."""
        if not self.done:
            pid, status = os.waitpid(self.pid, os.WNOHANG)
            if pid != 0:
                self.record(status)
        return self.code

    def terminate(self):
        """Best-effort SIGTERM; a process that is already gone is fine."""
        if self.done:
            return False
        try:
            psutil.Process(self.pid).send_signal(signal.SIGTERM)
            return True
        except (psutil.NoSuchProcess, psutil.AccessDenied):
            return False

    def __repr__(self):
        return f"Child(pid={self.pid}, name={self.name!r}, code={self.code})"


def spawn(body, name):
    """
    Fork and run body() in the child.
    body returns the child's exit status; the child never returns here.
    """
    try:
        pid = os.fork()
    except OSError as e:
        raise LaunchError(f"{name}: cannot fork: {e.strerror}.") from e

    if pid == 0:
        status = 1
        try:
            status = body()
        except SystemExit as e:
            status = e.code if isinstance(e.code, int) else 0
        except BaseException as e:
            report.err(f"{name}: {e}\n")
            status = 1
        finally:
            os._exit((status or 0) & 0xFF)

    return Child(pid, name)
