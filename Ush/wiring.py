"""
Pipe plumbing for one pipeline.

Two pipe slots are used in turn, selected by a parity bit. While command i
is being launched:

    previous slot read end  -> input of command i
    current slot write end  -> output of command i

The current slot read end is kept by the shell for command i + 1; every
other endpoint is closed in the shell right after the launch, so a pipeline
of any length never has more than two pipes open in the shell.
"""
import os
from collections import namedtuple

from Ush import report
from Ush.errors import ChannelError

READ, WRITE = 0, 1

# input/output: descriptors to bind to 0 and 1
# unused: descriptors the command must close and never touch
Stage = namedtuple("Stage", ["input", "output", "unused"])

STANDALONE = Stage(report.STDIN_FILENO, report.STDOUT_FILENO, ())


class ChannelSlots:

    def __init__(self, stdin=report.STDIN_FILENO, stdout=report.STDOUT_FILENO):
        self.stdin = stdin
        self.stdout = stdout
        self.parity = 0
        self.slots = [[None, None], [None, None]]
        # The shell's own stdin feeds the first command.
        self.slots[self.parity][READ] = stdin

    @property
    def current(self):
        return self.slots[self.parity]

    @property
    def previous(self):
        return self.slots[1 - self.parity]

    def _is_std(self, fd):
        return fd == self.stdin or fd == self.stdout

    def _close(self, slot, end):
        fd = slot[end]
        slot[end] = None
        if fd is not None and not self._is_std(fd):
            os.close(fd)
            report.debug(f"shell closed fd {fd}")

    def advance(self, has_successor):
        """
        Rotate to the next command and return its Stage.
        A fresh pipe is made only when the command has a successor.
        """
        self.parity ^= 1
        self._close(self.current, READ)
        self._close(self.current, WRITE)

        if has_successor:
            try:
                r, w = os.pipe()
            except OSError as e:
                raise ChannelError(f"Cannot create pipe: {e.strerror}.") from e
            self.current[READ], self.current[WRITE] = r, w
        else:
            self.current[READ], self.current[WRITE] = None, self.stdout

        unused = tuple(
            fd for fd in (self.previous[WRITE], self.current[READ])
            if fd is not None and not self._is_std(fd)
        )
        stage = Stage(self.previous[READ], self.current[WRITE], unused)
        report.debug(f"stage in={stage.input} out={stage.output} unused={stage.unused}")
        return stage

    def release(self):
        """
        Called once the command has been launched: drop everything but the
        read end that the next command will consume.
        """
        self._close(self.previous, READ)
        self._close(self.previous, WRITE)
        self._close(self.current, WRITE)

    def close_all(self):
        for slot in self.slots:
            self._close(slot, READ)
            self._close(slot, WRITE)

    def open_endpoints(self):
        """Pipe descriptors currently held by the shell."""
        return [
            fd for slot in self.slots for fd in slot
            if fd is not None and not self._is_std(fd)
        ]
