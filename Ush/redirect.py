import os
import sys
from contextlib import contextmanager

import config
from Ush import report
from Ush.command import InMode, OutMode
from Ush.errors import RedirectionError

STDIN, STDOUT, STDERR = report.STDIN_FILENO, report.STDOUT_FILENO, report.STDERR_FILENO

_TRUNC = os.O_WRONLY | os.O_CREAT | os.O_TRUNC
_APPEND = os.O_WRONLY | os.O_CREAT | os.O_APPEND

# mode -> (open flags, also redirect stderr)
OUTPUT_FLAGS = {
    OutMode.TRUNC: (_TRUNC, False),
    OutMode.APPEND: (_APPEND, False),
    OutMode.TRUNC_ERR: (_TRUNC, True),
    OutMode.APPEND_ERR: (_APPEND, True),
}


def apply_wiring(stage, cmd, close=True):
    """
    Bind the stage's pipe ends to stdin/stdout (and stderr for |&).
    With close=True (in a child) the original descriptors and the unused
    ends are closed; the shell itself passes close=False.
    """
    if stage.input is not None and stage.input != STDIN:
        os.dup2(stage.input, STDIN)
    if stage.output != STDOUT:
        os.dup2(stage.output, STDOUT)
    if cmd.out_mode is OutMode.PIPE_ERR:
        os.dup2(stage.output, STDERR)

    if not close:
        return
    for fd in set(stage.unused) | {stage.input, stage.output}:
        if fd is not None and fd not in (STDIN, STDOUT, STDERR):
            try:
                os.close(fd)
            except OSError:
                pass


def apply_redirection(cmd):
    """
    Apply < and > style redirection on top of the pipe wiring.
    An unreadable input file raises RedirectionError; an output file that
    cannot be opened is ignored and the current stdout is kept.
    """
    if cmd.in_mode is InMode.FILE:
        try:
            fd = os.open(cmd.infile, os.O_RDONLY)
        except OSError as e:
            raise RedirectionError(cmd.infile, e.strerror) from e
        os.dup2(fd, STDIN)
        os.close(fd)

    if cmd.out_mode in OUTPUT_FLAGS:
        flags, with_stderr = OUTPUT_FLAGS[cmd.out_mode]
        try:
            fd = os.open(cmd.outfile, flags, config.FILE_MODE)
        except OSError as e:
            report.debug(f"ignoring output redirect {cmd.outfile}: {e.strerror}")
            return
        os.dup2(fd, STDOUT)
        if with_stderr:
            os.dup2(fd, STDERR)
        os.close(fd)


@contextmanager
def saved_streams():
    """Save stdin/stdout/stderr of the shell and put them back afterwards."""
    sys.stdout.flush()
    sys.stderr.flush()
    saved = {fd: os.dup(fd) for fd in (STDIN, STDOUT, STDERR)}
    try:
        yield
    finally:
        sys.stdout.flush()
        sys.stderr.flush()
        for fd, copy in saved.items():
            os.dup2(copy, fd)
            os.close(copy)
