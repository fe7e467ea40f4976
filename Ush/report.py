import os
import sys

import config

STDIN_FILENO = 0
STDOUT_FILENO = 1
STDERR_FILENO = 2


def write_fd(fd, text):
    """Write text straight to a descriptor, bypassing Python's buffers."""
    data = text.encode()
    while data:
        n = os.write(fd, data)
        data = data[n:]


def out(text):
    write_fd(STDOUT_FILENO, text)


def err(text):
    write_fd(STDERR_FILENO, text)


def error(msg):
    """Shell-side diagnostic."""
    print(f"{config.SHELL_NAME}: {msg}", file=sys.stderr, flush=True)


def debug(msg):
    if config.DEBUG:
        err(f"{config.SHELL_NAME}: debug: [{os.getpid()}] {msg}\n")
