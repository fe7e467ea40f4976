import os

import pytest

from Ush.context import ShellContext
from Ush.executor import execute_line
from Ush.parser import parse_line
from Ush.redirect import saved_streams


@pytest.fixture
def ctx():
    return ShellContext()


@pytest.fixture
def run(ctx):
    """Parse and execute a line in this process, like the shell would."""
    def _run(line):
        return execute_line(parse_line(line), ctx)
    return _run


@pytest.fixture
def captured(tmp_path):
    """
    Call fn with descriptors 1 and 2 pointed at files.
    Returns (stdout, stderr) as text.
    """
    def _captured(fn, *args):
        out_path, err_path = tmp_path / "fd1", tmp_path / "fd2"
        with saved_streams():
            for fd, path in ((1, out_path), (2, err_path)):
                f = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
                os.dup2(f, fd)
                os.close(f)
            fn(*args)
        return out_path.read_text(), err_path.read_text()
    return _captured
