import os

import pytest

from Ush.command import Cmd, InMode, OutMode
from Ush.errors import RedirectionError
from Ush.redirect import apply_redirection, saved_streams


def write_with(cmd, text, fd=1):
    with saved_streams():
        apply_redirection(cmd)
        os.write(fd, text.encode())


def test_truncate_keeps_only_last_run(tmp_path):
    target = tmp_path / "out"
    cmd = Cmd(["x"], out_mode=OutMode.TRUNC, outfile=str(target))
    write_with(cmd, "first\n")
    write_with(cmd, "second\n")
    assert target.read_text() == "second\n"


def test_append_concatenates(tmp_path):
    target = tmp_path / "out"
    cmd = Cmd(["x"], out_mode=OutMode.APPEND, outfile=str(target))
    write_with(cmd, "first\n")
    write_with(cmd, "second\n")
    assert target.read_text() == "first\nsecond\n"


@pytest.mark.parametrize("mode", [OutMode.TRUNC_ERR, OutMode.APPEND_ERR])
def test_both_streams(tmp_path, mode):
    target = tmp_path / "out"
    cmd = Cmd(["x"], out_mode=mode, outfile=str(target))
    with saved_streams():
        apply_redirection(cmd)
        os.write(1, b"out\n")
        os.write(2, b"err\n")
    assert target.read_text() == "out\nerr\n"


def test_new_file_permissions(tmp_path):
    target = tmp_path / "out"
    mask = os.umask(0)
    os.umask(mask)
    write_with(Cmd(["x"], out_mode=OutMode.TRUNC, outfile=str(target)), "")
    assert target.stat().st_mode & 0o777 == 0o660 & ~mask


def test_input_file(tmp_path):
    source = tmp_path / "in"
    source.write_text("hello\n")
    cmd = Cmd(["x"], in_mode=InMode.FILE, infile=str(source))
    with saved_streams():
        apply_redirection(cmd)
        data = os.read(0, 100)
    assert data == b"hello\n"


def test_missing_input_is_an_error(tmp_path):
    cmd = Cmd(["x"], in_mode=InMode.FILE, infile=str(tmp_path / "missing"))
    before = os.fstat(0)
    with pytest.raises(RedirectionError, match="No such file or directory"):
        with saved_streams():
            apply_redirection(cmd)
    assert os.fstat(0).st_ino == before.st_ino


def test_unopenable_output_is_ignored(tmp_path):
    cmd = Cmd(["x"], out_mode=OutMode.TRUNC, outfile=str(tmp_path / "no" / "such" / "dir"))
    before = os.fstat(1)
    with saved_streams():
        apply_redirection(cmd)
        assert os.fstat(1).st_ino == before.st_ino
    assert not (tmp_path / "no").exists()
