import errno
import os

import psutil
import pytest

from Ush.errors import ChannelError
from Ush.wiring import READ, ChannelSlots


def test_single_command_uses_shell_streams():
    slots = ChannelSlots()
    stage = slots.advance(has_successor=False)
    assert (stage.input, stage.output, stage.unused) == (0, 1, ())
    assert slots.open_endpoints() == []
    slots.release()
    slots.close_all()


def test_stages_are_chained():
    slots = ChannelSlots()

    a = slots.advance(True)
    assert a.input == 0
    a_read = slots.current[READ]
    assert a_read in a.unused
    os.write(a.output, b"x")
    slots.release()

    b = slots.advance(True)
    assert b.input == a_read
    assert os.read(b.input, 1) == b"x"
    b_read = slots.current[READ]
    os.write(b.output, b"y")
    slots.release()

    c = slots.advance(False)
    assert c.input == b_read
    assert os.read(c.input, 1) == b"y"
    assert c.output == 1
    assert c.unused == ()
    slots.release()

    assert slots.open_endpoints() == []
    slots.close_all()


def test_never_more_than_two_pipes_open():
    slots = ChannelSlots()
    n = 7
    for i in range(n):
        slots.advance(i < n - 1)
        assert len(slots.open_endpoints()) <= 4
        slots.release()
        assert len(slots.open_endpoints()) <= 1
    assert slots.open_endpoints() == []


def test_no_descriptor_leak():
    me = psutil.Process()
    before = me.num_fds()
    slots = ChannelSlots()
    for i in range(5):
        slots.advance(i < 4)
        slots.release()
    slots.close_all()
    assert me.num_fds() == before


def test_close_all_after_aborted_pipeline():
    me = psutil.Process()
    before = me.num_fds()
    slots = ChannelSlots()
    slots.advance(True)
    slots.advance(True)
    assert me.num_fds() > before
    slots.close_all()
    assert me.num_fds() == before


def test_pipe_failure(monkeypatch):
    def no_pipe():
        raise OSError(errno.EMFILE, os.strerror(errno.EMFILE))

    monkeypatch.setattr(os, "pipe", no_pipe)
    slots = ChannelSlots()
    with pytest.raises(ChannelError, match="Cannot create pipe"):
        slots.advance(True)
    slots.close_all()
