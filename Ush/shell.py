import os
import socket
import sys

import config
from Ush import report
from Ush.errors import ParseError
from Ush.executor import execute_line
from Ush.parser import parse_line


def prompt():
    """Generate shell prompt"""
    host = socket.gethostname().split(".")[0]
    return f"{host}% "


def read_line():
    """
    Read one line of input. Raises EOFError at end of input.
    When stdin is not a terminal the line is read unbuffered, so that
    commands started by the shell see the rest of the input untouched.
    """
    if sys.stdin.isatty():
        return input(prompt())

    buf = bytearray()
    while True:
        ch = os.read(report.STDIN_FILENO, 1)
        if not ch:
            if not buf:
                raise EOFError
            break
        if ch == b"\n":
            break
        buf += ch
    return buf.decode(errors="replace")


def run_line(line, ctx):
    """Parse and execute one line. Returns the parsed line, or None."""
    try:
        pipe = parse_line(line)
    except ParseError as e:
        report.error(str(e))
        ctx.last_status = 1
        return None

    if pipe is not None:
        ctx.last_status = execute_line(pipe, ctx)
    return pipe


def is_end(pipe):
    return pipe is not None and pipe.head.name == config.END_COMMAND


def source_rc(ctx, path=config.RC_FILE):
    """
    Execute the startup script, if readable, up to the 'end' command or
    end of file.
    """
    try:
        rc = open(path, "r")
    except OSError:
        return False

    ctx.sourcing = True
    try:
        with rc:
            for line in rc:
                try:
                    pipe = parse_line(line)
                except ParseError as e:
                    report.error(str(e))
                    continue
                if is_end(pipe):
                    break
                if pipe is not None:
                    ctx.last_status = execute_line(pipe, ctx)
    finally:
        ctx.sourcing = False
    return True


def main_loop(ctx):
    """Main shell loop; returns at end of input."""
    while True:
        try:
            line = read_line()
        except EOFError:
            if sys.stdin.isatty():
                print()
            break
        except KeyboardInterrupt:
            print()
            continue

        ctx.reap_background()
        if not line.strip():
            continue
        run_line(line, ctx)
