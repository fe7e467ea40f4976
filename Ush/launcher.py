"""
Decides how each command runs:

    built-in, last in its pipeline  -> in the shell process
    built-in with a successor       -> in a forked child
    anything else                   -> forked child, then exec
"""
import os

import config
from Ush import report
from Ush.builtin import lookup
from Ush.errors import RedirectionError
from Ush.process import spawn
from Ush.redirect import apply_redirection, apply_wiring, saved_streams
from Ush.signals import reset_child_signals
from Ush.wiring import STANDALONE


def run_builtin_here(handler, cmd, ctx, stage):
    failure = None
    with saved_streams():
        apply_wiring(stage, cmd, close=False)
        try:
            apply_redirection(cmd)
            handler(cmd, ctx)
        except RedirectionError as e:
            failure = str(e)
        except OSError as e:
            failure = f"{cmd.name}: {e.strerror or e}."
        except ValueError as e:
            failure = f"{cmd.name}: {e}."
    # reported once stderr is the shell's own again
    if failure is not None:
        report.error(failure)
        ctx.last_status = 1


def _builtin_child(handler, cmd, ctx, stage):
    reset_child_signals()
    apply_wiring(stage, cmd)
    try:
        apply_redirection(cmd)
    except RedirectionError:
        return 1

    mark = len(ctx.children)
    handler(cmd, ctx)
    # nice may have started a command of its own
    for child in ctx.children[mark:]:
        child.wait()
    return 0


def _exec_child(cmd, stage):
    reset_child_signals()
    apply_wiring(stage, cmd)
    try:
        apply_redirection(cmd)
    except RedirectionError:
        return 1

    try:
        os.execvp(cmd.name, cmd.args)
    except PermissionError:
        report.err(f"{cmd.name}: permission denied\n")
        return config.EXIT_NOEXEC
    except (FileNotFoundError, NotADirectoryError):
        report.err(f"{cmd.name}: command not found\n")
        return config.EXIT_NOTFOUND
    except OSError as e:
        report.err(f"{cmd.name}: {e.strerror}\n")
        return config.EXIT_NOEXEC


def launch(cmd, ctx, stage=STANDALONE):
    """
    Start one command with the given pipe wiring.
    Returns: the Child, or None when a built-in ran in the shell
    """
    if cmd.name == config.END_COMMAND and not ctx.sourcing:
        raise SystemExit(0)

    handler = lookup(cmd.name)
    if handler is not None and cmd.is_last:
        report.debug(f"{cmd.name}: built-in in shell")
        run_builtin_here(handler, cmd, ctx, stage)
        return None

    if handler is not None:
        child = spawn(lambda: _builtin_child(handler, cmd, ctx, stage), cmd.name)
    else:
        child = spawn(lambda: _exec_child(cmd, stage), cmd.name)

    report.debug(f"{cmd.name}: started pid {child.pid}")
    ctx.children.append(child)
    return child
