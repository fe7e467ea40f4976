import os
import signal

from Ush import report
from Ush.command import PipeMode
from Ush.errors import ChannelError, LaunchError
from Ush.launcher import launch
from Ush.wiring import ChannelSlots


def describe(code):
    if code < 0:
        return f"killed by signal {-code}"
    return f"exit {code}"


def wait_all(children, ctx):
    """
    Wait for every process of a pipeline, in whatever order they end.
    The first failure is reported and the processes still running are
    sent SIGTERM; they are waited on all the same.
    Returns: exit code of the last process
    """
    pending = {c.pid: c for c in children}
    aborted = False

    while pending:
        try:
            pid, status = os.waitpid(-1, 0)
        except ChildProcessError:
            break

        child = pending.pop(pid, None)
        if child is None:
            ctx.adopt(pid, status)
            continue

        code = child.record(status)
        # a closed pipe is how pipelines normally wind down
        if code in (0, -signal.SIGPIPE) or aborted:
            continue

        aborted = True
        report.error(f"{child.name}: command failed ({describe(code)}), aborting pipeline")
        for other in pending.values():
            other.terminate()

    if not children:
        return 0
    return children[-1].code or 0


def execute_pipeline(pipe, ctx):
    """
    Launch every command of one pipeline left to right, then wait for all.
    Returns: exit status of the pipeline
    """
    ctx.children = []
    ctx.last_status = 0
    slots = ChannelSlots()

    try:
        for cmd in pipe:
            stage = slots.advance(cmd.next is not None)
            try:
                launch(cmd, ctx, stage)
            finally:
                slots.release()
    except (ChannelError, LaunchError) as e:
        report.error(str(e))
        ctx.last_status = 1
    finally:
        slots.close_all()
        children, ctx.children = ctx.children, []

    if pipe.mode is PipeMode.ASYNC:
        ctx.background.extend(children)
        if children:
            print(f"[{children[-1].pid}]", flush=True)
        return 0

    return wait_all(children, ctx) or ctx.last_status


def execute_line(pipe, ctx):
    """Run the pipelines of a line one after another, whatever their outcome."""
    status = 0
    while pipe is not None:
        status = execute_pipeline(pipe, ctx)
        pipe = pipe.next
    return status
