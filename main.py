from Ush.context import ShellContext
from Ush.shell import main_loop, source_rc
from Ush.signals import init_signal_handlers


def main():
    init_signal_handlers()
    ctx = ShellContext()
    source_rc(ctx)
    main_loop(ctx)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
