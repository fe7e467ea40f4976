import signal

# Signals the interactive shell shields itself from; children get them back.
SHIELDED = (signal.SIGINT, signal.SIGQUIT)

# Ignored by the Python runtime itself; restored for children the same way
# subprocess does with restore_signals=True.
RUNTIME_IGNORED = tuple(
    getattr(signal, name) for name in ("SIGPIPE", "SIGXFSZ") if hasattr(signal, name)
)


def init_signal_handlers():
    """Ignore Ctrl+C and Ctrl+\\ in the shell. Returns the previous dispositions."""
    previous = {}
    for sig in SHIELDED:
        previous[sig] = signal.signal(sig, signal.SIG_IGN)
    return previous


def restore_signal_handlers(previous):
    for sig, handler in previous.items():
        signal.signal(sig, handler)


def reset_child_signals():
    """Run in a freshly forked child, before anything else."""
    for sig in SHIELDED + RUNTIME_IGNORED:
        signal.signal(sig, signal.SIG_DFL)
