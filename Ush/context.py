from Ush import report


class ShellContext:
    """
    Mutable state of one shell, passed explicitly to the executor,
    the launcher and the built-ins.
    """

    def __init__(self, sourcing=False):
        # True while the startup script is being read
        self.sourcing = sourcing
        # Processes of the pipeline being executed
        self.children = []
        # Processes of & pipelines, reaped before each new line
        self.background = []
        self.last_status = 0

    def adopt(self, pid, status):
        """A wait-any returned a pid that is not part of the current pipeline."""
        for child in self.background:
            if child.pid == pid:
                child.record(status)
                return True
        return False

    def reap_background(self):
        for child in list(self.background):
            try:
                code = child.poll()
            except ChildProcessError:
                code = child.code = 0
            if code is None:
                continue
            self.background.remove(child)
            print(f"[{child.pid}] done {child.name}", flush=True)
            report.debug(f"background {child.pid} exited with {code}")
