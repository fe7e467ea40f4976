class UshError(Exception):
    """Base class for errors raised by the shell."""


class ParseError(UshError):
    pass


class RedirectionError(UshError):
    """An input redirection target could not be opened."""

    def __init__(self, path, reason):
        super().__init__(f"{path}: {reason}.")
        self.path = path
        self.reason = reason


class ChannelError(UshError):
    """A pipe could not be allocated while building a pipeline."""


class LaunchError(UshError):
    """A process could not be created."""
