from enum import Enum
from typing import List, Optional


class InMode(Enum):
    NONE = ""
    FILE = "<"


class OutMode(Enum):
    NONE = ""
    TRUNC = ">"
    APPEND = ">>"
    TRUNC_ERR = ">&"
    APPEND_ERR = ">>&"
    PIPE = "|"
    PIPE_ERR = "|&"

    @property
    def is_pipe(self) -> bool:
        return self in (OutMode.PIPE, OutMode.PIPE_ERR)

    @property
    def is_file(self) -> bool:
        return self not in (OutMode.NONE, OutMode.PIPE, OutMode.PIPE_ERR)


class PipeMode(Enum):
    SEQ = ";"
    ASYNC = "&"


class Cmd:
    """
    One simple command of a pipeline.
    args[0] is the program or built-in name.
    """

    def __init__(
        self,
        args: List[str],
        in_mode: InMode = InMode.NONE,
        infile: Optional[str] = None,
        out_mode: OutMode = OutMode.NONE,
        outfile: Optional[str] = None,
    ) -> None:
        self.args = args
        self.in_mode = in_mode
        self.infile = infile
        self.out_mode = out_mode
        self.outfile = outfile
        self.next: Optional["Cmd"] = None

    @property
    def name(self) -> str:
        return self.args[0]

    @property
    def is_last(self) -> bool:
        return self.next is None

    def __repr__(self) -> str:
        parts = list(self.args)
        if self.in_mode is InMode.FILE:
            parts.append(f"< {self.infile}")
        if self.out_mode.is_file:
            parts.append(f"{self.out_mode.value} {self.outfile}")
        elif self.out_mode.is_pipe:
            parts.append(self.out_mode.value)
        return f"Cmd({' '.join(parts)})"


class Pipe:
    """
    A pipeline: a chain of commands starting at head, plus a link to the
    next pipeline of the same line.
    """

    def __init__(self, head: Cmd, mode: PipeMode = PipeMode.SEQ) -> None:
        self.head = head
        self.mode = mode
        self.next: Optional["Pipe"] = None

    def __iter__(self):
        c = self.head
        while c is not None:
            yield c
            c = c.next

    def __repr__(self) -> str:
        return f"Pipe({list(self)}, {self.mode.value})"


def single(args: List[str]) -> Pipe:
    """Build a one-command pipeline, no redirection."""
    return Pipe(Cmd(list(args)))


def chain(*pipes: Pipe) -> Optional[Pipe]:
    """Link pipelines into a line and return its first pipeline."""
    for p, q in zip(pipes, pipes[1:]):
        p.next = q
    return pipes[0] if pipes else None
