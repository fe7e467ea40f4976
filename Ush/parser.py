import shlex

from Ush.command import Cmd, InMode, OutMode, Pipe, PipeMode
from Ush.errors import ParseError

PUNCTUATION = "|&;<>"

OUTPUT_OPS = {
    ">": OutMode.TRUNC,
    ">>": OutMode.APPEND,
    ">&": OutMode.TRUNC_ERR,
    ">>&": OutMode.APPEND_ERR,
}
PIPE_OPS = {"|": OutMode.PIPE, "|&": OutMode.PIPE_ERR}
LIST_OPS = {";": PipeMode.SEQ, "&": PipeMode.ASYNC}


class Operator(str):
    """A run of unquoted punctuation, e.g. | or >>&."""


def _words(chunk):
    # shlex resolves quotes and backslashes within a run of words
    lex = shlex.shlex(chunk, posix=True)
    lex.whitespace_split = True
    lex.commenters = ""
    return list(lex)


def tokenize(line):
    """
    Split a line into words and Operator tokens.
    Punctuation inside quotes or after a backslash stays part of a word.
    """
    tokens, chunk = [], []
    quote = None
    i = 0
    try:
        while i < len(line):
            ch = line[i]
            if quote is not None:
                chunk.append(ch)
                if ch == "\\" and quote == '"' and i + 1 < len(line):
                    chunk.append(line[i + 1])
                    i += 1
                elif ch == quote:
                    quote = None
            elif ch == "\\":
                chunk.append(line[i:i + 2])
                i += 1
            elif ch in "'\"":
                quote = ch
                chunk.append(ch)
            elif ch in PUNCTUATION:
                tokens.extend(_words("".join(chunk)))
                chunk = []
                j = i
                while j < len(line) and line[j] in PUNCTUATION:
                    j += 1
                tokens.append(Operator(line[i:j]))
                i = j
                continue
            else:
                chunk.append(ch)
            i += 1
        tokens.extend(_words("".join(chunk)))
    except ValueError as e:
        raise ParseError(f"Syntax error: {e}.") from e
    return tokens


def _is_operator(tok):
    return isinstance(tok, Operator)


class _LineBuilder:
    """Accumulates commands and pipelines while walking the tokens."""

    def __init__(self):
        self.pipes = []
        self.cmds = []
        self._reset_cmd()

    def _reset_cmd(self):
        self.args = []
        self.infile = None
        self.out_mode = OutMode.NONE
        self.outfile = None

    def set_input(self, path):
        if self.cmds:
            raise ParseError("Ambiguous input redirect.")
        if self.infile is not None:
            raise ParseError("Ambiguous input redirect.")
        self.infile = path

    def set_output(self, mode, path):
        if self.outfile is not None:
            raise ParseError("Ambiguous output redirect.")
        self.out_mode = mode
        self.outfile = path

    def end_cmd(self, pipe_mode=None):
        if not self.args:
            raise ParseError("Invalid null command.")
        if pipe_mode is not None and self.outfile is not None:
            raise ParseError("Ambiguous output redirect.")

        cmd = Cmd(
            self.args,
            in_mode=InMode.FILE if self.infile is not None else InMode.NONE,
            infile=self.infile,
            out_mode=pipe_mode or self.out_mode,
            outfile=self.outfile,
        )
        if self.cmds:
            self.cmds[-1].next = cmd
        self.cmds.append(cmd)
        self._reset_cmd()

    def end_pipe(self, mode):
        if not self.cmds and not self.args and self.infile is None and self.outfile is None:
            # empty pipeline, e.g. "a ; ; b" or a trailing ";"
            if mode is PipeMode.ASYNC:
                raise ParseError("Invalid null command.")
            return
        self.end_cmd()
        pipe = Pipe(self.cmds[0], mode)
        if self.pipes:
            self.pipes[-1].next = pipe
        self.pipes.append(pipe)
        self.cmds = []


def parse_line(line):
    """
    Parse one input line.
    Returns: the first Pipe of the line, or None for an empty line
    """
    tokens = tokenize(line)
    if not tokens:
        return None

    b = _LineBuilder()
    i = 0
    while i < len(tokens):
        tok = tokens[i]
        if not _is_operator(tok):
            b.args.append(tok)
            i += 1
            continue

        if tok == "<" or tok in OUTPUT_OPS:
            if i + 1 >= len(tokens) or _is_operator(tokens[i + 1]):
                raise ParseError("Missing name for redirect.")
            if tok == "<":
                b.set_input(tokens[i + 1])
            else:
                b.set_output(OUTPUT_OPS[tok], tokens[i + 1])
            i += 2
        elif tok in PIPE_OPS:
            b.end_cmd(PIPE_OPS[tok])
            i += 1
        elif tok in LIST_OPS:
            b.end_pipe(LIST_OPS[tok])
            i += 1
        else:
            raise ParseError(f"Syntax error near '{tok}'.")

    b.end_pipe(PipeMode.SEQ)
    return b.pipes[0] if b.pipes else None
