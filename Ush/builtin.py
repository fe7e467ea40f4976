import os
import re

import config
from Ush.command import single
from Ush.report import err, out


def builtin_cd(cmd, ctx):
    """Change directory; without argument go to $HOME."""
    if len(cmd.args) < 2:
        home = os.getenv("HOME")
        if not home:
            err("cd: No home directory.\n")
            return
        path = home
    else:
        path = cmd.args[1]

    try:
        os.chdir(path)
    except PermissionError:
        err(f"{path}: Permission denied.\n")
    except FileNotFoundError:
        err(f"{path}: No such file or directory.\n")
    except NotADirectoryError:
        err(f"{path}: Not a directory.\n")
    except OSError as e:
        err(f"{path}: {e.strerror}.\n")


def builtin_echo(cmd, ctx):
    """Words separated by single spaces, then a newline. No words, no output."""
    if len(cmd.args) > 1:
        out(" ".join(cmd.args[1:]) + "\n")


def builtin_logout(cmd, ctx):
    raise SystemExit(0)


def is_number(word):
    return re.fullmatch(r"[+-]?\d+", word) is not None


def builtin_nice(cmd, ctx):
    """
    nice [[+/-]number] [command]
    Set the scheduling priority (default 4, clamped to NICE_MIN..NICE_MAX),
    then run command, if any, at that priority.
    """
    priority = config.NICE_DEFAULT
    rest = cmd.args[1:]
    if rest and is_number(rest[0]):
        priority = max(config.NICE_MIN, min(config.NICE_MAX, int(rest[0])))
        rest = rest[1:]

    try:
        os.setpriority(os.PRIO_PROCESS, 0, priority)
    except PermissionError:
        err("nice: Permission denied.\n")

    if rest:
        # children inherit the nice value
        from Ush.launcher import launch
        launch(single(rest).head, ctx)


def builtin_pwd(cmd, ctx):
    out(os.getcwd() + "\n")


def builtin_setenv(cmd, ctx):
    """setenv [VAR [word]]: list the environment, or set VAR."""
    if len(cmd.args) < 2:
        for name, value in os.environ.items():
            out(f"{name}={value}\n")
        return
    value = cmd.args[2] if len(cmd.args) > 2 else ""
    os.environ[cmd.args[1]] = value


def builtin_unsetenv(cmd, ctx):
    if len(cmd.args) < 2:
        err("unsetenv: too few arguments.\n")
        return
    os.environ.pop(cmd.args[1], None)


def is_executable(path):
    return os.access(path, os.X_OK) and not os.path.isdir(path)


def builtin_where(cmd, ctx):
    """Report every known instance of a command: built-in and PATH entries."""
    if len(cmd.args) < 2:
        err("where: too few arguments.\n")
        return

    name = cmd.args[1]
    if lookup(name) is not None:
        out(f"{name}\n")
    for directory in os.getenv("PATH", "").split(os.pathsep):
        if not directory:
            continue
        path = os.path.join(directory, name)
        if is_executable(path):
            out(f"{path}\n")


BUILTINS = {
    "cd": builtin_cd,
    "echo": builtin_echo,
    "logout": builtin_logout,
    "nice": builtin_nice,
    "pwd": builtin_pwd,
    "setenv": builtin_setenv,
    "unsetenv": builtin_unsetenv,
    "where": builtin_where,
}


def lookup(name):
    """Handler for a built-in name, or None for an external program."""
    return BUILTINS.get(name)
