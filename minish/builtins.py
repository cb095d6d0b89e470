"""Commands the shell runs itself: echo, pwd, env, cd, export, unset and exit."""

from __future__ import annotations

import os
from collections.abc import Sequence
from typing import TextIO

from minish.environment import Environment

BUILTINS = frozenset({"cd", "echo", "pwd", "env", "export", "unset", "exit"})
# Builtins with no effect on the shell's own state; they may run in a child.
CHILD_BUILTINS = frozenset({"echo", "pwd", "env"})

INT_MIN = -(2**31)
INT_MAX = 2**31 - 1


class ShellExit(Exception):
    """Raised by ``exit`` to end the shell with ``status``."""

    def __init__(self, status: int) -> None:
        super().__init__(status)
        self.status = status


def is_builtin(name: str) -> bool:
    """True if ``name`` is one of the shell's own commands."""
    return name in BUILTINS


def needs_child_process(name: str) -> bool:
    """True for builtins that are run like external commands."""
    return name in CHILD_BUILTINS


def _is_ascii_digit(c: str) -> bool:
    return "0" <= c <= "9"


def is_numeric(text: str | None) -> bool:
    """True for an optional sign followed only by ASCII digits."""
    if not text:
        return False
    body = text[1:] if text[0] in "+-" else text
    return all(_is_ascii_digit(c) for c in body)


def valid_number(text: str) -> int:
    """Parse a signed decimal that fits in a 32-bit int.

    Raises ``ValueError`` for anything else.
    """
    body = text[1:] if text[:1] in ("+", "-") else text
    if not body or not all(_is_ascii_digit(c) for c in body):
        raise ValueError(f"not a number: {text!r}")
    value = int(body)
    if text.startswith("-"):
        value = -value
    if not INT_MIN <= value <= INT_MAX:
        raise ValueError(f"number out of range: {text!r}")
    return value


def _is_name_start(c: str) -> bool:
    return c == "_" or (c.isascii() and c.isalpha())


def _is_name_char(c: str) -> bool:
    return c == "_" or (c.isascii() and c.isalnum())


def is_valid_identifier(name: str | None, err: TextIO) -> bool:
    """Check the part of ``name`` before ``=``; report a bad one on ``err``."""
    if not name:
        return False
    identifier = name.partition("=")[0]
    if (
        not identifier
        or not _is_name_start(identifier[0])
        or not all(_is_name_char(c) for c in identifier[1:])
    ):
        err.write(f"minishell: export: `{name}': not a valid identifier\n")
        return False
    return True


def builtin_echo(args: Sequence[str], out: TextIO) -> int:
    """Print the arguments separated by spaces; a leading ``-n`` drops the newline."""
    words = list(args[1:])
    newline = True
    if words and words[0] == "-n":
        newline = False
        words = words[1:]
    out.write(" ".join(words))
    if newline:
        out.write("\n")
    out.flush()
    return 0


def builtin_pwd(args: Sequence[str], out: TextIO) -> int:
    """Print the working directory; options are refused."""
    if len(args) > 1 and args[1].startswith("-"):
        out.write(f"minishell: pwd: {args[1]}: invalid option\n")
        return 1
    out.write(f"{os.getcwd()}\n")
    return 0


def builtin_env(env: Environment, out: TextIO) -> int:
    """Print every variable that has a value, in definition order."""
    for entry in env.to_envp():
        out.write(f"{entry}\n")
    return 0


def _print_export(env: Environment, out: TextIO) -> None:
    for entry in env.sorted_entries():
        name, sep, value = entry.partition("=")
        if sep:
            out.write(f'declare -x {name}="{value}"\n')
        else:
            out.write(f"declare -x {name}\n")


def builtin_export(env: Environment, args: Sequence[str], out: TextIO, err: TextIO) -> int:
    """List exported variables, or define the one named by the first argument."""
    if len(args) < 2:
        _print_export(env, out)
        return 0
    assignment = args[1]
    if not is_valid_identifier(assignment, err):
        return 1
    if "=" in assignment:
        env.add_or_replace(assignment)
    else:
        env.add_export_only(assignment)
    return 0


def builtin_unset(env: Environment, args: Sequence[str]) -> int:
    """Remove the variable named by the first argument, if any."""
    if len(args) > 1:
        env.remove(args[1])
    return 0


def builtin_exit(args: Sequence[str], err: TextIO) -> int:
    """Raise :class:`ShellExit`, or return 1 when given too many arguments."""
    if len(args) < 2:
        raise ShellExit(0)
    arg = args[1]
    if not is_numeric(arg):
        err.write(f"exit: {arg}: numeric argument required\n")
        raise ShellExit(2)
    if len(args) > 2:
        err.write("exit: too many arguments\n")
        return 1
    try:
        value = valid_number(arg)
    except ValueError:
        err.write(f"exit: {arg}: numeric argument required\n")
        raise ShellExit(2) from None
    raise ShellExit(value % 256)


class DirectoryChanger:
    """Runs ``cd`` and remembers the previous directory for ``cd -``."""

    def __init__(self, env: Environment) -> None:
        self.env = env
        self.oldpwd: str | None = None

    def cd(self, path: str | None, out: TextIO, err: TextIO) -> int:
        """Change directory to ``path``, ``$HOME`` when empty, or back with ``-``."""
        if not path:
            target = self.env.get("HOME")
            if not target:
                out.write("HOME not set\n")
                return 1
        elif path == "-":
            if self.oldpwd is None:
                out.write("oldpwd not set\n")
                return 1
            target = self.oldpwd
            out.write(f"{target}\n")
        else:
            target = path
        try:
            previous: str | None = os.getcwd()
        except OSError:
            previous = None
        try:
            os.chdir(target)
        except OSError as exc:
            err.write(f"cd: {exc.strerror}\n")
            return 1
        self.oldpwd = previous
        return 0


def run_builtin(
    args: Sequence[str],
    env: Environment,
    out: TextIO,
    err: TextIO,
    changer: DirectoryChanger,
) -> int:
    """Run the builtin named by ``args[0]`` and return its status."""
    if not args:
        return 0
    name = args[0]
    if name == "pwd":
        return builtin_pwd(args, out)
    if name == "env":
        return builtin_env(env, out)
    if name == "echo":
        return builtin_echo(args, out)
    if name == "cd":
        return changer.cd(args[1] if len(args) > 1 else None, out, err)
    if name == "export":
        return builtin_export(env, args, out, err)
    if name == "unset":
        return builtin_unset(env, args)
    if name == "exit":
        return builtin_exit(args, err)
    return 0