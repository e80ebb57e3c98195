"""Commands the shell runs itself: echo, cd, pwd, env, export, unset, exit."""

from __future__ import annotations

import os
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import TextIO

from rocketshell.environment import Environment

PROMPT_MARK = "🚀"
BUILTINS = frozenset({"echo", "cd", "export", "unset", "exit", "pwd", "env"})
_INT_MAX = 2**31 - 1


@dataclass
class ShellState:
    """State shared by the commands of one shell session."""

    env: Environment = field(default_factory=Environment)
    exit_status: int = 0


class ShellExit(Exception):
    """Raised by ``exit``; *status* is the value the shell should exit with."""

    def __init__(self, status: int) -> None:
        self.status = status
        super().__init__(f"exit {status}")


def _to_int32(value: int) -> int:
    value &= 0xFFFFFFFF
    return value - 2**32 if value > _INT_MAX else value


def atoi(text: str) -> int:
    """Parse a leading integer the way the ``exit`` builtin does.

    Leading whitespace and one sign are accepted; parsing stops at the first
    non-digit. A positive value that grows past the 32-bit range yields -1.
    """
    pos = 0
    while pos < len(text) and (text[pos] == " " or "\t" <= text[pos] <= "\r"):
        pos += 1
    sign = 1
    if pos < len(text) and text[pos] in "+-":
        if text[pos] == "-":
            sign = -1
        pos += 1
    result = 0
    while pos < len(text) and "0" <= text[pos] <= "9":
        if result > _INT_MAX and sign == 1:
            return -1
        result = (result * 10 + ord(text[pos]) - ord("0")) & 0xFFFFFFFFFFFFFFFF
        pos += 1
    return _to_int32(result * sign)


def is_builtin(name: str | None) -> bool:
    """Return True if *name* is run by the shell itself."""
    return name in BUILTINS


def has_n_flag(arg: str) -> bool:
    """Return True for ``-n``, ``-nn`` and so on."""
    return len(arg) >= 2 and arg[0] == "-" and set(arg[1:]) == {"n"}


def echo(args: Sequence[str], out: TextIO) -> None:
    """Write the arguments separated by spaces; ``-n`` drops the newline."""
    skipped = 0
    while skipped < len(args) and has_n_flag(args[skipped]):
        skipped += 1
    out.write(" ".join(args[skipped:]))
    if not skipped:
        out.write("\n")


def cd(state: ShellState, args: Sequence[str], err: TextIO) -> None:
    """Change directory to the first argument, or to HOME; update PWD/OLDPWD."""
    path = args[0] if args else state.env.get("HOME")
    if path is None:
        err.write(f"{PROMPT_MARK}: cd: HOME not set\n")
        return
    try:
        os.chdir(path)
    except OSError as exc:
        err.write(f"{PROMPT_MARK}: cd: {path}: {exc.strerror}\n")
        return
    state.env.set("OLDPWD", state.env.get("PWD") or "")
    try:
        cwd = os.getcwd()
    except OSError:
        state.env.set("PWD", "")
        err.write(
            "cd: error retrieving current directory: getcwd: cannot access "
            "parent directories: No such file or directory\n"
        )
        return
    state.env.set("PWD", cwd)


def pwd(out: TextIO) -> None:
    """Write the current directory, or an empty line if it cannot be found."""
    try:
        out.write(os.getcwd() + "\n")
    except OSError:
        out.write("\n")


def print_env(state: ShellState, out: TextIO) -> None:
    """Write every entry that has a non-empty value."""
    for line in state.env.visible_lines():
        out.write(line + "\n")


def export(state: ShellState, args: Sequence[str], out: TextIO, err: TextIO) -> None:
    """With no arguments list the variables; otherwise add or update them."""
    if not args:
        for line in state.env.declare_lines():
            out.write(line + "\n")
        return
    for rejected in state.env.export(args):
        err.write(f"{PROMPT_MARK}: export: {rejected}: not a valid identifier\n")


def unset(state: ShellState, args: Sequence[str]) -> None:
    """Remove the named variables."""
    state.env.unset(args)


def exit_builtin(state: ShellState, args: Sequence[str], err: TextIO) -> None:
    """Raise ShellExit, unless given more than one argument."""
    if not args:
        raise ShellExit(state.exit_status)
    if len(args) == 1:
        state.exit_status = atoi(args[0])
        raise ShellExit(state.exit_status)
    err.write("exit\n")
    err.write(f"{PROMPT_MARK}: exit: too many arguments\n")


def run_builtin(state: ShellState, argv: Sequence[str], out: TextIO, err: TextIO) -> bool:
    """Run *argv* if it names a builtin; return whether it did."""
    if not argv or not is_builtin(argv[0]):
        return False
    name, args = argv[0], list(argv[1:])
    if name == "echo":
        echo(args, out)
    elif name == "cd":
        cd(state, args, err)
    elif name == "export":
        export(state, args, out, err)
    elif name == "unset":
        unset(state, args)
    elif name == "pwd":
        pwd(out)
    elif name == "env":
        print_env(state, out)
    elif name == "exit":
        exit_builtin(state, args, err)
    return True