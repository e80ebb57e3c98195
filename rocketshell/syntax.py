"""Syntax checks on ``;`` and ``|`` in a token list."""

from __future__ import annotations

from collections.abc import Sequence


class ShellSyntaxError(ValueError):
    """Raised for a misplaced ``;`` or ``|``."""

    def __init__(self, token: str) -> None:
        self.token = token
        super().__init__(f"syntax error near unexpected token `{token}'")


def count_pipes(args: Sequence[str]) -> int:
    """Number of arguments starting with ``|``."""
    return sum(1 for arg in args if arg.startswith("|"))


def count_semicolons(args: Sequence[str]) -> int:
    """Number of arguments that are exactly ``;``."""
    return sum(1 for arg in args if arg == ";")


def count_commands(args: Sequence[str]) -> int:
    """Number of simple commands; a trailing ``;`` does not start one."""
    total = 1
    for index, arg in enumerate(args):
        if arg.startswith("|"):
            total += 1
        elif arg.startswith(";") and index + 1 < len(args):
            total += 1
    return total


def check_semicolons(args: Sequence[str]) -> int:
    """Raise ShellSyntaxError on a misplaced ``;``; return the ``;`` count."""
    semicolons = count_semicolons(args)
    if semicolons == 1 and args[0] == ";":
        raise ShellSyntaxError(";")
    if semicolons > 1 and args[0].startswith(";") and not args[1].startswith(";"):
        raise ShellSyntaxError(";")
    for current, following in zip(args, list(args[1:]) + [None]):
        if not current.startswith(";"):
            continue
        if following is None:
            break
        if following.startswith(";"):
            raise ShellSyntaxError(";;")
    return semicolons


def check_pipes(args: Sequence[str]) -> int:
    """Raise ShellSyntaxError on a misplaced ``|``; return the ``|`` count."""
    pipes = count_pipes(args)
    if pipes == 1 and args[0] == "|":
        raise ShellSyntaxError("|")
    if pipes > 1 and args[0].startswith("|") and not args[1].startswith("|"):
        raise ShellSyntaxError("|")
    for current, following in zip(args, list(args[1:]) + [None]):
        if not current.startswith("|"):
            continue
        if following is None or following.startswith("|"):
            raise ShellSyntaxError("|")
    return pipes


def validate(args: Sequence[str]) -> int:
    """Check both separators and return the number of commands."""
    check_semicolons(args)
    check_pipes(args)
    return count_commands(args)