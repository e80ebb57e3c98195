"""Redirection handling: ``<``, ``>`` and ``>>`` within one simple command."""

from __future__ import annotations

import os
from collections.abc import Sequence
from dataclasses import dataclass
from itertools import takewhile
from typing import BinaryIO

from rocketshell.syntax import ShellSyntaxError

REDIRECT_OPERATORS = frozenset({">>", ">", "<"})


class RedirectError(OSError):
    """Raised when a redirection file cannot be opened."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"{path} : {reason}")


@dataclass
class Redirections:
    """Files opened for a command's standard input and output."""

    stdin: BinaryIO | None = None
    stdout: BinaryIO | None = None

    def close(self) -> None:
        """Close any files that were opened."""
        for stream in (self.stdin, self.stdout):
            if stream is not None:
                stream.close()
        self.stdin = None
        self.stdout = None

    def __enter__(self) -> Redirections:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


def _command_part(args: Sequence[str]) -> list[str]:
    return list(takewhile(lambda arg: not arg.startswith(";"), args))


def count_redirections(args: Sequence[str]) -> int:
    """Number of redirection operators before the first ``;``."""
    return sum(1 for arg in _command_part(args) if arg in REDIRECT_OPERATORS)


def redirect_targets(args: Sequence[str]) -> list[str]:
    """File names named by redirections; raise ShellSyntaxError if one is missing."""
    targets = []
    for index, arg in enumerate(_command_part(args)):
        if arg not in REDIRECT_OPERATORS:
            continue
        if index + 1 >= len(args):
            raise ShellSyntaxError("newline")
        targets.append(args[index + 1])
    return targets


def strip_redirections(args: Sequence[str]) -> list[str]:
    """The command's words with every operator and its file name removed."""
    words = []
    remaining = iter(_command_part(args))
    for arg in remaining:
        if arg in REDIRECT_OPERATORS:
            next(remaining, None)
            continue
        words.append(arg)
    return words


def _open_output(path: str, append: bool) -> BinaryIO:
    flags = os.O_WRONLY | os.O_CREAT | (os.O_APPEND if append else os.O_TRUNC)
    try:
        fd = os.open(path, flags, 0o600)
    except OSError as exc:
        raise RedirectError(path, exc.strerror or "cannot open file") from exc
    return os.fdopen(fd, "ab" if append else "wb")


def _open_input(path: str) -> BinaryIO:
    try:
        return open(path, "rb")
    except OSError as exc:
        raise RedirectError(path, "No such file or directory") from exc


def open_redirections(args: Sequence[str]) -> Redirections:
    """Open every redirection in order; the last of each direction wins."""
    redirect_targets(args)
    result = Redirections()
    try:
        for index, arg in enumerate(_command_part(args)):
            if arg not in REDIRECT_OPERATORS:
                continue
            path = args[index + 1]
            if arg == "<":
                stream = _open_input(path)
                if result.stdin is not None:
                    result.stdin.close()
                result.stdin = stream
            else:
                stream = _open_output(path, append=arg == ">>")
                if result.stdout is not None:
                    result.stdout.close()
                result.stdout = stream
    except BaseException:
        result.close()
        raise
    return result


def split_command(args: Sequence[str]) -> tuple[str | None, list[str]]:
    """Return the command name and its argument list.

    The command is the first word not starting with ``-``; words before it
    are dropped.
    """
    for index, arg in enumerate(args):
        if not arg.startswith("-"):
            return arg, list(args[index:])
    return None, []