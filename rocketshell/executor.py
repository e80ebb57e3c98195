"""Run command lines: separators, pipes, redirections, builtins and programs."""

from __future__ import annotations

import io
import os
import signal
import subprocess
import sys
import threading
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import IO, Any

from rocketshell.builtins import PROMPT_MARK, ShellState, is_builtin, run_builtin
from rocketshell.environment import Environment
from rocketshell.expand import expand_words
from rocketshell.lexer import LexError, Token, token_texts, tokenize
from rocketshell.redirect import (
    RedirectError,
    open_redirections,
    split_command,
    strip_redirections,
)
from rocketshell.syntax import ShellSyntaxError, validate


@dataclass
class Segment:
    """One simple command; *piped* means its output feeds the next one."""

    words: list[str] = field(default_factory=list)
    piped: bool = False


class _Abort(Exception):
    """Stops the rest of a command line after a redirection error."""


def split_segments(args: Sequence[str]) -> list[Segment]:
    """Split a token list at ``;`` and ``|``; a trailing ``;`` adds nothing."""
    segments: list[Segment] = []
    words: list[str] = []
    for arg in args:
        if arg.startswith((";", "|")):
            segments.append(Segment(words, arg.startswith("|")))
            words = []
        else:
            words.append(arg)
    if words or (args and not args[-1].startswith(";")):
        segments.append(Segment(words))
    return segments


def find_in_path(command: str, env: Environment) -> str | None:
    """Locate *command*: names with a slash are used as given, others via PATH."""
    if "/" in command:
        return command
    path = env.get("PATH")
    if path is None:
        return None
    for directory in filter(None, path.split(":")):
        candidate = f"{directory}/{command}"
        if os.path.exists(candidate):
            return candidate
    return None


def _fileno(stream: Any) -> int | None:
    try:
        return stream.fileno()
    except (AttributeError, OSError, ValueError):
        return None


def _write_output(stream: IO[Any], data: bytes) -> None:
    if isinstance(stream, io.TextIOBase):
        stream.write(data.decode(errors="replace"))
    else:
        stream.write(data)


@contextmanager
def _shielded_from_interrupts() -> Iterator[list[int]]:
    """Keep the shell alive while a child receives Ctrl-C or Ctrl-\\.

    Yields the list of signals caught meanwhile. A handler, rather than
    ignoring the signal, lets the child get the default action back on exec.
    """
    caught: list[int] = []
    if threading.current_thread() is not threading.main_thread():
        yield caught
        return

    def record(signum: int, frame: object) -> None:
        caught.append(signum)

    signals = [signal.SIGINT]
    if hasattr(signal, "SIGQUIT"):
        signals.append(signal.SIGQUIT)
    previous = {sig: signal.getsignal(sig) for sig in signals}
    for sig in signals:
        signal.signal(sig, record)
    try:
        yield caught
    finally:
        for sig, handler in previous.items():
            if handler is not None:
                signal.signal(sig, handler)


def run_external(
    state: ShellState,
    argv: Sequence[str],
    stdin: bytes | IO[Any] | None = None,
    stdout: IO[Any] | None = None,
    err: IO[str] | None = None,
) -> int:
    """Run a program and record its exit status in *state*.

    *stdin* may be bytes to feed, an open file, or None to inherit; *stdout*
    may be an open file, any stream to copy the output into, or None to inherit.
    """
    err = sys.stderr if err is None else err
    binary = find_in_path(argv[0], state.env)
    if binary is None:
        err.write(f"{PROMPT_MARK}: {argv[0]} : command not found\n")
        return state.exit_status
    options: dict[str, Any] = {}
    if isinstance(stdin, (bytes, bytearray)):
        options["input"] = bytes(stdin)
    else:
        options["stdin"] = stdin
    fd = None if stdout is None else _fileno(stdout)
    if stdout is not None and fd is None:
        options["stdout"] = subprocess.PIPE
    else:
        if stdout is not None:
            stdout.flush()
        options["stdout"] = fd
    try:
        with _shielded_from_interrupts():
            completed = subprocess.run(
                list(argv),
                executable=binary,
                env=state.env.as_dict(),
                check=False,
                **options,
            )
    except OSError:
        err.write(f"{PROMPT_MARK}: {binary}: No such file or directory\n")
        # The failed child exits with the high byte of the previous status.
        state.exit_status = (state.exit_status >> 8) & 0xFF
        return state.exit_status
    if stdout is not None and completed.stdout is not None:
        _write_output(stdout, completed.stdout)
    if completed.returncode < 0:
        if hasattr(signal, "SIGQUIT") and -completed.returncode == signal.SIGQUIT:
            sys.stdout.write("Ouit: 3\n")
        state.exit_status = 0
    else:
        state.exit_status = completed.returncode
    return state.exit_status


def _run_segment(
    state: ShellState,
    segment: Segment,
    piped_input: bytes | None,
    out: IO[str],
    err: IO[str],
) -> bytes:
    """Run one simple command; return what it wrote into the pipe, if any."""
    words = expand_words(segment.words, state.env, state.exit_status)
    try:
        redirections = open_redirections(words)
    except (ShellSyntaxError, RedirectError) as exc:
        err.write(f"{PROMPT_MARK}: {exc}\n")
        raise _Abort from exc
    with redirections:
        name, argv = split_command(strip_redirections(words))
        if name is None:
            return b""
        capture = (
            io.BytesIO()
            if segment.piped and redirections.stdout is None
            else None
        )
        target: IO[Any]
        if redirections.stdout is not None:
            target = redirections.stdout
        elif capture is not None:
            target = capture
        else:
            target = out
        if is_builtin(name):
            if target is out:
                run_builtin(state, argv, out, err)
            else:
                text = io.StringIO()
                try:
                    run_builtin(state, argv, text, err)
                finally:
                    target.write(text.getvalue().encode())
        else:
            source = redirections.stdin if redirections.stdin is not None else piped_input
            run_external(state, argv, source, target, err)
    return capture.getvalue() if capture is not None else b""


def execute(
    state: ShellState,
    tokens: Sequence[str | Token],
    out: IO[str] | None = None,
    err: IO[str] | None = None,
) -> int:
    """Check and run a token list; return the resulting exit status."""
    out = sys.stdout if out is None else out
    err = sys.stderr if err is None else err
    args = [token.text if isinstance(token, Token) else token for token in tokens]
    if not args:
        return state.exit_status
    try:
        validate(args)
    except ShellSyntaxError as exc:
        err.write(f"{PROMPT_MARK}: {exc}\n")
        return state.exit_status
    piped_input: bytes | None = None
    for segment in split_segments(args):
        try:
            output = _run_segment(state, segment, piped_input, out, err)
        except _Abort:
            break
        piped_input = output if segment.piped else None
    return state.exit_status


def run_line(
    state: ShellState,
    line: str,
    out: IO[str] | None = None,
    err: IO[str] | None = None,
) -> int:
    """Tokenize and run one command line; return the resulting exit status."""
    err = sys.stderr if err is None else err
    try:
        tokens = tokenize(line)
    except LexError as exc:
        err.write(f"{exc}\n")
        return state.exit_status
    return execute(state, token_texts(tokens), out, err)