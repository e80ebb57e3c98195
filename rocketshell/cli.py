"""The shell's entry point and session loop."""

from __future__ import annotations

import os
import signal
import sys
import threading
from collections.abc import Iterable, Iterator, Sequence
from contextlib import contextmanager
from typing import IO, Any

from rocketshell.builtins import ShellExit, ShellState
from rocketshell.environment import copy_environment
from rocketshell.executor import run_line
from rocketshell.lineedit import History, LineEditor, raw_mode

_INVALID_ARGUMENT = "\033[31mERROR: invalid argument\033[0m\n"


def run_session(
    state: ShellState,
    lines: Iterable[str],
    out: IO[str] | None = None,
    err: IO[str] | None = None,
) -> int:
    """Run lines until input ends or ``exit`` is called; return the exit status.

    At the end of input ``exit`` is printed and the status is 0.
    """
    out = sys.stdout if out is None else out
    err = sys.stderr if err is None else err
    for line in lines:
        try:
            run_line(state, line, out, err)
        except ShellExit as exc:
            return exc.status
        except KeyboardInterrupt:
            out.write("\n")
    out.write("exit\n")
    return 0


@contextmanager
def _shell_signals() -> Iterator[None]:
    """Ignore SIGTERM and Ctrl-\\ at the prompt for the length of the session."""
    if threading.current_thread() is not threading.main_thread():
        yield
        return
    changes: dict[int, Any] = {signal.SIGTERM: signal.SIG_IGN}
    if hasattr(signal, "SIGQUIT"):
        # Running a program swaps in a catching handler, so children still
        # get the default action back when they start.
        changes[signal.SIGQUIT] = signal.SIG_IGN
    previous = {sig: signal.getsignal(sig) for sig in changes}
    for sig, handler in changes.items():
        signal.signal(sig, handler)
    try:
        yield
    finally:
        for sig, handler in previous.items():
            if handler is not None:
                signal.signal(sig, handler)


def _interactive_lines(fd: int, out: IO[str]) -> Iterator[str]:
    editor = LineEditor(History(), out)

    def read_key() -> str:
        return os.read(fd, 5).decode(errors="replace")

    while True:
        with raw_mode(fd):
            try:
                line = editor.read_line(read_key)
            except EOFError:
                return
        yield line


def main(argv: Sequence[str] | None = None) -> int:
    """Start the shell; it takes no arguments."""
    args = sys.argv[1:] if argv is None else list(argv)
    if args:
        sys.stdout.write(_INVALID_ARGUMENT)
        sys.stdout.flush()
        return 1
    state = ShellState(copy_environment(os.environ))
    with _shell_signals():
        if sys.stdin.isatty():
            lines: Iterable[str] = _interactive_lines(sys.stdin.fileno(), sys.stdout)
        else:
            lines = (line.rstrip("\n") for line in sys.stdin)
        status = run_session(state, lines, sys.stdout, sys.stderr)
    sys.stdout.flush()
    return status & 0xFF


if __name__ == "__main__":
    sys.exit(main())