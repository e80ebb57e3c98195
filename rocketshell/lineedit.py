"""Interactive line editing with history, over a terminal in raw mode."""

from __future__ import annotations

import sys
import termios
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import IO

PROMPT = "🚀 $ "
HISTORY_LIMIT = 1000

KEY_UP = frozenset({"\x1b[A", "\x1bOA"})
KEY_DOWN = frozenset({"\x1b[B", "\x1bOB"})
KEY_RIGHT = frozenset({"\x1b[C", "\x1bOC"})
KEY_LEFT = frozenset({"\x1b[D", "\x1bOD"})
KEY_BACKSPACE = "\x7f"
KEY_EOF = "\x04"
KEY_ENTER = "\n"

_CURSOR_LEFT = "\x1b[D"
_CURSOR_RIGHT = "\x1b[C"
_DELETE_CHAR = "\x1b[P"
_CLEAR_LINE = "\r\x1b[K"


class History:
    """Entered lines, navigable with previous and next.

    Empty lines are not stored; once *limit* lines are held, new ones are dropped.
    """

    def __init__(self, limit: int = HISTORY_LIMIT) -> None:
        self.limit = limit
        self.entries: list[str] = []
        self.position = 0

    def __len__(self) -> int:
        return len(self.entries)

    def add(self, line: str) -> None:
        """Record a line and move the cursor past the newest entry."""
        if not line:
            return
        if len(self.entries) < self.limit:
            self.entries.append(line)
        self.position = len(self.entries)

    def previous(self) -> str | None:
        """Step back one entry; None if already at the oldest."""
        if self.position == 0:
            return None
        self.position -= 1
        return self.entries[self.position]

    def next(self) -> str | None:
        """Step forward one entry; "" past the newest, None if already there."""
        if self.position >= len(self.entries):
            return None
        self.position += 1
        if self.position == len(self.entries):
            return ""
        return self.entries[self.position]


class LineEditor:
    """Builds a line from key presses, echoing them to *out*.

    Typing replaces the character under the cursor, and the line ends at the
    cursor when Enter is pressed.
    """

    def __init__(self, history: History | None = None, out: IO[str] | None = None) -> None:
        self.history = History() if history is None else history
        self.out = sys.stdout if out is None else out
        self._chars: list[str] = []
        self.cursor = 0

    @property
    def text(self) -> str:
        """The characters typed so far."""
        return "".join(self._chars)

    def _reset(self) -> None:
        self._chars = []
        self.cursor = 0

    def _recall(self, line: str | None) -> None:
        if line is None:
            return
        self.out.write(_CLEAR_LINE + PROMPT + line)
        self._chars = list(line)
        self.cursor = len(line)

    def feed(self, key: str) -> str | None:
        """Handle one key; return the finished line on Enter, else None.

        Raises EOFError for Ctrl-D at the start of the line.
        """
        if key in KEY_UP:
            self._recall(self.history.previous())
            return None
        if key in KEY_DOWN:
            self._recall(self.history.next())
            return None
        if key == KEY_BACKSPACE:
            if self.cursor:
                self.out.write(_CURSOR_LEFT + _DELETE_CHAR)
                self.cursor -= 1
            return None
        if key in KEY_LEFT:
            if self.cursor:
                self.out.write(_CURSOR_LEFT)
                self.cursor -= 1
            return None
        if key in KEY_RIGHT:
            if self.cursor < len(self._chars):
                self.out.write(_CURSOR_RIGHT)
                self.cursor += 1
            return None
        if key == KEY_EOF and not self.cursor:
            raise EOFError
        self.out.write(key)
        if key == KEY_ENTER:
            line = "".join(self._chars[:self.cursor])
            self.history.add(line)
            self._reset()
            return line
        if key and key != KEY_EOF and " " <= key[0] <= "~":
            if self.cursor < len(self._chars):
                self._chars[self.cursor] = key[0]
            else:
                self._chars.append(key[0])
            self.cursor += 1
        return None

    def read_line(self, read_key: Callable[[], str]) -> str:
        """Show the prompt and read keys until a line is entered.

        Raises EOFError on Ctrl-D at the start of a line or when input ends.
        Ctrl-C discards the line and shows a fresh prompt.
        """
        self.out.write(PROMPT)
        self.out.flush()
        while True:
            try:
                key = read_key()
            except KeyboardInterrupt:
                self.out.write("\n" + PROMPT)
                self.out.flush()
                self._reset()
                continue
            if not key:
                raise EOFError
            line = self.feed(key)
            self.out.flush()
            if line is not None:
                return line


@contextmanager
def raw_mode(fd: int) -> Iterator[bool]:
    """Turn off line buffering and echo on *fd* while inside the block.

    Yields whether the terminal was switched; a non-terminal is left alone.
    """
    try:
        saved = termios.tcgetattr(fd)
    except termios.error:
        saved = None
    if saved is None:
        yield False
        return
    changed = termios.tcgetattr(fd)
    changed[3] &= ~(termios.ICANON | termios.ECHO)
    termios.tcsetattr(fd, termios.TCSANOW, changed)
    try:
        yield True
    finally:
        restored = list(saved)
        restored[3] |= termios.ICANON | termios.ECHO
        termios.tcsetattr(fd, termios.TCSANOW, restored)