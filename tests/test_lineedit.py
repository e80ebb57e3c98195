import io
import os
import termios

import pytest

from rocketshell.lineedit import PROMPT, History, LineEditor, raw_mode


def feed_all(editor, keys):
    results = [editor.feed(key) for key in keys]
    return results[-1]


@pytest.fixture
def editor():
    return LineEditor(History(), io.StringIO())


def test_history_navigation():
    history = History()
    history.add("first")
    history.add("second")
    assert history.previous() == "second"
    assert history.previous() == "first"
    assert history.previous() is None
    assert history.next() == "second"
    assert history.next() == ""
    assert history.next() is None


def test_history_ignores_empty_lines():
    history = History()
    history.add("")
    assert len(history) == 0
    assert history.previous() is None


def test_history_limit_drops_new_lines():
    history = History(2)
    for line in ("a", "b", "c"):
        history.add(line)
    assert history.entries == ["a", "b"]
    assert history.previous() == "b"


def test_feed_returns_line_and_records_it(editor):
    assert feed_all(editor, ["a", "b", "\n"]) == "ab"
    assert editor.history.entries == ["ab"]
    assert editor.text == ""


def test_feed_echoes_keys(editor):
    feed_all(editor, ["h", "i", "\n"])
    assert editor.out.getvalue() == "hi\n"


def test_backspace_shortens_line(editor):
    assert feed_all(editor, ["a", "b", "\x7f", "\n"]) == "a"


def test_typing_after_left_overwrites(editor):
    assert feed_all(editor, ["a", "b", "\x1b[D", "c", "\n"]) == "ac"


def test_enter_ends_line_at_cursor(editor):
    assert feed_all(editor, ["a", "b", "\x1b[D", "\n"]) == "a"


def test_right_arrow_stops_at_end(editor):
    feed_all(editor, ["a", "\x1b[C", "\x1b[C"])
    assert editor.cursor == 1


@pytest.mark.parametrize("up", ["\x1b[A", "\x1bOA"])
def test_up_arrow_recalls_history(up):
    history = History()
    history.add("ls")
    editor = LineEditor(history, io.StringIO())
    assert feed_all(editor, [up, "\n"]) == "ls"


def test_down_arrow_clears_recalled_line():
    history = History()
    history.add("ls")
    editor = LineEditor(history, io.StringIO())
    editor.feed("\x1b[A")
    editor.feed("\x1b[B")
    assert editor.text == ""
    assert editor.cursor == 0


def test_ctrl_d_on_empty_line_raises(editor):
    with pytest.raises(EOFError):
        editor.feed("\x04")


def test_ctrl_d_with_text_is_ignored(editor):
    assert editor.feed("x") is None
    assert editor.feed("\x04") is None
    assert feed_all(editor, ["\n"]) == "x"


def test_non_printable_key_not_stored(editor):
    assert feed_all(editor, ["\x01", "z", "\n"]) == "z"


def test_read_line_shows_prompt(editor):
    keys = iter(["o", "k", "\n"])
    assert editor.read_line(lambda: next(keys)) == "ok"
    assert editor.out.getvalue().startswith(PROMPT)


def test_read_line_end_of_input(editor):
    with pytest.raises(EOFError):
        editor.read_line(lambda: "")


def test_read_line_interrupt_discards_line(editor):
    keys = ["a", KeyboardInterrupt, "b", "\n"]

    def read_key():
        key = keys.pop(0)
        if key is KeyboardInterrupt:
            raise KeyboardInterrupt
        return key

    assert editor.read_line(read_key) == "b"
    assert editor.out.getvalue().count(PROMPT) == 2


def test_raw_mode_on_terminal():
    master, slave = os.openpty()
    try:
        with raw_mode(slave) as switched:
            inside = termios.tcgetattr(slave)[3]
        after = termios.tcgetattr(slave)[3]
    finally:
        os.close(master)
        os.close(slave)
    assert switched is True
    assert not inside & termios.ICANON
    assert not inside & termios.ECHO
    assert after & termios.ICANON
    assert after & termios.ECHO


def test_raw_mode_on_pipe_does_nothing():
    read_end, write_end = os.pipe()
    try:
        with raw_mode(read_end) as switched:
            pass
    finally:
        os.close(read_end)
        os.close(write_end)
    assert switched is False