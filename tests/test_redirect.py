import os

import pytest

from rocketshell.redirect import (
    RedirectError,
    Redirections,
    count_redirections,
    open_redirections,
    redirect_targets,
    split_command,
    strip_redirections,
)
from rocketshell.syntax import ShellSyntaxError


def test_count_stops_at_semicolon():
    assert count_redirections(["echo", ">", "f", ";", ">", "g"]) == 1


def test_count_all_operators():
    assert count_redirections(["cat", "<", "a", ">", "b", ">>", "c"]) == 3


def test_targets_in_order():
    assert redirect_targets(["cat", "<", "a", ">>", "b"]) == ["a", "b"]


def test_missing_target_is_syntax_error():
    with pytest.raises(ShellSyntaxError) as info:
        redirect_targets(["echo", ">"])
    assert info.value.token == "newline"


def test_strip_removes_operators_and_files():
    assert strip_redirections(["echo", "hi", ">", "f", "x"]) == ["echo", "hi", "x"]


def test_strip_stops_at_semicolon():
    assert strip_redirections(["ls", "<", "in", ";", "pwd"]) == ["ls"]


def test_strip_without_redirections_is_identity():
    words = ["grep", "-n", "word"]
    assert strip_redirections(words) == words


def test_output_file_is_created_and_written(tmp_path):
    target = tmp_path / "out.txt"
    with open_redirections(["echo", ">", str(target)]) as redirs:
        assert redirs.stdin is None
        redirs.stdout.write(b"data")
    assert target.read_bytes() == b"data"
    assert os.stat(target).st_mode & 0o777 == 0o600


def test_truncate_and_append(tmp_path):
    target = tmp_path / "out.txt"
    target.write_bytes(b"old")
    with open_redirections([">", str(target)]) as redirs:
        redirs.stdout.write(b"new")
    assert target.read_bytes() == b"new"
    with open_redirections([">>", str(target)]) as redirs:
        redirs.stdout.write(b"more")
    assert target.read_bytes() == b"new" + b"more"


def test_every_output_file_is_created_last_wins(tmp_path):
    first = tmp_path / "a"
    second = tmp_path / "b"
    with open_redirections(["echo", ">", str(first), ">", str(second)]) as redirs:
        redirs.stdout.write(b"x")
    assert first.exists()
    assert first.read_bytes() == b""
    assert second.read_bytes() == b"x"


def test_input_file_is_opened(tmp_path):
    source = tmp_path / "in.txt"
    source.write_bytes(b"content")
    redirs = open_redirections(["cat", "<", str(source)])
    try:
        assert redirs.stdin.read() == b"content"
    finally:
        redirs.close()
    assert redirs.stdin is None


def test_missing_input_raises(tmp_path):
    missing = str(tmp_path / "nope")
    with pytest.raises(RedirectError) as info:
        open_redirections(["cat", "<", missing])
    assert info.value.path == missing
    assert info.value.reason == "No such file or directory"


def test_close_on_empty_redirections():
    redirs = Redirections()
    redirs.close()
    assert redirs.stdin is None and redirs.stdout is None


def test_split_command_skips_leading_dashes():
    assert split_command(["-x", "ls", "-l"]) == ("ls", ["ls", "-l"])


def test_split_command_without_command():
    assert split_command(["-a", "-b"]) == (None, [])
    assert split_command([]) == (None, [])