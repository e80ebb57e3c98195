import io
import sys

import pytest

from rocketshell.builtins import ShellState
from rocketshell.cli import main, run_session
from rocketshell.environment import Environment


@pytest.fixture
def state():
    return ShellState(Environment(["HOME=/", "FOO=bar"]))


def test_run_session_runs_lines_then_prints_exit(state):
    out, err = io.StringIO(), io.StringIO()
    assert run_session(state, ["echo a", "echo b"], out, err) == 0
    assert out.getvalue() == "a\nb\nexit\n"


def test_run_session_stops_at_exit(state):
    out, err = io.StringIO(), io.StringIO()
    assert run_session(state, ["exit 7", "echo no"], out, err) == 7
    assert out.getvalue() == ""


def test_run_session_keeps_state_between_lines(state):
    out, err = io.StringIO(), io.StringIO()
    run_session(state, ["export NEW=value", "echo $NEW $FOO"], out, err)
    assert out.getvalue().splitlines()[0] == "value bar"


def test_run_session_reports_errors_and_continues(state):
    out, err = io.StringIO(), io.StringIO()
    run_session(state, ["| echo x", "echo y"], out, err)
    assert "syntax error" in err.getvalue()
    assert out.getvalue() == "y\nexit\n"


def test_main_rejects_arguments(capsys):
    assert main(["extra"]) == 1
    assert "ERROR: invalid argument" in capsys.readouterr().out


def test_main_reads_piped_input(monkeypatch, capsys):
    monkeypatch.setattr(sys, "stdin", io.StringIO("echo hi\nexit 4\n"))
    assert main([]) == 4
    assert capsys.readouterr().out == "hi\n"


def test_main_end_of_input(monkeypatch, capsys):
    monkeypatch.setattr(sys, "stdin", io.StringIO("echo hi\n"))
    assert main([]) == 0
    assert capsys.readouterr().out == "hi\nexit\n"