"""Variable expansion and quote removal for words produced by the lexer."""

from __future__ import annotations

from collections.abc import Iterable

from rocketshell.environment import Environment


def _is_name_char(ch: str) -> bool:
    return (ch.isascii() and ch.isalnum()) or ch == "_"


def _name_length(text: str, start: int = 0) -> int:
    """Length of the run of name characters in *text* beginning at *start*."""
    end = start
    while end < len(text) and _is_name_char(text[end]):
        end += 1
    return end - start


def lookup_variable(text: str, env: Environment) -> str | None:
    """Look up the variable whose name starts *text*; None if it is absent."""
    name = text[:_name_length(text)]
    if not name:
        return None
    return env.get(name)


def expand_word(word: str, env: Environment, exit_status: int) -> str:
    """Expand ``$NAME`` and ``$?`` in *word* and strip its quotes and escapes."""
    out: list[str] = []
    pos = 0
    end = len(word)
    while pos < end:
        if word[pos] == "'":
            close = word.find("'", pos + 1)
            if close < 0:
                close = end
            out.append(word[pos + 1:close])
            pos = close + 1
            continue
        if word[pos] == '"':
            pos += 1
        if pos >= end:
            break
        ch = word[pos]
        if ch == "$":
            pos += 1
            if pos >= end:
                out.append("$")
            elif word[pos] == "?":
                out.append(str(exit_status))
                pos += 1
            else:
                value = lookup_variable(word[pos:], env)
                if value:
                    out.append(value)
                pos += _name_length(word, pos)
        elif ch == "\\":
            pos += 1
            if pos < end:
                out.append(word[pos])
            pos += 1
        elif ch not in "\"'":
            out.append(ch)
            pos += 1
    return "".join(out)


def expand_words(words: Iterable[str], env: Environment, exit_status: int) -> list[str]:
    """Expand every word in *words*."""
    return [expand_word(word, env, exit_status) for word in words]