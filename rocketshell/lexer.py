"""Split a command line into word and operator tokens."""

from __future__ import annotations

from dataclasses import dataclass

OPERATOR_CHARS = frozenset(";|<>")


@dataclass(frozen=True)
class Token:
    """A lexical token: a word or one of the operators ``; | < > >>``."""

    text: str
    is_operator: bool = False


class LexError(ValueError):
    """Raised when a command line cannot be split into tokens."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"parse error: {reason}")


def is_operator_char(ch: str) -> bool:
    """Return True if *ch* starts an operator token."""
    return len(ch) == 1 and ch in OPERATOR_CHARS


def _read_double_quoted(line: str, pos: int) -> tuple[str, int]:
    """Read a double-quoted section starting at the opening quote."""
    parts = ['"']
    pos += 1
    end = len(line)
    while pos < end and line[pos] != '"':
        ch = line[pos]
        if ch == "\\":
            following = line[pos + 1] if pos + 1 < end else ""
            if following in ("`", "\\"):
                parts.append(following)
            else:
                parts.append("\\" + following)
            pos += 2
        else:
            parts.append(ch)
            pos += 1
    if pos >= end:
        raise LexError("unclosed quotation")
    parts.append('"')
    return "".join(parts), pos + 1


def _read_word(line: str, pos: int) -> tuple[str, int]:
    """Read a word token; quotes and escapes are kept for later expansion."""
    parts: list[str] = []
    end = len(line)
    while pos < end and line[pos] != " " and line[pos] not in OPERATOR_CHARS:
        ch = line[pos]
        if ch == "'":
            close = line.find("'", pos + 1)
            if close < 0:
                raise LexError("unclosed quotation")
            parts.append(line[pos:close + 1])
            pos = close + 1
        elif ch == "\\":
            if pos + 1 >= end:
                raise LexError("escaped newline")
            parts.append(line[pos:pos + 2])
            pos += 2
        elif ch == '"':
            text, pos = _read_double_quoted(line, pos)
            parts.append(text)
        else:
            parts.append(ch)
            pos += 1
    return "".join(parts), pos


def tokenize(line: str) -> list[Token]:
    """Split *line* into tokens separated by spaces and operators."""
    tokens: list[Token] = []
    pos = 0
    end = len(line)
    while True:
        while pos < end and line[pos] == " ":
            pos += 1
        if pos >= end:
            break
        ch = line[pos]
        if ch in OPERATOR_CHARS:
            text = ">>" if line.startswith(">>", pos) else ch
            tokens.append(Token(text, True))
            pos += len(text)
        else:
            text, pos = _read_word(line, pos)
            tokens.append(Token(text))
    return tokens


def token_texts(tokens: list[Token]) -> list[str]:
    """Return the text of each token, in order."""
    return [token.text for token in tokens]