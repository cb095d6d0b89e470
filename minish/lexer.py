"""Splitting an expanded command line into tokens."""

from __future__ import annotations

import enum
from dataclasses import dataclass

from minish.expander import restore

_OPERATOR_CHARS = "|<>()&"
_WORD_BREAKS = "|<>"
_QUOTES = "'\""


class TokenType(enum.Enum):
    WORD = enum.auto()
    PIPE = enum.auto()
    REDIRECT_IN = enum.auto()
    APPEND = enum.auto()
    REDIRECT_OUT = enum.auto()
    HEREDOC = enum.auto()
    EOF = enum.auto()


@dataclass(frozen=True)
class Token:
    type: TokenType
    value: str | None


class LexError(Exception):
    """Raised for an operator sequence the shell does not accept."""


def is_space(c: str) -> bool:
    """True for a space or one of the ASCII control characters 9 to 13."""
    return c == " " or (len(c) == 1 and 9 <= ord(c) <= 13)


def is_operator(c: str) -> bool:
    """True for characters that may start an operator."""
    return len(c) == 1 and c in _OPERATOR_CHARS


def ending_quotes(text: str, start: int) -> int:
    """Index of the quote closing the one at ``start``, or ``len(text)``."""
    end = text.find(text[start], start + 1)
    return len(text) if end == -1 else end


def _redirection(text: str, i: int, tokens: list[Token]) -> int:
    c = text[i]
    if text[i + 1:i + 2] == c:
        following = text[i + 2:i + 3]
        if following and following in "<>":
            raise LexError(f"syntax error near unexpected token '{following}'")
        if c == "<":
            tokens.append(Token(TokenType.HEREDOC, "<<"))
        else:
            tokens.append(Token(TokenType.APPEND, ">>"))
        return i + 2
    if c == "<":
        tokens.append(Token(TokenType.REDIRECT_IN, "<"))
    else:
        tokens.append(Token(TokenType.REDIRECT_OUT, ">"))
    return i + 1


def _word(text: str, i: int, tokens: list[Token]) -> int:
    pieces: list[str] = []
    n = len(text)
    while i < n and not is_space(text[i]) and text[i] not in _WORD_BREAKS:
        c = text[i]
        if c in _QUOTES:
            end = ending_quotes(text, i)
            pieces.append(text[i + 1:end])
            i = min(end + 1, n)
        else:
            pieces.append(c)
            i += 1
    tokens.append(Token(TokenType.WORD, restore("".join(pieces))))
    return i


def tokenize(text: str) -> list[Token]:
    """Split ``text`` into tokens, ending with an ``EOF`` token.

    Quotes group characters into one word and are removed; characters
    hidden during expansion are restored in word values.
    """
    tokens: list[Token] = []
    i = 0
    while i < len(text):
        c = text[i]
        if is_space(c):
            i += 1
        elif c == "|":
            tokens.append(Token(TokenType.PIPE, "|"))
            i += 1
        elif c in "<>":
            i = _redirection(text, i, tokens)
        else:
            i = _word(text, i, tokens)
    tokens.append(Token(TokenType.EOF, None))
    return tokens