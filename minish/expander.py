"""Variable expansion of a command line before it is tokenized."""

from __future__ import annotations

import enum
from typing import Protocol

SPECIAL_CHARS = "|&;><'\""
MAX_VAR_NAME = 255

# Special characters coming from variable values are moved into the
# private-use area so the lexer does not treat them as syntax.
_NEUTRAL_BASE = 0xF000
_NEUTRALIZE = str.maketrans({c: chr(_NEUTRAL_BASE + ord(c)) for c in SPECIAL_CHARS})
_RESTORE = str.maketrans({chr(_NEUTRAL_BASE + ord(c)): c for c in SPECIAL_CHARS})


class _Lookup(Protocol):
    def get(self, name: str) -> str | None: ...


class QuoteState(enum.Enum):
    NO_QUOTE = enum.auto()
    SINGLE_QUOTE = enum.auto()
    DOUBLE_QUOTE = enum.auto()

    def after(self, c: str) -> "QuoteState":
        """The state after reading character ``c``."""
        if c == "'":
            if self is QuoteState.NO_QUOTE:
                return QuoteState.SINGLE_QUOTE
            if self is QuoteState.SINGLE_QUOTE:
                return QuoteState.NO_QUOTE
        elif c == '"':
            if self is QuoteState.NO_QUOTE:
                return QuoteState.DOUBLE_QUOTE
            if self is QuoteState.DOUBLE_QUOTE:
                return QuoteState.NO_QUOTE
        return self


def is_special_char(c: str) -> bool:
    """True for characters with meaning to the lexer: operators and quotes."""
    return len(c) == 1 and c in SPECIAL_CHARS


def is_valid_var_char(c: str) -> bool:
    """True for ASCII letters, digits and underscore."""
    return len(c) == 1 and c.isascii() and (c.isalnum() or c == "_")


def neutralize(text: str) -> str:
    """Hide special characters so they are read as plain word text."""
    return text.translate(_NEUTRALIZE)


def restore(text: str) -> str:
    """Undo :func:`neutralize`."""
    return text.translate(_RESTORE)


def extract_var_name(text: str, start: int) -> str:
    """Return the variable name that begins at ``start`` (``"?"`` for ``$?``)."""
    if text[start:start + 1] == "?":
        return "?"
    end = start
    while end < len(text) and end - start < MAX_VAR_NAME and is_valid_var_char(text[end]):
        end += 1
    return text[start:end]


def expand_variables(text: str, env: _Lookup, exit_status: int) -> str:
    """Replace ``$NAME`` and ``$?`` outside single quotes.

    Quotes are kept; unknown variables and a ``$`` not followed by a name
    expand to nothing.
    """
    parts: list[str] = []
    quote = QuoteState.NO_QUOTE
    i = 0
    while i < len(text):
        c = text[i]
        quote = quote.after(c)
        if c != "$" or quote is QuoteState.SINGLE_QUOTE:
            parts.append(c)
            i += 1
            continue
        i += 1
        if text[i:i + 1] == "?":
            parts.append(str(exit_status))
            i += 1
            continue
        name = extract_var_name(text, i)
        if not name:
            continue
        i += len(name)
        value = env.get(name)
        if value:
            parts.append(neutralize(value))
    return "".join(parts)