"""Checks on a raw command line before it is expanded."""

from __future__ import annotations


class ShellSyntaxError(Exception):
    """Raised for a command line that is not well formed."""


def check_quotes(text: str) -> None:
    """Raise if a single or double quote is left open."""
    open_quote = ""
    for c in text:
        if not open_quote and c in "'\"":
            open_quote = c
        elif open_quote and c == open_quote:
            open_quote = ""
    if open_quote == "'":
        raise ShellSyntaxError("syntax error: unclosed single quote")
    if open_quote == '"':
        raise ShellSyntaxError("syntax error: unclosed double quote")


def _token_error(c: str) -> ShellSyntaxError:
    return ShellSyntaxError(f"syntax error near unexpected token `{c}'")


def check_pipes(text: str) -> None:
    """Raise for a leading pipe, a trailing pipe, or two pipes in a row."""
    if text.lstrip(" ").startswith("|"):
        raise _token_error("|")
    if text.rstrip(" \t").endswith("|"):
        raise ShellSyntaxError("bash: syntax error: unexpected end of file")
    if "||" in text:
        raise _token_error("|")