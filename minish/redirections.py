"""Input and output redirections, and here-documents kept in temporary files."""

from __future__ import annotations

import os
import string
import sys
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import BinaryIO, TextIO

from minish.lexer import TokenType
from minish.parser import AstNode, NodeType

HEREDOC_PROMPT = "heredoc> "
NAME_LENGTH = 32
_NAME_CHARS = frozenset((string.ascii_letters + string.digits).encode())

Reader = Callable[[str], "str | None"]


class RedirectionError(Exception):
    """Raised when a redirection target cannot be opened."""


def _read_line(prompt: str) -> str | None:
    try:
        return input(prompt)
    except EOFError:
        return None


def _file_mode_0644(path: str, flags: int) -> int:
    return os.open(path, flags, 0o644)


def _open(path: str, mode: str) -> BinaryIO:
    try:
        if mode == "rb":
            return open(path, mode)
        return open(path, mode, opener=_file_mode_0644)
    except OSError as exc:
        raise RedirectionError(f"{path}: {exc.strerror}") from exc


@dataclass
class _Streams:
    """Files opened for a command's standard input and output."""

    stdin: BinaryIO | None = None
    stdout: BinaryIO | None = None

    def close(self) -> None:
        for stream in (self.stdin, self.stdout):
            if stream is not None:
                stream.close()
        self.stdin = None
        self.stdout = None

    def __enter__(self) -> "_Streams":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


def random_name(length: int = NAME_LENGTH) -> str:
    """Return ``length`` random ASCII letters and digits."""
    chars: list[str] = []
    while len(chars) < length:
        chars.extend(chr(b) for b in os.urandom(64) if b in _NAME_CHARS)
    return "".join(chars[:length])


def _input_path(node: AstNode) -> str:
    if node.redir_type is TokenType.HEREDOC and node.heredoc_tmpfile:
        return node.heredoc_tmpfile
    return node.filename or ""


def apply_redirections(redirections: Iterable[AstNode]) -> _Streams:
    """Open every redirection in order and return the streams that win.

    A later input or output redirection replaces an earlier one, which is
    closed. On failure everything opened so far is closed and
    :class:`RedirectionError` is raised.
    """
    streams = _Streams()
    try:
        for node in redirections:
            if node.redir_type in (TokenType.HEREDOC, TokenType.REDIRECT_IN):
                new_in = _open(_input_path(node), "rb")
                if streams.stdin is not None:
                    streams.stdin.close()
                streams.stdin = new_in
            elif node.redir_type in (TokenType.REDIRECT_OUT, TokenType.APPEND):
                mode = "wb" if node.redir_type is TokenType.REDIRECT_OUT else "ab"
                new_out = _open(node.filename or "", mode)
                if streams.stdout is not None:
                    streams.stdout.close()
                streams.stdout = new_out
    except RedirectionError:
        streams.close()
        raise
    return streams


def _remove_tmpfile(node: AstNode) -> None:
    if node.heredoc_tmpfile:
        try:
            os.unlink(node.heredoc_tmpfile)
        except FileNotFoundError:
            pass
        node.heredoc_tmpfile = None


def touch_redirections(redirections: Iterable[AstNode]) -> None:
    """Handle redirections of a line with no command.

    Output files are created (and truncated for ``>``), input files must
    exist, and here-document files are discarded.
    """
    for node in redirections:
        if node.redir_type is TokenType.HEREDOC:
            _remove_tmpfile(node)
        elif node.redir_type is TokenType.REDIRECT_IN:
            _open(node.filename or "", "rb").close()
        elif node.redir_type is TokenType.REDIRECT_OUT:
            _open(node.filename or "", "wb").close()
        elif node.redir_type is TokenType.APPEND:
            _open(node.filename or "", "ab").close()


def cleanup_heredocs(node: AstNode | None) -> None:
    """Delete every here-document file found in the tree under ``node``."""
    if node is None:
        return
    if node.redir_type is TokenType.HEREDOC:
        _remove_tmpfile(node)
    cleanup_heredocs(node.left)
    cleanup_heredocs(node.right)
    for redir in node.redirections:
        cleanup_heredocs(redir)


def read_heredoc_lines(
    stream: TextIO,
    delimiter: str,
    reader: Reader = _read_line,
    out: TextIO | None = None,
) -> int:
    """Copy lines from ``reader`` to ``stream`` until ``delimiter``.

    Returns the number of lines written. End of input before the delimiter
    prints a warning on ``out``.
    """
    out = sys.stdout if out is None else out
    written = 0
    while True:
        line = reader(HEREDOC_PROMPT)
        if line is None:
            out.write(
                "minishell: warning: here-document"
                f" line {written + 1} delimited by end-of-file"
                f" (wanted `{delimiter}')\n"
            )
            return written
        if line == delimiter:
            return written
        stream.write(f"{line}\n")
        written += 1


def process_heredoc(
    node: AstNode,
    reader: Reader = _read_line,
    out: TextIO | None = None,
) -> bool:
    """Read one here-document into a new file named by ``node.heredoc_tmpfile``.

    Returns ``False`` if reading was interrupted; the file is then removed.
    """
    if node is None:
        raise ValueError("heredoc node is missing")
    name = random_name()
    node.heredoc_tmpfile = name
    try:
        stream = open(name, "w", encoding="utf-8", opener=_file_mode_0644)
    except OSError as exc:
        node.heredoc_tmpfile = None
        raise RedirectionError(f"{name}: {exc.strerror}") from exc
    try:
        with stream:
            read_heredoc_lines(stream, node.filename or "", reader, out)
    except KeyboardInterrupt:
        (out or sys.stdout).write("\n")
        _remove_tmpfile(node)
        return False
    return True


def preprocess_heredocs(
    node: AstNode | None,
    reader: Reader = _read_line,
    out: TextIO | None = None,
) -> None:
    """Read every here-document in the tree, left to right."""
    if node is None:
        return
    if node.type is NodeType.COMMAND:
        for redir in node.redirections:
            if redir.redir_type is TokenType.HEREDOC:
                process_heredoc(redir, reader, out)
    preprocess_heredocs(node.left, reader, out)
    preprocess_heredocs(node.right, reader, out)