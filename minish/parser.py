"""Building a syntax tree of pipelines and commands from tokens."""

from __future__ import annotations

import enum
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field

from minish.lexer import Token, TokenType

_REDIRECTION_TYPES = frozenset(
    {TokenType.REDIRECT_IN, TokenType.APPEND, TokenType.REDIRECT_OUT, TokenType.HEREDOC}
)

UNEXPECTED_PIPE = "minishell: syntax error near unexpected token `|'"
SYNTAX_ERROR = "syntax error"


class NodeType(enum.Enum):
    COMMAND = enum.auto()
    PIPE = enum.auto()
    REDIRECT = enum.auto()


class ParseError(Exception):
    """Raised when the tokens do not form a valid pipeline."""


@dataclass
class AstNode:
    type: NodeType
    args: list[str] = field(default_factory=list)
    filename: str | None = None
    heredoc_tmpfile: str | None = None
    redir_type: TokenType | None = None
    left: AstNode | None = None
    right: AstNode | None = None
    redirections: list[AstNode] = field(default_factory=list)

    def add_arg(self, arg: str) -> None:
        """Append an argument to the command."""
        self.args.append(arg)

    def add_redirection(self, redir: AstNode) -> None:
        """Append a redirection; they are applied in order."""
        self.redirections.append(redir)

    def iter_redirections(self) -> Iterator[AstNode]:
        """The command's redirections in the order they were written."""
        return iter(self.redirections)


class _Cursor:
    def __init__(self, tokens: Iterable[Token]) -> None:
        self._tokens = list(tokens)
        self._pos = 0

    def peek(self) -> Token | None:
        if self._pos < len(self._tokens):
            return self._tokens[self._pos]
        return None

    def advance(self) -> None:
        self._pos += 1


def _parse_command(cursor: _Cursor) -> AstNode | None:
    cmd: AstNode | None = None
    while (tok := cursor.peek()) is not None and tok.type not in (
        TokenType.PIPE,
        TokenType.EOF,
    ):
        if tok.type is TokenType.WORD:
            if cmd is None:
                cmd = AstNode(NodeType.COMMAND)
            cmd.add_arg(tok.value or "")
        elif tok.type in _REDIRECTION_TYPES:
            if cmd is None:
                cmd = AstNode(NodeType.COMMAND)
            cursor.advance()
            target = cursor.peek()
            if target is None or target.type is not TokenType.WORD:
                raise ParseError(SYNTAX_ERROR)
            cmd.add_redirection(
                AstNode(NodeType.REDIRECT, redir_type=tok.type, filename=target.value)
            )
        cursor.advance()
    return cmd


def parse_command(tokens: Iterable[Token]) -> AstNode | None:
    """Parse one simple command, stopping at the first pipe or end token.

    Returns ``None`` when there is no command before that point.
    """
    return _parse_command(_Cursor(tokens))


def parse_pipeline(tokens: Iterable[Token]) -> AstNode | None:
    """Parse a whole line; pipes nest to the left.

    Returns ``None`` for a line with no command at all.
    """
    cursor = _Cursor(tokens)
    first = cursor.peek()
    if first is not None and first.type is TokenType.PIPE:
        raise ParseError(UNEXPECTED_PIPE)
    left = _parse_command(cursor)
    if left is None:
        return None
    while (tok := cursor.peek()) is not None and tok.type is TokenType.PIPE:
        cursor.advance()
        right = _parse_command(cursor)
        if right is None:
            raise ParseError(SYNTAX_ERROR)
        left = AstNode(NodeType.PIPE, left=left, right=right)
    return left