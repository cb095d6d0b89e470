"""Building blocks of a small interactive shell: environment, expansion, lexing, parsing, builtins and redirections."""

__version__ = "0.1.0"

__all__ = [
    "builtins",
    "environment",
    "expander",
    "lexer",
    "parser",
    "redirections",
    "syntax",
]