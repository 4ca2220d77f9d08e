"""Splitting a command line into words and operators."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class TokenType(Enum):
    WORD = "word"
    PIPE = "|"
    REDIR_IN = "<"
    REDIR_OUT = ">"
    APPEND = ">>"
    HEREDOC = "<<"


@dataclass(frozen=True)
class Token:
    type: TokenType
    value: str


class UnclosedQuoteError(ValueError):
    """Raised when a quote in the input line has no closing match."""


_SPACES = frozenset(" \t\n\v\f\r")
_OPERATORS = frozenset("|<>")
_QUOTES = frozenset("'\"")

_OPERATOR_TYPES = {
    "|": TokenType.PIPE,
    "<": TokenType.REDIR_IN,
    ">": TokenType.REDIR_OUT,
    ">>": TokenType.APPEND,
    "<<": TokenType.HEREDOC,
}


def token_type(text: str) -> TokenType:
    """Return the token type for *text*; anything not an operator is a word."""
    return _OPERATOR_TYPES.get(text, TokenType.WORD)


def is_blank(line: str | None) -> bool:
    """Return True if *line* is missing or holds only spaces and tabs."""
    if not line:
        return True
    return all(char in " \t" for char in line)


def _read_operator(line: str, start: int) -> tuple[str, int]:
    char = line[start]
    if char in "<>" and line[start + 1 : start + 2] == char:
        return char * 2, start + 2
    return char, start + 1


def _ends_word(char: str) -> bool:
    return char in _SPACES or char in _OPERATORS


def _read_word(line: str, start: int) -> tuple[str, int]:
    parts: list[str] = []
    pos = start
    length = len(line)
    while pos < length and not _ends_word(line[pos]):
        char = line[pos]
        if char in _QUOTES:
            close = line.find(char, pos + 1)
            if close == -1:
                raise UnclosedQuoteError("unclosed quote")
            parts.append(line[pos : close + 1])
            pos = close + 1
        else:
            end = pos
            while end < length and not _ends_word(line[end]) and line[end] not in _QUOTES:
                end += 1
            parts.append(line[pos:end])
            pos = end
    return "".join(parts), pos


def tokenize(line: str | None) -> list[Token]:
    """Split *line* into tokens.

    Quotes are kept in the words; they are removed during expansion.
    Raises UnclosedQuoteError if a quote is not closed.
    """
    tokens: list[Token] = []
    if not line:
        return tokens
    pos = 0
    length = len(line)
    while pos < length:
        char = line[pos]
        if char in _SPACES:
            pos += 1
        elif char in _OPERATORS:
            op, pos = _read_operator(line, pos)
            tokens.append(Token(token_type(op), op))
        else:
            word, pos = _read_word(line, pos)
            tokens.append(Token(TokenType.WORD, word))
    return tokens