"""Grouping tokens into a pipeline of commands."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

from .lexer import Token, TokenType


class ParseError(ValueError):
    """Raised when the token sequence is not valid shell syntax."""


_REDIRECTIONS = frozenset(
    {TokenType.REDIR_IN, TokenType.REDIR_OUT, TokenType.APPEND, TokenType.HEREDOC}
)


@dataclass
class Redirection:
    type: TokenType
    target: str
    quoted: bool = False
    content: str | None = None


@dataclass
class Command:
    args: list[str] = field(default_factory=list)
    redirections: list[Redirection] = field(default_factory=list)

    @property
    def name(self) -> str | None:
        """The command name: the first argument, if any."""
        return self.args[0] if self.args else None

    def is_empty(self) -> bool:
        return not self.args and not self.redirections


def _strip_quotes(text: str) -> str:
    return text.replace("'", "").replace('"', "")


def parse(tokens: Iterable[Token]) -> list[Command]:
    """Build the pipeline's commands from *tokens*.

    Raises ParseError on an empty input, a misplaced pipe, a redirection
    without a target, or an empty command.
    """
    stream = iter(tokens)
    first = next(stream, None)
    if first is None or first.type is TokenType.PIPE:
        raise ParseError("invalid syntax")
    commands = [Command()]
    token: Token | None = first
    while token is not None:
        current = commands[-1]
        if token.type is TokenType.PIPE:
            if current.is_empty():
                raise ParseError("invalid syntax")
            commands.append(Command())
        elif token.type in _REDIRECTIONS:
            target = next(stream, None)
            if target is None or target.type is not TokenType.WORD:
                raise ParseError("invalid syntax")
            value = target.value
            quoted = False
            if token.type is TokenType.HEREDOC and ("'" in value or '"' in value):
                quoted = True
                value = _strip_quotes(value)
            current.redirections.append(Redirection(token.type, value, quoted))
        else:
            current.args.append(token.value)
        token = next(stream, None)
    if commands[-1].is_empty():
        raise ParseError("invalid syntax")
    return commands