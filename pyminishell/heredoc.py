"""Reading here-document bodies before a pipeline runs."""

from __future__ import annotations

from collections.abc import Callable, Iterable

from .env import Environment
from .expander import expand_string
from .lexer import TokenType
from .parser import Command

HEREDOC_PROMPT = "> "

ReadLine = Callable[[str], "str | None"]


class HeredocInterrupted(Exception):
    """Raised when reading a here-document is interrupted by the user."""

    status = 130


def read_heredoc(
    delimiter: str,
    quoted: bool,
    env: Environment,
    last_status: int,
    read_line: ReadLine,
) -> str:
    """Read lines until *delimiter* or end of input and return the body.

    Unless the delimiter was quoted, each line is expanded. Every line
    in the body ends with a newline. An interrupt raises
    HeredocInterrupted.
    """
    lines: list[str] = []
    while True:
        try:
            line = read_line(HEREDOC_PROMPT)
        except KeyboardInterrupt as exc:
            raise HeredocInterrupted("here-document interrupted") from exc
        if line is None or line == delimiter:
            break
        if not quoted:
            line = expand_string(line, env, last_status)
        lines.append(line + "\n")
    return "".join(lines)


def collect_heredocs(
    commands: Iterable[Command],
    env: Environment,
    last_status: int,
    read_line: ReadLine,
) -> None:
    """Read the body of every here-document in *commands*, in order.

    Each body is stored in its redirection's ``content``.
    """
    for command in commands:
        for redirection in command.redirections:
            if redirection.type is TokenType.HEREDOC:
                redirection.content = read_heredoc(
                    redirection.target,
                    redirection.quoted,
                    env,
                    last_status,
                    read_line,
                )