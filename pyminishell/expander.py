"""Variable expansion and quote removal."""

from __future__ import annotations

import re
from collections.abc import Iterable

from .env import Environment
from .lexer import TokenType
from .parser import Command

_PIECE = re.compile(r"\$\?|\$[A-Za-z0-9_]+|.", re.DOTALL)


def expand_string(text: str, env: Environment, last_status: int) -> str:
    """Expand ``$NAME`` and ``$?`` in *text* and remove quotes.

    Nothing is expanded inside single quotes. A ``$`` not followed by a
    name or ``?`` is kept as is; unknown variables expand to nothing.
    """
    result: list[str] = []
    in_single = False
    in_double = False
    for match in _PIECE.finditer(text):
        piece = match.group()
        if piece == "'" and not in_double:
            in_single = not in_single
        elif piece == '"' and not in_single:
            in_double = not in_double
        elif piece.startswith("$") and not in_single:
            if piece == "$?":
                result.append(str(last_status))
            elif len(piece) > 1:
                value = env.get(piece[1:])
                if value is not None:
                    result.append(value)
            else:
                result.append(piece)
        else:
            result.append(piece)
    return "".join(result)


def expand_commands(
    commands: Iterable[Command], env: Environment, last_status: int
) -> None:
    """Expand arguments and redirection targets of *commands* in place.

    Here-document delimiters are left untouched.
    """
    for command in commands:
        command.args = [expand_string(arg, env, last_status) for arg in command.args]
        for redirection in command.redirections:
            if redirection.type is not TokenType.HEREDOC:
                redirection.target = expand_string(
                    redirection.target, env, last_status
                )