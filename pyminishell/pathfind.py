"""Locating executables through PATH."""

from __future__ import annotations

import os

from .env import Environment


def split_path(value: str) -> list[str]:
    """Split a PATH value on ``:``, dropping empty entries."""
    return [part for part in value.split(":") if part]


def _executable(path: str) -> bool:
    return os.access(path, os.X_OK)


def find_executable(command: str | None, env: Environment) -> str | None:
    """Return the path to run for *command*, or None if none is found.

    A command containing ``/`` is used as given if it is executable;
    otherwise each PATH directory is tried in order.
    """
    if not command:
        return None
    if "/" in command:
        return command if _executable(command) else None
    path_value = env.get("PATH")
    if path_value is None:
        return None
    for directory in split_path(path_value):
        full = f"{directory}/{command}"
        if _executable(full):
            return full
    return None