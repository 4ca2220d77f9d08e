"""Commands the shell runs itself: echo, cd, pwd, env, export, unset, exit."""

from __future__ import annotations

import os
from collections.abc import Sequence
from typing import TextIO

from .env import Environment, valid_identifier

_BUILTINS = frozenset({"echo", "cd", "pwd", "env", "export", "unset", "exit"})
_LEADING_SPACE = "\t\n\v\f\r "


def is_builtin(name: str | None) -> bool:
    """Return True if *name* is a command the shell runs itself."""
    return bool(name) and name in _BUILTINS


def parse_exit_status(text: str) -> int:
    """Read a number the way ``exit`` does.

    Leading whitespace is skipped, one optional sign is accepted, and
    digits are read until the first non-digit. No digits gives 0.
    """
    rest = text.lstrip(_LEADING_SPACE)
    sign = 1
    if rest[:1] in ("+", "-"):
        if rest[0] == "-":
            sign = -1
        rest = rest[1:]
    digits = []
    for char in rest:
        if not ("0" <= char <= "9"):
            break
        digits.append(char)
    if not digits:
        return 0
    return sign * int("".join(digits))


def _echo(args: Sequence[str], stdout: TextIO) -> int:
    words = list(args[1:])
    newline = True
    if words and words[0] == "-n":
        newline = False
        words = words[1:]
    stdout.write(" ".join(words))
    if newline:
        stdout.write("\n")
    return 0


def _cd(args: Sequence[str], env: Environment, stderr: TextIO) -> int:
    path = args[1] if len(args) > 1 else env.get("HOME")
    try:
        if path is None:
            raise FileNotFoundError("HOME not set")
        os.chdir(path)
    except OSError:
        stderr.write("cd: error\n")
        return 1
    return 0


def _pwd(stdout: TextIO) -> int:
    try:
        cwd = os.getcwd()
    except OSError:
        return 1
    stdout.write(cwd + "\n")
    return 0


def _env(env: Environment, stdout: TextIO) -> int:
    for key, value in env.items():
        stdout.write(f"{key}={value}\n")
    return 0


def _export(args: Sequence[str], env: Environment, stdout: TextIO, stderr: TextIO) -> int:
    if len(args) < 2:
        return _env(env, stdout)
    status = 0
    for arg in args[1:]:
        key, sep, value = arg.partition("=")
        if not valid_identifier(key):
            stderr.write("export: not a valid identifier\n")
            status = 1
        elif sep:
            env.set(key, value)
    return status


def _unset(args: Sequence[str], env: Environment, stderr: TextIO) -> int:
    status = 0
    for arg in args[1:]:
        if valid_identifier(arg):
            env.unset(arg)
        else:
            stderr.write("unset: not a valid identifier\n")
            status = 1
    return status


def _exit(args: Sequence[str]) -> int:
    return parse_exit_status(args[1]) if len(args) > 1 else 0


def run_builtin(
    args: Sequence[str], env: Environment, stdout: TextIO, stderr: TextIO
) -> int:
    """Run the builtin named by ``args[0]`` and return its exit status.

    An empty argument list or an unknown name gives status 1.
    """
    if not args:
        return 1
    name = args[0]
    if name == "echo":
        return _echo(args, stdout)
    if name == "cd":
        return _cd(args, env, stderr)
    if name == "pwd":
        return _pwd(stdout)
    if name == "env":
        return _env(env, stdout)
    if name == "export":
        return _export(args, env, stdout, stderr)
    if name == "unset":
        return _unset(args, env, stderr)
    if name == "exit":
        return _exit(args)
    return 1