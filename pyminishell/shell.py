"""The interactive prompt: read a line, parse it, run it."""

from __future__ import annotations

import os
import signal
import sys
import threading
from collections.abc import Callable
from typing import TextIO

from .env import Environment
from .executor import ExitRequested, ShellState, execute
from .expander import expand_commands
from .heredoc import HeredocInterrupted, collect_heredocs
from .lexer import UnclosedQuoteError, is_blank, tokenize
from .parser import ParseError, parse

PROMPT = "minishell$ "

ReadLine = Callable[[str], "str | None"]


def _read_line(prompt: str) -> str | None:
    try:
        return input(prompt)
    except EOFError:
        return None


def process_line(
    line: str | None,
    state: ShellState,
    read_line: ReadLine | None = None,
    stdout: TextIO | None = None,
    stderr: TextIO | None = None,
) -> None:
    """Parse, expand and run one command line, updating *state*.

    Syntax errors set status 2; an interrupted here-document sets 130.
    ExitRequested from ``exit`` is passed on to the caller.
    """
    out = stdout if stdout is not None else sys.stdout
    err = stderr if stderr is not None else sys.stderr
    reader = read_line if read_line is not None else _read_line
    if is_blank(line):
        return
    try:
        tokens = tokenize(line)
    except UnclosedQuoteError:
        tokens = []
    if not tokens:
        state.exit_status = 2
        err.write("minishell: syntax error: unclosed quote\n")
        return
    try:
        commands = parse(tokens)
    except ParseError:
        state.exit_status = 2
        err.write("minishell: invalid syntax\n")
        return
    expand_commands(commands, state.env, state.exit_status)
    try:
        collect_heredocs(commands, state.env, state.exit_status, reader)
    except HeredocInterrupted as exc:
        state.exit_status = exc.status
        out.write("\n")
        return
    execute(commands, state, out, err)


def prompt_loop(
    state: ShellState,
    read_line: ReadLine | None = None,
    stdout: TextIO | None = None,
    stderr: TextIO | None = None,
) -> None:
    """Read and run lines until end of input, then print ``exit``."""
    out = stdout if stdout is not None else sys.stdout
    reader = read_line if read_line is not None else _read_line
    while True:
        try:
            line = reader(PROMPT)
        except KeyboardInterrupt:
            out.write("\n")
            state.exit_status = 130
            continue
        if line is None:
            out.write("exit\n")
            break
        process_line(line, state, reader, out, stderr)


def main(argv: list[str] | None = None) -> int:
    """Start the interactive shell and return its exit status."""
    del argv
    try:
        import readline  # noqa: F401  (enables line editing and history)
    except ImportError:
        pass
    state = ShellState(
        Environment.from_envp(f"{key}={value}" for key, value in os.environ.items())
    )
    previous = None
    in_main = threading.current_thread() is threading.main_thread()
    if in_main and hasattr(signal, "SIGQUIT"):
        previous = signal.signal(signal.SIGQUIT, signal.SIG_IGN)
    try:
        prompt_loop(state)
    except ExitRequested as exc:
        return exc.status & 0xFF
    finally:
        if previous is not None:
            signal.signal(signal.SIGQUIT, previous)
    return state.exit_status


if __name__ == "__main__":
    raise SystemExit(main())