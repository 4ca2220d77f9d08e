"""Running parsed pipelines: builtins in the shell, programs as child processes."""

from __future__ import annotations

import io
import os
import signal
import subprocess
import sys
import threading
from collections.abc import Callable, Iterable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import IO, TextIO, Union

from .builtins import is_builtin, parse_exit_status, run_builtin
from .env import Environment
from .lexer import TokenType
from .parser import Command
from .pathfind import find_executable


@dataclass
class ShellState:
    """What the shell keeps between command lines."""

    env: Environment = field(default_factory=Environment)
    exit_status: int = 0


class ExitRequested(Exception):
    """Raised when the ``exit`` builtin runs on its own and ends the shell."""

    def __init__(self, status: int) -> None:
        super().__init__(f"exit {status}")
        self.status = status


class RedirectionError(OSError):
    """Raised when a redirection cannot be set up."""


@dataclass
class Redirections:
    """The streams a command's redirections resolve to."""

    input: IO[str] | None = None
    input_text: str | None = None
    output: IO[str] | None = None

    def close(self) -> None:
        for stream in (self.input, self.output):
            if stream is not None:
                stream.close()

    def __enter__(self) -> Redirections:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


_OUTPUT_MODES = {
    TokenType.REDIR_OUT: (os.O_CREAT | os.O_WRONLY | os.O_TRUNC, "w"),
    TokenType.APPEND: (os.O_CREAT | os.O_WRONLY | os.O_APPEND, "a"),
}


def _open_file(path: str, flags: int, mode: str) -> IO[str]:
    try:
        fd = os.open(path, flags, 0o644)
    except OSError as exc:
        raise RedirectionError(exc.errno, exc.strerror, path) from exc
    return os.fdopen(fd, mode, encoding="utf-8")


def _replace_input(
    streams: Redirections, stream: IO[str] | None, text: str | None
) -> None:
    if streams.input is not None:
        streams.input.close()
    streams.input = stream
    streams.input_text = text


def open_redirections(command: Command) -> Redirections:
    """Open every redirection of *command* in order.

    Each file is opened (and created or truncated) even when a later
    redirection replaces it; the last input and output win. Raises
    RedirectionError if a file cannot be opened or a here-document
    body was never read.
    """
    streams = Redirections()
    try:
        for redirection in command.redirections:
            if redirection.type is TokenType.HEREDOC:
                if redirection.content is None:
                    raise RedirectionError(
                        f"{redirection.target}: here-document not read"
                    )
                _replace_input(streams, None, redirection.content)
            elif redirection.type is TokenType.REDIR_IN:
                stream = _open_file(redirection.target, os.O_RDONLY, "r")
                _replace_input(streams, stream, None)
            else:
                flags, mode = _OUTPUT_MODES[redirection.type]
                stream = _open_file(redirection.target, flags, mode)
                if streams.output is not None:
                    streams.output.close()
                streams.output = stream
    except BaseException:
        streams.close()
        raise
    return streams


def status_from_returncode(returncode: int) -> int:
    """Turn a child's return code into a shell status (128 + signal if killed)."""
    if returncode < 0:
        return 128 - returncode
    return returncode


def _fileno(stream: TextIO) -> int | None:
    try:
        return stream.fileno()
    except (AttributeError, OSError, ValueError):
        return None


def _flush(stream: TextIO) -> None:
    try:
        stream.flush()
    except (AttributeError, OSError, ValueError):
        pass


def _default_child_signals() -> None:
    signal.signal(signal.SIGINT, signal.SIG_DFL)
    if hasattr(signal, "SIGQUIT"):
        signal.signal(signal.SIGQUIT, signal.SIG_DFL)


@contextmanager
def _ignoring_interrupts() -> Iterator[None]:
    if threading.current_thread() is not threading.main_thread():
        yield
        return
    names = ["SIGINT", "SIGQUIT"]
    previous = {
        name: signal.signal(getattr(signal, name), signal.SIG_IGN)
        for name in names
        if hasattr(signal, name)
    }
    try:
        yield
    finally:
        for name, handler in previous.items():
            signal.signal(getattr(signal, name), handler)


def _copy_env(env: Environment) -> Environment:
    return Environment.from_envp(env.to_list())


def _isolated_builtin(
    args: list[str], env: Environment, stdout: TextIO, stderr: TextIO
) -> int:
    """Run a builtin as a pipeline stage, leaving the shell untouched."""
    try:
        cwd = os.getcwd()
    except OSError:
        cwd = None
    try:
        return run_builtin(args, _copy_env(env), stdout, stderr)
    finally:
        if cwd is not None:
            try:
                os.chdir(cwd)
            except OSError:
                pass


Upstream = Union[None, bytes, IO[str], IO[bytes]]


def _discard(upstream: Upstream) -> None:
    if upstream is not None and not isinstance(upstream, bytes):
        upstream.close()


def _feed(pipe: IO[bytes], data: bytes) -> None:
    try:
        pipe.write(data)
    except OSError:
        pass
    finally:
        try:
            pipe.close()
        except OSError:
            pass


class _Pipeline:
    """One run of a pipeline of commands."""

    def __init__(
        self, env: Environment, stdout: TextIO, stderr: TextIO
    ) -> None:
        self._env = env
        self._stdout = stdout
        self._stderr = stderr
        self._out_fd = _fileno(stdout)
        self._err_fd = _fileno(stderr)
        self._lock = threading.Lock()
        self._threads: list[threading.Thread] = []
        self._processes: list[subprocess.Popen[bytes]] = []

    def run(self, commands: list[Command]) -> int:
        upstream: Upstream = None
        status = 0
        last_process: subprocess.Popen[bytes] | None = None
        for index, command in enumerate(commands):
            is_last = index == len(commands) - 1
            status, last_process, upstream = self._stage(command, upstream, is_last)
        _discard(upstream)
        for process in self._processes:
            process.wait()
        for thread in self._threads:
            thread.join()
        if last_process is not None:
            status = self._report(last_process.returncode)
        return status

    def _report(self, returncode: int) -> int:
        if hasattr(signal, "SIGQUIT") and returncode == -signal.SIGQUIT:
            self._stderr.write("Quit (core dumped)\n")
        elif returncode == -signal.SIGINT:
            self._stdout.write("\n")
        return status_from_returncode(returncode)

    def _start(self, target: Callable[..., None], *args: object) -> None:
        thread = threading.Thread(target=target, args=args, daemon=True)
        thread.start()
        self._threads.append(thread)

    def _drain(self, pipe: IO[bytes], sink: TextIO) -> None:
        data = pipe.read()
        pipe.close()
        if data:
            with self._lock:
                sink.write(data.decode("utf-8", "replace"))

    def _internal(
        self,
        streams: Redirections,
        is_last: bool,
        action: Callable[[TextIO], int],
    ) -> tuple[int, None, bytes]:
        if streams.output is not None:
            return action(streams.output), None, b""
        if not is_last:
            buffer = io.StringIO()
            status = action(buffer)
            return status, None, buffer.getvalue().encode("utf-8")
        with self._lock:
            return action(self._stdout), None, b""

    @staticmethod
    def _input_for(streams: Redirections, upstream: Upstream) -> Upstream:
        if streams.input_text is not None:
            _discard(upstream)
            return streams.input_text.encode("utf-8")
        if streams.input is not None:
            _discard(upstream)
            return streams.input
        return upstream

    def _stage(
        self, command: Command, upstream: Upstream, is_last: bool
    ) -> tuple[int, subprocess.Popen[bytes] | None, Upstream]:
        try:
            streams = open_redirections(command)
        except RedirectionError:
            _discard(upstream)
            return 1, None, b""
        with streams:
            source = self._input_for(streams, upstream)
            name = command.name
            if name is None:
                _discard(source)
                return 0, None, b""
            if is_builtin(name):
                _discard(source)
                return self._internal(
                    streams,
                    is_last,
                    lambda out: _isolated_builtin(
                        command.args, self._env, out, self._stderr
                    ),
                )
            path = find_executable(name, self._env)
            if path is None:
                _discard(source)
                message = f"minishell: {name}: command not found\n"

                def not_found(out: TextIO) -> int:
                    out.write(message)
                    return 127

                return self._internal(streams, is_last, not_found)
            return self._spawn(command, path, source, streams, is_last)

    def _spawn(
        self,
        command: Command,
        path: str,
        source: Upstream,
        streams: Redirections,
        is_last: bool,
    ) -> tuple[int, subprocess.Popen[bytes] | None, Upstream]:
        feed: bytes | None = None
        stdin_arg: object = source
        if isinstance(source, bytes):
            stdin_arg = subprocess.PIPE
            feed = source
        if streams.output is not None:
            stdout_arg: object = streams.output
        elif not is_last or self._out_fd is None:
            stdout_arg = subprocess.PIPE
        else:
            stdout_arg = self._out_fd
        stderr_arg: object = (
            self._err_fd if self._err_fd is not None else subprocess.PIPE
        )
        _flush(self._stdout)
        _flush(self._stderr)
        child_env = {key: value for key, value in self._env.items() if key}
        try:
            process = subprocess.Popen(
                command.args,
                executable=path,
                stdin=stdin_arg,
                stdout=stdout_arg,
                stderr=stderr_arg,
                env=child_env,
                preexec_fn=_default_child_signals if os.name == "posix" else None,
            )
        except OSError as exc:
            _discard(source)
            with self._lock:
                self._stderr.write(f"execve: {exc.strerror or exc}\n")
            return 1, None, b""
        _discard(source)
        self._processes.append(process)
        if feed is not None and process.stdin is not None:
            self._start(_feed, process.stdin, feed)
        if process.stderr is not None:
            self._start(self._drain, process.stderr, self._stderr)
        pending: Upstream = b""
        if process.stdout is not None:
            if is_last:
                self._start(self._drain, process.stdout, self._stdout)
            else:
                pending = process.stdout
        return 0, process, pending


def _run_single_builtin(
    command: Command, state: ShellState, stdout: TextIO, stderr: TextIO
) -> None:
    try:
        streams = open_redirections(command)
    except RedirectionError:
        state.exit_status = 1
        return
    with streams:
        out = streams.output if streams.output is not None else stdout
        if command.name == "exit":
            out.write("exit\n")
            status = parse_exit_status(command.args[1]) if len(command.args) > 1 else 0
            raise ExitRequested(status)
        state.exit_status = run_builtin(command.args, state.env, out, stderr)


def execute(
    commands: Iterable[Command],
    state: ShellState,
    stdout: TextIO | None = None,
    stderr: TextIO | None = None,
) -> None:
    """Run a pipeline and store its exit status in *state*.

    A lone builtin runs in the shell itself, so it can change the
    environment; ``exit`` run that way raises ExitRequested. Otherwise
    every command runs as its own pipeline stage and the status is the
    last stage's.
    """
    out = stdout if stdout is not None else sys.stdout
    err = stderr if stderr is not None else sys.stderr
    pipeline = list(commands)
    if not pipeline:
        return
    if len(pipeline) == 1 and is_builtin(pipeline[0].name):
        _run_single_builtin(pipeline[0], state, out, err)
        return
    with _ignoring_interrupts():
        state.exit_status = _Pipeline(state.env, out, err).run(pipeline)