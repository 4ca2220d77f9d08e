import os

import pytest

from pyminishell.env import Environment
from pyminishell.pathfind import find_executable, split_path


def make_exec(directory, name, mode=0o755):
    path = directory / name
    path.write_text("#!/bin/sh\n")
    os.chmod(path, mode)
    return path


def test_split_path_drops_empty_entries():
    assert split_path("/a::/b:") == ["/a", "/b"]


@pytest.mark.parametrize("value", ["", ":", ":::"])
def test_split_path_empty(value):
    assert split_path(value) == []


def test_split_path_round_trip():
    parts = ["/usr/bin", "/bin", "/opt/x"]
    assert split_path(":".join(parts)) == parts


def test_finds_in_path(tmp_path):
    make_exec(tmp_path, "tool")
    env = Environment.from_envp([f"PATH={tmp_path}"])
    assert find_executable("tool", env) == f"{tmp_path}/tool"


def test_first_directory_wins(tmp_path):
    first = tmp_path / "one"
    second = tmp_path / "two"
    first.mkdir()
    second.mkdir()
    make_exec(first, "tool")
    make_exec(second, "tool")
    env = Environment.from_envp([f"PATH={first}:{second}"])
    assert find_executable("tool", env) == f"{first}/tool"


def test_skips_non_executable(tmp_path):
    first = tmp_path / "one"
    second = tmp_path / "two"
    first.mkdir()
    second.mkdir()
    make_exec(first, "tool", 0o644)
    make_exec(second, "tool")
    env = Environment.from_envp([f"PATH={first}:{second}"])
    assert find_executable("tool", env) == f"{second}/tool"


def test_not_found(tmp_path):
    env = Environment.from_envp([f"PATH={tmp_path}"])
    assert find_executable("nothing-here", env) is None


def test_no_path_variable(tmp_path):
    make_exec(tmp_path, "tool")
    assert find_executable("tool", Environment()) is None


def test_direct_path_used_as_given(tmp_path):
    path = make_exec(tmp_path, "tool")
    assert find_executable(str(path), Environment()) == str(path)


def test_direct_path_missing(tmp_path):
    assert find_executable(str(tmp_path / "missing"), Environment()) is None


@pytest.mark.parametrize("command", ["", None])
def test_empty_command(command, tmp_path):
    env = Environment.from_envp([f"PATH={tmp_path}"])
    assert find_executable(command, env) is None