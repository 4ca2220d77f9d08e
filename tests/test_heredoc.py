import pytest

from pyminishell.env import Environment
from pyminishell.heredoc import HeredocInterrupted, collect_heredocs, read_heredoc
from pyminishell.lexer import TokenType, tokenize
from pyminishell.parser import parse


def feeder(lines, prompts=None):
    source = iter(lines)

    def read_line(prompt):
        if prompts is not None:
            prompts.append(prompt)
        item = next(source, None)
        if isinstance(item, BaseException):
            raise item
        return item

    return read_line


def test_reads_until_delimiter():
    body = read_heredoc("EOF", False, Environment(), 0, feeder(["a", "b", "EOF", "c"]))
    assert body == "a\nb\n"


def test_stops_at_end_of_input():
    body = read_heredoc("EOF", False, Environment(), 0, feeder(["only"]))
    assert body == "only\n"


def test_immediate_delimiter_gives_empty_body():
    assert read_heredoc("END", True, Environment(), 0, feeder(["END"])) == ""


def test_prompt_is_shown_for_each_line():
    prompts = []
    read_heredoc("EOF", False, Environment(), 0, feeder(["x", "EOF"], prompts))
    assert prompts == ["> ", "> "]


def test_unquoted_expands_variables():
    env = Environment.from_envp(["NAME=world"])
    body = read_heredoc("EOF", False, env, 3, feeder(["hi $NAME $?", "EOF"]))
    assert body == "hi world 3\n"


def test_quoted_keeps_text_literal():
    env = Environment.from_envp(["NAME=world"])
    body = read_heredoc("EOF", True, env, 0, feeder(["hi $NAME", "EOF"]))
    assert body == "hi $NAME\n"


def test_interrupt_raises():
    with pytest.raises(HeredocInterrupted) as info:
        read_heredoc("EOF", False, Environment(), 0, feeder(["a", KeyboardInterrupt()]))
    assert info.value.status == 130


def test_collect_fills_heredoc_contents():
    commands = parse(tokenize("cat << A > out | cat << 'B'"))
    env = Environment.from_envp(["V=val"])
    collect_heredocs(commands, env, 0, feeder(["$V", "A", "$V", "B"]))
    first = commands[0].redirections
    assert first[0].type is TokenType.HEREDOC
    assert first[0].content == "val\n"
    assert first[1].content is None
    assert commands[1].redirections[0].quoted is True
    assert commands[1].redirections[0].content == "$V\n"


def test_collect_stops_on_interrupt():
    commands = parse(tokenize("cat << A | cat << B"))
    with pytest.raises(HeredocInterrupted):
        collect_heredocs(commands, Environment(), 0, feeder(["x", "A", KeyboardInterrupt()]))
    assert commands[0].redirections[0].content == "x\n"
    assert commands[1].redirections[0].content is None