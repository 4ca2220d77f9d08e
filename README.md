# pyminishell

A small interactive shell. It reads command lines, splits them into words and
operators, expands variables, and runs the result. A command is either run as
a built-in or as an external program found on `PATH`.

## Installation

```
pip install .
```

## Starting the shell

```
pyminishell
```

The prompt is `minishell$ `. Line editing is available when Python's
`readline` module is present. End input with Ctrl-D: the shell prints `exit`
and leaves with the status of the last command. Ctrl-C at the prompt starts a
fresh line and sets the status to 130.

## What it understands

- Words, with `'single'` and `"double"` quotes. Quotes are removed during
  expansion. An unclosed quote is reported as
  `minishell: syntax error: unclosed quote` and sets the status to 2.
- Pipes: `ls | grep py | wc -l`. The status of a pipeline is that of its last
  command; a command killed by a signal gives 128 plus the signal number.
- Redirections: `< file`, `> file`, `>> file`. Every file named is opened in
  order (output files are created or truncated) and the last input and last
  output win. If a file cannot be opened, the command is not run and its
  status is 1.
- Here-documents: `<< END`. All here-documents on a line are read, with the
  prompt `> `, before anything runs. Lines are expanded unless the delimiter
  contains a quote, as in `<< 'END'`. Ctrl-C while reading one cancels the
  line and sets the status to 130.
- Variable expansion: `$NAME` and `$?` (the last exit status). Nothing is
  expanded inside single quotes; unknown variables expand to nothing; a `$`
  not followed by a name is kept.
- Built-in commands: `echo` (with `-n`), `cd`, `pwd`, `env`, `export`,
  `unset`, `exit`.

A line that cannot be parsed, such as `| ls` or `ls >`, is reported as
`minishell: invalid syntax` and sets the status to 2. A command that cannot be
found prints `minishell: <name>: command not found` and sets the status to 127.

A built-in that is the only command on a line runs in the shell itself, so
`cd`, `export` and `unset` take effect. Inside a pipeline a built-in runs on a
copy of the environment and working directory, and its changes are discarded.
`exit` on its own prints `exit` and ends the shell with its argument, read as
a number (non-numeric text gives 0), taken modulo 256.

## What it does not do

There are no command lists (`;`, `&&`, `||`), no subshells or grouping, no
background jobs, no globbing, no word splitting of expanded values, no
redirection of numbered file descriptors, and no history file. `export`
without `=` only checks the name; it does not mark an existing variable.

## Using it from Python

The pieces of the shell can be used on their own:

```python
from pyminishell.env import Environment
from pyminishell.lexer import tokenize
from pyminishell.parser import parse
from pyminishell.expander import expand_commands

env = Environment.from_envp(["HOME=/home/user", "GREETING=hello"])
commands = parse(tokenize('echo "$GREETING world" | cat > out.txt'))
expand_commands(commands, env, 0)
print(commands[0].args)   # ['echo', 'hello world']
```

- `pyminishell.lexer.tokenize` raises `UnclosedQuoteError`;
  `pyminishell.parser.parse` raises `ParseError`.
- `pyminishell.heredoc.collect_heredocs` reads here-document bodies through a
  `read_line(prompt)` callable that returns `None` at end of input.
- `pyminishell.executor.execute(commands, state, stdout, stderr)` runs a
  pipeline and stores its status in a `ShellState`; a lone `exit` raises
  `ExitRequested`.
- `pyminishell.shell.process_line(line, state, read_line, stdout, stderr)`
  runs one line end to end, and `pyminishell.shell.prompt_loop` runs lines
  until `read_line` returns `None`.

```python
import io
from pyminishell.env import Environment
from pyminishell.executor import ShellState
from pyminishell.shell import process_line

state = ShellState(Environment.from_envp(["NAME=world"]))
out = io.StringIO()
process_line("echo hello $NAME", state, stdout=out)
print(out.getvalue())      # hello world
print(state.exit_status)   # 0
```

## Running the tests

```
pip install ".[test]"
pytest
```