# rocketshell

A small command shell. It reads a line, splits it into words and
operators, expands variables, and runs built-in commands or programs
found on `PATH`. It runs on POSIX systems (it uses `termios` for the
interactive prompt).

## Installing

```
pip install .
```

## Starting the shell

```
rocketshell
```

The shell takes no arguments; giving any prints
`ERROR: invalid argument` and exits with status 1.

When standard input is a terminal, the prompt is `🚀 $ ` and lines are
edited in raw mode:

- Up and down arrows browse the history of entered lines (empty lines are
  not stored; at most 1000 lines are kept).
- Left and right arrows move the cursor; backspace moves it back one
  place.
- Typing overwrites the character under the cursor, and Enter ends the
  line at the cursor.
- Ctrl-C discards the line and shows a fresh prompt.
- Ctrl-D at the start of a line leaves the shell.

When standard input is not a terminal, each input line is run in turn.
At the end of input the shell prints `exit` and exits with status 0;
the `exit` command exits with its own status (taken modulo 256).

## What it understands

- Words separated by spaces; `'single'` and `"double"` quotes; `\` escapes.
- `;` to run commands one after another; `|` to send a command's output
  into the next command.
- Redirections `<`, `>` (truncate) and `>>` (append). New files are
  created with mode 0600. If an input file cannot be opened, the rest of
  the line is not run.
- `$NAME` expands to an environment variable and `$?` to the last exit
  status. Nothing is expanded inside single quotes.

Syntax errors such as a leading `;`, `;;`, a leading or dangling `|`, or a
redirection without a file name are reported and the line is not run.
An unclosed quote or a trailing `\` is reported as a parse error.

## Built-in commands

| Command  | Behaviour                                                        |
|----------|------------------------------------------------------------------|
| `echo`   | prints its arguments; `-n` (or `-nnn`) suppresses the newline    |
| `cd`     | changes directory (to `$HOME` with no argument), updates `PWD` and `OLDPWD` |
| `pwd`    | prints the current directory                                     |
| `env`    | prints the variables that have a non-empty value                 |
| `export` | sets variables; with no arguments lists them, sorted, as `declare -x` |
| `unset`  | removes variables                                                |
| `exit`   | leaves the shell with the given or last status; with more than one argument it reports an error and stays |

Anything else is looked up on `PATH` (or used as a path when it contains
a `/`) and run as a program with the shell's variables as its
environment. `OLDPWD` is cleared when the shell starts.

## Using it from Python

```python
import io
from rocketshell.builtins import ShellState
from rocketshell.cli import run_session
from rocketshell.environment import copy_environment

state = ShellState(copy_environment({"HOME": "/tmp", "PWD": "/tmp", "OLDPWD": ""}))
out = io.StringIO()
status = run_session(state, ["export GREETING=hello", "echo $GREETING world"], out, io.StringIO())
print(out.getvalue())   # "hello world\nexit\n"
print(status)           # 0
```

Other entry points:

- `rocketshell.executor.run_line(state, line, out, err)` runs one line and
  returns the exit status; `execute` does the same for a token list.
- `rocketshell.lexer.tokenize(line)` returns `Token` objects and raises
  `LexError` on bad quoting.
- `rocketshell.syntax.validate(args)` raises `ShellSyntaxError` for
  misplaced `;` or `|`.
- `rocketshell.expand.expand_word(word, env, exit_status)` expands
  variables and removes quotes.
- `rocketshell.environment.Environment` holds the variable table.
- `rocketshell.lineedit.LineEditor` and `History` implement the prompt.

## What it does not do

- No `&&`, `||`, subshells, background jobs or job control.
- No wildcard (glob) expansion, here-documents or `2>` redirections.
- Built-in commands do not read piped input; only programs do.
- History is kept in memory only, for the length of the session.