# minishell

The core of a small Bourne-style shell, as a Python library. It works on
input that has already been split into tokens or built into commands. It
checks token lists for syntax errors, expands variables, sets up
redirections and here-documents, runs built-in commands inside the calling
process and starts every other command as a child process, alone or in a
pipeline.

## Modules

- `minishell.tokens`: token kinds (`TokenType`), quoting states (`State`),
  the `Token` record, the predicates `is_word_like`, `is_redirection` and
  `is_quote`, and the position helpers `skip_spaces`, `skip_quoted_run` and
  `skip_word_run`.
- `minishell.syntax`: `has_syntax_error(tokens)` returns True for a leading
  or trailing pipe, two pipes in a row, or a redirection with no target.
- `minishell.environment`: `Environment` keeps shell variables in the order
  they were defined. A value of `None` means the variable was declared
  without a value. It has `from_strings`, `get`, `set`, `unset`, `to_list`
  and `expand`, where `expand(arg, exit_status)` resolves `$NAME` and `$?`.
  `getenv(name, env_list)` looks a name up in a list of `NAME=value` strings.
- `minishell.command`: `Command`, `Redirect`, `RedirType` and `HereDoc`, where
  `HereDoc.path()` names the temporary file under `/tmp` that holds its body.
  It also has the helpers `has_pipe`, `count_pipes`, `count_heredocs`,
  `has_heredoc`, `has_file_redirect` and `redirect_symbol`.
- `minishell.builtins`: `echo`, `pwd`, `cd`, `export`, `unset`, `print_env`
  (the `env` built-in), `print_export` and `exit_builtin`, which raises
  `ShellExit`. `run_builtin` dispatches on the command name. `is_builtin` and
  `runs_in_parent` classify commands, and `is_number`, `is_valid_identifier`,
  `is_valid_export` and `split_assignment` do the argument checks.
- `minishell.heredoc`: `read_heredocs` reads every here-document body through
  a `read_line(prompt)` callable. Lines are expanded with
  `expand_heredoc_line` when the here-document asks for it. The module also
  has `collect_heredoc`, `write_heredoc_line`, `create_heredoc_files` and
  `delete_heredoc_files`.
- `minishell.redirections`: `open_redirections` opens `<`, `>` and `>>`
  targets in order and raises `RedirectionError` for ambiguous or missing
  targets. `check_redirect_files` tests that every target can be opened.
  `last_heredoc_file` opens the body of a command's last here-document.
- `minishell.pathsearch`: `resolve_command` looks a name up on `PATH`, or in
  the working directory when `PATH` is unset. `check_executable` raises
  `CommandError` with the matching exit status. `is_directory` is also here.
- `minishell.executor`: `execute(env, commands, status, read_line, out, err)`
  runs a parsed command line and returns the new exit status. `run_simple`
  and `run_pipeline` run one command or a pipeline. `split_pipeline` drops
  the pipe markers from a command list.

## Example

```python
import io

from minishell import builtins
from minishell.command import Command
from minishell.environment import Environment
from minishell.executor import execute

env = Environment.from_strings(["HOME=/home/user", "GREETING=hello"])
print(env.get("GREETING"))         # hello
print(env.expand("$GREETING", 0))  # hello
print(env.expand("$?", 2))         # 2

out = io.StringIO()
builtins.echo(["echo", "-n", "hi"], out)
print(repr(out.getvalue()))        # 'hi'

out, err = io.StringIO(), io.StringIO()
status = execute(env, [Command(args=["echo", "hi"])], 0, input, out, err)
print(status, repr(out.getvalue()))  # 0 'hi\n'
```

`exit` raises `builtins.ShellExit`. Its `code` attribute holds the status the
shell should end with.

## Exit status

A command that cannot be found ends with status 127. A command that exists
but cannot be run, such as a directory or a file without execute permission,
ends with 126. A child killed by a signal ends with 128 plus the signal
number. A failed redirection ends with 1, and so does here-document input
that is interrupted.

## What it does not do

The package does not read a raw command line. It has no lexer that turns text
into `Token` lists and no parser that builds `Command` lists from tokens: the
caller supplies both. It has no interactive prompt and installs no command to
run.

## Running the tests

The test suite uses pytest, which is listed in the `test` extra.