# minish

`minish` is a library that holds the pieces of a small interactive shell in
the style of bash. It provides:

- an environment table
- `$VAR` and `$?` expansion
- a lexer for words, quotes, pipes and redirections
- a parser that builds a pipeline tree
- the builtins `echo`, `pwd`, `env`, `cd`, `export`, `unset` and `exit`
- handling of the `<`, `>`, `>>` and `<<` redirections, including here-documents

It uses only the standard library and supports Python 3.10 and later.

## Modules

| Module | What it does |
| --- | --- |
| `minish.environment` | `Environment` is an ordered table of variables. It is built from `NAME=value` strings with `Environment.from_envp` and turned back into them with `to_envp`. |
| `minish.expander` | `expand_variables(text, env, exit_status)` replaces `$NAME` and `$?` outside single quotes. `QuoteState` tracks the quoting. `neutralize` and `restore` hide special characters that come from variable values, and show them again. |
| `minish.syntax` | `check_quotes` and `check_pipes` raise `ShellSyntaxError` for an unclosed quote, a leading or trailing pipe, or `||`. |
| `minish.lexer` | `tokenize` turns a line into a list of `Token`s that ends with a `TokenType.EOF` token. Sequences such as `<<<` or `>><` raise `LexError`. |
| `minish.parser` | `parse_pipeline` and `parse_command` build `AstNode` trees, in which pipes nest to the left. A leading pipe, a missing command after a pipe, or a redirection without a target raises `ParseError`. |
| `minish.builtins` | The builtin commands, `run_builtin`, `DirectoryChanger` for `cd` and `cd -`, and `ShellExit`, which `exit` raises. |
| `minish.redirections` | `apply_redirections`, `touch_redirections`, here-document reading (`read_heredoc_lines`, `process_heredoc`, `preprocess_heredocs`) and `cleanup_heredocs`. Problems opening files raise `RedirectionError`. |

## A short tour

```python
import io

from minish.builtins import builtin_echo
from minish.environment import Environment
from minish.expander import expand_variables
from minish.lexer import tokenize
from minish.parser import parse_pipeline
from minish.syntax import check_quotes

env = Environment.from_envp(["HOME=/home/user", "GREETING=hello"])

line = "echo \"$GREETING\" world | cat > out.txt"
check_quotes(line)                      # raises ShellSyntaxError if a quote is left open
expanded = expand_variables(line, env, 0)
tree = parse_pipeline(tokenize(expanded))
# tree.left.args == ["echo", "hello", "world"]
# tree.right.args == ["cat"], with one ">" redirection to "out.txt"

out = io.StringIO()
builtin_echo(["echo", "-n", "hi"], out)
assert out.getvalue() == "hi"
```

### Environment

`export NAME` keeps a variable that has no value. Such a variable is:

- left out of `env` output and of `Environment.to_envp()`;
- still listed by `Environment.entries()` and `Environment.sorted_entries()`.

A bare `export` prints the sorted entries in the form `declare -x NAME="value"`.

### Exit

`builtin_exit` does not stop the interpreter. It raises `ShellExit`, and the status is in `ShellExit.status`:

- with no argument, the status is 0;
- with a non-numeric or out-of-range argument, the status is 2;
- otherwise the status is the number modulo 256.

If `exit` gets more than one argument, it prints an error and returns 1.

### Redirections

`apply_redirections` opens the redirections in order and returns an object with `stdin` and `stdout` binary streams. A later redirection replaces an earlier one of the same direction. The object can be used as a context manager, which closes both streams.

`touch_redirections` handles a line that has redirections but no command:

- output files are created;
- input files must exist;
- here-document files are removed.

### Here-documents

`process_heredoc` reads lines until the delimiter and writes them into a new file in the current directory. The file has a random 32-character name, stored in `node.heredoc_tmpfile`. Lines are read with `input()` by default; a different `reader` callable can be passed instead. `cleanup_heredocs` deletes these files for a whole tree.

## What it does not do

The package does not:

- give you a shell to run: there is no command-line program and no read–eval loop;
- start external commands or connect pipelines between processes;
- search `PATH`.

It parses lines and runs builtins against text streams you pass in. Running the resulting tree is left to the caller.

## Running the tests

Install the package with its `test` extra, then run `pytest` from the project directory.