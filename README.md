# argcompose

Small, composable command line parsers. Each option, switch, positional
argument or subcommand is a `Parser`; parsers are combined into bigger ones,
and the result knows how to parse arguments and how to describe itself in a
generated `--help` message.

The package is a library only: it installs no command of its own.

## Modules

- `argcompose.params` – primitive parsers: `short`, `long`, `Named`,
  `positional`, `positional_os`, `positional_if`, `command`, `cargo_helper`.
- `argcompose.parser` – the `Parser` class and the combinators `construct`
  and `alternatives`.
- `argcompose.info` – `Info` (program description, version, header, footer,
  custom usage) and `OptionParser`, which adds `-h/--help` (and
  `-V/--version` when a version is set) and runs the parser.
- `argcompose.args` – `Args`, the preprocessed command line, and the item
  types `Short`, `Long` and `Word`.
- `argcompose.meta` – the parser descriptions used for usage lines and help.
- `argcompose.errors` – `ParseFailure` and the internal `ParseError` kinds.

## Building blocks

- `short("v")` / `long("verbose")` start a named option. Further calls to
  `.short(...)` and `.long(...)` add hidden aliases, `.help(...)` attaches a
  description.
- A named option becomes a parser with `.switch()` (a `bool`),
  `.flag(present, absent)`, `.req_flag(present)` (required),
  `.argument("METAVAR")` (the value must be valid UTF-8) or
  `.argument_os("METAVAR")` (the raw value).
- `positional("FILE")`, `positional_os("FILE")` and
  `positional_if("FILE", check)` take positional words; `positional_if`
  produces `None` when the next word is rejected by `check` or nothing is
  left.
- `command(name, help, subparser)` turns a complete `OptionParser` into a
  subcommand.
- `construct(a, b, c, into=SomeType)` runs parsers in sequence and passes
  their results positionally to `into` (or returns a tuple without it);
  `alternatives(a, b, c)` accepts one of them, the same as
  `a.or_else(b).or_else(c)`. When several alternatives succeed, the one that
  consumed the leftmost item wins.
- `cargo_helper(cmd, parser)` skips a leading `cmd` word if present.

Parsers are refined with:

- `.map(func)` – transform the value.
- `.parse(func)` / `.from_str(converter)` – transform with a function that may
  raise `ValueError`; the error becomes a message such as
  `Couldn't parse "x12": ...`.
- `.guard(check, message)` – fail with `message` unless `check(value)`.
- `.optional()`, `.fallback(value)`, `.fallback_with(func)`,
  `.default(factory)` – values for absent items; a value that is present but
  fails to parse still fails.
- `.many()` and `.some(message)` – zero-or-more and one-or-more repetitions.
- `.group_help(message)` – a heading for a group in the help listing.
- `.hide()` – leave the parser out of usage and help.

`Parser.pure(value)` produces a value without consuming anything, and
`Parser.fail(message)` always fails.

## Example

```python
from dataclasses import dataclass

from argcompose.errors import ParseFailure
from argcompose.info import Info
from argcompose.params import long, positional, short
from argcompose.parser import construct


@dataclass
class Options:
    verbose: bool
    width: int
    files: list


verbose = short("v").long("verbose").help("Print more").switch()
width = (
    long("width")
    .help("Sets width")
    .argument("PX")
    .from_str(int)
    .guard(lambda n: n > 0, "Width must be positive")
    .fallback(10)
)
files = positional("FILE").many()

parser = (
    Info()
    .with_descr("Processes some files")
    .with_version("1.0")
    .for_parser(construct(verbose, width, files, into=Options))
)

options = parser.run_inner(["-v", "--width", "20", "a.txt"])
# Options(verbose=True, width=20, files=['a.txt'])

try:
    parser.run_inner(["--help"])
except ParseFailure as failure:
    print(failure.unwrap_stdout())
```

`--help` prints:

```
Processes some files

Usage: [-v] [--width PX] <FILE>...

Available options:
    -v, --verbose     Print more
        --width <PX>  Sets width
    -h, --help        Prints help information
    -V, --version     Prints version information
```

and `--version` (or `-V`) gives `Version: 1.0`.

## Running a program

`OptionParser.run(argv=None)` parses `argv`, or the process's own arguments
(`sys.argv[1:]`) when none are given. On success it returns the parsed value;
when help or version output is requested it prints it and exits with status
0, and on a parse error it prints the message to standard error and exits
with status 1.

`OptionParser.run_inner(args)` does the same parsing without printing or
exiting, which makes it the right tool for tests. It takes an `Args` or any
iterable of strings, and raises `ParseFailure`, whose `unwrap_stdout()`
returns help or version text and whose `unwrap_stderr()` returns an error
message; each raises `ValueError` when the failure is of the other kind.

Command line words are split the usual way: `-abc` is three short flags,
`--name=value` and `-n=value` carry their value, and everything after `--`
is positional.

## Subcommands

```python
from argcompose.info import Info
from argcompose.params import command, long

workspace = long("workspace").help("Check all packages in the workspace").switch()
check = command(
    "check",
    "Check a local package for errors",
    Info().with_descr("Check a package for errors").for_parser(workspace),
)
program = Info().for_parser(check)
```

`prog --help` lists `check` under "Available commands", while
`prog check --help` shows the help of the subcommand itself.