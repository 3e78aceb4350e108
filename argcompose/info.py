"""Program information, help rendering and the top level parser."""

from __future__ import annotations

import sys
from dataclasses import dataclass, replace
from typing import Any, Callable, Generic, Iterable, TypeVar

from argcompose.args import Args
from argcompose.errors import (
    MissingItems,
    ParseError,
    ParseFailure,
    StderrMessage,
    StdoutMessage,
)
from argcompose.meta import Meta, Or
from argcompose.params import short
from argcompose.parser import Parser

T = TypeVar("T")


@dataclass(frozen=True)
class ExtraParams:
    """Result of the built-in parser: a help request or a version request."""

    version: str | None = None

    @property
    def is_help(self) -> bool:
        return self.version is None


def _check_unexpected(result: tuple[Any, Args]) -> tuple[Any, Args]:
    _, args = result
    item = args.peek()
    if item is not None:
        raise StderrMessage(f"{item} is not expected in this context")
    return result


def _strip_spaces(text: str) -> str:
    return text.rstrip(" ")


@dataclass(frozen=True)
class Info:
    """Information about the program shown in help output."""

    version: str | None = None
    descr: str | None = None
    header: str | None = None
    footer: str | None = None
    usage: str | None = None

    def with_version(self, version: str) -> Info:
        """Set the version; this also enables ``-V`` / ``--version``."""
        return replace(self, version=version)

    def with_descr(self, descr: str) -> Info:
        """Set the program description."""
        return replace(self, descr=descr)

    def with_header(self, header: str) -> Info:
        """Set a custom text shown before the options."""
        return replace(self, header=header)

    def with_footer(self, footer: str) -> Info:
        """Set a custom text shown after the options."""
        return replace(self, footer=footer)

    def with_usage(self, usage: str) -> Info:
        """Replace the generated usage line with a custom one."""
        return replace(self, usage=usage)

    def _help_parser(self) -> Parser[ExtraParams]:
        help_flag = (
            short("h").long("help").help("Prints help information").req_flag(ExtraParams())
        )
        if self.version is None:
            return help_flag
        version_flag = (
            short("V")
            .long("version")
            .help("Prints version information")
            .req_flag(ExtraParams(self.version))
        )
        return help_flag.or_else(version_flag)

    def render_help(self, parser_meta: Meta, help_meta: Meta) -> str:
        """Render the full help message for a parser."""
        res = ""
        if self.descr is not None:
            res += f"{self.descr}\n\n"
        if self.usage is not None:
            res += f"{self.usage}\n\n"
        else:
            res = _strip_spaces(res + f"Usage: {parser_meta}") + "\n"
        if self.header is not None:
            res += f"\n{self.header}\n"

        meta = parser_meta.and_(help_meta)
        flags = meta.flags()
        width = max((item.name_len() for item in flags), default=0)
        if flags:
            res += "\nAvailable options:\n"
        for item in flags:
            res += f"    -{item.short}" if item.short is not None else "      "
            res += ", " if item.short is not None and item.long is not None else "  "
            if item.long is None and item.metavar is None:
                res += " " * (width + 2)
            elif item.long is None:
                res += f"<{item.metavar}>" + " " * max(0, width - len(item.metavar))
            elif item.metavar is None:
                res += "--" + item.long.ljust(width)
            else:
                res += "--" + f"{item.long} <{item.metavar}>".ljust(width)
            if item.help is None:
                res = _strip_spaces(res) + "\n"
            else:
                first, *rest = item.help.split("\n")
                res += f"{first}\n"
                for line in rest:
                    res += " " * (width + 10) + f"{line}\n"

        commands = meta.commands()
        if commands:
            res += "\nAvailable commands:\n"
        command_width = max((len(c.long or "") for c in commands), default=0)
        for cmd in commands:
            res += "    " + (cmd.long or "").ljust(command_width)
            if cmd.help is None:
                res = _strip_spaces(res) + "\n"
            else:
                res += f"  {cmd.help}\n"

        if self.footer is not None:
            res += f"\n{self.footer}\n"
        return res

    def for_parser(self, parser: Parser[T]) -> OptionParser[T]:
        """Attach this information and ``--help`` handling to a parser."""
        help_parser = self._help_parser()

        def parse_fn(args: Args) -> tuple[T, Args]:
            try:
                return _check_unexpected(parser.parse_fn(args.copy()))
            except StdoutMessage:
                raise
            except ParseError as err:
                error = err
            try:
                extra, _ = help_parser.parse_fn(args.copy())
            except ParseError:
                raise error from None
            if extra.is_help:
                raise StdoutMessage(self.render_help(parser.meta, help_parser.meta))
            raise StdoutMessage(f"Version: {extra.version}")

        return OptionParser(parse_fn, parser.meta, help_parser.meta, self)


@dataclass(frozen=True)
class OptionParser(Generic[T]):
    """A parser with program information attached, ready to run."""

    parse_fn: Callable[[Args], "tuple[Any, Args]"]
    parser_meta: Meta
    help_meta: Meta
    info: Info

    def render_help(self) -> str:
        """The help message for this parser."""
        return self.info.render_help(self.parser_meta, self.help_meta)

    def run_inner(self, args: Args | Iterable[str | bytes]) -> T:
        """Parse ``args`` and return the value; raise ParseFailure otherwise."""
        if not isinstance(args, Args):
            args = Args(args)
        try:
            value, rest = self.parse_fn(args)
        except StdoutMessage as msg:
            raise ParseFailure(msg.message, stdout=True) from None
        except StderrMessage as msg:
            raise ParseFailure(msg.message) from None
        except MissingItems as missing:
            raise ParseFailure(
                f"Expected {Or(tuple(missing.metas))}, pass --help for usage information"
            ) from None
        if not rest.is_empty():
            raise ParseFailure(f"unexpected {rest!r}")
        return value

    def run(self, argv: Iterable[str | bytes] | None = None) -> T:
        """Parse the command line, or print a message and exit."""
        if argv is None:
            argv = sys.argv[1:]
        try:
            return self.run_inner(Args(argv))
        except ParseFailure as failure:
            if failure.stdout:
                print(failure.message)
                sys.exit(0)
            print(failure.message, file=sys.stderr)
            sys.exit(1)