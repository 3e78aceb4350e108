"""Primitive parsers: flags, switches, arguments, positionals and commands.

A *flag* takes no value and decodes to a fixed value, a *switch* is a flag
decoded to a bool, an *argument* is a named option that takes a value, a
*positional* is an unnamed word and a *command* starts an independent
subparser.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Callable, Protocol, TypeVar

from argcompose.args import Arg, Args, Word
from argcompose.errors import MissingItems
from argcompose.meta import Item, ItemKind, ItemMeta
from argcompose.parser import Parser, construct

T = TypeVar("T")

_ABSENT: Any = object()


class _HasParseFn(Protocol):
    parse_fn: Callable[[Args], "tuple[Any, Args]"]


def _utf8(word: Word) -> str:
    if word.utf8 is None:
        raise ValueError("not utf8")
    return word.utf8


def _os(word: Word) -> str:
    return word.os


def _matches(shorts: tuple[str, ...], longs: tuple[str, ...]) -> Callable[[Arg], bool]:
    def predicate(arg: Arg) -> bool:
        return any(arg.is_short(c) for c in shorts) or any(arg.is_long(n) for n in longs)

    return predicate


@dataclass(frozen=True)
class Named:
    """A named item from which a flag, switch or argument is built.

    Names past the first short and the first long one are hidden aliases.
    """

    shorts: tuple[str, ...] = ()
    longs: tuple[str, ...] = ()
    help_text: str | None = None

    def short(self, short: str) -> Named:
        """Add a short name."""
        return replace(self, shorts=(*self.shorts, short))

    def long(self, long: str) -> Named:
        """Add a long name."""
        return replace(self, longs=(*self.longs, long))

    def help(self, help: str) -> Named:
        """Set the help message."""
        return replace(self, help_text=str(help))

    def _item(self, metavar: str | None = None) -> Item:
        return Item(
            ItemKind.FLAG,
            short=self.shorts[0] if self.shorts else None,
            long=self.longs[0] if self.longs else None,
            metavar=metavar,
            help=self.help_text,
        )

    def _flag_parser(self, present: T, absent: T) -> Parser[T]:
        required = absent is _ABSENT
        meta = self._item().required(required)
        predicate = _matches(self.shorts, self.longs)

        def parse_fn(args: Args) -> tuple[T, Args]:
            if args.take_flag(predicate):
                return present, args
            if required:
                raise MissingItems([meta])
            return absent, args

        return Parser(parse_fn, meta)

    def switch(self) -> Parser[bool]:
        """True when the flag is present, False otherwise."""
        return self._flag_parser(True, False)

    def flag(self, present: T, absent: T) -> Parser[T]:
        """``present`` when the flag is given, ``absent`` otherwise."""
        return self._flag_parser(present, absent)

    def req_flag(self, present: T) -> Parser[T]:
        """``present`` when the flag is given; fails otherwise."""
        return self._flag_parser(present, _ABSENT)

    def _argument(self, metavar: str) -> Parser[Word]:
        meta = self._item(metavar).required(True)
        predicate = _matches(self.shorts, self.longs)

        def parse_fn(args: Args) -> tuple[Word, Args]:
            word = args.take_arg(predicate)
            if word is None:
                raise MissingItems([meta])
            return word, args

        return Parser(parse_fn, meta)

    def argument(self, metavar: str) -> Parser[str]:
        """A required named argument whose value must be valid UTF-8."""
        return self._argument(metavar).parse(_utf8)

    def argument_os(self, metavar: str) -> Parser[str]:
        """A required named argument with the raw OS value."""
        return self._argument(metavar).map(_os)


def short(short: str) -> Named:
    """Start a named item with a short name."""
    return Named(shorts=(short,))


def long(long: str) -> Named:
    """Start a named item with a long name."""
    return Named(longs=(long,))


def _positional(metavar: str) -> Parser[Word]:
    meta = Item(ItemKind.POSITIONAL, metavar=metavar).required(True)

    def parse_fn(args: Args) -> tuple[Word, Args]:
        word = args.take_positional_word()
        if word is None:
            raise MissingItems([meta])
        return word, args

    return Parser(parse_fn, meta)


def positional(metavar: str) -> Parser[str]:
    """A positional argument whose value must be valid UTF-8."""
    return _positional(metavar).parse(_utf8)


def positional_os(metavar: str) -> Parser[str]:
    """A positional argument with the raw OS value."""
    return _positional(metavar).map(_os)


def positional_if(metavar: str, check: Callable[[str], bool]) -> Parser[str | None]:
    """A positional argument taken only when ``check`` accepts it.

    Produces None when the next item is a word that ``check`` rejects or
    when nothing is left.
    """
    meta = Item(ItemKind.POSITIONAL, metavar=metavar).required(False)

    def accepts(word: Word) -> bool:
        return word.utf8 is not None and check(word.utf8)

    def parse_fn(args: Args) -> tuple[Word | None, Args]:
        first = args.peek()
        if first is None:
            return None, args
        if not isinstance(first, Word):
            raise MissingItems([meta])
        if not accepts(first):
            return None, args
        return args.take_positional_word(), args

    def convert(word: Word | None) -> str | None:
        return None if word is None else _utf8(word)

    return Parser(parse_fn, meta).parse(convert)


def command(name: str, help: str | None, subparser: _HasParseFn) -> Parser[Any]:
    """A subcommand: the word ``name`` followed by what ``subparser`` accepts."""
    meta = ItemMeta(
        Item(ItemKind.COMMAND, long=name, help=None if help is None else str(help))
    )

    def parse_fn(args: Args) -> tuple[Any, Args]:
        if args.take_cmd(name):
            return subparser.parse_fn(args)
        raise MissingItems([meta])

    return Parser(parse_fn, meta)


def cargo_helper(cmd: str, parser: Parser[T]) -> Parser[T]:
    """Skip a leading ``cmd`` word, as passed when run as a cargo-style subcommand."""
    skip = positional_if("", lambda word: word == cmd).optional().hide()
    return construct(skip, parser).map(lambda values: values[1])