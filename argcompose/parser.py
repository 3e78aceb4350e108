"""Composable command line parsers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Generic, TypeVar

from argcompose.args import NO_HEAD, Args, Word
from argcompose.errors import MissingItems, ParseError, StderrMessage, StdoutMessage
from argcompose.meta import And, Empty, Identity, Meta

T = TypeVar("T")
B = TypeVar("B")

ParseFn = Callable[[Args], "tuple[Any, Args]"]


def _quoted(text: str) -> str:
    escaped = (
        text.replace("\\", "\\\\")
        .replace('"', '\\"')
        .replace("\n", "\\n")
        .replace("\r", "\\r")
        .replace("\t", "\\t")
    )
    return f'"{escaped}"'


def _attempt(parse_fn: ParseFn, args: Args) -> tuple[Any, Args] | ParseError:
    try:
        return parse_fn(args)
    except ParseError as err:
        return err


@dataclass(frozen=True)
class Parser(Generic[T]):
    """A simple or composed argument parser.

    ``parse_fn`` takes an :class:`Args` it may consume from and returns the
    produced value with the remaining arguments, or raises a ParseError.
    ``meta`` describes the parser for usage lines and help.
    """

    parse_fn: ParseFn
    meta: Meta

    @classmethod
    def pure(cls, value: T) -> Parser[T]:
        """Produce ``value`` without consuming anything."""
        return cls(lambda args: (value, args), Identity())

    @classmethod
    def fail(cls, msg: str) -> Parser[Any]:
        """Always fail with a fixed error message."""

        def parse_fn(args: Args) -> tuple[Any, Args]:
            raise StderrMessage(str(msg))

        return cls(parse_fn, Empty())

    def ap(self, other: Parser[Any]) -> Parser[Any]:
        """Apply the function this parser produces to the value of ``other``."""

        def parse_fn(args: Args) -> tuple[Any, Args]:
            func, rest = self.parse_fn(args)
            value, rest = other.parse_fn(rest)
            return func(value), rest

        return Parser(parse_fn, self.meta.and_(other.meta))

    def or_else(self, other: Parser[T]) -> Parser[T]:
        """Try both parsers; prefer the one that consumed the leftmost item."""

        def parse_fn(args: Args) -> tuple[T, Args]:
            first_args = args.copy()
            first_args.head = NO_HEAD
            second_args = first_args.copy()
            first = _attempt(self.parse_fn, first_args)
            second = _attempt(other.parse_fn, second_args)

            if isinstance(first, StdoutMessage):
                raise first
            if isinstance(second, StdoutMessage):
                raise second
            first_ok = not isinstance(first, ParseError)
            second_ok = not isinstance(second, ParseError)
            if first_ok and second_ok:
                return first if first[1].head < second[1].head else second
            if first_ok:
                return first
            if second_ok:
                return second
            raise first.combine_with(second)

        return Parser(parse_fn, self.meta.or_(other.meta))

    def many(self) -> Parser[list[T]]:
        """Consume zero or more items, collecting the results in a list.

        The wrapped parser must consume something each time it succeeds;
        otherwise RuntimeError is raised.
        """

        def parse_fn(args: Args) -> tuple[list[T], Args]:
            results: list[T] = []
            size = len(args)
            while True:
                try:
                    value, new_args = self.parse_fn(args.copy())
                except ParseError:
                    break
                if len(new_args) >= size:
                    raise RuntimeError("many can't be used with non failing parser")
                size = len(new_args)
                args = new_args
                results.append(value)
            return results, args

        return Parser(parse_fn, self.meta.many())

    def guard(self, check: Callable[[T], bool], message: str) -> Parser[T]:
        """Fail with ``message`` unless ``check`` accepts the value."""

        def parse_fn(args: Args) -> tuple[T, Args]:
            value, rest = self.parse_fn(args)
            if not check(value):
                raise StderrMessage(message)
            return value, rest

        return Parser(parse_fn, self.meta)

    def some(self, msg: str) -> Parser[list[T]]:
        """Consume one or more items; fail with ``msg`` if there are none."""
        return self.many().guard(lambda values: len(values) > 0, msg)

    def optional(self) -> Parser[T | None]:
        """Produce None when the value is not present."""
        return self.fallback(None)

    def map(self, func: Callable[[T], B]) -> Parser[B]:
        """Apply a pure transformation to the produced value."""

        def parse_fn(args: Args) -> tuple[B, Args]:
            value, rest = self.parse_fn(args)
            return func(value), rest

        return Parser(parse_fn, self.meta)

    def parse(self, func: Callable[[T], B]) -> Parser[B]:
        """Apply a transformation that may raise ValueError.

        The error becomes a parse failure naming the last consumed word.
        """

        def parse_fn(args: Args) -> tuple[B, Args]:
            value, rest = self.parse_fn(args)
            try:
                return func(value), rest
            except ValueError as err:
                current = rest.current
                if isinstance(current, Word) and current.utf8 is not None:
                    raise StderrMessage(
                        f"Couldn't parse {_quoted(current.utf8)}: {err}"
                    ) from err
                raise StderrMessage(f"Couldn't parse: {err}") from err

        return Parser(parse_fn, self.meta)

    def from_str(self, converter: Callable[[str], B]) -> Parser[B]:
        """Convert the produced string with ``converter`` such as ``int``."""
        return self.parse(converter)

    def fallback(self, value: T) -> Parser[T]:
        """Use ``value`` when the item is absent; parse failures still fail."""

        def parse_fn(args: Args) -> tuple[T, Args]:
            try:
                return self.parse_fn(args.copy())
            except StderrMessage:
                raise
            except ParseError:
                return value, args

        return Parser(parse_fn, self.meta.optional())

    def fallback_with(self, func: Callable[[], T]) -> Parser[T]:
        """Use the result of ``func`` when the item is absent.

        An exception from ``func`` becomes a parse failure.
        """

        def parse_fn(args: Args) -> tuple[T, Args]:
            try:
                return self.parse_fn(args.copy())
            except StderrMessage:
                raise
            except ParseError:
                try:
                    return func(), args
                except Exception as err:
                    raise StderrMessage(str(err)) from err

        return Parser(parse_fn, self.meta.optional())

    def default(self, factory: Callable[[], T]) -> Parser[T]:
        """Fall back to a fresh ``factory()`` value when absent."""

        def parse_fn(args: Args) -> tuple[T, Args]:
            try:
                return self.parse_fn(args.copy())
            except StderrMessage:
                raise
            except ParseError:
                return factory(), args

        return Parser(parse_fn, self.meta.optional())

    def group_help(self, msg: str) -> Parser[T]:
        """Attach a help message to a group of options."""
        return Parser(self.parse_fn, self.meta.decorate(msg))

    def hide(self) -> Parser[T]:
        """Leave this parser out of usage and help output."""

        def parse_fn(args: Args) -> tuple[T, Args]:
            try:
                return self.parse_fn(args)
            except ParseError as err:
                raise MissingItems([]) from err

        return Parser(parse_fn, Identity())


def construct(*parsers: Parser[Any], into: Callable[..., Any] | None = None) -> Parser[Any]:
    """Run parsers in sequence; all must succeed.

    The values are passed positionally to ``into``, or returned as a tuple.
    """

    def parse_fn(args: Args) -> tuple[Any, Args]:
        values = []
        for parser in parsers:
            value, args = parser.parse_fn(args)
            values.append(value)
        return (tuple(values) if into is None else into(*values)), args

    return Parser(parse_fn, And(tuple(p.meta for p in parsers)))


def alternatives(*parsers: Parser[Any]) -> Parser[Any]:
    """Accept any one of the parsers, like chained ``or_else``."""
    if not parsers:
        raise ValueError("alternatives needs at least one parser")
    first, *rest = parsers
    for parser in rest:
        first = first.or_else(parser)
    return first