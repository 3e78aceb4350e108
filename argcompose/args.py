"""Preprocessed command line arguments and the operations that consume them."""

from __future__ import annotations

import sys
from dataclasses import dataclass
from os import fsdecode
from typing import Callable, Iterable, Iterator

from argcompose.errors import StderrMessage

NO_HEAD = sys.maxsize


class Arg:
    """A single preprocessed command line item."""

    def is_short(self, short: str) -> bool:
        """True if this is the short flag ``short``."""
        return False

    def is_long(self, long: str) -> bool:
        """True if this is the long flag ``long``."""
        return False


@dataclass(frozen=True)
class Short(Arg):
    """A short flag such as ``-v``."""

    name: str

    def is_short(self, short: str) -> bool:
        return self.name == short

    def __str__(self) -> str:
        return f"-{self.name}"


@dataclass(frozen=True)
class Long(Arg):
    """A long flag such as ``--verbose``."""

    name: str

    def is_long(self, long: str) -> bool:
        return self.name == long

    def __str__(self) -> str:
        return f"--{self.name}"


@dataclass(frozen=True)
class Word(Arg):
    """A plain word: command, positional or flag value.

    ``os`` holds the raw text as the OS gave it; ``utf8`` is the same text
    when it is valid UTF-8, otherwise None.
    """

    utf8: str | None
    os: str

    @classmethod
    def from_os(cls, text: str | bytes) -> Word:
        raw = fsdecode(text) if isinstance(text, bytes) else text
        try:
            raw.encode("utf-8")
        except UnicodeEncodeError:
            return cls(None, raw)
        return cls(raw, raw)

    def __str__(self) -> str:
        if self.utf8 is None:
            raise ValueError("word is not valid utf-8")
        return self.utf8


def _split_one(text: str) -> Iterator[Arg]:
    if text.startswith("--"):
        body = text[2:]
        key, sep, val = body.partition("=")
        if sep:
            yield Long(key)
            yield Word(val, val)
        else:
            yield Long(body)
    elif text.startswith("-"):
        body = text[1:]
        key, sep, val = body.partition("=")
        if sep:
            if len(key.encode("utf-8")) != 1:
                raise ValueError("short flag with argument must have only one key")
            yield Short(key)
            yield Word(val, val)
        else:
            yield from (Short(ch) for ch in body)
    else:
        yield Word(text, text)


def split_arguments(raw: Iterable[str | bytes]) -> list[Arg]:
    """Split raw command line strings into flags and words.

    Everything after ``--`` and every item that is not valid UTF-8 is a word.
    """
    result: list[Arg] = []
    positional_only = False
    for item in raw:
        word = Word.from_os(item)
        if positional_only or word.utf8 is None:
            result.append(word)
        elif word.utf8 == "--":
            positional_only = True
        else:
            result.extend(_split_one(word.utf8))
    return result


class Args:
    """The command line items that are still present."""

    def __init__(self, raw: Iterable[str | bytes] = ()) -> None:
        self._setup(tuple(split_arguments(raw)))

    @classmethod
    def from_items(cls, items: Iterable[Arg]) -> Args:
        """Build from already preprocessed items."""
        obj = cls.__new__(cls)
        obj._setup(tuple(items))
        return obj

    def _setup(self, items: tuple[Arg, ...]) -> None:
        self._items = items
        self._removed = [False] * len(items)
        self._remaining = len(items)
        self.current: Word | None = None
        self.head = NO_HEAD

    def copy(self) -> Args:
        """Independent copy sharing the immutable item list."""
        other = Args.__new__(Args)
        other._items = self._items
        other._removed = list(self._removed)
        other._remaining = self._remaining
        other.current = self.current
        other.head = self.head
        return other

    def _present(self) -> Iterator[tuple[int, Arg]]:
        for index, (item, gone) in enumerate(zip(self._items, self._removed)):
            if not gone:
                yield index, item

    def __iter__(self) -> Iterator[Arg]:
        return (item for _, item in self._present())

    def __len__(self) -> int:
        return self._remaining

    def __repr__(self) -> str:
        return f"Args({[item for item in self]!r})"

    def remove(self, index: int) -> None:
        """Mark the item at ``index`` as consumed."""
        if not self._removed[index]:
            self._remaining -= 1
            self.head = min(self.head, index)
        self._removed[index] = True

    def is_empty(self) -> bool:
        return self._remaining == 0

    def _find(self, predicate: Callable[[Arg], bool]) -> tuple[Iterator[tuple[int, Arg]], tuple[int, Arg] | None]:
        present = self._present()
        for index, item in present:
            if predicate(item):
                return present, (index, item)
        return present, None

    def take_flag(self, predicate: Callable[[Arg], bool]) -> bool:
        """Consume the first item matching ``predicate``; report whether found."""
        _, found = self._find(predicate)
        if found is None:
            return False
        self.remove(found[0])
        return True

    def take_arg(self, predicate: Callable[[Arg], bool]) -> Word | None:
        """Consume a matching flag together with the word that follows it.

        Returns None if the flag is absent and raises StderrMessage if the
        value is missing or is itself a flag.
        """
        rest, found = self._find(predicate)
        if found is None:
            return None
        key_index, key = found
        following = next(rest, None)
        if following is None:
            raise StderrMessage(f"{key} requires an argument")
        value_index, value = following
        if not isinstance(value, Word):
            raise StderrMessage(f"{key} requires an argument, got flag {value}")
        self.current = value
        self.remove(key_index)
        self.remove(value_index)
        return value

    def take_positional_word(self) -> Word | None:
        """Consume the first present item if it is a word.

        Returns None when nothing is left; raises StderrMessage when the
        first item is a flag.
        """
        first = next(self._present(), None)
        if first is None:
            return None
        index, item = first
        if not isinstance(item, Word):
            raise StderrMessage(f"Expected an argument, got {item}")
        self.current = item
        self.remove(index)
        return item

    def take_cmd(self, word: str) -> bool:
        """Consume the first present item if it is the word ``word``."""
        first = next(self._present(), None)
        if first is not None:
            index, item = first
            if isinstance(item, Word) and item.utf8 == word:
                self.remove(index)
                return True
        return False

    def peek(self) -> Arg | None:
        """The first present item, if any."""
        return next(iter(self), None)