"""Descriptions of parsers used for usage lines and help messages."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterator


class ItemKind(Enum):
    """What a single described item is."""

    FLAG = "flag"
    COMMAND = "command"
    DECOR = "decor"
    POSITIONAL = "positional"


@dataclass(frozen=True)
class Item:
    """A single flag, argument, positional, command or help decoration."""

    kind: ItemKind
    short: str | None = None
    long: str | None = None
    metavar: str | None = None
    help: str | None = None

    def __str__(self) -> str:
        if self.kind is ItemKind.FLAG:
            if self.short is not None:
                name = f"-{self.short}"
            elif self.long is not None:
                name = f"--{self.long}"
            else:
                raise ValueError("flag item has neither a short nor a long name")
            return name if self.metavar is None else f"{name} {self.metavar}"
        if self.kind is ItemKind.COMMAND:
            return "COMMAND ..."
        if self.kind is ItemKind.POSITIONAL:
            return f"<{self.metavar if self.metavar is not None else 'FILE'}>"
        return ""

    def required(self, required: bool) -> Meta:
        """Wrap the item as a required or an optional meta."""
        inner = ItemMeta(self)
        return Required(inner) if required else Optional(inner)

    def name_len(self) -> int:
        """Width the long name and metavar take in the help listing."""
        width = 0
        if self.long is not None:
            width += len(self.long) + 3
        if self.metavar is not None:
            width += len(self.metavar) + 2
        return width

    @classmethod
    def decoration(cls, help: str | None) -> Item:
        """A help-only line, used to frame groups of options."""
        return cls(ItemKind.DECOR, help=None if help is None else str(help))

    def is_command(self) -> bool:
        return self.kind is ItemKind.COMMAND

    def is_flag(self) -> bool:
        return self.kind in (ItemKind.FLAG, ItemKind.DECOR)


class Meta:
    """Structure of a parser: what it accepts and how it is shown.

    The base behaviour is that of a meta describing nothing.
    """

    def is_required(self) -> bool:
        return False

    def is_empty(self) -> bool:
        return True

    def is_simple(self) -> bool:
        return True

    def _collect(self, pred: Callable[[Item], bool]) -> Iterator[Item]:
        return iter(())

    def __str__(self) -> str:
        return ""

    def or_(self, other: Meta) -> Meta:
        """Combine as alternatives."""
        if isinstance(self, (Identity, Empty)):
            return other
        if isinstance(other, (Identity, Empty)):
            return self
        if isinstance(self, Or) and isinstance(other, Or):
            return Or((*self.items, *other.items))
        if isinstance(self, Or):
            return Or((*self.items, other))
        if isinstance(other, Or):
            return Or((*other.items, self))
        return Or((self, other))

    def and_(self, other: Meta) -> Meta:
        """Combine as a sequence."""
        if isinstance(self, Identity):
            return other
        if isinstance(other, Identity):
            return self
        if isinstance(self, And) and isinstance(other, And):
            return And((*self.items, *other.items))
        if isinstance(self, And):
            return And((*self.items, other))
        if isinstance(other, And):
            return And((*other.items, self))
        return And((self, other))

    def optional(self) -> Meta:
        if isinstance(self, Required):
            return Optional(self.inner)
        return Optional(self)

    def required(self) -> Meta:
        return Required(self)

    def many(self) -> Meta:
        return Many(self)

    def decorate(self, msg: str) -> Meta:
        return Decorated(self, str(msg))

    def commands(self) -> list[Item]:
        """All command items, in order."""
        return list(self._collect(Item.is_command))

    def flags(self) -> list[Item]:
        """All flag items with group decorations, in order."""
        return list(self._collect(Item.is_flag))


@dataclass(frozen=True)
class Empty(Meta):
    """A parser that always fails and shows nothing."""


@dataclass(frozen=True)
class Identity(Meta):
    """A parser that consumes nothing and shows nothing."""


@dataclass(frozen=True)
class And(Meta):
    """All parts in sequence."""

    items: tuple[Meta, ...]

    def is_required(self) -> bool:
        return any(x.is_required() for x in self.items)

    def is_empty(self) -> bool:
        return all(x.is_empty() for x in self.items)

    def is_simple(self) -> bool:
        return False

    def _collect(self, pred: Callable[[Item], bool]) -> Iterator[Item]:
        for x in self.items:
            yield from x._collect(pred)

    def __str__(self) -> str:
        parts = []
        last = len(self.items) - 1
        for ix, x in enumerate(self.items):
            parts.append(str(x))
            if ix < last and not x.is_empty():
                parts.append(" ")
        return "".join(parts)


@dataclass(frozen=True)
class Or(Meta):
    """One of the alternatives."""

    items: tuple[Meta, ...]

    def is_required(self) -> bool:
        return all(x.is_required() for x in self.items)

    def is_empty(self) -> bool:
        return all(x.is_empty() for x in self.items)

    def is_simple(self) -> bool:
        return False

    def _collect(self, pred: Callable[[Item], bool]) -> Iterator[Item]:
        for x in self.items:
            yield from x._collect(pred)

    def _deduplicated(self) -> list[Meta]:
        shown: list[Meta] = []
        prev: Item | None = None
        for x in self.items:
            if isinstance(x, ItemMeta):
                if (
                    prev is not None
                    and prev.kind is ItemKind.COMMAND
                    and x.item.kind is ItemKind.COMMAND
                ):
                    continue
                prev = x.item
            shown.append(x)
        return shown

    def __str__(self) -> str:
        shown = self._deduplicated()
        body = " | ".join(str(x) for x in shown)
        if not self.is_required():
            return f"[{body}]"
        if len(shown) > 1:
            return f"({body})"
        return body


@dataclass(frozen=True)
class Required(Meta):
    """The inner part must be present."""

    inner: Meta

    def is_required(self) -> bool:
        return True

    def is_empty(self) -> bool:
        return self.inner.is_empty()

    def is_simple(self) -> bool:
        return self.inner.is_simple()

    def _collect(self, pred: Callable[[Item], bool]) -> Iterator[Item]:
        return self.inner._collect(pred)

    def __str__(self) -> str:
        if self.inner.is_simple():
            return str(self.inner)
        return f"({self.inner})"


@dataclass(frozen=True)
class Optional(Meta):
    """The inner part may be absent."""

    inner: Meta

    def is_empty(self) -> bool:
        return self.inner.is_empty()

    def is_simple(self) -> bool:
        return self.inner.is_simple()

    def _collect(self, pred: Callable[[Item], bool]) -> Iterator[Item]:
        return self.inner._collect(pred)

    def __str__(self) -> str:
        return f"[{self.inner}]"


@dataclass(frozen=True)
class Many(Meta):
    """The inner part repeated any number of times."""

    inner: Meta

    def is_empty(self) -> bool:
        return self.inner.is_empty()

    def is_simple(self) -> bool:
        return self.inner.is_simple()

    def _collect(self, pred: Callable[[Item], bool]) -> Iterator[Item]:
        return self.inner._collect(pred)

    def __str__(self) -> str:
        return f"{self.inner}..."


@dataclass(frozen=True)
class ItemMeta(Meta):
    """A single described item."""

    item: Item

    def is_required(self) -> bool:
        if self.item.kind is ItemKind.COMMAND:
            return True
        if self.item.kind is ItemKind.DECOR:
            return False
        raise ValueError(f"bare {self.item.kind.value} item has no required marker")

    def is_empty(self) -> bool:
        return False

    def _collect(self, pred: Callable[[Item], bool]) -> Iterator[Item]:
        if pred(self.item):
            yield self.item

    def __str__(self) -> str:
        return str(self.item)


@dataclass(frozen=True)
class Decorated(Meta):
    """The inner part with a group help message."""

    inner: Meta
    msg: str

    def is_required(self) -> bool:
        return self.inner.is_required()

    def is_empty(self) -> bool:
        return self.inner.is_empty()

    def is_simple(self) -> bool:
        return self.inner.is_simple()

    def _collect(self, pred: Callable[[Item], bool]) -> Iterator[Item]:
        found = list(self.inner._collect(pred))
        if found:
            yield Item.decoration(self.msg)
            yield from found
            yield Item.decoration(None)

    def __str__(self) -> str:
        return str(self.inner)