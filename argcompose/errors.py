"""Outcomes of unsuccessful command line parsing."""

from __future__ import annotations

from typing import Any


class ParseError(Exception):
    """Base class for the internal reasons parsing can stop."""

    def combine_with(self, other: ParseError) -> ParseError:
        """Merge two failures from alternative branches.

        Help and version output wins, then hard parse failures, and missing
        items from both sides are concatenated.
        """
        if isinstance(self, StdoutMessage):
            return self
        if isinstance(other, StdoutMessage):
            return other
        if isinstance(self, StderrMessage):
            return self
        if isinstance(other, StderrMessage):
            return other
        if isinstance(self, MissingItems) and isinstance(other, MissingItems):
            return MissingItems([*self.metas, *other.metas])
        raise TypeError(f"cannot combine {self!r} with {other!r}")


class StdoutMessage(ParseError):
    """Terminate and print the message to stdout."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __repr__(self) -> str:
        return f"StdoutMessage({self.message!r})"


class StderrMessage(ParseError):
    """Terminate and print the message to stderr."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __repr__(self) -> str:
        return f"StderrMessage({self.message!r})"


class MissingItems(ParseError):
    """One of the described items was expected but not found."""

    def __init__(self, metas: list[Any] | None = None) -> None:
        self.metas: list[Any] = list(metas or [])
        super().__init__(self.metas)

    def __repr__(self) -> str:
        return f"MissingItems({self.metas!r})"


class ParseFailure(Exception):
    """Final parsing outcome: a message for stdout or for stderr."""

    def __init__(self, message: str, *, stdout: bool = False) -> None:
        super().__init__(message)
        self.message = message
        self.stdout = stdout

    def __repr__(self) -> str:
        kind = "stdout" if self.stdout else "stderr"
        return f"ParseFailure({kind}: {self.message!r})"

    def unwrap_stderr(self) -> str:
        """Return the stderr message; raise ValueError for stdout output."""
        if self.stdout:
            raise ValueError(f"not an stderr: {self!r}")
        return self.message

    def unwrap_stdout(self) -> str:
        """Return the stdout message; raise ValueError for stderr output."""
        if not self.stdout:
            raise ValueError(f"not an stdout: {self!r}")
        return self.message