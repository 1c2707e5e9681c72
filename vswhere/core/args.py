"""Command-line argument encoders for vswhere.

Each encoder owns one piece of selection state and appends zero or more tokens to
an `ArgCollector`. Selection types compose them in the order vswhere expects.
"""

import os
from dataclasses import dataclass
from typing import Final, Iterable, Protocol, Union

from .version import Version

Token = Union[str, "os.PathLike[str]"]

# "65535.65535.65535.65535" twice, plus the separating comma.
_MAX_VERSION_LEN: Final[int] = len("65535.65535.65535.65535")
VERSION_RANGE_CAPACITY: Final[int] = 2 * _MAX_VERSION_LEN + 1


class ArgCollector(Protocol):
    """Anything that accepts command-line tokens."""

    def arg(self, token: Token) -> None: ...

    def args(self, tokens: Iterable[Token]) -> None: ...


class ArgList(list):
    """A list-backed `ArgCollector`."""

    def arg(self, token: Token) -> None:
        self.append(token)

    def args(self, tokens: Iterable[Token]) -> None:
        self.extend(tokens)


class BoundedBuffer:
    """A fixed-capacity ASCII write target.

    Writes that would exceed the capacity raise `BufferError`; the buffer never
    truncates.
    """

    __slots__ = ("_data", "_length")

    def __init__(self, capacity: int):
        self._data = bytearray(capacity)
        self._length = 0

    @property
    def capacity(self) -> int:
        return len(self._data)

    def write(self, text: str) -> None:
        encoded = text.encode("ascii")
        end = self._length + len(encoded)
        if end > len(self._data):
            raise BufferError(
                f"write of {len(encoded)} bytes exceeds capacity {len(self._data)}"
            )
        self._data[self._length : end] = encoded
        self._length = end

    def __len__(self) -> int:
        return self._length

    def getvalue(self) -> str:
        return self._data[: self._length].decode("ascii")


@dataclass(slots=True)
class All:
    """`-all`: include incomplete and non-launchable instances."""

    value: bool = False

    def populate_args(self, collector: ArgCollector) -> None:
        if self.value:
            collector.arg("-all")


@dataclass(slots=True)
class Prerelease:
    """`-prerelease`: include prerelease instances."""

    value: bool = False

    def populate_args(self, collector: ArgCollector) -> None:
        if self.value:
            collector.arg("-prerelease")


@dataclass(slots=True)
class RequiresAny:
    """`-requiresAny`: match instances with any, not all, of the required IDs."""

    value: bool = False

    def populate_args(self, collector: ArgCollector) -> None:
        if self.value:
            collector.arg("-requiresAny")


@dataclass(slots=True)
class Products:
    """`-products`: product ID allowlist. Empty means vswhere's default list."""

    ids: tuple[str, ...] = ()

    def populate_args(self, collector: ArgCollector) -> None:
        if self.ids:
            collector.arg("-products")
            collector.args(self.ids)


@dataclass(slots=True)
class Requires:
    """`-requires`: component/workload ID allowlist. Empty disables the filter."""

    ids: tuple[str, ...] = ()

    def populate_args(self, collector: ArgCollector) -> None:
        if self.ids:
            collector.arg("-requires")
            collector.args(self.ids)


@dataclass(slots=True)
class VersionRange:
    """`-version`: an inclusive version range; a missing bound is unbounded."""

    lower: Version | None = None
    upper: Version | None = None

    def format(self) -> str | None:
        """Formats the range as vswhere's compound `lower,upper` token.

        Returns:
            The token, or None when both bounds are absent.
        """
        if self.lower is None and self.upper is None:
            return None
        buffer = BoundedBuffer(VERSION_RANGE_CAPACITY)
        if self.lower is not None:
            buffer.write(self.lower.format())
        buffer.write(",")
        if self.upper is not None:
            buffer.write(self.upper.format())
        return buffer.getvalue()

    def populate_args(self, collector: ArgCollector) -> None:
        token = self.format()
        if token is not None:
            collector.args(("-version", token))
