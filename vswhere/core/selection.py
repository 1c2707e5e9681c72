"""Selection parameter groups.

Exactly one selection is active per vswhere invocation:

- `Modern`: side-by-side installable instances (Visual Studio 2017 and later).
- `Legacy`: instances registered the pre-2017 way, queried with `-legacy`.
- `PathSelection`: the single instance installed at a given path.

Builder methods mutate the selection and return it, so calls can be chained:

    Modern().prerelease(True).products(["*"]).version("16.0", "17.0")
"""

import os
from abc import ABC, abstractmethod
from typing import Iterable, Union

from .args import (
    All,
    ArgCollector,
    ArgList,
    Prerelease,
    Products,
    Requires,
    RequiresAny,
    Token,
    VersionRange,
)
from .version import Version


def _id_list(ids: Iterable[str]) -> tuple[str, ...]:
    # A bare "*" would otherwise be split into characters.
    if isinstance(ids, (str, bytes)):
        raise TypeError("expected a sequence of IDs, not a single string")
    return tuple(ids)


class _Selection(ABC):
    """Shared behaviour of the three selection variants."""

    __slots__ = ()

    @abstractmethod
    def populate_args(self, collector: ArgCollector) -> None:
        """Appends this selection's tokens to `collector`."""

    def to_args(self) -> list[Token]:
        """Returns the encoded command-line tokens for this selection."""
        collector = ArgList()
        self.populate_args(collector)
        return list(collector)


class Modern(_Selection):
    """Selection parameters for modern (side-by-side installable) instances."""

    __slots__ = ("_all", "_prerelease", "_products", "_requires", "_requires_any", "_version")

    def __init__(self) -> None:
        self._all = All()
        self._prerelease = Prerelease()
        self._products = Products()
        self._requires = Requires()
        self._requires_any = RequiresAny()
        self._version = VersionRange()

    def all(self, value: bool) -> "Modern":
        """Includes incomplete and/or non-launchable instances. Default: False."""
        self._all.value = value
        return self

    def prerelease(self, value: bool) -> "Modern":
        """Includes prerelease instances. Default: False."""
        self._prerelease.value = value
        return self

    def products(self, ids: Iterable[str]) -> "Modern":
        """Sets the product ID allowlist.

        An empty list (the default) makes vswhere use its built-in allowlist of the
        Community, Professional and Enterprise editions. Use `["*"]` to match every
        product.
        """
        self._products.ids = _id_list(ids)
        return self

    def requires(self, ids: Iterable[str]) -> "Modern":
        """Sets the component/workload ID allowlist. Empty (the default) disables it."""
        self._requires.ids = _id_list(ids)
        return self

    def requires_any(self, value: bool) -> "Modern":
        """Matches instances having any, rather than all, of the required IDs.

        Default: False.
        """
        self._requires_any.value = value
        return self

    def version(
        self, lower: Version | str | None = None, upper: Version | str | None = None
    ) -> "Modern":
        """Restricts results to an inclusive version range.

        A bound of None is unbounded. Both bounds default to None.

        Raises:
            VersionParseError: If a bound is a string that is not a valid version.
        """
        self._version = VersionRange(Version.coerce(lower), Version.coerce(upper))
        return self

    def populate_args(self, collector: ArgCollector) -> None:
        self._all.populate_args(collector)
        self._prerelease.populate_args(collector)
        self._requires_any.populate_args(collector)
        self._products.populate_args(collector)
        self._requires.populate_args(collector)
        self._version.populate_args(collector)

    def __repr__(self) -> str:
        return (
            f"Modern(all={self._all.value}, prerelease={self._prerelease.value}, "
            f"products={list(self._products.ids)}, requires={list(self._requires.ids)}, "
            f"requires_any={self._requires_any.value}, version={self._version})"
        )


class Legacy(_Selection):
    """Selection parameters for legacy instances."""

    __slots__ = ("_all", "_prerelease", "_version")

    def __init__(self) -> None:
        self._all = All()
        self._prerelease = Prerelease()
        self._version = VersionRange()

    def all(self, value: bool) -> "Legacy":
        """Includes incomplete and/or non-launchable instances. Default: False."""
        self._all.value = value
        return self

    def prerelease(self, value: bool) -> "Legacy":
        """Includes prerelease instances. Default: False."""
        self._prerelease.value = value
        return self

    def version(
        self, lower: Version | str | None = None, upper: Version | str | None = None
    ) -> "Legacy":
        """Restricts results to an inclusive version range; see `Modern.version`."""
        self._version = VersionRange(Version.coerce(lower), Version.coerce(upper))
        return self

    def populate_args(self, collector: ArgCollector) -> None:
        collector.arg("-legacy")
        self._all.populate_args(collector)
        self._prerelease.populate_args(collector)
        self._version.populate_args(collector)

    def __repr__(self) -> str:
        return (
            f"Legacy(all={self._all.value}, prerelease={self._prerelease.value}, "
            f"version={self._version})"
        )


class PathSelection(_Selection):
    """Selects the single instance installed at `path`."""

    __slots__ = ("path",)

    def __init__(self, path: "str | os.PathLike[str]"):
        self.path = path

    def populate_args(self, collector: ArgCollector) -> None:
        # Passed through untouched so subprocess applies the native path encoding.
        collector.args(("-path", self.path))

    def __repr__(self) -> str:
        return f"PathSelection({self.path!r})"


Selection = Union[Modern, Legacy, PathSelection]
