# SPDX-License-Identifier: MIT
"""Sorted, duplicate-free collections of versions."""

from __future__ import annotations

import bisect
import logging
from typing import Iterable, Iterator, Optional, Union

from .expr.ast import Expression, evaluate
from .expr.parser import parse_expression
from .semver import Version, is_valid_semver, parse_version

logger = logging.getLogger(__name__)

VersionLike = Union[str, Version]
ExpressionLike = Union[str, Expression]


def _coerce_version(version: VersionLike) -> Version:
    return parse_version(version) if isinstance(version, str) else version


def _coerce_expression(expression: ExpressionLike) -> Expression:
    return parse_expression(expression) if isinstance(expression, str) else expression


class FilteredVersions:
    """Lazy view of the members of a VersionSet that satisfy an expression.

    Each iteration walks the set from the start, so the view may be iterated
    any number of times and reflects later insertions. Every pass works on a
    copy of the members taken when it starts, so adding to the set while
    iterating is allowed.
    """

    def __init__(self, members: list[Version], expression: Expression) -> None:
        self._members = members
        self.expression = expression

    def __iter__(self) -> Iterator[Version]:
        for version in list(self._members):
            if evaluate(self.expression, version):
                yield version

    def __repr__(self) -> str:
        return f"FilteredVersions({str(self.expression)!r})"


class VersionSet:
    """Versions kept in ascending precedence order without duplicates.

    Versions differing only in build metadata are duplicates; the one added
    first is kept. Not safe for concurrent mutation.

    Example:
        >>> versions = VersionSet(["2.0.0", "1.0.0", "1.0.0"])
        >>> [str(v) for v in versions]
        ['1.0.0', '2.0.0']
        >>> [str(v) for v in versions.filter("^1.0.0")]
        ['1.0.0']
    """

    def __init__(self, versions: Iterable[VersionLike] = ()) -> None:
        self._members: list[Version] = []
        for version in versions:
            self.add(version)

    @staticmethod
    def collector() -> "VersionCollector":
        """Return an accumulator that builds a new VersionSet."""
        return VersionCollector()

    def add(self, version: VersionLike) -> bool:
        """Insert a version, keeping the set sorted.

        Args:
            version: Version object or version string

        Returns:
            True if the version was inserted, False if it was already present

        Raises:
            MalformedVersion: If a version string is invalid
        """
        version = _coerce_version(version)
        index = bisect.bisect_left(self._members, version)
        if index < len(self._members) and self._members[index] == version:
            logger.debug("Ignoring duplicate version %s", version)
            return False
        self._members.insert(index, version)
        return True

    def filter(self, expression: ExpressionLike) -> FilteredVersions:
        """Return a lazy, re-iterable view of the members satisfying expression.

        Raises:
            ParseException: If range text cannot be parsed
        """
        return FilteredVersions(self._members, _coerce_expression(expression))

    def latest(self, expression: Optional[ExpressionLike] = None) -> Optional[Version]:
        """Return the highest member, or the highest satisfying expression."""
        if expression is None:
            return self._members[-1] if self._members else None
        compiled = _coerce_expression(expression)
        for version in reversed(self._members):
            if evaluate(compiled, version):
                return version
        return None

    def earliest(self, expression: Optional[ExpressionLike] = None) -> Optional[Version]:
        """Return the lowest member, or the lowest satisfying expression."""
        if expression is None:
            return self._members[0] if self._members else None
        return next(iter(self.filter(expression)), None)

    def __len__(self) -> int:
        return len(self._members)

    def __iter__(self) -> Iterator[Version]:
        return iter(list(self._members))

    def __contains__(self, version: object) -> bool:
        if isinstance(version, str):
            if not is_valid_semver(version):
                return False
            version = parse_version(version)
        if not isinstance(version, Version):
            return False
        index = bisect.bisect_left(self._members, version)
        return index < len(self._members) and self._members[index] == version

    def __getitem__(self, index: int) -> Version:
        return self._members[index]

    def __repr__(self) -> str:
        return f"VersionSet({[str(v) for v in self._members]!r})"


class VersionCollector:
    """Accumulates versions into a VersionSet.

    The set is sorted after every insertion and may be read at any time
    through ``result``.

    Example:
        >>> collector = VersionSet.collector().add("1.2.0").extend(["1.0.0", "1.2.0"])
        >>> len(collector.result)
        2
    """

    def __init__(self) -> None:
        self.result = VersionSet()

    def add(self, version: VersionLike) -> "VersionCollector":
        self.result.add(version)
        return self

    def extend(self, versions: Iterable[VersionLike]) -> "VersionCollector":
        for version in versions:
            self.result.add(version)
        return self


def collect_versions(versions: Iterable[VersionLike]) -> VersionSet:
    """Build a VersionSet from any iterable of versions or version strings."""
    return VersionSet.collector().extend(versions).result
