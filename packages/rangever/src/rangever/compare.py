# SPDX-License-Identifier: MIT
"""Version comparison following SemVer 2.0.0 precedence.

Pre-release identifiers compare one by one: numeric identifiers numerically,
alphanumeric identifiers lexically, numeric < alphanumeric, and a shorter
prefix sorts first. A release sorts after all of its pre-releases.
Build metadata is ignored except by compare_with_build().
"""

from __future__ import annotations

from enum import IntEnum
from typing import Union

from .semver import Version, parse_version, _as_identifiers, _compare_identifiers


class Ordering(IntEnum):
    """Result of comparing two versions."""

    LESS = -1
    EQUAL = 0
    GREATER = 1

    @property
    def symbol(self) -> str:
        return {Ordering.LESS: "<", Ordering.EQUAL: "=", Ordering.GREATER: ">"}[self]


def _coerce(version: Union[str, Version]) -> Version:
    return parse_version(version) if isinstance(version, str) else version


def compare_versions(version1: Union[str, Version], version2: Union[str, Version]) -> Ordering:
    """Compare two semantic versions by precedence.

    Args:
        version1: First version (string or Version object)
        version2: Second version (string or Version object)

    Returns:
        Ordering.LESS (-1), Ordering.EQUAL (0) or Ordering.GREATER (1)

    Raises:
        MalformedVersion: If either version string is invalid

    Examples:
        >>> compare_versions("1.0.0", "2.0.0")
        <Ordering.LESS: -1>
        >>> compare_versions("1.0.0-alpha", "1.0.0-alpha.1")
        <Ordering.LESS: -1>
        >>> compare_versions("1.0.0+build.1", "1.0.0")
        <Ordering.EQUAL: 0>
    """
    return Ordering(_coerce(version1)._compare(_coerce(version2)))


def compare_with_build(version1: Union[str, Version], version2: Union[str, Version]) -> Ordering:
    """Compare two versions, breaking precedence ties with build metadata.

    Build identifiers compare with the pre-release rules, and a version
    without build metadata sorts before one with it.
    """
    v1 = _coerce(version1)
    v2 = _coerce(version2)

    result = v1._compare(v2)
    if result != 0:
        return Ordering(result)

    if not v1.build or not v2.build:
        return Ordering(bool(v1.build) - bool(v2.build))
    return Ordering(_compare_identifiers(_as_identifiers(v1.build), _as_identifiers(v2.build)))


def version_key(version: Union[str, Version]) -> tuple:
    """Return a sort key for a version, suitable for sorting.

    Args:
        version: Version string or Version object

    Returns:
        A tuple that orders exactly like compare_versions()

    Examples:
        >>> sorted(["1.0.0", "2.0.0", "1.0.0-alpha"], key=version_key)
        ['1.0.0-alpha', '1.0.0', '2.0.0']
    """
    v = _coerce(version)

    # Releases get (1,) so they sort after any (0, ...) pre-release key
    if not v.prerelease:
        prerelease_key: tuple = (1,)
    else:
        parts = tuple((0, part) if isinstance(part, int) else (1, part) for part in v.prerelease)
        prerelease_key = (0, parts)

    return (v.major, v.minor, v.patch, prerelease_key)
