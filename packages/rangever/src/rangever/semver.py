# SPDX-License-Identifier: MIT
"""Semantic version parsing.

Supports MAJOR.MINOR.PATCH format with optional pre-release and build metadata:
- Pre-release: -alpha, -alpha.1, -beta, -0.3.7, -rc.1
- Build metadata: +build, +build.123, +20240101, +001

Pre-release identifiers are stored as a tuple where numeric identifiers are
ints and alphanumeric ones are strings. Build identifiers are always strings,
since leading zeros are legal there.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Optional, Union

from .errors import MalformedVersion, VersionException

if TYPE_CHECKING:
    from .expr.ast import Expression

Identifier = Union[int, str]

# Semantic versioning regex pattern (SemVer 2.0.0 compliant)
# https://semver.org/#is-there-a-suggested-regular-expression-regex-to-check-a-semver-string
SEMVER_PATTERN = re.compile(
    r"^(?P<major>0|[1-9]\d*)"
    r"\.(?P<minor>0|[1-9]\d*)"
    r"\.(?P<patch>0|[1-9]\d*)"
    r"(?:-(?P<prerelease>(?:0|[1-9]\d*|\d*[a-zA-Z-][0-9a-zA-Z-]*)"
    r"(?:\.(?:0|[1-9]\d*|\d*[a-zA-Z-][0-9a-zA-Z-]*))*))?"
    r"(?:\+(?P<buildmetadata>[0-9a-zA-Z-]+(?:\.[0-9a-zA-Z-]+)*))?$",
    re.ASCII,
)

_DIGITS = frozenset("0123456789")
_IDENTIFIER_CHARS = frozenset("0123456789abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ-")
_VERSION_CHARS = _IDENTIFIER_CHARS | frozenset(".+")
_CORE_NAMES = ("major", "minor", "patch")


def _is_numeric(identifier: str) -> bool:
    return bool(identifier) and all(ch in _DIGITS for ch in identifier)


def _check_identifiers(text: str, offset: int, numeric_strict: bool) -> Optional[tuple[int, str]]:
    """Locate the first bad dot-separated identifier in a label."""
    position = offset
    for identifier in text.split("."):
        if not identifier:
            return position, "empty identifier"
        for index, ch in enumerate(identifier):
            if ch not in _IDENTIFIER_CHARS:
                return position + index, f"unexpected character {ch!r}"
        if numeric_strict and _is_numeric(identifier) and len(identifier) > 1 and identifier[0] == "0":
            return position, f"numeric identifier {identifier!r} has a leading zero"
        position += len(identifier) + 1
    return None


def _diagnose(text: str) -> tuple[int, str]:
    """Find where and why text fails to be a semantic version."""
    for index, ch in enumerate(text):
        if ch not in _VERSION_CHARS:
            return index, f"unexpected character {ch!r}"

    plus = text.find("+")
    head = text if plus < 0 else text[:plus]
    hyphen = head.find("-")
    core = head if hyphen < 0 else head[:hyphen]

    position = 0
    parts = core.split(".")
    for index, part in enumerate(parts):
        if index >= len(_CORE_NAMES):
            return position - 1, "too many version components"
        name = _CORE_NAMES[index]
        if not part:
            return position, f"missing digits in {name} component"
        for offset, ch in enumerate(part):
            if ch not in _DIGITS:
                return position + offset, f"non-numeric {name} component"
        if len(part) > 1 and part[0] == "0":
            return position, f"{name} component has a leading zero"
        position += len(part) + 1
    if len(parts) < len(_CORE_NAMES):
        return len(core), f"missing {_CORE_NAMES[len(parts)]} component"

    if hyphen >= 0:
        problem = _check_identifiers(head[hyphen + 1 :], hyphen + 1, numeric_strict=True)
        if problem:
            return problem
    if plus >= 0:
        problem = _check_identifiers(text[plus + 1 :], plus + 1, numeric_strict=False)
        if problem:
            return problem

    return 0, "does not match MAJOR.MINOR.PATCH[-prerelease][+build]"


def _parse_label(label: str, numeric_strict: bool) -> tuple[Identifier, ...]:
    problem = _check_identifiers(label, 0, numeric_strict)
    if problem:
        raise MalformedVersion(label, *problem)
    if not numeric_strict:
        return tuple(label.split("."))
    return tuple(int(part) if _is_numeric(part) else part for part in label.split("."))


def _coerce_label(value, numeric_strict: bool) -> tuple[Identifier, ...]:
    if value is None or value == "" or value == ():
        return ()
    if isinstance(value, str):
        return _parse_label(value, numeric_strict)
    return _parse_label(".".join(str(part) for part in value), numeric_strict)


def _compare_identifiers(ids1: tuple[Identifier, ...], ids2: tuple[Identifier, ...]) -> int:
    """Compare two identifier sequences by SemVer precedence rules.

    Numeric identifiers compare numerically and sort before alphanumeric ones,
    alphanumeric identifiers compare lexically in ASCII order, and a strict
    prefix sorts before the longer sequence.
    """
    for id1, id2 in zip(ids1, ids2):
        num1 = isinstance(id1, int)
        num2 = isinstance(id2, int)
        if num1 and num2:
            if id1 != id2:
                return -1 if id1 < id2 else 1
        elif num1:
            return -1
        elif num2:
            return 1
        elif id1 != id2:
            return -1 if id1 < id2 else 1

    if len(ids1) != len(ids2):
        return -1 if len(ids1) < len(ids2) else 1
    return 0


def _as_identifiers(label: tuple[str, ...]) -> tuple[Identifier, ...]:
    return tuple(int(part) if _is_numeric(part) else part for part in label)


@dataclass(frozen=True, slots=True, eq=False)
class Version:
    """Represents a parsed semantic version.

    Versions are totally ordered by SemVer precedence. Build metadata takes
    no part in ordering, equality or hashing.

    Attributes:
        major: Major version number (breaking changes)
        minor: Minor version number (new features, backward compatible)
        patch: Patch version number (bug fixes, backward compatible)
        prerelease: Pre-release identifiers, e.g. ("alpha", 1); empty for releases
        build: Build metadata identifiers, e.g. ("build", "123")
    """

    major: int
    minor: int
    patch: int
    prerelease: tuple[Identifier, ...] = field(default=())
    build: tuple[str, ...] = field(default=())

    def __post_init__(self) -> None:
        for name in _CORE_NAMES:
            value = getattr(self, name)
            if not isinstance(value, int) or isinstance(value, bool) or value < 0:
                raise MalformedVersion(
                    f"{self.major}.{self.minor}.{self.patch}",
                    None,
                    f"{name} must be a non-negative integer",
                )
        object.__setattr__(self, "prerelease", _coerce_label(self.prerelease, numeric_strict=True))
        object.__setattr__(
            self, "build", tuple(str(part) for part in _coerce_label(self.build, numeric_strict=False))
        )

    @classmethod
    def parse(cls, version_string: str) -> "Version":
        """Parse a version string. See parse_version()."""
        return parse_version(version_string)

    def __str__(self) -> str:
        """Return the canonical string representation of the version."""
        version = self.base_version
        if self.prerelease:
            version += f"-{self.prerelease_str}"
        if self.build:
            version += f"+{self.build_str}"
        return version

    def _compare(self, other: "Version") -> int:
        for attr in _CORE_NAMES:
            val1 = getattr(self, attr)
            val2 = getattr(other, attr)
            if val1 != val2:
                return -1 if val1 < val2 else 1

        # Release > pre-release of the same core
        if not self.prerelease or not other.prerelease:
            return (not self.prerelease) - (not other.prerelease)
        return _compare_identifiers(self.prerelease, other.prerelease)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self._compare(other) == 0

    def __hash__(self) -> int:
        return hash((self.major, self.minor, self.patch, self.prerelease))

    def __lt__(self, other: "Version") -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self._compare(other) < 0

    def __le__(self, other: "Version") -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self._compare(other) <= 0

    def __gt__(self, other: "Version") -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self._compare(other) > 0

    def __ge__(self, other: "Version") -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self._compare(other) >= 0

    @property
    def is_prerelease(self) -> bool:
        """Return True if this is a pre-release version."""
        return bool(self.prerelease)

    @property
    def base_version(self) -> str:
        """Return the base version without pre-release or build metadata."""
        return f"{self.major}.{self.minor}.{self.patch}"

    @property
    def prerelease_str(self) -> str:
        return ".".join(str(part) for part in self.prerelease)

    @property
    def build_str(self) -> str:
        return ".".join(self.build)

    def increment_major(self) -> "Version":
        return Version(self.major + 1, 0, 0)

    def increment_minor(self) -> "Version":
        return Version(self.major, self.minor + 1, 0)

    def increment_patch(self) -> "Version":
        return Version(self.major, self.minor, self.patch + 1)

    def increment_prerelease(self) -> "Version":
        """Bump the last numeric pre-release identifier, or append ``1``.

        Raises:
            VersionException: If the version has no pre-release identifiers
        """
        if not self.prerelease:
            raise VersionException(f"Version {self} has no pre-release identifiers to increment")
        return Version(self.major, self.minor, self.patch, _increment_label(self.prerelease))

    def increment_build(self) -> "Version":
        """Bump the last numeric build identifier, or append ``1``.

        Raises:
            VersionException: If the version has no build metadata
        """
        if not self.build:
            raise VersionException(f"Version {self} has no build metadata to increment")
        return replace(self, build=tuple(str(part) for part in _increment_label(_as_identifiers(self.build))))

    def with_prerelease(self, prerelease: Optional[str]) -> "Version":
        """Return a copy with the pre-release label replaced (None removes it)."""
        return replace(self, prerelease=prerelease)

    def with_build(self, build: Optional[str]) -> "Version":
        """Return a copy with the build metadata replaced (None removes it)."""
        return replace(self, build=build)

    def satisfies(self, expression: Union[str, "Expression"]) -> bool:
        """Check this version against a range expression.

        Args:
            expression: Range text such as ">=1.2.0 <2.0.0", or a compiled Expression

        Raises:
            ParseException: If the range text cannot be parsed
        """
        from .expr.ast import evaluate
        from .expr.parser import parse_expression

        if isinstance(expression, str):
            expression = parse_expression(expression)
        return evaluate(expression, self)


def _increment_label(label: tuple[Identifier, ...]) -> tuple[Identifier, ...]:
    last = label[-1]
    if isinstance(last, int):
        return label[:-1] + (last + 1,)
    return label + (1,)


class VersionBuilder:
    """Mutable builder for Version values.

    Example:
        >>> VersionBuilder().set_major(1).set_prerelease("rc.1").build()
        Version(major=1, minor=0, patch=0, prerelease=('rc', 1), build=())
    """

    def __init__(self, version: Optional[Version] = None) -> None:
        self._major = version.major if version else 0
        self._minor = version.minor if version else 0
        self._patch = version.patch if version else 0
        self._prerelease: Optional[str] = version.prerelease_str if version else None
        self._build: Optional[str] = version.build_str if version else None

    def set_major(self, major: int) -> "VersionBuilder":
        self._major = major
        return self

    def set_minor(self, minor: int) -> "VersionBuilder":
        self._minor = minor
        return self

    def set_patch(self, patch: int) -> "VersionBuilder":
        self._patch = patch
        return self

    def set_prerelease(self, prerelease: Optional[str]) -> "VersionBuilder":
        self._prerelease = prerelease
        return self

    def set_build(self, build: Optional[str]) -> "VersionBuilder":
        self._build = build
        return self

    def build(self) -> Version:
        """Create the Version.

        Raises:
            MalformedVersion: If any component or label is invalid
        """
        return Version(self._major, self._minor, self._patch, self._prerelease, self._build)


def parse_version(version_string: str) -> Version:
    """Parse a semantic version string into a Version object.

    Args:
        version_string: A string following semantic versioning format
            (MAJOR.MINOR.PATCH[-prerelease][+build])

    Returns:
        A Version object with parsed components

    Raises:
        MalformedVersion: If the string does not follow semantic versioning

    Examples:
        >>> parse_version("1.2.3")
        Version(major=1, minor=2, patch=3, prerelease=(), build=())

        >>> parse_version("1.0.0-alpha.1")
        Version(major=1, minor=0, patch=0, prerelease=('alpha', 1), build=())

        >>> parse_version("2.0.0-rc.1+build.456")
        Version(major=2, minor=0, patch=0, prerelease=('rc', 1), build=('build', '456'))
    """
    if not isinstance(version_string, str):
        raise MalformedVersion(
            str(version_string), None, f"version must be a string, got {type(version_string).__name__}"
        )

    version_string = version_string.strip()
    if not version_string:
        raise MalformedVersion(version_string, 0, "version string cannot be empty")

    match = SEMVER_PATTERN.match(version_string)
    if not match:
        raise MalformedVersion(version_string, *_diagnose(version_string))

    prerelease = match.group("prerelease")
    build = match.group("buildmetadata")
    return Version(
        major=int(match.group("major")),
        minor=int(match.group("minor")),
        patch=int(match.group("patch")),
        prerelease=_as_identifiers(tuple(prerelease.split("."))) if prerelease else (),
        build=tuple(build.split(".")) if build else (),
    )


def is_valid_semver(version_string: str) -> bool:
    """Check if a string is a valid semantic version.

    Examples:
        >>> is_valid_semver("1.0.0")
        True
        >>> is_valid_semver("1.0")
        False
        >>> is_valid_semver("1.0.0-alpha")
        True
    """
    if not isinstance(version_string, str):
        return False
    return SEMVER_PATTERN.match(version_string.strip()) is not None
