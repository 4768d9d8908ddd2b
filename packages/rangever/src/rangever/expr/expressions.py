# SPDX-License-Identifier: MIT
"""Range semantics: builds canonical expression nodes from parsed fragments.

The parser only recognizes syntax. Everything a shorthand *means* lives
here, so ``^``, ``~``, wildcard and hyphen ranges and partial comparison
operands all resolve to Comparison, Range and Not nodes in one place:

    ^1.2.3          >=1.2.3 <2.0.0-0
    ^0.2.3          >=0.2.3 <0.3.0-0
    ^0.0.3          >=0.0.3 <0.0.4-0
    ~1.2.3          >=1.2.3 <1.3.0-0
    ~1              >=1.0.0 <2.0.0-0
    1.2.x, 1.2      >=1.2.0 <1.3.0-0
    1.2.3 - 2.3.4   >=1.2.3 <=2.3.4
    1.2.3 - 2.3     >=1.2.3 <2.4.0-0
    >1.2            >=1.3.0-0
    <1.2            <1.2.0-0
    <=1.2           <1.3.0-0
    *               every version

Derived upper bounds are the lowest pre-release of the next version
(``<2.0.0-0``), so ``2.0.0-rc.1`` is outside ``^1.2.3``. Bounds written out in
full are used as given.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from ..semver import Identifier, Version
from .ast import And, Comparison, Expression, Not, Operator, Or, Range

# Lowest version parse_version() can produce; ">=" this matches everything
MIN_VERSION = Version(0, 0, 0, (0,))


@dataclass(frozen=True, slots=True)
class PartialVersion:
    """A version literal as written in a range, possibly incomplete.

    A component is None when it was omitted or written as a wildcard, and
    every component after a None is None as well. Labels are only ever set
    on a complete literal.
    """

    major: Optional[int] = None
    minor: Optional[int] = None
    patch: Optional[int] = None
    prerelease: tuple[Identifier, ...] = field(default=())
    build: tuple[str, ...] = field(default=())

    @classmethod
    def from_version(cls, version: Version) -> "PartialVersion":
        return cls(version.major, version.minor, version.patch, version.prerelease, version.build)

    @property
    def components(self) -> tuple[Optional[int], Optional[int], Optional[int]]:
        return (self.major, self.minor, self.patch)

    @property
    def specified(self) -> int:
        """Number of concrete leading components (0 to 3)."""
        count = 0
        for component in self.components:
            if component is None:
                break
            count += 1
        return count

    @property
    def is_full(self) -> bool:
        return self.specified == 3

    def __str__(self) -> str:
        parts = [str(c) for c in self.components[: self.specified]]
        if len(parts) < 3:
            parts.append("x")
        text = ".".join(parts)
        if self.prerelease:
            text += "-" + ".".join(str(part) for part in self.prerelease)
        if self.build:
            text += "+" + ".".join(self.build)
        return text


def _floor(partial: PartialVersion) -> Version:
    """Zero-fill the omitted components."""
    return Version(
        partial.major or 0,
        partial.minor or 0,
        partial.patch or 0,
        partial.prerelease,
        partial.build,
    )


def _lowest(major: int, minor: int, patch: int) -> Version:
    """Return the least version with the given core, its ``-0`` pre-release."""
    return Version(major, minor, patch, (0,))


def _bump(partial: PartialVersion, index: int) -> Version:
    """Return the least version past every version sharing the first index+1 components."""
    major, minor, patch = (c or 0 for c in partial.components)
    if index == 0:
        return _lowest(major + 1, 0, 0)
    if index == 1:
        return _lowest(major, minor + 1, 0)
    return _lowest(major, minor, patch + 1)


def any_version() -> Expression:
    return Comparison(Operator.GE, MIN_VERSION)


def no_version() -> Expression:
    return Not(any_version())


def equal(version: Version) -> Expression:
    return Comparison(Operator.EQ, version)


def greater(version: Version) -> Expression:
    return Comparison(Operator.GT, version)


def greater_or_equal(version: Version) -> Expression:
    return Comparison(Operator.GE, version)


def less(version: Version) -> Expression:
    return Comparison(Operator.LT, version)


def less_or_equal(version: Version) -> Expression:
    return Comparison(Operator.LE, version)


def between(
    lower: Version,
    upper: Version,
    lower_inclusive: bool = True,
    upper_inclusive: bool = False,
) -> Expression:
    return Range(lower, upper, lower_inclusive, upper_inclusive)


def and_(left: Expression, right: Expression) -> Expression:
    return And(left, right)


def or_(left: Expression, right: Expression) -> Expression:
    return Or(left, right)


def not_(inner: Expression) -> Expression:
    return Not(inner)


def wildcard(partial: PartialVersion) -> Expression:
    """Versions sharing every specified component of the literal.

    A complete literal is an exact match.
    """
    specified = partial.specified
    if specified == 0:
        return any_version()
    if specified == 3:
        return equal(_floor(partial))
    return between(_floor(partial), _bump(partial, specified - 1))


def caret(partial: PartialVersion) -> Expression:
    """Versions that do not change the leftmost non-zero component."""
    specified = partial.specified
    if specified == 0:
        return any_version()

    if partial.major or specified == 1:
        upper = _bump(partial, 0)
    elif partial.minor or specified == 2:
        upper = _bump(partial, 1)
    else:
        upper = _bump(partial, 2)
    return between(_floor(partial), upper)


def tilde(partial: PartialVersion) -> Expression:
    """Patch-level changes if a minor version is given, minor-level if not."""
    specified = partial.specified
    if specified == 0:
        return any_version()
    upper = _bump(partial, 0 if specified == 1 else 1)
    return between(_floor(partial), upper)


def hyphen(lower: PartialVersion, upper: PartialVersion) -> Expression:
    """Inclusive range between two literals.

    A partial upper bound covers everything its prefix covers, and a
    wildcard bound leaves that side open.
    """
    low: Optional[Version] = _floor(lower) if lower.specified else None

    high: Optional[Version] = None
    upper_inclusive = True
    if upper.is_full:
        high = _floor(upper)
    elif upper.specified:
        high = _bump(upper, upper.specified - 1)
        upper_inclusive = False

    if low is not None and high is not None:
        return between(low, high, True, upper_inclusive)
    if low is not None:
        return greater_or_equal(low)
    if high is not None:
        return less_or_equal(high) if upper_inclusive else less(high)
    return any_version()


def comparison(op: str, partial: PartialVersion) -> Expression:
    """Comparison against a possibly partial literal.

    Args:
        op: One of "=", "!=", ">", ">=", "<", "<="
        partial: The operand

    Raises:
        ValueError: If op is not a comparison operator
    """
    if op == "=":
        return wildcard(partial)
    if op == "!=":
        return not_(wildcard(partial))

    operator_ = Operator(op)
    specified = partial.specified
    if specified == 0:
        if operator_ in (Operator.GE, Operator.LE):
            return any_version()
        return no_version()
    if specified == 3:
        return Comparison(operator_, _floor(partial))

    if operator_ is Operator.GE:
        return greater_or_equal(_floor(partial))
    if operator_ is Operator.GT:
        return greater_or_equal(_bump(partial, specified - 1))
    if operator_ is Operator.LT:
        return less(_lowest(*(c or 0 for c in partial.components)))
    return less(_bump(partial, specified - 1))
