# SPDX-License-Identifier: MIT
"""Compiled range expressions.

An Expression is one of five immutable node types. Leaves hold fully
resolved Version bounds, so evaluation never parses. Nodes are safe to share
between threads.
"""

from __future__ import annotations

import operator
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Union

from ..semver import Version


class Operator(str, Enum):
    EQ = "="
    GT = ">"
    GE = ">="
    LT = "<"
    LE = "<="


_OPERATORS: dict[Operator, Callable[[Version, Version], bool]] = {
    Operator.EQ: operator.eq,
    Operator.GT: operator.gt,
    Operator.GE: operator.ge,
    Operator.LT: operator.lt,
    Operator.LE: operator.le,
}


class _Node:
    __slots__ = ()

    def matches(self, version: Version) -> bool:
        """Return True if the version satisfies this expression."""
        return evaluate(self, version)  # type: ignore[arg-type]


@dataclass(frozen=True, slots=True)
class Comparison(_Node):
    """``version <op> target``."""

    op: Operator
    version: Version

    def __str__(self) -> str:
        return f"{self.op.value}{self.version}"


@dataclass(frozen=True, slots=True)
class Range(_Node):
    """Interval between two bounds, each inclusive or exclusive."""

    lower: Version
    upper: Version
    lower_inclusive: bool = True
    upper_inclusive: bool = False

    def __str__(self) -> str:
        low = ">=" if self.lower_inclusive else ">"
        high = "<=" if self.upper_inclusive else "<"
        return f"{low}{self.lower} {high}{self.upper}"


@dataclass(frozen=True, slots=True)
class And(_Node):
    left: "Expression"
    right: "Expression"

    def __str__(self) -> str:
        return " ".join(_group(operand, Or) for operand in _flatten(self, And))


@dataclass(frozen=True, slots=True)
class Or(_Node):
    left: "Expression"
    right: "Expression"

    def __str__(self) -> str:
        return " || ".join(str(operand) for operand in _flatten(self, Or))


@dataclass(frozen=True, slots=True)
class Not(_Node):
    inner: "Expression"

    def __str__(self) -> str:
        return f"!({self.inner})"


Expression = Union[Comparison, Range, And, Or, Not]


def _group(node: Expression, *loose: type) -> str:
    if isinstance(node, loose):
        return f"({node})"
    return str(node)


def _flatten(node: Expression, kind: type) -> list[Expression]:
    """Return the operands of a chain of kind nodes, left to right."""
    operands: list[Expression] = []
    pending = [node]
    while pending:
        current = pending.pop()
        if isinstance(current, kind):
            pending.append(current.right)
            pending.append(current.left)
        else:
            operands.append(current)
    return operands


def evaluate(expression: Expression, version: Version) -> bool:
    """Evaluate a compiled expression against a version.

    Args:
        expression: Root of a compiled expression tree
        version: Version to test

    Returns:
        True if the version satisfies the expression

    Raises:
        TypeError: If expression is not an Expression node
    """
    match expression:
        case Comparison(op, target):
            return _OPERATORS[op](version, target)
        case Range(lower, upper, lower_inclusive, upper_inclusive):
            above = version >= lower if lower_inclusive else version > lower
            below = version <= upper if upper_inclusive else version < upper
            return above and below
        case And():
            return all(evaluate(operand, version) for operand in _flatten(expression, And))
        case Or():
            return any(evaluate(operand, version) for operand in _flatten(expression, Or))
        case Not(inner):
            return not evaluate(inner, version)
        case _:
            raise TypeError(f"Not an expression node: {expression!r}")
