# SPDX-License-Identifier: MIT
"""Range expressions: AST, range semantics and parser."""

from .ast import And, Comparison, Expression, Not, Operator, Or, Range, evaluate
from .expressions import PartialVersion
from .parser import ExpressionParser, ParseOutcome, parse_expression, try_parse_expression

__all__ = [
    "And",
    "Comparison",
    "Expression",
    "Not",
    "Operator",
    "Or",
    "Range",
    "evaluate",
    "PartialVersion",
    "ExpressionParser",
    "ParseOutcome",
    "parse_expression",
    "try_parse_expression",
]
