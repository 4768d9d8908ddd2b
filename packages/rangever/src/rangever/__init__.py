# SPDX-License-Identifier: MIT
"""Semantic versions and version-range expressions.

This package parses and orders semantic versions following SemVer 2.0.0, and
compiles range expressions such as ``>=1.2.0 <2.0.0 || 3.x`` or ``^1.4`` into
expression trees that can be evaluated against versions.

Example:
    >>> from rangever import parse_version, parse_expression, VersionSet
    >>>
    >>> version = parse_version("1.2.3-alpha.1+build.456")
    >>> version.major
    1
    >>> version.prerelease
    ('alpha', 1)
    >>>
    >>> version.satisfies("^1.2.0-alpha")
    True
    >>>
    >>> versions = VersionSet(["1.0.0", "1.5.0", "2.0.0", "3.2.1"])
    >>> [str(v) for v in versions.filter(">=1.2.0 <2.0.0 || 3.x")]
    ['1.5.0', '3.2.1']
"""

__version__ = "0.1.0"

from .config import ConfigError, EngineConfig
from .errors import (
    ErrorKind,
    InputTooLongError,
    LexerException,
    MalformedVersion,
    NestingTooDeepError,
    ParseException,
    UnexpectedCharacterException,
    UnexpectedElementException,
    UnexpectedTokenException,
    VersionException,
)
from .semver import (
    Version,
    VersionBuilder,
    parse_version,
    is_valid_semver,
    SEMVER_PATTERN,
)
from .compare import (
    Ordering,
    compare_versions,
    compare_with_build,
    version_key,
)
from .lexer import ElementStream, Lexer, Token, TokenKind, tokenize
from .expr import (
    And,
    Comparison,
    Expression,
    ExpressionParser,
    Not,
    Operator,
    Or,
    ParseOutcome,
    PartialVersion,
    Range,
    evaluate,
    parse_expression,
    try_parse_expression,
)
from .versionset import VersionCollector, VersionSet, collect_versions

__all__ = [
    # Configuration
    "ConfigError",
    "EngineConfig",
    # Errors
    "ErrorKind",
    "InputTooLongError",
    "LexerException",
    "MalformedVersion",
    "NestingTooDeepError",
    "ParseException",
    "UnexpectedCharacterException",
    "UnexpectedElementException",
    "UnexpectedTokenException",
    "VersionException",
    # Version parsing
    "Version",
    "VersionBuilder",
    "parse_version",
    "is_valid_semver",
    "SEMVER_PATTERN",
    # Version comparison
    "Ordering",
    "compare_versions",
    "compare_with_build",
    "version_key",
    # Lexer
    "ElementStream",
    "Lexer",
    "Token",
    "TokenKind",
    "tokenize",
    # Range expressions
    "And",
    "Comparison",
    "Expression",
    "ExpressionParser",
    "Not",
    "Operator",
    "Or",
    "ParseOutcome",
    "PartialVersion",
    "Range",
    "evaluate",
    "parse_expression",
    "try_parse_expression",
    # Version sets
    "VersionCollector",
    "VersionSet",
    "collect_versions",
]
