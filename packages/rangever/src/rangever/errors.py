# SPDX-License-Identifier: MIT
"""Exception taxonomy for version parsing and range compilation.

Every exception carries a class-level ``kind`` tag so callers may dispatch on
``error.kind`` rather than on the class hierarchy:

    VersionException
    └── ParseException
        ├── MalformedVersion
        ├── UnexpectedCharacterException
        ├── UnexpectedTokenException
        ├── UnexpectedElementException
        ├── LexerException
        ├── InputTooLongError
        └── NestingTooDeepError
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Iterable, Optional

if TYPE_CHECKING:
    from .lexer import Token, TokenKind


class ErrorKind(str, Enum):
    """Tag identifying the kind of a version-engine failure."""

    GENERIC = "generic"
    PARSE = "parse"
    MALFORMED_VERSION = "malformed_version"
    UNEXPECTED_CHARACTER = "unexpected_character"
    UNEXPECTED_TOKEN = "unexpected_token"
    UNEXPECTED_ELEMENT = "unexpected_element"
    LEXER = "lexer"
    INPUT_TOO_LONG = "input_too_long"
    NESTING_TOO_DEEP = "nesting_too_deep"


class VersionException(Exception):
    """Base class for every error raised by the version engine."""

    kind = ErrorKind.GENERIC
    position: Optional[int] = None

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ParseException(VersionException):
    """Raised when version or range text cannot be parsed."""

    kind = ErrorKind.PARSE


class MalformedVersion(ParseException):
    """Raised when a version string does not follow semantic versioning.

    Attributes:
        text: The text that failed to parse
        position: Offset of the offending character, when known
        reason: Short description of what is wrong
    """

    kind = ErrorKind.MALFORMED_VERSION

    def __init__(self, text: str, position: Optional[int] = None, reason: str = ""):
        self.text = text
        self.position = position
        self.reason = reason
        message = f"Invalid semantic version: {text!r}"
        if reason:
            message += f" ({reason}"
            if position is not None:
                message += f" at position {position}"
            message += ")"
        super().__init__(message)

    def shifted(self, offset: int, text: str) -> "MalformedVersion":
        """Return a copy whose position is relative to an enclosing text."""
        position = None if self.position is None else self.position + offset
        return MalformedVersion(text, position, self.reason)


class UnexpectedCharacterException(ParseException):
    """Raised by the lexer when no token rule accepts a character."""

    kind = ErrorKind.UNEXPECTED_CHARACTER

    def __init__(self, character: str, position: int):
        self.character = character
        self.position = position
        super().__init__(f"Unexpected character {character!r} at position {position}")


def _describe(kinds: Iterable["TokenKind"]) -> str:
    names = sorted(kind.name for kind in kinds)
    if len(names) == 1:
        return names[0]
    return "one of " + ", ".join(names)


class UnexpectedTokenException(ParseException):
    """Raised when the parser finds a token of the wrong kind.

    Attributes:
        expected: Token kinds that would have been accepted
        token: The token actually found
        position: Offset of the token in the source
    """

    kind = ErrorKind.UNEXPECTED_TOKEN

    def __init__(self, expected: Iterable["TokenKind"], token: "Token"):
        self.expected = frozenset(expected)
        self.token = token
        self.position = token.position
        super().__init__(
            f"Expected {_describe(self.expected)} but found "
            f"{token.kind.name} {token.text!r} at position {token.position}"
        )


class UnexpectedElementException(ParseException):
    """Raised when input ends before a required grammar element."""

    kind = ErrorKind.UNEXPECTED_ELEMENT

    def __init__(self, expected: Iterable["TokenKind"], position: int):
        self.expected = frozenset(expected)
        self.position = position
        super().__init__(
            f"Unexpected end of input at position {position}, "
            f"expected {_describe(self.expected)}"
        )


class LexerException(ParseException):
    """Raised by the parser when the lexer fails mid-expression."""

    kind = ErrorKind.LEXER

    def __init__(self, cause: UnexpectedCharacterException):
        self.cause = cause
        self.position = cause.position
        super().__init__(f"Illegal range expression: {cause.message}")


class InputTooLongError(ParseException):
    """Raised when input text exceeds the configured length limit."""

    kind = ErrorKind.INPUT_TOO_LONG

    def __init__(self, length: int, limit: int):
        self.length = length
        self.limit = limit
        super().__init__(f"Input is {length} characters long, the limit is {limit}")


class NestingTooDeepError(ParseException):
    """Raised when groups and negations nest deeper than the configured limit."""

    kind = ErrorKind.NESTING_TOO_DEEP

    def __init__(self, limit: int, position: int):
        self.limit = limit
        self.position = position
        super().__init__(f"Expression nesting exceeds the limit of {limit} at position {position}")
