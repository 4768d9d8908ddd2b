# SPDX-License-Identifier: MIT
"""Tokenizer for version-range expressions.

The lexer is a lazy generator of tokens wrapped in an ElementStream, which
adds a single token of lookahead. Whitespace separates tokens and is
otherwise dropped; each token records whether whitespace preceded it so the
parser can tell ``1.2.3 - 2.0.0`` (a hyphen range) from ``1.2.3-2.0.0``
(a pre-release label).
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Generic, Iterator, Optional, TypeVar

from .errors import UnexpectedCharacterException


class TokenKind(Enum):
    NUMBER = "number"
    DOT = "dot"
    HYPHEN = "hyphen"
    COMPARATOR = "comparator"
    CARET = "caret"
    TILDE = "tilde"
    WILDCARD = "wildcard"
    AND = "and"
    OR = "or"
    NOT = "not"
    LPAREN = "lparen"
    RPAREN = "rparen"
    IDENTIFIER = "identifier"
    END = "end"


@dataclass(frozen=True, slots=True)
class Token:
    """A classified lexeme.

    Attributes:
        kind: Token classification
        text: Raw lexeme; IDENTIFIER text keeps its leading ``-`` or ``+``
        position: Offset of the first character in the source
        spaced: True if whitespace immediately preceded the token
    """

    kind: TokenKind
    text: str
    position: int
    spaced: bool = False


_DIGITS = frozenset("0123456789")
_LETTERS = frozenset("abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ")
_LABEL_CHARS = _DIGITS | _LETTERS | frozenset(".-")

_SINGLE = {
    ".": TokenKind.DOT,
    "^": TokenKind.CARET,
    "~": TokenKind.TILDE,
    "*": TokenKind.WILDCARD,
    "(": TokenKind.LPAREN,
    ")": TokenKind.RPAREN,
}

_DOUBLE = {
    "||": TokenKind.OR,
    "&&": TokenKind.AND,
    "<=": TokenKind.COMPARATOR,
    ">=": TokenKind.COMPARATOR,
    "!=": TokenKind.COMPARATOR,
}

# Token kinds after which an unspaced "-" or "+" starts a version label
_LABEL_ANCHORS = frozenset({TokenKind.NUMBER, TokenKind.WILDCARD, TokenKind.IDENTIFIER})


def tokenize(text: str) -> Iterator[Token]:
    """Lazily split range text into tokens, ending with a single END token.

    Raises:
        UnexpectedCharacterException: On the first character no rule accepts
    """
    length = len(text)
    pos = 0
    previous: Optional[Token] = None

    while True:
        start = pos
        while pos < length and text[pos].isspace():
            pos += 1
        spaced = pos > start
        if pos >= length:
            yield Token(TokenKind.END, "", pos, spaced)
            return

        ch = text[pos]
        pair = text[pos : pos + 2]
        anchored = not spaced and previous is not None and previous.kind in _LABEL_ANCHORS

        if ch in _DIGITS:
            end = pos + 1
            while end < length and text[end] in _DIGITS:
                end += 1
            token = Token(TokenKind.NUMBER, text[pos:end], pos, spaced)
        elif anchored and (ch == "+" or (ch == "-" and previous.kind != TokenKind.IDENTIFIER)):
            end = pos + 1
            while end < length and text[end] in _LABEL_CHARS:
                end += 1
            token = Token(TokenKind.IDENTIFIER, text[pos:end], pos, spaced)
        elif ch == "-":
            token = Token(TokenKind.HYPHEN, ch, pos, spaced)
        elif ch in "xX":
            if pos + 1 < length and (text[pos + 1] in _LETTERS or text[pos + 1] in _DIGITS):
                raise UnexpectedCharacterException(ch, pos)
            token = Token(TokenKind.WILDCARD, ch, pos, spaced)
        elif pair in _DOUBLE:
            token = Token(_DOUBLE[pair], pair, pos, spaced)
        elif ch in "<>=":
            token = Token(TokenKind.COMPARATOR, ch, pos, spaced)
        elif ch == "!":
            token = Token(TokenKind.NOT, ch, pos, spaced)
        elif ch in _SINGLE:
            token = Token(_SINGLE[ch], ch, pos, spaced)
        else:
            raise UnexpectedCharacterException(ch, pos)

        pos = token.position + len(token.text)
        previous = token
        yield token


T = TypeVar("T")


class ElementStream(Generic[T]):
    """Single-pass stream with one element of lookahead.

    Once the underlying iterator raises, the stream is terminal: every later
    call re-raises the same exception.
    """

    def __init__(self, elements: Iterator[T]) -> None:
        self._elements = elements
        self._lookahead: Optional[T] = None
        self._error: Optional[Exception] = None

    def _fill(self) -> T:
        if self._error is not None:
            raise self._error
        if self._lookahead is None:
            try:
                self._lookahead = next(self._elements)
            except Exception as e:
                self._error = e
                raise
        return self._lookahead

    def peek(self) -> T:
        """Return the next element without consuming it."""
        return self._fill()

    def next(self) -> T:
        """Consume and return the next element."""
        element = self._fill()
        self._lookahead = None
        return element

    def __iter__(self) -> Iterator[T]:
        return self

    def __next__(self) -> T:
        return self.next()


class Lexer(ElementStream[Token]):
    """Token stream over a range expression.

    Example:
        >>> lexer = Lexer(">=1.2")
        >>> [token.kind.name for token in lexer]
        ['COMPARATOR', 'NUMBER', 'DOT', 'NUMBER', 'END']
    """

    def __init__(self, text: str) -> None:
        super().__init__(tokenize(text))
        self.text = text
        self._end: Optional[Token] = None

    def _fill(self) -> Token:
        # END is sticky: reading past the end keeps returning it
        if self._end is not None:
            return self._end
        token = super()._fill()
        if token.kind is TokenKind.END:
            self._end = token
        return token

    def __iter__(self) -> Iterator[Token]:
        while True:
            token = self.next()
            yield token
            if token.kind is TokenKind.END:
                return

    def positive(self, *kinds: TokenKind) -> bool:
        """Return True if the next token is one of the given kinds."""
        return self.peek().kind in kinds

    def consume(self, *kinds: TokenKind) -> Optional[Token]:
        """Consume the next token if it is one of the given kinds."""
        if self.positive(*kinds):
            return self.next()
        return None
