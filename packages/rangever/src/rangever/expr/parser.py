# SPDX-License-Identifier: MIT
"""Recursive-descent parser for version-range expressions.

Grammar, lowest precedence first::

    expr     := orTerm END
    orTerm   := andTerm ("||" andTerm)*
    andTerm  := unary ("&&"? unary)*
    unary    := "!"* primary
    primary  := "(" orTerm ")"
              | COMPARATOR literal
              | "^" literal
              | "~" literal
              | literal ("-" literal)?
    literal  := part ("." part){0,2} ("-" prerelease)? ("+" build)?
    part     := NUMBER | "x" | "X" | "*"

Juxtaposed terms are joined with an implicit AND, which binds tighter than
OR. The parser only recognizes syntax; range meaning comes from
rangever.expr.expressions.

Groups and negations count toward a nesting depth that is capped by
EngineConfig.max_depth. Negation chains are read in a loop, so only
parentheses use the Python stack.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import lru_cache
from typing import Iterable, NoReturn, Optional

from ..config import EngineConfig, default_config
from ..errors import (
    ErrorKind,
    InputTooLongError,
    LexerException,
    MalformedVersion,
    NestingTooDeepError,
    ParseException,
    UnexpectedCharacterException,
    UnexpectedElementException,
    UnexpectedTokenException,
)
from ..lexer import Lexer, Token, TokenKind
from ..semver import parse_version
from . import expressions
from .ast import Expression
from .expressions import PartialVersion

logger = logging.getLogger(__name__)

_PART = frozenset({TokenKind.NUMBER, TokenKind.WILDCARD})
_UNARY_START = frozenset(
    {
        TokenKind.NOT,
        TokenKind.LPAREN,
        TokenKind.COMPARATOR,
        TokenKind.CARET,
        TokenKind.TILDE,
        TokenKind.NUMBER,
        TokenKind.WILDCARD,
    }
)
# Tokens that may legitimately follow a complete version literal
_LITERAL_END = frozenset(
    {TokenKind.OR, TokenKind.AND, TokenKind.RPAREN, TokenKind.HYPHEN, TokenKind.END}
)
_TERM_END = frozenset({TokenKind.OR, TokenKind.AND, TokenKind.END})
# Unspaced tokens that continue the literal being read
_LITERAL_CONTINUATION = frozenset(
    {TokenKind.DOT, TokenKind.IDENTIFIER, TokenKind.NUMBER, TokenKind.WILDCARD}
)


class _ParserState:
    """Cursor over one expression; owned by a single parse call."""

    def __init__(self, text: str, max_depth: int) -> None:
        self.text = text
        self.tokens = Lexer(text)
        self.max_depth = max_depth
        self._depth = 0

    def parse(self) -> Expression:
        expression = self._or_term()
        token = self.tokens.peek()
        if token.kind is not TokenKind.END:
            raise UnexpectedTokenException(_TERM_END, token)
        return expression

    def _unexpected(self, expected: Iterable[TokenKind]) -> NoReturn:
        token = self.tokens.peek()
        if token.kind is TokenKind.END:
            raise UnexpectedElementException(expected, token.position)
        raise UnexpectedTokenException(expected, token)

    def _expect(self, *kinds: TokenKind) -> Token:
        token = self.tokens.consume(*kinds)
        if token is None:
            self._unexpected(kinds)
        return token

    def _enter(self, token: Token) -> None:
        self._depth += 1
        if self._depth > self.max_depth:
            raise NestingTooDeepError(self.max_depth, token.position)

    def _or_term(self) -> Expression:
        expression = self._and_term()
        while self.tokens.consume(TokenKind.OR):
            expression = expressions.or_(expression, self._and_term())
        return expression

    def _and_term(self) -> Expression:
        expression = self._unary()
        while True:
            if self.tokens.consume(TokenKind.AND) or self.tokens.positive(*_UNARY_START):
                expression = expressions.and_(expression, self._unary())
            else:
                return expression

    def _unary(self) -> Expression:
        negations = 0
        while (token := self.tokens.consume(TokenKind.NOT)) is not None:
            self._enter(token)
            negations += 1

        expression = self._primary()
        self._depth -= negations
        for _ in range(negations):
            expression = expressions.not_(expression)
        return expression

    def _primary(self) -> Expression:
        token = self.tokens.peek()

        if token.kind is TokenKind.LPAREN:
            self._enter(self.tokens.next())
            expression = self._or_term()
            self._expect(TokenKind.RPAREN)
            self._depth -= 1
            return expression

        if token.kind is TokenKind.COMPARATOR:
            self.tokens.next()
            return expressions.comparison(token.text, self._literal())

        if token.kind is TokenKind.CARET:
            self.tokens.next()
            return expressions.caret(self._literal())

        if token.kind is TokenKind.TILDE:
            self.tokens.next()
            return expressions.tilde(self._literal())

        if token.kind in _PART:
            lower = self._literal()
            if self.tokens.consume(TokenKind.HYPHEN):
                return expressions.hyphen(lower, self._literal())
            return expressions.wildcard(lower)

        self._unexpected(_UNARY_START)

    def _attached(self) -> Optional[Token]:
        """Return the next token if it continues the current literal."""
        token = self.tokens.peek()
        if token.spaced or token.kind not in _LITERAL_CONTINUATION:
            return None
        return token

    def _component(self, token: Token) -> Optional[int]:
        if token.kind is TokenKind.WILDCARD:
            return None
        if len(token.text) > 1 and token.text[0] == "0":
            raise MalformedVersion(self.text, token.position, f"number {token.text!r} has a leading zero")
        return int(token.text)

    def _literal(self) -> PartialVersion:
        first = self.tokens.peek()
        if first.kind not in _PART:
            self._unexpected(_PART)
        self.tokens.next()

        components = [self._component(first)]
        last = first
        while (token := self._attached()) is not None and token.kind is TokenKind.DOT:
            if len(components) == 3:
                raise UnexpectedTokenException(_LITERAL_END, token)
            self.tokens.next()
            part = self.tokens.peek()
            if part.kind not in _PART or part.spaced:
                self._unexpected(_PART)
            if components[-1] is None and part.kind is not TokenKind.WILDCARD:
                raise UnexpectedTokenException({TokenKind.WILDCARD}, part)
            self.tokens.next()
            components.append(self._component(part))
            last = part

        labels: list[Token] = []
        while (token := self._attached()) is not None:
            full = len(components) == 3 and components[-1] is not None
            if token.kind is not TokenKind.IDENTIFIER or not full:
                raise UnexpectedTokenException(_LITERAL_END, token)
            if labels and (labels[-1].text[0] == "+" or token.text[0] == "-"):
                raise UnexpectedTokenException(_LITERAL_END, token)
            labels.append(self.tokens.next())
            last = token

        if not labels:
            components.extend([None] * (3 - len(components)))
            return PartialVersion(*components)

        end = last.position + len(last.text)
        try:
            version = parse_version(self.text[first.position : end])
        except MalformedVersion as e:
            raise e.shifted(first.position, self.text) from None
        return PartialVersion.from_version(version)


class ExpressionParser:
    """Compiles range text into an Expression tree.

    Example:
        >>> parser = ExpressionParser()
        >>> expression = parser.parse(">=1.2.0 <2.0.0 || 3.x")
        >>> expression.matches(parse_version("1.5.0"))
        True
    """

    def __init__(self, config: Optional[EngineConfig] = None) -> None:
        self.config = config

    def parse(self, text: str) -> Expression:
        """Parse a range expression.

        Args:
            text: Range expression text

        Returns:
            Root node of the compiled expression

        Raises:
            InputTooLongError: If text is longer than the configured limit
            LexerException: If text contains a character no token accepts
            UnexpectedTokenException: If a token appears where it is not allowed
            UnexpectedElementException: If text ends before the expression is complete
            MalformedVersion: If a version literal inside the expression is invalid
            NestingTooDeepError: If groups or negations nest past the configured depth
        """
        if not isinstance(text, str):
            raise ParseException(f"Range expression must be a string, got {type(text).__name__}")

        config = self.config or default_config()
        if len(text) > config.max_input_length:
            raise InputTooLongError(len(text), config.max_input_length)

        try:
            expression = _ParserState(text, config.max_depth).parse()
        except UnexpectedCharacterException as e:
            raise LexerException(e) from e

        logger.debug("Compiled range %r to %s", text, expression)
        return expression


@lru_cache(maxsize=512)
def _compile(text: str, config: Optional[EngineConfig]) -> Expression:
    return ExpressionParser(config).parse(text)


def parse_expression(text: str, config: Optional[EngineConfig] = None) -> Expression:
    """Parse a range expression, reusing the tree for repeated text.

    See ExpressionParser.parse() for the errors raised.
    """
    if not isinstance(text, str):
        return ExpressionParser(config).parse(text)
    return _compile(text, config)


@dataclass(frozen=True)
class ParseOutcome:
    """Result of try_parse_expression(): exactly one of expression and error is set."""

    expression: Optional[Expression] = None
    error: Optional[ParseException] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def kind(self) -> Optional[ErrorKind]:
        return None if self.error is None else self.error.kind


def try_parse_expression(text: str, config: Optional[EngineConfig] = None) -> ParseOutcome:
    """Parse a range expression, returning the error instead of raising it."""
    try:
        return ParseOutcome(expression=parse_expression(text, config))
    except ParseException as e:
        return ParseOutcome(error=e)
