# SPDX-License-Identifier: MIT
"""Unit tests for the range expression parser."""

import pytest

from rangever import (
    And,
    Comparison,
    EngineConfig,
    ErrorKind,
    ExpressionParser,
    InputTooLongError,
    LexerException,
    MalformedVersion,
    NestingTooDeepError,
    Not,
    Operator,
    Or,
    ParseException,
    Range,
    TokenKind,
    UnexpectedCharacterException,
    UnexpectedElementException,
    UnexpectedTokenException,
    Version,
    parse_expression,
    parse_version,
    try_parse_expression,
)


def v(text: str) -> Version:
    return parse_version(text)


class TestStructure:
    """Tests for the shape of the parsed tree."""

    def test_single_comparison(self):
        """Test a lone comparison."""
        assert parse_expression(">=1.2.0") == Comparison(Operator.GE, v("1.2.0"))

    def test_comparator_with_space(self):
        """Test that whitespace may follow the operator."""
        assert parse_expression(">= 1.2.0") == parse_expression(">=1.2.0")

    def test_implicit_and(self):
        """Test that juxtaposed comparisons are joined by AND."""
        assert parse_expression(">=1.2.0 <2.0.0") == And(
            Comparison(Operator.GE, v("1.2.0")), Comparison(Operator.LT, v("2.0.0"))
        )

    def test_explicit_and_matches_implicit(self):
        """Test that && builds the same tree as juxtaposition."""
        assert parse_expression(">=1.2.0 && <2.0.0") == parse_expression(">=1.2.0 <2.0.0")

    def test_and_is_left_associative(self):
        """Test chaining three terms."""
        tree = parse_expression(">1.0.0 <3.0.0 !=2.0.0")
        assert isinstance(tree, And)
        assert isinstance(tree.left, And)
        assert tree.right == Not(Comparison(Operator.EQ, v("2.0.0")))

    def test_and_binds_tighter_than_or(self):
        """Test precedence of implicit AND over OR."""
        tree = parse_expression(">=1.2.0 <2.0.0 || 3.x")
        assert isinstance(tree, Or)
        assert isinstance(tree.left, And)
        assert tree.right == Range(v("3.0.0"), v("4.0.0-0"))

    def test_parentheses_override_precedence(self):
        """Test that grouping changes the tree."""
        tree = parse_expression(">=1.0.0 (<2.0.0 || >3.0.0)")
        assert isinstance(tree, And)
        assert isinstance(tree.right, Or)

    def test_not(self):
        """Test negation of a group."""
        tree = parse_expression("!(1.x || 3.x)")
        assert isinstance(tree, Not)
        assert isinstance(tree.inner, Or)

    def test_double_not(self):
        """Test stacked negation."""
        assert parse_expression("!!1.2.3") == Not(Not(Comparison(Operator.EQ, v("1.2.3"))))

    def test_not_equal_operator(self):
        """Test that != is a comparison, not NOT followed by =."""
        assert parse_expression("!=1.2.3") == Not(Comparison(Operator.EQ, v("1.2.3")))

    def test_prerelease_and_build_in_literal(self):
        """Test labels inside a range literal."""
        tree = parse_expression(">=1.2.3-beta.2+build.7")
        assert tree == Comparison(Operator.GE, v("1.2.3-beta.2"))
        assert tree.version.build == ("build", "7")


class TestShorthands:
    """Tests that shorthand syntax reaches the factory intact."""

    def test_caret(self):
        """Test caret syntax."""
        assert parse_expression("^1.2.3") == Range(v("1.2.3"), v("2.0.0-0"))

    def test_tilde(self):
        """Test tilde syntax."""
        assert parse_expression("~1.4") == Range(v("1.4.0"), v("1.5.0-0"))

    @pytest.mark.parametrize("text", ["1.2.x", "1.2.X", "1.2.*", "1.2"])
    def test_wildcards(self, text):
        """Test the spellings of a minor wildcard."""
        assert parse_expression(text) == Range(v("1.2.0"), v("1.3.0-0"))

    def test_double_wildcard(self):
        """Test that wildcards may repeat."""
        assert parse_expression("1.x.x") == parse_expression("1.x")

    def test_hyphen_range(self):
        """Test hyphen syntax."""
        assert parse_expression("1.2.3 - 2.3.4") == Range(v("1.2.3"), v("2.3.4"), True, True)

    def test_hyphen_range_with_prerelease(self):
        """Test that pre-release labels work on both hyphen bounds."""
        tree = parse_expression("1.0.0-rc.1 - 2.0.0-beta")
        assert tree == Range(v("1.0.0-rc.1"), v("2.0.0-beta"), True, True)

    def test_hyphen_in_composite(self):
        """Test a hyphen range inside OR."""
        tree = parse_expression("1.0.0 - 1.5.0 || >=3.0.0")
        assert isinstance(tree, Or)
        assert tree.left == Range(v("1.0.0"), v("1.5.0"), True, True)

    def test_bare_star(self):
        """Test that * parses to a match-everything comparison."""
        assert parse_expression("*").matches(v("0.0.0-0"))


class TestUnexpectedTokens:
    """Tests for syntax errors on a specific token."""

    def test_wildcard_then_number(self):
        """Test that a number cannot follow a wildcard component."""
        with pytest.raises(UnexpectedTokenException) as exc_info:
            parse_expression(">= 1.x.0")
        assert exc_info.value.token.kind is TokenKind.NUMBER
        assert exc_info.value.position == 7

    def test_too_many_components(self):
        """Test a fourth version component."""
        with pytest.raises(UnexpectedTokenException) as exc_info:
            parse_expression("1.2.3.4")
        assert exc_info.value.token.kind is TokenKind.DOT
        assert exc_info.value.position == 5

    def test_label_on_partial(self):
        """Test that labels need a complete literal."""
        with pytest.raises(UnexpectedTokenException) as exc_info:
            parse_expression("1.2-beta")
        assert exc_info.value.token.text == "-beta"

    def test_missing_operand(self):
        """Test an operator followed by another operator."""
        with pytest.raises(UnexpectedTokenException) as exc_info:
            parse_expression(">=<1.0.0")
        assert exc_info.value.expected == frozenset({TokenKind.NUMBER, TokenKind.WILDCARD})
        assert exc_info.value.token.kind is TokenKind.COMPARATOR

    def test_stray_closing_paren(self):
        """Test an unmatched closing parenthesis."""
        with pytest.raises(UnexpectedTokenException) as exc_info:
            parse_expression("1.0.0)")
        assert exc_info.value.token.kind is TokenKind.RPAREN
        assert TokenKind.END in exc_info.value.expected

    def test_hyphen_after_comparison(self):
        """Test that hyphen ranges take bare literals only."""
        with pytest.raises(UnexpectedTokenException) as exc_info:
            parse_expression(">=1.0.0 - 2.0.0")
        assert exc_info.value.token.kind is TokenKind.HYPHEN

    def test_leading_or(self):
        """Test an expression starting with an operator."""
        with pytest.raises(UnexpectedTokenException):
            parse_expression("|| 1.0.0")

    def test_message_names_expected_and_found(self):
        """Test that the message points at the offending token."""
        with pytest.raises(UnexpectedTokenException, match="found RPAREN"):
            parse_expression("()")


class TestUnexpectedElements:
    """Tests for input that ends too early."""

    @pytest.mark.parametrize("text", ["(1.0.0", "", "   ", ">=", "1.0.0 ||", "1.", "!", "1.0.0 -"])
    def test_premature_end(self, text):
        """Test that every truncated expression reports the end of input."""
        with pytest.raises(UnexpectedElementException):
            parse_expression(text)

    def test_unterminated_group_expects_paren(self):
        """Test that the missing element is named."""
        with pytest.raises(UnexpectedElementException) as exc_info:
            parse_expression("(1.0.0")
        assert exc_info.value.expected == frozenset({TokenKind.RPAREN})
        assert exc_info.value.position == 6


class TestLexicalErrors:
    """Tests for lexer failures surfacing through the parser."""

    def test_wrapped(self):
        """Test that character errors are wrapped in LexerException."""
        with pytest.raises(LexerException) as exc_info:
            parse_expression(">=1.0.0 $")
        assert isinstance(exc_info.value.cause, UnexpectedCharacterException)
        assert exc_info.value.__cause__ is exc_info.value.cause
        assert exc_info.value.position == 8

    def test_single_pipe(self):
        """Test that a lone '|' is a lexical error."""
        with pytest.raises(LexerException):
            parse_expression("1.0.0 | 2.0.0")


class TestMalformedLiterals:
    """Tests for invalid numbers and labels inside ranges."""

    def test_leading_zero(self):
        """Test a leading zero in a partial literal."""
        with pytest.raises(MalformedVersion) as exc_info:
            parse_expression("^01.2")
        assert exc_info.value.position == 1

    def test_bad_prerelease(self):
        """Test that label errors report positions in the whole expression."""
        with pytest.raises(MalformedVersion) as exc_info:
            parse_expression(">=1.0.0 <2.0.0-alpha..1")
        assert exc_info.value.position == 21
        assert exc_info.value.text == ">=1.0.0 <2.0.0-alpha..1"


class TestErrorFamily:
    """Tests for catching errors broadly."""

    @pytest.mark.parametrize("text", ["(1.0.0", ">= 1.x.0", "1 $", "^01"])
    def test_all_are_parse_exceptions(self, text):
        """Test that every parse failure is a ParseException."""
        with pytest.raises(ParseException):
            parse_expression(text)

    def test_non_string(self):
        """Test that non-string input is rejected."""
        with pytest.raises(ParseException):
            parse_expression(None)  # type: ignore[arg-type]


class TestTryParse:
    """Tests for the result-returning parse helper."""

    def test_success(self):
        """Test a successful outcome."""
        outcome = try_parse_expression("^1.0.0")
        assert outcome.ok
        assert outcome.error is None
        assert outcome.kind is None
        assert outcome.expression == Range(v("1.0.0"), v("2.0.0-0"))

    @pytest.mark.parametrize(
        "text,kind",
        [
            ("(1.0.0", ErrorKind.UNEXPECTED_ELEMENT),
            (">= 1.x.0", ErrorKind.UNEXPECTED_TOKEN),
            ("1.0.0 $", ErrorKind.LEXER),
            ("01.0.0", ErrorKind.MALFORMED_VERSION),
            ("!" * 1000 + "1.0.0", ErrorKind.NESTING_TOO_DEEP),
        ],
    )
    def test_failure_kinds(self, text, kind):
        """Test that failures are tagged with their kind."""
        outcome = try_parse_expression(text)
        assert not outcome.ok
        assert outcome.expression is None
        assert outcome.kind is kind


class TestConfiguredParser:
    """Tests for the length and nesting limits."""

    def test_too_long(self):
        """Test that long input is rejected before lexing."""
        parser = ExpressionParser(EngineConfig(max_input_length=10))
        with pytest.raises(InputTooLongError) as exc_info:
            parser.parse(">=1.0.0 <2.0.0")
        assert exc_info.value.length == 14
        assert exc_info.value.limit == 10

    def test_within_limit(self):
        """Test that input at the limit is accepted."""
        parser = ExpressionParser(EngineConfig(max_input_length=7))
        assert parser.parse(">=1.0.0") == Comparison(Operator.GE, v("1.0.0"))

    def test_cached_trees_are_shared(self):
        """Test that repeated text reuses the compiled tree."""
        assert parse_expression("~2.1") is parse_expression("~2.1")

    def test_deep_parentheses(self):
        """Test that nesting past the default depth is rejected at the offending group."""
        with pytest.raises(NestingTooDeepError) as exc_info:
            parse_expression("(" * 300 + "1.0.0" + ")" * 300)
        assert exc_info.value.limit == 64
        assert exc_info.value.position == 64

    def test_long_negation_chain(self):
        """Test that a run of '!' counts toward the depth limit."""
        with pytest.raises(NestingTooDeepError) as exc_info:
            parse_expression("!" * 1000 + "1.0.0")
        assert exc_info.value.position == 64

    def test_mixed_nesting(self):
        """Test that groups and negations share one depth count."""
        with pytest.raises(NestingTooDeepError) as exc_info:
            parse_expression("!(" * 40 + "1.0.0" + ")" * 40)
        assert exc_info.value.position == 64

    def test_nesting_at_limit(self):
        """Test that nesting up to the default depth parses."""
        tree = parse_expression("(" * 64 + "1.0.0" + ")" * 64)
        assert tree == Comparison(Operator.EQ, v("1.0.0"))

    def test_even_negations_at_limit(self):
        """Test that a long but allowed negation chain builds nested Not nodes."""
        tree = parse_expression("!" * 64 + "1.0.0")
        assert tree.matches(v("1.0.0"))
        assert not tree.matches(v("1.0.1"))

    def test_configured_depth(self):
        """Test that the depth limit comes from the parser's configuration."""
        parser = ExpressionParser(EngineConfig(max_depth=2))
        assert parser.parse("((1.0.0))") == Comparison(Operator.EQ, v("1.0.0"))
        assert parser.parse("!!1.0.0") == Not(Not(Comparison(Operator.EQ, v("1.0.0"))))
        with pytest.raises(NestingTooDeepError) as exc_info:
            parser.parse("(!(1.0.0))")
        assert exc_info.value.position == 2
        assert exc_info.value.kind is ErrorKind.NESTING_TOO_DEEP

    def test_depth_resets_between_groups(self):
        """Test that sibling groups do not add up."""
        parser = ExpressionParser(EngineConfig(max_depth=1))
        tree = parser.parse("(1.x) !2.0.0 || (3.x) (<4.0.0)")
        assert isinstance(tree, Or)

    def test_long_and_chain(self):
        """Test that long flat chains are not limited by depth."""
        tree = parse_expression(" ".join(["*"] * 500))
        assert isinstance(tree, And)
