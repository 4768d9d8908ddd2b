# SPDX-License-Identifier: MIT
"""Evaluate versions against range expressions."""

from __future__ import annotations

import click

from ...errors import MalformedVersion, ParseException
from ...expr.ast import Expression
from ...expr.parser import ExpressionParser
from ...semver import parse_version
from ...versionset import VersionSet
from ..main import (
    Context,
    echo_error,
    echo_failure,
    echo_info,
    echo_success,
    echo_version_error,
    pass_context,
)


def _compile_or_exit(ctx: Context, text: str) -> Expression:
    try:
        return ExpressionParser(ctx.load_config()).parse(text)
    except ParseException as e:
        echo_version_error(e, text)
        raise SystemExit(1)


@click.command()
@click.argument("expression")
@click.argument("versions", nargs=-1, required=True)
@pass_context
def check(ctx: Context, expression: str, versions: tuple[str, ...]) -> None:
    """Check whether each of VERSIONS satisfies EXPRESSION.

    Exits with status 0 only if every version satisfies the range.

    \b
    Examples:
        rangever check "^1.2.3" 1.4.0
        rangever check ">=1.2.0 <2.0.0 || 3.x" 1.5.0 2.0.0 3.2.1
    """
    compiled = _compile_or_exit(ctx, expression)

    failed = 0
    for text in versions:
        try:
            version = parse_version(text)
        except MalformedVersion as e:
            echo_version_error(e, text.strip())
            raise SystemExit(1)

        if compiled.matches(version):
            echo_success(f"{version}: satisfies {expression}")
        else:
            echo_failure(f"{version}: does not satisfy {expression}")
            failed += 1

    if failed:
        raise SystemExit(1)


@click.command(name="filter")
@click.argument("expression")
@click.argument("versions", nargs=-1)
@click.option(
    "--latest",
    is_flag=True,
    help="Print only the highest satisfying version.",
)
@pass_context
def filter_(ctx: Context, expression: str, versions: tuple[str, ...], latest: bool) -> None:
    """Print the VERSIONS that satisfy EXPRESSION, sorted and deduplicated.

    \b
    Examples:
        rangever filter "1.x" 1.0.0 2.0.0 1.5.0
        rangever filter "~1.4" 1.4.0 1.4.7 1.5.0 --latest
    """
    compiled = _compile_or_exit(ctx, expression)

    collector = VersionSet.collector()
    for text in versions:
        try:
            collector.add(text)
        except MalformedVersion as e:
            echo_version_error(e, text.strip())
            raise SystemExit(1)

    if latest:
        best = collector.result.latest(compiled)
        if best is None:
            echo_error(f"No version satisfies {expression}")
            raise SystemExit(1)
        echo_info(str(best))
        return

    for version in collector.result.filter(compiled):
        echo_info(str(version))


@click.command()
@click.argument("expression")
@pass_context
def explain(ctx: Context, expression: str) -> None:
    """Print the canonical form EXPRESSION compiles to.

    Shorthand ranges are expanded to explicit comparisons, e.g. "^1.2"
    becomes ">=1.2.0 <2.0.0".
    """
    compiled = _compile_or_exit(ctx, expression)
    echo_info(str(compiled))
