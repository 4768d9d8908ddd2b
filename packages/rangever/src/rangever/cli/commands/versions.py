# SPDX-License-Identifier: MIT
"""Inspect and compare individual versions."""

from __future__ import annotations

import click

from ...compare import compare_versions
from ...errors import MalformedVersion
from ...semver import Version, parse_version
from ..main import Context, echo_info, echo_version_error, pass_context


def _parse_or_exit(text: str) -> Version:
    try:
        return parse_version(text)
    except MalformedVersion as e:
        echo_version_error(e, text.strip())
        raise SystemExit(1)


@click.command()
@click.argument("version")
@pass_context
def parse(ctx: Context, version: str) -> None:
    """Parse VERSION and print its components.

    \b
    Examples:
        rangever parse 1.2.3
        rangever parse 2.0.0-rc.1+build.456
    """
    parsed = _parse_or_exit(version)

    echo_info(f"Version: {parsed}")
    echo_info(f"  major: {parsed.major}")
    echo_info(f"  minor: {parsed.minor}")
    echo_info(f"  patch: {parsed.patch}")
    if parsed.prerelease:
        echo_info(f"  prerelease: {parsed.prerelease_str}")
    if parsed.build:
        echo_info(f"  build: {parsed.build_str}")


@click.command()
@click.argument("first")
@click.argument("second")
@pass_context
def compare(ctx: Context, first: str, second: str) -> None:
    """Compare FIRST and SECOND by precedence.

    Prints the two versions joined by <, = or >. Build metadata is ignored.
    """
    left = _parse_or_exit(first)
    right = _parse_or_exit(second)

    result = compare_versions(left, right)
    echo_info(f"{left} {result.symbol} {right}")
