# SPDX-License-Identifier: MIT
"""CLI entry point for the rangever command."""

from __future__ import annotations

import logging
import sys
from typing import Optional

import click

from ..config import ConfigError, EngineConfig
from ..errors import VersionException


class Context:
    """CLI context object passed to commands."""

    def __init__(self) -> None:
        self.config: Optional[EngineConfig] = None
        self.verbose: bool = False

    def load_config(self) -> EngineConfig:
        """Load configuration, caching the result."""
        if self.config is None:
            self.config = EngineConfig.from_env()
        return self.config


pass_context = click.make_pass_decorator(Context, ensure=True)


def echo_error(message: str) -> None:
    """Print an error message to stderr."""
    click.secho(f"Error: {message}", fg="red", err=True)


def echo_success(message: str) -> None:
    """Print a success message."""
    click.secho(message, fg="green")


def echo_info(message: str) -> None:
    """Print an info message."""
    click.echo(message)


def echo_failure(message: str) -> None:
    """Print a negative result (not an error)."""
    click.secho(message, fg="yellow")


def echo_version_error(error: VersionException, text: str) -> None:
    """Print a version-engine error with a marker under the offending character."""
    echo_error(error.message)
    if error.position is not None and text:
        click.echo(f"  {text}", err=True)
        click.echo("  " + " " * error.position + "^", err=True)


@click.group()
@click.version_option(package_name="rangever")
@click.option(
    "-v",
    "--verbose",
    is_flag=True,
    help="Enable verbose output.",
)
@pass_context
def cli(ctx: Context, verbose: bool) -> None:
    """Semantic version and version-range tool.

    Parse and compare versions, and test them against range expressions.

    \b
    Examples:
        rangever parse 1.2.3-beta.1+build.7
        rangever compare 1.0.0-alpha 1.0.0
        rangever check ">=1.2.0 <2.0.0 || 3.x" 1.5.0 2.0.0
        rangever filter "^1.2" 1.1.0 1.2.5 1.9.0 2.0.0 --latest
        rangever explain "~1.4 || 2.x"
    """
    ctx.verbose = verbose
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")


# Import and register commands
from .commands import versions, ranges

cli.add_command(versions.parse)
cli.add_command(versions.compare)
cli.add_command(ranges.check)
cli.add_command(ranges.filter_)
cli.add_command(ranges.explain)


def main() -> None:
    """Main entry point for the CLI."""
    try:
        cli()
    except ConfigError as e:
        echo_error(str(e))
        sys.exit(1)
    except Exception as e:
        echo_error(f"Unexpected error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
