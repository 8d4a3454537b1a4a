# SPDX-License-Identifier: MIT
"""CLI entry point for the opmbuild command."""

from __future__ import annotations

import sys

import click

from .config import ConfigError


class Context:
    """CLI context object passed to commands."""

    def __init__(self) -> None:
        self.verbose: bool = False


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


def echo_warning(message: str) -> None:
    """Print a warning message to stderr."""
    click.secho(f"Warning: {message}", fg="yellow", err=True)


@click.group()
@click.version_option(package_name="opm-maker")
@click.option(
    "-v",
    "--verbose",
    is_flag=True,
    help="Enable verbose output.",
)
@pass_context
def cli(ctx: Context, verbose: bool) -> None:
    """OTRS package building tool.

    Build .sopm package manifests from JSON metadata.

    \b
    Examples:
        opmbuild sopm
        opmbuild sopm --config Test.json path/to/module
        opmbuild sopm --cvs
    """
    ctx.verbose = verbose


# Import and register commands
from .commands import sopm

cli.add_command(sopm.sopm)


def main() -> None:
    """Main entry point for the CLI."""
    try:
        cli()
    except ConfigError as e:
        echo_error(str(e))
        sys.exit(1)
    except FileNotFoundError as e:
        echo_error(str(e))
        sys.exit(1)
    except Exception as e:
        echo_error(f"Unexpected error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
