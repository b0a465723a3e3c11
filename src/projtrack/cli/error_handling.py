"""Reporting failures from CLI commands.

Every failure goes to stderr as "Error: <message>" and ends the command
with exit code 1.
"""

import logging
from typing import Callable, NoReturn, TypeVar

import click
from projtrack.domain.errors import DomainError

logger = logging.getLogger(__name__)

T = TypeVar("T")

EXIT_FAILURE = 1


def fail(ctx: click.Context, message: str) -> NoReturn:
    """Print an error message and stop the command."""
    click.echo(f"Error: {message}", err=True)
    ctx.exit(EXIT_FAILURE)


def handle_domain_error(ctx: click.Context, error: DomainError | ValueError) -> NoReturn:
    """Report an operation the domain layer refused."""
    logger.debug("%s rejected by %s: %s", ctx.command_path, type(error).__name__, error)
    fail(ctx, str(error))


def parse_or_fail(ctx: click.Context, parse: Callable[[str], T], value: str, label: str) -> T:
    """Parse a command-line value, failing the command on ValueError."""
    try:
        return parse(value)
    except ValueError as e:
        fail(ctx, f"Invalid {label}: {e}")
