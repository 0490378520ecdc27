"""Rendering failed commands on the command line."""

import click
import structlog

from ledgerview.domain.errors import DomainError

logger = structlog.get_logger(__name__)


def handle_domain_error(ctx: click.Context, error: DomainError | ValueError) -> None:
    """Log a rejected command, print its reason and exit with status 1.

    Validation problems, bad ranges and store failures all end here, so the
    printed line always reads ``Error: <reason>``.
    """
    logger.info(
        "command_rejected",
        command=ctx.command_path,
        error_type=type(error).__name__,
        reason=str(error),
    )
    click.echo(f"Error: {error}", err=True)
    ctx.exit(1)
