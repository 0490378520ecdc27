"""Main CLI entry point."""

import click
from ledgerview.database.factories import create_sqlite_store
from ledgerview.logging_config import configure_logging

# Import and register all commands at module level
from ledgerview.cli.commands import adjustment, classify, kpis, report


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides LEDGERVIEW_DB_PATH environment variable)",
    envvar="LEDGERVIEW_DB_PATH",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="WARNING",
    show_default=True,
    envvar="LEDGERVIEW_LOG_LEVEL",
    help="Log level for diagnostics on stderr",
)
@click.option(
    "--log-format",
    type=click.Choice(["console", "json"]),
    default="console",
    show_default=True,
    envvar="LEDGERVIEW_LOG_FORMAT",
    help="Log output format",
)
@click.pass_context
def cli(ctx, db_path: str | None, log_level: str, log_format: str):
    """Ledgerview - financial statements from bank transactions.

    Classify aggregator transactions into operating, investing and financing
    activity and derive a balance sheet, profit & loss and cash flow
    statement, with manual adjustments kept per workspace.
    """
    ctx.ensure_object(dict)
    configure_logging(level=log_level.upper(), format=log_format)

    # Open the adjustment store only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        store = create_sqlite_store(database_path=db_path)
        store.connect()
        ctx.obj["store"] = store
        ctx.call_on_close(store.disconnect)


# Register all commands
classify.register_commands(cli)
report.register_commands(cli)
kpis.register_commands(cli)
adjustment.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
