"""Shared options and snapshot building for report commands."""

from decimal import Decimal

import click

from ledgerview.cli.date_filters import period_options, resolve_cli_date_range
from ledgerview.cli.error_handling import handle_domain_error
from ledgerview.cli.formatting import warn
from ledgerview.cli.input import load_records
from ledgerview.domain.entities import DateRange, Granularity, ReportType
from ledgerview.domain.errors import DomainError
from ledgerview.domain.reporting import StatementService, StatementSnapshot

DEFAULT_WORKSPACE = "default"


def snapshot_options(command):
    """Attach the input file and filter options shared by report commands."""
    command = period_options(command)
    command = click.option(
        "--granularity",
        type=click.Choice([g.value for g in Granularity]),
        default=Granularity.MONTH.value,
        show_default=True,
        help="Period bucket size",
    )(command)
    command = click.option(
        "--bank", help="Only include transactions of this bank id ('all' for every bank)"
    )(command)
    command = click.option(
        "--workspace",
        default=DEFAULT_WORKSPACE,
        show_default=True,
        envvar="LEDGERVIEW_WORKSPACE",
        help="Workspace whose custom statements are merged",
    )(command)
    command = click.argument(
        "transactions_file", type=click.Path(exists=True, dir_okay=False)
    )(command)
    return command


def build_cli_snapshot(
    ctx: click.Context,
    transactions_file: str,
    workspace: str,
    bank: str | None,
    granularity: str,
    start_date: str | None,
    end_date: str | None,
    period_flags: dict[str, bool],
    cash: Decimal | None = None,
) -> StatementSnapshot:
    """Load records and build a snapshot, reporting problems on stderr."""
    start, end = resolve_cli_date_range(
        ctx, start_date=start_date, end_date=end_date, period_flags=period_flags
    )
    records = load_records(ctx, transactions_file)
    service = StatementService(ctx.obj["store"])

    date_range = DateRange(start=start, end=end) if start and end else None
    try:
        snapshot = service.build_snapshot(
            records,
            workspace_id=workspace,
            granularity=Granularity(granularity),
            date_range=date_range,
            bank_filter=bank,
            cash=cash,
            start=start,
            end=end,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    for message in snapshot.normalization_errors:
        warn(f"skipped {message}")
    return snapshot


def report_adjustment_errors(snapshot: StatementSnapshot, report: ReportType) -> None:
    """Warn when a report is shown without its custom statements."""
    error = snapshot.adjustment_errors.get(report)
    if error is not None:
        warn(f"custom statements unavailable, showing computed figures only ({error})")
