"""Custom statement (manual adjustment) commands."""

import click
from ledgerview.cli.error_handling import handle_domain_error
from ledgerview.cli.formatting import format_amount
from ledgerview.cli.snapshot import DEFAULT_WORKSPACE
from ledgerview.domain.adjustments import AdjustmentService
from ledgerview.domain.entities import (
    AmountType,
    ReportType,
    StatementCategory,
    StatementType,
)
from ledgerview.domain.errors import DomainError
from ledgerview.utils.date_parser import parse_date

REPORT_CHOICES = {
    "balance-sheet": ReportType.BALANCE_SHEET,
    "profit-loss": ReportType.PROFIT_LOSS,
    "cash-flow": ReportType.CASH_FLOW,
}


def _workspace_option(command):
    return click.option(
        "--workspace",
        default=DEFAULT_WORKSPACE,
        show_default=True,
        envvar="LEDGERVIEW_WORKSPACE",
        help="Workspace the custom statements belong to",
    )(command)


def _report_argument(command):
    return click.argument("report", type=click.Choice(list(REPORT_CHOICES)))(command)


@click.group()
def adjustment_group():
    """Manage custom statements merged into reports."""
    pass


@adjustment_group.command("add")
@_report_argument
@click.argument("name")
@click.argument("amount")
@_workspace_option
@click.option(
    "--type",
    "statement_type",
    required=True,
    type=click.Choice([t.value for t in StatementType]),
    help="Statement type (must belong on the report)",
)
@click.option(
    "--category",
    type=click.Choice([c.value for c in StatementCategory]),
    help="Section category (asset/liability: current, non-current; operating: adjustment, working_capital)",
)
@click.option(
    "--amount-type",
    type=click.Choice([a.value for a in AmountType]),
    default=AmountType.DEPOSIT.value,
    show_default=True,
    help="Whether the statement adds money (deposit) or takes it away (expense)",
)
@click.option("--date", "statement_date", default="today", show_default=True, help="Statement date")
@click.pass_context
def add_statement(ctx, report, name, amount, workspace, statement_type, category, amount_type, statement_date):
    """Add a custom statement to a report.

    Examples:
        ledgerview adjustment add balance-sheet "Office deposit" 5000 --type asset --category current
        ledgerview adjustment add profit-loss "Consulting fees" 1200 --type expense --amount-type expense
        ledgerview adjustment add cash-flow "Accrual" 300 --type operating --category working_capital
    """
    service = AdjustmentService(ctx.obj["store"])

    try:
        day = parse_date(statement_date)
    except ValueError as e:
        click.echo(f"Error: Invalid date: {e}", err=True)
        ctx.exit(1)

    try:
        statement = service.add_statement(
            workspace_id=workspace,
            report=REPORT_CHOICES[report],
            name=name,
            amount=amount,
            statement_date=day,
            statement_type=StatementType(statement_type),
            amount_type=AmountType(amount_type),
            category=StatementCategory(category) if category else None,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(
        f"Added custom statement '{statement.name}' "
        f"({format_amount(statement.amount)}, ID: {statement.id})"
    )


@adjustment_group.command("list")
@_report_argument
@_workspace_option
@click.option("--type", "statement_type", type=click.Choice([t.value for t in StatementType]), help="Filter by type")
@click.pass_context
def list_statements(ctx, report, workspace, statement_type):
    """List custom statements of a report."""
    service = AdjustmentService(ctx.obj["store"])

    try:
        statements = service.list_statements(
            workspace,
            REPORT_CHOICES[report],
            statement_type=StatementType(statement_type) if statement_type else None,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    if not statements:
        click.echo("No custom statements found.")
        return

    click.echo(f"\nCustom statements ({report}, workspace '{workspace}'):")
    click.echo("-" * 100)
    for s in statements:
        category = s.category.value if s.category else "-"
        click.echo(
            f"{s.date.isoformat()} | {s.type.value:<10} | {category:<15} | "
            f"{format_amount(s.amount):>14} | {s.name} (ID: {s.id})"
        )


@adjustment_group.command("remove")
@_report_argument
@click.argument("statement_id")
@_workspace_option
@click.pass_context
def remove_statement(ctx, report, statement_id, workspace):
    """Remove a custom statement by ID."""
    service = AdjustmentService(ctx.obj["store"])

    try:
        service.remove_statement(workspace, REPORT_CHOICES[report], statement_id)
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Removed custom statement {statement_id}")


@adjustment_group.command("clear")
@_report_argument
@_workspace_option
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def clear_statements(ctx, report, workspace, yes):
    """Remove every custom statement of a report."""
    service = AdjustmentService(ctx.obj["store"])

    if not yes and not click.confirm(
        f"Are you sure you want to remove all {report} custom statements of workspace '{workspace}'?"
    ):
        click.echo("Clear cancelled.")
        return

    try:
        service.clear(workspace, REPORT_CHOICES[report])
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Cleared {report} custom statements of workspace '{workspace}'")


def register_commands(cli):
    """Register adjustment commands with main CLI."""
    cli.add_command(adjustment_group, name="adjustment")
