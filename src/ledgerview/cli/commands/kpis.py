"""KPI and spending commands."""

import click
from ledgerview.cli.date_filters import period_flags_from
from ledgerview.cli.formatting import echo_header, echo_line, echo_rule, format_amount
from ledgerview.cli.snapshot import build_cli_snapshot, snapshot_options


@click.command("kpis")
@snapshot_options
@click.option("--spending", is_flag=True, help="Also show spending by category")
@click.pass_context
def kpis(ctx, transactions_file, workspace, bank, granularity, start_date, end_date, spending, **kwargs):
    """Show financial KPIs per period.

    Revenue growth is 100% when growing from zero and 0% when flat at zero.

    Examples:
        ledgerview kpis transactions.json --granularity quarter
        ledgerview kpis transactions.json --spending
    """
    snapshot = build_cli_snapshot(
        ctx, transactions_file, workspace, bank, granularity, start_date, end_date,
        period_flags_from(kwargs),
    )

    if not snapshot.kpis:
        click.echo("No transactions found.")
        return

    click.echo(
        f"\n{'Period':<12} {'Income':>14} {'Expenses':>14} {'Margin %':>9} "
        f"{'Op. Cash Flow':>14} {'Growth %':>9} {'Burn Rate':>14}"
    )
    click.echo("-" * 92)
    for point in snapshot.kpis:
        click.echo(
            f"{point.period_key:<12} {format_amount(point.income):>14} "
            f"{format_amount(point.expenses):>14} {point.net_profit_margin:>9.1f} "
            f"{format_amount(point.operating_cash_flow):>14} {point.revenue_growth:>9.1f} "
            f"{format_amount(point.burn_rate):>14}"
        )

    if spending:
        breakdown = snapshot.spending
        echo_header("Spending by Category")
        for category in breakdown.categories.values():
            if category.transactions == 0:
                continue
            echo_line(f"{category.title} ({category.transactions})", category.total_amount, indent=0)
            ranked = sorted(category.details.items(), key=lambda item: (-item[1].amount, item[0]))
            for description, detail in ranked:
                echo_line(f"{description} ({detail.transaction_count})", detail.amount)
        echo_rule()
        echo_line("Total Spent", breakdown.spent, indent=0)
        echo_line("Total Income", breakdown.income, indent=0)


def register_commands(cli):
    """Register KPI command with main CLI."""
    cli.add_command(kpis)
