"""Financial statement commands."""

import click
from ledgerview.cli.date_filters import period_flags_from
from ledgerview.cli.formatting import (
    echo_header,
    echo_line,
    echo_rule,
    echo_total,
    format_amount,
)
from ledgerview.cli.snapshot import (
    build_cli_snapshot,
    report_adjustment_errors,
    snapshot_options,
)
from ledgerview.domain.entities import ReportType
from ledgerview.utils.amount_parser import parse_amount


def _period_label(start, end) -> str:
    if start is None or end is None:
        return "no transactions"
    return f"{start.isoformat()} to {end.isoformat()}"


@click.group()
def report_group():
    """Show financial statements derived from bank transactions."""
    pass


@report_group.command("balance-sheet")
@snapshot_options
@click.option("--cash", help="Known account balance to use as cash")
@click.pass_context
def balance_sheet(ctx, transactions_file, workspace, bank, granularity, start_date, end_date, cash, **kwargs):
    """Show the balance sheet.

    Lines other than cash, receivables, payables and retained earnings are
    estimated from fixed ratios.

    Examples:
        ledgerview report balance-sheet transactions.json
        ledgerview report balance-sheet transactions.json --cash 125000 --this-year
    """
    cash_value = None
    if cash is not None:
        try:
            cash_value = parse_amount(cash)
        except ValueError as e:
            click.echo(f"Error: Invalid cash amount: {e}", err=True)
            ctx.exit(1)

    snapshot = build_cli_snapshot(
        ctx, transactions_file, workspace, bank, granularity, start_date, end_date,
        period_flags_from(kwargs), cash=cash_value,
    )
    report_adjustment_errors(snapshot, ReportType.BALANCE_SHEET)
    view = snapshot.balance_sheet

    as_of = view.as_of.isoformat() if view.as_of else "no transactions"
    echo_header(f"Balance Sheet as of {as_of}")
    click.echo("Current Assets")
    echo_line("Cash", view.cash)
    echo_line("Accounts Receivable", view.receivables)
    echo_line("Inventory (est.)", view.inventory)
    echo_line("VAT Receivable (est.)", view.vat_receivable)
    echo_total("Total Current Assets", view.current_assets)
    click.echo("Non-Current Assets")
    echo_line("Property, Plant & Equipment (est.)", view.ppe)
    echo_line("Right-of-Use Assets (est.)", view.right_of_use)
    echo_line("Intangible Assets (est.)", view.intangibles)
    echo_total("Total Non-Current Assets", view.non_current_assets)
    echo_rule()
    echo_total("TOTAL ASSETS", view.total_assets)
    echo_rule("=")

    click.echo("Current Liabilities")
    echo_line("Accounts Payable", view.accounts_payable)
    echo_line("VAT Payable (est.)", view.vat_payable)
    echo_line("Short-Term Loans (est.)", view.short_term_loans)
    echo_line("Lease Liabilities, Current (est.)", view.current_lease)
    echo_total("Total Current Liabilities", view.current_liabilities)
    click.echo("Non-Current Liabilities")
    echo_line("Long-Term Loans (est.)", view.long_term_loans)
    echo_line("Lease Liabilities, Non-Current (est.)", view.non_current_lease)
    echo_total("Total Non-Current Liabilities", view.non_current_liabilities)
    echo_total("TOTAL LIABILITIES", view.total_liabilities)
    click.echo("Equity")
    echo_line("Owner's Capital (est.)", view.owner_capital)
    echo_line("Retained Earnings", view.retained_earnings)
    echo_total("Total Equity", view.equity)
    echo_rule()
    echo_total("TOTAL LIABILITIES & EQUITY", view.total_liabilities_and_equity)
    echo_rule("=")
    echo_line("Balance Check", view.balance_check, indent=0)


@report_group.command("profit-loss")
@snapshot_options
@click.pass_context
def profit_loss(ctx, transactions_file, workspace, bank, granularity, start_date, end_date, **kwargs):
    """Show the profit & loss statement.

    Cost lines are estimated as fixed shares of total operating expense.

    Examples:
        ledgerview report profit-loss transactions.json --last-quarter
    """
    snapshot = build_cli_snapshot(
        ctx, transactions_file, workspace, bank, granularity, start_date, end_date,
        period_flags_from(kwargs),
    )
    report_adjustment_errors(snapshot, ReportType.PROFIT_LOSS)
    view = snapshot.profit_loss

    echo_header(f"Profit & Loss, {_period_label(view.period_start, view.period_end)}")
    echo_total("Revenue", view.revenue)
    echo_line("Cost of Goods Sold (est.)", view.cogs)
    echo_rule()
    echo_total("Gross Profit", view.gross_profit)
    click.echo("Operating Expenses")
    echo_line("Salaries (est.)", view.salaries)
    echo_line("Rent (est.)", view.rent)
    echo_line("Marketing (est.)", view.marketing)
    echo_line("Administrative (est.)", view.admin)
    echo_line("Depreciation (est.)", view.depreciation)
    echo_line("Amortization (est.)", view.amortization)
    echo_total("Total Operating Expenses", view.operating_expenses)
    echo_rule()
    echo_total("Operating Profit", view.operating_profit)
    echo_line("Finance Costs (est.)", view.finance_costs, indent=0)
    echo_rule("=")
    echo_total("NET PROFIT", view.net_profit)
    click.echo(f"{'Net Profit Margin':<50} {view.net_profit_margin:>19.2f}%")


def _show_direct(direct) -> None:
    echo_header("Cash Flow (direct method)")
    click.echo("Operating Activities")
    echo_line("Cash Received", direct.operating_inflows)
    echo_line("Cash Paid", -direct.operating_outflows)
    echo_total("Net Cash from Operating Activities", direct.operating)
    click.echo("Investing Activities")
    echo_line("Sale of Assets", direct.asset_sales)
    echo_line("Purchase of Fixed Assets", -direct.fixed_asset_purchases)
    echo_line("Purchase of Intangible Assets", -direct.intangible_purchases)
    echo_total("Net Cash from Investing Activities", direct.investing)
    click.echo("Financing Activities")
    echo_line("Loan Proceeds", direct.loan_proceeds)
    echo_line("Capital Contributions", direct.capital_contributions)
    echo_line("Loan Repayments", -direct.loan_repayments)
    echo_line("Lease Payments", -direct.lease_payments)
    echo_line("Owner Drawings", -direct.owner_drawings)
    echo_total("Net Cash from Financing Activities", direct.financing)
    echo_rule()
    echo_total("Net Change in Cash", direct.net_change)
    echo_line("Opening Balance", direct.opening_balance, indent=0)
    echo_line("Closing Balance", direct.closing_balance, indent=0)
    echo_rule("=")


def _show_indirect(indirect) -> None:
    echo_header("Cash Flow (indirect method)")
    echo_line("Net Profit", indirect.net_profit, indent=0)
    click.echo("Adjustments for Non-Cash Items")
    echo_line("Depreciation (est.)", indirect.depreciation)
    echo_line("Amortization (est.)", indirect.amortization)
    echo_line("Interest (est.)", indirect.interest)
    echo_total("Total Adjustments", indirect.non_cash_adjustments)
    click.echo("Changes in Working Capital")
    echo_line("Accounts Receivable", indirect.change_in_receivables)
    echo_line("Inventory (est.)", indirect.change_in_inventory)
    echo_line("Accounts Payable", indirect.change_in_payables)
    echo_line("VAT Payable (est.)", indirect.change_in_vat_payable)
    echo_total("Total Working Capital Changes", indirect.working_capital)
    echo_rule()
    echo_total("Net Cash from Operating Activities", indirect.operating)
    echo_rule("=")


@report_group.command("cash-flow")
@snapshot_options
@click.option(
    "--method",
    type=click.Choice(["direct", "indirect", "both"]),
    default="both",
    show_default=True,
    help="Cash flow presentation",
)
@click.pass_context
def cash_flow(ctx, transactions_file, workspace, bank, granularity, start_date, end_date, method, **kwargs):
    """Show the cash flow statement.

    Examples:
        ledgerview report cash-flow transactions.json --method indirect
    """
    snapshot = build_cli_snapshot(
        ctx, transactions_file, workspace, bank, granularity, start_date, end_date,
        period_flags_from(kwargs),
    )
    report_adjustment_errors(snapshot, ReportType.CASH_FLOW)
    view = snapshot.cash_flow

    if method in ("direct", "both"):
        _show_direct(view.direct)
    if method in ("indirect", "both"):
        _show_indirect(view.indirect)

    if snapshot.buckets:
        echo_header("Balance by Period")
        for balance in snapshot.period_balances:
            click.echo(
                f"    {balance.period_key:<14} opening {format_amount(balance.opening):>16}"
                f"  net {format_amount(balance.net):>16}"
                f"  closing {format_amount(balance.closing):>16}"
            )


def register_commands(cli):
    """Register report commands with main CLI."""
    cli.add_command(report_group, name="report")
