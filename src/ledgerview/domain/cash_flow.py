"""Cash Flow builder, direct and indirect method.

Sign convention of the indirect method: a rise in receivables or inventory
ties up cash (negative), a rise in payables or VAT payable frees cash
(positive).
"""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from ledgerview.domain.adjustments import merge_section
from ledgerview.domain.aggregator import running_balances, subcategory_total
from ledgerview.domain.entities import (
    ZERO,
    Activity,
    CustomStatement,
    MergedTotal,
    PeriodBucket,
    StatementCategory,
    StatementType,
    Subcategory,
)
from ledgerview.domain.estimates import Estimates, FixedRatioEstimates
from ledgerview.domain.profit_loss import build_profit_loss


@dataclass(frozen=True)
class WorkingCapitalPosition:
    """Working-capital balances at the end of one bucket."""

    receivables: Decimal = ZERO
    inventory: Decimal = ZERO
    payables: Decimal = ZERO
    vat_payable: Decimal = ZERO


@dataclass(frozen=True)
class DirectCashFlow:
    operating_inflows: Decimal
    operating_outflows: Decimal
    operating: MergedTotal
    asset_sales: Decimal
    fixed_asset_purchases: Decimal
    intangible_purchases: Decimal
    investing: MergedTotal
    loan_proceeds: Decimal
    capital_contributions: Decimal
    loan_repayments: Decimal
    lease_payments: Decimal
    owner_drawings: Decimal
    financing: MergedTotal
    net_change: MergedTotal
    opening_balance: Decimal

    @property
    def closing_balance(self) -> Decimal:
        return self.opening_balance + self.net_change.total


@dataclass(frozen=True)
class IndirectCashFlow:
    net_profit: Decimal
    depreciation: Decimal
    amortization: Decimal
    interest: Decimal
    non_cash_adjustments: MergedTotal
    change_in_receivables: Decimal
    change_in_inventory: Decimal
    change_in_payables: Decimal
    change_in_vat_payable: Decimal
    working_capital: MergedTotal
    operating: MergedTotal


@dataclass(frozen=True)
class CashFlowView:
    direct: DirectCashFlow
    indirect: IndirectCashFlow
    adjustments_available: bool = True


def working_capital_positions(
    buckets: Sequence[PeriodBucket],
    estimates: Optional[Estimates] = None,
    opening_balance: Decimal = ZERO,
) -> list[WorkingCapitalPosition]:
    """Return the working-capital position at the end of each bucket."""
    estimates = estimates or FixedRatioEstimates()
    balances = running_balances(buckets, opening_balance)
    positions = []
    for bucket, balance in zip(buckets, balances):
        positions.append(
            WorkingCapitalPosition(
                receivables=bucket.pending_credits,
                inventory=estimates.inventory(balance.closing, bucket.pending_credits),
                payables=bucket.pending_debits,
                vat_payable=estimates.vat_position(bucket.credits, bucket.debits),
            )
        )
    return positions


def _build_direct(
    buckets: Sequence[PeriodBucket],
    statements: list[CustomStatement],
    opening_balance: Decimal,
) -> DirectCashFlow:
    operating_inflows = sum((b.activity(Activity.OPERATING).inflows for b in buckets), ZERO)
    operating_outflows = sum((b.activity(Activity.OPERATING).outflows for b in buckets), ZERO)
    operating = merge_section(
        operating_inflows - operating_outflows,
        statements,
        StatementType.OPERATING,
        StatementCategory.ADJUSTMENT,
    ) + merge_section(
        ZERO, statements, StatementType.OPERATING, StatementCategory.WORKING_CAPITAL
    )

    asset_sales = subcategory_total(buckets, Subcategory.ASSET_SALE)
    fixed_asset_purchases = subcategory_total(buckets, Subcategory.FIXED_ASSET_PURCHASE)
    intangible_purchases = subcategory_total(buckets, Subcategory.INTANGIBLE_PURCHASE)
    investing = merge_section(
        asset_sales - fixed_asset_purchases - intangible_purchases,
        statements,
        StatementType.INVESTING,
    )

    loan_proceeds = subcategory_total(buckets, Subcategory.LOAN_PROCEEDS)
    capital_contributions = subcategory_total(buckets, Subcategory.CAPITAL_CONTRIBUTION)
    loan_repayments = subcategory_total(buckets, Subcategory.LOAN_REPAYMENT)
    lease_payments = subcategory_total(buckets, Subcategory.LEASE_PAYMENT)
    owner_drawings = subcategory_total(buckets, Subcategory.OWNER_DRAWING)
    financing = merge_section(
        loan_proceeds + capital_contributions - loan_repayments - lease_payments - owner_drawings,
        statements,
        StatementType.FINANCING,
    )

    return DirectCashFlow(
        operating_inflows=operating_inflows,
        operating_outflows=operating_outflows,
        operating=operating,
        asset_sales=asset_sales,
        fixed_asset_purchases=fixed_asset_purchases,
        intangible_purchases=intangible_purchases,
        investing=investing,
        loan_proceeds=loan_proceeds,
        capital_contributions=capital_contributions,
        loan_repayments=loan_repayments,
        lease_payments=lease_payments,
        owner_drawings=owner_drawings,
        financing=financing,
        net_change=operating + investing + financing,
        opening_balance=opening_balance,
    )


def _build_indirect(
    buckets: Sequence[PeriodBucket],
    statements: list[CustomStatement],
    estimates: Estimates,
    opening_balance: Decimal,
) -> IndirectCashFlow:
    # Profit before any P&L custom statements, those live in another namespace
    net_profit = build_profit_loss(buckets, (), estimates).net_profit.computed
    depreciation = estimates.depreciation()
    amortization = estimates.amortization()
    interest = estimates.finance_costs()
    non_cash_adjustments = merge_section(
        depreciation + amortization + interest,
        statements,
        StatementType.OPERATING,
        StatementCategory.ADJUSTMENT,
    )

    positions = working_capital_positions(buckets, estimates, opening_balance)
    if len(positions) > 1:
        first, last = positions[0], positions[-1]
    elif positions:
        first, last = WorkingCapitalPosition(), positions[0]
    else:
        first = last = WorkingCapitalPosition()

    change_in_receivables = -(last.receivables - first.receivables)
    change_in_inventory = -(last.inventory - first.inventory)
    change_in_payables = last.payables - first.payables
    change_in_vat_payable = last.vat_payable - first.vat_payable
    working_capital = merge_section(
        change_in_receivables + change_in_inventory + change_in_payables + change_in_vat_payable,
        statements,
        StatementType.OPERATING,
        StatementCategory.WORKING_CAPITAL,
    )

    return IndirectCashFlow(
        net_profit=net_profit,
        depreciation=depreciation,
        amortization=amortization,
        interest=interest,
        non_cash_adjustments=non_cash_adjustments,
        change_in_receivables=change_in_receivables,
        change_in_inventory=change_in_inventory,
        change_in_payables=change_in_payables,
        change_in_vat_payable=change_in_vat_payable,
        working_capital=working_capital,
        operating=MergedTotal(net_profit) + non_cash_adjustments + working_capital,
    )


def build_cash_flow(
    buckets: Sequence[PeriodBucket],
    custom_statements: Iterable[CustomStatement] = (),
    estimates: Optional[Estimates] = None,
    opening_balance: Decimal = ZERO,
) -> CashFlowView:
    """Build the cash flow statement with direct and indirect sub-views.

    Each sub-view is a complete presentation of its own, so an operating
    statement appears once in each of them.

    Args:
        buckets: Aggregated periods the statement covers
        custom_statements: Cash flow custom statements
        estimates: Source of estimated lines (defaults to FixedRatioEstimates)
        opening_balance: Cash at the start of the first bucket

    Returns:
        CashFlowView
    """
    estimates = estimates or FixedRatioEstimates()
    statements = list(custom_statements)
    return CashFlowView(
        direct=_build_direct(buckets, statements, opening_balance),
        indirect=_build_indirect(buckets, statements, estimates, opening_balance),
    )
