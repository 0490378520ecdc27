"""Balance Sheet builder.

Only cash, receivables, payables and retained earnings come from the bank
feed. Every other line is a proxy from the Estimates in use, computed from
computed bases only so custom statements never feed back into a ratio.
"""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional

from ledgerview.domain.adjustments import merge_section
from ledgerview.domain.aggregator import bucket_total
from ledgerview.domain.entities import (
    CustomStatement,
    MergedTotal,
    PeriodBucket,
    StatementCategory,
    StatementType,
)
from ledgerview.domain.estimates import Estimates, FixedRatioEstimates


@dataclass(frozen=True)
class BalanceSheetView:
    """Balance sheet with computed and adjusted section subtotals."""

    as_of: Optional[date]
    cash: Decimal
    receivables: Decimal
    inventory: Decimal
    vat_receivable: Decimal
    current_assets: MergedTotal
    ppe: Decimal
    right_of_use: Decimal
    intangibles: Decimal
    non_current_assets: MergedTotal
    total_assets: MergedTotal
    accounts_payable: Decimal
    vat_payable: Decimal
    short_term_loans: Decimal
    current_lease: Decimal
    current_liabilities: MergedTotal
    long_term_loans: Decimal
    non_current_lease: Decimal
    non_current_liabilities: MergedTotal
    total_liabilities: MergedTotal
    owner_capital: Decimal
    retained_earnings: Decimal
    equity: MergedTotal
    total_liabilities_and_equity: MergedTotal
    adjustments_available: bool = True

    @property
    def balance_check(self) -> Decimal:
        """Assets minus liabilities minus equity; zero when the sheet balances."""
        return self.total_assets.total - self.total_liabilities.total - self.equity.total


def build_balance_sheet(
    buckets: Sequence[PeriodBucket],
    custom_statements: Iterable[CustomStatement] = (),
    estimates: Optional[Estimates] = None,
    cash: Optional[Decimal] = None,
) -> BalanceSheetView:
    """Build the balance sheet.

    Args:
        buckets: Aggregated periods up to the balance sheet date
        custom_statements: Balance sheet custom statements
        estimates: Source of proxy lines (defaults to FixedRatioEstimates)
        cash: Account balance when the caller has one; otherwise the net
            of credits and debits in the buckets

    Returns:
        BalanceSheetView
    """
    estimates = estimates or FixedRatioEstimates()
    statements = list(custom_statements)

    credits = bucket_total(buckets, "credits")
    debits = bucket_total(buckets, "debits")

    if cash is None:
        cash = credits - debits
    receivables = bucket_total(buckets, "pending_credits")
    inventory = estimates.inventory(cash, receivables)
    vat_receivable = estimates.vat_receivable(credits, debits)
    current_assets = merge_section(
        cash + receivables + inventory + vat_receivable,
        statements,
        StatementType.ASSET,
        StatementCategory.CURRENT,
    )

    fixed = estimates.non_current_assets(current_assets.computed)
    non_current_assets = merge_section(
        fixed["ppe"] + fixed["right_of_use"] + fixed["intangibles"],
        statements,
        StatementType.ASSET,
        StatementCategory.NON_CURRENT,
    )
    total_assets = current_assets + non_current_assets

    funding = estimates.funding(total_assets.computed)
    accounts_payable = bucket_total(buckets, "pending_debits")
    vat_payable = estimates.vat_payable(credits, debits)
    current_liabilities = merge_section(
        accounts_payable + vat_payable + funding["short_term_loans"] + funding["current_lease"],
        statements,
        StatementType.LIABILITY,
        StatementCategory.CURRENT,
    )
    non_current_liabilities = merge_section(
        funding["long_term_loans"] + funding["non_current_lease"],
        statements,
        StatementType.LIABILITY,
        StatementCategory.NON_CURRENT,
    )
    total_liabilities = current_liabilities + non_current_liabilities

    retained_earnings = credits - debits
    equity = merge_section(
        funding["owner_capital"] + retained_earnings,
        statements,
        StatementType.EQUITY,
    )

    return BalanceSheetView(
        as_of=buckets[-1].end if buckets else None,
        cash=cash,
        receivables=receivables,
        inventory=inventory,
        vat_receivable=vat_receivable,
        current_assets=current_assets,
        ppe=fixed["ppe"],
        right_of_use=fixed["right_of_use"],
        intangibles=fixed["intangibles"],
        non_current_assets=non_current_assets,
        total_assets=total_assets,
        accounts_payable=accounts_payable,
        vat_payable=vat_payable,
        short_term_loans=funding["short_term_loans"],
        current_lease=funding["current_lease"],
        current_liabilities=current_liabilities,
        long_term_loans=funding["long_term_loans"],
        non_current_lease=funding["non_current_lease"],
        non_current_liabilities=non_current_liabilities,
        total_liabilities=total_liabilities,
        owner_capital=funding["owner_capital"],
        retained_earnings=retained_earnings,
        equity=equity,
        total_liabilities_and_equity=total_liabilities + equity,
    )
