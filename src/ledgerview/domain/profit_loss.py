"""Profit & Loss builder."""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional

from ledgerview.domain.adjustments import merge_section
from ledgerview.domain.aggregator import HUNDRED, subcategory_total
from ledgerview.domain.entities import (
    ZERO,
    CustomStatement,
    MergedTotal,
    PeriodBucket,
    StatementType,
    Subcategory,
)
from ledgerview.domain.estimates import Estimates, FixedRatioEstimates


@dataclass(frozen=True)
class ProfitLossView:
    """Profit & Loss statement.

    Estimated lines (cogs through finance_costs) come from the Estimates in
    use, not from the bank feed.
    """

    period_start: Optional[date]
    period_end: Optional[date]
    revenue: MergedTotal
    total_expense: Decimal
    cogs: Decimal
    gross_profit: MergedTotal
    salaries: Decimal
    rent: Decimal
    marketing: Decimal
    admin: Decimal
    depreciation: Decimal
    amortization: Decimal
    operating_expenses: MergedTotal
    operating_profit: MergedTotal
    finance_costs: Decimal
    net_profit: MergedTotal
    adjustments_available: bool = True

    @property
    def net_profit_margin(self) -> Decimal:
        """Net profit as a percentage of revenue (0 without revenue)."""
        if self.revenue.total == 0:
            return ZERO
        return self.net_profit.total / self.revenue.total * HUNDRED


def build_profit_loss(
    buckets: Sequence[PeriodBucket],
    custom_statements: Iterable[CustomStatement] = (),
    estimates: Optional[Estimates] = None,
) -> ProfitLossView:
    """Build the Profit & Loss statement.

    Args:
        buckets: Aggregated periods the statement covers
        custom_statements: Profit & Loss custom statements (income, expense)
        estimates: Source of estimated lines (defaults to FixedRatioEstimates)

    Returns:
        ProfitLossView
    """
    estimates = estimates or FixedRatioEstimates()
    statements = list(custom_statements)

    revenue = merge_section(
        subcategory_total(buckets, Subcategory.OPERATING_INCOME),
        statements,
        StatementType.INCOME,
    )
    total_expense = subcategory_total(buckets, Subcategory.OPERATING_EXPENSE)

    cogs = estimates.cogs(total_expense)
    salaries = estimates.salaries(total_expense)
    rent = estimates.rent(total_expense)
    marketing = estimates.marketing(total_expense)
    admin = estimates.admin(total_expense)
    depreciation = estimates.depreciation()
    amortization = estimates.amortization()
    finance_costs = estimates.finance_costs()

    # Expense statements are stored negative and shown as expense magnitude
    operating_expenses = merge_section(
        salaries + rent + marketing + admin + depreciation + amortization,
        statements,
        StatementType.EXPENSE,
        contra=True,
    )

    gross_profit = revenue - MergedTotal(cogs)
    operating_profit = gross_profit - operating_expenses
    net_profit = operating_profit - MergedTotal(finance_costs)

    return ProfitLossView(
        period_start=buckets[0].start if buckets else None,
        period_end=buckets[-1].end if buckets else None,
        revenue=revenue,
        total_expense=total_expense,
        cogs=cogs,
        gross_profit=gross_profit,
        salaries=salaries,
        rent=rent,
        marketing=marketing,
        admin=admin,
        depreciation=depreciation,
        amortization=amortization,
        operating_expenses=operating_expenses,
        operating_profit=operating_profit,
        finance_costs=finance_costs,
        net_profit=net_profit,
    )
