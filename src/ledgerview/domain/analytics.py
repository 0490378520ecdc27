"""Cashflow analytics: KPI series and spending breakdown."""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from decimal import Decimal

from ledgerview.domain.aggregator import HUNDRED, delta
from ledgerview.domain.entities import (
    ZERO,
    Activity,
    ClassifiedTransaction,
    PeriodBucket,
)

UNKNOWN_DESCRIPTION = "Unknown Transaction"

# Checked in order; the first category with a matching keyword wins
SPENDING_CATEGORIES: tuple[tuple[str, str, tuple[str, ...]], ...] = (
    ("shopping", "Shopping", ("shopping", "retail", "store")),
    ("transport", "Transport", ("transport", "uber", "taxi", "bus")),
    ("health", "Health & Wellbeing", ("health", "medical", "pharmacy")),
    ("entertainment", "Entertainment", ("entertainment", "movie", "game")),
    ("food", "Food & Dining", ("food", "restaurant", "cafe")),
    ("housing", "Housing", ("housing", "rent", "mortgage")),
)
OTHER_CATEGORY = ("other", "Other")


@dataclass(frozen=True)
class KpiPoint:
    """Financial KPIs of one period."""

    period_key: str
    income: Decimal
    expenses: Decimal
    net_profit_margin: Decimal
    operating_cash_flow: Decimal
    revenue_growth: Decimal
    burn_rate: Decimal


@dataclass
class SpendingDetail:
    """Payments sharing one description."""

    amount: Decimal = ZERO
    transaction_count: int = 0
    smallest_payment: Decimal = ZERO
    largest_payment: Decimal = ZERO


@dataclass
class SpendingCategory:
    id: str
    title: str
    transactions: int = 0
    total_amount: Decimal = ZERO
    details: dict[str, SpendingDetail] = field(default_factory=dict)


@dataclass(frozen=True)
class SpendingBreakdown:
    income: Decimal
    spent: Decimal
    categories: dict[str, SpendingCategory]


def kpi_series(buckets: Sequence[PeriodBucket]) -> list[KpiPoint]:
    """Compute KPIs per bucket.

    Income and expenses follow the raw credit/debit direction; operating
    cash flow follows the classified operating activity. Revenue growth
    compares each bucket with the previous one (the first with zero).
    """
    points = []
    previous_income = ZERO
    for bucket in buckets:
        income = bucket.credits
        expenses = bucket.debits
        margin = ZERO if income == 0 else (income - expenses) / income * HUNDRED
        points.append(
            KpiPoint(
                period_key=bucket.period_key,
                income=income,
                expenses=expenses,
                net_profit_margin=margin,
                operating_cash_flow=bucket.activity(Activity.OPERATING).net,
                revenue_growth=delta(income, previous_income),
                burn_rate=expenses,
            )
        )
        previous_income = income
    return points


def spending_category(description: str) -> str:
    """Return the spending category id for a description."""
    text = description.lower()
    for category_id, _, keywords in SPENDING_CATEGORIES:
        if any(keyword in text for keyword in keywords):
            return category_id
    return OTHER_CATEGORY[0]


def spending_breakdown(classified: Iterable[ClassifiedTransaction]) -> SpendingBreakdown:
    """Group debit spending by keyword category.

    Credits only count towards total income.
    """
    categories = {
        category_id: SpendingCategory(id=category_id, title=title)
        for category_id, title, _ in SPENDING_CATEGORIES
    }
    categories[OTHER_CATEGORY[0]] = SpendingCategory(*OTHER_CATEGORY)

    income = ZERO
    spent = ZERO
    for item in classified:
        txn = item.transaction
        amount = txn.amount.value
        if txn.is_credit:
            income += amount
            continue

        spent += amount
        category = categories[spending_category(txn.description)]
        category.transactions += 1
        category.total_amount += amount

        key = txn.description or UNKNOWN_DESCRIPTION
        detail = category.details.get(key)
        if detail is None:
            detail = SpendingDetail(smallest_payment=amount, largest_payment=amount)
            category.details[key] = detail
        detail.amount += amount
        detail.transaction_count += 1
        detail.smallest_payment = min(detail.smallest_payment, amount)
        detail.largest_payment = max(detail.largest_payment, amount)

    return SpendingBreakdown(income=income, spent=spent, categories=categories)
