"""Tests for KPI series and spending breakdown."""

from datetime import date, datetime
from decimal import Decimal

import pytest

from ledgerview.domain.aggregator import aggregate
from ledgerview.domain.analytics import kpi_series, spending_breakdown, spending_category
from ledgerview.domain.entities import DateRange, Direction, Granularity


@pytest.fixture
def classified(make_classified):
    return [
        make_classified(transaction_id="a", amount="1000", direction=Direction.CREDIT,
                        description="salary payment", booked_at=datetime(2024, 1, 5)),
        make_classified(transaction_id="b", amount="200", direction=Direction.DEBIT,
                        description="Uber ride", booked_at=datetime(2024, 1, 6)),
        make_classified(transaction_id="c", amount="50", direction=Direction.DEBIT,
                        description="Uber ride", booked_at=datetime(2024, 2, 6)),
        make_classified(transaction_id="d", amount="3000", direction=Direction.CREDIT,
                        description="loan disbursement", booked_at=datetime(2024, 2, 9)),
        make_classified(transaction_id="e", amount="80", direction=Direction.DEBIT,
                        description="", booked_at=datetime(2024, 2, 10)),
    ]


def test_kpi_series(classified):
    buckets = aggregate(classified, Granularity.MONTH, DateRange(date(2024, 1, 1), date(2024, 3, 31)))

    january, february, march = kpi_series(buckets)

    assert january.income == Decimal("1000")
    assert january.expenses == Decimal("200")
    assert january.burn_rate == Decimal("200")
    assert january.net_profit_margin == Decimal("80")
    assert january.operating_cash_flow == Decimal("800")
    assert january.revenue_growth == Decimal("100")

    assert february.income == Decimal("3000")
    assert february.revenue_growth == Decimal("200")
    # Loan proceeds are income by direction but not operating cash
    assert february.operating_cash_flow == Decimal("-130")

    assert march.income == 0
    assert march.net_profit_margin == 0
    assert march.revenue_growth == Decimal("-100")


def test_kpi_series_empty():
    assert kpi_series([]) == []


@pytest.mark.parametrize(
    "description,category",
    [
        ("Carrefour STORE", "shopping"),
        ("Careem taxi", "transport"),
        ("City pharmacy", "health"),
        ("Cinema movie night", "entertainment"),
        ("Corner cafe", "food"),
        ("Apartment mortgage", "housing"),
        ("Wire transfer", "other"),
    ],
)
def test_spending_category(description, category):
    assert spending_category(description) == category


def test_spending_breakdown(classified):
    breakdown = spending_breakdown(classified)

    assert breakdown.income == Decimal("4000")
    assert breakdown.spent == Decimal("330")

    transport = breakdown.categories["transport"]
    assert transport.transactions == 2
    assert transport.total_amount == Decimal("250")
    detail = transport.details["Uber ride"]
    assert detail.transaction_count == 2
    assert detail.smallest_payment == Decimal("50")
    assert detail.largest_payment == Decimal("200")

    other = breakdown.categories["other"]
    assert other.title == "Other"
    assert "Unknown Transaction" in other.details


def test_spending_breakdown_lists_every_category():
    breakdown = spending_breakdown([])

    assert set(breakdown.categories) == {
        "shopping",
        "transport",
        "health",
        "entertainment",
        "food",
        "housing",
        "other",
    }
    assert breakdown.spent == 0
