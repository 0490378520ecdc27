"""Period aggregation of classified transactions.

Buckets are built for every period key spanning the requested range before
any transaction is folded in, so a report never has holes in its timeline.
"""

from collections.abc import Iterable, Sequence
from datetime import date, timedelta
from decimal import Decimal
from typing import Optional

from dateutil.relativedelta import relativedelta

from ledgerview.domain import errors
from ledgerview.domain.entities import (
    ZERO,
    Activity,
    ActivityTotals,
    ClassifiedTransaction,
    DateRange,
    Granularity,
    PeriodBalance,
    PeriodBucket,
    PeriodDelta,
    Subcategory,
    Transaction,
)
from ledgerview.domain.errors import AggregationRangeError

HUNDRED = Decimal("100")

_STEP = {
    Granularity.DAY: relativedelta(days=1),
    Granularity.MONTH: relativedelta(months=1),
    Granularity.QUARTER: relativedelta(months=3),
    Granularity.YEAR: relativedelta(years=1),
}


def delta(current: Decimal, previous: Decimal) -> Decimal:
    """Return period-over-period growth in percent.

    Growing from zero counts as 100%, staying flat at zero as 0%. Every
    growth figure in the package goes through this function.
    """
    if previous == 0:
        return ZERO if current == 0 else HUNDRED
    return (current - previous) / abs(previous) * HUNDRED


def period_start(day: date, granularity: Granularity) -> date:
    """Return the first day of the period containing ``day``."""
    if granularity is Granularity.DAY:
        return day
    if granularity is Granularity.MONTH:
        return day.replace(day=1)
    if granularity is Granularity.QUARTER:
        return date(day.year, 3 * ((day.month - 1) // 3) + 1, 1)
    return date(day.year, 1, 1)


def period_key_for(day: date, granularity: Granularity) -> str:
    """Format the key of the period containing ``day``.

    Examples: ``2024-03-05`` (day), ``2024-03`` (month), ``2024-Q1``
    (quarter), ``2024`` (year).
    """
    if granularity is Granularity.DAY:
        return day.isoformat()
    if granularity is Granularity.MONTH:
        return f"{day.year:04d}-{day.month:02d}"
    if granularity is Granularity.QUARTER:
        return f"{day.year:04d}-Q{(day.month - 1) // 3 + 1}"
    return f"{day.year:04d}"


def _check_range(date_range: DateRange) -> None:
    if date_range.start > date_range.end:
        raise AggregationRangeError(errors.invalid_range(date_range.start, date_range.end))


def _periods(granularity: Granularity, date_range: DateRange) -> list[tuple[str, date, date]]:
    step = _STEP[granularity]
    periods = []
    current = period_start(date_range.start, granularity)
    while current <= date_range.end:
        following = current + step
        periods.append(
            (period_key_for(current, granularity), current, following - timedelta(days=1))
        )
        current = following
    return periods


def period_keys(granularity: Granularity, date_range: DateRange) -> list[str]:
    """List every period key spanning the range, in order.

    Raises:
        AggregationRangeError: If the range starts after it ends
    """
    _check_range(date_range)
    return [key for key, _, _ in _periods(granularity, date_range)]


def range_for(transactions: Iterable[Transaction]) -> Optional[DateRange]:
    """Return the booking-date span of the transactions, or None if empty."""
    days = [txn.booked_on for txn in transactions]
    if not days:
        return None
    return DateRange(start=min(days), end=max(days))


class _BucketTotals:
    """Mutable accumulator for one period."""

    def __init__(self):
        self.inflows = ZERO
        self.outflows = ZERO
        self.activity_in = {activity: ZERO for activity in Activity}
        self.activity_out = {activity: ZERO for activity in Activity}
        self.subcategories = {subcategory: ZERO for subcategory in Subcategory}
        self.credits = ZERO
        self.debits = ZERO
        self.pending_credits = ZERO
        self.pending_debits = ZERO
        self.count = 0

    def add(self, item: ClassifiedTransaction) -> None:
        value = item.value
        txn = item.transaction

        # Unmodeled flows only reach their subcategory and the raw totals
        if item.subcategory.is_modeled and item.is_income:
            self.inflows += value
            self.activity_in[item.activity] += value
        elif item.subcategory.is_modeled:
            self.outflows += value
            self.activity_out[item.activity] += value
        self.subcategories[item.subcategory] += value

        if txn.is_credit:
            self.credits += value
            if txn.is_pending:
                self.pending_credits += value
        else:
            self.debits += value
            if txn.is_pending:
                self.pending_debits += value
        self.count += 1

    def freeze(self, key: str, start: date, end: date) -> PeriodBucket:
        return PeriodBucket(
            period_key=key,
            start=start,
            end=end,
            inflows=self.inflows,
            outflows=self.outflows,
            by_activity={
                activity: ActivityTotals(
                    inflows=self.activity_in[activity],
                    outflows=self.activity_out[activity],
                )
                for activity in Activity
            },
            by_subcategory=dict(self.subcategories),
            credits=self.credits,
            debits=self.debits,
            pending_credits=self.pending_credits,
            pending_debits=self.pending_debits,
            transaction_count=self.count,
        )


def aggregate(
    transactions: Iterable[ClassifiedTransaction],
    granularity: Granularity,
    date_range: DateRange,
) -> list[PeriodBucket]:
    """Fold classified transactions into gap-free calendar buckets.

    Transactions booked outside the range are ignored. The result does not
    depend on the order of the input.

    Args:
        transactions: Classified transactions
        granularity: Bucket size
        date_range: Inclusive range to cover

    Returns:
        One PeriodBucket per period key, chronologically ordered

    Raises:
        AggregationRangeError: If the range starts after it ends
    """
    _check_range(date_range)
    periods = _periods(granularity, date_range)
    totals = {key: _BucketTotals() for key, _, _ in periods}

    for item in transactions:
        day = item.transaction.booked_on
        if day < date_range.start or day > date_range.end:
            continue
        totals[period_key_for(day, granularity)].add(item)

    return [totals[key].freeze(key, start, end) for key, start, end in periods]


def with_deltas(buckets: Sequence[PeriodBucket]) -> list[PeriodDelta]:
    """Return inflow/outflow/net growth for each bucket.

    The first bucket is compared against an empty period.
    """
    deltas = []
    previous: Optional[PeriodBucket] = None
    for bucket in buckets:
        prev_in = previous.inflows if previous else ZERO
        prev_out = previous.outflows if previous else ZERO
        prev_net = previous.net if previous else ZERO
        deltas.append(
            PeriodDelta(
                period_key=bucket.period_key,
                inflows=delta(bucket.inflows, prev_in),
                outflows=delta(bucket.outflows, prev_out),
                net=delta(bucket.net, prev_net),
            )
        )
        previous = bucket
    return deltas


def opening_balance(transactions: Iterable[Transaction]) -> Decimal:
    """Approximate the opening balance of a data set.

    This is the net (credits minus debits) of every transaction booked on
    the earliest booking day present, not a ledger-carried balance.
    """
    items = list(transactions)
    if not items:
        return ZERO
    first_day = min(txn.booked_on for txn in items)
    return sum(
        (txn.cash_effect for txn in items if txn.booked_on == first_day),
        ZERO,
    )


def running_balances(
    buckets: Sequence[PeriodBucket], opening: Decimal = ZERO
) -> list[PeriodBalance]:
    """Carry a cash balance through the buckets using their raw net."""
    balances = []
    balance = opening
    for bucket in buckets:
        closing = balance + bucket.cash_net
        balances.append(
            PeriodBalance(
                period_key=bucket.period_key,
                opening=balance,
                net=bucket.cash_net,
                closing=closing,
            )
        )
        balance = closing
    return balances


def subcategory_total(buckets: Iterable[PeriodBucket], subcategory: Subcategory) -> Decimal:
    """Sum one subcategory across buckets."""
    return sum((bucket.subcategory(subcategory) for bucket in buckets), ZERO)


def bucket_total(buckets: Iterable[PeriodBucket], attribute: str) -> Decimal:
    """Sum a Decimal bucket attribute (e.g. ``"credits"``) across buckets."""
    return sum((getattr(bucket, attribute) for bucket in buckets), ZERO)
