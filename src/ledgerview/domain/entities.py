"""Domain model entities for ledgerview.

These are pure data classes representing the business concepts the engine
works with, independent of the aggregator payload and of the storage schema.
Money is always a Decimal; the sign of a bank movement lives in its
direction, never in its value.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Optional


ZERO = Decimal("0")


class Direction(str, Enum):
    """Credit/debit indicator of a bank movement."""

    CREDIT = "CREDIT"
    DEBIT = "DEBIT"


class Activity(str, Enum):
    """Cash-flow activity a transaction belongs to."""

    OPERATING = "operating"
    INVESTING = "investing"
    FINANCING = "financing"


class Subcategory(str, Enum):
    """Fine-grained classification within an activity."""

    OPERATING_INCOME = "operating_income"
    OPERATING_EXPENSE = "operating_expense"
    ASSET_SALE = "asset_sale"
    FIXED_ASSET_PURCHASE = "fixed_asset_purchase"
    INTANGIBLE_PURCHASE = "intangible_purchase"
    INTANGIBLE_CREDIT = "intangible_credit"
    LOAN_PROCEEDS = "loan_proceeds"
    LOAN_REPAYMENT = "loan_repayment"
    LEASE_PAYMENT = "lease_payment"
    CAPITAL_CONTRIBUTION = "capital_contribution"
    OWNER_DRAWING = "owner_drawing"

    @property
    def activity(self) -> Activity:
        return SUBCATEGORY_ACTIVITY[self]

    @property
    def is_modeled(self) -> bool:
        """Whether the subcategory feeds inflow and outflow totals."""
        return self not in UNMODELED_SUBCATEGORIES


SUBCATEGORY_ACTIVITY: dict[Subcategory, Activity] = {
    Subcategory.OPERATING_INCOME: Activity.OPERATING,
    Subcategory.OPERATING_EXPENSE: Activity.OPERATING,
    Subcategory.ASSET_SALE: Activity.INVESTING,
    Subcategory.FIXED_ASSET_PURCHASE: Activity.INVESTING,
    Subcategory.INTANGIBLE_PURCHASE: Activity.INVESTING,
    Subcategory.INTANGIBLE_CREDIT: Activity.INVESTING,
    Subcategory.LOAN_PROCEEDS: Activity.FINANCING,
    Subcategory.LOAN_REPAYMENT: Activity.FINANCING,
    Subcategory.LEASE_PAYMENT: Activity.FINANCING,
    Subcategory.CAPITAL_CONTRIBUTION: Activity.FINANCING,
    Subcategory.OWNER_DRAWING: Activity.FINANCING,
}

# Money in on an intangible is kept visible but counted in no statement
UNMODELED_SUBCATEGORIES = frozenset({Subcategory.INTANGIBLE_CREDIT})


class Granularity(str, Enum):
    """Calendar bucket size used by the period aggregator."""

    DAY = "day"
    MONTH = "month"
    QUARTER = "quarter"
    YEAR = "year"


class StatementType(str, Enum):
    """Kind of line item a custom statement represents."""

    ASSET = "asset"
    LIABILITY = "liability"
    EQUITY = "equity"
    INCOME = "income"
    EXPENSE = "expense"
    OPERATING = "operating"
    INVESTING = "investing"
    FINANCING = "financing"


class StatementCategory(str, Enum):
    """Section a custom statement is filed under, where applicable."""

    CURRENT = "current"
    NON_CURRENT = "non-current"
    ADJUSTMENT = "adjustment"
    WORKING_CAPITAL = "working_capital"


class AmountType(str, Enum):
    """Whether a custom statement adds money or takes it away."""

    DEPOSIT = "deposit"
    EXPENSE = "expense"


class ReportType(str, Enum):
    """Report namespaces; each one keeps its own custom statements."""

    BALANCE_SHEET = "balance_sheet"
    PROFIT_LOSS = "profit_loss"
    CASH_FLOW = "cash_flow"


REPORT_STATEMENT_TYPES: dict[ReportType, frozenset[StatementType]] = {
    ReportType.BALANCE_SHEET: frozenset(
        {StatementType.ASSET, StatementType.LIABILITY, StatementType.EQUITY}
    ),
    ReportType.PROFIT_LOSS: frozenset({StatementType.INCOME, StatementType.EXPENSE}),
    ReportType.CASH_FLOW: frozenset(
        {StatementType.OPERATING, StatementType.INVESTING, StatementType.FINANCING}
    ),
}

STATEMENT_CATEGORIES: dict[StatementType, frozenset[StatementCategory]] = {
    StatementType.ASSET: frozenset(
        {StatementCategory.CURRENT, StatementCategory.NON_CURRENT}
    ),
    StatementType.LIABILITY: frozenset(
        {StatementCategory.CURRENT, StatementCategory.NON_CURRENT}
    ),
    StatementType.OPERATING: frozenset(
        {StatementCategory.ADJUSTMENT, StatementCategory.WORKING_CAPITAL}
    ),
}


@dataclass(frozen=True)
class Money:
    """Amount with its currency code."""

    value: Decimal
    currency: str


@dataclass(frozen=True)
class Transaction:
    """Canonical bank transaction."""

    id: str
    account_id: str
    bank_id: str
    amount: Money
    direction: Direction
    description: str
    reference: Optional[str]
    status: str
    booked_at: datetime
    bank_name: Optional[str] = None
    account_name: Optional[str] = None

    @property
    def booked_on(self) -> date:
        return self.booked_at.date()

    @property
    def is_credit(self) -> bool:
        return self.direction is Direction.CREDIT

    @property
    def is_pending(self) -> bool:
        return self.status.upper() == "PENDING"

    @property
    def cash_effect(self) -> Decimal:
        """Signed cash movement derived from the direction."""
        return self.amount.value if self.is_credit else -self.amount.value


@dataclass(frozen=True)
class ClassifiedTransaction:
    """Transaction with its activity classification attached."""

    transaction: Transaction
    activity: Activity
    subcategory: Subcategory
    is_income: bool
    rule: str
    alternatives: tuple[str, ...] = ()

    @property
    def id(self) -> str:
        return self.transaction.id

    @property
    def value(self) -> Decimal:
        return self.transaction.amount.value

    @property
    def signed_amount(self) -> Decimal:
        if not self.subcategory.is_modeled:
            return ZERO
        return self.value if self.is_income else -self.value

    @property
    def is_ambiguous(self) -> bool:
        return bool(self.alternatives)


@dataclass(frozen=True)
class ClassificationAmbiguity:
    """A transaction matched by more than one classification rule.

    Not an error: the rule order resolves it. Collected for observability
    since it points at keyword rules that may need tuning.
    """

    transaction_id: str
    description: str
    chosen_rule: str
    other_rules: tuple[str, ...]


@dataclass(frozen=True)
class DateRange:
    """Inclusive date range."""

    start: date
    end: date


@dataclass(frozen=True)
class ActivityTotals:
    """Inflows and outflows of one activity within a period."""

    inflows: Decimal = ZERO
    outflows: Decimal = ZERO

    @property
    def net(self) -> Decimal:
        return self.inflows - self.outflows


@dataclass(frozen=True)
class PeriodBucket:
    """Aggregated classified transactions for one calendar period.

    inflows/outflows and by_activity follow the classified flow; credits,
    debits and the pending totals follow the raw direction and status.
    """

    period_key: str
    start: date
    end: date
    inflows: Decimal = ZERO
    outflows: Decimal = ZERO
    by_activity: dict[Activity, ActivityTotals] = field(default_factory=dict)
    by_subcategory: dict[Subcategory, Decimal] = field(default_factory=dict)
    credits: Decimal = ZERO
    debits: Decimal = ZERO
    pending_credits: Decimal = ZERO
    pending_debits: Decimal = ZERO
    transaction_count: int = 0

    @property
    def net(self) -> Decimal:
        return self.inflows - self.outflows

    @property
    def cash_net(self) -> Decimal:
        return self.credits - self.debits

    def activity(self, activity: Activity) -> ActivityTotals:
        return self.by_activity.get(activity, ActivityTotals())

    def subcategory(self, subcategory: Subcategory) -> Decimal:
        return self.by_subcategory.get(subcategory, ZERO)


@dataclass(frozen=True)
class PeriodBalance:
    """Reconstructed cash balance for one period."""

    period_key: str
    opening: Decimal
    net: Decimal
    closing: Decimal


@dataclass(frozen=True)
class PeriodDelta:
    """Period-over-period growth percentages."""

    period_key: str
    inflows: Decimal
    outflows: Decimal
    net: Decimal


@dataclass(frozen=True)
class CustomStatement:
    """User-entered line item overlaid on computed figures."""

    id: str
    name: str
    amount: Decimal
    date: date
    type: StatementType
    category: Optional[StatementCategory]
    amount_type: AmountType


@dataclass(frozen=True)
class MergedTotal:
    """Section subtotal keeping computed and manually adjusted parts apart."""

    computed: Decimal
    adjustment: Decimal = ZERO

    @property
    def total(self) -> Decimal:
        return self.computed + self.adjustment

    @property
    def is_adjusted(self) -> bool:
        return self.adjustment != ZERO

    def __add__(self, other: "MergedTotal") -> "MergedTotal":
        return MergedTotal(
            computed=self.computed + other.computed,
            adjustment=self.adjustment + other.adjustment,
        )

    def __neg__(self) -> "MergedTotal":
        return MergedTotal(computed=-self.computed, adjustment=-self.adjustment)

    def __sub__(self, other: "MergedTotal") -> "MergedTotal":
        return self + (-other)


@dataclass(frozen=True)
class CacheKey:
    """Cache key value object built by the caller.

    Every filter dimension the snapshot depends on is part of the key, so a
    stale cache entry can never be served for a different filter.
    """

    workspace_id: str
    bank_filter: Optional[str] = None
    data_version: str = ""
    granularity: Granularity = Granularity.MONTH
    start: Optional[date] = None
    end: Optional[date] = None

    def __str__(self) -> str:
        parts = [
            self.workspace_id,
            self.bank_filter or "all",
            self.data_version or "-",
            self.granularity.value,
            self.start.isoformat() if self.start else "-",
            self.end.isoformat() if self.end else "-",
        ]
        return "|".join(parts)
