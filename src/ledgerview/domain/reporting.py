"""Statement snapshot orchestration.

Runs the whole pipeline for one request: bank filter, normalization,
classification, aggregation, custom statement loading and the three
statement builders.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field, replace
from datetime import date
from decimal import Decimal
from typing import TYPE_CHECKING, Any, Optional

import structlog

from ledgerview.domain.adjustments import AdjustmentService
from ledgerview.domain.aggregator import (
    aggregate,
    opening_balance,
    range_for,
    running_balances,
    with_deltas,
)
from ledgerview.domain.analytics import (
    KpiPoint,
    SpendingBreakdown,
    kpi_series,
    spending_breakdown,
)
from ledgerview.domain.balance_sheet import BalanceSheetView, build_balance_sheet
from ledgerview.domain.cache import RequestCache
from ledgerview.domain.cash_flow import CashFlowView, build_cash_flow
from ledgerview.domain.classifier import ActivityClassifier, find_ambiguities
from ledgerview.domain.entities import (
    CacheKey,
    ClassificationAmbiguity,
    ClassifiedTransaction,
    DateRange,
    Granularity,
    PeriodBalance,
    PeriodBucket,
    PeriodDelta,
    ReportType,
)
from ledgerview.domain.estimates import Estimates, FixedRatioEstimates
from ledgerview.domain.normalizer import TransactionNormalizer
from ledgerview.domain.profit_loss import ProfitLossView, build_profit_loss

if TYPE_CHECKING:
    from ledgerview.database.base import AdjustmentStore

logger = structlog.get_logger(__name__)

ALL_BANKS = "all"


@dataclass(frozen=True)
class StatementSnapshot:
    """Fully merged statements for one request. Derived, never persisted."""

    workspace_id: str
    granularity: Granularity
    date_range: Optional[DateRange]
    classified: tuple[ClassifiedTransaction, ...]
    buckets: tuple[PeriodBucket, ...]
    deltas: tuple[PeriodDelta, ...]
    period_balances: tuple[PeriodBalance, ...]
    opening_balance: Decimal
    balance_sheet: BalanceSheetView
    profit_loss: ProfitLossView
    cash_flow: CashFlowView
    kpis: tuple[KpiPoint, ...]
    spending: SpendingBreakdown
    normalization_errors: tuple[str, ...] = ()
    duplicates: int = 0
    ambiguities: tuple[ClassificationAmbiguity, ...] = ()
    adjustment_errors: dict[ReportType, str] = field(default_factory=dict)
    cache_key: Optional[CacheKey] = None

    @property
    def ambiguity_count(self) -> int:
        return len(self.ambiguities)


def filter_by_bank(raw_records: Iterable[Any], bank_filter: Optional[str]) -> list[Any]:
    """Keep the records of one bank; None or "all" keeps everything.

    Records that are not mappings are kept so normalization reports them.
    """
    records = list(raw_records)
    if bank_filter is None or bank_filter == ALL_BANKS:
        return records
    return [
        record
        for record in records
        if not isinstance(record, Mapping) or str(record.get("bank_id")) == bank_filter
    ]


def narrow_range(
    span: Optional[DateRange], start: Optional[date] = None, end: Optional[date] = None
) -> Optional[DateRange]:
    """Replace either bound of a data span; None when there is nothing to cover."""
    if span is None:
        if start is None or end is None:
            return None
        return DateRange(start=start, end=end)
    return DateRange(start=start or span.start, end=end or span.end)


class StatementService:
    """Builds statement snapshots from raw aggregator records."""

    def __init__(
        self,
        store: "AdjustmentStore",
        cache: Optional[RequestCache] = None,
        classifier: Optional[ActivityClassifier] = None,
        estimates: Optional[Estimates] = None,
        normalizer: Optional[TransactionNormalizer] = None,
    ):
        """Initialize statement service.

        Args:
            store: AdjustmentStore holding the custom statements
            cache: Optional request cache for whole snapshots
            classifier: Activity classifier (defaults to the standard rule chain)
            estimates: Proxy estimates (defaults to FixedRatioEstimates)
            normalizer: Transaction normalizer (defaults to TransactionNormalizer())
        """
        self.adjustments = AdjustmentService(store)
        self.cache = cache
        self.classifier = classifier or ActivityClassifier()
        self.estimates = estimates or FixedRatioEstimates()
        self.normalizer = normalizer or TransactionNormalizer()

    def build_snapshot(
        self,
        raw_records: Iterable[Any],
        workspace_id: str,
        granularity: Granularity = Granularity.MONTH,
        date_range: Optional[DateRange] = None,
        bank_filter: Optional[str] = None,
        cache_key: Optional[CacheKey] = None,
        cash: Optional[Decimal] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> StatementSnapshot:
        """Build a statement snapshot.

        When both a cache and a cache key are available the snapshot is
        memoized under ``str(cache_key)``.

        Args:
            raw_records: Records as returned by the banking aggregator
            workspace_id: Workspace whose custom statements are merged
            granularity: Bucket size
            date_range: Range to report on (defaults to the data's span)
            bank_filter: Bank id to restrict to; None or "all" for every bank
            cache_key: Key built by the caller covering every filter dimension
            cash: Account balance for the balance sheet, when known
            start: Without date_range, narrows the data span to start here
            end: Without date_range, narrows the data span to end here

        Returns:
            StatementSnapshot

        Raises:
            AggregationRangeError: If date_range starts after it ends
        """
        records = list(raw_records)

        def compute() -> StatementSnapshot:
            return self._build(
                records,
                workspace_id,
                granularity,
                date_range,
                bank_filter,
                cache_key,
                cash,
                start,
                end,
            )

        if self.cache is not None and cache_key is not None:
            return self.cache.fetch_or_compute(str(cache_key), compute)
        return compute()

    def _build(
        self,
        records: list[Any],
        workspace_id: str,
        granularity: Granularity,
        date_range: Optional[DateRange],
        bank_filter: Optional[str],
        cache_key: Optional[CacheKey],
        cash: Optional[Decimal],
        start: Optional[date],
        end: Optional[date],
    ) -> StatementSnapshot:
        log = logger.bind(workspace_id=workspace_id, bank_filter=bank_filter or ALL_BANKS)

        normalized = self.normalizer.normalize_batch(filter_by_bank(records, bank_filter))
        classified = self.classifier.classify_all(normalized.transactions)
        ambiguities = find_ambiguities(classified)

        if date_range is None:
            date_range = narrow_range(range_for(normalized.transactions), start, end)
        buckets = aggregate(classified, granularity, date_range) if date_range else []
        opening = opening_balance(normalized.transactions)

        statements = {}
        adjustment_errors = {}
        for report in ReportType:
            loaded, error = self.adjustments.load_for_report(workspace_id, report)
            statements[report] = loaded
            if error is not None:
                adjustment_errors[report] = error

        balance_sheet = build_balance_sheet(
            buckets, statements[ReportType.BALANCE_SHEET], self.estimates, cash
        )
        profit_loss = build_profit_loss(
            buckets, statements[ReportType.PROFIT_LOSS], self.estimates
        )
        cash_flow = build_cash_flow(
            buckets, statements[ReportType.CASH_FLOW], self.estimates, opening
        )
        if ReportType.BALANCE_SHEET in adjustment_errors:
            balance_sheet = replace(balance_sheet, adjustments_available=False)
        if ReportType.PROFIT_LOSS in adjustment_errors:
            profit_loss = replace(profit_loss, adjustments_available=False)
        if ReportType.CASH_FLOW in adjustment_errors:
            cash_flow = replace(cash_flow, adjustments_available=False)

        log.info(
            "snapshot_built",
            transactions=len(classified),
            skipped=normalized.skipped,
            duplicates=normalized.duplicates,
            ambiguous=len(ambiguities),
            periods=len(buckets),
        )

        return StatementSnapshot(
            workspace_id=workspace_id,
            granularity=granularity,
            date_range=date_range,
            classified=tuple(classified),
            buckets=tuple(buckets),
            deltas=tuple(with_deltas(buckets)),
            period_balances=tuple(running_balances(buckets, opening)),
            opening_balance=opening,
            balance_sheet=balance_sheet,
            profit_loss=profit_loss,
            cash_flow=cash_flow,
            kpis=tuple(kpi_series(buckets)),
            spending=spending_breakdown(classified),
            normalization_errors=normalized.errors,
            duplicates=normalized.duplicates,
            ambiguities=tuple(ambiguities),
            adjustment_errors=adjustment_errors,
            cache_key=cache_key,
        )
