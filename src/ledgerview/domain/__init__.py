"""Domain layer for ledgerview."""

from ledgerview.domain.normalizer import TransactionNormalizer, normalize
from ledgerview.domain.classifier import ActivityClassifier, classify
from ledgerview.domain.aggregator import aggregate, delta
from ledgerview.domain.adjustments import AdjustmentService, merge
from ledgerview.domain.balance_sheet import build_balance_sheet
from ledgerview.domain.profit_loss import build_profit_loss
from ledgerview.domain.cash_flow import build_cash_flow
from ledgerview.domain.reporting import StatementService

__all__ = [
    "TransactionNormalizer",
    "normalize",
    "ActivityClassifier",
    "classify",
    "aggregate",
    "delta",
    "AdjustmentService",
    "merge",
    "build_balance_sheet",
    "build_profit_loss",
    "build_cash_flow",
    "StatementService",
]
