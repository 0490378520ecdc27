"""Activity classification of bank transactions.

Classification is a fixed, ordered chain of keyword rules. The first rule
that matches decides the activity; categories overlap in keyword space, so
the order of ``DEFAULT_RULES`` is part of the contract. Every other rule that
also matched is kept on the result as evidence of ambiguity.

Classification is a pure function of the transaction's fields: no rule ever
looks at another transaction.
"""

from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

import structlog

from ledgerview.domain.entities import (
    Activity,
    ClassificationAmbiguity,
    ClassifiedTransaction,
    Subcategory,
    Transaction,
)

logger = structlog.get_logger(__name__)

DEFAULT_LARGE_TRANSACTION_THRESHOLD = Decimal("10000")

FIXED_ASSET_TERMS = (
    "fixed asset",
    "equipment",
    "property",
    "machine",
    "plant",
    "capex",
    "capital expenditure",
    "asset purchase",
    "furniture",
    "vehicle",
)
FIXED_ASSET_REFERENCE_MARKERS = ("fa-", "asset-", "capex-", "equipment-")
LARGE_PURCHASE_TERMS = ("purchase", "acquisition", "investment", "capital")

INTANGIBLE_TERMS = (
    "intangible",
    "software",
    "patent",
    "trademark",
    "license",
    "licence",
    "intellectual property",
    "goodwill",
    "development cost",
)
INTANGIBLE_REFERENCE_MARKERS = ("int-", "soft-", "ip-")

LOAN_TERMS = ("loan", "borrowing", "debt", "credit facility", "financing")
LOAN_PROCEEDS_TERMS = ("proceed", "disbursement", "drawdown")
LOAN_REPAYMENT_TERMS = ("repayment", "installment", "instalment", "settlement")

LEASE_TERM = "lease"
LEASE_PAYMENT_TERMS = ("payment", "installment", "instalment", "rent")

CAPITAL_TERMS = ("capital", "owner", "equity", "share", "investment")


@dataclass(frozen=True)
class ClassifierConfig:
    """Tunable classifier parameters."""

    large_transaction_threshold: Decimal = DEFAULT_LARGE_TRANSACTION_THRESHOLD


@dataclass(frozen=True)
class TransactionText:
    """Lower-cased text fields a rule matches against."""

    description: str
    reference: str

    @classmethod
    def of(cls, txn: Transaction) -> "TransactionText":
        return cls(
            description=txn.description.lower(),
            reference=(txn.reference or "").lower(),
        )

    def mentions(self, terms: Iterable[str]) -> bool:
        return any(term in self.description for term in terms)

    def reference_mentions(self, markers: Iterable[str]) -> bool:
        return any(marker in self.reference for marker in markers)


Outcome = tuple[Subcategory, bool]
Predicate = Callable[[Transaction, TransactionText, ClassifierConfig], bool]
Resolver = Callable[[Transaction, TransactionText], Outcome]


@dataclass(frozen=True)
class ClassificationRule:
    """One predicate -> category entry of the rule chain."""

    name: str
    activity: Activity
    matches: Predicate
    resolve: Resolver


def _is_fixed_asset(txn: Transaction, text: TransactionText, config: ClassifierConfig) -> bool:
    if text.mentions(FIXED_ASSET_TERMS):
        return True
    if text.reference_mentions(FIXED_ASSET_REFERENCE_MARKERS):
        return True
    return (
        txn.amount.value >= config.large_transaction_threshold
        and text.mentions(LARGE_PURCHASE_TERMS)
    )


def _resolve_fixed_asset(txn: Transaction, text: TransactionText) -> Outcome:
    if txn.is_credit:
        return Subcategory.ASSET_SALE, True
    return Subcategory.FIXED_ASSET_PURCHASE, False


def _is_intangible(txn: Transaction, text: TransactionText, config: ClassifierConfig) -> bool:
    return text.mentions(INTANGIBLE_TERMS) or text.reference_mentions(
        INTANGIBLE_REFERENCE_MARKERS
    )


def _resolve_intangible(txn: Transaction, text: TransactionText) -> Outcome:
    # Credits on intangibles stop the chain but are not modeled
    if txn.is_credit:
        return Subcategory.INTANGIBLE_CREDIT, True
    return Subcategory.INTANGIBLE_PURCHASE, False


def _is_loan(txn: Transaction, text: TransactionText, config: ClassifierConfig) -> bool:
    return text.mentions(LOAN_TERMS)


def _resolve_loan(txn: Transaction, text: TransactionText) -> Outcome:
    if txn.is_credit or text.mentions(LOAN_PROCEEDS_TERMS):
        return Subcategory.LOAN_PROCEEDS, True
    # Debits without repayment vocabulary are still money leaving for the lender
    return Subcategory.LOAN_REPAYMENT, False


def _is_lease(txn: Transaction, text: TransactionText, config: ClassifierConfig) -> bool:
    return LEASE_TERM in text.description and text.mentions(LEASE_PAYMENT_TERMS)


def _resolve_lease(txn: Transaction, text: TransactionText) -> Outcome:
    return Subcategory.LEASE_PAYMENT, False


def _is_capital(txn: Transaction, text: TransactionText, config: ClassifierConfig) -> bool:
    if text.mentions(CAPITAL_TERMS):
        return True
    return "contribution" in text.description and "social" not in text.description


def _resolve_capital(txn: Transaction, text: TransactionText) -> Outcome:
    return Subcategory.CAPITAL_CONTRIBUTION, True


def _resolve_capital_with_drawings(txn: Transaction, text: TransactionText) -> Outcome:
    if txn.is_credit:
        return Subcategory.CAPITAL_CONTRIBUTION, True
    return Subcategory.OWNER_DRAWING, False


def _always(txn: Transaction, text: TransactionText, config: ClassifierConfig) -> bool:
    return True


def _resolve_operating(txn: Transaction, text: TransactionText) -> Outcome:
    if txn.is_credit:
        return Subcategory.OPERATING_INCOME, True
    return Subcategory.OPERATING_EXPENSE, False


FIXED_ASSET_RULE = ClassificationRule(
    "fixed_asset", Activity.INVESTING, _is_fixed_asset, _resolve_fixed_asset
)
INTANGIBLE_RULE = ClassificationRule(
    "intangible", Activity.INVESTING, _is_intangible, _resolve_intangible
)
LOAN_RULE = ClassificationRule("loan", Activity.FINANCING, _is_loan, _resolve_loan)
LEASE_RULE = ClassificationRule("lease", Activity.FINANCING, _is_lease, _resolve_lease)
CAPITAL_RULE = ClassificationRule(
    "capital", Activity.FINANCING, _is_capital, _resolve_capital
)
CAPITAL_WITH_DRAWINGS_RULE = ClassificationRule(
    "capital", Activity.FINANCING, _is_capital, _resolve_capital_with_drawings
)
OPERATING_RULE = ClassificationRule(
    "operating", Activity.OPERATING, _always, _resolve_operating
)

DEFAULT_RULES: tuple[ClassificationRule, ...] = (
    FIXED_ASSET_RULE,
    INTANGIBLE_RULE,
    LOAN_RULE,
    LEASE_RULE,
    CAPITAL_RULE,
    OPERATING_RULE,
)

# Opt-in chain that books capital-rule debits as owner drawings
OWNER_DRAWING_RULES: tuple[ClassificationRule, ...] = tuple(
    CAPITAL_WITH_DRAWINGS_RULE if rule is CAPITAL_RULE else rule for rule in DEFAULT_RULES
)


class ActivityClassifier:
    """Assigns transactions to operating/investing/financing activities."""

    def __init__(
        self,
        rules: Sequence[ClassificationRule] = DEFAULT_RULES,
        config: Optional[ClassifierConfig] = None,
    ):
        """Initialize classifier.

        Args:
            rules: Ordered rule chain; the last rule must match everything
            config: Classifier parameters (defaults to ClassifierConfig())

        Raises:
            ValueError: If the rule chain is empty
        """
        if not rules:
            raise ValueError("Classifier needs at least one rule")
        self.rules = tuple(rules)
        self.config = config or ClassifierConfig()

    def matching_rules(self, txn: Transaction) -> list[ClassificationRule]:
        """Return every rule whose predicate matches, in chain order."""
        text = TransactionText.of(txn)
        return [rule for rule in self.rules if rule.matches(txn, text, self.config)]

    def classify(self, txn: Transaction) -> ClassifiedTransaction:
        """Classify one transaction.

        Raises:
            ValueError: If no rule matches (only possible with a custom
                chain lacking a catch-all rule)
        """
        text = TransactionText.of(txn)
        matched = [rule for rule in self.rules if rule.matches(txn, text, self.config)]
        if not matched:
            raise ValueError(f"No classification rule matched transaction {txn.id}")

        winner = matched[0]
        subcategory, is_income = winner.resolve(txn, text)
        # The catch-all matches everything, so it is not evidence of ambiguity
        alternatives = tuple(
            rule.name for rule in matched[1:] if rule.matches is not _always
        )
        if alternatives:
            logger.debug(
                "classification_ambiguous",
                transaction_id=txn.id,
                chosen_rule=winner.name,
                other_rules=alternatives,
            )

        return ClassifiedTransaction(
            transaction=txn,
            activity=winner.activity,
            subcategory=subcategory,
            is_income=is_income,
            rule=winner.name,
            alternatives=alternatives,
        )

    def classify_all(self, transactions: Iterable[Transaction]) -> list[ClassifiedTransaction]:
        """Classify each transaction independently."""
        return [self.classify(txn) for txn in transactions]


_default_classifier = ActivityClassifier()


def classify(txn: Transaction) -> ClassifiedTransaction:
    """Classify a transaction with the default rule chain."""
    return _default_classifier.classify(txn)


def find_ambiguities(
    classified: Iterable[ClassifiedTransaction],
) -> list[ClassificationAmbiguity]:
    """Collect transactions that more than one rule matched."""
    return [
        ClassificationAmbiguity(
            transaction_id=item.id,
            description=item.transaction.description,
            chosen_rule=item.rule,
            other_rules=item.alternatives,
        )
        for item in classified
        if item.is_ambiguous
    ]
