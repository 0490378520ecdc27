"""Transaction normalization domain service.

Turns loosely typed aggregator records into canonical Transaction entities.
One malformed record never aborts the batch: it is reported and skipped.
"""

import hashlib
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Optional

import structlog

from ledgerview.domain import errors
from ledgerview.domain.entities import Direction, Money, Transaction
from ledgerview.domain.errors import ValidationError
from ledgerview.utils.amount_parser import parse_amount
from ledgerview.utils.date_parser import parse_timestamp

logger = structlog.get_logger(__name__)

DEFAULT_CURRENCY = "AED"
CREDIT_INDICATORS = frozenset({"CREDIT", "C"})


@dataclass(frozen=True)
class NormalizationResult:
    """Outcome of normalizing one batch of raw records."""

    transactions: tuple[Transaction, ...]
    errors: tuple[str, ...] = ()
    duplicates: int = 0

    @property
    def skipped(self) -> int:
        return len(self.errors)


class TransactionNormalizer:
    """Validates and coerces raw aggregator records."""

    def __init__(self, default_currency: str = DEFAULT_CURRENCY):
        """Initialize normalizer.

        Args:
            default_currency: Currency assumed when a record carries none
        """
        self.default_currency = default_currency
        self._log = logger.bind(component="normalizer")

    def normalize_batch(self, raw_records: Iterable[Any]) -> NormalizationResult:
        """Normalize a batch of raw records.

        Records sharing an id (at-least-once delivery across pagination)
        are kept once, first occurrence wins.

        Args:
            raw_records: Records as returned by the banking aggregator

        Returns:
            NormalizationResult with canonical transactions, per-record
            error messages and the number of dropped duplicates
        """
        transactions: list[Transaction] = []
        error_messages: list[str] = []
        seen: set[str] = set()
        duplicates = 0

        for index, raw in enumerate(raw_records, start=1):
            try:
                txn = self.normalize_record(raw)
            except ValidationError as e:
                error_messages.append(f"Record {index}: {e}")
                self._log.warning("record_skipped", record=index, reason=str(e))
                continue

            if txn.id in seen:
                duplicates += 1
                self._log.debug("duplicate_transaction_dropped", transaction_id=txn.id)
                continue
            seen.add(txn.id)
            transactions.append(txn)

        return NormalizationResult(
            transactions=tuple(transactions),
            errors=tuple(error_messages),
            duplicates=duplicates,
        )

    def normalize_record(self, raw: Any) -> Transaction:
        """Normalize a single raw record.

        Raises:
            ValidationError: If the record cannot be turned into a transaction
        """
        if not isinstance(raw, Mapping):
            raise ValidationError(errors.record_not_mapping(type(raw).__name__))

        value, currency = self._parse_money(raw.get("amount"))

        indicator = raw.get("credit_debit_indicator")
        if indicator is None or (isinstance(indicator, str) and not indicator.strip()):
            raise ValidationError(errors.missing_field("credit_debit_indicator"))
        direction = (
            Direction.CREDIT
            if str(indicator).strip().upper() in CREDIT_INDICATORS
            else Direction.DEBIT
        )

        booked_raw = raw.get("booking_date_time")
        if booked_raw is None:
            raise ValidationError(errors.missing_field("booking_date_time"))
        try:
            booked_at = parse_timestamp(booked_raw)
        except ValueError as e:
            raise ValidationError(str(e)) from e

        description = _text(raw.get("transaction_information")) or ""
        reference = _text(raw.get("transaction_reference"))
        account_id = _text(raw.get("account_id")) or ""
        bank_id = _text(raw.get("bank_id")) or ""

        transaction_id = _text(raw.get("transaction_id"))
        if not transaction_id:
            transaction_id = self._generate_unique_id(
                account_id=account_id,
                booked_at=booked_raw,
                value=value,
                direction=direction,
                description=description,
            )

        return Transaction(
            id=transaction_id,
            account_id=account_id,
            bank_id=bank_id,
            amount=Money(value=value, currency=currency),
            direction=direction,
            description=description,
            reference=reference,
            status=(_text(raw.get("status")) or "BOOKED").upper(),
            booked_at=booked_at,
            bank_name=_text(raw.get("bank_name")),
            account_name=_text(raw.get("account_name")),
        )

    def _parse_money(self, amount: Any) -> tuple[Decimal, str]:
        if not isinstance(amount, Mapping):
            raise ValidationError(errors.missing_field("amount.amount"))
        raw_value = amount.get("amount")
        if raw_value is None:
            raise ValidationError(errors.missing_field("amount.amount"))
        try:
            value = parse_amount(raw_value)
        except ValueError as e:
            raise ValidationError(errors.non_numeric_amount(raw_value)) from e
        if value < 0:
            raise ValidationError(errors.negative_amount(value))
        currency = _text(amount.get("currency")) or self.default_currency
        return value, currency.upper()

    def _generate_unique_id(
        self,
        account_id: str,
        booked_at: Any,
        value: Decimal,
        direction: Direction,
        description: str,
    ) -> str:
        """Derive a stable id for records delivered without one."""
        fingerprint = "|".join(
            [account_id, str(booked_at), str(value), direction.value, description]
        )
        return "gen-" + hashlib.sha256(fingerprint.encode("utf-8")).hexdigest()[:24]


def _text(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def normalize(raw_records: Iterable[Any]) -> list[Transaction]:
    """Normalize raw records with the default normalizer."""
    return list(TransactionNormalizer().normalize_batch(raw_records).transactions)
