"""Custom statement merging and management.

Custom statements are manual line items overlaid on computed figures. Each
statement is filtered into exactly one section subtotal per report; grand
totals are always derived from already-merged subtotals and never re-filter
the statement list.
"""

import uuid
from collections.abc import Iterable
from datetime import date
from decimal import Decimal
from typing import TYPE_CHECKING, Optional

import structlog

from ledgerview.domain import errors
from ledgerview.domain.entities import (
    ZERO,
    REPORT_STATEMENT_TYPES,
    STATEMENT_CATEGORIES,
    AmountType,
    CustomStatement,
    MergedTotal,
    ReportType,
    StatementCategory,
    StatementType,
)
from ledgerview.domain.errors import AdjustmentStoreError, NotFoundError, ValidationError
from ledgerview.utils.amount_parser import parse_amount

if TYPE_CHECKING:
    from ledgerview.database.base import AdjustmentStore

logger = structlog.get_logger(__name__)


def _matching(
    statements: Iterable[CustomStatement],
    statement_type: StatementType,
    category: Optional[StatementCategory],
) -> list[CustomStatement]:
    return [s for s in statements if s.type == statement_type and s.category == category]


def adjustment_total(
    statements: Iterable[CustomStatement],
    statement_type: StatementType,
    category: Optional[StatementCategory] = None,
) -> Decimal:
    """Sum the signed amounts of statements matching (type, category) exactly."""
    return sum((s.amount for s in _matching(statements, statement_type, category)), ZERO)


def merge(
    computed_total: Decimal,
    statements: Iterable[CustomStatement],
    statement_type: StatementType,
    category: Optional[StatementCategory] = None,
) -> Decimal:
    """Add matching custom statements to a computed base.

    Pure: merging the same list into the same base always gives the same
    result.
    """
    return computed_total + adjustment_total(statements, statement_type, category)


def merge_section(
    computed_total: Decimal,
    statements: Iterable[CustomStatement],
    statement_type: StatementType,
    category: Optional[StatementCategory] = None,
    contra: bool = False,
) -> MergedTotal:
    """Merge custom statements into a section subtotal.

    Args:
        computed_total: Figure derived from transactions
        statements: Custom statements of the report
        statement_type: Statement type the section takes
        category: Statement category the section takes
        contra: The section is shown as a magnitude that statements reduce
            (expenses: an expense statement, stored negative, increases it)

    Returns:
        MergedTotal keeping computed and adjustment parts apart
    """
    adjustment = adjustment_total(statements, statement_type, category)
    if contra:
        adjustment = -adjustment
    return MergedTotal(computed=computed_total, adjustment=adjustment)


def signed_amount(amount: Decimal, amount_type: AmountType) -> Decimal:
    """Apply the amount type's sign: expenses negative, deposits positive."""
    magnitude = abs(amount)
    return -magnitude if amount_type is AmountType.EXPENSE else magnitude


def validate_statement_fields(
    report: ReportType,
    statement_type: StatementType,
    category: Optional[StatementCategory],
) -> None:
    """Check a statement's type and category against its report.

    Raises:
        ValidationError: If the type does not belong on the report, or the
            category does not fit the type
    """
    if statement_type not in REPORT_STATEMENT_TYPES[report]:
        raise ValidationError(
            errors.statement_type_not_allowed(statement_type.value, report.value)
        )
    allowed = STATEMENT_CATEGORIES.get(statement_type, frozenset())
    if allowed:
        if category not in allowed:
            raise ValidationError(
                errors.statement_category_invalid(
                    statement_type.value,
                    category.value if category else None,
                    sorted(c.value for c in allowed),
                )
            )
    elif category is not None:
        raise ValidationError(
            errors.statement_category_invalid(statement_type.value, category.value, [])
        )


class AdjustmentService:
    """Service for managing custom statements of a workspace."""

    def __init__(self, store: "AdjustmentStore"):
        """Initialize adjustment service.

        Args:
            store: AdjustmentStore instance
        """
        self.store = store

    def add_statement(
        self,
        workspace_id: str,
        report: ReportType,
        name: str,
        amount: object,
        statement_date: date,
        statement_type: StatementType,
        amount_type: AmountType,
        category: Optional[StatementCategory] = None,
    ) -> CustomStatement:
        """Add a custom statement to a report namespace.

        Args:
            workspace_id: Workspace the statement belongs to
            report: Report namespace
            name: Line item label
            amount: Amount (sign is taken from amount_type)
            statement_date: Date of the line item
            statement_type: Statement type (must belong on the report)
            amount_type: deposit or expense
            category: Section category, where the type takes one

        Returns:
            The stored CustomStatement

        Raises:
            ValidationError: If the statement is invalid
            AdjustmentStoreError: If the store fails
        """
        if not name or not name.strip():
            raise ValidationError("Statement name must not be empty")
        validate_statement_fields(report, statement_type, category)
        try:
            value = parse_amount(amount)
        except ValueError as e:
            raise ValidationError(errors.non_numeric_amount(amount)) from e

        statement = CustomStatement(
            id=str(uuid.uuid4()),
            name=name.strip(),
            amount=signed_amount(value, amount_type),
            date=statement_date,
            type=statement_type,
            category=category,
            amount_type=amount_type,
        )
        statements = self.store.load(workspace_id, report)
        statements.append(statement)
        self.store.save(workspace_id, report, statements)
        return statement

    def list_statements(
        self,
        workspace_id: str,
        report: ReportType,
        statement_type: Optional[StatementType] = None,
        category: Optional[StatementCategory] = None,
    ) -> list[CustomStatement]:
        """List custom statements of a namespace.

        Args:
            workspace_id: Workspace ID
            report: Report namespace
            statement_type: Optional type to filter by
            category: Optional category to filter by

        Returns:
            Custom statements sorted by date
        """
        statements = self.store.load(workspace_id, report)
        if statement_type is not None:
            statements = [s for s in statements if s.type == statement_type]
        if category is not None:
            statements = [s for s in statements if s.category == category]
        return sorted(statements, key=lambda s: (s.date, s.name))

    def remove_statement(self, workspace_id: str, report: ReportType, statement_id: str) -> None:
        """Remove a custom statement.

        Raises:
            NotFoundError: If no statement has the given id
        """
        statements = self.store.load(workspace_id, report)
        remaining = [s for s in statements if s.id != statement_id]
        if len(remaining) == len(statements):
            raise NotFoundError(errors.statement_not_found(statement_id))
        self.store.save(workspace_id, report, remaining)

    def clear(self, workspace_id: str, report: ReportType) -> None:
        """Remove every custom statement of a namespace."""
        self.store.clear(workspace_id, report)

    def load_for_report(
        self, workspace_id: str, report: ReportType
    ) -> tuple[list[CustomStatement], Optional[str]]:
        """Load a namespace for report building.

        A store failure does not fail the report: the statements come back
        empty together with the error message.

        Returns:
            Tuple of (statements, error message or None)
        """
        try:
            return self.store.load(workspace_id, report), None
        except AdjustmentStoreError as e:
            logger.warning(
                "adjustments_unavailable",
                workspace_id=workspace_id,
                report=report.value,
                error=str(e),
            )
            return [], str(e)
