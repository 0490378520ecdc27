"""Shared domain error messages and error types."""


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class AggregationRangeError(DomainError):
    """Requested aggregation range is invalid (start after end)."""


class AdjustmentStoreError(DomainError):
    """The adjustment store failed to load or save custom statements."""


def record_not_mapping(kind: str) -> str:
    """Return message for a record that is not a mapping."""
    return f"Expected a mapping, got {kind}"


def missing_field(name: str) -> str:
    """Return message for a missing required field."""
    return f"Missing {name}"


def non_numeric_amount(value: object) -> str:
    """Return message for a non-numeric amount."""
    return f"Amount must be numeric, got {value!r}"


def negative_amount(value: object) -> str:
    """Return message for a negative amount value."""
    return f"Amount must not be negative, got {value}"


def invalid_range(start: object, end: object) -> str:
    """Return message for an inverted aggregation range."""
    return f"Range start {start} is after range end {end}"


def statement_not_found(statement_id: str) -> str:
    """Return message for a missing custom statement."""
    return f"Custom statement '{statement_id}' not found"


def statement_type_not_allowed(statement_type: str, report: str) -> str:
    """Return message for a statement type used on the wrong report."""
    return f"Statement type '{statement_type}' is not allowed on the {report} report"


def statement_category_invalid(statement_type: str, category: object, allowed: list[str]) -> str:
    """Return message for a category that does not fit the statement type."""
    if not allowed:
        return f"Statement type '{statement_type}' does not take a category, got '{category}'"
    return (
        f"Statement type '{statement_type}' requires a category "
        f"({', '.join(allowed)}), got '{category}'"
    )
