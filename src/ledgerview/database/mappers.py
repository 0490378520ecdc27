"""Mapper functions between CustomStatement entities and their JSON form.

The store persists each namespace as a JSON array; this layer owns the
record layout so the schema can change without touching the store.
"""

import json
from datetime import date
from decimal import Decimal
from typing import Any

from ledgerview.domain import entities as domain


def statement_to_record(statement: domain.CustomStatement) -> dict[str, Any]:
    """Convert a CustomStatement into a JSON-compatible record."""
    return {
        "id": statement.id,
        "name": statement.name,
        # Stored as a string so no precision is lost through JSON floats
        "amount": str(statement.amount),
        "date": statement.date.isoformat(),
        "type": statement.type.value,
        "category": statement.category.value if statement.category else None,
        "amount_type": statement.amount_type.value,
    }


def record_to_statement(record: dict[str, Any]) -> domain.CustomStatement:
    """Convert a stored record back into a CustomStatement."""
    category = record.get("category")
    return domain.CustomStatement(
        id=record["id"],
        name=record["name"],
        amount=Decimal(str(record["amount"])),
        date=date.fromisoformat(record["date"]),
        type=domain.StatementType(record["type"]),
        category=domain.StatementCategory(category) if category else None,
        amount_type=domain.AmountType(record["amount_type"]),
    )


def statements_to_payload(statements: list[domain.CustomStatement]) -> str:
    """Serialize statements to the JSON array stored per namespace."""
    return json.dumps([statement_to_record(s) for s in statements])


def payload_to_statements(payload: str) -> list[domain.CustomStatement]:
    """Deserialize a stored JSON array."""
    return [record_to_statement(record) for record in json.loads(payload or "[]")]
