"""Tests for the SQLAlchemy adjustment store."""

from datetime import date
from decimal import Decimal

import pytest

from ledgerview.database.factories import create_sqlite_store
from ledgerview.database.mappers import (
    payload_to_statements,
    record_to_statement,
    statement_to_record,
)
from ledgerview.database.models import AdjustmentSet
from ledgerview.domain.entities import (
    AmountType,
    CustomStatement,
    ReportType,
    StatementCategory,
    StatementType,
)
from ledgerview.domain.errors import AdjustmentStoreError


def _statement(statement_id="s1", amount="0.10", category=StatementCategory.CURRENT):
    return CustomStatement(
        id=statement_id,
        name="Security deposit",
        amount=Decimal(amount),
        date=date(2024, 2, 29),
        type=StatementType.ASSET,
        category=category,
        amount_type=AmountType.DEPOSIT,
    )


def test_statement_record_keeps_decimal_precision():
    record = statement_to_record(_statement(amount="1234567.891"))

    assert record["amount"] == "1234567.891"
    assert record["category"] == "current"
    assert record_to_statement(record).amount == Decimal("1234567.891")


def test_empty_payload_loads_as_no_statements():
    assert payload_to_statements("") == []
    assert payload_to_statements("[]") == []


def test_load_unknown_namespace_is_empty(temp_store):
    assert temp_store.load("ws", ReportType.BALANCE_SHEET) == []


def test_save_and_load(temp_store):
    statements = [_statement("a"), _statement("b", amount="-5", category=StatementCategory.NON_CURRENT)]

    temp_store.save("ws", ReportType.BALANCE_SHEET, statements)

    assert temp_store.load("ws", ReportType.BALANCE_SHEET) == statements


def test_save_replaces_namespace(temp_store):
    temp_store.save("ws", ReportType.BALANCE_SHEET, [_statement("a")])
    temp_store.save("ws", ReportType.BALANCE_SHEET, [_statement("b")])

    assert [s.id for s in temp_store.load("ws", ReportType.BALANCE_SHEET)] == ["b"]


def test_namespaces_are_isolated(temp_store):
    temp_store.save("ws", ReportType.BALANCE_SHEET, [_statement("a")])

    assert temp_store.load("ws", ReportType.CASH_FLOW) == []
    assert temp_store.load("other", ReportType.BALANCE_SHEET) == []


def test_statements_persist_across_connections(temp_store):
    temp_store.save("ws", ReportType.BALANCE_SHEET, [_statement("a")])
    temp_store.disconnect()

    reopened = create_sqlite_store(database_path=temp_store.database_path)
    try:
        assert [s.id for s in reopened.load("ws", ReportType.BALANCE_SHEET)] == ["a"]
    finally:
        reopened.disconnect()


def test_clear(temp_store):
    temp_store.save("ws", ReportType.BALANCE_SHEET, [_statement("a")])
    temp_store.save("ws", ReportType.PROFIT_LOSS, [])

    temp_store.clear("ws", ReportType.BALANCE_SHEET)
    temp_store.clear("ws", ReportType.CASH_FLOW)

    assert temp_store.load("ws", ReportType.BALANCE_SHEET) == []


def test_corrupt_payload_raises_store_error(temp_store):
    session = temp_store._get_session()
    session.add(AdjustmentSet(workspace_id="ws", report="balance_sheet", payload="{not json"))
    session.commit()

    with pytest.raises(AdjustmentStoreError, match="Could not load"):
        temp_store.load("ws", ReportType.BALANCE_SHEET)


def test_factory_reads_environment(tmp_path, monkeypatch):
    db_path = tmp_path / "env.db"
    monkeypatch.setenv("LEDGERVIEW_DB_PATH", str(db_path))

    store = create_sqlite_store()

    assert store.database_url == f"sqlite:///{db_path}"
