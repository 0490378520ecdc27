"""Shared pytest fixtures for ledgerview tests."""

import json
import logging
import os
import tempfile
from datetime import datetime
from decimal import Decimal

import pytest

from ledgerview.database.base import AdjustmentStore
from ledgerview.database.factories import create_sqlite_store
from ledgerview.domain.adjustments import AdjustmentService
from ledgerview.domain.classifier import classify
from ledgerview.domain.entities import Direction, Money, Transaction
from ledgerview.domain.errors import AdjustmentStoreError


class MemoryStore(AdjustmentStore):
    """In-memory adjustment store."""

    def __init__(self):
        self.namespaces = {}

    def connect(self):
        pass

    def disconnect(self):
        pass

    def load(self, workspace_id, report):
        return list(self.namespaces.get((workspace_id, report), []))

    def save(self, workspace_id, report, statements):
        self.namespaces[(workspace_id, report)] = list(statements)

    def clear(self, workspace_id, report):
        self.namespaces.pop((workspace_id, report), None)


class FailingStore(MemoryStore):
    """Adjustment store whose every operation fails."""

    def load(self, workspace_id, report):
        raise AdjustmentStoreError("store offline")

    def save(self, workspace_id, report, statements):
        raise AdjustmentStoreError("store offline")

    def clear(self, workspace_id, report):
        raise AdjustmentStoreError("store offline")


@pytest.fixture
def temp_store():
    """Create a temporary SQLite adjustment store for testing."""
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    store = create_sqlite_store(database_path=db_path)
    # Store the path for tests that need it
    store.database_path = db_path
    store.connect()

    yield store

    store.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def memory_store():
    return MemoryStore()


@pytest.fixture
def failing_store():
    return FailingStore()


@pytest.fixture
def adjustment_service(temp_store):
    """Create an AdjustmentService with a temporary store."""
    return AdjustmentService(temp_store)


def build_record(
    transaction_id="txn-1",
    amount="100.00",
    indicator="DEBIT",
    description="office supplies",
    booked="2024-01-15T10:00:00Z",
    status="BOOKED",
    bank_id="bank-1",
    reference=None,
    currency="AED",
):
    """Build a raw aggregator record."""
    record = {
        "transaction_id": transaction_id,
        "account_id": "acc-1",
        "bank_id": bank_id,
        "bank_name": "Test Bank",
        "account_name": "Current Account",
        "amount": {"amount": amount, "currency": currency},
        "credit_debit_indicator": indicator,
        "transaction_information": description,
        "status": status,
        "booking_date_time": booked,
    }
    if reference is not None:
        record["transaction_reference"] = reference
    return record


def build_transaction(
    transaction_id="txn-1",
    amount="100",
    direction=Direction.DEBIT,
    description="office supplies",
    booked_at=datetime(2024, 1, 15, 10, 0),
    status="BOOKED",
    reference=None,
    bank_id="bank-1",
):
    """Build a canonical transaction."""
    return Transaction(
        id=transaction_id,
        account_id="acc-1",
        bank_id=bank_id,
        amount=Money(value=Decimal(amount), currency="AED"),
        direction=direction,
        description=description,
        reference=reference,
        status=status,
        booked_at=booked_at,
    )


@pytest.fixture
def make_record():
    return build_record


@pytest.fixture
def make_transaction():
    return build_transaction


@pytest.fixture
def make_classified():
    """Build and classify a transaction in one step."""

    def _make(**kwargs):
        return classify(build_transaction(**kwargs))

    return _make


@pytest.fixture
def sample_records():
    """Records covering income, investing and financing activity."""
    return [
        build_record("t1", "1000", "CREDIT", "salary payment", "2024-01-15T09:00:00Z"),
        build_record("t2", "200", "DEBIT", "software license", "2024-01-20T09:00:00Z"),
        build_record("t3", "5000", "DEBIT", "purchase of equipment", "2024-02-01T09:00:00Z"),
        build_record("t4", "3000", "CREDIT", "loan disbursement", "2024-02-10T09:00:00Z"),
        build_record("t5", "450", "DEBIT", "office lease payment", "2024-03-01T09:00:00Z"),
        build_record("t6", "250", "DEBIT", "restaurant lunch", "2024-03-05T09:00:00Z",
                     status="PENDING"),
    ]


@pytest.fixture
def transactions_file(tmp_path, sample_records):
    """Write sample records to a JSON file in aggregator shape."""
    path = tmp_path / "transactions.json"
    path.write_text(json.dumps({"transactions": sample_records}))
    return str(path)


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()


@pytest.fixture(autouse=True)
def reset_logging():
    """Drop handlers bound to streams captured by a finished test."""
    yield
    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)
