"""Persistence layer for ledgerview custom statements."""

from ledgerview.database.base import AdjustmentStore
from ledgerview.database.factories import create_sqlite_store

__all__ = ["AdjustmentStore", "create_sqlite_store"]
