"""Factory functions for creating adjustment store instances."""

import os
from pathlib import Path
from typing import Optional

from ledgerview.database.sqlalchemy_db import SQLAlchemyAdjustmentStore


def create_sqlite_store(database_path: Optional[str] = None) -> SQLAlchemyAdjustmentStore:
    """Create a SQLite-backed adjustment store.

    Args:
        database_path: Path to SQLite database file. If None, checks LEDGERVIEW_DB_PATH
            environment variable, then defaults to ~/.ledgerview/ledgerview.db

    Returns:
        SQLAlchemyAdjustmentStore instance configured for SQLite
    """
    if database_path is None:
        database_path = os.environ.get("LEDGERVIEW_DB_PATH")

    if database_path is None:
        db_dir = Path.home() / ".ledgerview"
        db_dir.mkdir(exist_ok=True)
        database_path = str(db_dir / "ledgerview.db")

    database_url = f"sqlite:///{database_path}"
    return SQLAlchemyAdjustmentStore(database_url)
