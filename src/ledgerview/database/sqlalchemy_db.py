"""SQLAlchemy adjustment store implementation."""

from typing import Optional
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

import structlog

from ledgerview.database.base import AdjustmentStore
from ledgerview.database.models import AdjustmentSet, create_session_factory
from ledgerview.database.mappers import payload_to_statements, statements_to_payload
from ledgerview.domain.entities import CustomStatement, ReportType
from ledgerview.domain.errors import AdjustmentStoreError

logger = structlog.get_logger(__name__)


class SQLAlchemyAdjustmentStore(AdjustmentStore):
    """SQLAlchemy-based implementation of AdjustmentStore.

    One row per (workspace, report) holds the namespace's JSON array.
    """

    def __init__(self, database_url: str):
        """Initialize SQLAlchemy adjustment store.

        Args:
            database_url: SQLAlchemy database URL (e.g., 'sqlite:///path/to.db')
        """
        self.database_url = database_url
        self.session_factory = create_session_factory(database_url)
        self._session: Optional[Session] = None

    def _get_session(self) -> Session:
        """Get current session, creating one if needed."""
        if self._session is None:
            self._session = self.session_factory()
        return self._session

    def _find(self, session: Session, workspace_id: str, report: ReportType) -> Optional[AdjustmentSet]:
        return (
            session.query(AdjustmentSet)
            .filter(
                AdjustmentSet.workspace_id == workspace_id,
                AdjustmentSet.report == report.value,
            )
            .first()
        )

    def _fail(self, action: str, workspace_id: str, report: ReportType, error: Exception) -> AdjustmentStoreError:
        if self._session is not None:
            self._session.rollback()
        logger.error(
            "adjustment_store_failed",
            action=action,
            workspace_id=workspace_id,
            report=report.value,
            error=str(error),
        )
        return AdjustmentStoreError(
            f"Could not {action} adjustments for workspace '{workspace_id}' "
            f"({report.value}): {error}"
        )

    def connect(self) -> None:
        """Connect to the store."""
        # Connection is lazy, so this is a no-op
        pass

    def disconnect(self) -> None:
        """Disconnect from the store."""
        if self._session is not None:
            self._session.close()
            self._session = None

    def load(self, workspace_id: str, report: ReportType) -> list[CustomStatement]:
        """Load all custom statements of a namespace."""
        try:
            row = self._find(self._get_session(), workspace_id, report)
            if row is None:
                return []
            return payload_to_statements(row.payload)
        except (SQLAlchemyError, ValueError, KeyError) as e:
            raise self._fail("load", workspace_id, report, e) from e

    def save(
        self, workspace_id: str, report: ReportType, statements: list[CustomStatement]
    ) -> None:
        """Replace the custom statements of a namespace."""
        try:
            session = self._get_session()
            row = self._find(session, workspace_id, report)
            payload = statements_to_payload(statements)
            if row is None:
                session.add(
                    AdjustmentSet(workspace_id=workspace_id, report=report.value, payload=payload)
                )
            else:
                row.payload = payload
            session.commit()
        except SQLAlchemyError as e:
            raise self._fail("save", workspace_id, report, e) from e

    def clear(self, workspace_id: str, report: ReportType) -> None:
        """Remove every custom statement of a namespace."""
        try:
            session = self._get_session()
            row = self._find(session, workspace_id, report)
            if row is not None:
                session.delete(row)
                session.commit()
        except SQLAlchemyError as e:
            raise self._fail("clear", workspace_id, report, e) from e
