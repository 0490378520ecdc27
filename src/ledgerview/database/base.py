"""Abstract adjustment store interface."""

from abc import ABC, abstractmethod

# Import entities directly to avoid circular import through domain/__init__.py
from ledgerview.domain.entities import CustomStatement, ReportType


class AdjustmentStore(ABC):
    """Persistence contract for custom statements.

    Statements are namespaced per workspace and per report; the three
    reports never share a namespace. Saves replace the whole namespace
    (last writer wins).
    """

    @abstractmethod
    def connect(self) -> None:
        """Connect to the store."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the store."""
        pass

    @abstractmethod
    def load(self, workspace_id: str, report: ReportType) -> list[CustomStatement]:
        """Load all custom statements of a namespace.

        Raises:
            AdjustmentStoreError: If the store cannot be read
        """
        pass

    @abstractmethod
    def save(
        self, workspace_id: str, report: ReportType, statements: list[CustomStatement]
    ) -> None:
        """Replace the custom statements of a namespace.

        Raises:
            AdjustmentStoreError: If the store cannot be written
        """
        pass

    @abstractmethod
    def clear(self, workspace_id: str, report: ReportType) -> None:
        """Remove every custom statement of a namespace."""
        pass
