"""SQLAlchemy models for the ledgerview adjustment store."""

from datetime import datetime, UTC
from sqlalchemy import (
    Column,
    Integer,
    String,
    Text,
    DateTime,
    UniqueConstraint,
    create_engine,
)
from sqlalchemy.orm import declarative_base, sessionmaker, Session

Base = declarative_base()


class AdjustmentSet(Base):
    """Custom statements of one workspace/report namespace.

    The statements are kept as a JSON array in ``payload``.
    """

    __tablename__ = "adjustment_sets"

    id = Column(Integer, primary_key=True)
    workspace_id = Column(String, nullable=False)
    report = Column(String, nullable=False)
    payload = Column(Text, nullable=False, default="[]")
    updated_at = Column(
        DateTime,
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
        nullable=False,
    )

    __table_args__ = (
        UniqueConstraint("workspace_id", "report", name="uq_adjustment_set_namespace"),
    )


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
