"""Persistence for the saved-prospect pipeline.

Saved prospects live in a single ``saved_prospects`` table. The full
prospect document is stored as JSON next to the pipeline fields, so any
prospect kind can be saved without a schema change.
"""

import logging
from contextlib import contextmanager
from datetime import datetime
from typing import Iterator, List, Optional, Union

from pydantic import TypeAdapter
from sqlalchemy import JSON, DateTime, String, Text, create_engine, select
from sqlalchemy import Enum as SQLEnum
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Mapped, Session, mapped_column, sessionmaker
from sqlalchemy.pool import StaticPool

from .models import PipelineStatus, Prospect, SavedProspect
from .repository import NotFoundError

logger = logging.getLogger(__name__)

_prospect_adapter = TypeAdapter(Prospect)


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""
    pass


class SavedProspectRecord(Base):
    """SQLAlchemy model for a prospect in the sales pipeline.

    Attributes:
        id: Prospect id (the map record's id).
        kind: Prospect kind discriminator.
        name: Display name, denormalised for listing.
        payload: The prospect document as JSON.
        pipeline_status: Current pipeline status.
        notes: Free-form sales notes.
        saved_at: When the prospect was saved.
        updated_at: When the pipeline fields last changed.
    """

    __tablename__ = "saved_prospects"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    kind: Mapped[str] = mapped_column(String(32), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    payload: Mapped[dict] = mapped_column(JSON, nullable=False)
    pipeline_status: Mapped[PipelineStatus] = mapped_column(
        SQLEnum(PipelineStatus, values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=PipelineStatus.NEW,
        index=True,
    )
    notes: Mapped[str] = mapped_column(Text, nullable=False, default="")
    saved_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    def to_model(self) -> SavedProspect:
        return SavedProspect(
            prospect=_prospect_adapter.validate_python(self.payload),
            pipeline_status=self.pipeline_status,
            notes=self.notes,
            saved_at=self.saved_at,
            updated_at=self.updated_at,
        )

    def __repr__(self) -> str:
        return (
            f"<SavedProspectRecord(id={self.id!r}, name={self.name!r}, "
            f"status={self.pipeline_status.value!r})>"
        )


def create_db_engine(database_url: str, echo: bool = False) -> Engine:
    """Create an engine for the given URL.

    In-memory sqlite URLs share one connection across threads so every
    session sees the same database.
    """
    in_memory = database_url == "sqlite://" or (
        database_url.startswith("sqlite") and ":memory:" in database_url
    )
    if in_memory:
        return create_engine(
            database_url,
            echo=echo,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    if database_url.startswith("sqlite"):
        return create_engine(
            database_url, echo=echo, connect_args={"check_same_thread": False}
        )
    return create_engine(database_url, echo=echo, pool_pre_ping=True)


class SavedProspectStore:
    """Create, read, update and delete saved prospects."""

    def __init__(
        self,
        database_url: Optional[str] = None,
        engine: Optional[Engine] = None,
        echo: bool = False,
    ):
        """Initialize the store and create its table if missing.

        Args:
            database_url: SQLAlchemy URL. Ignored when ``engine`` is given.
            engine: Existing engine to use.
            echo: Log SQL statements.
        """
        if engine is None:
            engine = create_db_engine(database_url or "sqlite://", echo=echo)
        self.engine = engine
        self._session_factory = sessionmaker(
            engine, expire_on_commit=False, autoflush=False
        )
        Base.metadata.create_all(engine)

    @contextmanager
    def session(self) -> Iterator[Session]:
        """Session committed on success and rolled back on exception."""
        with self._session_factory() as session:
            try:
                yield session
                session.commit()
            except Exception:
                session.rollback()
                raise

    def save(self, prospect: Prospect) -> SavedProspect:
        """Promote a prospect into the pipeline.

        Saving an id that is already saved returns the existing entry
        unchanged.
        """
        with self.session() as session:
            record = session.get(SavedProspectRecord, prospect.id)
            if record is None:
                record = SavedProspectRecord(
                    id=prospect.id,
                    kind=prospect.type,
                    name=prospect.name,
                    payload=prospect.model_dump(mode="json"),
                    pipeline_status=PipelineStatus.NEW,
                    notes="",
                )
                session.add(record)
                session.flush()
                logger.info(
                    "Prospect saved",
                    extra={"prospect_id": prospect.id, "kind": prospect.type},
                )
            return record.to_model()

    def list(self, status: Optional[PipelineStatus] = None) -> List[SavedProspect]:
        """List saved prospects, oldest first."""
        with self.session() as session:
            query = select(SavedProspectRecord).order_by(
                SavedProspectRecord.saved_at, SavedProspectRecord.id
            )
            if status is not None:
                query = query.where(
                    SavedProspectRecord.pipeline_status == PipelineStatus(status)
                )
            return [record.to_model() for record in session.scalars(query)]

    def get(self, prospect_id: str) -> SavedProspect:
        """Get a saved prospect.

        Raises:
            NotFoundError: If the prospect is not saved.
        """
        with self.session() as session:
            return self._require(session, prospect_id).to_model()

    def update(
        self,
        prospect_id: str,
        status: Optional[Union[PipelineStatus, str]] = None,
        notes: Optional[str] = None,
    ) -> SavedProspect:
        """Change the pipeline status and/or notes of a saved prospect.

        Raises:
            NotFoundError: If the prospect is not saved.
            ValueError: If the status is not a pipeline status.
        """
        with self.session() as session:
            record = self._require(session, prospect_id)
            if status is not None:
                record.pipeline_status = PipelineStatus(status)
            if notes is not None:
                record.notes = notes
            record.updated_at = datetime.utcnow()
            session.flush()
            logger.info(
                "Saved prospect updated",
                extra={
                    "prospect_id": prospect_id,
                    "pipeline_status": record.pipeline_status.value,
                },
            )
            return record.to_model()

    def remove(self, prospect_id: str) -> None:
        """Remove a prospect from the pipeline.

        Raises:
            NotFoundError: If the prospect is not saved.
        """
        with self.session() as session:
            session.delete(self._require(session, prospect_id))
        logger.info("Saved prospect removed", extra={"prospect_id": prospect_id})

    def close(self) -> None:
        """Release all connections held by the engine."""
        self.engine.dispose()

    @staticmethod
    def _require(session: Session, prospect_id: str) -> SavedProspectRecord:
        record = session.get(SavedProspectRecord, str(prospect_id))
        if record is None:
            raise NotFoundError("Saved prospect", str(prospect_id))
        return record
