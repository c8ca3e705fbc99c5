"""
Job ORM model.

Tracks one processing attempt per document (external submission or local
fallback, then the deferred analysis pass).

Dependencies: sqlalchemy, study_rag.boundary.db.base
System role: Job tracking for background processing
"""

import uuid
from typing import Any

from sqlalchemy import JSON, Enum, ForeignKey, Integer, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from study_rag.boundary.db.base import Base, TimestampMixin, UUIDMixin
from study_rag.models.job import JobStatus


class JobModel(Base, UUIDMixin, TimestampMixin):
    """
    Job ORM model.

    Attributes:
        id: UUID primary key (auto-generated)
        document_id: Document the job processes (cascade delete)
        status: Current execution state
        progress: Percentage complete (0-100)
        result: Outcome payload (empty dict on creation)
        error: Error description when FAILED
    """

    __tablename__ = "jobs"

    document_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("documents.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    status: Mapped[JobStatus] = mapped_column(
        Enum(JobStatus, native_enum=False),
        nullable=False,
        default=JobStatus.PENDING,
    )

    progress: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
        doc="Progress percentage (0-100)",
    )

    result: Mapped[dict[str, Any]] = mapped_column(
        JSON,
        nullable=False,
        default=dict,
        doc="Job results",
    )

    error: Mapped[str | None] = mapped_column(String(2048), nullable=True)

    # Relationships
    document = relationship("DocumentModel", back_populates="jobs")
