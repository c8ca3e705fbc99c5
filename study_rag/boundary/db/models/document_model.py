"""
Document ORM model.

Represents uploaded study documents with processing status, extracted text
and the structured payload produced by the analysis pass.

Dependencies: sqlalchemy, study_rag.boundary.db.base
System role: Document persistence for ingestion tracking
"""

from datetime import datetime
from typing import Any

from sqlalchemy import JSON, Boolean, DateTime, Enum, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from study_rag.boundary.db.base import Base, TimestampMixin, UUIDMixin
from study_rag.models.document import DocumentStatus


class DocumentModel(Base, UUIDMixin, TimestampMixin):
    """
    Document ORM model tracking the ingestion lifecycle.

    Lifecycle: UPLOADED -> PROCESSING -> INDEXED (external backend) or
    CHUNKED (local fallback) -> ANALYZING -> COMPLETED, or FAILED with
    error_message.

    Attributes:
        id: UUID primary key (globally unique document id)
        user_id: Owner key; also the vector namespace
        title: Display title (exam name for notices)
        category: Document category; the reserved one drives extraction
        file_name: Original filename (255 char limit)
        file_type: Lowercase extension
        file_size: Size in bytes
        status: Current processing state
        raw_text: Locally extracted text (fallback path only)
        structured_payload: Roles and syllabus, overwritten on re-analysis
        external_job_id: Job id returned by the processing backend
        error_message: Null if success; human-readable error if FAILED
        is_active: False once the document is removed
        processed_at: When the document reached COMPLETED
    """

    __tablename__ = "documents"

    user_id: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    title: Mapped[str] = mapped_column(String(512), nullable=False)
    category: Mapped[str] = mapped_column(String(64), nullable=False, default="geral")
    file_name: Mapped[str] = mapped_column(String(255), nullable=False, doc="Original filename")
    file_type: Mapped[str] = mapped_column(String(16), nullable=False)
    file_size: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    status: Mapped[DocumentStatus] = mapped_column(
        Enum(DocumentStatus, native_enum=False),
        nullable=False,
        default=DocumentStatus.UPLOADED,
    )

    raw_text: Mapped[str | None] = mapped_column(Text, nullable=True)
    structured_payload: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)
    external_job_id: Mapped[str | None] = mapped_column(String(255), nullable=True)
    error_message: Mapped[str | None] = mapped_column(
        String(2048),
        nullable=True,
        doc="Error details if processing failed",
    )
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    processed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    # Relationships
    jobs = relationship("JobModel", back_populates="document", cascade="all, delete-orphan")
