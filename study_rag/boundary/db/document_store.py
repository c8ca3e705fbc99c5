"""
Document and job stores.

DocumentStore and JobStore are the storage collaborators of the processing
orchestrator; the SQL implementations map ORM rows to DocumentRecord and
JobRecord so nothing above the boundary touches SQLAlchemy objects. Each
operation runs in its own session and commits before returning.

Dependencies: sqlalchemy, study_rag.boundary.db.CRUD
System role: Persistence adapter for document and job state
"""

import logging
from typing import Any, Protocol

from sqlalchemy.ext.asyncio import async_sessionmaker

from study_rag.boundary.db.CRUD import document_crud, job_crud
from study_rag.boundary.db.models import DocumentModel, JobModel
from study_rag.core.exceptions import DocumentNotFoundError, JobNotFoundError
from study_rag.models.document import DocumentRecord
from study_rag.models.job import JobRecord

logger = logging.getLogger(__name__)


class DocumentStore(Protocol):
    """Persistence of document records."""

    async def create(self, record: DocumentRecord) -> DocumentRecord: ...

    async def get(self, document_id: str) -> DocumentRecord | None: ...

    async def update(self, document_id: str, **fields: Any) -> DocumentRecord: ...

    async def list_by_owner(
        self, user_id: str, include_inactive: bool = False
    ) -> list[DocumentRecord]: ...


class JobStore(Protocol):
    """Persistence of job records."""

    async def create(self, record: JobRecord) -> JobRecord: ...

    async def get(self, job_id: str) -> JobRecord | None: ...

    async def update(self, job_id: str, **fields: Any) -> JobRecord: ...

    async def list_by_document(self, document_id: str) -> list[JobRecord]: ...


def _document_record(model: DocumentModel) -> DocumentRecord:
    return DocumentRecord(
        id=str(model.id),
        user_id=model.user_id,
        title=model.title,
        category=model.category,
        file_name=model.file_name,
        file_type=model.file_type,
        file_size=model.file_size,
        status=model.status,
        raw_text=model.raw_text,
        structured_payload=model.structured_payload,
        external_job_id=model.external_job_id,
        error_message=model.error_message,
        is_active=model.is_active,
        processed_at=model.processed_at,
        created_at=model.created_at,
        updated_at=model.updated_at,
    )


def _job_record(model: JobModel) -> JobRecord:
    return JobRecord(
        id=str(model.id),
        document_id=str(model.document_id),
        status=model.status,
        progress=model.progress,
        result=model.result or {},
        error=model.error,
        created_at=model.created_at,
        updated_at=model.updated_at,
    )


class SqlDocumentStore:
    """DocumentStore over an async SQLAlchemy session factory."""

    def __init__(self, session_factory: async_sessionmaker) -> None:
        self._session_factory = session_factory

    async def create(self, record: DocumentRecord) -> DocumentRecord:
        """
        Insert a document record.

        Args:
            record: Record to persist; its id must be a UUID string

        Returns:
            DocumentRecord: Stored record with timestamps
        """
        document_id = document_crud.key(record.id)
        if document_id is None:
            raise ValueError(f"Document id must be a UUID: {record.id}")

        fields = record.model_dump(exclude={"id", "created_at", "updated_at"})
        async with self._session_factory() as session:
            model = await document_crud.create(session, id=document_id, **fields)
            await session.commit()
            return _document_record(model)

    async def get(self, document_id: str) -> DocumentRecord | None:
        async with self._session_factory() as session:
            model = await document_crud.get_by_id(session, document_id)
            return _document_record(model) if model else None

    async def update(self, document_id: str, **fields: Any) -> DocumentRecord:
        """
        Update fields of a document record.

        Args:
            document_id: Document id
            **fields: Column values to set

        Returns:
            DocumentRecord: Updated record

        Raises:
            DocumentNotFoundError: If no such document exists
        """
        async with self._session_factory() as session:
            model = await document_crud.update_by_id(session, document_id, **fields)
            if model is None:
                raise DocumentNotFoundError(document_id)
            await session.commit()
            logger.debug(
                f"{__name__}:update - Updated {sorted(fields)}",
                extra={"document_id": document_id},
            )
            return _document_record(model)

    async def list_by_owner(
        self, user_id: str, include_inactive: bool = False
    ) -> list[DocumentRecord]:
        async with self._session_factory() as session:
            models = await document_crud.get_by_user_id(
                session, user_id, include_inactive=include_inactive
            )
            return [_document_record(model) for model in models]


class SqlJobStore:
    """JobStore over an async SQLAlchemy session factory."""

    def __init__(self, session_factory: async_sessionmaker) -> None:
        self._session_factory = session_factory

    async def create(self, record: JobRecord) -> JobRecord:
        job_id = job_crud.key(record.id)
        document_id = job_crud.key(record.document_id)
        if job_id is None or document_id is None:
            raise ValueError("Job and document ids must be UUIDs")

        fields = record.model_dump(exclude={"id", "document_id", "created_at", "updated_at"})
        async with self._session_factory() as session:
            model = await job_crud.create(session, id=job_id, document_id=document_id, **fields)
            await session.commit()
            return _job_record(model)

    async def get(self, job_id: str) -> JobRecord | None:
        async with self._session_factory() as session:
            model = await job_crud.get_by_id(session, job_id)
            return _job_record(model) if model else None

    async def update(self, job_id: str, **fields: Any) -> JobRecord:
        async with self._session_factory() as session:
            model = await job_crud.update_by_id(session, job_id, **fields)
            if model is None:
                raise JobNotFoundError(job_id)
            await session.commit()
            return _job_record(model)

    async def list_by_document(self, document_id: str) -> list[JobRecord]:
        async with self._session_factory() as session:
            models = await job_crud.get_by_document_id(session, document_id)
            return [_job_record(model) for model in models]
