"""
Test suite for the SQL document and job stores.

Runs against an in-memory SQLite database (aiosqlite).

System role: Verification of document and job persistence
"""

import uuid

import pytest

from study_rag.boundary.db.document_store import SqlDocumentStore, SqlJobStore
from study_rag.core.exceptions import DocumentNotFoundError, JobNotFoundError
from study_rag.models.document import DocumentRecord, DocumentStatus
from study_rag.models.job import JobRecord, JobStatus


def _document(user_id: str = "u1", **kwargs) -> DocumentRecord:
    return DocumentRecord(
        id=str(uuid.uuid4()),
        user_id=user_id,
        title=kwargs.pop("title", "Edital TRF"),
        category=kwargs.pop("category", "edital"),
        file_name="edital.pdf",
        file_type="pdf",
        file_size=1024,
        **kwargs,
    )


class TestSqlDocumentStore:
    """Test suite for SqlDocumentStore."""

    @pytest.mark.asyncio
    async def test_create_should_persist_record_with_timestamps(self, sqlite_session_factory) -> None:
        # Arrange
        store = SqlDocumentStore(sqlite_session_factory)
        record = _document()

        # Act
        created = await store.create(record)
        fetched = await store.get(record.id)

        # Assert
        assert created.id == record.id
        assert created.created_at is not None
        assert fetched.status == DocumentStatus.UPLOADED
        assert fetched.title == "Edital TRF"
        assert fetched.is_active is True

    @pytest.mark.asyncio
    async def test_update_should_store_status_and_payload(self, sqlite_session_factory) -> None:
        # Arrange
        store = SqlDocumentStore(sqlite_session_factory)
        record = await store.create(_document())
        payload = {"cargos": [{"nome": "Analista"}], "flags": []}

        # Act
        await store.update(record.id, status=DocumentStatus.PROCESSING)
        updated = await store.update(record.id, status=DocumentStatus.CHUNKED, structured_payload=payload)

        # Assert
        assert updated.status == DocumentStatus.CHUNKED
        fetched = await store.get(record.id)
        assert fetched.structured_payload == payload

    @pytest.mark.asyncio
    async def test_update_should_raise_for_unknown_document(self, sqlite_session_factory) -> None:
        store = SqlDocumentStore(sqlite_session_factory)

        with pytest.raises(DocumentNotFoundError):
            await store.update(str(uuid.uuid4()), status=DocumentStatus.FAILED)
        with pytest.raises(DocumentNotFoundError):
            await store.update("not-a-uuid", status=DocumentStatus.FAILED)

    @pytest.mark.asyncio
    async def test_get_should_return_none_for_malformed_id(self, sqlite_session_factory) -> None:
        assert await SqlDocumentStore(sqlite_session_factory).get("not-a-uuid") is None

    @pytest.mark.asyncio
    async def test_create_should_reject_non_uuid_id(self, sqlite_session_factory) -> None:
        record = _document().model_copy(update={"id": "doc-1"})

        with pytest.raises(ValueError):
            await SqlDocumentStore(sqlite_session_factory).create(record)

    @pytest.mark.asyncio
    async def test_list_by_owner_should_scope_and_hide_inactive(self, sqlite_session_factory) -> None:
        # Arrange
        store = SqlDocumentStore(sqlite_session_factory)
        kept = await store.create(_document())
        removed = await store.create(_document())
        await store.create(_document(user_id="u2"))
        await store.update(removed.id, is_active=False)

        # Act
        active = await store.list_by_owner("u1")
        everything = await store.list_by_owner("u1", include_inactive=True)

        # Assert
        assert [doc.id for doc in active] == [kept.id]
        assert {doc.id for doc in everything} == {kept.id, removed.id}


class TestSqlJobStore:
    """Test suite for SqlJobStore."""

    @pytest.mark.asyncio
    async def test_job_lifecycle_should_round_trip(self, sqlite_session_factory) -> None:
        # Arrange
        documents = SqlDocumentStore(sqlite_session_factory)
        jobs = SqlJobStore(sqlite_session_factory)
        document = await documents.create(_document())
        job = JobRecord(id=str(uuid.uuid4()), document_id=document.id)

        # Act
        await jobs.create(job)
        updated = await jobs.update(job.id, status=JobStatus.COMPLETED, progress=100, result={"path": "local"})
        listed = await jobs.list_by_document(document.id)

        # Assert
        assert updated.status == JobStatus.COMPLETED
        assert updated.result == {"path": "local"}
        assert [item.id for item in listed] == [job.id]
        assert (await jobs.get(job.id)).progress == 100

    @pytest.mark.asyncio
    async def test_update_should_raise_for_unknown_job(self, sqlite_session_factory) -> None:
        with pytest.raises(JobNotFoundError):
            await SqlJobStore(sqlite_session_factory).update(str(uuid.uuid4()), progress=10)

    @pytest.mark.asyncio
    async def test_list_by_document_should_ignore_malformed_id(self, sqlite_session_factory) -> None:
        assert await SqlJobStore(sqlite_session_factory).list_by_document("nope") == []
