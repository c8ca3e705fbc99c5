"""
Shared test fixtures and fakes for the entire test suite.

Provides: scripted generative model, keyword embeddings, in-memory document
and job stores, SQLite session factory, candidate and profile factories
Dependencies: pytest, langchain_core, sqlalchemy, aiosqlite
System role: Test infrastructure and fixture management
"""

from datetime import datetime, timezone

import pytest
from langchain_core.embeddings import Embeddings

from study_rag.core.exceptions import DocumentNotFoundError, JobNotFoundError
from study_rag.evaluation.models.review_models import ReviewVerdict
from study_rag.models.document import DocumentRecord
from study_rag.models.generation import ModelProfile
from study_rag.models.job import JobRecord
from study_rag.models.retrieval import RetrievalCandidate


class ScriptedModel:
    """GenerativeModel that replays queued replies and records every call.

    Queued exceptions are raised instead of returned. Once the queue is
    empty every call returns `default`.
    """

    def __init__(self, replies=None, default: str = ""):
        self.replies = list(replies or [])
        self.default = default
        self.calls: list[tuple[list, ModelProfile]] = []

    async def complete(self, messages, profile):
        self.calls.append((messages, profile))
        if not self.replies:
            return self.default
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply


class KeywordEmbeddings(Embeddings):
    """Deterministic embeddings: one dimension per keyword plus an 'other' axis."""

    def __init__(self, keywords: list[str]):
        self.keywords = [keyword.lower() for keyword in keywords]
        self.embedded: list[str] = []

    @property
    def dimension(self) -> int:
        return len(self.keywords) + 1

    def _vector(self, text: str) -> list[float]:
        lowered = text.lower()
        counts = [float(lowered.count(keyword)) for keyword in self.keywords]
        return counts + [0.0 if any(counts) else 1.0]

    def embed_documents(self, texts: list[str]) -> list[list[float]]:
        self.embedded.extend(texts)
        return [self._vector(text) for text in texts]

    def embed_query(self, text: str) -> list[float]:
        self.embedded.append(text)
        return self._vector(text)


class StubReviewer:
    """AnswerReviewer stand-in returning queued verdicts (passing once empty)."""

    def __init__(self, verdicts=None):
        self.verdicts = list(verdicts or [])
        self.calls: list[tuple[str, str, str]] = []

    async def review(self, question: str, answer: str, context: str) -> ReviewVerdict:
        self.calls.append((question, answer, context))
        if not self.verdicts:
            return ReviewVerdict()
        return self.verdicts.pop(0)


class InMemoryDocumentStore:
    """DocumentStore keeping records in a dict and the status history per document."""

    def __init__(self):
        self.records: dict[str, DocumentRecord] = {}
        self.history: dict[str, list] = {}

    async def create(self, record: DocumentRecord) -> DocumentRecord:
        now = datetime.now(timezone.utc)
        stored = record.model_copy(update={"created_at": now, "updated_at": now})
        self.records[record.id] = stored
        self.history[record.id] = [stored.status]
        return stored

    async def get(self, document_id: str) -> DocumentRecord | None:
        return self.records.get(document_id)

    async def update(self, document_id: str, **fields) -> DocumentRecord:
        if document_id not in self.records:
            raise DocumentNotFoundError(document_id)
        updated = self.records[document_id].model_copy(
            update={**fields, "updated_at": datetime.now(timezone.utc)}
        )
        self.records[document_id] = updated
        if "status" in fields:
            self.history[document_id].append(fields["status"])
        return updated

    async def list_by_owner(self, user_id: str, include_inactive: bool = False) -> list[DocumentRecord]:
        return [
            record
            for record in self.records.values()
            if record.user_id == user_id and (include_inactive or record.is_active)
        ]


class InMemoryJobStore:
    """JobStore keeping records in a dict."""

    def __init__(self):
        self.records: dict[str, JobRecord] = {}

    async def create(self, record: JobRecord) -> JobRecord:
        self.records[record.id] = record
        return record

    async def get(self, job_id: str) -> JobRecord | None:
        return self.records.get(job_id)

    async def update(self, job_id: str, **fields) -> JobRecord:
        if job_id not in self.records:
            raise JobNotFoundError(job_id)
        updated = self.records[job_id].model_copy(update=fields)
        self.records[job_id] = updated
        return updated

    async def list_by_document(self, document_id: str) -> list[JobRecord]:
        return [job for job in self.records.values() if job.document_id == document_id]


@pytest.fixture
def scripted_model() -> ScriptedModel:
    """Provide an empty ScriptedModel (queue replies in the test)."""
    return ScriptedModel()


@pytest.fixture
def stub_reviewer() -> StubReviewer:
    """Provide a reviewer that passes every draft unless verdicts are queued."""
    return StubReviewer()


@pytest.fixture
def keyword_embeddings() -> KeywordEmbeddings:
    """Provide embeddings over a small study vocabulary."""
    return KeywordEmbeddings(["direito", "penal", "crase", "matemática", "cargo"])


@pytest.fixture
def document_store() -> InMemoryDocumentStore:
    return InMemoryDocumentStore()


@pytest.fixture
def job_store() -> InMemoryJobStore:
    return InMemoryJobStore()


@pytest.fixture
def default_profile() -> ModelProfile:
    """Provide a small default profile."""
    return ModelProfile(
        name="default",
        model="test-model",
        temperature=0.7,
        max_tokens=1000,
        top_p=0.9,
        token_limit=6000,
    )


@pytest.fixture
def make_candidate():
    """Factory for RetrievalCandidate instances."""

    def _make(content: str, similarity: float = 0.8, title: str = "Apostila", **kwargs) -> RetrievalCandidate:
        return RetrievalCandidate(content=content, similarity=similarity, title=title, **kwargs)

    return _make


@pytest.fixture
async def sqlite_session_factory():
    """
    Create in-memory SQLite async database for testing.

    Yields:
        async_sessionmaker: Session factory bound to a fresh schema
    """
    from sqlalchemy.ext.asyncio import create_async_engine
    from sqlalchemy.pool import StaticPool

    from study_rag.boundary.db.connection import create_tables, get_async_session_factory

    # StaticPool keeps the single in-memory database alive across sessions
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", poolclass=StaticPool)
    await create_tables(engine)

    yield get_async_session_factory(engine)

    await engine.dispose()
