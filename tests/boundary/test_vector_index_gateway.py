"""
Test suite for VectorIndexGateway and InMemoryVectorIndex.

Tests batching, retry with backoff, loud failure after the attempt ceiling,
owner-scoped filtering and similarity thresholds.

System role: Verification of the vector write/read path
"""

import pytest

from study_rag.boundary.vdb.memory_index import InMemoryVectorIndex
from study_rag.boundary.vdb.vector_index_gateway import VectorIndexGateway, vector_id
from study_rag.boundary.vdb.vector_schemas import VectorRecord
from study_rag.core.document_processing.models import TextChunk
from study_rag.core.exceptions import ValidationError, VectorStoreError
from study_rag.models.retrieval import DocumentMetadata, QueryFilter


class FlakyIndex:
    """Index whose upsert fails a fixed number of times before succeeding."""

    def __init__(self, failures: int):
        self.failures = failures
        self.attempts = 0
        self.batches: list[list[VectorRecord]] = []

    async def upsert(self, records):
        self.attempts += 1
        if self.attempts <= self.failures:
            raise ConnectionError("throttled")
        self.batches.append(list(records))

    async def query(self, vector, top_k, filter):
        raise ConnectionError("index offline")

    async def delete(self, filter):
        raise ConnectionError("index offline")


@pytest.fixture
def metadata() -> DocumentMetadata:
    return DocumentMetadata(user_id="user-1", document_id="doc-1", title="Edital TRT", category="edital")


def _chunks(count: int) -> list[TextChunk]:
    return [TextChunk(content=f"trecho {i}", chunk_index=i) for i in range(count)]


def _gateway(index, **kwargs) -> VectorIndexGateway:
    kwargs.setdefault("backoff_initial", 0)
    kwargs.setdefault("backoff_max", 0)
    return VectorIndexGateway(index=index, **kwargs)


class TestVectorIndexGatewayUpsert:
    """Test suite for VectorIndexGateway.upsert."""

    @pytest.mark.asyncio
    async def test_upsert_should_write_in_batches(self, metadata) -> None:
        # Arrange
        index = FlakyIndex(failures=0)
        gateway = _gateway(index, batch_size=2)

        # Act
        written = await gateway.upsert("user-1", _chunks(5), [[1.0, 0.0]] * 5, metadata)

        # Assert
        assert [len(batch) for batch in index.batches] == [2, 2, 1]
        assert written == [vector_id("doc-1", i) for i in range(5)]

    @pytest.mark.asyncio
    async def test_upsert_should_copy_document_metadata_onto_vectors(self, metadata) -> None:
        index = FlakyIndex(failures=0)

        await _gateway(index).upsert("user-1", _chunks(1), [[1.0, 0.0]], metadata)

        record = index.batches[0][0]
        assert record.id == "doc-1_0"
        assert record.metadata == {
            "user_id": "user-1",
            "document_id": "doc-1",
            "title": "Edital TRT",
            "category": "edital",
            "chunk_index": 0,
            "content": "trecho 0",
        }

    @pytest.mark.asyncio
    async def test_upsert_should_retry_transient_failures(self, metadata) -> None:
        # Arrange
        index = FlakyIndex(failures=2)
        gateway = _gateway(index, max_attempts=3)

        # Act
        written = await gateway.upsert("user-1", _chunks(2), [[1.0, 0.0]] * 2, metadata)

        # Assert
        assert index.attempts == 3
        assert len(written) == 2

    @pytest.mark.asyncio
    async def test_upsert_should_fail_loudly_after_attempt_ceiling(self, metadata) -> None:
        # Arrange
        index = FlakyIndex(failures=10)
        gateway = _gateway(index, max_attempts=3)

        # Act & Assert
        with pytest.raises(VectorStoreError) as exc_info:
            await gateway.upsert("user-1", _chunks(2), [[1.0, 0.0]] * 2, metadata)

        assert index.attempts == 3
        assert exc_info.value.details["operation"] == "upsert"
        assert exc_info.value.details["written"] == 0

    @pytest.mark.asyncio
    async def test_upsert_should_reject_mismatched_lengths(self, metadata) -> None:
        with pytest.raises(ValidationError):
            await _gateway(FlakyIndex(0)).upsert("user-1", _chunks(2), [[1.0]], metadata)

    def test_init_should_reject_zero_batch_size(self) -> None:
        with pytest.raises(ValidationError):
            VectorIndexGateway(index=FlakyIndex(0), batch_size=0)


@pytest.fixture
async def gateway() -> VectorIndexGateway:
    """Gateway over an in-memory index holding two owners' vectors."""
    index = InMemoryVectorIndex(dimension=2)
    await index.upsert([
        VectorRecord(id="a_0", values=[1.0, 0.0], metadata={"user_id": "u1", "document_id": "a", "content": "alto", "title": "A"}),
        VectorRecord(id="a_1", values=[0.6, 0.8], metadata={"user_id": "u1", "document_id": "a", "content": "médio", "title": "A"}),
        VectorRecord(id="b_0", values=[0.0, 1.0], metadata={"user_id": "u1", "document_id": "b", "content": "baixo", "title": "B"}),
        VectorRecord(id="c_0", values=[1.0, 0.0], metadata={"user_id": "u2", "document_id": "c", "content": "alheio", "title": "C"}),
    ])
    return _gateway(index, min_similarity=0.1)


class TestVectorIndexGatewayQuery:
    """Test suite for VectorIndexGateway.query over the in-memory index."""

    @pytest.mark.asyncio
    async def test_query_should_return_only_owner_vectors_sorted(self, gateway) -> None:
        # Act
        candidates = await gateway.query([1.0, 0.0], QueryFilter(user_id="u1"), top_k=10)

        # Assert
        assert [c.content for c in candidates] == ["alto", "médio"]
        assert candidates[0].similarity == pytest.approx(1.0)
        assert candidates[1].similarity == pytest.approx(0.6)
        assert candidates[0].source_id == "a"
        assert candidates[0].chunk_index is None

    @pytest.mark.asyncio
    async def test_query_should_apply_explicit_similarity_floor(self, gateway) -> None:
        candidates = await gateway.query(
            [1.0, 0.0], QueryFilter(user_id="u1"), top_k=10, min_similarity=0.9
        )

        assert [c.content for c in candidates] == ["alto"]

    @pytest.mark.asyncio
    async def test_query_should_scope_to_document(self, gateway) -> None:
        candidates = await gateway.query(
            [0.0, 1.0], QueryFilter(user_id="u1", document_id="b"), top_k=10
        )

        assert [c.content for c in candidates] == ["baixo"]

    @pytest.mark.asyncio
    async def test_query_should_wrap_index_failure(self) -> None:
        with pytest.raises(VectorStoreError):
            await _gateway(FlakyIndex(0)).query([1.0], QueryFilter(user_id="u1"))

    @pytest.mark.asyncio
    async def test_delete_document_should_remove_only_that_document(self, gateway) -> None:
        deleted = await gateway.delete_document("u1", "a")

        remaining = await gateway.query([1.0, 0.0], QueryFilter(user_id="u1"), top_k=10, min_similarity=-1.0)
        assert deleted == 2
        assert [c.content for c in remaining] == ["baixo"]

    @pytest.mark.asyncio
    async def test_delete_document_should_wrap_index_failure(self) -> None:
        with pytest.raises(VectorStoreError):
            await _gateway(FlakyIndex(0)).delete_document("u1", "a")


class TestInMemoryVectorIndex:
    """Test suite for InMemoryVectorIndex."""

    @pytest.mark.asyncio
    async def test_upsert_should_reject_wrong_dimension(self) -> None:
        index = InMemoryVectorIndex(dimension=3)

        with pytest.raises(ValueError):
            await index.upsert([VectorRecord(id="x", values=[1.0, 0.0])])

    @pytest.mark.asyncio
    async def test_upsert_should_replace_existing_id(self) -> None:
        # Arrange
        index = InMemoryVectorIndex()
        await index.upsert([VectorRecord(id="x", values=[1.0, 0.0], metadata={"user_id": "u", "content": "velho"})])

        # Act
        await index.upsert([VectorRecord(id="x", values=[1.0, 0.0], metadata={"user_id": "u", "content": "novo"})])
        matches = await index.query([1.0, 0.0], top_k=5, filter={"user_id": "u"})

        # Assert
        assert len(index) == 1
        assert [m.id for m in matches] == ["x"]
        assert matches[0].metadata == {"user_id": "u", "content": "novo"}

    @pytest.mark.asyncio
    async def test_query_should_score_zero_vector_as_zero(self) -> None:
        index = InMemoryVectorIndex()
        await index.upsert([VectorRecord(id="x", values=[0.0, 0.0], metadata={"user_id": "u"})])

        matches = await index.query([1.0, 0.0], top_k=5, filter={"user_id": "u"})

        assert matches[0].score == 0.0
