"""
Test suite for Retriever.

Indexes a few chunks through the real gateways (keyword embeddings over the
in-memory index) and checks owner scoping, thresholds, multi-query merging
and deduplication.

System role: Verification of the read path
"""

import pytest

from study_rag.boundary.vdb.memory_index import InMemoryVectorIndex
from study_rag.boundary.vdb.vector_index_gateway import VectorIndexGateway
from study_rag.core.document_processing.models import TextChunk
from study_rag.core.document_processing.tasks.embedding_task import EmbeddingGateway
from study_rag.core.exceptions import ValidationError
from study_rag.core.retriever import Retriever
from study_rag.models.retrieval import DocumentMetadata, QueryFilter, RetrievalOptions

PENAL = "Direito penal: crimes contra a vida."
CRASE = "Crase antes de palavras femininas."
JUROS = "Matemática financeira e juros."


@pytest.fixture
async def retriever(keyword_embeddings) -> Retriever:
    """Retriever over two owners' indexed chunks."""
    embeddings = EmbeddingGateway(keyword_embeddings)
    index = VectorIndexGateway(InMemoryVectorIndex(), backoff_initial=0, backoff_max=0)

    async def index_document(user_id: str, document_id: str, texts: list[str]) -> None:
        chunks = [TextChunk(content=text, chunk_index=i) for i, text in enumerate(texts)]
        vectors = await embeddings.embed_batch(texts)
        await index.upsert(
            user_id,
            chunks,
            vectors,
            DocumentMetadata(user_id=user_id, document_id=document_id, title=f"Doc {document_id}"),
        )

    await index_document("u1", "d1", [PENAL, CRASE, JUROS])
    await index_document("u2", "d2", ["Direito penal do outro usuário."])
    return Retriever(embeddings, index)


def _options(user_id: str = "u1", **kwargs) -> RetrievalOptions:
    return RetrievalOptions(filter=QueryFilter(user_id=user_id), **kwargs)


class TestRetrieverRetrieve:
    """Test suite for Retriever.retrieve."""

    @pytest.mark.asyncio
    async def test_retrieve_should_return_owner_matches_only(self, retriever: Retriever) -> None:
        # Act
        result = await retriever.retrieve("direito penal", _options(top_k=5))

        # Assert
        assert [c.content for c in result.candidates] == [PENAL]
        assert result.candidates[0].similarity == pytest.approx(1.0)
        assert result.candidates[0].title == "Doc d1"
        assert result.candidates[0].source_id == "d1"
        assert result.candidates[0].chunk_index == 0

    @pytest.mark.asyncio
    async def test_retrieve_should_drop_matches_below_floor(self, retriever: Retriever) -> None:
        # Similarity of "direito" against the penal chunk is about 0.71
        result = await retriever.retrieve("direito", _options(min_similarity=0.9))

        assert result.is_empty
        assert result.total_matches == 0

    @pytest.mark.asyncio
    async def test_retrieve_should_reject_blank_query(self, retriever: Retriever) -> None:
        with pytest.raises(ValidationError):
            await retriever.retrieve("   ", _options())


class TestRetrieverRetrieveMany:
    """Test suite for Retriever.retrieve_many."""

    @pytest.mark.asyncio
    async def test_retrieve_many_should_deduplicate_across_sub_queries(self, retriever: Retriever) -> None:
        # Act
        result = await retriever.retrieve_many(["direito", "penal"], _options())

        # Assert
        assert [c.content for c in result.candidates] == [PENAL]
        assert result.total_matches == 2
        assert result.sub_queries == ["direito", "penal"]

    @pytest.mark.asyncio
    async def test_retrieve_many_should_sort_merged_candidates(self, retriever: Retriever) -> None:
        result = await retriever.retrieve_many(["direito", "crase"], _options())

        assert [c.content for c in result.candidates] == [CRASE, PENAL]

    @pytest.mark.asyncio
    async def test_retrieve_many_should_apply_final_cap(self, retriever: Retriever) -> None:
        result = await retriever.retrieve_many(["direito", "crase"], _options(final_top_k=1))

        assert [c.content for c in result.candidates] == [CRASE]

    @pytest.mark.asyncio
    async def test_retrieve_many_should_ignore_blank_sub_queries(self, retriever: Retriever) -> None:
        result = await retriever.retrieve_many(["", "  ", "matemática"], _options())

        assert result.sub_queries == ["matemática"]
        assert [c.content for c in result.candidates] == [JUROS]
