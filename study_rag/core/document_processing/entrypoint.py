"""
Local ingestion pipeline.

Coordinates chunking, embedding and vector upsert for text that was
extracted locally (the fallback path when the external processing backend
is unavailable).

Dependencies: All task modules, study_rag.boundary.vdb
System role: Pipeline orchestration (coordinates only)
"""

import logging
import time

from study_rag.boundary.vdb.vector_index_gateway import VectorIndexGateway
from study_rag.models.retrieval import DocumentMetadata

from .models import PipelineResult, TextChunk
from .tasks import ChunkingTask, EmbeddingGateway

logger = logging.getLogger(__name__)


class IngestionPipeline:
    """Orchestrate local ingestion: chunk -> embed -> upsert."""

    def __init__(
        self,
        chunker: ChunkingTask,
        embedding_gateway: EmbeddingGateway,
        index_gateway: VectorIndexGateway,
    ) -> None:
        """
        Initialize pipeline with its tasks.

        Args:
            chunker: Paragraph/sentence chunker
            embedding_gateway: Batch embedding
            index_gateway: Owner-scoped vector writes
        """
        self._chunker = chunker
        self._embeddings = embedding_gateway
        self._index = index_gateway

    def chunk(self, text: str) -> list[TextChunk]:
        """Chunk text without indexing it."""
        return self._chunker.chunk(text)

    async def index_text(self, text: str, metadata: DocumentMetadata) -> PipelineResult:
        """
        Chunk, embed and index a document's text.

        Args:
            text: Extracted document text
            metadata: Owner, document id, title and category

        Returns:
            PipelineResult: Chunk count, written vector ids and timing

        Raises:
            EmbeddingError: Embedding failed
            VectorStoreError: Upsert failed after retries
        """
        start_time = time.perf_counter()

        chunks = self._chunker.chunk(text)
        logger.info(
            f"{__name__}:index_text - Step 1: {len(chunks)} chunks",
            extra={"document_id": metadata.document_id},
        )

        vector_ids: list[str] = []
        if chunks:
            embeddings = await self._embeddings.embed_batch([chunk.content for chunk in chunks])
            logger.info(f"{__name__}:index_text - Step 2: {len(embeddings)} embeddings")

            vector_ids = await self._index.upsert(
                owner_key=metadata.user_id,
                chunks=chunks,
                embeddings=embeddings,
                metadata=metadata,
            )
            logger.info(f"{__name__}:index_text - Step 3: {len(vector_ids)} vectors written")

        elapsed_ms = (time.perf_counter() - start_time) * 1000
        return PipelineResult(
            document_id=metadata.document_id,
            chunk_count=len(chunks),
            vector_ids=vector_ids,
            processing_time_ms=elapsed_ms,
        )
