"""
Vector index gateway.

Single entry point for vector writes and reads:

- upsert: batched writes, each batch retried with exponential backoff up to
  a fixed attempt ceiling; exhausting the ceiling fails the whole upsert
  loudly so callers know indexing did not complete.
- query: owner-scoped similarity search; results are sorted by similarity
  and candidates under the minimum similarity are dropped here, not by
  callers.

Dependencies: tenacity, study_rag.boundary.vdb
System role: Write/read path to the vector index
"""

import logging

from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential_jitter,
)

from study_rag.boundary.vdb.vector_index import VectorIndex
from study_rag.boundary.vdb.vector_schemas import IndexMatch, VectorRecord
from study_rag.core.document_processing.models import TextChunk
from study_rag.core.exceptions import ValidationError, VectorStoreError
from study_rag.models.retrieval import DocumentMetadata, QueryFilter, RetrievalCandidate

logger = logging.getLogger(__name__)


def vector_id(document_id: str, chunk_index: int) -> str:
    """Deterministic vector id of a chunk."""
    return f"{document_id}_{chunk_index}"


class VectorIndexGateway:
    """Batched, retried writes and filtered reads over a VectorIndex."""

    def __init__(
        self,
        index: VectorIndex,
        batch_size: int = 100,
        max_attempts: int = 3,
        min_similarity: float = 0.1,
        backoff_initial: float = 1.0,
        backoff_max: float = 10.0,
    ) -> None:
        """
        Initialize gateway.

        Args:
            index: Index adapter (S3 Vectors or in-memory)
            batch_size: Maximum records per upsert request
            max_attempts: Attempts per batch before the upsert fails
            min_similarity: Default similarity floor for queries
            backoff_initial: First backoff interval in seconds
            backoff_max: Backoff ceiling in seconds
        """
        if batch_size < 1:
            raise ValidationError("batch_size must be at least 1", field="batch_size")

        self._index = index
        self._batch_size = batch_size
        self._max_attempts = max_attempts
        self._min_similarity = min_similarity

        self._upsert_batch = retry(
            retry=retry_if_exception_type(Exception),
            stop=stop_after_attempt(max_attempts),
            wait=wait_exponential_jitter(
                initial=backoff_initial,
                max=backoff_max,
                jitter=backoff_initial / 2,
            ),
            before_sleep=lambda retry_state: logger.warning(
                f"{__name__}:upsert - Retry {retry_state.attempt_number}/{max_attempts} "
                f"after {type(retry_state.outcome.exception()).__name__}"
            ),
            reraise=True,
        )(self._index.upsert)

    async def upsert(
        self,
        owner_key: str,
        chunks: list[TextChunk],
        embeddings: list[list[float]],
        metadata: DocumentMetadata,
    ) -> list[str]:
        """
        Write chunk vectors for one document.

        Args:
            owner_key: User / namespace key (stored as user_id)
            chunks: Chunks in chunk_index order
            embeddings: One vector per chunk
            metadata: Document-level metadata copied onto every vector

        Returns:
            list[str]: Written vector ids

        Raises:
            ValidationError: When chunks and embeddings differ in length
            VectorStoreError: When a batch still fails after max_attempts
        """
        if len(chunks) != len(embeddings):
            raise ValidationError(
                "chunks and embeddings must have the same length",
                field="embeddings",
                details={"chunks": len(chunks), "embeddings": len(embeddings)},
            )

        records = [
            VectorRecord(
                id=vector_id(metadata.document_id, chunk.chunk_index),
                values=embedding,
                metadata={
                    "user_id": owner_key,
                    "document_id": metadata.document_id,
                    "title": metadata.title,
                    "category": metadata.category,
                    "chunk_index": chunk.chunk_index,
                    "content": chunk.content,
                },
            )
            for chunk, embedding in zip(chunks, embeddings)
        ]

        written: list[str] = []
        for batch_number, start in enumerate(range(0, len(records), self._batch_size)):
            batch = records[start:start + self._batch_size]
            try:
                await self._upsert_batch(batch)
            except Exception as e:
                logger.error(
                    f"{__name__}:upsert - Batch {batch_number} failed after "
                    f"{self._max_attempts} attempts: {type(e).__name__}: {e}",
                    extra={"document_id": metadata.document_id},
                )
                raise VectorStoreError(
                    f"Failed to upsert vectors: {e}",
                    operation="upsert",
                    details={
                        "document_id": metadata.document_id,
                        "batch": batch_number,
                        "written": len(written),
                        "total": len(records),
                    },
                ) from e
            written.extend(record.id for record in batch)

        logger.info(
            f"{__name__}:upsert - Upserted {len(written)} vectors",
            extra={"document_id": metadata.document_id, "user_id": owner_key},
        )
        return written

    async def query(
        self,
        vector: list[float],
        filter: QueryFilter,
        top_k: int = 5,
        min_similarity: float | None = None,
    ) -> list[RetrievalCandidate]:
        """
        Owner-scoped similarity search.

        Args:
            vector: Query embedding
            filter: Owner filter (category / document optional)
            top_k: Maximum matches requested from the index
            min_similarity: Similarity floor (gateway default if None)

        Returns:
            list[RetrievalCandidate]: Candidates sorted by similarity descending

        Raises:
            VectorStoreError: When the index query fails
        """
        floor = self._min_similarity if min_similarity is None else min_similarity
        try:
            matches = await self._index.query(
                vector=vector,
                top_k=top_k,
                filter=filter.as_metadata_filter(),
            )
        except Exception as e:
            logger.error(f"{__name__}:query - {type(e).__name__}: {e}")
            raise VectorStoreError(
                f"Vector query failed: {e}",
                operation="query",
                details={"user_id": filter.user_id, "top_k": top_k},
            ) from e

        candidates = [_to_candidate(match) for match in matches if match.score >= floor]
        candidates.sort(key=lambda candidate: candidate.similarity, reverse=True)

        logger.info(
            f"{__name__}:query - {len(candidates)}/{len(matches)} matches above {floor}",
            extra={"user_id": filter.user_id, "top_k": top_k},
        )
        return candidates

    async def delete_document(self, user_id: str, document_id: str) -> int:
        """
        Remove every vector of a document.

        Raises:
            VectorStoreError: When the index delete fails
        """
        try:
            return await self._index.delete({"user_id": user_id, "document_id": document_id})
        except Exception as e:
            raise VectorStoreError(
                f"Failed to delete vectors: {e}",
                operation="delete",
                details={"document_id": document_id},
            ) from e


def _to_candidate(match: IndexMatch) -> RetrievalCandidate:
    metadata = match.metadata
    chunk_index = metadata.get("chunk_index")
    return RetrievalCandidate(
        content=str(metadata.get("content", "")),
        similarity=match.score,
        title=str(metadata.get("title", "")),
        category=str(metadata.get("category", "")),
        source_id=str(metadata.get("document_id", "")),
        chunk_index=int(chunk_index) if chunk_index is not None else None,
        vector_id=match.id,
    )
