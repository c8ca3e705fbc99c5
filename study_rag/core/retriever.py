"""
Retrieval logic with owner filtering and multi-query merging.

Embeds each query, runs owner-scoped similarity search through the vector
index gateway and merges the hits. Broad-coverage workflows pass several
paraphrased sub-queries; hits are deduplicated by exact content, the first
occurrence keeping its similarity score. An empty result is returned as
such so callers can report "no context" instead of inventing it.

Dependencies: study_rag.boundary.vdb, study_rag.core.document_processing
System role: RAG retrieval business logic
"""

import asyncio
import logging

from study_rag.boundary.vdb.vector_index_gateway import VectorIndexGateway
from study_rag.core.document_processing.tasks.embedding_task import EmbeddingGateway
from study_rag.core.exceptions import ValidationError
from study_rag.models.retrieval import RetrievalCandidate, RetrievalOptions, RetrievalResult
from study_rag.observability.log_utils import preview

logger = logging.getLogger(__name__)


class Retriever:
    """Query the vector index with one or many sub-queries."""

    def __init__(
        self,
        embedding_gateway: EmbeddingGateway,
        index_gateway: VectorIndexGateway,
    ) -> None:
        """
        Initialize retriever.

        Args:
            embedding_gateway: Embeds query text
            index_gateway: Owner-scoped similarity search
        """
        self._embeddings = embedding_gateway
        self._index = index_gateway

    async def retrieve(self, query: str, options: RetrievalOptions) -> RetrievalResult:
        """
        Retrieve candidates for a single query.

        Args:
            query: User question or search text
            options: top_k, min_similarity and owner filter

        Returns:
            RetrievalResult: Deduplicated candidates (possibly empty)

        Raises:
            ValidationError: When query is empty
            EmbeddingError: When the query cannot be embedded
            VectorStoreError: When the index query fails
        """
        return await self.retrieve_many([query], options)

    async def retrieve_many(
        self,
        sub_queries: list[str],
        options: RetrievalOptions,
    ) -> RetrievalResult:
        """
        Retrieve and merge candidates for several sub-queries.

        Sub-queries run concurrently; merging follows sub-query order so the
        first occurrence of a chunk is always the one from the earliest
        sub-query that returned it.

        Args:
            sub_queries: Paraphrases of the same informational need
            options: top_k, min_similarity, final_top_k and owner filter

        Returns:
            RetrievalResult: Merged candidates sorted by similarity descending

        Raises:
            ValidationError: When no non-empty sub-query is given
        """
        queries = [q.strip() for q in sub_queries if q and q.strip()]
        if not queries:
            raise ValidationError("Query text must not be empty", field="query")

        logger.info(
            f"{__name__}:retrieve_many - Step 1: {len(queries)} sub-queries, "
            f"top_k={options.top_k}, min_similarity={options.min_similarity}",
            extra={"user_id": options.filter.user_id},
        )

        per_query = await asyncio.gather(*(self._search(q, options) for q in queries))

        merged: list[RetrievalCandidate] = []
        seen: set[str] = set()
        total = 0
        for hits in per_query:
            total += len(hits)
            for candidate in hits:
                if candidate.content in seen:
                    continue
                seen.add(candidate.content)
                merged.append(candidate)

        # Stable sort keeps sub-query order among equal scores
        merged.sort(key=lambda candidate: candidate.similarity, reverse=True)
        if options.final_top_k is not None:
            merged = merged[: options.final_top_k]

        if not merged:
            logger.info(f"{__name__}:retrieve_many - Step 2: No candidates for any sub-query")
        else:
            logger.info(
                f"{__name__}:retrieve_many - Step 2: {len(merged)} unique of {total} hits"
            )

        return RetrievalResult(candidates=merged, sub_queries=queries, total_matches=total)

    async def _search(self, query: str, options: RetrievalOptions) -> list[RetrievalCandidate]:
        logger.debug(f"{__name__}:_search - '{preview(query)}'")
        vector = await self._embeddings.embed(query)
        return await self._index.query(
            vector=vector,
            filter=options.filter,
            top_k=options.top_k,
            min_similarity=options.min_similarity,
        )
