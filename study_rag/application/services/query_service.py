"""
Study question answering service.

Retrieves from the owner's documents, optionally re-ranks the candidates
with the model and hands them to the answer generator.

Dependencies: study_rag.core
System role: RAG query orchestration
"""

import logging

from study_rag.core.agentic_system.answer.answer_generator import AnswerGenerator
from study_rag.core.agentic_system.answer.answer_schema import GeneratedAnswer
from study_rag.core.exceptions import EmbeddingError, RetrievalError, VectorStoreError
from study_rag.core.reranker import Reranker
from study_rag.core.retriever import Retriever
from study_rag.models.retrieval import QueryFilter, RetrievalOptions

logger = logging.getLogger(__name__)

RERANK_POOL_FACTOR = 2


class StudyQueryService:
    """Answer questions from a student's own documents."""

    def __init__(
        self,
        retriever: Retriever,
        reranker: Reranker,
        generator: AnswerGenerator,
    ) -> None:
        """
        Initialize query service.

        Args:
            retriever: Owner-scoped retrieval
            reranker: Model-based candidate reordering
            generator: Answer generation with quality gate
        """
        self._retriever = retriever
        self._reranker = reranker
        self._generator = generator

    async def ask(
        self,
        user_id: str,
        question: str,
        category: str | None = None,
        top_k: int = 5,
        min_similarity: float = 0.1,
        rerank: bool = True,
        supplementary_context: str | None = None,
    ) -> GeneratedAnswer:
        """
        Answer a question.

        With rerank enabled, twice top_k candidates are retrieved and the
        model keeps the top_k most relevant ones.

        Args:
            user_id: Owner whose documents are searched
            question: User question
            category: Optional category restriction
            top_k: Candidates handed to the generator
            min_similarity: Similarity floor
            rerank: Whether to re-rank with the model
            supplementary_context: Optional extra context for the prompt

        Returns:
            GeneratedAnswer: Answer, terminal state and sources

        Raises:
            ValidationError: Empty question
            RetrievalError: Embedding or index failure
            GenerationError: Drafting model failure
        """
        options = RetrievalOptions(
            filter=QueryFilter(user_id=user_id, category=category),
            top_k=top_k * RERANK_POOL_FACTOR if rerank else top_k,
            min_similarity=min_similarity,
        )

        try:
            retrieval = await self._retriever.retrieve(question, options)
        except (EmbeddingError, VectorStoreError) as e:
            raise RetrievalError(f"Retrieval failed: {e.message}", query=question) from e

        candidates = retrieval.candidates
        if rerank and len(candidates) > 1:
            candidates = await self._reranker.rerank(question, candidates, keep=top_k)
        else:
            candidates = candidates[:top_k]

        logger.info(
            f"{__name__}:ask - {len(candidates)} candidates for generation",
            extra={"user_id": user_id, "total_matches": retrieval.total_matches},
        )
        return await self._generator.generate(
            question,
            candidates,
            supplementary_context=supplementary_context,
        )
