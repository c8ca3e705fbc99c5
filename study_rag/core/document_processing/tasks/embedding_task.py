"""
Embedding gateway.

Wraps a LangChain Embeddings provider with input normalization, length
truncation and dimension checks. Provider failures are wrapped in
EmbeddingError and surfaced immediately; embeddings are consumed
synchronously by the write path, so nothing is retried here.

Dependencies: langchain_core.embeddings
System role: Third stage of document ingestion pipeline, query embedding
"""

import logging
import re

from langchain_core.embeddings import Embeddings

from study_rag.core.exceptions import EmbeddingError

logger = logging.getLogger(__name__)

WHITESPACE = re.compile(r"\s+")

# Any LangChain Embeddings implementation (aembed_query / aembed_documents).
EmbeddingProvider = Embeddings


class EmbeddingGateway:
    """Normalize, truncate and embed text through an EmbeddingProvider."""

    def __init__(
        self,
        provider: EmbeddingProvider,
        max_input_chars: int = 8000,
        expected_dimension: int | None = None,
    ) -> None:
        """
        Initialize gateway.

        Args:
            provider: LangChain embeddings implementation
            max_input_chars: Inputs are truncated to this many characters
            expected_dimension: When set, every vector must have this length
        """
        self._provider = provider
        self._max_input_chars = max_input_chars
        self._expected_dimension = expected_dimension

    def prepare(self, text: str) -> str:
        """
        Collapse whitespace and truncate to the input limit.

        Args:
            text: Raw text

        Returns:
            str: Text as sent to the provider
        """
        normalized = WHITESPACE.sub(" ", text or "").strip()
        return normalized[: self._max_input_chars]

    async def embed(self, text: str) -> list[float]:
        """
        Embed a single text (queries).

        Args:
            text: Text to embed

        Returns:
            list[float]: Embedding vector

        Raises:
            EmbeddingError: When the provider fails or returns a bad vector
        """
        prepared = self.prepare(text)
        try:
            vector = await self._provider.aembed_query(prepared)
        except Exception as e:
            logger.error(f"{__name__}:embed - {type(e).__name__}: {e}")
            raise EmbeddingError(
                f"Failed to generate embedding: {e}",
                details={"input_chars": len(prepared)},
            ) from e

        self._check_dimension(vector)
        return list(vector)

    async def embed_batch(self, texts: list[str]) -> list[list[float]]:
        """
        Embed many texts, preserving order.

        Args:
            texts: Texts to embed

        Returns:
            list[list[float]]: One vector per input, same order

        Raises:
            EmbeddingError: When the provider fails or the counts differ
        """
        if not texts:
            return []

        prepared = [self.prepare(text) for text in texts]
        try:
            vectors = await self._provider.aembed_documents(prepared)
        except Exception as e:
            logger.error(f"{__name__}:embed_batch - {type(e).__name__}: {e}")
            raise EmbeddingError(
                f"Failed to generate embeddings: {e}",
                details={"batch_size": len(prepared)},
            ) from e

        if len(vectors) != len(prepared):
            raise EmbeddingError(
                "Embedding provider returned a different number of vectors",
                details={"expected": len(prepared), "received": len(vectors)},
            )

        for vector in vectors:
            self._check_dimension(vector)

        logger.info(f"{__name__}:embed_batch - Embedded {len(vectors)} texts")
        return [list(vector) for vector in vectors]

    def _check_dimension(self, vector: list[float]) -> None:
        if self._expected_dimension is not None and len(vector) != self._expected_dimension:
            raise EmbeddingError(
                "Embedding dimension does not match the index dimension",
                details={"expected": self._expected_dimension, "received": len(vector)},
            )
