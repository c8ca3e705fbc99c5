"""
Gemini embedding provider for the study index.

Chunks are embedded with the RETRIEVAL_DOCUMENT task type and questions with
RETRIEVAL_QUERY, always at the index dimension (VECTOR_STORE_EMBEDDING_DIMENSION).
A vector of any other size would be rejected by the gateway, so the
dimension is forced on every call rather than trusted to the constructor.

Dependencies: langchain_google_genai, python-dotenv
System role: Production embedding provider
"""

import logging
from typing import Any, List

from dotenv import load_dotenv
from langchain_google_genai import GoogleGenerativeAIEmbeddings

load_dotenv()
logger = logging.getLogger(__name__)

DOCUMENT_TASK = "RETRIEVAL_DOCUMENT"
QUERY_TASK = "RETRIEVAL_QUERY"


class FixedDimensionEmbeddings(GoogleGenerativeAIEmbeddings):
    """GoogleGenerativeAIEmbeddings with a pinned output size and retrieval task types."""

    _output_dimensionality: int = 768

    def __init__(
        self,
        model: str = "models/text-embedding-004",
        output_dimensionality: int = 768,
        **kwargs: Any,
    ) -> None:
        super().__init__(model=model, **kwargs)
        self._output_dimensionality = output_dimensionality
        logger.info(
            f"{__name__}:__init__ - Embedding model {model} at {output_dimensionality} dims"
        )

    @property
    def dimension(self) -> int:
        return self._output_dimensionality

    def _pin(self, kwargs: dict[str, Any], task_type: str) -> dict[str, Any]:
        kwargs["output_dimensionality"] = self._output_dimensionality
        kwargs["task_type"] = kwargs.get("task_type") or task_type
        return kwargs

    def embed_documents(self, texts: List[str], **kwargs: Any) -> List[List[float]]:
        return super().embed_documents(texts, **self._pin(kwargs, DOCUMENT_TASK))

    def embed_query(self, text: str, **kwargs: Any) -> List[float]:
        return super().embed_query(text, **self._pin(kwargs, QUERY_TASK))

    async def aembed_documents(self, texts: List[str], **kwargs: Any) -> List[List[float]]:
        return await super().aembed_documents(texts, **self._pin(kwargs, DOCUMENT_TASK))

    async def aembed_query(self, text: str, **kwargs: Any) -> List[float]:
        return await super().aembed_query(text, **self._pin(kwargs, QUERY_TASK))
