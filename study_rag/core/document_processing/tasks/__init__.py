"""Pipeline tasks for document ingestion."""

from .chunking_task import ChunkingTask
from .embedding_task import EmbeddingGateway
from .parsing_task import ExtractedText, TextExtractor

__all__ = ["ChunkingTask", "EmbeddingGateway", "ExtractedText", "TextExtractor"]
