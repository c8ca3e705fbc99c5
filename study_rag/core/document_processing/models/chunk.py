"""
Chunk model for the ingestion pipeline.

A chunk is a bounded contiguous span of a document's text and the unit of
embedding and retrieval. Chunks are not persisted as rows; they exist as
vectors in the index and as the content returned by similarity search.

Dependencies: pydantic
System role: Data model for document chunks
"""

from pydantic import BaseModel, Field


class TextChunk(BaseModel):
    """Document chunk with its stable position."""

    content: str = Field(min_length=1, description="Chunk text content")
    chunk_index: int = Field(ge=0, description="Position of the chunk within its document")

    @property
    def length(self) -> int:
        """Chunk length in characters."""
        return len(self.content)
