"""
Vector index schemas.

Pydantic models exchanged between the vector index gateway and the index
adapters (records to write, raw matches read back).

Dependencies: pydantic
System role: Type definitions for vector operations
"""

from typing import Any

from pydantic import BaseModel, Field


class VectorRecord(BaseModel):
    """One vector to upsert."""

    id: str = Field(description="Vector id, '{document_id}_{chunk_index}'")
    values: list[float] = Field(description="Embedding vector")
    metadata: dict[str, Any] = Field(
        default_factory=dict,
        description="user_id, document_id, title, category, chunk_index, content",
    )


class IndexMatch(BaseModel):
    """Raw similarity match returned by an index adapter."""

    id: str
    score: float = Field(description="Cosine similarity in [-1, 1]")
    metadata: dict[str, Any] = Field(default_factory=dict)
