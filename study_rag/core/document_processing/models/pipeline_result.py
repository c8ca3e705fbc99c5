"""
Pipeline result model.

Summary returned after a document has been chunked, embedded and indexed.

Dependencies: pydantic
System role: Data model for pipeline output
"""

from pydantic import BaseModel, Field


class PipelineResult(BaseModel):
    """Result of indexing one document."""

    document_id: str = Field(description="Document identifier")
    chunk_count: int = Field(description="Number of chunks indexed")
    vector_ids: list[str] = Field(default_factory=list, description="Ids written to the index")
    processing_time_ms: float = Field(description="Processing time in milliseconds")
