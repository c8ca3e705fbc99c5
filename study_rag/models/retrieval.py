"""
Retrieval domain models.

Transient structures that live for the duration of a single query: the
owner-scoped filter, retrieval options, candidates returned by similarity
search and the merged result of one or more sub-queries.

Dependencies: pydantic
System role: Type definitions for retrieval and vector operations
"""

from pydantic import BaseModel, Field


class QueryFilter(BaseModel):
    """
    Metadata filter applied to every similarity query.

    user_id is mandatory: all reads are scoped to the owner's namespace.
    """

    user_id: str = Field(min_length=1, description="Owner / namespace key")
    category: str | None = Field(default=None, description="Restrict to a document category")
    document_id: str | None = Field(default=None, description="Restrict to one document")

    def as_metadata_filter(self) -> dict[str, str]:
        """Flat equality filter understood by the index adapters."""
        filter_dict = {"user_id": self.user_id}
        if self.category:
            filter_dict["category"] = self.category
        if self.document_id:
            filter_dict["document_id"] = self.document_id
        return filter_dict


class DocumentMetadata(BaseModel):
    """Metadata written alongside every chunk vector of one document."""

    user_id: str
    document_id: str
    title: str
    category: str = "geral"


class RetrievalOptions(BaseModel):
    """Options for a retrieval call."""

    filter: QueryFilter
    top_k: int = Field(default=5, ge=1, le=100)
    min_similarity: float = Field(default=0.1, ge=-1.0, le=1.0)
    final_top_k: int | None = Field(
        default=None,
        ge=1,
        description="Cap applied after merging sub-query results",
    )


class RetrievalCandidate(BaseModel):
    """Single similarity-search hit."""

    content: str
    similarity: float = Field(ge=-1.0, le=1.0)
    title: str = ""
    category: str = ""
    source_id: str = Field(default="", description="Document id the chunk came from")
    chunk_index: int | None = None
    vector_id: str = ""


class RetrievalResult(BaseModel):
    """Merged, deduplicated candidates of one retrieval request."""

    candidates: list[RetrievalCandidate] = Field(default_factory=list)
    sub_queries: list[str] = Field(default_factory=list)
    total_matches: int = Field(default=0, description="Hits before deduplication")

    @property
    def is_empty(self) -> bool:
        """True when no sub-query produced any candidate."""
        return not self.candidates
