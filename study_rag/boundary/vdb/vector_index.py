"""
Vector index capability.

Protocol implemented by every index adapter. Filters are flat equality
dictionaries on metadata keys (user_id is always present).

Dependencies: typing
System role: Interface between the vector gateway and index providers
"""

from typing import Any, Protocol

from study_rag.boundary.vdb.vector_schemas import IndexMatch, VectorRecord


class VectorIndex(Protocol):
    """Remote or local similarity-search capability."""

    async def upsert(self, records: list[VectorRecord]) -> None:
        """Insert or replace records."""
        ...

    async def query(
        self,
        vector: list[float],
        top_k: int,
        filter: dict[str, Any],
    ) -> list[IndexMatch]:
        """Return up to top_k matches satisfying filter."""
        ...

    async def delete(self, filter: dict[str, Any]) -> int:
        """Delete records matching filter, returning how many were removed."""
        ...
