"""
In-memory vector index for development.

Cosine similarity over numpy arrays with equality metadata filters. Stands
in for S3 Vectors during local runs and tests; contents live only as long as
the process.

Dependencies: numpy
System role: Development vector index (local testing only)
"""

import asyncio
import logging
from typing import Any

import numpy as np

from study_rag.boundary.vdb.vector_schemas import IndexMatch, VectorRecord

logger = logging.getLogger(__name__)


class InMemoryVectorIndex:
    """Dictionary-backed cosine index."""

    def __init__(self, dimension: int | None = None) -> None:
        """
        Initialize empty index.

        Args:
            dimension: When set, records of another dimension are rejected
        """
        self._dimension = dimension
        self._vectors: dict[str, np.ndarray] = {}
        self._metadata: dict[str, dict[str, Any]] = {}
        self._lock = asyncio.Lock()

    def __len__(self) -> int:
        return len(self._vectors)

    async def upsert(self, records: list[VectorRecord]) -> None:
        async with self._lock:
            for record in records:
                vector = np.asarray(record.values, dtype=np.float32)
                if self._dimension is not None and vector.shape[0] != self._dimension:
                    raise ValueError(
                        f"Vector {record.id} has dimension {vector.shape[0]}, "
                        f"index expects {self._dimension}"
                    )
                self._vectors[record.id] = vector
                self._metadata[record.id] = dict(record.metadata)

    async def query(
        self,
        vector: list[float],
        top_k: int,
        filter: dict[str, Any],
    ) -> list[IndexMatch]:
        query_vector = np.asarray(vector, dtype=np.float32)
        query_norm = float(np.linalg.norm(query_vector))

        matches: list[IndexMatch] = []
        for vector_id, stored in self._vectors.items():
            metadata = self._metadata[vector_id]
            if not _matches(metadata, filter):
                continue
            denominator = query_norm * float(np.linalg.norm(stored))
            score = float(np.dot(query_vector, stored) / denominator) if denominator else 0.0
            matches.append(IndexMatch(id=vector_id, score=max(-1.0, min(1.0, score)), metadata=metadata))

        matches.sort(key=lambda match: match.score, reverse=True)
        return matches[:top_k]

    async def delete(self, filter: dict[str, Any]) -> int:
        async with self._lock:
            doomed = [vid for vid, meta in self._metadata.items() if _matches(meta, filter)]
            for vector_id in doomed:
                del self._vectors[vector_id]
                del self._metadata[vector_id]
        logger.info(f"{__name__}:delete - Removed {len(doomed)} vectors")
        return len(doomed)


def _matches(metadata: dict[str, Any], filter: dict[str, Any]) -> bool:
    return all(metadata.get(key) == value for key, value in filter.items())
