"""
Vector index boundary.

Index adapters (in-memory, S3 Vectors) behind the VectorIndex protocol and
the gateway that batches, retries and filters on top of them.
"""

from study_rag.boundary.vdb.memory_index import InMemoryVectorIndex
from study_rag.boundary.vdb.vector_index import VectorIndex
from study_rag.boundary.vdb.vector_index_gateway import VectorIndexGateway, vector_id
from study_rag.boundary.vdb.vector_schemas import IndexMatch, VectorRecord

__all__ = [
    "InMemoryVectorIndex",
    "IndexMatch",
    "VectorIndex",
    "VectorIndexGateway",
    "VectorRecord",
    "vector_id",
]
