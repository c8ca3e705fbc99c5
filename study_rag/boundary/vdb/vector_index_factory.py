"""
Vector index factory.

Selects the index adapter from VECTOR_STORE_STORE_TYPE and wraps it in a
configured VectorIndexGateway.

Dependencies: study_rag.boundary.vdb, study_rag.configs
System role: Vector index instantiation and selection
"""

import logging

from study_rag.boundary.vdb.memory_index import InMemoryVectorIndex
from study_rag.boundary.vdb.s3_vectors_index import S3VectorsIndex
from study_rag.boundary.vdb.vector_index import VectorIndex
from study_rag.boundary.vdb.vector_index_gateway import VectorIndexGateway
from study_rag.configs.vector_store import VectorStoreSettings

logger = logging.getLogger(__name__)


def get_vector_index(settings: VectorStoreSettings) -> VectorIndex:
    """
    Build the index adapter named by settings.store_type.

    Args:
        settings: Vector store settings

    Returns:
        VectorIndex: InMemoryVectorIndex or S3VectorsIndex

    Raises:
        ValueError: If store_type is invalid
    """
    store_type = settings.store_type.lower()

    if store_type == "memory":
        logger.info(f"{__name__}:get_vector_index - Creating in-memory index (local dev mode)")
        return InMemoryVectorIndex(dimension=settings.embedding_dimension)

    if store_type == "s3":
        logger.info(f"{__name__}:get_vector_index - Creating S3 Vectors index (production mode)")
        return S3VectorsIndex(
            vectors_bucket=settings.vectors_bucket,
            index_name=settings.index_name,
            region=settings.aws_region,
        )

    raise ValueError(
        f"Invalid VECTOR_STORE_STORE_TYPE: {store_type}. "
        f"Must be 'memory' (dev) or 's3' (production)."
    )


def build_index_gateway(
    settings: VectorStoreSettings,
    index: VectorIndex | None = None,
) -> VectorIndexGateway:
    """Gateway over the configured (or given) index."""
    return VectorIndexGateway(
        index=index or get_vector_index(settings),
        batch_size=settings.batch_size,
        max_attempts=settings.upsert_max_attempts,
        min_similarity=settings.min_similarity,
        backoff_initial=settings.upsert_backoff_initial,
        backoff_max=settings.upsert_backoff_max,
    )
