"""
Vector store configuration settings.

Embedding model, index dimension, write batching and read thresholds for the
vector index gateway. The dimension is global: every writer and reader of an
index must agree on it.

Dependencies: pydantic, pydantic_settings
System role: Vector database configuration for RAG retrieval
"""

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from study_rag.configs.base import BaseSettings


class VectorStoreSettings(BaseSettings):
    """Vector index configuration (in-memory for dev, S3 Vectors for prod)."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="VECTOR_STORE_",
        case_sensitive=False,
        extra="ignore",
    )

    store_type: str = Field(
        default="memory",
        description="Vector index type: 'memory' for local dev, 's3' for production",
    )
    aws_region: str = Field(default="us-east-1", description="AWS region for S3 Vectors")
    vectors_bucket: str = Field(
        default="study-rag-dev-vectors",
        description="S3 Vectors bucket name",
    )
    index_name: str = Field(default="documents", description="S3 Vectors index name")

    embedding_model: str = Field(
        default="models/text-embedding-004",
        description="Google Gemini embedding model ID",
    )
    embedding_dimension: int = Field(
        default=768,
        description="Embedding vector dimension shared by all index writers and readers",
    )

    batch_size: int = Field(default=100, description="Vectors per upsert request", ge=1)
    upsert_max_attempts: int = Field(
        default=3,
        description="Attempts per upsert batch before the whole upsert fails",
        ge=1,
    )
    upsert_backoff_initial: float = Field(
        default=1.0,
        description="Initial backoff in seconds between upsert attempts",
    )
    upsert_backoff_max: float = Field(
        default=10.0,
        description="Backoff ceiling in seconds between upsert attempts",
    )

    top_k: int = Field(default=5, description="Number of top results to retrieve")
    min_similarity: float = Field(
        default=0.1,
        description="Candidates below this cosine similarity are excluded by the gateway",
        ge=-1.0,
        le=1.0,
    )
