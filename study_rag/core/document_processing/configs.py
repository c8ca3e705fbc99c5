"""
Configuration settings for document processing pipeline.

Chunk sizing and embedding input limits for the local ingestion path.

Dependencies: pydantic, pydantic_settings
System role: Centralized pipeline configuration
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class DocumentPipelineSettings(BaseSettings):
    """Settings for document ingestion pipeline."""

    model_config = SettingsConfigDict(
        env_prefix="DOC_PIPELINE_",
        case_sensitive=False,
        extra="ignore",
    )

    max_chunk_size: int = Field(
        default=1000,
        description="Maximum chunk size in characters (single long sentences may exceed it)",
        ge=1,
    )
    max_embedding_chars: int = Field(
        default=8000,
        description="Embedding inputs are truncated to this many characters",
        ge=1,
    )
