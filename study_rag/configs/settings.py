"""
Unified application settings.

Aggregates all configuration modules into a single Settings class.

Dependencies: All config modules
System role: Central configuration aggregator for the application
"""

from functools import lru_cache

from pydantic import Field

from study_rag.configs.base import BaseSettings
from study_rag.configs.database import DatabaseSettings
from study_rag.configs.extraction import ExtractionSettings
from study_rag.configs.generation import GenerationSettings
from study_rag.configs.processing import ProcessingSettings
from study_rag.configs.vector_store import VectorStoreSettings
from study_rag.core.document_processing.configs import DocumentPipelineSettings


class Settings(BaseSettings):
    """Unified application settings aggregating all config modules."""

    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    vector_store: VectorStoreSettings = Field(default_factory=VectorStoreSettings)
    generation: GenerationSettings = Field(default_factory=GenerationSettings)
    processing: ProcessingSettings = Field(default_factory=ProcessingSettings)
    extraction: ExtractionSettings = Field(default_factory=ExtractionSettings)
    pipeline: DocumentPipelineSettings = Field(default_factory=DocumentPipelineSettings)


@lru_cache
def get_settings() -> Settings:
    """
    Get application settings singleton.

    Environment variables are loaded once; call get_settings.cache_clear()
    to reload them.

    Returns:
        Settings: Application settings instance

    Usage:
        from study_rag.configs import get_settings
        settings = get_settings()
    """
    return Settings()
