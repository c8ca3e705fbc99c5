"""
Processing configuration settings.

External processing backend location, upload limits, scheduling delay for
the deferred analysis pass and the reserved category that triggers
structured extraction.

Dependencies: pydantic, pydantic_settings
System role: Ingestion orchestration configuration
"""

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from study_rag.configs.base import BaseSettings


class ProcessingSettings(BaseSettings):
    """Document ingestion and external backend configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="PROCESSING_",
        case_sensitive=False,
        extra="ignore",
    )

    service_url: str = Field(
        default="",
        description="Base URL of the external processing service (empty disables it)",
    )
    api_key: str | None = Field(default=None, description="Value sent as X-API-Key")
    timeout_seconds: float = Field(
        default=60.0,
        description="Upload/processing timeout for the external service",
        gt=0,
    )
    connect_timeout_seconds: float = Field(
        default=10.0,
        description="Connection timeout for the external service",
        gt=0,
    )

    max_file_size_mb: int = Field(default=50, description="Largest accepted upload", ge=1)
    supported_extensions: list[str] = Field(
        default=["pdf", "docx", "doc", "xlsx", "xls", "csv", "json", "txt"],
        description="Accepted file extensions (without dot)",
    )

    analysis_delay_seconds: float = Field(
        default=2.0,
        description="Delay before the deferred analysis pass starts",
        ge=0,
    )
    reserved_category: str = Field(
        default="edital",
        description="Category that drives the structured extraction path",
    )
    index_locally_on_fallback: bool = Field(
        default=True,
        description="Embed and index locally extracted text when the backend fails",
    )

    @property
    def max_file_size_bytes(self) -> int:
        """Upload limit in bytes."""
        return self.max_file_size_mb * 1024 * 1024
