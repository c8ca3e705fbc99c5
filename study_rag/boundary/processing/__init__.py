"""External document processing backend client."""

from study_rag.boundary.processing.processing_client import (
    ExternalJobStatus,
    ExternalProcessingResponse,
    ProcessingClient,
)

__all__ = ["ExternalJobStatus", "ExternalProcessingResponse", "ProcessingClient"]
