"""
Exception hierarchy for the study RAG core.

Provides layered exception structure for domain-specific errors.
All exceptions include context for observability and debugging.

Gateways raise these typed errors; the processing orchestrator and the
structured extractor convert them into fallbacks or recorded statuses so
callers above the core never see raw provider exceptions.

Dependencies: None (pure domain layer)
System role: Centralized exception handling across the application
"""

from typing import Any


class StudyRagException(Exception):
    """Base exception for all study RAG errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class ValidationError(StudyRagException):
    """Raised when input validation fails (file type, size, empty query)."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize validation error.

        Args:
            message: Error message
            field: Field name that failed validation
            details: Additional context
        """
        details = details or {}
        if field:
            details["field"] = field
        super().__init__(message, details)


class DocumentNotFoundError(StudyRagException):
    """Raised when a document record cannot be found."""

    def __init__(self, document_id: str, details: dict[str, Any] | None = None) -> None:
        details = details or {}
        details["document_id"] = document_id
        super().__init__(f"Document not found: {document_id}", details)


class JobNotFoundError(StudyRagException):
    """Raised when a processing job record cannot be found."""

    def __init__(self, job_id: str, details: dict[str, Any] | None = None) -> None:
        details = details or {}
        details["job_id"] = job_id
        super().__init__(f"Job not found: {job_id}", details)


class InvalidTransitionError(StudyRagException):
    """Raised when a status change would move a document or job backwards."""

    def __init__(
        self,
        current: str,
        target: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize transition error.

        Args:
            current: Status the entity is in
            target: Status that was requested
            details: Additional context
        """
        details = details or {}
        details.update({"current": current, "target": target})
        super().__init__(f"Invalid status transition: {current} -> {target}", details)


class DocumentProcessingError(StudyRagException):
    """Base exception for document processing errors."""

    def __init__(
        self,
        message: str,
        document_id: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if document_id:
            details["document_id"] = document_id
        super().__init__(message, details)


class ParsingError(DocumentProcessingError):
    """Raised when local text extraction fails."""

    def __init__(
        self,
        message: str,
        document_id: str | None = None,
        file_type: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if file_type:
            details["file_type"] = file_type
        super().__init__(message, document_id, details)


class EmbeddingError(DocumentProcessingError):
    """Raised when the embedding provider fails or returns vectors of the wrong size."""


class VectorStoreError(StudyRagException):
    """Raised when an index upsert, query or delete fails after retries."""

    def __init__(
        self,
        message: str,
        operation: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if operation:
            details["operation"] = operation
        super().__init__(message, details)


class RetrievalError(StudyRagException):
    """Raised when retrieval operations fail."""

    def __init__(
        self,
        message: str,
        query: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if query:
            details["query_preview"] = query[:80]
        super().__init__(message, details)


class GenerationError(StudyRagException):
    """Raised when a generative model call fails."""

    QUOTA = "quota"
    AUTH = "auth"
    BAD_REQUEST = "bad_request"
    UNAVAILABLE = "unavailable"

    def __init__(
        self,
        message: str,
        kind: str = UNAVAILABLE,
        model: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize generation error.

        Args:
            message: Error message
            kind: One of quota, auth, bad_request, unavailable
            model: Model identifier that was called
            details: Additional context
        """
        details = details or {}
        details["kind"] = kind
        if model:
            details["model"] = model
        self.kind = kind
        super().__init__(message, details)


class ProcessingBackendError(StudyRagException):
    """Raised when the external processing service fails or times out."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if status_code is not None:
            details["status_code"] = status_code
        self.status_code = status_code
        super().__init__(message, details)
