"""
Document lifecycle models.

DocumentStatus is the ingestion state machine:
uploaded -> processing -> indexed | chunked -> analyzing -> completed,
with failed reachable from every non-terminal state. A completed document
may be re-analyzed (completed -> analyzing); failed is final.

DocumentRecord is the storage-agnostic view of one uploaded document.

Dependencies: pydantic
System role: Document state machine and record contract
"""

import enum
from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field


class DocumentStatus(str, enum.Enum):
    """
    Document processing lifecycle states.

    UPLOADED: File accepted, record created
    PROCESSING: Sent to the external backend (or local extraction running)
    INDEXED: External backend indexed the document
    CHUNKED: Local fallback extracted and chunked the text
    ANALYZING: Deferred analysis pass running
    COMPLETED: Analysis done, structured payload stored when applicable
    FAILED: Processing error; error_message holds details
    """

    UPLOADED = "uploaded"
    PROCESSING = "processing"
    INDEXED = "indexed"
    CHUNKED = "chunked"
    ANALYZING = "analyzing"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (DocumentStatus.COMPLETED, DocumentStatus.FAILED)

    @property
    def progress(self) -> int:
        """Progress percentage shown to the user."""
        return STATUS_PROGRESS[self]

    @property
    def message(self) -> str:
        """Plain-language description of the state."""
        return STATUS_MESSAGES[self]

    def can_transition_to(self, target: "DocumentStatus") -> bool:
        """Whether moving from this state to target is allowed."""
        return target in ALLOWED_TRANSITIONS[self]


ALLOWED_TRANSITIONS: dict[DocumentStatus, frozenset[DocumentStatus]] = {
    DocumentStatus.UPLOADED: frozenset({DocumentStatus.PROCESSING, DocumentStatus.FAILED}),
    DocumentStatus.PROCESSING: frozenset({
        DocumentStatus.INDEXED,
        DocumentStatus.CHUNKED,
        DocumentStatus.FAILED,
    }),
    DocumentStatus.INDEXED: frozenset({
        DocumentStatus.ANALYZING,
        DocumentStatus.COMPLETED,
        DocumentStatus.FAILED,
    }),
    DocumentStatus.CHUNKED: frozenset({
        DocumentStatus.ANALYZING,
        DocumentStatus.COMPLETED,
        DocumentStatus.FAILED,
    }),
    DocumentStatus.ANALYZING: frozenset({DocumentStatus.COMPLETED, DocumentStatus.FAILED}),
    DocumentStatus.COMPLETED: frozenset({DocumentStatus.ANALYZING}),
    DocumentStatus.FAILED: frozenset(),
}

STATUS_PROGRESS: dict[DocumentStatus, int] = {
    DocumentStatus.UPLOADED: 10,
    DocumentStatus.PROCESSING: 30,
    DocumentStatus.INDEXED: 60,
    DocumentStatus.CHUNKED: 60,
    DocumentStatus.ANALYZING: 80,
    DocumentStatus.COMPLETED: 100,
    DocumentStatus.FAILED: 0,
}

STATUS_MESSAGES: dict[DocumentStatus, str] = {
    DocumentStatus.UPLOADED: "Arquivo recebido, preparando para processar",
    DocumentStatus.PROCESSING: "Processando o documento",
    DocumentStatus.INDEXED: "Documento indexado, iniciando análise",
    DocumentStatus.CHUNKED: "Texto extraído localmente, iniciando análise",
    DocumentStatus.ANALYZING: "Analisando cargos e conteúdo programático",
    DocumentStatus.COMPLETED: "Processamento concluído",
    DocumentStatus.FAILED: "Erro no processamento, tente novamente",
}


class DocumentRecord(BaseModel):
    """Stored state of one uploaded document."""

    id: str = Field(description="Globally unique document id (uuid4)")
    user_id: str = Field(min_length=1)
    title: str
    category: str = "geral"
    file_name: str
    file_type: str
    file_size: int = Field(ge=0)
    status: DocumentStatus = DocumentStatus.UPLOADED
    raw_text: str | None = None
    structured_payload: dict[str, Any] | None = None
    external_job_id: str | None = None
    error_message: str | None = None
    is_active: bool = True
    processed_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class StatusReport(BaseModel):
    """User-facing processing status of a document."""

    document_id: str
    status: DocumentStatus
    progress: int = Field(ge=0, le=100)
    message: str
    error_message: str | None = None
