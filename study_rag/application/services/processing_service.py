"""
Document processing orchestrator.

Runs an upload through the ingestion state machine:

  uploaded -> processing -> indexed   (external backend accepted the file)
                         -> chunked   (backend unavailable: local extraction)
           -> analyzing -> completed  (deferred analysis pass)
  failed is reachable from every non-terminal state.

The external backend is tried first; on timeout or any backend error the
file is extracted, chunked and (best effort) indexed locally. The analysis
pass is scheduled a couple of seconds later: model-based extraction for
indexed documents, text heuristics for locally chunked ones. Only the
reserved category (exam notices) gets structured extraction; other
documents are simply completed. The uploaded temp file is removed on every
exit path.

Dependencies: study_rag.boundary, study_rag.core
System role: Document ingestion orchestration
"""

import asyncio
import enum
import logging
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field

from study_rag.application.services.job_service import JobService
from study_rag.application.services.scheduler import TaskScheduler
from study_rag.boundary.db.document_store import DocumentStore
from study_rag.boundary.processing.processing_client import ProcessingClient
from study_rag.boundary.vdb.vector_index_gateway import VectorIndexGateway
from study_rag.configs.processing import ProcessingSettings
from study_rag.core.document_processing.entrypoint import IngestionPipeline
from study_rag.core.document_processing.tasks.parsing_task import TextExtractor, detect_file_type
from study_rag.core.exceptions import (
    DocumentNotFoundError,
    DocumentProcessingError,
    InvalidTransitionError,
    ProcessingBackendError,
    ValidationError,
    VectorStoreError,
)
from study_rag.core.extraction.structured_extractor import StructuredExtractor
from study_rag.models.document import DocumentRecord, DocumentStatus, StatusReport
from study_rag.models.retrieval import DocumentMetadata

logger = logging.getLogger(__name__)


class AnalysisMode(str, enum.Enum):
    """How the deferred analysis pass extracts structure."""

    MODEL = "model"
    HEURISTIC = "heuristic"


class UploadRequest(BaseModel):
    """An uploaded file waiting to be processed."""

    user_id: str = Field(min_length=1)
    file_path: str = Field(description="Temporary path of the uploaded file")
    file_name: str = Field(min_length=1, description="Original file name")
    file_size: int = Field(ge=0, description="Size in bytes")
    title: str = Field(min_length=1, description="Display title (exam name for notices)")
    category: str = "geral"


class ProcessingOutcome(BaseModel):
    """Result of the synchronous part of processing."""

    document_id: str
    job_id: str
    status: DocumentStatus
    path: str = Field(description="'external' or 'local'")
    message: str = ""
    chunk_count: int | None = None
    analysis_scheduled: bool = False


class DocumentProcessingService:
    """
    Document processing orchestrator.

    Owns the document state machine; every status change goes through
    _transition so invalid moves raise InvalidTransitionError.
    """

    def __init__(
        self,
        store: DocumentStore,
        processing_client: ProcessingClient,
        text_extractor: TextExtractor,
        ingestion_pipeline: IngestionPipeline,
        extractor: StructuredExtractor,
        job_service: JobService,
        index_gateway: VectorIndexGateway,
        settings: ProcessingSettings,
        scheduler: TaskScheduler | None = None,
    ) -> None:
        """
        Initialize processing service.

        Args:
            store: Document persistence
            processing_client: External processing backend
            text_extractor: Local text extraction (fallback path)
            ingestion_pipeline: Local chunk/embed/index pipeline
            extractor: Structured extraction for the reserved category
            job_service: Job tracking
            index_gateway: Vector deletion on removal
            settings: Limits, delays and the reserved category
            scheduler: Deferred task scheduler (created if None)
        """
        self._store = store
        self._client = processing_client
        self._text_extractor = text_extractor
        self._pipeline = ingestion_pipeline
        self._extractor = extractor
        self._jobs = job_service
        self._index = index_gateway
        self._settings = settings
        self.scheduler = scheduler or TaskScheduler()

    # ── Validation ───────────────────────────────────────

    def validate(self, request: UploadRequest) -> str:
        """
        Check file type and size.

        Returns:
            str: Detected file type

        Raises:
            ValidationError: Unsupported type, empty file or file too large
        """
        file_type = detect_file_type(request.file_name)
        if file_type is None or file_type not in self._settings.supported_extensions:
            raise ValidationError(
                f"Tipo de arquivo não suportado: {request.file_name}",
                field="file_name",
                details={"supported": list(self._settings.supported_extensions)},
            )
        if request.file_size <= 0:
            raise ValidationError("Arquivo vazio", field="file_size")
        if request.file_size > self._settings.max_file_size_bytes:
            raise ValidationError(
                f"Arquivo excede o limite de {self._settings.max_file_size_mb} MB",
                field="file_size",
                details={"file_size": request.file_size},
            )
        return file_type

    # ── Processing ───────────────────────────────────────

    async def process_document(self, request: UploadRequest) -> ProcessingOutcome:
        """
        Process an uploaded file.

        Steps:
        1. Validate type and size (before any network call)
        2. Create the document record and a job
        3. Submit to the external backend -> INDEXED, schedule model analysis
        4. On backend failure: local extraction and chunking -> CHUNKED,
           schedule heuristic analysis
        5. If local extraction fails too -> FAILED
        6. Any other error after the record exists -> FAILED with a message

        Args:
            request: Uploaded file and its metadata

        Returns:
            ProcessingOutcome: Document id, job id and resulting status

        Raises:
            ValidationError: Unsupported type or size
            DocumentProcessingError: When not even the FAILED status can be recorded
        """
        try:
            file_type = self.validate(request)

            document_id = str(uuid.uuid4())
            await self._store.create(
                DocumentRecord(
                    id=document_id,
                    user_id=request.user_id,
                    title=request.title,
                    category=request.category,
                    file_name=request.file_name,
                    file_type=file_type,
                    file_size=request.file_size,
                )
            )
            job_id = None
            try:
                job = await self._jobs.create_job(document_id)
                job_id = job.id
                return await self._ingest(request, document_id, job_id, file_type)
            except Exception as e:
                return await self._record_unexpected_failure(document_id, job_id, e)
        finally:
            self._remove_temp_file(request.file_path)

    async def _ingest(
        self,
        request: UploadRequest,
        document_id: str,
        job_id: str,
        file_type: str,
    ) -> ProcessingOutcome:
        logger.info(
            f"{__name__}:process_document - Step 1: Created document",
            extra={"document_id": document_id, "file_type": file_type},
        )
        await self._transition(document_id, DocumentStatus.PROCESSING)
        await self._jobs.start(job_id, progress=DocumentStatus.PROCESSING.progress)

        backend_error = await self._try_external(request, document_id)
        if backend_error is None:
            await self._jobs.complete(job_id, {"path": "external"})
            self._schedule_analysis(document_id, AnalysisMode.MODEL)
            return ProcessingOutcome(
                document_id=document_id,
                job_id=job_id,
                status=DocumentStatus.INDEXED,
                path="external",
                message=DocumentStatus.INDEXED.message,
                analysis_scheduled=True,
            )

        return await self._process_locally(request, document_id, job_id, backend_error)

    async def _record_unexpected_failure(
        self,
        document_id: str,
        job_id: str | None,
        error: Exception,
    ) -> ProcessingOutcome:
        """Move the document (and its job) to FAILED after an error no path handled."""
        message = f"Falha inesperada no processamento do documento: {type(error).__name__}: {error}"
        logger.exception(
            f"{__name__}:process_document - Unexpected failure",
            extra={"document_id": document_id},
        )
        try:
            document = await self._get(document_id)
            if document.status.can_transition_to(DocumentStatus.FAILED):
                await self._store.update(
                    document_id, status=DocumentStatus.FAILED, error_message=message
                )
            if job_id is not None:
                job = await self._jobs.get_job(job_id)
                if not job.status.is_terminal:
                    await self._jobs.fail(job_id, message)
        except Exception as record_error:
            raise DocumentProcessingError(
                "Could not record processing failure",
                document_id=document_id,
                details={"cause": str(error), "record_error": str(record_error)},
            ) from error

        return ProcessingOutcome(
            document_id=document_id,
            job_id=job_id or "",
            status=DocumentStatus.FAILED,
            path="unknown",
            message=message,
        )

    async def _try_external(self, request: UploadRequest, document_id: str) -> str | None:
        """Submit to the backend; returns None on success, the failure reason otherwise."""
        if not self._client.is_configured:
            logger.info(f"{__name__}:_try_external - Backend not configured, using local path")
            return "backend not configured"

        try:
            response = await self._client.process_document(
                file_path=request.file_path,
                file_name=request.file_name,
                concurso_nome=request.title,
                user_id=request.user_id,
                document_id=document_id,
            )
        except ProcessingBackendError as e:
            logger.warning(
                f"{__name__}:_try_external - Backend failed, falling back to local path: {e}",
                extra={"document_id": document_id},
            )
            return e.message
        except Exception as e:
            logger.warning(
                f"{__name__}:_try_external - Submission failed, falling back to local path: "
                f"{type(e).__name__}: {e}",
                extra={"document_id": document_id},
            )
            return f"{type(e).__name__}: {e}"

        await self._transition(
            document_id,
            DocumentStatus.INDEXED,
            external_job_id=response.job_id,
        )
        logger.info(
            f"{__name__}:_try_external - Step 2: Indexed by backend job {response.job_id}",
            extra={"document_id": document_id},
        )
        return None

    async def _process_locally(
        self,
        request: UploadRequest,
        document_id: str,
        job_id: str,
        backend_error: str,
    ) -> ProcessingOutcome:
        try:
            extracted = await asyncio.to_thread(
                self._text_extractor.extract, request.file_path, request.file_name
            )
            chunk_count = await self._chunk_locally(extracted.text, request, document_id)
        except DocumentProcessingError as e:
            message = (
                f"Não foi possível processar o documento. "
                f"Serviço externo: {backend_error}. Extração local: {e.message}"
            )
            logger.error(
                f"{__name__}:_process_locally - Both paths failed: {e}",
                extra={"document_id": document_id},
            )
            await self._transition(document_id, DocumentStatus.FAILED, error_message=message)
            await self._jobs.fail(job_id, message)
            return ProcessingOutcome(
                document_id=document_id,
                job_id=job_id,
                status=DocumentStatus.FAILED,
                path="local",
                message=message,
            )

        await self._transition(document_id, DocumentStatus.CHUNKED, raw_text=extracted.text)
        await self._jobs.complete(
            job_id,
            {"path": "local", "chunk_count": chunk_count, "backend_error": backend_error},
        )
        self._schedule_analysis(document_id, AnalysisMode.HEURISTIC)
        logger.info(
            f"{__name__}:_process_locally - Step 2: Chunked locally ({chunk_count} chunks)",
            extra={"document_id": document_id},
        )
        return ProcessingOutcome(
            document_id=document_id,
            job_id=job_id,
            status=DocumentStatus.CHUNKED,
            path="local",
            message=DocumentStatus.CHUNKED.message,
            chunk_count=chunk_count,
            analysis_scheduled=True,
        )

    async def _chunk_locally(self, text: str, request: UploadRequest, document_id: str) -> int:
        """Chunk (and, when enabled, index) extracted text; indexing is best effort."""
        if self._settings.index_locally_on_fallback:
            metadata = DocumentMetadata(
                user_id=request.user_id,
                document_id=document_id,
                title=request.title,
                category=request.category,
            )
            try:
                result = await self._pipeline.index_text(text, metadata)
                return result.chunk_count
            except (VectorStoreError, DocumentProcessingError) as e:
                logger.warning(
                    f"{__name__}:_chunk_locally - Local indexing failed, keeping chunks only: {e}",
                    extra={"document_id": document_id},
                )
        return len(self._pipeline.chunk(text))

    # ── Analysis ─────────────────────────────────────────

    def _schedule_analysis(self, document_id: str, mode: AnalysisMode) -> None:
        self.scheduler.schedule(
            self._settings.analysis_delay_seconds,
            lambda: self.run_analysis(document_id, mode),
            name=f"analysis:{document_id}",
        )

    async def run_analysis(self, document_id: str, mode: AnalysisMode) -> DocumentRecord:
        """
        Deferred analysis pass.

        Always ends with the document COMPLETED (structured payload
        overwritten for the reserved category) or FAILED (error recorded).

        Args:
            document_id: Document to analyze
            mode: MODEL for indexed documents, HEURISTIC for raw text

        Returns:
            DocumentRecord: Final record

        Raises:
            DocumentNotFoundError: If the document does not exist
        """
        document = await self._get(document_id)

        if document.category != self._settings.reserved_category:
            logger.info(
                f"{__name__}:run_analysis - Category '{document.category}' needs no extraction",
                extra={"document_id": document_id},
            )
            if document.status == DocumentStatus.COMPLETED:
                return document
            return await self._transition(
                document_id,
                DocumentStatus.COMPLETED,
                processed_at=datetime.now(timezone.utc),
                error_message=None,
            )

        job = await self._jobs.create_job(document_id)
        await self._transition(document_id, DocumentStatus.ANALYZING)
        await self._jobs.start(job.id, progress=DocumentStatus.ANALYZING.progress)
        logger.info(
            f"{__name__}:run_analysis - Step 1: Analyzing ({mode.value})",
            extra={"document_id": document_id},
        )

        try:
            if mode == AnalysisMode.MODEL:
                result = await self._extractor.analyze(document.user_id, document_id)
            else:
                result = self._extractor.analyze_text(document.raw_text or "")
        except Exception as e:
            message = f"Falha na análise do documento: {e}"
            logger.exception(
                f"{__name__}:run_analysis - Analysis failed",
                extra={"document_id": document_id},
            )
            await self._jobs.fail(job.id, message)
            return await self._transition(document_id, DocumentStatus.FAILED, error_message=message)

        payload = result.to_payload()
        await self._jobs.complete(job.id, {"flags": result.flags, "roles": len(result.roles)})
        logger.info(
            f"{__name__}:run_analysis - Step 2: {len(result.roles)} roles, "
            f"{len(result.syllabus)} subjects",
            extra={"document_id": document_id, "flags": result.flags},
        )
        return await self._transition(
            document_id,
            DocumentStatus.COMPLETED,
            structured_payload=payload,
            processed_at=datetime.now(timezone.utc),
            error_message=None,
        )

    async def reanalyze(self, document_id: str) -> DocumentRecord:
        """
        Run the analysis pass again on a completed document.

        Documents indexed by the backend are analyzed with the model;
        locally chunked ones with the text heuristics.
        """
        document = await self._get(document_id)
        mode = AnalysisMode.MODEL if document.external_job_id else AnalysisMode.HEURISTIC
        return await self.run_analysis(document_id, mode)

    # ── Queries and removal ──────────────────────────────

    async def get_status(self, document_id: str) -> StatusReport:
        """
        User-facing status of a document.

        Raises:
            DocumentNotFoundError: If the document does not exist
        """
        document = await self._get(document_id)
        return StatusReport(
            document_id=document_id,
            status=document.status,
            progress=document.status.progress,
            message=document.status.message,
            error_message=document.error_message,
        )

    async def list_documents(self, user_id: str) -> list[DocumentRecord]:
        """Active documents of an owner, newest first."""
        return await self._store.list_by_owner(user_id)

    async def remove_document(self, document_id: str) -> int:
        """
        Soft-remove a document and delete its vectors.

        Returns:
            int: Number of vectors deleted

        Raises:
            DocumentNotFoundError: If the document does not exist
            VectorStoreError: If vector deletion fails (the record stays active)
        """
        document = await self._get(document_id)
        deleted = await self._index.delete_document(document.user_id, document_id)
        await self._store.update(document_id, is_active=False)
        logger.info(
            f"{__name__}:remove_document - Removed document and {deleted} vectors",
            extra={"document_id": document_id},
        )
        return deleted

    # ── Helpers ──────────────────────────────────────────

    async def _get(self, document_id: str) -> DocumentRecord:
        document = await self._store.get(document_id)
        if document is None:
            raise DocumentNotFoundError(document_id)
        return document

    async def _transition(
        self,
        document_id: str,
        target: DocumentStatus,
        **fields: Any,
    ) -> DocumentRecord:
        document = await self._get(document_id)
        if not document.status.can_transition_to(target):
            raise InvalidTransitionError(
                document.status.value,
                target.value,
                details={"document_id": document_id},
            )
        updated = await self._store.update(document_id, status=target, **fields)
        logger.info(
            f"{__name__}:_transition - {document.status.value} -> {target.value}",
            extra={"document_id": document_id},
        )
        return updated

    @staticmethod
    def _remove_temp_file(file_path: str) -> None:
        try:
            Path(file_path).unlink(missing_ok=True)
        except OSError as e:
            logger.warning(f"{__name__}:_remove_temp_file - Could not remove {file_path}: {e}")
