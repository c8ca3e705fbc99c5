"""
External processing backend client.

The processing service receives the uploaded file, indexes it on its side
and answers with a job id. Endpoints:
  1. POST /process-document   multipart: file, fileName, concursoNome, userId, documentId
  2. GET  /status/{jobId}     job progress
  3. GET  /health             liveness

An empty base URL disables the backend; callers check is_configured and go
straight to local processing.

Dependencies: httpx, pydantic
System role: Outbound HTTP boundary for document processing
"""

import asyncio
import logging
from pathlib import Path
from typing import Any

import httpx
from pydantic import BaseModel, Field

from study_rag.configs.processing import ProcessingSettings
from study_rag.core.exceptions import ProcessingBackendError

logger = logging.getLogger(__name__)


class ExternalProcessingResponse(BaseModel):
    """Accepted processing request."""

    job_id: str
    status: str = "processing"
    message: str = ""
    raw: dict[str, Any] = Field(default_factory=dict)


class ExternalJobStatus(BaseModel):
    """Status of a job on the processing backend."""

    job_id: str
    status: str
    progress: int | None = None
    raw: dict[str, Any] = Field(default_factory=dict)


def _job_id(payload: dict[str, Any]) -> str | None:
    value = payload.get("job_id") or payload.get("jobId")
    return str(value) if value else None


class ProcessingClient:
    """Async client for the external processing service."""

    def __init__(
        self,
        base_url: str,
        api_key: str | None = None,
        timeout_seconds: float = 60.0,
        connect_timeout_seconds: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Initialize client.

        Args:
            base_url: Service root URL; empty disables the backend
            api_key: Optional value sent as X-API-Key
            timeout_seconds: Overall request timeout
            connect_timeout_seconds: Connection timeout
            transport: Custom transport (tests use httpx.MockTransport)
        """
        self.base_url = base_url.rstrip("/")
        headers = {"Accept": "application/json"}
        if api_key:
            headers["X-API-Key"] = api_key

        self._client = httpx.AsyncClient(
            base_url=self.base_url or "http://processing.invalid",
            timeout=httpx.Timeout(timeout_seconds, connect=connect_timeout_seconds),
            headers=headers,
            transport=transport,
        )

    @classmethod
    def from_settings(cls, settings: ProcessingSettings) -> "ProcessingClient":
        return cls(
            base_url=settings.service_url,
            api_key=settings.api_key,
            timeout_seconds=settings.timeout_seconds,
            connect_timeout_seconds=settings.connect_timeout_seconds,
        )

    @property
    def is_configured(self) -> bool:
        """Whether a backend URL was provided."""
        return bool(self.base_url)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(self, method: str, url: str, **kwargs: Any) -> dict[str, Any]:
        if not self.is_configured:
            raise ProcessingBackendError("Processing backend is not configured")

        try:
            response = await self._client.request(method, url, **kwargs)
            response.raise_for_status()
        except httpx.TimeoutException as e:
            raise ProcessingBackendError(
                f"Processing backend timed out on {method} {url}",
                details={"error": type(e).__name__},
            ) from e
        except httpx.HTTPStatusError as e:
            raise ProcessingBackendError(
                f"Processing backend returned {e.response.status_code} on {method} {url}",
                status_code=e.response.status_code,
                details={"body": e.response.text[:200]},
            ) from e
        except httpx.HTTPError as e:
            raise ProcessingBackendError(
                f"Processing backend unreachable: {type(e).__name__}: {e}",
            ) from e

        try:
            payload = response.json()
        except ValueError as e:
            raise ProcessingBackendError(
                "Processing backend returned a non-JSON body",
                status_code=response.status_code,
            ) from e
        if not isinstance(payload, dict):
            raise ProcessingBackendError(
                "Processing backend returned an unexpected body",
                status_code=response.status_code,
            )
        return payload

    async def process_document(
        self,
        file_path: str,
        file_name: str,
        concurso_nome: str,
        user_id: str,
        document_id: str,
    ) -> ExternalProcessingResponse:
        """
        Submit a document for external processing.

        Args:
            file_path: Local path of the uploaded file
            file_name: Original file name
            concurso_nome: Document title (exam name for notices)
            user_id: Owner id
            document_id: Globally unique document id

        Returns:
            ExternalProcessingResponse: Accepted job

        Raises:
            ProcessingBackendError: Timeout, transport failure, error status
                or a response without a job id
        """
        content = await asyncio.to_thread(Path(file_path).read_bytes)
        logger.info(
            f"{__name__}:process_document - Submitting {file_name} ({len(content)} bytes)",
            extra={"document_id": document_id},
        )

        payload = await self._request(
            "POST",
            "/process-document",
            files={"file": (file_name, content)},
            data={
                "fileName": file_name,
                "concursoNome": concurso_nome,
                "userId": user_id,
                "documentId": document_id,
            },
        )

        job_id = _job_id(payload)
        if not job_id:
            raise ProcessingBackendError(
                "Processing backend response has no job id",
                details={"keys": sorted(payload)},
            )

        logger.info(f"{__name__}:process_document - Accepted as job {job_id}")
        return ExternalProcessingResponse(
            job_id=job_id,
            status=str(payload.get("status", "processing")),
            message=str(payload.get("message", "")),
            raw=payload,
        )

    async def get_status(self, job_id: str) -> ExternalJobStatus:
        """Fetch a job's status from the backend."""
        payload = await self._request("GET", f"/status/{job_id}")
        progress = payload.get("progress")
        return ExternalJobStatus(
            job_id=_job_id(payload) or job_id,
            status=str(payload.get("status", "unknown")),
            progress=int(progress) if isinstance(progress, (int, float)) else None,
            raw=payload,
        )

    async def health(self) -> bool:
        """True when the backend answers its health check."""
        if not self.is_configured:
            return False
        try:
            await self._request("GET", "/health")
        except ProcessingBackendError as e:
            logger.warning(f"{__name__}:health - Backend unhealthy: {e}")
            return False
        return True
