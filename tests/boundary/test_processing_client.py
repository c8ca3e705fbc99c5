"""
Test suite for ProcessingClient.

Uses httpx.MockTransport so requests never leave the process.

System role: Verification of the external processing backend boundary
"""

import httpx
import pytest

from study_rag.boundary.processing.processing_client import ProcessingClient
from study_rag.core.exceptions import ProcessingBackendError


@pytest.fixture
def upload(tmp_path):
    path = tmp_path / "edital.pdf"
    path.write_bytes(b"%PDF-1.4 conteudo")
    return str(path)


def _client(handler, base_url: str = "http://processing.test", api_key: str | None = "secret") -> ProcessingClient:
    return ProcessingClient(base_url, api_key=api_key, transport=httpx.MockTransport(handler))


async def _submit(client: ProcessingClient, upload: str):
    return await client.process_document(upload, "edital.pdf", "TRF 2024", "u1", "d1")


class TestProcessDocument:
    """Test suite for ProcessingClient.process_document."""

    @pytest.mark.asyncio
    async def test_process_document_should_post_multipart_form(self, upload) -> None:
        # Arrange
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(202, json={"job_id": "job-1", "status": "processing"})

        client = _client(handler)

        # Act
        response = await _submit(client, upload)
        await client.aclose()

        # Assert
        assert response.job_id == "job-1"
        assert response.status == "processing"
        request = seen[0]
        assert request.method == "POST"
        assert request.url.path == "/process-document"
        assert request.headers["X-API-Key"] == "secret"
        assert b'name="concursoNome"' in request.content
        assert b"TRF 2024" in request.content
        assert b"%PDF-1.4 conteudo" in request.content

    @pytest.mark.asyncio
    async def test_process_document_should_accept_camel_case_job_id(self, upload) -> None:
        client = _client(lambda request: httpx.Response(200, json={"jobId": 42}))

        response = await _submit(client, upload)

        assert response.job_id == "42"

    @pytest.mark.asyncio
    async def test_process_document_should_reject_response_without_job_id(self, upload) -> None:
        client = _client(lambda request: httpx.Response(200, json={"status": "ok"}))

        with pytest.raises(ProcessingBackendError, match="no job id"):
            await _submit(client, upload)

    @pytest.mark.asyncio
    async def test_process_document_should_wrap_error_status(self, upload) -> None:
        client = _client(lambda request: httpx.Response(503, text="indisponível"))

        with pytest.raises(ProcessingBackendError) as exc_info:
            await _submit(client, upload)

        assert exc_info.value.status_code == 503

    @pytest.mark.asyncio
    async def test_process_document_should_wrap_timeout(self, upload) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        with pytest.raises(ProcessingBackendError, match="timed out"):
            await _submit(_client(handler), upload)

    @pytest.mark.asyncio
    async def test_process_document_should_reject_non_json_body(self, upload) -> None:
        client = _client(lambda request: httpx.Response(200, text="<html>ok</html>"))

        with pytest.raises(ProcessingBackendError, match="non-JSON"):
            await _submit(client, upload)

    @pytest.mark.asyncio
    async def test_process_document_should_fail_when_not_configured(self, upload) -> None:
        client = _client(lambda request: httpx.Response(200, json={"job_id": "x"}), base_url="")

        assert client.is_configured is False
        with pytest.raises(ProcessingBackendError, match="not configured"):
            await _submit(client, upload)


class TestStatusAndHealth:
    """Test suite for get_status and health."""

    @pytest.mark.asyncio
    async def test_get_status_should_parse_progress(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.path == "/status/job-1"
            return httpx.Response(200, json={"status": "indexing", "progress": 55.0})

        status = await _client(handler).get_status("job-1")

        assert status.job_id == "job-1"
        assert status.status == "indexing"
        assert status.progress == 55

    @pytest.mark.asyncio
    async def test_health_should_report_backend_state(self) -> None:
        healthy = _client(lambda request: httpx.Response(200, json={"status": "ok"}))
        unhealthy = _client(lambda request: httpx.Response(500, json={}))
        unconfigured = _client(lambda request: httpx.Response(200, json={}), base_url="")

        assert await healthy.health() is True
        assert await unhealthy.health() is False
        assert await unconfigured.health() is False
