"""
Test suite for JobService.

System role: Verification of forward-only job transitions
"""

import pytest

from study_rag.application.services.job_service import JobService
from study_rag.core.exceptions import InvalidTransitionError, JobNotFoundError
from study_rag.models.job import JobStatus


@pytest.fixture
def job_service(job_store) -> JobService:
    return JobService(job_store)


class TestJobService:
    """Test suite for JobService."""

    @pytest.mark.asyncio
    async def test_create_job_should_start_pending(self, job_service) -> None:
        job = await job_service.create_job("doc-1")

        assert job.status == JobStatus.PENDING
        assert job.progress == 0
        assert job.document_id == "doc-1"

    @pytest.mark.asyncio
    async def test_complete_should_record_result_and_full_progress(self, job_service) -> None:
        # Arrange
        job = await job_service.create_job("doc-1")
        await job_service.start(job.id, progress=30)

        # Act
        completed = await job_service.complete(job.id, {"path": "local"})

        # Assert
        assert completed.status == JobStatus.COMPLETED
        assert completed.progress == 100
        assert completed.result == {"path": "local"}

    @pytest.mark.asyncio
    async def test_transition_should_clamp_progress(self, job_service) -> None:
        job = await job_service.create_job("doc-1")

        updated = await job_service.transition(job.id, JobStatus.PROCESSING, progress=250)

        assert updated.progress == 100

    @pytest.mark.asyncio
    async def test_fail_should_record_error(self, job_service) -> None:
        job = await job_service.create_job("doc-1")

        failed = await job_service.fail(job.id, "backend fora do ar")

        assert failed.status == JobStatus.FAILED
        assert failed.error == "backend fora do ar"

    @pytest.mark.asyncio
    async def test_transition_should_not_resurrect_terminal_job(self, job_service) -> None:
        # Arrange
        job = await job_service.create_job("doc-1")
        await job_service.fail(job.id, "erro")

        # Act / Assert
        with pytest.raises(InvalidTransitionError):
            await job_service.start(job.id)
        with pytest.raises(InvalidTransitionError):
            await job_service.complete(job.id)

    @pytest.mark.asyncio
    async def test_transition_should_reject_backwards_move(self, job_service) -> None:
        job = await job_service.create_job("doc-1")
        await job_service.start(job.id)

        with pytest.raises(InvalidTransitionError):
            await job_service.transition(job.id, JobStatus.PENDING)

    @pytest.mark.asyncio
    async def test_get_job_should_raise_for_unknown_id(self, job_service) -> None:
        with pytest.raises(JobNotFoundError):
            await job_service.get_job("missing")
