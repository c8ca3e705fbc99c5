"""
Job service orchestrator.

Creates one job per processing attempt and moves it forward through
pending -> processing -> completed | failed. Terminal jobs are never
resurrected.

Dependencies: study_rag.boundary.db, study_rag.models.job
System role: Job management orchestration
"""

import logging
import uuid
from typing import Any

from study_rag.boundary.db.document_store import JobStore
from study_rag.core.exceptions import InvalidTransitionError, JobNotFoundError
from study_rag.models.job import JobRecord, JobStatus

logger = logging.getLogger(__name__)


class JobService:
    """
    Job service orchestrator.

    Enforces forward-only job transitions on top of a JobStore.
    """

    def __init__(self, store: JobStore) -> None:
        """
        Initialize job service.

        Args:
            store: Job persistence
        """
        self._store = store

    async def create_job(self, document_id: str) -> JobRecord:
        """
        Create a pending job for a document.

        Args:
            document_id: Document the job processes

        Returns:
            JobRecord: Created job
        """
        job = await self._store.create(
            JobRecord(id=str(uuid.uuid4()), document_id=document_id)
        )
        logger.info(
            f"{__name__}:create_job - Created job {job.id}",
            extra={"document_id": document_id},
        )
        return job

    async def get_job(self, job_id: str) -> JobRecord:
        """
        Fetch a job.

        Raises:
            JobNotFoundError: If the job does not exist
        """
        job = await self._store.get(job_id)
        if job is None:
            raise JobNotFoundError(job_id)
        return job

    async def transition(
        self,
        job_id: str,
        target: JobStatus,
        progress: int | None = None,
        result: dict[str, Any] | None = None,
        error: str | None = None,
    ) -> JobRecord:
        """
        Move a job to a new status.

        Args:
            job_id: Job id
            target: Requested status
            progress: Progress percentage to record
            result: Outcome payload to record
            error: Error description to record

        Returns:
            JobRecord: Updated job

        Raises:
            JobNotFoundError: If the job does not exist
            InvalidTransitionError: If the job is terminal or target is backwards
        """
        job = await self.get_job(job_id)
        if not job.status.can_transition_to(target):
            raise InvalidTransitionError(job.status.value, target.value, details={"job_id": job_id})

        fields: dict[str, Any] = {"status": target}
        if progress is not None:
            fields["progress"] = max(0, min(100, progress))
        if result is not None:
            fields["result"] = result
        if error is not None:
            fields["error"] = error

        updated = await self._store.update(job_id, **fields)
        logger.info(f"{__name__}:transition - Job {job_id}: {job.status.value} -> {target.value}")
        return updated

    async def start(self, job_id: str, progress: int = 0) -> JobRecord:
        """Mark job as processing."""
        return await self.transition(job_id, JobStatus.PROCESSING, progress=progress)

    async def complete(self, job_id: str, result: dict[str, Any] | None = None) -> JobRecord:
        """Mark job as completed."""
        return await self.transition(job_id, JobStatus.COMPLETED, progress=100, result=result or {})

    async def fail(self, job_id: str, error: str) -> JobRecord:
        """Mark job as failed with an error description."""
        return await self.transition(job_id, JobStatus.FAILED, error=error)
