"""
Processing job models.

One job is created per processing attempt. Job status only moves forward
(pending -> processing -> completed | failed); a terminal job is never
resurrected.

Dependencies: pydantic
System role: Job state machine and record contract
"""

import enum
from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field


class JobStatus(str, enum.Enum):
    """
    Job execution states.

    PENDING: Created, not started
    PROCESSING: Ingestion or analysis running
    COMPLETED: Finished; result holds the outcome
    FAILED: Finished with an error
    """

    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (JobStatus.COMPLETED, JobStatus.FAILED)

    def can_transition_to(self, target: "JobStatus") -> bool:
        """Forward-only transitions; staying in a non-terminal state is allowed."""
        if self.is_terminal:
            return False
        return JOB_ORDER[target] >= JOB_ORDER[self]


JOB_ORDER: dict[JobStatus, int] = {
    JobStatus.PENDING: 0,
    JobStatus.PROCESSING: 1,
    JobStatus.COMPLETED: 2,
    JobStatus.FAILED: 2,
}


class JobRecord(BaseModel):
    """Stored state of one processing job."""

    id: str
    document_id: str
    status: JobStatus = JobStatus.PENDING
    progress: int = Field(default=0, ge=0, le=100)
    result: dict[str, Any] = Field(default_factory=dict)
    error: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
