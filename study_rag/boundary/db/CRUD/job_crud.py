"""
Job CRUD operations.

Every ingestion attempt and every analysis pass owns one job row.

Dependencies: sqlalchemy, study_rag.boundary.db.models.job_model
System role: Job persistence operations
"""

import uuid
from typing import Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from study_rag.boundary.db.CRUD.base_crud import BaseCRUD
from study_rag.boundary.db.models.job_model import JobModel


class JobCRUD(BaseCRUD[JobModel]):
    def __init__(self) -> None:
        super().__init__(JobModel)

    async def get_by_document_id(
        self,
        session: AsyncSession,
        document_id: str | uuid.UUID,
    ) -> Sequence[JobModel]:
        """Jobs of a document in creation order ([] for a malformed id)."""
        key = self.key(document_id)
        if key is None:
            return []
        return await self.list_where(session, JobModel.document_id == key, order_by=JobModel.created_at)


job_crud = JobCRUD()
