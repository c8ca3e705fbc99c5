"""
Document CRUD operations.

Dependencies: sqlalchemy, study_rag.boundary.db.models.document_model
System role: Document persistence operations
"""

from typing import Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from study_rag.boundary.db.CRUD.base_crud import BaseCRUD
from study_rag.boundary.db.models.document_model import DocumentModel


class DocumentCRUD(BaseCRUD[DocumentModel]):
    """Document rows, listed per owner."""

    def __init__(self) -> None:
        super().__init__(DocumentModel)

    async def get_by_user_id(
        self,
        session: AsyncSession,
        user_id: str,
        include_inactive: bool = False,
    ) -> Sequence[DocumentModel]:
        """
        An owner's documents, newest first.

        Soft-removed documents (is_active False) are left out unless
        include_inactive is set.
        """
        criteria = [DocumentModel.user_id == user_id]
        if not include_inactive:
            criteria.append(DocumentModel.is_active.is_(True))
        return await self.list_where(session, *criteria, order_by=DocumentModel.created_at.desc())


document_crud = DocumentCRUD()
