"""
Shared CRUD helpers for the document and job tables.

Records are addressed by string ids at the store boundary; `key` converts
them to UUID primary keys and maps malformed ids to None so callers treat
them as missing rows.

Dependencies: sqlalchemy
System role: Foundation for the model-specific CRUD classes
"""

import uuid
from typing import Any, Generic, Sequence, TypeVar

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from study_rag.boundary.db.base import Base

ModelT = TypeVar("ModelT", bound=Base)


class BaseCRUD(Generic[ModelT]):
    """Row operations on one mapped table. Callers own the transaction."""

    def __init__(self, model: type[ModelT]) -> None:
        self.model = model

    @staticmethod
    def key(value: str | uuid.UUID) -> uuid.UUID | None:
        """UUID primary key for an id string, None when malformed."""
        if isinstance(value, uuid.UUID):
            return value
        try:
            return uuid.UUID(str(value))
        except ValueError:
            return None

    async def create(self, session: AsyncSession, **values: Any) -> ModelT:
        """Insert a row and load its generated defaults (timestamps)."""
        row = self.model(**values)
        session.add(row)
        await session.flush()
        await session.refresh(row)
        return row

    async def get_by_id(self, session: AsyncSession, row_id: str | uuid.UUID) -> ModelT | None:
        key = self.key(row_id)
        if key is None:
            return None
        return await session.get(self.model, key)

    async def update_by_id(
        self,
        session: AsyncSession,
        row_id: str | uuid.UUID,
        **values: Any,
    ) -> ModelT | None:
        """
        Set column values on one row.

        Goes through the ORM instance so `onupdate` timestamps fire.

        Returns:
            The refreshed row, or None when the id matches nothing
        """
        row = await self.get_by_id(session, row_id)
        if row is None:
            return None
        for column, value in values.items():
            setattr(row, column, value)
        await session.flush()
        await session.refresh(row)
        return row

    async def list_where(self, session: AsyncSession, *criteria: Any, order_by: Any = None) -> Sequence[ModelT]:
        stmt = select(self.model).where(*criteria)
        if order_by is not None:
            stmt = stmt.order_by(order_by)
        result = await session.execute(stmt)
        return result.scalars().all()
