# coaching_api/services/base_service.py
from contextlib import asynccontextmanager
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from coaching_api.core.errors import NotFoundError
from coaching_api.models import Batch, User
from coaching_api.models.base import utcnow


class BaseService:
    def __init__(self, db: AsyncSession):
        self.db = db

    @asynccontextmanager
    async def transaction(self):
        """Commit on success, roll back and re-raise on any failure"""
        try:
            yield self.db
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

    async def _get_batch(self, batch_id: int) -> Batch:
        batch = await self.db.get(Batch, batch_id)
        if not batch:
            raise NotFoundError("Batch not found")
        return batch

    async def _get_user(self, user_id: int) -> Optional[User]:
        return await self.db.get(User, user_id)

    async def _get_user_by_email(self, email: str) -> Optional[User]:
        result = await self.db.execute(
            select(User).where(User.email == email.strip().lower())
        )
        return result.scalar_one_or_none()

    @staticmethod
    def _touch(batch: Batch) -> None:
        # Child-only changes still need to bump the batch version
        batch.updated_at = utcnow()
