# coaching_api/services/announcement_service.py
from typing import List, Optional

from coaching_api.core.errors import NotFoundError, ValidationError
from coaching_api.core.logging import logger
from coaching_api.core.permissions import authorize_batch_reader, ensure_teacher_owns_batch
from coaching_api.models import Announcement, Batch
from coaching_api.schemas.auth import CallerContext
from coaching_api.services.base_service import BaseService


class AnnouncementService(BaseService):

    @staticmethod
    def _find(batch: Batch, announcement_id: int) -> Announcement:
        announcement = next((a for a in batch.announcements if a.id == announcement_id), None)
        if not announcement:
            raise NotFoundError("Announcement not found")
        return announcement

    async def create(self, caller: CallerContext, batch_id: int, title: str, content: str) -> Announcement:
        batch = await self._get_batch(batch_id)
        ensure_teacher_owns_batch(caller, batch)
        if not title.strip() or not content.strip():
            raise ValidationError("Title and content are required")

        async with self.transaction():
            announcement = Announcement(
                title=title.strip(),
                content=content.strip(),
                teacher_id=caller.identity
            )
            batch.announcements.append(announcement)
            self._touch(batch)

        logger.info(f"Announcement {announcement.id} posted", extra={"batch_id": batch.id})
        return announcement

    async def update(
        self,
        caller: CallerContext,
        batch_id: int,
        announcement_id: int,
        title: Optional[str] = None,
        content: Optional[str] = None
    ) -> Announcement:
        batch = await self._get_batch(batch_id)
        ensure_teacher_owns_batch(caller, batch)
        announcement = self._find(batch, announcement_id)

        async with self.transaction():
            if title is not None:
                announcement.title = title.strip()
            if content is not None:
                announcement.content = content.strip()
            self._touch(batch)
        return announcement

    async def delete(self, caller: CallerContext, batch_id: int, announcement_id: int) -> None:
        batch = await self._get_batch(batch_id)
        ensure_teacher_owns_batch(caller, batch)
        announcement = self._find(batch, announcement_id)

        async with self.transaction():
            batch.announcements.remove(announcement)
            self._touch(batch)

    async def list(self, caller: CallerContext, batch_id: int, student_id: Optional[int] = None) -> List[Announcement]:
        """Most recent first"""
        batch = await self._get_batch(batch_id)
        await authorize_batch_reader(self.db, caller, batch, student_id)
        return sorted(batch.announcements, key=lambda a: a.id, reverse=True)
