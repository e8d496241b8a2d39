"""
Repository para Notification.
"""

from uuid import UUID

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from library_portal.models.notification import Notification
from library_portal.repositories.base import BaseRepository


class NotificationRepository(BaseRepository[Notification]):
    """Repository para operações de Notification."""

    def __init__(self, db: AsyncSession):
        super().__init__(Notification, db)

    async def dedup_key_exists(self, dedup_key: str) -> bool:
        return await self.exists(Notification.dedup_key == dedup_key)

    async def get_for_user(self, notification_id: UUID, user_id: UUID) -> Notification | None:
        """Busca notificação somente se pertence ao usuário."""
        result = await self.db.execute(
            select(Notification).where(
                Notification.id == notification_id,
                Notification.user_id == user_id,
            )
        )
        return result.scalar_one_or_none()

    async def list_for_user(
        self,
        user_id: UUID,
        unread_only: bool = False,
        limit: int = 100,
    ) -> list[Notification]:
        query = select(Notification).where(Notification.user_id == user_id)
        if unread_only:
            query = query.where(Notification.read.is_(False))
        result = await self.db.execute(
            query.order_by(Notification.created_at.desc()).limit(limit)
        )
        return list(result.scalars().all())

    async def count_unread(self, user_id: UUID) -> int:
        result = await self.db.execute(
            select(func.count(Notification.id)).where(
                Notification.user_id == user_id,
                Notification.read.is_(False),
            )
        )
        return result.scalar_one()

    async def mark_all_read(self, user_id: UUID) -> int:
        """Marca todas as não lidas do usuário como lidas; retorna quantas."""
        result = await self.db.execute(
            update(Notification)
            .where(
                Notification.user_id == user_id,
                Notification.read.is_(False),
            )
            .values(read=True)
        )
        return result.rowcount or 0
