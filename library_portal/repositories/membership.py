"""
Repository para MembershipPlan.
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from library_portal.models.membership import MembershipPlan
from library_portal.repositories.base import BaseRepository


class MembershipPlanRepository(BaseRepository[MembershipPlan]):
    """Repository para operações CRUD de MembershipPlan."""

    def __init__(self, db: AsyncSession):
        super().__init__(MembershipPlan, db)

    async def get_by_name(self, name: str) -> MembershipPlan | None:
        result = await self.db.execute(
            select(MembershipPlan).where(MembershipPlan.name == name)
        )
        return result.scalar_one_or_none()

    async def list_all(self) -> list[MembershipPlan]:
        """Lista planos ordenados pela anuidade."""
        result = await self.db.execute(
            select(MembershipPlan).order_by(MembershipPlan.annual_fee, MembershipPlan.name)
        )
        return list(result.scalars().all())
