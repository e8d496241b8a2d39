"""
Repository para Profile e papéis (user_roles).
"""

from uuid import UUID

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from library_portal.models.enums import AppRole
from library_portal.models.profile import Profile, UserRoleAssignment
from library_portal.repositories.base import BaseRepository


class ProfileRepository(BaseRepository[Profile]):
    """Repository para operações de Profile."""

    def __init__(self, db: AsyncSession):
        super().__init__(Profile, db)

    async def get_by_email(self, email: str) -> Profile | None:
        """Busca profile por email (case-insensitive)."""
        result = await self.db.execute(
            select(Profile).where(func.lower(Profile.email) == email.lower())
        )
        return result.scalar_one_or_none()

    async def email_exists(self, email: str) -> bool:
        """Verifica se email já está cadastrado."""
        return await self.get_by_email(email) is not None

    async def search(
        self,
        query_text: str | None = None,
        page: int = 1,
        page_size: int = 20,
    ) -> tuple[list[Profile], int]:
        """
        Lista profiles com busca por nome ou email.

        Returns:
            Tupla (lista de profiles, total)
        """
        query = select(Profile)
        if query_text:
            pattern = f"%{query_text}%"
            query = query.where(
                or_(Profile.full_name.ilike(pattern), Profile.email.ilike(pattern))
            )
        return await self._paginate(query, Profile.full_name, page, page_size)

    async def list_by_role(self, role: AppRole) -> list[Profile]:
        """Lista profiles que possuem o papel informado."""
        result = await self.db.execute(
            select(Profile)
            .join(UserRoleAssignment, UserRoleAssignment.user_id == Profile.id)
            .where(UserRoleAssignment.role == role)
        )
        return list(result.scalars().unique().all())

    async def count_by_role(self, role: AppRole) -> int:
        """Conta profiles com o papel informado."""
        result = await self.db.execute(
            select(func.count(UserRoleAssignment.id))
            .where(UserRoleAssignment.role == role)
        )
        return result.scalar_one()

    async def count_by_plan(self, plan_id: UUID) -> int:
        """Conta profiles associados a um plano."""
        return await self.count(Profile.membership_plan_id == plan_id)

    async def add_role(self, profile: Profile, role: AppRole) -> UserRoleAssignment:
        """Atribui um papel ao profile (sem commit)."""
        assignment = UserRoleAssignment(user_id=profile.id, role=role)
        profile.role_assignments.append(assignment)
        await self.db.flush()
        return assignment

    async def replace_roles(self, profile: Profile, roles: set[AppRole]) -> None:
        """Substitui o conjunto de papéis do profile (sem commit)."""
        kept = [a for a in profile.role_assignments if a.role in roles]
        existing = {a.role for a in kept}
        for role in sorted(roles - existing, key=lambda r: r.value):
            kept.append(UserRoleAssignment(user_id=profile.id, role=role))
        # delete-orphan remove as atribuições que saíram da lista
        profile.role_assignments = kept
        await self.db.flush()
