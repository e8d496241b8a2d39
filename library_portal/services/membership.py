"""
Service para planos de associação e membros.
"""

import logging
from datetime import date, timedelta
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from library_portal.core.exceptions import InvalidInputError, NotFoundOrConflict
from library_portal.db.unit_of_work import unit_of_work
from library_portal.models.enums import AppRole
from library_portal.models.membership import MembershipPlan
from library_portal.models.profile import Profile
from library_portal.repositories.borrow import BorrowRecordRepository
from library_portal.repositories.membership import MembershipPlanRepository
from library_portal.repositories.profile import ProfileRepository
from library_portal.schemas.base import PaginatedResponse
from library_portal.schemas.membership import (
    MemberDetail,
    MembershipPeriod,
    PlanCreate,
    PlanRead,
    PlanUpdate,
)
from library_portal.schemas.auth import ProfileRead

logger = logging.getLogger(__name__)


def membership_period(plan: MembershipPlan, start: date) -> MembershipPeriod:
    """Vigência de um plano iniciado em `start`."""
    return MembershipPeriod(start=start, expiry=start + timedelta(days=plan.duration_days))


class MembershipPlanService:
    """Service para operações de MembershipPlan."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.repo = MembershipPlanRepository(db)
        self.profile_repo = ProfileRepository(db)

    async def get_plan(self, plan_id: UUID) -> MembershipPlan:
        plan = await self.repo.get_by_id(plan_id)
        if not plan:
            raise NotFoundOrConflict("Plano não encontrado")
        return plan

    async def list_plans(self) -> list[MembershipPlan]:
        return await self.repo.list_all()

    async def create(self, data: PlanCreate) -> MembershipPlan:
        """
        Cria plano.

        Raises:
            InvalidInputError: Nome já existe
        """
        if await self.repo.get_by_name(data.name):
            raise InvalidInputError("Já existe um plano com este nome")

        async with unit_of_work(self.db):
            plan = await self.repo.create(**data.model_dump())

        await self.db.refresh(plan)
        logger.info(f"Plano criado: {plan.name}")
        return plan

    async def update(self, plan_id: UUID, data: PlanUpdate) -> MembershipPlan:
        plan = await self.get_plan(plan_id)

        if data.name and data.name != plan.name and await self.repo.get_by_name(data.name):
            raise InvalidInputError("Já existe um plano com este nome")

        async with unit_of_work(self.db):
            await self.repo.update(plan, **data.model_dump(exclude_unset=True))

        await self.db.refresh(plan)
        return plan

    async def delete(self, plan_id: UUID) -> None:
        """
        Remove plano sem membros associados.

        Raises:
            NotFoundOrConflict: Plano não encontrado
            InvalidInputError: Há membros no plano
        """
        plan = await self.get_plan(plan_id)

        members = await self.profile_repo.count_by_plan(plan_id)
        if members:
            raise InvalidInputError(
                f"Não é possível remover plano com {members} membro(s) associado(s)"
            )

        async with unit_of_work(self.db):
            await self.repo.delete(plan)


class MemberService:
    """Service para consulta e administração de membros."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.profile_repo = ProfileRepository(db)
        self.plan_repo = MembershipPlanRepository(db)
        self.borrow_repo = BorrowRecordRepository(db)

    async def get_member(self, member_id: UUID) -> Profile:
        member = await self.profile_repo.get_by_id(member_id)
        if not member:
            raise NotFoundOrConflict("Membro não encontrado")
        return member

    async def list_members(
        self,
        search: str | None = None,
        page: int = 1,
        page_size: int = 20,
    ) -> PaginatedResponse[ProfileRead]:
        members, total = await self.profile_repo.search(search, page, page_size)
        return PaginatedResponse.create(
            items=[ProfileRead.model_validate(m) for m in members],
            total=total,
            page=page,
            page_size=page_size,
        )

    async def get_member_detail(self, member_id: UUID) -> MemberDetail:
        member = await self.get_member(member_id)
        active = await self.borrow_repo.count_issued_by_member(member_id)
        return MemberDetail(
            **ProfileRead.model_validate(member).model_dump(),
            membership_plan=(
                PlanRead.model_validate(member.membership_plan)
                if member.membership_plan else None
            ),
            active_borrows=active,
        )

    async def assign_plan(self, member_id: UUID, plan_id: UUID) -> MemberDetail:
        """
        Associa o membro a um plano a partir de hoje.

        Raises:
            NotFoundOrConflict: Membro ou plano não encontrado
        """
        member = await self.get_member(member_id)
        plan = await self.plan_repo.get_by_id(plan_id)
        if not plan:
            raise NotFoundOrConflict("Plano não encontrado")

        period = membership_period(plan, date.today())
        async with unit_of_work(self.db):
            member.membership_plan_id = plan.id
            member.membership_plan = plan
            member.membership_start_date = period.start
            member.membership_expiry_date = period.expiry

        await self.db.refresh(member)
        logger.info(f"Membro {member.id} associado ao plano {plan.name} até {period.expiry}")
        return await self.get_member_detail(member_id)

    async def set_roles(self, member_id: UUID, roles: list[AppRole]) -> Profile:
        """Substitui os papéis do profile."""
        member = await self.get_member(member_id)
        async with unit_of_work(self.db):
            await self.profile_repo.replace_roles(member, set(roles))

        await self.db.refresh(member)
        logger.info(f"Papéis de {member.id} alterados para {sorted(r.value for r in roles)}")
        return member
