"""
Endpoints de membros (equipe).

Contratos:
    - GET /members: Lista membros com busca por nome/email
    - GET /members/{id}: Detalhes com plano e empréstimos ativos
    - GET /members/{id}/history: Histórico de empréstimos
    - PUT /members/{id}/plan: Associa plano a partir de hoje
    - PUT /members/{id}/roles: Substitui papéis (admin)
"""

from uuid import UUID

from fastapi import APIRouter, Query

from library_portal.core.deps import AdminPrincipal, DbSession, StaffPrincipal
from library_portal.schemas.auth import ProfileRead, RolesUpdate
from library_portal.schemas.base import PaginatedResponse
from library_portal.schemas.borrow import BorrowRecordDetail
from library_portal.schemas.membership import MemberDetail, PlanAssignment
from library_portal.services.borrow import BorrowService
from library_portal.services.membership import MemberService

router = APIRouter(prefix="/members", tags=["Members"])


@router.get("", response_model=PaginatedResponse[ProfileRead], summary="Listar membros")
async def list_members(
    db: DbSession,
    staff: StaffPrincipal,
    search: str | None = Query(None, description="Busca por nome ou email"),
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
) -> PaginatedResponse[ProfileRead]:
    return await MemberService(db).list_members(search, page, page_size)


@router.get("/{member_id}", response_model=MemberDetail, summary="Detalhes do membro")
async def get_member(member_id: UUID, db: DbSession, staff: StaffPrincipal) -> MemberDetail:
    return await MemberService(db).get_member_detail(member_id)


@router.get(
    "/{member_id}/history",
    response_model=list[BorrowRecordDetail],
    summary="Histórico de empréstimos do membro",
)
async def member_history(
    member_id: UUID,
    db: DbSession,
    staff: StaffPrincipal,
) -> list[BorrowRecordDetail]:
    await MemberService(db).get_member(member_id)
    return await BorrowService(db).member_history(member_id)


@router.put("/{member_id}/plan", response_model=MemberDetail, summary="Associar plano")
async def assign_plan(
    member_id: UUID,
    data: PlanAssignment,
    db: DbSession,
    staff: StaffPrincipal,
) -> MemberDetail:
    """Define início hoje e expiração em hoje + duration_days do plano."""
    return await MemberService(db).assign_plan(member_id, data.membership_plan_id)


@router.put("/{member_id}/roles", response_model=ProfileRead, summary="Alterar papéis")
async def set_roles(
    member_id: UUID,
    data: RolesUpdate,
    db: DbSession,
    admin: AdminPrincipal,
) -> ProfileRead:
    profile = await MemberService(db).set_roles(member_id, data.roles)
    return ProfileRead.model_validate(profile)
