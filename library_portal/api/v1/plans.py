"""
Endpoints de planos de associação.

Contratos:
    - GET /plans: Lista planos
    - POST /plans: Cria plano (admin)
    - PUT /plans/{id}: Atualiza plano (admin)
    - DELETE /plans/{id}: Remove plano sem membros (admin)
"""

from uuid import UUID

from fastapi import APIRouter, status

from library_portal.core.deps import AdminPrincipal, CurrentPrincipal, DbSession
from library_portal.schemas.membership import PlanCreate, PlanRead, PlanUpdate
from library_portal.services.membership import MembershipPlanService

router = APIRouter(prefix="/plans", tags=["Membership Plans"])


@router.get("", response_model=list[PlanRead], summary="Listar planos")
async def list_plans(db: DbSession, principal: CurrentPrincipal) -> list[PlanRead]:
    plans = await MembershipPlanService(db).list_plans()
    return [PlanRead.model_validate(p) for p in plans]


@router.post(
    "",
    response_model=PlanRead,
    status_code=status.HTTP_201_CREATED,
    summary="Criar plano",
)
async def create_plan(data: PlanCreate, db: DbSession, admin: AdminPrincipal) -> PlanRead:
    plan = await MembershipPlanService(db).create(data)
    return PlanRead.model_validate(plan)


@router.put("/{plan_id}", response_model=PlanRead, summary="Atualizar plano")
async def update_plan(
    plan_id: UUID,
    data: PlanUpdate,
    db: DbSession,
    admin: AdminPrincipal,
) -> PlanRead:
    plan = await MembershipPlanService(db).update(plan_id, data)
    return PlanRead.model_validate(plan)


@router.delete(
    "/{plan_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Remover plano",
)
async def delete_plan(plan_id: UUID, db: DbSession, admin: AdminPrincipal) -> None:
    await MembershipPlanService(db).delete(plan_id)
