"""
Endpoints de solicitações de extensão e renovação.

Contratos:
    - POST /requests/extensions: Membro pede extensão de prazo (1 a 30 dias)
    - POST /requests/renewals: Membro pede renovação (+14 dias)
    - GET /requests/extensions: Lista extensões (equipe, padrão: pendentes)
    - GET /requests/renewals: Lista renovações (equipe, padrão: pendentes)
    - GET /requests/my: Solicitações do chamador
    - POST /requests/extensions/{id}/decision: Aprova/rejeita (equipe)
    - POST /requests/renewals/{id}/decision: Aprova/rejeita (equipe)

Rate limit de submissão: 30 req/min por usuário.
"""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from library_portal.core.deps import CurrentPrincipal, DbSession, StaffPrincipal
from library_portal.core.rate_limit import rate_limit_submission
from library_portal.models.enums import RequestKind, RequestStatus
from library_portal.schemas.request import (
    DecisionRequest,
    DecisionResponse,
    ExtensionSubmit,
    RenewalSubmit,
    RequestDetail,
    SubmitResponse,
)
from library_portal.services.request import RequestService

router = APIRouter(prefix="/requests", tags=["Requests"])


# ==========================================
# Membro
# ==========================================

@router.post(
    "/extensions",
    response_model=SubmitResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Solicitar extensão",
    dependencies=[Depends(rate_limit_submission)],
)
async def submit_extension(
    data: ExtensionSubmit,
    db: DbSession,
    principal: CurrentPrincipal,
) -> SubmitResponse:
    """
    Raises:
        400: Dias fora de 1 a 30, motivo vazio ou já há extensão pendente
        404: Empréstimo não é do chamador ou não está ativo
    """
    return await RequestService(db).submit_extension(principal, data)


@router.post(
    "/renewals",
    response_model=SubmitResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Solicitar renovação",
    dependencies=[Depends(rate_limit_submission)],
)
async def submit_renewal(
    data: RenewalSubmit,
    db: DbSession,
    principal: CurrentPrincipal,
) -> SubmitResponse:
    """
    Raises:
        400: Sem renovações, empréstimo atrasado ou já há renovação pendente
        404: Empréstimo não é do chamador ou não está ativo
    """
    return await RequestService(db).submit_renewal(principal, data)


@router.get(
    "/my",
    response_model=list[RequestDetail],
    summary="Minhas solicitações",
)
async def my_requests(db: DbSession, principal: CurrentPrincipal) -> list[RequestDetail]:
    return await RequestService(db).my_requests(principal)


# ==========================================
# Equipe
# ==========================================

@router.get(
    "/extensions",
    response_model=list[RequestDetail],
    summary="Listar pedidos de extensão",
)
async def list_extensions(
    db: DbSession,
    staff: StaffPrincipal,
    status_filter: RequestStatus | None = Query(
        RequestStatus.PENDING,
        alias="status",
        description="pending (padrão), approved ou rejected",
    ),
) -> list[RequestDetail]:
    return await RequestService(db).list_requests(RequestKind.EXTENSION, status_filter)


@router.get(
    "/renewals",
    response_model=list[RequestDetail],
    summary="Listar pedidos de renovação",
)
async def list_renewals(
    db: DbSession,
    staff: StaffPrincipal,
    status_filter: RequestStatus | None = Query(
        RequestStatus.PENDING,
        alias="status",
        description="pending (padrão), approved ou rejected",
    ),
) -> list[RequestDetail]:
    return await RequestService(db).list_requests(RequestKind.RENEWAL, status_filter)


@router.post(
    "/extensions/{request_id}/decision",
    response_model=DecisionResponse,
    summary="Decidir pedido de extensão",
)
async def decide_extension(
    request_id: UUID,
    data: DecisionRequest,
    db: DbSession,
    staff: StaffPrincipal,
) -> DecisionResponse:
    """
    Raises:
        404: Solicitação não encontrada ou já processada
    """
    return await RequestService(db).decide_extension(staff, request_id, data)


@router.post(
    "/renewals/{request_id}/decision",
    response_model=DecisionResponse,
    summary="Decidir pedido de renovação",
)
async def decide_renewal(
    request_id: UUID,
    data: DecisionRequest,
    db: DbSession,
    staff: StaffPrincipal,
) -> DecisionResponse:
    """
    Raises:
        400: Empréstimo sem renovações restantes
        404: Solicitação não encontrada ou já processada
    """
    return await RequestService(db).decide_renewal(staff, request_id, data)
