"""
Endpoints de empréstimos (BorrowRecord).

Contratos:
    - POST /borrows: Empresta livro a um membro (equipe)
    - GET /borrows: Lista empréstimos com filtros (equipe)
    - GET /borrows/my: Empréstimos do chamador
    - GET /borrows/{id}: Detalhes (membro só vê os próprios)
    - POST /borrows/{id}/return: Registra devolução e multa (equipe)
    - POST /borrows/{id}/renew: Renovação direta pelo membro

Status codes:
    - 200: Sucesso
    - 201: Criado com sucesso
    - 400: Regra de negócio (sem estoque, limite, renovação)
    - 401: Não autenticado
    - 403: Sem permissão
    - 404: Empréstimo não encontrado ou em outro estado
"""

from uuid import UUID

from fastapi import APIRouter, Query, status

from library_portal.core.deps import CurrentPrincipal, DbSession, StaffPrincipal
from library_portal.models.enums import BorrowStatus
from library_portal.schemas.base import PaginatedResponse
from library_portal.schemas.borrow import (
    DEFAULT_LENDING_DAYS,
    BorrowRecordDetail,
    IssueRequest,
    RenewResponse,
    ReturnResponse,
)
from library_portal.services.borrow import BorrowService

router = APIRouter(prefix="/borrows", tags=["Borrows"])


@router.post(
    "",
    response_model=BorrowRecordDetail,
    status_code=status.HTTP_201_CREATED,
    summary="Emprestar livro",
    description=f"Empresta um livro a um membro. Prazo padrão: {DEFAULT_LENDING_DAYS} dias.",
)
async def issue_book(
    data: IssueRequest,
    db: DbSession,
    staff: StaffPrincipal,
) -> BorrowRecordDetail:
    """
    Raises:
        400: Sem exemplares disponíveis ou membro no limite do plano
        404: Livro ou membro não encontrado
    """
    return await BorrowService(db).issue_book(staff, data)


@router.get(
    "",
    response_model=PaginatedResponse[BorrowRecordDetail],
    summary="Listar empréstimos",
)
async def list_borrows(
    db: DbSession,
    staff: StaffPrincipal,
    member_id: UUID | None = Query(None, description="Filtrar por membro"),
    book_id: UUID | None = Query(None, description="Filtrar por livro"),
    status_filter: BorrowStatus | None = Query(
        None,
        alias="status",
        description="Filtro: issued, returned, overdue",
    ),
    page: int = Query(1, ge=1, description="Número da página"),
    page_size: int = Query(20, ge=1, le=100, description="Itens por página"),
) -> PaginatedResponse[BorrowRecordDetail]:
    return await BorrowService(db).list_records(
        member_id=member_id,
        book_id=book_id,
        status=status_filter,
        page=page,
        page_size=page_size,
    )


@router.get(
    "/my",
    response_model=list[BorrowRecordDetail],
    summary="Meus empréstimos",
)
async def my_borrows(db: DbSession, principal: CurrentPrincipal) -> list[BorrowRecordDetail]:
    return await BorrowService(db).my_records(principal)


@router.get(
    "/{record_id}",
    response_model=BorrowRecordDetail,
    summary="Detalhes do empréstimo",
)
async def get_borrow(
    record_id: UUID,
    db: DbSession,
    principal: CurrentPrincipal,
) -> BorrowRecordDetail:
    return await BorrowService(db).get_record_detail(principal, record_id)


@router.post(
    "/{record_id}/return",
    response_model=ReturnResponse,
    summary="Devolver livro",
    description="Multa = dias inteiros de atraso × multa diária do plano do membro.",
)
async def return_book(
    record_id: UUID,
    db: DbSession,
    staff: StaffPrincipal,
) -> ReturnResponse:
    return await BorrowService(db).return_book(record_id)


@router.post(
    "/{record_id}/renew",
    response_model=RenewResponse,
    summary="Renovar empréstimo",
    description="Renovação direta pelo membro: +14 dias, se não estiver atrasado e houver renovações.",
)
async def renew_book(
    record_id: UUID,
    db: DbSession,
    principal: CurrentPrincipal,
) -> RenewResponse:
    """
    Raises:
        400: Limite de renovações atingido ou empréstimo atrasado
        404: Empréstimo não encontrado para este membro
    """
    return await BorrowService(db).renew(principal, record_id)
