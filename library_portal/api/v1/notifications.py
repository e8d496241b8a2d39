"""
Endpoints da caixa de notificações do chamador.

Contratos:
    - GET /notifications: Lista (filtro de não lidas) com contagem de não lidas
    - POST /notifications/{id}/read: Marca como lida
    - POST /notifications/read-all: Marca todas como lidas
    - DELETE /notifications/{id}: Remove

Só o dono altera ou remove uma notificação (404 caso contrário).
"""

from uuid import UUID

from fastapi import APIRouter, Query, status

from library_portal.core.deps import CurrentPrincipal, DbSession
from library_portal.schemas.notification import (
    MarkReadResponse,
    NotificationInbox,
    NotificationRead,
)
from library_portal.services.notification import NotificationService

router = APIRouter(prefix="/notifications", tags=["Notifications"])


@router.get("", response_model=NotificationInbox, summary="Minhas notificações")
async def list_notifications(
    db: DbSession,
    principal: CurrentPrincipal,
    unread_only: bool = Query(False, description="Apenas não lidas"),
) -> NotificationInbox:
    return await NotificationService(db).inbox(principal, unread_only)


@router.post("/read-all", response_model=MarkReadResponse, summary="Marcar todas como lidas")
async def mark_all_read(db: DbSession, principal: CurrentPrincipal) -> MarkReadResponse:
    return await NotificationService(db).mark_all_read(principal)


@router.post(
    "/{notification_id}/read",
    response_model=NotificationRead,
    summary="Marcar como lida",
)
async def mark_read(
    notification_id: UUID,
    db: DbSession,
    principal: CurrentPrincipal,
) -> NotificationRead:
    return await NotificationService(db).mark_read(principal, notification_id)


@router.delete(
    "/{notification_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Remover notificação",
)
async def delete_notification(
    notification_id: UUID,
    db: DbSession,
    principal: CurrentPrincipal,
) -> None:
    await NotificationService(db).delete(principal, notification_id)
