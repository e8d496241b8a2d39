"""
Schemas Pydantic para notificações e varreduras.
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel

from library_portal.models.enums import NotificationType
from library_portal.schemas.base import BaseSchema, SuccessResponse

DUE_SOON_WINDOW_DAYS = 2
LOW_STOCK_THRESHOLD = 3


class NotificationRead(BaseSchema):
    """Notificação da caixa de entrada."""
    id: UUID
    type: NotificationType
    title: str
    message: str
    read: bool
    related_id: UUID | None = None
    created_at: datetime


class NotificationInbox(BaseModel):
    """Caixa de entrada com contagem de não lidas."""
    items: list[NotificationRead]
    unread_count: int


class MarkReadResponse(SuccessResponse):
    """Quantidade de notificações marcadas como lidas."""
    updated: int


class SweepResult(SuccessResponse):
    """
    Resultado da varredura check-overdue.

    Os contadores são de registros encontrados; notifications_created
    desconta as que já existiam no mesmo dia (dedup).
    """
    overdue_count: int = 0
    upcoming_count: int = 0
    low_stock_count: int = 0
    notifications_created: int = 0
