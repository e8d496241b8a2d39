"""
Model de notificação (caixa de entrada por usuário).
"""

import uuid
from typing import Optional

from sqlalchemy import Boolean, ForeignKey, Index, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from library_portal.db.session import Base
from library_portal.models.base import UUIDMixin, TimestampMixin, pg_enum
from library_portal.models.enums import NotificationType


class Notification(Base, UUIDMixin, TimestampMixin):
    """
    Notificação destinada a um usuário.

    Só é alterada pelo dono (marcar como lida ou remover).

    Attributes:
        type: Tag do evento (overdue, due_reminder, low_stock, ...)
        related_id: Empréstimo, solicitação ou livro relacionado
        dedup_key: Chave única das notificações geradas pelas varreduras
            ("{type}:{user_id}:{related_id}:{YYYY-MM-DD}"); nula nas demais
    """
    __tablename__ = "notifications"

    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("profiles.id", ondelete="CASCADE"),
        nullable=False,
    )
    type: Mapped[NotificationType] = mapped_column(
        pg_enum(NotificationType, "notification_type"),
        nullable=False,
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    read: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    related_id: Mapped[Optional[uuid.UUID]] = mapped_column(UUID(as_uuid=True), nullable=True)
    dedup_key: Mapped[Optional[str]] = mapped_column(String(255), nullable=True, unique=True)

    __table_args__ = (
        Index("ix_notifications_user_read", "user_id", "read"),
    )

    def __repr__(self) -> str:
        return f"<Notification {self.type.value} -> {self.user_id}>"
