"""
Colunas comuns e tipos compartilhados pelos models.

Ids são UUID gerados na aplicação; timestamps são preenchidos pelo banco.
"""

import uuid
from datetime import datetime

from sqlalchemy import DateTime, func
from sqlalchemy.dialects.postgresql import ENUM, UUID
from sqlalchemy.orm import Mapped, mapped_column


class UUIDMixin:
    """Primary key `id` (UUID v4)."""
    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )


class TimestampMixin:
    """`created_at` e `updated_at` em UTC, mantidos pelo PostgreSQL."""
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )


def pg_enum(enum_cls: type, name: str) -> ENUM:
    """ENUM do PostgreSQL que grava o `value` (minúsculo) de cada membro."""
    return ENUM(
        enum_cls,
        name=name,
        create_type=True,
        values_callable=lambda members: [m.value for m in members],
    )
