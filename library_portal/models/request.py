"""
Models de solicitações do membro: ExtensionRequest e RenewalRequest.

As duas seguem o mesmo protocolo (pendente -> aprovada/rejeitada) e
compartilham as colunas de decisão via BorrowRequestMixin.
"""

import uuid
from datetime import datetime
from typing import TYPE_CHECKING, ClassVar, Optional

from sqlalchemy import DateTime, ForeignKey, Index, Integer, Text, text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from library_portal.db.session import Base
from library_portal.models.base import UUIDMixin, TimestampMixin, pg_enum
from library_portal.models.enums import RequestKind, RequestStatus

if TYPE_CHECKING:
    from library_portal.models.borrow import BorrowRecord
    from library_portal.models.profile import Profile


class BorrowRequestMixin:
    """
    Colunas comuns às solicitações.

    Attributes:
        borrow_record_id: Empréstimo alvo
        member_id: Membro que fez a solicitação
        status: PENDING, APPROVED ou REJECTED
        librarian_id: Quem decidiu
        librarian_reason: Motivo informado na decisão
        processed_at: Momento da decisão
    """
    kind: ClassVar[RequestKind]

    borrow_record_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("borrow_records.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    member_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("profiles.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    status: Mapped[RequestStatus] = mapped_column(
        pg_enum(RequestStatus, "request_status"),
        nullable=False,
        default=RequestStatus.PENDING,
        index=True,
    )
    librarian_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("profiles.id", ondelete="SET NULL"),
        nullable=True,
    )
    librarian_reason: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    processed_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    @property
    def is_pending(self) -> bool:
        return self.status == RequestStatus.PENDING


class ExtensionRequest(Base, UUIDMixin, TimestampMixin, BorrowRequestMixin):
    """Pedido para estender a due_date em `requested_days` (1 a 30)."""
    __tablename__ = "extension_requests"
    kind = RequestKind.EXTENSION

    requested_days: Mapped[int] = mapped_column(Integer, nullable=False)
    reason: Mapped[str] = mapped_column(Text, nullable=False)

    borrow_record: Mapped["BorrowRecord"] = relationship("BorrowRecord", lazy="selectin")
    member: Mapped["Profile"] = relationship(
        "Profile",
        foreign_keys="ExtensionRequest.member_id",
        lazy="selectin",
    )

    __table_args__ = (
        # No máximo uma solicitação pendente por empréstimo
        Index(
            "uq_extension_requests_pending",
            "borrow_record_id",
            unique=True,
            postgresql_where=text("status = 'pending'"),
        ),
    )

    def __repr__(self) -> str:
        return f"<ExtensionRequest {self.id} - {self.status.value}>"


class RenewalRequest(Base, UUIDMixin, TimestampMixin, BorrowRequestMixin):
    """Pedido de renovação (+14 dias, consome uma renovação)."""
    __tablename__ = "renewal_requests"
    kind = RequestKind.RENEWAL

    reason: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    borrow_record: Mapped["BorrowRecord"] = relationship("BorrowRecord", lazy="selectin")
    member: Mapped["Profile"] = relationship(
        "Profile",
        foreign_keys="RenewalRequest.member_id",
        lazy="selectin",
    )

    __table_args__ = (
        Index(
            "uq_renewal_requests_pending",
            "borrow_record_id",
            unique=True,
            postgresql_where=text("status = 'pending'"),
        ),
    )

    def __repr__(self) -> str:
        return f"<RenewalRequest {self.id} - {self.status.value}>"
