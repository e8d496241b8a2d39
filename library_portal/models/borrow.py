"""
Model de empréstimo (borrow record).
"""

import uuid
from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Optional

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Index, Integer, Numeric
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from library_portal.core.timeutils import as_utc, utcnow
from library_portal.db.session import Base
from library_portal.models.base import UUIDMixin, TimestampMixin, pg_enum
from library_portal.models.enums import BorrowStatus

if TYPE_CHECKING:
    from library_portal.models.book import Book
    from library_portal.models.profile import Profile


class BorrowRecord(Base, UUIDMixin, TimestampMixin):
    """
    Empréstimo de um livro para um membro.

    Criado na emissão, alterado em renovação/extensão/devolução e nunca
    removido. A due_date só avança; fine_amount é fixado na devolução.

    Attributes:
        book_id: Livro emprestado
        member_id: Membro que está com o livro
        issued_by: Membro da equipe que registrou o empréstimo
        issue_date / due_date / return_date: Datas do ciclo de vida
        status: ISSUED ou RETURNED
        fine_amount: Multa final calculada na devolução
        renewal_count / max_renewals: Controle de renovações
    """
    __tablename__ = "borrow_records"

    book_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("books.id", ondelete="RESTRICT"),
        nullable=False,
    )
    member_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("profiles.id", ondelete="RESTRICT"),
        nullable=False,
    )
    issued_by: Mapped[Optional[uuid.UUID]] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("profiles.id", ondelete="SET NULL"),
        nullable=True,
    )
    issue_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )
    due_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    return_date: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )
    status: Mapped[BorrowStatus] = mapped_column(
        pg_enum(BorrowStatus, "borrow_status"),
        nullable=False,
        default=BorrowStatus.ISSUED,
    )
    fine_amount: Mapped[Decimal] = mapped_column(
        Numeric(10, 2),
        nullable=False,
        default=Decimal("0.00"),
    )
    renewal_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    max_renewals: Mapped[int] = mapped_column(Integer, nullable=False, default=2)

    # Relationships
    book: Mapped["Book"] = relationship(
        "Book",
        back_populates="borrow_records",
        lazy="selectin",
    )
    member: Mapped["Profile"] = relationship(
        "Profile",
        back_populates="borrow_records",
        foreign_keys=[member_id],
        lazy="selectin",
    )

    __table_args__ = (
        CheckConstraint("renewal_count <= max_renewals", name="ck_borrow_records_renewals"),
        CheckConstraint("fine_amount >= 0", name="ck_borrow_records_fine_non_negative"),
        Index("ix_borrow_records_member_status", "member_id", "status"),
        Index("ix_borrow_records_book_id", "book_id"),
        Index("ix_borrow_records_status_due_date", "status", "due_date"),
    )

    def __repr__(self) -> str:
        return f"<BorrowRecord {self.id} - {self.status.value}>"

    def is_overdue(self, now: datetime | None = None) -> bool:
        """True se ainda está emitido e a due_date já passou."""
        if self.status != BorrowStatus.ISSUED:
            return False
        return (now or utcnow()) > as_utc(self.due_date)

    def display_status(self, now: datetime | None = None) -> BorrowStatus:
        """Status para exibição: OVERDUE é derivado, nunca gravado."""
        return BorrowStatus.OVERDUE if self.is_overdue(now) else self.status

    @property
    def renewals_remaining(self) -> int:
        return max(0, self.max_renewals - self.renewal_count)
