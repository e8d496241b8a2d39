"""
Schemas Pydantic para BorrowRecord (empréstimo) e constantes de política.
"""

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, Field

from library_portal.core.timeutils import utcnow, whole_days_between
from library_portal.models.enums import BorrowStatus
from library_portal.schemas.base import SuccessResponse

# Constantes de negócio
DEFAULT_LENDING_DAYS = 14
MAX_LENDING_DAYS = 60
RENEWAL_PERIOD_DAYS = 14
DEFAULT_MAX_RENEWALS = 2
DEFAULT_FINE_PER_DAY = Decimal("5.00")
DEFAULT_MAX_BOOKS = 3


def calculate_fine(
    due_date: datetime,
    fine_per_day: Decimal,
    returned_at: datetime,
) -> tuple[int, Decimal]:
    """
    Multa por atraso: dias inteiros (truncados) após a due_date × multa diária.

    Returns:
        Tupla (dias_em_atraso, multa). Ambos zero se devolvido no prazo.
    """
    days_overdue = max(0, whole_days_between(due_date, returned_at))
    fine = (Decimal(days_overdue) * Decimal(fine_per_day)).quantize(Decimal("0.01"))
    return days_overdue, fine


class IssueRequest(BaseModel):
    """Schema para emissão de empréstimo (equipe)."""

    book_id: UUID = Field(..., description="Livro a emprestar")
    member_id: UUID = Field(..., description="Membro que recebe o livro")
    lending_days: int = Field(
        DEFAULT_LENDING_DAYS,
        ge=1,
        le=MAX_LENDING_DAYS,
        description="Prazo do empréstimo em dias",
    )


class BorrowRecordDetail(BaseModel):
    """
    Empréstimo com dados do livro e do membro, montado por joins explícitos.

    Para empréstimos ainda emitidos, `current_fine` é uma prévia da multa
    caso a devolução ocorresse agora; a multa só é gravada na devolução.
    """

    id: UUID
    book_id: UUID
    book_title: str | None = None
    book_author: str | None = None
    member_id: UUID
    member_name: str | None = None
    member_email: str | None = None
    issued_by: UUID | None = None
    issue_date: datetime
    due_date: datetime
    return_date: datetime | None = None
    status: BorrowStatus
    display_status: BorrowStatus
    fine_amount: Decimal
    renewal_count: int
    max_renewals: int
    renewals_remaining: int
    days_overdue: int = 0
    current_fine: Decimal = Decimal("0.00")

    model_config = {"from_attributes": True}

    @classmethod
    def from_record(
        cls,
        record,
        book=None,
        member=None,
        fine_per_day: Decimal | None = None,
        now: datetime | None = None,
    ) -> "BorrowRecordDetail":
        """
        Cria o detalhe a partir de um BorrowRecord.

        Args:
            record: Objeto BorrowRecord do SQLAlchemy
            book: Book (opcional, usa record.book se None)
            member: Profile (opcional, usa record.member se None)
            fine_per_day: Multa diária para a prévia (padrão: plano do membro)
            now: Instante de referência
        """
        now = now or utcnow()
        book = book or getattr(record, "book", None)
        member = member or getattr(record, "member", None)

        days_overdue = 0
        current_fine = record.fine_amount or Decimal("0.00")
        if record.status == BorrowStatus.ISSUED:
            if fine_per_day is None:
                plan = getattr(member, "membership_plan", None) if member else None
                fine_per_day = plan.fine_per_day if plan else DEFAULT_FINE_PER_DAY
            days_overdue, current_fine = calculate_fine(record.due_date, fine_per_day, now)

        return cls(
            id=record.id,
            book_id=record.book_id,
            book_title=book.title if book else None,
            book_author=book.author if book else None,
            member_id=record.member_id,
            member_name=member.full_name if member else None,
            member_email=member.email if member else None,
            issued_by=record.issued_by,
            issue_date=record.issue_date,
            due_date=record.due_date,
            return_date=record.return_date,
            status=record.status,
            display_status=record.display_status(now),
            fine_amount=record.fine_amount or Decimal("0.00"),
            renewal_count=record.renewal_count,
            max_renewals=record.max_renewals,
            renewals_remaining=record.renewals_remaining,
            days_overdue=days_overdue,
            current_fine=current_fine,
        )


class ReturnResponse(SuccessResponse):
    """Resposta da devolução."""

    record: BorrowRecordDetail
    days_overdue: int
    fine_applied: Decimal = Field(..., description="Multa aplicada (pode ser 0)")
    message: str


class RenewResponse(SuccessResponse):
    """Resposta da renovação direta."""

    record_id: UUID
    previous_due_date: datetime
    new_due_date: datetime
    renewals_remaining: int
    message: str
