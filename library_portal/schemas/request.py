"""
Schemas Pydantic para solicitações de extensão e renovação.
"""

from datetime import datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from library_portal.models.enums import RequestKind, RequestStatus
from library_portal.schemas.base import SuccessResponse

MIN_EXTENSION_DAYS = 1
MAX_EXTENSION_DAYS = 30


class ExtensionSubmit(BaseModel):
    """
    Pedido de extensão de prazo.

    O intervalo de requested_days é verificado no service para que o
    erro saia como InvalidRange.
    """

    borrow_record_id: UUID
    requested_days: int = Field(..., description="Dias extras (1 a 30)")
    reason: str = Field(..., max_length=2000)

    @field_validator("reason")
    @classmethod
    def reason_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Informe o motivo da extensão")
        return v


class RenewalSubmit(BaseModel):
    """Pedido de renovação (+14 dias)."""

    borrow_record_id: UUID
    reason: str | None = Field(None, max_length=2000)


class DecisionRequest(BaseModel):
    """Decisão da equipe sobre uma solicitação pendente."""

    status: Literal["approved", "rejected"]
    reason: str | None = Field(None, max_length=2000)

    @property
    def decision(self) -> RequestStatus:
        return RequestStatus(self.status)


class SubmitResponse(SuccessResponse):
    """Resposta da submissão de solicitação."""

    request_id: UUID


class DecisionResponse(SuccessResponse):
    """Resposta da decisão; new_due_date só vem na aprovação."""

    status: RequestStatus
    new_due_date: datetime | None = None


class RequestDetail(BaseModel):
    """Solicitação com dados do empréstimo, livro e membro."""

    id: UUID
    kind: RequestKind
    borrow_record_id: UUID
    member_id: UUID
    member_name: str | None = None
    member_email: str | None = None
    book_title: str | None = None
    current_due_date: datetime | None = None
    requested_days: int | None = None
    reason: str | None = None
    status: RequestStatus
    librarian_id: UUID | None = None
    librarian_reason: str | None = None
    processed_at: datetime | None = None
    created_at: datetime

    @classmethod
    def from_request(cls, request) -> "RequestDetail":
        record = getattr(request, "borrow_record", None)
        book = getattr(record, "book", None) if record else None
        member = getattr(request, "member", None)

        return cls(
            id=request.id,
            kind=request.kind,
            borrow_record_id=request.borrow_record_id,
            member_id=request.member_id,
            member_name=member.full_name if member else None,
            member_email=member.email if member else None,
            book_title=book.title if book else None,
            current_due_date=record.due_date if record else None,
            requested_days=getattr(request, "requested_days", None),
            reason=request.reason,
            status=request.status,
            librarian_id=request.librarian_id,
            librarian_reason=request.librarian_reason,
            processed_at=request.processed_at,
            created_at=request.created_at,
        )
