"""
Schemas Pydantic para planos de associação e membros.
"""

from datetime import date
from decimal import Decimal
from uuid import UUID

from pydantic import Field

from library_portal.schemas.auth import ProfileRead
from library_portal.schemas.base import BaseSchema, TimestampSchema


class PlanCreate(BaseSchema):
    """Schema para criação de plano."""
    name: str = Field(..., min_length=1, max_length=100, examples=["Básico"])
    annual_fee: Decimal = Field(Decimal("0.00"), ge=0, max_digits=10, decimal_places=2)
    duration_days: int = Field(365, ge=1, le=3650)
    fine_per_day: Decimal = Field(Decimal("5.00"), ge=0, max_digits=10, decimal_places=2)
    max_books_allowed: int = Field(3, ge=1, le=100)


class PlanUpdate(BaseSchema):
    """Schema para atualização de plano."""
    name: str | None = Field(None, min_length=1, max_length=100)
    annual_fee: Decimal | None = Field(None, ge=0, max_digits=10, decimal_places=2)
    duration_days: int | None = Field(None, ge=1, le=3650)
    fine_per_day: Decimal | None = Field(None, ge=0, max_digits=10, decimal_places=2)
    max_books_allowed: int | None = Field(None, ge=1, le=100)


class PlanRead(TimestampSchema):
    """Schema para leitura de plano."""
    id: UUID
    name: str
    annual_fee: Decimal
    duration_days: int
    fine_per_day: Decimal
    max_books_allowed: int


class PlanAssignment(BaseSchema):
    """Atribui um plano a um membro a partir de hoje."""
    membership_plan_id: UUID


class MemberDetail(ProfileRead):
    """Membro com plano e contagem de empréstimos ativos."""
    membership_plan: PlanRead | None = None
    active_borrows: int = 0


class MembershipPeriod(BaseSchema):
    """Vigência calculada na atribuição de plano."""
    start: date
    expiry: date
