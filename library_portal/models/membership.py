"""
Model de plano de associação.
"""

from decimal import Decimal
from typing import TYPE_CHECKING, List

from sqlalchemy import Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from library_portal.db.session import Base
from library_portal.models.base import UUIDMixin, TimestampMixin

if TYPE_CHECKING:
    from library_portal.models.profile import Profile


class MembershipPlan(Base, UUIDMixin, TimestampMixin):
    """
    Plano de associação.

    Define quantos livros o membro pode ter emprestados ao mesmo tempo
    e o valor da multa por dia de atraso.
    """
    __tablename__ = "membership_plans"

    name: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    annual_fee: Mapped[Decimal] = mapped_column(
        Numeric(10, 2),
        nullable=False,
        default=Decimal("0.00"),
    )
    duration_days: Mapped[int] = mapped_column(Integer, nullable=False, default=365)
    fine_per_day: Mapped[Decimal] = mapped_column(
        Numeric(10, 2),
        nullable=False,
        default=Decimal("5.00"),
    )
    max_books_allowed: Mapped[int] = mapped_column(Integer, nullable=False, default=3)

    members: Mapped[List["Profile"]] = relationship(
        "Profile",
        back_populates="membership_plan",
        lazy="raise",
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        return f"<MembershipPlan {self.name}>"
