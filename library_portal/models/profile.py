"""
Models de identidade: Profile (membro/equipe) e UserRoleAssignment.
"""

import uuid
from datetime import date
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import Date, ForeignKey, String, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from library_portal.db.session import Base
from library_portal.models.base import UUIDMixin, TimestampMixin, pg_enum
from library_portal.models.enums import AppRole

if TYPE_CHECKING:
    from library_portal.models.borrow import BorrowRecord
    from library_portal.models.membership import MembershipPlan


class Profile(Base, UUIDMixin, TimestampMixin):
    """
    Usuário do sistema (membro, bibliotecário ou administrador).

    Attributes:
        email: Email único (login)
        full_name: Nome completo
        password_hash: Hash bcrypt da senha
        membership_plan_id: Plano que limita empréstimos e define a multa diária
        membership_start_date / membership_expiry_date: Vigência do plano
        roles: Papéis atribuídos (user_roles)
    """
    __tablename__ = "profiles"

    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        nullable=False,
        index=True,
    )
    full_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    phone: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    address: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    membership_plan_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("membership_plans.id", ondelete="RESTRICT"),
        nullable=True,
        index=True,
    )
    membership_start_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    membership_expiry_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)

    # Relationships
    membership_plan: Mapped[Optional["MembershipPlan"]] = relationship(
        "MembershipPlan",
        back_populates="members",
        lazy="selectin",
    )
    role_assignments: Mapped[List["UserRoleAssignment"]] = relationship(
        "UserRoleAssignment",
        back_populates="user",
        lazy="selectin",
        cascade="all, delete-orphan",
    )
    borrow_records: Mapped[List["BorrowRecord"]] = relationship(
        "BorrowRecord",
        back_populates="member",
        foreign_keys="BorrowRecord.member_id",
        lazy="raise",
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        return f"<Profile {self.email}>"

    @property
    def roles(self) -> frozenset[AppRole]:
        return frozenset(a.role for a in self.role_assignments)


class UserRoleAssignment(Base, UUIDMixin, TimestampMixin):
    """Papel de um usuário (tabela user_roles)."""
    __tablename__ = "user_roles"

    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("profiles.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    role: Mapped[AppRole] = mapped_column(
        pg_enum(AppRole, "app_role"),
        nullable=False,
        index=True,
    )

    user: Mapped["Profile"] = relationship(
        "Profile",
        back_populates="role_assignments",
    )

    __table_args__ = (
        UniqueConstraint("user_id", "role", name="uq_user_roles_user_id_role"),
    )

    def __repr__(self) -> str:
        return f"<UserRoleAssignment {self.user_id} {self.role.value}>"
