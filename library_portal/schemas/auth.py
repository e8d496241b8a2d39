"""
Schemas de autenticação e o Principal resolvido por request.
"""

import re
from datetime import date
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from library_portal.models.enums import AppRole, STAFF_ROLES
from library_portal.schemas.base import BaseSchema, TimestampSchema


class Principal(BaseModel):
    """
    Identidade do chamador, resolvida uma vez na borda do request.

    É passada explicitamente para os services; nada depende de estado
    global de sessão.
    """
    model_config = ConfigDict(frozen=True)

    user_id: UUID
    email: str | None = None
    roles: frozenset[AppRole] = frozenset()

    @property
    def is_staff(self) -> bool:
        return bool(self.roles & STAFF_ROLES)

    @property
    def is_admin(self) -> bool:
        return AppRole.ADMIN in self.roles

    def has_any_role(self, *roles: AppRole) -> bool:
        return any(role in self.roles for role in roles)

    @classmethod
    def from_profile(cls, profile) -> "Principal":
        return cls(
            user_id=profile.id,
            email=profile.email,
            roles=profile.roles,
        )


class SignupRequest(BaseSchema):
    """
    Schema para cadastro de membro.

    Validações:
        - full_name: 2-255 caracteres
        - email: formato válido
        - password: mínimo 8 chars, 1 maiúscula, 1 minúscula, 1 número
    """
    full_name: str = Field(..., min_length=2, max_length=255, examples=["Maria Souza"])
    email: EmailStr = Field(..., examples=["maria@email.com"])
    password: str = Field(..., min_length=8, max_length=128, examples=["Senha123!"])
    phone: str | None = Field(None, max_length=50)
    address: str | None = Field(None, max_length=500)

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: str) -> str:
        """Valida complexidade da senha."""
        if not re.search(r"[A-Z]", v):
            raise ValueError("Senha deve conter pelo menos uma letra maiúscula")
        if not re.search(r"[a-z]", v):
            raise ValueError("Senha deve conter pelo menos uma letra minúscula")
        if not re.search(r"\d", v):
            raise ValueError("Senha deve conter pelo menos um número")
        return v


class LoginRequest(BaseSchema):
    """Schema para login."""
    email: EmailStr
    password: str


class TokenResponse(BaseSchema):
    """Token JWT emitido no login."""
    access_token: str
    token_type: str = "bearer"
    expires_in: int


class ProfileRead(TimestampSchema):
    """
    Dados públicos de um profile. Nunca expõe password_hash.
    """
    id: UUID
    email: str
    full_name: str | None = None
    phone: str | None = None
    address: str | None = None
    membership_plan_id: UUID | None = None
    membership_start_date: date | None = None
    membership_expiry_date: date | None = None
    roles: list[AppRole] = []

    @field_validator("roles", mode="before")
    @classmethod
    def sort_roles(cls, v):
        return sorted(v, key=lambda role: getattr(role, "value", role)) if v else []


class ProfileWithToken(BaseSchema):
    """Profile com token JWT (retorno do login)."""
    user: ProfileRead
    token: TokenResponse


class RolesUpdate(BaseSchema):
    """Substitui o conjunto de papéis de um profile."""
    roles: list[AppRole] = Field(..., min_length=1)
