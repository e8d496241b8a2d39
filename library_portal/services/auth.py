"""
Service de autenticação.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from library_portal.core.exceptions import AuthError, InvalidInputError, NotFoundOrConflict
from library_portal.core.security import (
    create_user_token,
    hash_password,
    token_lifetime_seconds,
    verify_password,
)
from library_portal.db.unit_of_work import unit_of_work
from library_portal.models.enums import AppRole
from library_portal.models.profile import Profile, UserRoleAssignment
from library_portal.repositories.profile import ProfileRepository
from library_portal.schemas.auth import (
    Principal,
    ProfileRead,
    ProfileWithToken,
    SignupRequest,
    TokenResponse,
)

logger = logging.getLogger(__name__)


class AuthService:
    """Service para operações de autenticação."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.profile_repo = ProfileRepository(db)

    async def signup(self, data: SignupRequest) -> Profile:
        """
        Cadastra novo membro (papel `member`).

        Raises:
            InvalidInputError: Email já cadastrado
        """
        if await self.profile_repo.email_exists(data.email):
            raise InvalidInputError("Email já cadastrado")

        async with unit_of_work(self.db):
            profile = Profile(
                email=data.email.lower(),
                full_name=data.full_name,
                password_hash=hash_password(data.password),
                phone=data.phone,
                address=data.address,
                role_assignments=[UserRoleAssignment(role=AppRole.MEMBER)],
            )
            self.db.add(profile)
            await self.db.flush()

        await self.db.refresh(profile)
        logger.info(f"Novo membro cadastrado: {profile.id}")
        return profile

    async def login(self, email: str, password: str) -> ProfileWithToken:
        """
        Autentica e retorna token JWT.

        Raises:
            AuthError: Credenciais inválidas
        """
        profile = await self.profile_repo.get_by_email(email)

        if profile is None or not verify_password(password, profile.password_hash):
            logger.info("Tentativa de login com credenciais inválidas")
            raise AuthError("Email ou senha incorretos")

        access_token = create_user_token(profile.id, profile.roles)

        return ProfileWithToken(
            user=ProfileRead.model_validate(profile),
            token=TokenResponse(
                access_token=access_token,
                expires_in=token_lifetime_seconds(),
            ),
        )

    async def me(self, principal: Principal) -> Profile:
        """Profile do chamador."""
        profile = await self.profile_repo.get_by_id(principal.user_id)
        if profile is None:
            raise NotFoundOrConflict("Usuário não encontrado")
        return profile
