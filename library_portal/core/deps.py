"""
Dependencies FastAPI para autenticação e autorização.

O token Bearer é resolvido uma única vez por request em um `Principal`
imutável (id, email, papéis), que os endpoints repassam aos services.
"""

from typing import Annotated, Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from library_portal.core.exceptions import AuthError, AuthorizationError
from library_portal.core.security import token_subject
from library_portal.db.session import get_db
from library_portal.repositories.profile import ProfileRepository
from library_portal.schemas.auth import Principal

# auto_error=False para que a ausência do header vire AuthError (401)
security = HTTPBearer(auto_error=False)


async def get_current_principal(
    credentials: Annotated[Optional[HTTPAuthorizationCredentials], Depends(security)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> Principal:
    """
    Dependency que retorna o Principal autenticado.

    Extrai o token JWT do header Authorization, decodifica e
    carrega o profile com seus papéis.

    Raises:
        AuthError (401): Token ausente, inválido, expirado ou usuário inexistente
    """
    if credentials is None:
        raise AuthError("Autenticação necessária")

    user_id = token_subject(credentials.credentials)
    if user_id is None:
        raise AuthError()

    profile = await ProfileRepository(db).get_by_id(user_id)
    if profile is None:
        raise AuthError()

    return Principal.from_profile(profile)


async def require_staff(
    principal: Annotated[Principal, Depends(get_current_principal)],
) -> Principal:
    """
    Dependency que exige papel de equipe (admin ou bibliotecário).

    Raises:
        AuthorizationError (403): Usuário não é da equipe
    """
    if not principal.is_staff:
        raise AuthorizationError()
    return principal


async def require_admin(
    principal: Annotated[Principal, Depends(get_current_principal)],
) -> Principal:
    """
    Dependency que exige papel de administrador.

    Raises:
        AuthorizationError (403): Usuário não é admin
    """
    if not principal.is_admin:
        raise AuthorizationError("Acesso restrito a administradores")
    return principal


# Type aliases para uso nos endpoints
CurrentPrincipal = Annotated[Principal, Depends(get_current_principal)]
StaffPrincipal = Annotated[Principal, Depends(require_staff)]
AdminPrincipal = Annotated[Principal, Depends(require_admin)]
DbSession = Annotated[AsyncSession, Depends(get_db)]
