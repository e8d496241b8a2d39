"""
Endpoints de autenticação.

Contratos:
    - POST /auth/signup: Cadastro de membro (papel member)
    - POST /auth/login: Retorna JWT
    - GET /auth/me: Profile e papéis do chamador

Rate limit: 10 req/min por IP.
"""

from fastapi import APIRouter, Depends, status

from library_portal.core.deps import CurrentPrincipal, DbSession
from library_portal.core.rate_limit import rate_limit_auth
from library_portal.schemas.auth import LoginRequest, ProfileRead, ProfileWithToken, SignupRequest
from library_portal.services.auth import AuthService

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post(
    "/signup",
    response_model=ProfileRead,
    status_code=status.HTTP_201_CREATED,
    summary="Cadastrar membro",
    dependencies=[Depends(rate_limit_auth)],
)
async def signup(data: SignupRequest, db: DbSession) -> ProfileRead:
    """
    Cadastra novo membro.

    Raises:
        400: Email já cadastrado ou senha fraca
    """
    profile = await AuthService(db).signup(data)
    return ProfileRead.model_validate(profile)


@router.post(
    "/login",
    response_model=ProfileWithToken,
    summary="Login",
    dependencies=[Depends(rate_limit_auth)],
)
async def login(data: LoginRequest, db: DbSession) -> ProfileWithToken:
    """
    Autentica e retorna o token JWT.

    Raises:
        401: Email ou senha incorretos
    """
    return await AuthService(db).login(data.email, data.password)


@router.get(
    "/me",
    response_model=ProfileRead,
    summary="Usuário atual",
)
async def me(db: DbSession, principal: CurrentPrincipal) -> ProfileRead:
    profile = await AuthService(db).me(principal)
    return ProfileRead.model_validate(profile)
