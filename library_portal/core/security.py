"""
Hash de senha (bcrypt) e tokens de acesso (JWT).

O token carrega o id do profile em `sub` e os papéis em `roles`. Os
papéis do token são informativos: a autorização sempre relê os papéis do
banco ao resolver o Principal (ver `core.deps`).
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Iterable
from uuid import UUID

import bcrypt
from jose import JWTError, jwt

from library_portal.core.config import get_settings
from library_portal.models.enums import AppRole

logger = logging.getLogger(__name__)
settings = get_settings()


def hash_password(password: str) -> str:
    hashed = bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt())
    return hashed.decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Verifica se a senha corresponde ao hash.

    Returns:
        True se a senha está correta. Hash malformado conta como senha incorreta.
    """
    try:
        return bcrypt.checkpw(
            plain_password.encode("utf-8"),
            hashed_password.encode("utf-8"),
        )
    except ValueError as e:
        logger.debug(f"Erro na verificação de senha: {type(e).__name__}")
        return False


def create_access_token(
    subject: str,
    extra_data: dict[str, Any] | None = None,
    expires_delta: timedelta | None = None,
) -> str:
    """
    Cria token JWT assinado.

    Args:
        subject: Valor de `sub`
        extra_data: Claims adicionais
        expires_delta: Validade (padrão: JWT_EXPIRES_MINUTES)
    """
    now = datetime.now(timezone.utc)
    payload = {
        "sub": subject,
        "iat": now,
        "exp": now + (expires_delta or timedelta(minutes=settings.JWT_EXPIRES_MINUTES)),
    }
    if extra_data:
        payload.update(extra_data)

    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def create_user_token(user_id: UUID, roles: Iterable[AppRole]) -> str:
    """Token de acesso de um profile, com os papéis em ordem alfabética."""
    return create_access_token(
        subject=str(user_id),
        extra_data={"roles": sorted(role.value for role in roles)},
    )


def token_lifetime_seconds() -> int:
    return settings.JWT_EXPIRES_MINUTES * 60


def decode_token(token: str) -> dict[str, Any] | None:
    """
    Decodifica e valida token JWT.

    Returns:
        Payload do token ou None se inválido/expirado
    """
    try:
        return jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[settings.JWT_ALGORITHM],
        )
    except JWTError:
        return None


def token_subject(token: str) -> UUID | None:
    """
    Id do profile contido em um token válido.

    Returns:
        UUID de `sub`, ou None se o token é inválido, expirou ou o `sub`
        não é um UUID
    """
    payload = decode_token(token)
    if not payload or "sub" not in payload:
        return None
    try:
        return UUID(str(payload["sub"]))
    except ValueError:
        return None
