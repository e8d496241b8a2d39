"""
Rate limiting usando Redis com janela fixa.

Limita por usuário autenticado (sub do JWT) ou por IP para anônimos.
Configurável via variáveis de ambiente:
    - RATE_LIMIT_ENABLED: bool (default: True) - Habilita/desabilita rate limiting
    - RATE_LIMIT_REQUESTS: int (default: 60) - Número de requests permitidos
    - RATE_LIMIT_WINDOW_SECONDS: int (default: 60) - Janela de tempo em segundos

Uso:
    @router.post("/endpoint", dependencies=[Depends(rate_limit_submission)])
    async def endpoint(...):
        ...
"""

import logging
from typing import Annotated, Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from library_portal.core.config import get_settings
from library_portal.core.security import token_subject
from library_portal.db import redis as redis_db

logger = logging.getLogger(__name__)
settings = get_settings()
security = HTTPBearer(auto_error=False)


class RateLimiter:
    """
    Dependency para rate limiting usando Redis.

    Args:
        requests: Número máximo de requests permitidos (default: config)
        window: Janela de tempo em segundos (default: config)
        key_prefix: Prefixo para a chave no Redis (default: "rate_limit")
    """

    def __init__(
        self,
        requests: Optional[int] = None,
        window: Optional[int] = None,
        key_prefix: str = "rate_limit",
    ):
        self.requests = requests or settings.RATE_LIMIT_REQUESTS
        self.window = window or settings.RATE_LIMIT_WINDOW_SECONDS
        self.key_prefix = key_prefix

    async def __call__(
        self,
        request: Request,
        credentials: Annotated[Optional[HTTPAuthorizationCredentials], Depends(security)],
    ) -> None:
        """
        Verifica rate limit.

        Raises:
            HTTPException 429: Rate limit excedido
        """
        if not settings.RATE_LIMIT_ENABLED:
            return

        client = redis_db.redis_client
        # Sem Redis, permite passagem (fail-open)
        if client is None:
            return

        identifier = self._get_identifier(request, credentials)
        key = f"{self.key_prefix}:{identifier}"

        try:
            current = await client.incr(key)

            # Primeiro request da janela define o TTL
            if current == 1:
                await client.expire(key, self.window)

            if current > self.requests:
                ttl = await client.ttl(key)
                raise HTTPException(
                    status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                    detail=f"Rate limit excedido. Tente novamente em {ttl} segundos.",
                    headers={"Retry-After": str(ttl)},
                )
        except HTTPException:
            raise
        except Exception as e:
            logger.warning(f"Rate limit indisponível, liberando request: {e}")

    def _get_identifier(
        self,
        request: Request,
        credentials: Optional[HTTPAuthorizationCredentials],
    ) -> str:
        """
        Obtém identificador único para o rate limit.

        Prioridade:
            1. user_id do JWT (se autenticado)
            2. IP do cliente (considerando X-Forwarded-For)
        """
        if credentials:
            user_id = token_subject(credentials.credentials)
            if user_id is not None:
                return f"user:{user_id}"

        client_ip = request.client.host if request.client else "unknown"

        forwarded = request.headers.get("X-Forwarded-For")
        if forwarded:
            client_ip = forwarded.split(",")[0].strip()

        return f"ip:{client_ip}"


# Instâncias pré-configuradas
rate_limit_default = RateLimiter()
rate_limit_submission = RateLimiter(requests=30, window=60, key_prefix="rate_limit:submission")
rate_limit_auth = RateLimiter(requests=10, window=60, key_prefix="rate_limit:auth")
