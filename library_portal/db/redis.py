"""
Cliente Redis compartilhado por cache e rate limiting.

O cliente só existe depois de `init_redis()` (lifespan da aplicação).
Quem usa deve ler `redis_db.redis_client` no momento da chamada e tratar
`None` como Redis indisponível: cache e rate limit deixam de atuar, mas o
request segue normalmente.
"""

import logging
from typing import Optional

import redis.asyncio as redis

from library_portal.core.config import get_settings

logger = logging.getLogger(__name__)
settings = get_settings()

redis_client: Optional[redis.Redis] = None


async def init_redis() -> Optional[redis.Redis]:
    """
    Cria o cliente e confirma a conexão com PING.

    Returns:
        O cliente, ou None se o Redis não respondeu
    """
    global redis_client
    client = redis.from_url(
        settings.REDIS_URL,
        encoding="utf-8",
        decode_responses=True,
        socket_timeout=settings.REDIS_SOCKET_TIMEOUT_SECONDS,
        socket_connect_timeout=settings.REDIS_SOCKET_TIMEOUT_SECONDS,
    )
    try:
        await client.ping()
    except Exception as e:
        logger.warning(f"Redis indisponível em {settings.REDIS_URL}: {e}")
        await client.aclose()
        redis_client = None
        return None

    redis_client = client
    return redis_client


async def close_redis() -> None:
    global redis_client
    if redis_client is not None:
        await redis_client.aclose()
        redis_client = None


def redis_available() -> bool:
    """True se o cliente foi inicializado com sucesso."""
    return redis_client is not None
