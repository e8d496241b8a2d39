"""
Cache service usando Redis.

Cacheia a disponibilidade de livros (GET /books/{id}/availability).
Configurável via variáveis de ambiente:
    - CACHE_ENABLED: bool (default: True) - Habilita/desabilita cache
    - CACHE_AVAILABILITY_TTL_SECONDS: int (default: 15) - TTL do cache

Invalidação:
    # Ao emprestar, devolver ou editar o livro
    await cache_service.invalidate_availability(book_id)

Falhas do Redis nunca derrubam o request: o cache apenas deixa de ser usado.
"""

import json
import logging
from typing import Optional
from uuid import UUID

from library_portal.core.config import get_settings
from library_portal.db import redis as redis_db

logger = logging.getLogger(__name__)
settings = get_settings()


class CacheService:
    """
    Service para operações de cache usando Redis.

    Com invalidação em:
        - BorrowService.issue_book
        - BorrowService.return_book
        - BookService.update_book / delete_book
    """

    PREFIX_AVAILABILITY = "cache:availability"

    def __init__(self, ttl: Optional[int] = None):
        self.ttl = ttl or settings.CACHE_AVAILABILITY_TTL_SECONDS

    def _key(self, book_id: UUID) -> str:
        return f"{self.PREFIX_AVAILABILITY}:{book_id}"

    # ==========================================
    # Availability Cache
    # ==========================================

    async def get_availability(self, book_id: UUID) -> Optional[dict]:
        """
        Busca availability do cache.

        Returns:
            Dados de availability ou None se não em cache
        """
        client = redis_db.redis_client
        if not settings.CACHE_ENABLED or client is None:
            return None

        try:
            data = await client.get(self._key(book_id))
            if data:
                return json.loads(data)
            return None
        except Exception as e:
            logger.warning(f"Erro ao buscar cache availability: {e}")
            return None

    async def set_availability(
        self,
        book_id: UUID,
        data: dict,
        ttl: Optional[int] = None,
    ) -> bool:
        """
        Salva availability no cache.

        Returns:
            True se salvou com sucesso, False caso contrário
        """
        client = redis_db.redis_client
        if not settings.CACHE_ENABLED or client is None:
            return False

        try:
            await client.setex(
                self._key(book_id),
                ttl or self.ttl,
                json.dumps(data, default=str),
            )
            return True
        except Exception as e:
            logger.warning(f"Erro ao salvar cache availability: {e}")
            return False

    async def invalidate_availability(self, book_id: UUID) -> bool:
        """
        Invalida cache de availability de um livro.

        Returns:
            True se invalidou com sucesso, False caso contrário
        """
        client = redis_db.redis_client
        if not settings.CACHE_ENABLED or client is None:
            return False

        try:
            await client.delete(self._key(book_id))
            return True
        except Exception as e:
            logger.warning(f"Erro ao invalidar cache availability: {e}")
            return False


# Instância global para uso nos services
cache_service = CacheService()
