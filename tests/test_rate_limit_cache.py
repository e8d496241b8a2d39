"""
Testes unitários para Rate Limiting e Cache.

Usa mocks para Redis para testar a lógica sem dependência externa.
"""

import json
from unittest.mock import AsyncMock, MagicMock, patch
from uuid import uuid4

import pytest
from fastapi import HTTPException, Request

from library_portal.core.cache import CacheService
from library_portal.core.rate_limit import RateLimiter

REDIS_CLIENT = "library_portal.db.redis.redis_client"


# ==========================================
# Tests para RateLimiter
# ==========================================

class TestRateLimiter:
    """Testes para o RateLimiter."""

    @pytest.fixture
    def mock_request(self):
        """Cria mock de Request."""
        request = MagicMock(spec=Request)
        request.client.host = "127.0.0.1"
        request.headers = {}
        return request

    @pytest.fixture
    def mock_settings(self):
        with patch("library_portal.core.rate_limit.settings") as mock_settings:
            mock_settings.RATE_LIMIT_ENABLED = True
            mock_settings.RATE_LIMIT_REQUESTS = 60
            mock_settings.RATE_LIMIT_WINDOW_SECONDS = 60
            yield mock_settings

    @pytest.mark.asyncio
    async def test_rate_limit_disabled_allows_all(self, mock_request, mock_settings):
        """Quando rate limit está desabilitado, permite todas as requisições."""
        mock_settings.RATE_LIMIT_ENABLED = False
        mock_redis = AsyncMock()

        with patch(REDIS_CLIENT, mock_redis):
            await RateLimiter()(mock_request, None)

        mock_redis.incr.assert_not_called()

    @pytest.mark.asyncio
    async def test_rate_limit_redis_unavailable_allows_all(self, mock_request, mock_settings):
        """Quando Redis não está disponível, permite (fail-open)."""
        with patch(REDIS_CLIENT, None):
            await RateLimiter()(mock_request, None)

    @pytest.mark.asyncio
    async def test_rate_limit_first_request_sets_ttl(self, mock_request, mock_settings):
        """Primeira requisição deve passar e definir TTL."""
        mock_redis = AsyncMock()
        mock_redis.incr.return_value = 1

        with patch(REDIS_CLIENT, mock_redis):
            await RateLimiter()(mock_request, None)

        mock_redis.incr.assert_called_once()
        mock_redis.expire.assert_called_once_with("rate_limit:ip:127.0.0.1", 60)

    @pytest.mark.asyncio
    async def test_rate_limit_within_limit_success(self, mock_request, mock_settings):
        """Requisições dentro do limite devem passar."""
        mock_redis = AsyncMock()
        mock_redis.incr.return_value = 30

        with patch(REDIS_CLIENT, mock_redis):
            await RateLimiter()(mock_request, None)

        mock_redis.expire.assert_not_called()

    @pytest.mark.asyncio
    async def test_rate_limit_exceeded_raises_429(self, mock_request, mock_settings):
        """Quando limite é excedido, deve lançar 429."""
        mock_redis = AsyncMock()
        mock_redis.incr.return_value = 61
        mock_redis.ttl.return_value = 45

        with patch(REDIS_CLIENT, mock_redis):
            with pytest.raises(HTTPException) as exc_info:
                await RateLimiter()(mock_request, None)

        assert exc_info.value.status_code == 429
        assert "Rate limit excedido" in exc_info.value.detail
        assert exc_info.value.headers["Retry-After"] == "45"

    @pytest.mark.asyncio
    async def test_rate_limit_identifies_by_jwt(self, mock_request, mock_settings):
        """Deve identificar usuário por JWT quando autenticado."""
        mock_redis = AsyncMock()
        mock_redis.incr.return_value = 1
        credentials = MagicMock()
        credentials.credentials = "fake_token"
        user_id = uuid4()

        with patch(REDIS_CLIENT, mock_redis), \
             patch("library_portal.core.rate_limit.token_subject", return_value=user_id):
            await RateLimiter(key_prefix="rate_limit:submission")(mock_request, credentials)

        assert mock_redis.incr.call_args[0][0] == f"rate_limit:submission:user:{user_id}"

    @pytest.mark.asyncio
    async def test_rate_limit_uses_x_forwarded_for(self, mock_request, mock_settings):
        """Deve usar o primeiro IP do X-Forwarded-For quando disponível."""
        mock_redis = AsyncMock()
        mock_redis.incr.return_value = 1
        mock_request.headers = {"X-Forwarded-For": "10.0.0.1, 192.168.1.1"}

        with patch(REDIS_CLIENT, mock_redis):
            await RateLimiter()(mock_request, None)

        assert mock_redis.incr.call_args[0][0] == "rate_limit:ip:10.0.0.1"

    @pytest.mark.asyncio
    async def test_rate_limit_custom_parameters(self, mock_request, mock_settings):
        """Deve respeitar parâmetros customizados."""
        mock_redis = AsyncMock()
        mock_redis.incr.return_value = 11
        mock_redis.ttl.return_value = 30

        with patch(REDIS_CLIENT, mock_redis):
            with pytest.raises(HTTPException) as exc_info:
                await RateLimiter(requests=10, window=30)(mock_request, None)

        assert exc_info.value.status_code == 429

    @pytest.mark.asyncio
    async def test_rate_limit_redis_error_allows_request(self, mock_request, mock_settings):
        """Erro no Redis deve permitir requisição (fail-open)."""
        mock_redis = AsyncMock()
        mock_redis.incr.side_effect = Exception("Redis connection error")

        with patch(REDIS_CLIENT, mock_redis):
            await RateLimiter()(mock_request, None)


# ==========================================
# Tests para CacheService
# ==========================================

class TestCacheService:
    """Testes para o CacheService."""

    @pytest.fixture
    def book_id(self):
        return uuid4()

    @pytest.fixture
    def availability_data(self):
        return {
            "available": True,
            "expected_due_date": None,
            "available_copies": 2,
            "total_copies": 5,
        }

    @pytest.fixture
    def mock_settings(self):
        with patch("library_portal.core.cache.settings") as mock_settings:
            mock_settings.CACHE_ENABLED = True
            mock_settings.CACHE_AVAILABILITY_TTL_SECONDS = 15
            yield mock_settings

    @pytest.mark.asyncio
    async def test_cache_disabled_get_returns_none(self, book_id, mock_settings):
        """Quando cache está desabilitado, get retorna None."""
        mock_settings.CACHE_ENABLED = False

        with patch(REDIS_CLIENT, AsyncMock()):
            assert await CacheService().get_availability(book_id) is None

    @pytest.mark.asyncio
    async def test_cache_redis_unavailable(self, book_id, availability_data, mock_settings):
        """Sem Redis, get retorna None e set retorna False."""
        with patch(REDIS_CLIENT, None):
            cache = CacheService()
            assert await cache.get_availability(book_id) is None
            assert await cache.set_availability(book_id, availability_data) is False
            assert await cache.invalidate_availability(book_id) is False

    @pytest.mark.asyncio
    async def test_cache_get_hit(self, book_id, availability_data, mock_settings):
        """Deve retornar dados do cache quando existem."""
        mock_redis = AsyncMock()
        mock_redis.get.return_value = json.dumps(availability_data)

        with patch(REDIS_CLIENT, mock_redis):
            result = await CacheService().get_availability(book_id)

        assert result == availability_data
        mock_redis.get.assert_called_once_with(f"cache:availability:{book_id}")

    @pytest.mark.asyncio
    async def test_cache_get_miss(self, book_id, mock_settings):
        mock_redis = AsyncMock()
        mock_redis.get.return_value = None

        with patch(REDIS_CLIENT, mock_redis):
            assert await CacheService().get_availability(book_id) is None

    @pytest.mark.asyncio
    async def test_cache_set_uses_configured_ttl(self, book_id, availability_data, mock_settings):
        """Deve salvar dados no cache com o TTL configurado."""
        mock_redis = AsyncMock()

        with patch(REDIS_CLIENT, mock_redis):
            result = await CacheService().set_availability(book_id, availability_data)

        assert result is True
        assert mock_redis.setex.call_args[0][1] == 15

    @pytest.mark.asyncio
    async def test_cache_set_custom_ttl(self, book_id, availability_data, mock_settings):
        mock_redis = AsyncMock()

        with patch(REDIS_CLIENT, mock_redis):
            await CacheService().set_availability(book_id, availability_data, ttl=30)

        assert mock_redis.setex.call_args[0][1] == 30

    @pytest.mark.asyncio
    async def test_cache_invalidate_success(self, book_id, mock_settings):
        mock_redis = AsyncMock()

        with patch(REDIS_CLIENT, mock_redis):
            assert await CacheService().invalidate_availability(book_id) is True

        mock_redis.delete.assert_called_once_with(f"cache:availability:{book_id}")

    @pytest.mark.asyncio
    async def test_cache_errors_fail_open(self, book_id, availability_data, mock_settings):
        """Erros do Redis nunca propagam."""
        mock_redis = AsyncMock()
        mock_redis.get.side_effect = Exception("Redis error")
        mock_redis.setex.side_effect = Exception("Redis error")

        with patch(REDIS_CLIENT, mock_redis):
            cache = CacheService()
            assert await cache.get_availability(book_id) is None
            assert await cache.set_availability(book_id, availability_data) is False
