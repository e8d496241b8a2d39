"""
Fixtures compartilhadas para testes.

Os testes não dependem de PostgreSQL nem de Redis: services recebem uma
sessão AsyncMock e os endpoints rodam com `dependency_overrides`.
"""

import uuid
from typing import AsyncGenerator
from unittest.mock import AsyncMock, MagicMock

import pytest
from httpx import ASGITransport, AsyncClient

from library_portal.core.deps import get_current_principal
from library_portal.db.session import get_db
from library_portal.main import app
from library_portal.models.enums import AppRole
from library_portal.models.profile import Profile
from library_portal.schemas.auth import Principal

from factories import make_profile, principal_for


# ==========================================
# Event loop configuration
# ==========================================

@pytest.fixture(scope="session")
def anyio_backend():
    return "asyncio"


# ==========================================
# Session mock
# ==========================================

@pytest.fixture
def mock_db():
    """
    Mock da sessão do banco.

    `add` é síncrono no AsyncSession; aqui ele também preenche o id, como
    o default do model faria no flush.
    """
    def add(instance):
        if getattr(instance, "id", None) is None:
            instance.id = uuid.uuid4()

    db = AsyncMock()
    db.add = MagicMock(side_effect=add)
    return db


# ==========================================
# Principals
# ==========================================

@pytest.fixture
def member() -> Profile:
    return make_profile(AppRole.MEMBER)


@pytest.fixture
def librarian() -> Profile:
    return make_profile(AppRole.LIBRARIAN, email="bib@biblioteca.com.br", full_name="Bibliotecária")


@pytest.fixture
def member_principal(member) -> Principal:
    return principal_for(member)


@pytest.fixture
def staff_principal(librarian) -> Principal:
    return principal_for(librarian)


# ==========================================
# HTTP Client fixtures
# ==========================================

@pytest.fixture
def override_principal():
    """
    Define o Principal devolvido pela dependency de autenticação.

    Uso:
        override_principal(staff_principal)
    """
    def _override(principal: Principal) -> None:
        app.dependency_overrides[get_current_principal] = lambda: principal

    yield _override
    app.dependency_overrides.pop(get_current_principal, None)


@pytest.fixture
async def client(mock_db) -> AsyncGenerator[AsyncClient, None]:
    """
    Cliente HTTP assíncrono para testes.

    Substitui a dependency get_db pela sessão mock.
    """
    async def override_get_db():
        yield mock_db

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
