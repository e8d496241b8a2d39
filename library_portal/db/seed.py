"""
Script de seed para criar dados iniciais no banco.

Uso:
    python -m library_portal.db.seed

Cria o plano padrão e o usuário admin se não existirem.
"""

import asyncio
import logging
from decimal import Decimal

from library_portal.core.config import get_settings
from library_portal.core.logging import setup_logging
from library_portal.core.security import hash_password
from library_portal.db.session import async_session_factory
from library_portal.db.unit_of_work import unit_of_work
from library_portal.models.enums import AppRole
from library_portal.models.membership import MembershipPlan
from library_portal.models.profile import Profile, UserRoleAssignment
from library_portal.repositories.membership import MembershipPlanRepository
from library_portal.repositories.profile import ProfileRepository
from library_portal.schemas.borrow import DEFAULT_FINE_PER_DAY, DEFAULT_MAX_BOOKS

logger = logging.getLogger(__name__)
settings = get_settings()

DEFAULT_PLAN_NAME = "Básico"


async def create_default_plan() -> None:
    """Cria o plano padrão (3 livros, R$ 5,00/dia de multa)."""
    async with async_session_factory() as db:
        repo = MembershipPlanRepository(db)
        if await repo.get_by_name(DEFAULT_PLAN_NAME):
            logger.info(f"Plano já existe: {DEFAULT_PLAN_NAME}")
            return

        async with unit_of_work(db):
            db.add(
                MembershipPlan(
                    name=DEFAULT_PLAN_NAME,
                    annual_fee=Decimal("0.00"),
                    duration_days=365,
                    fine_per_day=DEFAULT_FINE_PER_DAY,
                    max_books_allowed=DEFAULT_MAX_BOOKS,
                )
            )
        logger.info(f"Plano criado: {DEFAULT_PLAN_NAME}")


async def create_admin() -> None:
    """
    Cria usuário admin se não existir.

    Lê email e senha do .env (ADMIN_EMAIL, ADMIN_PASSWORD).
    """
    async with async_session_factory() as db:
        repo = ProfileRepository(db)
        if await repo.get_by_email(settings.ADMIN_EMAIL):
            logger.info(f"Admin já existe: {settings.ADMIN_EMAIL}")
            return

        async with unit_of_work(db):
            admin = Profile(
                full_name="Administrador",
                email=settings.ADMIN_EMAIL,
                password_hash=hash_password(settings.ADMIN_PASSWORD),
                role_assignments=[UserRoleAssignment(role=AppRole.ADMIN)],
            )
            db.add(admin)
            await db.flush()

        logger.info(f"Admin criado: {settings.ADMIN_EMAIL} (ID: {admin.id})")


async def main() -> None:
    """Executa todos os seeds."""
    setup_logging()
    logger.info("Executando seeds...")
    await create_default_plan()
    await create_admin()
    logger.info("Seeds concluídos!")


if __name__ == "__main__":
    asyncio.run(main())
