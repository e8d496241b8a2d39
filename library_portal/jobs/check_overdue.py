"""
Varredura de notificações fora da API.

Uso:
    python -m library_portal.jobs.check_overdue

Roda as varreduras de atraso, vencimento próximo e estoque baixo e
imprime o resultado em JSON. Pode ser agendado várias vezes ao dia:
notificações repetidas no mesmo dia (UTC) não são recriadas.
"""

import asyncio

from library_portal.core.logging import setup_logging
from library_portal.db.session import async_session_factory, engine
from library_portal.schemas.notification import SweepResult
from library_portal.services.notification import NotificationService


async def run() -> SweepResult:
    async with async_session_factory() as db:
        return await NotificationService(db).run_all()


async def main() -> None:
    setup_logging()
    try:
        result = await run()
        print(result.model_dump_json())
    finally:
        await engine.dispose()


if __name__ == "__main__":
    asyncio.run(main())
