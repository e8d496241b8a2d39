"""
Unit of work: agrupa as alterações de uma operação em um único commit.

Repositórios apenas fazem `flush`; o service abre um `unit_of_work` em
volta de cada mudança de estado que toca mais de uma linha (ex.: decisão
de solicitação + atualização do empréstimo + notificação). Se qualquer
passo falhar, nada é persistido.

Uso:
    async with unit_of_work(self.db):
        record.due_date = new_due_date
        request.status = RequestStatus.APPROVED
        await self.notifications.notify(...)
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from library_portal.core.exceptions import BackendFailure

logger = logging.getLogger(__name__)


@asynccontextmanager
async def unit_of_work(db: AsyncSession) -> AsyncIterator[AsyncSession]:
    """
    Executa o bloco e faz commit ao final; rollback em qualquer falha.

    Raises:
        BackendFailure: o banco rejeitou a escrita (SQLAlchemyError)
    """
    try:
        yield db
        await db.commit()
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Falha no banco, alterações descartadas: {e}")
        raise BackendFailure() from e
    except Exception:
        await db.rollback()
        raise
