"""
Acesso a dados compartilhado pelos repositórios.

Os repositórios apenas fazem `flush`: quem decide o commit é o service,
dentro de um `unit_of_work`. Assim uma operação de circulação que toca
empréstimo, estoque e notificação grava tudo ou nada.
"""

from typing import Any, Generic, Type, TypeVar
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from library_portal.db.session import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """Operações comuns sobre uma tabela mapeada por `model`."""

    def __init__(self, model: Type[ModelType], db: AsyncSession):
        self.model = model
        self.db = db

    async def get_by_id(self, id: UUID) -> ModelType | None:
        result = await self.db.execute(
            select(self.model).where(self.model.id == id)
        )
        return result.scalar_one_or_none()

    async def create(self, **values: Any) -> ModelType:
        """Insere a linha e faz flush para o id ficar disponível."""
        instance = self.model(**values)
        self.db.add(instance)
        await self.db.flush()
        return instance

    async def update(self, instance: ModelType, **changes: Any) -> ModelType:
        """
        Aplica alterações parciais.

        Campos com valor None são ignorados, então um PATCH que omite um
        campo não o apaga.
        """
        for field, value in changes.items():
            if value is not None:
                setattr(instance, field, value)
        await self.db.flush()
        return instance

    async def delete(self, instance: ModelType) -> None:
        await self.db.delete(instance)
        await self.db.flush()

    async def count(self, *criteria: Any) -> int:
        """Total de linhas, opcionalmente filtradas por `criteria`."""
        query = select(func.count(self.model.id))
        if criteria:
            query = query.where(*criteria)
        result = await self.db.execute(query)
        return result.scalar_one()

    async def exists(self, *criteria: Any) -> bool:
        result = await self.db.execute(
            select(self.model.id).where(*criteria).limit(1)
        )
        return result.scalar_one_or_none() is not None

    async def _paginate(
        self,
        query,
        order_by,
        page: int,
        page_size: int,
    ) -> tuple[list[ModelType], int]:
        """
        Uma página de `query` e o total sem paginação.

        O total é contado sobre a query sem ORDER BY, como subquery, para
        respeitar os filtros e joins já aplicados.
        """
        total = (
            await self.db.execute(
                select(func.count()).select_from(query.order_by(None).subquery())
            )
        ).scalar_one()

        offset = (page - 1) * page_size
        rows = await self.db.execute(
            query.order_by(order_by).offset(offset).limit(page_size)
        )
        return list(rows.scalars().all()), total
