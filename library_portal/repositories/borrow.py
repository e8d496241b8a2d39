"""
Repository para operações de BorrowRecord no banco de dados.
"""

from datetime import datetime
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from library_portal.core.timeutils import utcnow
from library_portal.models.borrow import BorrowRecord
from library_portal.models.enums import BorrowStatus
from library_portal.models.profile import Profile
from library_portal.repositories.base import BaseRepository


class BorrowRecordRepository(BaseRepository[BorrowRecord]):
    """Repository para operações CRUD de BorrowRecord."""

    def __init__(self, db: AsyncSession):
        super().__init__(BorrowRecord, db)

    def _with_relations(self):
        return select(BorrowRecord).options(
            selectinload(BorrowRecord.book),
            selectinload(BorrowRecord.member).selectinload(Profile.membership_plan),
        )

    async def get_with_relations(self, record_id: UUID) -> BorrowRecord | None:
        """Busca empréstimo com livro e membro (e o plano do membro)."""
        result = await self.db.execute(
            self._with_relations().where(BorrowRecord.id == record_id)
        )
        return result.scalar_one_or_none()

    async def get_issued_for_member(
        self,
        record_id: UUID,
        member_id: UUID,
    ) -> BorrowRecord | None:
        """Busca empréstimo ainda emitido que pertence ao membro."""
        result = await self.db.execute(
            self._with_relations().where(
                BorrowRecord.id == record_id,
                BorrowRecord.member_id == member_id,
                BorrowRecord.status == BorrowStatus.ISSUED,
            )
        )
        return result.scalar_one_or_none()

    async def count_issued_by_member(self, member_id: UUID) -> int:
        """Conta empréstimos emitidos (não devolvidos) de um membro."""
        result = await self.db.execute(
            select(func.count(BorrowRecord.id))
            .where(
                BorrowRecord.member_id == member_id,
                BorrowRecord.status == BorrowStatus.ISSUED,
            )
        )
        return result.scalar_one()

    async def count_issued_by_book(self, book_id: UUID) -> int:
        result = await self.db.execute(
            select(func.count(BorrowRecord.id))
            .where(
                BorrowRecord.book_id == book_id,
                BorrowRecord.status == BorrowStatus.ISSUED,
            )
        )
        return result.scalar_one()

    async def count_issued(self, overdue_only: bool = False) -> int:
        """Conta empréstimos emitidos; com overdue_only, apenas os atrasados."""
        query = select(func.count(BorrowRecord.id)).where(
            BorrowRecord.status == BorrowStatus.ISSUED
        )
        if overdue_only:
            query = query.where(BorrowRecord.due_date < utcnow())
        result = await self.db.execute(query)
        return result.scalar_one()

    async def search(
        self,
        member_id: UUID | None = None,
        book_id: UUID | None = None,
        status: BorrowStatus | None = None,
        page: int = 1,
        page_size: int = 20,
    ) -> tuple[list[BorrowRecord], int]:
        """
        Busca empréstimos com filtros e paginação.

        Args:
            member_id: Filtro por membro
            book_id: Filtro por livro
            status: ISSUED, RETURNED ou OVERDUE (emitido e vencido)
            page: Número da página
            page_size: Tamanho da página

        Returns:
            Tupla (lista de empréstimos, total)
        """
        query = self._with_relations()

        if member_id:
            query = query.where(BorrowRecord.member_id == member_id)

        if book_id:
            query = query.where(BorrowRecord.book_id == book_id)

        if status == BorrowStatus.OVERDUE:
            query = query.where(
                BorrowRecord.status == BorrowStatus.ISSUED,
                BorrowRecord.due_date < utcnow(),
            )
        elif status is not None:
            query = query.where(BorrowRecord.status == status)

        return await self._paginate(query, BorrowRecord.issue_date.desc(), page, page_size)

    async def list_by_member(self, member_id: UUID) -> list[BorrowRecord]:
        """Todos os empréstimos do membro, mais recentes primeiro."""
        result = await self.db.execute(
            self._with_relations()
            .where(BorrowRecord.member_id == member_id)
            .order_by(BorrowRecord.issue_date.desc())
        )
        return list(result.scalars().all())

    async def get_overdue(self, now: datetime) -> list[BorrowRecord]:
        """Empréstimos emitidos com due_date < now (para as varreduras)."""
        result = await self.db.execute(
            self._with_relations()
            .where(
                BorrowRecord.status == BorrowStatus.ISSUED,
                BorrowRecord.due_date < now,
            )
            .order_by(BorrowRecord.due_date)
        )
        return list(result.scalars().all())

    async def get_due_between(self, start: datetime, end: datetime) -> list[BorrowRecord]:
        """Empréstimos emitidos com start <= due_date <= end."""
        result = await self.db.execute(
            self._with_relations()
            .where(
                BorrowRecord.status == BorrowStatus.ISSUED,
                BorrowRecord.due_date >= start,
                BorrowRecord.due_date <= end,
            )
            .order_by(BorrowRecord.due_date)
        )
        return list(result.scalars().all())

    async def get_earliest_due_date_by_book(self, book_id: UUID) -> datetime | None:
        """
        Retorna a menor due_date dos empréstimos ativos de um livro.

        Returns:
            Menor due_date ou None se não houver empréstimos ativos
        """
        result = await self.db.execute(
            select(func.min(BorrowRecord.due_date))
            .where(
                BorrowRecord.book_id == book_id,
                BorrowRecord.status == BorrowStatus.ISSUED,
            )
        )
        return result.scalar_one_or_none()
