"""
Repository para ExtensionRequest e RenewalRequest.

As duas tabelas têm o mesmo protocolo, então um único repository
genérico atende ambas; o model é escolhido pelo RequestKind.
"""

from typing import Union
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from library_portal.models.borrow import BorrowRecord
from library_portal.models.enums import RequestKind, RequestStatus
from library_portal.models.request import ExtensionRequest, RenewalRequest
from library_portal.repositories.base import BaseRepository

BorrowRequest = Union[ExtensionRequest, RenewalRequest]

REQUEST_MODELS: dict[RequestKind, type] = {
    RequestKind.EXTENSION: ExtensionRequest,
    RequestKind.RENEWAL: RenewalRequest,
}


class BorrowRequestRepository(BaseRepository[BorrowRequest]):
    """Repository de solicitações de um tipo (extensão ou renovação)."""

    def __init__(self, kind: RequestKind, db: AsyncSession):
        super().__init__(REQUEST_MODELS[kind], db)
        self.kind = kind

    def _with_relations(self):
        model = self.model
        return select(model).options(
            selectinload(model.member),
            selectinload(model.borrow_record).selectinload(BorrowRecord.book),
        )

    async def get_with_relations(self, request_id: UUID) -> BorrowRequest | None:
        result = await self.db.execute(
            self._with_relations().where(self.model.id == request_id)
        )
        return result.scalar_one_or_none()

    async def get_pending_for_record(self, borrow_record_id: UUID) -> BorrowRequest | None:
        """Solicitação pendente deste tipo para o empréstimo, se houver."""
        result = await self.db.execute(
            select(self.model).where(
                self.model.borrow_record_id == borrow_record_id,
                self.model.status == RequestStatus.PENDING,
            )
        )
        return result.scalar_one_or_none()

    async def list_by_status(self, status: RequestStatus | None) -> list[BorrowRequest]:
        """Lista solicitações (todas se status for None), mais recentes primeiro."""
        query = self._with_relations()
        if status is not None:
            query = query.where(self.model.status == status)
        result = await self.db.execute(query.order_by(self.model.created_at.desc()))
        return list(result.scalars().all())

    async def list_by_member(self, member_id: UUID) -> list[BorrowRequest]:
        result = await self.db.execute(
            self._with_relations()
            .where(self.model.member_id == member_id)
            .order_by(self.model.created_at.desc())
        )
        return list(result.scalars().all())
