"""
Service para lógica de negócio de empréstimos (BorrowRecord).

Regras de negócio:
    - Emissão e devolução são feitas pela equipe (admin ou bibliotecário)
    - Membro pode ter no máximo `max_books_allowed` livros emitidos (padrão: 3)
    - Prazo padrão: 14 dias (1 a 60)
    - Multa por atraso: dias inteiros de atraso × multa diária do plano (padrão: R$ 5,00)
    - Renovação direta pelo próprio membro: +14 dias, até `max_renewals` vezes,
      somente se ainda não venceu
"""

import logging
from datetime import timedelta
from decimal import Decimal
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from library_portal.core.cache import cache_service
from library_portal.core.exceptions import (
    AlreadyOverdue,
    AuthorizationError,
    LimitExceeded,
    NotFoundOrConflict,
    OutOfStock,
    RenewalLimitReached,
)
from library_portal.core.timeutils import as_utc, utcnow
from library_portal.db.unit_of_work import unit_of_work
from library_portal.models.borrow import BorrowRecord
from library_portal.models.enums import BorrowStatus, NotificationType
from library_portal.models.profile import Profile
from library_portal.repositories.book import BookRepository
from library_portal.repositories.borrow import BorrowRecordRepository
from library_portal.repositories.profile import ProfileRepository
from library_portal.schemas.auth import Principal
from library_portal.schemas.base import PaginatedResponse
from library_portal.schemas.borrow import (
    DEFAULT_FINE_PER_DAY,
    DEFAULT_MAX_BOOKS,
    DEFAULT_MAX_RENEWALS,
    RENEWAL_PERIOD_DAYS,
    BorrowRecordDetail,
    IssueRequest,
    RenewResponse,
    ReturnResponse,
    calculate_fine,
)
from library_portal.services.notification import NotificationService, format_date

logger = logging.getLogger(__name__)


def plan_limits(member: Profile | None) -> tuple[int, Decimal]:
    """(max_books_allowed, fine_per_day) do plano do membro, com os padrões."""
    plan = member.membership_plan if member else None
    if plan is None:
        return DEFAULT_MAX_BOOKS, DEFAULT_FINE_PER_DAY
    return plan.max_books_allowed, plan.fine_per_day


class BorrowService:
    """Service para operações de empréstimo."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.borrow_repo = BorrowRecordRepository(db)
        self.book_repo = BookRepository(db)
        self.profile_repo = ProfileRepository(db)
        self.notifications = NotificationService(db)

    # ==========================================
    # Issue
    # ==========================================

    async def issue_book(self, staff: Principal, data: IssueRequest) -> BorrowRecordDetail:
        """
        Empresta um livro a um membro.

        Fluxo:
            1. Verifica se o livro existe e tem exemplar disponível
            2. Verifica se o membro existe
            3. Verifica o limite de livros do plano do membro
            4. Cria o BorrowRecord e decrementa available_copies (mesma unit of work)

        Raises:
            NotFoundOrConflict: Livro ou membro não encontrado
            OutOfStock: Nenhum exemplar disponível
            LimitExceeded: Membro já atingiu o limite do plano
        """
        book = await self.book_repo.get_by_id(data.book_id)
        if not book:
            raise NotFoundOrConflict("Livro não encontrado")

        if book.available_copies <= 0:
            logger.info(f"Empréstimo recusado: livro {book.id} sem exemplares")
            raise OutOfStock()

        member = await self.profile_repo.get_by_id(data.member_id)
        if not member:
            raise NotFoundOrConflict("Membro não encontrado")

        max_books, _ = plan_limits(member)
        issued_count = await self.borrow_repo.count_issued_by_member(member.id)
        if issued_count >= max_books:
            logger.info(f"Empréstimo recusado: membro {member.id} com {issued_count}/{max_books} livros")
            raise LimitExceeded(
                f"Membro já possui {issued_count} livro(s) emprestado(s). "
                f"Limite do plano: {max_books}."
            )

        now = utcnow()
        async with unit_of_work(self.db):
            record = BorrowRecord(
                book_id=book.id,
                member_id=member.id,
                issued_by=staff.user_id,
                issue_date=now,
                due_date=now + timedelta(days=data.lending_days),
                status=BorrowStatus.ISSUED,
                fine_amount=Decimal("0.00"),
                renewal_count=0,
                max_renewals=DEFAULT_MAX_RENEWALS,
            )
            self.db.add(record)
            book.available_copies -= 1
            await self.db.flush()

        await cache_service.invalidate_availability(book.id)
        logger.info(
            f"Livro {book.id} emprestado ao membro {member.id} até {record.due_date.isoformat()}"
        )
        return BorrowRecordDetail.from_record(record, book=book, member=member, now=now)

    # ==========================================
    # Return
    # ==========================================

    async def return_book(self, record_id: UUID) -> ReturnResponse:
        """
        Registra a devolução de um empréstimo.

        A multa é fixada aqui: dias inteiros de atraso × multa diária do
        plano do membro. available_copies volta a ser incrementado, sem
        passar do total de exemplares.

        Raises:
            NotFoundOrConflict: Empréstimo não encontrado ou já devolvido
        """
        record = await self.borrow_repo.get_with_relations(record_id)
        if not record or record.status != BorrowStatus.ISSUED:
            raise NotFoundOrConflict("Empréstimo não encontrado ou já devolvido")

        now = utcnow()
        _, fine_per_day = plan_limits(record.member)
        days_overdue, fine = calculate_fine(record.due_date, fine_per_day, now)

        async with unit_of_work(self.db):
            record.status = BorrowStatus.RETURNED
            record.return_date = now
            record.fine_amount = fine
            book = record.book
            if book is not None:
                book.available_copies = min(book.available_copies + 1, book.total_copies)

        await cache_service.invalidate_availability(record.book_id)
        logger.info(f"Empréstimo {record.id} devolvido; atraso {days_overdue} dia(s), multa {fine}")

        if fine > 0:
            message = f"Livro devolvido com {days_overdue} dia(s) de atraso. Multa: R$ {fine:.2f}"
        else:
            message = "Livro devolvido com sucesso. Sem multa."

        return ReturnResponse(
            record=BorrowRecordDetail.from_record(record, now=now),
            days_overdue=days_overdue,
            fine_applied=fine,
            message=message,
        )

    # ==========================================
    # Renew
    # ==========================================

    async def renew(self, principal: Principal, record_id: UUID) -> RenewResponse:
        """
        Renovação direta pelo próprio membro.

        Regras (nesta ordem):
            1. Empréstimo deve pertencer ao membro e estar emitido
            2. renewal_count < max_renewals
            3. Não pode estar atrasado (agora <= due_date)

        Ação:
            - due_date += 14 dias
            - renewal_count += 1
            - notificação renewal_approved ao membro

        Raises:
            NotFoundOrConflict: Empréstimo não encontrado para este membro
            RenewalLimitReached: Sem renovações restantes
            AlreadyOverdue: Empréstimo já venceu
        """
        record = await self.borrow_repo.get_issued_for_member(record_id, principal.user_id)
        if not record:
            raise NotFoundOrConflict("Empréstimo não encontrado ou não pertence a você")

        if record.renewal_count >= record.max_renewals:
            raise RenewalLimitReached(
                f"Limite de renovações atingido (máximo: {record.max_renewals})"
            )

        now = utcnow()
        if record.is_overdue(now):
            raise AlreadyOverdue()

        previous_due_date = record.due_date
        new_due_date = as_utc(previous_due_date) + timedelta(days=RENEWAL_PERIOD_DAYS)

        async with unit_of_work(self.db):
            record.due_date = new_due_date
            record.renewal_count += 1
            await self.notifications.notify(
                user_id=record.member_id,
                type=NotificationType.RENEWAL_APPROVED,
                title="Renovação confirmada",
                message=(
                    f'Seu livro "{record.book.title}" foi renovado. '
                    f"Nova data de devolução: {format_date(new_due_date)}"
                ),
                related_id=record.id,
            )

        logger.info(f"Empréstimo {record.id} renovado até {new_due_date.isoformat()}")
        return RenewResponse(
            record_id=record.id,
            previous_due_date=previous_due_date,
            new_due_date=new_due_date,
            renewals_remaining=record.renewals_remaining,
            message=f"Empréstimo renovado. Nova data de devolução: {format_date(new_due_date)}",
        )

    # ==========================================
    # Get / List
    # ==========================================

    async def get_record_detail(self, principal: Principal, record_id: UUID) -> BorrowRecordDetail:
        """
        Busca empréstimo com detalhes.

        Raises:
            NotFoundOrConflict: Empréstimo não encontrado
            AuthorizationError: Membro tentando ver empréstimo de outro
        """
        record = await self.borrow_repo.get_with_relations(record_id)
        if not record:
            raise NotFoundOrConflict("Empréstimo não encontrado")
        if not principal.is_staff and record.member_id != principal.user_id:
            raise AuthorizationError("Este empréstimo não pertence a você")
        return BorrowRecordDetail.from_record(record)

    async def list_records(
        self,
        member_id: UUID | None = None,
        book_id: UUID | None = None,
        status: BorrowStatus | None = None,
        page: int = 1,
        page_size: int = 20,
    ) -> PaginatedResponse[BorrowRecordDetail]:
        records, total = await self.borrow_repo.search(
            member_id=member_id,
            book_id=book_id,
            status=status,
            page=page,
            page_size=page_size,
        )
        now = utcnow()
        items = [BorrowRecordDetail.from_record(r, now=now) for r in records]
        return PaginatedResponse.create(items=items, total=total, page=page, page_size=page_size)

    async def my_records(self, principal: Principal) -> list[BorrowRecordDetail]:
        """Empréstimos do próprio membro, mais recentes primeiro."""
        return await self.member_history(principal.user_id)

    async def member_history(self, member_id: UUID) -> list[BorrowRecordDetail]:
        records = await self.borrow_repo.list_by_member(member_id)
        now = utcnow()
        return [BorrowRecordDetail.from_record(r, now=now) for r in records]
