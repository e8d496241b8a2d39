"""
Service de notificações: envio, varreduras e caixa de entrada.

Varreduras (disparadas externamente, ver `library_portal.jobs.check_overdue`):
    - overdue: empréstimos emitidos com due_date < agora
    - due_reminder: empréstimos com agora <= due_date <= agora + 2 dias
    - low_stock: livros com 0 < available_copies < 3, para cada admin

Notificações de varredura levam uma dedup_key
"{tipo}:{usuario}:{relacionado}:{AAAA-MM-DD}", então rodar a varredura
mais de uma vez no mesmo dia (UTC) não duplica avisos.
"""

import logging
from datetime import datetime, timedelta
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from library_portal.core.exceptions import NotFoundOrConflict
from library_portal.core.timeutils import as_utc, days_until, utcnow, whole_days_between
from library_portal.db.unit_of_work import unit_of_work
from library_portal.models.enums import AppRole, NotificationType
from library_portal.models.notification import Notification
from library_portal.repositories.book import BookRepository
from library_portal.repositories.borrow import BorrowRecordRepository
from library_portal.repositories.notification import NotificationRepository
from library_portal.repositories.profile import ProfileRepository
from library_portal.schemas.auth import Principal
from library_portal.schemas.notification import (
    DUE_SOON_WINDOW_DAYS,
    LOW_STOCK_THRESHOLD,
    MarkReadResponse,
    NotificationInbox,
    NotificationRead,
    SweepResult,
)

logger = logging.getLogger(__name__)


def make_dedup_key(
    type: NotificationType,
    user_id: UUID,
    related_id: UUID | None,
    now: datetime,
) -> str:
    return f"{type.value}:{user_id}:{related_id}:{as_utc(now).date().isoformat()}"


def format_date(value: datetime) -> str:
    return as_utc(value).strftime("%d/%m/%Y")


class NotificationService:
    """Service para notificações."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.notification_repo = NotificationRepository(db)
        self.borrow_repo = BorrowRecordRepository(db)
        self.book_repo = BookRepository(db)
        self.profile_repo = ProfileRepository(db)

    # ==========================================
    # Envio
    # ==========================================

    async def notify(
        self,
        user_id: UUID,
        type: NotificationType,
        title: str,
        message: str,
        related_id: UUID | None = None,
        dedup_key: str | None = None,
    ) -> Notification | None:
        """
        Cria uma notificação para o usuário (sem commit).

        Returns:
            A notificação criada, ou None se já existe uma com a mesma dedup_key
        """
        if dedup_key and await self.notification_repo.dedup_key_exists(dedup_key):
            logger.debug(f"Notificação já enviada: {dedup_key}")
            return None

        return await self.notification_repo.create(
            user_id=user_id,
            type=type,
            title=title,
            message=message,
            related_id=related_id,
            dedup_key=dedup_key,
            read=False,
        )

    # ==========================================
    # Varreduras
    # ==========================================

    async def sweep_overdue(self, now: datetime) -> tuple[int, int]:
        """
        Avisa membros com empréstimos vencidos.

        Returns:
            Tupla (empréstimos encontrados, notificações criadas)
        """
        records = await self.borrow_repo.get_overdue(now)
        created = 0
        for record in records:
            days = whole_days_between(record.due_date, now)
            notification = await self.notify(
                user_id=record.member_id,
                type=NotificationType.OVERDUE,
                title="Livro em atraso",
                message=(
                    f'Seu livro "{record.book.title}" está com {days} dia(s) de atraso. '
                    f"Devolva-o para evitar multas adicionais."
                ),
                related_id=record.id,
                dedup_key=make_dedup_key(NotificationType.OVERDUE, record.member_id, record.id, now),
            )
            created += notification is not None
        return len(records), created

    async def sweep_due_soon(self, now: datetime) -> tuple[int, int]:
        """Lembra membros de empréstimos que vencem nos próximos 2 dias."""
        records = await self.borrow_repo.get_due_between(
            now, now + timedelta(days=DUE_SOON_WINDOW_DAYS)
        )
        created = 0
        for record in records:
            days = days_until(record.due_date, now)
            notification = await self.notify(
                user_id=record.member_id,
                type=NotificationType.DUE_REMINDER,
                title="Devolução próxima",
                message=(
                    f'Seu livro "{record.book.title}" vence em {days} dia(s). '
                    f"Data de devolução: {format_date(record.due_date)}"
                ),
                related_id=record.id,
                dedup_key=make_dedup_key(NotificationType.DUE_REMINDER, record.member_id, record.id, now),
            )
            created += notification is not None
        return len(records), created

    async def sweep_low_stock(self, now: datetime) -> tuple[int, int]:
        """Avisa cada administrador sobre livros com poucos exemplares."""
        books = await self.book_repo.get_low_stock(LOW_STOCK_THRESHOLD)
        if not books:
            return 0, 0

        admins = await self.profile_repo.list_by_role(AppRole.ADMIN)
        created = 0
        for book in books:
            copies = "exemplar disponível" if book.available_copies == 1 else "exemplares disponíveis"
            for admin in admins:
                notification = await self.notify(
                    user_id=admin.id,
                    type=NotificationType.LOW_STOCK,
                    title="Estoque baixo",
                    message=f'O livro "{book.title}" tem apenas {book.available_copies} {copies}.',
                    related_id=book.id,
                    dedup_key=make_dedup_key(NotificationType.LOW_STOCK, admin.id, book.id, now),
                )
                created += notification is not None
        return len(books), created

    async def run_all(self) -> SweepResult:
        """
        Executa as três varreduras em uma única unit of work.

        Returns:
            SweepResult com contadores
        """
        now = utcnow()
        async with unit_of_work(self.db):
            overdue_count, overdue_created = await self.sweep_overdue(now)
            upcoming_count, upcoming_created = await self.sweep_due_soon(now)
            low_stock_count, low_stock_created = await self.sweep_low_stock(now)

        result = SweepResult(
            overdue_count=overdue_count,
            upcoming_count=upcoming_count,
            low_stock_count=low_stock_count,
            notifications_created=overdue_created + upcoming_created + low_stock_created,
        )
        logger.info(
            f"Varredura concluída: {overdue_count} atrasados, {upcoming_count} a vencer, "
            f"{low_stock_count} com estoque baixo, {result.notifications_created} notificações"
        )
        return result

    # ==========================================
    # Caixa de entrada
    # ==========================================

    async def inbox(self, principal: Principal, unread_only: bool = False) -> NotificationInbox:
        items = await self.notification_repo.list_for_user(principal.user_id, unread_only)
        unread = await self.notification_repo.count_unread(principal.user_id)
        return NotificationInbox(
            items=[NotificationRead.model_validate(n) for n in items],
            unread_count=unread,
        )

    async def _get_own(self, principal: Principal, notification_id: UUID) -> Notification:
        notification = await self.notification_repo.get_for_user(notification_id, principal.user_id)
        if not notification:
            raise NotFoundOrConflict("Notificação não encontrada")
        return notification

    async def mark_read(self, principal: Principal, notification_id: UUID) -> NotificationRead:
        """
        Marca uma notificação como lida.

        Raises:
            NotFoundOrConflict: não existe ou pertence a outro usuário
        """
        async with unit_of_work(self.db):
            notification = await self._get_own(principal, notification_id)
            notification.read = True
        return NotificationRead.model_validate(notification)

    async def mark_all_read(self, principal: Principal) -> MarkReadResponse:
        async with unit_of_work(self.db):
            updated = await self.notification_repo.mark_all_read(principal.user_id)
        return MarkReadResponse(updated=updated)

    async def delete(self, principal: Principal, notification_id: UUID) -> None:
        async with unit_of_work(self.db):
            notification = await self._get_own(principal, notification_id)
            await self.notification_repo.delete(notification)
