"""
Service do fluxo de solicitações (extensão e renovação).

Protocolo comum às duas:
    1. O membro submete uma solicitação pendente sobre o próprio empréstimo
    2. A equipe aprova ou rejeita; a primeira decisão vence
    3. Na aprovação, o prazo do empréstimo é alterado
    4. O membro é notificado em cada etapa

Atualização da solicitação, do empréstimo e a notificação são gravadas
juntas (unit of work).
"""

import logging
from datetime import datetime, timedelta
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from library_portal.core.exceptions import (
    AlreadyOverdue,
    AlreadyPending,
    InvalidRange,
    NotFoundOrConflict,
    RenewalLimitReached,
)
from library_portal.core.timeutils import as_utc, utcnow
from library_portal.db.unit_of_work import unit_of_work
from library_portal.models.borrow import BorrowRecord
from library_portal.models.enums import (
    BorrowStatus,
    NotificationType,
    RequestKind,
    RequestStatus,
)
from library_portal.repositories.borrow import BorrowRecordRepository
from library_portal.repositories.request import BorrowRequest, BorrowRequestRepository
from library_portal.schemas.auth import Principal
from library_portal.schemas.borrow import RENEWAL_PERIOD_DAYS
from library_portal.schemas.request import (
    MAX_EXTENSION_DAYS,
    MIN_EXTENSION_DAYS,
    DecisionRequest,
    DecisionResponse,
    ExtensionSubmit,
    RenewalSubmit,
    RequestDetail,
    SubmitResponse,
)
from library_portal.services.notification import NotificationService, format_date

logger = logging.getLogger(__name__)

KIND_LABELS = {
    RequestKind.EXTENSION: "extensão",
    RequestKind.RENEWAL: "renovação",
}

DECISION_TYPES = {
    (RequestKind.EXTENSION, RequestStatus.APPROVED): NotificationType.EXTENSION_APPROVED,
    (RequestKind.EXTENSION, RequestStatus.REJECTED): NotificationType.EXTENSION_REJECTED,
    (RequestKind.RENEWAL, RequestStatus.APPROVED): NotificationType.RENEWAL_APPROVED,
    (RequestKind.RENEWAL, RequestStatus.REJECTED): NotificationType.RENEWAL_REJECTED,
}


class RequestService:
    """Service para solicitações de extensão e renovação."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.borrow_repo = BorrowRecordRepository(db)
        self.extension_repo = BorrowRequestRepository(RequestKind.EXTENSION, db)
        self.renewal_repo = BorrowRequestRepository(RequestKind.RENEWAL, db)
        self.notifications = NotificationService(db)

    def _repo(self, kind: RequestKind) -> BorrowRequestRepository:
        return self.extension_repo if kind == RequestKind.EXTENSION else self.renewal_repo

    # ==========================================
    # Submit
    # ==========================================

    async def _get_own_issued_record(self, principal: Principal, record_id: UUID) -> BorrowRecord:
        record = await self.borrow_repo.get_issued_for_member(record_id, principal.user_id)
        if not record:
            raise NotFoundOrConflict("Empréstimo não encontrado ou não está ativo")
        return record

    async def _ensure_no_pending(self, kind: RequestKind, record: BorrowRecord) -> None:
        if await self._repo(kind).get_pending_for_record(record.id):
            raise AlreadyPending(
                f"Já existe uma solicitação de {KIND_LABELS[kind]} pendente para este empréstimo"
            )

    async def submit_extension(self, principal: Principal, data: ExtensionSubmit) -> SubmitResponse:
        """
        Submete pedido de extensão de prazo.

        Raises:
            InvalidRange: requested_days fora de 1 a 30
            NotFoundOrConflict: Empréstimo não é do membro ou não está emitido
            AlreadyPending: Já há extensão pendente para o empréstimo
        """
        if not MIN_EXTENSION_DAYS <= data.requested_days <= MAX_EXTENSION_DAYS:
            raise InvalidRange(
                f"Dias solicitados devem estar entre {MIN_EXTENSION_DAYS} e {MAX_EXTENSION_DAYS}"
            )

        record = await self._get_own_issued_record(principal, data.borrow_record_id)
        await self._ensure_no_pending(RequestKind.EXTENSION, record)

        async with unit_of_work(self.db):
            request = await self.extension_repo.create(
                borrow_record_id=record.id,
                member_id=principal.user_id,
                requested_days=data.requested_days,
                reason=data.reason,
                status=RequestStatus.PENDING,
            )
            await self.notifications.notify(
                user_id=principal.user_id,
                type=NotificationType.EXTENSION_REQUESTED,
                title="Pedido de extensão enviado",
                message=(
                    f'Seu pedido de extensão para "{record.book.title}" '
                    f"({data.requested_days} dias) foi enviado e aguarda aprovação."
                ),
                related_id=request.id,
            )

        logger.info(f"Extensão {request.id} solicitada para o empréstimo {record.id}")
        return SubmitResponse(request_id=request.id)

    async def submit_renewal(self, principal: Principal, data: RenewalSubmit) -> SubmitResponse:
        """
        Submete pedido de renovação.

        Raises:
            NotFoundOrConflict: Empréstimo não é do membro ou não está emitido
            RenewalLimitReached: Sem renovações restantes
            AlreadyOverdue: Empréstimo já venceu
            AlreadyPending: Já há renovação pendente para o empréstimo
        """
        record = await self._get_own_issued_record(principal, data.borrow_record_id)

        if record.renewal_count >= record.max_renewals:
            raise RenewalLimitReached(
                f"Limite de renovações atingido (máximo: {record.max_renewals})"
            )
        if record.is_overdue(utcnow()):
            raise AlreadyOverdue()

        await self._ensure_no_pending(RequestKind.RENEWAL, record)

        async with unit_of_work(self.db):
            request = await self.renewal_repo.create(
                borrow_record_id=record.id,
                member_id=principal.user_id,
                reason=data.reason,
                status=RequestStatus.PENDING,
            )
            await self.notifications.notify(
                user_id=principal.user_id,
                type=NotificationType.RENEWAL_REQUESTED,
                title="Pedido de renovação enviado",
                message=(
                    f'Seu pedido de renovação para "{record.book.title}" '
                    f"foi enviado e aguarda aprovação."
                ),
                related_id=request.id,
            )

        logger.info(f"Renovação {request.id} solicitada para o empréstimo {record.id}")
        return SubmitResponse(request_id=request.id)

    # ==========================================
    # Decide
    # ==========================================

    async def decide_extension(
        self,
        staff: Principal,
        request_id: UUID,
        data: DecisionRequest,
    ) -> DecisionResponse:
        return await self._decide(RequestKind.EXTENSION, staff, request_id, data)

    async def decide_renewal(
        self,
        staff: Principal,
        request_id: UUID,
        data: DecisionRequest,
    ) -> DecisionResponse:
        return await self._decide(RequestKind.RENEWAL, staff, request_id, data)

    def _apply_approval(self, kind: RequestKind, request: BorrowRequest, record: BorrowRecord) -> datetime:
        """Altera o prazo do empréstimo e retorna a nova due_date."""
        if kind == RequestKind.EXTENSION:
            days = request.requested_days
        else:
            if record.renewal_count >= record.max_renewals:
                raise RenewalLimitReached(
                    f"Limite de renovações atingido (máximo: {record.max_renewals})"
                )
            days = RENEWAL_PERIOD_DAYS
            record.renewal_count += 1

        record.due_date = as_utc(record.due_date) + timedelta(days=days)
        return record.due_date

    async def _decide(
        self,
        kind: RequestKind,
        staff: Principal,
        request_id: UUID,
        data: DecisionRequest,
    ) -> DecisionResponse:
        """
        Aprova ou rejeita uma solicitação pendente.

        Raises:
            NotFoundOrConflict: Solicitação inexistente ou já processada;
                empréstimo não está mais emitido (na aprovação)
            RenewalLimitReached: Renovação aprovada sem renovações restantes
        """
        request = await self._repo(kind).get_with_relations(request_id)
        if not request or not request.is_pending:
            raise NotFoundOrConflict("Solicitação não encontrada ou já processada")

        record = request.borrow_record
        decision = data.decision
        label = KIND_LABELS[kind]
        book_title = record.book.title if record and record.book else "livro"
        new_due_date = None

        async with unit_of_work(self.db):
            if decision == RequestStatus.APPROVED:
                if record is None or record.status != BorrowStatus.ISSUED:
                    raise NotFoundOrConflict("Empréstimo não está mais ativo")
                new_due_date = self._apply_approval(kind, request, record)
                title = f"Pedido de {label} aprovado"
                message = (
                    f'Seu pedido de {label} para "{book_title}" foi aprovado. '
                    f"Nova data de devolução: {format_date(new_due_date)}"
                )
            else:
                title = f"Pedido de {label} rejeitado"
                message = f'Seu pedido de {label} para "{book_title}" foi rejeitado.'
                if data.reason:
                    message += f" Motivo: {data.reason}"

            request.status = decision
            request.librarian_id = staff.user_id
            request.librarian_reason = data.reason
            request.processed_at = utcnow()

            await self.notifications.notify(
                user_id=request.member_id,
                type=DECISION_TYPES[(kind, decision)],
                title=title,
                message=message,
                related_id=request.id,
            )

        logger.info(f"Solicitação de {label} {request.id} {decision.value} por {staff.user_id}")
        return DecisionResponse(status=decision, new_due_date=new_due_date)

    # ==========================================
    # Listagens
    # ==========================================

    async def list_requests(
        self,
        kind: RequestKind,
        status: RequestStatus | None = RequestStatus.PENDING,
    ) -> list[RequestDetail]:
        """Solicitações de um tipo para a equipe (padrão: pendentes)."""
        requests = await self._repo(kind).list_by_status(status)
        return [RequestDetail.from_request(r) for r in requests]

    async def my_requests(self, principal: Principal) -> list[RequestDetail]:
        """Solicitações do próprio membro, dos dois tipos, mais recentes primeiro."""
        extensions = await self.extension_repo.list_by_member(principal.user_id)
        renewals = await self.renewal_repo.list_by_member(principal.user_id)
        items = [RequestDetail.from_request(r) for r in [*extensions, *renewals]]
        return sorted(items, key=lambda item: item.created_at, reverse=True)
