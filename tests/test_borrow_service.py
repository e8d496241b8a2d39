"""
Testes unitários do BorrowService (emissão, devolução e renovação).
"""

import uuid
from datetime import timedelta
from decimal import Decimal
from unittest.mock import patch

import pytest

from library_portal.core.exceptions import (
    AlreadyOverdue,
    AuthorizationError,
    LimitExceeded,
    NotFoundOrConflict,
    OutOfStock,
    RenewalLimitReached,
)
from library_portal.models.enums import AppRole, BorrowStatus, NotificationType
from library_portal.schemas.borrow import (
    DEFAULT_LENDING_DAYS,
    BorrowRecordDetail,
    IssueRequest,
    calculate_fine,
)
from library_portal.services.borrow import BorrowService

from factories import NOW, make_book, make_plan, make_profile, make_record, principal_for


# ==========================================
# Fine arithmetic
# ==========================================

class TestCalculateFine:
    """Multa = dias inteiros de atraso × multa diária."""

    def test_returned_on_time_has_no_fine(self):
        days, fine = calculate_fine(NOW, Decimal("5.00"), NOW - timedelta(hours=3))
        assert days == 0
        assert fine == Decimal("0.00")

    def test_partial_day_is_truncated(self):
        days, fine = calculate_fine(NOW, Decimal("5.00"), NOW + timedelta(days=1, hours=23))
        assert days == 1
        assert fine == Decimal("5.00")

    def test_uses_plan_rate(self):
        days, fine = calculate_fine(NOW, Decimal("2.50"), NOW + timedelta(days=4))
        assert days == 4
        assert fine == Decimal("10.00")


# ==========================================
# Issue
# ==========================================

class TestIssueBook:
    """Testes para BorrowService.issue_book."""

    @pytest.mark.anyio
    async def test_issue_creates_record_and_decrements_stock(self, mock_db, staff_principal):
        book = make_book(total_copies=3, available_copies=2)
        member = make_profile(AppRole.MEMBER)
        service = BorrowService(mock_db)

        with patch.object(service.book_repo, "get_by_id", return_value=book), \
             patch.object(service.profile_repo, "get_by_id", return_value=member), \
             patch.object(service.borrow_repo, "count_issued_by_member", return_value=0), \
             patch("library_portal.services.borrow.utcnow", return_value=NOW):
            result = await service.issue_book(
                staff_principal,
                IssueRequest(book_id=book.id, member_id=member.id),
            )

        assert isinstance(result, BorrowRecordDetail)
        assert result.status == BorrowStatus.ISSUED
        assert result.due_date == NOW + timedelta(days=DEFAULT_LENDING_DAYS)
        assert result.issued_by == staff_principal.user_id
        assert result.renewal_count == 0
        assert result.max_renewals == 2
        assert result.fine_amount == Decimal("0.00")
        assert book.available_copies == 1
        mock_db.add.assert_called_once()
        mock_db.commit.assert_awaited_once()

    @pytest.mark.anyio
    async def test_issue_out_of_stock(self, mock_db, staff_principal):
        book = make_book(total_copies=1, available_copies=0)
        service = BorrowService(mock_db)

        with patch.object(service.book_repo, "get_by_id", return_value=book):
            with pytest.raises(OutOfStock) as exc_info:
                await service.issue_book(
                    staff_principal,
                    IssueRequest(book_id=book.id, member_id=uuid.uuid4()),
                )

        assert exc_info.value.status_code == 400
        assert book.available_copies == 0
        mock_db.commit.assert_not_awaited()

    @pytest.mark.anyio
    async def test_issue_missing_member(self, mock_db, staff_principal):
        book = make_book()
        service = BorrowService(mock_db)

        with patch.object(service.book_repo, "get_by_id", return_value=book), \
             patch.object(service.profile_repo, "get_by_id", return_value=None):
            with pytest.raises(NotFoundOrConflict) as exc_info:
                await service.issue_book(
                    staff_principal,
                    IssueRequest(book_id=book.id, member_id=uuid.uuid4()),
                )

        assert exc_info.value.status_code == 404

    @pytest.mark.anyio
    async def test_issue_respects_plan_limit(self, mock_db, staff_principal):
        book = make_book()
        member = make_profile(AppRole.MEMBER, plan=make_plan(max_books_allowed=1))
        service = BorrowService(mock_db)

        with patch.object(service.book_repo, "get_by_id", return_value=book), \
             patch.object(service.profile_repo, "get_by_id", return_value=member), \
             patch.object(service.borrow_repo, "count_issued_by_member", return_value=1):
            with pytest.raises(LimitExceeded):
                await service.issue_book(
                    staff_principal,
                    IssueRequest(book_id=book.id, member_id=member.id),
                )

        assert book.available_copies == 2

    @pytest.mark.anyio
    async def test_issue_default_limit_without_plan(self, mock_db, staff_principal):
        book = make_book()
        member = make_profile(AppRole.MEMBER)
        service = BorrowService(mock_db)

        with patch.object(service.book_repo, "get_by_id", return_value=book), \
             patch.object(service.profile_repo, "get_by_id", return_value=member), \
             patch.object(service.borrow_repo, "count_issued_by_member", return_value=3):
            with pytest.raises(LimitExceeded):
                await service.issue_book(
                    staff_principal,
                    IssueRequest(book_id=book.id, member_id=member.id),
                )

    def test_lending_days_out_of_range_rejected(self):
        with pytest.raises(ValueError):
            IssueRequest(book_id=uuid.uuid4(), member_id=uuid.uuid4(), lending_days=61)
        with pytest.raises(ValueError):
            IssueRequest(book_id=uuid.uuid4(), member_id=uuid.uuid4(), lending_days=0)


# ==========================================
# Return
# ==========================================

class TestReturnBook:
    """Testes para BorrowService.return_book."""

    @pytest.mark.anyio
    async def test_return_two_days_late_charges_plan_fine(self, mock_db):
        """Emprestado por 14 dias e devolvido no dia 16: multa de 2 × 5,00."""
        issued_at = NOW
        book = make_book(total_copies=3, available_copies=1)
        member = make_profile(AppRole.MEMBER, plan=make_plan(fine_per_day=Decimal("5.00")))
        record = make_record(
            book=book,
            member=member,
            issue_date=issued_at,
            due_date=issued_at + timedelta(days=14),
        )
        service = BorrowService(mock_db)

        with patch.object(service.borrow_repo, "get_with_relations", return_value=record), \
             patch("library_portal.services.borrow.utcnow", return_value=issued_at + timedelta(days=16)):
            result = await service.return_book(record.id)

        assert result.days_overdue == 2
        assert result.fine_applied == Decimal("10.00")
        assert record.status == BorrowStatus.RETURNED
        assert record.fine_amount == Decimal("10.00")
        assert record.return_date == issued_at + timedelta(days=16)
        assert book.available_copies == 2
        assert result.record.display_status == BorrowStatus.RETURNED
        mock_db.commit.assert_awaited_once()

    @pytest.mark.anyio
    async def test_return_on_time_has_no_fine(self, mock_db):
        record = make_record(due_in_days=3)
        service = BorrowService(mock_db)

        with patch.object(service.borrow_repo, "get_with_relations", return_value=record), \
             patch("library_portal.services.borrow.utcnow", return_value=NOW):
            result = await service.return_book(record.id)

        assert result.fine_applied == Decimal("0.00")
        assert "Sem multa" in result.message

    @pytest.mark.anyio
    async def test_return_never_exceeds_total_copies(self, mock_db):
        book = make_book(total_copies=2, available_copies=2)
        record = make_record(book=book)
        service = BorrowService(mock_db)

        with patch.object(service.borrow_repo, "get_with_relations", return_value=record), \
             patch("library_portal.services.borrow.utcnow", return_value=NOW):
            await service.return_book(record.id)

        assert book.available_copies == 2

    @pytest.mark.anyio
    async def test_return_already_returned(self, mock_db):
        record = make_record(status=BorrowStatus.RETURNED)
        service = BorrowService(mock_db)

        with patch.object(service.borrow_repo, "get_with_relations", return_value=record):
            with pytest.raises(NotFoundOrConflict) as exc_info:
                await service.return_book(record.id)

        assert exc_info.value.status_code == 404
        mock_db.commit.assert_not_awaited()

    @pytest.mark.anyio
    async def test_return_missing_record(self, mock_db):
        service = BorrowService(mock_db)

        with patch.object(service.borrow_repo, "get_with_relations", return_value=None):
            with pytest.raises(NotFoundOrConflict):
                await service.return_book(uuid.uuid4())


# ==========================================
# Renew
# ==========================================

class TestRenew:
    """Testes para a renovação direta pelo membro."""

    @pytest.mark.anyio
    async def test_renew_extends_due_date_and_notifies(self, mock_db, member):
        record = make_record(member=member, due_in_days=3, renewal_count=0)
        original_due = record.due_date
        service = BorrowService(mock_db)

        with patch.object(service.borrow_repo, "get_issued_for_member", return_value=record), \
             patch.object(service.notifications, "notify") as notify, \
             patch("library_portal.services.borrow.utcnow", return_value=NOW):
            result = await service.renew(principal_for(member), record.id)

        assert result.success is True
        assert result.new_due_date == original_due + timedelta(days=14)
        assert result.renewals_remaining == 1
        assert record.renewal_count == 1
        notify.assert_awaited_once()
        assert notify.await_args.kwargs["type"] == NotificationType.RENEWAL_APPROVED
        assert notify.await_args.kwargs["user_id"] == member.id

    @pytest.mark.anyio
    async def test_renew_limit_checked_before_overdue(self, mock_db, member):
        record = make_record(member=member, due_in_days=-5, renewal_count=2, max_renewals=2)
        service = BorrowService(mock_db)

        with patch.object(service.borrow_repo, "get_issued_for_member", return_value=record), \
             patch("library_portal.services.borrow.utcnow", return_value=NOW):
            with pytest.raises(RenewalLimitReached):
                await service.renew(principal_for(member), record.id)

    @pytest.mark.anyio
    async def test_renew_overdue_rejected(self, mock_db, member):
        record = make_record(member=member, due_in_days=-1)
        due_before = record.due_date
        service = BorrowService(mock_db)

        with patch.object(service.borrow_repo, "get_issued_for_member", return_value=record), \
             patch("library_portal.services.borrow.utcnow", return_value=NOW):
            with pytest.raises(AlreadyOverdue):
                await service.renew(principal_for(member), record.id)

        assert record.due_date == due_before
        assert record.renewal_count == 0

    @pytest.mark.anyio
    async def test_renew_other_members_record(self, mock_db, member):
        service = BorrowService(mock_db)

        with patch.object(service.borrow_repo, "get_issued_for_member", return_value=None):
            with pytest.raises(NotFoundOrConflict):
                await service.renew(principal_for(member), uuid.uuid4())


# ==========================================
# Read side
# ==========================================

class TestReadSide:
    """Detalhes e status derivado."""

    def test_overdue_is_display_only(self):
        record = make_record(due_in_days=-3)
        detail = BorrowRecordDetail.from_record(record, now=NOW)

        assert record.status == BorrowStatus.ISSUED
        assert detail.display_status == BorrowStatus.OVERDUE
        assert detail.days_overdue == 3
        assert detail.current_fine == Decimal("15.00")
        assert detail.book_title == "Dom Casmurro"
        assert detail.member_name == "Maria Souza"

    @pytest.mark.anyio
    async def test_member_cannot_read_other_record(self, mock_db, member):
        record = make_record(member=make_profile(AppRole.MEMBER, email="outro@email.com"))
        service = BorrowService(mock_db)

        with patch.object(service.borrow_repo, "get_with_relations", return_value=record):
            with pytest.raises(AuthorizationError):
                await service.get_record_detail(principal_for(member), record.id)

    @pytest.mark.anyio
    async def test_staff_reads_any_record(self, mock_db, staff_principal):
        record = make_record()
        service = BorrowService(mock_db)

        with patch.object(service.borrow_repo, "get_with_relations", return_value=record):
            detail = await service.get_record_detail(staff_principal, record.id)

        assert detail.id == record.id
