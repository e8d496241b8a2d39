"""
Testes unitários do NotificationService (varreduras e caixa de entrada).
"""

import uuid
from datetime import timedelta
from unittest.mock import patch

import pytest

from library_portal.core.exceptions import NotFoundOrConflict
from library_portal.models.enums import AppRole, NotificationType
from library_portal.services.notification import NotificationService, make_dedup_key

from factories import (
    NOW,
    make_book,
    make_notification,
    make_profile,
    make_record,
    principal_for,
)


def added(mock_db) -> list:
    return [call.args[0] for call in mock_db.add.call_args_list]


class TestDedupKey:

    def test_same_day_same_key(self):
        user_id, related_id = uuid.uuid4(), uuid.uuid4()
        morning = make_dedup_key(NotificationType.OVERDUE, user_id, related_id, NOW)
        evening = make_dedup_key(
            NotificationType.OVERDUE, user_id, related_id, NOW + timedelta(hours=11)
        )
        assert morning == evening
        assert morning == f"overdue:{user_id}:{related_id}:2026-03-10"

    def test_next_day_new_key(self):
        user_id, related_id = uuid.uuid4(), uuid.uuid4()
        today = make_dedup_key(NotificationType.DUE_REMINDER, user_id, related_id, NOW)
        tomorrow = make_dedup_key(
            NotificationType.DUE_REMINDER, user_id, related_id, NOW + timedelta(days=1)
        )
        assert today != tomorrow


# ==========================================
# Varreduras
# ==========================================

class TestSweeps:
    """Testes das varreduras de atraso, vencimento e estoque."""

    @pytest.mark.anyio
    async def test_overdue_notifies_member(self, mock_db):
        record = make_record(due_in_days=-3.5)
        service = NotificationService(mock_db)

        with patch.object(service.borrow_repo, "get_overdue", return_value=[record]), \
             patch.object(service.notification_repo, "dedup_key_exists", return_value=False):
            found, created = await service.sweep_overdue(NOW)

        assert (found, created) == (1, 1)
        notification = added(mock_db)[0]
        assert notification.user_id == record.member_id
        assert notification.type == NotificationType.OVERDUE
        assert notification.related_id == record.id
        assert "3 dia(s) de atraso" in notification.message
        assert notification.dedup_key == make_dedup_key(
            NotificationType.OVERDUE, record.member_id, record.id, NOW
        )

    @pytest.mark.anyio
    async def test_overdue_skips_already_notified_today(self, mock_db):
        record = make_record(due_in_days=-1)
        service = NotificationService(mock_db)

        with patch.object(service.borrow_repo, "get_overdue", return_value=[record]), \
             patch.object(service.notification_repo, "dedup_key_exists", return_value=True):
            found, created = await service.sweep_overdue(NOW)

        assert (found, created) == (1, 0)
        mock_db.add.assert_not_called()

    @pytest.mark.anyio
    async def test_due_soon_rounds_days_up(self, mock_db):
        record = make_record(due_in_days=1.5)
        service = NotificationService(mock_db)

        with patch.object(service.borrow_repo, "get_due_between", return_value=[record]) as due, \
             patch.object(service.notification_repo, "dedup_key_exists", return_value=False):
            found, created = await service.sweep_due_soon(NOW)

        due.assert_awaited_once_with(NOW, NOW + timedelta(days=2))
        assert (found, created) == (1, 1)
        notification = added(mock_db)[0]
        assert notification.type == NotificationType.DUE_REMINDER
        assert "vence em 2 dia(s)" in notification.message
        assert "12/03/2026" in notification.message

    @pytest.mark.anyio
    async def test_low_stock_notifies_every_admin(self, mock_db):
        book = make_book(available_copies=1)
        admins = [
            make_profile(AppRole.ADMIN, email="a1@biblioteca.com.br"),
            make_profile(AppRole.ADMIN, email="a2@biblioteca.com.br"),
        ]
        service = NotificationService(mock_db)

        with patch.object(service.book_repo, "get_low_stock", return_value=[book]) as low, \
             patch.object(service.profile_repo, "list_by_role", return_value=admins), \
             patch.object(service.notification_repo, "dedup_key_exists", return_value=False):
            found, created = await service.sweep_low_stock(NOW)

        low.assert_awaited_once_with(3)
        assert (found, created) == (1, 2)
        notifications = added(mock_db)
        assert {n.user_id for n in notifications} == {a.id for a in admins}
        assert all(n.type == NotificationType.LOW_STOCK for n in notifications)
        assert "1 exemplar disponível" in notifications[0].message

    @pytest.mark.anyio
    async def test_low_stock_without_books_skips_admin_lookup(self, mock_db):
        service = NotificationService(mock_db)

        with patch.object(service.book_repo, "get_low_stock", return_value=[]), \
             patch.object(service.profile_repo, "list_by_role") as list_by_role:
            assert await service.sweep_low_stock(NOW) == (0, 0)

        list_by_role.assert_not_awaited()

    @pytest.mark.anyio
    async def test_run_all_counts_and_commits_once(self, mock_db):
        service = NotificationService(mock_db)

        with patch.object(service, "sweep_overdue", return_value=(2, 1)) as overdue, \
             patch.object(service, "sweep_due_soon", return_value=(3, 3)), \
             patch.object(service, "sweep_low_stock", return_value=(1, 2)), \
             patch("library_portal.services.notification.utcnow", return_value=NOW):
            result = await service.run_all()

        overdue.assert_awaited_once_with(NOW)
        assert result.success is True
        assert result.overdue_count == 2
        assert result.upcoming_count == 3
        assert result.low_stock_count == 1
        assert result.notifications_created == 6
        mock_db.commit.assert_awaited_once()


# ==========================================
# Caixa de entrada
# ==========================================

class TestInbox:
    """Testes da caixa de entrada."""

    @pytest.mark.anyio
    async def test_inbox_with_unread_count(self, mock_db, member):
        notifications = [make_notification(member.id), make_notification(member.id, read=True)]
        service = NotificationService(mock_db)

        with patch.object(service.notification_repo, "list_for_user", return_value=notifications), \
             patch.object(service.notification_repo, "count_unread", return_value=1):
            inbox = await service.inbox(principal_for(member))

        assert len(inbox.items) == 2
        assert inbox.unread_count == 1

    @pytest.mark.anyio
    async def test_mark_read(self, mock_db, member):
        notification = make_notification(member.id)
        service = NotificationService(mock_db)

        with patch.object(service.notification_repo, "get_for_user", return_value=notification):
            result = await service.mark_read(principal_for(member), notification.id)

        assert result.read is True
        assert notification.read is True
        mock_db.commit.assert_awaited_once()

    @pytest.mark.anyio
    async def test_mark_read_of_someone_else(self, mock_db, member):
        service = NotificationService(mock_db)

        with patch.object(service.notification_repo, "get_for_user", return_value=None):
            with pytest.raises(NotFoundOrConflict):
                await service.mark_read(principal_for(member), uuid.uuid4())

        mock_db.commit.assert_not_awaited()

    @pytest.mark.anyio
    async def test_mark_all_read(self, mock_db, member):
        service = NotificationService(mock_db)

        with patch.object(service.notification_repo, "mark_all_read", return_value=4):
            result = await service.mark_all_read(principal_for(member))

        assert result.updated == 4

    @pytest.mark.anyio
    async def test_delete(self, mock_db, member):
        notification = make_notification(member.id)
        service = NotificationService(mock_db)

        with patch.object(service.notification_repo, "get_for_user", return_value=notification):
            await service.delete(principal_for(member), notification.id)

        mock_db.delete.assert_awaited_once_with(notification)
