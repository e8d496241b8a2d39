"""
Testes unitários de catálogo (livros, categorias) e planos/membros.
"""

import uuid
from datetime import date, timedelta
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from library_portal.core.exceptions import InvalidInputError, NotFoundOrConflict
from library_portal.models.enums import AppRole
from library_portal.schemas.book import BookCreate, BookUpdate, CategoryCreate
from library_portal.schemas.membership import PlanUpdate
from library_portal.services.book import BookService, CategoryService
from library_portal.services.membership import (
    MemberService,
    MembershipPlanService,
    membership_period,
)

from factories import NOW, make_book, make_category, make_plan, make_profile


# ==========================================
# Books
# ==========================================

class TestBookCreate:

    def test_available_defaults_to_total(self):
        data = BookCreate(title="Iracema", author="José de Alencar", total_copies=4)
        assert data.available_copies == 4

    def test_available_above_total_rejected(self):
        with pytest.raises(ValidationError):
            BookCreate(title="Iracema", author="José de Alencar", total_copies=2, available_copies=3)

    @pytest.mark.anyio
    async def test_unknown_category(self, mock_db):
        service = BookService(mock_db)
        data = BookCreate(title="Iracema", author="José de Alencar", category_id=uuid.uuid4())

        with patch.object(service.category_repo, "get_by_id", return_value=None):
            with pytest.raises(NotFoundOrConflict):
                await service.create_book(data)

        mock_db.add.assert_not_called()

    @pytest.mark.anyio
    async def test_create_commits(self, mock_db):
        service = BookService(mock_db)
        data = BookCreate(title="Iracema", author="José de Alencar", total_copies=2)

        book = await service.create_book(data)

        assert book.available_copies == 2
        mock_db.commit.assert_awaited_once()
        mock_db.refresh.assert_awaited_once_with(book)


class TestBookUpdate:

    @pytest.mark.anyio
    async def test_available_above_new_total(self, mock_db):
        book = make_book(total_copies=5, available_copies=4)
        service = BookService(mock_db)

        with patch.object(service.book_repo, "get_by_id", return_value=book):
            with pytest.raises(InvalidInputError):
                await service.update_book(book.id, BookUpdate(total_copies=3))

        assert book.total_copies == 5
        mock_db.commit.assert_not_awaited()

    @pytest.mark.anyio
    async def test_explicit_null_copies_rejected(self, mock_db):
        book = make_book()
        service = BookService(mock_db)

        with patch.object(service.book_repo, "get_by_id", return_value=book):
            with pytest.raises(InvalidInputError):
                await service.update_book(book.id, BookUpdate(available_copies=None))

    @pytest.mark.anyio
    async def test_explicit_null_title_and_author_rejected(self, mock_db):
        book = make_book()
        service = BookService(mock_db)
        data = BookUpdate.model_validate({"title": None, "author": None})

        with patch.object(service.book_repo, "get_by_id", return_value=book):
            with pytest.raises(InvalidInputError) as exc_info:
                await service.update_book(book.id, data)

        assert "title" in exc_info.value.detail
        assert book.title == "Dom Casmurro"
        mock_db.commit.assert_not_awaited()

    @pytest.mark.anyio
    async def test_total_below_copies_on_loan_rejected(self, mock_db):
        book = make_book(total_copies=5, available_copies=1)
        service = BookService(mock_db)

        with patch.object(service.book_repo, "get_by_id", return_value=book), \
             patch.object(service.borrow_repo, "count_issued_by_book", return_value=4):
            with pytest.raises(InvalidInputError):
                await service.update_book(book.id, BookUpdate(total_copies=3))

        assert book.total_copies == 5
        mock_db.commit.assert_not_awaited()

    @pytest.mark.anyio
    async def test_partial_update(self, mock_db):
        book = make_book(total_copies=3, available_copies=2)
        service = BookService(mock_db)

        with patch.object(service.book_repo, "get_by_id", return_value=book), \
             patch.object(service.borrow_repo, "count_issued_by_book", return_value=1):
            updated = await service.update_book(
                book.id, BookUpdate(total_copies=6, available_copies=5)
            )

        assert updated.total_copies == 6
        assert updated.available_copies == 5
        assert updated.title == "Dom Casmurro"
        mock_db.commit.assert_awaited_once()


class TestBookDelete:

    @pytest.mark.anyio
    async def test_refused_with_active_borrows(self, mock_db):
        book = make_book()
        service = BookService(mock_db)

        with patch.object(service.book_repo, "get_by_id", return_value=book), \
             patch.object(service.borrow_repo, "count_issued_by_book", return_value=2):
            with pytest.raises(InvalidInputError) as exc_info:
                await service.delete_book(book.id)

        assert "2 empréstimo(s)" in exc_info.value.detail
        mock_db.delete.assert_not_awaited()

    @pytest.mark.anyio
    async def test_delete(self, mock_db):
        book = make_book()
        service = BookService(mock_db)

        with patch.object(service.book_repo, "get_by_id", return_value=book), \
             patch.object(service.borrow_repo, "count_issued_by_book", return_value=0):
            await service.delete_book(book.id)

        mock_db.delete.assert_awaited_once_with(book)
        mock_db.commit.assert_awaited_once()


class TestAvailability:

    @pytest.mark.anyio
    async def test_available(self, mock_db):
        book = make_book(available_copies=1)
        service = BookService(mock_db)

        with patch.object(service.book_repo, "get_by_id", return_value=book), \
             patch.object(service.borrow_repo, "get_earliest_due_date_by_book") as earliest:
            availability = await service.check_availability(book.id)

        assert availability.available is True
        assert availability.expected_due_date is None
        earliest.assert_not_awaited()

    @pytest.mark.anyio
    async def test_unavailable_reports_earliest_due_date(self, mock_db):
        book = make_book(available_copies=0)
        due = NOW + timedelta(days=3)
        service = BookService(mock_db)

        with patch.object(service.book_repo, "get_by_id", return_value=book), \
             patch.object(service.borrow_repo, "get_earliest_due_date_by_book", return_value=due):
            availability = await service.check_availability(book.id)

        assert availability.available is False
        assert availability.expected_due_date == due


# ==========================================
# Categories
# ==========================================

class TestCategories:

    @pytest.mark.anyio
    async def test_duplicate_name(self, mock_db):
        service = CategoryService(mock_db)

        with patch.object(service.repo, "get_by_name", return_value=make_category()):
            with pytest.raises(InvalidInputError):
                await service.create(CategoryCreate(name="Romance"))

    @pytest.mark.anyio
    async def test_delete_refused_with_books(self, mock_db):
        category = make_category()
        service = CategoryService(mock_db)

        with patch.object(service.repo, "get_by_id", return_value=category), \
             patch.object(service.book_repo, "count_by_category", return_value=1):
            with pytest.raises(InvalidInputError):
                await service.delete(category.id)

        mock_db.delete.assert_not_awaited()

    @pytest.mark.anyio
    async def test_delete_missing(self, mock_db):
        service = CategoryService(mock_db)

        with patch.object(service.repo, "get_by_id", return_value=None):
            with pytest.raises(NotFoundOrConflict):
                await service.delete(uuid.uuid4())


# ==========================================
# Plans and members
# ==========================================

class TestPlans:

    def test_membership_period(self):
        plan = make_plan(duration_days=30)
        period = membership_period(plan, date(2026, 1, 15))
        assert period.start == date(2026, 1, 15)
        assert period.expiry == date(2026, 2, 14)

    @pytest.mark.anyio
    async def test_delete_refused_with_members(self, mock_db):
        plan = make_plan()
        service = MembershipPlanService(mock_db)

        with patch.object(service.repo, "get_by_id", return_value=plan), \
             patch.object(service.profile_repo, "count_by_plan", return_value=4):
            with pytest.raises(InvalidInputError) as exc_info:
                await service.delete(plan.id)

        assert "4 membro(s)" in exc_info.value.detail

    @pytest.mark.anyio
    async def test_rename_to_existing_name(self, mock_db):
        plan = make_plan(name="Básico")
        service = MembershipPlanService(mock_db)

        with patch.object(service.repo, "get_by_id", return_value=plan), \
             patch.object(service.repo, "get_by_name", return_value=make_plan(name="Premium")):
            with pytest.raises(InvalidInputError):
                await service.update(plan.id, PlanUpdate(name="Premium"))


class TestMembers:

    @pytest.mark.anyio
    async def test_assign_plan_sets_period(self, mock_db, member):
        plan = make_plan(name="Premium", duration_days=365, max_books_allowed=8)
        service = MemberService(mock_db)

        with patch.object(service.profile_repo, "get_by_id", return_value=member), \
             patch.object(service.plan_repo, "get_by_id", return_value=plan), \
             patch.object(service.borrow_repo, "count_issued_by_member", return_value=1):
            detail = await service.assign_plan(member.id, plan.id)

        assert member.membership_plan_id == plan.id
        assert member.membership_expiry_date - member.membership_start_date == timedelta(days=365)
        assert detail.membership_plan.name == "Premium"
        assert detail.active_borrows == 1
        mock_db.commit.assert_awaited_once()

    @pytest.mark.anyio
    async def test_assign_unknown_plan(self, mock_db, member):
        service = MemberService(mock_db)

        with patch.object(service.profile_repo, "get_by_id", return_value=member), \
             patch.object(service.plan_repo, "get_by_id", return_value=None):
            with pytest.raises(NotFoundOrConflict):
                await service.assign_plan(member.id, uuid.uuid4())

    @pytest.mark.anyio
    async def test_set_roles(self, mock_db):
        profile = make_profile(AppRole.MEMBER)
        service = MemberService(mock_db)

        with patch.object(service.profile_repo, "get_by_id", return_value=profile), \
             patch.object(service.profile_repo, "replace_roles") as replace_roles:
            await service.set_roles(profile.id, [AppRole.LIBRARIAN, AppRole.MEMBER])

        replace_roles.assert_awaited_once_with(profile, {AppRole.LIBRARIAN, AppRole.MEMBER})
        mock_db.commit.assert_awaited_once()
