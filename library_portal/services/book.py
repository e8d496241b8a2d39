"""
Service para lógica de negócio de Book e Category.
"""

import logging
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from library_portal.core.cache import cache_service
from library_portal.core.exceptions import InvalidInputError, NotFoundOrConflict
from library_portal.db.unit_of_work import unit_of_work
from library_portal.models.book import Book, Category
from library_portal.repositories.book import BookRepository, CategoryRepository
from library_portal.repositories.borrow import BorrowRecordRepository
from library_portal.schemas.base import PaginatedResponse
from library_portal.schemas.book import (
    BookAvailability,
    BookCreate,
    BookDetail,
    BookRead,
    BookUpdate,
    CategoryCreate,
)

logger = logging.getLogger(__name__)

REQUIRED_BOOK_FIELDS = ("title", "author", "total_copies", "available_copies")


class BookService:
    """Service para operações de Book."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.book_repo = BookRepository(db)
        self.category_repo = CategoryRepository(db)
        self.borrow_repo = BorrowRecordRepository(db)

    async def get_book(self, book_id: UUID) -> Book:
        """
        Busca livro por ID.

        Raises:
            NotFoundOrConflict: Livro não encontrado
        """
        book = await self.book_repo.get_by_id(book_id)
        if not book:
            raise NotFoundOrConflict("Livro não encontrado")
        return book

    async def get_book_detail(self, book_id: UUID) -> BookDetail:
        book = await self.get_book(book_id)
        active = await self.borrow_repo.count_issued_by_book(book_id)
        return BookDetail(
            **BookRead.model_validate(book).model_dump(),
            category_name=book.category.name if book.category else None,
            active_borrows=active,
        )

    async def list_books(
        self,
        search: str | None = None,
        category_id: UUID | None = None,
        available_only: bool = False,
        page: int = 1,
        page_size: int = 20,
    ) -> PaginatedResponse[BookRead]:
        """Lista livros com filtros e paginação."""
        books, total = await self.book_repo.search(
            text=search,
            category_id=category_id,
            available_only=available_only,
            page=page,
            page_size=page_size,
        )
        return PaginatedResponse.create(
            items=[BookRead.model_validate(b) for b in books],
            total=total,
            page=page,
            page_size=page_size,
        )

    async def _ensure_category(self, category_id: UUID | None) -> None:
        if category_id and not await self.category_repo.get_by_id(category_id):
            raise NotFoundOrConflict("Categoria não encontrada")

    async def create_book(self, data: BookCreate) -> Book:
        """
        Cadastra livro. available_copies assume total_copies quando omitido.

        Raises:
            NotFoundOrConflict: Categoria não encontrada
        """
        await self._ensure_category(data.category_id)

        async with unit_of_work(self.db):
            book = await self.book_repo.create(**data.model_dump())

        await self.db.refresh(book)
        logger.info(f"Livro cadastrado: {book.id} ({book.total_copies} exemplares)")
        return book

    async def update_book(self, book_id: UUID, data: BookUpdate) -> Book:
        """
        Atualiza livro validando 0 <= available_copies <= total_copies.

        O total não pode ficar abaixo dos exemplares emprestados no momento.

        Raises:
            NotFoundOrConflict: Livro ou categoria não encontrado
            InvalidInputError: Campo obrigatório nulo ou contagem de
                exemplares inconsistente
        """
        book = await self.get_book(book_id)
        changes = data.model_dump(exclude_unset=True)

        nulls = [field for field in REQUIRED_BOOK_FIELDS if field in changes and changes[field] is None]
        if nulls:
            raise InvalidInputError(f"Campos obrigatórios não podem ser nulos: {', '.join(nulls)}")

        if "category_id" in changes:
            await self._ensure_category(changes["category_id"])

        total = changes.get("total_copies", book.total_copies)
        available = changes.get("available_copies", book.available_copies)
        if not 0 <= available <= total:
            raise InvalidInputError("Cópias disponíveis devem estar entre 0 e o total de cópias")

        if "total_copies" in changes:
            on_loan = await self.borrow_repo.count_issued_by_book(book_id)
            if total < on_loan:
                raise InvalidInputError(
                    f"Total de cópias não pode ser menor que os {on_loan} exemplar(es) emprestado(s)"
                )

        async with unit_of_work(self.db):
            for key, value in changes.items():
                setattr(book, key, value)

        await self.db.refresh(book)
        await cache_service.invalidate_availability(book.id)
        return book

    async def delete_book(self, book_id: UUID) -> None:
        """
        Remove livro.

        Raises:
            NotFoundOrConflict: Livro não encontrado
            InvalidInputError: Existem empréstimos ativos do livro
        """
        book = await self.get_book(book_id)

        active = await self.borrow_repo.count_issued_by_book(book_id)
        if active:
            raise InvalidInputError(
                f"Não é possível remover livro com {active} empréstimo(s) ativo(s)"
            )

        async with unit_of_work(self.db):
            await self.book_repo.delete(book)

        await cache_service.invalidate_availability(book_id)
        logger.info(f"Livro removido: {book_id}")

    # ==========================================
    # Availability check
    # ==========================================

    async def check_availability(self, book_id: UUID) -> BookAvailability:
        """
        Verifica disponibilidade de um livro para empréstimo.

        Se não houver exemplar disponível, informa a menor due_date entre
        os empréstimos ativos. O resultado fica em cache por alguns segundos.

        Raises:
            NotFoundOrConflict: Livro não encontrado
        """
        cached = await cache_service.get_availability(book_id)
        if cached:
            return BookAvailability.model_validate(cached)

        book = await self.get_book(book_id)
        expected_due_date = None
        if book.available_copies <= 0:
            expected_due_date = await self.borrow_repo.get_earliest_due_date_by_book(book_id)

        availability = BookAvailability(
            book_id=book.id,
            available=book.available_copies > 0,
            available_copies=book.available_copies,
            total_copies=book.total_copies,
            expected_due_date=expected_due_date,
        )
        await cache_service.set_availability(book_id, availability.model_dump(mode="json"))
        return availability


class CategoryService:
    """Service para operações de Category."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.repo = CategoryRepository(db)
        self.book_repo = BookRepository(db)

    async def list_categories(self) -> list[Category]:
        return await self.repo.list_all()

    async def create(self, data: CategoryCreate) -> Category:
        """
        Cria categoria.

        Raises:
            InvalidInputError: Nome já existe
        """
        if await self.repo.get_by_name(data.name):
            raise InvalidInputError("Categoria já existe")

        async with unit_of_work(self.db):
            category = await self.repo.create(name=data.name, description=data.description)

        await self.db.refresh(category)
        return category

    async def delete(self, category_id: UUID) -> None:
        """
        Remove categoria sem livros.

        Raises:
            NotFoundOrConflict: Categoria não encontrada
            InvalidInputError: Há livros na categoria
        """
        category = await self.repo.get_by_id(category_id)
        if not category:
            raise NotFoundOrConflict("Categoria não encontrada")

        if await self.book_repo.count_by_category(category_id):
            raise InvalidInputError("Não é possível remover categoria com livros")

        async with unit_of_work(self.db):
            await self.repo.delete(category)
