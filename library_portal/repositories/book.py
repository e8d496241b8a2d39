"""
Repository para operações de Book e Category no banco de dados.
"""

from uuid import UUID

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from library_portal.models.book import Book, Category
from library_portal.repositories.base import BaseRepository


class CategoryRepository(BaseRepository[Category]):
    """Repository para operações CRUD de Category."""

    def __init__(self, db: AsyncSession):
        super().__init__(Category, db)

    async def get_by_name(self, name: str) -> Category | None:
        result = await self.db.execute(
            select(Category).where(func.lower(Category.name) == name.lower())
        )
        return result.scalar_one_or_none()

    async def list_all(self) -> list[Category]:
        result = await self.db.execute(select(Category).order_by(Category.name))
        return list(result.scalars().all())


class BookRepository(BaseRepository[Book]):
    """Repository para operações CRUD de Book."""

    def __init__(self, db: AsyncSession):
        super().__init__(Book, db)

    async def search(
        self,
        text: str | None = None,
        category_id: UUID | None = None,
        available_only: bool = False,
        page: int = 1,
        page_size: int = 20,
    ) -> tuple[list[Book], int]:
        """
        Busca livros com filtros e paginação.

        Args:
            text: Busca parcial em título, autor ou ISBN
            category_id: Filtro por categoria
            available_only: Apenas livros com exemplar disponível
            page: Número da página
            page_size: Tamanho da página

        Returns:
            Tupla (lista de livros, total)
        """
        query = select(Book)

        if text:
            pattern = f"%{text}%"
            query = query.where(
                or_(
                    Book.title.ilike(pattern),
                    Book.author.ilike(pattern),
                    Book.isbn.ilike(pattern),
                )
            )

        if category_id:
            query = query.where(Book.category_id == category_id)

        if available_only:
            query = query.where(Book.available_copies > 0)

        return await self._paginate(query, Book.title, page, page_size)

    async def count_by_category(self, category_id: UUID) -> int:
        return await self.count(Book.category_id == category_id)

    async def get_low_stock(self, threshold: int) -> list[Book]:
        """Livros com 0 < available_copies < threshold."""
        result = await self.db.execute(
            select(Book)
            .where(
                Book.available_copies > 0,
                Book.available_copies < threshold,
            )
            .order_by(Book.available_copies, Book.title)
        )
        return list(result.scalars().all())
