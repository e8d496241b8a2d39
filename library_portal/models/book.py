"""
Models do acervo: Category e Book.
"""

import uuid
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import CheckConstraint, ForeignKey, Integer, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from library_portal.db.session import Base
from library_portal.models.base import UUIDMixin, TimestampMixin

if TYPE_CHECKING:
    from library_portal.models.borrow import BorrowRecord


class Category(Base, UUIDMixin, TimestampMixin):
    """Categoria do acervo."""
    __tablename__ = "categories"

    name: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    books: Mapped[List["Book"]] = relationship(
        "Book",
        back_populates="category",
        lazy="raise",
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        return f"<Category {self.name}>"


class Book(Base, UUIDMixin, TimestampMixin):
    """
    Título do acervo com controle agregado de exemplares.

    Invariante: 0 <= available_copies <= total_copies. O empréstimo
    decrementa available_copies e a devolução incrementa.
    """
    __tablename__ = "books"

    title: Mapped[str] = mapped_column(String(500), nullable=False, index=True)
    author: Mapped[str] = mapped_column(String(200), nullable=False, index=True)
    isbn: Mapped[Optional[str]] = mapped_column(String(20), nullable=True, index=True)
    publisher: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    publication_year: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    cover_image_url: Mapped[Optional[str]] = mapped_column(String(1000), nullable=True)
    total_copies: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    available_copies: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    category_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("categories.id", ondelete="RESTRICT"),
        nullable=True,
        index=True,
    )

    category: Mapped[Optional["Category"]] = relationship(
        "Category",
        back_populates="books",
        lazy="selectin",
    )
    borrow_records: Mapped[List["BorrowRecord"]] = relationship(
        "BorrowRecord",
        back_populates="book",
        lazy="raise",
        passive_deletes=True,
    )

    __table_args__ = (
        CheckConstraint(
            "available_copies >= 0 AND available_copies <= total_copies",
            name="ck_books_available_copies_range",
        ),
    )

    def __repr__(self) -> str:
        return f"<Book {self.title}>"
