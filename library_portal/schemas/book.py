"""
Schemas Pydantic para Book e Category.
"""

from datetime import date, datetime
from uuid import UUID

from pydantic import Field, field_validator, model_validator

from library_portal.schemas.base import BaseSchema, TimestampSchema


# ============================================
# Category Schemas
# ============================================

class CategoryCreate(BaseSchema):
    """Schema para criação de categoria."""
    name: str = Field(..., min_length=1, max_length=100, examples=["Ficção"])
    description: str | None = Field(None, max_length=2000)


class CategoryRead(TimestampSchema):
    """Schema para leitura de categoria."""
    id: UUID
    name: str
    description: str | None = None


# ============================================
# Book Schemas
# ============================================

def _validate_year(v: int | None) -> int | None:
    if v is not None and v > date.today().year + 1:
        raise ValueError("Ano de publicação não pode ser no futuro")
    return v


class BookCreate(BaseSchema):
    """
    Schema para cadastro de livro.

    available_copies assume total_copies quando omitido.
    """
    title: str = Field(..., min_length=1, max_length=500, examples=["Dom Casmurro"])
    author: str = Field(..., min_length=1, max_length=200, examples=["Machado de Assis"])
    isbn: str | None = Field(None, max_length=20)
    publisher: str | None = Field(None, max_length=200)
    publication_year: int | None = Field(None, ge=1000, examples=[1899])
    description: str | None = Field(None, max_length=5000)
    cover_image_url: str | None = Field(None, max_length=1000)
    total_copies: int = Field(1, ge=1, le=10000)
    available_copies: int | None = Field(None, ge=0)
    category_id: UUID | None = None

    @field_validator("publication_year")
    @classmethod
    def validate_year(cls, v: int | None) -> int | None:
        return _validate_year(v)

    @model_validator(mode="after")
    def check_copies(self) -> "BookCreate":
        if self.available_copies is None:
            self.available_copies = self.total_copies
        if self.available_copies > self.total_copies:
            raise ValueError("Cópias disponíveis não podem exceder o total de cópias")
        return self


class BookUpdate(BaseSchema):
    """
    Schema para atualização de livro.

    A consistência entre total e disponíveis é validada no service,
    pois depende dos valores atuais.
    """
    title: str | None = Field(None, min_length=1, max_length=500)
    author: str | None = Field(None, min_length=1, max_length=200)
    isbn: str | None = Field(None, max_length=20)
    publisher: str | None = Field(None, max_length=200)
    publication_year: int | None = Field(None, ge=1000)
    description: str | None = Field(None, max_length=5000)
    cover_image_url: str | None = Field(None, max_length=1000)
    total_copies: int | None = Field(None, ge=1, le=10000)
    available_copies: int | None = Field(None, ge=0)
    category_id: UUID | None = None

    @field_validator("publication_year")
    @classmethod
    def validate_year(cls, v: int | None) -> int | None:
        return _validate_year(v)


class BookRead(TimestampSchema):
    """Schema para leitura de livro."""
    id: UUID
    title: str
    author: str
    isbn: str | None = None
    publisher: str | None = None
    publication_year: int | None = None
    description: str | None = None
    cover_image_url: str | None = None
    total_copies: int
    available_copies: int
    category_id: UUID | None = None


class BookDetail(BookRead):
    """Livro com nome da categoria e empréstimos ativos."""
    category_name: str | None = None
    active_borrows: int = 0


class BookAvailability(BaseSchema):
    """
    Disponibilidade de um livro para empréstimo.

    Attributes:
        available: True se há exemplar disponível
        expected_due_date: Menor due_date entre os empréstimos ativos,
            preenchida quando não há exemplar disponível
    """
    book_id: UUID
    available: bool
    available_copies: int
    total_copies: int
    expected_due_date: datetime | None = None
