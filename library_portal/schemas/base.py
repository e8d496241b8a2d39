"""
Schemas compartilhados: configuração comum, paginação e envelopes de resposta.
"""

import math
from datetime import datetime
from typing import Generic, List, TypeVar

from pydantic import BaseModel, ConfigDict

T = TypeVar("T")


class BaseSchema(BaseModel):
    """Lê atributos de objetos ORM e remove espaços nas pontas das strings."""
    model_config = ConfigDict(
        from_attributes=True,
        str_strip_whitespace=True,
    )


class TimestampSchema(BaseSchema):
    created_at: datetime
    updated_at: datetime


class PaginatedResponse(BaseModel, Generic[T]):
    """
    Página de resultados de uma listagem.

    Exemplo:
        GET /api/v1/books?page=2&page_size=20 -> PaginatedResponse[BookRead]
    """
    items: List[T]
    total: int
    page: int
    page_size: int
    pages: int

    model_config = ConfigDict(from_attributes=True)

    @classmethod
    def create(
        cls,
        items: List[T],
        total: int,
        page: int,
        page_size: int,
    ) -> "PaginatedResponse[T]":
        """Monta a página calculando o número total de páginas."""
        return cls(
            items=items,
            total=total,
            page=page,
            page_size=page_size,
            pages=math.ceil(total / page_size) if page_size > 0 else 0,
        )


class ErrorResponse(BaseModel):
    """
    Corpo padrão de erro.

    Todas as falhas (validação, autenticação, regra de negócio, banco)
    são renderizadas neste formato pelos exception handlers.
    """
    error: str
    code: str


class SuccessResponse(BaseModel):
    """Base das respostas de mutação (`{"success": true, ...}`)."""
    success: bool = True
