"""
Endpoints do acervo (Book).

Contratos:
    - GET /books: Lista livros (busca, categoria, só disponíveis)
    - GET /books/{id}: Detalhes do livro
    - GET /books/{id}/availability: Disponibilidade (cache Redis)
    - POST /books: Cadastra livro (equipe)
    - PUT /books/{id}: Atualiza livro (equipe)
    - DELETE /books/{id}: Remove livro sem empréstimos ativos (equipe)
"""

from uuid import UUID

from fastapi import APIRouter, Query, status

from library_portal.core.deps import CurrentPrincipal, DbSession, StaffPrincipal
from library_portal.schemas.base import PaginatedResponse
from library_portal.schemas.book import (
    BookAvailability,
    BookCreate,
    BookDetail,
    BookRead,
    BookUpdate,
)
from library_portal.services.book import BookService

router = APIRouter(prefix="/books", tags=["Books"])


@router.get(
    "",
    response_model=PaginatedResponse[BookRead],
    summary="Listar livros",
)
async def list_books(
    db: DbSession,
    principal: CurrentPrincipal,
    search: str | None = Query(None, description="Busca em título, autor ou ISBN"),
    category_id: UUID | None = Query(None, description="Filtrar por categoria"),
    available_only: bool = Query(False, description="Apenas com exemplar disponível"),
    page: int = Query(1, ge=1, description="Número da página"),
    page_size: int = Query(20, ge=1, le=100, description="Itens por página"),
) -> PaginatedResponse[BookRead]:
    return await BookService(db).list_books(
        search=search,
        category_id=category_id,
        available_only=available_only,
        page=page,
        page_size=page_size,
    )


@router.get(
    "/{book_id}",
    response_model=BookDetail,
    summary="Detalhes do livro",
)
async def get_book(book_id: UUID, db: DbSession, principal: CurrentPrincipal) -> BookDetail:
    return await BookService(db).get_book_detail(book_id)


@router.get(
    "/{book_id}/availability",
    response_model=BookAvailability,
    summary="Disponibilidade do livro",
    description="Se não houver exemplar, informa a data prevista da próxima devolução.",
)
async def get_availability(
    book_id: UUID,
    db: DbSession,
    principal: CurrentPrincipal,
) -> BookAvailability:
    return await BookService(db).check_availability(book_id)


@router.post(
    "",
    response_model=BookRead,
    status_code=status.HTTP_201_CREATED,
    summary="Cadastrar livro",
)
async def create_book(data: BookCreate, db: DbSession, staff: StaffPrincipal) -> BookRead:
    """
    Cadastra livro. available_copies assume total_copies quando omitido.

    Raises:
        400: available_copies > total_copies
        404: Categoria não encontrada
    """
    book = await BookService(db).create_book(data)
    return BookRead.model_validate(book)


@router.put(
    "/{book_id}",
    response_model=BookRead,
    summary="Atualizar livro",
)
async def update_book(
    book_id: UUID,
    data: BookUpdate,
    db: DbSession,
    staff: StaffPrincipal,
) -> BookRead:
    book = await BookService(db).update_book(book_id, data)
    return BookRead.model_validate(book)


@router.delete(
    "/{book_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Remover livro",
)
async def delete_book(book_id: UUID, db: DbSession, staff: StaffPrincipal) -> None:
    """
    Raises:
        400: Livro com empréstimos ativos
        404: Livro não encontrado
    """
    await BookService(db).delete_book(book_id)
