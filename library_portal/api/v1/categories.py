"""
Endpoints de categorias.

Contratos:
    - GET /categories: Lista categorias
    - POST /categories: Cria categoria (equipe)
    - DELETE /categories/{id}: Remove categoria sem livros (equipe)
"""

from uuid import UUID

from fastapi import APIRouter, status

from library_portal.core.deps import CurrentPrincipal, DbSession, StaffPrincipal
from library_portal.schemas.book import CategoryCreate, CategoryRead
from library_portal.services.book import CategoryService

router = APIRouter(prefix="/categories", tags=["Categories"])


@router.get("", response_model=list[CategoryRead], summary="Listar categorias")
async def list_categories(db: DbSession, principal: CurrentPrincipal) -> list[CategoryRead]:
    categories = await CategoryService(db).list_categories()
    return [CategoryRead.model_validate(c) for c in categories]


@router.post(
    "",
    response_model=CategoryRead,
    status_code=status.HTTP_201_CREATED,
    summary="Criar categoria",
)
async def create_category(
    data: CategoryCreate,
    db: DbSession,
    staff: StaffPrincipal,
) -> CategoryRead:
    category = await CategoryService(db).create(data)
    return CategoryRead.model_validate(category)


@router.delete(
    "/{category_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Remover categoria",
)
async def delete_category(category_id: UUID, db: DbSession, staff: StaffPrincipal) -> None:
    await CategoryService(db).delete(category_id)
