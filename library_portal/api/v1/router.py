"""
Router principal da API v1.

Inclui todos os routers de endpoints.
"""

from fastapi import APIRouter, status

from library_portal.api.v1.auth import router as auth_router
from library_portal.api.v1.books import router as books_router
from library_portal.api.v1.borrows import router as borrows_router
from library_portal.api.v1.categories import router as categories_router
from library_portal.api.v1.members import router as members_router
from library_portal.api.v1.notifications import router as notifications_router
from library_portal.api.v1.plans import router as plans_router
from library_portal.api.v1.requests import router as requests_router
from library_portal.api.v1.system import router as system_router
from library_portal.schemas.base import ErrorResponse

# Formato de erro documentado no OpenAPI para todas as rotas
ERROR_RESPONSES = {
    code: {"model": ErrorResponse}
    for code in (
        status.HTTP_400_BAD_REQUEST,
        status.HTTP_401_UNAUTHORIZED,
        status.HTTP_403_FORBIDDEN,
        status.HTTP_404_NOT_FOUND,
        status.HTTP_429_TOO_MANY_REQUESTS,
        status.HTTP_500_INTERNAL_SERVER_ERROR,
    )
}

api_router = APIRouter(prefix="/api/v1", responses=ERROR_RESPONSES)

api_router.include_router(auth_router)
api_router.include_router(books_router)
api_router.include_router(categories_router)
api_router.include_router(plans_router)
api_router.include_router(members_router)
api_router.include_router(borrows_router)
api_router.include_router(requests_router)
api_router.include_router(notifications_router)
api_router.include_router(system_router)
