"""
Taxonomia de erros de domínio.

Todas as exceções herdam de HTTPException, então os services continuam
levantando erros da mesma forma que o FastAPI espera; os handlers em
`library_portal.main` renderizam qualquer falha como
`{"error": <mensagem>, "code": <código>}`.

    LibraryError
    ├── InvalidInputError (400)
    │   └── InvalidRange (400)
    ├── LimitExceeded (400)
    ├── OutOfStock (400)
    ├── RenewalLimitReached (400)
    ├── AlreadyOverdue (400)
    ├── AlreadyPending (400)
    ├── AuthError (401)
    ├── AuthorizationError (403)
    ├── NotFoundOrConflict (404)
    └── BackendFailure (500)
"""

from typing import Any

from fastapi import HTTPException, status


class LibraryError(HTTPException):
    """Erro base da aplicação, com código estável para o cliente."""

    status_code: int = status.HTTP_400_BAD_REQUEST
    code: str = "library_error"
    default_detail: str = "Erro na requisição"

    def __init__(
        self,
        detail: str | None = None,
        headers: dict[str, str] | None = None,
    ) -> None:
        super().__init__(
            status_code=self.status_code,
            detail=detail or self.default_detail,
            headers=headers,
        )

    def to_dict(self) -> dict[str, Any]:
        return {"error": self.detail, "code": self.code}


class InvalidInputError(LibraryError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = "validation_error"
    default_detail = "Parâmetros inválidos"


class InvalidRange(InvalidInputError):
    code = "invalid_range"
    default_detail = "Valor fora do intervalo permitido"


class LimitExceeded(LibraryError):
    code = "limit_exceeded"
    default_detail = "Membro atingiu o limite de livros do plano"


class OutOfStock(LibraryError):
    code = "out_of_stock"
    default_detail = "Nenhuma cópia disponível para empréstimo"


class RenewalLimitReached(LibraryError):
    code = "renewal_limit_reached"
    default_detail = "Limite de renovações atingido"


class AlreadyOverdue(LibraryError):
    code = "already_overdue"
    default_detail = "Não é possível renovar um empréstimo atrasado"


class AlreadyPending(LibraryError):
    code = "already_pending"
    default_detail = "Já existe uma solicitação pendente para este empréstimo"


class AuthError(LibraryError):
    status_code = status.HTTP_401_UNAUTHORIZED
    code = "unauthenticated"
    default_detail = "Token inválido ou expirado"

    def __init__(self, detail: str | None = None) -> None:
        super().__init__(detail, headers={"WWW-Authenticate": "Bearer"})


class AuthorizationError(LibraryError):
    status_code = status.HTTP_403_FORBIDDEN
    code = "forbidden"
    default_detail = "Acesso restrito à equipe da biblioteca"


class NotFoundOrConflict(LibraryError):
    """Registro ausente ou fora do estado esperado (ex.: já processado)."""

    status_code = status.HTTP_404_NOT_FOUND
    code = "not_found"
    default_detail = "Registro não encontrado"


class BackendFailure(LibraryError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    code = "backend_failure"
    default_detail = "Falha ao gravar no banco de dados"
