"""
Enums utilizados nos models da aplicação.

Os valores são as strings gravadas no banco.
"""

import enum


class AppRole(str, enum.Enum):
    """Papéis de usuário. Um profile pode ter mais de um."""
    ADMIN = "admin"
    LIBRARIAN = "librarian"
    MEMBER = "member"


STAFF_ROLES = frozenset({AppRole.ADMIN, AppRole.LIBRARIAN})


class BorrowStatus(str, enum.Enum):
    """
    Status de um empréstimo.

    Fluxo:
        ISSUED -> RETURNED

    OVERDUE nunca é gravado: é o status de exibição de um registro
    ISSUED cuja due_date já passou.
    """
    ISSUED = "issued"
    RETURNED = "returned"
    OVERDUE = "overdue"


class RequestStatus(str, enum.Enum):
    """
    Status de uma solicitação de extensão/renovação.

    PENDING -> APPROVED | REJECTED (ambos terminais)
    """
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class RequestKind(str, enum.Enum):
    """Tipos de solicitação feitas pelo membro."""
    EXTENSION = "extension"
    RENEWAL = "renewal"


class NotificationType(str, enum.Enum):
    """Tag de tipo das notificações."""
    OVERDUE = "overdue"
    DUE_REMINDER = "due_reminder"
    LOW_STOCK = "low_stock"
    EXTENSION_REQUESTED = "extension_requested"
    EXTENSION_APPROVED = "extension_approved"
    EXTENSION_REJECTED = "extension_rejected"
    RENEWAL_REQUESTED = "renewal_requested"
    RENEWAL_APPROVED = "renewal_approved"
    RENEWAL_REJECTED = "renewal_rejected"
