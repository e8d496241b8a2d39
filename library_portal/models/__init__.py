"""
Models SQLAlchemy da aplicação.

Importar todos os models aqui para que o Alembic detecte as mudanças.
"""

from library_portal.models.enums import (
    AppRole,
    BorrowStatus,
    NotificationType,
    RequestKind,
    RequestStatus,
    STAFF_ROLES,
)
from library_portal.models.membership import MembershipPlan
from library_portal.models.profile import Profile, UserRoleAssignment
from library_portal.models.book import Book, Category
from library_portal.models.borrow import BorrowRecord
from library_portal.models.request import ExtensionRequest, RenewalRequest
from library_portal.models.notification import Notification

__all__ = [
    "AppRole",
    "BorrowStatus",
    "NotificationType",
    "RequestKind",
    "RequestStatus",
    "STAFF_ROLES",
    "MembershipPlan",
    "Profile",
    "UserRoleAssignment",
    "Book",
    "Category",
    "BorrowRecord",
    "ExtensionRequest",
    "RenewalRequest",
    "Notification",
]
