"""
Módulo de serviços - lógica de negócio.
"""

from library_portal.services.auth import AuthService
from library_portal.services.book import BookService, CategoryService
from library_portal.services.membership import MemberService, MembershipPlanService
from library_portal.services.notification import NotificationService
from library_portal.services.borrow import BorrowService
from library_portal.services.request import RequestService
from library_portal.services.dashboard import DashboardService

__all__ = [
    "AuthService",
    "BookService",
    "CategoryService",
    "MemberService",
    "MembershipPlanService",
    "NotificationService",
    "BorrowService",
    "RequestService",
    "DashboardService",
]
