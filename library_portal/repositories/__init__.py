"""
Módulo de repositórios - acesso a dados.
"""

from library_portal.repositories.base import BaseRepository
from library_portal.repositories.profile import ProfileRepository
from library_portal.repositories.membership import MembershipPlanRepository
from library_portal.repositories.book import BookRepository, CategoryRepository
from library_portal.repositories.borrow import BorrowRecordRepository
from library_portal.repositories.request import BorrowRequestRepository
from library_portal.repositories.notification import NotificationRepository

__all__ = [
    "BaseRepository",
    "ProfileRepository",
    "MembershipPlanRepository",
    "BookRepository",
    "CategoryRepository",
    "BorrowRecordRepository",
    "BorrowRequestRepository",
    "NotificationRepository",
]
