"""
Service do painel da equipe.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from library_portal.models.enums import AppRole
from library_portal.repositories.book import BookRepository
from library_portal.repositories.borrow import BorrowRecordRepository
from library_portal.repositories.profile import ProfileRepository
from library_portal.schemas.system import DashboardStats


class DashboardService:
    """Indicadores agregados do acervo e dos empréstimos."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.book_repo = BookRepository(db)
        self.profile_repo = ProfileRepository(db)
        self.borrow_repo = BorrowRecordRepository(db)

    async def get_stats(self) -> DashboardStats:
        return DashboardStats(
            total_books=await self.book_repo.count(),
            total_members=await self.profile_repo.count_by_role(AppRole.MEMBER),
            active_loans=await self.borrow_repo.count_issued(),
            overdue_loans=await self.borrow_repo.count_issued(overdue_only=True),
        )
