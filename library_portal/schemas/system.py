"""
Schemas do painel administrativo.
"""

from pydantic import BaseModel


class DashboardStats(BaseModel):
    """Indicadores do painel da equipe."""
    total_books: int
    total_members: int
    active_loans: int
    overdue_loans: int
