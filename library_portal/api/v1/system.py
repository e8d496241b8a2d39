"""
Endpoints de Sistema (equipe).

Contratos:
    - POST /system/check-overdue: Varreduras de atraso, vencimento próximo e estoque baixo
    - GET /system/dashboard: Indicadores do painel

Autorização:
    - Todos os endpoints requerem admin ou bibliotecário

A mesma varredura roda fora da API com
`python -m library_portal.jobs.check_overdue` (cron ou agendador externo).
"""

from fastapi import APIRouter

from library_portal.core.deps import DbSession, StaffPrincipal
from library_portal.schemas.notification import SweepResult
from library_portal.schemas.system import DashboardStats
from library_portal.services.dashboard import DashboardService
from library_portal.services.notification import NotificationService

router = APIRouter(prefix="/system", tags=["System"])


@router.post(
    "/check-overdue",
    response_model=SweepResult,
    summary="Executar varreduras de notificação",
    description=(
        "Notifica atrasos, devoluções nos próximos 2 dias e livros com estoque baixo. "
        "Idempotente no mesmo dia (UTC)."
    ),
)
async def check_overdue(db: DbSession, staff: StaffPrincipal) -> SweepResult:
    return await NotificationService(db).run_all()


@router.get(
    "/dashboard",
    response_model=DashboardStats,
    summary="Indicadores do painel",
)
async def dashboard(db: DbSession, staff: StaffPrincipal) -> DashboardStats:
    return await DashboardService(db).get_stats()
