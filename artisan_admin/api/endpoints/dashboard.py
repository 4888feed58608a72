"""
Admin dashboard endpoints:
  GET /admin/dashboard/stats   – User counts and pending approval totals (Admin)
"""
from fastapi import APIRouter, Depends

from artisan_admin.core.dependencies import db_dependency, require_admin
from artisan_admin.models.user import User
from artisan_admin.schemas.dashboard import DashboardStats
from artisan_admin.services.dashboard_service import DashboardService

router = APIRouter(prefix="/admin/dashboard", tags=["Dashboard"])


@router.get(
    "/stats",
    response_model=DashboardStats,
    summary="Dashboard summary counts (Admin only)",
)
def dashboard_stats(
    conn=Depends(db_dependency),
    _: User = Depends(require_admin),
):
    return DashboardService(conn).stats()
