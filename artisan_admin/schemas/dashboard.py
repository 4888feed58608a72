"""
Pydantic schemas for the admin dashboard summary.
"""
from artisan_admin.schemas.common import CamelModel


class PendingApprovals(CamelModel):
    products: int
    services: int
    training_offers: int
    total: int


class DashboardStats(CamelModel):
    total_artisans: int
    total_customers: int
    total_categories: int
    pending_approvals: PendingApprovals
