"""
Dashboard summary: user counts and the pending approval queue size.
"""
import sqlite3
import logging

from artisan_admin.models.listing import ListingKind, ListingStatus
from artisan_admin.models.user import UserRole
from artisan_admin.repositories.category_repository import CategoryRepository
from artisan_admin.repositories.listing_repository import repository_for
from artisan_admin.repositories.user_repository import UserRepository
from artisan_admin.schemas.dashboard import DashboardStats, PendingApprovals

logger = logging.getLogger(__name__)


class DashboardService:
    def __init__(self, conn: sqlite3.Connection) -> None:
        logger.trace("Initializing DashboardService")
        self._conn = conn
        self._user_repo = UserRepository(conn)
        self._category_repo = CategoryRepository(conn)

    def stats(self) -> DashboardStats:
        logger.info("Computing dashboard stats")
        pending = {
            kind: repository_for(kind, self._conn).count(status=ListingStatus.PENDING_APPROVAL)
            for kind in ListingKind
        }
        return DashboardStats(
            total_artisans=self._user_repo.count(role=UserRole.ARTISAN),
            total_customers=self._user_repo.count(role=UserRole.CUSTOMER),
            total_categories=len(self._category_repo.list_all()),
            pending_approvals=PendingApprovals(
                products=pending[ListingKind.PRODUCT],
                services=pending[ListingKind.SERVICE],
                training_offers=pending[ListingKind.TRAINING],
                total=sum(pending.values()),
            ),
        )
