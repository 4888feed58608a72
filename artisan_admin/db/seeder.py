"""
Database seeder – creates a default admin account on startup.

FOR DEVELOPMENT ONLY. Set SEED_DEFAULT_ADMIN=false in production.

Credentials come from settings (DEFAULT_ADMIN_EMAIL / DEFAULT_ADMIN_PASSWORD /
DEFAULT_ADMIN_NAME) so they can be overridden from the environment.
"""
import logging

from artisan_admin.core.config import settings
from artisan_admin.core.security import hash_password
from artisan_admin.db.database import get_db
from artisan_admin.models.user import UserRole
from artisan_admin.repositories.user_repository import UserRepository

logger = logging.getLogger(__name__)


def seed_admin() -> None:
    """
    Insert the default admin user if it does not already exist.
    Safe to call on every startup – it is a no-op when the user is present.
    """
    email = settings.DEFAULT_ADMIN_EMAIL.strip().lower()
    with get_db() as conn:
        repo = UserRepository(conn)
        if repo.get_by_email(email):
            logger.info("Seeder: admin user '%s' already exists – skipping.", email)
            return

        repo.create(
            email=email,
            hashed_password=hash_password(settings.DEFAULT_ADMIN_PASSWORD),
            role=UserRole.ADMIN,
            name=settings.DEFAULT_ADMIN_NAME,
        )
        logger.info("Seeder: created default admin user '%s'.", email)
