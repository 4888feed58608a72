"""
Marketplace account as stored in the ``users`` table.

Admins run the back office, artisans publish listings and customers only
buy; all three share one table and are told apart by ``role``.
"""
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional
import logging

logger = logging.getLogger(__name__)


class UserRole(str, Enum):
    ADMIN = "ADMIN"
    ARTISAN = "ARTISAN"
    CUSTOMER = "CUSTOMER"


def _optional_timestamp(raw: Optional[str]) -> Optional[datetime]:
    return datetime.fromisoformat(raw) if raw else None


@dataclass
class User:
    id: int
    email: str
    hashed_password: str
    role: UserRole
    is_active: bool
    created_at: datetime
    updated_at: datetime
    name: Optional[str] = None
    phone_number: Optional[str] = None
    national_id: Optional[str] = None
    last_login: Optional[datetime] = None

    @classmethod
    def from_row(cls, row) -> "User":
        logger.trace("Hydrating User id=%s from database row", row["id"])
        return cls(
            id=row["id"],
            name=row["name"],
            email=row["email"],
            hashed_password=row["hashed_password"],
            role=UserRole(row["role"]),
            is_active=bool(row["is_active"]),
            phone_number=row["phone_number"],
            national_id=row["national_id"],
            last_login=_optional_timestamp(row["last_login"]),
            created_at=datetime.fromisoformat(row["created_at"]),
            updated_at=datetime.fromisoformat(row["updated_at"]),
        )
