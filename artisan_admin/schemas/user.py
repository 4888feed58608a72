"""
Pydantic schemas for User request/response validation.
"""
from pydantic import EmailStr, Field, StrictBool, field_validator
from datetime import datetime
from typing import Optional

from artisan_admin.models.user import UserRole
from artisan_admin.schemas.common import CamelModel, PageMeta


# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------

class UserUpdate(CamelModel):
    """Partial update; only fields present in the body are applied."""

    name: Optional[str] = Field(None, min_length=1, max_length=100)
    email: Optional[EmailStr] = None
    role: Optional[UserRole] = None
    is_active: Optional[StrictBool] = None

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: Optional[str]) -> Optional[str]:
        return v.strip().lower() if v else v


class UserStatusUpdate(CamelModel):
    is_active: StrictBool


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------

class UserResponse(CamelModel):
    id: int
    name: Optional[str]
    email: str
    role: UserRole
    is_active: bool
    phone_number: Optional[str] = None
    national_id: Optional[str] = None
    last_login: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime


class UserPage(PageMeta):
    users: list[UserResponse]
