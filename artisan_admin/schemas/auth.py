"""
Pydantic schemas for the admin and artisan authentication endpoints.
"""
import re

from pydantic import EmailStr, Field, field_validator

from artisan_admin.schemas.common import CamelModel
from artisan_admin.schemas.user import UserResponse

GHANA_PHONE_PATTERN = re.compile(r"^(0[235][0-9]{8}|(\+233)[235][0-9]{8})$")


# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------

class LoginRequest(CamelModel):
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.strip().lower()


class ArtisanRegister(CamelModel):
    name: str
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=128)
    phone_number: str
    national_id: str = Field(..., min_length=1)

    @field_validator("name")
    @classmethod
    def name_length(cls, v: str) -> str:
        v = v.strip()
        if len(v) < 2:
            raise ValueError("Full name must be at least 2 characters.")
        return v

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.strip().lower()

    @field_validator("phone_number")
    @classmethod
    def ghana_phone_number(cls, v: str) -> str:
        v = v.strip()
        if not GHANA_PHONE_PATTERN.match(re.sub(r"\s+", "", v)):
            raise ValueError("Invalid Ghanaian phone number format.")
        return v

    @field_validator("national_id")
    @classmethod
    def normalize_national_id(cls, v: str) -> str:
        v = v.strip().upper()
        if not v:
            raise ValueError("National ID is required.")
        return v


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------

class AdminLoginResponse(CamelModel):
    message: str
    user: UserResponse


class ArtisanAuthResponse(CamelModel):
    """Returned by artisan login and registration; the token goes in the body."""

    message: str
    user: UserResponse
    token: str
