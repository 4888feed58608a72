"""
Authentication endpoints:
  POST /auth/admin/login       – Admin login, sets the adminToken session cookie
  POST /auth/admin/logout      – Clear the admin session cookie
  GET  /auth/admin/me          – Profile of the signed-in admin
  POST /auth/artisan/login     – Artisan login, returns a Bearer token
  POST /auth/artisan/register  – Artisan self-registration, returns a Bearer token
"""
from fastapi import APIRouter, Depends, Response, status
import logging

from artisan_admin.core.config import settings
from artisan_admin.core.dependencies import db_dependency, require_admin
from artisan_admin.models.user import User
from artisan_admin.schemas.auth import (
    AdminLoginResponse,
    ArtisanAuthResponse,
    ArtisanRegister,
    LoginRequest,
)
from artisan_admin.schemas.common import MessageResponse
from artisan_admin.schemas.user import UserResponse
from artisan_admin.services.auth_service import AuthService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post(
    "/admin/login",
    response_model=AdminLoginResponse,
    summary="Admin login (sets the session cookie)",
)
def admin_login(
    data: LoginRequest,
    response: Response,
    conn=Depends(db_dependency),
):
    """
    Verify admin credentials and start a session.

    The token is delivered only as an HttpOnly cookie valid for one day.
    """
    logger.info("Admin login requested for email=%s", data.email)
    user, token = AuthService(conn).admin_login(data.email, data.password)
    response.set_cookie(
        key=settings.ADMIN_COOKIE_NAME,
        value=token,
        httponly=True,
        secure=settings.is_production,
        samesite="strict",
        path="/",
        max_age=settings.ADMIN_TOKEN_EXPIRE_DAYS * 24 * 60 * 60,
    )
    return AdminLoginResponse(
        message="Login successful",
        user=UserResponse.model_validate(user),
    )


@router.post(
    "/admin/logout",
    response_model=MessageResponse,
    summary="Admin logout (clears the session cookie)",
)
def admin_logout(response: Response):
    logger.info("Admin logout requested")
    response.delete_cookie(settings.ADMIN_COOKIE_NAME, path="/")
    return MessageResponse(message="Logout successful")


@router.get(
    "/admin/me",
    response_model=UserResponse,
    summary="Get the signed-in admin's profile",
)
def admin_me(current_user: User = Depends(require_admin)):
    logger.info("Returning profile for admin id=%s", current_user.id)
    return UserResponse.model_validate(current_user)


@router.post(
    "/artisan/login",
    response_model=ArtisanAuthResponse,
    summary="Artisan login (returns a Bearer token)",
)
def artisan_login(
    data: LoginRequest,
    conn=Depends(db_dependency),
):
    """
    Verify artisan credentials. The 7-day token is returned in the body for
    mobile and API clients; send it as ``Authorization: Bearer <token>``.
    """
    logger.info("Artisan login requested for email=%s", data.email)
    user, token = AuthService(conn).artisan_login(data.email, data.password)
    return ArtisanAuthResponse(
        message="Login successful",
        user=UserResponse.model_validate(user),
        token=token,
    )


@router.post(
    "/artisan/register",
    response_model=ArtisanAuthResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a new artisan account",
)
def artisan_register(
    data: ArtisanRegister,
    conn=Depends(db_dependency),
):
    """
    Create an active ARTISAN account.

    Requires a Ghanaian phone number (``0[235]XXXXXXXX`` or
    ``+233[235]XXXXXXXX``) and a national ID, stored uppercased.
    """
    logger.info("Artisan registration requested for email=%s", data.email)
    user, token = AuthService(conn).register_artisan(data)
    return ArtisanAuthResponse(
        message="Artisan registration successful!",
        user=UserResponse.model_validate(user),
        token=token,
    )
