"""
HTTP middleware guarding the server-rendered admin pages.

Only page prefixes listed in ``settings.ADMIN_PAGE_PREFIXES`` are gated; API
routes authorize through dependencies instead. The check is token-only (no
database access): signature, expiry and an ADMIN role claim.
"""
from typing import Optional
from urllib.parse import quote
import logging

from fastapi import Request
from fastapi.responses import RedirectResponse
from jose import JWTError

from artisan_admin.core.config import settings
from artisan_admin.core.security import decode_token

logger = logging.getLogger(__name__)

ADMIN_ID_HEADER = b"x-admin-user-id"
ADMIN_EMAIL_HEADER = b"x-admin-user-email"


def is_admin_page(path: str) -> bool:
    return any(
        path == prefix or path.startswith(prefix.rstrip("/") + "/")
        for prefix in settings.ADMIN_PAGE_PREFIXES
    )


def admin_claims(token: Optional[str]) -> Optional[dict]:
    """Decoded claims when *token* is a valid admin session token, else None."""
    if not token:
        return None
    try:
        payload = decode_token(token)
    except JWTError:
        logger.warning("Admin gate rejected an invalid or expired token")
        return None
    if payload.get("role") != "ADMIN":
        logger.warning("Admin gate rejected token with role=%s", payload.get("role"))
        return None
    return payload


def _forward_identity(request: Request, claims: dict) -> None:
    """Replace any client-sent identity headers with the verified ones."""
    headers = [
        (name, value)
        for name, value in request.scope["headers"]
        if name not in (ADMIN_ID_HEADER, ADMIN_EMAIL_HEADER)
    ]
    headers.append((ADMIN_ID_HEADER, str(claims.get("userId", "")).encode("latin-1")))
    headers.append((ADMIN_EMAIL_HEADER, str(claims.get("email", "")).encode("latin-1")))
    request.scope["headers"] = headers


async def admin_gate(request: Request, call_next):
    path = request.url.path
    token = request.cookies.get(settings.ADMIN_COOKIE_NAME)

    if path == settings.ADMIN_LOGIN_PATH:
        if admin_claims(token) is not None:
            logger.info("Signed-in admin visited login page; redirecting to dashboard")
            return RedirectResponse(url="/dashboard", status_code=307)
        return await call_next(request)

    if not is_admin_page(path):
        return await call_next(request)

    if not token:
        logger.info("No admin session for %s; redirecting to login", path)
        return RedirectResponse(
            url=f"{settings.ADMIN_LOGIN_PATH}?redirectedFrom={quote(path, safe='/')}",
            status_code=307,
        )

    claims = admin_claims(token)
    if claims is None:
        response = RedirectResponse(url=settings.ADMIN_LOGIN_PATH, status_code=307)
        response.delete_cookie(settings.ADMIN_COOKIE_NAME, path="/")
        return response

    _forward_identity(request, claims)
    return await call_next(request)
