"""
Server-rendered admin pages. Access is enforced by the admin gate middleware
before these handlers run; the verified identity arrives in the
``x-admin-user-id`` / ``x-admin-user-email`` request headers.
"""
from pathlib import Path
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates
import logging

from artisan_admin.core.config import settings
from artisan_admin.core.dependencies import db_dependency, get_optional_principal
from artisan_admin.models.listing import ListingKind, ListingStatus
from artisan_admin.models.user import User, UserRole
from artisan_admin.services.category_service import CategoryService
from artisan_admin.services.dashboard_service import DashboardService
from artisan_admin.services.listing_service import ListingService
from artisan_admin.services.user_service import UserService

logger = logging.getLogger(__name__)

templates = Jinja2Templates(directory=str(Path(__file__).resolve().parents[2] / "templates"))

router = APIRouter(include_in_schema=False)


def _context(request: Request, **extra) -> dict:
    return {
        "request": request,
        "app_name": settings.APP_NAME,
        "admin_email": request.headers.get("x-admin-user-email"),
        **extra,
    }


@router.get("/", response_class=HTMLResponse)
def index():
    return RedirectResponse(url="/dashboard", status_code=307)


@router.get("/login", response_class=HTMLResponse)
def login_page(request: Request, redirected_from: Optional[str] = Query(None, alias="redirectedFrom")):
    return templates.TemplateResponse(
        request,
        "login.html",
        _context(request, redirected_from=redirected_from or "/dashboard"),
    )


@router.get("/dashboard", response_class=HTMLResponse)
def dashboard_page(request: Request, conn=Depends(db_dependency)):
    logger.info("Rendering dashboard for %s", request.headers.get("x-admin-user-email"))
    return templates.TemplateResponse(
        request,
        "dashboard.html",
        _context(request, stats=DashboardService(conn).stats()),
    )


@router.get("/users", response_class=HTMLResponse)
def users_page(
    request: Request,
    page: int = Query(1, ge=1),
    search: Optional[str] = Query(None),
    conn=Depends(db_dependency),
):
    result = UserService(conn).list_users(page=page, limit=20, search=search)
    return templates.TemplateResponse(
        request,
        "users.html",
        _context(request, result=result, search=search or ""),
    )


@router.get("/users/{user_id}", response_class=HTMLResponse)
def user_detail_page(request: Request, user_id: int, conn=Depends(db_dependency)):
    """Profile and edit form; saving goes through PUT /api/users/{id}."""
    user = UserService(conn).get_user(user_id)
    return templates.TemplateResponse(
        request,
        "user_detail.html",
        _context(request, user=user, roles=list(UserRole)),
    )


@router.get("/categories", response_class=HTMLResponse)
def categories_page(request: Request, conn=Depends(db_dependency)):
    tree = CategoryService(conn).category_tree()
    return templates.TemplateResponse(
        request,
        "categories.html",
        _context(request, tree=tree),
    )


@router.get("/approvals", response_class=HTMLResponse)
def approvals_page(
    request: Request,
    conn=Depends(db_dependency),
    principal: Optional[User] = Depends(get_optional_principal),
):
    pending = {
        kind: ListingService(conn, kind).list_listings(
            principal,
            limit=100,
            status=ListingStatus.PENDING_APPROVAL.value,
            sort_by="createdAt",
            sort_order="asc",
        ).items
        for kind in ListingKind
    }
    segments = {
        ListingKind.PRODUCT: "products",
        ListingKind.SERVICE: "services",
        ListingKind.TRAINING: "training",
    }
    return templates.TemplateResponse(
        request,
        "approvals.html",
        _context(request, pending=pending, segments=segments),
    )


@router.get("/settings", response_class=HTMLResponse)
def settings_page(request: Request):
    return templates.TemplateResponse(
        request,
        "settings.html",
        _context(
            request,
            environment=settings.ENVIRONMENT,
            version=settings.APP_VERSION,
            tree_depth=settings.CATEGORY_TREE_MAX_DEPTH,
        ),
    )
