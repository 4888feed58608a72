"""
Listing endpoints, one router per kind (products, services, training):
  GET    /{kind}               – Paginated list; ACTIVE only unless admin/owner asks otherwise
  GET    /{kind}/{id}          – Get a listing
  POST   /{kind}               – Create a listing (Artisan Bearer token)
  PUT    /{kind}/{id}          – Update a listing (owner or Admin)
  DELETE /{kind}/{id}          – Delete a listing (owner or Admin)
  PUT    /{kind}/{id}/status   – Approve, reject or deactivate (Admin)
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
import logging

from artisan_admin.core.dependencies import (
    db_dependency,
    get_current_artisan,
    get_current_principal,
    get_optional_principal,
    require_admin,
)
from artisan_admin.models.listing import ListingKind
from artisan_admin.models.user import User
from artisan_admin.schemas.listing import (
    ProductCreate,
    ProductPage,
    ProductResponse,
    ProductUpdate,
    ServiceCreate,
    ServicePage,
    ServiceResponse,
    ServiceUpdate,
    StatusUpdate,
    TrainingCreate,
    TrainingPage,
    TrainingResponse,
    TrainingUpdate,
)
from artisan_admin.services.listing_service import ListingService
from artisan_admin.services.listing_status import ListingStatusService

logger = logging.getLogger(__name__)

# path segment -> (kind, create schema, update schema, response, page, page items key)
LISTING_ROUTES = {
    "products": (ListingKind.PRODUCT, ProductCreate, ProductUpdate, ProductResponse, ProductPage, "products"),
    "services": (ListingKind.SERVICE, ServiceCreate, ServiceUpdate, ServiceResponse, ServicePage, "services"),
    "training": (ListingKind.TRAINING, TrainingCreate, TrainingUpdate, TrainingResponse, TrainingPage, "training_offers"),
}


def build_status_route(router: APIRouter, segment: str) -> None:
    """Register ``PUT /{segment}/{id}/status`` on *router*."""
    kind, _, _, response_model, _, _ = LISTING_ROUTES[segment]

    @router.put(
        f"/{segment}/{{listing_id}}/status",
        response_model=response_model,
        summary=f"Update {kind.label.lower()} status (Admin)",
    )
    def update_status(
        listing_id: int,
        data: StatusUpdate,
        conn=Depends(db_dependency),
        current_user: User = Depends(require_admin),
    ):
        """
        Move the listing to ACTIVE, REJECTED or INACTIVE (case-insensitive).
        ``rejectionReason`` is kept only for REJECTED and cleared otherwise.
        """
        logger.info(
            "Admin id=%s setting %s id=%s status=%s",
            current_user.id, kind.value, listing_id, data.status,
        )
        listing = ListingStatusService(conn).update_status(
            kind, listing_id, data.status, data.rejection_reason
        )
        return response_model.model_validate(listing)


def build_listing_router(segment: str) -> APIRouter:
    kind, create_model, update_model, response_model, page_model, items_key = LISTING_ROUTES[segment]
    router = APIRouter(prefix=f"/{segment}", tags=[f"{kind.label}s"])

    @router.get(
        "",
        response_model=page_model,
        summary=f"List {segment}",
    )
    def list_listings(
        page: int = Query(1, ge=1),
        limit: int = Query(10, ge=1, le=100),
        status_filter: Optional[str] = Query(
            None, alias="status", description="Defaults to ACTIVE; ALL removes the filter"
        ),
        category_id: Optional[int] = Query(None, alias="categoryId"),
        artisan_id: Optional[int] = Query(None, alias="artisanId"),
        search: Optional[str] = Query(None, description="Substring of title or description"),
        sort_by: Optional[str] = Query(None, alias="sortBy", description="createdAt, updatedAt, title or price"),
        sort_order: Optional[str] = Query(None, alias="sortOrder", description="asc or desc"),
        conn=Depends(db_dependency),
        principal: Optional[User] = Depends(get_optional_principal),
    ):
        """
        Public callers see ACTIVE listings only. Other statuses (or ``ALL``)
        require an admin, or an artisan filtering by their own ``artisanId``.
        """
        result = ListingService(conn, kind).list_listings(
            principal,
            page=page,
            limit=limit,
            status=status_filter,
            category_id=category_id,
            artisan_id=artisan_id,
            search=search,
            sort_by=sort_by,
            sort_order=sort_order,
        )
        return page_model(
            **{items_key: [response_model.model_validate(item) for item in result.items]},
            current_page=result.current_page,
            total_pages=result.total_pages,
            total_items=result.total_items,
            limit=result.limit,
        )

    @router.get(
        "/{listing_id}",
        response_model=response_model,
        summary=f"Get a {kind.label.lower()}",
    )
    def get_listing(
        listing_id: int,
        conn=Depends(db_dependency),
        principal: Optional[User] = Depends(get_optional_principal),
    ):
        return response_model.model_validate(
            ListingService(conn, kind).get_listing(listing_id, principal)
        )

    @router.post(
        "",
        response_model=response_model,
        status_code=status.HTTP_201_CREATED,
        summary=f"Create a {kind.label.lower()} (Artisan)",
    )
    def create_listing(
        data: create_model,  # type: ignore[valid-type]
        conn=Depends(db_dependency),
        artisan: User = Depends(get_current_artisan),
    ):
        """
        The owner is the artisan named by the Bearer token. New listings wait
        in PENDING_APPROVAL unless ``status: DRAFT`` is sent.
        """
        return response_model.model_validate(
            ListingService(conn, kind).create_listing(data, artisan)
        )

    @router.put(
        "/{listing_id}",
        response_model=response_model,
        summary=f"Update a {kind.label.lower()} (owner or Admin)",
    )
    def update_listing(
        listing_id: int,
        data: update_model,  # type: ignore[valid-type]
        conn=Depends(db_dependency),
        principal: User = Depends(get_current_principal),
    ):
        """Partial update; ``submitForApproval: true`` resubmits a DRAFT or REJECTED listing."""
        return response_model.model_validate(
            ListingService(conn, kind).update_listing(listing_id, data, principal)
        )

    @router.delete(
        "/{listing_id}",
        status_code=status.HTTP_204_NO_CONTENT,
        summary=f"Delete a {kind.label.lower()} (owner or Admin)",
    )
    def delete_listing(
        listing_id: int,
        conn=Depends(db_dependency),
        principal: User = Depends(get_current_principal),
    ):
        ListingService(conn, kind).delete_listing(listing_id, principal)

    return router


def build_status_router(prefix: str = "") -> APIRouter:
    """All three status routes, optionally under *prefix* (e.g. ``/admin``)."""
    router = APIRouter(prefix=prefix, tags=["Listing approvals"])
    for segment in LISTING_ROUTES:
        build_status_route(router, segment)
    return router


products_router = build_listing_router("products")
services_router = build_listing_router("services")
training_router = build_listing_router("training")
status_router = build_status_router()
admin_status_router = build_status_router("/admin")
