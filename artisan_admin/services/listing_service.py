"""
Listing service: create, read, update and delete products, services and
training offers.

Business rules enforced here:
- The owning artisan is always the authenticated caller.
- A listing's category must exist and match the listing kind.
- Public readers only see ACTIVE listings; admins see everything and artisans
  see their own listings in any status.
- Only the owner or an admin may update or delete a listing.
- Product SKUs are unique when present.
"""
import sqlite3
from typing import Optional
import logging

from artisan_admin.core.exceptions import (
    ConflictError,
    ForbiddenError,
    NotFoundError,
    ValidationError,
)
from artisan_admin.models.listing import (
    Listing,
    ListingKind,
    ListingStatus,
    ServicePriceType,
)
from artisan_admin.models.page import Page, page_offset
from artisan_admin.models.user import User, UserRole
from artisan_admin.repositories.category_repository import CategoryRepository
from artisan_admin.repositories.listing_repository import ProductRepository, repository_for
from artisan_admin.schemas.listing import ListingCreate, ListingUpdate
from artisan_admin.services.listing_status import resubmission

logger = logging.getLogger(__name__)

ALL_STATUSES = "ALL"

# Columns that may be omitted from an update but never set to null.
NON_NULLABLE_COLUMNS = {
    ListingKind.PRODUCT: {
        "title", "description", "category_id", "images", "price", "currency", "materials",
    },
    ListingKind.SERVICE: {
        "title", "description", "category_id", "images", "price_type", "currency", "location_type",
    },
    ListingKind.TRAINING: {
        "title", "description", "category_id", "images", "is_free", "duration", "location",
        "what_you_will_learn",
    },
}


def resolve_status_filter(raw: Optional[str]) -> Optional[ListingStatus]:
    """
    Map the ``status`` query parameter to a filter value.

    Missing means ACTIVE, ``ALL`` means no filter; anything else must name a
    listing status (case-insensitive).
    """
    if raw is None or not raw.strip():
        return ListingStatus.ACTIVE
    candidate = raw.strip().upper()
    if candidate == ALL_STATUSES:
        return None
    try:
        return ListingStatus(candidate)
    except ValueError:
        raise ValidationError(
            f"Invalid status filter '{raw}'. Use ALL or one of: "
            + ", ".join(s.value for s in ListingStatus)
        )


def _is_admin(principal: Optional[User]) -> bool:
    return principal is not None and principal.role == UserRole.ADMIN


def _is_owner(principal: Optional[User], listing: Listing) -> bool:
    return principal is not None and principal.id == listing.artisan_id


class ListingService:
    def __init__(self, conn: sqlite3.Connection, kind: ListingKind) -> None:
        logger.trace("Initializing ListingService kind=%s", kind.value)
        self.kind = kind
        self._repo = repository_for(kind, conn)
        self._category_repo = CategoryRepository(conn)

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def list_listings(
        self,
        principal: Optional[User],
        page: int = 1,
        limit: int = 10,
        status: Optional[str] = None,
        category_id: Optional[int] = None,
        artisan_id: Optional[int] = None,
        search: Optional[str] = None,
        sort_by: Optional[str] = None,
        sort_order: Optional[str] = None,
    ) -> Page[Listing]:
        status_filter = resolve_status_filter(status)
        if status_filter != ListingStatus.ACTIVE and not self._may_see_unpublished(principal, artisan_id):
            logger.warning(
                "Principal %s may not list %s listings with status=%s",
                principal.id if principal else None,
                self.kind.value,
                status,
            )
            raise ForbiddenError("Not authorized to view non-active listings.")

        logger.info(
            "Listing %s page=%s limit=%s status=%s category_id=%s artisan_id=%s search=%s",
            self.kind.value, page, limit, status_filter, category_id, artisan_id, search,
        )
        items = self._repo.list_page(
            offset=page_offset(page, limit),
            limit=limit,
            status=status_filter,
            category_id=category_id,
            artisan_id=artisan_id,
            search=search,
            sort_by=sort_by,
            sort_order=sort_order,
        )
        total = self._repo.count(
            status=status_filter,
            category_id=category_id,
            artisan_id=artisan_id,
            search=search,
        )
        return Page(items=items, total_items=total, current_page=page, limit=limit)

    def get_listing(self, listing_id: int, principal: Optional[User] = None) -> Listing:
        """Return a listing; unpublished ones look missing to everyone but admins and the owner."""
        logger.info("Fetching %s id=%s", self.kind.value, listing_id)
        listing = self._repo.get_by_id(listing_id)
        if listing is None or (
            listing.status != ListingStatus.ACTIVE
            and not (_is_admin(principal) or _is_owner(principal, listing))
        ):
            logger.warning("%s id=%s not found or not visible", self.kind.label, listing_id)
            raise NotFoundError(f"{self.kind.label} not found.")
        return listing

    # ------------------------------------------------------------------
    # Create
    # ------------------------------------------------------------------

    def create_listing(self, data: ListingCreate, artisan: User) -> Listing:
        logger.info("Artisan id=%s creating %s '%s'", artisan.id, self.kind.value, data.title)
        self._require_category(data.category_id)

        fields = data.model_dump(exclude={"status"})
        fields["status"] = data.status or ListingStatus.PENDING_APPROVAL
        fields["rejection_reason"] = None
        fields["artisan_id"] = artisan.id
        fields = self._normalize(fields, current=None)

        self._check_sku(fields.get("sku"))
        listing = self._repo.create(**fields)
        logger.info("%s created id=%s status=%s", self.kind.label, listing.id, listing.status.value)
        return listing

    # ------------------------------------------------------------------
    # Update
    # ------------------------------------------------------------------

    def update_listing(self, listing_id: int, data: ListingUpdate, principal: User) -> Listing:
        logger.info("Updating %s id=%s by user id=%s", self.kind.value, listing_id, principal.id)
        listing = self._get_for_write(listing_id, principal)

        fields = data.model_dump(exclude_unset=True, exclude={"submit_for_approval"})
        for column, value in fields.items():
            if value is None and column in NON_NULLABLE_COLUMNS[self.kind]:
                raise ValidationError(f"Field '{column}' cannot be null.")

        if "category_id" in fields and fields["category_id"] != listing.category_id:
            self._require_category(fields["category_id"])

        fields = self._normalize(fields, current=listing)
        if "sku" in fields:
            self._check_sku(fields["sku"], exclude_id=listing_id)

        if data.submit_for_approval:
            logger.info("Resubmitting %s id=%s for approval", self.kind.value, listing_id)
            fields.update(resubmission(listing.status))

        updated = self._repo.update(listing_id, **fields)
        logger.info("%s updated id=%s", self.kind.label, listing_id)
        return updated  # type: ignore[return-value]

    # ------------------------------------------------------------------
    # Delete
    # ------------------------------------------------------------------

    def delete_listing(self, listing_id: int, principal: User) -> None:
        logger.info("Deleting %s id=%s by user id=%s", self.kind.value, listing_id, principal.id)
        self._get_for_write(listing_id, principal)
        self._repo.delete(listing_id)
        logger.info("%s deleted id=%s", self.kind.label, listing_id)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _may_see_unpublished(self, principal: Optional[User], artisan_id: Optional[int]) -> bool:
        if _is_admin(principal):
            return True
        return (
            principal is not None
            and principal.role == UserRole.ARTISAN
            and artisan_id is not None
            and artisan_id == principal.id
        )

    def _get_for_write(self, listing_id: int, principal: User) -> Listing:
        listing = self._repo.get_by_id(listing_id)
        if listing is None:
            logger.warning("%s id=%s not found", self.kind.label, listing_id)
            raise NotFoundError(f"{self.kind.label} not found.")
        if not (_is_admin(principal) or _is_owner(principal, listing)):
            logger.warning(
                "User id=%s is not allowed to modify %s id=%s",
                principal.id,
                self.kind.value,
                listing_id,
            )
            raise ForbiddenError(f"You do not have permission to modify this {self.kind.label.lower()}.")
        return listing

    def _require_category(self, category_id: int) -> None:
        category = self._category_repo.get_by_id(category_id)
        expected = self.kind.category_type
        if category is None or category.type != expected:
            logger.warning(
                "Category id=%s missing or not of type %s", category_id, expected.value
            )
            raise ValidationError(f"Invalid or non-{expected.value} category ID.")

    def _check_sku(self, sku: Optional[str], exclude_id: Optional[int] = None) -> None:
        if self.kind != ListingKind.PRODUCT or not sku:
            return
        repo: ProductRepository = self._repo  # type: ignore[assignment]
        if repo.sku_taken(sku, exclude_id=exclude_id):
            logger.warning("SKU '%s' already in use", sku)
            raise ConflictError(f"A product with SKU '{sku}' already exists.")

    def _normalize(self, fields: dict, current: Optional[Listing]) -> dict:
        """Apply kind-specific rules, merging with *current* for partial updates."""

        def effective(column: str):
            if column in fields:
                return fields[column]
            return getattr(current, column) if current is not None else None

        if self.kind == ListingKind.PRODUCT:
            if "sku" in fields:
                fields["sku"] = (fields["sku"] or "").strip() or None

        elif self.kind == ListingKind.SERVICE:
            price_type = effective("price_type")
            if price_type != ServicePriceType.QUOTE and effective("price") is None:
                raise ValidationError("Price is required unless the price type is QUOTE.")

        elif self.kind == ListingKind.TRAINING:
            if effective("is_free"):
                fields["price"] = None
                fields["currency"] = None
            else:
                if effective("price") is None:
                    raise ValidationError("Price is required for paid training offers.")
                if not effective("currency"):
                    fields["currency"] = "GHS"

        return fields
