"""
Listing approval workflow.

Lifecycle: DRAFT -> PENDING_APPROVAL -> ACTIVE / REJECTED / INACTIVE / ARCHIVED.

Rules enforced here, for every listing kind:
- Admins may move a listing to ACTIVE, REJECTED or INACTIVE.
- A rejection reason is stored only while the listing is REJECTED; any other
  target status clears it, ACTIVE included.
- Owners may resubmit a DRAFT or REJECTED listing, which puts it back to
  PENDING_APPROVAL.
"""
import sqlite3
from typing import Optional
import logging

from artisan_admin.core.exceptions import NotFoundError, ValidationError
from artisan_admin.models.listing import Listing, ListingKind, ListingStatus
from artisan_admin.repositories.listing_repository import repository_for

logger = logging.getLogger(__name__)

ADMIN_STATUSES = (ListingStatus.ACTIVE, ListingStatus.REJECTED, ListingStatus.INACTIVE)
RESUBMITTABLE_STATUSES = (ListingStatus.DRAFT, ListingStatus.REJECTED)


def parse_admin_status(raw: Optional[str]) -> ListingStatus:
    """Normalize an admin-supplied status (case-insensitive) or raise ValidationError."""
    candidate = (raw or "").strip().upper()
    for allowed in ADMIN_STATUSES:
        if candidate == allowed.value:
            return allowed
    raise ValidationError("Invalid status. Must be ACTIVE, REJECTED, or INACTIVE.")


def status_change(new_status: ListingStatus, rejection_reason: Optional[str] = None) -> dict:
    """Column values for moving a listing to *new_status*."""
    return {
        "status": new_status,
        "rejection_reason": rejection_reason if new_status == ListingStatus.REJECTED else None,
    }


def resubmission(current_status: ListingStatus) -> dict:
    """Column values for an owner resubmitting a listing for approval."""
    if current_status not in RESUBMITTABLE_STATUSES:
        raise ValidationError(
            f"Only DRAFT or REJECTED listings can be submitted for approval "
            f"(current status: {current_status.value})."
        )
    return status_change(ListingStatus.PENDING_APPROVAL)


class ListingStatusService:
    """Applies admin status transitions to any listing kind."""

    def __init__(self, conn: sqlite3.Connection) -> None:
        logger.trace("Initializing ListingStatusService")
        self._conn = conn

    def update_status(
        self,
        kind: ListingKind,
        listing_id: int,
        new_status: str,
        rejection_reason: Optional[str] = None,
    ) -> Listing:
        """
        Move a listing to an admin-invocable status and return it with its
        artisan and category summaries.

        Raises:
            ValidationError: *new_status* is not ACTIVE, REJECTED or INACTIVE.
            NotFoundError: no listing of *kind* has *listing_id*.
        """
        target = parse_admin_status(new_status)
        repo = repository_for(kind, self._conn)
        listing = repo.get_by_id(listing_id)
        if listing is None:
            logger.warning("%s id=%s not found for status update", kind.label, listing_id)
            raise NotFoundError(f"{kind.label} not found.")

        logger.info(
            "Transitioning %s id=%s from %s to %s",
            kind.value,
            listing_id,
            listing.status.value,
            target.value,
        )
        return repo.update(listing_id, **status_change(target, rejection_reason))  # type: ignore[return-value]
