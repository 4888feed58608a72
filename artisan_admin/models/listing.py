"""
Domain models for marketplace listings: products, services and training offers.

All three kinds share the approval lifecycle (``status`` / ``rejection_reason``),
an owning artisan and a category; rows are read joined with both so the
summaries are always populated.
"""
import json
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional

from artisan_admin.models.category import CategoryType


class ListingStatus(str, Enum):
    DRAFT = "DRAFT"
    PENDING_APPROVAL = "PENDING_APPROVAL"
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    REJECTED = "REJECTED"
    ARCHIVED = "ARCHIVED"


class ListingKind(str, Enum):
    PRODUCT = "product"
    SERVICE = "service"
    TRAINING = "training"

    @property
    def category_type(self) -> CategoryType:
        """Category type a listing of this kind must be classified under."""
        return CategoryType(self.name)

    @property
    def label(self) -> str:
        return {
            ListingKind.PRODUCT: "Product",
            ListingKind.SERVICE: "Service",
            ListingKind.TRAINING: "Training offer",
        }[self]


class ServicePriceType(str, Enum):
    FIXED = "FIXED"
    HOURLY = "HOURLY"
    QUOTE = "QUOTE"


class ServiceLocationType(str, Enum):
    IN_STUDIO = "IN_STUDIO"
    ON_SITE = "ON_SITE"
    REMOTE = "REMOTE"


@dataclass
class ArtisanSummary:
    id: int
    name: Optional[str]
    email: str


@dataclass
class CategorySummary:
    id: int
    name: str
    slug: str


def _json_list(raw: Optional[str]) -> list:
    return json.loads(raw) if raw else []


def _common_fields(row) -> dict:
    """Columns shared by every listing table plus the joined summaries."""
    return dict(
        id=row["id"],
        title=row["title"],
        description=row["description"],
        images=_json_list(row["images"]),
        status=ListingStatus(row["status"]),
        rejection_reason=row["rejection_reason"],
        artisan_id=row["artisan_id"],
        category_id=row["category_id"],
        created_at=datetime.fromisoformat(row["created_at"]),
        updated_at=datetime.fromisoformat(row["updated_at"]),
        artisan=ArtisanSummary(
            id=row["artisan_id"],
            name=row["artisan_name"],
            email=row["artisan_email"],
        ),
        category=CategorySummary(
            id=row["category_id"],
            name=row["category_name"],
            slug=row["category_slug"],
        ),
    )


@dataclass
class Listing:
    id: int
    title: str
    description: str
    images: list[str]
    status: ListingStatus
    rejection_reason: Optional[str]
    artisan_id: int
    category_id: int
    created_at: datetime
    updated_at: datetime
    artisan: ArtisanSummary
    category: CategorySummary


@dataclass
class ProductListing(Listing):
    price: float
    currency: str
    stock_quantity: Optional[int]
    materials: list[str]
    dimensions: Optional[str]
    sku: Optional[str]
    shipping_details: Optional[str]

    @classmethod
    def from_row(cls, row) -> "ProductListing":
        """Build a ProductListing from a joined sqlite3.Row object."""
        return cls(
            **_common_fields(row),
            price=row["price"],
            currency=row["currency"],
            stock_quantity=row["stock_quantity"],
            materials=_json_list(row["materials"]),
            dimensions=row["dimensions"],
            sku=row["sku"],
            shipping_details=row["shipping_details"],
        )


@dataclass
class ServiceListing(Listing):
    price_type: ServicePriceType
    price: Optional[float]
    currency: str
    location_type: ServiceLocationType
    location: Optional[str]
    availability: Optional[str]

    @classmethod
    def from_row(cls, row) -> "ServiceListing":
        """Build a ServiceListing from a joined sqlite3.Row object."""
        return cls(
            **_common_fields(row),
            price_type=ServicePriceType(row["price_type"]),
            price=row["price"],
            currency=row["currency"],
            location_type=ServiceLocationType(row["location_type"]),
            location=row["location"],
            availability=row["availability"],
        )


@dataclass
class TrainingOffer(Listing):
    is_free: bool
    price: Optional[float]
    currency: Optional[str]
    duration: str
    schedule_details: Optional[str]
    location: str
    capacity: Optional[int]
    prerequisites: Optional[str]
    what_you_will_learn: list[str]

    @classmethod
    def from_row(cls, row) -> "TrainingOffer":
        """Build a TrainingOffer from a joined sqlite3.Row object."""
        return cls(
            **_common_fields(row),
            is_free=bool(row["is_free"]),
            price=row["price"],
            currency=row["currency"],
            duration=row["duration"],
            schedule_details=row["schedule_details"],
            location=row["location"],
            capacity=row["capacity"],
            prerequisites=row["prerequisites"],
            what_you_will_learn=_json_list(row["what_you_will_learn"]),
        )
