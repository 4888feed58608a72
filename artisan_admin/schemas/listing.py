"""
Pydantic schemas for product, service and training listings.

Create payloads never carry an artisan id; ownership comes from the bearer
token. Cross-field rules that depend on the stored row (price vs. price
type, free trainings) are re-checked by the listing service on update.
"""
from datetime import datetime
from typing import Any, Optional

from pydantic import Field, field_validator, model_validator

from artisan_admin.models.listing import (
    ListingStatus,
    ServiceLocationType,
    ServicePriceType,
)
from artisan_admin.schemas.common import CamelModel, PageMeta

SUBMISSION_STATUS_VALUES = (ListingStatus.DRAFT.value, ListingStatus.PENDING_APPROVAL.value)


def _upper(v: Any) -> Any:
    return v.strip().upper() if isinstance(v, str) else v


def _required_text(v: str, label: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError(f"{label} is required.")
    return v


# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------

class ListingCreate(CamelModel):
    title: str = Field(..., max_length=200)
    description: str
    category_id: int
    images: list[str] = Field(default_factory=list)
    status: Optional[ListingStatus] = None

    @field_validator("title")
    @classmethod
    def strip_title(cls, v: str) -> str:
        return _required_text(v, "Title")

    @field_validator("description")
    @classmethod
    def strip_description(cls, v: str) -> str:
        return _required_text(v, "Description")

    @field_validator("status", mode="before")
    @classmethod
    def submission_status(cls, v: Any) -> Any:
        v = _upper(v)
        if v is not None and v not in SUBMISSION_STATUS_VALUES:
            raise ValueError("New listings may only be saved as DRAFT or PENDING_APPROVAL.")
        return v


class ProductCreate(ListingCreate):
    price: float = Field(..., ge=0)
    currency: str = "GHS"
    stock_quantity: Optional[int] = Field(None, ge=0)
    materials: list[str] = Field(default_factory=list)
    dimensions: Optional[str] = None
    sku: Optional[str] = None
    shipping_details: Optional[str] = None


class ServiceCreate(ListingCreate):
    price_type: ServicePriceType = ServicePriceType.FIXED
    price: Optional[float] = Field(None, ge=0)
    currency: str = "GHS"
    location_type: ServiceLocationType = ServiceLocationType.IN_STUDIO
    location: Optional[str] = None
    availability: Optional[str] = None

    @model_validator(mode="after")
    def price_unless_quote(self) -> "ServiceCreate":
        if self.price_type != ServicePriceType.QUOTE and self.price is None:
            raise ValueError("Price is required unless the price type is QUOTE.")
        return self


class TrainingCreate(ListingCreate):
    is_free: bool = False
    price: Optional[float] = Field(None, ge=0)
    currency: Optional[str] = "GHS"
    duration: str
    schedule_details: Optional[str] = None
    location: str
    capacity: Optional[int] = Field(None, gt=0)
    prerequisites: Optional[str] = None
    what_you_will_learn: list[str] = Field(default_factory=list)

    @model_validator(mode="after")
    def price_unless_free(self) -> "TrainingCreate":
        if not self.is_free and self.price is None:
            raise ValueError("Price is required for paid training offers.")
        return self


class ListingUpdate(CamelModel):
    """Partial update by the owner or an admin.

    ``submitForApproval`` moves a DRAFT or REJECTED listing back to
    PENDING_APPROVAL.
    """

    title: Optional[str] = Field(None, max_length=200)
    description: Optional[str] = None
    category_id: Optional[int] = None
    images: Optional[list[str]] = None
    submit_for_approval: bool = False

    @field_validator("title")
    @classmethod
    def strip_title(cls, v: Optional[str]) -> Optional[str]:
        return None if v is None else _required_text(v, "Title")

    @field_validator("description")
    @classmethod
    def strip_description(cls, v: Optional[str]) -> Optional[str]:
        return None if v is None else _required_text(v, "Description")


class ProductUpdate(ListingUpdate):
    price: Optional[float] = Field(None, ge=0)
    currency: Optional[str] = None
    stock_quantity: Optional[int] = Field(None, ge=0)
    materials: Optional[list[str]] = None
    dimensions: Optional[str] = None
    sku: Optional[str] = None
    shipping_details: Optional[str] = None


class ServiceUpdate(ListingUpdate):
    price_type: Optional[ServicePriceType] = None
    price: Optional[float] = Field(None, ge=0)
    currency: Optional[str] = None
    location_type: Optional[ServiceLocationType] = None
    location: Optional[str] = None
    availability: Optional[str] = None


class TrainingUpdate(ListingUpdate):
    is_free: Optional[bool] = None
    price: Optional[float] = Field(None, ge=0)
    currency: Optional[str] = None
    duration: Optional[str] = None
    schedule_details: Optional[str] = None
    location: Optional[str] = None
    capacity: Optional[int] = Field(None, gt=0)
    prerequisites: Optional[str] = None
    what_you_will_learn: Optional[list[str]] = None


class StatusUpdate(CamelModel):
    """Admin status transition; the status string is validated by the workflow."""

    status: str
    rejection_reason: Optional[str] = None


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------

class ArtisanSummaryResponse(CamelModel):
    id: int
    name: Optional[str]
    email: str


class CategorySummaryResponse(CamelModel):
    id: int
    name: str
    slug: str


class ListingResponse(CamelModel):
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
    artisan: ArtisanSummaryResponse
    category: CategorySummaryResponse


class ProductResponse(ListingResponse):
    price: float
    currency: str
    stock_quantity: Optional[int]
    materials: list[str]
    dimensions: Optional[str]
    sku: Optional[str]
    shipping_details: Optional[str]


class ServiceResponse(ListingResponse):
    price_type: ServicePriceType
    price: Optional[float]
    currency: str
    location_type: ServiceLocationType
    location: Optional[str]
    availability: Optional[str]


class TrainingResponse(ListingResponse):
    is_free: bool
    price: Optional[float]
    currency: Optional[str]
    duration: str
    schedule_details: Optional[str]
    location: str
    capacity: Optional[int]
    prerequisites: Optional[str]
    what_you_will_learn: list[str]


class ProductPage(PageMeta):
    products: list[ProductResponse]


class ServicePage(PageMeta):
    services: list[ServiceResponse]


class TrainingPage(PageMeta):
    training_offers: list[TrainingResponse]
