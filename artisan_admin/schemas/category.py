"""
Pydantic schemas for Category request/response validation.
"""
from pydantic import Field, field_validator
from datetime import datetime
from typing import Any, Optional

from artisan_admin.models.category import CategoryType
from artisan_admin.schemas.common import CamelModel


def _blank_to_none(v: Any) -> Any:
    if isinstance(v, str) and not v.strip():
        return None
    return v


def _upper(v: Any) -> Any:
    return v.strip().upper() if isinstance(v, str) else v


# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------

class CategoryCreate(CamelModel):
    """Payload for creating categories."""

    name: str = Field(..., max_length=100)
    type: CategoryType
    description: Optional[str] = Field(None, max_length=500)
    parent_id: Optional[int] = None

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Category name is required.")
        return v

    @field_validator("type", mode="before")
    @classmethod
    def upper_type(cls, v: Any) -> Any:
        return _upper(v)

    @field_validator("parent_id", mode="before")
    @classmethod
    def blank_parent(cls, v: Any) -> Any:
        return _blank_to_none(v)


class CategoryUpdate(CamelModel):
    """Partial update payload.

    Only keys present in the body count (see ``model_fields_set``); an
    explicit ``parentId: null`` detaches the category from its parent and an
    empty ``description`` clears it.
    """

    name: Optional[str] = Field(None, max_length=100)
    type: Optional[CategoryType] = None
    description: Optional[str] = Field(None, max_length=500)
    parent_id: Optional[int] = None

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("Category name cannot be empty.")
        return v

    @field_validator("type", mode="before")
    @classmethod
    def upper_type(cls, v: Any) -> Any:
        return _upper(v)

    @field_validator("parent_id", mode="before")
    @classmethod
    def blank_parent(cls, v: Any) -> Any:
        return _blank_to_none(v)


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------

class CategoryParent(CamelModel):
    id: int
    name: str
    slug: str
    type: CategoryType


class CategoryResponse(CamelModel):
    """Response model for category data."""

    id: int
    name: str
    slug: str
    description: Optional[str]
    type: CategoryType
    parent_id: Optional[int]
    created_at: datetime
    updated_at: datetime
    parent: Optional[CategoryParent] = None


class CategoryTreeResponse(CamelModel):
    """A node of the nested hierarchy; ``subCategories`` is null past the depth limit."""

    id: int
    name: str
    slug: str
    description: Optional[str]
    type: CategoryType
    parent_id: Optional[int]
    created_at: datetime
    updated_at: datetime
    sub_categories: Optional[list["CategoryTreeResponse"]] = None
