"""
Category endpoints:
  GET    /categories           – Flat list, or the nested tree with ?hierarchy=true (public)
  GET    /categories/{id}      – Get a category with its parent (public)
  POST   /categories           – Create a category (Admin)
  PUT    /categories/{id}      – Partially update a category (Admin)
  DELETE /categories/{id}      – Delete a leaf category (Admin)
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
import logging

from artisan_admin.core.dependencies import db_dependency, require_admin
from artisan_admin.models.category import CategoryType
from artisan_admin.models.user import User
from artisan_admin.schemas.category import (
    CategoryCreate,
    CategoryResponse,
    CategoryTreeResponse,
    CategoryUpdate,
)
from artisan_admin.services.category_service import CategoryService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/categories", tags=["Categories"])


def _parse_type(raw: Optional[str]) -> Optional[CategoryType]:
    """Unknown type filters are ignored rather than rejected."""
    if not raw:
        return None
    try:
        return CategoryType(raw.strip().upper())
    except ValueError:
        logger.warning("Ignoring unknown category type filter '%s'", raw)
        return None


@router.get(
    "",
    response_model=None,
    summary="List categories (flat or nested)",
)
def list_categories(
    type_filter: Optional[str] = Query(None, alias="type", description="PRODUCT, SERVICE or TRAINING"),
    hierarchy: bool = Query(False, description="Return top-level categories with nested subCategories"),
    depth: Optional[int] = Query(None, ge=0, le=10, description="Nested levels to load below the roots"),
    conn=Depends(db_dependency),
) -> list:
    category_type = _parse_type(type_filter)
    service = CategoryService(conn)
    if hierarchy:
        logger.info("Returning category hierarchy type=%s depth=%s", category_type, depth)
        tree = service.category_tree(category_type, max_depth=depth)
        return [CategoryTreeResponse.model_validate(node) for node in tree]

    logger.info("Returning flat category list type=%s", category_type)
    return [CategoryResponse.model_validate(c) for c in service.list_categories(category_type)]


@router.get(
    "/{category_id}",
    response_model=CategoryResponse,
    summary="Get a specific category",
)
def get_category(
    category_id: int,
    conn=Depends(db_dependency),
):
    logger.info("Fetching category id=%s", category_id)
    return CategoryResponse.model_validate(CategoryService(conn).get_category(category_id))


@router.post(
    "",
    response_model=CategoryResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new category",
)
def create_category(
    data: CategoryCreate,
    conn=Depends(db_dependency),
    _: User = Depends(require_admin),
):
    """
    Create a category. Name + type must be unique; the slug is derived from
    the name and suffixed (``-1``, ``-2``…) on collision. A parent must have
    the same type.
    """
    logger.info("Creating category %s", data.name)
    return CategoryResponse.model_validate(CategoryService(conn).create_category(data))


@router.put(
    "/{category_id}",
    response_model=CategoryResponse,
    summary="Update a category",
)
def update_category(
    category_id: int,
    data: CategoryUpdate,
    conn=Depends(db_dependency),
    _: User = Depends(require_admin),
):
    """Only fields present in the body are changed; ``parentId: null`` detaches."""
    logger.info("Updating category id=%s", category_id)
    return CategoryResponse.model_validate(
        CategoryService(conn).update_category(category_id, data)
    )


@router.delete(
    "/{category_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a category",
)
def delete_category(
    category_id: int,
    conn=Depends(db_dependency),
    _: User = Depends(require_admin),
):
    """
    Delete a category. Refused while it has subcategories (400) or while
    listings reference it (409).
    """
    logger.info("Deleting category id=%s", category_id)
    CategoryService(conn).delete_category(category_id)
