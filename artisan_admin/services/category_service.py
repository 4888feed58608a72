"""
Category management service.

Business rules enforced here:
- Name + type is unique; slugs are unique across all types.
- A parent must exist and share the child's type.
- Re-parenting may not create a cycle (self or any descendant as parent).
- A category with subcategories cannot be deleted, nor one that listings use.
"""
import re
import sqlite3
from typing import Optional
import logging

from artisan_admin.core.config import settings
from artisan_admin.core.exceptions import ConflictError, NotFoundError, ValidationError
from artisan_admin.models.category import Category, CategoryNode, CategoryType
from artisan_admin.repositories.category_repository import CategoryRepository
from artisan_admin.schemas.category import CategoryCreate, CategoryUpdate
from artisan_admin.services.category_tree import build_category_tree

logger = logging.getLogger(__name__)

FALLBACK_SLUG = "category"


def slugify(name: str) -> str:
    """Lowercase, strip punctuation and join words with single hyphens."""
    slug = name.lower().strip()
    slug = re.sub(r"[^\w\s-]", "", slug, flags=re.ASCII)
    slug = re.sub(r"[\s_-]+", "-", slug)
    return slug.strip("-")


class CategoryService:
    def __init__(self, conn: sqlite3.Connection) -> None:
        logger.trace("Initializing CategoryService")
        self._repo = CategoryRepository(conn)

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def get_category(self, category_id: int) -> Category:
        """Return a category with its parent summary attached, or raise 404."""
        logger.info("Fetching category id=%s", category_id)
        category = self._repo.get_by_id(category_id)
        if not category:
            logger.warning("Category id=%s not found", category_id)
            raise NotFoundError("Category not found.")
        if category.parent_id is not None:
            category.parent = self._repo.get_by_id(category.parent_id)
        return category

    def list_categories(self, category_type: Optional[CategoryType] = None) -> list[Category]:
        logger.info("Listing categories type=%s", category_type)
        return self._repo.list_all(category_type)

    def category_tree(
        self,
        category_type: Optional[CategoryType] = None,
        max_depth: Optional[int] = None,
    ) -> list[CategoryNode]:
        depth = settings.CATEGORY_TREE_MAX_DEPTH if max_depth is None else max_depth
        logger.info("Building category tree type=%s max_depth=%s", category_type, depth)
        return build_category_tree(self._repo.list_all(category_type), depth)

    # ------------------------------------------------------------------
    # Create
    # ------------------------------------------------------------------

    def create_category(self, data: CategoryCreate) -> Category:
        logger.info("Creating category name=%s type=%s", data.name, data.type.value)
        if self._repo.find_by_name_and_type(data.name, data.type):
            logger.warning("Duplicate category name=%s type=%s", data.name, data.type.value)
            raise ConflictError(
                f"A category with the name '{data.name}' and type '{data.type.value}' already exists."
            )

        if data.parent_id is not None:
            self._require_parent(data.parent_id, data.type)

        category = self._repo.create(
            name=data.name,
            slug=self._unique_slug(data.name),
            category_type=data.type,
            description=data.description or None,
            parent_id=data.parent_id,
        )
        logger.info("Category created id=%s slug=%s", category.id, category.slug)
        return self.get_category(category.id)

    # ------------------------------------------------------------------
    # Update
    # ------------------------------------------------------------------

    def update_category(self, category_id: int, data: CategoryUpdate) -> Category:
        logger.info("Updating category id=%s fields=%s", category_id, sorted(data.model_fields_set))
        category = self.get_category(category_id)
        present = data.model_fields_set
        updates: dict = {}

        new_type = data.type if "type" in present and data.type is not None else category.type
        new_name = data.name if "name" in present and data.name is not None else category.name

        if new_name != category.name or new_type != category.type:
            if self._repo.find_by_name_and_type(new_name, new_type, exclude_id=category_id):
                logger.warning("Category rename conflict name=%s type=%s", new_name, new_type.value)
                raise ConflictError(
                    f"A category with the name '{new_name}' and type '{new_type.value}' already exists."
                )

        if new_type != category.type:
            self._check_retype(category)

        if new_name != category.name:
            updates["name"] = new_name
            slug = slugify(new_name) or FALLBACK_SLUG
            if slug != category.slug:
                updates["slug"] = self._unique_slug(new_name, exclude_id=category_id)

        if "description" in present:
            updates["description"] = data.description or None

        if new_type != category.type:
            updates["type"] = new_type.value

        if "parent_id" in present:
            if data.parent_id is not None:
                self._check_reparent(category_id, data.parent_id, new_type)
            if data.parent_id != category.parent_id:
                updates["parent_id"] = data.parent_id
        elif new_type != category.type and category.parent_id is not None:
            logger.info("Clearing parent of category id=%s after type change", category_id)
            updates["parent_id"] = None

        if not updates:
            logger.info("No changes for category id=%s", category_id)
            return category

        self._repo.update(category_id, **updates)
        logger.info("Category updated id=%s", category_id)
        return self.get_category(category_id)

    # ------------------------------------------------------------------
    # Delete
    # ------------------------------------------------------------------

    def delete_category(self, category_id: int) -> None:
        logger.info("Deleting category id=%s", category_id)
        category = self.get_category(category_id)

        if self._repo.count_children(category_id) > 0:
            logger.warning("Category id=%s has subcategories; refusing delete", category_id)
            raise ValidationError(
                "Cannot delete category: it has subcategories. "
                "Please delete or reassign them first."
            )

        try:
            self._repo.delete(category_id)
        except sqlite3.IntegrityError:
            logger.warning("Category id=%s is still referenced by listings", category_id)
            raise ConflictError(
                "Cannot delete category: it is still used by listings. "
                "Please reassign or remove them first."
            )
        logger.info("Category deleted id=%s name=%s", category_id, category.name)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _unique_slug(self, name: str, exclude_id: Optional[int] = None) -> str:
        base = slugify(name) or FALLBACK_SLUG
        slug, counter = base, 1
        while self._repo.slug_exists(slug, exclude_id=exclude_id):
            slug = f"{base}-{counter}"
            counter += 1
        return slug

    def _require_parent(self, parent_id: int, category_type: CategoryType) -> Category:
        parent = self._repo.get_by_id(parent_id)
        if parent is None:
            logger.warning("Parent category id=%s not found", parent_id)
            raise ValidationError("Parent category not found.")
        if parent.type != category_type:
            logger.warning(
                "Parent id=%s type=%s does not match %s",
                parent_id,
                parent.type.value,
                category_type.value,
            )
            raise ValidationError("Parent category must be of the same type.")
        return parent

    def _check_retype(self, category: Category) -> None:
        """Subcategories and listings are tied to the current type."""
        if self._repo.count_children(category.id) > 0:
            logger.warning("Category id=%s has subcategories; refusing type change", category.id)
            raise ValidationError(
                "Cannot change the type of a category that has subcategories."
            )
        if self._repo.count_listings(category.id) > 0:
            logger.warning("Category id=%s is used by listings; refusing type change", category.id)
            raise ValidationError(
                "Cannot change the type of a category that is used by listings."
            )

    def _check_reparent(self, category_id: int, parent_id: int, category_type: CategoryType) -> None:
        if parent_id == category_id:
            raise ValidationError("A category cannot be its own parent.")
        parent = self._require_parent(parent_id, category_type)

        # Walk up from the new parent; meeting the category itself means a cycle.
        seen = {category_id}
        ancestor: Optional[Category] = parent
        while ancestor is not None and ancestor.parent_id is not None:
            if ancestor.parent_id in seen:
                logger.warning("Re-parenting category id=%s under id=%s would create a cycle", category_id, parent_id)
                raise ValidationError("A category cannot be moved under one of its own subcategories.")
            seen.add(ancestor.id)
            ancestor = self._repo.get_by_id(ancestor.parent_id)
