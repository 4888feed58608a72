"""
Domain model representing a Category row from the DB, plus the in-memory
tree node used for the nested hierarchy projection.
"""
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional
import logging

logger = logging.getLogger(__name__)


class CategoryType(str, Enum):
    PRODUCT = "PRODUCT"
    SERVICE = "SERVICE"
    TRAINING = "TRAINING"


@dataclass
class Category:
    id: int
    name: str
    slug: str
    description: Optional[str]
    type: CategoryType
    parent_id: Optional[int]
    created_at: datetime
    updated_at: datetime
    parent: Optional["Category"] = None

    @classmethod
    def from_row(cls, row) -> "Category":
        """Build a Category from a sqlite3.Row object."""
        logger.trace("Hydrating Category id=%s from database row", row["id"])
        return cls(
            id=row["id"],
            name=row["name"],
            slug=row["slug"],
            description=row["description"],
            type=CategoryType(row["type"]),
            parent_id=row["parent_id"],
            created_at=datetime.fromisoformat(row["created_at"]),
            updated_at=datetime.fromisoformat(row["updated_at"]),
        )


@dataclass
class CategoryNode:
    """A category inside the nested hierarchy.

    ``sub_categories`` is None when the node sits at the depth limit and its
    children were not materialized.
    """

    id: int
    name: str
    slug: str
    description: Optional[str]
    type: CategoryType
    parent_id: Optional[int]
    created_at: datetime
    updated_at: datetime
    sub_categories: Optional[list["CategoryNode"]] = field(default_factory=list)

    @classmethod
    def from_category(cls, category: Category) -> "CategoryNode":
        return cls(
            id=category.id,
            name=category.name,
            slug=category.slug,
            description=category.description,
            type=category.type,
            parent_id=category.parent_id,
            created_at=category.created_at,
            updated_at=category.updated_at,
        )
