"""Nested category hierarchy built from a flat category list."""
from collections import defaultdict, deque
from typing import Optional

from artisan_admin.models.category import Category, CategoryNode


def build_category_tree(categories: list[Category], max_depth: int) -> list[CategoryNode]:
    """
    Materialize top-level categories with their descendants, breadth first.

    *max_depth* is the number of nested levels below the roots that get
    children attached. Nodes on the last materialized level keep
    ``sub_categories=None`` because their children were not loaded.
    Siblings are ordered by name.
    """
    children: dict[Optional[int], list[Category]] = defaultdict(list)
    for category in categories:
        children[category.parent_id].append(category)
    for siblings in children.values():
        siblings.sort(key=lambda c: (c.name, c.id))

    roots = [CategoryNode.from_category(c) for c in children[None]]
    queue = deque((node, 0) for node in roots)
    while queue:
        node, depth = queue.popleft()
        if depth >= max_depth:
            node.sub_categories = None
            continue
        node.sub_categories = [CategoryNode.from_category(c) for c in children[node.id]]
        queue.extend((child, depth + 1) for child in node.sub_categories)
    return roots
