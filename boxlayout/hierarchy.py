"""
hierarchy.py — Read-only traversal helpers for the rectangle tree.

The rectangle list is a flat table linked by ``parent_id``. These helpers
build a parent→children index once and walk it, tolerating dangling and
cyclic parent references instead of raising.
"""

import logging
from collections import defaultdict
from typing import Dict, Iterable, List, Optional

from .constants import MAX_DEPTH_HOPS
from .models import Rectangle

logger = logging.getLogger(__name__)


def build_children_index(rectangles: Iterable[Rectangle]) -> Dict[str, List[Rectangle]]:
    """Map each parent id to its direct children, preserving input order."""
    index: Dict[str, List[Rectangle]] = defaultdict(list)
    for rect in rectangles:
        if rect.parent_id:
            index[rect.parent_id].append(rect)
    return dict(index)


def get_children(parent_id: str, rectangles: Iterable[Rectangle]) -> List[Rectangle]:
    """Direct children of a rectangle."""
    return [rect for rect in rectangles if rect.parent_id == parent_id]


def get_root_rectangles(rectangles: Iterable[Rectangle]) -> List[Rectangle]:
    """Rectangles without a parent."""
    return [rect for rect in rectangles if not rect.parent_id]


def get_all_descendants(parent_id: str, rectangles: Iterable[Rectangle]) -> List[str]:
    """Ids of every descendant of a rectangle, depth-first."""
    index = build_children_index(rectangles)
    descendants: List[str] = []
    seen = {parent_id}
    stack = list(reversed(index.get(parent_id, [])))

    while stack:
        rect = stack.pop()
        if rect.id in seen:
            logger.warning(f"Cycle detected below {parent_id} at {rect.id}")
            continue
        seen.add(rect.id)
        descendants.append(rect.id)
        stack.extend(reversed(index.get(rect.id, [])))

    return descendants


def calculate_depth(
    rect: Rectangle,
    all_rectangles: Optional[Iterable[Rectangle]] = None,
    max_hops: int = MAX_DEPTH_HOPS,
) -> int:
    """
    Number of parent hops from a rectangle to a root.

    Stops early when a parent reference is missing and after ``max_hops``
    hops, so malformed hierarchies never loop. Without the full rectangle
    set only "root or not" is known, and non-roots report depth 1.
    """
    if not rect.parent_id:
        return 0

    if all_rectangles is None:
        return 1

    by_id = {r.id: r for r in all_rectangles}
    current = rect
    depth = 0

    while current.parent_id:
        if depth >= max_hops:
            logger.warning(f"Depth of {rect.id} exceeds {max_hops} hops; hierarchy may be cyclic")
            break
        depth += 1
        parent = by_id.get(current.parent_id)
        if parent is None:
            logger.warning(f"Parent {current.parent_id} of {current.id} not found")
            break
        current = parent

    return depth


def sort_rectangles_by_depth(rectangles: List[Rectangle]) -> List[Rectangle]:
    """Deepest rectangles first, ties broken by id for a stable order."""
    depths = {rect.id: calculate_depth(rect, rectangles) for rect in rectangles}
    return sorted(rectangles, key=lambda r: (-depths[r.id], r.id))
