"""
operations.py — Whole-diagram layout operations.

These functions take the flat rectangle list, apply the layout manager to
the relevant parents and return a new list in the same order. Input
rectangles are never mutated.
"""

import logging
from collections import deque
from functools import lru_cache
from typing import Dict, Iterable, List, Optional

from .hierarchy import build_children_index, get_all_descendants, get_root_rectangles
from .layout.manager import LayoutManager
from .models import FixedDimensions, Margins, Rectangle
from .snapshot import LayoutMetadata, should_preserve_exact_layout

logger = logging.getLogger(__name__)


@lru_cache()
def get_layout_manager() -> LayoutManager:
    """Shared manager used when callers do not pass their own."""
    return LayoutManager()


def update_children_layout(
    rectangles: List[Rectangle],
    manager: Optional[LayoutManager] = None,
    margins: Optional[Margins] = None,
    fixed_dimensions: Optional[FixedDimensions] = None,
    layout_metadata: Optional[LayoutMetadata] = None,
) -> List[Rectangle]:
    """
    Re-run layout for every parent, top-down from the roots.

    Rectangles not reachable from a root (dangling or cyclic parent
    references) keep their geometry. Metadata that asks for exact
    preservation returns the input unchanged.
    """
    if layout_metadata is not None and should_preserve_exact_layout(layout_metadata):
        return list(rectangles)

    start_ids = [root.id for root in get_root_rectangles(rectangles)]
    return _relayout_from(start_ids, rectangles, manager, margins, fixed_dimensions)


def fit_parent_to_children(
    parent_id: str,
    rectangles: List[Rectangle],
    manager: Optional[LayoutManager] = None,
    margins: Optional[Margins] = None,
    fixed_dimensions: Optional[FixedDimensions] = None,
) -> List[Rectangle]:
    """
    Resize a parent to its minimum size and lay its subtree out again.

    Missing, childless and locked parents are left as they are.
    """
    manager = manager or get_layout_manager()
    parent = next((r for r in rectangles if r.id == parent_id), None)

    if parent is None:
        logger.warning(f"Cannot fit missing parent {parent_id}")
        return list(rectangles)
    if parent.is_locked_as_is:
        return list(rectangles)
    if not any(r.parent_id == parent_id for r in rectangles):
        return list(rectangles)

    size = manager.calculate_minimum_parent_size(
        parent_id, rectangles, margins=margins, fixed_dimensions=fixed_dimensions
    )
    resized = [
        r.with_geometry(r.x, r.y, size.w, size.h) if r.id == parent_id else r
        for r in rectangles
    ]
    return _relayout_from([parent_id], resized, manager, margins, fixed_dimensions)


def fit_parent_to_children_recursive(
    parent_id: str,
    rectangles: List[Rectangle],
    manager: Optional[LayoutManager] = None,
    margins: Optional[Margins] = None,
    fixed_dimensions: Optional[FixedDimensions] = None,
) -> List[Rectangle]:
    """Fit a parent, then each of its ancestors in turn up to the root."""
    current = list(rectangles)
    visited = set()
    parent_id: Optional[str] = parent_id

    while parent_id and parent_id not in visited:
        visited.add(parent_id)
        parent = next((r for r in current if r.id == parent_id), None)
        if parent is None:
            break
        current = fit_parent_to_children(
            parent_id, current, manager=manager, margins=margins, fixed_dimensions=fixed_dimensions
        )
        parent_id = parent.parent_id

    return current


def _relayout_from(
    start_ids: Iterable[str],
    rectangles: List[Rectangle],
    manager: Optional[LayoutManager],
    margins: Optional[Margins],
    fixed_dimensions: Optional[FixedDimensions],
) -> List[Rectangle]:
    """Breadth-first relayout of the subtrees below ``start_ids``."""
    manager = manager or get_layout_manager()
    by_id: Dict[str, Rectangle] = {r.id: r for r in rectangles}
    child_ids = {
        parent_id: [child.id for child in children]
        for parent_id, children in build_children_index(rectangles).items()
    }

    queue = deque(start_ids)
    visited = set()

    while queue:
        parent_id = queue.popleft()
        if parent_id in visited:
            continue
        visited.add(parent_id)

        ids = child_ids.get(parent_id)
        if not ids:
            continue

        snapshot = list(by_id.values())
        laid_out = manager.calculate_child_layout(
            by_id[parent_id],
            [by_id[i] for i in ids],
            margins=margins,
            fixed_dimensions=fixed_dimensions,
            all_rectangles=snapshot,
        )
        for rect in laid_out:
            previous = by_id[rect.id]
            by_id[rect.id] = rect
            if rect.is_manual_positioning_enabled:
                _translate_descendants(rect.id, rect.x - previous.x, rect.y - previous.y, by_id)

        queue.extend(ids)

    return [by_id[r.id] for r in rectangles]


def _translate_descendants(parent_id: str, dx: float, dy: float, by_id: Dict[str, Rectangle]) -> None:
    """Shift a manual parent's subtree so its children stay where they were inside it."""
    if dx == 0 and dy == 0:
        return

    for rect_id in get_all_descendants(parent_id, list(by_id.values())):
        rect = by_id[rect_id]
        by_id[rect_id] = rect.with_geometry(rect.x + dx, rect.y + dy, rect.w, rect.h)
