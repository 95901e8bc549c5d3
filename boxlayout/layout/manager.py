"""
manager.py — Layout coordinator.

The manager owns the currently selected algorithm, computes hierarchy
depth, applies the per-parent fill-strategy override and the manual
positioning shortcuts, and places newly created rectangles. Each diagram
may own its own manager; the selected algorithm is the only mutable state
and is swapped under a lock.
"""

import logging
import math
import threading
from typing import Dict, List, Optional

from .base_algorithm import BaseLayoutAlgorithm, LayoutInput
from .factory import (
    AlgorithmKey,
    algorithm_key,
    LayoutAlgorithmFactory,
    LayoutAlgorithmType,
    layout_algorithm_factory,
)
from ..config import get_settings
from ..constants import MIN_HEIGHT, MIN_WIDTH
from ..hierarchy import build_children_index, calculate_depth, get_root_rectangles
from ..models import (
    Bounds,
    DefaultSizes,
    FixedDimensions,
    GridDimensions,
    LayoutPreferences,
    Margins,
    Rectangle,
    Size,
)
from ..snapshot import LayoutMetadata

logger = logging.getLogger(__name__)


class LayoutManager:
    """
    Central entry point for layout calculations.

    Usage:
        manager = LayoutManager("flow")
        children = manager.calculate_child_layout(parent, children, all_rectangles=rects)
        size = manager.calculate_minimum_parent_size(parent.id, rects)
    """

    def __init__(
        self,
        algorithm_type: Optional[AlgorithmKey] = None,
        factory: Optional[LayoutAlgorithmFactory] = None,
    ):
        self._settings = get_settings()
        self._factory = factory or layout_algorithm_factory
        self._lock = threading.Lock()

        if algorithm_type is None:
            algorithm_type = self._settings.default_algorithm

        self._algorithm = self._factory.create_algorithm(algorithm_type)
        self._algorithm_type = algorithm_key(algorithm_type)

    # =========================================================================
    # ALGORITHM SELECTION
    # =========================================================================

    @property
    def current_algorithm_type(self) -> str:
        return self._algorithm_type

    def set_algorithm(self, algorithm_type: AlgorithmKey) -> None:
        """Switch algorithms; a new instance is only created on an actual change."""
        key = algorithm_key(algorithm_type)
        with self._lock:
            if key == self._algorithm_type:
                return
            self._algorithm = self._factory.create_algorithm(key)
            logger.debug(f"Layout algorithm switched from '{self._algorithm_type}' to '{key}'")
            self._algorithm_type = key

    def get_available_algorithms(self) -> List[str]:
        return self._factory.get_available_types()

    def get_current_algorithm_info(self) -> Dict[str, str]:
        """Name and description of the active algorithm."""
        algorithm = self._current()
        return {"name": algorithm.name, "description": algorithm.description}

    def get_all_algorithm_info(self) -> List[Dict[str, str]]:
        """Type, name and description of every registered algorithm."""
        infos = []
        for algorithm_type in self.get_available_algorithms():
            info = self._factory.get_algorithm_info(algorithm_type) or {}
            infos.append({
                "type": algorithm_type,
                "name": info.get("name") or algorithm_type,
                "description": info.get("description") or f"{algorithm_type} layout algorithm",
            })
        return infos

    def _current(self) -> BaseLayoutAlgorithm:
        with self._lock:
            return self._algorithm

    def _algorithm_for(self, layout_preferences: Optional[LayoutPreferences]) -> BaseLayoutAlgorithm:
        """A parent with a fill strategy is always laid out as a grid."""
        if layout_preferences is not None and layout_preferences.fill_strategy is not None:
            return self._factory.create_algorithm(LayoutAlgorithmType.GRID)
        return self._current()

    # =========================================================================
    # LAYOUT CALCULATIONS
    # =========================================================================

    def calculate_child_layout(
        self,
        parent: Rectangle,
        children: List[Rectangle],
        margins: Optional[Margins] = None,
        fixed_dimensions: Optional[FixedDimensions] = None,
        all_rectangles: Optional[List[Rectangle]] = None,
        layout_metadata: Optional[LayoutMetadata] = None,
    ) -> List[Rectangle]:
        """Positioned copies of ``children`` inside ``parent``."""
        if parent.is_manual_positioning_enabled:
            return list(children)

        layout_input = LayoutInput(
            parent_rect=parent,
            children=children,
            margins=margins or self._settings.margins(),
            fixed_dimensions=fixed_dimensions,
            all_rectangles=all_rectangles,
            depth=self._depth(parent, all_rectangles),
            layout_metadata=layout_metadata,
        )

        result = self._algorithm_for(parent.layout_preferences).calculate_layout(layout_input)
        return result.rectangles

    def calculate_minimum_parent_size(
        self,
        parent_id: str,
        rectangles: List[Rectangle],
        margins: Optional[Margins] = None,
        fixed_dimensions: Optional[FixedDimensions] = None,
    ) -> Size:
        """
        Smallest size the parent can take without clipping its children.

        Manual-positioning parents use the plain extent of their children's
        current positions plus one margin; everything else is delegated to
        the active algorithm (or Grid, for fill-strategy parents).
        """
        margins = margins or self._settings.margins()
        parent = next((r for r in rectangles if r.id == parent_id), None)
        children = [r for r in rectangles if r.parent_id == parent_id]

        if parent is None or not children:
            return Size(w=MIN_WIDTH, h=MIN_HEIGHT)

        if parent.is_manual_positioning_enabled:
            return self._current().manual_extent_size(parent, children, margins)

        layout_input = LayoutInput(
            parent_rect=parent,
            children=children,
            margins=margins,
            fixed_dimensions=fixed_dimensions,
            all_rectangles=rectangles,
            depth=self._depth(parent, rectangles),
        )
        return self._algorithm_for(parent.layout_preferences).calculate_minimum_parent_size(layout_input)

    def calculate_grid_dimensions(
        self,
        children_count: int,
        layout_preferences: Optional[LayoutPreferences] = None,
    ) -> GridDimensions:
        return self._algorithm_for(layout_preferences).calculate_grid_dimensions(
            children_count, layout_preferences
        )

    def calculate_new_rectangle_layout(
        self,
        parent_id: Optional[str],
        rectangles: List[Rectangle],
        default_sizes: Optional[DefaultSizes] = None,
        margins: Optional[Margins] = None,
    ) -> Bounds:
        """
        Initial position and size for a rectangle about to be created.

        - root: to the right of the last existing root, on the same line
        - child of a manual parent: next slot in a left-to-right flow that
          wraps below the lowest sibling when the parent is full
        - child of an automatic parent: its cell in the grid the parent
          would have with one more child
        """
        default_sizes = default_sizes or DefaultSizes()
        margins = margins or self._settings.margins()

        if not parent_id:
            return self._new_root_bounds(rectangles, default_sizes, margins)

        parent = next((r for r in rectangles if r.id == parent_id), None)
        if parent is None:
            return Bounds(x=0, y=0, w=default_sizes.leaf.w, h=default_sizes.leaf.h)

        siblings = build_children_index(rectangles).get(parent_id, [])
        if parent.is_manual_positioning_enabled:
            return self._new_manual_child_bounds(parent, siblings, default_sizes.leaf, margins)
        return self._new_grid_child_bounds(parent, len(siblings), margins)

    def _new_root_bounds(
        self,
        rectangles: List[Rectangle],
        default_sizes: DefaultSizes,
        margins: Margins,
    ) -> Bounds:
        roots = get_root_rectangles(rectangles)
        if not roots:
            return Bounds(x=0, y=0, w=default_sizes.root.w, h=default_sizes.root.h)

        last = roots[-1]
        return Bounds(
            x=last.right + margins.margin,
            y=last.y,
            w=default_sizes.root.w,
            h=default_sizes.root.h,
        )

    def _new_manual_child_bounds(
        self,
        parent: Rectangle,
        siblings: List[Rectangle],
        size: Size,
        margins: Margins,
    ) -> Bounds:
        if not siblings:
            return Bounds(
                x=parent.x + margins.margin,
                y=parent.y + margins.top_inset,
                w=size.w,
                h=size.h,
            )

        # Continue the lowest row of siblings if the new box still fits
        last_row_y = max(s.y for s in siblings)
        last_row = [s for s in siblings if s.y == last_row_y]
        x = max(s.right for s in last_row) + margins.margin

        if x + size.w <= parent.right - margins.margin:
            return Bounds(x=x, y=last_row_y, w=size.w, h=size.h)

        return Bounds(
            x=parent.x + margins.margin,
            y=max(s.bottom for s in siblings) + margins.margin,
            w=size.w,
            h=size.h,
        )

    def _new_grid_child_bounds(self, parent: Rectangle, existing: int, margins: Margins) -> Bounds:
        top_margin = margins.label_margin
        side_margin = margins.margin
        spacing = margins.margin

        available_width = max(MIN_WIDTH, parent.w - side_margin * 2)
        available_height = max(MIN_HEIGHT, parent.h - top_margin - side_margin)

        grid = self.calculate_grid_dimensions(existing + 1, parent.layout_preferences)

        child_width = max(MIN_WIDTH, math.floor(available_width / grid.cols))
        child_height = max(MIN_HEIGHT, math.floor(available_height / grid.rows))

        total_width = grid.cols * child_width + (grid.cols - 1) * spacing
        total_height = grid.rows * child_height + (grid.rows - 1) * spacing
        offset_x = max(0, available_width - total_width) / 2
        offset_y = max(0, available_height - total_height) / 2

        col = existing % grid.cols
        row = existing // grid.cols

        return Bounds(
            x=parent.x + side_margin + offset_x + col * (child_width + spacing),
            y=parent.y + top_margin + offset_y + row * (child_height + spacing),
            w=child_width,
            h=child_height,
        )

    def _depth(self, rect: Rectangle, all_rectangles: Optional[List[Rectangle]]) -> int:
        return calculate_depth(rect, all_rectangles, max_hops=self._settings.max_depth_hops)
