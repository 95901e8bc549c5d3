"""
grid_algorithm.py — Uniform grid layout algorithm.

Pattern: children arranged in equal cells (max child width × max child
height), each child centered in its cell. The grid shape honours the
parent's fill strategy preferences.
"""

import math
from typing import List, Optional

from .base_algorithm import (
    BaseLayoutAlgorithm,
    LayoutInput,
    LayoutResult,
)
from ..constants import DEFAULT_LEAF_HEIGHT, DEFAULT_LEAF_WIDTH, MIN_HEIGHT, MIN_WIDTH
from ..models import Rectangle, Size


class GridLayoutAlgorithm(BaseLayoutAlgorithm):
    """
    Grid layout algorithm for row/column arrangements.

    Key features:
    - Near-square grid by default, fill strategy caps when configured
    - Type-aware child sizing (text label, leaf, nested parent)
    - Gutter equal to the margin, label margin reserved on top
    - Minimum parent size computed from theoretical child sizes, so
      repeated fit-to-children never grows the parent
    """

    name = "grid"
    description = "Arranges children in a grid pattern with configurable fill strategy"

    def do_calculate_layout(self, layout_input: LayoutInput) -> LayoutResult:
        """Compute positions for grid layout."""
        parent = layout_input.parent_rect
        children = layout_input.children
        if not children:
            return LayoutResult()

        margins = layout_input.margins
        top_margin = margins.label_margin
        side_margin = margins.margin
        spacing = margins.margin

        available_width = parent.w - side_margin * 2
        available_height = parent.h - top_margin - side_margin

        grid = self.calculate_grid_dimensions(len(children), parent.layout_preferences)

        # Generic children fill their share of the interior
        fill_size = Size(
            w=max(MIN_WIDTH, math.floor((available_width - (grid.cols - 1) * spacing) / grid.cols)),
            h=max(MIN_HEIGHT, math.floor((available_height - (grid.rows - 1) * spacing) / grid.rows)),
        )
        sizes = [self._child_size(child, layout_input, fill_size) for child in children]

        cell_width = max(size.w for size in sizes)
        cell_height = max(size.h for size in sizes)

        total_width = grid.cols * cell_width + (grid.cols - 1) * spacing
        total_height = grid.rows * cell_height + (grid.rows - 1) * spacing

        # Center the grid; never shift left/up when the parent is too small
        offset_x = max(0, available_width - total_width) / 2
        offset_y = max(0, available_height - total_height) / 2

        rectangles: List[Rectangle] = []
        for i, (child, size) in enumerate(zip(children, sizes)):
            col = i % grid.cols
            row = i // grid.cols

            cell_x = parent.x + side_margin + offset_x + col * (cell_width + spacing)
            cell_y = parent.y + top_margin + offset_y + row * (cell_height + spacing)

            x = cell_x + max(0, (cell_width - size.w) / 2)
            y = cell_y + max(0, (cell_height - size.h) / 2)

            rectangles.append(child.with_geometry(x, y, size.w, size.h))

        return LayoutResult(
            rectangles=rectangles,
            min_parent_size=self.calculate_minimum_parent_size(layout_input),
        )

    def calculate_minimum_parent_size(self, layout_input: LayoutInput) -> Size:
        """Calculate minimum size needed to fit all children snugly."""
        children = layout_input.children
        if not children:
            return Size(w=MIN_WIDTH, h=MIN_HEIGHT)

        margins = layout_input.margins
        spacing = margins.margin
        grid = self.calculate_grid_dimensions(
            len(children), layout_input.parent_rect.layout_preferences
        )

        # Theoretical sizes, not the current (possibly expanded) ones
        sizes = [self._child_size(child, layout_input) for child in children]
        cell_width = max(size.w for size in sizes)
        cell_height = max(size.h for size in sizes)

        width = self._span(grid.cols, cell_width, spacing) + margins.margin * 2
        height = self._span(grid.rows, cell_height, spacing) + margins.label_margin + margins.margin

        return Size(w=max(MIN_WIDTH, width), h=max(MIN_HEIGHT, height))

    def _span(self, count: int, cell: float, spacing: float) -> float:
        """Length of ``count`` cells separated by ``spacing``."""
        return count * cell + max(0, count - 1) * spacing

    def _child_size(
        self,
        child: Rectangle,
        layout_input: LayoutInput,
        fill_size: Optional[Size] = None,
    ) -> Size:
        """
        Size a single child by type.

        Text labels use font metrics, leaves use fixed dimensions or the
        default leaf size, parents are sized recursively from their own
        subtree. Anything else fills its cell during layout and falls back
        to the default leaf size for minimum-size queries.
        """
        if child.is_locked_as_is:
            return self.locked_size(child)

        if child.is_text:
            return self.text_label_size(child)

        if self.is_leaf(child):
            return self.leaf_size(layout_input.fixed_dimensions, DEFAULT_LEAF_WIDTH, DEFAULT_LEAF_HEIGHT)

        if self.is_container(child):
            return self.nested_minimum_size(child, layout_input)

        if fill_size is not None:
            return fill_size
        return Size(w=DEFAULT_LEAF_WIDTH, h=DEFAULT_LEAF_HEIGHT)
