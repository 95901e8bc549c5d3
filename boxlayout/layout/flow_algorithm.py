"""
flow_algorithm.py — Depth-alternating flow layout algorithm.

Pattern: children flow left-to-right in wrapping rows, or stack in a single
column, with the orientation alternating by hierarchy depth (even depth =
column, odd depth = row). Nested containers are packed bottom-up so their
size reflects their own fully-packed subtree.

The row wrap decision and the group centering carry stability thresholds so
that dragging a resize handle near a wrap boundary does not make children
jump back and forth between rows.
"""

import math
from dataclasses import dataclass
from typing import List

from .base_algorithm import (
    BaseLayoutAlgorithm,
    LayoutInput,
    LayoutResult,
)
from ..constants import (
    CONTAINER_LABEL_FACTOR,
    CONTAINER_LABEL_PADDING,
    CONTAINER_MIN_LABEL_WIDTH,
    DEFAULT_LEAF_HEIGHT,
    DEFAULT_LEAF_WIDTH,
    MIN_HEIGHT,
    MIN_WIDTH,
)
from ..models import FlowOrientation, Margins, Rectangle, Size


# =============================================================================
# STABILITY TUNING (grid units)
# =============================================================================

WRAP_DELTA = 1.0              # Past soft limit + delta a child always wraps
HYSTERESIS_FACTOR = 0.5       # Share of WRAP_DELTA in which row membership is sticky
CENTERING_THRESHOLD = 0.05    # Centering offsets below this are dropped
FIT_EPSILON = 1e-6            # Float noise tolerated at the soft limit
ROW_MATCH_EPSILON = 1e-3      # Input children closer than this in y share a row

ROUNDING_DECIMALS = 3
ROUNDING_EPSILON = 1e-9


@dataclass
class FlowItem:
    """A child being packed, in coordinates relative to the content origin."""
    rect: Rectangle
    w: float
    h: float
    x: float = 0.0
    y: float = 0.0
    # True when the input already had this child on the same row as the previous one
    continues_row: bool = False


class FlowLayoutAlgorithm(BaseLayoutAlgorithm):
    """
    Flow layout algorithm for hierarchical capability maps.

    Key features:
    - Row flow or column stack chosen by depth or explicit orientation
    - Three-zone wrap decision (soft limit, hysteresis zone, hard limit)
    - Group centering with a stability threshold
    - Integer snapping for whole-number margins, 3-decimal rounding otherwise
    """

    name = "flow"
    description = "Flow-based hierarchical layout with alternating row/column orientation"

    def do_calculate_layout(self, layout_input: LayoutInput) -> LayoutResult:
        """Compute positions for flow layout."""
        parent = layout_input.parent_rect
        if not layout_input.children:
            return LayoutResult()

        margins = layout_input.margins
        available_width = max(0, parent.w - margins.horizontal)
        available_height = max(0, parent.h - margins.vertical)

        items = self._prepare_items(layout_input)
        content = self._pack(items, self.parent_orientation(layout_input), available_width, margins.margin)

        offset_x = self._centering_offset(available_width, content.w)
        offset_y = self._centering_offset(available_height, content.h)

        origin_x = parent.x + margins.margin + offset_x
        origin_y = parent.y + margins.top_inset + offset_y

        rectangles = [self._place(item, origin_x, origin_y, margins) for item in items]

        return LayoutResult(
            rectangles=rectangles,
            min_parent_size=self.calculate_minimum_parent_size(layout_input),
        )

    def calculate_minimum_parent_size(self, layout_input: LayoutInput) -> Size:
        """Content packed without a width limit, plus margins."""
        if not layout_input.children:
            return Size(w=MIN_WIDTH, h=MIN_HEIGHT)

        margins = layout_input.margins
        items = self._prepare_items(layout_input)
        content = self._pack(items, self.parent_orientation(layout_input), math.inf, margins.margin)

        return Size(
            w=max(MIN_WIDTH, content.w + margins.horizontal),
            h=max(MIN_HEIGHT, content.h + margins.vertical),
        )

    # =========================================================================
    # ORIENTATION
    # =========================================================================

    def orientation_for_depth(self, depth: int) -> FlowOrientation:
        """Root level stacks in a column, the next level flows in a row, and so on."""
        return FlowOrientation.COL if depth % 2 == 0 else FlowOrientation.ROW

    def parent_orientation(self, layout_input: LayoutInput) -> FlowOrientation:
        """Orientation used to pack the children of ``layout_input.parent_rect``."""
        preferences = layout_input.parent_rect.layout_preferences
        if preferences is not None and preferences.orientation is not None:
            return preferences.orientation
        return self.orientation_for_depth(layout_input.parent_depth)

    # =========================================================================
    # SIZING
    # =========================================================================

    def _prepare_items(self, layout_input: LayoutInput) -> List[FlowItem]:
        """Size every child and record its previous row membership."""
        items: List[FlowItem] = []
        previous = None

        for child in layout_input.children:
            size = self._natural_size(child, layout_input)
            continues_row = (
                previous is not None and
                abs(child.y - previous.y) < ROW_MATCH_EPSILON and
                child.x > previous.x
            )
            items.append(FlowItem(rect=child, w=size.w, h=size.h, continues_row=continues_row))
            previous = child

        return items

    def _natural_size(self, child: Rectangle, layout_input: LayoutInput) -> Size:
        """Minimum size of one child; containers are packed bottom-up first."""
        if child.is_locked_as_is:
            return self.locked_size(child)

        if child.is_text:
            return self.text_label_size(child)

        if self.is_leaf(child):
            return self.leaf_size(
                layout_input.fixed_dimensions,
                max(child.w, DEFAULT_LEAF_WIDTH),
                max(child.h, DEFAULT_LEAF_HEIGHT),
            )

        if layout_input.children_of(child) and not layout_input.is_ancestor(child):
            return self.nested_minimum_size(child, layout_input)

        label_width = max(math.ceil(len(child.label) * CONTAINER_LABEL_FACTOR), CONTAINER_MIN_LABEL_WIDTH)
        return Size(
            w=max(MIN_WIDTH, child.w, label_width + CONTAINER_LABEL_PADDING),
            h=max(MIN_HEIGHT, child.h),
        )

    # =========================================================================
    # PACKING
    # =========================================================================

    def _pack(
        self,
        items: List[FlowItem],
        orientation: FlowOrientation,
        max_width: float,
        gutter: float,
    ) -> Size:
        """Assign relative positions and return the content size."""
        if orientation == FlowOrientation.ROW:
            return self._pack_row(items, max_width, gutter)
        return self._pack_column(items, gutter)

    def _pack_row(self, items: List[FlowItem], max_width: float, gutter: float) -> Size:
        """Pack children in rows, wrapping at the available width."""
        cursor_x = 0.0
        cursor_y = 0.0
        row_height = 0.0
        content_width = 0.0

        for item in items:
            if cursor_x > 0 and self.should_wrap(cursor_x + item.w, max_width, item.continues_row):
                content_width = max(content_width, cursor_x - gutter)
                cursor_y += row_height + gutter
                cursor_x = 0.0
                row_height = 0.0

            item.x = cursor_x
            item.y = cursor_y

            cursor_x += item.w + gutter
            row_height = max(row_height, item.h)

        content_width = max(content_width, cursor_x - gutter)
        return Size(w=content_width, h=cursor_y + row_height)

    def _pack_column(self, items: List[FlowItem], gutter: float) -> Size:
        """Stack children vertically."""
        cursor_y = 0.0
        column_width = 0.0

        for item in items:
            item.x = 0.0
            item.y = cursor_y
            cursor_y += item.h + gutter
            column_width = max(column_width, item.w)

        return Size(w=column_width, h=max(0.0, cursor_y - gutter))

    def should_wrap(self, projected_right: float, soft_limit: float, continues_row: bool) -> bool:
        """
        Three-zone wrap decision.

        - up to the soft limit the child stays on the current row
        - inside the hysteresis zone it keeps the row membership it had in
          the input (stays only if it already sat on this row)
        - past the hard limit it always wraps
        """
        hard_limit = soft_limit + WRAP_DELTA
        if projected_right > hard_limit:
            return True

        if projected_right <= soft_limit + FIT_EPSILON:
            return False

        hysteresis_limit = soft_limit + WRAP_DELTA * HYSTERESIS_FACTOR
        return not (continues_row and projected_right <= hysteresis_limit)

    # =========================================================================
    # PLACEMENT
    # =========================================================================

    def _centering_offset(self, available: float, used: float) -> float:
        """Half the slack, or zero when the slack is negligible or negative."""
        offset = (available - used) / 2
        if offset < CENTERING_THRESHOLD:
            return 0.0
        return offset

    def _place(self, item: FlowItem, origin_x: float, origin_y: float, margins: Margins) -> Rectangle:
        """Convert a packed item to an absolute, rounded rectangle."""
        x = origin_x + item.x
        y = origin_y + item.y

        if margins.is_whole:
            # Round edges, not sizes, so neighbours can never be pushed into each other
            left = self._snap_integer(x)
            top = self._snap_integer(y)
            width = self._snap_integer(x + item.w) - left
            height = self._snap_integer(y + item.h) - top
        else:
            left = self._round_precise(x)
            top = self._round_precise(y)
            width = self._round_precise(item.w)
            height = self._round_precise(item.h)

        return item.rect.with_geometry(left, top, width, height)

    def _snap_integer(self, value: float) -> float:
        """Round half up; shift-invariant, unlike round()."""
        return float(math.floor(value + 0.5))

    def _round_precise(self, value: float) -> float:
        """Round to 3 decimals, keeping the original when the change is noise."""
        rounded = round(value, ROUNDING_DECIMALS)
        if abs(rounded - value) < ROUNDING_EPSILON:
            return value
        return rounded
