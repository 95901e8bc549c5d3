"""
mixed_flow_algorithm.py — Adaptive mixed-orientation layout algorithm.

Pattern: generate several candidate arrangements of the same children
(single row, single column, two balanced columns, two balanced rows and a
few matrix grids), score each on area efficiency, aspect ratio and balance,
and keep the best one. This is the default algorithm.

Candidate generation is linear in the number of children, apart from the
grid search for large counts which only tries O(sqrt(n)) shapes.
"""

import logging
import math
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

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
from ..models import Rectangle, Size

logger = logging.getLogger(__name__)


# =============================================================================
# SCORING WEIGHTS
# =============================================================================

EFFICIENCY_WEIGHT = 0.5
ASPECT_RATIO_WEIGHT = 0.2
BALANCE_WEIGHT = 0.1

GRID_UTILIZATION_WEIGHT = 0.3
GRID_SHAPE_WEIGHT = 0.2
PERFECT_GRID_BONUS = 0.2

SINGLE_COLUMN_BONUS = -0.1
GRID_TYPE_BONUS = 0.1

# Values closer to zero than this snap to zero
PRECISION_EPSILON = 0.001

# Fixed grid shapes tried for small child counts
PRESET_GRIDS = {
    4: [(2, 2)],
    6: [(2, 3), (3, 2)],
    8: [(2, 4), (4, 2)],
    9: [(3, 3)],
}


@dataclass
class Placement:
    """A child at a position relative to the candidate's origin."""
    order: int
    rect: Rectangle
    x: float
    y: float
    w: float
    h: float


@dataclass
class LayoutOption:
    """One candidate arrangement with its content extent and score."""
    kind: str
    width: float
    height: float
    placements: List[Placement] = field(default_factory=list)
    balance: float = 0.0
    grid: Optional[Tuple[int, int]] = None
    score: float = 0.0

    @property
    def label(self) -> str:
        """Readable candidate name, e.g. ``grid-3x2``."""
        if self.grid is not None:
            return f"grid-{self.grid[0]}x{self.grid[1]}"
        return self.kind


class MixedFlowLayoutAlgorithm(BaseLayoutAlgorithm):
    """
    Mixed-orientation flow layout.

    Key features:
    - Candidate arrangements generated per call, scored, best one kept
    - Greedy height/width balancing for the two-column and two-row options
    - Matrix grids for counts where a near-uniform grid fits
    - Result centered in the parent, coordinates snapped to 3 decimals
    """

    name = "mixed-flow"
    description = "Adaptive flow layout combining rows and columns to minimize whitespace"

    def do_calculate_layout(self, layout_input: LayoutInput) -> LayoutResult:
        """Compute positions for the best scoring candidate."""
        if not layout_input.children:
            return LayoutResult()

        best = self._best_option(layout_input)
        rectangles = self._position_children(best, layout_input)

        return LayoutResult(
            rectangles=rectangles,
            min_parent_size=self._parent_size(best, layout_input),
        )

    def calculate_minimum_parent_size(self, layout_input: LayoutInput) -> Size:
        """Best candidate's extent plus margins."""
        if not layout_input.children:
            return Size(w=MIN_WIDTH, h=MIN_HEIGHT)
        return self._parent_size(self._best_option(layout_input), layout_input)

    def _best_option(self, layout_input: LayoutInput) -> LayoutOption:
        sizes = [self._child_size(child, layout_input) for child in layout_input.children]
        options = self.generate_layout_options(
            layout_input.children, sizes, layout_input.margins.margin
        )
        best = self.select_optimal_layout(options)
        logger.debug(
            f"Mixed flow chose {best.label} (score {best.score:.3f}) "
            f"for {len(sizes)} children of {layout_input.parent_rect.id}"
        )
        return best

    def _parent_size(self, option: LayoutOption, layout_input: LayoutInput) -> Size:
        margins = layout_input.margins
        return Size(
            w=max(MIN_WIDTH, self.snap_to_grid(option.width + margins.horizontal)),
            h=max(MIN_HEIGHT, self.snap_to_grid(option.height + margins.vertical)),
        )

    # =========================================================================
    # CHILD SIZING
    # =========================================================================

    def _child_size(self, child: Rectangle, layout_input: LayoutInput) -> Size:
        """
        Minimum size of one child.

        Text labels use font metrics, leaves keep their current size (at
        least the default leaf size) unless fixed dimensions apply, and
        containers are at least as wide as their label and as large as
        their own packed subtree.
        """
        if child.is_locked_as_is:
            return self.locked_size(child)

        if child.is_text:
            size = self.text_label_size(child)
            return Size(w=self.snap_to_grid(size.w), h=self.snap_to_grid(size.h))

        if self.is_leaf(child):
            return self.leaf_size(
                layout_input.fixed_dimensions,
                max(self.snap_to_grid(child.w), DEFAULT_LEAF_WIDTH),
                max(self.snap_to_grid(child.h), DEFAULT_LEAF_HEIGHT),
            )

        label_width = max(math.ceil(len(child.label) * CONTAINER_LABEL_FACTOR), CONTAINER_MIN_LABEL_WIDTH)
        w = max(MIN_WIDTH, self.snap_to_grid(child.w), label_width + CONTAINER_LABEL_PADDING)
        h = max(MIN_HEIGHT, self.snap_to_grid(child.h))

        if layout_input.children_of(child):
            nested = self.nested_minimum_size(child, layout_input)
            w = max(w, nested.w)
            h = max(h, nested.h)

        return Size(w=w, h=h)

    # =========================================================================
    # CANDIDATE GENERATION
    # =========================================================================

    def generate_layout_options(
        self,
        children: List[Rectangle],
        sizes: List[Size],
        gap: float,
    ) -> List[LayoutOption]:
        """Build and score every candidate arrangement."""
        items = [(i, child, size) for i, (child, size) in enumerate(zip(children, sizes))]
        options = [
            self._single_row(items, gap),
            self._single_column(items, gap),
        ]

        if len(items) > 2:
            options.append(self._two_columns(items, gap))
            options.append(self._two_rows(items, gap))

        if len(items) >= 4:
            for cols, rows in self.grid_candidates(len(items)):
                options.append(self._matrix_grid(items, cols, rows, gap))

        for option in options:
            option.score = self.evaluate_layout(option)

        return options

    def grid_candidates(self, count: int) -> List[Tuple[int, int]]:
        """Grid shapes (cols, rows) worth scoring for ``count`` children."""
        if count in PRESET_GRIDS:
            return list(PRESET_GRIDS[count])

        shapes: List[Tuple[int, int]] = []
        if count > 9:
            for cols in range(2, math.ceil(math.sqrt(count * 1.5)) + 1):
                rows = math.ceil(count / cols)
                if count <= cols * rows <= count + 2:
                    shapes.append((cols, rows))
        return shapes

    def _row(self, items, gap: float, y: float = 0.0) -> Tuple[List[Placement], float, float]:
        """Place items left to right; returns placements, width and height."""
        placements = []
        cursor_x = 0.0
        height = 0.0
        for order, rect, size in items:
            placements.append(Placement(order=order, rect=rect, x=cursor_x, y=y, w=size.w, h=size.h))
            cursor_x += size.w + gap
            height = max(height, size.h)
        width = cursor_x - gap if placements else 0.0
        return placements, width, height

    def _column(self, items, gap: float, x: float = 0.0) -> Tuple[List[Placement], float, float]:
        """Place items top to bottom; returns placements, width and height."""
        placements = []
        cursor_y = 0.0
        width = 0.0
        for order, rect, size in items:
            placements.append(Placement(order=order, rect=rect, x=x, y=cursor_y, w=size.w, h=size.h))
            cursor_y += size.h + gap
            width = max(width, size.w)
        height = cursor_y - gap if placements else 0.0
        return placements, width, height

    def _single_row(self, items, gap: float) -> LayoutOption:
        placements, width, height = self._row(items, gap)
        return LayoutOption(kind="single-row", width=width, height=height, placements=placements)

    def _single_column(self, items, gap: float) -> LayoutOption:
        placements, width, height = self._column(items, gap)
        return LayoutOption(kind="single-column", width=width, height=height, placements=placements)

    def _two_columns(self, items, gap: float) -> LayoutOption:
        first, second = self.balance_groups(items, lambda size: size.h)

        left, left_width, left_height = self._column(first, gap)
        right, right_width, right_height = self._column(second, gap, x=left_width + gap)

        return LayoutOption(
            kind="two-column",
            width=left_width + gap + right_width,
            height=max(left_height, right_height),
            placements=left + right,
            balance=self._imbalance(left_height, right_height),
        )

    def _two_rows(self, items, gap: float) -> LayoutOption:
        first, second = self.balance_groups(items, lambda size: size.w)

        top, top_width, top_height = self._row(first, gap)
        bottom, bottom_width, bottom_height = self._row(second, gap, y=top_height + gap)

        return LayoutOption(
            kind="two-row",
            width=max(top_width, bottom_width),
            height=top_height + gap + bottom_height,
            placements=top + bottom,
            balance=self._imbalance(top_width, bottom_width),
        )

    def _matrix_grid(self, items, cols: int, rows: int, gap: float) -> LayoutOption:
        """Uniform cells sized by the largest child; children centered in cells."""
        cell_width = max(size.w for _, _, size in items)
        cell_height = max(size.h for _, _, size in items)

        placements = []
        for i, (order, rect, size) in enumerate(items[:cols * rows]):
            col = i % cols
            row = i // cols
            placements.append(Placement(
                order=order,
                rect=rect,
                x=col * (cell_width + gap) + (cell_width - size.w) / 2,
                y=row * (cell_height + gap) + (cell_height - size.h) / 2,
                w=size.w,
                h=size.h,
            ))

        return LayoutOption(
            kind="grid",
            width=cols * cell_width + (cols - 1) * gap,
            height=rows * cell_height + (rows - 1) * gap,
            placements=placements,
            grid=(cols, rows),
        )

    def balance_groups(self, items, measure):
        """Greedy split: each item joins the group with the smaller running total."""
        first, second = [], []
        total_first = total_second = 0.0
        for item in items:
            value = measure(item[2])
            if total_first <= total_second:
                first.append(item)
                total_first += value
            else:
                second.append(item)
                total_second += value
        return first, second

    def _imbalance(self, a: float, b: float) -> float:
        largest = max(a, b)
        if largest <= 0:
            return 0.0
        return abs(a - b) / largest

    # =========================================================================
    # SCORING
    # =========================================================================

    def evaluate_layout(self, option: LayoutOption) -> float:
        """
        Composite quality score (higher is better).

        efficiency × 0.5 − |ln(aspect ratio)| × 0.2 − balance × 0.1,
        plus a bonus for well-filled, square-ish grids and a small penalty
        for the single column.
        """
        area = option.width * option.height
        if area <= 0:
            efficiency = 0.0
            aspect_penalty = 0.0
        else:
            used = sum(p.w * p.h for p in option.placements)
            efficiency = used / area
            aspect_penalty = abs(math.log(option.width / option.height))

        grid_bonus = 0.0
        type_bonus = 0.0
        if option.grid is not None:
            cols, rows = option.grid
            cells = cols * rows
            count = len(option.placements)

            utilization = count / cells
            shape = min(cols, rows) / max(cols, rows)
            perfect = PERFECT_GRID_BONUS if count == cells else 0.0

            grid_bonus = utilization * GRID_UTILIZATION_WEIGHT + shape * GRID_SHAPE_WEIGHT + perfect
            type_bonus = GRID_TYPE_BONUS
        elif option.kind == "single-column":
            type_bonus = SINGLE_COLUMN_BONUS

        return (
            efficiency * EFFICIENCY_WEIGHT
            - aspect_penalty * ASPECT_RATIO_WEIGHT
            - option.balance * BALANCE_WEIGHT
            + grid_bonus
            + type_bonus
        )

    def select_optimal_layout(self, options: List[LayoutOption]) -> LayoutOption:
        """Highest score wins; ties keep the earlier candidate."""
        best = options[0]
        for option in options[1:]:
            if option.score > best.score:
                best = option
        return best

    # =========================================================================
    # PLACEMENT
    # =========================================================================

    def _position_children(self, option: LayoutOption, layout_input: LayoutInput) -> List[Rectangle]:
        """Translate the candidate into the parent and center it in the slack."""
        parent = layout_input.parent_rect
        margins = layout_input.margins

        available_width = parent.w - margins.horizontal
        available_height = parent.h - margins.vertical
        extra_width = available_width - option.width
        extra_height = available_height - option.height

        origin_x = parent.x + margins.margin + (extra_width / 2 if extra_width > 0 else 0)
        origin_y = parent.y + margins.top_inset + (extra_height / 2 if extra_height > 0 else 0)

        return [
            p.rect.with_geometry(
                self.snap_to_grid(origin_x + p.x),
                self.snap_to_grid(origin_y + p.y),
                self.snap_to_grid(p.w),
                self.snap_to_grid(p.h),
            )
            for p in sorted(option.placements, key=lambda p: p.order)
        ]

    def snap_to_grid(self, value: float) -> float:
        """Drop floating-point noise: near-zero becomes 0, else 3 decimals."""
        if abs(value) < PRECISION_EPSILON:
            return 0.0
        return round(value, 3)
