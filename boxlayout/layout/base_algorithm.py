"""
base_algorithm.py — Abstract base class for layout algorithms.

All layout algorithms inherit from BaseLayoutAlgorithm and implement
do_calculate_layout() and calculate_minimum_parent_size(). The base class
owns the precedence gate that decides whether an algorithm may move
children at all.
"""

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import ClassVar, Dict, FrozenSet, List, Optional

from ..constants import (
    DEFAULT_FONT_SIZE,
    DEFAULT_LABEL_LENGTH,
    MIN_HEIGHT,
    MIN_WIDTH,
    TEXT_HEIGHT_FACTOR,
    TEXT_WIDTH_FACTOR,
)
from ..hierarchy import build_children_index, calculate_depth
from ..models import (
    Bounds,
    FillStrategy,
    FixedDimensions,
    GridDimensions,
    LayoutPreferences,
    Margins,
    Rectangle,
    RectangleType,
    Size,
)
from ..snapshot import LayoutMetadata, should_preserve_exact_layout


# =============================================================================
# DATA CLASSES
# =============================================================================

@dataclass
class LayoutInput:
    """
    Everything an algorithm needs to arrange one parent's children.

    ``all_rectangles`` gives access to grandchildren for recursive sizing.
    The parent→children index is built once and shared with every nested
    input derived through ``nested()``.
    """
    parent_rect: Rectangle
    children: List[Rectangle]
    margins: Margins = field(default_factory=Margins)
    fixed_dimensions: Optional[FixedDimensions] = None
    all_rectangles: Optional[List[Rectangle]] = None
    depth: Optional[int] = None
    layout_metadata: Optional[LayoutMetadata] = None

    children_index: Optional[Dict[str, List[Rectangle]]] = None
    ancestry: FrozenSet[str] = frozenset()

    def __post_init__(self):
        if self.children_index is None:
            source = self.all_rectangles if self.all_rectangles is not None else self.children
            self.children_index = build_children_index(source)

    @property
    def parent_depth(self) -> int:
        """Depth of the parent, computed from the hierarchy when not given."""
        if self.depth is not None:
            return self.depth
        return calculate_depth(self.parent_rect, self.all_rectangles)

    def children_of(self, rect: Rectangle) -> List[Rectangle]:
        """Direct children of any rectangle in the indexed set."""
        return self.children_index.get(rect.id, [])

    def is_ancestor(self, rect: Rectangle) -> bool:
        """True when ``rect`` already encloses this input (cyclic hierarchy)."""
        return rect.id == self.parent_rect.id or rect.id in self.ancestry

    def nested(self, child: Rectangle) -> "LayoutInput":
        """Input for laying out the children of one of our children."""
        return LayoutInput(
            parent_rect=child,
            children=self.children_of(child),
            margins=self.margins,
            fixed_dimensions=self.fixed_dimensions,
            all_rectangles=self.all_rectangles,
            depth=self.parent_depth + 1,
            children_index=self.children_index,
            ancestry=self.ancestry | {self.parent_rect.id},
        )


@dataclass
class LayoutResult:
    """
    Result from layout computation.

    ``rectangles`` are new copies of the input children; ``min_parent_size``
    is the smallest parent that fits them.
    """
    rectangles: List[Rectangle] = field(default_factory=list)
    min_parent_size: Optional[Size] = None

    def get_rectangle_by_id(self, rect_id: str) -> Optional[Rectangle]:
        """Find a rectangle by ID."""
        for rect in self.rectangles:
            if rect.id == rect_id:
                return rect
        return None


# =============================================================================
# BASE ALGORITHM
# =============================================================================

class BaseLayoutAlgorithm(ABC):
    """
    Abstract base class for layout algorithms.

    calculate_layout() is a template method: manual positioning and
    preserve-exact-layout metadata short-circuit to the unchanged children,
    otherwise the subclass packs them in do_calculate_layout().
    calculate_minimum_parent_size() and calculate_grid_dimensions() never
    move anything and are always computed live.
    """

    name: ClassVar[str] = ""
    description: ClassVar[str] = ""

    def can_apply_layout(self, layout_metadata: Optional[LayoutMetadata] = None) -> bool:
        """False when metadata asks for positions to be preserved exactly."""
        if layout_metadata is None:
            return True
        return not should_preserve_exact_layout(layout_metadata)

    def calculate_layout(self, layout_input: LayoutInput) -> LayoutResult:
        """Arrange the children of ``layout_input.parent_rect``."""
        if layout_input.parent_rect.is_manual_positioning_enabled:
            return LayoutResult(
                rectangles=list(layout_input.children),
                min_parent_size=self.calculate_minimum_parent_size(layout_input),
            )

        if not self.can_apply_layout(layout_input.layout_metadata):
            return LayoutResult(
                rectangles=list(layout_input.children),
                min_parent_size=self.calculate_minimum_parent_size(layout_input),
            )

        return self.do_calculate_layout(layout_input)

    @abstractmethod
    def do_calculate_layout(self, layout_input: LayoutInput) -> LayoutResult:
        """Algorithm-specific packing, called once the precedence gate passes."""
        pass

    @abstractmethod
    def calculate_minimum_parent_size(self, layout_input: LayoutInput) -> Size:
        """Smallest parent size that fits every child with margins."""
        pass

    def calculate_grid_dimensions(
        self,
        children_count: int,
        layout_preferences: Optional[LayoutPreferences] = None,
    ) -> GridDimensions:
        """
        Grid shape for ``children_count`` items.

        Default is a near-square grid. ``fill-rows-first`` caps the column
        count at ``max_columns``; ``fill-columns-first`` caps the row count
        at ``max_rows``.
        """
        if children_count <= 0:
            return GridDimensions(cols=0, rows=0)

        strategy = layout_preferences.fill_strategy if layout_preferences else None

        if strategy == FillStrategy.FILL_ROWS_FIRST:
            if layout_preferences.max_columns:
                cols = min(layout_preferences.max_columns, children_count)
            else:
                cols = math.ceil(math.sqrt(children_count))
            return GridDimensions(cols=cols, rows=math.ceil(children_count / cols))

        if strategy == FillStrategy.FILL_COLUMNS_FIRST:
            if layout_preferences.max_rows:
                rows = min(layout_preferences.max_rows, children_count)
            else:
                rows = math.ceil(math.sqrt(children_count))
            return GridDimensions(cols=math.ceil(children_count / rows), rows=rows)

        cols = math.ceil(math.sqrt(children_count))
        return GridDimensions(cols=cols, rows=math.ceil(children_count / cols))

    # =========================================================================
    # HELPER METHODS (Available to all algorithms)
    # =========================================================================

    def text_label_size(self, child: Rectangle) -> Size:
        """Approximate text label size from font metrics."""
        font_size = child.text_font_size or DEFAULT_FONT_SIZE
        label_length = len(child.label) or DEFAULT_LABEL_LENGTH
        return Size(
            w=max(MIN_WIDTH, font_size * label_length * TEXT_WIDTH_FACTOR),
            h=max(MIN_HEIGHT, font_size * TEXT_HEIGHT_FACTOR),
        )

    def leaf_size(
        self,
        fixed_dimensions: Optional[FixedDimensions],
        fallback_w: float,
        fallback_h: float,
    ) -> Size:
        """Leaf size: fixed dimensions win over the algorithm's fallback."""
        w = fallback_w
        h = fallback_h
        if fixed_dimensions is not None:
            if fixed_dimensions.leaf_fixed_width:
                w = fixed_dimensions.leaf_width
            if fixed_dimensions.leaf_fixed_height:
                h = fixed_dimensions.leaf_height
        return Size(w=max(MIN_WIDTH, w), h=max(MIN_HEIGHT, h))

    def locked_size(self, child: Rectangle) -> Size:
        """Current size of a locked child, floored at the minimums."""
        return Size(w=max(MIN_WIDTH, child.w), h=max(MIN_HEIGHT, child.h))

    def manual_extent_size(
        self,
        parent: Rectangle,
        children: List[Rectangle],
        margins: Margins,
    ) -> Size:
        """
        Size of a manual-positioning parent.

        Children keep their positions, so the parent only grows to enclose
        their extent relative to its own origin plus one margin.
        """
        if not children:
            return Size(w=MIN_WIDTH, h=MIN_HEIGHT)

        max_right = max(child.right for child in children)
        max_bottom = max(child.bottom for child in children)
        return Size(
            w=max(MIN_WIDTH, max_right - parent.x + margins.margin),
            h=max(MIN_HEIGHT, max_bottom - parent.y + margins.margin),
        )

    def nested_minimum_size(self, child: Rectangle, layout_input: LayoutInput) -> Size:
        """Minimum size of a container child, sized from its own subtree."""
        if layout_input.is_ancestor(child):
            return Size(w=MIN_WIDTH, h=MIN_HEIGHT)
        if child.is_manual_positioning_enabled:
            return self.manual_extent_size(child, layout_input.children_of(child), layout_input.margins)
        return self.calculate_minimum_parent_size(layout_input.nested(child))

    def is_leaf(self, child: Rectangle) -> bool:
        """True for leaf rectangles."""
        return child.type == RectangleType.LEAF

    def is_container(self, child: Rectangle) -> bool:
        """True for parent rectangles."""
        return child.type == RectangleType.PARENT

    def ensure_within_bounds(
        self,
        rectangles: List[Rectangle],
        parent_rect: Rectangle,
        margins: Margins,
    ) -> List[Rectangle]:
        """Clamp rectangle positions inside the parent minus margins."""
        clamped = []
        for rect in rectangles:
            min_x = parent_rect.x + margins.margin
            min_y = parent_rect.y + margins.label_margin
            max_x = parent_rect.right - margins.margin - rect.w
            max_y = parent_rect.bottom - margins.margin - rect.h

            clamped.append(rect.model_copy(update={
                "x": max(min_x, min(max_x, rect.x)),
                "y": max(min_y, min(max_y, rect.y)),
            }))
        return clamped

    def calculate_bounding_box(self, rectangles: List[Rectangle]) -> Bounds:
        """Smallest box enclosing every rectangle (zero box when empty)."""
        if not rectangles:
            return Bounds(x=0, y=0, w=0, h=0)

        min_x = min(r.x for r in rectangles)
        min_y = min(r.y for r in rectangles)
        max_x = max(r.right for r in rectangles)
        max_y = max(r.bottom for r in rectangles)

        return Bounds(x=min_x, y=min_y, w=max_x - min_x, h=max_y - min_y)
