"""Pydantic v2 models for the rectangle hierarchy consumed by the layout engine.

All coordinates and sizes are in grid units. Models are frozen: the engine
never mutates a rectangle it is given, it returns updated copies instead.
"""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from .constants import (
    DEFAULT_LEAF_HEIGHT,
    DEFAULT_LEAF_WIDTH,
    DEFAULT_ROOT_HEIGHT,
    DEFAULT_ROOT_WIDTH,
    DEFAULT_LABEL_MARGIN,
    DEFAULT_MARGIN,
)


class RectangleType(str, Enum):
    """Position of a rectangle in the hierarchy."""

    ROOT = "root"
    PARENT = "parent"
    LEAF = "leaf"
    TEXT_LABEL = "textLabel"


class FillStrategy(str, Enum):
    """How a grid is filled when a parent carries layout preferences."""

    FILL_ROWS_FIRST = "fill-rows-first"
    FILL_COLUMNS_FIRST = "fill-columns-first"


class FlowOrientation(str, Enum):
    """Packing direction used by the flow algorithm."""

    ROW = "ROW"
    COL = "COL"


# ============================================================================
# Geometry Models
# ============================================================================


class Size(BaseModel):
    """Width and height in grid units."""

    model_config = ConfigDict(frozen=True)

    w: float
    h: float


class GridDimensions(BaseModel):
    """Column and row count of a grid arrangement."""

    model_config = ConfigDict(frozen=True)

    cols: int = Field(ge=0)
    rows: int = Field(ge=0)

    @property
    def cells(self) -> int:
        """Total number of cells."""
        return self.cols * self.rows


class Bounds(BaseModel):
    """Axis-aligned box in grid units."""

    model_config = ConfigDict(frozen=True)

    x: float
    y: float
    w: float
    h: float

    @property
    def right(self) -> float:
        """Right edge position."""
        return self.x + self.w

    @property
    def bottom(self) -> float:
        """Bottom edge position."""
        return self.y + self.h


# ============================================================================
# Configuration Values
# ============================================================================


class Margins(BaseModel):
    """Spacing around and between children.

    ``margin`` is the uniform side/bottom spacing (and the gutter between
    siblings); ``label_margin`` is the extra top spacing reserved for the
    parent's own label. Both may be fractional.
    """

    model_config = ConfigDict(frozen=True)

    margin: float = Field(default=DEFAULT_MARGIN, ge=0)
    label_margin: float = Field(default=DEFAULT_LABEL_MARGIN, ge=0)

    @property
    def top_inset(self) -> float:
        """Distance from the parent's top edge to its first child row."""
        return self.label_margin + self.margin

    @property
    def horizontal(self) -> float:
        """Total horizontal margin (left + right)."""
        return self.margin * 2

    @property
    def vertical(self) -> float:
        """Total vertical margin (label + top + bottom)."""
        return self.label_margin + self.margin * 2

    @property
    def is_whole(self) -> bool:
        """True when both margins are whole numbers."""
        return float(self.margin).is_integer() and float(self.label_margin).is_integer()


class FixedDimensions(BaseModel):
    """Global leaf sizing override."""

    model_config = ConfigDict(frozen=True)

    leaf_fixed_width: bool = False
    leaf_fixed_height: bool = False
    leaf_width: float = DEFAULT_LEAF_WIDTH
    leaf_height: float = DEFAULT_LEAF_HEIGHT


class DefaultSizes(BaseModel):
    """Sizes given to newly created rectangles."""

    model_config = ConfigDict(frozen=True)

    root: Size = Field(default_factory=lambda: Size(w=DEFAULT_ROOT_WIDTH, h=DEFAULT_ROOT_HEIGHT))
    leaf: Size = Field(default_factory=lambda: Size(w=DEFAULT_LEAF_WIDTH, h=DEFAULT_LEAF_HEIGHT))


class LayoutPreferences(BaseModel):
    """Per-parent override of how its children are arranged."""

    model_config = ConfigDict(frozen=True)

    fill_strategy: Optional[FillStrategy] = None
    max_columns: Optional[int] = Field(default=None, ge=1)
    max_rows: Optional[int] = Field(default=None, ge=1)
    orientation: Optional[FlowOrientation] = None


# ============================================================================
# Rectangle
# ============================================================================


class Rectangle(BaseModel):
    """A node of the diagram hierarchy."""

    model_config = ConfigDict(frozen=True)

    id: str
    parent_id: Optional[str] = Field(default=None, description="Parent id; None for roots")
    x: float = 0.0
    y: float = 0.0
    w: float = DEFAULT_LEAF_WIDTH
    h: float = DEFAULT_LEAF_HEIGHT
    type: RectangleType = RectangleType.LEAF
    label: str = ""
    color: str = ""
    is_manual_positioning_enabled: bool = Field(
        default=False, description="Children of this rectangle keep their coordinates"
    )
    is_locked_as_is: bool = Field(default=False, description="Excluded from fit-to-children")
    is_text_label: bool = False
    text_font_size: Optional[float] = Field(default=None, gt=0)
    layout_preferences: Optional[LayoutPreferences] = None
    metadata: dict[str, Any] = Field(default_factory=dict)

    @property
    def right(self) -> float:
        """Right edge position."""
        return self.x + self.w

    @property
    def bottom(self) -> float:
        """Bottom edge position."""
        return self.y + self.h

    @property
    def is_root(self) -> bool:
        """True when the rectangle has no parent."""
        return not self.parent_id

    @property
    def is_text(self) -> bool:
        """True for free-floating text labels."""
        return self.is_text_label or self.type == RectangleType.TEXT_LABEL

    def with_geometry(self, x: float, y: float, w: float, h: float) -> "Rectangle":
        """Copy of this rectangle at a new position and size."""
        return self.model_copy(update={"x": x, "y": y, "w": w, "h": h})

    def overlaps(self, other: "Rectangle") -> bool:
        """Check if two rectangles overlap (touching edges do not count)."""
        return not (
            self.right <= other.x or
            other.right <= self.x or
            self.bottom <= other.y or
            other.bottom <= self.y
        )
