"""
boxlayout — Automatic layout engine for hierarchical box diagrams.

Given a flat list of rectangles linked by parent ids, the engine arranges
each parent's children without overlap, computes the smallest parent that
still fits them, and honours manual-positioning, lock and
preserve-exact-layout rules.
"""

from .models import (
    Bounds,
    DefaultSizes,
    FillStrategy,
    FixedDimensions,
    FlowOrientation,
    GridDimensions,
    LayoutPreferences,
    Margins,
    Rectangle,
    RectangleType,
    Size,
)
from .snapshot import (
    LayoutMetadata,
    LayoutSnapshot,
    ValidationResult,
    create_imported_snapshot,
    create_layout_snapshot,
    create_restore_snapshot,
    should_preserve_exact_layout,
    validate_layout_snapshot,
)
from .layout import (
    AlgorithmNotRegisteredError,
    LayoutAlgorithmType,
    LayoutManager,
    get_algorithm,
    layout_algorithm_factory,
)
from .operations import (
    fit_parent_to_children,
    fit_parent_to_children_recursive,
    get_layout_manager,
    update_children_layout,
)
from .config import LayoutSettings, get_settings

__version__ = "0.1.0"

__all__ = [
    "Bounds",
    "DefaultSizes",
    "FillStrategy",
    "FixedDimensions",
    "FlowOrientation",
    "GridDimensions",
    "LayoutPreferences",
    "Margins",
    "Rectangle",
    "RectangleType",
    "Size",
    "LayoutMetadata",
    "LayoutSnapshot",
    "ValidationResult",
    "create_imported_snapshot",
    "create_layout_snapshot",
    "create_restore_snapshot",
    "should_preserve_exact_layout",
    "validate_layout_snapshot",
    "AlgorithmNotRegisteredError",
    "LayoutAlgorithmType",
    "LayoutManager",
    "get_algorithm",
    "layout_algorithm_factory",
    "fit_parent_to_children",
    "fit_parent_to_children_recursive",
    "get_layout_manager",
    "update_children_layout",
    "LayoutSettings",
    "get_settings",
]
