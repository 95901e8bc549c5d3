"""
snapshot.py — Layout metadata and preservation rules.

A snapshot pairs a set of rectangles with metadata describing where they came
from. Imported and restored snapshots carry ``preserve_exact_layout`` so the
next layout pass leaves every coordinate untouched.
"""

import time
from dataclasses import dataclass, field
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .models import Rectangle, Size

SNAPSHOT_VERSION = "2.0"


class LayoutMetadata(BaseModel):
    """Provenance and preservation flags for a layout pass."""

    model_config = ConfigDict(frozen=True)

    version: str = SNAPSHOT_VERSION
    timestamp: float = Field(default_factory=time.time)
    is_imported: bool = False
    preserve_exact_layout: bool = False
    algorithm: Optional[str] = None
    is_user_arranged: Optional[bool] = None
    preserve_positions: Optional[bool] = None
    bounding_box: Optional[Size] = None


class LayoutSnapshot(BaseModel):
    """Rectangles captured together with their layout metadata."""

    model_config = ConfigDict(frozen=True)

    rectangles: List[Rectangle]
    metadata: LayoutMetadata


@dataclass
class ValidationResult:
    """Result of snapshot integrity checks."""

    is_valid: bool
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)


def should_preserve_exact_layout(metadata: LayoutMetadata) -> bool:
    """Check if a layout should be preserved exactly."""
    return metadata.preserve_exact_layout or metadata.is_imported


def create_layout_snapshot(rectangles: List[Rectangle], **options) -> LayoutSnapshot:
    """Capture rectangles with metadata; ``options`` override metadata fields."""
    return LayoutSnapshot(
        rectangles=[rect.model_copy(deep=True) for rect in rectangles],
        metadata=LayoutMetadata(**options),
    )


def create_imported_snapshot(rectangles: List[Rectangle], **extra) -> LayoutSnapshot:
    """Snapshot for freshly imported data; positions are preserved exactly."""
    options = {"is_imported": True, "preserve_exact_layout": True}
    options.update(extra)
    return create_layout_snapshot(rectangles, **options)


def create_restore_snapshot(rectangles: List[Rectangle], **extra) -> LayoutSnapshot:
    """Snapshot for undo/restore; positions are preserved exactly."""
    options = {"preserve_exact_layout": True}
    options.update(extra)
    return create_layout_snapshot(rectangles, **options)


def calculate_snapshot_bounds(rectangles: List[Rectangle]) -> Size:
    """Extent of a rectangle set (0x0 when empty)."""
    if not rectangles:
        return Size(w=0, h=0)

    min_x = min(r.x for r in rectangles)
    min_y = min(r.y for r in rectangles)
    max_x = max(r.right for r in rectangles)
    max_y = max(r.bottom for r in rectangles)

    return Size(w=max_x - min_x, h=max_y - min_y)


def validate_layout_snapshot(snapshot: LayoutSnapshot) -> ValidationResult:
    """
    Check snapshot integrity.

    Errors: missing ids, non-positive dimensions, duplicate ids.
    Warnings: empty rectangle set, missing version or timestamp.
    """
    errors: List[str] = []
    warnings: List[str] = []

    if not snapshot.rectangles:
        warnings.append("Empty rectangle set")

    for index, rect in enumerate(snapshot.rectangles):
        if not rect.id:
            errors.append(f"Rectangle at index {index} missing id")
        if rect.w <= 0 or rect.h <= 0:
            errors.append(f"Rectangle {rect.id} has invalid dimensions")

    ids = [rect.id for rect in snapshot.rectangles]
    if len(ids) != len(set(ids)):
        errors.append("Duplicate rectangle IDs found")

    if not snapshot.metadata.version:
        warnings.append("Missing version information")
    if not snapshot.metadata.timestamp:
        warnings.append("Missing timestamp")

    return ValidationResult(
        is_valid=len(errors) == 0,
        errors=errors,
        warnings=warnings,
    )
