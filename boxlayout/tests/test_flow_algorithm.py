"""Tests for the depth-alternating flow layout algorithm."""

import pytest

from boxlayout.layout.base_algorithm import LayoutInput
from boxlayout.layout.flow_algorithm import FlowLayoutAlgorithm
from boxlayout.models import (
    FlowOrientation,
    LayoutPreferences,
    Margins,
    RectangleType,
    Size,
)


@pytest.fixture
def flow() -> FlowLayoutAlgorithm:
    return FlowLayoutAlgorithm()


def _leaves(make_rect, count: int, parent_id: str = "root"):
    return [make_rect(f"leaf{i}", parent_id) for i in range(count)]


# ============================================================================
# Orientation Tests
# ============================================================================

class TestFlowOrientation:
    """Tests for orientation selection."""

    def test_depth_alternates(self, flow) -> None:
        """Test even depths stack in a column and odd depths flow in a row."""
        assert flow.orientation_for_depth(0) == FlowOrientation.COL
        assert flow.orientation_for_depth(1) == FlowOrientation.ROW
        assert flow.orientation_for_depth(2) == FlowOrientation.COL

    def test_preference_overrides_depth(self, flow, make_rect) -> None:
        """Test an explicit orientation wins over the depth rule."""
        parent = make_rect("root", layout_preferences=LayoutPreferences(orientation=FlowOrientation.ROW))
        layout_input = LayoutInput(parent_rect=parent, children=[], depth=0)
        assert flow.parent_orientation(layout_input) == FlowOrientation.ROW

    def test_root_depth_from_hierarchy(self, flow, make_rect) -> None:
        """Test depth is derived from the hierarchy when not given."""
        parent = make_rect("root")
        layout_input = LayoutInput(parent_rect=parent, children=[])
        assert flow.parent_orientation(layout_input) == FlowOrientation.COL


# ============================================================================
# Packing Tests
# ============================================================================

class TestFlowPacking:
    """Tests for row and column packing."""

    def test_column_at_root(self, flow, make_rect, margins) -> None:
        """Test children of a root are stacked vertically."""
        parent = make_rect("root", w=8, h=18)
        children = _leaves(make_rect, 3)
        layout_input = LayoutInput(parent_rect=parent, children=children, margins=margins, depth=0)

        assert flow.calculate_minimum_parent_size(layout_input) == Size(w=8, h=18)

        result = flow.calculate_layout(layout_input)
        assert [(r.x, r.y) for r in result.rectangles] == [(1, 3), (1, 8), (1, 13)]

    def test_row_at_depth_one(self, flow, make_rect, margins) -> None:
        """Test children one level down flow side by side."""
        parent = make_rect("p", "root", type=RectangleType.PARENT, w=22, h=8)
        children = _leaves(make_rect, 3, "p")
        layout_input = LayoutInput(parent_rect=parent, children=children, margins=margins, depth=1)

        assert flow.calculate_minimum_parent_size(layout_input) == Size(w=22, h=8)

        result = flow.calculate_layout(layout_input)
        assert [(r.x, r.y) for r in result.rectangles] == [(1, 3), (8, 3), (15, 3)]

    def test_single_child_at_interior_origin(self, flow, make_rect, margins) -> None:
        """Test a single child sits below the label band, one margin in."""
        parent = make_rect("root", x=10, y=20, w=8, h=8)
        layout_input = LayoutInput(parent_rect=parent, children=_leaves(make_rect, 1), margins=margins)

        placed = flow.calculate_layout(layout_input).rectangles[0]
        assert (placed.x, placed.y) == (11, 23)

    def test_row_wraps_when_full(self, flow, make_rect, margins) -> None:
        """Test a narrow row parent wraps children onto a second row."""
        parent = make_rect("p", "root", type=RectangleType.PARENT, w=16, h=20)
        layout_input = LayoutInput(
            parent_rect=parent, children=_leaves(make_rect, 3, "p"), margins=margins, depth=1
        )

        result = flow.calculate_layout(layout_input)
        assert len({r.y for r in result.rectangles}) == 2
        for rect in result.rectangles:
            assert rect.x >= parent.x + 1
            assert rect.right <= parent.right - 1

    def test_nested_container_packed_bottom_up(self, flow, make_rect, margins) -> None:
        """Test a container child is as large as its packed subtree."""
        rects = [
            make_rect("root"),
            make_rect("group", "root", type=RectangleType.PARENT),
            make_rect("g1", "group"),
            make_rect("g2", "group"),
        ]
        layout_input = LayoutInput(
            parent_rect=rects[0], children=[rects[1]], margins=margins, all_rectangles=rects
        )
        # group is a row of two leaves (15x8); root stacks it in a column
        assert flow.calculate_minimum_parent_size(layout_input) == Size(w=17, h=12)

    def test_childless_container_sized_from_label(self, flow, make_rect, margins) -> None:
        """Test an empty container is at least as wide as its label."""
        parent = make_rect("root")
        empty = make_rect("empty", "root", type=RectangleType.PARENT, label="ABCDEFGHIJKL")
        layout_input = LayoutInput(parent_rect=parent, children=[empty], margins=margins, depth=0)
        assert flow.calculate_minimum_parent_size(layout_input) == Size(w=11, h=8)

    def test_locked_child_keeps_size(self, flow, make_rect, margins) -> None:
        """Test a locked child is placed but never resized."""
        parent = make_rect("root", w=40, h=30)
        locked = make_rect("locked", "root", w=10, h=7, is_locked_as_is=True)
        result = flow.calculate_layout(
            LayoutInput(parent_rect=parent, children=[locked], margins=margins, depth=0)
        )
        assert (result.rectangles[0].w, result.rectangles[0].h) == (10, 7)

    def test_no_children(self, flow, make_rect, margins) -> None:
        """Test an empty parent yields no rectangles and the minimum size."""
        layout_input = LayoutInput(parent_rect=make_rect("root"), children=[], margins=margins)
        assert flow.calculate_layout(layout_input).rectangles == []
        assert flow.calculate_minimum_parent_size(layout_input) == Size(w=5, h=3)


# ============================================================================
# Stability Tests
# ============================================================================

class TestFlowStability:
    """Tests for wrap hysteresis, centering threshold and rounding."""

    @pytest.mark.parametrize(
        "projected, continues_row, expected",
        [
            (14.0, False, False),   # fits exactly
            (14.3, True, False),    # hysteresis zone, already on this row
            (14.3, False, True),    # hysteresis zone, previously wrapped
            (14.8, True, True),     # beyond the hysteresis zone
            (15.5, True, True),     # beyond the hard limit
        ],
    )
    def test_three_zone_wrap(self, flow, projected, continues_row, expected) -> None:
        """Test the wrap decision around a soft limit of 14."""
        assert flow.should_wrap(projected, 14.0, continues_row) is expected

    def test_row_membership_sticks_near_boundary(self, flow, make_rect, margins) -> None:
        """Test children already sharing a row stay together slightly past the limit."""
        prefs = LayoutPreferences(orientation=FlowOrientation.ROW)
        parent = make_rect("root", w=14.8, h=20, layout_preferences=prefs)

        side_by_side = [make_rect("a", "root", x=0, y=0), make_rect("b", "root", x=10, y=0)]
        result = flow.calculate_layout(
            LayoutInput(parent_rect=parent, children=side_by_side, margins=margins)
        )
        assert result.rectangles[0].y == result.rectangles[1].y

        stacked = [make_rect("a", "root", x=0, y=0), make_rect("b", "root", x=0, y=10)]
        result = flow.calculate_layout(
            LayoutInput(parent_rect=parent, children=stacked, margins=margins)
        )
        assert result.rectangles[0].y != result.rectangles[1].y

    def test_small_centering_offset_dropped(self, flow) -> None:
        """Test slack below the threshold does not shift the group."""
        assert flow._centering_offset(10, 9.95) == 0
        assert flow._centering_offset(10, 8) == 1
        assert flow._centering_offset(8, 10) == 0

    def test_whole_margins_snap_to_integers(self, flow, make_rect, margins) -> None:
        """Test positions are whole numbers when margins are whole numbers."""
        parent = make_rect("root", x=0.4, w=8, h=8)
        placed = flow.calculate_layout(
            LayoutInput(parent_rect=parent, children=_leaves(make_rect, 1), margins=margins)
        ).rectangles[0]
        assert placed.x == 1
        assert placed.w == 6

    def test_fractional_margins_keep_precision(self, flow, make_rect) -> None:
        """Test fractional margins are not rounded away."""
        margins = Margins(margin=0.5, label_margin=1.5)
        parent = make_rect("root", w=7, h=6.5)
        placed = flow.calculate_layout(
            LayoutInput(parent_rect=parent, children=_leaves(make_rect, 1), margins=margins)
        ).rectangles[0]
        assert (placed.x, placed.y) == (0.5, 2.0)

    def test_round_precise_keeps_exact_values(self, flow) -> None:
        """Test 3-decimal rounding only changes values that need it."""
        assert flow._round_precise(1.23456) == 1.235
        assert flow._round_precise(2.5) == 2.5

    def test_layout_is_repeatable(self, flow, make_rect, margins) -> None:
        """Test laying out the previous result again changes nothing."""
        parent = make_rect("p", "root", type=RectangleType.PARENT, w=16, h=20)
        first = flow.calculate_layout(
            LayoutInput(parent_rect=parent, children=_leaves(make_rect, 5, "p"), margins=margins, depth=1)
        ).rectangles
        second = flow.calculate_layout(
            LayoutInput(parent_rect=parent, children=first, margins=margins, depth=1)
        ).rectangles
        assert [(r.x, r.y, r.w, r.h) for r in first] == [(r.x, r.y, r.w, r.h) for r in second]
