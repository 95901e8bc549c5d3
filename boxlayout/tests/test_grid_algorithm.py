"""Tests for the grid layout algorithm."""

import pytest

from boxlayout.layout.base_algorithm import LayoutInput
from boxlayout.layout.grid_algorithm import GridLayoutAlgorithm
from boxlayout.models import (
    FillStrategy,
    FixedDimensions,
    LayoutPreferences,
    Margins,
    RectangleType,
    Size,
)


@pytest.fixture
def grid() -> GridLayoutAlgorithm:
    return GridLayoutAlgorithm()


# ============================================================================
# Minimum Size Tests
# ============================================================================

class TestGridMinimumSize:
    """Tests for GridLayoutAlgorithm.calculate_minimum_parent_size."""

    def test_four_leaves_two_by_two(self, grid, root, four_leaves, margins) -> None:
        """Test 4 default leaves need a 15x12 parent."""
        size = grid.calculate_minimum_parent_size(
            LayoutInput(parent_rect=root, children=four_leaves, margins=margins)
        )
        assert size == Size(w=15, h=12)

    def test_ignores_current_child_size(self, grid, root, make_rect, margins) -> None:
        """Test expanded leaves do not make the parent grow on repeated fits."""
        children = [make_rect(f"big{i}", "root", w=20, h=20) for i in range(4)]
        size = grid.calculate_minimum_parent_size(
            LayoutInput(parent_rect=root, children=children, margins=margins)
        )
        assert size == Size(w=15, h=12)

    def test_no_children_returns_minimum(self, grid, root, margins) -> None:
        """Test an empty parent gets the global minimum size."""
        size = grid.calculate_minimum_parent_size(
            LayoutInput(parent_rect=root, children=[], margins=margins)
        )
        assert size == Size(w=5, h=3)

    def test_fixed_leaf_width(self, grid, root, four_leaves, margins) -> None:
        """Test fixed dimensions override the default leaf width."""
        fixed = FixedDimensions(leaf_fixed_width=True, leaf_width=8)
        size = grid.calculate_minimum_parent_size(
            LayoutInput(parent_rect=root, children=four_leaves, margins=margins, fixed_dimensions=fixed)
        )
        assert size.w == 2 * 8 + 1 + 2
        assert size.h == 12

    def test_text_label_uses_font_metrics(self, grid, root, make_rect, margins) -> None:
        """Test text labels are sized from font size and label length."""
        label = make_rect("t", "root", type=RectangleType.TEXT_LABEL, label="Hi", text_font_size=10)
        size = grid.calculate_minimum_parent_size(
            LayoutInput(parent_rect=root, children=[label], margins=margins)
        )
        assert size == Size(w=12 + 2, h=15 + 3)

    def test_nested_parent_sized_recursively(self, grid, make_rect, margins) -> None:
        """Test a parent child is sized from its own subtree."""
        rects = [
            make_rect("root"),
            make_rect("group", "root", type=RectangleType.PARENT),
        ] + [make_rect(f"leaf{i}", "group") for i in range(4)]

        size = grid.calculate_minimum_parent_size(
            LayoutInput(parent_rect=rects[0], children=[rects[1]], margins=margins, all_rectangles=rects)
        )
        assert size == Size(w=15 + 2, h=12 + 3)

    def test_cyclic_hierarchy_terminates(self, grid, make_rect, margins) -> None:
        """Test parents that contain each other do not recurse forever."""
        a = make_rect("a", "b", type=RectangleType.PARENT)
        b = make_rect("b", "a", type=RectangleType.PARENT)
        size = grid.calculate_minimum_parent_size(
            LayoutInput(parent_rect=a, children=[b], margins=margins, all_rectangles=[a, b])
        )
        assert size.w >= 5
        assert size.h >= 3


# ============================================================================
# Layout Tests
# ============================================================================

class TestGridLayout:
    """Tests for GridLayoutAlgorithm.calculate_layout."""

    def test_two_by_two_positions(self, grid, make_rect, four_leaves, margins) -> None:
        """Test 4 leaves in a snug parent land in a 2x2 grid."""
        parent = make_rect("root", w=15, h=12)
        result = grid.calculate_layout(
            LayoutInput(parent_rect=parent, children=four_leaves, margins=margins)
        )

        positions = [(r.x, r.y, r.w, r.h) for r in result.rectangles]
        assert positions == [
            (1, 2, 6, 4),
            (8, 2, 6, 4),
            (1, 7, 6, 4),
            (8, 7, 6, 4),
        ]
        assert result.min_parent_size == Size(w=15, h=12)

    def test_single_child_at_interior_origin(self, grid, make_rect, margins) -> None:
        """Test a single child sits at the top-left of the interior."""
        parent = make_rect("root", x=10, y=20, w=8, h=7)
        child = make_rect("only", "root")
        result = grid.calculate_layout(
            LayoutInput(parent_rect=parent, children=[child], margins=margins)
        )
        placed = result.rectangles[0]
        assert (placed.x, placed.y) == (11, 22)

    def test_grid_centered_in_large_parent(self, grid, make_rect, margins) -> None:
        """Test spare room is split evenly around the grid."""
        parent = make_rect("root", w=20, h=12)
        child = make_rect("only", "root")
        result = grid.calculate_layout(
            LayoutInput(parent_rect=parent, children=[child], margins=margins)
        )
        placed = result.rectangles[0]
        # Interior is 18 wide, the single cell 6 wide
        assert placed.x == 1 + 6

    def test_children_are_copies(self, grid, make_rect, four_leaves, margins) -> None:
        """Test input rectangles are never mutated."""
        parent = make_rect("root", w=15, h=12)
        grid.calculate_layout(LayoutInput(parent_rect=parent, children=four_leaves, margins=margins))
        assert all(leaf.x == 0 and leaf.y == 0 for leaf in four_leaves)

    def test_root_type_child_fills_cell(self, grid, make_rect, margins) -> None:
        """Test children that are neither leaf, text nor parent fill their cell."""
        parent = make_rect("outer", w=22, h=13)
        child = make_rect("inner", "outer", type=RectangleType.ROOT)
        result = grid.calculate_layout(
            LayoutInput(parent_rect=parent, children=[child], margins=margins)
        )
        placed = result.rectangles[0]
        assert (placed.w, placed.h) == (20, 10)

    def test_fractional_margins(self, grid, make_rect, four_leaves) -> None:
        """Test fractional margins are honoured as given."""
        margins = Margins(margin=0.5, label_margin=1.5)
        parent = make_rect("root", w=13, h=10)
        result = grid.calculate_layout(
            LayoutInput(parent_rect=parent, children=four_leaves, margins=margins)
        )
        assert result.rectangles[0].x == 0.5
        assert result.rectangles[0].y == 1.5
        assert result.rectangles[1].x == 0.5 + 6 + 0.5


# ============================================================================
# Grid Dimension Tests
# ============================================================================

class TestGridDimensions:
    """Tests for calculate_grid_dimensions."""

    @pytest.mark.parametrize("count", range(1, 40))
    def test_default_grid_is_tight(self, grid, count: int) -> None:
        """Test the default grid has room for every child and no empty row."""
        dims = grid.calculate_grid_dimensions(count)
        assert dims.cols * dims.rows >= count
        assert dims.cols * dims.rows < count + dims.cols

    def test_zero_children(self, grid) -> None:
        """Test an empty grid."""
        dims = grid.calculate_grid_dimensions(0)
        assert (dims.cols, dims.rows) == (0, 0)

    def test_rows_first_caps_columns(self, grid) -> None:
        """Test fill-rows-first honours max_columns."""
        prefs = LayoutPreferences(fill_strategy=FillStrategy.FILL_ROWS_FIRST, max_columns=3)
        dims = grid.calculate_grid_dimensions(7, prefs)
        assert (dims.cols, dims.rows) == (3, 3)

    def test_columns_first_caps_rows(self, grid) -> None:
        """Test fill-columns-first honours max_rows."""
        prefs = LayoutPreferences(fill_strategy=FillStrategy.FILL_COLUMNS_FIRST, max_rows=2)
        dims = grid.calculate_grid_dimensions(7, prefs)
        assert (dims.cols, dims.rows) == (4, 2)

    @pytest.mark.parametrize("count", range(1, 25))
    def test_columns_first_is_tight(self, grid, count: int) -> None:
        """Test fill-columns-first never leaves an empty column."""
        prefs = LayoutPreferences(fill_strategy=FillStrategy.FILL_COLUMNS_FIRST, max_rows=3)
        dims = grid.calculate_grid_dimensions(count, prefs)
        assert dims.cols * dims.rows >= count
        assert dims.cols * dims.rows < count + dims.rows

    def test_grid_layout_follows_preferences(self, grid, make_rect, margins) -> None:
        """Test a single-row preference lays children side by side."""
        prefs = LayoutPreferences(fill_strategy=FillStrategy.FILL_ROWS_FIRST, max_columns=4)
        parent = make_rect("root", w=40, h=30, layout_preferences=prefs)
        children = [make_rect(f"leaf{i}", "root") for i in range(4)]
        result = grid.calculate_layout(
            LayoutInput(parent_rect=parent, children=children, margins=margins)
        )
        assert len({r.y for r in result.rectangles}) == 1
        assert len({r.x for r in result.rectangles}) == 4
