"""Pytest configuration and fixtures."""

from typing import Callable, List

import pytest

from boxlayout.config import get_settings
from boxlayout.models import Margins, Rectangle, RectangleType


@pytest.fixture(autouse=True)
def fresh_settings():
    """Drop cached settings so environment overrides never leak between tests."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def margins() -> Margins:
    """Default margins: 1 unit around, 2 units of label space on top."""
    return Margins(margin=1, label_margin=2)


@pytest.fixture
def make_rect() -> Callable[..., Rectangle]:
    """Factory for rectangles with sensible defaults."""

    def _make(rect_id: str, parent_id: str = None, **kwargs) -> Rectangle:
        kwargs.setdefault("label", rect_id)
        if "type" not in kwargs:
            kwargs["type"] = RectangleType.LEAF if parent_id else RectangleType.ROOT
        return Rectangle(id=rect_id, parent_id=parent_id, **kwargs)

    return _make


@pytest.fixture
def root(make_rect) -> Rectangle:
    """Root rectangle at the origin."""
    return make_rect("root", w=40, h=30)


@pytest.fixture
def four_leaves(make_rect) -> List[Rectangle]:
    """Four 6x4 leaves under the root, all stacked at the origin."""
    return [make_rect(f"leaf{i}", "root") for i in range(4)]


@pytest.fixture
def diagram(make_rect) -> List[Rectangle]:
    """
    A small mixed hierarchy.

    root
    ├── a, b, c   (leaves)
    ├── group     (parent)
    │   ├── g1, g2 (leaves)
    └── note      (text label)
    """
    return [
        make_rect("root", w=40, h=30),
        make_rect("a", "root"),
        make_rect("b", "root"),
        make_rect("c", "root"),
        make_rect("group", "root", type=RectangleType.PARENT, label="Group"),
        make_rect("g1", "group"),
        make_rect("g2", "group"),
        make_rect("note", "root", type=RectangleType.TEXT_LABEL, label="Note", text_font_size=10),
    ]
