"""
Pytest configuration and shared fixtures for shape builder tests.
"""

import math
from typing import Dict, List

import pytest

from shapebuilder.path_data import PathData, PathElement, circle_path, rect_path
from shapebuilder.regions import PathWithId
from shapebuilder.store import CanvasStore

RADIUS = 50.0


def circle_overlap_area(radius: float, distance: float) -> float:
    """Area of the lens shared by two equal circles ``distance`` apart."""
    r, d = radius, distance
    return 2 * r * r * math.acos(d / (2 * r)) - (d / 2) * math.sqrt(4 * r * r - d * d)


def make_store(paths: Dict[str, PathData], selected: List[str] = None) -> CanvasStore:
    elements = [PathElement(id=key, data=data) for key, data in paths.items()]
    store = CanvasStore(elements)
    store.selected_ids = list(paths) if selected is None else list(selected)
    return store


# ============== Path Fixtures ==============

@pytest.fixture
def two_circles() -> Dict[str, PathData]:
    """Two circles of radius 50 whose centres are one radius apart."""
    return {
        "e1": circle_path(0.0, 0.0, RADIUS, fill_color="#ff0000", stroke_width=3.0),
        "e2": circle_path(RADIUS, 0.0, RADIUS, fill_color="#00ff00"),
    }


@pytest.fixture
def staggered_squares() -> Dict[str, PathData]:
    """Three 100x100 squares, each shifted by (50, 50) from the previous."""
    return {
        "a": rect_path(0.0, 0.0, 100.0, 100.0),
        "b": rect_path(50.0, 50.0, 100.0, 100.0),
        "c": rect_path(100.0, 100.0, 100.0, 100.0),
    }


@pytest.fixture
def circle_inputs(two_circles) -> List[PathWithId]:
    return [PathWithId(path_data=data, element_id=key) for key, data in two_circles.items()]


# ============== Store Fixtures ==============

@pytest.fixture
def circle_store(two_circles) -> CanvasStore:
    """Store holding the two circles, both selected."""
    return make_store(two_circles)


@pytest.fixture
def square_store(staggered_squares) -> CanvasStore:
    return make_store(staggered_squares)
