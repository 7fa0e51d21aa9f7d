"""
Tests for the interactive shape builder tool.

Drives the tool through pointer and key events the way a canvas would.
"""

import math

import pytest

from conftest import RADIUS, circle_overlap_area, make_store
from shapebuilder import boolean2d
from shapebuilder.boolean2d import path_area
from shapebuilder.errors import GeometryError
from shapebuilder.path_data import rect_path
from shapebuilder.session import Mode
from shapebuilder.settings import ShapeBuilderSettings
from shapebuilder.tools import (
    POINTER_DOWN,
    POINTER_MOVE,
    POINTER_UP,
    KeyEvent,
    PointerEvent,
    ShapeBuilderTool,
)

LEFT = (-RADIUS / 2, 0.0)
LENS = (RADIUS / 2, 0.0)
RIGHT = (1.5 * RADIUS, 0.0)
NOWHERE = (500.0, 500.0)


@pytest.fixture
def tool(circle_store):
    tool = ShapeBuilderTool(circle_store)
    tool.activate()
    return tool


def _region(tool, region_id):
    return next(r for r in tool.session.regions if r.id == region_id)


def _drag(tool, *points, alt=False):
    tool.pointer_down(points[0], alt)
    for point in points[1:]:
        tool.pointer_move(point)
    tool.pointer_up(points[-1])


class TestLifecycle:
    """Activation, selection changes and leaving the tool."""

    def test_availability(self, circle_store):
        assert ShapeBuilderTool.is_available(circle_store)
        circle_store.set_selection(["e1"])
        assert not ShapeBuilderTool.is_available(circle_store)

    def test_activate_computes_regions(self, tool, circle_store):
        assert circle_store.active_tool == "shapeBuilder"
        assert tool.active
        assert len(tool.session.regions) == 3
        assert tool.session.mode is Mode.MERGE

    def test_selection_change_recomputes(self, tool, circle_store):
        old_ids = {r.id for r in tool.session.regions}
        circle_store.set_selection(["e1"])
        assert tool.session.regions == []
        circle_store.set_selection(["e1", "e2"])
        assert len(tool.session.regions) == 3
        assert not old_ids & {r.id for r in tool.session.regions}

    def test_selection_change_cancels_drag(self, tool, circle_store):
        tool.pointer_down(LEFT)
        assert tool.session.is_dragging
        circle_store.set_selection(["e2", "e1"])
        assert not tool.session.is_dragging
        assert tool.session.selected_region_ids == []

    def test_escape_exits(self, tool, circle_store):
        tool.key_press(KeyEvent("Escape"))
        assert circle_store.active_tool == "select"
        assert not tool.active
        assert tool.session.regions == []

    def test_other_keys_ignored(self, tool, circle_store):
        tool.key_press(KeyEvent("a"))
        assert circle_store.active_tool == "shapeBuilder"

    def test_deactivated_tool_ignores_selection(self, tool, circle_store):
        tool.deactivate()
        circle_store.set_selection(["e2", "e1"])
        assert tool.session.regions == []


class TestPointer:
    """Press, move and release handling."""

    def test_lazy_compute_on_press(self, circle_store):
        tool = ShapeBuilderTool(circle_store)
        tool.pointer_down(LENS)
        assert len(tool.session.regions) == 3
        assert not tool.session.is_dragging

    def test_press_seeds_selection(self, tool):
        tool.pointer_down(LENS)
        lens = _region(tool, tool.session.selected_region_ids[0])
        assert sorted(lens.source_element_ids) == ["e1", "e2"]
        assert tool.session.drag_start_point == LENS
        assert tool.session.drag_path == [LENS]

    def test_drag_collects_regions(self, tool):
        tool.pointer_down(LEFT)
        tool.pointer_move(LENS)
        tool.pointer_move(LEFT)
        assert len(tool.session.selected_region_ids) == 2
        assert len(tool.session.drag_path) == 3

    def test_hover_tracks_region(self, tool):
        tool.pointer_move(LENS)
        hovered = _region(tool, tool.session.hovered_region_id)
        assert sorted(hovered.source_element_ids) == ["e1", "e2"]
        tool.pointer_move(NOWHERE)
        assert tool.session.hovered_region_id is None

    def test_release_without_regions_does_nothing(self, tool, circle_store):
        tool.pointer_down(NOWHERE)
        tool.pointer_move((501.0, 500.0))
        tool.pointer_up(NOWHERE)
        assert tool.active
        assert not tool.session.is_dragging
        assert {e.id for e in circle_store.elements} == {"e1", "e2"}

    def test_release_when_idle_does_nothing(self, tool, circle_store):
        tool.pointer_up(LENS)
        assert tool.active
        assert len(circle_store.elements) == 2

    def test_handle_dispatches_events(self, tool, circle_store):
        tool.handle(PointerEvent(POINTER_DOWN, LEFT))
        tool.handle(PointerEvent(POINTER_MOVE, RIGHT))
        tool.handle(PointerEvent(POINTER_UP, RIGHT))
        assert len(circle_store.elements) == 1
        assert tool.last_result == circle_store.elements[0].id


class TestCommit:
    """Full gestures that end in a commit."""

    def test_merge_gesture(self, tool, circle_store):
        _drag(tool, LEFT, LENS, RIGHT)
        new_id = tool.last_result
        assert [e.id for e in circle_store.elements] == [new_id]
        assert circle_store.selected_ids == [new_id]
        assert circle_store.active_tool == "select"
        assert not tool.active
        expected = 2 * math.pi * RADIUS ** 2 - circle_overlap_area(RADIUS, RADIUS)
        assert path_area(circle_store.get_element(new_id).data) == pytest.approx(expected, rel=1e-2)

    def test_alt_press_subtracts(self, tool, circle_store):
        _drag(tool, LENS, alt=True)
        assert tool.session.regions == []
        expected = 2 * math.pi * RADIUS ** 2 - 2 * circle_overlap_area(RADIUS, RADIUS)
        assert path_area(circle_store.get_element(tool.last_result).data) == pytest.approx(expected, rel=1e-2)

    def test_preferred_subtract_mode(self, circle_store):
        tool = ShapeBuilderTool(circle_store)
        tool.set_mode("subtract")
        tool.activate()
        assert tool.session.mode is Mode.SUBTRACT
        _drag(tool, LEFT, LENS, RIGHT)
        assert circle_store.elements == []
        assert circle_store.selected_ids == []
        assert tool.last_result is None
        assert circle_store.active_tool == "select"

    def test_mode_change_mid_drag_waits(self, tool):
        tool.pointer_down(LENS)
        tool.set_mode(Mode.SUBTRACT)
        assert tool.session.mode is Mode.MERGE
        assert tool.preferred_mode is Mode.SUBTRACT

    def test_commit_does_not_recompute_from_own_selection(self, tool, circle_store):
        _drag(tool, LENS)
        assert tool.session.regions == []
        assert circle_store.selected_ids == [tool.last_result]

    def test_custom_exit_tool(self, circle_store):
        tool = ShapeBuilderTool(circle_store, ShapeBuilderSettings(exit_tool="pen"))
        tool.activate()
        _drag(tool, LENS)
        assert circle_store.active_tool == "pen"

    def test_failed_commit_keeps_sources_and_tool(self, tool, circle_store, monkeypatch):
        def broken_unite(a, b):
            raise GeometryError("union failed")

        monkeypatch.setattr(boolean2d, "unite", broken_unite)
        with pytest.raises(GeometryError):
            _drag(tool, LENS, alt=True)
        assert {e.id for e in circle_store.elements} == {"e1", "e2"}
        assert tool.active
        assert not tool.session.is_dragging
        assert len(tool.session.regions) == 3


class TestNoOverlap:
    """Disjoint selections never commit."""

    def test_disjoint_paths(self):
        store = make_store({"p": rect_path(0, 0, 10, 10), "q": rect_path(50, 0, 10, 10)})
        tool = ShapeBuilderTool(store)
        tool.activate()
        assert tool.session.regions == []
        _drag(tool, (5.0, 5.0), (55.0, 5.0))
        assert not tool.session.is_dragging
        assert tool.active
        assert {e.id for e in store.elements} == {"p", "q"}
