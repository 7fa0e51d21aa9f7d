"""
Tests for merge and subtract commits against a canvas store.
"""

import math

import pytest

from conftest import RADIUS, circle_overlap_area, make_store
from shapebuilder import boolean2d
from shapebuilder.boolean2d import contains, path_area, to_path_item
from shapebuilder.commit import apply_merge_operation, apply_subtract_operation, style_from_source
from shapebuilder.errors import GeometryError
from shapebuilder.path_data import PathElement, circle_path, rect_path
from shapebuilder.regions import PathWithId, compute_regions_from_paths
from shapebuilder.settings import ShapeBuilderSettings

CIRCLE_AREA = math.pi * RADIUS ** 2
LENS_AREA = circle_overlap_area(RADIUS, RADIUS)


def _regions(store):
    paths = [PathWithId(path_data=e.data, element_id=e.id) for e in store.selected_path_elements()]
    return compute_regions_from_paths(paths)


def _by_sources(regions):
    return {tuple(sorted(r.source_element_ids)): r for r in regions}


class TestStyle:
    """Tests for style_from_source."""

    def test_missing_fields_use_defaults(self):
        element = PathElement(id="x", data=rect_path(0, 0, 1, 1, fill_color="#abcdef"))
        style = style_from_source(element)
        assert style == {
            "stroke_width": 1.0,
            "stroke_color": "#000000",
            "stroke_opacity": 1.0,
            "fill_color": "#abcdef",
            "fill_opacity": 1.0,
        }

    def test_no_source_uses_settings(self):
        settings = ShapeBuilderSettings(stroke_color="#111111", fill_color="#222222")
        style = style_from_source(None, settings)
        assert style["stroke_color"] == "#111111"
        assert style["fill_color"] == "#222222"


class TestMerge:
    """Scenario A style merges."""

    def test_merge_every_region(self, circle_store):
        regions = _regions(circle_store)
        new_id = apply_merge_operation(circle_store, regions, [r.id for r in regions])

        assert [e.id for e in circle_store.elements] == [new_id]
        assert circle_store.selected_ids == [new_id]
        merged = circle_store.get_element(new_id).data
        assert path_area(merged) == pytest.approx(2 * CIRCLE_AREA - LENS_AREA, rel=1e-2)

    def test_circles_overlapping_by_half_radius(self):
        store = make_store({
            "e1": circle_path(0.0, 0.0, RADIUS),
            "e2": circle_path(1.5 * RADIUS, 0.0, RADIUS),
        })
        regions = _regions(store)
        assert len(regions) == 3
        new_id = apply_merge_operation(store, regions, [r.id for r in regions])
        assert store.get_element("e1") is None and store.get_element("e2") is None
        overlap = circle_overlap_area(RADIUS, 1.5 * RADIUS)
        expected = 2 * CIRCLE_AREA - overlap
        assert path_area(store.get_element(new_id).data) == pytest.approx(expected, rel=1e-2)

    def test_merge_takes_style_of_first_source(self, circle_store):
        regions = _regions(circle_store)
        lens = _by_sources(regions)[("e1", "e2")]
        new_id = apply_merge_operation(circle_store, regions, [lens.id])
        data = circle_store.get_element(new_id).data
        assert data.fill_color == "#ff0000"
        assert data.stroke_width == 3.0
        assert data.stroke_color == "#000000"

    def test_merge_one_crescent_deletes_only_its_source(self, circle_store):
        regions = _regions(circle_store)
        crescent = _by_sources(regions)[("e2",)]
        new_id = apply_merge_operation(circle_store, regions, [crescent.id])
        assert circle_store.get_element("e2") is None
        assert circle_store.get_element("e1") is not None
        assert circle_store.get_element(new_id).data.fill_color == "#00ff00"

    def test_unknown_region_ids_do_nothing(self, circle_store):
        regions = _regions(circle_store)
        assert apply_merge_operation(circle_store, regions, ["region-0-nope"]) is None
        assert {e.id for e in circle_store.elements} == {"e1", "e2"}


class TestSubtract:
    """Scenario B style subtracts."""

    def test_subtract_lens(self, circle_store):
        regions = _regions(circle_store)
        lens = _by_sources(regions)[("e1", "e2")]
        new_id = apply_subtract_operation(circle_store, regions, [lens.id])

        assert [e.id for e in circle_store.elements] == [new_id]
        assert circle_store.selected_ids == [new_id]
        result = circle_store.get_element(new_id).data
        assert path_area(result) == pytest.approx(2 * CIRCLE_AREA - 2 * LENS_AREA, rel=1e-2)
        assert result.fill_color == "#ff0000"

    def test_lens_is_absent_from_result(self, circle_store):
        regions = _regions(circle_store)
        lens = _by_sources(regions)[("e1", "e2")]
        new_id = apply_subtract_operation(circle_store, regions, [lens.id])
        item = to_path_item(circle_store.get_element(new_id).data)
        assert not contains(item, (RADIUS / 2, 0.0))
        assert contains(item, (-RADIUS / 2, 0.0))
        assert contains(item, (1.5 * RADIUS, 0.0))

    def test_subtract_everything_leaves_empty_selection(self, circle_store):
        regions = _regions(circle_store)
        result = apply_subtract_operation(circle_store, regions, [r.id for r in regions])
        assert result is None
        assert circle_store.elements == []
        assert circle_store.selected_ids == []

    def test_sources_outside_selection_are_still_removed(self, square_store):
        regions = _regions(square_store)
        overlap = _by_sources(regions)[("a", "b")]
        new_id = apply_subtract_operation(square_store, regions, [overlap.id])
        assert [e.id for e in square_store.elements] == [new_id]
        total = 3 * 100 * 100 - 2 * 50 * 50
        assert path_area(square_store.get_element(new_id).data) == pytest.approx(total - 2500)

    def test_failed_merge_leaves_store_untouched(self, square_store, monkeypatch):
        def broken_unite(a, b):
            raise GeometryError("union failed")

        regions = _regions(square_store)
        overlap = _by_sources(regions)[("a", "b")]
        monkeypatch.setattr(boolean2d, "unite", broken_unite)
        with pytest.raises(GeometryError):
            apply_subtract_operation(square_store, regions, [overlap.id])
        assert {e.id for e in square_store.elements} == {"a", "b", "c"}
        assert square_store.selected_ids == ["a", "b", "c"]
