# tests/test_placement.py
"""
End-to-end placement: straight river, bend, too-narrow fallback, ranking,
clearance floor, readability, existing-label handling and determinism.
"""

from __future__ import annotations

import math

import numpy as np
import pytest
from shapely.geometry import LineString

from curvelabel.core import error_codes, placement
from curvelabel.core.candidates import CandidateSpine, spine_bounds
from curvelabel.core.geometry import label_bounds_box, occupied_geometry, point_in_polygon
from curvelabel.core.io import river_polygon_coords
from curvelabel.core.placement import compute_placement
from curvelabel.core.types import LabelBounds, Point

# right-angle river 60 wide: horizontal arm y 70..130, vertical arm x 270..330
L_BEND = [(0, 70), (330, 70), (330, 400), (270, 400), (270, 130), (0, 130)]
RECT = [(0, 0), (400, 0), (400, 80), (0, 80)]
NARROW = [(0, 0), (400, 0), (400, 10), (0, 10)]


def _bend_polygon() -> list[Point]:
    """River 60 wide: horizontal arm, quarter-circle bend, vertical arm."""
    arc = [(200 + 150 * math.cos(t), 250 + 150 * math.sin(t)) for t in np.linspace(-math.pi / 2, 0, 16)]
    centerline = LineString([(0, 100)] + arc + [(350, 450)])
    return river_polygon_coords(centerline.buffer(30, cap_style="flat"))


def test_rectangle_places_straight_centered_label() -> None:
    res = compute_placement(RECT, "AB", font_size=16)
    placed = res.placed
    assert placed is not None and not placed.is_fallback
    assert placed.width == pytest.approx(22.4)
    assert placed.height == pytest.approx(19.2)
    assert placed.clearance == pytest.approx(40.0, abs=0.5)
    assert placed.angle == pytest.approx(0.0, abs=0.01)
    assert placed.features["max_turn_deg"] < 5.0
    assert placed.collision_points == []
    assert point_in_polygon(placed.center, RECT)
    assert placed.center.y == pytest.approx(40.0, abs=0.5)
    assert res.warnings == []


def test_bend_has_candidates_on_both_arms() -> None:
    poly = _bend_polygon()
    res = compute_placement(poly, "AB", font_size=16)
    centers = [c.center for c in res.candidates]
    assert any(c.x < 180 and abs(c.y - 100) < 15 for c in centers)
    assert any(c.y > 270 and abs(c.x - 350) < 15 for c in centers)
    assert not res.placed.is_fallback


def test_too_narrow_uses_straight_fallback() -> None:
    res = compute_placement(NARROW, "AB", font_size=16)
    placed = res.placed
    assert res.candidates == []
    assert placed is not None and placed.is_fallback
    assert placed.score == 0.0
    assert placed.angle == pytest.approx(0.0)
    assert placed.path.startswith("M ") and " L " in placed.path
    assert len(placed.collision_points) == 11
    assert error_codes.NO_FEASIBLE_CANDIDATE in res.warnings
    assert error_codes.FALLBACK_COLLISIONS in res.warnings


def test_tiny_polygon_still_returns_a_placement() -> None:
    res = compute_placement([(0, 0), (1, 0), (0, 1)], "Long river name", font_size=16)
    assert res.placed is not None and res.placed.is_fallback
    assert res.placed.path
    assert error_codes.NO_MASTER_SPINE in res.warnings


def test_candidates_sorted_and_placed_is_best() -> None:
    res = compute_placement(_bend_polygon(), "River", font_size=12)
    scores = [c.score for c in res.candidates]
    assert scores == sorted(scores, reverse=True)
    assert res.placed is res.candidates[0]


def test_candidates_respect_clearance_floor_and_readability() -> None:
    for poly in (RECT, _bend_polygon()):
        res = compute_placement(poly, "Sample", font_size=12)
        floor = 0.6 * res.placed.height
        for c in res.candidates:
            assert c.min_clearance >= floor
            assert abs(c.angle) <= math.pi / 2 + 1e-9
            assert c.path.startswith("M ")


def test_text_size_override() -> None:
    res = compute_placement(RECT, "AB", font_size=16, text_size=(50.0, 10.0))
    assert res.placed.width == 50.0
    assert res.placed.height == 10.0


def test_deterministic_with_seed() -> None:
    a = compute_placement(_bend_polygon(), "River", seed=5)
    b = compute_placement(_bend_polygon(), "River", seed=5)
    assert a.placed.path == b.placed.path
    assert [c.score for c in a.candidates] == [c.score for c in b.candidates]


def test_existing_labels_ignored_by_default() -> None:
    blocker = LabelBounds(min=Point(0, 0), max=Point(250, 80), center=Point(125, 40), radius=130)
    plain = compute_placement(RECT, "AB", font_size=16)
    with_existing = compute_placement(RECT, "AB", font_size=16, existing_labels=[blocker])
    assert plain.placed.path == with_existing.placed.path


def test_avoid_existing_labels() -> None:
    blocker = LabelBounds(min=Point(0, 0), max=Point(250, 80), center=Point(125, 40), radius=130)
    res = compute_placement(RECT, "AB", font_size=16, existing_labels=[blocker], avoid_existing=True)
    assert not res.placed.is_fallback
    occupied = occupied_geometry([blocker])
    for c in res.candidates:
        assert label_bounds_box(c.bounds).intersection(occupied).area <= 0.5
    assert res.placed.center.x > 250


def _candidate(spine: list[Point], center: Point, height: float) -> CandidateSpine:
    return CandidateSpine(
        center=center,
        spine=spine,
        min_clearance=30.0,
        avg_clearance=30.0,
        bounds=spine_bounds(spine, center, height),
    )


def test_straight_arm_beats_corner_when_clearances_tie(monkeypatch) -> None:
    height = 19.2
    corner = _candidate(
        [Point(258, 100), Point(279, 100), Point(300, 100), Point(300, 121), Point(300, 142)],
        Point(300, 100),
        height,
    )
    arm = _candidate(
        [Point(60, 100), Point(81, 100), Point(102, 100), Point(123, 100), Point(144, 100)],
        Point(102, 100),
        height,
    )
    monkeypatch.setattr(placement, "generate_candidate_spines", lambda *args: iter([corner, arm]))

    res = compute_placement(L_BEND, "AB", font_size=16)
    assert len(res.candidates) == 2
    placed, other = res.candidates
    assert placed is res.placed
    assert placed.center == Point(102, 100)
    assert placed.features["clearance"] == other.features["clearance"]
    assert placed.features["width_bonus"] == other.features["width_bonus"]
    # the corner window turns 90 degrees and sits nearer the visual center
    assert other.features["max_turn_deg"] == pytest.approx(90.0)
    assert other.features["curvature"] < 1.0
    assert other.features["centering"] > placed.features["centering"]
    assert placed.features["curvature"] == max(c.features["curvature"] for c in res.candidates)
