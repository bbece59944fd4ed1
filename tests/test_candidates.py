# tests/test_candidates.py
"""
Candidate generation helpers: seed sampling and cap, window extraction,
smoothing, clearance profile, and the admissibility of generated sub-spines.
"""

from __future__ import annotations

import pytest

from curvelabel.core.candidates import (
    clearance_profile,
    extract_window,
    generate_candidate_spines,
    master_spine,
    rank_seeds,
    sample_seeds,
    smooth_spine,
    spine_bounds,
)
from curvelabel.core.geometry import point_in_polygon, prepare_polygon
from curvelabel.core.types import Point

LINE = [Point(float(x), 0.0) for x in range(0, 101, 10)]
RECT = prepare_polygon([(0, 0), (400, 0), (400, 80), (0, 80)])


def test_sample_seeds_origin_first_then_interval() -> None:
    spine = [Point(float(x), 0.0) for x in range(101)]
    seeds = sample_seeds(spine, Point(50, 0), text_width=10)
    assert seeds[0] == Point(50, 0)
    assert [s.x for s in seeds[1:]] == [20, 40, 60, 80, 100]


def test_sample_seeds_origin_not_repeated() -> None:
    spine = [Point(float(x), 0.0) for x in range(101)]
    seeds = sample_seeds(spine, Point(20, 0), text_width=10)
    assert seeds.count(Point(20, 0)) == 1
    assert [s.x for s in seeds] == [20, 40, 60, 80, 100]


def test_sample_seeds_capped() -> None:
    spine = [Point(float(x), 0.0) for x in range(101)]
    seeds = sample_seeds(spine, Point(50, 0), text_width=10, max_seeds=3)
    assert len(seeds) == 3
    assert seeds[0] == Point(50, 0)


def test_rank_seeds_widest_first() -> None:
    seeds = [Point(10, 40), Point(200, 40), Point(200, 5)]
    ranked = rank_seeds(seeds, RECT)
    assert ranked[0] == Point(200, 40)
    assert ranked[-1] == Point(200, 5)


def test_extract_window_centered() -> None:
    w = extract_window(LINE, 5, 30)
    assert [p.x for p in w] == pytest.approx([35, 40, 50, 60, 65])


def test_extract_window_clamped_at_start() -> None:
    w = extract_window(LINE, 0, 30)
    assert [p.x for p in w] == pytest.approx([0, 10, 20, 30])


def test_extract_window_clamped_at_end() -> None:
    w = extract_window(LINE, 10, 30)
    assert [p.x for p in w] == pytest.approx([70, 80, 90, 100])


def test_extract_window_too_short() -> None:
    assert extract_window(LINE, 5, 200) is None
    assert extract_window([Point(0, 0)], 0, 10) is None


def test_smooth_spine_keeps_endpoints_and_flattens() -> None:
    zigzag = [Point(float(i * 10), 10.0 if i % 2 else -10.0) for i in range(9)]
    out = smooth_spine(zigzag)
    assert len(out) == len(zigzag)
    assert out[0] == zigzag[0] and out[-1] == zigzag[-1]
    assert max(abs(p.y) for p in out[2:-2]) < 10.0
    assert smooth_spine(zigzag[:2]) == zigzag[:2]


def test_clearance_profile() -> None:
    pts = [Point(100, 40), Point(200, 10), Point(300, 40)]
    min_c, avg_c, collisions = clearance_profile(pts, RECT, 20.0)
    assert min_c == pytest.approx(10.0)
    assert avg_c == pytest.approx(30.0)
    assert collisions == [Point(200, 10)]


def test_spine_bounds_inflated_by_text_height() -> None:
    b = spine_bounds([Point(0, 0), Point(30, 40)], Point(15, 20), 5.0)
    assert b.min == Point(-5, -5) and b.max == Point(35, 45)
    assert b.radius == pytest.approx(30.0)


def test_master_spine_inside_polygon() -> None:
    spine, origin = master_spine(Point(200, 40), RECT)
    assert origin in spine
    assert len(spine) > 10
    assert all(point_in_polygon(p, RECT) for p in spine)


def test_generated_candidates_respect_hard_floor() -> None:
    text_width, text_height = 22.4, 19.2
    seeds = [Point(100, 40), Point(200, 40), Point(300, 40)]
    cands = list(generate_candidate_spines(RECT, seeds, text_width, text_height))
    assert len(cands) == 3
    for c in cands:
        assert c.min_clearance >= 0.6 * text_height
        assert c.avg_clearance == pytest.approx(40.0, abs=0.5)
        assert c.collision_points == []
        assert point_in_polygon(c.center, RECT)


def test_too_narrow_yields_no_candidate() -> None:
    narrow = prepare_polygon([(0, 0), (400, 0), (400, 10), (0, 10)])
    assert list(generate_candidate_spines(narrow, [Point(200, 5)], 22.4, 19.2)) == []


def test_seed_outside_is_rejected() -> None:
    assert list(generate_candidate_spines(RECT, [Point(500, 500)], 22.4, 19.2)) == []
