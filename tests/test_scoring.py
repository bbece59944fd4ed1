# tests/test_scoring.py
"""Score terms, their weighted sum, and the overlap penalty against existing labels."""

from __future__ import annotations

import math

import pytest

from curvelabel.core.geometry import occupied_geometry
from curvelabel.core.scoring import (
    centering_score,
    clearance_score,
    curvature_penalty,
    max_turn_angle,
    overlap_penalty,
    score_candidate,
    score_terms,
    width_bonus,
)
from curvelabel.core.types import LabelBounds, Point


def _box(x0: float, y0: float, x1: float, y1: float) -> LabelBounds:
    return LabelBounds(
        min=Point(x0, y0),
        max=Point(x1, y1),
        center=Point((x0 + x1) / 2, (y0 + y1) / 2),
        radius=math.hypot(x1 - x0, y1 - y0) / 2,
    )


def test_clearance_score_saturates() -> None:
    assert clearance_score(10, 20) == pytest.approx(0.5)
    assert clearance_score(100, 20) == 2.0


def test_width_bonus_threshold() -> None:
    assert width_bonus(30, 20) == 0.0
    assert width_bonus(40, 20) == pytest.approx(1.0)


def test_max_turn_angle() -> None:
    straight = [Point(0, 0), Point(10, 0), Point(20, 0)]
    right_angle = [Point(0, 0), Point(10, 0), Point(10, 10)]
    assert max_turn_angle(straight) == pytest.approx(0.0)
    assert max_turn_angle(right_angle) == pytest.approx(math.pi / 2)
    # zero-length segment is skipped
    assert max_turn_angle([Point(0, 0), Point(0, 0), Point(5, 5)]) == 0.0


def test_curvature_penalty_flat_then_decays() -> None:
    assert curvature_penalty(0.0) == 1.0
    assert curvature_penalty(math.pi / 4) == 1.0
    assert curvature_penalty(math.pi / 2) == pytest.approx(math.exp(-3 * math.pi / 4))


def test_centering_score() -> None:
    assert centering_score(Point(0, 0), Point(0, 0)) == 1.0
    assert centering_score(Point(50, 0), Point(0, 0)) == pytest.approx(0.5)


def test_straight_candidate_beats_bent_with_equal_clearance() -> None:
    vc = Point(50, 0)
    straight = score_candidate(score_terms([Point(0, 0), Point(20, 0), Point(40, 0)], Point(20, 0), 25, 16, vc))
    bent = score_candidate(score_terms([Point(0, 0), Point(20, 0), Point(20, 20)], Point(20, 0), 25, 16, vc))
    assert straight > bent


def test_score_candidate_weights() -> None:
    terms = {"clearance": 1.0, "width_bonus": 0.5, "curvature": 1.0, "centering": 0.25}
    assert score_candidate(terms) == pytest.approx(10 + 4 + 5 + 0.25)


def test_overlap_penalty() -> None:
    cand = _box(0, 0, 10, 10)
    assert overlap_penalty(cand, None) == 0.0
    assert overlap_penalty(cand, occupied_geometry([_box(20, 20, 30, 30)])) == 0.0
    # 0.4 x 1 = 0.4 area: penalized, not rejected
    small = overlap_penalty(cand, occupied_geometry([_box(9.6, 0, 20, 1)]))
    assert small == pytest.approx(5 * 0.4 / 100)
    assert overlap_penalty(cand, occupied_geometry([_box(5, 5, 20, 20)])) is None
