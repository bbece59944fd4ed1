# tests/test_curve_fit.py
"""
Curve fitter: path format, the degenerate two-point case, readability
correction, segment count and control-point reach.
"""

from __future__ import annotations

import math

import numpy as np
import pytest

from curvelabel.core.curve_fit import (
    angle_from_path,
    format_path,
    generate_curved_label_path,
    parse_path,
    path_endpoints,
)
from curvelabel.core.types import Point


def test_two_point_spine_is_straight_segment() -> None:
    assert generate_curved_label_path([(0, 0), (100, 0)], 100, 0.5) == "M 0 0 L 100 0"


def test_two_point_spine_reversed_when_unreadable() -> None:
    assert generate_curved_label_path([(100, 0), (0, 0)], 100, 0.5) == "M 0 0 L 100 0"


def test_short_spine_gives_empty_path() -> None:
    assert generate_curved_label_path([], 50) == ""
    assert generate_curved_label_path([(1, 1)], 50) == ""


def test_right_to_left_spine_is_reversed() -> None:
    d = generate_curved_label_path([(300, 0), (200, 0), (100, 0), (0, 0)], 100, 0.5)
    assert d.startswith("M 0 0 ")
    assert angle_from_path(d) == pytest.approx(0.0)
    # ideal segment length clamps to 25 -> 300 / 25 segments
    ops = [op for op, _ in parse_path(d)]
    assert ops == ["M"] + ["C"] * 12


def test_paths_are_always_readable() -> None:
    rng = np.random.default_rng(3)
    for _ in range(50):
        spine = [tuple(p) for p in rng.uniform(0, 200, size=(int(rng.integers(2, 8)), 2))]
        d = generate_curved_label_path(spine, 60, 0.8)
        assert abs(angle_from_path(d)) <= math.pi / 2 + 1e-9


def test_zero_tension_puts_controls_on_endpoints() -> None:
    d = generate_curved_label_path([(0, 0), (40, 10), (80, 0), (120, 10)], 60, 0.0)
    prev = None
    for op, pts in parse_path(d):
        if op == "C":
            c1, c2, end = pts
            assert c1 == pytest.approx(prev)
            assert c2 == pytest.approx(end)
        prev = pts[-1]


def test_control_reach_bounded_by_tension() -> None:
    tension = 0.8
    d = generate_curved_label_path([(0, 0), (50, 40), (100, 0), (150, 40), (200, 0)], 100, tension)
    prev = None
    for op, pts in parse_path(d):
        if op == "C":
            c1, c2, end = pts
            seg = math.dist(prev, end)
            assert math.dist(prev, c1) <= tension * 0.5 * seg + 1e-6
            assert math.dist(end, c2) <= tension * 0.5 * seg + 1e-6
        prev = pts[-1]


def test_format_and_parse_path() -> None:
    d = format_path([("M", [Point(0, 0)]), ("C", [Point(1.5, 0), Point(2, 1), Point(3, 1)])])
    assert d == "M 0 0 C 1.5 0, 2 1, 3 1"
    cmds = parse_path(d)
    assert cmds[0] == ("M", [Point(0, 0)])
    assert cmds[1][0] == "C" and cmds[1][1][2] == Point(3, 1)
    assert path_endpoints(d) == (Point(0, 0), Point(3, 1))
    assert path_endpoints("") is None
    assert angle_from_path("") == 0.0
