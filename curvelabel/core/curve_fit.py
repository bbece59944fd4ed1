# curvelabel/core/curve_fit.py
"""
Curve fitter: turn a spine into a readable multi-segment cubic Bezier path
(SVG path data, absolute M/L/C commands). Control-point reach shrinks at sharp
turns so the curve does not loop; the spine is reversed when it would render
upside-down.
"""

from __future__ import annotations

import math
import re
from typing import Sequence

import numpy as np

from curvelabel.core.config import (
    CURVE_MAX_SEGMENT_LENGTH,
    CURVE_MIN_FACTOR,
    CURVE_MIN_SEGMENT_LENGTH,
    CURVE_SEGMENTS_PER_LABEL,
)
from curvelabel.core.types import Point

PathCommand = tuple[str, list[Point]]

_TOKEN = re.compile(r"[MLC]|[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?")
_ARITY = {"M": 1, "L": 1, "C": 3}


def _fmt(v: float) -> str:
    """Shortest round-tripping text; integral values without a decimal part."""
    v = float(v)
    if v.is_integer():
        return str(int(v))
    return repr(v)


def format_path(commands: Sequence[PathCommand]) -> str:
    """SVG path data for M/L/C commands: 'M x y C x1 y1, x2 y2, x y'."""
    parts = []
    for op, pts in commands:
        coords = ", ".join(f"{_fmt(p[0])} {_fmt(p[1])}" for p in pts)
        parts.append(f"{op} {coords}")
    return " ".join(parts)


def parse_path(d: str) -> list[PathCommand]:
    """Inverse of format_path. Unknown content is ignored."""
    commands: list[PathCommand] = []
    op: str | None = None
    numbers: list[float] = []

    def flush() -> None:
        if op is None:
            return
        pts = [Point(numbers[i], numbers[i + 1]) for i in range(0, len(numbers) - 1, 2)]
        n = _ARITY[op]
        for i in range(0, len(pts) - n + 1, n):
            commands.append((op, pts[i:i + n]))

    for token in _TOKEN.findall(d or ""):
        if token in _ARITY:
            flush()
            op = token
            numbers = []
        else:
            numbers.append(float(token))
    flush()
    return commands


def path_endpoints(d: str) -> tuple[Point, Point] | None:
    """First and last on-curve points of a path; None for an empty path."""
    commands = parse_path(d)
    if not commands:
        return None
    return commands[0][1][0], commands[-1][1][-1]


def angle_from_path(d: str) -> float:
    """Realized reading angle of a path: direction from its start to its end point."""
    ends = path_endpoints(d)
    if ends is None:
        return 0.0
    start, end = ends
    return math.atan2(end.y - start.y, end.x - start.x)


def _is_unreadable(dx: float, dy: float) -> bool:
    """Text along (dx, dy) would read right-to-left / upside-down."""
    return abs(math.atan2(dy, dx)) > math.pi / 2


def _resample(xy: np.ndarray, n_segments: int) -> np.ndarray:
    """Points at uniform arc-length intervals (n_segments + 1 points)."""
    seg = np.hypot(np.diff(xy[:, 0]), np.diff(xy[:, 1]))
    lengths = np.concatenate([[0.0], np.cumsum(seg)])
    targets = np.linspace(0.0, lengths[-1], n_segments + 1)
    return np.column_stack([np.interp(targets, lengths, xy[:, 0]), np.interp(targets, lengths, xy[:, 1])])


def _unit(vx: float, vy: float) -> tuple[float, float]:
    length = math.hypot(vx, vy)
    if length > 1e-6:
        return vx / length, vy / length
    return vx, vy


def generate_curved_label_path(
    spine: Sequence[tuple[float, float]],
    label_width: float,
    tension: float = 0.5,
) -> str:
    """
    Fit a smooth cubic path to `spine`. `tension` in [0, 1] scales the control
    point reach. Two-point spines become a straight 'M .. L ..' segment.
    """
    if len(spine) < 2:
        return ""

    if len(spine) == 2:
        a, b = Point(*spine[0]), Point(*spine[1])
        if _is_unreadable(b.x - a.x, b.y - a.y):
            a, b = b, a
        return format_path([("M", [a]), ("L", [b])])

    xy = np.asarray(spine, dtype=np.float64)
    dxy = np.diff(xy, axis=0)
    seg_len = np.hypot(dxy[:, 0], dxy[:, 1])
    readable = np.abs(np.arctan2(dxy[:, 1], dxy[:, 0])) <= math.pi / 2
    # length-weighted vote: a few long segments outweigh many short ones
    if seg_len[~readable].sum() > seg_len[readable].sum():
        xy = xy[::-1]

    ideal = max(CURVE_MIN_SEGMENT_LENGTH, min(CURVE_MAX_SEGMENT_LENGTH, label_width / CURVE_SEGMENTS_PER_LABEL))
    n_segments = max(2, math.ceil(seg_len.sum() / ideal))
    sampled = _resample(xy, n_segments)

    if _is_unreadable(sampled[-1, 0] - sampled[0, 0], sampled[-1, 1] - sampled[0, 1]):
        sampled = sampled[::-1]

    pts = [Point(float(x), float(y)) for x, y in sampled]
    last = len(pts) - 1
    tangents: list[tuple[float, float]] = []
    factors: list[float] = []
    for i, cur in enumerate(pts):
        prev = pts[max(0, i - 1)]
        nxt = pts[min(last, i + 1)]

        tx, ty = nxt.x - prev.x, nxt.y - prev.y
        length = math.hypot(tx, ty)
        tangents.append((tx / length, ty / length) if length > 1e-6 else (1.0, 0.0))

        if i == 0 or i == last:
            factors.append(1.0)
            continue
        v1x, v1y = _unit(cur.x - prev.x, cur.y - prev.y)
        v2x, v2y = _unit(nxt.x - cur.x, nxt.y - cur.y)
        dot = v1x * v2x + v1y * v2y
        factors.append(min(1.0, max(CURVE_MIN_FACTOR, (1 + dot) * 0.5 + CURVE_MIN_FACTOR)))

    base = tension * 0.5
    commands: list[PathCommand] = [("M", [pts[0]])]
    for i in range(last):
        p0, p1 = pts[i], pts[i + 1]
        dist = math.hypot(p1.x - p0.x, p1.y - p0.y)
        s0 = base * factors[i] * dist
        s1 = base * factors[i + 1] * dist
        c1 = Point(p0.x + tangents[i][0] * s0, p0.y + tangents[i][1] * s0)
        c2 = Point(p1.x - tangents[i + 1][0] * s1, p1.y - tangents[i + 1][1] * s1)
        commands.append(("C", [c1, c2, p1]))
    return format_path(commands)
