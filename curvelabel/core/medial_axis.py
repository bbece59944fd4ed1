# curvelabel/core/medial_axis.py
"""
Medial axis tracer: re-center a point between the two banks, and walk along
the river's central axis from a point and heading. Used for the master spine
through the visual center and for one local spine per candidate seed.
"""

from __future__ import annotations

import logging
import math
from typing import NamedTuple

import numpy as np

from curvelabel.core.config import (
    BOUNDARY_REFINE_ITERATIONS,
    BOUNDARY_SEARCH_LIMIT,
    TRACE_HEADING_SMOOTHING,
    TRACE_MAX_STEP,
    TRACE_MAX_STEPS,
    TRACE_MIN_MOVEMENT,
    TRACE_MIN_STEP,
    TRACE_STEP_WIDTH_RATIO,
)
from curvelabel.core.geometry import (
    PreparedPolygon,
    local_orientation,
    point_in_polygon,
    prepare_polygon,
)
from curvelabel.core.types import Point, Polygon

logger = logging.getLogger(__name__)


class TraceResult(NamedTuple):
    points: list[Point]
    length: float


def _boundary_distance(
    p: Point,
    dx: float,
    dy: float,
    poly: PreparedPolygon,
    limit: float = BOUNDARY_SEARCH_LIMIT,
    iterations: int = BOUNDARY_REFINE_ITERATIONS,
) -> float:
    """Distance from p to the boundary along unit direction (dx, dy): doubling, then bisection."""
    step = 1.0
    while step < limit and point_in_polygon((p.x + dx * step, p.y + dy * step), poly):
        step *= 2
    low, high = 0.0, step
    for _ in range(iterations):
        mid = (low + high) / 2
        if point_in_polygon((p.x + dx * mid, p.y + dy * mid), poly):
            low = mid
        else:
            high = mid
    return low


def snap_to_medial_axis(
    p: tuple[float, float],
    angle: float,
    polygon: Polygon | PreparedPolygon,
) -> tuple[Point, float]:
    """
    Shift p perpendicular to `angle` so it sits midway between the two banks.
    Returns (point, local width). When the centered point falls outside the
    polygon (sharp bends) the original point is returned with the width.
    """
    poly = prepare_polygon(polygon)
    p = Point(float(p[0]), float(p[1]))
    nx, ny = -math.sin(angle), math.cos(angle)
    d1 = _boundary_distance(p, nx, ny, poly)
    d2 = _boundary_distance(p, -nx, -ny, poly)
    shift = (d1 - d2) / 2
    centered = Point(p.x + nx * shift, p.y + ny * shift)
    if not point_in_polygon(centered, poly):
        return p, d1 + d2
    return centered, d1 + d2


def _blend_heading(current: float, local: float, smoothing: float) -> float:
    """Turn `current` part of the way toward the local axis, never reversing travel."""
    target = local
    if math.cos(current) * math.cos(local) + math.sin(current) * math.sin(local) < 0:
        target += math.pi
    # target expressed within +-pi of current so the blend takes the short way round
    delta = math.atan2(math.sin(target - current), math.cos(target - current))
    return current + smoothing * delta


def trace_medial_path(
    start: tuple[float, float],
    start_angle: float,
    target_length: float,
    polygon: Polygon | PreparedPolygon,
    direction: int,
    max_steps: int = TRACE_MAX_STEPS,
) -> TraceResult:
    """
    Walk from `start` along the medial axis, `direction` = +1 along the heading
    or -1 against it. The start point itself is not part of the result.
    Stops on leaving the polygon, on stagnation, at target_length or max_steps.
    """
    poly = prepare_polygon(polygon)
    points: list[Point] = []
    current = Point(float(start[0]), float(start[1]))
    heading = start_angle
    traveled = 0.0

    _, width = snap_to_medial_axis(current, heading, poly)

    steps = 0
    while traveled < target_length and steps < max_steps:
        steps += 1
        step_size = max(TRACE_MIN_STEP, min(TRACE_MAX_STEP, width * TRACE_STEP_WIDTH_RATIO))
        heading = _blend_heading(heading, local_orientation(current, poly), TRACE_HEADING_SMOOTHING)

        guess = Point(
            current.x + math.cos(heading) * step_size * direction,
            current.y + math.sin(heading) * step_size * direction,
        )
        if not point_in_polygon(guess, poly):
            break

        medial, width = snap_to_medial_axis(guess, heading, poly)
        moved = math.hypot(medial.x - current.x, medial.y - current.y)
        if moved < TRACE_MIN_MOVEMENT:
            break

        points.append(medial)
        traveled += moved
        current = medial

    return TraceResult(points, traveled)


def trace_spine(
    start: tuple[float, float],
    angle: float,
    span: float,
    polygon: Polygon | PreparedPolygon,
) -> tuple[list[Point], int]:
    """
    Trace `span` both ways from start and join in travel order: backward trace
    reversed, start, forward trace. Returns (spine, index of start).
    """
    poly = prepare_polygon(polygon)
    origin = Point(float(start[0]), float(start[1]))
    forward = trace_medial_path(origin, angle, span, poly, 1)
    backward = trace_medial_path(origin, angle, span, poly, -1)
    spine = backward.points[::-1] + [origin] + forward.points
    return spine, len(backward.points)


def cumulative_lengths(points: list[Point]) -> np.ndarray:
    """Arc length from the first point to each point."""
    if not points:
        return np.zeros(0)
    xy = np.asarray(points, dtype=np.float64)
    seg = np.hypot(np.diff(xy[:, 0]), np.diff(xy[:, 1]))
    return np.concatenate([[0.0], np.cumsum(seg)])
