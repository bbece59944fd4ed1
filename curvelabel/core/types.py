# curvelabel/core/types.py
"""
Value types for points, label bounds, candidate placements and the labeling result.
Everything here is created fresh per placement call.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import NamedTuple, Sequence


class Point(NamedTuple):
    """Coordinate in the input polygon's space."""
    x: float
    y: float


Polygon = Sequence[tuple[float, float]]
"""Ordered vertices, implicitly closed. At least 3 points and simple (caller contract)."""


@dataclass(frozen=True)
class Bounds:
    min: Point
    max: Point


@dataclass(frozen=True)
class LabelBounds:
    """Axis-aligned box plus bounding circle of a placed label."""
    min: Point
    max: Point
    center: Point
    radius: float


@dataclass
class LabelPlacement:
    """
    One candidate placement. `angle` is the realized reading angle of `path`
    (radians, |angle| <= pi/2); `clearance` is the average sampled clearance.
    """
    center: Point
    angle: float
    score: float
    width: float
    height: float
    clearance: float
    path: str
    bounds: LabelBounds
    collision_points: list[Point] = field(default_factory=list)
    min_clearance: float = 0.0
    features: dict[str, float] = field(default_factory=dict)
    is_fallback: bool = False


@dataclass
class LabelingResult:
    """Output of compute_placement. `candidates` is sorted by descending score."""
    placed: LabelPlacement | None
    candidates: list[LabelPlacement]
    centroid: Point
    bounds: Bounds
    warnings: list[str] = field(default_factory=list)
