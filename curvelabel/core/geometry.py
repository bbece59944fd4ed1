# curvelabel/core/geometry.py
"""
Geometry kernel: prepared polygon, point-in-polygon, point/segment and
point/boundary distances, local boundary orientation, label bounds boxes.

Boundary convention for containment: ray casting with the half-open crossing
rule (yi > y) != (yj > y) and a strict x < x_cross test. Points on an edge get
whatever parity that produces; for an axis-aligned rectangle the minimum-x and
minimum-y sides test inside, the maximum-x and maximum-y sides test outside.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable

import numpy as np
from shapely.geometry import Polygon as ShapelyPolygon
from shapely.geometry import box
from shapely.ops import unary_union

from curvelabel.core.types import Bounds, LabelBounds, Point, Polygon


@dataclass(frozen=True)
class PreparedPolygon:
    """
    Vertex and edge arrays of a polygon, computed once per call.
    Edge k runs from vertex k-1 to vertex k, so edge 0 is the closing edge.
    """
    xs: np.ndarray
    ys: np.ndarray
    start_xs: np.ndarray
    start_ys: np.ndarray
    min_x: float
    min_y: float
    max_x: float
    max_y: float

    def __len__(self) -> int:
        return int(self.xs.shape[0])

    @property
    def diagonal(self) -> float:
        return math.hypot(self.max_x - self.min_x, self.max_y - self.min_y)


def prepare_polygon(polygon: Polygon | PreparedPolygon) -> PreparedPolygon:
    """Build a PreparedPolygon; already prepared input is returned unchanged."""
    if isinstance(polygon, PreparedPolygon):
        return polygon
    xy = np.asarray([(float(p[0]), float(p[1])) for p in polygon], dtype=np.float64)
    xs = xy[:, 0]
    ys = xy[:, 1]
    return PreparedPolygon(
        xs=xs,
        ys=ys,
        start_xs=np.roll(xs, 1),
        start_ys=np.roll(ys, 1),
        min_x=float(xs.min()),
        min_y=float(ys.min()),
        max_x=float(xs.max()),
        max_y=float(ys.max()),
    )


def polygon_bounds(polygon: Polygon | PreparedPolygon) -> Bounds:
    """Axis-aligned bounds of the polygon."""
    poly = prepare_polygon(polygon)
    return Bounds(min=Point(poly.min_x, poly.min_y), max=Point(poly.max_x, poly.max_y))


def points_in_polygon(
    xs: np.ndarray,
    ys: np.ndarray,
    polygon: Polygon | PreparedPolygon,
) -> np.ndarray:
    """Vectorised point_in_polygon for arrays of x and y of equal shape."""
    poly = prepare_polygon(polygon)
    px = np.asarray(xs, dtype=np.float64).reshape(-1, 1)
    py = np.asarray(ys, dtype=np.float64).reshape(-1, 1)
    in_box = (
        (px[:, 0] >= poly.min_x) & (px[:, 0] <= poly.max_x)
        & (py[:, 0] >= poly.min_y) & (py[:, 0] <= poly.max_y)
    )
    xi, yi = poly.xs, poly.ys
    xj, yj = poly.start_xs, poly.start_ys
    straddles = (yi > py) != (yj > py)
    with np.errstate(divide="ignore", invalid="ignore"):
        x_cross = (xj - xi) * (py - yi) / (yj - yi) + xi
    crossings = np.count_nonzero(straddles & (px < x_cross), axis=1)
    inside = (crossings % 2) == 1
    return (inside & in_box).reshape(np.shape(xs))


def point_in_polygon(p: tuple[float, float], polygon: Polygon | PreparedPolygon) -> bool:
    """Bounding-box rejection, then ray-casting parity over all edges."""
    poly = prepare_polygon(polygon)
    x, y = float(p[0]), float(p[1])
    if x < poly.min_x or x > poly.max_x or y < poly.min_y or y > poly.max_y:
        return False
    return bool(points_in_polygon(np.array([x]), np.array([y]), poly)[0])


def distance_point_to_segment(
    p: tuple[float, float],
    a: tuple[float, float],
    b: tuple[float, float],
) -> float:
    """Distance from p to segment [a, b]; a == b gives the point distance."""
    dx = b[0] - a[0]
    dy = b[1] - a[1]
    l2 = dx * dx + dy * dy
    if l2 == 0:
        return math.hypot(p[0] - a[0], p[1] - a[1])
    t = ((p[0] - a[0]) * dx + (p[1] - a[1]) * dy) / l2
    t = max(0.0, min(1.0, t))
    return math.hypot(p[0] - (a[0] + t * dx), p[1] - (a[1] + t * dy))


def edge_distances(p: tuple[float, float], polygon: Polygon | PreparedPolygon) -> np.ndarray:
    """Distance from p to every edge, in edge order (closing edge first)."""
    poly = prepare_polygon(polygon)
    ax, ay = poly.start_xs, poly.start_ys
    dx = poly.xs - ax
    dy = poly.ys - ay
    l2 = dx * dx + dy * dy
    safe_l2 = np.where(l2 > 0, l2, 1.0)
    t = np.where(l2 > 0, ((p[0] - ax) * dx + (p[1] - ay) * dy) / safe_l2, 0.0)
    t = np.clip(t, 0.0, 1.0)
    return np.hypot(p[0] - (ax + t * dx), p[1] - (ay + t * dy))


def distance_to_edge(p: tuple[float, float], polygon: Polygon | PreparedPolygon) -> float:
    """Clearance: minimum distance from p to any polygon edge."""
    return float(edge_distances(p, polygon).min())


def local_orientation(p: tuple[float, float], polygon: Polygon | PreparedPolygon) -> float:
    """
    Direction angle (radians) of the edge nearest to p, taken from the edge's
    start vertex to the next vertex. Proxy for the river's flow direction at p.
    """
    poly = prepare_polygon(polygon)
    k = int(np.argmin(edge_distances(p, poly)))
    return math.atan2(poly.ys[k] - poly.start_ys[k], poly.xs[k] - poly.start_xs[k])


def label_bounds_box(bounds: LabelBounds) -> ShapelyPolygon:
    """Shapely box for a LabelBounds (for overlap area tests)."""
    return box(bounds.min.x, bounds.min.y, bounds.max.x, bounds.max.y)


def occupied_geometry(labels: Iterable[LabelBounds]):
    """Union of the boxes of already-placed labels; None when there are none."""
    boxes = [label_bounds_box(b) for b in labels]
    if not boxes:
        return None
    return unary_union(boxes)
