# curvelabel/core/visual_center.py
"""
Visual center: cheap approximation of the pole of inaccessibility (the inside
point farthest from the boundary). Grid scan over the bounding box, then random
local refinement. Deterministic only when the generator is seeded.
"""

from __future__ import annotations

import logging
import math

import numpy as np

from curvelabel.core.config import (
    SEED,
    VISUAL_CENTER_DEFAULT_RADIUS,
    VISUAL_CENTER_GRID_STEPS,
    VISUAL_CENTER_REFINE_TRIALS,
)
from curvelabel.core.geometry import (
    PreparedPolygon,
    distance_to_edge,
    point_in_polygon,
    points_in_polygon,
    prepare_polygon,
)
from curvelabel.core.types import Point, Polygon

logger = logging.getLogger(__name__)


def find_visual_center(
    polygon: Polygon | PreparedPolygon,
    rng: np.random.Generator | None = None,
    seed: int | None = SEED,
    grid_steps: int = VISUAL_CENTER_GRID_STEPS,
    refine_trials: int = VISUAL_CENTER_REFINE_TRIALS,
) -> tuple[Point, float]:
    """
    Return (point, clearance). `rng` wins over `seed`; with neither the
    refinement phase varies from run to run.
    """
    poly = prepare_polygon(polygon)
    if rng is None:
        rng = np.random.default_rng(seed)

    best = Point(float(poly.xs[0]), float(poly.ys[0]))
    best_clearance = 0.0

    grid_x = np.linspace(poly.min_x, poly.max_x, grid_steps + 1)
    grid_y = np.linspace(poly.min_y, poly.max_y, grid_steps + 1)
    for x in grid_x:
        inside = points_in_polygon(np.full_like(grid_y, x), grid_y, poly)
        for y in grid_y[inside]:
            d = distance_to_edge((x, y), poly)
            if d > best_clearance:
                best = Point(float(x), float(y))
                best_clearance = d

    for _ in range(refine_trials):
        angle = rng.random() * math.pi * 2
        dist = rng.random() * (best_clearance or VISUAL_CENTER_DEFAULT_RADIUS)
        p = Point(best.x + math.cos(angle) * dist, best.y + math.sin(angle) * dist)
        if point_in_polygon(p, poly):
            d = distance_to_edge(p, poly)
            if d > best_clearance:
                best = p
                best_clearance = d

    logger.debug("Visual center (%.2f, %.2f), clearance %.2f", best.x, best.y, best_clearance)
    return best, best_clearance
