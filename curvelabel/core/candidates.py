# curvelabel/core/candidates.py
"""
Candidate generation: master spine through the visual center, seeds sampled
along it, and per seed a smoothed sub-spine of label length with its boundary
clearance profile. Rejected seeds yield nothing; scoring happens downstream.
"""

from __future__ import annotations

import logging
import math
from collections import Counter
from dataclasses import dataclass, field
from typing import Iterator

import numpy as np

from curvelabel.core.config import (
    COLLISION_THRESHOLD_RATIO,
    HARD_CLEARANCE_FLOOR_RATIO,
    LOCAL_SPAN_TEXT_RATIO,
    MAX_SEEDS,
    SEED_INTERVAL_TEXT_RATIO,
    SEED_MIN_INTERVAL,
    SMOOTHING_PASSES,
    WINDOW_MIN_FILL_RATIO,
)
from curvelabel.core.geometry import (
    PreparedPolygon,
    distance_to_edge,
    local_orientation,
    point_in_polygon,
)
from curvelabel.core.medial_axis import cumulative_lengths, snap_to_medial_axis, trace_spine
from curvelabel.core.types import LabelBounds, Point

logger = logging.getLogger(__name__)


@dataclass
class CandidateSpine:
    """A seed's smoothed sub-spine that passed the length and clearance checks."""
    center: Point
    spine: list[Point]
    min_clearance: float
    avg_clearance: float
    collision_points: list[Point] = field(default_factory=list)
    bounds: LabelBounds | None = None


def master_spine(center: Point, poly: PreparedPolygon) -> tuple[list[Point], Point]:
    """Spine through the whole river, traced both ways from the snapped center. Returns (spine, origin)."""
    angle = local_orientation(center, poly)
    origin, _ = snap_to_medial_axis(center, angle, poly)
    spine, _ = trace_spine(origin, angle, poly.diagonal, poly)
    return spine, origin


def sample_seeds(
    spine: list[Point],
    origin: Point,
    text_width: float,
    max_seeds: int = MAX_SEEDS,
) -> list[Point]:
    """
    Origin first, then a seed each time the distance walked since the last one
    reaches max(0.2 * text_width, 20); the origin is never emitted twice.
    Uniformly subsampled down to max_seeds.
    """
    interval = max(text_width * SEED_INTERVAL_TEXT_RATIO, SEED_MIN_INTERVAL)
    seeds = [origin]
    acc = 0.0
    for prev, cur in zip(spine, spine[1:]):
        acc += math.hypot(cur.x - prev.x, cur.y - prev.y)
        if acc >= interval:
            # the origin lies on the spine and is already seeds[0]
            if cur != origin:
                seeds.append(cur)
            acc = 0.0
    if len(seeds) > max_seeds:
        step = math.ceil(len(seeds) / max_seeds)
        seeds = seeds[::step]
    return seeds


def rank_seeds(seeds: list[Point], poly: PreparedPolygon) -> list[Point]:
    """Widest sections first. Only the iteration order changes."""
    return sorted(seeds, key=lambda s: distance_to_edge(s, poly), reverse=True)


def extract_window(
    spine: list[Point],
    seed_index: int,
    length: float,
    min_fill: float = WINDOW_MIN_FILL_RATIO,
) -> list[Point] | None:
    """
    Sub-spine of `length` centered on spine[seed_index], clamped to the spine's
    ends, with interpolated endpoints. None when the spine is too short.
    """
    dists = cumulative_lengths(spine)
    total = float(dists[-1])
    if total < length:
        return None

    seed_dist = float(dists[seed_index])
    start = seed_dist - length / 2
    end = seed_dist + length / 2
    if start < 0:
        start = 0.0
        end = min(length, total)
    if end > total:
        end = total
        start = max(0.0, total - length)
    if end - start < length * min_fill:
        return None

    xy = np.asarray(spine, dtype=np.float64)
    first = Point(float(np.interp(start, dists, xy[:, 0])), float(np.interp(start, dists, xy[:, 1])))
    last = Point(float(np.interp(end, dists, xy[:, 0])), float(np.interp(end, dists, xy[:, 1])))
    inner = [p for p, d in zip(spine, dists) if start < d < end]
    return [first] + inner + [last]


def smooth_spine(points: list[Point], passes: int = SMOOTHING_PASSES) -> list[Point]:
    """0.25/0.5/0.25 moving average, endpoints held fixed."""
    if len(points) < 3:
        return list(points)
    xy = np.asarray(points, dtype=np.float64)
    for _ in range(passes):
        xy[1:-1] = 0.25 * xy[:-2] + 0.5 * xy[1:-1] + 0.25 * xy[2:]
    return [Point(float(x), float(y)) for x, y in xy]


def clearance_profile(
    points: list[Point],
    poly: PreparedPolygon,
    collision_threshold: float,
) -> tuple[float, float, list[Point]]:
    """(min clearance, average clearance, samples below collision_threshold)."""
    clearances = [distance_to_edge(p, poly) for p in points]
    collisions = [p for p, c in zip(points, clearances) if c < collision_threshold]
    return min(clearances), sum(clearances) / len(clearances), collisions


def spine_bounds(points: list[Point], center: Point, text_height: float) -> LabelBounds:
    """Box around the sub-spine inflated by text height, plus a bounding radius."""
    xy = np.asarray(points, dtype=np.float64)
    min_x, min_y = xy.min(axis=0)
    max_x, max_y = xy.max(axis=0)
    radius = math.hypot(max_x - min_x, max_y - min_y) / 2
    return LabelBounds(
        min=Point(float(min_x - text_height), float(min_y - text_height)),
        max=Point(float(max_x + text_height), float(max_y + text_height)),
        center=center,
        radius=float(radius + text_height),
    )


def generate_candidate_spines(
    poly: PreparedPolygon,
    seeds: list[Point],
    text_width: float,
    text_height: float,
) -> Iterator[CandidateSpine]:
    """Yield an admissible sub-spine per seed, in seed order."""
    rejected: Counter[str] = Counter()
    floor = text_height * HARD_CLEARANCE_FLOOR_RATIO
    collision_threshold = text_height * COLLISION_THRESHOLD_RATIO

    for seed in seeds:
        if not point_in_polygon(seed, poly):
            rejected["outside"] += 1
            continue

        angle = local_orientation(seed, poly)
        center, _ = snap_to_medial_axis(seed, angle, poly)
        spine, seed_index = trace_spine(center, angle, text_width * LOCAL_SPAN_TEXT_RATIO, poly)

        window = extract_window(spine, seed_index, text_width)
        if window is None:
            rejected["too_short"] += 1
            continue

        smoothed = smooth_spine(window)
        min_clearance, avg_clearance, collisions = clearance_profile(smoothed, poly, collision_threshold)
        if min_clearance < floor:
            rejected["clearance"] += 1
            continue

        yield CandidateSpine(
            center=center,
            spine=smoothed,
            min_clearance=min_clearance,
            avg_clearance=avg_clearance,
            collision_points=collisions,
            bounds=spine_bounds(smoothed, center, text_height),
        )

    if rejected:
        logger.debug("Rejected seeds: %s", dict(rejected))
