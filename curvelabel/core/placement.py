# curvelabel/core/placement.py
"""
Full placement pipeline: visual center, master spine, seeds, candidate
sub-spines, scoring, curve fitting, selection. A straight fallback at the
visual center is returned when no candidate is admissible, so `placed` is
always set. Pure: no I/O, no state kept between calls.
"""

from __future__ import annotations

import logging
import math
from typing import Sequence

import numpy as np

from curvelabel.core import error_codes
from curvelabel.core.candidates import (
    CandidateSpine,
    generate_candidate_spines,
    master_spine,
    rank_seeds,
    sample_seeds,
)
from curvelabel.core.config import (
    COLLISION_THRESHOLD_RATIO,
    DEFAULT_CURVE_TENSION,
    DEFAULT_FONT_SIZE,
    EXISTING_LABEL_MAX_OVERLAP,
    EXISTING_LABEL_OVERLAP_WEIGHT,
    FALLBACK_COLLISION_SAMPLES,
    SEED,
)
from curvelabel.core.curve_fit import angle_from_path, format_path, generate_curved_label_path
from curvelabel.core.geometry import (
    PreparedPolygon,
    distance_to_edge,
    local_orientation,
    occupied_geometry,
    polygon_bounds,
    prepare_polygon,
)
from curvelabel.core.scoring import overlap_penalty, score_candidate, score_terms
from curvelabel.core.text_metrics import text_footprint
from curvelabel.core.types import LabelBounds, LabelingResult, LabelPlacement, Point, Polygon
from curvelabel.core.visual_center import find_visual_center

logger = logging.getLogger(__name__)


def _to_placement(
    cand: CandidateSpine,
    score: float,
    terms: dict[str, float],
    text_width: float,
    text_height: float,
    curve_tension: float,
) -> LabelPlacement:
    path = generate_curved_label_path(cand.spine, text_width, curve_tension)
    return LabelPlacement(
        center=cand.center,
        angle=angle_from_path(path),
        score=score,
        width=text_width,
        height=text_height,
        clearance=cand.avg_clearance,
        path=path,
        bounds=cand.bounds,
        collision_points=cand.collision_points,
        min_clearance=cand.min_clearance,
        features=dict(terms, min_clearance=cand.min_clearance, avg_clearance=cand.avg_clearance),
    )


def straight_fallback(
    poly: PreparedPolygon,
    visual_center: Point,
    clearance: float,
    text_width: float,
    text_height: float,
) -> LabelPlacement:
    """Straight segment of text_width centered on the visual center, oriented readably."""
    angle = local_orientation(visual_center, poly)
    if abs(angle) > math.pi / 2:
        angle = angle - math.pi if angle > 0 else angle + math.pi

    half_dx = math.cos(angle) * text_width / 2
    half_dy = math.sin(angle) * text_width / 2
    start = Point(visual_center.x - half_dx, visual_center.y - half_dy)
    end = Point(visual_center.x + half_dx, visual_center.y + half_dy)

    threshold = text_height * COLLISION_THRESHOLD_RATIO
    collisions = []
    min_clearance = math.inf
    for t in np.linspace(0.0, 1.0, FALLBACK_COLLISION_SAMPLES + 1):
        p = Point(start.x + (end.x - start.x) * t, start.y + (end.y - start.y) * t)
        c = distance_to_edge(p, poly)
        min_clearance = min(min_clearance, c)
        if c < threshold:
            collisions.append(p)

    bounds = LabelBounds(
        min=Point(min(start.x, end.x) - text_height, min(start.y, end.y) - text_height),
        max=Point(max(start.x, end.x) + text_height, max(start.y, end.y) + text_height),
        center=visual_center,
        radius=text_width,
    )
    return LabelPlacement(
        center=visual_center,
        angle=angle,
        score=0.0,
        width=text_width,
        height=text_height,
        clearance=clearance,
        path=format_path([("M", [start]), ("L", [end])]),
        bounds=bounds,
        collision_points=collisions,
        min_clearance=min_clearance,
        is_fallback=True,
    )


def compute_placement(
    polygon: Polygon | PreparedPolygon,
    label: str,
    font_size: float = DEFAULT_FONT_SIZE,
    curve_tension: float = DEFAULT_CURVE_TENSION,
    existing_labels: Sequence[LabelBounds] = (),
    *,
    rng: np.random.Generator | None = None,
    seed: int | None = SEED,
    avoid_existing: bool = False,
    text_size: tuple[float, float] | None = None,
    overlap_weight: float = EXISTING_LABEL_OVERLAP_WEIGHT,
    max_overlap: float = EXISTING_LABEL_MAX_OVERLAP,
) -> LabelingResult:
    """
    Place `label` along the axis of `polygon` (>= 3 vertices, simple; not checked).

    `existing_labels` is only consulted when avoid_existing=True: candidates
    overlapping them are penalized, or rejected above `max_overlap`.
    `rng` / `seed` control the visual center's random refinement.
    `text_size` overrides the fixed-pitch (width, height) footprint.
    """
    poly = prepare_polygon(polygon)
    bounds = polygon_bounds(poly)
    text_width, text_height = text_size or text_footprint(label, font_size)
    warnings: list[str] = []

    center, center_clearance = find_visual_center(poly, rng=rng, seed=seed)

    spine, origin = master_spine(center, poly)
    if len(spine) < 2:
        warnings.append(error_codes.NO_MASTER_SPINE)
    seeds = rank_seeds(sample_seeds(spine, origin, text_width), poly)
    logger.debug("Master spine: %d points, %d seeds", len(spine), len(seeds))

    occupied = occupied_geometry(existing_labels) if avoid_existing else None

    candidates: list[LabelPlacement] = []
    for cand in generate_candidate_spines(poly, seeds, text_width, text_height):
        terms = score_terms(cand.spine, cand.center, cand.min_clearance, text_height, center)
        score = score_candidate(terms)
        if occupied is not None:
            penalty = overlap_penalty(cand.bounds, occupied, weight=overlap_weight, max_overlap=max_overlap)
            if penalty is None:
                continue
            terms["overlap_penalty"] = penalty
            score -= penalty
        candidates.append(_to_placement(cand, score, terms, text_width, text_height, curve_tension))

    candidates.sort(key=lambda c: c.score, reverse=True)

    if candidates:
        placed = candidates[0]
        logger.debug("Placed %r at (%.2f, %.2f), score %.3f of %d candidates",
                      label, placed.center.x, placed.center.y, placed.score, len(candidates))
    else:
        placed = straight_fallback(poly, center, center_clearance, text_width, text_height)
        warnings.append(error_codes.NO_FEASIBLE_CANDIDATE)
        if placed.collision_points:
            warnings.append(error_codes.FALLBACK_COLLISIONS)
        logger.info("No admissible candidate for %r; straight fallback at visual center", label)

    return LabelingResult(
        placed=placed,
        candidates=candidates,
        centroid=center,
        bounds=bounds,
        warnings=warnings,
    )
