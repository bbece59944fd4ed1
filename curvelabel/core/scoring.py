# curvelabel/core/scoring.py
"""
Candidate scoring: clearance, width bonus, curvature penalty and centering,
combined as a weighted sum. Higher is better; scores are only comparable
within one placement call. Optional overlap penalty against existing labels.
"""

from __future__ import annotations

import math

from curvelabel.core.config import (
    CENTERING_FALLOFF,
    CLEARANCE_SCORE_CAP,
    CURVATURE_DECAY,
    CURVATURE_THRESHOLD_DEG,
    EXISTING_LABEL_MAX_OVERLAP,
    EXISTING_LABEL_OVERLAP_WEIGHT,
    SCORE_WEIGHT_CENTERING,
    SCORE_WEIGHT_CLEARANCE,
    SCORE_WEIGHT_CURVATURE,
    SCORE_WEIGHT_WIDTH_BONUS,
    WIDTH_BONUS_THRESHOLD_RATIO,
)
from curvelabel.core.geometry import label_bounds_box
from curvelabel.core.types import LabelBounds, Point


def clearance_score(min_clearance: float, text_height: float) -> float:
    """min_clearance / text_height, saturating at 2."""
    return min(CLEARANCE_SCORE_CAP, min_clearance / text_height)


def width_bonus(min_clearance: float, text_height: float) -> float:
    """Nonlinear reward for unusually wide sections; 0 up to 1.5 text heights."""
    if min_clearance <= text_height * WIDTH_BONUS_THRESHOLD_RATIO:
        return 0.0
    return math.sqrt((min_clearance - text_height) / text_height)


def max_turn_angle(points: list[Point]) -> float:
    """Largest angle (radians) between consecutive segments; degenerate segments skipped."""
    best = 0.0
    for p0, p1, p2 in zip(points, points[1:], points[2:]):
        v1x, v1y = p1.x - p0.x, p1.y - p0.y
        v2x, v2y = p2.x - p1.x, p2.y - p1.y
        len1 = math.hypot(v1x, v1y)
        len2 = math.hypot(v2x, v2y)
        if len1 <= 1e-6 or len2 <= 1e-6:
            continue
        dot = (v1x * v2x + v1y * v2y) / (len1 * len2)
        best = max(best, math.acos(max(-1.0, min(1.0, dot))))
    return best


def curvature_penalty(max_turn: float) -> float:
    """1 up to 45 degrees, then exponential decay."""
    threshold = math.radians(CURVATURE_THRESHOLD_DEG)
    if max_turn <= threshold:
        return 1.0
    return math.exp(-CURVATURE_DECAY * (max_turn - threshold))


def centering_score(center: Point, visual_center: Point) -> float:
    """Mild preference for candidates near the visual center."""
    d = math.hypot(center.x - visual_center.x, center.y - visual_center.y)
    return 1.0 / (1.0 + CENTERING_FALLOFF * d)


def score_terms(
    spine: list[Point],
    center: Point,
    min_clearance: float,
    text_height: float,
    visual_center: Point,
) -> dict[str, float]:
    """Individual (unweighted) score terms for a candidate."""
    turn = max_turn_angle(spine)
    return {
        "clearance": clearance_score(min_clearance, text_height),
        "width_bonus": width_bonus(min_clearance, text_height),
        "curvature": curvature_penalty(turn),
        "centering": centering_score(center, visual_center),
        "max_turn_deg": math.degrees(turn),
    }


def score_candidate(terms: dict[str, float]) -> float:
    """10 * clearance + 8 * width bonus + 5 * curvature + 1 * centering."""
    return (
        SCORE_WEIGHT_CLEARANCE * terms["clearance"]
        + SCORE_WEIGHT_WIDTH_BONUS * terms["width_bonus"]
        + SCORE_WEIGHT_CURVATURE * terms["curvature"]
        + SCORE_WEIGHT_CENTERING * terms["centering"]
    )


def overlap_penalty(
    bounds: LabelBounds,
    occupied,
    weight: float = EXISTING_LABEL_OVERLAP_WEIGHT,
    max_overlap: float = EXISTING_LABEL_MAX_OVERLAP,
) -> float | None:
    """
    Penalty for overlap between a candidate's bounds and occupied geometry
    (shapely). None means the overlap is too large and the candidate is rejected.
    """
    if occupied is None or occupied.is_empty:
        return 0.0
    rect = label_bounds_box(bounds)
    inter = rect.intersection(occupied)
    if inter.is_empty or inter.area <= 0:
        return 0.0
    if inter.area > max_overlap:
        return None
    return weight * (inter.area / max(rect.area, 1e-6))
