# curvelabel/core/layout.py
"""
Multi-river label layout with collision avoidance.
Orders labels by width (longer first) and feeds the bounds of every placed
label into the placement of the following ones as existing labels.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from curvelabel.core.config import DEFAULT_CURVE_TENSION, DEFAULT_FONT_SIZE, SEED
from curvelabel.core.geometry import label_bounds_box
from curvelabel.core.placement import compute_placement
from curvelabel.core.text_metrics import text_footprint
from curvelabel.core.types import LabelBounds, LabelingResult, Polygon


@dataclass(frozen=True)
class RiverLabel:
    """One river outline and the text to place on it."""
    polygon: Polygon
    label: str


@dataclass
class LayoutSummary:
    """Summary of a multi-river layout run. `results` follows the input order."""
    success_count: int
    n_labels: int
    collisions_detected: int
    results: list[LabelingResult]


def _order_by_width(rivers: Sequence[RiverLabel], font_size: float) -> list[int]:
    """Indices of rivers, widest label first; tie-break by text."""
    def key(i: int) -> tuple[float, str]:
        w, _ = text_footprint(rivers[i].label, font_size)
        return (-w, rivers[i].label)
    return sorted(range(len(rivers)), key=key)


def _overlaps(bounds: LabelBounds, others: Sequence[LabelBounds]) -> bool:
    rect = label_bounds_box(bounds)
    return any(rect.intersection(label_bounds_box(o)).area > 0 for o in others)


def run_multi_label_layout(
    rivers: Sequence[RiverLabel],
    font_size: float = DEFAULT_FONT_SIZE,
    curve_tension: float = DEFAULT_CURVE_TENSION,
    avoid_existing: bool = True,
    seed: int | None = SEED,
    existing_labels: Sequence[LabelBounds] = (),
) -> LayoutSummary:
    """
    Place one label per river. Fallback placements are not added to the
    occupied set and do not count as successes.
    """
    if not rivers:
        return LayoutSummary(success_count=0, n_labels=0, collisions_detected=0, results=[])

    placed_bounds: list[LabelBounds] = list(existing_labels)
    results: dict[int, LabelingResult] = {}
    collisions_detected = 0

    for i in _order_by_width(rivers, font_size):
        river = rivers[i]
        result = compute_placement(
            river.polygon,
            river.label,
            font_size,
            curve_tension,
            placed_bounds,
            seed=seed,
            avoid_existing=avoid_existing,
        )
        results[i] = result
        if result.placed is not None and not result.placed.is_fallback:
            if _overlaps(result.placed.bounds, placed_bounds):
                collisions_detected += 1
            placed_bounds.append(result.placed.bounds)

    ordered = [results[i] for i in range(len(rivers))]
    success_count = sum(1 for r in ordered if r.placed is not None and not r.placed.is_fallback)
    return LayoutSummary(
        success_count=success_count,
        n_labels=len(rivers),
        collisions_detected=collisions_detected,
        results=ordered,
    )
