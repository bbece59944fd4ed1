# tests/test_layout_collisions.py
"""
Multi-river layout: labels placed in width order, earlier labels passed to
later placements as existing labels; results come back in input order.
"""

from __future__ import annotations

from curvelabel.core.config import EXISTING_LABEL_MAX_OVERLAP
from curvelabel.core.geometry import label_bounds_box
from curvelabel.core.layout import RiverLabel, run_multi_label_layout


def test_two_separate_rivers_both_placed() -> None:
    rivers = [
        RiverLabel(polygon=[(0, 0), (300, 0), (300, 60), (0, 60)], label="West"),
        RiverLabel(polygon=[(0, 200), (300, 200), (300, 260), (0, 260)], label="East Branch"),
    ]
    layout = run_multi_label_layout(rivers, font_size=10.0, seed=42)
    assert layout.n_labels == 2
    assert layout.success_count == 2
    assert layout.collisions_detected == 0
    # input order preserved even though the longer label is placed first
    assert layout.results[0].placed.center.y < 100
    assert layout.results[1].placed.center.y > 100


def test_two_labels_on_same_river_avoid_each_other() -> None:
    river = [(0, 0), (400, 0), (400, 60), (0, 60)]
    rivers = [RiverLabel(polygon=river, label="Alpha"), RiverLabel(polygon=river, label="Beta")]
    layout = run_multi_label_layout(rivers, font_size=10.0, seed=42)
    assert layout.n_labels == 2
    assert layout.success_count == 2
    first, second = (r.placed for r in layout.results)
    assert not first.is_fallback and not second.is_fallback
    overlap = label_bounds_box(first.bounds).intersection(label_bounds_box(second.bounds)).area
    assert overlap <= EXISTING_LABEL_MAX_OVERLAP


def test_empty_layout() -> None:
    layout = run_multi_label_layout([])
    assert layout.n_labels == 0
    assert layout.success_count == 0
    assert layout.results == []
