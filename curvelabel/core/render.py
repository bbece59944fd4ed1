# curvelabel/core/render.py
"""
Matplotlib PNG rendering for reports: debug.png with the river, every
candidate path, the placed path, the visual center and collision points.
The y axis is inverted so the image matches the SVG export.
"""

from __future__ import annotations

import warnings
from pathlib import Path
from typing import Sequence

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
import numpy as np
from matplotlib.patches import PathPatch
from matplotlib.path import Path as MplPath

from curvelabel.core.config import RENDER_HEIGHT_PX, RENDER_WIDTH_PX
from curvelabel.core.curve_fit import parse_path
from curvelabel.core.geometry import polygon_bounds
from curvelabel.core.types import LabelingResult

_CODES = {"M": [MplPath.MOVETO], "L": [MplPath.LINETO], "C": [MplPath.CURVE4] * 3}


def label_path_to_mpl(d: str) -> MplPath | None:
    """Matplotlib Path for SVG path data made of M/L/C commands."""
    vertices: list[tuple[float, float]] = []
    codes: list[int] = []
    for op, pts in parse_path(d):
        vertices.extend(pts)
        codes.extend(_CODES[op])
    if not vertices:
        return None
    return MplPath(np.asarray(vertices, dtype=np.float64), codes)


def set_axes_to_polygon(ax: plt.Axes, polygon: Sequence[tuple[float, float]], pad_frac: float = 0.05) -> None:
    """Set xlim/ylim from polygon bounds with margin; equal aspect; y down; hide axes."""
    b = polygon_bounds(polygon)
    dx = max(1.0, (b.max.x - b.min.x) * pad_frac)
    dy = max(1.0, (b.max.y - b.min.y) * pad_frac)
    ax.set_xlim(b.min.x - dx, b.max.x + dx)
    ax.set_ylim(b.max.y + dy, b.min.y - dy)
    ax.set_aspect("equal", adjustable="box")
    ax.axis("off")


def _draw_polygon(ax: plt.Axes, polygon: Sequence[tuple[float, float]], fill_alpha: float = 1.0) -> None:
    xy = np.asarray(polygon, dtype=np.float64)
    ax.fill(xy[:, 0], xy[:, 1], facecolor="lightblue", edgecolor="navy", linewidth=1, alpha=fill_alpha)


def render_debug(
    polygon: Sequence[tuple[float, float]],
    result: LabelingResult,
    output_path: str | Path,
    width_px: int = RENDER_WIDTH_PX,
    height_px: int = RENDER_HEIGHT_PX,
    scale: int = 1,
) -> None:
    """Render debug overlay. scale multiplies output resolution (1x, 2x, 4x)."""
    w, h = width_px * scale, height_px * scale
    fig = plt.figure(figsize=(w / 100.0, h / 100.0), dpi=100, constrained_layout=False)
    # bottom 8% reserved for the legend
    ax = fig.add_axes([0.05, 0.08, 0.9, 0.88])
    ax.axis("off")
    _draw_polygon(ax, polygon, fill_alpha=0.5)

    for i, cand in enumerate(result.candidates):
        mpl_path = label_path_to_mpl(cand.path)
        if mpl_path is not None:
            ax.add_patch(PathPatch(
                mpl_path, facecolor="none", edgecolor="gray", linewidth=0.8, alpha=0.5,
                label="candidates" if i == 0 else None,
            ))

    placed = result.placed
    if placed is not None:
        mpl_path = label_path_to_mpl(placed.path)
        if mpl_path is not None:
            ax.add_patch(PathPatch(mpl_path, facecolor="none", edgecolor="crimson", linewidth=2.5, label="placed"))
        if placed.collision_points:
            xy = np.asarray(placed.collision_points, dtype=np.float64)
            ax.scatter(xy[:, 0], xy[:, 1], s=20, color="red", alpha=0.6, label="collision points")

    ax.scatter([result.centroid.x], [result.centroid.y], s=30, marker="x", color="black", label="visual center")

    set_axes_to_polygon(ax, polygon, pad_frac=0.05)
    # legend goes below the axes, inside the reserved margin
    leg = ax.legend(loc="upper center", bbox_to_anchor=(0.5, -0.08), ncol=4, fontsize=8)
    with warnings.catch_warnings():
        warnings.filterwarnings("ignore", message=".*constrained_layout.*", category=UserWarning)
        fig.savefig(output_path, dpi=100, facecolor="white", bbox_inches="tight", bbox_extra_artists=[leg])
    plt.close(fig)
