# curvelabel/core/reporting.py
"""
Create reports/<run_name>/ and write labeling.json and run_metadata.json.
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path

from curvelabel.core import config
from curvelabel.core.types import LabelBounds, LabelingResult, LabelPlacement, Point

SCHEMA_VERSION = "1.0"


def _pt(p: Point) -> dict:
    return {"x": float(p.x), "y": float(p.y)}


def _bounds(b: LabelBounds) -> dict:
    return {"min": _pt(b.min), "max": _pt(b.max), "center": _pt(b.center), "radius": float(b.radius)}


def placement_to_dict(placement: LabelPlacement) -> dict:
    """JSON-ready structure for one placement."""
    return {
        "center": _pt(placement.center),
        "angle": placement.angle,
        "score": placement.score,
        "width": placement.width,
        "height": placement.height,
        "clearance": placement.clearance,
        "min_clearance": placement.min_clearance,
        "path": placement.path,
        "bounds": _bounds(placement.bounds),
        "collision_points": [_pt(p) for p in placement.collision_points],
        "features": dict(placement.features),
        "is_fallback": placement.is_fallback,
    }


def result_to_dict(result: LabelingResult, include_candidates: bool = True) -> dict:
    """Exact structure for labeling.json."""
    out = {
        "schema_version": SCHEMA_VERSION,
        "placed": placement_to_dict(result.placed) if result.placed is not None else None,
        "candidates": [placement_to_dict(c) for c in result.candidates],
        "centroid": _pt(result.centroid),
        "bounds": {"min": _pt(result.bounds.min), "max": _pt(result.bounds.max)},
        "warnings": list(result.warnings),
    }
    if not include_candidates:
        out.pop("candidates")
    return out


def run_metadata_dict(
    run_name: str,
    geometry_path: str,
    label_text: str,
    font_size: float,
    curve_tension: float,
    seed: int | None,
) -> dict:
    """Timestamp and config snapshot for run_metadata.json."""
    return {
        "run_name": run_name,
        "timestamp_utc": datetime.now(timezone.utc).isoformat(),
        "geometry_path": geometry_path,
        "label_text": label_text,
        "font_size": font_size,
        "curve_tension": curve_tension,
        "seed": seed,
        "config": {
            name: getattr(config, name)
            for name in dir(config)
            if name.isupper() and isinstance(getattr(config, name), (int, float, str))
        },
    }


def ensure_report_dir(
    repo_root: Path,
    run_name: str,
    output_dir: str | None = None,
) -> Path:
    """Create output_dir/<run_name>/ under repo_root; return path. Default output_dir from config."""
    base = output_dir if output_dir is not None else config.REPORTS_DIR
    out = (repo_root / base).resolve() / run_name
    out.mkdir(parents=True, exist_ok=True)
    return out


def write_result_json(report_dir: Path, result: LabelingResult) -> Path:
    """Write labeling.json to report_dir. Returns path to file."""
    path = report_dir / "labeling.json"
    path.write_text(json.dumps(result_to_dict(result), indent=2), encoding="utf-8")
    return path


def write_run_metadata_json(
    report_dir: Path,
    run_name: str,
    geometry_path: str,
    label_text: str,
    font_size: float,
    curve_tension: float,
    seed: int | None,
) -> Path:
    """Write run_metadata.json to report_dir."""
    path = report_dir / "run_metadata.json"
    data = run_metadata_dict(run_name, geometry_path, label_text, font_size, curve_tension, seed)
    path.write_text(json.dumps(data, indent=2), encoding="utf-8")
    return path
