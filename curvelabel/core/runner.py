# curvelabel/core/runner.py
"""
CLI entrypoint: load river WKT, compute curved label placement, write
labeling.json, run_metadata.json, label.svg and debug.png.
Batch mode: one report subdirectory per .wkt file in --batch-dir.
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

from curvelabel.core import error_codes
from curvelabel.core.config import (
    DEFAULT_CURVE_TENSION,
    DEFAULT_FONT_SIZE,
    LOG_LEVEL,
    REPORTS_DIR,
    SEED,
)
from curvelabel.core.io import load_river_polygon
from curvelabel.core.placement import compute_placement
from curvelabel.core.render import render_debug
from curvelabel.core.render_svg import export_label_svg
from curvelabel.core.reporting import (
    ensure_report_dir,
    write_result_json,
    write_run_metadata_json,
)
from curvelabel.core.text_metrics import measure_text

logger = logging.getLogger(__name__)


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Curved river label placement.")
    p.add_argument("--geometry", type=str, default=None, help="River WKT path (repo-relative)")
    p.add_argument("--text", type=str, default=None, help="Label text (default: file name in upper case)")
    p.add_argument("--font-size", type=float, default=DEFAULT_FONT_SIZE, dest="font_size", help="Font size")
    p.add_argument("--tension", type=float, default=DEFAULT_CURVE_TENSION, help="Curve tension in [0, 1]")
    p.add_argument("--seed", type=int, default=SEED, help="Random seed for the visual center refinement")
    p.add_argument("--font-family", type=str, default=None, dest="font_family",
                   help="Measure the label with this font (Pillow) instead of the fixed-pitch estimate")
    p.add_argument("--run-name", type=str, default="run", dest="run_name", help="Reports subdir name")
    p.add_argument("--output-dir", type=str, default=REPORTS_DIR, dest="output_dir", help="Output directory (repo-relative)")
    p.add_argument("--repo-root", type=str, default=None, dest="repo_root", help="Repo root (default: cwd)")
    p.add_argument("--batch-dir", type=str, default=None, dest="batch_dir", help="Batch mode: directory of .wkt files")
    args = p.parse_args(argv)
    if not args.geometry and not args.batch_dir:
        p.error("one of --geometry or --batch-dir is required")
    if not 0.0 <= args.tension <= 1.0:
        p.error("--tension must be within [0, 1]")
    return args


def run_one(
    geometry: Path,
    label: str,
    report_dir: Path,
    run_name: str,
    font_size: float,
    tension: float,
    seed: int | None,
    font_family: str | None = None,
) -> list[Path]:
    """Place one label and write its report files. Returns the written paths."""
    polygon = load_river_polygon(geometry)
    text_size = measure_text(label, font_family, font_size) if font_family else None
    result = compute_placement(polygon, label, font_size, tension, seed=seed, text_size=text_size)
    for key in result.warnings:
        logger.warning("%s: %s", geometry.name, error_codes.user_message(key))

    written = [
        write_result_json(report_dir, result),
        write_run_metadata_json(report_dir, run_name, str(geometry), label, font_size, tension, seed),
    ]
    if result.placed is not None:
        kwargs = {"font_family": font_family} if font_family else {}
        written.append(export_label_svg(polygon, label, font_size, result.placed, report_dir / "label.svg", **kwargs))
    debug_path = report_dir / "debug.png"
    render_debug(polygon, result, debug_path)
    written.append(debug_path)
    return written


def main(argv: list[str] | None = None) -> None:
    logging.basicConfig(level=getattr(logging, LOG_LEVEL, logging.INFO))
    args = _parse_args(argv)
    repo_root = Path(args.repo_root).resolve() if args.repo_root else Path.cwd().resolve()

    if args.batch_dir:
        batch_dir = Path(args.batch_dir)
        if not batch_dir.is_absolute():
            batch_dir = repo_root / batch_dir
        files = sorted(batch_dir.glob("*.wkt"))
        if not files:
            raise FileNotFoundError(f"No .wkt files in {batch_dir}")
        for path in files:
            report_dir = ensure_report_dir(repo_root, str(Path(args.run_name) / path.stem), output_dir=args.output_dir)
            label = args.text or path.stem.upper()
            run_one(path, label, report_dir, args.run_name, args.font_size, args.tension, args.seed, args.font_family)
            print(report_dir)
        return

    geom_path = Path(args.geometry)
    if not geom_path.is_absolute():
        geom_path = repo_root / geom_path
    label = args.text or geom_path.stem.upper()
    report_dir = ensure_report_dir(repo_root, args.run_name, output_dir=args.output_dir)
    for p in run_one(geom_path, label, report_dir, args.run_name, args.font_size, args.tension, args.seed,
                     args.font_family):
        print(p)


if __name__ == "__main__":
    main()
