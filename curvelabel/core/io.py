# curvelabel/core/io.py
"""
River outline input: WKT file -> shapely geometry -> engine polygon.
Accepts Polygon, MultiPolygon and GeometryCollection; self-intersecting
outlines are repaired with buffer(0).
"""

from __future__ import annotations

import re
from pathlib import Path

from shapely import wkt
from shapely.geometry import GeometryCollection, MultiPolygon, Polygon
from shapely.geometry.base import BaseGeometry

from curvelabel.core.types import Point

_GEOMETRY_HEAD = re.compile(r"\s*(MULTIPOLYGON|POLYGON|GEOMETRYCOLLECTION)\b", re.IGNORECASE)


def load_wkt(path: str | Path, repo_root: Path | None = None) -> str:
    """Text of a WKT file; relative paths resolve against repo_root when given."""
    p = Path(path)
    if repo_root is not None and not p.is_absolute():
        p = repo_root / p
    p = p.resolve()
    if not p.is_file():
        raise FileNotFoundError(f"River geometry not found: {p}")
    return p.read_text(encoding="utf-8").strip()


def _strip_trailing_text(text: str) -> str:
    """Cut after the parenthesis closing the first geometry (shapely rejects trailing text)."""
    m = _GEOMETRY_HEAD.match(text)
    if m is None:
        return text.strip()
    depth = 0
    for i in range(m.end(), len(text)):
        if text[i] == "(":
            depth += 1
        elif text[i] == ")":
            depth -= 1
            if depth == 0:
                return text[: i + 1].strip()
    return text.strip()


def parse_wkt(text: str) -> BaseGeometry:
    """First geometry in a WKT string. Validity is not checked here."""
    return wkt.loads(_strip_trailing_text(text))


def _polygon_parts(geom: BaseGeometry) -> list[Polygon]:
    if geom.is_empty:
        return []
    if isinstance(geom, Polygon):
        return [geom]
    if isinstance(geom, (MultiPolygon, GeometryCollection)):
        return [part for g in geom.geoms for part in _polygon_parts(g)]
    return []


def validate_geometry(geom: BaseGeometry | None) -> Polygon | MultiPolygon:
    """
    Polygon or MultiPolygon with every part valid. Non-polygon members of a
    collection are dropped. Raises ValueError when nothing usable remains.
    """
    if geom is None or geom.is_empty:
        raise ValueError("River geometry is empty")
    parts = _polygon_parts(geom)
    if not parts:
        raise ValueError(f"River geometry has no polygon parts ({geom.geom_type})")
    repaired = [q for p in parts for q in _polygon_parts(p if p.is_valid else p.buffer(0))]
    if not repaired:
        raise ValueError("River geometry is empty after repair")
    return repaired[0] if len(repaired) == 1 else MultiPolygon(repaired)


def river_polygon_coords(geom: BaseGeometry) -> list[Point]:
    """
    Exterior ring of the largest polygon part, without the repeated closing
    vertex. Holes (islands) are ignored.
    """
    parts = _polygon_parts(geom)
    if not parts:
        raise ValueError(f"River geometry has no polygon parts ({geom.geom_type})")
    ring = max(parts, key=lambda p: p.area).exterior.coords
    coords = [Point(float(c[0]), float(c[1])) for c in ring]
    if len(coords) > 1 and coords[0] == coords[-1]:
        coords.pop()
    if len(coords) < 3:
        raise ValueError("River polygon needs at least 3 vertices")
    return coords


def load_river_polygon(path: str | Path, repo_root: Path | None = None) -> list[Point]:
    """WKT file -> engine polygon. FileNotFoundError / ValueError on unusable input."""
    return river_polygon_coords(validate_geometry(parse_wkt(load_wkt(path, repo_root))))
