# curvelabel/core/render_svg.py
"""
Export a placed label as self-contained SVG: river polygon, label path,
text-on-path with halo, collision markers. Polygon coordinates are used as
SVG user space directly (y grows downward), the space the path is built in.
"""

from __future__ import annotations

import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Sequence

from curvelabel.core.config import DEFAULT_FONT_FAMILY
from curvelabel.core.curve_fit import format_path
from curvelabel.core.geometry import polygon_bounds
from curvelabel.core.types import LabelPlacement, Point

SVG_NS = "http://www.w3.org/2000/svg"
XLINK_NS = "http://www.w3.org/1999/xlink"


def _poly_to_svg_d(polygon: Sequence[tuple[float, float]]) -> str:
    """Closed polygon as SVG path d (M L ... Z)."""
    if len(polygon) < 2:
        return ""
    pts = [Point(float(x), float(y)) for x, y in polygon]
    return format_path([("M", [pts[0]])] + [("L", [p]) for p in pts[1:]]) + " Z"


def build_label_svg(
    polygon: Sequence[tuple[float, float]],
    label: str,
    font_size: float,
    placement: LabelPlacement,
    font_family: str = DEFAULT_FONT_FAMILY,
    margin: float = 20.0,
) -> ET.Element:
    """SVG element tree for one river and its placed label."""
    b = polygon_bounds(polygon)
    min_x, min_y = b.min.x - margin, b.min.y - margin
    vw = max(1.0, b.max.x - b.min.x + 2 * margin)
    vh = max(1.0, b.max.y - b.min.y + 2 * margin)

    # Plain tag names with xmlns set once; prefixed "xlink:href" attribute
    root = ET.Element(
        "svg",
        {
            "xmlns": SVG_NS,
            "xmlns:xlink": XLINK_NS,
            "width": "800",
            "height": "600",
            "viewBox": f"{min_x:.2f} {min_y:.2f} {vw:.2f} {vh:.2f}",
            "preserveAspectRatio": "xMidYMid meet",
        },
    )
    ET.SubElement(
        root,
        "path",
        {"d": _poly_to_svg_d(polygon), "fill": "lightblue", "stroke": "navy", "stroke-width": "1"},
    )

    defs = ET.SubElement(root, "defs")
    ET.SubElement(defs, "path", {"id": "labelpath", "d": placement.path})

    markers = ET.SubElement(root, "g", {"id": "collisions", "fill": "red", "fill-opacity": "0.35"})
    for p in placement.collision_points:
        ET.SubElement(markers, "circle", {"cx": f"{p.x:.3f}", "cy": f"{p.y:.3f}", "r": f"{font_size * 0.5:.2f}"})

    g_text = ET.SubElement(root, "g", {"id": "label"})
    text = ET.SubElement(
        g_text,
        "text",
        {
            "font-family": font_family,
            "font-size": f"{font_size:.2f}",
            "fill": "black",
            "stroke": "white",
            "stroke-width": "2.25",
            "paint-order": "stroke",
            "stroke-linejoin": "round",
            "stroke-linecap": "round",
            "dominant-baseline": "middle",
        },
    )
    # SVG2 href and SVG1.1 xlink:href
    tpath = ET.SubElement(
        text,
        "textPath",
        {
            "href": "#labelpath",
            "xlink:href": "#labelpath",
            "startOffset": "50%",
            "text-anchor": "middle",
        },
    )
    tpath.text = label
    return root


def export_label_svg(
    polygon: Sequence[tuple[float, float]],
    label: str,
    font_size: float,
    placement: LabelPlacement,
    out_path: str | Path,
    font_family: str = DEFAULT_FONT_FAMILY,
) -> Path:
    """Write the SVG to out_path and return it."""
    root = build_label_svg(polygon, label, font_size, placement, font_family=font_family)
    out = Path(out_path)
    out_str = ET.tostring(root, encoding="unicode", method="xml")
    out.write_text('<?xml version="1.0" encoding="UTF-8"?>\n' + out_str, encoding="utf-8")
    return out
