# curvelabel/core/text_metrics.py
"""
Label footprint. Placement uses a fixed-pitch estimate; measure_text gives
Pillow font metrics for callers that want the real rendered size.
"""

from __future__ import annotations

import warnings

from curvelabel.core.config import CHAR_WIDTH_RATIO, DEFAULT_FONT_FAMILY, LINE_HEIGHT_RATIO

_missing_fonts: set[str] = set()


def text_footprint(label: str, font_size: float) -> tuple[float, float]:
    """(width, height) = (chars * size * 0.7, size * 1.2)."""
    return len(label) * font_size * CHAR_WIDTH_RATIO, font_size * LINE_HEIGHT_RATIO


def _font_files(font_family: str) -> list[str]:
    compact = font_family.replace(" ", "")
    return [f"{font_family}.ttf", f"{compact}.ttf", f"{DEFAULT_FONT_FAMILY.replace(' ', '')}.ttf"]


def _load_font(font_family: str, font_size: float):
    """Pillow FreeType font for the family; Pillow's default font (warned once per family) otherwise."""
    from PIL import ImageFont

    size = max(1, round(font_size))
    for name in _font_files(font_family):
        try:
            return ImageFont.truetype(name, size=size)
        except OSError:
            continue
    if font_family not in _missing_fonts:
        _missing_fonts.add(font_family)
        warnings.warn(f"No font file for {font_family!r}; measuring with Pillow's default font.", UserWarning)
    return ImageFont.load_default()


def measure_text(label: str, font_family: str, font_size: float) -> tuple[float, float]:
    """
    (width, height) of the label's ink box in geometry units, one pixel at
    `font_size` being one unit. Scaled when Pillow substituted another size.
    """
    from PIL import Image, ImageDraw

    font = _load_font(font_family, font_size)
    left, top, right, bottom = ImageDraw.Draw(Image.new("L", (1, 1))).textbbox((0, 0), label, font=font)
    scale = font_size / max(1.0, float(getattr(font, "size", font_size)))
    return (right - left) * scale, (bottom - top) * scale
