"""SVG document assembly for the transmission grid render."""

from __future__ import annotations

import html
from pathlib import Path

from grid_render.projection import FittedProjection, fit_extent, path_data
from grid_render.voltage import DEFAULT_RANK, stroke_color, stroke_width

WIDTH = 1600
HEIGHT = 900
PADDING = 48


def _number(value: float) -> str:
    # keep integral widths short ("1" not "1.0") like the browser would print them
    return repr(value)[:-2] if float(value).is_integer() else repr(value)


def feature_path_markup(
    projection: FittedProjection,
    feature: dict,
    mono_color: str | None = None,
) -> str:
    d = path_data(projection, feature.get("geometry"))
    if not d:
        return ""
    rank = (feature.get("properties") or {}).get("voltage_rank", DEFAULT_RANK)
    stroke = html.escape(stroke_color(rank, mono_color), quote=True)
    return (
        f'<path d="{d}" stroke="{stroke}" stroke-width="{_number(stroke_width(rank))}" '
        'stroke-linecap="round" stroke-linejoin="round" fill="none" opacity="0.9" />'
    )


def render_svg(
    collection: dict,
    mono_color: str | None = None,
    width: int = WIDTH,
    height: int = HEIGHT,
    padding: int = PADDING,
) -> str:
    features = collection.get("features") or []
    projection = fit_extent(features, ((padding, padding), (width - padding, height - padding)))
    markup = (feature_path_markup(projection, feature, mono_color) for feature in features)
    paths = "\n".join(markup)
    return (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        f'<svg width="{width}" height="{height}" viewBox="0 0 {width} {height}" '
        'fill="none" xmlns="http://www.w3.org/2000/svg">\n'
        f"  {paths}\n"
        "</svg>"
    )


def write_svg(path: Path, svg: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(svg, encoding="utf-8")
