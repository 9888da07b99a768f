"""
Render the US transmission grid to a static SVG.

    render-grid-svg [--color=#1f7a4d] [--out=grid.svg] [--log-file=render.log]

Downloads the FeatureServer layer, projects it with Albers USA and writes a
1600x900 SVG. `--color` forces a single stroke color; `--out` changes the
output file. GRID_RENDER_TIMEOUT overrides the per-request timeout (seconds).
"""

from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass
from pathlib import Path

import click

from grid_render.fetch import DEFAULT_TIMEOUT, FetchError, fetch_all_transmission_lines
from grid_render.logging_config import setup_logging
from grid_render.svg import render_svg, write_svg

logger = logging.getLogger(__name__)

DEFAULT_OUT = "static-grid.svg"
DEFAULT_OUT_MONO = "static-grid-mono.svg"
ENV_TIMEOUT = "GRID_RENDER_TIMEOUT"
HEX_COLOR = re.compile(r"#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6}|[0-9a-fA-F]{8})")


@dataclass(frozen=True)
class RenderSettings:
    mono_color: str | None
    output: Path
    timeout: float


def _env_timeout() -> float:
    raw = os.environ.get(ENV_TIMEOUT, "").strip()
    if not raw:
        return DEFAULT_TIMEOUT
    try:
        value = float(raw)
    except ValueError:
        logger.warning("Ignoring %s=%r (not a number)", ENV_TIMEOUT, raw)
        return DEFAULT_TIMEOUT
    return value if value > 0 else DEFAULT_TIMEOUT


def resolve_settings(color: str | None, out: str | None) -> RenderSettings:
    mono_color = color or None
    output = out or (DEFAULT_OUT_MONO if mono_color else DEFAULT_OUT)
    return RenderSettings(mono_color=mono_color, output=Path(output), timeout=_env_timeout())


def render(settings: RenderSettings, opener=None) -> int:
    kwargs = {"timeout": settings.timeout}
    if opener is not None:
        kwargs["opener"] = opener
    collection = fetch_all_transmission_lines(**kwargs)
    count = len(collection["features"])
    logger.info("Fetched %d transmission segments", count)

    write_svg(settings.output, render_svg(collection, mono_color=settings.mono_color))
    logger.info("Wrote %s", settings.output)
    return count


def _check_color(ctx: click.Context, param: click.Parameter, value: str | None) -> str | None:
    if value is None or HEX_COLOR.fullmatch(value):
        return value
    raise click.BadParameter(f"{value!r} is not a hex color like #1f7a4d")


@click.command()
@click.option("--color", default=None, callback=_check_color, help="Force a single stroke color, e.g. #1f7a4d.")
@click.option("--out", default=None, help="Output file name.")
@click.option(
    "--log-file",
    default=None,
    type=click.Path(dir_okay=False, path_type=Path),
    help="Also append log output to this file.",
)
@click.option("--verbose", "-v", is_flag=True, help="Log every fetched page.")
def main(color: str | None, out: str | None, log_file: Path | None, verbose: bool) -> None:
    setup_logging(verbose=verbose, log_file=log_file)
    settings = resolve_settings(color, out)
    try:
        render(settings)
    except FetchError as exc:
        logger.error("%s", exc)
        raise SystemExit(1) from exc


if __name__ == "__main__":
    main()
