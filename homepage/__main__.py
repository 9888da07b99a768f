"""
Write a PNG preview of the blackout starfield.

    python -m homepage [--width=1920] [--height=1080] [--seed=7] [--out=starfield-preview.png]

Star count follows the same viewport density rule the live page uses, so the
preview shows what a visitor at that size gets.
"""

from __future__ import annotations

import logging
import random
from pathlib import Path

import click

from homepage.config import load_config
from homepage.stars import create_star, render_starfield, star_count, write_png

logger = logging.getLogger("homepage")

DEFAULT_OUT = "starfield-preview.png"


@click.command()
@click.option("--width", default=1920, show_default=True, type=click.IntRange(min=1), help="Viewport width in px.")
@click.option("--height", default=1080, show_default=True, type=click.IntRange(min=1), help="Viewport height in px.")
@click.option("--seed", default=None, type=int, help="Fix the RNG for a reproducible field.")
@click.option("--out", default=DEFAULT_OUT, show_default=True, type=click.Path(dir_okay=False, path_type=Path))
def main(width: int, height: int, seed: int | None, out: Path) -> None:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    config = load_config()
    rng = random.Random(seed)
    count = star_count(width, height, config.stars)
    stars = [create_star(rng) for _ in range(count)]

    write_png(out, render_starfield(stars, width, height))
    logger.info("Wrote %d stars to %s", count, out)


if __name__ == "__main__":
    main()
