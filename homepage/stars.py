"""
Blackout starfield.

Stars are plain particles with randomized size, position, hue and animation
timing. The field is rebuilt wholesale (clear + create) on every activation
and on viewport resize while active; nothing is updated incrementally.

`render_starfield` draws a particle set onto a transparent canvas for offline
previews of the blackout background.
"""

from __future__ import annotations

import colorsys
import math
import random
from dataclasses import dataclass, field
from pathlib import Path

from PIL import Image, ImageDraw, ImageFilter

from homepage.config import StarConfig
from homepage.page import Element

# Roughly one in seven stars is a "big" one; the rest stay pinpoint-sized.
BIG_STAR_CHANCE = 0.15
BIG_STAR_SIZE = (3.0, 6.0)
SMALL_STAR_SIZE = (1.0, 3.0)
# A quarter of the stars get a cool blue tint; the rest sit in the warm band.
BLUE_HUE_CHANCE = 0.25
BLUE_HUE = (200.0, 240.0)
WARM_HUE = (40.0, 80.0)

DRIFT_PX = (-20.0, 20.0)
DRIFT_DURATION_S = (8.0, 14.0)
DRIFT_DELAY_S = (0.0, 3.0)
FADE_DELAY_S = (0.0, 2.5)
TWINKLE_DELAY_S = (0.0, 3.5)


@dataclass(frozen=True)
class Star:
    size: float
    left: float  # percent of viewport width
    top: float   # percent of viewport height
    hue: float
    drift_x: float
    drift_y: float
    drift_duration: float
    drift_delay: float
    delay: float
    twinkle_delay: float


@dataclass(eq=False)
class Starfield:
    container: Element
    config: StarConfig
    rng: random.Random = field(default_factory=random.Random)
    stars: list[Star] = field(default_factory=list)

    @property
    def active(self) -> bool:
        return self.container.has_class("active")


def star_count(width: int, height: int, config: StarConfig) -> int:
    return max(config.min_count, math.floor((width * height) / config.density_divisor))


def create_star(rng: random.Random) -> Star:
    is_big = rng.random() < BIG_STAR_CHANCE
    size = rng.uniform(*BIG_STAR_SIZE) if is_big else rng.uniform(*SMALL_STAR_SIZE)
    hue = rng.uniform(*BLUE_HUE) if rng.random() < BLUE_HUE_CHANCE else rng.uniform(*WARM_HUE)
    return Star(
        size=size,
        left=rng.random() * 100.0,
        top=rng.random() * 100.0,
        hue=hue,
        drift_x=rng.uniform(*DRIFT_PX),
        drift_y=rng.uniform(*DRIFT_PX),
        drift_duration=rng.uniform(*DRIFT_DURATION_S),
        drift_delay=rng.uniform(*DRIFT_DELAY_S),
        delay=rng.uniform(*FADE_DELAY_S),
        twinkle_delay=rng.uniform(*TWINKLE_DELAY_S),
    )


def star_element(star: Star) -> Element:
    """
    Materialize a star as the `.star-wrap > .star` pair the stylesheet animates.
    """
    wrap = Element("span", classes={"star-wrap"})
    inner = Element("span", classes={"star"})
    wrap.set_vars(
        {
            "--size": f"{star.size:.2f}px",
            "--drift-x": f"{star.drift_x:.2f}px",
            "--drift-y": f"{star.drift_y:.2f}px",
            "--drift-dur": f"{star.drift_duration:.2f}s",
            "--drift-delay": f"{star.drift_delay:.2f}s",
        }
    )
    inner.set_vars(
        {
            "--delay": f"{star.delay:.2f}s",
            "--twinkle-delay": f"{star.twinkle_delay:.2f}s",
        }
    )
    hue = star.hue
    inner.style["background"] = (
        "radial-gradient(circle, "
        f"hsla({hue}, 100%, 95%, 1) 0%, "
        f"hsla({hue}, 100%, 90%, .85) 35%, "
        f"hsla({hue}, 100%, 70%, 0) 70%)"
    )
    wrap.style["left"] = f"{star.left}%"
    wrap.style["top"] = f"{star.top}%"
    wrap.append(inner)
    return wrap


def populate(starfield: Starfield, width: int, height: int) -> int:
    count = star_count(width, height, starfield.config)
    clear(starfield)
    for _ in range(count):
        star = create_star(starfield.rng)
        starfield.stars.append(star)
        starfield.container.append(star_element(star))
    return count


def clear(starfield: Starfield) -> None:
    starfield.stars.clear()
    starfield.container.clear_children()


def _star_rgb(hue: float, lightness: float) -> tuple[int, int, int]:
    r, g, b = colorsys.hls_to_rgb(hue / 360.0, lightness, 1.0)
    return int(r * 255), int(g * 255), int(b * 255)


def render_starfield(stars: list[Star], width: int, height: int) -> Image.Image:
    """
    Draw the particles with a soft glow on a transparent canvas.

    Drift and twinkle are animation-only and are not baked in.
    """
    canvas = Image.new("RGBA", (width, height), (0, 0, 0, 0))
    glow = Image.new("RGBA", (width, height), (0, 0, 0, 0))
    draw_canvas = ImageDraw.Draw(canvas)
    draw_glow = ImageDraw.Draw(glow)

    for star in stars:
        x = star.left / 100.0 * (width - 1)
        y = star.top / 100.0 * (height - 1)
        # core matches the gradient's bright stop, glow the 35% ring
        core_r = max(0.5, star.size * 0.35)
        glow_r = star.size * 0.7
        draw_glow.ellipse(
            (x - glow_r, y - glow_r, x + glow_r, y + glow_r),
            fill=(*_star_rgb(star.hue, 0.90), 110),
        )
        draw_canvas.ellipse(
            (x - core_r, y - core_r, x + core_r, y + core_r),
            fill=(*_star_rgb(star.hue, 0.95), 255),
        )

    glow = glow.filter(ImageFilter.GaussianBlur(radius=1.2))
    return Image.alpha_composite(glow, canvas)


def write_png(path: Path, image: Image.Image) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    image.save(path, format="PNG", optimize=True)
