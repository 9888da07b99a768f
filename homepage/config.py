"""
Site configuration for the homepage front end.

Defaults live here as a single edit point. Environment variables
(HOMEPAGE_LINE_DELAY_MS / HOMEPAGE_PAUSE_AFTER_MS / HOMEPAGE_IMAGE_*) override
them when needed.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)

# ----------------------------
# defaults intended for local override
# ----------------------------
DEFAULT_IMAGE_LIGHT = "images/static-grid-dark-green-4k.png"
DEFAULT_IMAGE_DARK = "images/static-grid-4k.png"
DEFAULT_IMAGE_BLACKOUT = "images/static-white-grid-4k.png"

DEFAULT_STAR_MIN_COUNT = 220
DEFAULT_STAR_DENSITY_DIVISOR = 4500

DEFAULT_LINE_DELAY_MS = 50     # between revealed lines
DEFAULT_PAUSE_AFTER_MS = 400   # before the text fades out
# Must match the opacity transition on `.map-shell.is-loaded` in the stylesheet.
DEFAULT_FADE_MS = 600
CURSOR_GLYPH = "█"
# ----------------------------

ENV_LINE_DELAY = "HOMEPAGE_LINE_DELAY_MS"
ENV_PAUSE_AFTER = "HOMEPAGE_PAUSE_AFTER_MS"
ENV_IMAGE_LIGHT = "HOMEPAGE_IMAGE_LIGHT"
ENV_IMAGE_DARK = "HOMEPAGE_IMAGE_DARK"
ENV_IMAGE_BLACKOUT = "HOMEPAGE_IMAGE_BLACKOUT"


@dataclass(frozen=True)
class ImageSet:
    # the three grid renders; the preloader loads them in this order
    light: str = DEFAULT_IMAGE_LIGHT
    dark: str = DEFAULT_IMAGE_DARK
    blackout: str = DEFAULT_IMAGE_BLACKOUT

    def paths(self) -> tuple[str, ...]:
        return (self.light, self.dark, self.blackout)


@dataclass(frozen=True)
class StarConfig:
    min_count: int = DEFAULT_STAR_MIN_COUNT
    density_divisor: int = DEFAULT_STAR_DENSITY_DIVISOR


@dataclass(frozen=True)
class TypewriterConfig:
    line_delay_ms: int = DEFAULT_LINE_DELAY_MS
    pause_after_ms: int = DEFAULT_PAUSE_AFTER_MS
    fade_ms: int = DEFAULT_FADE_MS
    cursor: str = CURSOR_GLYPH


@dataclass(frozen=True)
class SiteConfig:
    images: ImageSet = field(default_factory=ImageSet)
    stars: StarConfig = field(default_factory=StarConfig)
    typewriter: TypewriterConfig = field(default_factory=TypewriterConfig)


def _env_ms(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning("Ignoring %s=%r (not an integer)", name, raw)
        return default
    if value < 0:
        logger.warning("Ignoring %s=%r (negative delay)", name, raw)
        return default
    return value


def load_config() -> SiteConfig:
    # pull defaults plus env overrides into one SiteConfig object
    images = ImageSet(
        light=os.environ.get(ENV_IMAGE_LIGHT, "").strip() or DEFAULT_IMAGE_LIGHT,
        dark=os.environ.get(ENV_IMAGE_DARK, "").strip() or DEFAULT_IMAGE_DARK,
        blackout=os.environ.get(ENV_IMAGE_BLACKOUT, "").strip() or DEFAULT_IMAGE_BLACKOUT,
    )
    typewriter = TypewriterConfig(
        line_delay_ms=_env_ms(ENV_LINE_DELAY, DEFAULT_LINE_DELAY_MS),
        pause_after_ms=_env_ms(ENV_PAUSE_AFTER, DEFAULT_PAUSE_AFTER_MS),
    )
    return SiteConfig(images=images, typewriter=typewriter)
