"""
Theme and blackout display modes.

Two independent switches drive the page: the dark theme and the moon switch.
Blackout is derived, never stored: it is on only while the theme is dark and
the moon switch is explicitly off. A switch with no aria-pressed attribute at
all does not count as off.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from homepage import stars
from homepage.config import ImageSet
from homepage.page import Page

if TYPE_CHECKING:
    from homepage.session import Session

DARK_GLYPH = "☾"
LIGHT_GLYPH = "☀︎"


def _parse_pressed(value: str | None) -> bool | None:
    if value == "true":
        return True
    if value == "false":
        return False
    return None


@dataclass(frozen=True)
class DisplayMode:
    dark: bool = False
    moon_switch: bool | None = None

    @classmethod
    def from_page(cls, page: Page) -> DisplayMode:
        return cls(
            dark=page.body.has_class("dark"),
            moon_switch=_parse_pressed(page.moon_switch.get_attribute("aria-pressed")),
        )


def blackout_active(mode: DisplayMode) -> bool:
    return mode.dark and mode.moon_switch is False


def select_image(mode: DisplayMode, images: ImageSet) -> str:
    # priority: blackout > dark > light
    if blackout_active(mode):
        return images.blackout
    if mode.dark:
        return images.dark
    return images.light


def update_display(session: Session) -> bool:
    """
    Push the current mode onto the page and rebuild or clear the starfield.

    Returns whether blackout is active.
    """
    page = session.page
    active = blackout_active(session.mode)
    page.starfield.toggle_class("active", active)
    page.body.toggle_class("blackout", active)

    if page.grid_image is not None:
        page.grid_image.set_attribute("src", select_image(session.mode, session.config.images))

    if active:
        stars.populate(session.starfield, page.width, page.height)
    else:
        stars.clear(session.starfield)
    return active


def toggle_theme(session: Session) -> None:
    dark = not session.mode.dark
    session.mode = DisplayMode(dark=dark, moon_switch=session.mode.moon_switch)
    page = session.page
    page.body.toggle_class("dark", dark)
    page.theme_toggle.set_attribute("aria-pressed", "true" if dark else "false")
    page.theme_toggle.text = DARK_GLYPH if dark else LIGHT_GLYPH
    update_display(session)


def toggle_moon(session: Session) -> None:
    # an unset switch turns on first, same as an explicit "false"
    pressed = session.mode.moon_switch is not True
    session.mode = DisplayMode(dark=session.mode.dark, moon_switch=pressed)
    session.page.moon_switch.set_attribute("aria-pressed", "true" if pressed else "false")
    update_display(session)
