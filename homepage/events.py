"""
Input event dispatch.

Each page input maps to one transition function in `HANDLERS`; `dispatch`
is the only entry point the page glue calls.
"""

from __future__ import annotations

import enum
import logging
from collections.abc import Callable

from homepage import stars
from homepage.content import toggle_content
from homepage.session import Session
from homepage.theme import toggle_moon, toggle_theme

logger = logging.getLogger(__name__)

ACTIVATION_KEYS = frozenset({"Enter", " "})


class Event(enum.Enum):
    THEME_CLICK = "theme-click"
    MOON_CLICK = "moon-click"
    REVEAL_CLICK = "reveal-click"
    REVEAL_KEYDOWN = "reveal-keydown"
    RESIZE = "resize"


def _on_theme_click(session: Session) -> bool:
    toggle_theme(session)
    return False


def _on_moon_click(session: Session) -> bool:
    toggle_moon(session)
    return False


def _on_reveal_click(session: Session) -> bool:
    if session.page.map_reveal is None:
        return False
    toggle_content(session.page)
    return False


def _on_reveal_keydown(session: Session, key: str = "") -> bool:
    if session.page.map_reveal is None or key not in ACTIVATION_KEYS:
        return False
    toggle_content(session.page)
    # Space would otherwise scroll the page.
    return True


def _on_resize(session: Session, width: int, height: int) -> bool:
    page = session.page
    page.width = width
    page.height = height
    if session.starfield.active:
        stars.populate(session.starfield, width, height)
    return False


HANDLERS: dict[Event, Callable[..., bool]] = {
    Event.THEME_CLICK: _on_theme_click,
    Event.MOON_CLICK: _on_moon_click,
    Event.REVEAL_CLICK: _on_reveal_click,
    Event.REVEAL_KEYDOWN: _on_reveal_keydown,
    Event.RESIZE: _on_resize,
}


def dispatch(session: Session, event: Event, **payload) -> bool:
    """
    Run the transition for `event`.

    Returns True when the browser's default action should be prevented.
    """
    logger.debug("Dispatching %s %s", event.value, payload)
    return HANDLERS[event](session, **payload)
