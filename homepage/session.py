"""
Page session: the single state struct every controller works on.

One Session is built per page load by `start_session`; nothing lives at
module level.
"""

from __future__ import annotations

import logging
import random
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import date

from homepage.config import SiteConfig
from homepage.page import Page
from homepage.preload import load_image
from homepage.stars import Starfield
from homepage.theme import DisplayMode, update_display
from homepage.typewriter import TypewriterState, start_typewriter

logger = logging.getLogger(__name__)


@dataclass(eq=False)
class Session:
    page: Page
    config: SiteConfig
    loop: object
    starfield: Starfield
    mode: DisplayMode = field(default_factory=DisplayMode)
    typewriter: TypewriterState | None = None


def start_session(
    page: Page,
    config: SiteConfig,
    loop,
    rng: random.Random | None = None,
    loader: Callable[[str], object] = load_image,
    today: date | None = None,
) -> Session:
    """
    Wire a freshly loaded page: year label, typewriter, then display mode.

    `loop` is anything with asyncio's `call_later` and `run_in_executor`.
    """
    session = Session(
        page=page,
        config=config,
        loop=loop,
        starfield=Starfield(page.starfield, config.stars, rng or random.Random()),
        mode=DisplayMode.from_page(page),
    )
    page.year.text = str((today or date.today()).year)

    session.typewriter = start_typewriter(page, config.typewriter, config.images, loop, loader=loader)
    if session.typewriter is None:
        logger.debug("No ASCII fallback on the page; typewriter disabled")

    update_display(session)
    return session
