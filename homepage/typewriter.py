"""
Typewriter reveal for the ASCII map fallback.

The ASCII text is revealed one line at a time, but never faster than the grid
images load: each preload completion raises `target_line` to the same fraction
of the text, and the reveal chain runs up to it and pauses. Once every image is
in and every line is shown, the text fades out and the map fades in.

Phases:
- IDLE: nothing loaded yet
- REVEALING: a reveal step is scheduled; new progress only raises the ceiling
- PAUSED: caught up with load progress, waiting for the next image
- COMPLETE: handoff triggered; terminal
"""

from __future__ import annotations

import enum
import logging
from collections.abc import Callable
from dataclasses import dataclass, field

from homepage.config import ImageSet, TypewriterConfig
from homepage.page import Element, Page
from homepage.preload import ImagePreloader, load_image

logger = logging.getLogger(__name__)


class Phase(enum.Enum):
    IDLE = "idle"
    REVEALING = "revealing"
    PAUSED = "paused"
    COMPLETE = "complete"


@dataclass(eq=False)
class TypewriterState:
    lines: tuple[str, ...]
    fallback: Element
    shell: Element
    config: TypewriterConfig
    loop: object
    current_line: int = 0
    target_line: int = 0
    loaded: int = 0
    total_images: int = 0
    phase: Phase = Phase.IDLE
    preloader: ImagePreloader | None = field(default=None, repr=False)

    @property
    def total_lines(self) -> int:
        return len(self.lines)

    @property
    def all_loaded(self) -> bool:
        return self.loaded >= self.total_images


def start_typewriter(
    page: Page,
    config: TypewriterConfig,
    images: ImageSet,
    loop,
    loader: Callable[[str], object] = load_image,
) -> TypewriterState | None:
    """
    Take over the fallback element and start preloading.

    Returns None when the page has no fallback element; the whole reveal is
    skipped in that case.
    """
    fallback = page.map_fallback
    if fallback is None:
        return None

    lines = tuple(fallback.text.split("\n"))
    paths = images.paths()
    state = TypewriterState(
        lines=lines,
        fallback=fallback,
        shell=page.map_shell,
        config=config,
        loop=loop,
        total_images=len(paths),
    )

    # Only the cursor shows until the first image lands.
    fallback.text = config.cursor
    fallback.style["opacity"] = "1"

    state.preloader = ImagePreloader(
        paths,
        on_progress=lambda loaded, total: on_progress(state, loaded, total),
        loader=loader,
    )
    logger.debug("Typewriter armed with %d lines, %d images", len(lines), len(paths))
    state.preloader.start(loop)
    return state


def on_progress(state: TypewriterState, loaded: int, total: int) -> None:
    if state.phase is Phase.COMPLETE:
        return
    state.loaded = loaded
    state.total_images = total
    # integer floor of (loaded / total) * lines, without float rounding
    state.target_line = loaded * state.total_lines // total if total else state.total_lines
    # A running chain will pick up the new ceiling on its own.
    if state.phase is not Phase.REVEALING:
        reveal_step(state)


def reveal_step(state: TypewriterState) -> None:
    if state.current_line >= state.target_line:
        state.phase = Phase.PAUSED
        if state.all_loaded and state.current_line >= state.total_lines:
            complete(state)
        return

    state.phase = Phase.REVEALING
    state.current_line += 1
    typed = "\n".join(state.lines[: state.current_line])
    state.fallback.text = typed + state.config.cursor
    state.loop.call_later(state.config.line_delay_ms / 1000.0, reveal_step, state)


def complete(state: TypewriterState) -> None:
    if state.phase is Phase.COMPLETE:
        return
    state.phase = Phase.COMPLETE
    state.fallback.text = "\n".join(state.lines)
    logger.info("Typewriter complete after %d lines", state.total_lines)
    state.loop.call_later(state.config.pause_after_ms / 1000.0, _fade_out_text, state)


def _fade_out_text(state: TypewriterState) -> None:
    state.shell.toggle_class("is-loaded", True)
    # the map fades in only after the text has finished fading out
    state.loop.call_later(state.config.fade_ms / 1000.0, _reveal_image, state)


def _reveal_image(state: TypewriterState) -> None:
    state.shell.toggle_class("is-revealed", True)
