"""
Image preloading for the grid renders.

Every image is decoded concurrently in the loop's executor; completion
callbacks run back on the loop thread, so the counter is only ever touched
from there. Failed loads never count (there is no retry path).
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Sequence
from pathlib import Path

from PIL import Image

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int], None]


def load_image(path: str | Path) -> tuple[int, int]:
    # force a full decode; Image.open alone only reads the header
    with Image.open(path) as img:
        img.load()
        return img.size


class ImagePreloader:
    def __init__(
        self,
        paths: Sequence[str],
        on_progress: ProgressCallback,
        loader: Callable[[str], object] = load_image,
    ) -> None:
        self.paths = tuple(paths)
        self.loaded = 0
        self._on_progress = on_progress
        self._loader = loader

    @property
    def total(self) -> int:
        return len(self.paths)

    @property
    def done(self) -> bool:
        return self.loaded >= self.total

    def start(self, loop) -> None:
        """
        Kick off every load at once. Completion order follows decode timing.
        """
        for path in self.paths:
            future = loop.run_in_executor(None, self._loader, path)
            future.add_done_callback(lambda fut, path=path: self._finished(path, fut))

    def _finished(self, path: str, future: asyncio.Future) -> None:
        if future.cancelled():
            return
        exc = future.exception()
        if exc is not None:
            logger.warning("Image %s failed to load: %s", path, exc)
            return
        self.mark_loaded()

    def mark_loaded(self) -> None:
        if self.done:
            return
        self.loaded += 1
        logger.debug("Preloaded %d/%d images", self.loaded, self.total)
        self._on_progress(self.loaded, self.total)
