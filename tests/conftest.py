"""
Shared fixtures.

`ManualLoop` stands in for the asyncio event loop: timers only fire when a
test advances the clock, and executor jobs only finish when a test resolves
them, so load order and reveal timing are fully under test control.
"""

import heapq
import itertools
import random

import pytest

from homepage.config import ImageSet, SiteConfig
from homepage.page import build_page

ASCII_LINES = [f"line {i}" for i in range(6)]
ASCII_TEXT = "\n".join(ASCII_LINES)


class ManualFuture:
    def __init__(self, fn, args):
        self._fn = fn
        self._args = args
        self._callbacks = []
        self._exception = None
        self._result = None
        self._done = False

    def add_done_callback(self, callback):
        self._callbacks.append(callback)

    def cancelled(self):
        return False

    def done(self):
        return self._done

    def exception(self):
        return self._exception

    def result(self):
        return self._result

    def resolve(self):
        try:
            self._result = self._fn(*self._args)
        except Exception as exc:
            self._exception = exc
        self._done = True
        for callback in self._callbacks:
            callback(self)


class ManualLoop:
    def __init__(self):
        self.now = 0.0
        self._timers = []
        self._seq = itertools.count()
        self.jobs = []

    def call_later(self, delay, callback, *args):
        heapq.heappush(self._timers, (self.now + delay, next(self._seq), callback, args))

    def run_in_executor(self, executor, fn, *args):
        future = ManualFuture(fn, args)
        self.jobs.append(future)
        return future

    @property
    def pending_timers(self):
        return len(self._timers)

    def advance(self, seconds):
        target = self.now + seconds
        while self._timers and self._timers[0][0] <= target + 1e-9:
            when, _, callback, args = heapq.heappop(self._timers)
            self.now = max(self.now, when)
            callback(*args)
        self.now = target

    def run_all(self, limit=10_000):
        for _ in range(limit):
            if not self._timers:
                return
            self.advance(self._timers[0][0] - self.now)
        raise AssertionError("timers never drained")


def fake_loader(path):
    return (4, 4)


@pytest.fixture
def loop():
    return ManualLoop()


@pytest.fixture
def config():
    return SiteConfig(images=ImageSet(light="light.png", dark="dark.png", blackout="blackout.png"))


@pytest.fixture
def page():
    return build_page(ASCII_TEXT, width=1000, height=1000)


@pytest.fixture
def rng():
    return random.Random(1731)
