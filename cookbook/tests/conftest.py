from datetime import timedelta

import pytest

from cookbook.app.core.timer_manager import CountdownTimer
from cookbook.app.models.recipe import Equipment, Product


class ManualTimer(CountdownTimer):
    """Virtual clock: fires only when a test advances it."""

    def __init__(self, time_scale: float = 1.0):
        super().__init__(time_scale)
        self.remaining = None
        self.cancelled = False

    def _schedule(self, delay: timedelta) -> None:
        self.remaining = delay.total_seconds()
        if self.remaining == 0:
            self._notify()

    def advance(self, seconds: float) -> None:
        if self.cancelled or self.fired or self.remaining is None:
            return
        self.remaining -= seconds
        if self.remaining <= 0:
            self._notify()

    def cancel(self) -> None:
        self.cancelled = True


@pytest.fixture
def timers():
    return []


@pytest.fixture
def timer_factory(timers):
    def factory():
        timer = ManualTimer()
        timers.append(timer)
        return timer

    return factory


@pytest.fixture
def eggs():
    return Product(description="Huevos", unit_cost=0.5)


@pytest.fixture
def pan():
    return Equipment(description="Sartén", hourly_cost=20)


@pytest.fixture
def omelette():
    return Product(description="Omelette", unit_cost=0)
