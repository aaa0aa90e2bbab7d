import asyncio
import logging
import threading
from abc import ABC, abstractmethod
from datetime import timedelta
from typing import Optional, Protocol

from .config import Settings, get_settings

log = logging.getLogger(__name__)


class TimerClient(Protocol):
    def time_out(self) -> None: ...


class CountdownTimer(ABC):
    """
    Single-shot timer: notifies its target exactly once after a duration.

    Durations are expressed in recipe time units and converted to seconds
    with ``time_scale``.
    """

    def __init__(self, time_scale: float = 1.0):
        self.time_scale = time_scale
        self.target: Optional[TimerClient] = None
        self.fired = False

    def register(self, duration: int, target: TimerClient) -> None:
        if self.target is not None:
            raise RuntimeError("Timer already registered")
        self.target = target
        self._schedule(self._delay(duration))

    def _delay(self, duration: int) -> timedelta:
        return timedelta(seconds=max(0, duration) * self.time_scale)

    def _notify(self) -> None:
        self.fired = True
        try:
            self.target.time_out()
        except Exception:
            log.exception("Timer client %r failed on time out", self.target)

    @abstractmethod
    def _schedule(self, delay: timedelta) -> None: ...

    @abstractmethod
    def cancel(self) -> None: ...


class AsyncioCountdownTimer(CountdownTimer):
    """Counts down on the running event loop. Register from inside it."""

    def __init__(self, time_scale: float = 1.0):
        super().__init__(time_scale)
        self.task: Optional[asyncio.Task] = None

    def _schedule(self, delay: timedelta) -> None:
        loop = asyncio.get_running_loop()
        self.task = loop.create_task(self._countdown(delay))

    async def _countdown(self, delay: timedelta):
        await asyncio.sleep(delay.total_seconds())
        self._notify()

    def cancel(self) -> None:
        if self.task is not None and not self.task.done():
            self.task.cancel()


class ThreadCountdownTimer(CountdownTimer):
    def __init__(self, time_scale: float = 1.0):
        super().__init__(time_scale)
        self.thread: Optional[threading.Timer] = None

    def _schedule(self, delay: timedelta) -> None:
        self.thread = threading.Timer(delay.total_seconds(), self._notify)
        self.thread.daemon = True
        self.thread.start()

    def cancel(self) -> None:
        if self.thread is not None:
            self.thread.cancel()


def create_timer(settings: Optional[Settings] = None) -> CountdownTimer:
    settings = settings or get_settings()
    if settings.timer_backend == "asyncio":
        return AsyncioCountdownTimer(settings.time_scale)
    return ThreadCountdownTimer(settings.time_scale)
