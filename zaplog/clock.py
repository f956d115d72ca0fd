"""Sources of time and periodic tickers."""

from __future__ import annotations

import queue
import threading
from datetime import datetime, timedelta
from typing import Optional, Union

Duration = Union[timedelta, int, float]


def _to_timedelta(value: Duration) -> timedelta:
    if isinstance(value, timedelta):
        return value
    return timedelta(seconds=value)


class Ticker:
    """Delivers tick times; ticks are dropped while the buffer is full."""

    def __init__(self, interval: Duration, capacity: int = 1) -> None:
        self.interval = _to_timedelta(interval)
        if self.interval <= timedelta(0):
            raise ValueError("non-positive interval for ticker")
        self._queue: queue.Queue[datetime] = queue.Queue(maxsize=capacity)
        self._stopped = threading.Event()

    @property
    def stopped(self) -> bool:
        return self._stopped.is_set()

    def get(self, timeout: Optional[float] = None) -> datetime:
        """Wait for the next tick and return its time.

        Raises TimeoutError if no tick arrives within ``timeout`` seconds.
        """
        try:
            return self._queue.get(timeout=timeout)
        except queue.Empty:
            raise TimeoutError("no tick received") from None

    def tick(self, when: datetime) -> None:
        """Deliver a tick, unless stopped or the buffer is full."""
        if self._stopped.is_set():
            return
        try:
            self._queue.put_nowait(when)
        except queue.Full:
            pass

    def stop(self) -> None:
        """Stop delivering ticks."""
        self._stopped.set()


class SystemClock:
    """A clock backed by the system time."""

    def now(self) -> datetime:
        return datetime.now().astimezone()

    def new_ticker(self, interval: Duration) -> Ticker:
        ticker = Ticker(interval)
        seconds = ticker.interval.total_seconds()

        def run() -> None:
            while not ticker._stopped.wait(seconds):
                ticker.tick(self.now())

        threading.Thread(target=run, name="ticker", daemon=True).start()
        return ticker


DEFAULT_CLOCK = SystemClock()