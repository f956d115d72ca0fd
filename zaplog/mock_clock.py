"""A controllable clock for tests."""

from __future__ import annotations

import threading
import time
from datetime import datetime, timedelta, timezone

from .clock import Duration, Ticker, _to_timedelta

_YIELD_SECONDS = 0.001


class MockClock:
    """A clock whose time only moves when ``add`` is called."""

    def __init__(self) -> None:
        self._now = datetime.fromtimestamp(0, tz=timezone.utc)
        self._lock = threading.Lock()
        self._tickers: list[tuple[Ticker, list[datetime]]] = []

    def now(self) -> datetime:
        with self._lock:
            return self._now

    def new_ticker(self, interval: Duration) -> Ticker:
        ticker = Ticker(interval, capacity=0)
        with self._lock:
            self._tickers.append((ticker, [self._now + ticker.interval]))
        return ticker

    def add(self, delta: Duration) -> None:
        """Move time forward, firing every ticker that falls due on the way."""
        with self._lock:
            target = self._now + _to_timedelta(delta)
        while True:
            with self._lock:
                due = [
                    (nxt[0], ticker, nxt)
                    for ticker, nxt in self._tickers
                    if not ticker.stopped and nxt[0] <= target
                ]
                if not due:
                    self._now = target
                    break
                when, ticker, nxt = min(due, key=lambda item: item[0])
                self._now = when
                nxt[0] = when + ticker.interval
            ticker.tick(when)
            # Give consumers of the tick a chance to run.
            time.sleep(_YIELD_SECONDS)
        time.sleep(_YIELD_SECONDS)