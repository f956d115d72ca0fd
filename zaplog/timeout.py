"""Timeouts scaled by the TEST_TIMEOUT_SCALE environment variable."""

from __future__ import annotations

import functools
import logging
import os
import time
from datetime import timedelta
from typing import Callable, Union

_log = logging.getLogger(__name__)

_timeout_scale = 1.0


def _set_scale(value: float) -> None:
    global _timeout_scale
    _timeout_scale = value


def timeout(base: Union[timedelta, float]) -> Union[timedelta, float]:
    """Scale ``base`` by the current timeout scale."""
    if isinstance(base, timedelta):
        return base * _timeout_scale
    return float(base) * _timeout_scale


def sleep(base: Union[timedelta, float]) -> None:
    """Sleep for ``base`` scaled by the current timeout scale."""
    scaled = timeout(base)
    if isinstance(scaled, timedelta):
        scaled = scaled.total_seconds()
    time.sleep(max(scaled, 0.0))


def initialize(factor: str) -> Callable[[], None]:
    """Set the timeout scale from text; return a function undoing it.

    Raises ValueError if ``factor`` is not a number.
    """
    original = _timeout_scale
    value = float(factor)
    _set_scale(value)
    return functools.partial(_set_scale, original)


_env = os.environ.get("TEST_TIMEOUT_SCALE", "")
if _env:
    initialize(_env)
    _log.info("Scaling timeouts by %sx.", _timeout_scale)