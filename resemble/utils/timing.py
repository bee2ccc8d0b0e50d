"""Elapsed-time measurement for comparison stages."""

from __future__ import annotations

import time
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import timedelta
from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from collections.abc import Generator

logger = structlog.get_logger(__name__)


@dataclass
class Timing:
    """Filled in when the ``timed`` block exits."""

    label: str
    seconds: float = 0.0

    @property
    def elapsed(self) -> timedelta:
        return timedelta(seconds=self.seconds)


@contextmanager
def timed(label: str) -> Generator[Timing, None, None]:
    """Measure the wall-clock duration of a block on the monotonic clock.

    Usage::

        with timed("scan") as t:
            state = controller.run()
        t.elapsed  # timedelta
    """
    result = Timing(label=label)
    start = time.monotonic()
    try:
        yield result
    finally:
        result.seconds = time.monotonic() - start
        logger.debug("timed", label=label, elapsed_seconds=result.seconds)
