"""Traversal of the comparison area and running mismatch state.

Pixels are visited column by column: ``x`` is the outer axis, ``y`` the
inner one, both ascending from 0. The order matters for early exit, since
it decides which pixels are classified before the scan halts.

With an early-exit threshold the scan stops as soon as the running
mismatch ratio exceeds it. Pixels after that point are never classified,
so the reported ratio is a lower bound of the full-scan ratio. This is the
intended behaviour for threshold-only checks, which only need to know that
the threshold was crossed.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, replace
from functools import reduce
from typing import TYPE_CHECKING

import structlog

from resemble.exceptions import ComparisonCancelledError, ConfigurationConflictError
from resemble.models.domain import DifferenceBounds
from resemble.types import PixelVerdict, ScanPhase

if TYPE_CHECKING:
    import threading

    from resemble.engine.classifier import PixelClassifier
    from resemble.engine.color import PixelGrid
    from resemble.engine.raster import Raster
    from resemble.engine.render import DifferenceRenderer

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class ScanState:
    """Running totals of a scan.

    Bounds start inverted (``top``/``left`` at the area's height/width,
    ``bottom``/``right`` at 0) and only grow on mismatches. ``merge`` is
    associative and commutative, so per-band states can be folded in any
    order.
    """

    width: int
    height: int
    mismatch_count: int = 0
    classified: int = 0
    top: int = 0
    left: int = 0
    bottom: int = 0
    right: int = 0
    phase: ScanPhase = ScanPhase.SCANNING

    @classmethod
    def start(cls, width: int, height: int) -> ScanState:
        return cls(width=width, height=height, top=height, left=width)

    @property
    def total_area(self) -> int:
        return self.width * self.height

    @property
    def mismatch_ratio(self) -> float:
        """Mismatched share of the whole area, as a 0-100 percentage."""
        if self.total_area == 0:
            return 0.0
        return self.mismatch_count / self.total_area * 100

    @property
    def halted(self) -> bool:
        return self.phase == ScanPhase.HALTED

    @property
    def bounds(self) -> DifferenceBounds:
        return DifferenceBounds(top=self.top, left=self.left, bottom=self.bottom, right=self.right)

    def merge(self, other: ScanState) -> ScanState:
        return replace(
            self,
            mismatch_count=self.mismatch_count + other.mismatch_count,
            classified=self.classified + other.classified,
            top=min(self.top, other.top),
            left=min(self.left, other.left),
            bottom=max(self.bottom, other.bottom),
            right=max(self.right, other.right),
            phase=ScanPhase.HALTED if self.halted or other.halted else ScanPhase.SCANNING,
        )


class _Accumulator:
    """Mutable counterpart of ScanState used inside the hot loop."""

    __slots__ = ("bottom", "classified", "left", "mismatch_count", "right", "top")

    def __init__(self, width: int, height: int) -> None:
        self.mismatch_count = 0
        self.classified = 0
        self.top = height
        self.left = width
        self.bottom = 0
        self.right = 0

    def add_mismatch(self, x: int, y: int) -> None:
        self.mismatch_count += 1
        if x < self.left:
            self.left = x
        if x > self.right:
            self.right = x
        if y < self.top:
            self.top = y
        if y > self.bottom:
            self.bottom = y

    def freeze(self, width: int, height: int, phase: ScanPhase) -> ScanState:
        return ScanState(
            width=width,
            height=height,
            mismatch_count=self.mismatch_count,
            classified=self.classified,
            top=self.top,
            left=self.left,
            bottom=self.bottom,
            right=self.right,
            phase=phase,
        )


class ScanController:
    """Drives the classifier over ``max(widths) x max(heights)``.

    A coordinate outside either image ends its column, so pixels beyond the
    smaller image are never classified but still count towards the area.
    """

    def __init__(
        self,
        classifier: PixelClassifier,
        actual: Raster,
        baseline: Raster,
        *,
        renderer: DifferenceRenderer | None = None,
        output: PixelGrid | None = None,
        threshold: float | None = None,
        cancel: threading.Event | None = None,
    ) -> None:
        self._classifier = classifier
        self._actual = actual
        self._baseline = baseline
        self._renderer = renderer
        self._output = output if renderer is not None else None
        self._threshold = threshold
        self._cancel = cancel
        self.width = max(actual.width, baseline.width)
        self.height = max(actual.height, baseline.height)

    def _check_cancelled(self) -> None:
        if self._cancel is not None and self._cancel.is_set():
            msg = "Comparison cancelled"
            raise ComparisonCancelledError(msg)

    def scan_band(self, y_start: int, y_stop: int) -> ScanState:
        """Scan rows ``[y_start, y_stop)`` of every column."""
        acc = _Accumulator(self.width, self.height)
        total_area = self.width * self.height
        threshold = self._threshold
        classify = self._classifier.classify
        actual = self._actual
        baseline = self._baseline
        actual_px = actual.pixels
        baseline_px = baseline.pixels
        renderer = self._renderer
        output = self._output

        for x in range(self.width):
            self._check_cancelled()
            for y in range(y_start, y_stop):
                if not (actual.contains(x, y) and baseline.contains(x, y)):
                    break

                a = actual_px[x, y]
                b = baseline_px[x, y]
                verdict = classify(a, b, x, y)
                acc.classified += 1

                if verdict is PixelVerdict.MISMATCH:
                    acc.add_mismatch(x, y)

                if output is not None:
                    color = renderer.pixel_for(verdict, a, b)
                    if color is not None:
                        output[x, y] = color

                if threshold is not None and acc.mismatch_count / total_area * 100 > threshold:
                    logger.debug(
                        "scan_halted_early",
                        x=x,
                        y=y,
                        mismatch_count=acc.mismatch_count,
                        classified=acc.classified,
                        threshold=threshold,
                    )
                    return acc.freeze(self.width, self.height, ScanPhase.HALTED)

        return acc.freeze(self.width, self.height, ScanPhase.SCANNING)

    def run(self) -> ScanState:
        """Sequential scan of the whole area."""
        return self.scan_band(0, self.height)

    def run_parallel(self, workers: int) -> ScanState:
        """Scan contiguous row bands on a thread pool and merge their states.

        Each band writes only its own rows of the output raster. Early exit
        is not available here; the configuration layer rejects a threshold
        together with more than one worker.
        """
        if self._threshold is not None:
            msg = "Parallel scans do not support an early-exit threshold"
            raise ConfigurationConflictError(msg)

        bands = split_rows(self.height, workers)
        if len(bands) <= 1:
            return self.run()

        logger.debug("parallel_scan_started", workers=workers, bands=len(bands))
        with ThreadPoolExecutor(max_workers=workers) as pool:
            states = list(pool.map(lambda band: self.scan_band(*band), bands))
        return reduce(ScanState.merge, states, ScanState.start(self.width, self.height))


def split_rows(height: int, parts: int) -> list[tuple[int, int]]:
    """Split ``range(height)`` into at most ``parts`` contiguous bands."""
    parts = max(1, min(parts, height))
    if height == 0:
        return []
    size, extra = divmod(height, parts)
    bands: list[tuple[int, int]] = []
    start = 0
    for i in range(parts):
        stop = start + size + (1 if i < extra else 0)
        bands.append((start, stop))
        start = stop
    return bands
