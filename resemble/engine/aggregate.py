"""Comparison report building."""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from resemble.models.domain import ComparisonResult, DimensionDifference

if TYPE_CHECKING:
    from collections.abc import Callable
    from datetime import timedelta

    from PIL import Image

    from resemble.engine.raster import Raster
    from resemble.engine.scan import ScanState

logger = structlog.get_logger(__name__)


class ResultAggregator:
    """Builds a ComparisonResult from the final scan state."""

    def __init__(self, encoder: Callable[[Image.Image], str] | None = None) -> None:
        self._encoder = encoder

    def build(
        self,
        state: ScanState,
        actual: Raster,
        baseline: Raster,
        elapsed: timedelta,
        diff_image: Image.Image | None = None,
    ) -> ComparisonResult:
        image_difference = None
        if diff_image is not None and self._encoder is not None:
            image_difference = self._encoder(diff_image)

        result = ComparisonResult(
            mismatch=state.mismatch_ratio,
            diff_bounds=state.bounds,
            is_same_dimensions=(
                actual.width == baseline.width and actual.height == baseline.height
            ),
            dimension_difference=DimensionDifference(
                width=actual.width - baseline.width,
                height=actual.height - baseline.height,
            ),
            analysis_time=elapsed,
            mismatch_count=state.mismatch_count,
            total_pixels=state.total_area,
            halted_early=state.halted,
            diff_image=diff_image,
            image_difference=image_difference,
        )
        logger.info(
            "comparison_complete",
            mismatch=f"{result.mismatch:.2f}",
            mismatch_count=result.mismatch_count,
            total_pixels=result.total_pixels,
            classified=state.classified,
            halted_early=result.halted_early,
            same_dimensions=result.is_same_dimensions,
            elapsed_seconds=elapsed.total_seconds(),
        )
        return result
