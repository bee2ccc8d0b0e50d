from __future__ import annotations

import threading
from typing import TYPE_CHECKING
from unittest.mock import patch

import pytest

from resemble.engine import tolerance
from resemble.engine.classifier import PixelClassifier
from resemble.engine.raster import Raster
from resemble.engine.regions import RegionFilter
from resemble.engine.scan import ScanController, ScanState, split_rows
from resemble.exceptions import ComparisonCancelledError, ConfigurationConflictError
from resemble.models.domain import ComparisonSettings
from resemble.types import ScanPhase

if TYPE_CHECKING:
    from PIL import Image

    from tests.conftest import ImageFactory

RED = (255, 0, 0, 255)
GREEN = (0, 255, 0, 255)


def _controller(
    actual: Image.Image, baseline: Image.Image, threshold: float | None = None, **kwargs: object
) -> ScanController:
    a = Raster.from_image(actual)
    b = Raster.from_image(baseline)
    classifier = PixelClassifier(tolerance.STRICT, RegionFilter(ComparisonSettings()), a, b)
    return ScanController(classifier, a, b, threshold=threshold, **kwargs)


@pytest.mark.unit
class TestScanState:
    def test_start_uses_inverted_bounds(self) -> None:
        state = ScanState.start(10, 4)
        assert (state.top, state.left, state.bottom, state.right) == (4, 10, 0, 0)
        assert state.bounds.is_empty
        assert state.phase == ScanPhase.SCANNING

    def test_mismatch_ratio_is_percentage(self) -> None:
        state = ScanState(width=4, height=5, mismatch_count=5)
        assert state.mismatch_ratio == 25.0

    def test_empty_area_has_zero_ratio(self) -> None:
        assert ScanState.start(0, 0).mismatch_ratio == 0.0

    def test_merge_sums_counts_and_widens_bounds(self) -> None:
        a = ScanState(10, 10, mismatch_count=2, classified=50, top=1, left=3, bottom=4, right=6)
        b = ScanState(10, 10, mismatch_count=3, classified=50, top=5, left=0, bottom=8, right=2)
        merged = a.merge(b)
        assert merged.mismatch_count == 5
        assert merged.classified == 100
        assert (merged.top, merged.left, merged.bottom, merged.right) == (1, 0, 8, 6)

    def test_merge_with_start_is_identity(self) -> None:
        a = ScanState(width=10, height=10, mismatch_count=2, top=1, left=3, bottom=4, right=6)
        assert ScanState.start(10, 10).merge(a) == a

    def test_merge_keeps_halted_phase(self) -> None:
        a = ScanState.start(2, 2)
        b = ScanState(width=2, height=2, phase=ScanPhase.HALTED)
        assert a.merge(b).halted


@pytest.mark.unit
class TestSplitRows:
    def test_uneven_split(self) -> None:
        assert split_rows(10, 3) == [(0, 4), (4, 7), (7, 10)]

    def test_more_parts_than_rows(self) -> None:
        assert split_rows(2, 5) == [(0, 1), (1, 2)]

    def test_zero_height(self) -> None:
        assert split_rows(0, 4) == []

    def test_single_part(self) -> None:
        assert split_rows(7, 1) == [(0, 7)]


@pytest.mark.unit
class TestScanController:
    def test_identical_images_have_no_mismatch(self, make_image: ImageFactory) -> None:
        img = make_image((3, 3), RED)
        state = _controller(img, img.copy()).run()
        assert state.mismatch_count == 0
        assert state.classified == 9
        assert state.bounds.is_empty

    def test_bounds_cover_all_mismatches(self, make_image: ImageFactory) -> None:
        actual = make_image((5, 5), RED, {(1, 3): GREEN, (3, 1): GREEN})
        baseline = make_image((5, 5), RED)
        state = _controller(actual, baseline).run()
        assert state.mismatch_count == 2
        assert (state.top, state.left, state.bottom, state.right) == (1, 1, 3, 3)

    def test_area_outside_smaller_image_is_not_classified(self, make_image: ImageFactory) -> None:
        actual = make_image((4, 4), RED)
        baseline = make_image((2, 2), RED)
        controller = _controller(actual, baseline)
        state = controller.run()
        assert (controller.width, controller.height) == (4, 4)
        assert state.classified == 4
        assert state.total_area == 16

    def test_threshold_halts_scan(self, make_image: ImageFactory) -> None:
        actual = make_image((4, 4), RED)
        baseline = make_image((4, 4), GREEN)
        state = _controller(actual, baseline, threshold=0).run()
        assert state.halted
        assert state.mismatch_count == 1
        assert state.classified == 1

    def test_halt_logged(self, make_image: ImageFactory) -> None:
        actual = make_image((2, 2), RED)
        baseline = make_image((2, 2), GREEN)
        with patch("resemble.engine.scan.logger") as mock_logger:
            _controller(actual, baseline, threshold=10).run()
        assert mock_logger.debug.call_args[0][0] == "scan_halted_early"

    def test_scan_without_halt_stays_scanning(self, make_image: ImageFactory) -> None:
        actual = make_image((2, 2), RED, {(0, 0): GREEN})
        baseline = make_image((2, 2), RED)
        state = _controller(actual, baseline, threshold=25).run()
        assert not state.halted
        assert state.classified == 4

    def test_parallel_matches_sequential(self, checkerboard: ImageFactory) -> None:
        actual = checkerboard((9, 11))
        baseline = checkerboard((9, 11), shift=3)
        sequential = _controller(actual, baseline).run()
        parallel = _controller(actual, baseline).run_parallel(3)
        assert parallel == sequential

    def test_parallel_with_threshold_conflicts(self, make_image: ImageFactory) -> None:
        img = make_image((2, 2))
        with pytest.raises(ConfigurationConflictError):
            _controller(img, img, threshold=1.0).run_parallel(2)

    def test_cancelled_scan_raises(self, make_image: ImageFactory) -> None:
        img = make_image((2, 2))
        cancel = threading.Event()
        cancel.set()
        with pytest.raises(ComparisonCancelledError):
            _controller(img, img, cancel=cancel).run()

    def test_unset_cancel_event_completes(self, make_image: ImageFactory) -> None:
        img = make_image((2, 2))
        state = _controller(img, img, cancel=threading.Event()).run()
        assert state.classified == 4
