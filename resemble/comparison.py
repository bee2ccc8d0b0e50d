"""Comparison configuration and the ``compare`` entry point.

Configuration is collected by a ``ComparisonBuilder`` and frozen into a
``ComparisonConfig``; ``compare`` never mutates either.

Usage::

    config = (
        ComparisonBuilder()
        .ignore_antialiasing()
        .ignore_comparison_in(Box.from_xywh(0, 0, 200, 40))
        .build()
    )
    result = compare("actual.png", "baseline.png", config)
    result.mismatch  # percentage, 0-100
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Self

import structlog
from PIL import Image

from resemble.engine import tolerance
from resemble.engine.aggregate import ResultAggregator
from resemble.engine.classifier import PixelClassifier
from resemble.engine.raster import Raster
from resemble.engine.regions import RegionFilter
from resemble.engine.render import DifferenceRenderer
from resemble.engine.scan import ScanController
from resemble.engine.tolerance import ToleranceProfile, get_profile
from resemble.exceptions import ConfigError, ConfigurationConflictError
from resemble.imaging import PillowResizer, encode_png_base64, load_image
from resemble.models.domain import Box, Color, ComparisonSettings, check_transparency
from resemble.types import DifferenceType, ProfileKind, Tolerance
from resemble.utils.timing import timed

if TYPE_CHECKING:
    import threading

    from resemble.config.settings import Settings
    from resemble.imaging import ImageSource, Resizer
    from resemble.models.domain import ComparisonResult

logger = structlog.get_logger(__name__)

TRANSPARENT = (0, 0, 0, 0)


@dataclass(frozen=True)
class ComparisonConfig:
    """Immutable description of one comparison.

    ``threshold`` switches to compare-only mode: no difference image is
    rendered and the scan halts once the running mismatch percentage
    exceeds it.
    """

    profile: ToleranceProfile = tolerance.DEFAULT
    settings: ComparisonSettings = field(default_factory=ComparisonSettings)
    threshold: float | None = None
    resizer: Resizer | None = None
    workers: int = 1

    @property
    def compare_only(self) -> bool:
        return self.threshold is not None


class ComparisonBuilder:
    """Collects comparison options and validates them as they are set.

    Only one tolerance profile may be selected per builder; selecting a
    second raises ``ConfigurationConflictError`` and keeps the first.
    Without a selection the default profile is used.
    """

    def __init__(self) -> None:
        self._default_profile: ToleranceProfile = tolerance.DEFAULT
        self._profile: ToleranceProfile | None = None
        self._settings: dict[str, Any] = {}
        self._threshold: float | None = None
        self._resizer: Resizer | None = None
        self._workers = 1

    @classmethod
    def from_settings(cls, settings: Settings) -> ComparisonBuilder:
        """Seed defaults from environment settings.

        The settings' profile becomes the fallback profile, so callers can
        still select one explicitly.
        """
        builder = cls()
        if settings.profile != ProfileKind.CUSTOM:
            builder._default_profile = get_profile(settings.profile)
        builder._settings.update(
            difference_type=settings.difference_type,
            difference_color=Color.parse(settings.difference_color),
            transparency=check_transparency(settings.transparency),
        )
        if settings.workers > 1:
            builder._workers = settings.workers
        return builder

    @property
    def profile(self) -> ToleranceProfile:
        return self._profile or self._default_profile

    def select_profile(self, profile: ToleranceProfile | ProfileKind | str) -> Self:
        if self._profile is not None:
            msg = (
                f"Tolerance profile {self._profile.kind} has been already applied. "
                "You can select only one per comparison."
            )
            raise ConfigurationConflictError(msg)
        if not isinstance(profile, ToleranceProfile):
            profile = get_profile(profile)
        self._profile = profile
        return self

    def ignore_nothing(self) -> Self:
        return self.select_profile(tolerance.STRICT)

    def ignore_less(self) -> Self:
        return self.select_profile(tolerance.LESS)

    def ignore_antialiasing(self) -> Self:
        return self.select_profile(tolerance.ANTIALIASING)

    def ignore_colors(self) -> Self:
        return self.select_profile(tolerance.COLORS)

    def ignore_alpha(self) -> Self:
        return self.select_profile(tolerance.ALPHA)

    def with_tolerance(self, values: Mapping[Tolerance | str, int]) -> Self:
        return self.select_profile(ToleranceProfile.custom(values))

    def return_early_above(self, threshold: float) -> Self:
        """Compare only, halting once the mismatch percentage exceeds ``threshold``."""
        if self._workers > 1:
            msg = "An early-exit threshold cannot be combined with parallel workers"
            raise ConfigurationConflictError(msg)
        if threshold < 0:
            msg = f"Threshold must not be negative, got {threshold}"
            raise ConfigError(msg)
        self._threshold = float(threshold)
        return self

    def with_workers(self, workers: int) -> Self:
        if workers < 1:
            msg = f"Workers must be at least 1, got {workers}"
            raise ConfigError(msg)
        if workers > 1 and self._threshold is not None:
            msg = "Parallel workers cannot be combined with an early-exit threshold"
            raise ConfigurationConflictError(msg)
        self._workers = workers
        return self

    def with_result_transparency(self, transparency: float) -> Self:
        self._settings["transparency"] = check_transparency(transparency)
        return self

    def with_difference_color(self, color: Color | str | tuple[int, ...]) -> Self:
        self._settings["difference_color"] = Color.parse(color)
        return self

    def with_difference_type(self, difference_type: DifferenceType | str) -> Self:
        self._settings["difference_type"] = DifferenceType(difference_type)
        return self

    def scale_to_baseline_size(self, resizer: Resizer | None = None) -> Self:
        self._resizer = resizer or PillowResizer()
        return self

    def limit_comparison_area_to(self, *boxes: Box) -> Self:
        self._settings["bounding_boxes"] = tuple(boxes)
        return self

    def ignore_comparison_in(self, *boxes: Box) -> Self:
        self._settings["ignored_boxes"] = tuple(boxes)
        return self

    def ignore_areas_with_color(self, color: Color | str | tuple[int, ...]) -> Self:
        self._settings["ignore_color"] = Color.parse(color)
        return self

    def with_settings(self, settings: ComparisonSettings) -> Self:
        """Apply every field explicitly set on ``settings``."""
        for name in settings.model_fields_set:
            self._settings[name] = getattr(settings, name)
        return self

    def build(self) -> ComparisonConfig:
        return ComparisonConfig(
            profile=self.profile,
            settings=ComparisonSettings(**self._settings),
            threshold=self._threshold,
            resizer=self._resizer,
            workers=self._workers,
        )

    def compare(
        self,
        actual: ImageSource,
        baseline: ImageSource,
        *,
        cancel: threading.Event | None = None,
    ) -> ComparisonResult:
        return compare(actual, baseline, self.build(), cancel=cancel)


def compare(
    actual: ImageSource,
    baseline: ImageSource,
    config: ComparisonConfig | None = None,
    *,
    cancel: threading.Event | None = None,
) -> ComparisonResult:
    """Compare ``actual`` against ``baseline``.

    Raises ``MissingToleranceValueError`` when a custom profile lacks a
    tolerance kind and ``ComparisonCancelledError`` when ``cancel`` is set
    during the scan. Input images are never modified.
    """
    config = config or ComparisonConfig()
    settings = config.settings

    actual_img = load_image(actual)
    baseline_img = load_image(baseline)

    if config.resizer is not None:
        original_size = actual_img.size
        actual_img = config.resizer.resize(actual_img, baseline_img.width, baseline_img.height)
        logger.info("actual_resized", source=original_size, target=actual_img.size)

    actual_raster = Raster.from_image(actual_img)
    baseline_raster = Raster.from_image(baseline_img)
    width = max(actual_raster.width, baseline_raster.width)
    height = max(actual_raster.height, baseline_raster.height)

    logger.info(
        "comparison_started",
        profile=config.profile.kind.value,
        difference_type=settings.difference_type.value,
        difference_color=settings.difference_color.to_hex(),
        actual_size=actual_img.size,
        baseline_size=baseline_img.size,
        compare_only=config.compare_only,
        threshold=config.threshold,
        workers=config.workers,
    )

    classifier = PixelClassifier(
        config.profile, RegionFilter(settings), actual_raster, baseline_raster
    )

    diff_image: Image.Image | None = None
    renderer: DifferenceRenderer | None = None
    if not config.compare_only and width and height:
        diff_image = Image.new("RGBA", (width, height), TRANSPARENT)
        renderer = DifferenceRenderer(
            settings.difference_type, settings.difference_color, settings.transparency
        )

    controller = ScanController(
        classifier,
        actual_raster,
        baseline_raster,
        renderer=renderer,
        output=diff_image.load() if diff_image is not None else None,
        threshold=config.threshold,
        cancel=cancel,
    )

    with timed("scan") as t:
        if config.workers > 1:
            state = controller.run_parallel(config.workers)
        else:
            state = controller.run()

    aggregator = ResultAggregator(encoder=encode_png_base64)
    return aggregator.build(state, actual_raster, baseline_raster, t.elapsed, diff_image)
