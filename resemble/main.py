"""resemble command line entrypoint."""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click
import structlog

from resemble.comparison import ComparisonBuilder
from resemble.config.logging import setup_logging
from resemble.config.settings import get_settings
from resemble.exceptions import ResembleError
from resemble.imaging import PillowResizer
from resemble.models.domain import Box
from resemble.types import DifferenceType, ProfileKind

logger = structlog.get_logger(__name__)

EXIT_OK = 0
EXIT_MISMATCH = 1
EXIT_ERROR = 2

_IMAGE = click.Path(exists=True, dir_okay=False, path_type=Path)


def _boxes(
    ctx: click.Context, param: click.Parameter, values: tuple[str, ...]
) -> tuple[Box, ...]:
    boxes = []
    for value in values:
        try:
            x, y, w, h = (int(part) for part in value.split(","))
        except ValueError:
            raise click.BadParameter(
                f"expected X,Y,WIDTH,HEIGHT, got {value!r}", ctx=ctx, param=param
            ) from None
        boxes.append(Box.from_xywh(x, y, w, h))
    return tuple(boxes)


@click.command("resemble", context_settings={"help_option_names": ["-h", "--help"]})
@click.argument("actual", type=_IMAGE)
@click.argument("baseline", type=_IMAGE)
@click.option(
    "--profile",
    type=click.Choice([k.value for k in ProfileKind if k != ProfileKind.CUSTOM]),
    default=None,
    help="Tolerance profile (default from RESEMBLE_PROFILE).",
)
@click.option(
    "--difference-type",
    type=click.Choice([d.value for d in DifferenceType]),
    default=None,
    help="How mismatched pixels are drawn.",
)
@click.option("--difference-color", default=None, help="#rrggbb or #rrggbbaa.")
@click.option("--transparency", type=float, default=None, help="Alpha factor for matches.")
@click.option("--ignore-color", default=None, help="Mask colour on the baseline, #rrggbb.")
@click.option(
    "--bounding-box",
    "bounding_boxes",
    multiple=True,
    metavar="X,Y,W,H",
    callback=_boxes,
    help="Only compare inside this box. Repeatable.",
)
@click.option(
    "--ignore-box",
    "ignored_boxes",
    multiple=True,
    metavar="X,Y,W,H",
    callback=_boxes,
    help="Skip this box. Repeatable.",
)
@click.option(
    "--threshold",
    type=float,
    default=None,
    help="Compare only; stop once the mismatch percentage exceeds this value.",
)
@click.option("--workers", type=int, default=None, help="Row bands scanned in parallel.")
@click.option("--scale", is_flag=True, help="Resize actual to the baseline size.")
@click.option(
    "--diff-output",
    default=None,
    type=click.Path(dir_okay=False, path_type=Path),
    help="Write the difference image PNG.",
)
@click.option(
    "--fail-above",
    type=float,
    default=None,
    help="Exit with status 1 when the mismatch percentage is above this value.",
)
@click.option("--json", "use_json", is_flag=True, help="JSON output.")
def cli(
    actual: Path,
    baseline: Path,
    profile: str | None,
    difference_type: str | None,
    difference_color: str | None,
    transparency: float | None,
    ignore_color: str | None,
    bounding_boxes: tuple[Box, ...],
    ignored_boxes: tuple[Box, ...],
    threshold: float | None,
    workers: int | None,
    scale: bool,
    diff_output: Path | None,
    fail_above: float | None,
    use_json: bool,
) -> None:
    """Compare ACTUAL against BASELINE and report the mismatch percentage.

    Exit 0 when the mismatch is within --fail-above, 1 when it is above,
    2 on error (unreadable image, conflicting options).
    """
    settings = get_settings()
    setup_logging(log_level=settings.log_level, json_output=settings.json_logs)

    try:
        builder = ComparisonBuilder.from_settings(settings)
        if profile:
            builder.select_profile(profile)
        if difference_type:
            builder.with_difference_type(difference_type)
        if difference_color:
            builder.with_difference_color(difference_color)
        if transparency is not None:
            builder.with_result_transparency(transparency)
        if ignore_color:
            builder.ignore_areas_with_color(ignore_color)
        if bounding_boxes:
            builder.limit_comparison_area_to(*bounding_boxes)
        if ignored_boxes:
            builder.ignore_comparison_in(*ignored_boxes)
        if workers is not None:
            builder.with_workers(workers)
        if threshold is not None:
            builder.return_early_above(threshold)
        if scale:
            builder.scale_to_baseline_size(PillowResizer(settings.resample))

        result = builder.compare(actual, baseline)
    except ResembleError as exc:
        logger.error("comparison_failed", error=str(exc), error_type=type(exc).__name__)
        click.echo(f"error: {exc}", err=True)
        sys.exit(EXIT_ERROR)

    if diff_output and result.diff_image is not None:
        result.diff_image.save(diff_output)

    if use_json:
        payload = result.to_dict()
        payload.pop("image_difference", None)
        click.echo(json.dumps(payload, indent=2))
    else:
        bounds = result.diff_bounds
        click.echo(f"mismatch: {result.mismatch:.2f}%")
        if bounds.is_empty:
            click.echo("bounds: none")
        else:
            click.echo(
                f"bounds: top={bounds.top} left={bounds.left} "
                f"bottom={bounds.bottom} right={bounds.right}"
            )
        click.echo(f"same dimensions: {result.is_same_dimensions}")
        if result.halted_early:
            click.echo("scan halted early: mismatch is a lower bound")

    if fail_above is not None and result.mismatch > fail_above:
        sys.exit(EXIT_MISMATCH)
    sys.exit(EXIT_OK)


if __name__ == "__main__":
    cli()
