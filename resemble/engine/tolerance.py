"""Tolerance profiles and channel similarity."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from resemble.exceptions import ConfigError, MissingToleranceValueError
from resemble.types import ProfileKind, Tolerance


def _values(r: int, g: int, b: int, a: int, min_b: int, max_b: int) -> Mapping[Tolerance, int]:
    return MappingProxyType(
        {
            Tolerance.RED: r,
            Tolerance.GREEN: g,
            Tolerance.BLUE: b,
            Tolerance.ALPHA: a,
            Tolerance.MIN_BRIGHTNESS: min_b,
            Tolerance.MAX_BRIGHTNESS: max_b,
        }
    )


@dataclass(frozen=True)
class ToleranceProfile:
    """A named set of per-channel and brightness tolerances."""

    kind: ProfileKind
    values: Mapping[Tolerance, int] = field(default_factory=dict)

    def __post_init__(self) -> None:
        for key, value in self.values.items():
            if not 0 <= value <= 255:
                msg = f"Tolerance {key} must be within 0..255, got {value}"
                raise ConfigError(msg)

    @classmethod
    def custom(cls, values: Mapping[Tolerance | str, int]) -> ToleranceProfile:
        """Build a caller-defined profile.

        Kinds left out are not rejected here; the first lookup of a missing
        kind raises ``MissingToleranceValueError``.
        """
        try:
            parsed = {Tolerance(k): int(v) for k, v in values.items()}
        except ValueError as e:
            msg = f"Invalid tolerance values: {dict(values)!r}"
            raise ConfigError(msg) from e
        return cls(kind=ProfileKind.CUSTOM, values=MappingProxyType(parsed))

    def get(self, tolerance: Tolerance) -> int:
        try:
            return self.values[tolerance]
        except KeyError:
            msg = f"{tolerance} was not set up. Check your tolerance profile."
            raise MissingToleranceValueError(msg) from None

    @property
    def ignores_antialiasing(self) -> bool:
        return self.kind == ProfileKind.ANTIALIASING

    @property
    def ignores_colors(self) -> bool:
        return self.kind == ProfileKind.COLORS


STRICT = ToleranceProfile(ProfileKind.STRICT, _values(0, 0, 0, 0, 0, 255))
DEFAULT = ToleranceProfile(ProfileKind.DEFAULT, _values(16, 16, 16, 16, 16, 244))
LESS = ToleranceProfile(ProfileKind.LESS, _values(16, 16, 16, 16, 16, 240))
ANTIALIASING = ToleranceProfile(ProfileKind.ANTIALIASING, _values(32, 32, 32, 32, 64, 96))
COLORS = ToleranceProfile(ProfileKind.COLORS, _values(255, 255, 255, 255, 16, 240))
ALPHA = ToleranceProfile(ProfileKind.ALPHA, _values(16, 16, 16, 255, 16, 240))

PREDEFINED_PROFILES: Mapping[ProfileKind, ToleranceProfile] = MappingProxyType(
    {
        ProfileKind.STRICT: STRICT,
        ProfileKind.DEFAULT: DEFAULT,
        ProfileKind.LESS: LESS,
        ProfileKind.ANTIALIASING: ANTIALIASING,
        ProfileKind.COLORS: COLORS,
        ProfileKind.ALPHA: ALPHA,
    }
)


def get_profile(kind: ProfileKind | str) -> ToleranceProfile:
    """Return a predefined profile by kind."""
    kind = ProfileKind(kind)
    if kind == ProfileKind.CUSTOM:
        msg = "Custom profiles need explicit values; use ToleranceProfile.custom()"
        raise ConfigError(msg)
    return PREDEFINED_PROFILES[kind]


def is_channel_similar(a: int, b: int, tolerance: int) -> bool:
    """Equal, or the absolute difference is strictly below ``tolerance``."""
    return a == b or abs(a - b) < tolerance
