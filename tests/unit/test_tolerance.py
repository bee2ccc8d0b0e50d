import pytest

from resemble.engine import tolerance
from resemble.engine.tolerance import (
    PREDEFINED_PROFILES,
    ToleranceProfile,
    get_profile,
    is_channel_similar,
)
from resemble.exceptions import ConfigError, MissingToleranceValueError
from resemble.types import ProfileKind, Tolerance

ORDER = (
    Tolerance.RED,
    Tolerance.GREEN,
    Tolerance.BLUE,
    Tolerance.ALPHA,
    Tolerance.MIN_BRIGHTNESS,
    Tolerance.MAX_BRIGHTNESS,
)


@pytest.mark.unit
class TestPredefinedProfiles:
    @pytest.mark.parametrize(
        ("kind", "expected"),
        [
            (ProfileKind.STRICT, (0, 0, 0, 0, 0, 255)),
            (ProfileKind.DEFAULT, (16, 16, 16, 16, 16, 244)),
            (ProfileKind.LESS, (16, 16, 16, 16, 16, 240)),
            (ProfileKind.ANTIALIASING, (32, 32, 32, 32, 64, 96)),
            (ProfileKind.COLORS, (255, 255, 255, 255, 16, 240)),
            (ProfileKind.ALPHA, (16, 16, 16, 255, 16, 240)),
        ],
    )
    def test_values(self, kind: ProfileKind, expected: tuple[int, ...]) -> None:
        profile = get_profile(kind)
        assert tuple(profile.get(t) for t in ORDER) == expected

    def test_every_predefined_profile_is_complete(self) -> None:
        for profile in PREDEFINED_PROFILES.values():
            assert set(profile.values) == set(Tolerance)

    def test_get_profile_accepts_strings(self) -> None:
        assert get_profile("strict") is tolerance.STRICT

    def test_get_profile_rejects_custom(self) -> None:
        with pytest.raises(ConfigError):
            get_profile(ProfileKind.CUSTOM)

    def test_only_antialiasing_profile_ignores_antialiasing(self) -> None:
        flagged = [k for k, p in PREDEFINED_PROFILES.items() if p.ignores_antialiasing]
        assert flagged == [ProfileKind.ANTIALIASING]

    def test_only_colors_profile_ignores_colors(self) -> None:
        flagged = [k for k, p in PREDEFINED_PROFILES.items() if p.ignores_colors]
        assert flagged == [ProfileKind.COLORS]

    def test_profile_values_are_read_only(self) -> None:
        with pytest.raises(TypeError):
            tolerance.DEFAULT.values[Tolerance.RED] = 0  # type: ignore[index]


@pytest.mark.unit
class TestCustomProfile:
    def test_custom_kind(self) -> None:
        profile = ToleranceProfile.custom({Tolerance.RED: 3})
        assert profile.kind == ProfileKind.CUSTOM
        assert not profile.ignores_antialiasing
        assert not profile.ignores_colors

    def test_string_keys_accepted(self) -> None:
        profile = ToleranceProfile.custom({"red": 3, "max_brightness": 200})
        assert profile.get(Tolerance.RED) == 3
        assert profile.get(Tolerance.MAX_BRIGHTNESS) == 200

    def test_missing_kind_fails_on_lookup_not_construction(self) -> None:
        profile = ToleranceProfile.custom({Tolerance.RED: 3})
        with pytest.raises(MissingToleranceValueError, match="green"):
            profile.get(Tolerance.GREEN)

    def test_out_of_range_value_rejected(self) -> None:
        with pytest.raises(ConfigError):
            ToleranceProfile.custom({Tolerance.RED: 256})

    def test_unknown_kind_rejected(self) -> None:
        with pytest.raises(ConfigError):
            ToleranceProfile.custom({"purple": 3})


@pytest.mark.unit
class TestChannelSimilarity:
    def test_equal_values_similar_with_zero_tolerance(self) -> None:
        assert is_channel_similar(5, 5, 0)

    def test_difference_below_tolerance(self) -> None:
        assert is_channel_similar(10, 25, 16)

    def test_difference_equal_to_tolerance_is_not_similar(self) -> None:
        assert not is_channel_similar(10, 26, 16)

    def test_symmetric(self) -> None:
        assert is_channel_similar(25, 10, 16) == is_channel_similar(10, 25, 16)

    def test_full_tolerance_still_excludes_extremes(self) -> None:
        assert is_channel_similar(0, 254, 255)
        assert not is_channel_similar(0, 255, 255)
