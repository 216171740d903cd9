"""Level computation tests: values MUST match the frontend XPProgress component."""

import pytest

from myscience.gamification.levels import (
    LEVEL_DATA,
    MAX_LEVEL,
    calculate_level,
    calculate_xp_for_level,
    get_level_info,
    get_level_progress,
    get_xp_for_next_level,
)


class TestXpForLevel:
    """Cumulative XP thresholds: floor(100 * n^1.7)."""

    def test_level_0_requires_nothing(self):
        assert calculate_xp_for_level(0) == 0

    @pytest.mark.parametrize(
        ("level", "xp"),
        [(1, 100), (2, 324), (3, 647), (4, 1055), (5, 1542), (10, 5011), (29, 30625), (30, 32441)],
    )
    def test_known_thresholds(self, level, xp):
        assert calculate_xp_for_level(level) == xp

    def test_thresholds_strictly_increase(self):
        thresholds = [calculate_xp_for_level(n) for n in range(MAX_LEVEL + 5)]
        assert all(a < b for a, b in zip(thresholds, thresholds[1:]))

    def test_next_level_xp(self):
        assert get_xp_for_next_level(0) == 100
        assert get_xp_for_next_level(29) == 32441


class TestCalculateLevel:
    """XP to level conversion."""

    def test_zero_xp_is_level_0(self):
        assert calculate_level(0) == 0

    def test_boundary_99_xp(self):
        """99 XP is still level 0."""
        assert calculate_level(99) == 0

    def test_exact_threshold_reaches_level(self):
        assert calculate_level(100) == 1
        assert calculate_level(323) == 1
        assert calculate_level(324) == 2

    def test_level_30_boundary(self):
        assert calculate_level(32440) == 29
        assert calculate_level(32441) == 30

    def test_not_capped_at_max_level(self):
        assert calculate_level(calculate_xp_for_level(31)) == 31

    def test_round_trips_with_threshold(self):
        for n in range(MAX_LEVEL + 3):
            xp = calculate_xp_for_level(n)
            assert calculate_level(xp) == n
            if n > 0:
                assert calculate_level(xp - 1) == n - 1

    def test_monotonic(self):
        levels = [calculate_level(xp) for xp in range(0, 40_000, 37)]
        assert levels == sorted(levels)


class TestLevelData:
    """The level table."""

    def test_has_31_entries(self):
        assert len(LEVEL_DATA) == MAX_LEVEL + 1
        assert [info.level for info in LEVEL_DATA] == list(range(MAX_LEVEL + 1))

    def test_xp_required_matches_formula(self):
        for info in LEVEL_DATA:
            assert info.xp_required == calculate_xp_for_level(info.level)

    def test_first_and_last_labels(self):
        assert LEVEL_DATA[0].label == "Curious Newcomer"
        assert LEVEL_DATA[30].label == "Timeless Innovator"

    def test_get_level_info(self):
        assert get_level_info(5).label == "Active Researcher"

    @pytest.mark.parametrize("level", [-1, 31, 500])
    def test_out_of_range_falls_back_to_level_0(self, level):
        assert get_level_info(level) == LEVEL_DATA[0]


class TestLevelProgress:
    """Progress toward the next level."""

    def test_start_of_level(self):
        result = get_level_progress(0, 0)
        assert result == {"current_level_xp": 0, "next_level_xp": 100, "progress": 0.0}

    def test_midway(self):
        result = get_level_progress(50, 0)
        assert result["progress"] == pytest.approx(0.5)

    def test_within_level_1(self):
        result = get_level_progress(212, 1)  # (212 - 100) / (324 - 100)
        assert result["current_level_xp"] == 100
        assert result["next_level_xp"] == 324
        assert result["progress"] == pytest.approx(0.5)

    def test_not_clamped_when_level_is_stale(self):
        result = get_level_progress(150, 0)
        assert result["progress"] == pytest.approx(1.5)

    def test_max_level_reports_full_progress(self):
        result = get_level_progress(40_000, MAX_LEVEL)
        assert result["current_level_xp"] == result["next_level_xp"] == 32441
        assert result["progress"] == 1.0
