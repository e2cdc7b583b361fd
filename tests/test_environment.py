"""Tests for environment readings."""

import pytest

from py_talispod.core.environment import (
    HUM_STEPS,
    LIGHT_STEPS,
    NEUTRAL_READING,
    TEMP_STEPS,
    EnvironmentReading,
    snap_to_step,
)


class TestEnvironment:
    """Test readings and slider steps."""

    def test_step_tables(self):
        """Test the slider step tables."""
        assert TEMP_STEPS[0] == -273
        assert TEMP_STEPS[-1] == 999
        assert 0 in TEMP_STEPS
        assert HUM_STEPS[-2:] == [99, 100]
        assert LIGHT_STEPS == [0, 50, 100]

    @pytest.mark.parametrize("value,expected", [
        (0, 0), (24, 0), (25, 0), (26, 50), (75, 50), (76, 100), (250, 100), (-10, 0),
    ])
    def test_snap_to_step(self, value, expected):
        """Test snapping to the nearest light step."""
        assert snap_to_step(value, LIGHT_STEPS) == expected

    def test_from_steps(self):
        """Test building readings from slider indices."""
        reading = EnvironmentReading.from_steps(TEMP_STEPS.index(0), HUM_STEPS.index(50), 60)

        assert reading == NEUTRAL_READING
        assert reading.is_neutral

    def test_from_steps_clamps(self):
        """Test that out-of-range indices are clamped."""
        reading = EnvironmentReading.from_steps(-5, 99, 100)

        assert reading.temperature == -273
        assert reading.humidity == 100
        assert reading.is_sea

    def test_defaults(self):
        """Test the default reading."""
        reading = EnvironmentReading()

        assert reading.is_neutral
        assert not reading.is_sea
