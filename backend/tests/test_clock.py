"""
Tests for the capture clock: readings follow the monotonic clock from a
single wall-clock anchor, so a system clock step never moves them backwards.
"""

from unittest.mock import patch

from capture import clock


class TestNowMs:

    def test_advances_with_monotonic_clock(self):
        with patch("capture.clock.time.monotonic", return_value=clock._MONO_ANCHOR + 1.5):
            assert clock.now_ms() == clock._WALL_ANCHOR_MS + 1500

    def test_wall_clock_step_back_is_ignored(self):
        first = clock.now_ms()
        with patch("capture.clock.time.time", return_value=0.0):
            second = clock.now_ms()
        assert second >= first

    def test_successive_readings_non_decreasing(self):
        readings = [clock.now_ms() for _ in range(200)]
        assert readings == sorted(readings)


class TestIsoFromMs:

    def test_utc_with_milliseconds(self):
        assert clock.iso_from_ms(1_700_000_060_123) == "2023-11-14T22:14:20.123Z"
