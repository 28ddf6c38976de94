"""Tests for time formatting / parsing and SessionState helpers."""

import pytest

from rhythmwatch.timer.state import (
    SessionMode,
    SessionSnapshot,
    SessionState,
    format_hms,
    parse_duration,
)


class TestFormatHms:
    @pytest.mark.parametrize("seconds,expected", [
        (0, "00:00:00"),
        (5, "00:00:05"),
        (600, "00:10:00"),
        (3661, "01:01:01"),
        (100 * 3600, "100:00:00"),
        (-3, "00:00:00"),
    ])
    def test_formats(self, seconds, expected):
        assert format_hms(seconds) == expected


class TestParseDuration:
    @pytest.mark.parametrize("text,expected", [
        ("00:00:05", 5),
        ("01:30:00", 5400),
        ("25:00", 1500),
        ("00:75", 75),
        (" 00:10:00 ", 600),
    ])
    def test_valid(self, text, expected):
        assert parse_duration(text) == expected

    @pytest.mark.parametrize("text", [None, "", "abc", "5", "1:2:3:4", "-1:00", "aa:bb", "10:xx:00", 42])
    def test_malformed_defaults_to_zero(self, text):
        assert parse_duration(text) == 0


class TestSessionState:
    def test_idle_defaults(self):
        s = SessionState.idle()
        assert s.mode == SessionMode.IDLE
        assert s.elapsed_seconds == 0
        assert s.remaining_seconds == 0
        assert s.interval_marks == 0
        assert s.formatted_time == "00:00:00"

    def test_working_formats_elapsed(self):
        assert SessionState.working(601).formatted_time == "00:10:01"

    def test_break_formats_remaining(self):
        assert SessionState.on_break(90).formatted_time == "00:01:30"

    def test_negative_counters_are_clamped(self):
        assert SessionState.on_break(-5).remaining_seconds == 0
        assert SessionState.working(-5, -1).elapsed_seconds == 0

    def test_snapshot_is_frozen(self):
        snap = SessionState.working(3).snapshot()
        assert snap == SessionSnapshot(SessionMode.WORKING, "00:00:03", 3)
        with pytest.raises(AttributeError):
            snap.formatted_time = "99:99:99"

    def test_snapshot_to_dict(self):
        assert SessionState.on_break(5).snapshot().to_dict() == {
            "mode": "on_break",
            "formatted_time": "00:00:05",
        }
