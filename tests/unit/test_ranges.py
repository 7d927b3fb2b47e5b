"""Tests for calls.ranges: presets and custom ranges."""

from datetime import datetime, timedelta, timezone

from x402_exchange.calls.ranges import DEFAULT_PRESET, as_utc, resolve_range

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


class TestResolveRange:
    def test_default_is_one_day(self):
        r = resolve_range(now=NOW)
        assert r.preset == DEFAULT_PRESET == "1 day"
        assert r.start == NOW - timedelta(days=1)
        assert r.end == NOW

    def test_presets(self):
        assert resolve_range("1 hour", now=NOW).start == NOW - timedelta(hours=1)
        assert resolve_range("6 hours", now=NOW).start == NOW - timedelta(hours=6)
        assert resolve_range("1 week", now=NOW).start == NOW - timedelta(weeks=1)

    def test_unknown_preset_falls_back(self):
        assert resolve_range("1 year", now=NOW).preset == "1 day"

    def test_explicit_bounds_make_custom(self):
        start = datetime(2026, 2, 1)
        end = datetime(2026, 2, 2, tzinfo=timezone.utc)
        r = resolve_range("1 hour", start=start, end=end, now=NOW)
        assert r.preset == "custom"
        assert r.start == start.replace(tzinfo=timezone.utc)
        assert r.end == end

    def test_custom_without_bounds_is_open(self):
        r = resolve_range("custom", now=NOW)
        assert r.preset == "custom"
        assert r.start is None and r.end is None


class TestAsUtc:
    def test_naive_is_treated_as_utc(self):
        assert as_utc(datetime(2026, 1, 1)).tzinfo == timezone.utc

    def test_aware_is_converted(self):
        plus_two = timezone(timedelta(hours=2))
        value = as_utc(datetime(2026, 1, 1, 14, tzinfo=plus_two))
        assert value == datetime(2026, 1, 1, 12, tzinfo=timezone.utc)
