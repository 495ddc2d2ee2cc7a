"""Tests for duration resolution."""
import pytest
from datetime import datetime, timedelta, timezone


START = datetime(2024, 1, 1, 9, 0, tzinfo=timezone.utc)
END = datetime(2024, 1, 1, 10, 30, tzinfo=timezone.utc)


class TestParseMinutes:
    """Tests for parse_minutes."""

    def test_numbers_and_numeric_strings(self):
        """Test numeric values parse to floats."""
        from timeledger.reporting.durations import parse_minutes

        assert parse_minutes(90) == 90.0
        assert parse_minutes("45") == 45.0
        assert parse_minutes(" 7.5 ") == 7.5
        assert parse_minutes(0) == 0.0

    def test_malformed_values_are_absent(self):
        """Test unparseable values are treated as missing."""
        from timeledger.reporting.durations import parse_minutes

        assert parse_minutes(None) is None
        assert parse_minutes("") is None
        assert parse_minutes("abc") is None
        assert parse_minutes("nan") is None
        assert parse_minutes(True) is None
        assert parse_minutes("1e308") is None

    def test_negative_values_are_absent(self):
        """Test negative durations are treated as missing."""
        from timeledger.reporting.durations import parse_minutes

        assert parse_minutes(-1) is None
        assert parse_minutes("-30") is None


class TestResolveDurationSeconds:
    """Tests for resolve_duration_seconds precedence."""

    def test_duration_minutes_wins_over_timestamps(self, make_entry):
        """Test explicit duration beats start/end timestamps."""
        from timeledger.reporting.durations import resolve_duration_seconds

        entry = make_entry(duration_minutes=30, start_time=START, end_time=END)

        assert resolve_duration_seconds(entry) == 30 * 60

    @pytest.mark.parametrize("minutes", [0, 1, 15, 90, 480])
    def test_duration_minutes_precedence_holds_for_any_value(self, make_entry, minutes):
        """Test duration is always minutes * 60 when set."""
        from timeledger.reporting.durations import resolve_duration_seconds

        entry = make_entry(
            duration_minutes=minutes,
            start_time=START,
            end_time=START + timedelta(hours=10),
        )

        assert resolve_duration_seconds(entry, now=END) == minutes * 60

    def test_fractional_minutes(self, make_entry):
        """Test fractional minutes round to whole seconds."""
        from timeledger.reporting.durations import resolve_duration_seconds

        entry = make_entry(duration_minutes=1.5)

        assert resolve_duration_seconds(entry) == 90

    def test_start_and_end(self, make_entry):
        """Test duration from timestamps."""
        from timeledger.reporting.durations import resolve_duration_seconds

        entry = make_entry(start_time=START, end_time=END)

        assert resolve_duration_seconds(entry) == 5400

    def test_end_before_start_clamps_to_zero(self, make_entry):
        """Test malformed timestamps yield zero instead of negative time."""
        from timeledger.reporting.durations import resolve_duration_seconds

        entry = make_entry(start_time=END, end_time=START)

        assert resolve_duration_seconds(entry) == 0

    def test_malformed_duration_falls_through_to_timestamps(self, make_entry):
        """Test an unparseable duration is ignored."""
        from timeledger.reporting.durations import resolve_duration_seconds

        entry = make_entry(duration_minutes="soon", start_time=START, end_time=END)

        assert entry.duration_minutes is None
        assert resolve_duration_seconds(entry) == 5400

    def test_oversized_duration_falls_through_to_timestamps(self, make_entry):
        """Test a duration too large to convert to seconds is ignored."""
        from timeledger.models.report import GroupBy
        from timeledger.reporting.aggregator import group_entries
        from timeledger.reporting.durations import resolve_duration_seconds

        entry = make_entry(duration_minutes="1e308", start_time=START, end_time=END)

        assert entry.duration_minutes is None
        assert resolve_duration_seconds(entry) == 5400
        assert group_entries([entry], GroupBy.CUSTOMER)[0].totals.total_seconds == 5400

    def test_running_entry_uses_now(self, make_entry):
        """Test a running timer counts up to the reference instant."""
        from timeledger.reporting.durations import resolve_duration_seconds

        entry = make_entry(start_time=START)

        assert resolve_duration_seconds(entry, now=START + timedelta(minutes=20)) == 1200

    def test_running_entry_without_now_is_zero(self, make_entry):
        """Test a running timer contributes nothing to closed reports."""
        from timeledger.reporting.durations import resolve_duration_seconds

        entry = make_entry(start_time=START)

        assert resolve_duration_seconds(entry) == 0

    def test_running_entry_started_after_now_is_zero(self, make_entry):
        """Test elapsed time never goes negative."""
        from timeledger.reporting.durations import resolve_duration_seconds

        entry = make_entry(start_time=END)

        assert resolve_duration_seconds(entry, now=START) == 0

    def test_no_duration_information(self, make_entry):
        """Test an entry with nothing to measure resolves to zero."""
        from timeledger.reporting.durations import resolve_duration_seconds

        entry = make_entry()

        assert resolve_duration_seconds(entry, now=END) == 0

    def test_naive_timestamps_are_utc(self, make_entry):
        """Test naive and aware timestamps can be mixed."""
        from timeledger.reporting.durations import resolve_duration_seconds

        entry = make_entry(start_time=datetime(2024, 1, 1, 9, 0))

        assert resolve_duration_seconds(entry, now=END) == 5400


class TestIsRunning:
    """Tests for is_running."""

    def test_running_states(self, make_entry):
        """Test which entries count as running timers."""
        from timeledger.reporting.durations import is_running

        assert is_running(make_entry(start_time=START)) is True
        assert is_running(make_entry(start_time=START, end_time=END)) is False
        assert is_running(make_entry(start_time=START, duration_minutes=10)) is False
        assert is_running(make_entry()) is False
