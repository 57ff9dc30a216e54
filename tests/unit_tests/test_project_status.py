"""Tests for the project status calculator."""

from datetime import date
from datetime import datetime

import pytest

from filmops_api.enums import ProjectStatus
from filmops_api.scheduling.project_status import calculate_status
from filmops_api.scheduling.project_status import to_date

TODAY = date(2025, 6, 15)

CALCULATED_STATUSES = {"Planning", "Planned", "Active", "Completed"}


class TestCalculateStatus:
    """Tests for calculate_status."""

    @pytest.mark.parametrize(
        "start_date,end_date,current_status,expected",
        [
            (date(2020, 1, 1), date(2020, 6, 1), "Active", "Completed"),
            (date(2099, 1, 1), None, None, "Planned"),
            (None, None, None, "Planning"),
            (date(2020, 1, 1), date(2099, 1, 1), "On Hold", "On Hold"),
            (date(2020, 1, 1), date(2020, 6, 1), "Cancelled", "Cancelled"),
            (date(2025, 6, 1), date(2025, 6, 30), "Planning", "Active"),
            (TODAY, None, None, "Active"),
            (date(2025, 6, 1), TODAY, None, "Active"),
            (None, date(2025, 7, 1), None, "Planned"),
            (date(2025, 1, 1), None, "Planned", "Active"),
            (None, TODAY, None, "Planning"),
            (None, date(2025, 6, 14), None, "Completed"),
        ],
        ids=[
            "ended_in_the_past",
            "starts_in_the_future",
            "no_dates",
            "on_hold_preserved",
            "cancelled_preserved",
            "running_today",
            "starts_today_open_ended",
            "ends_today",
            "only_future_end",
            "only_past_start",
            "only_end_equal_today",
            "only_end_yesterday",
        ],
    )
    def test_status_table(self, start_date, end_date, current_status, expected):
        assert calculate_status(start_date, end_date, current_status, today=TODAY) == expected

    @pytest.mark.parametrize(
        "start_date,end_date",
        [
            (None, None),
            (date(2020, 1, 1), None),
            (None, date(2020, 1, 1)),
            (date(2030, 1, 1), date(2031, 1, 1)),
            (date(2025, 6, 15), date(2025, 6, 15)),
        ],
    )
    @pytest.mark.parametrize("current_status", [None, "Planning", "Planned", "Active", "Completed"])
    def test_non_override_statuses_are_recalculated(self, start_date, end_date, current_status):
        """Without a manual override the result is always one of the calculated statuses."""
        assert calculate_status(start_date, end_date, current_status, today=TODAY) in CALCULATED_STATUSES

    @pytest.mark.parametrize("override", [ProjectStatus.CANCELLED.value, ProjectStatus.ON_HOLD.value])
    def test_manual_overrides_ignore_dates(self, override):
        assert calculate_status(None, None, override, today=TODAY) == override
        assert calculate_status(date(2099, 1, 1), date(2099, 2, 1), override, today=TODAY) == override

    def test_accepts_datetimes_and_iso_strings(self):
        assert calculate_status(datetime(2025, 6, 15, 23, 59), None, None, today=TODAY) == "Active"
        assert calculate_status("2020-01-01", "2020-06-01T10:00:00Z", None, today=TODAY) == "Completed"
        assert calculate_status("", "", None, today=TODAY) == "Planning"

    def test_defaults_to_current_date(self):
        assert calculate_status(date(1990, 1, 1), date(1990, 1, 2)) == "Completed"
        assert calculate_status(date(2999, 1, 1), None) == "Planned"


class TestToDate:
    """Tests for to_date."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            (None, None),
            ("", None),
            ("  ", None),
            ("2024-01-10", date(2024, 1, 10)),
            ("2024-01-10T09:30:00", date(2024, 1, 10)),
            ("2024-01-10T09:30:00Z", date(2024, 1, 10)),
            (date(2024, 1, 10), date(2024, 1, 10)),
            (datetime(2024, 1, 10, 18, 0), date(2024, 1, 10)),
        ],
    )
    def test_to_date(self, value, expected):
        assert to_date(value) == expected
