"""Tests for closed date-interval overlap checks."""

from datetime import date
from datetime import timedelta
from itertools import product

import pytest

from filmops_api.scheduling.overlap import InvalidDateRangeError
from filmops_api.scheduling.overlap import has_overlap
from filmops_api.scheduling.overlap import ranges_overlap
from filmops_api.scheduling.overlap import validate_range


def d(day: int) -> date:
    return date(2025, 4, 1) + timedelta(days=day - 1)


class TestRangesOverlap:
    """Tests for the pairwise closed-interval check."""

    @pytest.mark.parametrize(
        "first,second,expected",
        [
            ((d(1), d(5)), (d(3), d(8)), True),
            ((d(1), d(5)), (d(5), d(8)), True),
            ((d(1), d(5)), (d(6), d(8)), False),
            ((d(1), d(10)), (d(3), d(4)), True),
            ((d(3), d(3)), (d(3), d(3)), True),
            ((d(3), d(3)), (d(4), d(4)), False),
        ],
        ids=["partial", "shared_boundary_day", "adjacent_days", "containment", "same_single_day", "different_days"],
    )
    def test_overlap_cases(self, first, second, expected):
        assert ranges_overlap(first, second) is expected

    def test_symmetric_and_matches_formula(self):
        """Exhaustive over small ranges: symmetric and true iff a <= d and c <= b."""
        ranges = [(d(a), d(b)) for a, b in product(range(1, 6), repeat=2) if a <= b]
        for first, second in product(ranges, repeat=2):
            (a, b), (c, e) = first, second
            assert ranges_overlap(first, second) == ranges_overlap(second, first)
            assert ranges_overlap(first, second) == (a <= e and c <= b)


class TestHasOverlap:
    """Tests for has_overlap against existing assignments."""

    def test_no_existing_ranges(self):
        assert has_overlap([], (d(1), d(2))) is False

    def test_detects_any_overlap(self):
        existing = [(d(1), d(3)), (d(10), d(12))]

        assert has_overlap(existing, (d(4), d(9))) is False
        assert has_overlap(existing, (d(3), d(9))) is True
        assert has_overlap(existing, (d(2), d(11))) is True

    def test_update_excludes_own_range(self):
        """An assignment moved within its own dates only conflicts with the others."""
        own = (d(5), d(8))
        others = [(d(1), d(2))]

        assert has_overlap(others + [own], (d(6), d(9))) is True
        assert has_overlap(others, (d(6), d(9))) is False


class TestValidateRange:
    def test_valid_range_is_returned(self):
        assert validate_range(d(1), d(1)) == (d(1), d(1))

    def test_reversed_range_rejected(self):
        with pytest.raises(InvalidDateRangeError, match="End date cannot be before start date"):
            validate_range(d(2), d(1))

    def test_error_is_a_value_error(self):
        assert issubclass(InvalidDateRangeError, ValueError)
