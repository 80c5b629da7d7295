"""Tests for entry matching."""

from datetime import date, datetime, timedelta

import pytest

from time_entry_sync.adapters import TimeEntry
from time_entry_sync.sync.matcher import are_similar, has_counterpart


class TestAreSimilar:
    """Test are_similar functionality."""

    def test_identical_entries(self, make_entry) -> None:
        """Test that identical content is similar despite different ids."""
        assert are_similar(make_entry("a"), make_entry("b")) is True

    def test_trims_descriptions(self, make_entry) -> None:
        """Test that surrounding whitespace is ignored."""
        a = make_entry("a", description="Standup")
        b = make_entry("b", description="  Standup \n")

        assert are_similar(a, b) is True

    def test_inner_whitespace_matters(self, make_entry) -> None:
        """Test that only surrounding whitespace is trimmed."""
        a = make_entry("a", description="Stand up")
        b = make_entry("b", description="Standup")

        assert are_similar(a, b) is False

    def test_description_is_case_sensitive(self, make_entry) -> None:
        """Test that description comparison is exact."""
        assert are_similar(make_entry("a", "standup"), make_entry("b", "Standup")) is False

    def test_duration_within_tolerance(self, make_entry) -> None:
        """Test that 59 seconds apart is still the same entry."""
        a = make_entry("a", duration=1800)
        b = make_entry("b", duration=1859)

        assert are_similar(a, b) is True

    def test_duration_boundary_is_exclusive(self, make_entry) -> None:
        """Test that exactly 60 seconds apart is a different entry."""
        a = make_entry("a", duration=1800)
        b = make_entry("b", duration=1860)

        assert are_similar(a, b) is False

    @pytest.mark.parametrize("days", [1, -1, 30])
    def test_different_day_never_matches(self, make_entry, days: int) -> None:
        """Test that entries on different days never match."""
        a = make_entry("a", day=date(2024, 1, 5))
        b = make_entry("b", day=date(2024, 1, 5) + timedelta(days=days))

        assert are_similar(a, b) is False

    def test_time_of_day_is_ignored(self) -> None:
        """Test that entries created from timestamps compare by day."""
        a = TimeEntry(
            id="a", description="Standup", date=datetime(2024, 1, 5, 8, 0), duration_in_seconds=900
        )
        b = TimeEntry(
            id="b", description="Standup", date=datetime(2024, 1, 5, 23, 59), duration_in_seconds=900
        )

        assert are_similar(a, b) is True

    @pytest.mark.parametrize(
        "other",
        [
            {"description": " Standup "},
            {"duration": 1830},
            {"duration": 1770},
            {"duration": 1860},
            {"description": "Retro"},
            {"day": date(2024, 1, 6)},
        ],
    )
    def test_symmetric(self, make_entry, other: dict) -> None:
        """Test that argument order never changes the outcome."""
        a = make_entry("a")
        b = make_entry("b", **other)

        assert are_similar(a, b) == are_similar(b, a)


class TestHasCounterpart:
    """Test has_counterpart functionality."""

    def test_empty_candidates(self, make_entry) -> None:
        assert has_counterpart(make_entry("a"), []) is False

    def test_any_match_is_enough(self, make_entry) -> None:
        candidates = [make_entry("x", description="Retro"), make_entry("y")]

        assert has_counterpart(make_entry("a"), candidates) is True
