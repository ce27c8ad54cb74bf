"""
Tests for domain models.
"""

import pytest

from freeslotfinder.domain.models import Event, TimeRange, TimeSlot, intervals_overlap

from .factories import at, make_event


class TestIntervalsOverlap:
    """Tests for the half-open overlap predicate."""

    def test_partial_overlap(self):
        """Intervals sharing some time overlap, in either order."""
        assert intervals_overlap(at("09:00"), at("10:00"), at("09:30"), at("10:30"))
        assert intervals_overlap(at("09:30"), at("10:30"), at("09:00"), at("10:00"))

    def test_containment(self):
        """An interval inside another overlaps it."""
        assert intervals_overlap(at("09:00"), at("12:00"), at("10:00"), at("10:30"))

    def test_touching_endpoints_do_not_overlap(self):
        """Back-to-back intervals share a boundary but do not conflict."""
        assert not intervals_overlap(at("09:00"), at("10:00"), at("10:00"), at("11:00"))
        assert not intervals_overlap(at("10:00"), at("11:00"), at("09:00"), at("10:00"))

    def test_disjoint(self):
        assert not intervals_overlap(at("09:00"), at("09:30"), at("11:00"), at("12:00"))


class TestTimeRange:
    """Tests for TimeRange model."""

    def test_create_valid_time_range(self):
        """Test creating a valid time range."""
        tr = TimeRange(start=at("09:00"), end=at("17:00"))

        assert tr.start == at("09:00")
        assert tr.end == at("17:00")
        assert tr.duration_minutes() == 480  # 8 hours

    def test_invalid_time_range_raises_error(self):
        """Test that creating an invalid time range raises ValueError."""
        with pytest.raises(ValueError, match="Start time .* must be before end time"):
            TimeRange(start=at("17:00"), end=at("09:00"))

    def test_overlaps(self):
        """Test overlap detection."""
        tr1 = TimeRange(start=at("09:00"), end=at("12:00"))
        tr2 = TimeRange(start=at("11:00"), end=at("14:00"))
        tr3 = TimeRange(start=at("12:00"), end=at("17:00"))

        assert tr1.overlaps(tr2)
        assert tr2.overlaps(tr1)
        assert not tr1.overlaps(tr3)


class TestEvent:
    """Tests for Event model."""

    def test_inverted_event_is_accepted(self):
        """Events do not validate start < end."""
        event = make_event("10:30", "10:00")

        assert event.start > event.end

    def test_involves_any(self):
        event = make_event("09:00", "10:00", participants=[1, 2])

        assert event.involves_any({2, 5})
        assert not event.involves_any({3, 4})
        assert not event.involves_any(set())

    def test_overlaps_window(self):
        event = make_event("09:30", "10:30")

        assert event.overlaps(at("09:00"), at("10:00"))
        assert not event.overlaps(at("10:30"), at("11:00"))

    def test_is_immutable(self):
        event = make_event("09:00", "10:00")

        with pytest.raises(AttributeError):
            event.cancelled = True  # type: ignore[misc]

    def test_defaults(self):
        event = Event(start=at("09:00"), end=at("10:00"))

        assert event.cancelled is False
        assert event.participant_user_ids == frozenset()
        assert event.id is None


class TestTimeSlot:
    """Tests for TimeSlot model."""

    def test_to_dict(self):
        """Slots serialize to the calendar API's camelCase shape."""
        slot = TimeSlot(time_range=TimeRange(start=at("09:00"), end=at("09:30")), participants=[1])

        assert slot.to_dict() == {
            "startTime": "2024-03-01T09:00:00Z",
            "endTime": "2024-03-01T09:30:00Z",
        }

    def test_format_display(self):
        slot = TimeSlot(time_range=TimeRange(start=at("09:00"), end=at("09:30")), participants=[1])

        assert slot.format_display() == "Friday, 01.03.2024 | 09:00 – 09:30 UTC (30 min)"

    def test_start_end_shortcuts(self):
        slot = TimeSlot(time_range=TimeRange(start=at("09:00"), end=at("10:00")), participants=[])

        assert slot.start == at("09:00")
        assert slot.end == at("10:00")
