"""
Tests for the free slot calculator.
"""

from datetime import datetime, timedelta, timezone

from freeslotfinder.domain.models import Event
from freeslotfinder.domain.slot_calculator import GRID_STEP, FreeSlotCalculator, find_free_slots

from .factories import at, make_event


def _starts(slots):
    return [slot.start.format("HH:mm") for slot in slots]


class TestFreeSlotCalculator:
    """Tests for FreeSlotCalculator."""

    def test_no_events_returns_every_grid_step(self):
        """Window 09:00-10:00, 30 minutes, no events: two back-to-back slots."""
        slots = find_free_slots([], at("09:00"), at("10:00"), timedelta(minutes=30), [1])

        assert [(s.start, s.end) for s in slots] == [
            (at("09:00"), at("09:30")),
            (at("09:30"), at("10:00")),
        ]

    def test_overlapping_event_excludes_slots(self):
        """An event 09:30-10:30 leaves only the slots touching it."""
        events = [make_event("09:30", "10:30")]

        slots = find_free_slots(events, at("09:00"), at("11:00"), timedelta(minutes=30), [1])

        assert [(s.start, s.end) for s in slots] == [
            (at("09:00"), at("09:30")),
            (at("10:30"), at("11:00")),
        ]

    def test_event_covering_window_returns_nothing(self):
        events = [make_event("09:00", "10:00")]

        slots = find_free_slots(events, at("09:00"), at("10:00"), timedelta(minutes=30), [1])

        assert slots == []

    def test_events_of_different_participants_combine(self):
        """Two participants each busy for half the window block all of it."""
        events = [
            make_event("09:00", "09:30", participants=[1]),
            make_event("09:30", "10:00", participants=[2]),
        ]

        slots = find_free_slots(events, at("09:00"), at("10:00"), timedelta(minutes=30), [1, 2])

        assert slots == []

    def test_cancelled_event_never_blocks(self):
        events = [make_event("09:00", "10:00", cancelled=True)]

        slots = find_free_slots(events, at("09:00"), at("10:00"), timedelta(minutes=30), [1])

        assert len(slots) == 2

    def test_event_without_required_participant_never_blocks(self):
        events = [make_event("09:00", "10:00", participants=[2])]

        slots = find_free_slots(events, at("09:00"), at("10:00"), timedelta(minutes=30), [1])

        assert len(slots) == 2

    def test_event_outside_window_never_blocks(self):
        events = [make_event("08:00", "08:30")]

        slots = find_free_slots(events, at("09:00"), at("10:00"), timedelta(minutes=30), [1])

        assert len(slots) == 2

    def test_empty_participants_yield_full_grid(self):
        """Without required participants every grid step is free."""
        events = [make_event("09:00", "11:00", participants=[1, 2, 3])]

        slots = find_free_slots(events, at("09:00"), at("11:00"), timedelta(hours=1), [])

        assert _starts(slots) == ["09:00", "09:30", "10:00"]
        assert all(s.end - s.start == timedelta(hours=1) for s in slots)

    def test_step_is_independent_of_duration(self):
        """A two hour meeting still advances the cursor by 30 minutes."""
        slots = find_free_slots([], at("09:00"), at("12:00"), timedelta(hours=2), [1])

        assert _starts(slots) == ["09:00", "09:30", "10:00"]
        assert GRID_STEP == timedelta(minutes=30)

    def test_short_duration_leaves_gaps_between_slots(self):
        """A 20 minute meeting is sampled every 30 minutes, not back-to-back."""
        slots = find_free_slots([], at("09:00"), at("10:00"), timedelta(minutes=20), [1])

        assert [(s.start, s.end) for s in slots] == [
            (at("09:00"), at("09:20")),
            (at("09:30"), at("09:50")),
        ]

    def test_gap_between_events_contains_grid_aligned_slots(self):
        events = [
            make_event("09:00", "10:00"),
            make_event("11:30", "12:00"),
        ]

        slots = find_free_slots(events, at("09:00"), at("12:00"), timedelta(hours=1), [1])

        assert _starts(slots) == ["10:00", "10:30"]

    def test_off_grid_gap_is_not_reported(self):
        """A free window that only exists between grid steps is missed."""
        events = [
            make_event("09:00", "09:15"),
            make_event("09:45", "10:00"),
        ]

        slots = find_free_slots(events, at("09:00"), at("10:00"), timedelta(minutes=30), [1])

        assert slots == []

    def test_grid_starts_at_window_start(self):
        slots = find_free_slots([], at("09:10"), at("10:10"), timedelta(minutes=30), [1])

        assert _starts(slots) == ["09:10", "09:40"]

    def test_overlapping_events_are_unioned(self):
        events = [
            make_event("09:00", "10:00"),
            make_event("09:30", "10:30", participants=[1, 2]),
        ]

        slots = find_free_slots(events, at("09:00"), at("11:00"), timedelta(minutes=30), [1])

        assert _starts(slots) == ["10:30"]

    def test_malformed_event_is_inert(self):
        """Events ending before they start never block a slot."""
        events = [
            make_event("10:10", "10:05"),
            make_event("09:15", "09:15"),
        ]

        slots = find_free_slots(events, at("09:00"), at("11:00"), timedelta(minutes=30), [1])

        assert _starts(slots) == ["09:00", "09:30", "10:00", "10:30"]

    def test_non_positive_duration_returns_nothing(self):
        assert find_free_slots([], at("09:00"), at("10:00"), timedelta(0), [1]) == []
        assert find_free_slots([], at("09:00"), at("10:00"), timedelta(minutes=-30), [1]) == []

    def test_inverted_or_empty_window_returns_nothing(self):
        assert find_free_slots([], at("10:00"), at("09:00"), timedelta(minutes=30), [1]) == []
        assert find_free_slots([], at("09:00"), at("09:00"), timedelta(minutes=30), [1]) == []

    def test_duration_longer_than_window_returns_nothing(self):
        assert find_free_slots([], at("09:00"), at("10:00"), timedelta(minutes=90), [1]) == []

    def test_duration_equal_to_window_fits_once(self):
        slots = find_free_slots([], at("09:00"), at("10:00"), timedelta(hours=1), [1])

        assert _starts(slots) == ["09:00"]

    def test_accepts_stdlib_datetimes_and_generators(self):
        start = datetime(2024, 3, 1, 9, 0, tzinfo=timezone.utc)
        end = datetime(2024, 3, 1, 10, 0, tzinfo=timezone.utc)
        events = (e for e in [make_event("09:00", "09:30")])

        slots = FreeSlotCalculator().find_free_slots(
            events=events,
            window_start=start,
            window_end=end,
            duration=timedelta(minutes=30),
            participant_ids=[1],
        )

        assert [s.start for s in slots] == [at("09:30")]

    def test_slots_carry_participants(self):
        slots = find_free_slots([], at("09:00"), at("09:30"), timedelta(minutes=30), [3, 1, 3])

        assert slots[0].participants == [1, 3]

    def test_inputs_are_not_mutated(self):
        events = [make_event("09:30", "10:00"), make_event("09:00", "09:15")]
        participants = [1]
        snapshot = list(events)

        find_free_slots(events, at("09:00"), at("11:00"), timedelta(minutes=30), participants)

        assert events == snapshot
        assert participants == [1]

    def test_naive_datetimes_are_treated_as_utc(self):
        """Events and window given as naive datetimes compare as UTC."""
        events = [
            Event(
                start=datetime(2024, 3, 1, 9, 30),
                end=datetime(2024, 3, 1, 10, 30),
                participant_user_ids=frozenset({1}),
            )
        ]

        slots = find_free_slots(
            events,
            datetime(2024, 3, 1, 9, 0),
            datetime(2024, 3, 1, 11, 0),
            timedelta(minutes=30),
            [1],
        )

        assert [(s.start, s.end) for s in slots] == [
            (at("09:00"), at("09:30")),
            (at("10:30"), at("11:00")),
        ]
