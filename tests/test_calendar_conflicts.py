from datetime import datetime

from jobtrack.services.calendar_service import CalendarEvent, build_calendar, detect_time_conflicts


def event(event_id, start, duration=60):
    return CalendarEvent(id=event_id, title=f"Event {event_id}", start=start, duration=duration)


def test_overlapping_interviews_share_a_slot():
    events = [
        event(1, datetime(2026, 3, 2, 10, 0)),
        event(2, datetime(2026, 3, 2, 10, 30)),
    ]

    conflicts = detect_time_conflicts(events)

    # 10:00-11:00 covers slots 10:00 and 10:30; 10:30-11:30 floors to 10:00 and covers 10:00-11:00
    assert [c.time_slot for c in conflicts] == ["2026-03-02 10:00", "2026-03-02 10:30"]
    assert all(c.level == 2 for c in conflicts)


def test_back_to_back_interviews_do_not_conflict():
    events = [
        event(1, datetime(2026, 3, 2, 9, 0), duration=60),
        event(2, datetime(2026, 3, 2, 10, 0), duration=60),
    ]

    assert detect_time_conflicts(events) == []


def test_start_time_is_floored_to_the_hour():
    # 10:45 floors to 10:00, so the 10:00 slot of the first event is shared
    events = [
        event(1, datetime(2026, 3, 2, 10, 0), duration=30),
        event(2, datetime(2026, 3, 2, 10, 45), duration=15),
    ]

    conflicts = detect_time_conflicts(events)

    assert len(conflicts) == 1
    assert conflicts[0].time_slot == "2026-03-02 10:00"


def test_missing_duration_defaults_to_an_hour():
    events = [
        event(1, datetime(2026, 3, 2, 14, 0), duration=None),
        event(2, datetime(2026, 3, 2, 14, 30), duration=30),
    ]

    conflicts = detect_time_conflicts(events)

    assert "2026-03-02 14:30" in [c.time_slot for c in conflicts]


def test_same_event_is_counted_once_per_slot():
    events = [event(1, datetime(2026, 3, 2, 8, 0)), event(1, datetime(2026, 3, 2, 8, 0))]

    assert detect_time_conflicts(events) == []


def test_build_calendar_flags_conflicted_events():
    events = [
        event(1, datetime(2026, 3, 2, 10, 0)),
        event(2, datetime(2026, 3, 2, 10, 0)),
        event(3, datetime(2026, 3, 2, 10, 0)),
        event(4, datetime(2026, 3, 3, 16, 0)),
    ]

    calendar = build_calendar(events)
    by_id = {e["id"]: e for e in calendar["events"]}

    assert by_id[1]["isConflicted"] is True
    assert by_id[1]["conflictLevel"] == 3
    assert by_id[4]["isConflicted"] is False
    assert by_id[4]["conflictLevel"] == 0
    assert calendar["conflicts"][0]["timeSlot"] == "2026-03-02 10:00"
    assert [e["id"] for e in calendar["conflicts"][0]["events"]] == [1, 2, 3]
    assert by_id[1]["date"] == "2026-03-02"
    assert by_id[1]["time"] == "10:00"
