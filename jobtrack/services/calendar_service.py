"""
Calendar Service

Turns interviews into calendar events and flags events that overlap.

Each event is bucketed into 30-minute slots starting from its start time
floored to the hour; any slot holding more than one distinct event is a
conflict.
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional

from jobtrack.models.interview import Interview
from jobtrack.models.job_application import JobApplication

SLOT_MINUTES = 30
DEFAULT_DURATION_MINUTES = 60


@dataclass
class CalendarEvent:
    id: int
    title: str
    start: datetime
    duration: Optional[int] = None
    status: Optional[str] = None
    details: Dict[str, Any] = field(default_factory=dict)

    @property
    def end(self) -> datetime:
        return self.start + timedelta(minutes=self.duration or DEFAULT_DURATION_MINUTES)


@dataclass
class Conflict:
    time_slot: str
    events: List[CalendarEvent]

    @property
    def level(self) -> int:
        return len(self.events)


def event_from_interview(
    interview: Interview,
    username: Optional[str] = None,
    application: Optional[JobApplication] = None,
) -> CalendarEvent:
    company = interview.company_name or (application.company_name if application else None)
    position = interview.position_title or (application.position_title if application else None)
    return CalendarEvent(
        id=interview.id,
        title=f"{company} - {position}",
        start=interview.scheduled_date,
        duration=interview.duration,
        status=interview.status,
        details={
            "interview_type": interview.interview_type,
            "interviewer_name": interview.interviewer_name,
            "location": interview.location,
            "meeting_link": interview.meeting_link,
            "duration": interview.duration or DEFAULT_DURATION_MINUTES,
            "user_id": interview.user_id,
            "username": username,
        },
    )


def _slots(event: CalendarEvent):
    slot = event.start.replace(minute=0, second=0, microsecond=0)
    end = event.end
    while slot < end:
        yield slot
        slot += timedelta(minutes=SLOT_MINUTES)


def detect_time_conflicts(events: List[CalendarEvent]) -> List[Conflict]:
    """Conflicts in first-seen slot order."""
    buckets: Dict[str, List[CalendarEvent]] = {}
    for event in events:
        for slot in _slots(event):
            bucket = buckets.setdefault(slot.strftime("%Y-%m-%d %H:%M"), [])
            if all(existing.id != event.id for existing in bucket):
                bucket.append(event)

    return [Conflict(time_slot=key, events=bucket) for key, bucket in buckets.items() if len(bucket) > 1]


def _event_dict(event: CalendarEvent) -> Dict[str, Any]:
    return {
        "id": event.id,
        "title": event.title,
        "date": event.start.strftime("%Y-%m-%d"),
        "time": event.start.strftime("%H:%M"),
        "type": "interview",
        "status": event.status,
        "details": event.details,
    }


def build_calendar(events: List[CalendarEvent]) -> Dict[str, Any]:
    """Events annotated with isConflicted/conflictLevel, plus the conflict groups."""
    conflicts = detect_time_conflicts(events)

    annotated = []
    for event in events:
        entry = _event_dict(event)
        group = next(
            (c for c in conflicts if any(e.id == event.id for e in c.events)),
            None,
        )
        entry["isConflicted"] = group is not None
        entry["conflictLevel"] = group.level if group else 0
        annotated.append(entry)

    return {
        "events": annotated,
        "conflicts": [
            {
                "timeSlot": conflict.time_slot,
                "events": [_event_dict(e) for e in conflict.events],
                "conflictLevel": conflict.level,
            }
            for conflict in conflicts
        ],
    }
