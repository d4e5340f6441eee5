"""Shared test constants and calendar event builders."""

from __future__ import annotations

from datetime import date, datetime
from zoneinfo import ZoneInfo

from spinbook.domain.entities.calendar_event import CalendarEvent

TZ_NAME = "America/Santiago"
TZ = ZoneInfo(TZ_NAME)
CALENDAR_ID = "studio@group.calendar.google.com"
DAY = date(2025, 3, 10)


def timed_event(
    event_id: str,
    start: datetime,
    end: datetime,
    status: str = "confirmed",
) -> CalendarEvent:
    """Helper to create a timed event; naive datetimes are taken as studio time."""
    if start.tzinfo is None:
        start = start.replace(tzinfo=TZ)
    if end.tzinfo is None:
        end = end.replace(tzinfo=TZ)
    return CalendarEvent(id=event_id, summary=f"Event {event_id}", status=status, start=start, end=end)


def all_day_event(event_id: str, start_date: date, end_date: date | None = None) -> CalendarEvent:
    return CalendarEvent(id=event_id, summary="Closed", start_date=start_date, end_date=end_date)
