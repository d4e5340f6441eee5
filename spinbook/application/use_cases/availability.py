from __future__ import annotations

import logging
from datetime import date, datetime, timedelta
from zoneinfo import ZoneInfo

from spinbook.application.ports.calendar import CalendarPort
from spinbook.application.utils.date_parser import day_window, parse_booking_date
from spinbook.domain.entities.calendar_event import CalendarEvent
from spinbook.domain.entities.slot import HOURS_PER_DAY
from spinbook.domain.entities.studio import StudioConfig


def _to_local(value: datetime, timezone: ZoneInfo) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone)
    return value.astimezone(timezone)


def timed_event_hours(event: CalendarEvent, day: date, timezone: ZoneInfo) -> set[int]:
    """Hours of ``day`` occupied by a timed event.

    An end with a non-zero minute also occupies its own hour. Events that
    started on an earlier day or end on a later day are clipped to ``day``.
    """
    if event.start is None or event.end is None:
        return set()
    start = _to_local(event.start, timezone)
    end = _to_local(event.end, timezone)
    if end.date() < day or start.date() > day or end <= start:
        return set()

    start_hour = start.hour if start.date() == day else 0
    if end.date() > day:
        end_hour = HOURS_PER_DAY
    else:
        end_hour = end.hour
    hours = set(range(start_hour, end_hour))
    if end.date() == day and (end.minute or end.second) and end_hour < HOURS_PER_DAY:
        hours.add(end_hour)
    return hours


def all_day_event_hours(event: CalendarEvent, day: date, busy_hours: range) -> set[int]:
    if event.start_date is None:
        return set()
    end_date = event.end_date or event.start_date + timedelta(days=1)
    if not (event.start_date <= day < end_date):
        return set()
    return set(busy_hours)


def busy_slots_from_events(events: list[CalendarEvent], day: date, studio: StudioConfig) -> list[int]:
    busy: set[int] = set()
    for event in events:
        if event.is_cancelled:
            continue
        if event.is_all_day:
            busy |= all_day_event_hours(event, day, studio.all_day_busy_hours)
        else:
            busy |= timed_event_hours(event, day, studio.timezone)
    return sorted(h for h in busy if 0 <= h < HOURS_PER_DAY)


class AvailabilityUseCase:
    def __init__(self, calendar: CalendarPort, studio: StudioConfig) -> None:
        self._calendar = calendar
        self._studio = studio
        self._logger = logging.getLogger(__name__)

    def execute(self, raw_date: object) -> list[int]:
        """Busy slots for a YYYY-MM-DD date string."""
        return self.busy_slots(parse_booking_date(raw_date))

    def busy_slots(self, day: date) -> list[int]:
        time_min, time_max = day_window(day, self._studio.timezone)
        # Calendar errors propagate: availability is never reported as open on failure.
        events = self._calendar.list_events(time_min, time_max, self._studio.timezone_name)
        busy = busy_slots_from_events(events, day, self._studio)
        self._logger.info(
            "Availability computed",
            extra={"date": day.isoformat(), "slots": busy, "reason": f"{len(events)} events"},
        )
        return busy
