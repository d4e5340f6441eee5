from __future__ import annotations

import itertools
import logging
import threading
from datetime import datetime, time, timedelta
from zoneinfo import ZoneInfo

from spinbook.application.exceptions import ConflictError
from spinbook.application.ports.calendar import CalendarPort
from spinbook.domain.entities.calendar_event import CalendarEvent, CalendarInfo, CreatedEvent, NewCalendarEvent


class MockCalendar(CalendarPort):
    """In-process calendar used in dev/local mode and by tests.

    With ``reject_overlaps`` the calendar refuses overlapping inserts with a 409-style
    ConflictError, standing in for a calendar that enforces exclusivity itself.
    """

    def __init__(
        self,
        calendar_id: str = "dev@spinbook.local",
        timezone: str = "America/Santiago",
        reject_overlaps: bool = False,
    ) -> None:
        self._calendar_id = calendar_id
        self._timezone = timezone
        self._reject_overlaps = reject_overlaps
        self._events: dict[str, CalendarEvent] = {}
        self._ids = itertools.count(1)
        self._lock = threading.Lock()
        self._logger = logging.getLogger(__name__)

    def add_event(self, event: CalendarEvent) -> None:
        with self._lock:
            self._events[event.id] = event

    @property
    def events(self) -> list[CalendarEvent]:
        with self._lock:
            return list(self._events.values())

    def list_events(self, time_min: datetime, time_max: datetime, timezone: str) -> list[CalendarEvent]:
        tz = ZoneInfo(timezone)
        found = [e for e in self.events if self._overlaps(e, time_min, time_max, tz)]
        return sorted(found, key=lambda e: self._start_of(e, tz))

    def create_event(self, event: NewCalendarEvent) -> CreatedEvent:
        tz = ZoneInfo(event.timezone)
        start = event.start.replace(tzinfo=tz)
        end = event.end.replace(tzinfo=tz)
        with self._lock:
            if self._reject_overlaps:
                clashing = [e for e in self._events.values() if self._overlaps(e, start, end, tz)]
                if clashing:
                    raise ConflictError(detail=f"overlaps {clashing[0].id}")

            event_id = self._next_id()
            html_link = f"https://calendar.local/event?eid={event_id}"
            self._events[event_id] = CalendarEvent(
                id=event_id,
                summary=event.summary,
                start=start,
                end=end,
                description=event.description,
                html_link=html_link,
                metadata=dict(event.metadata),
            )
        self._logger.info(
            "Mock calendar event created",
            extra={"event_id": event_id, "booking_id": event.metadata.get("bookingId")},
        )
        return CreatedEvent(id=event_id, html_link=html_link, summary=event.summary, start=start, end=end)

    def _next_id(self) -> str:
        # skips ids already taken through add_event
        while True:
            event_id = f"mock_event_{next(self._ids)}"
            if event_id not in self._events:
                return event_id

    def get_calendar_info(self) -> CalendarInfo:
        return CalendarInfo(
            calendar_id=self._calendar_id,
            summary="SpinBook local calendar",
            timezone=self._timezone,
            access_role="owner",
        )

    @staticmethod
    def _start_of(event: CalendarEvent, tz: ZoneInfo) -> datetime:
        if event.start is not None:
            return event.start
        return datetime.combine(event.start_date, time(0), tzinfo=tz)

    @classmethod
    def _overlaps(cls, event: CalendarEvent, time_min: datetime, time_max: datetime, tz: ZoneInfo) -> bool:
        if event.start is not None and event.end is not None:
            return event.start < time_max and event.end > time_min
        if event.start_date is None:
            return False
        end_date = event.end_date or event.start_date + timedelta(days=1)
        start = datetime.combine(event.start_date, time(0), tzinfo=tz)
        end = datetime.combine(end_date, time(0), tzinfo=tz)
        return start < time_max and end > time_min
