from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime

from spinbook.domain.entities.calendar_event import CalendarEvent, CalendarInfo, CreatedEvent, NewCalendarEvent


class CalendarPort(ABC):
    """Calendar service capability.

    Implementations raise the upstream errors from ``spinbook.application.exceptions``
    (never raw transport errors).
    """

    @abstractmethod
    def list_events(self, time_min: datetime, time_max: datetime, timezone: str) -> list[CalendarEvent]:
        """List events overlapping [time_min, time_max), recurring events expanded."""
        raise NotImplementedError

    @abstractmethod
    def create_event(self, event: NewCalendarEvent) -> CreatedEvent:
        """Insert an event without sending notifications."""
        raise NotImplementedError

    @abstractmethod
    def get_calendar_info(self) -> CalendarInfo:
        """Describe the configured calendar (summary, timezone, access role)."""
        raise NotImplementedError
