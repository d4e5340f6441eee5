from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime


@dataclass(frozen=True)
class CalendarEvent:
    """An event as listed by the calendar service.

    Timed events carry timezone-aware ``start``/``end``. All-day events carry
    ``start_date``/``end_date`` instead, with ``end_date`` exclusive.
    """

    id: str
    summary: str = ""
    status: str = "confirmed"
    start: datetime | None = None
    end: datetime | None = None
    start_date: date | None = None
    end_date: date | None = None
    description: str | None = None
    html_link: str | None = None
    metadata: dict[str, str] = field(default_factory=dict)

    @property
    def is_cancelled(self) -> bool:
        return self.status == "cancelled"

    @property
    def is_all_day(self) -> bool:
        return self.start is None and self.start_date is not None


@dataclass(frozen=True)
class NewCalendarEvent:
    """Event body submitted for creation.

    ``start``/``end`` are naive local wall-clock values; ``timezone`` is the IANA
    name sent alongside them so the calendar service does the conversion.
    """

    summary: str
    description: str
    start: datetime
    end: datetime
    timezone: str
    metadata: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class CreatedEvent:
    id: str
    html_link: str | None
    summary: str
    start: datetime
    end: datetime


@dataclass(frozen=True)
class CalendarInfo:
    calendar_id: str
    summary: str | None
    timezone: str | None
    access_role: str | None
