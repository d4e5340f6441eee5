from __future__ import annotations

import re
from datetime import date, datetime, time
from zoneinfo import ZoneInfo

from spinbook.application.exceptions import ValidationError

ISO_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def parse_booking_date(value: object, field: str = "date") -> date:
    """Parse a strict YYYY-MM-DD string into a date."""
    if value is None or value == "":
        raise ValidationError(field, "Date parameter is required.")
    if not isinstance(value, str) or not ISO_DATE_RE.match(value):
        raise ValidationError(field, "Date must be in YYYY-MM-DD format.")
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise ValidationError(field, f"Date {value} is not a valid calendar date.") from None


def day_window(day: date, timezone: ZoneInfo) -> tuple[datetime, datetime]:
    """Return the [00:00:00, 23:59:59) window of ``day`` in ``timezone``."""
    start = datetime.combine(day, time(0, 0, 0), tzinfo=timezone)
    end = datetime.combine(day, time(23, 59, 59), tzinfo=timezone)
    return start, end
