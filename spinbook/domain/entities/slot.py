from __future__ import annotations

FIRST_SLOT = 0
LAST_SLOT = 23
HOURS_PER_DAY = 24


def is_valid_slot(value: object) -> bool:
    # bool is an int subclass; True must not pass as hour 1
    return isinstance(value, int) and not isinstance(value, bool) and FIRST_SLOT <= value <= LAST_SLOT


def format_slot(hour: int) -> str:
    return f"{hour:02d}:00-{hour + 1:02d}:00"


def format_slots(hours: list[int]) -> str:
    return ", ".join(format_slot(h) for h in sorted(hours))
