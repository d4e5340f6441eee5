from __future__ import annotations

from dataclasses import dataclass
from zoneinfo import ZoneInfo


@dataclass(frozen=True)
class StudioConfig:
    name: str
    timezone: ZoneInfo
    calendar_id: str
    address: str | None = None
    email: str | None = None
    phone: str | None = None
    all_day_busy_start_hour: int = 0
    all_day_busy_end_hour: int = 24  # exclusive

    @property
    def timezone_name(self) -> str:
        return self.timezone.key

    @property
    def all_day_busy_hours(self) -> range:
        return range(self.all_day_busy_start_hour, self.all_day_busy_end_hour)
