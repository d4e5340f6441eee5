from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from spinbook.domain.entities.calendar_event import CreatedEvent


@dataclass(frozen=True)
class Customer:
    name: str
    email: str
    phone: str


@dataclass(frozen=True)
class BookingRequest:
    date: date
    slots: tuple[int, ...]  # sorted, distinct
    customer: Customer
    services: tuple[str, ...] = ()
    observations: str | None = None

    @property
    def span(self) -> tuple[int, int]:
        # end is exclusive
        return self.slots[0], self.slots[-1] + 1

    @property
    def span_extended(self) -> bool:
        start, end = self.span
        return end - start != len(self.slots)


@dataclass(frozen=True)
class BookingConfirmation:
    booking_id: str
    request: BookingRequest
    event: CreatedEvent

    @property
    def span(self) -> tuple[int, int]:
        return self.request.span

    @property
    def span_extended(self) -> bool:
        return self.request.span_extended
