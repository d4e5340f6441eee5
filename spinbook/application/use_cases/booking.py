from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime, time, timedelta
from typing import Any

from spinbook.application.exceptions import ConflictError
from spinbook.application.ports.calendar import CalendarPort
from spinbook.application.use_cases.availability import AvailabilityUseCase
from spinbook.application.utils.booking_id import generate_booking_id
from spinbook.application.utils.event_description import (
    build_event_description,
    build_event_metadata,
    build_event_summary,
)
from spinbook.application.utils.request_validation import parse_booking_request
from spinbook.domain.entities.booking import BookingConfirmation, BookingRequest
from spinbook.domain.entities.calendar_event import NewCalendarEvent
from spinbook.domain.entities.slot import format_slots
from spinbook.domain.entities.studio import StudioConfig


class BookingUseCase:
    """Re-check availability, then write one calendar event covering the requested span.

    The check and the write are separate calls against the calendar service, so two
    concurrent requests for the same slot can both succeed. There is no lock here.
    """

    def __init__(
        self,
        calendar: CalendarPort,
        availability: AvailabilityUseCase,
        studio: StudioConfig,
        id_factory: Callable[[], str] = generate_booking_id,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._calendar = calendar
        self._availability = availability
        self._studio = studio
        self._id_factory = id_factory
        self._clock = clock or (lambda: datetime.now(self._studio.timezone))
        self._logger = logging.getLogger(__name__)

    def execute(self, payload: dict[str, Any]) -> BookingConfirmation:
        return self.create(parse_booking_request(payload))

    def create(self, request: BookingRequest) -> BookingConfirmation:
        busy = set(self._availability.busy_slots(request.date))
        # the written event covers the whole span, gap hours included
        conflicts = sorted(busy.intersection(range(*request.span)))
        if conflicts:
            self._logger.info(
                "Booking rejected by availability pre-check",
                extra={"date": request.date.isoformat(), "slots": conflicts, "reason": "pre_check"},
            )
            raise ConflictError(
                conflicts,
                message=f"The following slots are no longer available: {format_slots(conflicts)}.",
            )

        booking_id = self._id_factory()
        event = self._build_event(request, booking_id)

        try:
            created = self._calendar.create_event(event)
        except ConflictError as e:
            self._logger.warning(
                "Booking conflict detected at write time",
                extra={
                    "date": request.date.isoformat(),
                    "slots": list(request.slots),
                    "booking_id": booking_id,
                    "reason": "write_conflict",
                },
            )
            raise ConflictError(list(request.slots), at_write=True, detail=e.detail) from e

        self._logger.info(
            "Booking created",
            extra={"booking_id": booking_id, "event_id": created.id, "date": request.date.isoformat()},
        )
        return BookingConfirmation(booking_id=booking_id, request=request, event=created)

    def _build_event(self, request: BookingRequest, booking_id: str) -> NewCalendarEvent:
        start_hour, end_hour = request.span
        midnight = datetime.combine(request.date, time(0))
        # end_hour may be 24, i.e. midnight of the next day
        start = midnight + timedelta(hours=start_hour)
        end = midnight + timedelta(hours=end_hour)
        return NewCalendarEvent(
            summary=build_event_summary(request, self._studio),
            description=build_event_description(request, booking_id, self._studio, self._clock()),
            start=start,
            end=end,
            timezone=self._studio.timezone_name,
            metadata=build_event_metadata(request, booking_id),
        )
