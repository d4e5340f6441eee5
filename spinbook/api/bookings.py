from __future__ import annotations

from datetime import date
from typing import Any

from fastapi import APIRouter, Body, Depends, Query, Response

from spinbook.api.schemas import BookingSchema, CreateEventResponseSchema, EventSchema, SpanSchema
from spinbook.application.exceptions import ValidationError
from spinbook.application.use_cases.availability import AvailabilityUseCase
from spinbook.application.use_cases.booking import BookingUseCase
from spinbook.application.utils.date_parser import parse_booking_date
from spinbook.application.utils.request_validation import parse_booking_request
from spinbook.domain.entities.booking import BookingConfirmation, BookingRequest
from spinbook.wiring.dependencies import get_availability_use_case, get_booking_use_case


router = APIRouter()


# Input dependencies are declared ahead of the use case ones so bad input
# is rejected with 400 even when the calendar cannot be wired.
def validated_date(raw_date: str | None = Query(None, alias="date")) -> date:
    return parse_booking_date(raw_date)


def validated_booking(payload: Any = Body(None)) -> BookingRequest:
    if not isinstance(payload, dict):
        raise ValidationError("body", "Request body must be a JSON object.")
    return parse_booking_request(payload)


def confirmation_message(confirmation: BookingConfirmation) -> str:
    message = "Booking confirmed! Your reservation has been registered in the calendar."
    if confirmation.span_extended:
        start, end = confirmation.span
        message += (
            f" Your session runs continuously from {start:02d}:00 to {end:02d}:00,"
            " including the hours between the slots you selected."
        )
    return message


@router.get("/get-events", response_model=list[int])
def get_events(
    day: date = Depends(validated_date),
    uc: AvailabilityUseCase = Depends(get_availability_use_case),
) -> list[int]:
    return uc.busy_slots(day)


@router.post("/create-event", status_code=201, response_model=CreateEventResponseSchema)
def create_event(
    booking: BookingRequest = Depends(validated_booking),
    uc: BookingUseCase = Depends(get_booking_use_case),
) -> CreateEventResponseSchema:
    confirmation = uc.create(booking)
    start, end = confirmation.span
    return CreateEventResponseSchema(
        message=confirmation_message(confirmation),
        booking_id=confirmation.booking_id,
        event=EventSchema(
            id=confirmation.event.id,
            html_link=confirmation.event.html_link,
            summary=confirmation.event.summary,
            start=confirmation.event.start,
            end=confirmation.event.end,
        ),
        booking=BookingSchema(
            date=confirmation.request.date.isoformat(),
            slots=list(confirmation.request.slots),
            span=SpanSchema(start=start, end=end),
            span_extended=confirmation.span_extended,
        ),
    )


@router.options("/get-events", include_in_schema=False)
@router.options("/create-event", include_in_schema=False)
def preflight() -> Response:
    return Response(status_code=200)
