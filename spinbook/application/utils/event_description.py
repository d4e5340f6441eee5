from __future__ import annotations

from datetime import datetime

from spinbook.domain.entities.booking import BookingRequest
from spinbook.domain.entities.slot import format_slots
from spinbook.domain.entities.studio import StudioConfig


def build_event_summary(request: BookingRequest, studio: StudioConfig) -> str:
    return f"{studio.name} booking - {request.customer.name}"


def build_event_description(
    request: BookingRequest,
    booking_id: str,
    studio: StudioConfig,
    generated_at: datetime,
) -> str:
    """Plain-text block stored on the calendar event.

    Lists the slots the customer actually picked; the booked span is shown
    separately when it covers unrequested gap hours.
    """
    start, end = request.span
    lines = [
        f"{studio.name.upper()} BOOKING",
        "",
        "== CUSTOMER ==",
        f"Name: {request.customer.name}",
        f"Email: {request.customer.email}",
        f"Phone: {request.customer.phone}",
        "",
        "== BOOKING ==",
        f"Date: {request.date.isoformat()}",
        f"Slots: {format_slots(list(request.slots))}",
    ]
    if request.span_extended:
        lines.append(f"Booked span: {start:02d}:00-{end:02d}:00 (includes hours between selected slots)")
    lines.append(f"Booking ID: {booking_id}")

    if request.services:
        lines += ["", "== SERVICES ==", *[f"- {s}" for s in request.services]]
    if request.observations:
        lines += ["", "== OBSERVATIONS ==", request.observations]
    if studio.address:
        lines += ["", f"Location: {studio.address}"]

    lines += ["", f"Generated: {generated_at.strftime('%Y-%m-%d %H:%M')} ({studio.timezone_name})"]
    return "\n".join(lines)


def build_event_metadata(request: BookingRequest, booking_id: str) -> dict[str, str]:
    metadata = {
        "bookingId": booking_id,
        "slots": ",".join(str(s) for s in request.slots),
        "customerName": request.customer.name,
        "customerEmail": request.customer.email,
        "customerPhone": request.customer.phone,
    }
    if request.services:
        metadata["services"] = ", ".join(request.services)
    if request.observations:
        # private property values are capped at 1024 characters
        metadata["observations"] = request.observations[:1024]
    return metadata
