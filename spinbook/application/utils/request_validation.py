from __future__ import annotations

from typing import Any

from spinbook.application.exceptions import ValidationError
from spinbook.application.utils.date_parser import parse_booking_date
from spinbook.domain.entities.booking import BookingRequest, Customer
from spinbook.domain.entities.slot import FIRST_SLOT, LAST_SLOT, is_valid_slot

CUSTOMER_FIELDS = ("name", "email", "phone")


def parse_slots(value: object) -> tuple[int, ...]:
    if not isinstance(value, list) or not value:
        raise ValidationError("slots", "Slots are required and must be a non-empty array.")
    if not all(is_valid_slot(v) for v in value):
        raise ValidationError("slots", f"All slots must be valid hour numbers ({FIRST_SLOT}-{LAST_SLOT}).")
    return tuple(sorted(set(value)))


def parse_customer(value: object) -> Customer:
    if not isinstance(value, dict):
        raise ValidationError("userData", "User data is required.")
    for key in CUSTOMER_FIELDS:
        raw = value.get(key)
        if not isinstance(raw, str) or not raw.strip():
            raise ValidationError(f"userData.{key}", f"User data is incomplete: {key} is required.")
    return Customer(
        name=value["name"].strip(),
        email=value["email"].strip(),
        phone=value["phone"].strip(),
    )


def parse_services(value: object) -> tuple[str, ...]:
    if value is None:
        return ()
    if not isinstance(value, list) or not all(isinstance(s, str) for s in value):
        raise ValidationError("services", "Services must be a list of strings.")
    return tuple(s.strip() for s in value if s.strip())


def parse_observations(value: object) -> str | None:
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValidationError("observations", "Observations must be a string.")
    return value.strip() or None


def parse_booking_request(payload: dict[str, Any]) -> BookingRequest:
    """Validate a raw booking payload. Raises ValidationError naming the first bad field."""
    booking_date = parse_booking_date(payload.get("date"))
    slots = parse_slots(payload.get("slots"))
    customer = parse_customer(payload.get("userData"))
    return BookingRequest(
        date=booking_date,
        slots=slots,
        customer=customer,
        services=parse_services(payload.get("services")),
        observations=parse_observations(payload.get("observations")),
    )
