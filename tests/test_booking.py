"""Tests for booking validation, conflict pre-check and event construction."""

from __future__ import annotations

import re
from datetime import datetime

import pytest

from spinbook.application.exceptions import ConflictError, ValidationError
from spinbook.application.use_cases.availability import AvailabilityUseCase
from spinbook.application.use_cases.booking import BookingUseCase
from spinbook.application.utils.booking_id import generate_booking_id
from spinbook.infrastructure.calendar.mock_calendar import MockCalendar
from tests.helpers import TZ, timed_event

BOOKING_ID_RE = re.compile(r"^SB-\d+-[A-Z0-9]{4}$")


def make_payload(**overrides):
    payload = {
        "date": "2025-03-10",
        "slots": [17, 18],
        "userData": {"name": "Ana", "email": "ana@x.com", "phone": "+56911112222"},
    }
    payload.update(overrides)
    return payload


def make_use_case(calendar, studio, availability_calendar=None) -> BookingUseCase:
    return BookingUseCase(
        calendar=calendar,
        availability=AvailabilityUseCase(availability_calendar or calendar, studio),
        studio=studio,
        id_factory=lambda: "SB-1741600000000-AB12",
        clock=lambda: datetime(2025, 3, 1, 10, 0, tzinfo=TZ),
    )


class NoCallCalendar(MockCalendar):
    """Fails the test if the booking flow reaches the calendar."""

    def list_events(self, time_min, time_max, timezone):
        raise AssertionError("calendar must not be called for invalid input")

    def create_event(self, event):
        raise AssertionError("calendar must not be called for invalid input")


def test_booking_creates_one_event_for_contiguous_slots(studio, calendar):
    confirmation = make_use_case(calendar, studio).execute(make_payload())

    assert confirmation.booking_id == "SB-1741600000000-AB12"
    assert confirmation.span == (17, 19)
    assert not confirmation.span_extended
    assert len(calendar.events) == 1
    event = calendar.events[0]
    assert event.start == datetime(2025, 3, 10, 17, tzinfo=TZ)
    assert event.end == datetime(2025, 3, 10, 19, tzinfo=TZ)
    assert confirmation.event.id == event.id
    assert confirmation.event.html_link


def test_non_contiguous_slots_book_the_full_span(studio, calendar):
    confirmation = make_use_case(calendar, studio).execute(make_payload(slots=[19, 17]))

    assert confirmation.span == (17, 20)
    assert confirmation.span_extended
    assert len(calendar.events) == 1
    event = calendar.events[0]
    assert event.start == datetime(2025, 3, 10, 17, tzinfo=TZ)
    assert event.end == datetime(2025, 3, 10, 20, tzinfo=TZ)
    # description lists what was picked, not the widened span
    assert "Slots: 17:00-18:00, 19:00-20:00" in event.description
    assert "Booked span: 17:00-20:00" in event.description


def test_last_slot_ends_at_midnight(studio, calendar):
    make_use_case(calendar, studio).execute(make_payload(slots=[23]))
    event = calendar.events[0]
    assert event.end == datetime(2025, 3, 11, 0, tzinfo=TZ)


def test_duplicate_slots_collapse(studio, calendar):
    confirmation = make_use_case(calendar, studio).execute(make_payload(slots=[18, 17, 18]))
    assert confirmation.request.slots == (17, 18)
    assert calendar.events[0].metadata["slots"] == "17,18"


def test_event_carries_customer_details_and_metadata(studio, calendar):
    payload = make_payload(services=["Recording", "Mixing"], observations="Bring two mics")
    make_use_case(calendar, studio).execute(payload)
    event = calendar.events[0]

    assert event.summary == "Test Studio booking - Ana"
    for text in ("Name: Ana", "Email: ana@x.com", "Phone: +56911112222", "Date: 2025-03-10",
                 "Booking ID: SB-1741600000000-AB12", "- Recording", "Bring two mics",
                 "Location: Pasaje Las Hortensias 2703, Temuco", "Generated: 2025-03-01 10:00"):
        assert text in event.description
    assert event.metadata == {
        "bookingId": "SB-1741600000000-AB12",
        "slots": "17,18",
        "customerName": "Ana",
        "customerEmail": "ana@x.com",
        "customerPhone": "+56911112222",
        "services": "Recording, Mixing",
        "observations": "Bring two mics",
    }


def test_conflict_lists_exactly_the_busy_slots(studio, calendar):
    calendar.add_event(timed_event("existing", datetime(2025, 3, 10, 18), datetime(2025, 3, 10, 19)))

    with pytest.raises(ConflictError) as exc_info:
        make_use_case(calendar, studio).execute(make_payload(slots=[17, 18, 19]))

    assert exc_info.value.slots == [18]
    assert not exc_info.value.at_write
    assert "18:00-19:00" in exc_info.value.message
    assert len(calendar.events) == 1


def test_busy_hour_inside_the_span_is_a_conflict(studio, calendar):
    calendar.add_event(timed_event("existing", datetime(2025, 3, 10, 18), datetime(2025, 3, 10, 19)))

    with pytest.raises(ConflictError) as exc_info:
        make_use_case(calendar, studio).execute(make_payload(slots=[17, 19]))

    assert exc_info.value.slots == [18]
    assert len(calendar.events) == 1


def test_booking_never_reuses_an_existing_event_id(studio, calendar):
    calendar.add_event(timed_event("mock_event_1", datetime(2025, 3, 10, 9), datetime(2025, 3, 10, 10)))

    confirmation = make_use_case(calendar, studio).execute(make_payload())

    assert confirmation.event.id != "mock_event_1"
    assert sorted(e.id for e in calendar.events) == sorted(["mock_event_1", confirmation.event.id])


def test_write_time_conflict_is_flagged(studio):
    # pre-check sees an empty calendar, the write target already holds an overlapping event
    empty = MockCalendar(timezone=studio.timezone_name)
    target = MockCalendar(timezone=studio.timezone_name, reject_overlaps=True)
    target.add_event(timed_event("raced", datetime(2025, 3, 10, 17), datetime(2025, 3, 10, 18)))

    with pytest.raises(ConflictError) as exc_info:
        make_use_case(target, studio, availability_calendar=empty).execute(make_payload())

    assert exc_info.value.at_write
    assert exc_info.value.status_code == 409
    assert len(target.events) == 1


@pytest.mark.parametrize(
    "overrides, field",
    [
        ({"date": "2025/03/10"}, "date"),
        ({"date": None}, "date"),
        ({"slots": []}, "slots"),
        ({"slots": None}, "slots"),
        ({"slots": [17, 24]}, "slots"),
        ({"slots": [-1]}, "slots"),
        ({"slots": ["17"]}, "slots"),
        ({"slots": [17.5]}, "slots"),
        ({"slots": [True]}, "slots"),
        ({"userData": None}, "userData"),
        ({"userData": {"name": "Ana", "phone": "+56911112222"}}, "userData.email"),
        ({"userData": {"name": " ", "email": "ana@x.com", "phone": "1"}}, "userData.name"),
        ({"userData": {"name": "Ana", "email": "ana@x.com", "phone": ""}}, "userData.phone"),
        ({"services": "Recording"}, "services"),
        ({"observations": 42}, "observations"),
    ],
)
def test_invalid_requests_are_rejected_before_any_calendar_call(studio, overrides, field):
    use_case = make_use_case(NoCallCalendar(), studio)
    with pytest.raises(ValidationError) as exc_info:
        use_case.execute(make_payload(**overrides))
    assert exc_info.value.field == field
    assert exc_info.value.status_code == 400


def test_booking_ids_have_expected_shape_and_differ():
    first = generate_booking_id()
    second = generate_booking_id()
    assert BOOKING_ID_RE.match(first)
    assert BOOKING_ID_RE.match(second)
    assert first != second


def test_booking_id_embeds_timestamp():
    assert generate_booking_id(now_ms=1741600000000).startswith("SB-1741600000000-")
