from datetime import datetime

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class EventSchema(CamelModel):
    id: str
    html_link: str | None = None
    summary: str
    start: datetime
    end: datetime


class SpanSchema(CamelModel):
    start: int
    end: int


class BookingSchema(CamelModel):
    date: str
    slots: list[int]
    span: SpanSchema
    span_extended: bool = False


class CreateEventResponseSchema(CamelModel):
    message: str
    booking_id: str
    event: EventSchema
    booking: BookingSchema


class ErrorSchema(CamelModel):
    message: str
    code: str
    field: str | None = None
    conflicts: list[int] | None = None
    debug: dict[str, str] | None = None
