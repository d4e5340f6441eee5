from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Any
from urllib.parse import quote
from zoneinfo import ZoneInfo

import httpx

from spinbook.application.exceptions import (
    CalendarNotFoundError,
    ConflictError,
    InternalError,
    SpinBookError,
    UpstreamAuthError,
    UpstreamConnectionError,
    UpstreamPermissionError,
    UpstreamRateLimitError,
    UpstreamTimeoutError,
)
from spinbook.application.ports.calendar import CalendarPort
from spinbook.core.config import settings
from spinbook.domain.entities.calendar_event import CalendarEvent, CalendarInfo, CreatedEvent, NewCalendarEvent
from spinbook.infrastructure.calendar.google_auth import ServiceAccountCredentials, ServiceAccountTokenProvider

# Google reports quota exhaustion as 403 with one of these reasons
RATE_LIMIT_REASONS = {"rateLimitExceeded", "userRateLimitExceeded", "quotaExceeded", "dailyLimitExceeded"}


def parse_datetime(value: str) -> datetime:
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def parse_event(item: dict[str, Any]) -> CalendarEvent:
    start = item.get("start") or {}
    end = item.get("end") or {}
    metadata = (item.get("extendedProperties") or {}).get("private") or {}
    fields: dict[str, Any] = {}
    if start.get("dateTime"):
        fields["start"] = parse_datetime(start["dateTime"])
        fields["end"] = parse_datetime(end["dateTime"]) if end.get("dateTime") else None
    elif start.get("date"):
        fields["start_date"] = date.fromisoformat(start["date"])
        fields["end_date"] = date.fromisoformat(end["date"]) if end.get("date") else None

    return CalendarEvent(
        id=str(item.get("id", "")),
        summary=item.get("summary") or "",
        status=item.get("status") or "confirmed",
        description=item.get("description"),
        html_link=item.get("htmlLink"),
        metadata={str(k): str(v) for k, v in metadata.items()},
        **fields,
    )


def event_body(event: NewCalendarEvent) -> dict[str, Any]:
    return {
        "summary": event.summary,
        "description": event.description,
        # wall-clock values plus timeZone: Google does the conversion
        "start": {"dateTime": event.start.isoformat(), "timeZone": event.timezone},
        "end": {"dateTime": event.end.isoformat(), "timeZone": event.timezone},
        "reminders": {"useDefault": False},
        "extendedProperties": {"private": dict(event.metadata)},
    }


class GoogleCalendarClient(CalendarPort):
    def __init__(
        self,
        credentials: ServiceAccountCredentials,
        calendar_id: str,
        base_url: str | None = None,
        token_url: str | None = None,
        timeout: float | None = None,
        http: httpx.Client | None = None,
        page_size: int = 100,
    ) -> None:
        self._calendar_id = calendar_id
        self._base_url = (base_url or settings.GOOGLE_CALENDAR_BASE_URL).rstrip("/")
        self._client = http or httpx.Client(timeout=timeout or settings.CALENDAR_TIMEOUT_SECONDS)
        self._tokens = ServiceAccountTokenProvider(
            credentials,
            http=self._client,
            token_url=token_url or settings.GOOGLE_TOKEN_URL,
        )
        self._page_size = page_size
        self._logger = logging.getLogger(__name__)

    @property
    def _calendar_path(self) -> str:
        return f"/calendars/{quote(self._calendar_id, safe='')}"

    def list_events(self, time_min: datetime, time_max: datetime, timezone: str) -> list[CalendarEvent]:
        params: dict[str, Any] = {
            "timeMin": time_min.isoformat(),
            "timeMax": time_max.isoformat(),
            "timeZone": timezone,
            "singleEvents": "true",
            "orderBy": "startTime",
            "maxResults": self._page_size,
        }
        events: list[CalendarEvent] = []
        while True:
            data = self._request("GET", f"{self._calendar_path}/events", params=params)
            events.extend(parse_event(item) for item in data.get("items", []) or [])
            page_token = data.get("nextPageToken")
            if not page_token:
                return events
            params = {**params, "pageToken": page_token}

    def create_event(self, event: NewCalendarEvent) -> CreatedEvent:
        data = self._request(
            "POST",
            f"{self._calendar_path}/events",
            params={"sendUpdates": "none"},
            json=event_body(event),
        )
        event_id = data.get("id")
        if not event_id:
            raise InternalError(detail="No event id returned by Google Calendar")

        tz = ZoneInfo(event.timezone)
        created = parse_event(data)
        self._logger.info(
            "Calendar event created",
            extra={"event_id": event_id, "booking_id": event.metadata.get("bookingId")},
        )
        return CreatedEvent(
            id=str(event_id),
            html_link=data.get("htmlLink"),
            summary=data.get("summary") or event.summary,
            start=created.start or event.start.replace(tzinfo=tz),
            end=created.end or event.end.replace(tzinfo=tz),
        )

    def get_calendar_info(self) -> CalendarInfo:
        encoded = quote(self._calendar_id, safe="")
        try:
            data = self._request("GET", f"/users/me/calendarList/{encoded}")
        except CalendarNotFoundError:
            # service accounts see shared calendars only after subscribing to them
            data = self._request("GET", self._calendar_path)
        return CalendarInfo(
            calendar_id=self._calendar_id,
            summary=data.get("summary"),
            timezone=data.get("timeZone"),
            access_role=data.get("accessRole"),
        )

    def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        token = self._tokens.get_token()
        try:
            response = self._client.request(
                method,
                f"{self._base_url}{path}",
                params=params,
                json=json,
                headers={"Authorization": f"Bearer {token}"},
            )
        except httpx.TimeoutException as exc:
            raise UpstreamTimeoutError(detail=f"calendar_timeout: {method} {path}") from exc
        except httpx.HTTPError as exc:
            raise UpstreamConnectionError(detail=f"calendar_connection_failed: {exc}") from exc

        if response.status_code >= 400:
            if response.status_code == 401:
                self._tokens.invalidate()
            raise self._classify(response, method, path)
        return response.json()

    def _classify(self, response: httpx.Response, method: str, path: str) -> SpinBookError:
        status = response.status_code
        reason, message = _google_error(response)
        self._logger.error(
            "Google Calendar request failed: %s %s",
            method,
            path,
            extra={"code": status, "reason": reason or message},
        )
        detail = f"{method} {path} -> {status} {reason or ''} {message or ''}".strip()

        if status == 401:
            return UpstreamAuthError(detail=detail)
        if status == 403 and reason in RATE_LIMIT_REASONS:
            return UpstreamRateLimitError(detail=detail)
        if status == 403:
            return UpstreamPermissionError(detail=detail)
        if status == 404:
            return CalendarNotFoundError(detail=detail)
        if status == 409:
            return ConflictError(detail=detail)
        if status == 429:
            return UpstreamRateLimitError(detail=detail)
        if status in {408, 504}:
            return UpstreamTimeoutError(detail=detail)
        return InternalError(detail=detail)


def _google_error(response: httpx.Response) -> tuple[str | None, str | None]:
    try:
        error = response.json().get("error") or {}
    except ValueError:
        return None, response.text[:200]
    if not isinstance(error, dict):
        return None, str(error)
    errors = error.get("errors") or [{}]
    return errors[0].get("reason"), error.get("message")
