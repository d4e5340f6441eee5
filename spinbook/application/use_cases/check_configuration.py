from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

from spinbook.application.exceptions import ConfigurationError, SpinBookError
from spinbook.application.ports.calendar import CalendarPort
from spinbook.domain.entities.studio import StudioConfig

WRITE_ROLES = {"owner", "writer"}

GENERAL_TROUBLESHOOTING = [
    "Verify all environment variables are set",
    "Ensure the service account has access to the calendar",
    "Check that the calendar ID is correct and accessible",
    "Validate timezone format (use IANA timezone identifiers)",
    "Confirm Google Calendar API is enabled in Google Cloud Console",
]

SETTING_HINTS = {
    "GOOGLE_CLIENT_EMAIL": (
        "Google service account email missing or invalid",
        "Set GOOGLE_CLIENT_EMAIL to the service account address (xxx@xxx.iam.gserviceaccount.com)",
    ),
    "GOOGLE_PRIVATE_KEY": (
        "Google service account private key missing or invalid",
        "Set GOOGLE_PRIVATE_KEY including the BEGIN/END PRIVATE KEY markers",
    ),
    "GOOGLE_CALENDAR_ID": (
        "Google calendar ID missing or invalid",
        "Set GOOGLE_CALENDAR_ID (xxx@group.calendar.google.com)",
    ),
    "STUDIO_TIMEZONE": (
        "Studio timezone missing or invalid",
        "Set STUDIO_TIMEZONE to a valid IANA timezone (e.g. America/Santiago)",
    ),
    "ALL_DAY_BUSY_START_HOUR": (
        "All-day busy hours invalid",
        "Set ALL_DAY_BUSY_START_HOUR/ALL_DAY_BUSY_END_HOUR so that 0 <= start < end <= 24",
    ),
}

CODE_HINTS = {
    "AUTH_ERROR": (
        "Google authentication failed",
        "Verify the service account credentials are correct",
    ),
    "CALENDAR_NOT_FOUND": (
        "Calendar access failed",
        "Share the calendar with the service account and check the calendar ID",
    ),
    "PERMISSION_DENIED": (
        "Calendar permission denied",
        "Grant the service account 'Make changes to events' on the calendar",
    ),
    "RATE_LIMIT_EXCEEDED": (
        "Google Calendar API quota exceeded",
        "Check API quotas and limits in Google Cloud Console",
    ),
}


def environment_info(studio_fields: dict[str, str | None], env: str) -> dict[str, Any]:
    return {
        "env": env,
        "hasStudioName": bool(studio_fields.get("name")),
        "hasStudioAddress": bool(studio_fields.get("address")),
        "hasStudioEmail": bool(studio_fields.get("email")),
        "hasStudioPhone": bool(studio_fields.get("phone")),
    }


def diagnose_failure(error: SpinBookError, environment: dict[str, Any]) -> dict[str, Any]:
    """Build the error report for a failed configuration check."""
    failed_checks: list[str] = []
    troubleshooting: list[str] = []

    hint = None
    if isinstance(error, ConfigurationError) and error.setting:
        hint = SETTING_HINTS.get(error.setting)
    hint = hint or CODE_HINTS.get(error.code)
    if hint:
        failed_checks.append(hint[0])
        troubleshooting.append(hint[1])
    else:
        troubleshooting = list(GENERAL_TROUBLESHOOTING)
    troubleshooting.append("Check the service logs for detailed error information")

    return {
        "status": "error",
        "message": "SpinBook configuration validation failed",
        "code": error.code,
        "error": error.detail or error.message,
        "environment": environment,
        "failedChecks": failed_checks,
        "troubleshooting": troubleshooting,
    }


class ConfigurationCheckUseCase:
    def __init__(self, calendar: CalendarPort, studio: StudioConfig, env: str) -> None:
        self._calendar = calendar
        self._studio = studio
        self._env = env
        self._logger = logging.getLogger(__name__)

    def execute(self) -> dict[str, Any]:
        environment = environment_info(
            {
                "name": self._studio.name,
                "address": self._studio.address,
                "email": self._studio.email,
                "phone": self._studio.phone,
            },
            self._env,
        )
        info = self._calendar.get_calendar_info()
        now = datetime.now(self._studio.timezone)

        recommendations: list[str] = []
        for key, setting in (
            ("hasStudioName", "STUDIO_NAME"),
            ("hasStudioAddress", "STUDIO_ADDRESS"),
            ("hasStudioEmail", "STUDIO_EMAIL"),
            ("hasStudioPhone", "STUDIO_PHONE"),
        ):
            if not environment[key]:
                recommendations.append(f"Consider setting {setting} so customers get complete studio details")

        health_checks = {
            "googleAuth": "passed",
            "calendarAccess": "passed",
            "timezoneValidation": "passed",
        }
        if info.timezone and info.timezone != self._studio.timezone_name:
            recommendations.append(
                f"Calendar timezone ({info.timezone}) differs from studio timezone "
                f"({self._studio.timezone_name}). This may cause scheduling conflicts."
            )
            health_checks["timezoneConsistency"] = "warning: timezone mismatch"
        else:
            health_checks["timezoneConsistency"] = "passed"

        if info.access_role in WRITE_ROLES:
            health_checks["calendarPermissions"] = "passed"
        elif info.access_role in {"reader", "freeBusyReader"}:
            health_checks["calendarPermissions"] = "failed: read-only access"
            recommendations.append("Service account has read-only access. Grant 'Make changes to events' permission.")
        else:
            health_checks["calendarPermissions"] = f"unknown access level: {info.access_role}"

        self._logger.info("Configuration check passed", extra={"reason": info.access_role})
        return {
            "status": "success",
            "message": "SpinBook configuration is valid and ready!",
            "environment": environment,
            "configuration": {
                "calendarId": info.calendar_id,
                "timeZone": self._studio.timezone_name,
                "calendarSummary": info.summary,
                "calendarTimeZone": info.timezone,
                "accessRole": info.access_role,
                "validatedAt": now.isoformat(),
            },
            "healthChecks": health_checks,
            "recommendations": recommendations,
            "currentStudioTime": now.strftime("%A %d %B %Y %H:%M"),
        }
