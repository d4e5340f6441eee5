from functools import lru_cache
import logging

from fastapi import Depends

from spinbook.application.exceptions import ConfigurationError
from spinbook.application.ports.calendar import CalendarPort
from spinbook.application.use_cases.availability import AvailabilityUseCase
from spinbook.application.use_cases.booking import BookingUseCase
from spinbook.application.use_cases.check_configuration import ConfigurationCheckUseCase
from spinbook.core.config import settings
from spinbook.domain.entities.studio import StudioConfig
from spinbook.infrastructure.calendar.google_calendar_client import GoogleCalendarClient
from spinbook.infrastructure.calendar.mock_calendar import MockCalendar
from spinbook.wiring.configuration import build_studio_config, load_service_account, uses_local_calendar


logger = logging.getLogger(__name__)

_calendar: CalendarPort | None = None


def _init_error(error: ConfigurationError) -> ConfigurationError:
    logger.error("Service initialization error", extra={"reason": error.detail})
    return ConfigurationError(setting=error.setting, detail=error.detail, code="SERVICE_INIT_ERROR")


@lru_cache
def get_studio_config() -> StudioConfig:
    try:
        return build_studio_config(settings)
    except ConfigurationError as e:
        raise _init_error(e) from e


def get_calendar() -> CalendarPort:
    global _calendar
    if _calendar is None:
        studio = get_studio_config()
        if uses_local_calendar(settings):
            logger.info("Using MockCalendar (Google credentials missing, ENV=%s)", settings.ENV)
            _calendar = MockCalendar(calendar_id=studio.calendar_id, timezone=studio.timezone_name)
        else:
            try:
                credentials = load_service_account(settings)
            except ConfigurationError as e:
                raise _init_error(e) from e
            logger.info("Using GoogleCalendarClient for %s", studio.calendar_id)
            _calendar = GoogleCalendarClient(credentials=credentials, calendar_id=studio.calendar_id)
    return _calendar


def get_availability_use_case(
    calendar: CalendarPort = Depends(get_calendar),
    studio: StudioConfig = Depends(get_studio_config),
) -> AvailabilityUseCase:
    return AvailabilityUseCase(calendar=calendar, studio=studio)


def get_booking_use_case(
    calendar: CalendarPort = Depends(get_calendar),
    studio: StudioConfig = Depends(get_studio_config),
) -> BookingUseCase:
    return BookingUseCase(
        calendar=calendar,
        availability=AvailabilityUseCase(calendar=calendar, studio=studio),
        studio=studio,
    )


def build_configuration_check() -> ConfigurationCheckUseCase:
    # called inside the route so configuration failures become a diagnostic report
    return ConfigurationCheckUseCase(calendar=get_calendar(), studio=get_studio_config(), env=settings.ENV)
