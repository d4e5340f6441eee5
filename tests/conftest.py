"""Shared fixtures: studio config, in-memory calendar and an API client wired to them."""

from __future__ import annotations

import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from fastapi.testclient import TestClient

from spinbook.domain.entities.studio import StudioConfig
from spinbook.infrastructure.calendar.mock_calendar import MockCalendar
from spinbook.main import app
from spinbook.wiring.dependencies import get_calendar, get_studio_config
from tests.helpers import CALENDAR_ID, TZ


@pytest.fixture
def studio() -> StudioConfig:
    return StudioConfig(
        name="Test Studio",
        timezone=TZ,
        calendar_id=CALENDAR_ID,
        address="Pasaje Las Hortensias 2703, Temuco",
        email="studio@example.com",
        phone="+56 9 4271 3685",
    )


@pytest.fixture
def calendar(studio) -> MockCalendar:
    return MockCalendar(calendar_id=studio.calendar_id, timezone=studio.timezone_name)


@pytest.fixture
def client(calendar, studio):
    app.dependency_overrides[get_calendar] = lambda: calendar
    app.dependency_overrides[get_studio_config] = lambda: studio
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture(scope="session")
def private_key_pem() -> str:
    key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
    return key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    ).decode("utf-8")
