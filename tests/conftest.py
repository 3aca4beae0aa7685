"""Pytest configuration and shared fixtures."""

import pytest

from catalog_scraper.schemas.profile import SiteProfile
from catalog_scraper.scrapers.pacing import PlainPacer

from tests.helpers import RecordingSleep, make_profile


@pytest.fixture
def anyio_backend():
    """Use asyncio as the async backend for tests."""
    return "asyncio"


@pytest.fixture
def profile() -> SiteProfile:
    """Default test profile."""
    return make_profile()


@pytest.fixture
def recording_sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
def pacer(recording_sleep) -> PlainPacer:
    """Plain pacer that never actually waits."""
    return PlainPacer(delay=0.5, sleep=recording_sleep)
