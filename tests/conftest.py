"""Shared pytest fixtures."""

from __future__ import annotations

import pytest
from pydantic import SecretStr

from fakes import Outcome
from placefinder.config import GooglePlacesSettings


@pytest.fixture
def google_settings() -> GooglePlacesSettings:
    return GooglePlacesSettings(api_key=SecretStr("test-key"), base_url="https://places.test/api/place")


@pytest.fixture
def outcome() -> Outcome:
    return Outcome()
