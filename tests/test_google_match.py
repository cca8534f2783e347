"""Detail resolution and caching on Google matches."""

from __future__ import annotations

import httpx
import pytest
from pydantic import SecretStr, ValidationError

from fakes import Outcome, RecordingHandler
from placefinder.config import GooglePlacesSettings
from placefinder.domain.models import Place
from placefinder.providers.google import GooglePlaceMatch
from placefinder.services.exceptions import MissingCredential, ProviderStatusError, TransportFailure

DETAIL_PAYLOAD = {
    "status": "OK",
    "result": {
        "place_id": "abc",
        "name": "Springfield",
        "formatted_address": "Springfield, IL, USA",
        "geometry": {"location": {"lat": 39.78, "lng": -89.65}},
        "types": ["locality", "political"],
    },
}


def _match(client, settings, language="it") -> GooglePlaceMatch:
    match = GooglePlaceMatch.from_prediction(
        {
            "place_id": "abc",
            "description": "Springfield, IL, USA",
            "structured_formatting": {"main_text": "Springfield", "secondary_text": "IL, USA"},
            "types": ["locality"],
        },
        language=language,
        client=client,
        settings=settings,
    )
    assert match is not None
    return match


def test_from_prediction_requires_string_place_id(google_settings):
    client = object()
    assert GooglePlaceMatch.from_prediction({"description": "x"}, language="en", client=client, settings=google_settings) is None
    assert GooglePlaceMatch.from_prediction({"place_id": 42}, language="en", client=client, settings=google_settings) is None
    assert GooglePlaceMatch.from_prediction("garbage", language="en", client=client, settings=google_settings) is None


def test_from_prediction_defaults_missing_fields(google_settings):
    match = GooglePlaceMatch.from_prediction(
        {"place_id": "only-id"}, language="en", client=object(), settings=google_settings
    )
    assert match.name == ""
    assert match.main_text == ""
    assert match.secondary_text == ""
    assert match.types == []


@pytest.mark.asyncio
async def test_detail_fetches_with_creation_language(google_settings, outcome):
    handler = RecordingHandler(httpx.Response(200, json=DETAIL_PAYLOAD))
    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        match = _match(client, google_settings, language="it")
        match.detail(on_success=outcome.success, on_fail=outcome.failure)
        await outcome.wait()

    sent = handler.requests[0]
    assert sent.url.path == "/api/place/details/json"
    assert sent.url.params["placeid"] == "abc"
    assert sent.url.params["language"] == "it"
    assert sent.url.params["key"] == "test-key"

    place = outcome.successes[0]
    assert isinstance(place, Place)
    assert place.source == "google"
    assert place.formatted_address == "Springfield, IL, USA"
    assert place.latitude == pytest.approx(39.78)
    assert match.cached_detail is place


@pytest.mark.asyncio
async def test_second_detail_call_uses_cache(google_settings, outcome):
    handler = RecordingHandler(httpx.Response(200, json=DETAIL_PAYLOAD))
    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        match = _match(client, google_settings)
        match.detail(on_success=outcome.success, on_fail=outcome.failure)
        await outcome.wait()

        second = Outcome()
        match.detail(on_success=second.success, on_fail=second.failure)
        # Delivered before detail() returned.
        assert len(second.successes) == 1

    assert len(handler.requests) == 1
    assert second.successes[0] is outcome.successes[0]


@pytest.mark.asyncio
async def test_concurrent_resolutions_fill_cache_once(google_settings):
    handler = RecordingHandler(httpx.Response(200, json=DETAIL_PAYLOAD))
    first, second = Outcome(), Outcome()
    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        match = _match(client, google_settings)
        match.detail(on_success=first.success)
        match.detail(on_success=second.success)
        await first.wait()
        await second.wait()

    assert len(handler.requests) == 2
    assert first.successes[0] is second.successes[0] is match.cached_detail


@pytest.mark.asyncio
async def test_detail_requires_api_key(outcome):
    handler = RecordingHandler()
    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        match = _match(client, GooglePlacesSettings())
        match.detail(on_success=outcome.success, on_fail=outcome.failure)

    assert isinstance(outcome.failures[0], MissingCredential)
    assert handler.requests == []


@pytest.mark.asyncio
async def test_failed_detail_leaves_cache_empty_and_can_retry(google_settings, outcome):
    handler = RecordingHandler(
        httpx.Response(500, text="boom"),
        httpx.Response(200, json=DETAIL_PAYLOAD),
    )
    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        match = _match(client, google_settings)
        match.detail(on_success=outcome.success, on_fail=outcome.failure)
        await outcome.wait()
        assert isinstance(outcome.failures[0], TransportFailure)
        assert match.cached_detail is None

        match.detail(on_success=outcome.success, on_fail=outcome.failure)
        await outcome.wait()

    assert len(handler.requests) == 2
    assert match.cached_detail is outcome.successes[0]


@pytest.mark.asyncio
async def test_detail_bad_status_is_not_cached(google_settings, outcome):
    handler = RecordingHandler(httpx.Response(200, json={"status": "NOT_FOUND"}))
    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        match = _match(client, google_settings)
        match.detail(on_success=outcome.success, on_fail=outcome.failure)
        await outcome.wait()

    assert isinstance(outcome.failures[0], ProviderStatusError)
    assert match.cached_detail is None


@pytest.mark.asyncio
async def test_detail_failure_without_on_fail_is_ignored(google_settings):
    handler = RecordingHandler(httpx.Response(500, text="boom"))
    successes = []
    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        match = _match(client, google_settings)
        match.detail(on_success=successes.append)
        operation = match._operation
        await operation._task

    assert successes == []
    assert match.cached_detail is None


@pytest.mark.asyncio
async def test_undecodable_detail_result_reports_failure(google_settings, outcome):
    handler = RecordingHandler(httpx.Response(200, json={"status": "OK", "result": {"place_id": 12345}}))
    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        match = _match(client, google_settings)
        match.detail(on_success=outcome.success, on_fail=outcome.failure)
        await outcome.wait()

    assert outcome.successes == []
    error = outcome.failures[0]
    assert isinstance(error, TransportFailure)
    assert isinstance(error.cause, ValidationError)
    assert match.cached_detail is None


@pytest.mark.asyncio
async def test_detail_timeout_falls_back_to_settings(outcome):
    seen = []

    def respond(request: httpx.Request) -> httpx.Response:
        seen.append(request.extensions["timeout"])
        return httpx.Response(200, json=DETAIL_PAYLOAD)

    settings = GooglePlacesSettings(
        api_key=SecretStr("test-key"), base_url="https://places.test/api/place", request_timeout_seconds=7
    )
    async with httpx.AsyncClient(transport=httpx.MockTransport(respond)) as client:
        match = _match(client, settings)
        match.detail(on_success=outcome.success, on_fail=outcome.failure)
        await outcome.wait()
        match._detail = None
        match.detail(1.5, on_success=outcome.success, on_fail=outcome.failure)
        await outcome.wait()

    assert seen == [
        {"connect": 7, "read": 7, "write": 7, "pool": 7},
        {"connect": 1.5, "read": 1.5, "write": 1.5, "pool": 1.5},
    ]


@pytest.mark.parametrize(
    "result",
    [
        {"place_id": "abc", "types": "locality", "geometry": "nowhere"},
        {"place_id": "abc", "types": None, "geometry": {"location": [1, 2]}},
    ],
)
def test_place_from_google_ignores_malformed_containers(result):
    place = Place.from_google(result)
    assert place.place_id == "abc"
    assert place.types == []
    assert place.latitude is None
    assert place.longitude is None
