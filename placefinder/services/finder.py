"""Entry point that wires providers to settings and offers awaitable helpers."""

from __future__ import annotations

import asyncio
from typing import Callable

import httpx

from placefinder.config import PlaceFinderSettings, get_settings
from placefinder.domain.languages import GoogleLanguage
from placefinder.domain.models import Place
from placefinder.logging import logger
from placefinder.providers.base import PlaceMatch
from placefinder.providers.device import DeviceFindPlaceRequest, LocalSearchCompleter, LocalSearchEngine
from placefinder.providers.google import GoogleFindPlaceRequest
from placefinder.services.exceptions import LocationError, PlatformError

CompleterFactory = Callable[[], LocalSearchCompleter]


class PlaceFinder:
    """Builds place search requests from one settings object.

    The on-device provider is only offered when the host passes a
    ``completer_factory``; each device request gets its own completer.
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        settings: PlaceFinderSettings | None = None,
        *,
        completer_factory: CompleterFactory | None = None,
        local_search: LocalSearchEngine | None = None,
    ) -> None:
        self._client = http_client
        self._settings = settings or get_settings()
        self._completer_factory = completer_factory
        self._local_search = local_search

    @property
    def device_available(self) -> bool:
        return self._completer_factory is not None

    def google_request(
        self,
        text: str,
        *,
        timeout: float | None = None,
        language: GoogleLanguage | str | None = None,
    ) -> GoogleFindPlaceRequest:
        return GoogleFindPlaceRequest(
            text,
            client=self._client,
            settings=self._settings.google,
            timeout=timeout,
            language=language if language is not None else self._settings.default_language,
            execute_policy=self._settings.execute_policy,
        )

    def device_request(self, text: str, *, timeout: float | None = None) -> DeviceFindPlaceRequest:
        if self._completer_factory is None:
            raise PlatformError("On-device completion is not available.")
        return DeviceFindPlaceRequest(
            text,
            completer=self._completer_factory(),
            search_engine=self._local_search,
            timeout=timeout,
            execute_policy=self._settings.execute_policy,
        )

    async def autocomplete(
        self,
        text: str,
        *,
        language: GoogleLanguage | str | None = None,
        timeout: float | None = None,
    ) -> list[PlaceMatch]:
        """Run one Google autocomplete request and return its matches."""

        loop = asyncio.get_running_loop()
        future: asyncio.Future[list[PlaceMatch]] = loop.create_future()
        request = self.google_request(text, timeout=timeout, language=language)
        request.success = lambda matches: _settle(future, result=matches)
        request.failure = lambda error: _settle(future, error=error)
        request.execute()
        try:
            return await future
        except asyncio.CancelledError:
            request.cancel()
            raise

    async def resolve(self, match: PlaceMatch, *, timeout: float | None = None) -> Place:
        """Resolve ``match`` into a :class:`Place`."""

        loop = asyncio.get_running_loop()
        future: asyncio.Future[Place] = loop.create_future()
        match.detail(
            timeout,
            on_success=lambda place: _settle(future, result=place),
            on_fail=lambda error: _settle(future, error=error),
        )
        return await future


def _settle(future: asyncio.Future, *, result=None, error: LocationError | None = None) -> None:
    if future.done():
        return
    if error is not None:
        logger.info("place_finder_call_failed", error=str(error), kind=error.__class__.__name__)
        future.set_exception(error)
    else:
        future.set_result(result)


__all__ = ["PlaceFinder", "CompleterFactory"]
