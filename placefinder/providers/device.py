"""On-device completion provider.

The host platform supplies the completion engine: an object implementing
:class:`LocalSearchCompleter` that reports result sets to a delegate, and a
:class:`LocalSearchEngine` that expands one completion into map items. This
provider only adapts them to the request/match contract.
"""

from __future__ import annotations

from typing import Any, Callable, Protocol, Sequence

from placefinder.config import ExecutePolicy
from placefinder.domain.models import Place
from placefinder.logging import logger
from placefinder.providers.base import DetailFailure, DetailSuccess, FindPlaceRequest, PlaceMatch
from placefinder.services.exceptions import NoDataAvailable, PlatformError


class SearchCompletion(Protocol):
    title: str
    subtitle: str


class MapItem(Protocol):
    name: str | None
    formatted_address: str | None
    latitude: float | None
    longitude: float | None


class CompleterDelegate(Protocol):
    def completer_did_update_results(self, completer: LocalSearchCompleter) -> None: ...

    def completer_did_fail(self, completer: LocalSearchCompleter, error: BaseException) -> None: ...


class LocalSearchCompleter(Protocol):
    delegate: CompleterDelegate | None
    results: Sequence[SearchCompletion]

    def set_query_fragment(self, fragment: str) -> None: ...

    def cancel(self) -> None: ...


LocalSearchHandler = Callable[[Sequence[MapItem] | None, BaseException | None], None]


class LocalSearchEngine(Protocol):
    def start(self, completion: SearchCompletion, handler: LocalSearchHandler) -> None: ...


def derive_secondary_text(title: str, subtitle: str) -> str:
    """Fall back to the last comma-separated part of the title when the subtitle is empty."""

    if subtitle:
        return subtitle
    segments = [segment for segment in title.split(",") if segment]
    if not segments:
        return subtitle
    return segments[-1].strip(" ")


class DevicePlaceMatch(PlaceMatch):
    """Wraps a native completion; details are searched on every call."""

    def __init__(
        self,
        completion: SearchCompletion,
        *,
        input: str,
        search_engine: LocalSearchEngine | None,
    ) -> None:
        self.completion = completion
        self.input = input
        self.main_text = completion.title or ""
        self.secondary_text = derive_secondary_text(self.main_text, completion.subtitle or "")
        self._search_engine = search_engine

    def detail(
        self,
        timeout: float | None = None,
        *,
        on_success: DetailSuccess,
        on_fail: DetailFailure | None = None,
    ) -> None:
        if self._search_engine is None:
            if on_fail is not None:
                on_fail(PlatformError("On-device search is not available."))
            return

        def _handle(items: Sequence[Any] | None, error: BaseException | None) -> None:
            if error is not None:
                logger.warning("device_detail_failed", title=self.main_text, error=str(error))
                if on_fail is not None:
                    on_fail(PlatformError(str(error)))
                return
            place = Place.from_map_item(items[0]) if items else None
            if place is None:
                if on_fail is not None:
                    on_fail(NoDataAvailable())
                return
            on_success(place)

        self._search_engine.start(self.completion, _handle)

    def __repr__(self) -> str:
        return f"DevicePlaceMatch(main_text={self.main_text!r}, secondary_text={self.secondary_text!r})"


class DeviceFindPlaceRequest(FindPlaceRequest):
    """Streaming request: every result update from the completer fires ``success`` again."""

    streaming = True
    provider = "device"

    def __init__(
        self,
        input: str,
        *,
        completer: LocalSearchCompleter,
        search_engine: LocalSearchEngine | None = None,
        timeout: float | None = None,
        execute_policy: ExecutePolicy = ExecutePolicy.OVERLAP,
    ) -> None:
        super().__init__(input, timeout=timeout, execute_policy=execute_policy)
        self._completer = completer
        self._search_engine = search_engine
        self._invocation_generation: int | None = None

    def _start(self, generation: int) -> None:
        if not self.is_active:
            self._begin()
        self._invocation_generation = generation
        self._completer.delegate = self
        self._completer.set_query_fragment(self.input)

    def _cancel_active(self) -> None:
        self._invocation_generation = None
        self._completer.cancel()

    def completer_did_update_results(self, completer: LocalSearchCompleter) -> None:
        if self._invocation_generation is None:
            logger.debug("device_update_without_invocation_dropped")
            return
        matches = [
            DevicePlaceMatch(result, input=self.input, search_engine=self._search_engine)
            for result in completer.results
        ]
        self._deliver_success(self._invocation_generation, matches)

    def completer_did_fail(self, completer: LocalSearchCompleter, error: BaseException) -> None:
        if self._invocation_generation is None:
            logger.debug("device_failure_without_invocation_dropped")
            return
        self._deliver_failure(self._invocation_generation, PlatformError(str(error)))


__all__ = [
    "CompleterDelegate",
    "DeviceFindPlaceRequest",
    "DevicePlaceMatch",
    "LocalSearchCompleter",
    "LocalSearchEngine",
    "LocalSearchHandler",
    "MapItem",
    "SearchCompletion",
    "derive_secondary_text",
]
