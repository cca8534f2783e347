"""Google Places autocomplete provider."""

from __future__ import annotations

from typing import Any, Sequence

import httpx
from pydantic import ValidationError

from placefinder.config import ExecutePolicy, GooglePlacesSettings
from placefinder.domain.languages import GoogleLanguage
from placefinder.domain.models import Place
from placefinder.logging import logger
from placefinder.providers.base import DetailFailure, DetailSuccess, FindPlaceRequest, PlaceMatch
from placefinder.services.exceptions import (
    LocationError,
    MissingCredential,
    ProviderStatusError,
    TransportFailure,
)
from placefinder.utils.json_operation import JSONOperation

SERVICE_NAME = "google"
STATUS_OK = "OK"


def _text(value: Any) -> str:
    return value if isinstance(value, str) else ""


def _texts(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    return [_text(item) for item in value]


class GooglePlaceMatch(PlaceMatch):
    """Autocomplete prediction that can fetch (and keep) its place details."""

    def __init__(
        self,
        *,
        place_id: str,
        name: str,
        main_text: str,
        secondary_text: str,
        types: Sequence[str],
        language: str,
        client: httpx.AsyncClient,
        settings: GooglePlacesSettings,
    ) -> None:
        self.place_id = place_id
        self.name = name
        self.main_text = main_text
        self.secondary_text = secondary_text
        self.types = list(types)
        self.language = language
        self._client = client
        self._settings = settings
        self._detail: Place | None = None
        self._operation: JSONOperation | None = None

    @property
    def cached_detail(self) -> Place | None:
        return self._detail

    @classmethod
    def from_prediction(
        cls,
        prediction: Any,
        *,
        language: str,
        client: httpx.AsyncClient,
        settings: GooglePlacesSettings,
    ) -> GooglePlaceMatch | None:
        if not isinstance(prediction, dict):
            return None
        place_id = prediction.get("place_id")
        if not isinstance(place_id, str):
            return None
        formatting = prediction.get("structured_formatting")
        if not isinstance(formatting, dict):
            formatting = {}
        return cls(
            place_id=place_id,
            name=_text(prediction.get("description")),
            main_text=_text(formatting.get("main_text")),
            secondary_text=_text(formatting.get("secondary_text")),
            types=_texts(prediction.get("types")),
            language=language,
            client=client,
            settings=settings,
        )

    @classmethod
    def load(
        cls,
        predictions: Sequence[Any],
        *,
        language: str,
        client: httpx.AsyncClient,
        settings: GooglePlacesSettings,
    ) -> list[GooglePlaceMatch]:
        matches: list[GooglePlaceMatch] = []
        for prediction in predictions:
            match = cls.from_prediction(prediction, language=language, client=client, settings=settings)
            if match is not None:
                matches.append(match)
        return matches

    def detail(
        self,
        timeout: float | None = None,
        *,
        on_success: DetailSuccess,
        on_fail: DetailFailure | None = None,
    ) -> None:
        if self._detail is not None:
            logger.debug("place_detail_cache_hit", place_id=self.place_id)
            on_success(self._detail)
            return

        api_key = self._settings.read_api_key()
        if not api_key:
            if on_fail is not None:
                on_fail(MissingCredential(SERVICE_NAME))
            return

        operation = JSONOperation(
            self._client,
            self._settings.endpoint("details"),
            params={"placeid": self.place_id, "key": api_key, "language": self.language},
            timeout=timeout if timeout is not None else self._settings.request_timeout_seconds,
            name="google_place_details",
        )

        def _on_payload(payload: Any) -> None:
            status = payload.get("status") if isinstance(payload, dict) else None
            if status is not None and status != STATUS_OK:
                logger.warning("place_detail_bad_status", place_id=self.place_id, status=status)
                if on_fail is not None:
                    on_fail(ProviderStatusError(status))
                return
            result = payload.get("result") if isinstance(payload, dict) else None
            try:
                place = Place.from_google(result)
            except ValidationError as exc:
                logger.warning("place_detail_malformed", place_id=self.place_id, error=str(exc))
                if on_fail is not None:
                    on_fail(TransportFailure(exc, "Details payload could not be decoded."))
                return
            if self._detail is None:
                self._detail = place
            on_success(self._detail)

        def _on_error(error: LocationError) -> None:
            if on_fail is not None:
                on_fail(error)

        operation.on_success = _on_payload
        operation.on_failure = _on_error
        self._operation = operation
        operation.execute()

    def __repr__(self) -> str:
        return f"GooglePlaceMatch(place_id={self.place_id!r}, name={self.name!r})"


class GoogleFindPlaceRequest(FindPlaceRequest):
    """Single-shot autocomplete query against the Places web service."""

    provider = SERVICE_NAME

    def __init__(
        self,
        input: str,
        *,
        client: httpx.AsyncClient,
        settings: GooglePlacesSettings | None = None,
        timeout: float | None = None,
        language: GoogleLanguage | str | None = None,
        execute_policy: ExecutePolicy = ExecutePolicy.OVERLAP,
    ) -> None:
        self._settings = settings or GooglePlacesSettings()
        super().__init__(
            input,
            timeout=timeout if timeout is not None else self._settings.request_timeout_seconds,
            execute_policy=execute_policy,
        )
        self.language = GoogleLanguage.parse(language) if language is not None else GoogleLanguage.default()
        self._client = client
        self._operations: set[JSONOperation] = set()

    def _start(self, generation: int) -> None:
        api_key = self._settings.read_api_key()
        if not api_key:
            self._reject(MissingCredential(SERVICE_NAME))
            return

        language = self.language.value
        operation = JSONOperation(
            self._client,
            self._settings.endpoint("autocomplete"),
            params={"input": self.input, "language": language, "key": api_key},
            timeout=self.timeout,
            name="google_autocomplete",
        )

        def _on_failure(error: LocationError) -> None:
            self._operations.discard(operation)
            self._deliver_failure(generation, error)

        def _on_success(payload: Any) -> None:
            self._operations.discard(operation)
            self._handle_payload(generation, payload, language)

        operation.on_failure = _on_failure
        operation.on_success = _on_success
        self._operations.add(operation)
        self._begin()
        operation.execute()

    def _cancel_active(self) -> None:
        operations, self._operations = self._operations, set()
        for operation in operations:
            operation.cancel()

    def _handle_payload(self, generation: int, payload: Any, language: str) -> None:
        status = payload.get("status") if isinstance(payload, dict) else None
        if status != STATUS_OK:
            logger.warning("google_autocomplete_bad_status", status=status)
            self._deliver_failure(generation, ProviderStatusError(status))
            return
        predictions = payload.get("predictions")
        matches = GooglePlaceMatch.load(
            predictions if isinstance(predictions, list) else [],
            language=language,
            client=self._client,
            settings=self._settings,
        )
        logger.debug("google_autocomplete_loaded", matches=len(matches))
        self._deliver_success(generation, matches)


__all__ = ["GoogleFindPlaceRequest", "GooglePlaceMatch", "SERVICE_NAME", "STATUS_OK"]
