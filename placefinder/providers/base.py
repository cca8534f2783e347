"""Shared request/match contract for place search providers.

A request is single-shot (``streaming = False``): one ``execute()`` ends in
exactly one ``success`` or ``failure`` call. A streaming request
(``streaming = True``) may call ``success`` many times for a single
``execute()``, each time with the complete current result set.

Deliveries are guarded by a generation counter. Every invocation remembers
the generation it started in and ``cancel()`` advances it, so anything a
collaborator reports after ``cancel()`` returned is dropped here.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Callable, ClassVar, Sequence

from placefinder.config import ExecutePolicy
from placefinder.domain.models import Place
from placefinder.logging import logger
from placefinder.services.exceptions import LocationError

DEFAULT_TIMEOUT_SECONDS = 10.0

SuccessCallback = Callable[[list["PlaceMatch"]], None]
FailureCallback = Callable[[LocationError], None]
DetailSuccess = Callable[[Place], None]
DetailFailure = Callable[[LocationError], None]


class PlaceMatch(ABC):
    """One candidate result of a place search."""

    main_text: str
    secondary_text: str

    @abstractmethod
    def detail(
        self,
        timeout: float | None = None,
        *,
        on_success: DetailSuccess,
        on_fail: DetailFailure | None = None,
    ) -> None:
        """Resolve the match into a full :class:`Place` and report it through the callbacks."""


class FindPlaceRequest(ABC):
    streaming: ClassVar[bool] = False
    provider: ClassVar[str] = "unknown"

    def __init__(
        self,
        input: str,
        *,
        timeout: float | None = None,
        execute_policy: ExecutePolicy = ExecutePolicy.OVERLAP,
    ) -> None:
        self.input = input
        self.timeout = timeout if timeout is not None else DEFAULT_TIMEOUT_SECONDS
        self.execute_policy = ExecutePolicy(execute_policy)
        self.success: SuccessCallback | None = None
        self.failure: FailureCallback | None = None
        self._generation = 0
        self._running = 0

    @property
    def is_active(self) -> bool:
        return self._running > 0

    def execute(self) -> None:
        """Start an invocation.

        Under ``ExecutePolicy.OVERLAP`` a still-running invocation is left
        alone and both may deliver; ``ExecutePolicy.REPLACE`` cancels it first.
        """

        if self.execute_policy is ExecutePolicy.REPLACE:
            self.cancel()
        logger.debug(
            "find_place_execute",
            provider=self.provider,
            generation=self._generation,
            overlapping=self.is_active,
        )
        self._start(self._generation)

    def cancel(self) -> None:
        if not self.is_active:
            return
        self._generation += 1
        self._running = 0
        logger.debug("find_place_cancelled", provider=self.provider)
        self._cancel_active()

    @abstractmethod
    def _start(self, generation: int) -> None:
        """Drive the collaborator; call ``_begin()`` once an invocation is actually running."""

    @abstractmethod
    def _cancel_active(self) -> None:
        """Forward cancellation to the collaborator."""

    def _begin(self) -> None:
        self._running += 1

    def _is_current(self, generation: int) -> bool:
        return generation == self._generation

    def _deliver_success(self, generation: int, matches: Sequence[PlaceMatch]) -> None:
        if not self._is_current(generation):
            logger.debug("find_place_stale_delivery_dropped", provider=self.provider, kind="success")
            return
        self._settle()
        if self.success is not None:
            self.success(list(matches))

    def _deliver_failure(self, generation: int, error: LocationError) -> None:
        if not self._is_current(generation):
            logger.debug("find_place_stale_delivery_dropped", provider=self.provider, kind="failure")
            return
        self._settle()
        if self.failure is not None:
            self.failure(error)

    def _reject(self, error: LocationError) -> None:
        """Fail synchronously without starting an invocation."""

        logger.warning("find_place_rejected", provider=self.provider, error=str(error))
        if self.failure is not None:
            self.failure(error)

    def _settle(self) -> None:
        # Streaming invocations stay open until cancelled.
        if not self.streaming and self._running > 0:
            self._running -= 1


__all__ = [
    "DEFAULT_TIMEOUT_SECONDS",
    "DetailFailure",
    "DetailSuccess",
    "FailureCallback",
    "FindPlaceRequest",
    "PlaceMatch",
    "SuccessCallback",
]
