"""Fire-and-forget JSON GET with callback delivery."""

from __future__ import annotations

import asyncio
from typing import Any, Callable, Mapping

import httpx

from placefinder.logging import logger
from placefinder.services.exceptions import LocationError, TransportFailure

JSONSuccess = Callable[[Any], None]
JSONFailure = Callable[[LocationError], None]


class JSONOperation:
    """One GET request decoded as JSON.

    ``execute()`` schedules the request on the running event loop and returns
    immediately. Exactly one of ``on_success``/``on_failure`` is called unless
    the operation is cancelled first, in which case neither is.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        url: str,
        *,
        params: Mapping[str, str] | None = None,
        timeout: float = 10,
        name: str = "json_operation",
    ) -> None:
        self._client = client
        self.url = url
        self.params = dict(params or {})
        self.timeout = timeout
        self.name = name
        self.on_success: JSONSuccess | None = None
        self.on_failure: JSONFailure | None = None
        self._task: asyncio.Task[None] | None = None

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def execute(self) -> None:
        loop = asyncio.get_running_loop()
        self._task = loop.create_task(self._run())

    def cancel(self) -> None:
        if self.is_running:
            logger.debug("json_operation_cancelled", operation=self.name)
            self._task.cancel()

    async def _run(self) -> None:
        try:
            response = await self._client.get(self.url, params=self.params, timeout=self.timeout)
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPStatusError as exc:
            status_code = exc.response.status_code if exc.response is not None else "unknown"
            self._fail(TransportFailure(exc, f"Request failed ({status_code})."))
            return
        except httpx.TimeoutException as exc:
            self._fail(TransportFailure(exc, f"Request timed out after {self.timeout}s."))
            return
        except httpx.RequestError as exc:
            self._fail(TransportFailure(exc))
            return
        except ValueError as exc:
            self._fail(TransportFailure(exc, "Response is not valid JSON."))
            return

        if self.on_success is not None:
            self.on_success(payload)

    def _fail(self, error: TransportFailure) -> None:
        logger.warning(
            "json_operation_failed",
            operation=self.name,
            params=self.params,
            error=str(error),
            cause=error.cause.__class__.__name__,
        )
        if self.on_failure is not None:
            self.on_failure(error)


__all__ = ["JSONOperation", "JSONSuccess", "JSONFailure"]
