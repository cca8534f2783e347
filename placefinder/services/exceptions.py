"""Errors delivered through failure callbacks."""

from __future__ import annotations


class LocationError(Exception):
    pass


class MissingCredential(LocationError):
    def __init__(self, service_name: str) -> None:
        super().__init__(f"Missing API key for service '{service_name}'.")
        self.service_name = service_name


class TransportFailure(LocationError):
    def __init__(self, cause: BaseException, message: str | None = None) -> None:
        super().__init__(message or f"Transport failed: {cause}")
        self.cause = cause


class ProviderStatusError(LocationError):
    def __init__(self, status: str | None) -> None:
        super().__init__(f"Wrong google response (status={status!r}).")
        self.status = status


class NoDataAvailable(LocationError):
    def __init__(self) -> None:
        super().__init__("Failed to obtain data.")


class PlatformError(LocationError):
    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


__all__ = [
    "LocationError",
    "MissingCredential",
    "TransportFailure",
    "ProviderStatusError",
    "NoDataAvailable",
    "PlatformError",
]
