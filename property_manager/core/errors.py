"""Domain errors raised by the property services.

Every error carries an :class:`ErrorKind` so callers branch on the kind rather
than on message text. The human-readable message is kept on ``message``.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    VALIDATION = "validation"
    WEATHER_FETCH = "weather_fetch"
    COORDINATE = "coordinate"
    STORAGE = "storage"
    NOT_FOUND = "not_found"


class WeatherErrorKind(str, Enum):
    """Why a Weatherstack lookup failed."""

    INVALID_API_KEY = "invalid_api_key"
    QUOTA_EXCEEDED = "quota_exceeded"
    INVALID_LOCATION = "invalid_location"
    REQUEST_FAILED = "request_failed"
    UNKNOWN_CODE = "unknown_code"
    UNSUCCESSFUL = "unsuccessful"
    NO_CURRENT = "no_current"
    NO_LOCATION = "no_location"
    MALFORMED_RESPONSE = "malformed_response"
    TIMEOUT = "timeout"
    UNAUTHORIZED = "unauthorized"
    RATE_LIMITED = "rate_limited"
    FORBIDDEN = "forbidden"
    ENDPOINT_NOT_FOUND = "endpoint_not_found"
    TRANSPORT = "transport"
    UNEXPECTED = "unexpected"


class PropertyError(Exception):
    kind: ErrorKind

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def with_prefix(self, prefix: str) -> "PropertyError":
        """Copy of this error, same kind and details, with ``prefix: `` prepended."""

        wrapped = self.__class__.__new__(self.__class__)
        wrapped.__dict__.update(self.__dict__)
        wrapped.message = f"{prefix}: {self.message}"
        wrapped.args = (wrapped.message,)
        return wrapped

    def __str__(self) -> str:
        return self.message


class ValidationError(PropertyError):
    kind = ErrorKind.VALIDATION

    def __init__(self, message: str, errors: Optional[list[str]] = None) -> None:
        super().__init__(message)
        self.errors = list(errors or [])


class WeatherFetchError(PropertyError):
    kind = ErrorKind.WEATHER_FETCH

    def __init__(
        self,
        message: str,
        subkind: WeatherErrorKind,
        code: Optional[int] = None,
    ) -> None:
        super().__init__(message)
        self.subkind = subkind
        # provider error code or HTTP status, when there is one
        self.code = code


class CoordinateError(PropertyError):
    kind = ErrorKind.COORDINATE


class StorageError(PropertyError):
    kind = ErrorKind.STORAGE


class NotFoundError(PropertyError):
    kind = ErrorKind.NOT_FOUND


__all__ = [
    "ErrorKind",
    "WeatherErrorKind",
    "PropertyError",
    "ValidationError",
    "WeatherFetchError",
    "CoordinateError",
    "StorageError",
    "NotFoundError",
]
