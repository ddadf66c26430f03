"""Weatherstack integration and the synthetic weather generator."""

from __future__ import annotations

import logging
import random
import time
from datetime import datetime
from typing import Any
from zoneinfo import ZoneInfo

import httpx
from pydantic import ValidationError as SchemaError

from property_manager.core.config import Settings, settings
from property_manager.core.errors import WeatherErrorKind, WeatherFetchError
from property_manager.models import WeatherSnapshot

logger = logging.getLogger(__name__)

WEATHERSTACK_URL = "https://api.weatherstack.com/current"
MOCK_API_KEYS = frozenset({"demo", "mock"})

# Provider error codes from the Weatherstack documentation.
_PROVIDER_ERRORS: dict[int, tuple[WeatherErrorKind, str]] = {
    101: (WeatherErrorKind.INVALID_API_KEY, "Invalid Weatherstack API key"),
    429: (WeatherErrorKind.QUOTA_EXCEEDED, "API request limit reached for this month"),
    601: (WeatherErrorKind.INVALID_LOCATION, "Invalid location: {query}"),
    615: (WeatherErrorKind.REQUEST_FAILED, "Weatherstack API request failed"),
}

_HTTP_ERRORS: dict[int, tuple[WeatherErrorKind, str]] = {
    401: (WeatherErrorKind.UNAUTHORIZED, "Unauthorized - Invalid Weatherstack API key"),
    429: (WeatherErrorKind.RATE_LIMITED, "Too many requests - Weatherstack rate limit exceeded"),
    403: (WeatherErrorKind.FORBIDDEN, "Forbidden - Current plan does not support this feature"),
    404: (WeatherErrorKind.ENDPOINT_NOT_FOUND, "Weatherstack API endpoint not found"),
}

# (timezone id, utc offset) for the states the generator knows about.
_STATE_TIMEZONES: dict[str, tuple[str, str]] = {
    "CA": ("America/Los_Angeles", "-8.0"),
    "NY": ("America/New_York", "-5.0"),
    "FL": ("America/New_York", "-5.0"),
    "TX": ("America/Chicago", "-6.0"),
    "IL": ("America/Chicago", "-6.0"),
    "AZ": ("America/Phoenix", "-7.0"),
}
_DEFAULT_TIMEZONE = ("America/New_York", "-5.0")

_SUNNY_ICON = "https://cdn.worldweatheronline.com/images/wsymbols01_png_64/wsymbol_0001_sunny.png"


def city_hash(city: str) -> int:
    """31-multiplier rolling hash over the lowercased city, wrapped to signed 32 bits."""

    value = 0
    for char in city.lower():
        value = (value << 5) - value + ord(char)
        value = (value + 2**31) % 2**32 - 2**31
    return value


def mock_coordinates(city: str) -> tuple[float, float]:
    """Stable contiguous-US coordinates for a city name."""

    magnitude = abs(city_hash(city))
    lat = 24 + (magnitude % 25000) / 1000
    lon = -125 + (magnitude % 59000) / 1000
    return round(lat, 3), round(lon, 3)


def state_timezone(state: str) -> tuple[str, str]:
    return _STATE_TIMEZONES.get(state.upper(), _DEFAULT_TIMEZONE)


class WeatherstackClient:
    """Fetch current conditions from Weatherstack, or synthesize them in mock mode."""

    def __init__(
        self,
        api_key: str,
        base_url: str = WEATHERSTACK_URL,
        timeout: float = 15.0,
        test_timeout: float = 10.0,
        http_client: httpx.Client | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self.api_key = api_key
        self.base_url = base_url
        self.timeout = timeout
        self.test_timeout = test_timeout
        self._owns_client = http_client is None
        self._http = http_client or httpx.Client()
        self._rng = rng or random.Random()

    @property
    def is_mock(self) -> bool:
        return self.api_key in MOCK_API_KEYS

    def close(self) -> None:
        if self._owns_client:
            self._http.close()

    def get_current_weather(self, city: str, state: str, zip_code: str) -> WeatherSnapshot:
        """Return current conditions for ``"<city>, <state> <zip>"``.

        Raises WeatherFetchError for provider errors, incomplete payloads and
        transport failures. There is no retry: one failed call is one error.
        """

        query = f"{city}, {state} {zip_code}"
        if self.is_mock:
            logger.info("Using mock weather data for %s", query, extra={"query": query})
            return self.get_mock_weather_data(city, state, zip_code)

        logger.info("Fetching weather from Weatherstack for %s", query, extra={"query": query})
        payload = self._get(query, self.timeout)
        snapshot = self._parse(payload, query)
        logger.info("Fetched weather for %s", snapshot.location.name, extra={"query": query})
        return snapshot

    def _get(self, query: str, timeout: float) -> dict[str, Any]:
        params = {"access_key": self.api_key, "query": query, "units": "m"}
        try:
            response = self._http.get(self.base_url, params=params, timeout=timeout)
            response.raise_for_status()
        except httpx.TimeoutException as exc:
            logger.warning("Weatherstack request timed out for %s", query, extra={"query": query})
            raise WeatherFetchError(
                "Weatherstack API timeout - please try again", WeatherErrorKind.TIMEOUT
            ) from exc
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            logger.warning(
                "Weatherstack error response: %s %s", status, exc.response.text[:500]
            )
            if status in _HTTP_ERRORS:
                subkind, message = _HTTP_ERRORS[status]
                raise WeatherFetchError(message, subkind, code=status) from exc
            raise WeatherFetchError(
                f"Weatherstack service error: {exc}", WeatherErrorKind.TRANSPORT, code=status
            ) from exc
        except httpx.HTTPError as exc:
            logger.warning("Failed to reach Weatherstack: %s", exc, exc_info=True)
            raise WeatherFetchError(
                f"Weatherstack service error: {exc}", WeatherErrorKind.TRANSPORT
            ) from exc

        try:
            payload = response.json()
        except ValueError as exc:
            raise WeatherFetchError(
                "Weatherstack API returned a non-JSON response",
                WeatherErrorKind.MALFORMED_RESPONSE,
            ) from exc
        if not isinstance(payload, dict):
            raise WeatherFetchError(
                "Weatherstack API returned an unexpected response",
                WeatherErrorKind.MALFORMED_RESPONSE,
            )
        return payload

    def _parse(self, payload: dict[str, Any], query: str) -> WeatherSnapshot:
        error = payload.get("error")
        if error:
            code = error.get("code") if isinstance(error, dict) else None
            info = error.get("info") if isinstance(error, dict) else None
            logger.warning("Weatherstack API error %s: %s", code, info, extra={"query": query})
            if isinstance(code, int) and code in _PROVIDER_ERRORS:
                subkind, message = _PROVIDER_ERRORS[code]
                raise WeatherFetchError(message.format(query=query), subkind, code=code)
            raise WeatherFetchError(
                f"Weatherstack API error ({code}): {info}", WeatherErrorKind.UNKNOWN_CODE, code=code
            )

        if payload.get("success") is False:
            raise WeatherFetchError(
                "Weatherstack API returned unsuccessful response", WeatherErrorKind.UNSUCCESSFUL
            )
        if not payload.get("current"):
            raise WeatherFetchError(
                "No current weather data returned from Weatherstack API", WeatherErrorKind.NO_CURRENT
            )
        if not payload.get("location"):
            raise WeatherFetchError(
                "No location data returned from Weatherstack API", WeatherErrorKind.NO_LOCATION
            )

        try:
            return WeatherSnapshot.model_validate(payload)
        except SchemaError as exc:
            logger.warning("Weatherstack payload failed schema validation: %s", exc)
            raise WeatherFetchError(
                f"Weatherstack API returned a malformed response: {exc.error_count()} invalid field(s)",
                WeatherErrorKind.MALFORMED_RESPONSE,
            ) from exc

    def get_mock_weather_data(self, city: str, state: str, zip_code: str) -> WeatherSnapshot:
        """Synthesize a snapshot: coordinates follow the city name, magnitudes are random."""

        lat, lon = mock_coordinates(city)
        timezone_id, utc_offset = state_timezone(state)
        now = datetime.now(ZoneInfo(timezone_id))
        rng = self._rng

        return WeatherSnapshot.model_validate(
            {
                "request": {
                    "type": "City",
                    "query": f"{city}, {state} {zip_code}",
                    "language": "en",
                    "unit": "m",
                },
                "location": {
                    "name": city,
                    "country": "United States of America",
                    "region": state,
                    "lat": str(lat),
                    "lon": str(lon),
                    "timezone_id": timezone_id,
                    "localtime": now.strftime("%Y-%m-%d %H:%M"),
                    "localtime_epoch": int(time.time()),
                    "utc_offset": utc_offset,
                },
                "current": {
                    "observation_time": now.strftime("%I:%M %p"),
                    "temperature": rng.randint(10, 39),
                    "weather_code": 113,
                    "weather_icons": [_SUNNY_ICON],
                    "weather_descriptions": ["Sunny"],
                    "wind_speed": rng.randint(5, 24),
                    "wind_degree": rng.randint(0, 359),
                    "wind_dir": "SW",
                    "pressure": 1013,
                    "precip": 0,
                    "humidity": rng.randint(30, 79),
                    "cloudcover": rng.randint(0, 29),
                    "feelslike": rng.randint(10, 39),
                    "uv_index": rng.randint(0, 9),
                    "visibility": 10,
                    "is_day": "yes",
                },
            }
        )

    def test_connection(self) -> bool:
        """Minimal live lookup for health checks. Logs the cause and returns False on failure."""

        if self.is_mock:
            logger.info("Weatherstack connection test skipped in mock mode")
            return True

        try:
            params = {"access_key": self.api_key, "query": "New York", "units": "m"}
            response = self._http.get(self.base_url, params=params, timeout=self.test_timeout)
            response.raise_for_status()
            payload = response.json()
        except Exception as exc:
            logger.error("Weatherstack connection test failed: %s", exc)
            return False

        if not isinstance(payload, dict):
            logger.error("Weatherstack connection test failed: invalid response structure")
            return False
        error = payload.get("error")
        if error:
            info = error.get("info") if isinstance(error, dict) else error
            logger.error("Weatherstack connection test failed: %s", info)
            return False
        if payload.get("current") and payload.get("location"):
            logger.info("Weatherstack connection test succeeded")
            return True

        logger.error("Weatherstack connection test failed: invalid response structure")
        return False


def build_weather_client(config: Settings | None = None) -> WeatherstackClient:
    config = config or settings
    return WeatherstackClient(
        api_key=config.weatherstack_api_key,
        base_url=config.weatherstack_base_url,
        timeout=config.weatherstack_timeout,
        test_timeout=config.weatherstack_test_timeout,
    )


__all__ = [
    "WEATHERSTACK_URL",
    "MOCK_API_KEYS",
    "WeatherstackClient",
    "build_weather_client",
    "city_hash",
    "mock_coordinates",
    "state_timezone",
]
