"""Weather snapshot models mirroring the Weatherstack ``/current`` payload."""

from __future__ import annotations

import math
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from property_manager.core.errors import CoordinateError

WEATHER_SCHEMA_VERSION = "weatherstack.current/v1"


class _ProviderModel(BaseModel):
    # Unknown provider keys are kept so the stored snapshot stays verbatim.
    model_config = ConfigDict(extra="allow")


class WeatherRequest(_ProviderModel):
    type: str
    query: str
    language: Optional[str] = None
    unit: Optional[str] = None


class WeatherLocation(_ProviderModel):
    name: str
    country: str
    region: str
    lat: str = Field(description="Latitude as a decimal string")
    lon: str = Field(description="Longitude as a decimal string")
    timezone_id: Optional[str] = None
    localtime: Optional[str] = None
    localtime_epoch: Optional[int] = None
    utc_offset: Optional[str] = None


class WeatherCurrent(_ProviderModel):
    observation_time: str
    temperature: int = Field(description="Degrees Celsius")
    weather_code: Optional[int] = None
    weather_icons: list[str] = Field(default_factory=list)
    weather_descriptions: list[str] = Field(default_factory=list)
    wind_speed: Optional[int] = None
    wind_degree: Optional[int] = None
    wind_dir: Optional[str] = None
    pressure: Optional[int] = None
    precip: Optional[float] = None
    humidity: Optional[int] = None
    cloudcover: Optional[int] = None
    feelslike: Optional[int] = None
    uv_index: Optional[int] = None
    visibility: Optional[int] = None
    is_day: Optional[str] = None


class WeatherSnapshot(_ProviderModel):
    """Current conditions for a location at the time a property was created."""

    request: Optional[WeatherRequest] = None
    location: WeatherLocation
    current: WeatherCurrent

    def coordinates(self) -> tuple[float, float]:
        """Parse the location's lat/lon strings, rejecting anything non-finite."""

        try:
            lat = float(self.location.lat)
            lon = float(self.location.lon)
        except (TypeError, ValueError) as exc:
            raise CoordinateError("Invalid coordinates received from weather service") from exc
        if not (math.isfinite(lat) and math.isfinite(lon)):
            raise CoordinateError("Invalid coordinates received from weather service")
        return lat, lon

    def to_storage(self) -> dict[str, Any]:
        """Plain dict for the JSON column, without keys the provider never sent."""

        return self.model_dump(mode="json", exclude_unset=True)


__all__ = [
    "WEATHER_SCHEMA_VERSION",
    "WeatherRequest",
    "WeatherLocation",
    "WeatherCurrent",
    "WeatherSnapshot",
]
