"""Database models and the weather snapshot schema."""

from .property import Property, PropertyFilters, PropertyInput, SortField, SortOrder
from .weather import (
    WEATHER_SCHEMA_VERSION,
    WeatherCurrent,
    WeatherLocation,
    WeatherRequest,
    WeatherSnapshot,
)

__all__ = [
    "Property",
    "PropertyFilters",
    "PropertyInput",
    "SortField",
    "SortOrder",
    "WEATHER_SCHEMA_VERSION",
    "WeatherCurrent",
    "WeatherLocation",
    "WeatherRequest",
    "WeatherSnapshot",
]
