"""Service-layer utilities."""

from .properties import PropertyService
from .validation import US_STATES, ValidationResult, sanitize_input, validate_property_input
from .weather import WeatherstackClient, build_weather_client

__all__ = [
    "PropertyService",
    "US_STATES",
    "ValidationResult",
    "sanitize_input",
    "validate_property_input",
    "WeatherstackClient",
    "build_weather_client",
]
