"""Sanitizing and validating property submissions."""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from property_manager.models import PropertyInput

US_STATES: frozenset[str] = frozenset(
    {
        "AL", "AK", "AZ", "AR", "CA", "CO", "CT", "DE", "FL", "GA",
        "HI", "ID", "IL", "IN", "IA", "KS", "KY", "LA", "ME", "MD",
        "MA", "MI", "MN", "MS", "MO", "MT", "NE", "NV", "NH", "NJ",
        "NM", "NY", "NC", "ND", "OH", "OK", "OR", "PA", "RI", "SC",
        "SD", "TN", "TX", "UT", "VT", "VA", "WA", "WV", "WI", "WY",
        "DC", "PR", "VI", "GU", "AS", "MP",
    }
)

_ZIP_RE = re.compile(r"[0-9]{5}")

CITY_REQUIRED = "City is required"
STREET_REQUIRED = "Street is required"
STATE_INVALID = "Valid US state abbreviation is required (e.g., CA, NY, TX)"
ZIP_INVALID = "Valid 5-digit zip code is required"


@dataclass
class ValidationResult:
    is_valid: bool
    errors: list[str] = field(default_factory=list)


def validate_property_input(data: PropertyInput) -> ValidationResult:
    """Check every rule and collect one message per violation, in rule order."""

    errors: list[str] = []

    if not (data.city or "").strip():
        errors.append(CITY_REQUIRED)

    if not (data.street or "").strip():
        errors.append(STREET_REQUIRED)

    if (data.state or "").upper() not in US_STATES:
        errors.append(STATE_INVALID)

    if not _ZIP_RE.fullmatch(data.zip_code or ""):
        errors.append(ZIP_INVALID)

    return ValidationResult(is_valid=not errors, errors=errors)


def sanitize_input(data: PropertyInput) -> PropertyInput:
    return PropertyInput(
        city=(data.city or "").strip(),
        street=(data.street or "").strip(),
        state=(data.state or "").strip().upper(),
        zip_code=(data.zip_code or "").strip(),
    )


__all__ = [
    "US_STATES",
    "ValidationResult",
    "validate_property_input",
    "sanitize_input",
]
