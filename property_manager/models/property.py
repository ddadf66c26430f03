"""Property records and the inputs used to create and query them."""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional

from sqlalchemy import JSON, Column, DateTime
from sqlmodel import Field, SQLModel

from .weather import WeatherSnapshot


def _utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def _new_id() -> str:
    return str(uuid.uuid4())


class Property(SQLModel, table=True):
    """A street address enriched with the weather at creation time."""

    id: str = Field(default_factory=_new_id, primary_key=True, max_length=36)
    city: str = Field(index=True)
    street: str
    state: str = Field(max_length=2, index=True)
    zip_code: str = Field(max_length=5, index=True)
    lat: float
    long: float
    weather_data: Dict[str, Any] = Field(
        default_factory=dict,
        sa_column=Column(JSON, nullable=False),
        description="Weatherstack snapshot, stored as returned by the provider",
    )
    created_at: datetime = Field(default_factory=_utcnow, nullable=False, index=True)
    updated_at: datetime = Field(
        default_factory=_utcnow,
        sa_column=Column(DateTime, nullable=False, default=_utcnow, onupdate=_utcnow),
    )

    @property
    def weather(self) -> WeatherSnapshot:
        return WeatherSnapshot.model_validate(self.weather_data)


@dataclass
class PropertyInput:
    """Raw create submission; any field may be missing before sanitizing."""

    city: Optional[str] = None
    street: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = None


class SortField(str, Enum):
    CREATED_AT = "created_at"
    CITY = "city"
    STATE = "state"


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"


@dataclass
class PropertyFilters:
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = None
    sort_by: SortField = SortField.CREATED_AT
    sort_order: SortOrder = SortOrder.DESC
    limit: Optional[int] = None
    offset: Optional[int] = None


__all__ = [
    "Property",
    "PropertyInput",
    "PropertyFilters",
    "SortField",
    "SortOrder",
]
