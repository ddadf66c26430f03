"""Sample properties for local development and demos."""

from __future__ import annotations

import argparse
import logging
from dataclasses import dataclass

from sqlmodel import Session, delete

from property_manager.core.logging_config import setup_logging
from property_manager.db.session import get_session, init_db
from property_manager.models import Property, WeatherSnapshot

logger = logging.getLogger(__name__)

_ICON_BASE = "https://cdn.worldweatheronline.com/images/wsymbols01_png_64/"


@dataclass(frozen=True)
class SampleProperty:
    city: str
    street: str
    state: str
    zip_code: str
    lat: float
    long: float
    region: str
    timezone_id: str
    utc_offset: str
    temperature: int
    weather_code: int
    icon: str
    description: str
    wind_speed: int
    wind_dir: str
    humidity: int
    cloudcover: int
    visibility: int
    is_day: str

    def snapshot(self) -> WeatherSnapshot:
        return WeatherSnapshot.model_validate(
            {
                "request": {
                    "type": "City",
                    "query": f"{self.city}, {self.state} {self.zip_code}",
                    "language": "en",
                    "unit": "m",
                },
                "location": {
                    "name": self.city,
                    "country": "United States of America",
                    "region": self.region,
                    "lat": f"{self.lat:.3f}",
                    "lon": f"{self.long:.3f}",
                    "timezone_id": self.timezone_id,
                    "localtime": "2025-08-28 14:30",
                    "localtime_epoch": 1756391400,
                    "utc_offset": self.utc_offset,
                },
                "current": {
                    "observation_time": "09:30 PM",
                    "temperature": self.temperature,
                    "weather_code": self.weather_code,
                    "weather_icons": [_ICON_BASE + self.icon],
                    "weather_descriptions": [self.description],
                    "wind_speed": self.wind_speed,
                    "wind_degree": 270,
                    "wind_dir": self.wind_dir,
                    "pressure": 1013,
                    "precip": 0,
                    "humidity": self.humidity,
                    "cloudcover": self.cloudcover,
                    "feelslike": self.temperature,
                    "uv_index": 3 if self.is_day == "yes" else 0,
                    "visibility": self.visibility,
                    "is_day": self.is_day,
                },
            }
        )

    def to_model(self) -> Property:
        return Property(
            city=self.city,
            street=self.street,
            state=self.state,
            zip_code=self.zip_code,
            lat=self.lat,
            long=self.long,
            weather_data=self.snapshot().to_storage(),
        )


SAMPLE_PROPERTIES: tuple[SampleProperty, ...] = (
    SampleProperty(
        "Phoenix", "123 Main Street", "AZ", "85001", 33.4484, -112.074, "Arizona",
        "America/Phoenix", "-7.0", 22, 113, "wsymbol_0001_sunny.png", "Sunny",
        8, "W", 35, 0, 16, "yes",
    ),
    SampleProperty(
        "Miami", "456 Ocean Drive", "FL", "33139", 25.7617, -80.1918, "Florida",
        "America/New_York", "-5.0", 28, 116, "wsymbol_0002_sunny_intervals.png", "Partly cloudy",
        12, "E", 78, 40, 10, "yes",
    ),
    SampleProperty(
        "New York", "789 Broadway", "NY", "10003", 40.7128, -74.006, "New York",
        "America/New_York", "-5.0", 5, 296, "wsymbol_0017_cloudy_with_light_rain.png", "Light rain",
        15, "NE", 85, 90, 8, "no",
    ),
    SampleProperty(
        "Los Angeles", "321 Sunset Boulevard", "CA", "90028", 34.0522, -118.2437, "California",
        "America/Los_Angeles", "-8.0", 18, 143, "wsymbol_0006_mist.png", "Mist",
        6, "SW", 82, 75, 5, "no",
    ),
    SampleProperty(
        "Chicago", "555 Michigan Avenue", "IL", "60611", 41.8781, -87.6298, "Illinois",
        "America/Chicago", "-6.0", -5, 230, "wsymbol_0020_cloudy_with_heavy_snow.png", "Blizzard",
        25, "N", 90, 100, 2, "no",
    ),
)


def seed_properties(session: Session, reset: bool = False) -> int:
    """Insert the sample rows, optionally clearing the table first. Returns rows inserted."""

    if reset:
        session.exec(delete(Property))
        logger.info("Cleared existing properties")
    for sample in SAMPLE_PROPERTIES:
        session.add(sample.to_model())
    session.commit()
    logger.info("Seeded %d sample properties", len(SAMPLE_PROPERTIES))
    return len(SAMPLE_PROPERTIES)


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Seed sample properties.")
    parser.add_argument("--reset", action="store_true", help="Delete existing properties first.")
    return parser.parse_args()


def main() -> int:
    setup_logging(service_name="property-seed")
    args = parse_args()
    init_db()
    with get_session() as session:
        seed_properties(session, reset=args.reset)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
