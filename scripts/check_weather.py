"""Weatherstack connectivity check for deploy smoke tests."""

from __future__ import annotations

import argparse

from property_manager.core.config import settings
from property_manager.core.errors import WeatherFetchError
from property_manager.core.logging_config import setup_logging
from property_manager.services import WeatherstackClient, build_weather_client


def main() -> int:
    parser = argparse.ArgumentParser(description="Check that the Weatherstack API key works.")
    parser.add_argument("--api-key", type=str, default=None, help="Override WEATHERSTACK_API_KEY.")
    parser.add_argument(
        "--lookup",
        type=str,
        nargs=3,
        metavar=("CITY", "STATE", "ZIP"),
        help="Also fetch current weather for this address.",
    )
    args = parser.parse_args()

    setup_logging(service_name="weather-check")
    if args.api_key:
        client = WeatherstackClient(
            api_key=args.api_key,
            base_url=settings.weatherstack_base_url,
            timeout=settings.weatherstack_timeout,
            test_timeout=settings.weatherstack_test_timeout,
        )
    else:
        client = build_weather_client()

    try:
        if not client.test_connection():
            print("Weatherstack connection test failed.")
            return 1
        mode = "mock" if client.is_mock else "live"
        print(f"Weatherstack connection OK ({mode}).")
        if args.lookup:
            try:
                snapshot = client.get_current_weather(*args.lookup)
            except WeatherFetchError as exc:
                print(f"Lookup failed ({exc.subkind.value}): {exc}")
                return 1
            current = snapshot.current
            print(
                f"{snapshot.location.name}, {snapshot.location.region}: "
                f"{current.temperature}°C, {', '.join(current.weather_descriptions)}"
            )
    finally:
        client.close()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
