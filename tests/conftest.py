import os
import random
import socket
from typing import Any, Callable

# Settings are read at import time, so point them at SQLite and mock weather first.
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["WEATHERSTACK_API_KEY"] = "mock"

import httpx
import pytest
from sqlmodel import Session, SQLModel

from property_manager.db.session import init_db, make_engine
from property_manager.services import PropertyService, WeatherstackClient


@pytest.fixture(autouse=True)
def block_network(monkeypatch):
    if os.getenv("LIVE") == "1":
        return

    real_connect = socket.socket.connect

    def guarded_connect(sock, address):
        host = address[0] if isinstance(address, tuple) else address
        if host not in ("127.0.0.1", "localhost"):
            raise RuntimeError("Network access blocked in tests")
        return real_connect(sock, address)

    monkeypatch.setattr(socket.socket, "connect", guarded_connect)


@pytest.fixture()
def engine():
    engine = make_engine("sqlite://")
    init_db(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture()
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture()
def mock_weather():
    client = WeatherstackClient(api_key="mock", rng=random.Random(1234))
    yield client
    client.close()


@pytest.fixture()
def service(session, mock_weather):
    return PropertyService(session, mock_weather)


def weatherstack_payload(
    city: str = "Phoenix",
    region: str = "Arizona",
    lat: str = "33.448",
    lon: str = "-112.074",
    query: str = "Phoenix, AZ 85001",
) -> dict[str, Any]:
    """A realistic Weatherstack /current success body."""

    return {
        "request": {"type": "City", "query": query, "language": "en", "unit": "m"},
        "location": {
            "name": city,
            "country": "United States of America",
            "region": region,
            "lat": lat,
            "lon": lon,
            "timezone_id": "America/Phoenix",
            "localtime": "2025-08-28 14:30",
            "localtime_epoch": 1756391400,
            "utc_offset": "-7.0",
        },
        "current": {
            "observation_time": "09:30 PM",
            "temperature": 38,
            "weather_code": 113,
            "weather_icons": [
                "https://cdn.worldweatheronline.com/images/wsymbols01_png_64/wsymbol_0001_sunny.png"
            ],
            "weather_descriptions": ["Sunny"],
            "wind_speed": 11,
            "wind_degree": 250,
            "wind_dir": "WSW",
            "pressure": 1008,
            "precip": 0,
            "humidity": 14,
            "cloudcover": 0,
            "feelslike": 36,
            "uv_index": 8,
            "visibility": 16,
            "is_day": "yes",
        },
    }


@pytest.fixture()
def live_weather():
    """Build a non-mock client whose HTTP traffic goes to ``handler``.

    Every request is recorded on ``client.requests``.
    """

    clients: list[WeatherstackClient] = []

    def factory(handler: Callable[[httpx.Request], httpx.Response]) -> WeatherstackClient:
        requests: list[httpx.Request] = []

        def recording(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return handler(request)

        http = httpx.Client(transport=httpx.MockTransport(recording))
        client = WeatherstackClient(api_key="live-key", http_client=http)
        client.requests = requests
        clients.append(client)
        return client

    yield factory
    for client in clients:
        client._http.close()
