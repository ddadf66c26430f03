import random

import httpx
import pytest

from conftest import weatherstack_payload
from property_manager.core.errors import WeatherErrorKind, WeatherFetchError
from property_manager.services.weather import (
    WeatherstackClient,
    city_hash,
    mock_coordinates,
    state_timezone,
)


def _json(payload, status_code=200):
    return lambda request: httpx.Response(status_code, json=payload)


# --- live lookups -----------------------------------------------------------


def test_live_lookup_sends_one_request_with_query_and_metric_units(live_weather):
    client = live_weather(_json(weatherstack_payload()))

    snapshot = client.get_current_weather("Phoenix", "AZ", "85001")

    assert len(client.requests) == 1
    request = client.requests[0]
    assert request.method == "GET"
    assert str(request.url).startswith("https://api.weatherstack.com/current")
    assert request.url.params["access_key"] == "live-key"
    assert request.url.params["query"] == "Phoenix, AZ 85001"
    assert request.url.params["units"] == "m"
    assert request.extensions["timeout"]["read"] == 15.0
    assert snapshot.location.name == "Phoenix"
    assert snapshot.current.temperature == 38


def test_live_lookup_keeps_provider_body_verbatim(live_weather):
    payload = weatherstack_payload()
    payload["current"]["air_quality"] = {"pm2_5": "4.2"}
    client = live_weather(_json(payload))

    snapshot = client.get_current_weather("Phoenix", "AZ", "85001")

    assert snapshot.to_storage() == payload


@pytest.mark.parametrize(
    "code, subkind, fragment",
    [
        (101, WeatherErrorKind.INVALID_API_KEY, "Invalid Weatherstack API key"),
        (429, WeatherErrorKind.QUOTA_EXCEEDED, "this month"),
        (601, WeatherErrorKind.INVALID_LOCATION, "Invalid location: Phoenix, AZ 85001"),
        (615, WeatherErrorKind.REQUEST_FAILED, "Weatherstack API request failed"),
        (999, WeatherErrorKind.UNKNOWN_CODE, "(999): something odd"),
    ],
)
def test_provider_error_codes(live_weather, code, subkind, fragment):
    body = {"success": False, "error": {"code": code, "type": "x", "info": "something odd"}}
    client = live_weather(_json(body))

    with pytest.raises(WeatherFetchError) as excinfo:
        client.get_current_weather("Phoenix", "AZ", "85001")

    assert excinfo.value.subkind is subkind
    assert excinfo.value.code == code
    assert fragment in str(excinfo.value)


def test_unsuccessful_response_without_error_object(live_weather):
    client = live_weather(_json({"success": False}))
    with pytest.raises(WeatherFetchError) as excinfo:
        client.get_current_weather("Phoenix", "AZ", "85001")
    assert excinfo.value.subkind is WeatherErrorKind.UNSUCCESSFUL


def test_missing_current_section(live_weather):
    payload = weatherstack_payload()
    del payload["current"]
    client = live_weather(_json(payload))

    with pytest.raises(WeatherFetchError, match="No current weather data") as excinfo:
        client.get_current_weather("Phoenix", "AZ", "85001")
    assert excinfo.value.subkind is WeatherErrorKind.NO_CURRENT


def test_missing_location_section(live_weather):
    payload = weatherstack_payload()
    del payload["location"]
    client = live_weather(_json(payload))

    with pytest.raises(WeatherFetchError, match="No location data") as excinfo:
        client.get_current_weather("Phoenix", "AZ", "85001")
    assert excinfo.value.subkind is WeatherErrorKind.NO_LOCATION


def test_location_missing_required_field_is_malformed(live_weather):
    payload = weatherstack_payload()
    del payload["location"]["lat"]
    client = live_weather(_json(payload))

    with pytest.raises(WeatherFetchError) as excinfo:
        client.get_current_weather("Phoenix", "AZ", "85001")
    assert excinfo.value.subkind is WeatherErrorKind.MALFORMED_RESPONSE


def test_non_json_body_is_malformed(live_weather):
    client = live_weather(lambda request: httpx.Response(200, text="<html>oops</html>"))
    with pytest.raises(WeatherFetchError) as excinfo:
        client.get_current_weather("Phoenix", "AZ", "85001")
    assert excinfo.value.subkind is WeatherErrorKind.MALFORMED_RESPONSE


@pytest.mark.parametrize(
    "status, subkind, fragment",
    [
        (401, WeatherErrorKind.UNAUTHORIZED, "Unauthorized"),
        (429, WeatherErrorKind.RATE_LIMITED, "rate limit"),
        (403, WeatherErrorKind.FORBIDDEN, "plan does not support"),
        (404, WeatherErrorKind.ENDPOINT_NOT_FOUND, "endpoint not found"),
        (500, WeatherErrorKind.TRANSPORT, "Weatherstack service error"),
    ],
)
def test_http_status_errors(live_weather, status, subkind, fragment):
    client = live_weather(_json({"message": "nope"}, status_code=status))

    with pytest.raises(WeatherFetchError) as excinfo:
        client.get_current_weather("Phoenix", "AZ", "85001")

    assert excinfo.value.subkind is subkind
    assert excinfo.value.code == status
    assert fragment in str(excinfo.value)


def test_timeout_is_reported_separately(live_weather):
    def handler(request):
        raise httpx.ReadTimeout("timed out", request=request)

    client = live_weather(handler)
    with pytest.raises(WeatherFetchError, match="timeout") as excinfo:
        client.get_current_weather("Phoenix", "AZ", "85001")
    assert excinfo.value.subkind is WeatherErrorKind.TIMEOUT
    assert isinstance(excinfo.value.__cause__, httpx.ReadTimeout)


def test_connection_error_is_wrapped_with_message(live_weather):
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    client = live_weather(handler)
    with pytest.raises(WeatherFetchError, match="Weatherstack service error: connection refused") as excinfo:
        client.get_current_weather("Phoenix", "AZ", "85001")
    assert excinfo.value.subkind is WeatherErrorKind.TRANSPORT


def test_non_transport_exceptions_propagate_unchanged(live_weather):
    def handler(request):
        raise KeyError("boom")

    client = live_weather(handler)
    with pytest.raises(KeyError):
        client.get_current_weather("Phoenix", "AZ", "85001")


def test_no_retry_after_failure(live_weather):
    client = live_weather(_json({"error": {"code": 615, "info": "failed"}}))
    with pytest.raises(WeatherFetchError):
        client.get_current_weather("Phoenix", "AZ", "85001")
    assert len(client.requests) == 1


# --- mock mode --------------------------------------------------------------


@pytest.mark.parametrize("api_key", ["mock", "demo"])
def test_sentinel_keys_never_touch_the_network(api_key):
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(500)

    http = httpx.Client(transport=httpx.MockTransport(handler))
    client = WeatherstackClient(api_key=api_key, http_client=http)

    snapshot = client.get_current_weather("Phoenix", "AZ", "85001")

    assert client.is_mock
    assert calls == []
    assert snapshot.location.name == "Phoenix"
    assert snapshot.location.region == "AZ"
    http.close()


def test_mock_coordinates_are_deterministic_per_city(mock_weather):
    first = mock_weather.get_mock_weather_data("Phoenix", "AZ", "85001")
    second = mock_weather.get_mock_weather_data("Phoenix", "AZ", "85004")
    miami = mock_weather.get_mock_weather_data("Miami", "FL", "33139")

    assert (first.location.lat, first.location.lon) == (second.location.lat, second.location.lon)
    assert (first.location.lat, first.location.lon) != (miami.location.lat, miami.location.lon)


def test_mock_coordinates_ignore_case():
    assert mock_coordinates("PHOENIX") == mock_coordinates("phoenix")


def test_mock_coordinates_known_value():
    assert city_hash("a") == 97
    assert mock_coordinates("A") == (24.097, -124.903)


@pytest.mark.parametrize("city", ["Phoenix", "Miami", "San Francisco", "x" * 200, "", "Zürich"])
def test_mock_coordinates_stay_in_range(city):
    assert -(2**31) <= city_hash(city) < 2**31
    lat, lon = mock_coordinates(city)
    assert 24 <= lat < 49
    assert -125 <= lon < -66
    assert round(lat, 3) == lat
    assert round(lon, 3) == lon


def test_mock_snapshot_shape(mock_weather):
    snapshot = mock_weather.get_mock_weather_data("Phoenix", "AZ", "85001")

    assert snapshot.request.type == "City"
    assert snapshot.request.query == "Phoenix, AZ 85001"
    assert snapshot.request.language == "en"
    assert snapshot.request.unit == "m"
    assert snapshot.location.country == "United States of America"
    assert snapshot.location.timezone_id == "America/Phoenix"
    assert snapshot.location.utc_offset == "-7.0"
    assert len(snapshot.location.localtime) == len("2025-08-28 14:30")
    assert snapshot.location.localtime_epoch > 0
    lat, lon = snapshot.coordinates()
    assert (lat, lon) == mock_coordinates("Phoenix")

    current = snapshot.current
    assert current.weather_descriptions == ["Sunny"]
    assert current.weather_icons[0].endswith("wsymbol_0001_sunny.png")
    assert current.wind_dir == "SW"
    assert current.pressure == 1013
    assert current.precip == 0
    assert current.visibility == 10
    assert current.is_day == "yes"


def test_mock_magnitudes_are_bounded():
    client = WeatherstackClient(api_key="mock", rng=random.Random(7))
    for _ in range(200):
        current = client.get_mock_weather_data("Phoenix", "AZ", "85001").current
        assert 10 <= current.temperature < 40
        assert 10 <= current.feelslike < 40
        assert 5 <= current.wind_speed < 25
        assert 0 <= current.wind_degree < 360
        assert 30 <= current.humidity < 80
        assert 0 <= current.cloudcover < 30
        assert 0 <= current.uv_index < 10
    client.close()


@pytest.mark.parametrize(
    "state, expected",
    [
        ("CA", ("America/Los_Angeles", "-8.0")),
        ("TX", ("America/Chicago", "-6.0")),
        ("az", ("America/Phoenix", "-7.0")),
        ("WA", ("America/New_York", "-5.0")),
        ("", ("America/New_York", "-5.0")),
    ],
)
def test_state_timezone_table(state, expected):
    assert state_timezone(state) == expected


# --- connectivity self-test -------------------------------------------------


def test_connection_check_in_mock_mode_is_true(mock_weather):
    assert mock_weather.test_connection() is True


def test_connection_check_success(live_weather):
    client = live_weather(_json(weatherstack_payload(city="New York", query="New York")))
    assert client.test_connection() is True
    request = client.requests[0]
    assert request.url.params["query"] == "New York"
    assert request.extensions["timeout"]["read"] == 10.0


def test_connection_check_error_body_is_false(live_weather, caplog):
    client = live_weather(_json({"error": {"code": 101, "info": "You have not supplied a valid API Access Key."}}))
    assert client.test_connection() is False
    assert "valid API Access Key" in caplog.text


def test_connection_check_bad_structure_is_false(live_weather):
    client = live_weather(_json({"request": {}}))
    assert client.test_connection() is False


@pytest.mark.parametrize(
    "error",
    [
        httpx.ConnectError("refused"),
        httpx.ReadTimeout("slow"),
        RuntimeError("unexpected"),
    ],
)
def test_connection_check_never_raises(live_weather, error):
    def handler(request):
        raise error

    client = live_weather(handler)
    assert client.test_connection() is False
