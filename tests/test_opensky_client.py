"""
Tests for the OpenSky client.

The HTTP session is replaced with a Mock so no network is used.
"""

from unittest.mock import Mock

import pytest
import requests

from conftest import UAL123_VECTOR
from planetracker.errors import DecodeError, NetworkError
from planetracker.ingestion.opensky_client import FlightRoute, OpenSkyClient


def make_response(status=200, json_data=None, json_error=None):
    response = Mock()
    response.status_code = status
    if status >= 400:
        response.raise_for_status.side_effect = requests.exceptions.HTTPError(response=response)
    else:
        response.raise_for_status.return_value = None
    if json_error is not None:
        response.json.side_effect = json_error
    else:
        response.json.return_value = json_data
    return response


def make_client(response=None, side_effect=None):
    session = Mock()
    session.headers = {}
    if side_effect is not None:
        session.get.side_effect = side_effect
    else:
        session.get.return_value = response
    return OpenSkyClient(base_url="https://example.test/api/", timeout=12, session=session), session


class TestFetchStates:
    def test_fetch_global(self):
        client, session = make_client(make_response(json_data={"time": 1700000000, "states": [UAL123_VECTOR]}))

        payload = client.fetch_global()

        assert payload.time == 1700000000
        assert payload.states == [UAL123_VECTOR]
        assert len(payload) == 1
        session.get.assert_called_once_with("https://example.test/api/states/all", params=None, timeout=12)

    def test_fetch_bounding_box_params(self):
        client, session = make_client(make_response(json_data={"time": 1, "states": []}))

        client.fetch_bounding_box(north=41, south=40, east=-73, west=-75)

        _, kwargs = session.get.call_args
        assert kwargs["params"] == {"lamin": 40, "lamax": 41, "lomin": -75, "lomax": -73}

    def test_bounding_box_validated_before_request(self):
        client, session = make_client(make_response(json_data={}))

        with pytest.raises(ValueError):
            client.fetch_bounding_box(north=40, south=41, east=-73, west=-75)
        session.get.assert_not_called()

    def test_null_states_preserved(self):
        client, _ = make_client(make_response(json_data={"time": 5, "states": None}))
        payload = client.fetch_global()
        assert payload.states is None
        assert len(payload) == 0

    def test_http_error(self):
        client, _ = make_client(make_response(status=503))
        with pytest.raises(NetworkError) as excinfo:
            client.fetch_global()
        assert excinfo.value.status_code == 503

    def test_rate_limited(self):
        client, _ = make_client(make_response(status=429))
        with pytest.raises(NetworkError) as excinfo:
            client.fetch_global()
        assert excinfo.value.status_code == 429

    def test_timeout(self):
        client, _ = make_client(side_effect=requests.exceptions.Timeout())
        with pytest.raises(NetworkError, match="timed out"):
            client.fetch_global()

    def test_connection_error(self):
        client, _ = make_client(side_effect=requests.exceptions.ConnectionError("refused"))
        with pytest.raises(NetworkError):
            client.fetch_global()

    def test_invalid_json(self):
        client, _ = make_client(make_response(json_error=ValueError("bad json")))
        with pytest.raises(DecodeError):
            client.fetch_global()

    @pytest.mark.parametrize("body", [[], "states", {"states": "nope"}, {"states": {"a": 1}}])
    def test_malformed_body(self, body):
        client, _ = make_client(make_response(json_data=body))
        with pytest.raises(DecodeError):
            client.fetch_global()

    def test_non_integer_time_ignored(self):
        client, _ = make_client(make_response(json_data={"time": "soon", "states": []}))
        assert client.fetch_global().time is None


class TestFetchFlightRoute:
    ROUTE = {
        "icao24": "abc123",
        "callsign": "UAL123  ",
        "firstSeen": 1699990000,
        "lastSeen": 1700000000,
        "estDepartureAirport": "KSFO",
        "estArrivalAirport": "KJFK",
    }

    def test_returns_first_route(self):
        client, session = make_client(make_response(json_data=[self.ROUTE, {"icao24": "abc123"}]))

        route = client.fetch_flight_route("ABC123", now=1700000000)

        assert route == FlightRoute(
            icao24="abc123",
            callsign="UAL123",
            first_seen=1699990000,
            last_seen=1700000000,
            est_departure_airport="KSFO",
            est_arrival_airport="KJFK",
        )
        _, kwargs = session.get.call_args
        assert kwargs["params"] == {"icao24": "abc123", "begin": 1700000000 - 24 * 3600, "end": 1700000000}

    def test_empty_list(self):
        client, _ = make_client(make_response(json_data=[]))
        assert client.fetch_flight_route("abc123") is None

    def test_not_found(self):
        client, _ = make_client(make_response(status=404))
        assert client.fetch_flight_route("abc123") is None

    def test_server_error_propagates(self):
        client, _ = make_client(make_response(status=500))
        with pytest.raises(NetworkError):
            client.fetch_flight_route("abc123")

    def test_malformed_body(self):
        client, _ = make_client(make_response(json_data={"icao24": "abc123"}))
        with pytest.raises(DecodeError):
            client.fetch_flight_route("abc123")
