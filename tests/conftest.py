"""
Shared fixtures for PlaneTracker tests.
"""

import threading
from typing import List, Optional

import pytest

from planetracker.errors import FetchError
from planetracker.ingestion import StatesPayload
from planetracker.store import SnapshotStore

UAL123_VECTOR = [
    "abc123", "UAL123 ", "United States", "1700000000", "1700000000",
    "-122.4194", "37.7749", "10668", "false", "231.2", "90", "0",
    None, "10668", None, "false", "0",
]


def make_vector(
    icao24: Optional[str] = "abc123",
    callsign: Optional[str] = "UAL123",
    country: Optional[str] = "United States",
    lon: Optional[str] = "-122.4194",
    lat: Optional[str] = "37.7749",
    baro_altitude: Optional[str] = "10668",
    on_ground: Optional[str] = "false",
    velocity: Optional[str] = "231.2",
    last_contact: Optional[str] = "1700000000",
) -> list:
    """Build a 17-field string-encoded state vector."""
    return [
        icao24, callsign, country, "1700000000", last_contact,
        lon, lat, baro_altitude, on_ground, velocity, "90", "0",
        None, baro_altitude, "1200", "false", "0",
    ]


class FakeClient:
    """
    Stand-in for OpenSkyClient.

    Returns queued payloads (or raises queued FetchErrors) and counts calls.
    When `block` is set, fetch_global waits on `release` after signalling
    `started`, so tests can hold a cycle in flight.
    """

    def __init__(self, results: Optional[List] = None, block: bool = False):
        self.results = list(results or [])
        self.block = block
        self.started = threading.Event()
        self.release = threading.Event()
        self.global_calls = 0
        self.bbox_calls = []

    def _next(self):
        result = self.results.pop(0) if len(self.results) > 1 else self.results[0]
        if isinstance(result, FetchError):
            raise result
        return result

    def fetch_global(self) -> StatesPayload:
        self.global_calls += 1
        self.started.set()
        if self.block:
            self.release.wait(timeout=5)
        return self._next()

    def fetch_bounding_box(self, north, south, east, west) -> StatesPayload:
        self.bbox_calls.append((north, south, east, west))
        return self._next()


@pytest.fixture
def store():
    return SnapshotStore()


@pytest.fixture
def payload():
    return StatesPayload(time=1700000000, states=[UAL123_VECTOR])
