"""
Fixed mock flights for tests and offline development.

The mock rows are built as raw state vectors and go through the same
parser and calculator as live data.
"""

import logging
import time
from typing import Any, List, Optional

from planetracker.ingestion.pipeline import build_snapshot
from planetracker.ingestion.opensky_client import StatesPayload
from planetracker.models import Snapshot
from planetracker.store import SnapshotStore

logger = logging.getLogger(__name__)

# (icao24, callsign, country, lat, lon, altitude, velocity)
MOCK_FLIGHTS = [
    ('abc123', 'UAL123', 'United States', 37.7749, -122.4194, 35000, 450),
    ('def456', 'DAL456', 'United States', 40.7128, -74.0060, 28000, 420),
    ('ghi789', 'AAL789', 'United States', 34.0522, -118.2437, 32000, 480),
]


def _mock_state_vector(
    icao24: str,
    callsign: str,
    country: str,
    lat: float,
    lon: float,
    altitude: float,
    velocity: float,
    now: int,
) -> List[Optional[str]]:
    return [
        icao24,
        callsign,
        country,
        str(now),
        str(now),
        str(lon),
        str(lat),
        str(altitude),
        'false',
        str(velocity),
        '90',
        '0',
        None,
        str(altitude),
        None,
        'false',
        '0',
    ]


def mock_state_vectors(now: Optional[int] = None) -> List[List[Any]]:
    """Raw string-encoded state vectors for the mock flights."""
    now = int(now if now is not None else time.time())
    return [_mock_state_vector(*flight, now=now) for flight in MOCK_FLIGHTS]


def mock_snapshot(now: Optional[int] = None) -> Snapshot:
    """Parse the mock vectors into a snapshot."""
    now = int(now if now is not None else time.time())
    return build_snapshot(StatesPayload(time=now, states=mock_state_vectors(now)))


def load_mock_data(store: SnapshotStore, now: Optional[int] = None) -> Snapshot:
    """Publish the mock snapshot to a store."""
    snapshot = mock_snapshot(now)
    store.replace(snapshot)
    logger.info(f'Loaded {len(snapshot)} mock flights')
    return snapshot
