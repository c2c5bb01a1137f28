"""
Data ingestion module for PlaneTracker.

Handles polling the OpenSky API, parsing state vectors, computing display
units, and publishing snapshots to the store.
"""

from planetracker.ingestion.opensky_client import OpenSkyClient, StatesPayload, FlightRoute
from planetracker.ingestion.pipeline import (
    RefreshScheduler,
    RefreshEvent,
    RefreshEventKind,
    build_snapshot,
    query_bounding_box,
)

__all__ = [
    'OpenSkyClient',
    'StatesPayload',
    'FlightRoute',
    'RefreshScheduler',
    'RefreshEvent',
    'RefreshEventKind',
    'build_snapshot',
    'query_bounding_box',
]
