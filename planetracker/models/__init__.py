"""
Data models for PlaneTracker.

In-memory, immutable value types shared by ingestion, storage and queries:
1. FlightRecord - one aircraft's latest state, with display units
2. Snapshot - a complete set of records from one fetch cycle
3. BoundingBox - geographic scope for regional queries
"""

from planetracker.models.flight_record import FlightRecord
from planetracker.models.geo import BoundingBox
from planetracker.models.snapshot import Snapshot

__all__ = [
    'FlightRecord',
    'BoundingBox',
    'Snapshot',
]
