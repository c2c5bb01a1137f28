"""
Snapshot - one complete, immutable set of flight records.

A snapshot is built wholesale from a single fetch cycle and replaces the
previous one in the store; it is never merged with older data.
"""

import time
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Iterable, Iterator, List, Mapping, Optional

from planetracker.models.flight_record import FlightRecord
from planetracker.models.geo import BoundingBox


@dataclass(frozen=True)
class Snapshot:
    """
    Timestamped collection of FlightRecords keyed by icao24.

    fetched_at is local epoch seconds (None for the initial empty snapshot),
    api_time is the feed's own timestamp, rejected counts the raw rows the
    parser dropped.
    """
    flights: Mapping[str, FlightRecord] = field(default_factory=lambda: MappingProxyType({}))
    fetched_at: Optional[float] = None
    api_time: Optional[int] = None
    rejected: int = 0

    @classmethod
    def from_records(
        cls,
        records: Iterable[FlightRecord],
        api_time: Optional[int] = None,
        rejected: int = 0,
        fetched_at: Optional[float] = None,
    ) -> 'Snapshot':
        """
        Assemble a snapshot from records.

        Duplicate icao24 keys collapse to the last record seen.
        """
        flights = {}
        for record in records:
            flights[record.icao24] = record

        return cls(
            flights=MappingProxyType(flights),
            fetched_at=fetched_at if fetched_at is not None else time.time(),
            api_time=api_time,
            rejected=rejected,
        )

    def __len__(self) -> int:
        return len(self.flights)

    def __iter__(self) -> Iterator[FlightRecord]:
        return iter(self.flights.values())

    def __contains__(self, icao24: object) -> bool:
        return isinstance(icao24, str) and icao24.lower() in self.flights

    @property
    def is_empty(self) -> bool:
        return not self.flights

    @property
    def records(self) -> List[FlightRecord]:
        return list(self.flights.values())

    def get(self, icao24: str) -> Optional[FlightRecord]:
        """Look up a record by ICAO24 (case-insensitive)."""
        return self.flights.get(icao24.strip().lower())

    def filter(self, criteria) -> List[FlightRecord]:
        """Records matching a FilterCriteria, in snapshot order."""
        from planetracker.filters import apply_filters
        return apply_filters(self.flights.values(), criteria)

    def within(self, bbox: BoundingBox) -> List[FlightRecord]:
        """Records whose position falls inside the bounding box."""
        return [r for r in self.flights.values() if bbox.contains(r.latitude, r.longitude)]

    def search_callsign(self, text: str) -> List[FlightRecord]:
        """Case-insensitive substring search on the raw callsign only."""
        needle = text.lower()
        return [
            r for r in self.flights.values()
            if r.callsign is not None and needle in r.callsign.lower()
        ]
