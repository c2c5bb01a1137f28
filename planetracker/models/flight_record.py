"""
FlightRecord - latest known state of one aircraft.

Records are built once per refresh cycle from a parsed state vector and are
never mutated afterwards, so a snapshot can be shared between threads
without locking.

Design notes:
- Telemetry fields keep OpenSky's SI units (meters, m/s)
- Display units (knots, feet, callsign) are computed at ingestion time
"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class FlightRecord:
    """
    Typed, display-ready state of a tracked aircraft.

    Longitude and latitude are always present: rows without a usable
    position never become records.
    """

    # Identification
    icao24: str
    callsign: Optional[str]
    origin_country: str

    # Timestamps (Unix seconds)
    time_position: Optional[int]
    last_contact: int

    # Position (WGS84)
    longitude: float
    latitude: float

    # Telemetry (raw SI units)
    baro_altitude: Optional[float]
    geo_altitude: Optional[float]
    velocity: Optional[float]
    true_track: Optional[float]
    vertical_rate: Optional[float]

    # Status
    on_ground: bool
    spi: Optional[bool]
    squawk: Optional[str]
    position_source: Optional[int]

    # Derived at ingestion
    speed_knots: Optional[float]
    altitude_feet: Optional[float]
    display_callsign: str

    def __repr__(self) -> str:
        return f'<FlightRecord {self.icao24} {self.display_callsign} @ {self.baro_altitude or 0:.0f}m>'

    # -------------------------------------------------------------------------
    # Display helpers - convert to human-friendly units
    # -------------------------------------------------------------------------

    @property
    def vertical_rate_fpm(self) -> Optional[int]:
        """Vertical rate in feet per minute."""
        if self.vertical_rate is None:
            return None
        return int(self.vertical_rate * 196.85)

    @property
    def flight_level(self) -> Optional[str]:
        """Flight level string (e.g., 'FL350')."""
        if self.altitude_feet is None or self.altitude_feet < 18000:
            return None
        return f'FL{int(self.altitude_feet) // 100}'

    def to_dict(self) -> dict:
        """Convert to JSON-serializable dict for API responses."""
        return {
            'icao24': self.icao24,
            'callsign': self.display_callsign,
            'origin_country': self.origin_country,
            'position': {
                'latitude': self.latitude,
                'longitude': self.longitude,
            },
            'telemetry': {
                'baro_altitude_m': self.baro_altitude,
                'geo_altitude_m': self.geo_altitude,
                'velocity_mps': self.velocity,
                'altitude_ft': round(self.altitude_feet) if self.altitude_feet is not None else None,
                'flight_level': self.flight_level,
                'speed_kts': round(self.speed_knots) if self.speed_knots is not None else None,
                'heading': self.true_track,
                'vertical_rate_fpm': self.vertical_rate_fpm,
            },
            'status': {
                'on_ground': self.on_ground,
                'squawk': self.squawk,
                'spi': self.spi,
                'position_source': self.position_source,
            },
            'timestamps': {
                'time_position': self.time_position,
                'last_contact': self.last_contact,
            },
        }
