"""
Derived fields computed once per record at ingestion time.
"""

from typing import Optional

from planetracker.ingestion.parser import StateVector
from planetracker.models import FlightRecord

MPS_TO_KNOTS = 1.94384
METERS_TO_FEET = 3.28084
UNKNOWN_CALLSIGN = 'Unknown'


def speed_knots(velocity: Optional[float]) -> Optional[float]:
    """Ground speed in knots."""
    if velocity is None:
        return None
    return velocity * MPS_TO_KNOTS


def altitude_feet(baro_altitude: Optional[float]) -> Optional[float]:
    """Barometric altitude in feet."""
    if baro_altitude is None:
        return None
    return baro_altitude * METERS_TO_FEET


def display_callsign(callsign: Optional[str]) -> str:
    """Callsign for display, with fallback."""
    return (callsign or '').strip() or UNKNOWN_CALLSIGN


def derive_record(sv: StateVector) -> FlightRecord:
    """Build the display-ready FlightRecord for a parsed state vector."""
    return FlightRecord(
        icao24=sv.icao24,
        callsign=sv.callsign,
        origin_country=sv.origin_country,
        time_position=sv.time_position,
        last_contact=sv.last_contact,
        longitude=sv.longitude,
        latitude=sv.latitude,
        baro_altitude=sv.baro_altitude,
        geo_altitude=sv.geo_altitude,
        velocity=sv.velocity,
        true_track=sv.true_track,
        vertical_rate=sv.vertical_rate,
        on_ground=sv.on_ground,
        spi=sv.spi,
        squawk=sv.squawk,
        position_source=sv.position_source,
        speed_knots=speed_knots(sv.velocity),
        altitude_feet=altitude_feet(sv.baro_altitude),
        display_callsign=display_callsign(sv.callsign),
    )
