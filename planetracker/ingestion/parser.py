"""
State vector parser.

Converts the loosely-typed arrays in an OpenSky /states/all response into
typed StateVector objects. Policy is tolerant per field and strict per row:
a malformed altitude just becomes None, while a row without an icao24 or
without a complete position is rejected.

OpenSky state vector format (array indices):
0: icao24          - ICAO24 hex address
1: callsign        - Callsign (8 chars max)
2: origin_country  - Country of registration
3: time_position   - Unix timestamp of last position update
4: last_contact    - Unix timestamp of last message
5: longitude       - WGS84 longitude
6: latitude        - WGS84 latitude
7: baro_altitude   - Barometric altitude (meters)
8: on_ground       - Boolean
9: velocity        - Ground speed (m/s)
10: true_track     - Track angle (degrees, 0=north)
11: vertical_rate  - Vertical rate (m/s)
12: sensors        - Sensor IDs (array, unused)
13: geo_altitude   - Geometric altitude (meters)
14: squawk         - Transponder code
15: spi            - Special position indicator
16: position_source - 0=ADS-B, 1=ASTERIX, 2=MLAT, 3=FLARM
"""

import logging
import math
from dataclasses import dataclass
from typing import Any, Iterable, List, Optional, Sequence, Tuple

from planetracker.errors import RowRejected

logger = logging.getLogger(__name__)

STATE_VECTOR_LENGTH = 17


# -----------------------------------------------------------------------------
# Field parsers - each returns None for absent or malformed input
# -----------------------------------------------------------------------------

def parse_str(value: Any) -> Optional[str]:
    """Return value as a string, or None if absent/empty or not a scalar."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        value = str(value)
    elif not isinstance(value, str):
        return None
    return value if value.strip() else None


def parse_float(value: Any) -> Optional[float]:
    """Parse a finite float from a number or numeric string."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        try:
            result = float(value)
        except OverflowError:
            return None
    elif isinstance(value, str):
        try:
            result = float(value.strip())
        except (ValueError, OverflowError):
            return None
    else:
        return None
    return result if math.isfinite(result) else None


def parse_int(value: Any) -> Optional[int]:
    """Parse an integer; integral floats are accepted, fractions are not."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return None
    return None


def parse_bool(value: Any) -> Optional[bool]:
    """Parse a JSON boolean or the strings 'true'/'false'."""
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        normalized = value.strip().lower()
        if normalized == 'true':
            return True
        if normalized == 'false':
            return False
    return None


@dataclass(frozen=True)
class StateVector:
    """
    Parsed state vector from OpenSky API.

    Normalizes the raw array format into a typed dataclass. Position is
    guaranteed present; every other telemetry value may be None if not
    reported by the aircraft.
    """
    icao24: str
    callsign: Optional[str]
    origin_country: str
    time_position: Optional[int]
    last_contact: int
    longitude: float
    latitude: float
    baro_altitude: Optional[float]
    on_ground: bool
    velocity: Optional[float]
    true_track: Optional[float]
    vertical_rate: Optional[float]
    geo_altitude: Optional[float]
    squawk: Optional[str]
    spi: Optional[bool]
    position_source: Optional[int]


def parse_state_vector(arr: Sequence[Any]) -> StateVector:
    """
    Parse one OpenSky state vector array.

    Raises:
        RowRejected if the array is too short, has no icao24, or does not
        carry both coordinates.
    """
    if not isinstance(arr, (list, tuple)) or len(arr) < STATE_VECTOR_LENGTH:
        raise RowRejected('state vector has fewer than 17 fields')

    icao24 = parse_str(arr[0])
    if icao24 is None:
        raise RowRejected('missing icao24')

    longitude = parse_float(arr[5])
    latitude = parse_float(arr[6])
    if longitude is None and latitude is None:
        raise RowRejected(f'{icao24}: no position')
    if longitude is None or latitude is None:
        raise RowRejected(f'{icao24}: incomplete position')

    last_contact = parse_int(arr[4])
    on_ground = parse_bool(arr[8])

    return StateVector(
        icao24=icao24.strip().lower(),
        callsign=parse_str(arr[1]),
        origin_country=parse_str(arr[2]) or '',
        time_position=parse_int(arr[3]),
        last_contact=last_contact if last_contact is not None else 0,
        longitude=longitude,
        latitude=latitude,
        baro_altitude=parse_float(arr[7]),
        on_ground=bool(on_ground),
        velocity=parse_float(arr[9]),
        true_track=parse_float(arr[10]),
        vertical_rate=parse_float(arr[11]),
        geo_altitude=parse_float(arr[13]),
        squawk=parse_str(arr[14]),
        spi=parse_bool(arr[15]),
        position_source=parse_int(arr[16]),
    )


def parse_states(rows: Iterable[Any]) -> Tuple[List[StateVector], int]:
    """
    Parse every row of a states payload.

    Rejected rows are dropped; they never fail the batch.

    Returns:
        Tuple of (parsed state vectors, count of rejected rows)
    """
    states = []
    rejected = 0
    for arr in rows:
        try:
            states.append(parse_state_vector(arr))
        except RowRejected as e:
            rejected += 1
            logger.debug(f'Dropped state vector: {e}')

    if rejected:
        logger.debug(f'Parsed {len(states)} state vectors, rejected {rejected}')

    return states, rejected
