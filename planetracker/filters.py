"""
Filter engine for flight queries.

Pure predicates over FlightRecords. Criteria are plain values owned by the
caller; nothing here stores or mutates them.
"""

import math
from dataclasses import dataclass
from typing import Iterable, List, Mapping, Optional

from planetracker.models import FlightRecord

_TRUE_VALUES = ('1', 'true', 'yes', 'on')


@dataclass(frozen=True)
class FilterCriteria:
    """
    Caller-supplied query filter.

    Default values disable each constraint. Altitude bounds are in feet;
    None leaves that side of the band open. Setting both on_ground_only
    and airborne_only is legal and matches nothing.
    """
    search_text: str = ''
    country: str = ''
    min_altitude: Optional[float] = None
    max_altitude: Optional[float] = None
    on_ground_only: bool = False
    airborne_only: bool = False


def _matches_search(record: FlightRecord, search_text: str) -> bool:
    needle = search_text.lower()
    return (
        needle in record.display_callsign.lower()
        or needle in record.icao24.lower()
        or needle in record.origin_country.lower()
    )


def _matches_altitude(record: FlightRecord, criteria: FilterCriteria) -> bool:
    # Aircraft not reporting altitude are never excluded by the band
    altitude = record.altitude_feet
    if altitude is None:
        return True
    if criteria.min_altitude is not None and altitude < criteria.min_altitude:
        return False
    if criteria.max_altitude is not None and altitude > criteria.max_altitude:
        return False
    return True


def matches(record: FlightRecord, criteria: FilterCriteria) -> bool:
    """Check a record against every active constraint."""
    if criteria.search_text and not _matches_search(record, criteria.search_text):
        return False

    if criteria.country and record.origin_country != criteria.country:
        return False

    if not _matches_altitude(record, criteria):
        return False

    if criteria.on_ground_only and not record.on_ground:
        return False

    if criteria.airborne_only and record.on_ground:
        return False

    return True


def apply_filters(records: Iterable[FlightRecord], criteria: FilterCriteria) -> List[FlightRecord]:
    """Return the records matching criteria, preserving input order."""
    return [r for r in records if matches(r, criteria)]


def _parse_flag(value: Optional[str]) -> bool:
    return (value or '').strip().lower() in _TRUE_VALUES


def _parse_bound(args: Mapping[str, str], name: str) -> Optional[float]:
    raw = args.get(name)
    if raw is None or raw.strip() == '':
        return None
    try:
        value = float(raw)
    except ValueError:
        raise ValueError(f'Invalid {name}: {raw!r}')
    if not math.isfinite(value):
        raise ValueError(f'Invalid {name}: {raw!r}')
    return value


def criteria_from_args(args: Mapping[str, str]) -> FilterCriteria:
    """
    Build FilterCriteria from HTTP query parameters.

    Recognized keys: q, country, min_altitude, max_altitude,
    on_ground_only, airborne_only.

    Raises:
        ValueError if an altitude bound is not a number
    """
    return FilterCriteria(
        search_text=(args.get('q') or '').strip(),
        country=(args.get('country') or '').strip(),
        min_altitude=_parse_bound(args, 'min_altitude'),
        max_altitude=_parse_bound(args, 'max_altitude'),
        on_ground_only=_parse_flag(args.get('on_ground_only')),
        airborne_only=_parse_flag(args.get('airborne_only')),
    )
