"""
Flight data API endpoints.

Provides endpoints for:
- GET /api/flights - Filtered view of the current snapshot
- GET /api/flights/<icao24> - Get single flight details
- GET /api/flights/bbox - One-off bounding box query
- POST /api/flights/refresh - Request a manual refresh
- GET /api/flights/<icao24>/route - Most recent departure/arrival airports
"""

import logging
import time
from datetime import datetime, timezone
from typing import List, Optional

from flask import Blueprint, current_app, jsonify, request

from planetracker.config import config
from planetracker.errors import FetchError
from planetracker.filters import apply_filters, criteria_from_args
from planetracker.ingestion import OpenSkyClient, RefreshScheduler, query_bounding_box
from planetracker.models import BoundingBox, FlightRecord
from planetracker.store import SnapshotStore

logger = logging.getLogger(__name__)

flights_bp = Blueprint('flights', __name__, url_prefix='/api/flights')

_SORT_KEYS = {
    'callsign': (lambda f: f.display_callsign, False),
    'altitude': (lambda f: f.altitude_feet if f.altitude_feet is not None else float('-inf'), True),
    'speed': (lambda f: f.speed_knots if f.speed_knots is not None else float('-inf'), True),
}


def _store() -> SnapshotStore:
    return current_app.config['SNAPSHOT_STORE']


def _client() -> OpenSkyClient:
    return current_app.config['OPENSKY_CLIENT']


def _scheduler() -> Optional[RefreshScheduler]:
    return current_app.config.get('REFRESH_SCHEDULER')


def _parse_limit() -> int:
    raw = request.args.get('limit')
    if raw is None:
        return config.query.default_limit
    limit = int(raw)
    if limit < 0:
        raise ValueError('limit must not be negative')
    return min(limit, config.query.max_limit)


def _sort_flights(flights: List[FlightRecord]) -> List[FlightRecord]:
    sort_by = request.args.get('sort', 'callsign')
    if sort_by not in _SORT_KEYS:
        raise ValueError(f'Unknown sort field: {sort_by}')
    key, reverse = _SORT_KEYS[sort_by]
    return sorted(flights, key=key, reverse=reverse)


def _required_float(name: str) -> float:
    raw = request.args.get(name)
    if raw is None or raw.strip() == '':
        raise ValueError(f'{name} is required')
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f'Invalid {name}: {raw!r}')


@flights_bp.route('', methods=['GET'])
def list_flights():
    """
    List flights in the current snapshot.

    Query parameters:
    - q: case-insensitive search over callsign, icao24 and country
    - country: exact origin country
    - min_altitude / max_altitude: altitude band in feet
    - on_ground_only / airborne_only: boolean flags
    - limit: int, max results to return (default 500)
    - sort: callsign|altitude|speed (default callsign)

    Response includes snapshot freshness and query timing.
    """
    start_time = time.perf_counter()

    try:
        criteria = criteria_from_args(request.args)
        limit = _parse_limit()
        snapshot = _store().read()
        flights = _sort_flights(snapshot.filter(criteria))
    except ValueError as e:
        return jsonify({'error': str(e)}), 400

    flight_dicts = [f.to_dict() for f in flights[:limit]]

    query_time_ms = (time.perf_counter() - start_time) * 1000

    return jsonify({
        'flights': flight_dicts,
        'count': len(flight_dicts),
        'matched': len(flights),
        'total': len(snapshot),
        'snapshot_time': snapshot.fetched_at,
        'status': _store().status.to_dict(),
        'timestamp': datetime.now(timezone.utc).isoformat(),
        'query_time_ms': round(query_time_ms, 2),
    })


@flights_bp.route('/bbox', methods=['GET'])
def bounding_box_flights():
    """
    Query a region directly from OpenSky.

    Query parameters:
    - north, south, east, west: box edges in degrees, or
    - lat, lon, radius_km: center point and radius
    - plus any of the list filter parameters

    The result is not stored; the live snapshot is unaffected.
    """
    start_time = time.perf_counter()

    try:
        if 'radius_km' in request.args:
            bbox = BoundingBox.from_center_radius(
                _required_float('lat'),
                _required_float('lon'),
                _required_float('radius_km'),
            )
            north, south = bbox.lat_max, bbox.lat_min
            east, west = bbox.lon_max, bbox.lon_min
        else:
            north = _required_float('north')
            south = _required_float('south')
            east = _required_float('east')
            west = _required_float('west')
        criteria = criteria_from_args(request.args)
        snapshot = query_bounding_box(_client(), north=north, south=south, east=east, west=west)
    except ValueError as e:
        return jsonify({'error': str(e)}), 400
    except FetchError as e:
        logger.error(f'Bounding box query failed: {e}')
        return jsonify({'error': str(e)}), 502

    flights = apply_filters(snapshot, criteria)

    query_time_ms = (time.perf_counter() - start_time) * 1000

    return jsonify({
        'flights': [f.to_dict() for f in flights],
        'count': len(flights),
        'bounds': {'north': north, 'south': south, 'east': east, 'west': west},
        'api_time': snapshot.api_time,
        'query_time_ms': round(query_time_ms, 2),
    })


@flights_bp.route('/refresh', methods=['POST'])
def refresh_flights():
    """
    Request a refresh of the live snapshot.

    Returns immediately; accepted is false when a refresh is already
    running and this request was coalesced into it.
    """
    scheduler = _scheduler()
    if scheduler is None:
        return jsonify({'error': 'Live refresh is disabled'}), 409

    accepted = scheduler.trigger()
    return jsonify({
        'accepted': accepted,
        'in_flight': scheduler.in_flight,
    }), 202


@flights_bp.route('/<icao24>', methods=['GET'])
def get_flight(icao24: str):
    """Get the current record for a single aircraft."""
    start_time = time.perf_counter()

    flight = _store().read().get(icao24)
    if flight is None:
        return jsonify({'error': 'Flight not found'}), 404

    result = flight.to_dict()
    query_time_ms = (time.perf_counter() - start_time) * 1000
    result['query_time_ms'] = round(query_time_ms, 2)

    return jsonify(result)


@flights_bp.route('/<icao24>/route', methods=['GET'])
def get_flight_route(icao24: str):
    """
    Get departure and arrival airport estimates for an aircraft.

    Looks at the aircraft's most recent flight known to OpenSky.
    """
    try:
        route = _client().fetch_flight_route(icao24)
    except FetchError as e:
        logger.error(f'Route lookup failed for {icao24}: {e}')
        return jsonify({'error': str(e)}), 502

    if route is None:
        return jsonify({'error': 'No recent flight found'}), 404

    return jsonify({'route': route.to_dict()})
