"""
OpenSky Network API client.

Handles communication with the public OpenSky REST API:
- Global and bounding box queries against /states/all
- Route lookups against /flights/aircraft
- Translating transport and payload problems into FetchError subclasses

Every call is a single attempt with a request timeout. There is no retry;
the refresh scheduler's next tick is the retry.
"""

import logging
import time
from dataclasses import dataclass
from typing import Any, List, Optional

import requests

from planetracker.config import config
from planetracker.errors import DecodeError, NetworkError
from planetracker.models import BoundingBox

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StatesPayload:
    """
    Raw /states/all response.

    states is None when the feed answered with `"states": null`.
    """
    time: Optional[int]
    states: Optional[List[Any]]

    def __len__(self) -> int:
        return len(self.states or [])


@dataclass(frozen=True)
class FlightRoute:
    """Departure/arrival estimate for an aircraft's most recent flight."""
    icao24: str
    callsign: Optional[str]
    first_seen: Optional[int]
    last_seen: Optional[int]
    est_departure_airport: Optional[str]
    est_arrival_airport: Optional[str]

    @classmethod
    def from_json(cls, data: dict) -> 'FlightRoute':
        callsign = data.get('callsign')
        if isinstance(callsign, str):
            callsign = callsign.strip() or None

        return cls(
            icao24=str(data.get('icao24') or '').lower(),
            callsign=callsign,
            first_seen=data.get('firstSeen'),
            last_seen=data.get('lastSeen'),
            est_departure_airport=data.get('estDepartureAirport'),
            est_arrival_airport=data.get('estArrivalAirport'),
        )

    def to_dict(self) -> dict:
        return {
            'icao24': self.icao24,
            'callsign': self.callsign,
            'first_seen': self.first_seen,
            'last_seen': self.last_seen,
            'departure_airport': self.est_departure_airport,
            'arrival_airport': self.est_arrival_airport,
        }


class OpenSkyClient:
    """
    Client for OpenSky Network API.

    Handles:
    - GET requests to /states/all (global or bounded)
    - GET requests to /flights/aircraft
    - Request timeouts and error classification
    """

    def __init__(
        self,
        base_url: str = 'https://opensky-network.org/api',
        timeout: float = 30.0,
        session: Optional[requests.Session] = None,
        route_lookback_hours: int = 24,
    ):
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.route_lookback_hours = route_lookback_hours
        self.session = session or requests.Session()
        self.session.headers.setdefault('Accept', 'application/json')

    @classmethod
    def from_config(cls) -> 'OpenSkyClient':
        """Create client from application configuration."""
        return cls(
            base_url=config.opensky.base_url,
            timeout=config.opensky.timeout_seconds,
            route_lookback_hours=config.opensky.route_lookback_hours,
        )

    def _get_json(self, path: str, params: Optional[dict] = None) -> Any:
        """
        Perform one GET and decode the JSON body.

        Raises:
            NetworkError on timeout, connection failure or non-2xx status
            DecodeError if the body is not valid JSON
        """
        url = f'{self.base_url}{path}'
        logger.debug(f'Fetching {url} params={params}')

        try:
            response = self.session.get(url, params=params, timeout=self.timeout)
            response.raise_for_status()
        except requests.exceptions.Timeout:
            logger.error('OpenSky API timeout')
            raise NetworkError(f'OpenSky request timed out after {self.timeout:g}s')
        except requests.exceptions.HTTPError as e:
            status = e.response.status_code if e.response is not None else None
            if status == 429:
                logger.warning('OpenSky rate limit exceeded')
            else:
                logger.error(f'OpenSky API error: {status}')
            raise NetworkError(f'OpenSky returned HTTP {status}', status_code=status)
        except requests.exceptions.RequestException as e:
            logger.error(f'OpenSky request failed: {e}')
            raise NetworkError(f'OpenSky request failed: {e}')

        try:
            return response.json()
        except ValueError as e:
            logger.error(f'OpenSky returned a non-JSON body: {e}')
            raise DecodeError('OpenSky returned a body that is not valid JSON')

    def _get_states(self, params: Optional[dict] = None) -> StatesPayload:
        data = self._get_json('/states/all', params=params)

        if not isinstance(data, dict):
            raise DecodeError('Expected a JSON object from /states/all')

        states = data.get('states')
        if states is not None and not isinstance(states, list):
            raise DecodeError('"states" must be a list or null')

        api_time = data.get('time')
        if isinstance(api_time, bool) or not isinstance(api_time, int):
            api_time = None

        logger.info(f'Received {len(states or [])} state vectors from OpenSky')
        return StatesPayload(time=api_time, states=states)

    def fetch_global(self) -> StatesPayload:
        """
        Fetch the full, unfiltered set of current state vectors.

        Raises:
            NetworkError, DecodeError
        """
        return self._get_states()

    def fetch_bounding_box(
        self,
        north: float,
        south: float,
        east: float,
        west: float,
    ) -> StatesPayload:
        """
        Fetch state vectors inside a geographic box.

        OpenSky filters server-side using lamin/lamax/lomin/lomax.

        Raises:
            ValueError for an invalid box, NetworkError, DecodeError
        """
        bbox = BoundingBox.from_edges(north=north, south=south, east=east, west=west)
        return self._get_states(params=bbox.to_params())

    def fetch_flight_route(
        self,
        icao24: str,
        now: Optional[int] = None,
    ) -> Optional[FlightRoute]:
        """
        Look up the most recent flight of an aircraft.

        Searches the last route_lookback_hours. Returns None if OpenSky
        knows no flight in that window.

        Raises:
            NetworkError, DecodeError
        """
        end = int(now if now is not None else time.time())
        begin = end - self.route_lookback_hours * 3600
        params = {'icao24': icao24.strip().lower(), 'begin': begin, 'end': end}

        try:
            data = self._get_json('/flights/aircraft', params=params)
        except NetworkError as e:
            # OpenSky answers 404 when no flights match the window
            if e.status_code == 404:
                return None
            raise

        if not isinstance(data, list):
            raise DecodeError('Expected a JSON array from /flights/aircraft')
        if not data:
            return None
        if not isinstance(data[0], dict):
            raise DecodeError('Flight entries must be JSON objects')

        return FlightRoute.from_json(data[0])
