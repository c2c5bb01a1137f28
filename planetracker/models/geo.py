"""
Geographic helpers for scoped queries.
"""

import math
from dataclasses import dataclass


@dataclass(frozen=True)
class BoundingBox:
    """
    Geographic bounding box for API queries.

    OpenSky expects: lamin, lomin, lamax, lomax
    (latitude min, longitude min, latitude max, longitude max)

    A box whose west edge (lon_min) lies east of its east edge (lon_max)
    spans the antimeridian.
    """
    lat_min: float
    lat_max: float
    lon_min: float
    lon_max: float

    def __post_init__(self):
        if not (-90 <= self.lat_min <= 90 and -90 <= self.lat_max <= 90):
            raise ValueError('Latitude must be between -90 and 90')
        if not (-180 <= self.lon_min <= 180 and -180 <= self.lon_max <= 180):
            raise ValueError('Longitude must be between -180 and 180')
        if self.lat_max < self.lat_min:
            raise ValueError('North bound must not be south of the south bound')

    @classmethod
    def from_edges(
        cls,
        north: float,
        south: float,
        east: float,
        west: float,
    ) -> 'BoundingBox':
        """Create bounding box from its four edges."""
        return cls(lat_min=south, lat_max=north, lon_min=west, lon_max=east)

    @classmethod
    def from_center_radius(
        cls,
        center_lat: float,
        center_lon: float,
        radius_km: float
    ) -> 'BoundingBox':
        """
        Create bounding box from center point and radius.

        Uses approximate conversion: 1 degree ~ 111 km at equator.
        Adjusts for latitude to account for longitude convergence.
        """
        if not radius_km > 0:
            raise ValueError('Radius must be positive')
        if not -90 <= center_lat <= 90 or not -180 <= center_lon <= 180:
            raise ValueError('Center must be a valid latitude/longitude')

        lat_delta = radius_km / 111.0
        # Longitude degrees vary by latitude
        lon_delta = radius_km / (111.0 * max(abs(math.cos(math.radians(center_lat))), 1e-6))

        return cls(
            lat_min=max(center_lat - lat_delta, -90.0),
            lat_max=min(center_lat + lat_delta, 90.0),
            lon_min=max(center_lon - lon_delta, -180.0),
            lon_max=min(center_lon + lon_delta, 180.0),
        )

    def to_params(self) -> dict:
        """Convert to OpenSky API query parameters."""
        return {
            'lamin': self.lat_min,
            'lamax': self.lat_max,
            'lomin': self.lon_min,
            'lomax': self.lon_max,
        }

    def contains(self, latitude: float, longitude: float) -> bool:
        """Check whether a point lies inside the box (edges inclusive)."""
        if not self.lat_min <= latitude <= self.lat_max:
            return False
        if self.lon_min <= self.lon_max:
            return self.lon_min <= longitude <= self.lon_max
        return longitude >= self.lon_min or longitude <= self.lon_max
