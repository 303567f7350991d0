"""
Coordinate types and projection helpers.

Contains:
- GeoPoint: longitude/latitude in degrees
- PlanarPoint: x/y in a projected plane
- Web Mercator (EPSG:3857) forward and inverse projection
"""

import math
import numbers
from dataclasses import dataclass
from typing import Tuple

import numpy as np

from .exceptions import InvalidCoordinate


# Spherical Web Mercator radius (EPSG:3857)
WEB_MERCATOR_RADIUS_M = 6378137.0

# Latitude at which Web Mercator becomes square
WEB_MERCATOR_MAX_LAT = 85.0511287798066


@dataclass(frozen=True)
class GeoPoint:
    """
    Geographic point in degrees.

    Out-of-range values are kept as given; use ``is_valid`` or
    ``validate`` to check them.

    Attributes
    ----------
    longitude : float
        Degrees east, valid range [-180, 180].
    latitude : float
        Degrees north, valid range [-90, 90].
    """
    longitude: float
    latitude: float

    @classmethod
    def from_latlng(cls, lat: float, lng: float) -> "GeoPoint":
        """Build a point from latitude-first arguments."""
        return cls(longitude=lng, latitude=lat)

    @property
    def is_valid(self) -> bool:
        return is_valid_lonlat(self.longitude, self.latitude)

    def validate(self, name: str = "point") -> "GeoPoint":
        """
        Raise InvalidCoordinate unless the point is a valid lon/lat pair.

        Returns the point itself so calls can be chained.
        """
        if not self.is_valid:
            raise InvalidCoordinate(
                f"{name} must have finite longitude in [-180, 180] and latitude "
                f"in [-90, 90], got ({self.longitude}, {self.latitude})"
            )
        return self

    def as_tuple(self) -> Tuple[float, float]:
        return (self.longitude, self.latitude)


@dataclass(frozen=True)
class PlanarPoint:
    """
    Point in a projected coordinate space (e.g. Web Mercator meters).

    Attributes
    ----------
    x : float
    y : float
    """
    x: float
    y: float

    def as_tuple(self) -> Tuple[float, float]:
        return (self.x, self.y)


def is_valid_lonlat(longitude, latitude) -> bool:
    """
    Check that both values are finite real numbers inside the WGS84 ranges.

    Strings and bools are rejected rather than converted.
    """
    for value in (longitude, latitude):
        if isinstance(value, bool) or not isinstance(value, numbers.Real):
            return False
        if not math.isfinite(value):
            return False
    return -180.0 <= longitude <= 180.0 and -90.0 <= latitude <= 90.0


def to_web_mercator(point: GeoPoint) -> PlanarPoint:
    """
    Project a geographic point to spherical Web Mercator meters.

    Latitude is clamped to +/- WEB_MERCATOR_MAX_LAT since the poles map
    to infinity.

    Parameters
    ----------
    point : GeoPoint
        Point in degrees.

    Returns
    -------
    PlanarPoint
        Easting/northing in meters.
    """
    lat = max(-WEB_MERCATOR_MAX_LAT, min(WEB_MERCATOR_MAX_LAT, point.latitude))
    x = WEB_MERCATOR_RADIUS_M * math.radians(point.longitude)
    y = WEB_MERCATOR_RADIUS_M * math.log(math.tan(math.pi / 4 + math.radians(lat) / 2))
    return PlanarPoint(x, y)


def from_web_mercator(point: PlanarPoint) -> GeoPoint:
    """
    Inverse of to_web_mercator.

    Parameters
    ----------
    point : PlanarPoint
        Easting/northing in meters.

    Returns
    -------
    GeoPoint
        Point in degrees. Longitude is not wrapped.
    """
    lon = math.degrees(point.x / WEB_MERCATOR_RADIUS_M)
    lat = math.degrees(2 * math.atan(math.exp(point.y / WEB_MERCATOR_RADIUS_M)) - math.pi / 2)
    return GeoPoint(lon, lat)


def web_mercator_arrays(lons: np.ndarray, lats: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """
    Vectorized to_web_mercator.

    Parameters
    ----------
    lons, lats : np.ndarray
        Coordinates in degrees, shape (N,).

    Returns
    -------
    tuple of np.ndarray
        (x, y) in meters, each of shape (N,).
    """
    lats = np.clip(np.asarray(lats, dtype=np.float64), -WEB_MERCATOR_MAX_LAT, WEB_MERCATOR_MAX_LAT)
    x = WEB_MERCATOR_RADIUS_M * np.radians(np.asarray(lons, dtype=np.float64))
    y = WEB_MERCATOR_RADIUS_M * np.log(np.tan(np.pi / 4 + np.radians(lats) / 2))
    return x, y
