"""
Core coordinate types, distance and errors.
"""

from .coordinates import (
    WEB_MERCATOR_RADIUS_M,
    GeoPoint,
    PlanarPoint,
    is_valid_lonlat,
    to_web_mercator,
    from_web_mercator,
    web_mercator_arrays,
)
from .distance import (
    DEFAULT_SPHERE_RADIUS_M,
    haversine_distance,
    haversine_distances,
    destination_point,
    wrap_longitude,
)
from .exceptions import GeofilterError, InvalidGeometry, InvalidCoordinate

__all__ = [
    'WEB_MERCATOR_RADIUS_M',
    'GeoPoint',
    'PlanarPoint',
    'is_valid_lonlat',
    'to_web_mercator',
    'from_web_mercator',
    'web_mercator_arrays',
    'DEFAULT_SPHERE_RADIUS_M',
    'haversine_distance',
    'haversine_distances',
    'destination_point',
    'wrap_longitude',
    'GeofilterError',
    'InvalidGeometry',
    'InvalidCoordinate',
]
