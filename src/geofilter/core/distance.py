"""
Great-circle distance on a sphere.

Inputs are not validated here; callers are expected to pass finite
coordinates inside the lon/lat ranges.
"""

import math

import numpy as np

from .coordinates import GeoPoint


# Mean Earth radius in meters
DEFAULT_SPHERE_RADIUS_M = 6371000.0


def haversine_distance(
    a: GeoPoint,
    b: GeoPoint,
    sphere_radius_meters: float = DEFAULT_SPHERE_RADIUS_M
) -> float:
    """
    Great-circle distance between two points in meters.

    Parameters
    ----------
    a, b : GeoPoint
        Points in degrees.
    sphere_radius_meters : float
        Radius of the sphere. Default is the mean Earth radius.

    Returns
    -------
    float
        Distance along the sphere surface, in the unit of the radius.
    """
    phi1 = math.radians(a.latitude)
    phi2 = math.radians(b.latitude)
    delta_phi = math.radians(b.latitude - a.latitude)
    delta_lambda = math.radians(b.longitude - a.longitude)

    h = (math.sin(delta_phi / 2) ** 2 +
         math.cos(phi1) * math.cos(phi2) * math.sin(delta_lambda / 2) ** 2)
    # Rounding can push h a hair above 1 for antipodal points
    h = min(1.0, h)
    c = 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))

    return sphere_radius_meters * c


def haversine_distances(
    lons: np.ndarray,
    lats: np.ndarray,
    center: GeoPoint,
    sphere_radius_meters: float = DEFAULT_SPHERE_RADIUS_M
) -> np.ndarray:
    """
    Vectorized haversine distance from many points to one center.

    Parameters
    ----------
    lons, lats : np.ndarray
        Coordinates in degrees, shape (N,).
    center : GeoPoint
        Reference point.
    sphere_radius_meters : float
        Radius of the sphere.

    Returns
    -------
    np.ndarray
        Distances of shape (N,).
    """
    lons = np.asarray(lons, dtype=np.float64)
    lats = np.asarray(lats, dtype=np.float64)

    phi1 = np.radians(center.latitude)
    phi2 = np.radians(lats)
    delta_phi = np.radians(lats - center.latitude)
    delta_lambda = np.radians(lons - center.longitude)

    h = (np.sin(delta_phi / 2) ** 2 +
         np.cos(phi1) * np.cos(phi2) * np.sin(delta_lambda / 2) ** 2)
    h = np.minimum(h, 1.0)
    c = 2 * np.arctan2(np.sqrt(h), np.sqrt(1 - h))

    return sphere_radius_meters * c


def wrap_longitude(lon: float) -> float:
    """Wrap a longitude in degrees into [-180, 180]."""
    if -180.0 <= lon <= 180.0:
        return lon
    return (lon + 180.0) % 360.0 - 180.0


def destination_point(
    origin: GeoPoint,
    bearing_degrees: float,
    distance_meters: float,
    sphere_radius_meters: float = DEFAULT_SPHERE_RADIUS_M
) -> GeoPoint:
    """
    Point reached by travelling along a great circle.

    Parameters
    ----------
    origin : GeoPoint
        Start point.
    bearing_degrees : float
        Initial bearing, clockwise from north.
    distance_meters : float
        Distance to travel.
    sphere_radius_meters : float
        Radius of the sphere.

    Returns
    -------
    GeoPoint
        Destination, longitude wrapped into [-180, 180].
    """
    delta = distance_meters / sphere_radius_meters
    theta = math.radians(bearing_degrees)
    phi1 = math.radians(origin.latitude)
    lambda1 = math.radians(origin.longitude)

    sin_phi2 = (math.sin(phi1) * math.cos(delta) +
                math.cos(phi1) * math.sin(delta) * math.cos(theta))
    phi2 = math.asin(max(-1.0, min(1.0, sin_phi2)))
    lambda2 = lambda1 + math.atan2(
        math.sin(theta) * math.sin(delta) * math.cos(phi1),
        math.cos(delta) - math.sin(phi1) * sin_phi2
    )

    return GeoPoint(wrap_longitude(math.degrees(lambda2)), math.degrees(phi2))
