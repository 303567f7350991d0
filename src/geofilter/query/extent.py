"""
Bounding extents and the prefilter built on them.

An extent may be larger than its shape but never smaller, so
prefiltering can only remove points the exact test would reject anyway.
"""

import logging
import math
from dataclasses import dataclass
from typing import List, Sequence

import numpy as np

from ..core.coordinates import (
    WEB_MERCATOR_MAX_LAT,
    WEB_MERCATOR_RADIUS_M,
    GeoPoint,
    PlanarPoint,
    from_web_mercator,
    to_web_mercator,
)
from ..shapes.containment import shape_kind
from ..shapes.shapes import ShapeKind


logger = logging.getLogger(__name__)

# Outward pad in degrees. Keeps points on a circle boundary inside the box
# despite rounding in the trigonometry below, and must exceed the polygon
# edge tolerance EPS.
EXTENT_PAD_DEG = 1e-9


@dataclass(frozen=True)
class Extent:
    """
    Axis-aligned box in longitude/latitude degrees, inclusive.

    Attributes
    ----------
    min_lon, min_lat, max_lon, max_lat : float
    """
    min_lon: float
    min_lat: float
    max_lon: float
    max_lat: float

    @classmethod
    def world(cls) -> "Extent":
        return cls(-180.0, -90.0, 180.0, 90.0)

    @property
    def spans_all_longitudes(self) -> bool:
        return self.min_lon <= -180.0 and self.max_lon >= 180.0

    def contains(self, point: GeoPoint) -> bool:
        return (self.min_lon <= point.longitude <= self.max_lon and
                self.min_lat <= point.latitude <= self.max_lat)

    def contains_arrays(self, lons: np.ndarray, lats: np.ndarray) -> np.ndarray:
        """Boolean mask of shape (N,) for coordinate arrays."""
        lons = np.asarray(lons, dtype=np.float64)
        lats = np.asarray(lats, dtype=np.float64)
        return ((lons >= self.min_lon) & (lons <= self.max_lon) &
                (lats >= self.min_lat) & (lats <= self.max_lat))


def _padded(min_x, min_y, max_x, max_y) -> Extent:
    return Extent(min_x - EXTENT_PAD_DEG, min_y - EXTENT_PAD_DEG,
                  max_x + EXTENT_PAD_DEG, max_y + EXTENT_PAD_DEG)


def _clamped(min_lon, min_lat, max_lon, max_lat) -> Extent:
    min_lat = max(-90.0, min_lat - EXTENT_PAD_DEG)
    max_lat = min(90.0, max_lat + EXTENT_PAD_DEG)
    # A box crossing the antimeridian cannot be expressed as min <= lon <= max
    if min_lon < -180.0 or max_lon > 180.0:
        return Extent(-180.0, min_lat, 180.0, max_lat)
    return Extent(max(-180.0, min_lon - EXTENT_PAD_DEG), min_lat,
                  min(180.0, max_lon + EXTENT_PAD_DEG), max_lat)


def _geodesic_circle_extent(circle) -> Extent:
    delta = circle.radius_meters / circle.sphere_radius_meters
    if delta >= math.pi:
        return Extent.world()

    lon = circle.center.longitude
    phi = math.radians(circle.center.latitude)
    min_phi = phi - delta
    max_phi = phi + delta

    # Cap reaches a pole: every longitude is within range
    if max_phi >= math.pi / 2 or min_phi <= -math.pi / 2:
        return _clamped(-180.0, math.degrees(min_phi), 180.0, math.degrees(max_phi))

    # Widest longitude offset of a spherical cap, larger than delta away
    # from the equator
    ratio = math.sin(delta) / math.cos(phi)
    if ratio >= 1.0:
        return _clamped(-180.0, math.degrees(min_phi), 180.0, math.degrees(max_phi))
    delta_lon = math.degrees(math.asin(ratio))

    return _clamped(lon - delta_lon, math.degrees(min_phi),
                    lon + delta_lon, math.degrees(max_phi))


def _planar_circle_extent(circle) -> Extent:
    center = to_web_mercator(circle.center)
    r = circle.radius_meters
    # The projected world is a square of half-width pi * R
    limit = math.pi * WEB_MERCATOR_RADIUS_M
    lower = from_web_mercator(PlanarPoint(center.x - r, max(center.y - r, -limit)))
    upper = from_web_mercator(PlanarPoint(center.x + r, min(center.y + r, limit)))

    # Points past the Mercator limit project onto it, so open the box to the pole
    if center.y - r <= -limit or lower.latitude <= -WEB_MERCATOR_MAX_LAT:
        min_lat = -90.0
    else:
        min_lat = lower.latitude
    if center.y + r >= limit or upper.latitude >= WEB_MERCATOR_MAX_LAT:
        max_lat = 90.0
    else:
        max_lat = upper.latitude
    return _clamped(lower.longitude, min_lat, upper.longitude, max_lat)


def bounding_extent(shape, geodesic: bool = True) -> Extent:
    """
    Compute a conservative bounding box for a shape.

    Parameters
    ----------
    shape : Circle, Polygon or Rectangle
        Shape to bound. Polygons are bounded in (lon, lat) = (x, y).
    geodesic : bool
        Circles only: bound the great-circle disc (default) or the planar
        Web Mercator disc.

    Returns
    -------
    Extent
        Box containing every point the shape contains.
    """
    kind = shape_kind(shape)

    if kind is ShapeKind.CIRCLE:
        if geodesic:
            return _geodesic_circle_extent(shape)
        return _planar_circle_extent(shape)

    if kind is ShapeKind.RECTANGLE:
        lo, hi = shape.min_corner, shape.max_corner
        return _clamped(lo.longitude, lo.latitude, hi.longitude, hi.latitude)

    xs = [x for x, _ in shape.ring]
    ys = [y for _, y in shape.ring]
    if shape.is_geographic:
        return _clamped(min(xs), min(ys), max(xs), max(ys))
    return _padded(min(xs), min(ys), max(xs), max(ys))


def prefilter(points: Sequence[GeoPoint], extent: Extent) -> List[GeoPoint]:
    """
    Keep the points that fall inside an extent, in input order.

    Parameters
    ----------
    points : sequence of GeoPoint
        Candidates. Must not contain None.
    extent : Extent
        Box to test against, inclusive.

    Returns
    -------
    list of GeoPoint
    """
    points = list(points)
    if not points:
        return []

    lons = np.fromiter((p.longitude for p in points), dtype=np.float64, count=len(points))
    lats = np.fromiter((p.latitude for p in points), dtype=np.float64, count=len(points))
    mask = extent.contains_arrays(lons, lats)

    kept = [p for p, keep in zip(points, mask) if keep]
    logger.debug("Prefilter kept %d of %d points", len(kept), len(points))
    return kept
