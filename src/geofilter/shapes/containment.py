"""
Point containment tests for circles, polygons and rectangles.

All tests are closed: a point on the boundary is inside.

Polygon rule
------------
A point within EPS of an edge or vertex is inside. Any other point is
classified by even-odd ray casting towards +x, counting an edge only
when the point's y lies in [edge.y_min, edge.y_max). The half-open
interval makes a ray through a vertex count once, and horizontal edges
never count.
"""

import math
from typing import Tuple, Union

import numpy as np

from ..core.coordinates import GeoPoint, PlanarPoint, to_web_mercator, web_mercator_arrays
from ..core.distance import haversine_distance, haversine_distances
from .shapes import Circle, Polygon, Rectangle, ShapeKind, vertex_xy


# Numerical tolerance for on-edge tests
EPS = 1e-10

Point = Union[GeoPoint, PlanarPoint]


def circle_contains_geodesic(point: GeoPoint, circle: Circle) -> bool:
    """
    Test whether a point is within the circle's great-circle radius.

    Parameters
    ----------
    point : GeoPoint
        Point to test.
    circle : Circle
        Circle; its sphere radius is used for the distance.

    Returns
    -------
    bool
        True if the distance to the center is <= radius_meters.
    """
    distance = haversine_distance(point, circle.center, circle.sphere_radius_meters)
    return distance <= circle.radius_meters


def circle_contains_planar(point: PlanarPoint, center: PlanarPoint, radius_meters: float) -> bool:
    """
    Euclidean circle test in a projected plane.

    Only meaningful for small radii at low latitude: Web Mercator
    stretches distances by 1/cos(latitude), so far from the equator this
    test rejects points that are geodesically inside the circle.

    Parameters
    ----------
    point, center : PlanarPoint
        Projected coordinates in meters.
    radius_meters : float
        Radius in projected units.

    Returns
    -------
    bool
    """
    return math.hypot(point.x - center.x, point.y - center.y) <= radius_meters


def _on_segment(px: float, py: float, a: Tuple[float, float], b: Tuple[float, float]) -> bool:
    (x1, y1), (x2, y2) = a, b
    dx, dy = x2 - x1, y2 - y1
    cross = dx * (py - y1) - dy * (px - x1)
    if abs(cross) > EPS * max(1.0, abs(dx) + abs(dy)):
        return False
    return (min(x1, x2) - EPS <= px <= max(x1, x2) + EPS and
            min(y1, y2) - EPS <= py <= max(y1, y2) + EPS)


def polygon_contains(point: Point, polygon: Polygon) -> bool:
    """
    Test if a point is inside or on a polygon (convex or concave).

    Geographic points and vertices are compared as (longitude, latitude).

    Parameters
    ----------
    point : GeoPoint or PlanarPoint
        Point to test.
    polygon : Polygon
        Closed ring.

    Returns
    -------
    bool
    """
    px, py = vertex_xy(point)
    ring = polygon.ring
    n = len(ring)

    inside = False
    for i in range(n):
        a = ring[i]
        b = ring[(i + 1) % n]
        if _on_segment(px, py, a, b):
            return True

        (x1, y1), (x2, y2) = a, b
        # Half-open: counts y in [min(y1, y2), max(y1, y2))
        if (y1 > py) != (y2 > py):
            x_cross = x1 + (py - y1) * (x2 - x1) / (y2 - y1)
            if px < x_cross:
                inside = not inside

    return inside


def rectangle_contains(point: Point, min_corner: Point, max_corner: Point) -> bool:
    """Interval test on both axes, inclusive on both bounds."""
    px, py = vertex_xy(point)
    x0, y0 = vertex_xy(min_corner)
    x1, y1 = vertex_xy(max_corner)
    return x0 <= px <= x1 and y0 <= py <= y1


def _circle(shape: Circle, point: GeoPoint, geodesic: bool) -> bool:
    if geodesic:
        return circle_contains_geodesic(point, shape)
    return circle_contains_planar(
        to_web_mercator(point), to_web_mercator(shape.center), shape.radius_meters
    )


def _polygon(shape: Polygon, point: GeoPoint, geodesic: bool) -> bool:
    return polygon_contains(point, shape)


def _rectangle(shape: Rectangle, point: GeoPoint, geodesic: bool) -> bool:
    return rectangle_contains(point, shape.min_corner, shape.max_corner)


_DISPATCH = {
    ShapeKind.CIRCLE: _circle,
    ShapeKind.POLYGON: _polygon,
    ShapeKind.RECTANGLE: _rectangle,
}


def shape_kind(shape) -> ShapeKind:
    """Return the kind tag of a shape, raising TypeError for anything else."""
    kind = getattr(shape, 'kind', None)
    if kind not in _DISPATCH:
        raise TypeError(f"Expected Circle, Polygon or Rectangle, got {type(shape).__name__}")
    return kind


def contains(shape, point: GeoPoint, geodesic: bool = True) -> bool:
    """
    Test a single point against any shape.

    Parameters
    ----------
    shape : Circle, Polygon or Rectangle
        Region to test against.
    point : GeoPoint
        Point in degrees.
    geodesic : bool
        Circles only: use great-circle distance (default) or a planar
        Web Mercator distance.

    Returns
    -------
    bool
    """
    return _DISPATCH[shape_kind(shape)](shape, point, geodesic)


def contains_many(shape, lons: np.ndarray, lats: np.ndarray, geodesic: bool = True) -> np.ndarray:
    """
    Vectorized containment over coordinate arrays.

    Applies the same rules as the scalar tests; results can differ from
    them only for points within floating point rounding of a circle
    boundary.

    Parameters
    ----------
    shape : Circle, Polygon or Rectangle
        Region to test against.
    lons, lats : np.ndarray
        Coordinates in degrees, shape (N,).
    geodesic : bool
        Circles only, see contains().

    Returns
    -------
    np.ndarray
        Boolean array of shape (N,).
    """
    lons = np.asarray(lons, dtype=np.float64)
    lats = np.asarray(lats, dtype=np.float64)
    kind = shape_kind(shape)

    if kind is ShapeKind.CIRCLE:
        if geodesic:
            distances = haversine_distances(lons, lats, shape.center, shape.sphere_radius_meters)
            return distances <= shape.radius_meters
        x, y = web_mercator_arrays(lons, lats)
        center = to_web_mercator(shape.center)
        return np.hypot(x - center.x, y - center.y) <= shape.radius_meters

    if kind is ShapeKind.RECTANGLE:
        lo, hi = shape.min_corner, shape.max_corner
        return ((lons >= lo.longitude) & (lons <= hi.longitude) &
                (lats >= lo.latitude) & (lats <= hi.latitude))

    ring = np.asarray(shape.ring, dtype=np.float64)
    inside = np.zeros(len(lons), dtype=bool)
    on_edge = np.zeros(len(lons), dtype=bool)
    for (x1, y1), (x2, y2) in zip(ring, np.roll(ring, -1, axis=0)):
        dx, dy = x2 - x1, y2 - y1
        cross = dx * (lats - y1) - dy * (lons - x1)
        on_edge |= ((np.abs(cross) <= EPS * max(1.0, abs(dx) + abs(dy))) &
                    (lons >= min(x1, x2) - EPS) & (lons <= max(x1, x2) + EPS) &
                    (lats >= min(y1, y2) - EPS) & (lats <= max(y1, y2) + EPS))

        straddles = (y1 > lats) != (y2 > lats)
        if not straddles.any():
            continue
        with np.errstate(divide='ignore', invalid='ignore'):
            x_cross = x1 + (lats - y1) * dx / dy
        inside ^= straddles & (lons < x_cross)

    return inside | on_edge
