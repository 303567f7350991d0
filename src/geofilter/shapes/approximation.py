"""
Polygon approximations of shapes for interop.

Map layers and GIS tools generally cannot draw a geodesic circle, so a
circle is handed over as a ring of vertices at its geodesic radius.
"""

import numpy as np
from shapely.geometry import Polygon as ShapelyPolygon

from ..core.coordinates import GeoPoint
from ..core.distance import destination_point
from ..core.exceptions import InvalidGeometry
from .containment import shape_kind
from .shapes import Circle, Polygon, ShapeKind


# Vertex count used when a circle is drawn as a polygon
DEFAULT_POLYGON_SIDES = 128


def circle_to_polygon(circle: Circle, sides: int = DEFAULT_POLYGON_SIDES) -> Polygon:
    """
    Approximate a circle by a regular ring of geodesic destination points.

    Parameters
    ----------
    circle : Circle
        Circle to approximate. Must have a positive radius.
    sides : int
        Number of vertices. Default 128.

    Returns
    -------
    Polygon
        Geographic polygon whose vertices lie on the circle, starting due
        north and going clockwise.
        Longitudes are wrapped into [-180, 180], so rings crossing the
        antimeridian are not usable as planar polygons.
    """
    if sides < 3:
        raise InvalidGeometry(f"sides must be >= 3, got {sides}")
    if circle.radius_meters == 0:
        raise InvalidGeometry("Cannot approximate a zero-radius circle by a polygon")

    bearings = np.linspace(0.0, 360.0, sides, endpoint=False)
    vertices = tuple(
        destination_point(circle.center, float(b), circle.radius_meters,
                          circle.sphere_radius_meters)
        for b in bearings
    )
    return Polygon(vertices)


def to_shapely(shape, sides: int = DEFAULT_POLYGON_SIDES) -> ShapelyPolygon:
    """
    Convert a shape to a Shapely polygon in (x, y) = (lon, lat) order.

    Parameters
    ----------
    shape : Circle, Polygon or Rectangle
        Shape to convert.
    sides : int
        Circles only: number of vertices of the approximation.

    Returns
    -------
    shapely.geometry.Polygon
    """
    kind = shape_kind(shape)
    if kind is ShapeKind.CIRCLE:
        shape = circle_to_polygon(shape, sides)
    elif kind is ShapeKind.RECTANGLE:
        shape = shape.to_polygon()
    return ShapelyPolygon(shape.ring)


def from_shapely(geom) -> Polygon:
    """
    Convert a Shapely polygon exterior to a geographic Polygon.

    Interior rings are ignored.
    """
    coords = np.asarray(geom.exterior.coords)
    # Remove the closing duplicate vertex that Shapely adds
    if len(coords) > 1 and np.allclose(coords[0], coords[-1]):
        coords = coords[:-1]
    return Polygon(tuple(GeoPoint(float(x), float(y)) for x, y in coords))
