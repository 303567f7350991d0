"""
geofilter - Region containment queries for geographic points.

Given a batch of longitude/latitude points and a region (circle, polygon
or rectangle), find the points that fall inside the region:
- Circles use great-circle (haversine) distance, or optionally a planar
  Web Mercator distance
- Polygons and rectangles use planar tests in (lon, lat) space
- Boundaries are inclusive
- A conservative bounding extent prefilters large batches

Main Functions
--------------
find_points_in_region : Points inside a shape, in input order
region_mask : The same decision as a boolean mask
haversine_distance : Great-circle distance in meters
bounding_extent : Conservative bounding box of a shape

Example
-------
>>> from geofilter import GeoPoint, Circle, find_points_in_region

>>> points = [GeoPoint(0, 0), GeoPoint(1, 1), GeoPoint(0.1, 0.1)]
>>> circle = Circle(GeoPoint(0, 0), radius_meters=100_000)
>>> find_points_in_region(points, circle)
[GeoPoint(longitude=0, latitude=0), GeoPoint(longitude=0.1, latitude=0.1)]
"""

from .core.coordinates import GeoPoint, PlanarPoint, to_web_mercator, from_web_mercator
from .core.distance import DEFAULT_SPHERE_RADIUS_M, haversine_distance, destination_point
from .core.exceptions import GeofilterError, InvalidGeometry, InvalidCoordinate
from .shapes.shapes import ShapeKind, Circle, Polygon, Rectangle
from .shapes.containment import (
    circle_contains_geodesic,
    circle_contains_planar,
    polygon_contains,
    rectangle_contains,
    contains,
    contains_many,
)
from .shapes.approximation import circle_to_polygon, to_shapely
from .query.extent import Extent, bounding_extent, prefilter
from .query.region import (
    RegionQueryOptions,
    region_mask,
    find_points_in_region,
    find_points_in_circle,
    filter_records,
)

__all__ = [
    # Coordinates
    'GeoPoint',
    'PlanarPoint',
    'to_web_mercator',
    'from_web_mercator',
    # Distance
    'DEFAULT_SPHERE_RADIUS_M',
    'haversine_distance',
    'destination_point',
    # Errors
    'GeofilterError',
    'InvalidGeometry',
    'InvalidCoordinate',
    # Shapes
    'ShapeKind',
    'Circle',
    'Polygon',
    'Rectangle',
    'circle_contains_geodesic',
    'circle_contains_planar',
    'polygon_contains',
    'rectangle_contains',
    'contains',
    'contains_many',
    'circle_to_polygon',
    'to_shapely',
    # Queries
    'Extent',
    'bounding_extent',
    'prefilter',
    'RegionQueryOptions',
    'region_mask',
    'find_points_in_region',
    'find_points_in_circle',
    'filter_records',
]
