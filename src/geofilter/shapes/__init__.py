"""
Region shapes, containment tests and polygon approximation.
"""

from .shapes import ShapeKind, Circle, Polygon, Rectangle, Shape, vertex_xy
from .containment import (
    EPS,
    circle_contains_geodesic,
    circle_contains_planar,
    polygon_contains,
    rectangle_contains,
    contains,
    contains_many,
    shape_kind,
)
from .approximation import DEFAULT_POLYGON_SIDES, circle_to_polygon, to_shapely, from_shapely

__all__ = [
    'ShapeKind',
    'Circle',
    'Polygon',
    'Rectangle',
    'Shape',
    'vertex_xy',
    'EPS',
    'circle_contains_geodesic',
    'circle_contains_planar',
    'polygon_contains',
    'rectangle_contains',
    'contains',
    'contains_many',
    'shape_kind',
    'DEFAULT_POLYGON_SIDES',
    'circle_to_polygon',
    'to_shapely',
    'from_shapely',
]
