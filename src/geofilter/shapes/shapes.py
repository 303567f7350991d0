"""
Region shapes.

Immutable value objects validated at construction. Every shape carries a
``kind`` tag from the closed ShapeKind set; containment dispatches on that
tag instead of on the Python type.
"""

import math
from dataclasses import dataclass, replace
from enum import Enum
from typing import ClassVar, Sequence, Tuple, Union

from ..core.coordinates import GeoPoint, PlanarPoint
from ..core.distance import DEFAULT_SPHERE_RADIUS_M
from ..core.exceptions import InvalidCoordinate, InvalidGeometry


Vertex = Union[GeoPoint, PlanarPoint]


class ShapeKind(Enum):
    CIRCLE = "circle"
    POLYGON = "polygon"
    RECTANGLE = "rectangle"


def vertex_xy(vertex: Vertex) -> Tuple[float, float]:
    """Planar (x, y) of a vertex; GeoPoint maps to (longitude, latitude)."""
    if isinstance(vertex, GeoPoint):
        return (vertex.longitude, vertex.latitude)
    return (vertex.x, vertex.y)


@dataclass(frozen=True)
class Circle:
    """
    Circle on the sphere.

    Attributes
    ----------
    center : GeoPoint
        Circle center in degrees.
    radius_meters : float
        Radius along the sphere surface. Zero is allowed and matches only
        the center itself.
    sphere_radius_meters : float
        Radius of the sphere used for distances.
    """
    center: GeoPoint
    radius_meters: float
    sphere_radius_meters: float = DEFAULT_SPHERE_RADIUS_M

    kind: ClassVar[ShapeKind] = ShapeKind.CIRCLE

    def __post_init__(self):
        if not isinstance(self.center, GeoPoint):
            raise TypeError(f"center must be GeoPoint, got {type(self.center).__name__}")
        self.center.validate("circle center")

        if not math.isfinite(self.radius_meters) or self.radius_meters < 0:
            raise InvalidGeometry(
                f"radius_meters must be finite and >= 0, got {self.radius_meters}"
            )
        if not math.isfinite(self.sphere_radius_meters) or self.sphere_radius_meters <= 0:
            raise InvalidGeometry(
                f"sphere_radius_meters must be finite and > 0, got {self.sphere_radius_meters}"
            )

    def with_sphere_radius(self, sphere_radius_meters: float) -> "Circle":
        """Copy of this circle evaluated on a different sphere."""
        return replace(self, sphere_radius_meters=sphere_radius_meters)


@dataclass(frozen=True)
class Polygon:
    """
    Closed polygon ring.

    The ring is closed implicitly: an explicit closing vertex equal to the
    first one is accepted and dropped.

    Attributes
    ----------
    vertices : tuple of GeoPoint or PlanarPoint
        Ring vertices in order. All vertices must be of the same type.
    """
    vertices: Tuple[Vertex, ...]

    kind: ClassVar[ShapeKind] = ShapeKind.POLYGON

    def __post_init__(self):
        vertices = tuple(self.vertices)

        kinds = {type(v) for v in vertices}
        if not kinds <= {GeoPoint, PlanarPoint}:
            raise TypeError("polygon vertices must be GeoPoint or PlanarPoint")
        if len(kinds) > 1:
            raise InvalidGeometry("polygon vertices mix GeoPoint and PlanarPoint")

        for i, v in enumerate(vertices):
            if isinstance(v, GeoPoint):
                v.validate(f"polygon vertex {i}")
            elif not (math.isfinite(v.x) and math.isfinite(v.y)):
                raise InvalidCoordinate(f"polygon vertex {i} is not finite: ({v.x}, {v.y})")

        ring = [vertex_xy(v) for v in vertices]
        if len(ring) > 1 and ring[0] == ring[-1]:
            ring = ring[:-1]

        n_distinct = len(set(ring))
        if n_distinct < 3:
            raise InvalidGeometry(
                f"Polygon must have at least 3 distinct vertices, got {n_distinct}"
            )

        object.__setattr__(self, 'vertices', vertices)
        object.__setattr__(self, '_ring', tuple(ring))

    @classmethod
    def from_lonlat(cls, coords: Sequence[Sequence[float]]) -> "Polygon":
        """Build a geographic polygon from (lon, lat) pairs."""
        return cls(tuple(GeoPoint(lon, lat) for lon, lat in coords))

    @property
    def ring(self) -> Tuple[Tuple[float, float], ...]:
        """Vertex coordinates as (x, y) pairs, without a closing duplicate."""
        return self._ring

    @property
    def is_geographic(self) -> bool:
        return isinstance(self.vertices[0], GeoPoint)


@dataclass(frozen=True)
class Rectangle:
    """
    Axis-aligned box given by two opposite corners.

    The corners may be passed in any order; ``min_corner`` and
    ``max_corner`` are the normalized bounds. Boxes crossing the
    antimeridian are not supported.

    Attributes
    ----------
    corner_a, corner_b : GeoPoint
        Opposite corners in degrees.
    """
    corner_a: GeoPoint
    corner_b: GeoPoint

    kind: ClassVar[ShapeKind] = ShapeKind.RECTANGLE

    def __post_init__(self):
        for name, corner in (("corner_a", self.corner_a), ("corner_b", self.corner_b)):
            if not isinstance(corner, GeoPoint):
                raise TypeError(f"{name} must be GeoPoint, got {type(corner).__name__}")
            corner.validate(f"rectangle {name}")

    @property
    def min_corner(self) -> GeoPoint:
        return GeoPoint(min(self.corner_a.longitude, self.corner_b.longitude),
                        min(self.corner_a.latitude, self.corner_b.latitude))

    @property
    def max_corner(self) -> GeoPoint:
        return GeoPoint(max(self.corner_a.longitude, self.corner_b.longitude),
                        max(self.corner_a.latitude, self.corner_b.latitude))

    def to_polygon(self) -> Polygon:
        """Expand into a counter-clockwise 4-vertex polygon."""
        lo, hi = self.min_corner, self.max_corner
        return Polygon((
            GeoPoint(lo.longitude, lo.latitude),
            GeoPoint(hi.longitude, lo.latitude),
            GeoPoint(hi.longitude, hi.latitude),
            GeoPoint(lo.longitude, hi.latitude),
        ))


Shape = Union[Circle, Polygon, Rectangle]
