"""
Adapter from map draw interactions to region queries.

A map front end reports each finished shape as a DrawEvent carrying
Leaflet-style ``{"lat": ..., "lng": ...}`` coordinates. The adapter turns
it into an immutable shape and runs exactly one query per event; nothing
here depends on a rendering or event-loop framework.
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Callable, List, Optional, Sequence

from shapely.geometry import Polygon as ShapelyPolygon

from ..core.coordinates import GeoPoint
from ..shapes.approximation import to_shapely
from ..shapes.shapes import Circle, Polygon, Rectangle
from ..query.region import RegionQueryOptions, filter_records


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DrawEvent:
    """
    A completed draw interaction.

    Attributes
    ----------
    layer_type : str
        "circle", "rectangle" or "polygon".
    payload : Mapping
        circle: ``center`` (lat/lng) and ``radius`` in meters.
        rectangle: ``bounds``, two opposite lat/lng corners.
        polygon: ``latlngs``, the ring vertices.
    """
    layer_type: str
    payload: Mapping[str, Any]


def latlng_to_point(value) -> GeoPoint:
    """
    Convert a lat/lng value to a GeoPoint.

    Accepts a GeoPoint, a mapping with ``lat`` and ``lng`` (or ``lon``)
    keys, or a ``[lat, lng]`` pair as Leaflet uses.
    """
    if isinstance(value, GeoPoint):
        return value
    if isinstance(value, Mapping):
        lng = value.get('lng', value.get('lon'))
        if 'lat' not in value or lng is None:
            raise ValueError(f"Expected lat/lng mapping, got {dict(value)}")
        return GeoPoint.from_latlng(float(value['lat']), float(lng))
    lat, lng = value
    return GeoPoint.from_latlng(float(lat), float(lng))


def record_point(record) -> Optional[GeoPoint]:
    """
    Default record key: the location of a GeoPoint or lat/lng record.

    Records without a usable location give None and are skipped.
    """
    try:
        return latlng_to_point(record)
    except (TypeError, ValueError):
        return None


def shape_from_event(event: DrawEvent):
    """
    Build the shape described by a draw event.

    Raises
    ------
    ValueError
        For an unknown layer type or a malformed payload. Shape errors
        (InvalidGeometry, InvalidCoordinate) are ValueErrors as well.
    """
    payload = event.payload
    layer_type = event.layer_type.lower()

    try:
        if layer_type == 'circle':
            return Circle(latlng_to_point(payload['center']), float(payload['radius']))
        if layer_type == 'rectangle':
            bounds = list(payload['bounds'])
            if len(bounds) != 2:
                raise ValueError(f"rectangle bounds need 2 corners, got {len(bounds)}")
            return Rectangle(latlng_to_point(bounds[0]), latlng_to_point(bounds[1]))
        if layer_type == 'polygon':
            return Polygon(tuple(latlng_to_point(v) for v in payload['latlngs']))
    except KeyError as e:
        raise ValueError(f"{layer_type} payload is missing {e}") from e
    except TypeError as e:
        raise ValueError(f"Malformed {layer_type} payload: {e}") from e

    raise ValueError(f"Unsupported layer type: {event.layer_type!r}")


@dataclass
class DrawSession:
    """
    Keeps the result of the most recent draw interaction.

    Drawing a new shape replaces the previous one; deleting it clears
    the result.

    Attributes
    ----------
    records : sequence
        Records to filter: GeoPoints, lat/lng mappings, or anything
        ``key`` can locate.
    options : RegionQueryOptions
        Options for every query in this session.
    key : callable
        Extracts a GeoPoint (or None) from a record.
    """
    records: Sequence[Any]
    options: RegionQueryOptions = field(default_factory=RegionQueryOptions)
    key: Callable[[Any], Optional[GeoPoint]] = record_point
    shape: Any = field(default=None, init=False)
    filtered: List[Any] = field(default_factory=list, init=False)

    def on_created(self, event: DrawEvent) -> List[Any]:
        shape = shape_from_event(event)
        self.filtered = filter_records(self.records, shape, self.key, self.options)
        self.shape = shape
        logger.debug("%s selected %d of %d records",
                     event.layer_type, len(self.filtered), len(self.records))
        return self.filtered

    def on_deleted(self) -> None:
        self.shape = None
        self.filtered = []

    def outline(self) -> Optional[ShapelyPolygon]:
        """Current shape as a Shapely polygon for display, or None."""
        if self.shape is None:
            return None
        return to_shapely(self.shape, self.options.polygon_sides)
