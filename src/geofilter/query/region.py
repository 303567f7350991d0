"""
Region queries: which points of a batch fall inside a shape.

Pipeline: drop missing/invalid points -> extent prefilter -> exact test.

Shapes are validated when they are built, so a malformed shape never
reaches a query. Malformed points are skipped, one bad reading does not
abort a batch.
"""

import logging
import math
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Callable, Iterable, Iterator, List, Optional, Sequence, Tuple, TypeVar

import numpy as np

from ..core.coordinates import GeoPoint
from ..core.exceptions import InvalidGeometry
from ..shapes.approximation import DEFAULT_POLYGON_SIDES
from ..shapes.containment import contains, shape_kind
from ..shapes.shapes import Circle, ShapeKind
from .extent import Extent, bounding_extent


logger = logging.getLogger(__name__)

T = TypeVar('T')


@dataclass(frozen=True)
class RegionQueryOptions:
    """
    Options for region queries.

    Attributes
    ----------
    sphere_radius_meters : float, optional
        Sphere radius for circle distances. Ignored unless > 0, in which
        case it overrides the circle's own sphere radius.
    geodesic : bool
        Circles only: great-circle distance (default) or planar Web
        Mercator distance.
    polygon_sides : int
        Vertex count when a circle is handed over as a polygon.
    workers : int
        Number of threads for evaluating large batches. 1 runs serially.
    """
    sphere_radius_meters: Optional[float] = None
    geodesic: bool = True
    polygon_sides: int = DEFAULT_POLYGON_SIDES
    workers: int = 1

    def __post_init__(self):
        if self.polygon_sides < 3:
            raise ValueError(f"polygon_sides must be >= 3, got {self.polygon_sides}")
        if self.workers < 1:
            raise ValueError(f"workers must be >= 1, got {self.workers}")


def iter_valid_points(points: Iterable[Optional[GeoPoint]]) -> Iterator[Tuple[int, GeoPoint]]:
    """
    Yield (index, point) for every usable point.

    None entries, non-GeoPoint entries and points with non-finite or
    out-of-range coordinates are skipped.
    """
    skipped = 0
    for i, point in enumerate(points):
        if isinstance(point, GeoPoint) and point.is_valid:
            yield i, point
        else:
            skipped += 1
    if skipped:
        logger.debug("Skipped %d missing or invalid points", skipped)


def resolve_shape(shape, options: RegionQueryOptions):
    """
    Prepare a shape for querying GeoPoints.

    Applies the option's sphere radius to a circle when one is set.
    Polygons must have GeoPoint vertices, since points are compared in
    (lon, lat) degrees; projected vertices raise InvalidGeometry.
    """
    kind = shape_kind(shape)
    if kind is ShapeKind.POLYGON and not shape.is_geographic:
        raise InvalidGeometry(
            "region queries need a polygon with GeoPoint vertices, got PlanarPoint"
        )
    if kind is not ShapeKind.CIRCLE:
        return shape
    radius = options.sphere_radius_meters
    if radius is not None and math.isfinite(radius) and radius > 0:
        return shape.with_sphere_radius(radius)
    return shape


def _evaluate(points: Sequence[Optional[GeoPoint]], shape, extent: Extent, geodesic: bool) -> np.ndarray:
    mask = np.zeros(len(points), dtype=bool)
    valid = list(iter_valid_points(points))
    if not valid:
        return mask

    lons = np.fromiter((p.longitude for _, p in valid), dtype=np.float64, count=len(valid))
    lats = np.fromiter((p.latitude for _, p in valid), dtype=np.float64, count=len(valid))
    candidates = extent.contains_arrays(lons, lats)

    for (i, point), candidate in zip(valid, candidates):
        if candidate:
            mask[i] = contains(shape, point, geodesic)
    return mask


def _mask(points: List[Optional[GeoPoint]], shape, options: Optional[RegionQueryOptions]) -> np.ndarray:
    if options is None:
        options = RegionQueryOptions()
    shape = resolve_shape(shape, options)
    if not points:
        return np.zeros(0, dtype=bool)

    extent = bounding_extent(shape, geodesic=options.geodesic)

    if options.workers == 1 or len(points) <= options.workers:
        return _evaluate(points, shape, extent, options.geodesic)

    # Contiguous chunks, concatenated in order
    size = math.ceil(len(points) / options.workers)
    chunks = [points[i:i + size] for i in range(0, len(points), size)]
    with ThreadPoolExecutor(max_workers=options.workers) as executor:
        masks = list(executor.map(
            lambda chunk: _evaluate(chunk, shape, extent, options.geodesic), chunks
        ))
    return np.concatenate(masks)


def region_mask(
    points: Optional[Iterable[Optional[GeoPoint]]],
    shape,
    options: Optional[RegionQueryOptions] = None
) -> np.ndarray:
    """
    Boolean mask of the points inside a shape.

    Parameters
    ----------
    points : iterable of GeoPoint or None, optional
        Points in degrees. None entries are allowed and map to False.
    shape : Circle, Polygon or Rectangle
        Region to test against.
    options : RegionQueryOptions, optional
        Query options.

    Returns
    -------
    np.ndarray
        Boolean array aligned with ``points``; empty if ``points`` is None.
    """
    points = [] if points is None else list(points)
    return _mask(points, shape, options)


def find_points_in_region(
    points: Optional[Iterable[Optional[GeoPoint]]],
    shape,
    options: Optional[RegionQueryOptions] = None
) -> List[GeoPoint]:
    """
    Return the points inside a shape.

    Parameters
    ----------
    points : iterable of GeoPoint or None, optional
        Points in degrees. None or empty gives an empty result; None
        entries and invalid points are skipped.
    shape : Circle, Polygon or Rectangle
        Region to test against. Circles include their boundary, as do
        polygons and rectangles.
    options : RegionQueryOptions, optional
        Query options.

    Returns
    -------
    list of GeoPoint
        Matching points in input order. Duplicates are kept.

    Raises
    ------
    TypeError
        If ``shape`` is not a Circle, Polygon or Rectangle.
    InvalidGeometry
        If ``shape`` is a polygon with PlanarPoint vertices.
    """
    points = [] if points is None else list(points)
    mask = _mask(points, shape, options)
    return [p for p, keep in zip(points, mask) if keep]


def find_points_in_circle(
    points: Optional[Iterable[Optional[GeoPoint]]],
    center_lon: float,
    center_lat: float,
    radius_meters: float,
    options: Optional[RegionQueryOptions] = None
) -> List[GeoPoint]:
    """
    Shortcut for a circle query from raw center coordinates.

    Raises InvalidCoordinate or InvalidGeometry for a bad center or radius.
    """
    circle = Circle(GeoPoint(center_lon, center_lat), radius_meters)
    return find_points_in_region(points, circle, options)


def filter_records(
    records: Optional[Iterable[T]],
    shape,
    key: Callable[[T], Optional[GeoPoint]],
    options: Optional[RegionQueryOptions] = None
) -> List[T]:
    """
    Filter arbitrary records by the location ``key`` extracts from them.

    Records that are None, or whose key returns None or an invalid point,
    are skipped.
    """
    records = [] if records is None else list(records)
    points = [None if r is None else key(r) for r in records]
    mask = _mask(points, shape, options)
    return [r for r, keep in zip(records, mask) if keep]
