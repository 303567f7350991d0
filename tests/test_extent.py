"""
Unit tests for bounding extents and prefiltering.
"""

import math

import numpy as np
import pytest

from geofilter.core.coordinates import GeoPoint, PlanarPoint
from geofilter.core.distance import DEFAULT_SPHERE_RADIUS_M, destination_point
from geofilter.shapes.shapes import Circle, Polygon, Rectangle
from geofilter.shapes.containment import EPS, contains
from geofilter.query.extent import EXTENT_PAD_DEG, Extent, bounding_extent, prefilter


def random_points(rng, center, n=2000, spread=(10.0, 5.0)):
    lons = np.clip(center[0] + rng.uniform(-spread[0], spread[0], n), -180, 180)
    lats = np.clip(center[1] + rng.uniform(-spread[1], spread[1], n), -90, 90)
    return [GeoPoint(float(x), float(y)) for x, y in zip(lons, lats)]


class TestExtent:
    """Tests for the Extent value object."""

    def test_contains_inclusive(self):
        extent = Extent(0.0, 0.0, 1.0, 1.0)
        assert extent.contains(GeoPoint(0.0, 0.0))
        assert extent.contains(GeoPoint(1.0, 1.0))
        assert not extent.contains(GeoPoint(1.1, 0.5))

    def test_contains_arrays(self):
        extent = Extent(0.0, 0.0, 1.0, 1.0)
        mask = extent.contains_arrays(np.array([0.5, 1.0, 2.0]), np.array([0.5, 0.0, 0.5]))
        np.testing.assert_array_equal(mask, [True, True, False])

    def test_world(self):
        assert Extent.world().spans_all_longitudes


class TestPolygonExtent:
    """Tests for polygon and rectangle extents."""

    def test_polygon_min_max(self):
        poly = Polygon.from_lonlat([(-1, 2), (3, -4), (5, 6), (0, 7)])
        extent = bounding_extent(poly)
        assert (extent.min_lon, extent.min_lat) == (pytest.approx(-1, abs=1e-8), pytest.approx(-4, abs=1e-8))
        assert (extent.max_lon, extent.max_lat) == (pytest.approx(5, abs=1e-8), pytest.approx(7, abs=1e-8))

    def test_polygon_padded_past_edge_tolerance(self):
        """Points within EPS of an edge are inside, so the box reaches past them."""
        extent = bounding_extent(Polygon.from_lonlat([(0, 0), (1, 0), (1, 1), (0, 1)]))
        assert EXTENT_PAD_DEG > EPS
        assert extent.max_lon > 1.0 + EPS
        assert extent.min_lat <= -EPS
        assert extent.contains(GeoPoint(1.0 + 5e-11, 0.5))

    def test_polygon_at_world_edge_stays_clamped(self):
        extent = bounding_extent(Polygon.from_lonlat([(-180, -90), (180, -90), (180, 90), (-180, 90)]))
        assert extent == Extent.world()

    def test_planar_polygon(self):
        """Projected vertices are padded but not clamped to degrees."""
        poly = Polygon((PlanarPoint(1000, 20), PlanarPoint(3000, 20), PlanarPoint(2000, 400)))
        extent = bounding_extent(poly)
        assert extent.max_lon == pytest.approx(3000)
        assert extent.max_lat == pytest.approx(400)
        assert extent.min_lon < 1000

    def test_rectangle(self):
        rect = Rectangle(GeoPoint(2.0, 1.0), GeoPoint(-1.0, -3.0))
        extent = bounding_extent(rect)
        assert extent.min_lon == pytest.approx(-1.0)
        assert extent.max_lat == pytest.approx(1.0)
        assert extent.contains(rect.min_corner)
        assert extent.contains(rect.max_corner)

    def test_rejects_non_shape(self):
        with pytest.raises(TypeError):
            bounding_extent([(0, 0), (1, 1)])


class TestCircleExtent:
    """Tests for geodesic and planar circle extents."""

    @pytest.mark.parametrize("center", [(0.0, 0.0), (-86.31, 32.38), (20.0, -70.0)])
    def test_contains_compass_points(self, center):
        """North, east, south and west boundary points lie inside the extent."""
        circle = Circle(GeoPoint(*center), 250_000.0)
        extent = bounding_extent(circle)
        for bearing in (0.0, 90.0, 180.0, 270.0):
            edge = destination_point(circle.center, bearing, circle.radius_meters)
            assert extent.contains(edge)

    def test_wider_than_naive_box_at_high_latitude(self):
        """A degree of longitude is short near the poles, so the box widens."""
        circle = Circle(GeoPoint(0.0, 80.0), 500_000.0)
        extent = bounding_extent(circle)
        naive = math.degrees(circle.radius_meters / DEFAULT_SPHERE_RADIUS_M)

        assert extent.max_lat == pytest.approx(80.0 + naive, abs=1e-6)
        assert extent.max_lon > 20.0 > naive
        assert extent.contains(GeoPoint(20.0, 80.0))
        assert contains(circle, GeoPoint(20.0, 80.0))

    def test_pole_inside(self):
        """A cap over the pole spans every longitude."""
        circle = Circle(GeoPoint(0.0, 89.0), 200_000.0)
        extent = bounding_extent(circle)
        assert extent.spans_all_longitudes
        assert extent.max_lat == 90.0
        assert extent.contains(GeoPoint(180.0, 89.5))

    def test_crosses_antimeridian(self):
        circle = Circle(GeoPoint(179.5, 0.0), 100_000.0)
        extent = bounding_extent(circle)
        assert extent.spans_all_longitudes
        assert extent.contains(GeoPoint(-179.8, 0.0))

    def test_whole_sphere(self):
        circle = Circle(GeoPoint(0.0, 0.0), math.pi * DEFAULT_SPHERE_RADIUS_M)
        assert bounding_extent(circle) == Extent.world()

    def test_zero_radius(self):
        center = GeoPoint(12.5, 41.9)
        extent = bounding_extent(Circle(center, 0.0))
        assert extent.contains(center)
        assert not extent.contains(GeoPoint(12.5001, 41.9))

    def test_sphere_radius_changes_extent(self):
        """The same radius is a smaller angle on a larger sphere."""
        small = bounding_extent(Circle(GeoPoint(0.0, 0.0), 100_000.0, 6371000.0))
        large = bounding_extent(Circle(GeoPoint(0.0, 0.0), 100_000.0, 6378137.0))
        assert large.max_lat < small.max_lat

    def test_planar_circle_reaches_pole(self):
        """Points past the Mercator limit stay in a planar extent that reaches it."""
        circle = Circle(GeoPoint(0.0, 85.0), 500_000.0)
        extent = bounding_extent(circle, geodesic=False)
        assert extent.max_lat == 90.0
        assert contains(circle, GeoPoint(0.0, 89.0), geodesic=False)
        assert extent.contains(GeoPoint(0.0, 89.0))

    @pytest.mark.parametrize("radius", [5e9, 1e12, 1e300])
    def test_planar_circle_larger_than_the_world(self, radius):
        """A radius past the projected world span bounds the whole world."""
        extent = bounding_extent(Circle(GeoPoint(0.0, 0.0), radius), geodesic=False)
        assert extent == Extent.world()

    @pytest.mark.parametrize("center, radius, geodesic", [
        ((0.0, 0.0), 300_000.0, True),
        ((10.0, 60.0), 400_000.0, True),
        ((-150.0, -75.0), 600_000.0, True),
        ((0.0, 0.0), 300_000.0, False),
        ((10.0, 60.0), 400_000.0, False),
    ])
    def test_no_false_negatives(self, center, radius, geodesic):
        """Every point the exact test accepts lies inside the extent."""
        rng = np.random.default_rng(11)
        circle = Circle(GeoPoint(*center), radius)
        extent = bounding_extent(circle, geodesic=geodesic)

        matched = 0
        for point in random_points(rng, center, spread=(30.0, 10.0)):
            if contains(circle, point, geodesic):
                matched += 1
                assert extent.contains(point)
        assert matched > 0


class TestPrefilter:
    """Tests for prefilter()."""

    def test_keeps_order(self):
        points = [GeoPoint(0.5, 0.5), GeoPoint(5.0, 5.0), GeoPoint(0.1, 0.9), GeoPoint(0.5, 0.5)]
        result = prefilter(points, Extent(0.0, 0.0, 1.0, 1.0))
        assert result == [GeoPoint(0.5, 0.5), GeoPoint(0.1, 0.9), GeoPoint(0.5, 0.5)]

    def test_empty(self):
        assert prefilter([], Extent.world()) == []

    def test_does_not_mutate_input(self):
        points = [GeoPoint(0.5, 0.5), GeoPoint(5.0, 5.0)]
        prefilter(points, Extent(0.0, 0.0, 1.0, 1.0))
        assert points == [GeoPoint(0.5, 0.5), GeoPoint(5.0, 5.0)]

    @pytest.mark.parametrize("shape", [
        Circle(GeoPoint(0.0, 0.0), 300_000.0),
        Circle(GeoPoint(25.0, 78.0), 350_000.0),
        Polygon.from_lonlat([(0, 0), (3, 0), (3, 3), (2, 3), (2, 1), (1, 1), (1, 3), (0, 3)]),
        Rectangle(GeoPoint(-2.0, -1.0), GeoPoint(2.0, 1.0)),
    ])
    def test_prefilter_then_exact_equals_exact(self, shape):
        """Prefiltering never changes the final result."""
        rng = np.random.default_rng(5)
        points = random_points(rng, (10.0, 40.0), spread=(60.0, 50.0))
        extent = bounding_extent(shape)

        exact = [p for p in points if contains(shape, p)]
        filtered = [p for p in prefilter(points, extent) if contains(shape, p)]
        assert filtered == exact
