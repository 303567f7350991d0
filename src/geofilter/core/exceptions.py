"""
Error types raised for malformed shapes.

Malformed points inside a batch are skipped, never raised; only shape
parameters produce these errors.
"""


class GeofilterError(ValueError):
    """Base class for geofilter errors."""


class InvalidGeometry(GeofilterError):
    """Shape is degenerate: negative radius, too few polygon vertices, etc."""


class InvalidCoordinate(GeofilterError):
    """A shape coordinate is non-finite or outside the valid lon/lat range."""
