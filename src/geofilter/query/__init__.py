"""
Extent prefiltering and region queries.
"""

from .extent import Extent, bounding_extent, prefilter
from .region import (
    RegionQueryOptions,
    iter_valid_points,
    resolve_shape,
    region_mask,
    find_points_in_region,
    find_points_in_circle,
    filter_records,
)

__all__ = [
    'Extent',
    'bounding_extent',
    'prefilter',
    'RegionQueryOptions',
    'iter_valid_points',
    'resolve_shape',
    'region_mask',
    'find_points_in_region',
    'find_points_in_circle',
    'filter_records',
]
