"""
Adapters between front-end interactions and region queries.
"""

from .draw import DrawEvent, DrawSession, latlng_to_point, record_point, shape_from_event

__all__ = ['DrawEvent', 'DrawSession', 'latlng_to_point', 'record_point', 'shape_from_event']
