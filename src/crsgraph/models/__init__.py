"""
Data models for reference system descriptions and CRS-aware geometry.
"""

from .crs import ConversionFunction, Coordinates, CoordinateOrder, CRSDescriptor
from .geometry import BoundingBox, Point

__all__ = [
    "BoundingBox",
    "ConversionFunction",
    "Coordinates",
    "CoordinateOrder",
    "CRSDescriptor",
    "Point",
]
