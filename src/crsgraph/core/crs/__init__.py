"""
Coordinate Reference System (CRS) module.

This module provides:
- Reference systems with identity rules and per-system conversion registries
- Discovery of composed conversions through the conversion graph
- Built-in geodetic and projected systems (WGS84, Mercator variants, Albers)
- A transformer service that raises instead of returning None
"""

from crsgraph.core.crs.catalog import (
    CATALOG,
    CYLINDRICAL_EQUAL_AREA,
    ELLIPTICAL_MERCATOR,
    GEOGRAPHIC,
    LOCAL_HISTORICAL,
    PLAIN,
    WEB_MERCATOR,
    WGS84,
    AlbersEqualArea,
    GeodeticCatalog,
    build_catalog,
    make_albers_equal_area,
)
from crsgraph.core.crs.discovery import (
    ComposedConversion,
    breadth_first_discovery,
    compose,
    depth_first_discovery,
    discover_conversion,
    identity_conversion,
)
from crsgraph.core.crs.reference_system import ConversionRegistry, ReferenceSystem
from crsgraph.core.crs.transformer import (
    CRSTransformer,
    compare_with_pyproj,
    to_pyproj,
    transform_coordinates,
    validate_transformation_accuracy,
)

__all__ = [
    # Reference systems
    "ConversionRegistry",
    "ReferenceSystem",
    # Discovery
    "ComposedConversion",
    "breadth_first_discovery",
    "compose",
    "depth_first_discovery",
    "discover_conversion",
    "identity_conversion",
    # Catalog
    "CATALOG",
    "CYLINDRICAL_EQUAL_AREA",
    "ELLIPTICAL_MERCATOR",
    "GEOGRAPHIC",
    "LOCAL_HISTORICAL",
    "PLAIN",
    "WEB_MERCATOR",
    "WGS84",
    "AlbersEqualArea",
    "GeodeticCatalog",
    "build_catalog",
    "make_albers_equal_area",
    # Transformer
    "CRSTransformer",
    "compare_with_pyproj",
    "to_pyproj",
    "transform_coordinates",
    "validate_transformation_accuracy",
]
