"""
Coordinate transformation service.

The reference system core answers "not convertible" with None. This module
wraps it for callers that prefer exceptions, adds batch, bounding box and
shapely geometry conversion, and can check a conversion against pyproj as an
independent geodetic reference.
"""

import logging
from typing import Any, List, Tuple, Union

import numpy as np
from pyproj import CRS, Transformer
from pyproj.exceptions import CRSError as ProjCRSError
import shapely
from shapely.geometry.base import BaseGeometry

from crsgraph.core.crs.reference_system import ReferenceSystem
from crsgraph.core.errors import TransformationError
from crsgraph.models.crs import ConversionFunction, Coordinates, CoordinateOrder
from crsgraph.models.geometry import BoundingBox
from crsgraph.utils.logging import log_performance

logger = logging.getLogger(__name__)


class CRSTransformer:
    """
    Converts coordinates from one reference system to another.

    The conversion is resolved once, at construction.

    Args:
        source_crs: System the input coordinates are in
        target_crs: System to convert to

    Raises:
        NotConvertibleError: If no conversion path links the two systems
    """

    def __init__(self, source_crs: ReferenceSystem, target_crs: ReferenceSystem):
        self.source_crs = source_crs
        self.target_crs = target_crs
        self._conversion: ConversionFunction = source_crs.require_conversion_to(target_crs)

    def transform(self, x: float, y: float) -> Coordinates:
        """
        Convert a single coordinate pair.

        Raises:
            TransformationError: If the conversion function fails
        """
        try:
            return self._conversion((x, y))
        except Exception as e:
            raise TransformationError(
                f"Transformation failed: {e}",
                source_crs=str(self.source_crs),
                target_crs=str(self.target_crs),
            ) from e

    @log_performance(threshold_ms=100)
    def transform_batch(
        self,
        x_coords: Union[List[float], np.ndarray],
        y_coords: Union[List[float], np.ndarray],
    ) -> Tuple[np.ndarray, np.ndarray]:
        """
        Convert many coordinate pairs.

        Args:
            x_coords: Sequence of x values
            y_coords: Sequence of y values, same length as x_coords

        Returns:
            Tuple of converted (x, y) float arrays

        Raises:
            TransformationError: If the lengths differ or a conversion fails
        """
        x_arr = np.asarray(x_coords, dtype=float)
        y_arr = np.asarray(y_coords, dtype=float)

        if x_arr.shape != y_arr.shape:
            raise TransformationError(
                "x_coords and y_coords must have same length",
                details={"x_count": int(x_arr.size), "y_count": int(y_arr.size)},
            )

        converted = [self.transform(x, y) for x, y in zip(x_arr.tolist(), y_arr.tolist())]
        if not converted:
            return np.empty(0), np.empty(0)

        xx, yy = np.asarray(converted, dtype=float).T
        return xx, yy

    def transform_bounds(self, bbox: BoundingBox) -> BoundingBox:
        """
        Convert a bounding box.

        The four corners are converted and a new axis-aligned box is built
        around them, which may be larger than the true converted extent.
        """
        corners_x = [bbox.min_x, bbox.max_x, bbox.min_x, bbox.max_x]
        corners_y = [bbox.min_y, bbox.min_y, bbox.max_y, bbox.max_y]

        xx, yy = self.transform_batch(corners_x, corners_y)

        return BoundingBox(
            min_x=float(np.min(xx)),
            min_y=float(np.min(yy)),
            max_x=float(np.max(xx)),
            max_y=float(np.max(yy)),
            crs=self.target_crs,
        )

    def transform_geometry(self, geometry: BaseGeometry) -> BaseGeometry:
        """Convert every vertex of a shapely geometry; z values are dropped."""

        def convert(coords: np.ndarray) -> np.ndarray:
            xx, yy = self.transform_batch(coords[:, 0], coords[:, 1])
            return np.column_stack([xx, yy])

        return shapely.transform(geometry, convert)

    def inverse_transform(self, x: float, y: float) -> Coordinates:
        """
        Convert a pair from the target system back to the source system.

        Raises:
            NotConvertibleError: If there is no path back
        """
        return CRSTransformer(self.target_crs, self.source_crs).transform(x, y)


def transform_coordinates(
    x: float,
    y: float,
    source_crs: ReferenceSystem,
    target_crs: ReferenceSystem,
) -> Coordinates:
    """
    Convert a single coordinate pair between systems.

    Raises:
        NotConvertibleError: If no conversion path links the two systems
        TransformationError: If the conversion function fails
    """
    return CRSTransformer(source_crs, target_crs).transform(x, y)


def validate_transformation_accuracy(
    x: float,
    y: float,
    source_crs: ReferenceSystem,
    target_crs: ReferenceSystem,
    tolerance: float = 1e-9,
) -> bool:
    """
    Check a conversion by converting there and back.

    Args:
        x: X coordinate in source_crs
        y: Y coordinate in source_crs
        source_crs: Source system
        target_crs: Target system
        tolerance: Largest accepted difference per axis, in source units

    Returns:
        True if both axes return within tolerance
    """
    forward = CRSTransformer(source_crs, target_crs)
    x_target, y_target = forward.transform(x, y)
    x_back, y_back = forward.inverse_transform(x_target, y_target)

    return abs(x - x_back) <= tolerance and abs(y - y_back) <= tolerance


def to_pyproj(crs: ReferenceSystem) -> CRS:
    """
    Build the pyproj CRS for a reference system.

    Uses ``AUTHORITY:wkid`` when both are set, else the WKT.

    Raises:
        TransformationError: If pyproj does not know the system
    """
    try:
        if crs.authority and crs.wkid:
            return CRS.from_user_input(f"{crs.authority}:{crs.wkid}")
        if crs.wkt:
            return CRS.from_wkt(crs.wkt)
    except ProjCRSError as e:
        raise TransformationError(
            f"pyproj cannot interpret {crs!r}: {e}", source_crs=str(crs)
        ) from e

    raise TransformationError(
        f"{crs!r} has neither an authority code nor WKT", source_crs=str(crs)
    )


def compare_with_pyproj(
    x: float,
    y: float,
    source_crs: ReferenceSystem,
    target_crs: ReferenceSystem,
    source_pyproj: Any = None,
    target_pyproj: Any = None,
) -> Coordinates:
    """
    Difference between this library's conversion and pyproj's.

    Both systems are resolved with ``to_pyproj`` unless an explicit pyproj
    definition (anything ``pyproj.CRS`` accepts) is given. pyproj runs with
    ``always_xy=True``, so geographic pairs are (lon, lat) on its side; pairs
    of a ``LAT_LON`` system are swapped on the way in and on the way out.

    Returns:
        Absolute (dx, dy) in target units

    Raises:
        NotConvertibleError: If this library cannot convert the pair
        TransformationError: If pyproj cannot build either system
    """
    ours = transform_coordinates(x, y, source_crs, target_crs)

    src = CRS(source_pyproj) if source_pyproj is not None else to_pyproj(source_crs)
    tgt = CRS(target_pyproj) if target_pyproj is not None else to_pyproj(target_crs)
    px, py = (y, x) if source_crs.coordinate_order is CoordinateOrder.LAT_LON else (x, y)
    rx, ry = Transformer.from_crs(src, tgt, always_xy=True).transform(px, py)
    reference = (ry, rx) if target_crs.coordinate_order is CoordinateOrder.LAT_LON else (rx, ry)

    return abs(ours[0] - reference[0]), abs(ours[1] - reference[1])
