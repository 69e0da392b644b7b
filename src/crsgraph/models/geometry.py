"""
Coordinate-system-aware point and bounding box.
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Tuple

from shapely.geometry import Point as ShapelyPoint
from shapely.geometry import box

from crsgraph.core.errors import CRSError, ValidationError

if TYPE_CHECKING:
    from crsgraph.core.crs.reference_system import ReferenceSystem


@dataclass(frozen=True)
class Point:
    """
    A coordinate pair tied to the reference system it is expressed in.

    Attributes:
        x: First coordinate (longitude, easting, ...)
        y: Second coordinate (latitude, northing, ...)
        crs: Reference system of the pair
    """

    x: float
    y: float
    crs: "ReferenceSystem"

    @property
    def position(self) -> Tuple[float, float]:
        return (self.x, self.y)

    def project_to(self, crs: "ReferenceSystem") -> "Point":
        """
        Return this point expressed in another reference system.

        Raises:
            NotConvertibleError: If the systems are not convertible
        """
        x, y = self.crs.require_conversion_to(crs)(self.position)
        return Point(x, y, crs)

    def clone(self) -> "Point":
        return Point(self.x, self.y, self.crs)

    def to_shapely(self) -> ShapelyPoint:
        return ShapelyPoint(self.x, self.y)

    def __str__(self) -> str:
        return f"Point({self.x:.6f}, {self.y:.6f}) [{self.crs}]"


@dataclass
class BoundingBox:
    """
    Axis-aligned bounding box in a given reference system.

    Attributes:
        min_x: Minimum X coordinate
        min_y: Minimum Y coordinate
        max_x: Maximum X coordinate
        max_y: Maximum Y coordinate
        crs: Reference system of the coordinates
    """

    min_x: float
    min_y: float
    max_x: float
    max_y: float
    crs: "ReferenceSystem"

    def __post_init__(self) -> None:
        """Validate bounding box."""
        if self.min_x > self.max_x:
            raise ValidationError(f"min_x ({self.min_x}) must be <= max_x ({self.max_x})", field="min_x")
        if self.min_y > self.max_y:
            raise ValidationError(f"min_y ({self.min_y}) must be <= max_y ({self.max_y})", field="min_y")

    @classmethod
    def from_points(cls, a: Point, b: Point) -> "BoundingBox":
        """
        Box spanned by two corner points.

        The second point is projected to the first point's system.
        """
        other = b.project_to(a.crs)
        return cls(
            min_x=min(a.x, other.x),
            min_y=min(a.y, other.y),
            max_x=max(a.x, other.x),
            max_y=max(a.y, other.y),
            crs=a.crs,
        )

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y

    @property
    def center(self) -> Point:
        return Point((self.min_x + self.max_x) / 2, (self.min_y + self.max_y) / 2, self.crs)

    def contains(self, x: float, y: float) -> bool:
        """Check if a pair in this box's system lies within the box."""
        return self.min_x <= x <= self.max_x and self.min_y <= y <= self.max_y

    def intersects(self, other: "BoundingBox") -> bool:
        """
        Check if this bounding box intersects another.

        Raises:
            CRSError: If the boxes are in different reference systems
        """
        if not self.crs.equals(other.crs):
            raise CRSError(
                "Bounding boxes must share a reference system to be compared",
                source_crs=str(self.crs),
                target_crs=str(other.crs),
            )
        return not (
            self.max_x < other.min_x
            or self.min_x > other.max_x
            or self.max_y < other.min_y
            or self.min_y > other.max_y
        )

    def project_to(self, crs: "ReferenceSystem") -> "BoundingBox":
        """
        Return the box around this box's four corners in another system.

        Raises:
            NotConvertibleError: If the systems are not convertible
        """
        conversion = self.crs.require_conversion_to(crs)
        corners = [
            conversion((self.min_x, self.min_y)),
            conversion((self.max_x, self.min_y)),
            conversion((self.min_x, self.max_y)),
            conversion((self.max_x, self.max_y)),
        ]
        xs = [c[0] for c in corners]
        ys = [c[1] for c in corners]
        return BoundingBox(min(xs), min(ys), max(xs), max(ys), crs)

    def to_shapely(self):
        return box(self.min_x, self.min_y, self.max_x, self.max_y)

    def to_dict(self) -> dict:
        return {
            "min_x": self.min_x,
            "min_y": self.min_y,
            "max_x": self.max_x,
            "max_y": self.max_y,
            "crs": self.crs.to_dict(),
        }

    def to_tuple(self) -> Tuple[float, float, float, float]:
        return (self.min_x, self.min_y, self.max_x, self.max_y)

    def __str__(self) -> str:
        return f"BBox({self.min_x:.6f}, {self.min_y:.6f}, {self.max_x:.6f}, {self.max_y:.6f}) [{self.crs}]"
