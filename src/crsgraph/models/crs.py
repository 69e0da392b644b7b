"""
Data models for coordinate reference system descriptions.

A descriptor is the plain-data half of a reference system: its identifiers
and textual description. Conversions live on
``crsgraph.core.crs.reference_system.ReferenceSystem``.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Mapping, Optional, Sequence, Tuple

Coordinates = Tuple[float, float]

# Maps one (x, y) pair to another; must be pure.
ConversionFunction = Callable[[Sequence[float]], Coordinates]


class CoordinateOrder(str, Enum):
    """Axis convention of a reference system."""

    LON_LAT = "lon_lat"  # Longitude, Latitude (WGS84 as used here)
    LAT_LON = "lat_lon"  # Latitude, Longitude (EPSG:4326 axis order)
    XY = "xy"  # Easting, Northing (projected or local systems)


@dataclass
class CRSDescriptor:
    """
    Identity data for a coordinate reference system.

    Attributes:
        wkid: Well-known id, e.g. an EPSG code
        authority: Authority that issued the id (e.g. 'EPSG')
        wkt: Well-Known Text; compared verbatim, never parsed
        details: Free-form description used when there is no id or WKT
        coordinate_order: Axis convention, informational only
    """

    wkid: Optional[int] = None
    authority: Optional[str] = None
    wkt: Optional[str] = None
    details: Optional[str] = None
    coordinate_order: CoordinateOrder = CoordinateOrder.LON_LAT

    @classmethod
    def from_epsg(cls, epsg: int, wkt: Optional[str] = None) -> "CRSDescriptor":
        """
        Create a descriptor from an EPSG code.

        Args:
            epsg: EPSG code
            wkt: Optional WKT text for the same system

        Returns:
            CRSDescriptor instance
        """
        return cls(wkid=epsg, authority="EPSG", wkt=wkt)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "CRSDescriptor":
        """
        Create a descriptor from a mapping.

        ``id`` is accepted as an alias of ``wkid``. Unknown keys are ignored.
        """
        wkid = data.get("wkid", data.get("id"))
        order = data.get("coordinate_order")
        return cls(
            wkid=wkid,
            authority=data.get("authority"),
            wkt=data.get("wkt"),
            details=data.get("details"),
            coordinate_order=CoordinateOrder(order) if order else CoordinateOrder.LON_LAT,
        )

    def to_dict(self) -> dict:
        """Convert to dictionary representation."""
        return {
            "wkid": self.wkid,
            "authority": self.authority,
            "wkt": self.wkt,
            "details": self.details,
            "coordinate_order": self.coordinate_order.value,
        }

    @property
    def label(self) -> str:
        """The id as text, else the WKT, else the details."""
        if self.wkid:
            return str(self.wkid)
        if self.wkt:
            return self.wkt
        return self.details or ""

    def __str__(self) -> str:
        if self.authority and self.wkid:
            return f"{self.authority}:{self.wkid}"
        return self.label
