"""
Built-in reference systems.

``build_catalog`` creates a fresh, fully wired set of systems. The module
builds one such set at import time and exposes its members as constants
(``WGS84``, ``WEB_MERCATOR``, ...). WGS84 is the hub: every other built-in
system with conversions is wired to it in both directions, and pairs that
are not wired directly are found through discovery.
"""

import logging
from dataclasses import dataclass, fields
from functools import partial
from typing import Iterator, Optional, Tuple

from crsgraph.core.crs import projections
from crsgraph.core.crs.projections import AlbersParameters
from crsgraph.core.crs.reference_system import ReferenceSystem
from crsgraph.models.crs import CoordinateOrder, CRSDescriptor

logger = logging.getLogger(__name__)

WGS84_WKT = (
    'GEOGCS["GCS_WGS_1984",DATUM["D_WGS_1984",SPHEROID["WGS_1984",6378137,298.257223563]],'
    'PRIMEM["Greenwich",0],UNIT["Degree",0.017453292519943295]]'
)

_MERCATOR_PARAMETERS = (
    'PROJECTION["Mercator"],PARAMETER["central_meridian",0],PARAMETER["scale_factor",1],'
    'PARAMETER["false_easting",0],PARAMETER["false_northing",0],UNIT["Meter",1]]'
)

WEB_MERCATOR_WKT = f'PROJCS["WGS 84 / Pseudo-Mercator",{WGS84_WKT},{_MERCATOR_PARAMETERS}'

ELLIPTICAL_MERCATOR_WKT = f'PROJCS["WGS 84 / World Mercator",{WGS84_WKT},{_MERCATOR_PARAMETERS}'

MOSCOW_BESSEL_WKT = (
    'PROJCS["Moscow_bessel",GEOGCS["GCS_Bessel_1841",DATUM["D_Bessel_1841",'
    'SPHEROID["Bessel_1841",6377397.155,299.1528128]],PRIMEM["Greenwich",0.0],'
    'UNIT["Degree",0.0174532925199433]],PROJECTION["Transverse_Mercator"],'
    'PARAMETER["False_Easting",0.0],PARAMETER["False_Northing",0.0],'
    'PARAMETER["Central_Meridian",37.5],PARAMETER["Scale_Factor",1.0],'
    'PARAMETER["Latitude_Of_Origin",55.66666666666666],UNIT["Meter",1.0]]'
)


class AlbersEqualArea(ReferenceSystem):
    """
    Albers equal-area conic projection on a sphere of radius 6372795 m.

    Each instance is a new reference system wired to WGS84 in both
    directions as soon as it is constructed.

    Standard parallels mirrored about the equator give a degenerate cone.
    Such a system is still built, and its conversions return inf or nan.

    The hub keeps a reference to every system wired to it, so an instance
    stays alive as long as its hub does. Call ``detach`` to unwire it.

    Args:
        lat0: Latitude of origin (degrees)
        lon0: Longitude of origin (degrees)
        std_parallel_1: First standard parallel (degrees)
        std_parallel_2: Second standard parallel (degrees)
        wgs84: Hub system to wire to; defaults to the process-wide WGS84
    """

    def __init__(
        self,
        lat0: float,
        lon0: float,
        std_parallel_1: float,
        std_parallel_2: float,
        wgs84: Optional[ReferenceSystem] = None,
    ):
        self.parameters = AlbersParameters(lat0, lon0, std_parallel_1, std_parallel_2)

        super().__init__(
            CRSDescriptor(
                details=f"Albers Equal-Area Conic Projection: {self.parameters.label()}",
                coordinate_order=CoordinateOrder.XY,
            )
        )

        self.hub = wgs84 if wgs84 is not None else WGS84
        self.register_conversion(self.hub, partial(projections.albers_to_wgs84, self.parameters))
        self.hub.register_conversion(self, partial(projections.wgs84_to_albers, self.parameters))

        logger.debug(f"Created {self!r} wired to {self.hub!r}")

    def detach(self) -> bool:
        """
        Remove the hub's conversion to this system.

        Paths to this system that discovery cached on other systems are left
        in place; ``ConversionRegistry.clear_discovered`` drops them.

        Returns:
            True if the hub still had a conversion to this system
        """
        removed = self.hub.registry.unregister(self)
        if removed:
            logger.debug(f"Detached {self!r} from {self.hub!r}")
        return removed


def make_albers_equal_area(
    lat0: float,
    lon0: float,
    std_parallel_1: float,
    std_parallel_2: float,
    wgs84: Optional[ReferenceSystem] = None,
) -> AlbersEqualArea:
    """
    Construct a new Albers equal-area reference system wired to WGS84.

    The hub holds on to the new system until ``detach`` is called on it.
    """
    return AlbersEqualArea(lat0, lon0, std_parallel_1, std_parallel_2, wgs84=wgs84)


@dataclass(frozen=True)
class GeodeticCatalog:
    """
    A wired set of built-in reference systems.

    Attributes:
        plain: Local euclidean plane with no conversions
        geographic: EPSG:4326 with (lat, lon) axis order
        wgs84: WGS84 with (lon, lat) axis order; the hub
        web_mercator: Spherical pseudo-Mercator (EPSG:3857)
        elliptical_mercator: Ellipsoidal world Mercator (EPSG:3395)
        local_historical: Moscow Bessel transverse Mercator, WKT only, unwired
        cylindrical_equal_area: Albers instance (0, 180, 60, 50)
    """

    plain: ReferenceSystem
    geographic: ReferenceSystem
    wgs84: ReferenceSystem
    web_mercator: ReferenceSystem
    elliptical_mercator: ReferenceSystem
    local_historical: ReferenceSystem
    cylindrical_equal_area: AlbersEqualArea

    def __iter__(self) -> Iterator[Tuple[str, ReferenceSystem]]:
        for f in fields(self):
            yield f.name, getattr(self, f.name)

    def get(self, name: str) -> Optional[ReferenceSystem]:
        """Look up a member by attribute name, e.g. 'web_mercator'."""
        return dict(self).get(name)

    def find(self, wkid: Optional[int] = None, wkt: Optional[str] = None) -> Optional[ReferenceSystem]:
        """
        Return the first member that equals a system with the given id or WKT.

        Returns:
            The matching member, or None
        """
        if not wkid and not wkt:
            return None

        query = ReferenceSystem(CRSDescriptor(wkid=wkid, wkt=wkt))
        for _, system in self:
            if system.equals(query):
                return system
        return None


def build_catalog() -> GeodeticCatalog:
    """
    Create and wire a new set of built-in reference systems.

    Returns:
        GeodeticCatalog whose members are connected only among themselves
    """
    plain = ReferenceSystem(
        CRSDescriptor(details="Plain crs without any projection functions", coordinate_order=CoordinateOrder.XY)
    )

    wgs84 = ReferenceSystem(CRSDescriptor(wkid=84, authority="OCG", wkt=WGS84_WKT))

    geographic = ReferenceSystem(
        CRSDescriptor(wkid=4326, authority="EPSG", coordinate_order=CoordinateOrder.LAT_LON)
    )
    geographic.register_conversion(wgs84, projections.swap_axes)
    wgs84.register_conversion(geographic, projections.swap_axes)

    web_mercator = ReferenceSystem(
        CRSDescriptor(
            wkid=3857,
            authority="EPSG",
            wkt=WEB_MERCATOR_WKT,
            coordinate_order=CoordinateOrder.XY,
        )
    )
    web_mercator.register_conversion(wgs84, projections.web_mercator_to_wgs84)
    wgs84.register_conversion(web_mercator, projections.wgs84_to_web_mercator)

    elliptical_mercator = ReferenceSystem(
        CRSDescriptor(
            wkid=3395,
            authority="EPSG",
            wkt=ELLIPTICAL_MERCATOR_WKT,
            coordinate_order=CoordinateOrder.XY,
        )
    )
    elliptical_mercator.register_conversion(wgs84, projections.elliptical_mercator_to_wgs84)
    wgs84.register_conversion(elliptical_mercator, projections.wgs84_to_elliptical_mercator)

    local_historical = ReferenceSystem(
        CRSDescriptor(wkt=MOSCOW_BESSEL_WKT, coordinate_order=CoordinateOrder.XY)
    )

    cylindrical_equal_area = AlbersEqualArea(0, 180, 60, 50, wgs84=wgs84)

    return GeodeticCatalog(
        plain=plain,
        geographic=geographic,
        wgs84=wgs84,
        web_mercator=web_mercator,
        elliptical_mercator=elliptical_mercator,
        local_historical=local_historical,
        cylindrical_equal_area=cylindrical_equal_area,
    )


CATALOG = build_catalog()

PLAIN = CATALOG.plain
GEOGRAPHIC = CATALOG.geographic
WGS84 = CATALOG.wgs84
WEB_MERCATOR = CATALOG.web_mercator
ELLIPTICAL_MERCATOR = CATALOG.elliptical_mercator
LOCAL_HISTORICAL = CATALOG.local_historical
CYLINDRICAL_EQUAL_AREA = CATALOG.cylindrical_equal_area
