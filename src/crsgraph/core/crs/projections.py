"""
Forward and inverse formulas of the built-in projections.

All functions take and return (x, y) pairs. Geographic pairs are
(longitude, latitude) in decimal degrees; projected pairs are in meters.
Degenerate inputs (poles, points outside a cone) produce inf or nan
instead of raising, so a conversion function never throws.
"""

from dataclasses import dataclass, field
from typing import NamedTuple

import numpy as np

from crsgraph.models.crs import Coordinates

HALF_PI = np.pi / 2
QUARTER_PI = np.pi / 4

# Spherical (pseudo) Mercator
WEB_MERCATOR_RADIUS = 6378137.0

# WGS84 ellipsoid for the world Mercator
ELLIPSOID_SEMI_MAJOR = 6378137.0
ELLIPSOID_SEMI_MINOR = 6356752.3142451793
ELLIPSOID_ECCENTRICITY = float(
    np.sqrt(1 - ELLIPSOID_SEMI_MINOR * ELLIPSOID_SEMI_MINOR / ELLIPSOID_SEMI_MAJOR / ELLIPSOID_SEMI_MAJOR)
)
MERCATOR_MAX_ITERATIONS = 15
MERCATOR_TOLERANCE = 1e-9

# Sphere used by the Albers family
ALBERS_SPHERE_RADIUS = 6372795.0


def swap_axes(coordinates) -> Coordinates:
    """Exchange the two axes, e.g. (lon, lat) <-> (lat, lon)."""
    x, y = coordinates
    return (y, x)


@np.errstate(divide="ignore", invalid="ignore", over="ignore")
def web_mercator_to_wgs84(coordinates) -> Coordinates:
    x, y = coordinates
    a = WEB_MERCATOR_RADIUS

    r_lat = HALF_PI - 2 * np.arctan(np.exp(-y / a))
    r_lon = x / a

    return float(np.degrees(r_lon)), float(np.degrees(r_lat))


@np.errstate(divide="ignore", invalid="ignore", over="ignore")
def wgs84_to_web_mercator(coordinates) -> Coordinates:
    lon, lat = coordinates
    a = WEB_MERCATOR_RADIUS

    r_lon = np.radians(lon)
    r_lat = np.radians(lat)

    return float(a * r_lon), float(a * np.log(np.tan(QUARTER_PI + r_lat / 2)))


class LatitudeSolution(NamedTuple):
    """
    Result of the world Mercator latitude iteration.

    Attributes:
        phi: Latitude in radians
        iterations: Number of correction steps applied
        converged: True if the last correction was within tolerance
    """

    phi: float
    iterations: int
    converged: bool


@np.errstate(divide="ignore", invalid="ignore", over="ignore")
def elliptical_mercator_latitude(
    y: float,
    max_iterations: int = MERCATOR_MAX_ITERATIONS,
    tolerance: float = MERCATOR_TOLERANCE,
) -> LatitudeSolution:
    """
    Solve the ellipsoidal Mercator northing for latitude by fixed-point iteration.

    Starts from the spherical solution and applies corrections until one is
    no larger than ``tolerance`` or ``max_iterations`` corrections have run.

    Args:
        y: Northing in meters
        max_iterations: Upper bound on correction steps
        tolerance: Convergence threshold in radians

    Returns:
        LatitudeSolution with the latitude in radians
    """
    e = ELLIPSOID_ECCENTRICITY
    half_e = e / 2

    ts = np.exp(-y / ELLIPSOID_SEMI_MAJOR)
    phi = HALF_PI - 2 * np.arctan(ts)
    dphi = 1.0
    iterations = 0

    while abs(dphi) > tolerance and iterations < max_iterations:
        iterations += 1
        con = e * np.sin(phi)
        dphi = HALF_PI - 2 * np.arctan(ts * ((1 - con) / (1 + con)) ** half_e) - phi
        phi += dphi

    return LatitudeSolution(float(phi), iterations, bool(abs(dphi) <= tolerance))


def elliptical_mercator_to_wgs84(coordinates) -> Coordinates:
    x, y = coordinates

    r_lon = x / ELLIPSOID_SEMI_MAJOR
    r_lat = elliptical_mercator_latitude(y).phi

    return float(np.degrees(r_lon)), float(np.degrees(r_lat))


@np.errstate(divide="ignore", invalid="ignore", over="ignore")
def wgs84_to_elliptical_mercator(coordinates) -> Coordinates:
    lon, lat = coordinates
    a = ELLIPSOID_SEMI_MAJOR
    e = ELLIPSOID_ECCENTRICITY

    r_lat = np.radians(lat)
    r_lon = np.radians(lon)
    e_sin = e * np.sin(r_lat)

    x = a * r_lon
    y = a * np.log(np.tan(QUARTER_PI + r_lat / 2) * ((1 - e_sin) / (1 + e_sin)) ** (e / 2))

    return float(x), float(y)


@dataclass
class AlbersParameters:
    """
    Parameters of an Albers equal-area conic projection on a sphere.

    Attributes:
        lat0: Latitude of origin (degrees)
        lon0: Longitude of origin (degrees)
        std_parallel_1: First standard parallel (degrees)
        std_parallel_2: Second standard parallel (degrees)
        n: Cone constant
        c: Projection constant
        rho0: Radius of the origin parallel on the unit sphere
    """

    lat0: float
    lon0: float
    std_parallel_1: float
    std_parallel_2: float
    n: float = field(init=False)
    c: float = field(init=False)
    rho0: float = field(init=False)

    def __post_init__(self) -> None:
        """Derive the cone constants."""
        lat0 = np.radians(self.lat0)
        sp1 = np.radians(self.std_parallel_1)
        sp2 = np.radians(self.std_parallel_2)

        # n == 0 (parallels mirrored about the equator) is accepted; rho0 and
        # every conversion of such a system come out as inf or nan.
        n = (np.sin(sp1) + np.sin(sp2)) / 2
        c = np.cos(sp1) ** 2 + 2 * n * np.sin(sp1)
        with np.errstate(divide="ignore", invalid="ignore"):
            rho0 = np.sqrt(c - 2 * n * np.sin(lat0)) / n

        self.n = float(n)
        self.c = float(c)
        self.rho0 = float(rho0)

    @property
    def lon0_rad(self) -> float:
        return float(np.radians(self.lon0))

    def label(self) -> str:
        return f"{self.lat0},{self.lon0},{self.std_parallel_1},{self.std_parallel_2}"


@np.errstate(divide="ignore", invalid="ignore", over="ignore")
def albers_to_wgs84(params: AlbersParameters, coordinates) -> Coordinates:
    """Albers (x, y) in meters to WGS84 (lon, lat) in degrees."""
    x, y = coordinates
    R = ALBERS_SPHERE_RADIUS
    n = params.n

    x_rad = np.float64(x) / R
    y_rad = np.float64(y) / R
    theta = np.arctan(np.divide(x_rad, params.rho0 - y_rad))
    rho = np.divide(x_rad, np.sin(theta))
    r_lat = np.arcsin((params.c - rho * rho * n * n) / 2 / n)
    r_lon = params.lon0_rad + theta / n

    return float(np.degrees(r_lon)), float(np.degrees(r_lat))


@np.errstate(divide="ignore", invalid="ignore", over="ignore")
def wgs84_to_albers(params: AlbersParameters, coordinates) -> Coordinates:
    """
    WGS84 (lon, lat) in degrees to Albers (x, y) in meters.

    Latitude feeds the angle and longitude feeds the radius, and rho0 is
    added unscaled. This is not the textbook inverse of ``albers_to_wgs84``.
    """
    lon, lat = coordinates
    R = ALBERS_SPHERE_RADIUS
    n = params.n

    r_lon = np.radians(lon)
    r_lat = np.radians(lat)
    theta = n * (r_lat - params.lon0_rad)
    rho = np.sqrt(params.c - 2 * n * np.sin(r_lon)) / n

    x = rho * np.sin(theta) * R
    y = params.rho0 - rho * np.cos(theta) * R

    return float(x), float(y)
