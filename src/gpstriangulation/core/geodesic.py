"""
Ellipsoidal distance and bearings (Vincenty inverse formula on WGS-84).

This is the precise counterpart of `haversine_ft`: slower (iterative) but accurate to
well under a millimetre for all non-antipodal point pairs. Near-antipodal pairs are a
known failure mode of the method and surface as `ConvergenceError` instead of a
silently wrong distance.

Reference: https://en.wikipedia.org/wiki/Vincenty%27s_formulae
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from math import atan2, cos, degrees, radians, sin, sqrt, tan

from gpstriangulation.core.errors import ConvergenceError
from gpstriangulation.core.geo import GeoPoint, meters_to_feet

logger = logging.getLogger(__name__)

# WGS-84 ellipsoid.
WGS84_A = 6_378_137.0  # semi-major axis (m)
WGS84_B = 6_356_752.314245  # semi-minor axis (m)
WGS84_F = 1 / 298.257223563  # flattening

DEFAULT_MAX_ITERATIONS = 200
DEFAULT_TOLERANCE = 1e-12


@dataclass(frozen=True)
class GeodesicResult:
    """Distance (meters) plus initial/final bearings (degrees) between two points."""

    distance_m: float
    initial_bearing_deg: float = 0.0
    final_bearing_deg: float = 0.0

    @property
    def distance_ft(self) -> float:
        return meters_to_feet(self.distance_m)


def _reduced_latitude(lat_rad: float) -> tuple[float, float]:
    """Return (sinU, cosU) for the reduced latitude of `lat_rad`."""
    tan_u = (1 - WGS84_F) * tan(lat_rad)
    cos_u = 1 / sqrt(1 + tan_u * tan_u)
    return tan_u * cos_u, cos_u


def vincenty_inverse(
    point1: GeoPoint,
    point2: GeoPoint,
    *,
    max_iterations: int = DEFAULT_MAX_ITERATIONS,
    tolerance: float = DEFAULT_TOLERANCE,
) -> GeodesicResult:
    """Solve the inverse geodesic problem between two points.

    Notes:
    - Coincident points return distance 0 with both bearings 0.
    - Points on the equator (cos²α == 0) use cos(2σm) = 0.
    - Raises `ConvergenceError` if λ has not settled after `max_iterations`.
    """
    if max_iterations < 1:
        raise ValueError("max_iterations must be >= 1")

    lat1 = radians(point1.lat)
    lat2 = radians(point2.lat)
    big_l = radians(point2.lon) - radians(point1.lon)

    sin_u1, cos_u1 = _reduced_latitude(lat1)
    sin_u2, cos_u2 = _reduced_latitude(lat2)

    lam = big_l
    for _ in range(max_iterations):
        sin_lam = sin(lam)
        cos_lam = cos(lam)
        sin_sigma = sqrt(
            (cos_u2 * sin_lam) ** 2 + (cos_u1 * sin_u2 - sin_u1 * cos_u2 * cos_lam) ** 2
        )
        if sin_sigma == 0:
            return GeodesicResult(distance_m=0.0)

        cos_sigma = sin_u1 * sin_u2 + cos_u1 * cos_u2 * cos_lam
        sigma = atan2(sin_sigma, cos_sigma)
        sin_alpha = cos_u1 * cos_u2 * sin_lam / sin_sigma
        cos_sq_alpha = 1 - sin_alpha * sin_alpha
        if cos_sq_alpha != 0:
            cos_2sigma_m = cos_sigma - 2 * sin_u1 * sin_u2 / cos_sq_alpha
        else:
            # Equatorial line.
            cos_2sigma_m = 0.0

        c = WGS84_F / 16 * cos_sq_alpha * (4 + WGS84_F * (4 - 3 * cos_sq_alpha))
        lam_prev = lam
        lam = big_l + (1 - c) * WGS84_F * sin_alpha * (
            sigma + c * sin_sigma * (cos_2sigma_m + c * cos_sigma * (-1 + 2 * cos_2sigma_m**2))
        )
        if abs(lam - lam_prev) <= tolerance:
            break
    else:
        logger.warning(
            "Vincenty did not converge after %d iterations for %s -> %s", max_iterations, point1, point2
        )
        raise ConvergenceError(point1, point2, max_iterations)

    u_sq = cos_sq_alpha * (WGS84_A**2 - WGS84_B**2) / WGS84_B**2
    big_a = 1 + u_sq / 16384 * (4096 + u_sq * (-768 + u_sq * (320 - 175 * u_sq)))
    big_b = u_sq / 1024 * (256 + u_sq * (-128 + u_sq * (74 - 47 * u_sq)))
    delta_sigma = (
        big_b
        * sin_sigma
        * (
            cos_2sigma_m
            + big_b
            / 4
            * (
                cos_sigma * (-1 + 2 * cos_2sigma_m**2)
                - big_b / 6 * cos_2sigma_m * (-3 + 4 * sin_sigma**2) * (-3 + 4 * cos_2sigma_m**2)
            )
        )
    )

    distance = WGS84_B * big_a * (sigma - delta_sigma)
    alpha1 = atan2(cos_u2 * sin(lam), cos_u1 * sin_u2 - sin_u1 * cos_u2 * cos(lam))
    alpha2 = atan2(cos_u1 * sin(lam), -sin_u1 * cos_u2 + cos_u1 * sin_u2 * cos(lam))

    return GeodesicResult(
        distance_m=distance,
        initial_bearing_deg=degrees(alpha1),
        final_bearing_deg=degrees(alpha2),
    )


def distance_between_points_ft(
    point1: GeoPoint,
    point2: GeoPoint,
    *,
    max_iterations: int = DEFAULT_MAX_ITERATIONS,
    tolerance: float = DEFAULT_TOLERANCE,
) -> float:
    """Vincenty distance in feet (used by the direct point-to-point query path)."""
    return vincenty_inverse(point1, point2, max_iterations=max_iterations, tolerance=tolerance).distance_ft
