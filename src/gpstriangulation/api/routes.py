"""
API routes.

Endpoints:
- POST `/api/GpsTriangulate`: nearest-match two record sets within a distance in feet.
- POST `/api/DistanceBetweenPoints`: Vincenty distance (feet) between two points.
- GET  `/api/geodesic`: full Vincenty result (meters, feet, bearings) for two points.
- GET  `/api/config`: sample triangulation request (development mode only).
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException
from fastapi.responses import PlainTextResponse

from gpstriangulation.config.settings import get_sample_request, get_settings
from gpstriangulation.core.errors import ConvergenceError, FieldExtractionError, ValidationError
from gpstriangulation.core.geodesic import vincenty_inverse
from gpstriangulation.domain.models import (
    DistanceBetweenPointsRequest,
    GeodesicResultOut,
    GpsTriangulateRequest,
    MatchedPairOut,
    PointIn,
)
from gpstriangulation.matching.nearest import match_nearest

logger = logging.getLogger(__name__)

router = APIRouter()


def _error(status_code: int, code: str, exc: Exception, **extra) -> HTTPException:
    return HTTPException(status_code=status_code, detail={"code": code, "message": str(exc), **extra})


def _validated(request: GpsTriangulateRequest | DistanceBetweenPointsRequest) -> None:
    try:
        request.raise_for_errors()
    except ValidationError as e:
        logger.info("Rejected %s: %s", type(request).__name__, "; ".join(e.errors))
        raise _error(400, "VALIDATION_ERROR", e, errors=e.errors) from e


@router.get("/", response_class=PlainTextResponse)
def index() -> str:
    return "Hello GpsTriangulation!"


@router.post("/api/GpsTriangulate", response_model=list[MatchedPairOut])
def post_gps_triangulate(request: GpsTriangulateRequest) -> list[MatchedPairOut]:
    """Pair each base record with its nearest comparison record within `maxDistance` feet."""
    _validated(request)
    try:
        pairs = match_nearest(
            request.base_data or [],
            request.comparison_data or [],
            base_lat_column=request.base_lat_column,
            base_lon_column=request.base_lon_column,
            target_lat_column=request.target_lat_column,
            target_lon_column=request.target_lon_column,
            max_distance_ft=request.max_distance,
        )
    except FieldExtractionError as e:
        raise _error(400, "FIELD_EXTRACTION_ERROR", e, field=e.key) from e
    except Exception as e:
        logger.exception("GpsTriangulate failed")
        raise _error(500, "INTERNAL_ERROR", e) from e
    return [MatchedPairOut.from_pair(p) for p in pairs]


@router.post("/api/DistanceBetweenPoints")
def post_distance_between_points(request: DistanceBetweenPointsRequest) -> float:
    """Return the Vincenty distance in feet between `point1` and `point2`."""
    _validated(request)
    return _geodesic(request.point1, request.point2).distance_feet  # type: ignore[arg-type]


@router.get("/api/geodesic", response_model=GeodesicResultOut)
def get_geodesic(lat1: float, lon1: float, lat2: float, lon2: float) -> GeodesicResultOut:
    """Return distance (meters and feet) plus initial/final bearings between two points."""
    request = DistanceBetweenPointsRequest(
        point1=PointIn(latitude=lat1, longitude=lon1),
        point2=PointIn(latitude=lat2, longitude=lon2),
    )
    _validated(request)
    return _geodesic(request.point1, request.point2)  # type: ignore[arg-type]


def _geodesic(point1: PointIn, point2: PointIn) -> GeodesicResultOut:
    geodesic = get_settings().geodesic
    try:
        result = vincenty_inverse(
            point1.to_geo_point(),
            point2.to_geo_point(),
            max_iterations=geodesic.max_iterations,
            tolerance=geodesic.convergence_tolerance,
        )
    except ConvergenceError as e:
        raise _error(422, "CONVERGENCE_ERROR", e, max_iterations=e.max_iterations) from e
    return GeodesicResultOut.from_result(result)


@router.get("/api/config")
def get_config() -> dict:
    """Return the packaged sample request (development diagnostics only)."""
    if not get_settings().app.is_development:
        raise HTTPException(status_code=404, detail="Not Found")
    return get_sample_request()
