"""
GpsTriangulation CLI entrypoint.

This CLI is intended for quick local runs and debugging without the HTTP API.
It delegates to the same core functions as the API routes.
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from gpstriangulation.config.settings import get_sample_request, get_settings
from gpstriangulation.core.errors import ConvergenceError, FieldExtractionError, ValidationError
from gpstriangulation.core.geodesic import vincenty_inverse
from gpstriangulation.core.logging import configure_logging
from gpstriangulation.domain.models import (
    DistanceBetweenPointsRequest,
    GeodesicResultOut,
    GpsTriangulateRequest,
    MatchedPairOut,
    PointIn,
)
from gpstriangulation.matching.nearest import match_nearest

EXIT_INVALID = 2
EXIT_NO_CONVERGENCE = 3


def _cmd_distance(args: argparse.Namespace) -> int:
    """Handle the `distance` subcommand."""
    settings = get_settings()
    request = DistanceBetweenPointsRequest(
        point1=PointIn(latitude=args.lat1, longitude=args.lon1),
        point2=PointIn(latitude=args.lat2, longitude=args.lon2),
    )
    request.raise_for_errors()

    max_iterations = settings.geodesic.max_iterations
    if args.max_iterations is not None:
        max_iterations = args.max_iterations
    result = vincenty_inverse(
        request.point1.to_geo_point(),  # type: ignore[union-attr]
        request.point2.to_geo_point(),  # type: ignore[union-attr]
        max_iterations=max_iterations,
        tolerance=settings.geodesic.convergence_tolerance,
    )
    out = GeodesicResultOut.from_result(result)

    if args.json:
        print(json.dumps(out.model_dump(mode="json", by_alias=True), indent=2))
        return 0

    print(f"distance: {out.distance_meters:.3f} m ({out.distance_feet:.3f} ft)")
    print(f"initial bearing: {out.initial_bearing:.6f} deg")
    print(f"final bearing: {out.final_bearing:.6f} deg")
    return 0


def _load_request(args: argparse.Namespace) -> GpsTriangulateRequest:
    if args.sample:
        payload = get_sample_request()
    elif args.request:
        payload = json.loads(Path(args.request).read_text(encoding="utf-8"))
    else:
        raise ValidationError(["Provide a request file or --sample."])
    return GpsTriangulateRequest.model_validate(payload)


def _cmd_match(args: argparse.Namespace) -> int:
    """Handle the `match` subcommand."""
    request = _load_request(args)
    if args.max_distance is not None:
        request = request.model_copy(update={"max_distance": float(args.max_distance)})
    request.raise_for_errors()

    pairs = match_nearest(
        request.base_data or [],
        request.comparison_data or [],
        base_lat_column=request.base_lat_column,
        base_lon_column=request.base_lon_column,
        target_lat_column=request.target_lat_column,
        target_lon_column=request.target_lon_column,
        max_distance_ft=request.max_distance,
    )

    if args.json:
        payload = [MatchedPairOut.from_pair(p).model_dump(mode="json", by_alias=True) for p in pairs]
        print(json.dumps(payload, ensure_ascii=False, indent=2))
        return 0

    for i, pair in enumerate(pairs, start=1):
        base = json.dumps(pair.base_record, ensure_ascii=False)
        if pair.closest_comparison is None:
            print(f"{i:>3}. {base} -> no match within {request.max_distance:g} ft")
            continue
        match = json.dumps(pair.closest_comparison, ensure_ascii=False)
        print(f"{i:>3}. {base} -> {match} ({pair.distance_in_feet:.3f} ft)")
    return 0


def _cmd_sample(_: argparse.Namespace) -> int:
    print(json.dumps(get_sample_request(), ensure_ascii=False, indent=2))
    return 0


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the GpsTriangulation CLI."""
    parser = argparse.ArgumentParser(prog="gpstriangulation")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log at DEBUG level (e.g. match summaries)")
    sub = parser.add_subparsers(dest="command", required=True)

    dist = sub.add_parser("distance", help="Vincenty distance and bearings between two points.")
    dist.add_argument("lat1", type=float)
    dist.add_argument("lon1", type=float)
    dist.add_argument("lat2", type=float)
    dist.add_argument("lon2", type=float)
    dist.add_argument("--max-iterations", type=int, default=None, help="Override the configured iteration cap.")
    dist.add_argument("--json", action="store_true", help="Output machine-readable JSON")
    dist.set_defaults(func=_cmd_distance)

    match = sub.add_parser("match", help="Nearest-match base records against comparison records.")
    match.add_argument("request", nargs="?", default=None, help="JSON file shaped like the /api/GpsTriangulate body")
    match.add_argument("--sample", action="store_true", help="Use the packaged sample request")
    match.add_argument("--max-distance", type=float, default=None, help="Override maxDistance (feet)")
    match.add_argument("--json", action="store_true", help="Output machine-readable JSON")
    match.set_defaults(func=_cmd_match)

    s = sub.add_parser("sample", help="Print the packaged sample request.")
    s.set_defaults(func=_cmd_sample)
    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint callable used by `python -m gpstriangulation.cli`."""
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(level="DEBUG" if args.verbose else None)
    func: Any = getattr(args, "func")
    try:
        return int(func(args))
    except ConvergenceError as e:
        print(f"error: {e}", file=sys.stderr)
        return EXIT_NO_CONVERGENCE
    except (
        ValidationError,
        FieldExtractionError,
        PydanticValidationError,
        json.JSONDecodeError,
        OSError,
        ValueError,
    ) as e:
        print(f"error: {e}", file=sys.stderr)
        return EXIT_INVALID


if __name__ == "__main__":
    raise SystemExit(main())
