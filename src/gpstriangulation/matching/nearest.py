"""
Nearest-match search between two record sets.

For each base record we scan every comparison record (brute force, O(n*m)) and keep the
closest one within `max_distance_ft`, scored with the spherical `haversine_ft`.
Record sets are small (tens to low hundreds of survey points), so no spatial index.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping, Sequence

from gpstriangulation.core.errors import FieldExtractionError
from gpstriangulation.core.geo import GeoPoint, haversine_ft

logger = logging.getLogger(__name__)

DEFAULT_MAX_DISTANCE_FT = 15.0

Record = Mapping[str, Any]


@dataclass(frozen=True)
class MatchedPair:
    """One base record and its closest comparison record (or `None` if nothing was in range)."""

    base_record: Record
    closest_comparison: Record | None = None
    distance_in_feet: float | None = None


def _to_float(key: str, value: Any) -> float:
    # Coerce through the textual form so numeric strings ("37.77") are accepted too.
    if value is None or isinstance(value, bool):
        raise FieldExtractionError(key, value)
    try:
        return float(str(value).strip())
    except ValueError as e:
        raise FieldExtractionError(key, value) from e


def extract_point(record: Record, lat_key: str, lon_key: str) -> GeoPoint:
    """Read a `GeoPoint` from a record using the configured coordinate keys."""
    for key in (lat_key, lon_key):
        if key not in record:
            raise FieldExtractionError(key, missing=True)
    return GeoPoint(lat=_to_float(lat_key, record[lat_key]), lon=_to_float(lon_key, record[lon_key]))


def match_nearest(
    base_data: Sequence[Record],
    comparison_data: Sequence[Record],
    *,
    base_lat_column: str = "lat",
    base_lon_column: str = "lon",
    target_lat_column: str = "lat",
    target_lon_column: str = "lon",
    max_distance_ft: float = DEFAULT_MAX_DISTANCE_FT,
) -> list[MatchedPair]:
    """Pair every base record with its nearest comparison record within `max_distance_ft`.

    Notes:
    - A candidate replaces the current best only if it is strictly closer, so the first
      candidate wins exact ties.
    - Any record with a missing/non-numeric coordinate fails the whole batch
      (`FieldExtractionError`).
    """
    candidates = [
        (rec, extract_point(rec, target_lat_column, target_lon_column)) for rec in comparison_data
    ]

    pairs: list[MatchedPair] = []
    matched = 0
    for base in base_data:
        origin = extract_point(base, base_lat_column, base_lon_column)

        best: Record | None = None
        best_d: float | None = None
        for rec, point in candidates:
            d = haversine_ft(origin, point)
            if d <= max_distance_ft and (best_d is None or d < best_d):
                best, best_d = rec, d

        if best is not None:
            matched += 1
        pairs.append(MatchedPair(base_record=base, closest_comparison=best, distance_in_feet=best_d))

    logger.debug(
        "Matched %d/%d base records against %d candidates (max_distance_ft=%s)",
        matched,
        len(pairs),
        len(candidates),
        max_distance_ft,
    )
    return pairs
