"""
Domain models (Pydantic).

These types represent the stable "contract" between layers:
- API/CLI inputs (`GpsTriangulateRequest`, `DistanceBetweenPointsRequest`)
- API outputs (`MatchedPairOut`, `GeodesicResultOut`)

JSON uses camelCase keys (`baseData`, `maxDistance`, ...); snake_case field names are
accepted too.

Request shape problems that Pydantic cannot express per-field (empty lists, blank column
names, non-positive distances, missing points) are collected by `collect_errors()` so a
client sees every violation at once, not just the first.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from gpstriangulation.config.settings import get_settings
from gpstriangulation.core.errors import ValidationError
from gpstriangulation.core.geo import GeoPoint
from gpstriangulation.core.geodesic import GeodesicResult
from gpstriangulation.matching.nearest import MatchedPair

# A record value is a number, text, boolean or null; anything else is rejected by Pydantic.
RecordValue = bool | int | float | str | None
Record = dict[str, RecordValue]


class _ApiModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class PointIn(_ApiModel):
    """A geographic point in decimal degrees."""

    latitude: float
    longitude: float

    def to_geo_point(self) -> GeoPoint:
        return GeoPoint(lat=self.latitude, lon=self.longitude)

    def range_errors(self, label: str) -> list[str]:
        errors: list[str] = []
        if not -90 <= self.latitude <= 90:
            errors.append(f"{label} latitude must be between -90 and 90.")
        if not -180 <= self.longitude <= 180:
            errors.append(f"{label} longitude must be between -180 and 180.")
        return errors


class _RequestModel(_ApiModel):
    @abstractmethod
    def collect_errors(self) -> list[str]:
        """Return every violation of the request's preconditions (empty when valid)."""

    def raise_for_errors(self) -> None:
        """Raise `ValidationError` listing every violation (no-op when valid)."""
        errors = self.collect_errors()
        if errors:
            raise ValidationError(errors)


def _matching_default(name: str) -> Any:
    return lambda: getattr(get_settings().matching, name)


class GpsTriangulateRequest(_RequestModel):
    """Nearest-match request: two record sets plus the coordinate keys to read from each."""

    base_data: list[Record] | None = None
    comparison_data: list[Record] | None = None
    # Explicit nulls are accepted here and reported by `collect_errors()`.
    base_lat_column: str | None = Field(default_factory=_matching_default("base_lat_column"))
    base_lon_column: str | None = Field(default_factory=_matching_default("base_lon_column"))
    target_lat_column: str | None = Field(default_factory=_matching_default("target_lat_column"))
    target_lon_column: str | None = Field(default_factory=_matching_default("target_lon_column"))
    max_distance: float | None = Field(default_factory=_matching_default("max_distance_ft"))

    def collect_errors(self) -> list[str]:
        errors: list[str] = []
        if not self.base_data:
            errors.append("BaseData is required and cannot be empty.")
        if not self.comparison_data:
            errors.append("ComparisonData is required and cannot be empty.")
        for label, value in [
            ("BaseLatColumn", self.base_lat_column),
            ("BaseLonColumn", self.base_lon_column),
            ("TargetLatColumn", self.target_lat_column),
            ("TargetLonColumn", self.target_lon_column),
        ]:
            if not value or not value.strip():
                errors.append(f"{label} is required and cannot be empty.")
        if self.max_distance is None or not self.max_distance > 0:
            errors.append("MaxDistance must be greater than zero.")
        return errors


class DistanceBetweenPointsRequest(_RequestModel):
    """Direct point-to-point distance request."""

    point1: PointIn | None = None
    point2: PointIn | None = None

    def collect_errors(self) -> list[str]:
        errors: list[str] = []
        for label, point in [("Point1", self.point1), ("Point2", self.point2)]:
            if point is None:
                errors.append(f"{label} cannot be null")
            else:
                errors.extend(point.range_errors(label))
        return errors


class MatchedPairOut(_ApiModel):
    """One base record with its closest comparison record, or nulls if none was in range."""

    base_record: Record
    closest_comparison: Record | None = None
    distance_in_feet: float | None = None

    @classmethod
    def from_pair(cls, pair: MatchedPair) -> "MatchedPairOut":
        return cls(
            base_record=dict(pair.base_record),
            closest_comparison=dict(pair.closest_comparison) if pair.closest_comparison is not None else None,
            distance_in_feet=pair.distance_in_feet,
        )


class GeodesicResultOut(_ApiModel):
    """Full Vincenty result for a point pair."""

    distance_meters: float
    distance_feet: float
    initial_bearing: float
    final_bearing: float

    @classmethod
    def from_result(cls, result: GeodesicResult) -> "GeodesicResultOut":
        return cls(
            distance_meters=result.distance_m,
            distance_feet=result.distance_ft,
            initial_bearing=result.initial_bearing_deg,
            final_bearing=result.final_bearing_deg,
        )
