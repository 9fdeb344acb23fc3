import pytest

from gpstriangulation.config.settings import get_sample_request
from gpstriangulation.core.errors import FieldExtractionError
from gpstriangulation.core.geo import GeoPoint, haversine_ft
from gpstriangulation.matching.nearest import extract_point, match_nearest


def test_match_nearest_pairs_close_points_within_max_distance():
    base = [
        {"id": 1, "lat": 37.7749, "lon": -122.4194},
        {"id": 2, "lat": 37.7750, "lon": -122.4193},
    ]
    comparison = [
        {"station_id": "STA-100", "lat": 37.77491, "lon": -122.41939},
        {"station_id": "STA-200", "lat": 37.7750, "lon": -122.4195},
    ]

    pairs = match_nearest(base, comparison, max_distance_ft=15.0)

    assert len(pairs) == 2
    assert pairs[0].closest_comparison is comparison[0]
    assert pairs[0].distance_in_feet is not None
    assert 0 < pairs[0].distance_in_feet < 15.0


def test_match_nearest_reports_absence_when_nothing_in_range():
    base = [{"id": 1, "lat": 37.7749, "lon": -122.4194}]
    comparison = [{"station_id": "STA-100", "lat": 37.8000, "lon": -122.5000}]

    pairs = match_nearest(base, comparison, max_distance_ft=15.0)

    assert len(pairs) == 1
    assert pairs[0].closest_comparison is None
    assert pairs[0].distance_in_feet is None


def test_match_nearest_keeps_base_records_by_reference_in_order():
    base = [{"id": i, "lat": 10.0 + i, "lon": 20.0, "note": f"n{i}"} for i in range(3)]
    pairs = match_nearest(base, [{"lat": 0.0, "lon": 0.0}])
    assert [p.base_record for p in pairs] == base
    assert all(p.base_record is b for p, b in zip(pairs, base))


def test_match_nearest_picks_the_closest_candidate():
    base = [{"lat": 37.7749, "lon": -122.4194}]
    comparison = [
        {"id": "far", "lat": 37.77493, "lon": -122.4194},
        {"id": "near", "lat": 37.77491, "lon": -122.4194},
    ]
    pairs = match_nearest(base, comparison, max_distance_ft=50.0)
    assert pairs[0].closest_comparison["id"] == "near"


def test_match_nearest_first_candidate_wins_exact_ties():
    base = [{"lat": 37.7749, "lon": -122.4194}]
    comparison = [
        {"id": "first", "lat": 37.77491, "lon": -122.41939},
        {"id": "second", "lat": 37.77491, "lon": -122.41939},
    ]
    pairs = match_nearest(base, comparison)
    assert pairs[0].closest_comparison["id"] == "first"


def test_match_nearest_threshold_is_inclusive():
    a = GeoPoint(lat=37.7749, lon=-122.4194)
    b = GeoPoint(lat=37.77491, lon=-122.41939)
    exact = haversine_ft(a, b)

    pairs = match_nearest([{"lat": a.lat, "lon": a.lon}], [{"lat": b.lat, "lon": b.lon}], max_distance_ft=exact)

    assert pairs[0].distance_in_feet == exact


def test_match_nearest_uses_configured_column_names():
    base = [{"y": 37.7749, "x": -122.4194}]
    comparison = [{"target_lat": 37.77491, "target_lon": -122.41939}]
    pairs = match_nearest(
        base,
        comparison,
        base_lat_column="y",
        base_lon_column="x",
        target_lat_column="target_lat",
        target_lon_column="target_lon",
    )
    assert pairs[0].closest_comparison is comparison[0]


def test_match_nearest_on_sample_request():
    sample = get_sample_request()
    pairs = match_nearest(
        sample["baseData"],
        sample["comparisonData"],
        base_lat_column=sample["baseLatColumn"],
        base_lon_column=sample["baseLonColumn"],
        target_lat_column=sample["targetLatColumn"],
        target_lon_column=sample["targetLonColumn"],
        max_distance_ft=sample["maxDistance"],
    )

    matched = {p.base_record["id"]: (p.closest_comparison or {}).get("station_id") for p in pairs}
    assert matched == {1: "STA-100", 2: None, 3: None, 4: "STA-400", 5: None}
    # Base 4 sits exactly on STA-400.
    assert pairs[3].distance_in_feet == 0.0


def test_extract_point_accepts_numeric_strings():
    assert extract_point({"lat": " 37.5 ", "lon": "-122"}, "lat", "lon") == GeoPoint(lat=37.5, lon=-122.0)


@pytest.mark.parametrize("value", ["abc", None, True, ""])
def test_extract_point_rejects_non_numeric_values(value):
    with pytest.raises(FieldExtractionError, match="'lat'"):
        extract_point({"lat": value, "lon": 1.0}, "lat", "lon")


def test_extract_point_rejects_missing_keys():
    with pytest.raises(FieldExtractionError) as excinfo:
        extract_point({"lat": 1.0}, "lat", "lon")
    assert excinfo.value.key == "lon"
    assert excinfo.value.missing is True


def test_match_nearest_fails_whole_batch_on_bad_record():
    base = [{"lat": 1.0, "lon": 1.0}, {"lat": "north", "lon": 1.0}]
    with pytest.raises(FieldExtractionError):
        match_nearest(base, [{"lat": 1.0, "lon": 1.0}])

    with pytest.raises(FieldExtractionError):
        match_nearest([{"lat": 1.0, "lon": 1.0}], [{"lat": 1.0}])
