from starlette.testclient import TestClient

from gpstriangulation.api.app import app
from gpstriangulation.config.settings import AppSettings, Settings

client = TestClient(app)


def test_index_greets():
    resp = client.get("/")
    assert resp.status_code == 200
    assert resp.text == "Hello GpsTriangulation!"


def test_gps_triangulate_returns_matched_pairs():
    payload = {
        "baseData": [
            {"id": 1, "lat": 37.7749, "lon": -122.4194},
            {"id": 2, "lat": 37.8000, "lon": -122.5000},
        ],
        "comparisonData": [{"station_id": "STA-100", "lat": 37.77491, "lon": -122.41939}],
    }

    resp = client.post("/api/GpsTriangulate", json=payload)

    assert resp.status_code == 200
    data = resp.json()
    assert len(data) == 2
    assert data[0]["baseRecord"] == payload["baseData"][0]
    assert data[0]["closestComparison"]["station_id"] == "STA-100"
    assert 0 < data[0]["distanceInFeet"] < 15
    assert data[1]["closestComparison"] is None
    assert data[1]["distanceInFeet"] is None


def test_gps_triangulate_reports_all_validation_errors():
    resp = client.post(
        "/api/GpsTriangulate",
        json={"baseData": [], "comparisonData": [{"lat": 1, "lon": 1}], "maxDistance": -1},
    )

    assert resp.status_code == 400
    detail = resp.json()["detail"]
    assert detail["code"] == "VALIDATION_ERROR"
    assert detail["errors"] == [
        "BaseData is required and cannot be empty.",
        "MaxDistance must be greater than zero.",
    ]
    assert detail["message"] == "\n".join(detail["errors"])


def test_gps_triangulate_rejects_records_with_bad_coordinates():
    resp = client.post(
        "/api/GpsTriangulate",
        json={"baseData": [{"lat": "north", "lon": 1}], "comparisonData": [{"lat": 1, "lon": 1}]},
    )

    assert resp.status_code == 400
    detail = resp.json()["detail"]
    assert detail["code"] == "FIELD_EXTRACTION_ERROR"
    assert detail["field"] == "lat"


def test_distance_between_points_returns_feet():
    resp = client.post(
        "/api/DistanceBetweenPoints",
        json={
            "point1": {"latitude": 37.7749, "longitude": -122.4194},
            "point2": {"latitude": 37.77491, "longitude": -122.41939},
        },
    )
    assert resp.status_code == 200
    assert 0 < resp.json() < 5


def test_distance_between_points_same_point_is_zero():
    point = {"latitude": 37.7749, "longitude": -122.4194}
    resp = client.post("/api/DistanceBetweenPoints", json={"point1": point, "point2": point})
    assert resp.status_code == 200
    assert resp.json() == 0


def test_distance_between_points_requires_both_points():
    resp = client.post("/api/DistanceBetweenPoints", json={"point1": {"latitude": 0, "longitude": 0}})
    assert resp.status_code == 400
    assert resp.json()["detail"]["errors"] == ["Point2 cannot be null"]


def test_distance_between_points_surfaces_convergence_failure():
    resp = client.post(
        "/api/DistanceBetweenPoints",
        json={
            "point1": {"latitude": 0, "longitude": 0},
            "point2": {"latitude": 0, "longitude": 179.9999},
        },
    )
    assert resp.status_code == 422
    assert resp.json()["detail"]["code"] == "CONVERGENCE_ERROR"


def test_geodesic_returns_full_result():
    resp = client.get("/api/geodesic", params={"lat1": 0, "lon1": 0, "lat2": 0, "lon2": 1})
    assert resp.status_code == 200
    data = resp.json()
    assert 110_000 < data["distanceMeters"] < 112_000
    assert data["distanceFeet"] == data["distanceMeters"] * 3.28084
    assert round(data["initialBearing"], 6) == 90.0


def test_config_is_hidden_outside_development():
    resp = client.get("/api/config")
    assert resp.status_code == 404


def test_config_serves_sample_in_development(monkeypatch):
    import gpstriangulation.api.routes as routes

    dev = Settings(app=AppSettings(environment="development"))
    monkeypatch.setattr(routes, "get_settings", lambda: dev)

    resp = client.get("/api/config")

    assert resp.status_code == 200
    data = resp.json()
    assert data["baseLatColumn"] == "base_latitude"
    assert len(data["baseData"]) == 5
    assert data["maxDistance"] == 15.0


def test_gps_triangulate_handles_antipodal_candidates():
    resp = client.post(
        "/api/GpsTriangulate",
        json={"baseData": [{"lat": 0.08, "lon": 0.0}], "comparisonData": [{"lat": -0.08, "lon": 180.0}]},
    )
    assert resp.status_code == 200
    assert resp.json()[0]["closestComparison"] is None


def test_gps_triangulate_null_column_is_collected_with_other_violations():
    resp = client.post(
        "/api/GpsTriangulate",
        json={
            "baseData": [],
            "comparisonData": [{"lat": 1, "lon": 1}],
            "baseLatColumn": None,
            "maxDistance": 0,
        },
    )

    assert resp.status_code == 400
    assert resp.json()["detail"]["errors"] == [
        "BaseData is required and cannot be empty.",
        "BaseLatColumn is required and cannot be empty.",
        "MaxDistance must be greater than zero.",
    ]


def test_gps_triangulate_null_max_distance_is_a_validation_error():
    resp = client.post(
        "/api/GpsTriangulate",
        json={"baseData": [{"lat": 1, "lon": 1}], "comparisonData": [{"lat": 1, "lon": 1}], "maxDistance": None},
    )
    assert resp.status_code == 400
    assert resp.json()["detail"]["errors"] == ["MaxDistance must be greater than zero."]
