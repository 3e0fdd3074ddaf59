import pytest
from fastapi.testclient import TestClient

from core.config import Settings
from features.common.exceptions.provider_exceptions import NoTideDataError, WeatherNetworkError
from main import create_app
from tests.conftest import FakeTideClient, FakeWeatherClient, FixedClock, make_weather


@pytest.fixture
def fakes():
    return FakeWeatherClient(), FakeTideClient()


@pytest.fixture
def client(fakes):
    weather_client, tide_client = fakes
    app = create_app(
        Settings(database_url="sqlite://", auto_sync_enabled=False),
        weather_client=weather_client,
        tide_client=tide_client,
        clock=FixedClock()
    )
    with TestClient(app) as test_client:
        yield test_client


def _save_location(client, location_id, **overrides):
    body = {"id": location_id, "name": location_id.title(), "latitude": 48.1, "longitude": -123.4, **overrides}
    return client.post("/locations", json=body)


def _auth_header(client):
    token = client.post("/auth/anonymous").json()["token"]
    return {"Authorization": f"Bearer {token}"}


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_location_crud(client):
    created = _save_location(client, "dungeness")
    assert created.status_code == 201
    assert created.json()["is_saved"] is True

    assert [loc["id"] for loc in client.get("/locations").json()] == ["dungeness"]
    assert client.get("/locations/dungeness").json()["latitude"] == 48.1

    assert client.delete("/locations/dungeness").status_code == 204
    assert client.get("/locations/dungeness").status_code == 404
    assert client.delete("/locations/dungeness").status_code == 404


def test_location_coordinates_validated(client):
    assert _save_location(client, "nowhere", latitude=95.0).status_code == 422


def test_weather_routes(client, fakes):
    _save_location(client, "sekiu")

    current = client.get("/weather/sekiu/current")
    assert current.status_code == 200
    assert current.json()["wind_direction"] == "NW"

    forecast = client.get("/weather/sekiu/forecast", params={"days": 3})
    assert forecast.json()["days"] == 3
    assert len(forecast.json()["forecast"]) == 3

    assert client.get("/weather/sekiu/forecast", params={"days": 8}).status_code == 422
    assert client.get("/weather/unknown/current").status_code == 404


def test_weather_provider_failure_without_cache(client, fakes):
    fakes[0].error = WeatherNetworkError("offline")
    _save_location(client, "neah-bay")
    assert client.get("/weather/neah-bay/current").status_code == 503


def test_tide_routes(client, fakes):
    _save_location(client, "port-angeles")

    current = client.get("/tides/port-angeles/current")
    assert current.status_code == 200
    assert current.json()["type"] == "RISING"

    predictions = client.get("/tides/port-angeles/predictions", params={"days": 2})
    assert len(predictions.json()["predictions"]) == 2

    # Nothing cached for this one, so the provider error surfaces
    _save_location(client, "la-push")
    fakes[1].error = NoTideDataError("none")
    assert client.get("/tides/la-push/at", params={"dt": "2024-08-01T12:00:00Z"}).status_code == 404


def test_equipment_routes(client):
    assert len(client.get("/equipment").json()) == 16
    assert len(client.get("/equipment/type/LEADER").json()) == 5
    assert client.get("/equipment/lure-apex-uv-glow").json()["name"] == "Apex Lure - UV Glow"
    assert client.get("/equipment/nope").status_code == 404


def test_recommendations_for_location(client):
    _save_location(client, "route-rec-clear")

    response = client.get("/recommendations/route-rec-clear", params={"species": "COHO"})

    assert response.status_code == 200
    report = response.json()
    assert report["water_clarity"] == "clear"
    assert report["light_condition"] == "bright"
    assert report["weather_condition"] == "calm"
    assert [d["recommendation"]["type"] for d in report["recommendations"]] == ["FLASHER", "LURE", "LEADER"]
    first = report["recommendations"][0]
    assert first["confidence_color"].startswith("#")
    assert "Filtered for COHO salmon." in first["detailed_explanation"]


def test_recommendations_prioritise_owned_gear(client):
    _save_location(client, "route-rec-owned")
    headers = _auth_header(client)
    client.post("/users/me/equipment", headers=headers, json={
        "equipment_id": "lure-coyote-herring-scale",
        "equipment_type": "LURE",
        "is_favorite": True
    })

    report = client.get("/recommendations/route-rec-owned", headers=headers).json()

    lure = report["recommendations"][1]["recommendation"]
    assert lure["items"][0]["id"] == "lure-coyote-herring-scale"


def test_recommendations_unknown_location(client):
    assert client.get("/recommendations/route-rec-missing").status_code == 404


def test_evaluate_supplied_conditions(client):
    body = {
        "weather": {
            "timestamp": "2024-06-15T21:00:00-07:00",
            "temperature": 52.0,
            "wind_speed": 18.0,
            "wind_direction": "SW",
            "precipitation": 3.0,
            "cloud_cover": 95,
            "visibility": 1.5,
            "pressure": 1002.0,
            "humidity": 95
        },
        "tide": {"timestamp": "2024-06-16T04:00:00Z", "height": 0.4, "type": "FALLING"}
    }

    report = client.post("/recommendations/evaluate", json=body).json()

    assert report["water_clarity"] == "murky"
    assert report["light_condition"] == "low_light"
    assert report["weather_condition"] == "rainy"
    leader_ids = [i["id"] for i in report["recommendations"][2]["recommendation"]["items"]]
    assert "leader-wire-60" in leader_ids


def test_auth_flow(client):
    registered = client.post("/auth/register", json={"email": "sam@example.com", "password": "secret1", "name": "Sam"})
    assert registered.status_code == 200
    token = registered.json()["token"]

    me = client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert me.json()["email"] == "sam@example.com"

    duplicate = client.post("/auth/register", json={"email": "sam@example.com", "password": "secret1"})
    assert duplicate.status_code == 400
    assert duplicate.json()["error"] == "Email already in use"

    bad_login = client.post("/auth/login", json={"email": "sam@example.com", "password": "wrong-one"})
    assert bad_login.status_code == 401

    login = client.post("/auth/login", json={"email": "sam@example.com", "password": "secret1"})
    assert login.json()["success"] is True

    assert client.post("/auth/logout", headers={"Authorization": f"Bearer {token}"}).status_code == 200
    assert client.get("/auth/me", headers={"Authorization": f"Bearer {token}"}).status_code == 401
    assert client.get("/auth/me").status_code == 401


def test_convert_anonymous(client):
    headers = _auth_header(client)
    converted = client.post("/auth/convert", headers=headers, json={"email": "kim@example.com", "password": "secret1"})

    assert converted.status_code == 200
    new_headers = {"Authorization": f"Bearer {converted.json()['token']}"}
    assert client.get("/auth/me", headers=new_headers).json()["is_anonymous"] is False


def test_preferences_routes(client):
    headers = _auth_header(client)

    assert client.get("/users/me/preferences").status_code == 401
    assert client.get("/users/me/preferences", headers=headers).json()["experience_level"] == "BEGINNER"

    updated = client.put("/users/me/preferences/experience/EXPERT", headers=headers)
    assert updated.json()["experience_level"] == "EXPERT"

    species = client.put("/users/me/preferences/species", headers=headers, json=["CHINOOK"])
    assert species.json()["preferred_species"] == ["CHINOOK"]
    assert species.json()["experience_level"] == "EXPERT"

    reset = client.delete("/users/me/preferences", headers=headers)
    assert reset.json()["preferred_species"] == []


def test_user_equipment_routes(client):
    headers = _auth_header(client)
    added = client.post("/users/me/equipment", headers=headers, json={"equipment_id": "flasher-oki-titan"})
    assert added.status_code == 201

    assert len(client.get("/users/me/equipment", headers=headers).json()) == 1
    assert client.delete("/users/me/equipment/flasher-oki-titan", headers=headers).status_code == 204
    assert client.delete("/users/me/equipment/flasher-oki-titan", headers=headers).status_code == 404


def test_catch_routes(client):
    headers = _auth_header(client)
    logged = client.post("/catches", headers=headers, json={
        "id": "catch-1",
        "timestamp": 1718470000,
        "location_id": "sekiu",
        "species": "COHO",
        "size": 25.5,
        "equipment_used": ["lure-apex-uv-glow"]
    })
    assert logged.status_code == 201

    assert [c["id"] for c in client.get("/catches", headers=headers, params={"species": "COHO"}).json()] == ["catch-1"]
    assert client.get("/catches", headers=headers, params={"location_id": "elsewhere"}).json() == []

    with_photo = client.post("/catches/catch-1/photos", headers=headers, json={"photo_url": "https://img.example.com/c.jpg"})
    assert with_photo.json()["photo_urls"] == ["https://img.example.com/c.jpg"]

    stats = client.get("/catches/analytics", headers=headers).json()
    assert stats["total_catches"] == 1
    assert stats["by_species"] == {"COHO": 1}

    assert client.delete("/catches/catch-1", headers=headers).status_code == 204
    assert client.get("/catches/catch-1", headers=headers).status_code == 404


def test_sync_routes(client, fakes):
    _save_location(client, "kydaka")

    assert client.get("/sync/status").json()["status"] == "IDLE"

    synced = client.post("/sync/now")
    assert synced.json()["status"] == "SUCCESS"

    freshness = client.get("/sync/freshness/kydaka").json()
    assert freshness["is_fresh"] is True
    assert freshness["freshness_percentage"] == 100

    assert client.get("/sync/locations").json() == ["kydaka"]
    assert client.delete("/sync/cache/kydaka").status_code == 204
    assert client.get("/sync/freshness/kydaka").json()["has_cached_data"] is False


def test_catch_id_owned_by_another_user_is_rejected(client):
    alice = _auth_header(client)
    bob = _auth_header(client)
    body = {"id": "shared-catch", "timestamp": 1718470000, "location_id": "sekiu", "species": "PINK"}

    assert client.post("/catches", headers=alice, json=body).status_code == 201
    assert client.post("/catches", headers=bob, json={**body, "notes": "mine"}).status_code == 409

    assert client.get("/catches/shared-catch", headers=alice).status_code == 200
    assert client.get("/catches/shared-catch", headers=alice).json()["notes"] is None
    assert client.get("/catches", headers=bob).json() == []


def test_equipment_entry_owned_by_another_user_is_rejected(client):
    alice = _auth_header(client)
    bob = _auth_header(client)
    body = {"id": "shared-entry", "equipment_id": "flasher-oki-titan"}

    assert client.post("/users/me/equipment", headers=alice, json=body).status_code == 201
    assert client.post("/users/me/equipment", headers=bob, json=body).status_code == 409

    assert [e["id"] for e in client.get("/users/me/equipment", headers=alice).json()] == ["shared-entry"]
    assert client.get("/users/me/equipment", headers=bob).json() == []


def test_clearing_weather_cache_drops_recommendations(client, fakes):
    _save_location(client, "route-rec-weather-clear")
    assert client.get("/recommendations/route-rec-weather-clear").json()["water_clarity"] == "clear"

    fakes[0].current = make_weather(visibility=1.5)
    assert client.get("/recommendations/route-rec-weather-clear").json()["water_clarity"] == "clear"

    assert client.delete("/weather/cache").status_code == 204
    assert client.get("/recommendations/route-rec-weather-clear").json()["water_clarity"] == "murky"


def test_clearing_location_data_drops_recommendations(client, fakes):
    _save_location(client, "route-rec-sync-clear")
    client.get("/recommendations/route-rec-sync-clear")

    fakes[0].current = make_weather(visibility=1.5)
    assert client.delete("/sync/cache/route-rec-sync-clear").status_code == 204
    assert client.get("/recommendations/route-rec-sync-clear").json()["water_clarity"] == "murky"
