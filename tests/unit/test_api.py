"""
Tests for the HTTP endpoints.

The app is built against test settings with the in-memory workout store,
so nothing here touches the file system.
"""

import pytest
from fastapi.testclient import TestClient

from src.api.dependencies import reset_workout_store
from src.config.settings import Settings, get_settings
from src.main import create_app


API_KEY = "test-key"
HEADERS = {"X-API-Key": API_KEY}

MIXED_WORKOUT = "\n".join([
    "100 free",
    "100 back",
    "100 breast",
    "100 fly",
    "200 im",
    "200 choice",
])


def make_client(**overrides) -> TestClient:
    settings = Settings(
        _env_file=None,
        api_keys=API_KEY,
        workout_store_mock_mode=True,
        **overrides,
    )
    reset_workout_store()
    app = create_app()
    app.dependency_overrides[get_settings] = lambda: settings
    return TestClient(app)


@pytest.fixture
def client():
    yield make_client()
    reset_workout_store()


# ---------------------------------------------------------------------------
# Authentication Tests
# ---------------------------------------------------------------------------

class TestAuthentication:

    def test_missing_key(self, client):
        response = client.post("/api/v1/workouts/parse", json={"workout": "100 free"})

        assert response.status_code == 403

    def test_wrong_key(self, client):
        response = client.get(
            "/api/v1/log",
            params={"date": "2024-03-05"},
            headers={"X-API-Key": "nope"},
        )

        assert response.status_code == 403
        assert response.json()["detail"] == "Invalid API key"


# ---------------------------------------------------------------------------
# Parse Endpoint Tests
# ---------------------------------------------------------------------------

class TestParseEndpoint:
    """Tests for POST /api/v1/workouts/parse."""

    def test_parses_workout(self, client):
        response = client.post(
            "/api/v1/workouts/parse",
            json={"workout": MIXED_WORKOUT, "intensitySystem": "polar"},
            headers=HEADERS,
        )

        assert response.status_code == 200
        body = response.json()
        assert body["totalDistance"] == 800
        assert body["strokeDistances"] == {
            "freestyle": 100,
            "backstroke": 100,
            "breaststroke": 100,
            "butterfly": 100,
            "im": 200,
            "choice": 200,
        }
        assert body["intensityDistances"] == {}
        assert set(body["strokeTypeDistances"]) == {"drill", "kick", "scull", "normal"}

    def test_intensity_keys(self, client):
        response = client.post(
            "/api/v1/workouts/parse",
            json={"workout": "4x100 free hr160\n200 back easy", "intensitySystem": "polar"},
            headers=HEADERS,
        )

        assert response.json()["intensityDistances"] == {"HR160": 400, "easy": 200}

    def test_pool_type_is_accepted(self, client):
        response = client.post(
            "/api/v1/workouts/parse",
            json={"workout": "400 free", "poolType": "LCM"},
            headers=HEADERS,
        )

        assert response.status_code == 200
        assert response.json()["totalDistance"] == 400

    def test_uses_configured_vocabulary_by_default(self):
        client = make_client(default_intensity_system="international")

        response = client.post(
            "/api/v1/workouts/parse",
            json={"workout": "100 yellow"},
            headers=HEADERS,
        )

        assert response.json()["intensityDistances"] == {"yellow": 100}
        reset_workout_store()

    @pytest.mark.parametrize("payload", [{}, {"workout": ""}, {"workout": "   "}])
    def test_missing_workout(self, client, payload):
        response = client.post("/api/v1/workouts/parse", json=payload, headers=HEADERS)

        assert response.status_code == 400
        assert response.json()["detail"] == "No workout text provided"

    def test_unknown_vocabulary(self, client):
        response = client.post(
            "/api/v1/workouts/parse",
            json={"workout": "100 free", "intensitySystem": "metric"},
            headers=HEADERS,
        )

        assert response.status_code == 400
        assert "Invalid intensity system" in response.json()["detail"]

    def test_unterminated_group_is_lenient_by_default(self, client):
        response = client.post(
            "/api/v1/workouts/parse",
            json={"workout": "200 free\n2x(\n100 back"},
            headers=HEADERS,
        )

        assert response.status_code == 200
        assert response.json()["totalDistance"] == 200

    def test_unterminated_group_in_strict_mode(self):
        client = make_client(parser_strict_groups=True)

        response = client.post(
            "/api/v1/workouts/parse",
            json={"workout": "200 free\n2x(\n100 back"},
            headers=HEADERS,
        )

        assert response.status_code == 422
        assert "line 2" in response.json()["detail"]
        reset_workout_store()

    def test_rejects_oversized_text(self):
        client = make_client(max_workout_length=10)

        response = client.post(
            "/api/v1/workouts/parse",
            json={"workout": "100 free\n" * 5},
            headers=HEADERS,
        )

        assert response.status_code == 413
        reset_workout_store()


# ---------------------------------------------------------------------------
# Workout Log Tests
# ---------------------------------------------------------------------------

SUMMARY = {"totalDistance": 400, "strokeDistances": {"freestyle": 400}}


class TestWorkoutLog:
    """Tests for /api/v1/log."""

    def _create(self, client, day="2024-03-05", text="4x100 free"):
        return client.post(
            "/api/v1/log",
            json={"date": day, "text": text, "summary": SUMMARY},
            headers=HEADERS,
        )

    def test_create(self, client):
        response = self._create(client)

        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        assert body["workout"]["text"] == "4x100 free"
        assert body["workout"]["summary"]["totalDistance"] == 400
        assert body["workout"]["summary"]["strokeDistances"]["freestyle"] == 400
        assert body["workout"]["id"]
        assert body["workout"]["createdAt"]

    def test_summary_is_stored_in_full_shape(self, client):
        """A partial summary gains every stroke and stroke type bucket."""
        summary = self._create(client).json()["workout"]["summary"]

        assert summary["strokeDistances"]["butterfly"] == 0
        assert set(summary["strokeTypeDistances"]) == {"drill", "kick", "scull", "normal"}
        assert summary["intensityDistances"] == {}

    @pytest.mark.parametrize("summary", [
        {"totalDistance": "lots"},
        {"strokeDistances": ["freestyle"]},
        {"intensityDistances": {"easy": None}},
    ])
    def test_rejects_malformed_summary(self, client, summary):
        response = client.post(
            "/api/v1/log",
            json={"date": "2024-03-05", "text": "400 free", "summary": summary},
            headers=HEADERS,
        )

        assert response.status_code == 400
        assert response.json()["detail"] == "Invalid workout summary"

    def test_list_month(self, client):
        self._create(client, day="2024-03-20")
        self._create(client, day="2024-03-05")
        self._create(client, day="2024-04-01")

        response = client.get("/api/v1/log", params={"date": "2024-03-11"}, headers=HEADERS)

        assert response.status_code == 200
        assert list(response.json()["workouts"]) == ["2024-03-05", "2024-03-20"]

    def test_list_empty_month(self, client):
        response = client.get("/api/v1/log", params={"date": "2024-03-11"}, headers=HEADERS)

        assert response.json() == {"workouts": {}}

    def test_update(self, client):
        workout_id = self._create(client).json()["workout"]["id"]

        response = client.put(
            "/api/v1/log",
            params={"date": "2024-03-05", "id": workout_id},
            json={"text": "5x100 free", "summary": {"totalDistance": 500}},
            headers=HEADERS,
        )

        assert response.status_code == 200
        workout = response.json()["workout"]
        assert workout["id"] == workout_id
        assert workout["text"] == "5x100 free"
        assert workout["updatedAt"]

    def test_update_unknown(self, client):
        response = client.put(
            "/api/v1/log",
            params={"date": "2024-03-05", "id": "nope"},
            json={"text": "5x100 free", "summary": {}},
            headers=HEADERS,
        )

        assert response.status_code == 404

    def test_delete(self, client):
        workout_id = self._create(client).json()["workout"]["id"]

        response = client.delete(
            "/api/v1/log",
            params={"date": "2024-03-05", "id": workout_id},
            headers=HEADERS,
        )

        assert response.status_code == 200
        assert response.json() == {"success": True}
        listing = client.get("/api/v1/log", params={"date": "2024-03-05"}, headers=HEADERS)
        assert listing.json() == {"workouts": {}}

    def test_delete_unknown(self, client):
        response = client.delete(
            "/api/v1/log",
            params={"date": "2024-03-05", "id": "nope"},
            headers=HEADERS,
        )

        assert response.status_code == 404

    def test_invalid_date(self, client):
        response = self._create(client, day="someday")

        assert response.status_code == 400
        assert response.json()["detail"] == "Invalid date: someday"

    def test_missing_fields(self, client):
        response = client.post("/api/v1/log", json={"date": "2024-03-05"}, headers=HEADERS)

        assert response.status_code == 422


# ---------------------------------------------------------------------------
# Health Tests
# ---------------------------------------------------------------------------

class TestHealth:

    def test_liveness(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "ok"
        assert response.json()["details"]["mock_mode"]["workout_store"] is True

    def test_readiness(self, client):
        response = client.get("/health/ready")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "ready"
        assert {c["name"] for c in body["checks"]} == {
            "configuration",
            "parser",
            "workout_store",
        }

    def test_not_ready_without_api_keys(self):
        client = make_client()
        client.app.dependency_overrides[get_settings] = lambda: Settings(
            _env_file=None, api_keys="", workout_store_mock_mode=True
        )

        response = client.get("/health/ready")

        assert response.status_code == 503
        assert response.json()["status"] == "not_ready"
        reset_workout_store()
