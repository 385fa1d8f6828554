"""
Unit tests for workout log storage.

Both stores share their behaviour, so the CRUD tests run against each;
file-specific tests cover persistence and recovery from a damaged file.
"""

import json
from datetime import date

import pytest

from src.infrastructure.storage.client import (
    JsonFileWorkoutStore,
    MockWorkoutStore,
    StoreConfig,
    WorkoutNotFoundError,
    create_workout_store,
)


SUMMARY = {"totalDistance": 400, "strokeDistances": {"freestyle": 400}}


@pytest.fixture(params=["mock", "file"])
def store(request, tmp_path):
    """Each store implementation, empty."""
    if request.param == "mock":
        return MockWorkoutStore()
    return JsonFileWorkoutStore(StoreConfig(path=tmp_path / "data" / "workouts.json"))


# ---------------------------------------------------------------------------
# Shared Behaviour
# ---------------------------------------------------------------------------

class TestWorkoutStore:
    """CRUD behaviour common to every store."""

    def test_add_then_list(self, store):
        entry = store.add("2024-03-05", "4x100 free", SUMMARY)

        month = store.list_month(date(2024, 3, 20))

        assert list(month) == ["2024-03-05"]
        assert month["2024-03-05"][0].id == entry.id
        assert month["2024-03-05"][0].summary == SUMMARY

    def test_several_workouts_on_one_day(self, store):
        store.add("2024-03-05", "400 free", SUMMARY)
        store.add("2024-03-05", "200 back", SUMMARY)

        month = store.list_month("2024-03-01")

        assert [e.text for e in month["2024-03-05"]] == ["400 free", "200 back"]

    def test_list_is_limited_to_month(self, store):
        store.add("2024-02-29", "feb", SUMMARY)
        store.add("2024-03-01", "mar first", SUMMARY)
        store.add("2024-03-31", "mar last", SUMMARY)
        store.add("2024-04-01", "apr", SUMMARY)

        month = store.list_month("2024-03-15")

        assert sorted(month) == ["2024-03-01", "2024-03-31"]

    def test_accepts_iso_datetimes(self, store):
        store.add("2024-03-05T23:00:00.000Z", "400 free", SUMMARY)

        assert "2024-03-05" in store.list_month("2024-03-05")

    def test_update(self, store):
        entry = store.add("2024-03-05", "400 free", SUMMARY)

        updated = store.update("2024-03-05", entry.id, "500 free", {"totalDistance": 500})

        assert updated.id == entry.id
        assert updated.updated_at is not None
        stored = store.list_month("2024-03-05")["2024-03-05"][0]
        assert stored.text == "500 free"
        assert stored.created_at == entry.created_at

    def test_update_unknown_id(self, store):
        store.add("2024-03-05", "400 free", SUMMARY)

        with pytest.raises(WorkoutNotFoundError, match="Workout not found"):
            store.update("2024-03-05", "nope", "500 free", SUMMARY)

    def test_update_unknown_date(self, store):
        with pytest.raises(WorkoutNotFoundError, match="No workouts found"):
            store.update("2024-03-05", "nope", "500 free", SUMMARY)

    def test_delete_keeps_other_workouts(self, store):
        first = store.add("2024-03-05", "400 free", SUMMARY)
        store.add("2024-03-05", "200 back", SUMMARY)

        store.delete("2024-03-05", first.id)

        remaining = store.list_month("2024-03-05")["2024-03-05"]
        assert [e.text for e in remaining] == ["200 back"]

    def test_delete_last_workout_drops_date(self, store):
        entry = store.add("2024-03-05", "400 free", SUMMARY)

        store.delete("2024-03-05", entry.id)

        assert store.list_month("2024-03-05") == {}

    def test_delete_unknown(self, store):
        store.add("2024-03-05", "400 free", SUMMARY)

        with pytest.raises(WorkoutNotFoundError):
            store.delete("2024-03-05", "nope")
        with pytest.raises(WorkoutNotFoundError):
            store.delete("2024-03-06", "nope")

    def test_rejects_empty_text(self, store):
        with pytest.raises(ValueError):
            store.add("2024-03-05", "  ", SUMMARY)


# ---------------------------------------------------------------------------
# JSON File Store
# ---------------------------------------------------------------------------

class TestJsonFileWorkoutStore:
    """Tests for on-disk behaviour."""

    def test_data_survives_new_instance(self, tmp_path):
        path = tmp_path / "workouts.json"
        JsonFileWorkoutStore(StoreConfig(path=path)).add("2024-03-05", "400 free", SUMMARY)

        reopened = JsonFileWorkoutStore(StoreConfig(path=path))

        assert "2024-03-05" in reopened.list_month("2024-03-05")

    def test_file_is_keyed_by_date(self, tmp_path):
        path = tmp_path / "workouts.json"
        store = JsonFileWorkoutStore(StoreConfig(path=path))
        entry = store.add("2024-03-05", "400 free", SUMMARY)

        data = json.loads(path.read_text(encoding="utf-8"))

        assert data["2024-03-05"][0]["id"] == entry.id
        assert "createdAt" in data["2024-03-05"][0]

    def test_reads_records_written_by_browser_client(self, tmp_path):
        path = tmp_path / "workouts.json"
        path.write_text(json.dumps({
            "2024-03-05": [{
                "id": "1709650000000",
                "text": "400 free",
                "summary": SUMMARY,
                "createdAt": "2024-03-05T14:46:40.000Z",
            }]
        }), encoding="utf-8")
        store = JsonFileWorkoutStore(StoreConfig(path=path))

        store.delete("2024-03-05", "1709650000000")

        assert json.loads(path.read_text(encoding="utf-8")) == {}

    @pytest.mark.parametrize("content", ["not json", "[1, 2, 3]", "null"])
    def test_damaged_file_is_reset(self, tmp_path, content):
        path = tmp_path / "workouts.json"
        path.write_text(content, encoding="utf-8")
        store = JsonFileWorkoutStore(StoreConfig(path=path))

        assert store.list_month("2024-03-05") == {}
        assert json.loads(path.read_text(encoding="utf-8")) == {}

    def test_missing_file_is_created(self, tmp_path):
        path = tmp_path / "nested" / "workouts.json"
        store = JsonFileWorkoutStore(StoreConfig(path=path))

        store.list_month("2024-03-05")

        assert path.exists()


# ---------------------------------------------------------------------------
# Factory
# ---------------------------------------------------------------------------

class TestCreateWorkoutStore:

    def test_mock_mode(self):
        assert isinstance(create_workout_store(mock_mode=True), MockWorkoutStore)

    def test_file_store(self, tmp_path):
        store = create_workout_store(config=StoreConfig(path=tmp_path / "w.json"))
        assert isinstance(store, JsonFileWorkoutStore)

    def test_requires_config(self):
        with pytest.raises(ValueError, match="config is required"):
            create_workout_store()
