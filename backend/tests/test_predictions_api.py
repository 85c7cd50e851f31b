"""
HTTP tests for the /predictions endpoints.

Run from the project root:
    pytest backend/tests/test_predictions_api.py -v
"""

import logging
from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

import pytest
from fastapi import Depends
from fastapi.testclient import TestClient
from sqlalchemy.exc import SQLAlchemyError

from api.dependencies import get_db, get_store
from api.main import create_app
from db.store import PredictionStore


def _create(client, payload, headers):
    response = client.post("/predictions", json=payload, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()["prediction"]


# ---------------------------------------------------------------------------
# POST /predictions
# ---------------------------------------------------------------------------

class TestCreatePrediction:

    def test_returns_created_entity(self, client, admin_headers, sample_payload):
        response = client.post("/predictions", json=sample_payload, headers=admin_headers)
        assert response.status_code == 201
        body = response.json()
        assert body["message"] == "Prediction added"
        created = body["prediction"]
        for field, value in sample_payload.items():
            assert created[field] == value
        assert created["id"]
        assert created["createdAt"]
        assert created["updatedAt"]

    def test_created_entity_is_listed_verbatim(self, client, admin_headers, sample_payload):
        created = _create(client, sample_payload, admin_headers)
        listed = client.get("/predictions").json()
        assert [p["id"] for p in listed] == [created["id"]]
        assert listed[0]["match"] == "A vs B"

    def test_ids_are_unique(self, client, admin_headers, sample_payload):
        ids = {_create(client, sample_payload, admin_headers)["id"] for _ in range(5)}
        assert len(ids) == 5

    @pytest.mark.parametrize("field", ["date", "time", "match", "prediction", "odds"])
    def test_missing_field_is_rejected(self, client, admin_headers, sample_payload, field):
        del sample_payload[field]
        response = client.post("/predictions", json=sample_payload, headers=admin_headers)
        assert response.status_code == 400
        assert response.json() == {"message": "All fields are required"}
        assert client.get("/predictions").json() == []

    @pytest.mark.parametrize("blank", ["", None])
    def test_blank_field_counts_as_missing(self, client, admin_headers, sample_payload, blank):
        sample_payload["odds"] = blank
        response = client.post("/predictions", json=sample_payload, headers=admin_headers)
        assert response.status_code == 400
        assert client.get("/predictions").json() == []

    def test_no_body_is_rejected(self, client, admin_headers):
        response = client.post("/predictions", headers=admin_headers)
        assert response.status_code == 400
        assert response.json() == {"message": "All fields are required"}

    def test_invalid_json_is_rejected(self, client, admin_headers):
        response = client.post(
            "/predictions",
            content=b"{not json",
            headers={**admin_headers, "Content-Type": "application/json"},
        )
        assert response.status_code == 400
        assert response.json() == {"message": "Malformed request body"}

    def test_numeric_odds_are_stored_as_text(self, client, admin_headers, sample_payload):
        sample_payload["odds"] = 2.5
        created = _create(client, sample_payload, admin_headers)
        assert created["odds"] == "2.5"

    def test_unknown_fields_are_ignored(self, client, admin_headers, sample_payload):
        created = _create(client, {**sample_payload, "id": "forged", "stake": "100"}, admin_headers)
        assert created["id"] != "forged"
        assert "stake" not in created


# ---------------------------------------------------------------------------
# GET /predictions
# ---------------------------------------------------------------------------

class TestListPredictions:

    def test_empty_collection(self, client):
        response = client.get("/predictions")
        assert response.status_code == 200
        assert response.json() == []

    def test_newest_first(self, app, client, admin_headers, sample_payload, ticking_clock):
        def store_with_clock(db=Depends(get_db)):
            return PredictionStore(db, clock=ticking_clock)

        app.dependency_overrides[get_store] = store_with_clock
        ids = [
            _create(client, {**sample_payload, "match": f"Match {i}"}, admin_headers)["id"]
            for i in range(3)
        ]

        listed = client.get("/predictions").json()
        assert [p["id"] for p in listed] == list(reversed(ids))
        stamps = [p["createdAt"] for p in listed]
        assert stamps == sorted(stamps, reverse=True)

    def test_serialized_shape(self, client, admin_headers, sample_payload):
        _create(client, sample_payload, admin_headers)
        (entry,) = client.get("/predictions").json()
        assert set(entry) == {
            "id", "date", "time", "match", "prediction", "odds", "createdAt", "updatedAt",
        }


# ---------------------------------------------------------------------------
# DELETE /predictions/{id}
# ---------------------------------------------------------------------------

class TestDeletePrediction:

    def test_deletes_existing(self, client, admin_headers, sample_payload):
        keep = _create(client, sample_payload, admin_headers)
        drop = _create(client, {**sample_payload, "match": "C vs D"}, admin_headers)

        response = client.delete(f"/predictions/{drop['id']}", headers=admin_headers)
        assert response.status_code == 200
        assert response.json() == {"message": "Prediction deleted"}
        assert [p["id"] for p in client.get("/predictions").json()] == [keep["id"]]

    def test_unknown_id_is_404_without_state_change(self, client, admin_headers, sample_payload):
        created = _create(client, sample_payload, admin_headers)

        response = client.delete("/predictions/does-not-exist", headers=admin_headers)
        assert response.status_code == 404
        assert response.json() == {"message": "Prediction not found"}
        assert [p["id"] for p in client.get("/predictions").json()] == [created["id"]]

    def test_second_delete_is_404(self, client, admin_headers, sample_payload):
        created = _create(client, sample_payload, admin_headers)
        assert client.delete(f"/predictions/{created['id']}", headers=admin_headers).status_code == 200
        assert client.delete(f"/predictions/{created['id']}", headers=admin_headers).status_code == 404


# ---------------------------------------------------------------------------
# Timestamps are UTC on the wire
# ---------------------------------------------------------------------------

def _utc_offset(stamp):
    # fromisoformat only accepts a trailing "Z" from Python 3.11
    return datetime.fromisoformat(stamp.replace("Z", "+00:00")).utcoffset()


class TestTimestamps:

    def test_create_response_carries_utc_offset(self, client, admin_headers, sample_payload):
        created = _create(client, sample_payload, admin_headers)
        assert _utc_offset(created["createdAt"]) == timedelta(0)
        assert _utc_offset(created["updatedAt"]) == timedelta(0)

    def test_list_response_carries_utc_offset(self, client, admin_headers, sample_payload):
        _create(client, sample_payload, admin_headers)
        (entry,) = client.get("/predictions").json()
        assert _utc_offset(entry["createdAt"]) == timedelta(0)
        assert _utc_offset(entry["updatedAt"]) == timedelta(0)

    def test_clock_value_round_trips(self, app, client, admin_headers, sample_payload, ticking_clock):
        def store_with_clock(db=Depends(get_db)):
            return PredictionStore(db, clock=ticking_clock)

        app.dependency_overrides[get_store] = store_with_clock
        _create(client, sample_payload, admin_headers)
        (entry,) = client.get("/predictions").json()
        stamp = datetime.fromisoformat(entry["createdAt"].replace("Z", "+00:00"))
        assert stamp == datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


# ---------------------------------------------------------------------------
# Write protection
# ---------------------------------------------------------------------------

class TestWriteProtection:

    def test_create_without_header_is_401(self, client, sample_payload):
        response = client.post("/predictions", json=sample_payload)
        assert response.status_code == 401
        assert response.json() == {"message": "Admin password required"}
        assert client.get("/predictions").json() == []

    def test_create_with_wrong_password_is_401(self, client, sample_payload):
        response = client.post("/predictions", json=sample_payload, headers={"X-Admin-Password": "nope"})
        assert response.status_code == 401
        assert response.json() == {"message": "Invalid admin password"}

    def test_delete_without_header_is_401(self, client, admin_headers, sample_payload):
        created = _create(client, sample_payload, admin_headers)
        response = client.delete(f"/predictions/{created['id']}")
        assert response.status_code == 401
        assert len(client.get("/predictions").json()) == 1

    def test_reads_are_open(self, client):
        assert client.get("/predictions").status_code == 200

    def test_disabled_protection_allows_anonymous_writes(self, settings, sample_payload):
        open_app = create_app(settings.model_copy(update={"require_admin_for_writes": False}))
        with TestClient(open_app) as c:
            created = c.post("/predictions", json=sample_payload)
            assert created.status_code == 201
            assert c.delete(f"/predictions/{created.json()['prediction']['id']}").status_code == 200


# ---------------------------------------------------------------------------
# Store failures surface as generic 500s
# ---------------------------------------------------------------------------

@pytest.fixture()
def broken_store(app):
    session = MagicMock(name="session")
    session.commit.side_effect = SQLAlchemyError("connection refused by db-host:5432")
    session.scalars.side_effect = SQLAlchemyError("connection refused by db-host:5432")
    session.get.side_effect = SQLAlchemyError("connection refused by db-host:5432")
    app.dependency_overrides[get_store] = lambda: PredictionStore(session)
    return session


class TestStoreFailures:

    def test_list_failure(self, client, broken_store):
        response = client.get("/predictions")
        assert response.status_code == 500
        assert response.json() == {"message": "Server error"}

    def test_create_failure(self, client, broken_store, admin_headers, sample_payload):
        response = client.post("/predictions", json=sample_payload, headers=admin_headers)
        assert response.status_code == 500
        assert response.json() == {"message": "Server error"}
        broken_store.rollback.assert_called_once()

    def test_delete_failure(self, client, broken_store, admin_headers):
        response = client.delete("/predictions/abc", headers=admin_headers)
        assert response.status_code == 500
        assert "db-host" not in response.text

    def test_cause_is_logged_not_returned(self, client, broken_store, caplog):
        with caplog.at_level(logging.ERROR, logger="db.store"):
            response = client.get("/predictions")
        assert "db-host" not in response.text
        failure = next(r for r in caplog.records if r.getMessage() == "prediction store failure")
        assert "db-host:5432" in failure.error
        assert failure.operation == "list"
