"""
Tests for the patient endpoints in `health_tracker/routes/patients.py`.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta
from unittest.mock import patch

import pytest
from sqlalchemy.orm import Session

from health_tracker import models
from health_tracker.utils.dates import calculate_age

PATIENTS = "/api/patients/"


def _create(client, **overrides):
    payload = {"first_name": "Ada", "last_name": "Lovelace", "date_of_birth": "1985-12-10"}
    payload.update(overrides)
    return client.post(PATIENTS, json=payload)


def _assess(db_session, patient_id, level):
    db_session.add(models.RiskAssessment(
        patient_id=patient_id,
        risk_level=level,
        calculated_score={"LOW": 0, "MEDIUM": 2, "HIGH": 5}[level],
        assessment_date=datetime(2024, 1, 1),
        next_assessment_date=datetime(2024, 2, 1),
    ))
    db_session.commit()


def test_create_patient(client) -> None:
    response = _create(client, blood_type="O+", gender="F")

    assert response.status_code == 201
    body = response.json()
    assert body["id"] > 0
    assert body["first_name"] == "Ada"
    assert body["blood_type"] == "O+"
    assert body["gender"] == "F"
    assert body["risk_level"] is None
    assert body["age"] == calculate_age(date(1985, 12, 10))


def test_create_patient_treats_blank_blood_type_as_missing(client) -> None:
    response = _create(client, blood_type="")

    assert response.status_code == 201
    assert response.json()["blood_type"] is None


def test_create_patient_validation_errors(client) -> None:
    assert _create(client, first_name="A").status_code == 422
    assert _create(client, date_of_birth="10/12/1985").status_code == 422
    assert _create(client, blood_type="C+").status_code == 422
    future = (date.today() + timedelta(days=1)).isoformat()
    assert _create(client, date_of_birth=future).status_code == 422


def test_get_patient_includes_current_risk(client, db_session, make_patient) -> None:
    patient = make_patient()
    _assess(db_session, patient.id, "HIGH")
    _assess(db_session, patient.id, "MEDIUM")

    response = client.get(f"/api/patients/{patient.id}")

    assert response.status_code == 200
    assert response.json()["risk_level"] == "MEDIUM"


def test_get_missing_patient_returns_404(client) -> None:
    response = client.get("/api/patients/999")

    assert response.status_code == 404
    assert "999" in response.json()["detail"]


def test_list_defaults_to_most_recent_first(client, make_patient) -> None:
    older = make_patient(first_name="Old", last_name="Timer", created_at=datetime(2023, 1, 1))
    newer = make_patient(first_name="New", last_name="Comer", created_at=datetime(2024, 1, 1))

    response = client.get(PATIENTS)

    assert response.status_code == 200
    assert [p["id"] for p in response.json()] == [newer.id, older.id]


def test_list_sorted_by_name(client, make_patient) -> None:
    make_patient(first_name="Zoe", last_name="Brown")
    make_patient(first_name="Amy", last_name="Brown")
    make_patient(first_name="Bob", last_name="Adams")

    response = client.get(PATIENTS, params={"sort": "name"})

    names = [(p["last_name"], p["first_name"]) for p in response.json()]
    assert names == [("Adams", "Bob"), ("Brown", "Amy"), ("Brown", "Zoe")]


def test_list_sorted_by_risk_severity(client, db_session, make_patient) -> None:
    low = make_patient(last_name="Low")
    unassessed = make_patient(last_name="None")
    high = make_patient(last_name="High")
    medium = make_patient(last_name="Medium")
    _assess(db_session, low.id, "LOW")
    _assess(db_session, high.id, "HIGH")
    _assess(db_session, medium.id, "MEDIUM")

    response = client.get(PATIENTS, params={"sort": "risk"})

    assert [p["id"] for p in response.json()] == [high.id, medium.id, low.id, unassessed.id]
    assert [p["risk_level"] for p in response.json()] == ["HIGH", "MEDIUM", "LOW", None]


def test_list_filters_by_current_risk_level(client, db_session, make_patient) -> None:
    was_high = make_patient(last_name="Recovered")
    high = make_patient(last_name="Critical")
    make_patient(last_name="Unassessed")
    _assess(db_session, was_high.id, "HIGH")
    _assess(db_session, was_high.id, "LOW")
    _assess(db_session, high.id, "HIGH")

    response = client.get(PATIENTS, params={"risk": "high"})

    assert response.status_code == 200
    assert [p["id"] for p in response.json()] == [high.id]


def test_list_rejects_unknown_risk_filter(client) -> None:
    response = client.get(PATIENTS, params={"risk": "extreme"})

    assert response.status_code == 400


def test_list_rejects_unknown_sort(client) -> None:
    response = client.get(PATIENTS, params={"sort": "age"})

    assert response.status_code == 422


def test_search_matches_names_and_id(client, make_patient) -> None:
    jane = make_patient(first_name="Jane", last_name="Smith")
    make_patient(first_name="John", last_name="Janeway")
    make_patient(first_name="Carl", last_name="Other")

    by_name = client.get("/api/patients/search", params={"q": "jane"}).json()
    by_id = client.get("/api/patients/search", params={"q": str(jane.id)}).json()

    assert {p["last_name"] for p in by_name} == {"Smith", "Janeway"}
    assert by_id == [{"id": jane.id, "first_name": "Jane", "last_name": "Smith"}]


def test_search_with_non_ascii_digit_matches_names_only(client, make_patient) -> None:
    make_patient(first_name="Jane", last_name="Smith")

    response = client.get("/api/patients/search", params={"q": "\u00b2"})

    assert response.status_code == 200
    assert response.json() == []


def test_search_blank_term_returns_nothing(client, make_patient) -> None:
    make_patient()

    assert client.get("/api/patients/search", params={"q": "   "}).json() == []


def test_search_is_limited(client, make_patient) -> None:
    for i in range(7):
        make_patient(first_name=f"Sam{i}", last_name="Taylor")

    results = client.get("/api/patients/search", params={"q": "taylor"}).json()

    assert len(results) == 5


def test_update_patient_changes_only_given_fields(client, make_patient) -> None:
    patient = make_patient(first_name="Jane", last_name="Doe", blood_type="A+")

    response = client.patch(f"/api/patients/{patient.id}", json={"last_name": "Roe", "gender": "F"})

    assert response.status_code == 200
    body = response.json()
    assert body["first_name"] == "Jane"
    assert body["last_name"] == "Roe"
    assert body["gender"] == "F"
    assert body["blood_type"] == "A+"


def test_delete_patient_removes_owned_rows(client, db_session, make_patient) -> None:
    patient = make_patient()
    patient_id = patient.id
    client.post("/api/health-records", json={
        "patient_id": patient_id,
        "blood_glucose": 120,
        "blood_pressure_systolic": 120,
        "blood_pressure_diastolic": 80,
    })

    response = client.delete(f"/api/patients/{patient_id}")

    assert response.status_code == 204
    assert client.get(f"/api/patients/{patient_id}").status_code == 404
    db_session.expire_all()
    assert db_session.query(models.HealthRecord).filter_by(patient_id=patient_id).count() == 0
    assert db_session.query(models.RiskAssessment).filter_by(patient_id=patient_id).count() == 0


@pytest.mark.parametrize("field", ["first_name", "last_name", "date_of_birth"])
def test_update_patient_rejects_clearing_required_fields(client, make_patient, field) -> None:
    patient = make_patient(first_name="Jane", last_name="Doe")

    response = client.patch(f"/api/patients/{patient.id}", json={field: None})

    assert response.status_code == 422
    assert client.get(f"/api/patients/{patient.id}").json()["first_name"] == "Jane"


def test_update_patient_allows_clearing_optional_fields(client, make_patient) -> None:
    patient = make_patient(blood_type="A+")

    response = client.patch(f"/api/patients/{patient.id}", json={"blood_type": None})

    assert response.status_code == 200
    assert response.json()["blood_type"] is None


def test_failed_delete_rolls_back_and_keeps_patient(client, make_patient) -> None:
    patient = make_patient()

    with patch.object(Session, "commit", side_effect=RuntimeError("database is locked")):
        response = client.delete(f"/api/patients/{patient.id}")

    assert response.status_code == 500
    assert "Failed to delete patient" in response.json()["detail"]
    assert client.get(f"/api/patients/{patient.id}").status_code == 200
