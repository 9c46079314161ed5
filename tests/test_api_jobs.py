"""HTTP tests for the job CRUD endpoints."""

from __future__ import annotations

import pytest

API = "/api/v1"


@pytest.fixture
def alice(register):
    return register()


@pytest.fixture
def bob(register):
    return register(name="Bobby", email="bob@example.com")


def _create(client, headers, **fields):
    response = client.post(f"{API}/jobs", json=fields, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()["job"]


def test_create_and_get_round_trip(client, alice):
    job = _create(client, alice, company="Acme", position="Engineer")

    assert job["status"] == "pending"
    assert job["id"]
    assert job["created_at"] and job["updated_at"]

    response = client.get(f"{API}/jobs/{job['id']}", headers=alice)
    assert response.status_code == 200
    assert response.json() == {"job": job}


def test_create_ignores_owner_in_body(client, alice, bob):
    job = _create(client, alice, company="Acme", position="Engineer", created_by=999, createdBy=999)

    listed = client.get(f"{API}/jobs", headers=alice).json()
    assert listed["jobs"][0]["id"] == job["id"]
    assert job["created_by"] != 999
    assert client.get(f"{API}/jobs", headers=bob).json() == {"jobs": [], "Count": 0}


def test_create_validation(client, alice):
    response = client.post(f"{API}/jobs", json={"company": "x" * 51, "status": "interview"}, headers=alice)

    assert response.status_code == 400
    assert response.json()["msg"] == (
        "Company name cannot exceed 50 characters, Please Provide Position, "
        "Please Provide a Valid Status (pending / interviewed / declined)"
    )


def test_list_is_scoped_to_caller(client, alice, bob):
    _create(client, alice, company="Acme", position="Engineer")
    _create(client, bob, company="Globex", position="Analyst")
    _create(client, alice, company="Initech", position="Manager", status="interviewed")

    body = client.get(f"{API}/jobs", headers=alice).json()

    assert body["Count"] == 2
    assert [job["company"] for job in body["jobs"]] == ["Acme", "Initech"]


def test_list_filters(client, alice):
    _create(client, alice, company="Acme", position="Engineer")
    _create(client, alice, company="Initech", position="Manager", status="interviewed")

    body = client.get(f"{API}/jobs", params={"status": "interviewed"}, headers=alice).json()
    assert [job["company"] for job in body["jobs"]] == ["Initech"]

    body = client.get(f"{API}/jobs", params={"search": "acm"}, headers=alice).json()
    assert [job["company"] for job in body["jobs"]] == ["Acme"]

    assert client.get(f"{API}/jobs", params={"status": "hired"}, headers=alice).status_code == 400


def test_stats(client, alice):
    _create(client, alice, company="Acme", position="Engineer")
    _create(client, alice, company="Initech", position="Manager", status="declined")

    response = client.get(f"{API}/jobs/stats", headers=alice)

    assert response.json() == {"total": 2, "pending": 1, "interviewed": 0, "declined": 1}


def test_foreign_job_is_indistinguishable_from_missing(client, alice, bob):
    job = _create(client, alice, company="Acme", position="Engineer")
    payload = {"company": "Evil", "position": "Corp"}

    for method, kwargs in (("GET", {}), ("PATCH", {"json": payload}), ("DELETE", {})):
        foreign = client.request(method, f"{API}/jobs/{job['id']}", headers=bob, **kwargs)
        missing = client.request(method, f"{API}/jobs/424242", headers=bob, **kwargs)

        assert foreign.status_code == missing.status_code == 404
        assert foreign.json().keys() == missing.json().keys() == {"msg"}

    assert client.get(f"{API}/jobs/{job['id']}", headers=alice).json()["job"]["company"] == "Acme"


def test_non_numeric_id_is_not_found(client, alice):
    response = client.get(f"{API}/jobs/not-an-id", headers=alice)

    assert response.status_code == 404


def test_update(client, alice):
    job = _create(client, alice, company="Acme", position="Engineer")

    response = client.patch(f"{API}/jobs/{job['id']}", headers=alice, json={
        "company": "Acme", "position": "Engineer", "status": "interviewed",
    })

    assert response.status_code == 200
    updated = response.json()["job"]
    assert updated["status"] == "interviewed"
    assert updated["created_at"] == job["created_at"]


def test_status_only_update_is_rejected(client, alice):
    job = _create(client, alice, company="Acme", position="Engineer")

    response = client.patch(f"{API}/jobs/{job['id']}", headers=alice, json={"status": "declined"})

    assert response.status_code == 400
    assert response.json()["msg"] == "Please provide company and position to update job"


def test_delete_twice(client, alice):
    job = _create(client, alice, company="Acme", position="Engineer")

    first = client.delete(f"{API}/jobs/{job['id']}", headers=alice)
    second = client.delete(f"{API}/jobs/{job['id']}", headers=alice)

    assert first.status_code == 200
    assert first.content == b""
    assert second.status_code == 404


def test_expired_token_is_rejected(client, alice, monkeypatch):
    from datetime import timedelta

    from jobtrack.auth import tokens

    monkeypatch.setattr(tokens.session_issuer, "lifetime", timedelta(seconds=-5))
    expired = client.post(f"{API}/auth/login", json={
        "email": "alice@example.com", "password": "password123",
    }).json()["token"]

    response = client.get(f"{API}/jobs", headers={"Authorization": f"Bearer {expired}"})

    assert response.status_code == 401


def test_job_for_deleted_account_is_a_server_error(client, alice, db_session):
    from jobtrack.auth.models import User

    db_session.query(User).delete()
    db_session.commit()

    response = client.post(f"{API}/jobs", json={"company": "Acme", "position": "Engineer"}, headers=alice)

    assert response.status_code == 500
    assert response.json() == {"msg": "Something went wrong, try again later"}
