from bson import ObjectId

from conftest import run

SESSION = {
    "title": "Linear Algebra Crash Course",
    "tutorEmail": "tutor@example.com",
    "tutorName": "Tutor",
    "description": "Vectors, matrices and eigenvalues",
    "registrationStart": "2026-11-01",
    "registrationEnd": "2026-11-10",
    "classStart": "2026-11-15",
    "classEnd": "2026-12-15",
    "duration": "4 weeks",
}


def seed_session(db, **overrides) -> str:
    result = run(db.study_sessions.insert_one({**SESSION, "status": "pending", "registrationFee": 0, **overrides}))
    return str(result.inserted_id)


def test_create_session_starts_pending_with_free_fee(as_user, db) -> None:
    response = as_user.post("/study_session", json={**SESSION, "status": "approved"})

    assert response.status_code == 201
    created = run(db.study_sessions.find_one({"_id": ObjectId(response.json()["insertedId"])}))
    assert created["status"] == "pending"
    assert created["registrationFee"] == 0


def test_create_session_requires_title(as_user) -> None:
    response = as_user.post("/study_session", json={"tutorEmail": "tutor@example.com"})

    assert response.status_code == 400


def test_list_sessions_filters_by_status(client, db) -> None:
    seed_session(db, title="A", status="approved")
    seed_session(db, title="B")

    response = client.get("/study_session", params={"status": "approved"})

    assert response.status_code == 200
    assert [s["title"] for s in response.json()] == ["A"]


def test_list_sessions_filters_by_tutor(client, db) -> None:
    seed_session(db, title="Mine")
    seed_session(db, title="Theirs", tutorEmail="other@example.com")

    response = client.get("/study_session", params={"tutorEmail": "tutor@example.com"})

    assert [s["title"] for s in response.json()] == ["Mine"]


def test_get_session_by_id(client, db) -> None:
    session_id = seed_session(db)

    response = client.get(f"/study_session/{session_id}")

    assert response.status_code == 200
    assert response.json()["_id"] == session_id


def test_get_missing_session(client) -> None:
    assert client.get(f"/study_session/{ObjectId()}").status_code == 404


def test_get_session_with_malformed_id(client) -> None:
    assert client.get("/study_session/123").status_code == 400


def test_admin_approves_session_with_fee(as_admin, db) -> None:
    session_id = seed_session(db)

    response = as_admin.patch(f"/study_session/{session_id}/status", json={
        "status": "approved",
        "registrationFee": 25,
    })

    assert response.status_code == 200
    updated = run(db.study_sessions.find_one({"_id": ObjectId(session_id)}))
    assert updated["status"] == "approved"
    assert updated["registrationFee"] == 25


def test_admin_rejects_session_with_feedback(as_admin, db) -> None:
    session_id = seed_session(db)

    as_admin.patch(f"/study_session/{session_id}/status", json={
        "status": "rejected",
        "rejectionReason": "Missing schedule",
        "feedback": "Add class times",
    })

    updated = run(db.study_sessions.find_one({"_id": ObjectId(session_id)}))
    assert updated["status"] == "rejected"
    assert updated["rejectionReason"] == "Missing schedule"


def test_status_change_requires_admin(as_user, db) -> None:
    session_id = seed_session(db)

    response = as_user.patch(f"/study_session/{session_id}/status", json={"status": "approved"})

    assert response.status_code == 403


def test_status_change_on_missing_session(as_admin) -> None:
    response = as_admin.patch(f"/study_session/{ObjectId()}/status", json={"status": "approved"})

    assert response.status_code == 404


def test_resubmit_resets_to_pending(as_user, db) -> None:
    session_id = seed_session(db, status="rejected", rejectionReason="Too short", feedback="Extend")

    response = as_user.patch(f"/study_session/resubmit/{session_id}")

    assert response.status_code == 200
    updated = run(db.study_sessions.find_one({"_id": ObjectId(session_id)}))
    assert updated["status"] == "pending"
    assert "rejectionReason" not in updated
    assert "feedback" not in updated


def test_resubmit_missing_session(as_user) -> None:
    assert as_user.patch(f"/study_session/resubmit/{ObjectId()}").status_code == 404


def test_admin_deletes_session(as_admin, db) -> None:
    session_id = seed_session(db)

    response = as_admin.delete(f"/study_session/{session_id}")

    assert response.status_code == 200
    assert response.json()["deletedCount"] == 1
    assert run(db.study_sessions.count_documents({})) == 0


def test_delete_missing_session(as_admin) -> None:
    assert as_admin.delete(f"/study_session/{ObjectId()}").status_code == 404
