from bson import ObjectId

from conftest import run


def seed_session(db, fee: float = 20, **overrides) -> str:
    result = run(db.study_sessions.insert_one({
        "title": "Linear Algebra",
        "tutorEmail": "tutor@example.com",
        "status": "approved",
        "registrationFee": fee,
        **overrides,
    }))
    return str(result.inserted_id)


def booking_for(session_id: str, **overrides) -> dict:
    return {"studentEmail": "student@example.com", "sessionId": session_id, **overrides}


def test_booking_paid_session_starts_unpaid(as_user, db) -> None:
    session_id = seed_session(db)

    response = as_user.post("/bookedSessions", json=booking_for(session_id))

    assert response.status_code == 201
    booking = run(db.booked_sessions.find_one({"_id": ObjectId(response.json()["insertedId"])}))
    assert booking["paid_status"] == "unpaid"
    assert booking["registrationFee"] == 20
    assert booking["sessionTitle"] == "Linear Algebra"
    assert booking["tutorEmail"] == "tutor@example.com"


def test_booking_free_session_is_marked_free(as_user, db) -> None:
    session_id = seed_session(db, fee=0)

    response = as_user.post("/bookedSessions", json=booking_for(session_id))

    booking = run(db.booked_sessions.find_one({"_id": ObjectId(response.json()["insertedId"])}))
    assert booking["paid_status"] == "free"


def test_client_fee_does_not_override_session_fee(as_user, db) -> None:
    session_id = seed_session(db, fee=50)

    response = as_user.post("/bookedSessions", json=booking_for(
        session_id, registrationFee=0, sessionTitle="Fake", tutorEmail="fake@example.com"
    ))

    assert response.status_code == 201
    booking = run(db.booked_sessions.find_one({"_id": ObjectId(response.json()["insertedId"])}))
    assert booking["paid_status"] == "unpaid"
    assert booking["registrationFee"] == 50
    assert booking["sessionTitle"] == "Linear Algebra"
    assert booking["tutorEmail"] == "tutor@example.com"


def test_booking_unknown_session_is_not_found(as_user, db) -> None:
    response = as_user.post("/bookedSessions", json=booking_for(str(ObjectId())))

    assert response.status_code == 404
    assert run(db.booked_sessions.count_documents({})) == 0


def test_booking_malformed_session_id_is_rejected(as_user, db) -> None:
    response = as_user.post("/bookedSessions", json=booking_for("doesnotexist"))

    assert response.status_code == 400
    assert run(db.booked_sessions.count_documents({})) == 0


def test_duplicate_booking_is_rejected(as_user, db) -> None:
    session_id = seed_session(db)

    first = as_user.post("/bookedSessions", json=booking_for(session_id))
    second = as_user.post("/bookedSessions", json=booking_for(session_id))

    assert first.status_code == 201
    assert second.status_code == 400
    assert run(db.booked_sessions.count_documents({})) == 1


def test_same_student_can_book_other_sessions(as_user, db) -> None:
    as_user.post("/bookedSessions", json=booking_for(seed_session(db)))
    response = as_user.post("/bookedSessions", json=booking_for(seed_session(db, title="Calculus")))

    assert response.status_code == 201
    assert run(db.booked_sessions.count_documents({})) == 2


def test_booking_requires_auth(client, db) -> None:
    assert client.post("/bookedSessions", json=booking_for(seed_session(db))).status_code == 401


def test_list_bookings_by_email(as_user, db) -> None:
    session_id = seed_session(db)
    as_user.post("/bookedSessions", json=booking_for(session_id))
    run(db.booked_sessions.insert_one({"studentEmail": "else@example.com", "sessionId": session_id}))

    response = as_user.get("/bookedSessions", params={"email": "student@example.com"})

    assert response.status_code == 200
    assert [b["studentEmail"] for b in response.json()] == ["student@example.com"]


def test_list_bookings_requires_email(as_user) -> None:
    assert as_user.get("/bookedSessions").status_code == 400


def test_get_booking_by_id(as_user, db) -> None:
    session_id = seed_session(db)
    booking_id = as_user.post("/bookedSessions", json=booking_for(session_id)).json()["insertedId"]

    response = as_user.get(f"/bookedSessions/{booking_id}")

    assert response.status_code == 200
    assert response.json()["sessionId"] == session_id


def test_get_missing_booking(as_user) -> None:
    assert as_user.get(f"/bookedSessions/{ObjectId()}").status_code == 404
