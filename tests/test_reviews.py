from datetime import datetime, timezone

from conftest import run


def test_post_review(as_user, db) -> None:
    response = as_user.post("/reviews", json={
        "sessionId": "s1",
        "studentEmail": "student@example.com",
        "rating": 5,
        "content": "Clear explanations",
    })

    assert response.status_code == 201
    assert run(db.reviews.count_documents({"sessionId": "s1"})) == 1


def test_rating_out_of_range_is_rejected(as_user, db) -> None:
    response = as_user.post("/reviews", json={
        "sessionId": "s1",
        "studentEmail": "student@example.com",
        "rating": 6,
        "content": "Too good",
    })

    assert response.status_code == 400
    assert run(db.reviews.count_documents({})) == 0


def test_reviews_filtered_by_session_without_auth(client, db) -> None:
    run(db.reviews.insert_one({"sessionId": "s1", "rating": 4, "content": "ok"}))
    run(db.reviews.insert_one({"sessionId": "s2", "rating": 3, "content": "meh"}))

    response = client.get("/reviews", params={"sessionId": "s1"})

    assert response.status_code == 200
    assert [r["sessionId"] for r in response.json()] == ["s1"]


def test_all_reviews_when_no_filter(client, db) -> None:
    run(db.reviews.insert_one({"sessionId": "s1", "rating": 4, "content": "ok"}))
    run(db.reviews.insert_one({"sessionId": "s2", "rating": 3, "content": "meh"}))

    assert len(client.get("/reviews").json()) == 2


def test_reviews_newest_first(client, db) -> None:
    run(db.reviews.insert_many([
        {"sessionId": "s1", "content": "first", "created_at": datetime(2024, 1, 1, tzinfo=timezone.utc)},
        {"sessionId": "s1", "content": "third", "created_at": datetime(2024, 3, 1, tzinfo=timezone.utc)},
        {"sessionId": "s1", "content": "second", "created_at": datetime(2024, 2, 1, tzinfo=timezone.utc)},
    ]))

    response = client.get("/reviews", params={"sessionId": "s1"})

    assert response.status_code == 200
    assert [r["content"] for r in response.json()] == ["third", "second", "first"]
