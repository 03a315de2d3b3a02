"""Tests for authenticity-token verification and its on/off toggle."""

from services.api.app import repository

FORM = {"question[title]": "t", "question[body]": "b"}


def test_post_without_token_is_rejected(client, db_session) -> None:
    client.get("/questions/new")

    resp = client.post("/questions", data=FORM, follow_redirects=False)

    assert resp.status_code == 422
    assert resp.json()["detail"] == "Invalid authenticity token"
    assert repository.count(db_session) == 0


def test_post_with_mismatched_token_is_rejected(client, form_token) -> None:
    data = dict(FORM, authenticity_token=form_token + "x")

    resp = client.post("/questions", data=data, follow_redirects=False)

    assert resp.status_code == 422


def test_post_without_cookie_is_rejected(client) -> None:
    data = dict(FORM, authenticity_token="forged")

    resp = client.post("/questions", data=data, follow_redirects=False)

    assert resp.status_code == 422


def test_delete_requires_token(client, form_token, db_session) -> None:
    question = repository.create(db_session, {"title": "t", "body": "b"})

    resp = client.post(f"/questions/{question.id}", data={"_method": "delete"})

    assert resp.status_code == 422
    assert repository.count(db_session) == 1


def test_disabled_protection_accepts_tokenless_post(client, settings, db_session) -> None:
    settings.forgery_protection = False

    resp = client.post("/questions", data=FORM, follow_redirects=False)

    assert resp.status_code == 303
    assert repository.count(db_session) == 1


def test_reenabled_protection_rejects_again(client, settings) -> None:
    settings.forgery_protection = False
    assert client.post("/questions", data=FORM, follow_redirects=False).status_code == 303

    settings.forgery_protection = True
    assert client.post("/questions", data=FORM, follow_redirects=False).status_code == 422


def test_token_cookie_is_stable_across_pages(client) -> None:
    first = client.get("/questions/new")
    second = client.get("/questions")

    assert "csrf_token" in first.cookies
    assert "csrf_token" not in second.cookies


def test_json_api_is_not_token_checked(client) -> None:
    resp = client.post("/api/v1/questions", json={"title": "t", "body": "b"})
    assert resp.status_code == 201


def test_form_override_does_not_reach_json_delete(client, db_session) -> None:
    question = repository.create(db_session, {"title": "t", "body": "b"})

    resp = client.post(f"/api/v1/questions/{question.id}", data={"_method": "delete"})

    assert resp.status_code == 405
    assert repository.count(db_session) == 1


def test_form_override_does_not_reach_json_patch(client, db_session, session_factory) -> None:
    question = repository.create(db_session, {"title": "t", "body": "b"})

    resp = client.post(
        f"/api/v1/questions/{question.id}",
        data={"_method": "patch", "title": "hijacked"},
    )

    assert resp.status_code == 405
    fresh = session_factory()
    try:
        assert repository.find(fresh, question.id).title == "t"
    finally:
        fresh.close()
