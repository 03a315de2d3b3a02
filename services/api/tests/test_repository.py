"""Tests for `services/api/app/repository.py` against in-memory SQLite."""

import pytest

from services.api.app import repository
from services.api.app.errors import ForbiddenAttributes, RecordInvalid, RecordNotFound
from services.api.app.params import Parameters


def _permitted(**attrs) -> Parameters:
    return Parameters(attrs, permitted=True)


def test_create_persists_title_and_body(db_session) -> None:
    question = repository.create(db_session, _permitted(title="What is REST?", body="Explain."))

    assert question.id is not None
    assert question.created_at is not None
    stored = repository.find(db_session, question.id)
    assert stored.title == "What is REST?"
    assert stored.body == "Explain."


def test_create_accepts_plain_dict(db_session) -> None:
    question = repository.create(db_session, {"title": "t", "body": "b"})
    assert repository.count(db_session) == 1
    assert question.title == "t"


def test_create_rejects_unpermitted_parameters(db_session) -> None:
    with pytest.raises(ForbiddenAttributes):
        repository.create(db_session, Parameters({"title": "t", "body": "b"}))
    assert repository.count(db_session) == 0


def test_create_rejects_unknown_attribute(db_session) -> None:
    with pytest.raises(ForbiddenAttributes):
        repository.create(db_session, {"title": "t", "body": "b", "id": 5})


@pytest.mark.parametrize("title,body", [("", "b"), ("t", "   "), (None, "b")])
def test_create_requires_presence(db_session, title, body) -> None:
    attrs = {"body": body} if title is None else {"title": title, "body": body}
    with pytest.raises(RecordInvalid) as exc:
        repository.create(db_session, attrs)
    assert exc.value.record.id is None
    assert exc.value.errors
    assert repository.count(db_session) == 0


def test_find_missing_raises_record_not_found(db_session) -> None:
    with pytest.raises(RecordNotFound) as exc:
        repository.find(db_session, 42)
    assert str(exc.value) == "Couldn't find Question with 'id'=42"


def test_all_orders_by_id_and_paginates(db_session) -> None:
    for i in range(3):
        repository.create(db_session, {"title": f"q{i}", "body": "b"})

    assert [q.title for q in repository.all(db_session)] == ["q0", "q1", "q2"]
    assert [q.title for q in repository.all(db_session, limit=1, offset=1)] == ["q1"]


def test_update_assigns_only_given_attributes(db_session) -> None:
    question = repository.create(db_session, {"title": "old", "body": "keep"})

    repository.update(db_session, question, _permitted(title="new"))

    stored = repository.find(db_session, question.id)
    assert stored.title == "new"
    assert stored.body == "keep"


def test_update_invalid_leaves_row_unchanged(db_session, session_factory) -> None:
    question = repository.create(db_session, {"title": "old", "body": "b"})

    with pytest.raises(RecordInvalid) as exc:
        repository.update(db_session, question, {"title": ""})
    assert exc.value.record.title == ""

    fresh = session_factory()
    try:
        assert repository.find(fresh, question.id).title == "old"
    finally:
        fresh.close()


def test_destroy_removes_row(db_session) -> None:
    question = repository.create(db_session, {"title": "t", "body": "b"})
    repository.destroy(db_session, question)

    with pytest.raises(RecordNotFound):
        repository.find(db_session, question.id)


@pytest.mark.parametrize("question_id", ["abc", "1.5", "", "0", "-3", str(2**70)])
def test_find_unparseable_or_out_of_range_id_is_not_found(db_session, question_id) -> None:
    repository.create(db_session, {"title": "t", "body": "b"})

    with pytest.raises(RecordNotFound):
        repository.find(db_session, question_id)


def test_find_accepts_decimal_string(db_session) -> None:
    question = repository.create(db_session, {"title": "t", "body": "b"})
    assert repository.find(db_session, str(question.id)).id == question.id
