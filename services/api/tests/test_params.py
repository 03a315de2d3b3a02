"""Unit tests for `services/api/app/params.py`."""

import pytest

from services.api.app.errors import ParameterMissing
from services.api.app.params import Parameters


def test_from_pairs_nests_bracketed_keys() -> None:
    params = Parameters.from_pairs(
        [
            ("question[title]", "Why?"),
            ("question[body]", "Because."),
            ("authenticity_token", "abc"),
        ]
    )
    assert params.to_dict() == {
        "question": {"title": "Why?", "body": "Because."},
        "authenticity_token": "abc",
    }


def test_from_pairs_collects_empty_brackets_into_list() -> None:
    params = Parameters.from_pairs([("tags[]", "a"), ("tags[]", "b")])
    assert params["tags"] == ["a", "b"]


def test_require_returns_nested_parameters() -> None:
    params = Parameters.from_pairs([("question[title]", "t")])
    nested = params.require("question")
    assert isinstance(nested, Parameters)
    assert nested["title"] == "t"
    assert not nested.permitted


@pytest.mark.parametrize(
    "pairs",
    [
        [],
        [("other[title]", "t")],
        [("question", "not-a-hash")],
    ],
)
def test_require_raises_when_missing_or_scalar(pairs) -> None:
    with pytest.raises(ParameterMissing) as exc:
        Parameters.from_pairs(pairs).require("question")
    assert str(exc.value) == "param is missing or the value is empty: question"


def test_permit_drops_unlisted_keys() -> None:
    params = Parameters.from_pairs(
        [
            ("question[title]", "t"),
            ("question[body]", "b"),
            ("question[id]", "99"),
            ("question[admin]", "1"),
        ]
    )
    permitted = params.require("question").permit("title", "body")
    assert permitted.permitted
    assert permitted.to_dict() == {"title": "t", "body": "b"}


def test_permit_skips_absent_and_nested_values() -> None:
    params = Parameters.from_pairs([("q[title]", "t"), ("q[meta][x]", "1")])
    permitted = params.require("q").permit("title", "body", "meta")
    assert permitted.to_dict() == {"title": "t"}
