"""JSON API routes for questions.

Mirrors the HTML resource routes for programmatic clients. Request bodies are
validated by the schemas in `services/api/app/schemas.py`, which only accept
`title` and `body`. Responses use the `{"ok": true, ...}` envelope.
"""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from .. import repository
from ..db import get_db
from ..schemas import QuestionCreate, QuestionOut, QuestionUpdate

router = APIRouter()


@router.get("/questions")
def list_questions(
    db: Session = Depends(get_db),
    limit: int = Query(50, ge=1, le=500),
    offset: int = Query(0, ge=0),
    include_total: bool = Query(
        default=False,
        description="If true, also return `total` rows (ignores pagination).",
    ),
):
    """List questions ordered by id.

    Args:
        db: SQLAlchemy session (injected).
        limit: Maximum number of questions to return.
        offset: Row offset for pagination.
        include_total: If true, include the total number of questions.

    Returns:
        dict: `{ "ok": true, "questions": [...], "total": <int> }`
        - `total` is only included when `include_total=true`.
    """
    questions = repository.all(db, limit=limit, offset=offset)
    resp = {"ok": True, "questions": [QuestionOut.model_validate(q) for q in questions]}

    if include_total:
        resp["total"] = repository.count(db)

    return resp


@router.get("/questions/{question_id}")
def get_question(question_id: str, db: Session = Depends(get_db)):
    """Fetch a single question.

    Raises:
        RecordNotFound: Mapped to 404 if the question does not exist.
    """
    question = repository.find(db, question_id)
    return {"ok": True, "question": QuestionOut.model_validate(question)}


@router.post("/questions", status_code=status.HTTP_201_CREATED)
def create_question(payload: QuestionCreate, db: Session = Depends(get_db)):
    """Create a question from a JSON body.

    Raises:
        RecordInvalid: Mapped to 422 when title or body is blank.
    """
    question = repository.create(db, payload.model_dump())
    return {"ok": True, "question": QuestionOut.model_validate(question)}


@router.api_route("/questions/{question_id}", methods=["PATCH", "PUT"])
def update_question(question_id: str, payload: QuestionUpdate, db: Session = Depends(get_db)):
    """Update the attributes present in the body; absent keys are left alone."""
    question = repository.find(db, question_id)
    question = repository.update(db, question, payload.changes())
    return {"ok": True, "question": QuestionOut.model_validate(question)}


@router.delete("/questions/{question_id}")
def delete_question(question_id: str, db: Session = Depends(get_db)):
    """Delete a question.

    Returns:
        dict: `{ "ok": true, "deleted": <id> }`.

    Raises:
        RecordNotFound: Mapped to 404 if the question does not exist.
    """
    question = repository.find(db, question_id)
    deleted_id = question.id
    repository.destroy(db, question)
    return {"ok": True, "deleted": deleted_id}
