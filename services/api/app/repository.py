"""Persistence operations for questions.

Thin pass-through over the SQLAlchemy session: each function performs one
operation, commits on success and rolls back before re-raising on failure so
the connection returns to the pool clean.

Attribute maps passed to `create`/`update` are either permitted `Parameters`
(HTML forms) or plain dicts produced by validated Pydantic schemas (JSON API).
Unpermitted `Parameters` raise `ForbiddenAttributes`.
"""

from collections.abc import Mapping

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from .errors import ForbiddenAttributes, RecordInvalid, RecordNotFound
from .logging_config import get_logger
from .models import QUESTION_ATTRIBUTES, Question
from .params import Parameters

logger = get_logger(__name__)

# Largest value a signed 64-bit integer primary key can hold.
MAX_ID = 2**63 - 1


def _sanitize(attrs: Mapping) -> dict:
    if isinstance(attrs, Parameters) and not attrs.permitted:
        raise ForbiddenAttributes()
    unknown = set(attrs) - set(QUESTION_ATTRIBUTES)
    if unknown:
        raise ForbiddenAttributes()
    return dict(attrs)


def all(db: Session, limit: int | None = None, offset: int = 0) -> list[Question]:
    """List questions ordered by id.

    Args:
        db: SQLAlchemy session.
        limit: Maximum number of rows, or None for no limit.
        offset: Rows to skip before the first returned question.

    Returns:
        list[Question]: The requested page of questions.
    """
    stmt = select(Question).order_by(Question.id).offset(offset)
    if limit is not None:
        stmt = stmt.limit(limit)
    return list(db.scalars(stmt))


def count(db: Session) -> int:
    """Return the total number of stored questions."""
    return db.scalar(select(func.count()).select_from(Question)) or 0


def find(db: Session, question_id: int | str) -> Question:
    """Fetch a question by primary key.

    Path parameters arrive as strings; an id that is not an integer cannot
    name a row and is reported the same way as an unknown id.

    Args:
        db: SQLAlchemy session.
        question_id: Primary key, as an int or its decimal string form.

    Returns:
        Question: The stored question.

    Raises:
        RecordNotFound: If no question has `question_id`.
    """
    try:
        pk = int(question_id)
    except (TypeError, ValueError):
        raise RecordNotFound("Question", question_id) from None
    if not 0 < pk <= MAX_ID:
        raise RecordNotFound("Question", question_id)
    question = db.get(Question, pk)
    if question is None:
        raise RecordNotFound("Question", question_id)
    return question


def build(attrs: Mapping | None = None) -> Question:
    """Return an unsaved question populated from `attrs`."""
    return Question(**_sanitize(attrs or {}))


def _save(db: Session, question: Question) -> Question:
    errors = question.validation_errors()
    if errors:
        raise RecordInvalid(question, errors)
    try:
        db.add(question)
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(question)
    return question


def create(db: Session, attrs: Mapping) -> Question:
    """Insert a question built from `attrs`.

    Raises:
        ForbiddenAttributes: If `attrs` was not whitelisted.
        RecordInvalid: If title or body is blank.
    """
    question = _save(db, build(attrs))
    logger.info("question_created", question_id=question.id)
    return question


def update(db: Session, question: Question, attrs: Mapping) -> Question:
    """Assign `attrs` onto `question` and persist.

    Only keys present in `attrs` are assigned. On validation failure the
    pending changes are discarded from the session but remain on the returned
    record inside the raised `RecordInvalid`.
    """
    values = _sanitize(attrs)
    for name, value in values.items():
        setattr(question, name, value)
    try:
        _save(db, question)
    except RecordInvalid:
        # keep the submitted values on the instance for re-rendering
        db.expunge(question)
        raise
    logger.info("question_updated", question_id=question.id, fields=sorted(values))
    return question


def destroy(db: Session, question: Question) -> None:
    """Delete `question` and commit.

    Args:
        db: SQLAlchemy session the question is attached to.
        question: A persisted question (from `find`).
    """
    question_id = question.id
    try:
        db.delete(question)
        db.commit()
    except Exception:
        db.rollback()
        raise
    logger.info("question_destroyed", question_id=question_id)
