"""HTML resource routes for questions.

Conventional resource routing:

    GET        /questions            index
    GET        /questions/new        new
    POST       /questions            create
    GET        /questions/{id}       show
    GET        /questions/{id}/edit  edit
    PATCH/PUT  /questions/{id}        update
    DELETE     /questions/{id}        destroy

`/questions/new` is registered before `/questions/{id}`; routes match in
registration order and the `{id}` segment accepts any string, so the
reverse order would hand "new" to `show`. Ids that are not integers reach
`repository.find` and come back as 404.

Form submissions are parsed and token-checked by `forgery.form_params`, then
whitelisted with `require("question").permit("title", "body")` before they
reach the repository.
"""

from pathlib import Path

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates
from sqlalchemy.orm import Session

from .. import repository
from ..db import get_db
from ..errors import RecordInvalid
from ..forgery import FIELD_NAME, authenticity_token, form_params, set_token_cookie
from ..params import Parameters

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))

router = APIRouter(prefix="/questions", tags=["questions"], default_response_class=HTMLResponse)


def question_params(params: Parameters) -> Parameters:
    return params.require("question").permit("title", "body")


def _render(request: Request, name: str, context: dict, status_code: int = 200):
    context = dict(
        context,
        authenticity_token=authenticity_token(request),
        token_field=FIELD_NAME,
    )
    response = templates.TemplateResponse(request, name, context, status_code=status_code)
    return set_token_cookie(request, response)


def _redirect(url: str) -> RedirectResponse:
    return RedirectResponse(url, status_code=303)


@router.get("")
def index(request: Request, db: Session = Depends(get_db)):
    """Render the list of questions.

    Args:
        request: Incoming request (injected).
        db: SQLAlchemy session (injected).

    Returns:
        HTMLResponse: The index page.
    """
    return _render(request, "questions/index.html", {"questions": repository.all(db)})


@router.get("/new")
def new(request: Request):
    """Render an empty new-question form.

    Returns:
        HTMLResponse: The form, carrying a fresh authenticity token.
    """
    return _render(request, "questions/new.html", {"question": repository.build(), "errors": []})


@router.post("")
def create(
    request: Request,
    params: Parameters = Depends(form_params),
    db: Session = Depends(get_db),
):
    """Create a question from the submitted form and redirect to it.

    Invalid submissions re-render the form with 422 and the error messages.
    """
    try:
        question = repository.create(db, question_params(params))
    except RecordInvalid as exc:
        return _render(
            request,
            "questions/new.html",
            {"question": exc.record, "errors": exc.errors},
            status_code=422,
        )
    return _redirect(f"/questions/{question.id}")


@router.get("/{question_id}")
def show(request: Request, question_id: str, db: Session = Depends(get_db)):
    """Render one question.

    Args:
        request: Incoming request (injected).
        question_id: Id from the path; non-numeric ids are treated as unknown.
        db: SQLAlchemy session (injected).

    Returns:
        HTMLResponse: The show page.

    Raises:
        RecordNotFound: Mapped to 404 if the question does not exist.
    """
    question = repository.find(db, question_id)
    return _render(request, "questions/show.html", {"question": question})


@router.get("/{question_id}/edit")
def edit(request: Request, question_id: str, db: Session = Depends(get_db)):
    """Render the edit form prefilled with the stored values.

    Raises:
        RecordNotFound: Mapped to 404 if the question does not exist.
    """
    question = repository.find(db, question_id)
    return _render(request, "questions/edit.html", {"question": question, "errors": []})


@router.api_route("/{question_id}", methods=["PATCH", "PUT"])
def update(
    request: Request,
    question_id: str,
    params: Parameters = Depends(form_params),
    db: Session = Depends(get_db),
):
    """Apply the permitted form fields to a question and redirect to it.

    Args:
        request: Incoming request (injected).
        question_id: Id from the path.
        params: Token-checked form parameters (injected).
        db: SQLAlchemy session (injected).

    Returns:
        RedirectResponse: 303 to the show page, or the edit form with 422
        when the submission is invalid.

    Raises:
        RecordNotFound: Mapped to 404 if the question does not exist.
        ParameterMissing: Mapped to 400 if the form has no `question` fields.
    """
    question = repository.find(db, question_id)
    try:
        repository.update(db, question, question_params(params))
    except RecordInvalid as exc:
        return _render(
            request,
            "questions/edit.html",
            {"question": exc.record, "errors": exc.errors},
            status_code=422,
        )
    return _redirect(f"/questions/{question.id}")


@router.delete("/{question_id}", dependencies=[Depends(form_params)])
def destroy(question_id: str, db: Session = Depends(get_db)):
    """Delete a question and redirect to the index.

    The authenticity token is checked by the route's `form_params` dependency.
    """
    question = repository.find(db, question_id)
    repository.destroy(db, question)
    return _redirect("/questions")
