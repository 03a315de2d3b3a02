"""Shared fixtures for the questions service tests.

Every test builds its own app with `create_app(settings)` on an in-memory
SQLite database, so no test touches the configured database or environment.
The `settings` fixture is the object the app reads on each request; tests may
mutate it to flip behaviour such as forgery protection.
"""

import re

import pytest
from fastapi.testclient import TestClient

from services.api.app.db import init_db
from services.api.app.main import create_app
from services.api.app.settings import Settings

TOKEN_RE = re.compile(r'name="authenticity_token" value="([^"]+)"')


@pytest.fixture()
def settings() -> Settings:
    return Settings(
        database_url="sqlite://",
        forgery_protection=True,
        json_logs=False,
        auto_create_tables=False,
    )


@pytest.fixture()
def app(settings):
    app = create_app(settings)
    init_db(app.state.engine)
    yield app
    app.state.engine.dispose()


@pytest.fixture()
def engine(app):
    return app.state.engine


@pytest.fixture()
def session_factory(app):
    return app.state.session_factory


@pytest.fixture()
def db_session(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def client(app):
    return TestClient(app)


def extract_token(html: str) -> str:
    """Pull the hidden authenticity token out of a rendered form."""
    match = TOKEN_RE.search(html)
    assert match, "form has no authenticity_token field"
    return match.group(1)


@pytest.fixture()
def form_token(client) -> str:
    """Load the new-question form so the client holds a token cookie."""
    resp = client.get("/questions/new")
    assert resp.status_code == 200
    return extract_token(resp.text)
