"""Authenticity tokens for HTML form submissions.

Each browser gets a random token in the `csrf_token` cookie. Forms rendered by
the service embed the same value as a hidden `authenticity_token` field, and
unsafe submissions must echo it back. Verification follows the
`forgery_protection` flag of the settings the app was built with
(`QUESTIONS_FORGERY_PROTECTION=false` at startup, or `create_app(settings)`).
The flag is read on every request from `app.state.settings`.
"""

import secrets

from fastapi import Request, Response

from .errors import InvalidAuthenticityToken
from .logging_config import get_logger
from .params import Parameters
from .settings import Settings

logger = get_logger(__name__)

COOKIE_NAME = "csrf_token"
FIELD_NAME = "authenticity_token"
SAFE_METHODS = frozenset({"GET", "HEAD", "OPTIONS"})


def authenticity_token(request: Request) -> str:
    """Return the client's token, minting one for this request if absent.

    A freshly minted token is stashed on `request.state` so `set_token_cookie`
    can persist it on the response.
    """
    token = request.cookies.get(COOKIE_NAME) or getattr(request.state, "csrf_token", None)
    if not token:
        token = secrets.token_urlsafe(32)
    request.state.csrf_token = token
    return token


def set_token_cookie(request: Request, response: Response) -> Response:
    token = getattr(request.state, "csrf_token", None)
    if token and request.cookies.get(COOKIE_NAME) != token:
        response.set_cookie(COOKIE_NAME, token, httponly=True, samesite="lax")
    return response


def verify_authenticity_token(request: Request, params: Parameters, settings: Settings) -> None:
    """Reject unsafe requests whose submitted token does not match the cookie.

    Raises:
        InvalidAuthenticityToken: When protection is on and the token is
            missing or mismatched.
    """
    if not settings.forgery_protection or request.method in SAFE_METHODS:
        return
    expected = request.cookies.get(COOKIE_NAME)
    submitted = params.get(FIELD_NAME)
    if (
        not expected
        or not isinstance(submitted, str)
        or not secrets.compare_digest(expected, submitted)
    ):
        logger.warning("authenticity_token_rejected", method=request.method, path=request.url.path)
        raise InvalidAuthenticityToken()


async def form_params(request: Request) -> Parameters:
    """FastAPI dependency: parse the form body and verify its token.

    Settings come from the application the request was routed through, so
    each app built by `create_app` honours its own `forgery_protection`.
    """
    settings: Settings = request.app.state.settings
    form = await request.form()
    params = Parameters.from_pairs(form.multi_items())
    verify_authenticity_token(request, params, settings)
    return params
