"""ASGI middleware for the questions service.

- `MethodOverrideMiddleware` lets HTML forms reach PATCH/PUT/DELETE routes.
  Browsers only submit GET and POST, so edit and delete forms POST a hidden
  `_method` field; the middleware reads it from url-encoded bodies and
  rewrites the request method before routing. Paths under the JSON API
  (`/api/`) are never rewritten, since those routes do not check
  authenticity tokens.
- `RequestLoggingMiddleware` logs one structured event per request with a
  correlation id.
"""

import time
import uuid
from urllib.parse import parse_qs

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from .logging_config import get_logger

logger = get_logger(__name__)

OVERRIDE_FIELD = "_method"
OVERRIDABLE_METHODS = frozenset({"PATCH", "PUT", "DELETE"})
FORM_CONTENT_TYPE = b"application/x-www-form-urlencoded"


class MethodOverrideMiddleware:
    """Rewrite POST requests carrying `_method=patch|put|delete`.

    The body is buffered so it can be inspected and then replayed unchanged to
    the downstream application. Requests whose path starts with one of
    `exclude_prefixes` pass through untouched.
    """

    def __init__(self, app: ASGIApp, exclude_prefixes: tuple[str, ...] = ("/api/",)):
        self.app = app
        self.exclude_prefixes = tuple(exclude_prefixes)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if (
            scope["type"] != "http"
            or scope["method"] != "POST"
            or scope["path"].startswith(self.exclude_prefixes)
        ):
            await self.app(scope, receive, send)
            return

        headers = dict(scope.get("headers") or [])
        content_type = headers.get(b"content-type", b"").split(b";")[0].strip()
        if content_type != FORM_CONTENT_TYPE:
            await self.app(scope, receive, send)
            return

        chunks = []
        more_body = True
        while more_body:
            message = await receive()
            if message["type"] == "http.disconnect":
                return
            chunks.append(message.get("body", b""))
            more_body = message.get("more_body", False)
        body = b"".join(chunks)

        values = parse_qs(body.decode("latin-1")).get(OVERRIDE_FIELD)
        if values:
            method = values[0].upper()
            if method in OVERRIDABLE_METHODS:
                scope = dict(scope, method=method)

        replayed = False

        async def replay() -> Message:
            nonlocal replayed
            if not replayed:
                replayed = True
                return {"type": "http.request", "body": body, "more_body": False}
            return await receive()

        await self.app(scope, replay, send)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log request start/completion with timing and a correlation id."""

    async def dispatch(self, request: Request, call_next):
        correlation_id = request.headers.get("X-Correlation-ID") or str(uuid.uuid4())
        method = request.method
        path = request.url.path
        start_time = time.time()

        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(
                "request_failed",
                method=method,
                path=path,
                error=str(e),
                duration=f"{time.time() - start_time:.3f}s",
                correlation_id=correlation_id,
                exc_info=True,
            )
            raise

        logger.info(
            "request_completed",
            method=method,
            path=path,
            status_code=response.status_code,
            duration=f"{time.time() - start_time:.3f}s",
            correlation_id=correlation_id,
        )
        response.headers["X-Correlation-ID"] = correlation_id
        return response
