"""FastAPI application factory / entrypoint.

This service exposes:
- HTML pages and forms for the questions resource (`/questions`)
- a JSON API for the same resource (`/api/v1/questions`)
- a health check (`/health`)

Operational notes:
- Configuration comes from `services/api/app/settings.py` (env prefix `QUESTIONS_`).
- Database connectivity is provided via `services/api/app/db.py`.
- Tables are created on startup unless `QUESTIONS_AUTO_CREATE_TABLES=false`.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import RedirectResponse

from .db import init_db, make_engine, make_session_factory
from .errors import register_exception_handlers
from .logging_config import configure_logging, get_logger
from .middleware import MethodOverrideMiddleware, RequestLoggingMiddleware
from .routes import api_router, questions_router
from .settings import Settings, get_settings

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.settings
    logger.info("application_starting", app_name=settings.app_name, version=settings.app_version)
    if settings.auto_create_tables:
        init_db(app.state.engine)
    yield
    app.state.engine.dispose()
    logger.info("application_shutdown_complete")


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the application with middleware, routers and error handlers.

    Args:
        settings: Configuration for this app instance. Defaults to the
            environment-derived `get_settings()`. The app keeps it on
            `app.state.settings` together with its own engine and session
            factory, so two apps built with different settings do not share
            a database or a forgery-protection flag.

    Returns:
        FastAPI: The configured application.
    """
    settings = settings or get_settings()
    configure_logging(settings.log_level, settings.json_logs, service_name="questions")

    app = FastAPI(title=settings.app_name, version=settings.app_version, lifespan=lifespan)
    app.state.settings = settings
    app.state.engine = make_engine(settings.database_url, echo=settings.database_echo)
    app.state.session_factory = make_session_factory(app.state.engine)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestLoggingMiddleware)
    # outermost, so routing and logging see the overridden method
    app.add_middleware(MethodOverrideMiddleware)

    register_exception_handlers(app)

    app.include_router(questions_router)
    app.include_router(api_router)

    @app.get("/", include_in_schema=False)
    def root():
        return RedirectResponse("/questions", status_code=303)

    @app.get("/health")
    def health():
        """Health check endpoint.

        Returns:
            dict: `{"status": "ok", "service": "questions"}`.
        """
        return {"status": "ok", "service": "questions"}

    return app


app = create_app()
