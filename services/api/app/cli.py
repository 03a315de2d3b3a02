"""Command-line entrypoint for the questions service.

    questions init-db     create missing tables
    questions serve       run the app under uvicorn

Returns:
    The process exit code (0 = success).
"""

import argparse

import uvicorn

from .logging_config import configure_logging, get_logger
from .settings import get_settings

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="questions", description="Questions service")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("init-db", help="Create missing database tables")

    serve = sub.add_parser("serve", help="Run the HTTP server")
    serve.add_argument("--host", default=None, help="Bind host (default: settings.host)")
    serve.add_argument("--port", type=int, default=None, help="Bind port (default: settings.port)")
    serve.add_argument("--reload", action="store_true", help="Reload on code changes")
    return parser


def main(argv: list[str] | None = None) -> int:
    """Run the CLI."""
    args = build_parser().parse_args(argv)
    settings = get_settings()
    configure_logging(settings.log_level, settings.json_logs, service_name="questions")

    if args.command == "init-db":
        from .db import init_db, make_engine

        engine = make_engine(settings.database_url, echo=settings.database_echo)
        try:
            init_db(engine)
        finally:
            engine.dispose()
        return 0

    host = args.host or settings.host
    port = args.port or settings.port
    logger.info("server_starting", host=host, port=port)
    uvicorn.run("services.api.app.main:app", host=host, port=port, reload=args.reload)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
