"""
Snippetbox — FastAPI Application Factory
=========================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app() builds the dependency container, installs
       the standard middleware chain, registers the routes and returns the app.
Who:   Called by uvicorn (`uvicorn snippetbox.main:app`) or by
       `python -m snippetbox.main`.
When:  Once at server startup; the returned app handles all subsequent requests.

Application Architecture:
    ┌──────────────────────────────────────────────────────┐
    │                    FastAPI App                       │
    │                                                      │
    │  Standard chain (every request):                     │
    │  ┌──────────┐ ┌─────────────┐ ┌──────────────────┐   │
    │  │ Recovery │→│ Request log │→│ Security headers │   │
    │  └──────────┘ └─────────────┘ └──────────────────┘   │
    │                                                      │
    │  Routes:                                             │
    │  /static, /ping         standard chain only          │
    │  /, /snippet/view, ...  + dynamic chain              │
    │  /snippet/create, ...   + dynamic + require auth     │
    └──────────────────────────────────────────────────────┘

Lifecycle:
    Startup:
    1. Initialize logging
    2. Validate configuration (log problems, keep serving)
    3. Prune expired sessions
    4. Log startup complete

    Shutdown:
    1. Dispose database engine (close all connections)
    2. Log shutdown complete
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from snippetbox import __version__
from snippetbox.application import Application, build_application
from snippetbox.config import Settings, settings as default_settings
from snippetbox.database import dispose_engine
from snippetbox.exceptions import DatabaseError
from snippetbox.helpers import client_error
from snippetbox.middleware import STANDARD_CHAIN
from snippetbox.routes import build_router

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(level: str) -> None:
    """
    Configure logging for the entire application.

    Format: <timestamp> [<LEVEL>] <logger>: <message>
    Errors logged through `helpers.server_error` also carry a stack trace.
    """
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[
            logging.StreamHandler(sys.stdout),
        ],
        force=True,
    )

    # uvicorn's own access log duplicates snippetbox.access
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

def build_lifespan(application: Application):
    """Lifespan handler bound to the dependency container."""

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        settings = application.settings
        setup_logging(settings.log_level)
        logger.info("=" * 60)
        logger.info("Snippetbox %s starting up...", __version__)

        try:
            settings.validate_required_for_production()
        except ValueError as e:
            logger.error("Configuration error: %s", str(e))

        try:
            pruned = await application.sessions.delete_expired()
            logger.info("Pruned %d expired session(s)", pruned)
        except DatabaseError as e:
            logger.warning("Could not prune expired sessions: %s | Context: %s", e.message, e.context)

        logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)
        logger.info("=" * 60)

        yield

        logger.info("Snippetbox shutting down...")
        await dispose_engine(application.engine)
        logger.info("Shutdown complete.")

    return lifespan


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def register_exception_handlers(app: FastAPI) -> None:
    """
    Routing failures answer in the same plain-text shape as handler errors.

    Unknown path  → 404 "Not Found"
    Wrong method  → 405 "Method Not Allowed" with an Allow header

    Unexpected exceptions are left to the recovery middleware.
    """

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        return client_error(exc.status_code, headers=exc.headers)


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings: Configuration to build from; the environment-derived
                  module settings when omitted.

    Returns:
        Fully configured FastAPI instance. The dependency container is
        available as `app.state.application`.
    """
    settings = settings or default_settings
    application = build_application(settings)

    app = FastAPI(
        title="Snippetbox",
        version=__version__,
        middleware=STANDARD_CHAIN,
        lifespan=build_lifespan(application),
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.state.application = application

    register_exception_handlers(app)

    app.include_router(build_router(application))
    app.mount("/static", StaticFiles(directory=settings.static_dir), name="static")

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        app,
        host=default_settings.backend_host,
        port=default_settings.backend_port,
        log_level=default_settings.log_level.lower(),
    )
