"""Task tracker API — FastAPI entry point.

Registers middleware, exception handlers, routers and lifecycle hooks.
The store handle is created in the lifespan hook (or passed in by the
caller) and exposed to routes through ``app.state.db``.

Run locally with ``uvicorn api.main:app`` or ``python -m api.main``.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse

from api.errors import register_exception_handlers
from api.middleware import RequestLoggingMiddleware
from core.database import Database
from core.logging_setup import setup_logging
from patterns.domain_config import TasksConfig
from verticals.tasks.router import router as tasks_router

logger = logging.getLogger(__name__)

VERSION = "0.1.0"


def create_app(
    config: TasksConfig | None = None,
    database: Database | None = None,
) -> FastAPI:
    """Build the application.

    When ``database`` is given it is used as-is and left open at shutdown;
    otherwise one is built from ``config.database`` and disposed on exit.
    """
    config = config or TasksConfig.from_env()

    # -----------------------------------------------------------------------
    # Lifespan
    # -----------------------------------------------------------------------

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        setup_logging(config.server.log_level)
        db = database or Database.from_config(config.database)
        app.state.db = db
        if config.database.create_tables:
            await db.create_all()
        logger.info("Task tracker API started")
        yield
        logger.info("Task tracker API shutting down")
        if database is None:
            await db.dispose()

    # -----------------------------------------------------------------------
    # App
    # -----------------------------------------------------------------------

    app = FastAPI(
        title="Task Tracker",
        description="Create, list, edit and delete tasks",
        version=VERSION,
        debug=config.server.debug,
        lifespan=lifespan,
    )
    app.state.config = config
    if database is not None:
        app.state.db = database

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(config.server.cors_origins),
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestLoggingMiddleware)

    register_exception_handlers(app)

    # -----------------------------------------------------------------------
    # Routers
    # -----------------------------------------------------------------------

    app.include_router(tasks_router, tags=["Tasks"])

    # -----------------------------------------------------------------------
    # Health & root
    # -----------------------------------------------------------------------

    @app.get("/health")
    async def health():
        return {"status": "healthy", "version": VERSION}

    @app.get("/", response_class=PlainTextResponse)
    async def root():
        return "Task Management Backend Running"

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = app.state.config.server
    uvicorn.run(app, host=settings.host, port=settings.port)
