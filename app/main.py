"""FastAPI application factory. No business logic; only wiring, lifespan and error envelopes."""

from dotenv import load_dotenv

load_dotenv()

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.engine import Engine
from starlette.exceptions import HTTPException as StarletteHTTPException

from app import __version__
from app.api.responses import respond_with_error
from app.api.v1 import router as v1_router
from app.core.config import get_settings
from app.core.database import connect, create_session_factory

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Open the database on startup unless an engine was injected; dispose what we opened."""
    owned = app.state.engine is None
    if owned:
        app.state.engine = connect(get_settings())
        app.state.session_factory = create_session_factory(app.state.engine)
    try:
        yield
    finally:
        if owned:
            app.state.engine.dispose()
            app.state.engine = None
            logger.info("Database connections closed")


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return respond_with_error(exc.status_code, str(exc.detail), headers=exc.headers)


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return respond_with_error(status.HTTP_400_BAD_REQUEST, "Invalid request")


def create_app(engine: Engine | None = None) -> FastAPI:
    """
    Build the application.

    Pass an already-opened engine to skip connecting at startup (tests, or a
    caller that wants to fail before binding the port).
    """
    app = FastAPI(
        title="Users API",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.engine = engine
    if engine is not None:
        app.state.session_factory = create_session_factory(engine)

    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.include_router(v1_router)
    return app


app = create_app()
