from __future__ import annotations

import logging

from fastapi import APIRouter, FastAPI, HTTPException

from etag_conditional.http.problem import (
    handle_http_exception,
    handle_precondition_missing,
    handle_unexpected_error,
)
from etag_conditional.logging_setup import configure_logging
from etag_conditional.logic.errors import PreconditionMissingError

logger = logging.getLogger(__name__)


def install_exception_handlers(app: FastAPI) -> None:
    """Register problem+json handlers for precondition outcomes."""
    app.add_exception_handler(HTTPException, handle_http_exception)  # type: ignore[arg-type]
    app.add_exception_handler(PreconditionMissingError, handle_precondition_missing)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, handle_unexpected_error)


def create_app(*routers: APIRouter) -> FastAPI:
    """Build a FastAPI app with logging, problem handlers and the given routers."""
    configure_logging()
    app = FastAPI(title="ETag Conditional Requests")
    install_exception_handlers(app)
    for router in routers:
        app.include_router(router)
    logger.info("app.created", extra={"routers": len(routers)})
    return app
