"""Problem+JSON utilities and exception handlers.

Defines the RFC7807 media type and handler callables that turn precondition
failures into application/problem+json responses.
"""

from __future__ import annotations

import logging
from fastapi import HTTPException, Request
from fastapi.responses import JSONResponse

from etag_conditional.logic.errors import PreconditionMissingError
from etag_conditional.logic.problem_factory import problem_precondition_missing

PROBLEM_MEDIA_TYPE = "application/problem+json"

logger = logging.getLogger(__name__)


async def handle_http_exception(request: Request, exc: HTTPException) -> JSONResponse:  # noqa: D401
    if isinstance(exc.detail, dict):
        detail = exc.detail
    else:
        detail = {"title": "Error", "status": int(exc.status_code), "detail": str(exc.detail)}
    headers = {str(k): str(v) for k, v in (exc.headers or {}).items()}
    return JSONResponse(
        detail,
        status_code=int(exc.status_code),
        media_type=PROBLEM_MEDIA_TYPE,
        headers=headers or None,
    )


async def handle_precondition_missing(request: Request, exc: PreconditionMissingError) -> JSONResponse:
    """Map a missing conditional header to 428 Precondition Required."""
    problem = problem_precondition_missing(exc.header)
    return JSONResponse(problem, status_code=int(problem["status"]), media_type=PROBLEM_MEDIA_TYPE)


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:  # noqa: D401
    logger.error("unexpected_error", exc_info=exc)
    return JSONResponse({"title": "Internal Server Error", "status": 500}, status_code=500, media_type=PROBLEM_MEDIA_TYPE)


__all__ = [
    "PROBLEM_MEDIA_TYPE",
    "handle_http_exception",
    "handle_precondition_missing",
    "handle_unexpected_error",
]
