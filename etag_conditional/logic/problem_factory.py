"""Centralised construction of problem+json payloads for precondition errors."""

from __future__ import annotations

from typing import Dict
import logging

from etag_conditional.http.error_mapping import PRECONDITION_ERROR_MAP


logger = logging.getLogger(__name__)


def problem_precondition_missing(header: str) -> Dict[str, object]:
    """Return a 428 problem naming the missing conditional header."""
    key = "missing_if_none_match" if header == "if-none-match" else "missing_if_match"
    mapping = PRECONDITION_ERROR_MAP[key]
    problem = {
        "title": "Precondition Required",
        "status": int(mapping["status"]),
        "detail": f"{header} header is required",
        "message": f"{header} is not set",
        "code": str(mapping["code"]),
    }
    logger.info("error_handler.handle", extra={"code": problem["code"]})
    return problem


def problem_etag_mismatch() -> Dict[str, object]:
    """Return a 409 problem for an If-Match that does not hold."""
    mapping = PRECONDITION_ERROR_MAP["mismatch"]
    problem = {
        "title": "Conflict",
        "status": int(mapping["status"]),
        "detail": "If-Match does not match the current entity tag",
        "message": "Conflict",
        "code": str(mapping["code"]),
    }
    logger.info("error_handler.handle", extra={"code": problem["code"]})
    return problem


__all__ = ["problem_precondition_missing", "problem_etag_mismatch"]
