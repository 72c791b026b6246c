"""Centralised ETag header emitter.

Route handlers and guards never assign the ``ETag`` header directly; they
call ``emit_etag_header`` so exposure to browsers stays consistent.
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import Response

logger = logging.getLogger(__name__)

ETAG_HEADER = "ETag"
EXPOSE_HEADERS = "Access-Control-Expose-Headers"


def emit_etag_header(response: Response, token: Optional[str]) -> bool:
    """Set ``ETag`` on the response and expose it via CORS.

    Blank or missing tokens are never emitted. Returns whether the header
    was set.
    """
    token_str = str(token or "")
    if not token_str.strip():
        logger.debug("etag.emit_skipped")
        return False
    response.headers[ETAG_HEADER] = token_str

    existing = response.headers.get(EXPOSE_HEADERS, "")
    tokens = [t.strip() for t in str(existing).split(",") if t.strip()]
    if ETAG_HEADER not in tokens:
        tokens.insert(0, ETAG_HEADER)
    response.headers[EXPOSE_HEADERS] = ", ".join(tokens)

    logger.info("etag.emit", extra={"token": token_str})
    return True


__all__ = ["emit_etag_header", "ETAG_HEADER", "EXPOSE_HEADERS"]
