"""ETag fingerprints and If-Match / If-None-Match precondition checks.

Business logic lives in `etag_conditional/logic/`; FastAPI glue in
`etag_conditional/guards/`, `etag_conditional/http/` and
`etag_conditional/middleware/`.
"""

from __future__ import annotations

from etag_conditional.logic.errors import ETagError, PreconditionMissingError, is_precondition_missing_error
from etag_conditional.logic.fingerprint import EtagOptions, compute_fingerprint
from etag_conditional.logic.header_match import is_value_match
from etag_conditional.logic.preconditions import (
    check_match_for_write,
    enforce_match_or_reject,
    evaluate_if_match,
    evaluate_if_none_match,
    respond_if_none_match,
)
from etag_conditional.main import create_app
from etag_conditional.models.envelope import MatchOutcome, PayloadEnvelope

__all__ = [
    "ETagError",
    "EtagOptions",
    "MatchOutcome",
    "PayloadEnvelope",
    "PreconditionMissingError",
    "check_match_for_write",
    "compute_fingerprint",
    "create_app",
    "enforce_match_or_reject",
    "evaluate_if_match",
    "evaluate_if_none_match",
    "is_precondition_missing_error",
    "is_value_match",
    "respond_if_none_match",
]
