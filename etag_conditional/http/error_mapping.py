"""Central error mapping for precondition outcomes.

Single source of truth for mapping precondition outcomes to problem+json
codes and HTTP statuses. Guards and handlers look codes up here instead of
hardcoding strings or numbers.
"""

from __future__ import annotations

PRECONDITION_ERROR_MAP = {
    "missing_if_match": {"code": "PRE_IF_MATCH_MISSING", "status": 428},
    "missing_if_none_match": {"code": "PRE_IF_NONE_MATCH_MISSING", "status": 428},
    "mismatch": {"code": "PRE_IF_MATCH_ETAG_MISMATCH", "status": 409},
}

__all__ = ["PRECONDITION_ERROR_MAP"]
