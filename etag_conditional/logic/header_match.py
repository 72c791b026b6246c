"""Conditional header matching.

Compares an already-split ``If-Match`` / ``If-None-Match`` value against a
current fingerprint. Tokens are compared byte-for-byte: no weak/strong
folding, no unquoting and no ``*`` wildcard. Absence on either side never
matches.
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional, Union

__all__ = ["HeaderValue", "normalize_header_value", "is_value_match"]

logger = logging.getLogger(__name__)

HeaderValue = Union[str, Iterable[str], None]


def normalize_header_value(value: HeaderValue) -> Optional[tuple[str, ...]]:
    """Return the header as an ordered tuple of tokens, or None when absent."""
    if value is None:
        return None
    if isinstance(value, str):
        return (value,)
    return tuple(str(token) for token in value)


def is_value_match(header_value: HeaderValue, fingerprint: Optional[str]) -> bool:
    """Return True when any received token equals ``fingerprint`` exactly."""
    tokens = normalize_header_value(header_value)
    if tokens is None or fingerprint is None:
        matched = False
    else:
        matched = fingerprint in tokens
    logger.debug(
        "etag.compare",
        extra={
            "tokens_extracted_count": len(tokens) if tokens is not None else 0,
            "fingerprint_present": fingerprint is not None,
            "matched": matched,
        },
    )
    return matched
