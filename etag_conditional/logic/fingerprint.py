"""ETag fingerprint computation.

Single source of truth for hashing payloads into entity tags. Callers pass
any in-memory value; it is canonicalised to bytes and handed to
``entity_tag``, the content-addressing primitive.

Structured values (mappings, sequences, dataclasses, pydantic models, ...)
are reduced to JSON-ready data with ``pydantic_core.to_jsonable_python``,
the same shape the JSON response body is rendered from, and then dumped as
compact JSON.

Token shape: ``"<byte length in hex>-<base64 sha1, 27 chars>"`` with a
``W/`` prefix for weak validators.
"""

from __future__ import annotations

import base64
import datetime as _dt
import decimal
import hashlib
import json
import logging
import math
from collections.abc import Mapping
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict
from pydantic_core import to_jsonable_python

__all__ = [
    "EMPTY_ENTITY_TAG",
    "EtagOptions",
    "entity_tag",
    "canonical_bytes",
    "compute_fingerprint",
]

logger = logging.getLogger(__name__)

EMPTY_ENTITY_TAG = '"0-2jmj7l5rSw0yVb/vlWAYkK/YBwk"'


class EtagOptions(BaseModel):
    """Options forwarded untouched to ``entity_tag``."""

    model_config = ConfigDict(frozen=True)

    weak: bool = False


def entity_tag(data: bytes | str, options: Optional[EtagOptions] = None) -> str:
    """Return the quoted entity tag for ``data``."""
    raw = data.encode("utf-8") if isinstance(data, str) else bytes(data)
    if not raw:
        tag = EMPTY_ENTITY_TAG
    else:
        digest = base64.b64encode(hashlib.sha1(raw).digest()).decode("ascii")[:27]
        tag = f'"{len(raw):x}-{digest}"'
    if options is not None and options.weak:
        return f"W/{tag}"
    return tag


def _iso_timestamp(value: _dt.datetime) -> str:
    # Naive datetimes are taken as UTC
    if value.tzinfo is not None:
        value = value.astimezone(_dt.timezone.utc).replace(tzinfo=None)
    return value.isoformat(timespec="milliseconds") + "Z"


def _number_text(value: int | float | decimal.Decimal) -> str:
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "Infinity" if value > 0 else "-Infinity"
        if value.is_integer():
            return str(int(value))
    return str(value)


def _fallback(value: Any) -> Any:
    # Only reached for types pydantic cannot serialise itself
    if isinstance(value, Mapping):
        return dict(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def _normalise_numbers(value: Any) -> Any:
    """Apply the top-level number rules at every depth."""
    if isinstance(value, float):
        if not math.isfinite(value):
            return None
        if value.is_integer():
            return int(value)
        return value
    if isinstance(value, dict):
        return {k: _normalise_numbers(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_normalise_numbers(v) for v in value]
    return value


def canonical_bytes(value: Any) -> Optional[bytes]:
    """Canonicalise ``value`` to the byte sequence that gets fingerprinted.

    Returns None for values with no representation (None, callables,
    unsupported types, structures that fail to serialise).
    """
    if value is None:
        return None
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value)
    # bool before int: bool is an int subclass
    if isinstance(value, bool):
        return b"true" if value else b"false"
    if isinstance(value, (int, float, decimal.Decimal)):
        return _number_text(value).encode("utf-8")
    if isinstance(value, str):
        return value.encode("utf-8")
    if isinstance(value, _dt.datetime):
        return json.dumps(_iso_timestamp(value)).encode("utf-8")
    if callable(value) and not isinstance(value, BaseModel):
        return None
    try:
        data = _normalise_numbers(to_jsonable_python(value, fallback=_fallback))
        text = json.dumps(data, separators=(",", ":"), ensure_ascii=False)
    except (TypeError, ValueError):
        logger.debug("fingerprint.unrepresentable", extra={"value_type": type(value).__name__}, exc_info=True)
        return None
    return text.encode("utf-8")


def compute_fingerprint(value: Any, options: Optional[EtagOptions] = None) -> Optional[str]:
    """Return the ETag for ``value`` or None when no fingerprint is representable."""
    raw = canonical_bytes(value)
    if raw is None:
        return None
    return entity_tag(raw, options)
