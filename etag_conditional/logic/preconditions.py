"""Conditional request evaluation for If-Match and If-None-Match.

Two modes share one state machine per call:

    START -> header present -> COMPARE -> MATCHED | UNMATCHED
    START -> header absent  -> POLICY  -> MATCHED | UNMATCHED | FAILED

``FAILED`` surfaces as ``PreconditionMissingError``. The payload-level
helpers resolve the effective fingerprint once (envelope override first,
then the body fingerprint) and drive exactly one caller-supplied action.

The If-Match missing-header default is permissive (treat as matched). Write
endpoints that need strict optimistic concurrency should pass ``False`` or
``"error"``, or set ``ETAG_IF_MATCH_MISSING`` (see ``etag_conditional.config``).
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional, TypeVar

from etag_conditional.logic.errors import PreconditionMissingError
from etag_conditional.logic.fingerprint import EtagOptions, compute_fingerprint
from etag_conditional.logic.header_match import HeaderValue, is_value_match
from etag_conditional.models.envelope import (
    MatchOutcome,
    MissingPolicy,
    PayloadEnvelope,
    PreconditionMode,
)

__all__ = [
    "IF_MATCH",
    "IF_NONE_MATCH",
    "evaluate_precondition",
    "evaluate_if_none_match",
    "evaluate_if_match",
    "resolve_fingerprint",
    "check_match_for_write",
    "respond_if_none_match",
    "enforce_match_or_reject",
]

logger = logging.getLogger(__name__)

IF_MATCH: PreconditionMode = "if-match"
IF_NONE_MATCH: PreconditionMode = "if-none-match"

T = TypeVar("T")


def evaluate_precondition(
    mode: PreconditionMode,
    header_value: HeaderValue,
    fingerprint: Optional[str],
    on_missing: MissingPolicy,
) -> MatchOutcome:
    """Run the state machine for ``mode`` and return the outcome.

    ``on_missing`` decides the absent-header branch: True/False is the
    outcome, ``"error"`` raises PreconditionMissingError.
    """
    if header_value is not None:
        outcome = MatchOutcome(
            mode=mode,
            matched=is_value_match(header_value, fingerprint),
            header_present=True,
            fingerprint=fingerprint,
        )
    elif on_missing == "error":
        logger.info("precondition.fail", extra={"chosen_failure": "presence", "header": mode})
        raise PreconditionMissingError(mode)
    else:
        outcome = MatchOutcome(
            mode=mode,
            matched=bool(on_missing),
            header_present=False,
            fingerprint=fingerprint,
        )
    logger.debug(
        "precondition.evaluate",
        extra={"mode": mode, "header_present": outcome.header_present, "matched": outcome.matched},
    )
    return outcome


def evaluate_if_none_match(header_value: HeaderValue, fingerprint: Optional[str], throws_error: bool = False) -> bool:
    """Return True when the client already holds ``fingerprint``.

    A missing header means "send the body" (False) unless ``throws_error``.
    """
    policy: MissingPolicy = "error" if throws_error else False
    return evaluate_precondition(IF_NONE_MATCH, header_value, fingerprint, policy).matched


def evaluate_if_match(header_value: HeaderValue, fingerprint: Optional[str], on_missing: MissingPolicy = True) -> bool:
    """Return True when the write may proceed.

    Missing header: True allows, False rejects, ``"error"`` raises.
    """
    return evaluate_precondition(IF_MATCH, header_value, fingerprint, on_missing).matched


def resolve_fingerprint(payload: Any, options: Optional[EtagOptions] = None) -> Optional[str]:
    """Return the envelope's explicit ETag, or the fingerprint of the body."""
    envelope = PayloadEnvelope.wrap(payload)
    if envelope.etag is not None:
        return envelope.etag
    return compute_fingerprint(envelope.body, options)


def check_match_for_write(
    payload: Any,
    header_value: HeaderValue,
    on_missing: MissingPolicy = True,
    options: Optional[EtagOptions] = None,
) -> bool:
    return evaluate_if_match(header_value, resolve_fingerprint(payload, options), on_missing)


def respond_if_none_match(
    payload: Any,
    header_value: HeaderValue,
    emit_not_modified: Callable[[], T],
    emit_body: Callable[[Any, Optional[str]], T],
    throws_error: bool = False,
    options: Optional[EtagOptions] = None,
) -> T:
    """Fire exactly one of the two emit callbacks and return its result.

    ``emit_body`` receives the body and the fingerprint to attach (None when
    the body has no representable fingerprint).
    """
    envelope = PayloadEnvelope.wrap(payload)
    fingerprint = resolve_fingerprint(envelope, options)
    if evaluate_if_none_match(header_value, fingerprint, throws_error):
        return emit_not_modified()
    return emit_body(envelope.body, fingerprint)


def enforce_match_or_reject(
    payload: Any,
    header_value: HeaderValue,
    on_conflict: Callable[[], Any],
    error: Optional[BaseException] = None,
    on_missing: MissingPolicy = True,
    options: Optional[EtagOptions] = None,
) -> bool:
    """Let the write proceed, or reject it.

    On mismatch ``error`` is raised as-is when given, otherwise
    ``on_conflict`` is called. Returns whether the precondition held.
    """
    if check_match_for_write(payload, header_value, on_missing, options):
        return True
    logger.info("precondition.fail", extra={"chosen_failure": "mismatch", "header": IF_MATCH})
    if error is not None:
        raise error
    on_conflict()
    return False
