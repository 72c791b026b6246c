"""Value objects exchanged between the payload callbacks and the evaluator."""

from __future__ import annotations

from typing import Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict


MissingPolicy = Union[bool, Literal["error"]]
PreconditionMode = Literal["if-match", "if-none-match"]


class PayloadEnvelope(BaseModel):
    """Response body with an optional caller-supplied ETag.

    When ``etag`` is set it is used instead of fingerprinting ``body``,
    e.g. a stored version counter that is cheaper than hashing the body.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    body: Any = None
    etag: Optional[str] = None

    @classmethod
    def wrap(cls, payload: Any) -> "PayloadEnvelope":
        if isinstance(payload, cls):
            return payload
        return cls(body=payload)


class MatchOutcome(BaseModel):
    """Result of one precondition evaluation."""

    model_config = ConfigDict(frozen=True)

    mode: PreconditionMode
    matched: bool
    header_present: bool
    fingerprint: Optional[str] = None


__all__ = ["MissingPolicy", "PreconditionMode", "PayloadEnvelope", "MatchOutcome"]
