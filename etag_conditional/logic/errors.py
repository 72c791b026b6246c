"""Precondition error kinds."""

from __future__ import annotations

__all__ = ["PreconditionMissingError", "ETagError", "is_precondition_missing_error"]


class PreconditionMissingError(Exception):
    """A conditional header was absent and the caller's policy requires it.

    ``header`` names the missing header (``if-match`` or ``if-none-match``).
    """

    def __init__(self, header: str, message: str | None = None) -> None:
        self.header = header
        super().__init__(message or f"{header} is not set")


# Name kept for callers that think in terms of ETag failures
ETagError = PreconditionMissingError


def is_precondition_missing_error(error: object) -> bool:
    return isinstance(error, PreconditionMissingError)
