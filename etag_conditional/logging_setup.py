"""Logging for apps built with ``create_app``.

Precondition decisions are logged as structured event names
(``etag.compare``, ``precondition.fail``, ``fingerprint.unrepresentable``)
under the ``etag_conditional`` logger. This module sends them to stdout next
to the uvicorn loggers. Hosts that configure logging themselves are left
alone.
"""
from __future__ import annotations
import logging
from logging.config import dictConfig
from typing import Any

_FORMAT = "%(asctime)s %(levelname)s:%(name)s:%(message)s"
_SERVER_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")


def _build_config(level: str) -> dict[str, Any]:
    loggers: dict[str, Any] = {"etag_conditional": {"level": level}}
    for name in _SERVER_LOGGERS:
        loggers[name] = {"level": "INFO", "handlers": ["stdout"], "propagate": False}
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {"plain": {"format": _FORMAT}},
        "handlers": {
            "stdout": {
                "class": "logging.StreamHandler",
                "formatter": "plain",
                "stream": "ext://sys.stdout",
            }
        },
        "root": {"level": "INFO", "handlers": ["stdout"]},
        "loggers": loggers,
    }


def configure_logging(level: str = "INFO") -> bool:
    """Install the stdout handler; ``level`` applies to ``etag_conditional``.

    No-op returning False if the root logger already has a handler.
    """
    if logging.getLogger().handlers:
        return False
    dictConfig(_build_config(level))
    return True
