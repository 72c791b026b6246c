"""Configuration for conditional request handling.

Rules:
- Primary source: `etag_config.json` in the working directory.
- Overrides: environment variables (optionally loaded from `.env`).
- Validation: Pydantic models enforce allowed values.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Literal, Optional

from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, ConfigDict, Field, ValidationError as PydanticValidationError, field_validator

from etag_conditional.logic.fingerprint import EtagOptions
from etag_conditional.models.envelope import MissingPolicy


ROOT_ETAG_CONFIG = Path("etag_config.json")
logger = logging.getLogger(__name__)

_MISSING_POLICIES: dict[str, MissingPolicy] = {
    "allow": True,
    "reject": False,
    "error": "error",
}


def _env(key: str, default: Optional[str] = None) -> Optional[str]:
    return os.environ.get(key, default)


def _as_bool(text: Optional[str]) -> bool:
    return str(text).strip().lower() in {"1", "true", "yes", "on"}


class EtagConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    weak: bool = Field(default=False)
    # "allow" keeps writes without If-Match permitted; set "reject" or
    # "error" for endpoints that must not accept blind overwrites.
    if_match_missing: Literal["allow", "reject", "error"] = Field(default="allow")
    if_none_match_strict: bool = Field(default=False)

    @field_validator("if_match_missing", mode="before")
    @classmethod
    def policy_is_lowercase(cls, v: object) -> object:
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @property
    def missing_policy(self) -> MissingPolicy:
        return _MISSING_POLICIES[self.if_match_missing]

    @property
    def etag_options(self) -> EtagOptions:
        return EtagOptions(weak=self.weak)


def _read_json_file(path: Path) -> dict:
    try:
        if path.exists():
            return json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        logger.error("Failed to read JSON config %s: %s", path, e)
    return {}


def load_config(config_path: Path = ROOT_ETAG_CONFIG) -> EtagConfig:
    """Load configuration with validation.

    Precedence (highest first):
    1) Environment variables (ETAG_WEAK, ETAG_IF_MATCH_MISSING, ETAG_IF_NONE_MATCH_STRICT)
    2) `.env` in the working directory
    3) `etag_config.json`
    4) Defaults
    """
    load_dotenv(find_dotenv(usecwd=True), override=False)
    base = _read_json_file(config_path)

    weak_text = _env("ETAG_WEAK")
    if_match_missing = _env("ETAG_IF_MATCH_MISSING") or base.get("if_match_missing", "allow")
    strict_text = _env("ETAG_IF_NONE_MATCH_STRICT")

    try:
        return EtagConfig(
            weak=_as_bool(weak_text) if weak_text is not None else bool(base.get("weak", False)),
            if_match_missing=if_match_missing,
            if_none_match_strict=(
                _as_bool(strict_text) if strict_text is not None else bool(base.get("if_none_match_strict", False))
            ),
        )
    except PydanticValidationError as e:
        logger.error("Invalid ETag configuration: %s", e)
        raise


__all__ = ["EtagConfig", "load_config"]
