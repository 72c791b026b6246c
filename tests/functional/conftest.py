from __future__ import annotations

"""Functional test bootstrap.

Every test runs in an empty temporary working directory with no ETAG_*
variables set, so `load_config()` sees defaults unless a test writes an
`etag_config.json` / `.env` or sets the environment itself.
"""

import os

import pytest

_ETAG_ENV_KEYS = ("ETAG_WEAK", "ETAG_IF_MATCH_MISSING", "ETAG_IF_NONE_MATCH_STRICT")


@pytest.fixture(autouse=True)
def isolated_etag_config(tmp_path, monkeypatch):
    """Run each test from a clean directory and environment."""
    monkeypatch.chdir(tmp_path)
    for key in _ETAG_ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    yield tmp_path
    # `.env` loading writes straight into os.environ
    for key in _ETAG_ENV_KEYS:
        os.environ.pop(key, None)
