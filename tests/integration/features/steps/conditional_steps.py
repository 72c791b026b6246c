"""
Conditional request integration steps.

Each scenario mounts a fresh in-process app (see environment.py) exposing a
single document at /doc with If-None-Match reads and If-Match writes.
"""

from __future__ import annotations

import json
from typing import Any, Optional

from behave import given, then, when
from fastapi import APIRouter, Depends, Request
from fastapi.testclient import TestClient

from etag_conditional.guards.precondition import if_match_handler, if_none_match_handler
from etag_conditional.logic.fingerprint import compute_fingerprint
from etag_conditional.main import create_app
from etag_conditional.models.envelope import PayloadEnvelope

_POLICIES = {"allow": True, "reject": False, "error": "error"}


def _unquote(value: str) -> str:
    """Strip one layer of the quotes used in feature text."""
    value = value.strip()
    if len(value) >= 2 and value[0] == value[-1] and value[0] in {"'", '"'}:
        return value[1:-1]
    return value


def _mount(context: Any, strict: Optional[bool] = None, policy: Any = None) -> None:
    router = APIRouter()

    async def load_document(request: Request) -> PayloadEnvelope:
        return PayloadEnvelope(body=dict(context.document), etag=context.document_etag)

    router.add_api_route("/doc", if_none_match_handler(load_document, throws_error=strict), methods=["GET"])

    @router.put("/doc", dependencies=[Depends(if_match_handler(load_document, on_missing=policy))])
    async def update_document() -> dict:
        context.writes += 1
        return {"updated": True}

    context.client = TestClient(create_app(router))


# ------------------
# Background setup
# ------------------


@given("a stored document {payload}")
def step_stored_document(context: Any, payload: str) -> None:
    context.document = json.loads(payload)
    context.document_etag = None


@given("the document is versioned with ETag {etag}")
def step_versioned_document(context: Any, etag: str) -> None:
    context.document_etag = _unquote(etag)


@given("the document endpoints are mounted")
def step_mount_default(context: Any) -> None:
    _mount(context)


@given("the document endpoints are mounted with strict reads {strict}")
def step_mount_strict(context: Any, strict: str) -> None:
    _mount(context, strict=strict.strip().lower() == "on")


@given('the document endpoints are mounted with if-match policy "{policy}"')
def step_mount_policy(context: Any, policy: str) -> None:
    _mount(context, policy=_POLICIES[policy])


# ------------------
# Requests
# ------------------


@when("I GET the document with its current ETag in If-None-Match")
def step_get_current(context: Any) -> None:
    etag = context.document_etag or compute_fingerprint(context.document)
    context.response = context.client.get("/doc", headers={"If-None-Match": etag})


@when("I GET the document with If-None-Match {value}")
def step_get_with(context: Any, value: str) -> None:
    context.response = context.client.get("/doc", headers={"If-None-Match": _unquote(value)})


@when("I GET the document without conditional headers")
def step_get_plain(context: Any) -> None:
    context.response = context.client.get("/doc")


@when("I PUT the document with If-Match {value}")
def step_put_with(context: Any, value: str) -> None:
    context.response = context.client.put("/doc", headers={"If-Match": _unquote(value)})


@when("I PUT the document without conditional headers")
def step_put_plain(context: Any) -> None:
    context.response = context.client.put("/doc")


# ------------------
# Assertions
# ------------------


@then("the response status is {status:d}")
def step_status(context: Any, status: int) -> None:
    actual = context.response.status_code
    assert actual == status, f"expected {status}, got {actual}: {context.response.text}"


@then("the response has no body")
def step_no_body(context: Any) -> None:
    assert context.response.content == b""


@then("the response ETag equals the document fingerprint")
def step_etag_header(context: Any) -> None:
    assert context.response.headers.get("ETag") == compute_fingerprint(context.document)


@then('the problem code is "{code}"')
def step_problem_code(context: Any, code: str) -> None:
    assert context.response.json().get("code") == code
