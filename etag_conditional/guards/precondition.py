"""FastAPI glue for conditional requests.

Reads ``If-Match`` / ``If-None-Match`` from the request, delegates the
decision to ``etag_conditional.logic.preconditions`` and turns the outcome
into a response: 304 Not Modified, a JSON body carrying an ``ETag``, or a
409 Conflict problem.

Usage::

    async def load_item(request: Request) -> PayloadEnvelope:
        item = await repo.get(request.path_params["item_id"])
        request.state.item = item
        return PayloadEnvelope(body=item.as_dict(), etag=f'"v{item.version}"')

    router.add_api_route("/items/{item_id}", if_none_match_handler(load_item), methods=["GET"])

    @router.put("/items/{item_id}", dependencies=[Depends(if_match_handler(load_item))])
    async def update_item(request: Request) -> dict: ...
"""

from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable, Optional

from fastapi import HTTPException, Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse, Response

from etag_conditional.config import load_config
from etag_conditional.logic.fingerprint import EtagOptions
from etag_conditional.logic.header_emitter import emit_etag_header
from etag_conditional.logic.header_match import HeaderValue
from etag_conditional.logic.preconditions import (
    IF_MATCH,
    IF_NONE_MATCH,
    enforce_match_or_reject,
    resolve_fingerprint,
    respond_if_none_match,
)
from etag_conditional.logic.problem_factory import problem_etag_mismatch
from etag_conditional.models.envelope import MissingPolicy, PayloadEnvelope


logger = logging.getLogger(__name__)

PayloadCallback = Callable[[Request], Awaitable[Any]]

SUPPORTED_PAYLOAD_TYPES = frozenset({"json"})


def request_header_value(request: Request, name: str) -> HeaderValue:
    """Return all received values of header ``name``.

    None when absent, a str for a single field line, a list when the
    client sent the header more than once.
    """
    values = request.headers.getlist(name)
    if not values:
        return None
    if len(values) == 1:
        return values[0]
    return list(values)


def _json_body(body: Any, fingerprint: Optional[str], status_code: int = 200) -> JSONResponse:
    response = JSONResponse(jsonable_encoder(body), status_code=status_code)
    emit_etag_header(response, fingerprint)
    return response


def _not_modified() -> Response:
    return Response(status_code=304)


def json_etag_response(payload: Any, status_code: int = 200, options: Optional[EtagOptions] = None) -> JSONResponse:
    """Return the payload body as JSON with its ETag attached."""
    envelope = PayloadEnvelope.wrap(payload)
    return _json_body(envelope.body, resolve_fingerprint(envelope, options), status_code)


def json_if_none_match(
    payload: Any,
    request: Request,
    throws_error: bool = False,
    options: Optional[EtagOptions] = None,
) -> Response:
    """Return 304 when the client already has the payload, else the JSON body.

    Raises PreconditionMissingError when ``throws_error`` and the header is absent.
    """
    return respond_if_none_match(
        payload,
        request_header_value(request, IF_NONE_MATCH),
        emit_not_modified=_not_modified,
        emit_body=_json_body,
        throws_error=throws_error,
        options=options,
    )


def if_match_function(
    payload: Any,
    request: Request,
    error: Optional[BaseException] = None,
    on_missing: MissingPolicy = True,
    options: Optional[EtagOptions] = None,
) -> None:
    """Raise unless the request's If-Match holds for ``payload``.

    On mismatch ``error`` is raised unchanged when given, otherwise a 409
    problem HTTPException.
    """

    def _conflict() -> None:
        raise HTTPException(status_code=409, detail=problem_etag_mismatch())

    enforce_match_or_reject(
        payload,
        request_header_value(request, IF_MATCH),
        on_conflict=_conflict,
        error=error,
        on_missing=on_missing,
        options=options,
    )


def if_none_match_handler(
    payload_callback: PayloadCallback,
    throws_error: Optional[bool] = None,
    payload_type: str = "json",
) -> Callable[[Request], Awaitable[Response]]:
    """Build an endpoint that answers 304 when the client's copy is current.

    ``throws_error`` defaults to the configured ``if_none_match_strict``.
    """
    if payload_type not in SUPPORTED_PAYLOAD_TYPES:
        raise ValueError("Invalid payload type")
    cfg = load_config()
    strict = cfg.if_none_match_strict if throws_error is None else throws_error
    options = cfg.etag_options

    async def endpoint(request: Request) -> Response:
        payload = await payload_callback(request)
        return json_if_none_match(payload, request, throws_error=strict, options=options)

    return endpoint


def if_match_handler(
    payload_callback: PayloadCallback,
    error: Optional[BaseException] = None,
    on_missing: Optional[MissingPolicy] = None,
) -> Callable[[Request], Awaitable[Any]]:
    """Build a dependency that lets a write through only when If-Match holds.

    The resolved payload is returned and stored on ``request.state.etag_payload``
    for the route handler. ``on_missing`` defaults to the configured policy.
    """
    cfg = load_config()
    policy = cfg.missing_policy if on_missing is None else on_missing
    options = cfg.etag_options

    async def dependency(request: Request) -> Any:
        payload = await payload_callback(request)
        if_match_function(payload, request, error=error, on_missing=policy, options=options)
        request.state.etag_payload = payload
        return payload

    return dependency


__all__ = [
    "request_header_value",
    "json_etag_response",
    "json_if_none_match",
    "if_match_function",
    "if_none_match_handler",
    "if_match_handler",
]
