"""Pre-body If-Match presence middleware.

Rejects write requests on selected paths that arrive without an
``If-Match`` header with 428 PRE_IF_MATCH_MISSING, before any dependency
evaluation or body parsing. It performs no comparison; matching stays with
``etag_conditional.guards.precondition``.
"""

from __future__ import annotations

import json
import re
from typing import Iterable, Pattern, Sequence, Tuple

from etag_conditional.http.problem import PROBLEM_MEDIA_TYPE
from etag_conditional.logic.problem_factory import problem_precondition_missing

DEFAULT_WRITE_METHODS = frozenset({"PATCH", "POST", "DELETE", "PUT"})


def _headers(scope_headers: Iterable[Tuple[bytes, bytes]]):
    for k, v in scope_headers or []:
        yield (k.decode("latin-1").lower(), v.decode("latin-1"))


class RequireIfMatchMiddleware:
    """ASGI middleware enforcing If-Match presence on write routes.

    ``path_patterns`` are full-match regexes; an empty list guards every path.
    """

    def __init__(
        self,
        app,  # type: ignore[no-untyped-def]
        path_patterns: Sequence[str] = (),
        methods: Iterable[str] = DEFAULT_WRITE_METHODS,
    ) -> None:
        self.app = app
        self.patterns: list[Pattern[str]] = [re.compile(p) for p in path_patterns]
        self.methods = frozenset(m.upper() for m in methods)

    def _applies(self, method: str, path: str) -> bool:
        if method not in self.methods:
            return False
        if not self.patterns:
            return True
        return any(p.fullmatch(path) for p in self.patterns)

    async def __call__(self, scope, receive, send):  # type: ignore[no-untyped-def]
        if scope.get("type") != "http":
            await self.app(scope, receive, send)
            return

        method = str(scope.get("method") or "").upper()
        path = str(scope.get("path") or "")
        if not self._applies(method, path):
            await self.app(scope, receive, send)
            return

        header_names = {k for k, _ in _headers(scope.get("headers") or [])}
        if "if-match" in header_names:
            await self.app(scope, receive, send)
            return

        problem = problem_precondition_missing("if-match")
        body = json.dumps(problem).encode("utf-8")
        await send(
            {
                "type": "http.response.start",
                "status": int(problem["status"]),
                "headers": [
                    (b"content-type", PROBLEM_MEDIA_TYPE.encode("latin-1")),
                    (b"content-length", str(len(body)).encode("latin-1")),
                ],
            }
        )
        await send({"type": "http.response.body", "body": body, "more_body": False})


__all__ = ["RequireIfMatchMiddleware", "DEFAULT_WRITE_METHODS"]
