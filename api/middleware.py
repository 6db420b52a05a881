"""
Global middleware and the request-body sanitisation gate.
"""

import json
import logging
import time
from typing import Any, Optional, Tuple

from fastapi import FastAPI, Request

from utils.errors import ValidationError
from utils.sanitise import is_invalid

logger = logging.getLogger(__name__)

MUTATING_METHODS = frozenset({"POST", "PUT", "PATCH"})


def first_invalid_field(payload: Any, fields: Tuple[str, ...]) -> Optional[str]:
    """
    Return the first of *fields* whose string value fails the sanitiser.

    Non-string values are not inspected, nor are keys outside *fields*.
    """
    if not isinstance(payload, dict) or not payload:
        return None
    for name in fields:
        value = payload.get(name)
        if isinstance(value, str) and is_invalid(value):
            return name
    return None


class SanitisedBody:
    """
    Dependency that rejects a mutating request if any of the declared
    string fields contains whitespace or emoji.

    Attach through the route decorator so it runs before authentication
    and body parsing::

        @router.post("/signup", dependencies=[Depends(SanitisedBody("username", ...))])
    """

    def __init__(self, *fields: str) -> None:
        self.fields = fields

    async def __call__(self, request: Request) -> None:
        if request.method not in MUTATING_METHODS:
            return
        body = await request.body()
        if not body:
            return
        try:
            payload = json.loads(body)
        except ValueError:
            # malformed JSON is reported by FastAPI's own body validation
            return
        field = first_invalid_field(payload, self.fields)
        if field is not None:
            logger.info("Rejected %s %s: field %r failed sanitiser", request.method, request.url.path, field)
            raise ValidationError(f'Field "{field}" contains whitespace or emoji')


def register_middleware(app: FastAPI) -> None:
    """Attach any app-level middleware."""

    @app.middleware("http")
    async def request_timer(request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        elapsed = time.perf_counter() - start
        response.headers["X-Process-Time"] = f"{elapsed:.4f}"
        logger.debug("%s %s — %.3fs", request.method, request.url.path, elapsed)
        return response
