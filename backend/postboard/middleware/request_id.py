"""
Postboard Backend — Request ID Middleware
============================================

What:  Assigns a correlation id to each request and returns it in X-Request-ID.
How:   A client-supplied X-Request-ID is reused only when it is a short token
       of letters, digits, '.', '_' or '-'; anything else (too long, spaces,
       control characters) is replaced by a fresh short UUID. The id ends up
       in access-log lines, error bodies and the response header, so it must
       never carry text a client could use to forge a log line.

       The id is stored in a ContextVar so services, loggers and exception
       handlers can read it without threading it through calls.
"""

import re
import uuid
from contextvars import ContextVar
from typing import Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

REQUEST_ID_HEADER = "X-Request-ID"
MAX_REQUEST_ID_LENGTH = 64

_REQUEST_ID_PATTERN = re.compile(r"[A-Za-z0-9._-]{1,%d}" % MAX_REQUEST_ID_LENGTH)

# Coroutine-local: concurrent requests on one event loop each see their own id
request_id_var: ContextVar[str] = ContextVar("request_id", default="")


def new_request_id() -> str:
    return uuid.uuid4().hex[:8]


def accept_request_id(candidate: Optional[str]) -> str:
    """The client's id when it is a safe token, otherwise a generated one."""
    if candidate and _REQUEST_ID_PATTERN.fullmatch(candidate):
        return candidate
    return new_request_id()


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Sets request_id_var and request.state.request_id; echoes the id back."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = accept_request_id(request.headers.get(REQUEST_ID_HEADER))

        request_id_var.set(rid)
        request.state.request_id = rid

        response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = rid
        return response
