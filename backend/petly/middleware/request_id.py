"""
Petly Backend: Request ID Middleware
======================================

What:  Assigns a correlation id to each incoming request and returns it in
       the `X-Request-ID` response header.
How:   Uses the client's X-Request-ID when sent, otherwise a short UUID.
       The id lives in a ContextVar so loggers and exception handlers can
       read it without a handle on the request.
When:  Outermost middleware; runs before logging and the route.
"""

import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

# Coroutine-local: concurrent requests on one event loop each see their own id
request_id_var: ContextVar[str] = ContextVar("request_id", default="")


class RequestIDMiddleware(BaseHTTPMiddleware):

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        # 8 characters is plenty for correlating log lines
        rid = request.headers.get("X-Request-ID", str(uuid.uuid4())[:8])
        request_id_var.set(rid)
        request.state.request_id = rid

        response = await call_next(request)
        response.headers["X-Request-ID"] = rid
        return response
