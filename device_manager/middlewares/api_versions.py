from __future__ import annotations

from typing import Iterable

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response


class ApiVersionsHeaderMiddleware(BaseHTTPMiddleware):
    """Advertise the supported API versions on every ``/api`` response."""

    def __init__(self, app, versions: Iterable[str], header_name: str = "api-supported-versions") -> None:  # type: ignore[override]
        super().__init__(app)
        self.header_name = header_name
        self.header_value = ", ".join(versions)

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        response = await call_next(request)
        if request.url.path.startswith("/api"):
            response.headers.setdefault(self.header_name, self.header_value)
        return response
