from __future__ import annotations

from .api_versions import ApiVersionsHeaderMiddleware
from .request_id import RequestIdMiddleware, request_id_ctx_var

__all__ = [
    "ApiVersionsHeaderMiddleware",
    "RequestIdMiddleware",
    "request_id_ctx_var",
]
