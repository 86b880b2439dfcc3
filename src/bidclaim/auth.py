"""API key authentication for operator endpoints.

When API_KEY is set in .env, /api/ endpoints require either:
- Header: X-API-Key: <key>
- Query param: ?api_key=<key>

The claimant-facing endpoints (check, claim, claim-free, county listings)
and the health check stay public.
"""

from __future__ import annotations

import re
import secrets

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse

from .config import settings

PUBLIC_PATHS = {
    "/api/health",
    "/api/auctions/check",
    "/api/auctions/claim",
    "/api/auctions/claim-free",
    "/api/openapi.json",
}
_COUNTY_AUCTIONS = re.compile(r"^/api/counties/[^/]+/auctions/?$")


def is_public(method: str, path: str) -> bool:
    if path in PUBLIC_PATHS:
        return True
    return method == "GET" and bool(_COUNTY_AUCTIONS.match(path))


class ApiKeyMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        if not settings.api_key:
            return await call_next(request)

        path = request.url.path
        if not path.startswith("/api/") or is_public(request.method, path):
            return await call_next(request)

        key = request.headers.get("X-API-Key") or request.query_params.get("api_key")
        if not key or not secrets.compare_digest(key, settings.api_key):
            return JSONResponse(
                status_code=401,
                content={"success": False, "message": "Invalid or missing API key"},
            )

        return await call_next(request)
