"""
Security headers for a JSON-only API.
"""
from typing import Dict, Optional

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response
from core.config import settings

HSTS_MAX_AGE_SECONDS = 365 * 24 * 3600

# Interactive docs load scripts and styles; only reachable when DEBUG is on
DOCS_PATHS = ("/docs", "/redoc", "/openapi.json")


def build_security_headers(debug: bool) -> Dict[str, str]:
    headers = {
        "X-Content-Type-Options": "nosniff",
        "X-Frame-Options": "DENY",
        "Referrer-Policy": "no-referrer",
        "Cache-Control": "no-store",
    }
    if not debug:
        headers["Strict-Transport-Security"] = f"max-age={HSTS_MAX_AGE_SECONDS}; includeSubDomains"
        headers["Content-Security-Policy"] = "default-src 'none'; frame-ancestors 'none'"
    return headers


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Adds the headers from build_security_headers to every response."""

    def __init__(self, app, debug: Optional[bool] = None):
        super().__init__(app)
        self.headers = build_security_headers(settings.DEBUG if debug is None else debug)

    async def dispatch(self, request: Request, call_next) -> Response:
        response = await call_next(request)
        for name, value in self.headers.items():
            if name == "Content-Security-Policy" and request.url.path.startswith(DOCS_PATHS):
                continue
            response.headers.setdefault(name, value)
        return response
