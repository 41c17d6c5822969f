"""Security headers middleware for FileServe.

This middleware adds security headers to all HTTP responses to protect
against MIME type sniffing, clickjacking and content injection when served
files are opened directly in a browser.
"""

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from fileserve.core.config import get_settings

# Interactive docs load scripts and styles from a CDN
_DOCS_PATHS = ("/docs", "/redoc")


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Middleware to add security headers to all responses.

    Headers added:
    - X-Content-Type-Options: Prevents MIME type sniffing
    - X-Frame-Options: Prevents clickjacking attacks
    - Strict-Transport-Security: Enforces HTTPS (production only)
    - Content-Security-Policy: Prevents XSS (not on the docs pages)
    - Referrer-Policy: Controls referrer information
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        settings = get_settings()

        response = await call_next(request)

        if not settings.security_headers_enabled:
            return response

        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"

        if settings.is_production:
            response.headers["Strict-Transport-Security"] = (
                f"max-age={settings.hsts_max_age}; includeSubDomains"
            )

        if not request.url.path.startswith(_DOCS_PATHS):
            response.headers["Content-Security-Policy"] = settings.csp_policy

        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"

        return response
