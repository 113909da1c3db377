"""
Request Logging Middleware

Logs every API request with its duration and tags the response with a request id.
Requests slower than SLOW_REQUEST_THRESHOLD are reported as slow.
"""

import time
import uuid
from typing import Callable
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from clinica.core.config import settings
from clinica.logging import get_logger

logger = get_logger(__name__)

SKIPPED_PATHS = ["/", "/health", "/docs", "/openapi.json"]


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Middleware to log API access.

    Captures:
    - Request details (path, method, client IP)
    - Response status and duration
    - Request id (X-Request-ID header, generated when absent)
    """

    def __init__(self, app: ASGIApp, enabled: bool = True, slow_threshold: float = None):
        """
        Args:
            app: FastAPI application
            enabled: Whether logging is enabled (can be disabled in tests)
            slow_threshold: Seconds after which a request is logged as slow
        """
        super().__init__(app)
        self.enabled = enabled
        self.slow_threshold = slow_threshold if slow_threshold is not None else settings.SLOW_REQUEST_THRESHOLD

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        if not self.enabled or request.url.path in SKIPPED_PATHS:
            return await call_next(request)

        request_id = request.headers.get("x-request-id") or str(uuid.uuid4())
        request.state.request_id = request_id

        start_time = time.perf_counter()
        response = await call_next(request)
        duration = round(time.perf_counter() - start_time, 4)

        context = {
            "request_id": request_id,
            "ip": self._get_client_ip(request),
        }
        logger.request(
            "API request",
            method=request.method,
            path=request.url.path,
            status_code=response.status_code,
            duration=duration,
            **context
        )
        if duration > self.slow_threshold:
            logger.slow(
                "Request took too long",
                duration=duration,
                threshold=self.slow_threshold,
                path=request.url.path,
                **context
            )

        response.headers["X-Request-ID"] = request_id
        return response

    def _get_client_ip(self, request: Request) -> str:
        """
        Client IP address, preferring the first X-Forwarded-For hop (proxied requests).
        """
        forwarded_for = request.headers.get("x-forwarded-for")
        if forwarded_for:
            return forwarded_for.split(",")[0].strip()

        if request.client:
            return request.client.host

        return "unknown"
