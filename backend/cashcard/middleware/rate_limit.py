"""
Cash Card Service - Rate Limiting Middleware
==============================================

What:  Per-IP sliding window rate limiter.
How:   Keeps the request timestamps of each client IP in memory, drops the
       ones older than the window, and answers 429 once the window is full.

Algorithm: Sliding Window Log
    1. Each IP gets a list of request timestamps
    2. On each request, remove timestamps older than the window
    3. If remaining count >= limit, reject with 429 and Retry-After
    4. Otherwise, record the current timestamp and continue

State lives in the process, so each worker enforces its own budget.
"""

import logging
import time
from collections import defaultdict
from typing import Dict, List

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from cashcard.config import settings
from cashcard.middleware.request_id import request_id_var

logger = logging.getLogger(__name__)


class RateLimitMiddleware(BaseHTTPMiddleware):
    """
    In-memory sliding window rate limiter.

    Configuration (from settings):
        rate_limit_requests: Max requests per window (default: 100)
        rate_limit_window: Window duration in seconds (default: 3600)
    """

    EXCLUDED_PATHS = {"/health", "/docs", "/openapi.json", "/redoc"}

    def __init__(self, app, **kwargs):
        super().__init__(app, **kwargs)
        self._requests: Dict[str, List[float]] = defaultdict(list)

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path in self.EXCLUDED_PATHS:
            return await call_next(request)

        client_ip = (
            getattr(request.client, "host", "unknown")
            if request.client
            else "unknown"
        )

        now = time.time()
        window_start = now - settings.rate_limit_window

        self._requests[client_ip] = [
            ts for ts in self._requests[client_ip] if ts > window_start
        ]

        if len(self._requests[client_ip]) >= settings.rate_limit_requests:
            oldest = self._requests[client_ip][0]
            retry_after = int(oldest + settings.rate_limit_window - now) + 1

            logger.warning(
                "Rate limit exceeded for IP %s: %d requests in %ds window",
                client_ip,
                len(self._requests[client_ip]),
                settings.rate_limit_window,
            )

            return JSONResponse(
                status_code=429,
                content={
                    "error": "rate_limit_exceeded",
                    "message": f"Too many requests. Please wait {retry_after} seconds before retrying.",
                    "details": {"retry_after": retry_after},
                    "request_id": request_id_var.get(""),
                },
                headers={"Retry-After": str(retry_after)},
            )

        self._requests[client_ip].append(now)

        # Every 1000th tracked request, forget IPs that went quiet
        if sum(len(v) for v in self._requests.values()) % 1000 == 0:
            self._cleanup_inactive_ips(window_start)

        return await call_next(request)

    def _cleanup_inactive_ips(self, window_start: float) -> None:
        """Remove IPs that have no requests within the current window."""
        inactive_ips = [
            ip for ip, timestamps in self._requests.items()
            if not timestamps or max(timestamps) < window_start
        ]
        for ip in inactive_ips:
            del self._requests[ip]

        if inactive_ips:
            logger.debug("Cleaned up %d inactive IP entries", len(inactive_ips))
