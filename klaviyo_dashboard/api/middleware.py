"""
API Middleware - Rate Limiting, Request Tracking, Cache Control

Middleware for the FastAPI application to handle:
- Rate limiting (prevent abuse)
- Request ID tracking (for debugging)
- Cache-Control headers (metrics are live and must never be cached)
"""

import time
import uuid
from collections.abc import Callable
from datetime import UTC, datetime, timedelta

from fastapi import FastAPI, Request, Response, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from klaviyo_dashboard.core import get_logger

logger = get_logger(__name__)

HEALTH_PATH = "/api/health"


# ============================================================
# Rate Limiting Middleware
# ============================================================


class RateLimitMiddleware(BaseHTTPMiddleware):
    """
    Rate limiting middleware to prevent API abuse.

    Implements a simple sliding window rate limiter per IP address.
    Health checks are never limited.

    Configuration:
        - requests_per_minute: Maximum requests per minute per IP
        - requests_per_hour: Maximum requests per hour per IP
    """

    def __init__(self, app, requests_per_minute: int = 60, requests_per_hour: int = 1000):
        super().__init__(app)
        self.requests_per_minute = requests_per_minute
        self.requests_per_hour = requests_per_hour

        # Track requests: {ip: [timestamp, ...]}
        self.request_times: dict[str, list[datetime]] = {}
        self._last_sweep = datetime.now(UTC)

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """Process request with rate limiting."""
        if request.url.path == HEALTH_PATH:
            return await call_next(request)

        client_ip = request.client.host if request.client else "unknown"

        is_allowed, reason = self._check_rate_limit(client_ip)
        if not is_allowed:
            logger.warning("Rate limit exceeded", extra={"ip": client_ip, "path": request.url.path, "reason": reason})
            return JSONResponse(
                status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                content={"detail": f"Rate limit exceeded: {reason}", "retry_after": 60},
                headers={"Retry-After": "60"},
            )

        self._record_request(client_ip)
        response = await call_next(request)

        response.headers["X-RateLimit-Limit"] = str(self.requests_per_minute)
        response.headers["X-RateLimit-Remaining"] = str(self._get_remaining_requests(client_ip))
        return response

    def _count_since(self, client_ip: str, since: datetime) -> int:
        return sum(1 for timestamp in self.request_times.get(client_ip, []) if timestamp >= since)

    def _check_rate_limit(self, client_ip: str) -> tuple[bool, str]:
        """
        Check if client has exceeded rate limits.

        Returns:
            Tuple of (is_allowed, reason)
        """
        now = datetime.now(UTC)

        if self._count_since(client_ip, now - timedelta(minutes=1)) >= self.requests_per_minute:
            return False, f"{self.requests_per_minute} requests per minute exceeded"

        if self._count_since(client_ip, now - timedelta(hours=1)) >= self.requests_per_hour:
            return False, f"{self.requests_per_hour} requests per hour exceeded"

        return True, ""

    def _record_request(self, client_ip: str) -> None:
        """Record a request, dropping entries older than an hour."""
        now = datetime.now(UTC)
        hour_ago = now - timedelta(hours=1)

        if now - self._last_sweep >= timedelta(minutes=1):
            self._sweep_idle(hour_ago)
            self._last_sweep = now

        recent = [t for t in self.request_times.get(client_ip, []) if t >= hour_ago]
        recent.append(now)
        self.request_times[client_ip] = recent

    def _sweep_idle(self, cutoff: datetime) -> None:
        """Forget IPs with no requests since cutoff."""
        for client_ip in list(self.request_times):
            recent = [t for t in self.request_times[client_ip] if t >= cutoff]
            if recent:
                self.request_times[client_ip] = recent
            else:
                del self.request_times[client_ip]

    def _get_remaining_requests(self, client_ip: str) -> int:
        """Get remaining requests for client in current minute."""
        used = self._count_since(client_ip, datetime.now(UTC) - timedelta(minutes=1))
        return max(0, self.requests_per_minute - used)


# ============================================================
# Request ID Middleware
# ============================================================


class RequestIDMiddleware(BaseHTTPMiddleware):
    """
    Add unique request ID to each request for tracing and debugging.

    Adds X-Request-ID header to both request and response.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """Add request ID to request and response."""
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        request.state.request_id = request_id

        logger.info(
            "API request",
            extra={
                "request_id": request_id,
                "method": request.method,
                "path": request.url.path,
                "client_ip": request.client.host if request.client else "unknown",
            },
        )

        start_time = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - start_time) * 1000

        response.headers["X-Request-ID"] = request_id

        logger.info(
            "API response",
            extra={"request_id": request_id, "status_code": response.status_code, "duration_ms": round(duration_ms, 2)},
        )
        return response


# ============================================================
# Cache Control Middleware
# ============================================================


class CacheControlMiddleware(BaseHTTPMiddleware):
    """
    Add Cache-Control headers.

    Strategies:
    - /api/metrics/*, /api/dashboard, /api/auth/*, /api/admin/*: no-store
      (live, per-client data and credentials)
    - /api/health: no-cache
    - /docs, /redoc, /openapi.json: 1 day cache (static docs)
    """

    PRIVATE_PREFIXES = ("/api/metrics", "/api/dashboard", "/api/auth", "/api/admin")

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """Add Cache-Control headers based on endpoint."""
        response = await call_next(request)
        path = request.url.path

        if path.startswith(self.PRIVATE_PREFIXES):
            response.headers["Cache-Control"] = "no-store"
        elif request.method != "GET" or response.status_code >= 400:
            return response
        elif path in ["/docs", "/redoc", "/openapi.json"]:
            response.headers["Cache-Control"] = "public, max-age=86400"
            response.headers["Expires"] = self._get_expires_header(86400)
        else:
            response.headers["Cache-Control"] = "no-cache, must-revalidate"

        return response

    def _get_expires_header(self, seconds: int) -> str:
        """Generate Expires header value."""
        expires_time = datetime.now(UTC) + timedelta(seconds=seconds)
        return expires_time.strftime("%a, %d %b %Y %H:%M:%S GMT")


# ============================================================
# CORS Middleware
# ============================================================


def add_cors_middleware(app: FastAPI, allow_origins: list[str]) -> None:
    """
    Add CORS middleware for the browser dashboard.

    Credentials are only allowed when origins are listed explicitly.
    """
    wildcard = "*" in allow_origins
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if wildcard else allow_origins,
        allow_credentials=not wildcard,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    logger.info("CORS middleware enabled", extra={"allow_origins": allow_origins})
