"""API middleware for request processing."""

import logging
import time
import uuid
from collections import defaultdict
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse

logger = logging.getLogger(__name__)

_STALE_CLIENT_THRESHOLD = 300  # seconds before a silent client's entry is evicted
REQUEST_ID_HEADER = "X-Request-ID"


class LoggingMiddleware(BaseHTTPMiddleware):
    """Logs each request and response under a request id."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        start_time = time.monotonic()
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        request.state.request_id = request_id

        logger.info(
            "Request: %s %s",
            request.method,
            request.url.path,
            extra={
                "request_id": request_id,
                "method": request.method,
                "path": request.url.path,
                "client": request.client.host if request.client else "unknown",
            },
        )

        try:
            response = await call_next(request)
        except Exception as e:
            process_time = time.monotonic() - start_time
            logger.error(
                "Request %s %s failed after %.3fs: %s",
                request.method,
                request.url.path,
                process_time,
                e,
                extra={"request_id": request_id, "process_time_s": round(process_time, 3)},
            )
            raise

        process_time = time.monotonic() - start_time
        log = logger.warning if response.status_code >= 500 else logger.info
        log(
            "Response: %s %s -> %s in %.3fs",
            request.method,
            request.url.path,
            response.status_code,
            process_time,
            extra={
                "request_id": request_id,
                "status_code": response.status_code,
                "process_time_s": round(process_time, 3),
            },
        )

        response.headers["X-Process-Time"] = f"{process_time:.3f}"
        response.headers[REQUEST_ID_HEADER] = request_id
        return response


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Sliding-window per-client rate limiting.

    Each client may make ``max_requests`` requests in any ``period`` seconds.
    Idle clients are evicted periodically so the table stays bounded.
    """

    def __init__(self, app, max_requests: int = 120, period: int = 60) -> None:
        super().__init__(app)
        self.max_requests = max_requests
        self.period = period
        self._stale_after = max(_STALE_CLIENT_THRESHOLD, period)
        self._request_counts: dict[str, list[float]] = defaultdict(list)
        self._last_cleanup = time.monotonic()

    def _cleanup_stale_clients(self, now: float) -> None:
        if now - self._last_cleanup < self._stale_after:
            return
        cutoff = now - self._stale_after
        stale = [cid for cid, ts in self._request_counts.items() if not ts or ts[-1] < cutoff]
        for cid in stale:
            del self._request_counts[cid]
        self._last_cleanup = now

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        client_id = request.client.host if request.client else "unknown"
        now = time.monotonic()
        window_start = now - self.period

        self._cleanup_stale_clients(now)
        recent = [t for t in self._request_counts[client_id] if t > window_start]
        self._request_counts[client_id] = recent

        if len(recent) >= self.max_requests:
            retry_after = max(1, int(recent[0] + self.period - now) + 1)
            logger.warning("Rate limit exceeded for %s", client_id)
            return JSONResponse(
                status_code=429,
                content={"error": "RateLimitExceeded", "detail": f"Retry after {retry_after} seconds"},
                headers={"Retry-After": str(retry_after)},
            )

        recent.append(now)
        return await call_next(request)
