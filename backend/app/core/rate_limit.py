"""In-memory sliding-window rate limiting keyed by client IP."""

from __future__ import annotations

import time
from collections import defaultdict

from fastapi import HTTPException, Request, status


class RateLimiter:
    """Allow ``max_requests`` per ``window_seconds`` for each client."""

    def __init__(self, max_requests: int = 5, window_seconds: int = 60):
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._requests: dict[str, list[float]] = defaultdict(list)

    def _get_client_ip(self, request: Request) -> str:
        forwarded = request.headers.get("x-forwarded-for")
        if forwarded:
            return forwarded.split(",")[0].strip()
        return request.client.host if request.client else "unknown"

    def _cleanup(self, key: str, now: float) -> None:
        cutoff = now - self.window_seconds
        self._requests[key] = [t for t in self._requests[key] if t > cutoff]

    def reset(self) -> None:
        self._requests.clear()

    def check(self, request: Request) -> None:
        """Raise 429 if the caller exceeded the window."""
        now = time.time()
        key = self._get_client_ip(request)
        self._cleanup(key, now)

        if len(self._requests[key]) >= self.max_requests:
            raise HTTPException(
                status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                detail=f"Rate limit exceeded. Max {self.max_requests} requests per {self.window_seconds}s.",
            )

        self._requests[key].append(now)


auth_limiter = RateLimiter(max_requests=10, window_seconds=60)
prediction_limiter = RateLimiter(max_requests=30, window_seconds=60)
# Each optimization evaluates the full angle grid
optimization_limiter = RateLimiter(max_requests=5, window_seconds=60)
weather_limiter = RateLimiter(max_requests=30, window_seconds=60)

ALL_LIMITERS = (auth_limiter, prediction_limiter, optimization_limiter, weather_limiter)
