"""In-memory request rate limiting for the HTTP layer."""

from __future__ import annotations

import asyncio
import time
from collections import defaultdict, deque
from collections.abc import Awaitable, Callable
from functools import lru_cache
from typing import Any

from fastapi import HTTPException, Request, Response
from loguru import logger

from src.splicer.runtime.context import get_config

RateLimiterType = Callable[[Request, Response], Awaitable[Any]]

_local_limiters: list[LocalRateLimiter] = []


class LocalRateLimiter:
    """Sliding-window limiter keyed by user (when known) or client address."""

    def __init__(
        self, times: int, milliseconds: int, per_endpoint: bool, per_method: bool
    ) -> None:
        self._hits: defaultdict[str, deque[float]] = defaultdict(deque)
        self._lock = asyncio.Lock()
        self._times = times
        self._seconds = milliseconds / 1000
        self._per_endpoint = per_endpoint
        self._per_method = per_method
        self._last_cleanup = time.monotonic()
        self._cleanup_interval = 60.0  # seconds

    async def __call__(self, request: Request, response: Response) -> None:
        await self._throttle(self._make_key(request))

    def _make_key(self, request: Request) -> str:
        uid = getattr(request.state, "uid", None)
        if uid is not None:
            ident = f"user:{uid}"
        else:
            client_host = request.client.host if request.client else "anonymous"
            ident = f"ip:{client_host}"

        parts = [ident]
        if self._per_method:
            parts.append(request.method)
        if self._per_endpoint:
            route = request.scope.get("route")
            template = getattr(route, "path", None)
            parts.append((template or request.url.path).rstrip("/"))
        return ":".join(parts)

    def _cleanup_old_keys(self, now: float) -> None:
        if now - self._last_cleanup < self._cleanup_interval:
            return
        self._last_cleanup = now
        stale = [
            key
            for key, hits in self._hits.items()
            if not hits or hits[-1] <= now - self._seconds
        ]
        for key in stale:
            del self._hits[key]

    async def cleanup(self) -> None:
        async with self._lock:
            tracked = len(self._hits)
            self._hits.clear()
        logger.debug("Cleaned up local rate limiter with {} tracked keys", tracked)

    async def _throttle(self, key: str) -> None:
        now = time.monotonic()
        window_start = now - self._seconds
        async with self._lock:
            self._cleanup_old_keys(now)
            hits = self._hits[key]
            while hits and hits[0] <= window_start:
                hits.popleft()
            if len(hits) >= self._times:
                retry_after = max(0, int(self._seconds - (now - hits[0])))
                logger.warning("Rate limit exceeded for {}", key)
                raise HTTPException(
                    status_code=429,
                    detail="Too Many Requests",
                    headers={"Retry-After": str(retry_after)},
                )
            hits.append(now)


@lru_cache(maxsize=100)
def _create_rate_limiter(
    requests: int, window_ms: int, per_endpoint: bool, per_method: bool
) -> LocalRateLimiter:
    limiter = LocalRateLimiter(requests, window_ms, per_endpoint, per_method)
    _local_limiters.append(limiter)
    return limiter


def get_rate_limiter(
    requests: int | None = None, window_ms: int | None = None
) -> LocalRateLimiter:
    """Get the shared limiter instance for the given quota."""
    config = get_config().rate_limiter
    return _create_rate_limiter(
        requests if requests is not None else config.requests,
        window_ms if window_ms is not None else config.window_ms,
        config.per_endpoint,
        config.per_method,
    )


def rate_limit(
    requests: int | None = None, window_ms: int | None = None
) -> RateLimiterType:
    """Return a dependency enforcing request quotas (configured defaults if omitted)."""

    async def dependency(request: Request, response: Response) -> None:
        if not get_config().rate_limiter.enabled:
            return
        await get_rate_limiter(requests, window_ms)(request, response)

    return dependency


async def close_rate_limiter() -> None:
    """Drop every limiter instance and its recorded hits."""
    _create_rate_limiter.cache_clear()
    for limiter in _local_limiters:
        await limiter.cleanup()
    logger.info("Rate limiter cleanup completed ({} limiters)", len(_local_limiters))
    _local_limiters.clear()
