"""
API rate limiting - fixed windows per learner (or IP when anonymous).

- api: every /api/v1 request, rate_limit_api_per_minute per minute
- ai:  /api/v1/ai requests, additionally rate_limit_ai_per_hour per hour
"""

import time
from typing import Callable, Dict, Optional, Tuple

from fastapi import Request, Response, status
from starlette.middleware.base import BaseHTTPMiddleware

from fluentpath.api.deps import get_client_ip
from fluentpath.config import get_settings
from fluentpath.kernel.identity import verify_access_token
from fluentpath.logging_config import get_logger

logger = get_logger(__name__)


def _learner_id_from_token(request: Request) -> Optional[str]:
    """Learner id from a valid bearer token; authorization itself happens later."""
    auth = request.headers.get("authorization")
    if not auth or not auth.lower().startswith("bearer "):
        return None
    token = auth[7:].strip()
    if not token:
        return None
    payload = verify_access_token(token)
    return payload.sub if payload else None


class InMemoryRateLimitStore:
    """Fixed-window in-memory store. Key -> (count, window_start, window_seconds)."""

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._data: Dict[str, Tuple[int, float, int]] = {}
        self._clock = clock

    def check_and_incr(self, scope: str, identifier: str, limit: int, window_seconds: int) -> bool:
        """True if under the limit (and counted); False once the window is full."""
        key = f"{scope}:{identifier}"
        now = self._clock()
        entry = self._data.get(key)
        if entry is None or now - entry[1] >= entry[2]:
            self._data[key] = (1, now, window_seconds)
            return True
        count, start, window = entry
        if count >= limit:
            return False
        self._data[key] = (count + 1, start, window)
        return True

    def cleanup_old(self) -> None:
        """Drop expired windows so the store does not grow without bound."""
        now = self._clock()
        expired = [k for k, (_, start, window) in self._data.items() if now - start >= window]
        for k in expired:
            self._data.pop(k, None)

    def reset(self) -> None:
        self._data.clear()


# Module-level store (single process)
_store: Optional[InMemoryRateLimitStore] = None


def get_store() -> InMemoryRateLimitStore:
    global _store
    if _store is None:
        _store = InMemoryRateLimitStore()
    return _store


def _too_many(message: str) -> Response:
    return Response(
        content=f'{{"detail":"{message}"}}',
        status_code=status.HTTP_429_TOO_MANY_REQUESTS,
        media_type="application/json",
    )


class RateLimitMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        settings = get_settings()
        if not settings.rate_limit_enabled:
            return await call_next(request)

        path = request.url.path or ""
        if not path.startswith(settings.api_v1_prefix):
            return await call_next(request)

        store = get_store()
        store.cleanup_old()
        identifier = _learner_id_from_token(request) or get_client_ip(request)

        if not store.check_and_incr("api", identifier, settings.rate_limit_api_per_minute, 60):
            logger.warning("Rate limit exceeded", extra={"scope": "api", "path": path})
            return _too_many("Too many requests. Please try again later.")

        if path.startswith(f"{settings.api_v1_prefix}/ai/") and request.method == "POST":
            if not store.check_and_incr("ai", identifier, settings.rate_limit_ai_per_hour, 3600):
                logger.warning("Rate limit exceeded", extra={"scope": "ai", "path": path})
                return _too_many("AI request limit reached. Please try again later.")

        return await call_next(request)
