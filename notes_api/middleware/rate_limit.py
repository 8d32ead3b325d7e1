"""
Rate Limiting Middleware

Per-client rate limiting using a token bucket stored in Redis.

Each client IP gets a bucket holding `max_requests` tokens that refills
evenly over `window_seconds` (100 requests per 15 minutes by default).
Login is covered too, which is where limiting matters most.

If Redis is not configured or not reachable, requests are let through
and a warning is logged: availability over strict limiting.
"""
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse
from typing import Optional, Tuple
import redis
import time
import logging

from notes_api.utils.logging import log_security_event

logger = logging.getLogger(__name__)


def create_redis_client(url: Optional[str]) -> Optional[redis.Redis]:
    """Connect to Redis for rate limiting; None if unset or unreachable."""
    if not url:
        return None

    try:
        client = redis.from_url(
            url,
            decode_responses=True,
            socket_connect_timeout=5
        )
        client.ping()
        logger.info("Redis connection established for rate limiting")
        return client
    except (redis.ConnectionError, redis.TimeoutError) as e:
        logger.error(f"Redis connection failed: {e}")
        return None


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Token bucket rate limiter keyed by client IP."""

    def __init__(
        self,
        app,
        redis_client: Optional[redis.Redis] = None,
        max_requests: int = 100,
        window_seconds: int = 900
    ):
        super().__init__(app)
        self.redis_client = redis_client
        self.max_requests = max_requests
        self.window_seconds = window_seconds

        self.excluded_paths = [
            "/docs",
            "/redoc",
            "/openapi.json",
            "/health",
        ]

        if self.redis_client is None:
            logger.warning("Rate limiting disabled - Redis unavailable")

    async def dispatch(self, request: Request, call_next):
        if self.redis_client is None:
            return await call_next(request)

        if any(request.url.path.startswith(path) for path in self.excluded_paths):
            return await call_next(request)

        client_id = self._get_client_identifier(request)
        allowed, retry_after = self._check_rate_limit(client_id)

        if not allowed:
            log_security_event(
                "rate_limit_exceeded",
                {"client": client_id, "path": request.url.path},
                logger
            )
            return JSONResponse(
                status_code=429,
                content={
                    "message": "Too many requests, please try again later",
                    "retry_after": retry_after
                },
                headers={"Retry-After": str(retry_after)}
            )

        return await call_next(request)

    def _check_rate_limit(self, client_id: str) -> Tuple[bool, int]:
        """
        Consume one token from the client's bucket.

        The read and the write run as one WATCH/MULTI transaction; redis-py
        retries it when a parallel request touched the bucket in between,
        so two requests can never spend the same token.

        Returns: (allowed, retry_after_seconds)
        """
        key = f"rate_limit:{client_id}"
        key_timestamp = f"{key}:timestamp"

        try:
            return self.redis_client.transaction(
                lambda pipe: self._consume_token(pipe, key, key_timestamp),
                key,
                key_timestamp,
                value_from_callable=True
            )
        except redis.RedisError as e:
            logger.error(f"Redis error in rate limiting: {e}")
            return True, 0

    def _consume_token(self, pipe, key: str, key_timestamp: str) -> Tuple[bool, int]:
        # Watched keys: reads run immediately until multi() starts buffering
        current_tokens = pipe.get(key)
        last_update = pipe.get(key_timestamp)

        now = time.time()
        refill_per_second = self.max_requests / float(self.window_seconds)

        if current_tokens is None:
            # First request - start with a full bucket minus this request
            new_tokens = self.max_requests - 1
        else:
            current_tokens = float(current_tokens)
            last_update = float(last_update) if last_update else now
            elapsed = max(0.0, now - last_update)
            new_tokens = min(self.max_requests, current_tokens + elapsed * refill_per_second)

            if new_tokens < 1:
                pipe.multi()
                tokens_needed = 1 - new_tokens
                return False, int(tokens_needed / refill_per_second) + 1

            new_tokens -= 1

        pipe.multi()
        pipe.setex(key, self.window_seconds, new_tokens)
        pipe.setex(key_timestamp, self.window_seconds, now)
        return True, 0

    def _get_client_identifier(self, request: Request) -> str:
        if request.client:
            return request.client.host
        return "unknown"
