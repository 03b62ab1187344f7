"""
Request Throttling

slowapi guards the catalog against clients hammering it. Each client is
identified by IP, and reads and writes get separate budgets:

    Route kind           | Setting
    ---------------------|----------------------------
    list / get           | settings.rate_limit_default
    create/update/delete | settings.rate_limit_write

SlowAPIMiddleware (registered in main.py) applies the default budget to
every route. Routers add @limiter.limit(...) for the per-kind budget.
Counters live in settings.rate_limit_storage_uri ("memory://" keeps them
per process).
"""

import logging

from fastapi import Request, status
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address
from starlette.responses import JSONResponse

from library_api.config import get_settings

logger = logging.getLogger(__name__)
settings = get_settings()

# Seconds per window for the periods slowapi understands
_WINDOW_SECONDS = {
    "second": 1,
    "minute": 60,
    "hour": 3600,
    "day": 86400,
}


def get_client_ip(request: Request) -> str:
    """
    Identify the caller for throttling.

    Behind a proxy the left-most X-Forwarded-For entry is the original
    client; nginx sets X-Real-IP instead. Without either header the peer
    address of the connection is used.
    """
    forwarded = request.headers.get("X-Forwarded-For", "")
    client = forwarded.split(",")[0].strip()
    if client:
        return client

    client = request.headers.get("X-Real-IP", "").strip()
    return client or get_remote_address(request)


def retry_after_seconds(limit: str) -> int:
    """Window length of a limit such as "30 per 1 minute" or "30/minute"."""
    words = limit.replace("/", " per ").split("per", 1)[-1].split()
    count = int(words[0]) if words and words[0].isdigit() else 1
    unit = words[-1].lower().rstrip("s") if words else "minute"
    return count * _WINDOW_SECONDS.get(unit, 60)


def create_limiter() -> Limiter:
    """Build the process-wide Limiter from settings."""
    catalog_limiter = Limiter(
        key_func=get_client_ip,
        default_limits=[settings.rate_limit_default],
        storage_uri=settings.rate_limit_storage_uri,
        strategy="fixed-window",
        enabled=settings.rate_limit_enabled,
    )
    logger.info(
        f"Throttling {'on' if settings.rate_limit_enabled else 'off'} "
        f"(reads {settings.rate_limit_default}, writes {settings.rate_limit_write})"
    )
    return catalog_limiter


limiter = create_limiter()


def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """Answer a throttled request with the catalog error envelope (429)."""
    limit = str(exc.detail)
    logger.warning(
        f"Throttled {request.method} {request.url.path} from {get_client_ip(request)} ({limit})"
    )
    return JSONResponse(
        status_code=status.HTTP_429_TOO_MANY_REQUESTS,
        content={"success": False, "error": f"Too many requests. Limit: {limit}"},
        headers={
            "Retry-After": str(retry_after_seconds(limit)),
            "X-RateLimit-Limit": limit,
        },
    )
