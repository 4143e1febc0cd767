"""
Rate limiting for public endpoints using slowapi.

Usage:
    from shared.security.rate_limit import limiter

    @router.post("/login")
    @limiter.limit("5/15minutes")
    def login(request: Request, ...): ...
"""

from fastapi import Request
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from shared.config.logging import get_logger
from shared.i18n import resolve_locale, translate

logger = get_logger(__name__)

# Client IP is the key
limiter = Limiter(key_func=get_remote_address)


def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """
    Custom handler for rate limit exceeded errors.
    Returns a localized JSON response with retry information.
    """
    locale = resolve_locale(request.headers.get("accept-language"))
    logger.warning(
        "Rate limit exceeded",
        path=request.url.path,
        ip_address=get_remote_address(request),
        limit=str(exc.detail),
    )
    return JSONResponse(
        status_code=429,
        content={
            "detail": translate("errors.rate_limited", locale),
            "retry_after": exc.detail,
        },
        headers={"Retry-After": str(exc.detail)},
    )
