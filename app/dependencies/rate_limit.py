from app.core import settings
from app.helpers.rate_limiter import FixedWindowRateLimiter

upload_rate_limiter = FixedWindowRateLimiter(
    limit=settings.UPLOAD_RATE_LIMIT,
    window_seconds=settings.UPLOAD_RATE_WINDOW_SECONDS,
)


def get_upload_rate_limiter() -> FixedWindowRateLimiter:
    return upload_rate_limiter
