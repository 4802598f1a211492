import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from app.api.v1.routers import v1_router
from app.core import settings
from app.core.exceptions import AppError, RateLimitError
from app.core.logging import configure_logging

configure_logging(settings.LOG_LEVEL)

logger = logging.getLogger(__name__)

app = FastAPI(title=settings.settings.app_name, debug=settings.settings.debug)

app.include_router(v1_router)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.detail)
    else:
        logger.info("%s %s -> %s: %s", request.method, request.url.path, exc.status_code, exc.detail)

    content = {"detail": exc.detail}
    if isinstance(exc, RateLimitError):
        content["remaining_calls"] = exc.remaining

    return JSONResponse(status_code=exc.status_code, content=content)
