import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

logger = logging.getLogger(__name__)

SLOW_REQUEST_SECONDS = 1.0


class LoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        start = time.monotonic()

        try:
            response = await call_next(request)
        except Exception:
            logger.exception("%s %s failed", request.method, request.url.path)
            raise

        duration = time.monotonic() - start
        level = logging.WARNING if duration > SLOW_REQUEST_SECONDS else logging.INFO
        logger.log(
            level,
            "%s %s user=%s -> %s (%.2fs)",
            request.method,
            request.url.path,
            request.headers.get("x-user-id", "-"),
            response.status_code,
            duration,
        )

        return response
