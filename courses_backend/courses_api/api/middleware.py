"""
Request logging middleware.
"""

import time

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from courses_api.logger import get_logger

logger = get_logger(__name__)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log method, path, status and duration for every request."""

    async def dispatch(self, request: Request, call_next):
        start_time = time.time()
        method = request.method
        path = request.url.path

        try:
            response: Response = await call_next(request)
        except Exception as e:
            # Traceback is logged by the app's unhandled error responder
            logger.error(
                f"{method} {path} - {type(e).__name__}",
                extra={"method": method, "path": path, "error_type": type(e).__name__},
            )
            raise

        process_time_ms = round((time.time() - start_time) * 1000, 2)
        logger.info(
            f"{method} {path} - {response.status_code} ({process_time_ms} ms)",
            extra={
                "method": method,
                "path": path,
                "status_code": response.status_code,
                "process_time_ms": process_time_ms,
            },
        )
        return response
