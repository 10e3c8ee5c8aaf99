import time
import uuid
import logging
from typing import Callable

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

logger = logging.getLogger(__name__)


class SecurityLoggingMiddleware(BaseHTTPMiddleware):
    """
    Request logging middleware.

    - Adds request_id (also returned as X-Request-ID)
    - Logs method, path, status, latency
    - Logs the resolved user id when the request carried a valid token
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = str(uuid.uuid4())
        start_time = time.time()

        request.state.request_id = request_id

        try:
            response = await call_next(request)
        except Exception:
            logger.exception(
                "request_failed request_id=%s method=%s path=%s",
                request_id,
                request.method,
                request.url.path,
            )
            raise

        duration_ms = int((time.time() - start_time) * 1000)
        user_id = getattr(request.state, "user_id", None)
        client_ip = request.client.host if request.client else None

        logger.info(
            "request_completed request_id=%s method=%s path=%s status=%s duration_ms=%s user_id=%s ip=%s",
            request_id,
            request.method,
            request.url.path,
            response.status_code,
            duration_ms,
            user_id,
            client_ip,
        )

        response.headers["X-Request-ID"] = request_id
        return response
