"""
Performance monitoring middleware for request timing and request ids.
"""

from typing import Callable
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp
import logging
import time
import uuid

logger = logging.getLogger(__name__)


class PerformanceMonitoringMiddleware(BaseHTTPMiddleware):
    """
    Middleware that times every request and tags it with a request id.
    The id is stored on request.state so error responses can reference it.
    """

    def __init__(
        self,
        app: ASGIApp,
        slow_request_threshold: float = 1.0,  # seconds
    ):
        super().__init__(app)
        self.slow_request_threshold = slow_request_threshold

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """
        Process request through performance monitoring middleware.

        Returns:
            Response object with X-Request-ID and X-Processing-Time headers
        """
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())[:8]
        request.state.request_id = request_id

        start_time = time.perf_counter()
        response = await call_next(request)
        processing_time = time.perf_counter() - start_time

        self._log_request(request, response, request_id, processing_time)

        response.headers["X-Request-ID"] = request_id
        response.headers["X-Processing-Time"] = f"{processing_time:.3f}"
        return response

    def _log_request(
        self,
        request: Request,
        response: Response,
        request_id: str,
        processing_time: float
    ) -> None:
        message = (
            f"[{request_id}] {request.method} {request.url.path} "
            f"-> {response.status_code} in {processing_time:.3f}s"
        )
        extra = {
            "request_id": request_id,
            "method": request.method,
            "path": request.url.path,
            "status_code": response.status_code,
            "processing_time": processing_time,
        }

        if processing_time > self.slow_request_threshold:
            logger.warning(f"Slow request {message}", extra=extra)
        else:
            logger.info(message, extra=extra)
