# coaching_api/middleware/request_id.py
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
import time
import uuid

from coaching_api.core.logging import logger


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Tag each request with an id and log its outcome"""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ):
        request.state.request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        start = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - start) * 1000

        logger.info(
            f"{request.method} {request.url.path} -> {response.status_code} ({duration_ms:.1f}ms)",
            extra={
                "request_id": request.state.request_id,
                "user_id": getattr(request.state, "user_id", None),
                "method": request.method,
                "status_code": response.status_code,
                "duration": duration_ms
            }
        )
        response.headers["X-Request-ID"] = request.state.request_id
        return response
