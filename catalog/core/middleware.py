"""Request body size limit and repository id guard middleware."""

import logging
import re
from collections.abc import Callable

from fastapi import Request, Response, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from catalog.core.errors import INVALID_REPOSITORY_ID
from catalog.core.validators import is_uuid

logger = logging.getLogger(__name__)

REQUEST_TOO_LARGE_BODY = '{"error":"Request body exceeds maximum allowed size"}'


class RequestSizeLimitMiddleware(BaseHTTPMiddleware):
    """
    Middleware to limit request body size.

    Validates both the Content-Length header and the actual body size, so a
    missing or falsified header cannot bypass the limit.
    """

    def __init__(self, app, max_size_bytes: int = 100 * 1024):
        """
        Initialize middleware with max request size.

        Args:
            app: ASGI application
            max_size_bytes: Maximum request body size in bytes (default: 100KB)
        """
        super().__init__(app)
        self.max_size_bytes = max_size_bytes

    def _too_large(self, request: Request, size: int, source: str) -> Response:
        logger.warning(
            f"Request size {size} bytes ({source}) exceeds limit {self.max_size_bytes} bytes",
            extra={"path": request.url.path},
        )
        return Response(
            content=REQUEST_TOO_LARGE_BODY,
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            media_type="application/json",
        )

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        # Fast rejection from the header when present
        content_length = request.headers.get("content-length")
        if content_length:
            try:
                size = int(content_length)
            except ValueError:
                # Invalid header, the actual body size is verified below
                size = 0
            if size > self.max_size_bytes:
                return self._too_large(request, size, "from header")

        if request.method in ("POST", "PUT", "PATCH"):
            body = await request.body()
            if len(body) > self.max_size_bytes:
                return self._too_large(request, len(body), "actual")

            # The body has been consumed, replay it for downstream handlers
            async def receive():
                return {"type": "http.request", "body": body, "more_body": False}

            request._receive = receive

        return await call_next(request)


# First path segment after /repositories/, whatever method or sub-path follows
REPOSITORY_ID_PATH = re.compile(r"^/repositories/([^/]+)")


class RepositoryIdGuardMiddleware(BaseHTTPMiddleware):
    """
    Reject malformed repository ids before routing.

    Applies to every method and every sub-path under /repositories/{id}, so a
    malformed id answers 400 even where no route would match.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        match = REPOSITORY_ID_PATH.match(request.url.path)
        if match and not is_uuid(match.group(1)):
            logger.warning(
                f"Malformed repository id: {match.group(1)}",
                extra={"path": request.url.path, "method": request.method},
            )
            return JSONResponse(
                status_code=status.HTTP_400_BAD_REQUEST,
                content={"error": INVALID_REPOSITORY_ID},
            )

        return await call_next(request)
