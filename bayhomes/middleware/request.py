"""
Request middleware: request ids, body size limit, request logging and timing headers.
"""

from typing import Callable
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp
import logging
import time
import uuid

from bayhomes.services.error_handler import ErrorHandlerService
from bayhomes.utils.exceptions import BadRequestError, RequestTooLargeError

logger = logging.getLogger(__name__)


class RequestContextMiddleware(BaseHTTPMiddleware):
    """
    Tags every request with an 8-character id and rejects oversized bodies.
    Image payloads travel inline as base64, so the size limit is generous.
    """

    def __init__(
        self,
        app: ASGIApp,
        max_request_size: int = 50 * 1024 * 1024,  # 50MB
        enable_request_logging: bool = True
    ):
        super().__init__(app)
        self.max_request_size = max_request_size
        self.enable_request_logging = enable_request_logging

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """
        Process request through the middleware.

        Args:
            request: FastAPI request object
            call_next: Next middleware/handler in chain

        Returns:
            Response object
        """
        request_id = uuid.uuid4().hex[:8]
        request.state.request_id = request_id

        start_time = time.perf_counter()

        try:
            self._validate_request_size(request)
        except BadRequestError as exc:
            return ErrorHandlerService.handle_api_exception(exc, request)

        if self.enable_request_logging:
            self._log_request(request, request_id)

        response = await call_next(request)

        processing_time = time.perf_counter() - start_time
        if self.enable_request_logging:
            self._log_response(request, response, request_id, processing_time)

        response.headers["X-Request-ID"] = request_id
        response.headers["X-Processing-Time"] = f"{processing_time:.4f}"
        return response

    def _validate_request_size(self, request: Request) -> None:
        """
        Validate request content length.

        Raises:
            BadRequestError: If the header is malformed or the body exceeds the limit
        """
        content_length = request.headers.get("content-length")
        if not content_length:
            return

        try:
            size = int(content_length)
        except ValueError:
            raise BadRequestError("Invalid content-length header")

        if size > self.max_request_size:
            raise RequestTooLargeError(size, self.max_request_size)

    def _log_request(self, request: Request, request_id: str) -> None:
        client = request.client.host if request.client else "unknown"
        logger.info(
            f"Request [{request_id}]: {request.method} {request.url.path} from {client}",
            extra={"request_id": request_id, "method": request.method, "path": request.url.path}
        )

    def _log_response(self, request: Request, response: Response, request_id: str, processing_time: float) -> None:
        log = logger.warning if response.status_code >= 400 else logger.info
        log(
            f"Response [{request_id}]: {response.status_code} for {request.method} {request.url.path} "
            f"in {processing_time:.4f}s",
            extra={
                "request_id": request_id,
                "status_code": response.status_code,
                "processing_time": processing_time
            }
        )
