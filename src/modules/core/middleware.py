import time
import uuid
from typing import Callable

import structlog
from django.http import HttpRequest, HttpResponse

REQUEST_ID_HEADER = "X-Request-ID"

logger = structlog.get_logger(__name__)


class CorrelationIdMiddleware:
    """Bind a correlation id to every log line emitted while serving a request.

    The id comes from the ``X-Request-ID`` request header, or a fresh UUID4
    when the client sends none.  It is bound into structlog's contextvars
    (picked up by ``merge_contextvars``) and echoed back in the response.
    """

    def __init__(self, get_response: Callable[[HttpRequest], HttpResponse]) -> None:
        self.get_response = get_response

    def __call__(self, request: HttpRequest) -> HttpResponse:
        correlation_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(correlation_id=correlation_id)

        started = time.monotonic()
        response = self.get_response(request)

        logger.info(
            "request_finished",
            method=request.method,
            path=request.path,
            status_code=response.status_code,
            duration_ms=round((time.monotonic() - started) * 1000, 2),
        )

        response[REQUEST_ID_HEADER] = correlation_id
        return response
