"""X-Request-ID middleware: accept or generate a request id and echo it back."""

import logging
import re
import time
import uuid

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

REQUEST_ID_HEADER = "X-Request-ID"

# Alphanumeric, dots, hyphens, underscores; UUIDs match too
VALID_REQUEST_ID_PATTERN = re.compile(r"^[A-Za-z0-9._-]{1,128}$")

logger = logging.getLogger(__name__)


def is_valid_request_id(value: str) -> bool:
    return bool(VALID_REQUEST_ID_PATTERN.match(value))


class RequestIDMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        start = time.monotonic()

        incoming_id = request.headers.get(REQUEST_ID_HEADER)
        if incoming_id and is_valid_request_id(incoming_id):
            request_id = incoming_id
        else:
            request_id = str(uuid.uuid4())
        request.state.request_id = request_id

        response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = request_id

        logger.info(
            "%s %s -> %d (%.1fms) request_id=%s",
            request.method, request.url.path, response.status_code,
            (time.monotonic() - start) * 1000, request_id,
        )
        return response
