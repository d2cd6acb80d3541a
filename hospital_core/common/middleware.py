from __future__ import annotations

import logging
import time

from django.utils.deprecation import MiddlewareMixin

from hospital_core.common.api.exceptions import ensure_request_id

logger = logging.getLogger(__name__)


class RequestIdMiddleware(MiddlewareMixin):
    """
    Tags every request with a request_id and echoes it back as X-Request-ID.

    Behavior:
      - Honors an incoming X-Request-ID header (trimmed to 64 chars).
      - Otherwise generates one (same generator the error envelope uses).
      - Logs one line per /api/ request with method, path, status and duration.
    """

    HEADER = "X-Request-ID"
    META_KEY = "HTTP_X_REQUEST_ID"
    LOGGED_PREFIXES = ("/api/",)

    def process_request(self, request):
        incoming = (request.META.get(self.META_KEY) or "").strip()
        if incoming:
            request.request_id = incoming[:64]
        ensure_request_id(request)
        request._started_at = time.monotonic()
        return None

    def process_response(self, request, response):
        rid = ensure_request_id(request)
        response[self.HEADER] = rid

        path = getattr(request, "path", "") or ""
        if path.startswith(self.LOGGED_PREFIXES):
            started = getattr(request, "_started_at", None)
            elapsed_ms = (time.monotonic() - started) * 1000 if started is not None else 0.0
            logger.info(
                "%s %s -> %s (%.1fms) request_id=%s",
                request.method,
                path,
                response.status_code,
                elapsed_ms,
                rid,
            )
        return response
