# apps/api/common/middleware.py
# Last-resort 500 for anything the DRF handler re-raised.
# A process_exception response skips CorsMiddleware, so CORS headers are added here.
from __future__ import annotations

import logging
from typing import Optional

from django.conf import settings
from django.http import JsonResponse

logger = logging.getLogger(__name__)


def _allowed_origin(origin: str) -> Optional[str]:
    if not origin:
        return None
    if getattr(settings, "CORS_ALLOW_ALL_ORIGINS", False):
        # "*" is not accepted by browsers together with credentials
        if getattr(settings, "CORS_ALLOW_CREDENTIALS", False):
            return origin
        return "*"
    if origin in (getattr(settings, "CORS_ALLOWED_ORIGINS", None) or []):
        return origin
    return None


def _add_cors_headers_to_response(request, response):
    origin = (request.META.get("HTTP_ORIGIN") or "").strip()
    allow = _allowed_origin(origin)
    if allow is None:
        return response

    response["Access-Control-Allow-Origin"] = allow
    response["Vary"] = "Origin"
    if getattr(settings, "CORS_ALLOW_CREDENTIALS", False):
        response["Access-Control-Allow-Credentials"] = "true"
    return response


class UnhandledExceptionMiddleware:
    """Unhandled exception -> {"code": "internal_error", "detail"} with status 500."""

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        return self.get_response(request)

    def process_exception(self, request, exception):
        logger.exception("unhandled exception: %s %s", request.method, request.path)
        body = {"code": "internal_error", "detail": "Internal server error."}
        if settings.DEBUG:
            body["error"] = str(exception)
        return _add_cors_headers_to_response(request, JsonResponse(body, status=500))
