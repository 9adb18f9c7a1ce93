# PATH: apps/api/common/exception_handler.py
# DRF EXCEPTION_HANDLER: domain errors -> {"code", "detail"} with their own status.
from __future__ import annotations

import logging

from rest_framework.response import Response
from rest_framework.views import exception_handler

from apps.domains.results.exceptions import GradingError

logger = logging.getLogger(__name__)


def grading_exception_handler(exc, context):
    if isinstance(exc, GradingError):
        view = context.get("view")
        logger.info(
            "grading error: view=%s code=%s detail=%s",
            view.__class__.__name__ if view else None,
            exc.code,
            exc.message,
        )
        body = {"code": exc.code, "detail": exc.message}
        if exc.context:
            body["context"] = exc.context
        return Response(body, status=exc.http_status)

    return exception_handler(exc, context)
