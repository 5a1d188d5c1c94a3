"""
DRF exception handler for application errors.

Service-layer exceptions propagate out of views unchanged; this handler
turns them into JSON responses. Anything that is not a
BaseApplicationError falls through to DRF's default handler.

Configured in settings:
    REST_FRAMEWORK = {
        "EXCEPTION_HANDLER": "core.exception_handler.application_exception_handler",
    }
"""

from __future__ import annotations

import logging

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

from core.exceptions import (
    BaseApplicationError,
    ConflictError,
    ExternalServiceError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)

logger = logging.getLogger(__name__)

# Checked in order, first match wins
STATUS_BY_ERROR = (
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (PermissionDeniedError, status.HTTP_403_FORBIDDEN),
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (ConflictError, status.HTTP_409_CONFLICT),
    (ExternalServiceError, status.HTTP_502_BAD_GATEWAY),
)


def status_for_error(exc: BaseApplicationError) -> int:
    """Return the HTTP status code for an application error."""
    for error_class, status_code in STATUS_BY_ERROR:
        if isinstance(exc, error_class):
            return status_code
    return status.HTTP_400_BAD_REQUEST


def application_exception_handler(exc, context):
    """Render BaseApplicationError subclasses, delegate everything else."""
    if not isinstance(exc, BaseApplicationError):
        return exception_handler(exc, context)

    status_code = status_for_error(exc)
    view = context.get("view")
    log_context = {
        "error_code": exc.error_code,
        "status_code": status_code,
        "view": view.__class__.__name__ if view else None,
    }
    if status_code >= 500:
        logger.error(f"Application error: {exc}", extra=log_context)
    else:
        logger.info(f"Application error: {exc}", extra=log_context)

    return Response(exc.to_dict(), status=status_code)
