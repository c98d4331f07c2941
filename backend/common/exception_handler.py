"""
REST framework exception handler.

Every error leaves the API as ``{"error", "message", "timestamp"}``, whether it
came from the service layer, from DRF itself, or from somewhere unexpected.
"""

import logging
from http import HTTPStatus

from django.utils import timezone
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler, set_rollback

from .exceptions import ServiceError

logger = logging.getLogger(__name__)


def error_body(error, message):
    return {
        "error": error,
        "message": message,
        "timestamp": timezone.now().isoformat(),
    }


def error_response(error, message, status_code):
    return Response(error_body(error, message), status=status_code)


def _error_code(status_code):
    try:
        return HTTPStatus(status_code).phrase.upper().replace(" ", "_").replace("-", "_")
    except ValueError:
        return "ERROR"


def _flatten_detail(data):
    """Turn DRF's nested error payloads into a single readable message."""
    if isinstance(data, dict):
        if "detail" in data and len(data) == 1:
            return str(data["detail"])
        parts = []
        for field, errors in data.items():
            text = _flatten_detail(errors)
            parts.append(text if field == "non_field_errors" else f"{field}: {text}")
        return "; ".join(parts)
    if isinstance(data, (list, tuple)):
        return " ".join(_flatten_detail(item) for item in data)
    return str(data)


def api_exception_handler(exc, context):
    if isinstance(exc, ServiceError):
        set_rollback()
        return error_response(exc.error_code, exc.message, exc.status_code)

    response = exception_handler(exc, context)
    if response is not None:
        response.data = error_body(_error_code(response.status_code), _flatten_detail(response.data))
        return response

    set_rollback()
    view = context.get("view")
    logger.exception("Unhandled error in %s", view.__class__.__name__ if view else "unknown view")
    return error_response(
        "INTERNAL_ERROR",
        "An unexpected error occurred",
        status.HTTP_500_INTERNAL_SERVER_ERROR,
    )
