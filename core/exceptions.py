"""
core/exceptions.py

Project-wide DRF exception handler. Every failure leaves the API as

    {"error": "<message>"}                       # 400/401/403/404/...
    {"error": "<message>", "details": {...}}     # serializer validation errors

Unhandled exceptions are logged with their traceback and answered with a
generic 500 so internals never reach the client.
"""

import logging

from rest_framework import status
from rest_framework.exceptions import APIException
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler

logger = logging.getLogger(__name__)


class BusinessRuleViolation(APIException):
    """A request that is well-formed but conflicts with the current state of the data."""
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "The request conflicts with the current state of the resource."
    default_code = "conflict"


def _first_message(detail):
    if isinstance(detail, dict):
        for key, value in detail.items():
            msg = _first_message(value)
            if msg:
                return msg if key == "non_field_errors" else f"{key}: {msg}"
        return ""
    if isinstance(detail, (list, tuple)):
        for value in detail:
            msg = _first_message(value)
            if msg:
                return msg
        return ""
    return str(detail)


def api_exception_handler(exc, context):
    response = drf_exception_handler(exc, context)

    if response is None:
        view = context.get("view")
        logger.exception(f"Unhandled error in {view.__class__.__name__ if view else 'view'}: {exc}")
        return Response(
            {"error": "An unexpected error occurred. Please try again later."},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    detail = response.data
    if isinstance(detail, dict) and set(detail.keys()) == {"detail"}:
        response.data = {"error": str(detail["detail"])}
    elif isinstance(detail, (dict, list)):
        response.data = {"error": _first_message(detail) or "Invalid request.", "details": detail}
    else:
        response.data = {"error": str(detail)}
    return response
