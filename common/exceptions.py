"""Project-wide API error handling.

Maps domain and Django exceptions onto DRF responses and gives validation
failures a uniform body listing every violated rule. Unexpected errors are
logged with their traceback and answered with a generic message unless DEBUG
is on.
"""

import logging

from django.conf import settings
from django.core.exceptions import ValidationError as DjangoValidationError
from rest_framework import status
from rest_framework.exceptions import APIException, ValidationError
from rest_framework.response import Response
from rest_framework.serializers import as_serializer_error
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


class StateConflict(Exception):
    """A mutation is not allowed in the resource's current state."""


class Conflict(APIException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "The resource cannot be changed in its current state."
    default_code = "conflict"


def flatten_errors(detail, prefix=""):
    """Turn a nested serializer error structure into a flat list of messages."""
    if isinstance(detail, dict):
        messages = []
        for field, value in detail.items():
            label = "" if field == "non_field_errors" else field
            if prefix and label:
                label = f"{prefix}.{label}"
            messages.extend(flatten_errors(value, label or prefix))
        return messages
    if isinstance(detail, (list, tuple)):
        messages = []
        for item in detail:
            messages.extend(flatten_errors(item, prefix))
        return messages
    return [f"{prefix}: {detail}" if prefix else str(detail)]


def _translate(exc):
    if isinstance(exc, DjangoValidationError):
        return ValidationError(detail=as_serializer_error(exc))
    if isinstance(exc, StateConflict):
        return Conflict(str(exc))
    return exc


def api_exception_handler(exc, context):
    exc = _translate(exc)
    response = exception_handler(exc, context)

    if response is None:
        view = context.get("view")
        logger.exception(
            "Unhandled error in %s", type(view).__name__ if view else "unknown view", exc_info=exc
        )
        detail = str(exc) if settings.DEBUG else "Internal Server Error"
        return Response({"detail": detail}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

    if isinstance(exc, ValidationError):
        fields = response.data
        response.data = {
            "detail": "Validation failed.",
            "errors": flatten_errors(fields),
            "fields": fields,
        }
    return response
