import logging

from django.db import DatabaseError
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

from ..exceptions import ResidenceError, StorageError

logger = logging.getLogger(__name__)


def residence_exception_handler(exc, context):
    """Render domain errors as ``{"success": false, "message": ...}``."""

    if isinstance(exc, ResidenceError):
        if isinstance(exc, StorageError):
            logger.error("Storage failure in %s: %s", context.get("view"), exc.message, exc_info=exc)
        body = {"success": False, "message": exc.message}
        if exc.field:
            body["field"] = exc.field
        return Response(body, status=exc.status_code)

    if isinstance(exc, DatabaseError):
        logger.error("Database failure in %s", context.get("view"), exc_info=exc)
        return Response(
            {"success": False, "message": StorageError.default_message},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    response = exception_handler(exc, context)
    if response is not None and isinstance(response.data, dict) and "detail" in response.data:
        response.data = {"success": False, "message": str(response.data["detail"])}
    return response
