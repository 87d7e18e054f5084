"""
Service-layer exceptions shared by the order and catalog apps, and the DRF
exception handler that renders them.
"""
import logging

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


class ServiceError(Exception):
    """
    Base exception for business-rule failures raised by service classes.

    Carries a machine-readable ``code``, the HTTP status it maps to, and a
    ``details`` dict naming the offending identifiers.
    """

    code = "service_error"
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message, details=None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def as_dict(self):
        return {"error": self.message, "code": self.code, "details": self.details}


class NotFoundError(ServiceError):
    code = "not_found"
    status_code = status.HTTP_404_NOT_FOUND


class InvalidRequestError(ServiceError):
    code = "invalid_request"
    status_code = status.HTTP_400_BAD_REQUEST


class ConflictError(ServiceError):
    code = "conflict"
    status_code = status.HTTP_409_CONFLICT


def service_exception_handler(exc, context):
    """
    DRF exception handler that renders ServiceError subclasses as
    ``{"error", "code", "details"}`` and defers everything else to DRF.
    """
    if isinstance(exc, ServiceError):
        request = context.get("request")
        logger.info(
            f"{exc.__class__.__name__} on {getattr(request, 'method', '?')} "
            f"{getattr(request, 'path', '?')}: {exc.message}"
        )
        return Response(exc.as_dict(), status=exc.status_code)

    return exception_handler(exc, context)
