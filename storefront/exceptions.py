"""Exception related classes and functions"""

from rest_framework import exceptions, status, views

from affiliate.exceptions import LedgerError


class ServiceUnavailable(exceptions.APIException):
    """Raised when no storage backend could satisfy a request"""

    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_detail = "Service temporarily unavailable, try again later."
    default_code = "service_unavailable"


def exception_handler(exc, context):
    """Override DRF exception_handler to slightly change format of error response"""
    if isinstance(exc, LedgerError):
        exc = ServiceUnavailable(detail=str(exc))
    if isinstance(exc, exceptions.ValidationError) and isinstance(
        exc.detail, (list, dict)
    ):
        exc = exceptions.ValidationError(
            detail={"errors": exc.detail}, code=exc.status_code
        )
    return views.exception_handler(exc, context)
