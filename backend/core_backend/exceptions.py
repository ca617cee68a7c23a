"""
Project-wide DRF exception handler.

Every error response carries "success": false. Serializer validation errors
keep their field map under "messages"; everything else is flattened into a
single "message".
"""
from rest_framework import status
from rest_framework.exceptions import ValidationError
from rest_framework.views import exception_handler
import logging

logger = logging.getLogger(__name__)


def get_client_ip(request):
    """
    Get client IP address from request headers.
    """
    x_forwarded_for = request.META.get("HTTP_X_FORWARDED_FOR")
    if x_forwarded_for:
        return x_forwarded_for.split(",")[0].strip()
    return request.META.get("REMOTE_ADDR")


def _first_message(detail):
    if isinstance(detail, dict):
        detail = detail.get("detail", next(iter(detail.values()), ""))
    if isinstance(detail, list):
        detail = detail[0] if detail else ""
    return str(detail)


def api_exception_handler(exc, context):
    # Call the default exception handler first
    response = exception_handler(exc, context)
    if response is None:
        # Unhandled: let Django turn it into a 500 and log the traceback
        return None

    request = context.get("request")
    path = request.path if request else ""
    method = request.method if request else ""

    if isinstance(exc, ValidationError):
        logger.info(f"Validation failed on {method} {path}: {response.data}")
        response.data = {"success": False, "messages": response.data}
        response.status_code = status.HTTP_400_BAD_REQUEST
        return response

    message = _first_message(response.data)
    log = logger.error if response.status_code >= 500 else logger.warning
    log(
        f"API error {exc.__class__.__name__} ({response.status_code}) on {method} {path}",
        extra={"ip": get_client_ip(request) if request else None},
    )
    response.data = {"success": False, "message": message}
    return response
