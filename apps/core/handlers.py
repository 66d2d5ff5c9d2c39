"""
DRF exception handler for service errors.

Installed as REST_FRAMEWORK['EXCEPTION_HANDLER']. Service errors become
{'error': ..., 'code': ...} responses with a status chosen by their kind;
everything else goes to DRF's default handler.
"""

import logging

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

from .exceptions import ErrorKind, ServiceError

logger = logging.getLogger(__name__)

HTTP_499_CLIENT_CLOSED_REQUEST = 499

STATUS_BY_KIND = {
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.ALREADY_EXISTS: status.HTTP_409_CONFLICT,
    ErrorKind.ALREADY_OPEN: status.HTTP_409_CONFLICT,
    ErrorKind.ALREADY_CLOSED: status.HTTP_409_CONFLICT,
    ErrorKind.INVALID_INPUT: status.HTTP_400_BAD_REQUEST,
    ErrorKind.ACCESS_DENIED: status.HTTP_403_FORBIDDEN,
    ErrorKind.CANCELLED: HTTP_499_CLIENT_CLOSED_REQUEST,
    ErrorKind.INTERNAL: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def service_exception_handler(exc, context):
    if not isinstance(exc, ServiceError):
        return exception_handler(exc, context)

    if exc.kind == ErrorKind.INTERNAL:
        logger.error(
            "Internal error in %s: %s",
            context.get('view').__class__.__name__,
            exc,
            exc_info=exc,
        )
        return Response(
            {'error': 'Internal server error', 'code': exc.kind.value},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    return Response(exc.to_dict(), status=STATUS_BY_KIND[exc.kind])
