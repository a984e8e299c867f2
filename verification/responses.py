"""
Translate workflow errors into API responses.

Every error body carries ``kind`` so clients can tell "already processed"
apart from "not allowed" or "missing reason".
"""
from rest_framework import status
from rest_framework.response import Response

from .errors import ErrorKind


def error_response(error):
    """Response for a ``VerificationError``."""
    return Response(error.as_dict(), status=error.status_code)


def validation_error_response(exc):
    """Response for a Django ``ValidationError`` raised by a service."""
    messages = list(exc.messages)
    return Response(
        {
            'error': '; '.join(messages),
            'kind': ErrorKind.VALIDATION_ERROR.value,
            'messages': messages,
        },
        status=status.HTTP_400_BAD_REQUEST,
    )
