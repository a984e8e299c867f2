"""
Verification error taxonomy.

Every workflow failure is one of these kinds. The engine returns them on
``TransitionResult.error``; the API layer turns them into responses with
``status_code`` and ``kind``.
"""
from enum import Enum


class ErrorKind(str, Enum):
    INVALID_STATE = 'INVALID_STATE'
    UNAUTHORIZED = 'UNAUTHORIZED'
    VALIDATION_ERROR = 'VALIDATION_ERROR'
    CONFLICT = 'CONFLICT'
    NOT_FOUND = 'NOT_FOUND'


class VerificationError(Exception):
    """Base class for verification workflow failures."""

    kind: ErrorKind = None
    status_code = 400
    default_message = 'Verification error'

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def as_dict(self):
        return {'error': self.message, 'kind': self.kind.value}


class InvalidState(VerificationError):
    """Transition not legal from the current status."""

    kind = ErrorKind.INVALID_STATE
    status_code = 409
    default_message = 'This action is not allowed in the current status.'


class Unauthorized(VerificationError):
    """Actor lacks the role or membership the transition requires."""

    kind = ErrorKind.UNAUTHORIZED
    status_code = 403
    default_message = 'You are not allowed to perform this action.'


class ValidationError(VerificationError):
    """A mandatory field is missing or invalid."""

    kind = ErrorKind.VALIDATION_ERROR
    status_code = 400
    default_message = 'Invalid input.'


class Conflict(VerificationError):
    """The row changed underneath us; someone else processed it first."""

    kind = ErrorKind.CONFLICT
    status_code = 409
    default_message = 'This experience has already been processed.'


class NotFound(VerificationError):
    kind = ErrorKind.NOT_FOUND
    status_code = 404
    default_message = 'Not found.'
