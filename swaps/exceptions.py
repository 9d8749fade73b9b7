"""
Error taxonomy for swap operations.

All errors are DRF ``APIException`` subclasses so the API layer turns them
into JSON responses with the right status code. ``ValidationError`` and
``NotFound`` are DRF's own classes, re-exported here.
"""
from rest_framework import status
from rest_framework.exceptions import APIException, NotFound, PermissionDenied, ValidationError

__all__ = ['ValidationError', 'NotFound', 'Forbidden', 'InvalidState', 'Conflict', 'PreconditionFailed']


class Forbidden(PermissionDenied):
    default_detail = 'You are not allowed to perform this action.'
    default_code = 'forbidden'


class InvalidState(APIException):
    """Operation is not legal in the record's current lifecycle state. Re-fetch before retrying."""
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'Operation not allowed in the current state.'
    default_code = 'invalid_state'


class Conflict(APIException):
    """Uniqueness or race violation. Safe to retry after re-reading."""
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'Conflicting request.'
    default_code = 'conflict'


class PreconditionFailed(APIException):
    status_code = status.HTTP_412_PRECONDITION_FAILED
    default_detail = 'Business rule not yet satisfied.'
    default_code = 'precondition_failed'
