"""
Maps service and framework errors onto the API error envelope:

    {"success": false, "error": "<message>", "kind": "<kind>", "details": {...}}
"""
import logging

from django.http import Http404
from rest_framework import exceptions, status
from rest_framework.response import Response
from rest_framework.views import exception_handler

from utils.errors import ServiceError, ValidationFailed
from utils.validation import flatten_messages

logger = logging.getLogger(__name__)

_KINDS = [
    (exceptions.ValidationError, 'validation_failed'),
    (exceptions.NotAuthenticated, 'authentication_failed'),
    (exceptions.AuthenticationFailed, 'authentication_failed'),
    (exceptions.PermissionDenied, 'authorization_denied'),
    (exceptions.NotFound, 'not_found'),
    (Http404, 'not_found'),
]


def _error_body(message, kind, details=None):
    body = {'success': False, 'error': message, 'kind': kind}
    if details:
        body['details'] = details
    return body


def _detail_message(detail) -> str:
    if isinstance(detail, dict) and 'detail' in detail:
        return str(detail['detail'])
    messages = flatten_messages(detail)
    return messages[0] if messages else 'Request failed'


def api_exception_handler(exc, context):
    if isinstance(exc, ServiceError):
        details = exc.details if isinstance(exc, ValidationFailed) else None
        return Response(_error_body(exc.message, exc.kind, details), status=exc.status_code)

    response = exception_handler(exc, context)
    if response is None:
        view = context.get('view')
        logger.exception("Unhandled error in %s", type(view).__name__ if view else 'request')
        return Response(
            _error_body('Server error', 'error'),
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    kind = next((name for cls, name in _KINDS if isinstance(exc, cls)), 'error')
    if isinstance(exc, exceptions.ValidationError):
        details = {
            field: flatten_messages(errors) for field, errors in exc.detail.items()
        } if isinstance(exc.detail, dict) else {'non_field_errors': flatten_messages(exc.detail)}
        response.data = _error_body('Validation failed', kind, details)
    else:
        response.data = _error_body(_detail_message(response.data), kind)
    return response
