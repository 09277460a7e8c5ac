"""
Failures raised by the service layer.

Each error carries a stable machine-readable ``kind`` and a human-readable
message; the API exception handler turns them into HTTP responses.
"""
from typing import Dict, List, Optional


class ServiceError(Exception):
    kind = 'error'
    status_code = 500
    default_message = 'Something went wrong'

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class NotFound(ServiceError):
    kind = 'not_found'
    status_code = 404
    default_message = 'Not found'


class AuthorizationDenied(ServiceError):
    kind = 'authorization_denied'
    status_code = 403
    default_message = 'Access denied'


class AuthenticationFailed(ServiceError):
    kind = 'authentication_failed'
    status_code = 401
    default_message = 'Invalid credentials'


class ValidationFailed(ServiceError):
    kind = 'validation_failed'
    status_code = 400
    default_message = 'Validation failed'

    def __init__(self, details: Dict[str, List[str]], message: Optional[str] = None):
        super().__init__(message)
        self.details = details

    @classmethod
    def for_field(cls, field: str, message: str) -> 'ValidationFailed':
        return cls({field: [message]}, message=message)
