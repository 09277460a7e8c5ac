"""
Request logging for the API.
"""
import logging
import time

logger = logging.getLogger(__name__)


class RequestLoggingMiddleware:
    """
    Logs method, path, status, acting user and duration of every API request.
    """

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        started = time.monotonic()
        response = self.get_response(request)

        if request.path.startswith('/api/'):
            user = getattr(request, 'user', None)
            logger.info(
                "%s %s -> %s user_id=%s duration_ms=%.1f",
                request.method,
                request.path,
                response.status_code,
                getattr(user, 'id', None),
                (time.monotonic() - started) * 1000,
            )
        return response
