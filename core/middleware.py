# core/middleware.py
import logging

from django.http import JsonResponse

from .exceptions import ApiError

logger = logging.getLogger(__name__)


class ApiExceptionMiddleware:
    """
    Renders ApiError as JSON in the envelope the view asked for.
    Anything else is logged with its traceback and answered with a generic 500.
    """

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        return self.get_response(request)

    def process_exception(self, request, exception):
        if isinstance(exception, ApiError):
            if exception.status_code >= 500:
                logger.error(f"{request.method} {request.path} → {exception.status_code}: {exception.message}")
            return exception.to_response()

        logger.error(f"Unhandled error on {request.method} {request.path}: {exception}", exc_info=True)
        return JsonResponse({'status': False, 'message': 'Internal server error'}, status=500)
