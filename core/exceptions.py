# core/exceptions.py
from django.http import JsonResponse


class ApiError(Exception):
    """
    An error that maps directly onto an HTTP response.

    `key` picks the envelope the endpoint answers with:
        'status'  → {"status": false, "message": ...}
        'success' → {"success": false, "message": ...}
        'error'   → {"error": ...}
    """

    def __init__(self, status_code, message, key='status', extra=None):
        super().__init__(message)
        self.status_code = status_code
        self.message     = message
        self.key         = key
        self.extra       = extra or {}

    def to_payload(self):
        if self.key == 'error':
            payload = {'error': self.message}
        else:
            payload = {self.key: False, 'message': self.message}
        payload.update(self.extra)
        return payload

    def to_response(self):
        from .api import ApiJSONEncoder
        return JsonResponse(self.to_payload(), status=self.status_code, encoder=ApiJSONEncoder)


class StorageError(Exception):
    pass
