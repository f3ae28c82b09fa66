# core/api.py
"""
Request parsing, pagination and response helpers shared by every app.
"""

import json
import math
from decimal import Decimal

from django.core.paginator import EmptyPage, Paginator
from django.core.serializers.json import DjangoJSONEncoder
from django.http import JsonResponse

from .exceptions import ApiError


class ApiJSONEncoder(DjangoJSONEncoder):
    """Money goes out as JSON numbers, not strings."""

    def default(self, o):
        if isinstance(o, Decimal):
            return int(o) if o == o.to_integral_value() else float(o)
        return super().default(o)


def api_response(data=None, message=None, status=200, key='status', **extra):
    payload = {key: status < 400}
    if message is not None:
        payload['message'] = message
    if data is not None:
        payload['data'] = data
    payload.update(extra)
    return JsonResponse(payload, status=status, encoder=ApiJSONEncoder)


# ─────────────────────────────────────────────────────────────
# REQUEST PARSING
# ─────────────────────────────────────────────────────────────

def request_data(request):
    """Body as a plain dict, whether JSON or form/multipart."""
    content_type = request.content_type or ''
    if content_type.startswith('application/json'):
        if not request.body:
            return {}
        try:
            body = json.loads(request.body)
        except (json.JSONDecodeError, UnicodeDecodeError):
            raise ApiError(400, 'Malformed JSON body')
        if not isinstance(body, dict):
            raise ApiError(400, 'JSON body must be an object')
        return body

    if request.method in ('PATCH', 'PUT') and content_type.startswith('multipart/form-data'):
        # Django only parses multipart bodies for POST.
        if not hasattr(request, '_files'):
            request.method = 'POST'
            request._load_post_and_files()
            request.method = 'PATCH' if request.META.get('REQUEST_METHOD') == 'PATCH' else 'PUT'
        return request.POST.dict()

    if request.method in ('PATCH', 'PUT') and content_type.startswith('application/x-www-form-urlencoded'):
        from django.http import QueryDict
        return QueryDict(request.body).dict()

    return request.POST.dict()


def parse_ids(value):
    """
    Accept a list, a JSON-encoded list, or a comma-separated string.
    """
    if value in (None, ''):
        return []
    if isinstance(value, (list, tuple)):
        return list(value)
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return []
        try:
            parsed = json.loads(text)
            if isinstance(parsed, list):
                return parsed
        except json.JSONDecodeError:
            pass
        return [part.strip() for part in text.split(',') if part.strip()]
    return []


def parse_bool(value):
    return value is True or value == 'true'


def parse_int(value, default=0):
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def page_params(request, default_limit=10):
    page  = max(parse_int(request.GET.get('page'), 1), 1)
    limit = max(parse_int(request.GET.get('limit'), default_limit), 1)
    return page, limit


def paginate(request, queryset, serializer, default_limit=10):
    """
    {page, limit, results, totalPages, totalResults} for a queryset.
    Pages past the end come back empty rather than clamped.
    """
    page, limit = page_params(request, default_limit)
    paginator = Paginator(queryset, limit)

    try:
        objects = paginator.page(page).object_list
    except EmptyPage:
        objects = []

    total = paginator.count
    return {
        'page':         page,
        'limit':        limit,
        'results':      [serializer(obj) for obj in objects],
        'totalPages':   math.ceil(total / limit),
        'totalResults': total,
    }


def get_or_404(queryset, message, key='status', **lookup):
    """Fetch one object or raise a 404 ApiError in the endpoint's envelope."""
    try:
        return queryset.get(**lookup)
    except (queryset.model.DoesNotExist, ValueError, TypeError):
        raise ApiError(404, message, key=key)
