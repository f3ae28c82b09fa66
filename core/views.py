# core/views.py
from django.http import JsonResponse


def health(request):
    return JsonResponse({'status': True, 'message': 'OK'})


def not_found(request, exception=None):
    return JsonResponse({'status': False, 'message': 'Not found'}, status=404)


def server_error(request):
    return JsonResponse({'status': False, 'message': 'Internal server error'}, status=500)
