# core/uploads.py
import os
import time

from django.conf import settings

from .exceptions import ApiError
from .storage import discard, upload_image


def validate_upload(file):
    content_type = getattr(file, 'content_type', '') or ''
    if not (content_type.startswith('image/') or content_type.startswith('video/')):
        raise ApiError(400, 'Only image and video files are allowed')
    if file.size > settings.UPLOAD_MAX_BYTES:
        raise ApiError(400, 'File too large')
    return file


def build_key(folder, filename):
    ext = os.path.splitext(filename or '')[1].lower()
    return f"{folder}/{int(time.time() * 1000)}{ext}"


def store_file(file, folder):
    """Validate and push one uploaded file; returns {'url', 'key'}."""
    validate_upload(file)
    key = build_key(folder, file.name)
    return upload_image(file.read(), key, file.content_type)


class UploadBatch:
    """
    Collects the objects stored during one request so they can be removed
    again when the database write that follows them fails.

        with UploadBatch() as batch:
            url = batch.store(request.FILES['image'], 'authors')['url']
            Author.objects.create(..., profile_image=url)
    """

    def __init__(self):
        self.keys = []

    def store(self, file, folder):
        stored = store_file(file, folder)
        self.keys.append(stored['key'])
        return stored

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        if exc_type is not None:
            for key in self.keys:
                discard(key)
        return False
