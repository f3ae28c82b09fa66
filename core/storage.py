# core/storage.py
"""
Cloudflare R2 object storage (S3-compatible API via boto3).

Objects are public; their URLs are R2_PUBLIC_BASE_URL/<bucket>/<key>, which
is the shape extract_key() expects back when an object is replaced or removed.
"""

import logging
from urllib.parse import urlparse

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError
from django.conf import settings

from .exceptions import StorageError

logger = logging.getLogger(__name__)

_client = None


def get_client():
    global _client
    if _client is None:
        _client = boto3.client(
            's3',
            endpoint_url=settings.R2_ENDPOINT,
            aws_access_key_id=settings.R2_ACCESS_KEY_ID,
            aws_secret_access_key=settings.R2_SECRET_ACCESS_KEY,
            region_name='auto',
            config=Config(s3={'addressing_style': 'path'}),
        )
    return _client


def public_url(key):
    return f"{settings.R2_PUBLIC_BASE_URL}/{settings.R2_BUCKET_NAME}/{key}"


def upload_image(buffer, key, content_type):
    try:
        get_client().put_object(
            Bucket=settings.R2_BUCKET_NAME,
            Key=key,
            Body=buffer,
            ContentType=content_type,
            ACL='public-read',
        )
    except (BotoCoreError, ClientError) as e:
        logger.error(f"R2 upload failed for {key}: {e}", exc_info=True)
        raise StorageError(f"Upload failed for {key}") from e
    return {'url': public_url(key), 'key': key}


def delete_image(key):
    if not key:
        return
    try:
        get_client().delete_object(Bucket=settings.R2_BUCKET_NAME, Key=key)
    except (BotoCoreError, ClientError) as e:
        logger.error(f"R2 deletion failed for {key}: {e}", exc_info=True)
        raise StorageError(f"Delete failed for {key}") from e


def extract_key(full_url):
    """Storage key of a previously issued URL, or None."""
    if not full_url:
        return None
    try:
        parsed = urlparse(full_url)
    except ValueError:
        logger.warning(f"Invalid URL passed to extract_key: {full_url}")
        return None
    if not parsed.scheme or not parsed.netloc:
        logger.warning(f"Invalid URL passed to extract_key: {full_url}")
        return None

    segments = parsed.path.split('/')
    if len(segments) < 3 or segments[1] != settings.R2_BUCKET_NAME:
        logger.warning(
            f"URL bucket mismatch (expected {settings.R2_BUCKET_NAME!r}, "
            f"got {segments[1] if len(segments) > 1 else ''!r})"
        )
        return None
    return '/'.join(segments[2:]) or None


def discard(url_or_key):
    """
    Best-effort delete used for cleanup after a failed write or a
    replacement. Failures are logged, never raised.
    """
    if not url_or_key:
        return
    key = extract_key(url_or_key) if '://' in url_or_key else url_or_key
    if not key:
        return
    try:
        delete_image(key)
    except StorageError:
        logger.warning(f"Could not clean up stored object {key}")
