# core/auth.py
"""
Bearer-token authentication against Firebase.

The token is verified remotely; the subject is mapped onto the locally
mirrored users.User row, which carries the role used for authorization.
"""

import logging
from functools import wraps

from firebase_admin import auth as firebase_auth_api

from .exceptions import ApiError
from .firebase import get_app

logger = logging.getLogger(__name__)

ROLE_ANY   = 'any'
ROLE_USER  = 'user'
ROLE_ADMIN = 'admin'


# ─────────────────────────────────────────────────────────────
# FIREBASE WRAPPERS
# ─────────────────────────────────────────────────────────────

def verify_id_token(token):
    return firebase_auth_api.verify_id_token(token, app=get_app(), check_revoked=True)


def create_custom_token(uid):
    token = firebase_auth_api.create_custom_token(uid, app=get_app())
    return token.decode() if isinstance(token, bytes) else token


def get_user_by_email(email):
    return firebase_auth_api.get_user_by_email(email, app=get_app())


def bearer_token(request):
    header = request.headers.get('Authorization', '')
    if header.startswith('Bearer '):
        return header[7:].strip() or None
    return None


# ─────────────────────────────────────────────────────────────
# DECORATOR
# ─────────────────────────────────────────────────────────────

def authenticate(request, role=ROLE_ANY, allow_new=False):
    """
    Resolve the caller and attach it to the request.

    Known subject   → request.user
    Unknown subject → request.new_user / request.default_role when allow_new,
                      404 otherwise.
    """
    from users.models import User

    token = bearer_token(request)
    if not token:
        raise ApiError(400, 'Please authenticate')

    try:
        claims = verify_id_token(token)
    except firebase_auth_api.ExpiredIdTokenError:
        raise ApiError(401, 'Session expired')
    except Exception as e:
        logger.warning(f"Firebase token verification failed: {e}")
        raise ApiError(401, 'Failed to authenticate')

    request.new_user = None
    existing = User.objects.filter(firebase_uid=claims.get('uid')).first()

    if existing is None:
        if not allow_new:
            raise ApiError(404, "User doesn't exist. Please register.")
        request.new_user     = claims
        request.default_role = ROLE_ADMIN if role == ROLE_ADMIN else ROLE_USER
        return None

    roles = role if isinstance(role, (tuple, list, set, frozenset)) else (role,)
    if ROLE_ANY not in roles and existing.role not in roles:
        raise ApiError(403, "You don't have permission")
    if existing.is_blocked:
        raise ApiError(403, 'User is blocked')
    if existing.is_deleted:
        raise ApiError(410, "User doesn't exist anymore")

    request.user = existing
    return existing


def firebase_auth(role=ROLE_ANY, allow_new=False):
    def decorator(view_func):
        @wraps(view_func)
        def wrapper(request, *args, **kwargs):
            authenticate(request, role=role, allow_new=allow_new)
            return view_func(request, *args, **kwargs)
        return wrapper
    return decorator
