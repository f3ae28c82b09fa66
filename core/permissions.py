# core/permissions.py
"""
Who may do what.

Every protected route goes through `authorize(resource, action)`, which
authenticates the caller and checks their role against POLICY. Public
reads are either left undecorated or routed through authorize_writes.
"""

from functools import wraps

from .auth import ROLE_ADMIN, ROLE_USER, firebase_auth

ADMIN = frozenset({ROLE_ADMIN})
ANY   = frozenset({ROLE_USER, ROLE_ADMIN})


POLICY = {
    # accounts
    ('account', 'register'):        ANY,
    ('account', 'admin_signup'):    ADMIN,
    ('account', 'login'):           ANY,
    ('profile', 'update'):          ANY,
    ('profile', 'soft_delete'):     ANY,
    ('user', 'list'):               ADMIN,
    ('user', 'read'):               ADMIN,
    ('user', 'block'):              ADMIN,
    ('user', 'delete'):             ADMIN,
    ('address', 'manage'):          ANY,

    # content
    ('blog', 'manage'):             ADMIN,
    ('author', 'manage'):           ADMIN,
    ('category', 'manage'):         ADMIN,
    ('topic', 'manage'):            ADMIN,
    ('favorite', 'manage'):         ANY,
    ('contact', 'list'):            ADMIN,
    ('media', 'upload'):            ADMIN,

    # commerce
    ('product', 'manage'):          ADMIN,
    ('product_category', 'manage'): ADMIN,
    ('coupon', 'manage'):           ADMIN,
    ('coupon', 'apply'):            ANY,
    ('cart', 'manage'):             ANY,
    ('wishlist', 'manage'):         ANY,
    ('order', 'create'):            ANY,
    ('order', 'pay'):               ANY,
    ('order', 'read'):              ANY,
    ('order', 'list_all'):          ADMIN,
    ('order', 'update_status'):     ADMIN,

    # reviews
    ('review', 'create'):           ANY,
    ('review', 'read_own'):         ANY,
    ('review', 'list_all'):         ADMIN,
    ('review', 'moderate'):         ADMIN,

    # statistics
    ('stats', 'read'):              ADMIN,
}

# Routes on which an unregistered subject is let through as request.new_user.
REGISTRATION = {('account', 'register'), ('account', 'admin_signup')}


def allowed_roles(resource, action):
    try:
        return POLICY[(resource, action)]
    except KeyError:
        raise LookupError(f"No policy for {resource}.{action}")


def is_admin(user):
    return getattr(user, 'role', None) == ROLE_ADMIN


def authorize(resource, action):
    roles     = allowed_roles(resource, action)
    allow_new = (resource, action) in REGISTRATION
    role      = ROLE_ADMIN if roles == ADMIN else tuple(roles)

    return firebase_auth(role=role, allow_new=allow_new)


def authorize_writes(resource, action):
    """For routes whose GET is public and whose other methods are not."""
    guard = authorize(resource, action)

    def decorator(view_func):
        guarded = guard(view_func)

        @wraps(view_func)
        def wrapper(request, *args, **kwargs):
            if request.method in ('GET', 'HEAD', 'OPTIONS'):
                return view_func(request, *args, **kwargs)
            return guarded(request, *args, **kwargs)
        return wrapper
    return decorator
