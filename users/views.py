# users/views.py
import logging

from django.db import IntegrityError, transaction
from django.db.models.deletion import ProtectedError
from django.db.models import Q
from django.utils.dateparse import parse_date
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_http_methods, require_POST

from core import auth as firebase
from core.api import api_response, get_or_404, paginate, parse_bool, request_data
from core.exceptions import ApiError
from core.permissions import authorize, is_admin
from core.storage import discard
from core.uploads import UploadBatch

from .models import Address, User
from .serializers import address_to_dict, user_to_dict
from .services import IdentityProviderError, IdentityToolkitService

logger = logging.getLogger(__name__)

PROFILE_FIELDS = {
    'fullName':     'full_name',
    'gender':       'gender',
    'dateOfBirth':  'date_of_birth',
    'profileImage': 'profile_image',
}


# ─────────────────────────────────────────────────────────────
# HELPERS
# ─────────────────────────────────────────────────────────────

def profile_from_body(data):
    profile = {}
    for key, field in PROFILE_FIELDS.items():
        if key not in data:
            continue
        value = data[key]
        if field == 'date_of_birth' and value:
            parsed = parse_date(str(value)[:10])
            if parsed is None:
                raise ApiError(400, 'Invalid dateOfBirth')
            value = parsed
        profile[field] = value or None
    return profile


def _register(request, message):
    if request.new_user is None:
        return api_response(
            user_to_dict(request.user), message='User already exists', status=409,
        )

    profile = profile_from_body(request_data(request))
    try:
        user = User.objects.create_from_claims(request.new_user, role=request.default_role, **profile)
    except IntegrityError:
        raise ApiError(409, 'User already exists')

    logger.info(f"Registered {user.role} {user.firebase_uid}")
    return api_response(user_to_dict(user), message=message, status=201)


# ─────────────────────────────────────────────────────────────
# AUTH
# ─────────────────────────────────────────────────────────────

@csrf_exempt
@require_POST
@authorize('account', 'register')
def register(request):
    return _register(request, 'User registered successfully')


@csrf_exempt
@require_POST
@authorize('account', 'admin_signup')
def admin_signup(request):
    return _register(request, 'Admin registered successfully')


@csrf_exempt
@require_POST
@authorize('account', 'login')
def login(request):
    return api_response(user_to_dict(request.user), message='User logged in successfully')


@csrf_exempt
@require_POST
def generate_token(request):
    uid = request_data(request).get('uid')
    if not uid:
        raise ApiError(400, 'uid is required')

    try:
        tokens = IdentityToolkitService.exchange_custom_token(uid)
    except IdentityProviderError:
        raise ApiError(502, 'Failed to exchange custom token')

    return api_response(tokens, message='Token generated successfully')


@csrf_exempt
@require_POST
def forgot_password(request):
    email = (request_data(request).get('email') or '').strip()
    if not email:
        raise ApiError(400, 'Email is required')

    try:
        firebase.get_user_by_email(email)
    except Exception:
        raise ApiError(404, 'Email not registered')

    try:
        IdentityToolkitService.send_password_reset(email)
    except IdentityProviderError as e:
        raise ApiError(500, str(e) or 'Failed to send reset email')

    return api_response(message='Password reset email sent successfully')


# ─────────────────────────────────────────────────────────────
# PROFILE
# ─────────────────────────────────────────────────────────────

@csrf_exempt
@require_http_methods(["PATCH", "PUT"])
@authorize('profile', 'update')
def update_me(request):
    data    = request_data(request)
    user    = request.user
    profile = profile_from_body(data)
    profile.pop('profile_image', None)
    old_image = user.profile_image

    with UploadBatch() as uploads:
        if 'profilePic' in request.FILES:
            profile['profile_image'] = uploads.store(request.FILES['profilePic'], 'users')['url']

        for field, value in profile.items():
            setattr(user, field, value)
        user.save()

    if 'profile_image' in profile and old_image:
        discard(old_image)

    return api_response(user_to_dict(user), message='Your details are updated')


@csrf_exempt
@require_POST
@authorize('profile', 'soft_delete')
def soft_delete_user(request, user_id):
    if not is_admin(request.user) and user_id != request.user.id:
        raise ApiError(401, 'Sorry, you are not authorized to do this')

    updated = User.objects.filter(id=user_id).update(is_deleted=True)
    if not updated:
        raise ApiError(404, 'User not found')

    logger.info(f"User {user_id} soft-deleted by {request.user.id}")
    return api_response(message='User has been removed successfully.')


@csrf_exempt
@require_http_methods(["DELETE"])
@authorize('user', 'delete')
def delete_user(request, user_id):
    user = get_or_404(User.objects.all(), 'User not found', id=user_id)
    image = user.profile_image
    try:
        user.delete()
    except ProtectedError:
        raise ApiError(409, 'User has orders and cannot be deleted')
    discard(image)
    logger.info(f"User {user_id} deleted by admin {request.user.id}")
    return api_response(message='The user deletion process has been completed successfully.')


# ─────────────────────────────────────────────────────────────
# ADMIN / USERS
# ─────────────────────────────────────────────────────────────

@require_http_methods(["GET"])
@authorize('user', 'list')
def admin_user_list(request):
    users  = User.objects.all()
    search = request.GET.get('search', '').strip()
    role   = request.GET.get('role')

    if search:
        users = users.filter(
            Q(full_name__icontains=search) | Q(email__icontains=search) | Q(phone_number__icontains=search)
        )
    if role in ('user', 'admin'):
        users = users.filter(role=role)

    return api_response(paginate(request, users.order_by('-created_at'), user_to_dict))


@require_http_methods(["GET"])
@authorize('user', 'read')
def admin_user_detail(request, user_id):
    user = get_or_404(User.objects.all(), 'User not found', id=user_id)
    return api_response(user_to_dict(user))


@csrf_exempt
@require_http_methods(["PUT", "PATCH"])
@authorize('user', 'block')
def admin_toggle_block(request, user_id):
    user = get_or_404(User.objects.all(), 'User not found', id=user_id)
    user.is_blocked = not user.is_blocked
    user.save(update_fields=['is_blocked', 'updated_at'])

    state = 'blocked' if user.is_blocked else 'unblocked'
    logger.info(f"User {user.id} {state} by admin {request.user.id}")
    return api_response(user_to_dict(user), message=f'User {state} successfully')


# ─────────────────────────────────────────────────────────────
# ADDRESSES
# ─────────────────────────────────────────────────────────────

ADDRESS_FIELDS = ('address', 'zipcode', 'city', 'state')
LABELS = {choice for choice, _ in Address.LABELS}


def _clean_label(value):
    if value not in LABELS:
        raise ApiError(400, 'Label must be one of Home, Work, Other')
    return value


def _save_address(address):
    try:
        with transaction.atomic():
            address.save()
    except IntegrityError:
        raise ApiError(409, 'Address already exists')


@csrf_exempt
@require_http_methods(["GET", "POST"])
@authorize('address', 'manage')
def address_collection(request):
    if request.method == 'GET':
        addresses = Address.objects.filter(user=request.user).order_by('-is_default', '-created_at')
        return api_response(paginate(request, addresses, address_to_dict))

    data   = request_data(request)
    values = {field: str(data.get(field) or '').strip() for field in ADDRESS_FIELDS}
    if not all(values.values()):
        raise ApiError(400, 'Address, zipcode, city, and state are required')

    address = Address(
        user=request.user,
        label=_clean_label(data.get('label') or 'Other'),
        is_default=parse_bool(data.get('isDefault')),
        **values,
    )
    _save_address(address)
    return api_response(address_to_dict(address), message='Address created successfully', status=201)


@csrf_exempt
@require_http_methods(["GET", "PATCH", "PUT", "DELETE"])
@authorize('address', 'manage')
def address_detail(request, address_id):
    address = get_or_404(Address.objects.filter(user=request.user), 'Address not found', id=address_id)

    if request.method == 'GET':
        return api_response(address_to_dict(address))

    if request.method == 'DELETE':
        return _delete_address(request, address)

    data = request_data(request)
    for field in ADDRESS_FIELDS:
        if field in data:
            value = str(data[field] or '').strip()
            if not value:
                raise ApiError(400, f'{field} cannot be empty')
            setattr(address, field, value)
    if 'label' in data:
        address.label = _clean_label(data['label'])
    if 'isDefault' in data:
        address.is_default = parse_bool(data['isDefault'])

    _save_address(address)
    return api_response(address_to_dict(address), message='Address updated successfully')


def _delete_address(request, address):
    snapshot = address_to_dict(address)
    with transaction.atomic():
        address.delete()
        if snapshot['isDefault']:
            newest = Address.objects.filter(user=request.user).order_by('-created_at', '-id').first()
            if newest:
                newest.is_default = True
                newest.save(update_fields=['is_default', 'updated_at'])

    return api_response({'deletedAddress': snapshot}, message='Address deleted successfully')


@csrf_exempt
@require_http_methods(["PATCH", "PUT"])
@authorize('address', 'manage')
def set_default_address(request, address_id):
    address = get_or_404(Address.objects.filter(user=request.user), 'Address not found', id=address_id)
    address.is_default = True
    _save_address(address)
    return api_response(address_to_dict(address), message='Default address updated successfully')
