# promotions/views.py
import logging
from decimal import Decimal, InvalidOperation

from django.db import IntegrityError, transaction
from django.db.models import Q
from django.http import JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_GET, require_http_methods, require_POST

from core.api import ApiJSONEncoder, api_response, get_or_404, paginate, request_data
from core.exceptions import ApiError
from core.permissions import authorize

from .models import Coupon
from .services import round_total, validate_coupon

logger = logging.getLogger(__name__)

DISCOUNT_TYPES = {choice for choice, _ in Coupon.DISCOUNT_TYPES}
STATUSES       = {choice for choice, _ in Coupon.STATUS_CHOICES}
AMOUNT_FIELDS  = {
    'discountValue': 'discount_value',
    'maxDiscount':   'max_discount',
    'minOrderValue': 'min_order_value',
}


def coupon_to_dict(coupon):
    return {
        'id':            coupon.id,
        'code':          coupon.code,
        'discountType':  coupon.discount_type,
        'discountValue': coupon.discount_value,
        'maxDiscount':   coupon.max_discount,
        'minOrderValue': coupon.min_order_value,
        'usageCount':    coupon.usage_count,
        'status':        coupon.status,
        'createdAt':     coupon.created_at,
        'updatedAt':     coupon.updated_at,
    }


def parse_amount(value, field):
    try:
        amount = Decimal(str(value))
    except (InvalidOperation, TypeError, ValueError):
        raise ApiError(400, f'{field} must be a number')
    if not amount.is_finite() or amount < 0:
        raise ApiError(400, f'{field} must be a non-negative number')
    return amount


def _coupon_listing(request, coupons):
    search = request.GET.get('search', '').strip()
    if search:
        coupons = coupons.filter(Q(code__icontains=search) | Q(discount_type__icontains=search))
    ordering = 'created_at' if request.GET.get('sort') == 'old_to_new' else '-created_at'
    return coupons.order_by(ordering)


def _save_coupon(coupon):
    try:
        with transaction.atomic():
            coupon.save()
    except IntegrityError:
        raise ApiError(409, 'Coupon code already exists')


# ─────────────────────────────────────────────────────────────
# ADMIN
# ─────────────────────────────────────────────────────────────

@csrf_exempt
@require_http_methods(["GET", "POST"])
@authorize('coupon', 'manage')
def admin_coupon_collection(request):
    if request.method == 'GET':
        coupons = Coupon.objects.all()
        status = request.GET.get('status')
        if status and status != 'all':
            coupons = coupons.filter(status=status)
        return api_response(paginate(request, _coupon_listing(request, coupons), coupon_to_dict))

    data = request_data(request)
    code = str(data.get('code') or '').strip()
    if not code:
        raise ApiError(400, 'Coupon code is required')
    if data.get('discountType') not in DISCOUNT_TYPES:
        raise ApiError(400, 'discountType must be percent or flat')

    values = {}
    for key, field in AMOUNT_FIELDS.items():
        if data.get(key) in (None, ''):
            raise ApiError(400, f'{key} is required')
        values[field] = parse_amount(data[key], key)

    status = data.get('status') or 'active'
    if status not in STATUSES:
        raise ApiError(400, 'Invalid status')

    coupon = Coupon(code=code, discount_type=data['discountType'], status=status, **values)
    _save_coupon(coupon)
    logger.info(f"Coupon {coupon.code} created")
    return api_response(coupon_to_dict(coupon), message='Coupon created successfully', status=201)


@csrf_exempt
@require_http_methods(["GET", "PATCH", "PUT", "DELETE"])
@authorize('coupon', 'manage')
def admin_coupon_detail(request, coupon_id):
    coupon = get_or_404(Coupon.objects.all(), 'Coupon not found', pk=coupon_id)

    if request.method == 'GET':
        return api_response(coupon_to_dict(coupon))

    if request.method == 'DELETE':
        snapshot = coupon_to_dict(coupon)
        coupon.delete()
        return api_response(snapshot, message='Coupon deleted successfully')

    data = request_data(request)
    if 'code' in data:
        if not str(data['code'] or '').strip():
            raise ApiError(400, 'Coupon code cannot be empty')
        coupon.code = str(data['code'])
    if 'discountType' in data:
        if data['discountType'] not in DISCOUNT_TYPES:
            raise ApiError(400, 'discountType must be percent or flat')
        coupon.discount_type = data['discountType']
    for key, field in AMOUNT_FIELDS.items():
        if key in data:
            setattr(coupon, field, parse_amount(data[key], key))
    if 'status' in data:
        if data['status'] not in STATUSES:
            raise ApiError(400, 'Invalid status')
        coupon.status = data['status']

    _save_coupon(coupon)
    return api_response(coupon_to_dict(coupon), message='Coupon updated successfully')


@csrf_exempt
@require_http_methods(["PATCH"])
@authorize('coupon', 'manage')
def admin_coupon_toggle_status(request, coupon_id):
    coupon = get_or_404(Coupon.objects.all(), 'Coupon not found', pk=coupon_id)
    coupon.status = 'inactive' if coupon.status == 'active' else 'active'
    coupon.save(update_fields=['status', 'updated_at'])
    return api_response(coupon_to_dict(coupon), message=f'Coupon is now {coupon.status}')


# ─────────────────────────────────────────────────────────────
# PUBLIC
# ─────────────────────────────────────────────────────────────

@require_GET
def public_coupon_list(request):
    coupons = Coupon.objects.filter(status='active')
    if request.GET.get('discountType'):
        coupons = coupons.filter(discount_type=request.GET['discountType'])
    return api_response(paginate(request, _coupon_listing(request, coupons), coupon_to_dict))


@csrf_exempt
@require_POST
@authorize('coupon', 'apply')
def apply_coupon(request):
    """Preview a coupon against a client-side subtotal. Nothing is written."""
    data        = request_data(request)
    coupon_code = data.get('couponCode')
    raw_total   = data.get('subtotal')

    if not coupon_code or not raw_total:
        raise ApiError(400, 'Coupon code and subtotal are required', key='error')
    try:
        subtotal = Decimal(str(raw_total))
    except (InvalidOperation, TypeError, ValueError):
        raise ApiError(400, 'Subtotal must be a number', key='error')
    if not subtotal.is_finite():
        raise ApiError(400, 'Subtotal must be a number', key='error')

    result = validate_coupon(coupon_code, subtotal)
    if not result['valid']:
        extra = {'minOrderValue': result['min_order_value']} if 'min_order_value' in result else None
        raise ApiError(400, result['error'], key='error', extra=extra)

    coupon   = result['coupon']
    discount = result['discount_amount']

    return JsonResponse({
        'message': 'Coupon applied successfully',
        'coupon': {
            'code':          coupon.code,
            'discountType':  coupon.discount_type,
            'discountValue': coupon.discount_value,
            'maxDiscount':   coupon.max_discount,
        },
        'subtotal':       subtotal,
        'discountAmount': discount,
        'totalAmount':    round_total(subtotal, discount),
    }, encoder=ApiJSONEncoder)
