# promotions/services.py
"""
Coupon validation and discount arithmetic shared by the checkout pipeline
and the standalone apply-coupon preview.
"""

from decimal import Decimal, ROUND_HALF_UP

from django.db.models import F

from .models import Coupon

CENT = Decimal('0.01')


def format_amount(value):
    """600.00 → '600', 99.50 → '99.5' for user-facing messages."""
    return format(Decimal(value).normalize(), 'f')


def compute_discount(coupon, subtotal):
    """
    percent → subtotal × value / 100, flat → value; either way clamped to
    max_discount first, then rounded half-up to cents.
    """
    subtotal = Decimal(subtotal)
    if coupon.discount_type == 'percent':
        raw = subtotal * coupon.discount_value / Decimal('100')
    else:
        raw = Decimal(coupon.discount_value)
    discount = min(raw, Decimal(coupon.max_discount))
    return discount.quantize(CENT, rounding=ROUND_HALF_UP)


def round_total(subtotal, discount_amount):
    """Amount payable, rounded half away from zero to whole currency units."""
    return (Decimal(subtotal) - Decimal(discount_amount)).quantize(Decimal('1'), rounding=ROUND_HALF_UP)


def validate_coupon(coupon_code, subtotal):
    """Validate coupon and return discount info"""
    code = (coupon_code or '').strip().upper()
    coupon = Coupon.objects.filter(code=code, status='active').first()
    if coupon is None:
        return {'valid': False, 'error': 'Invalid coupon code'}

    subtotal = Decimal(subtotal)
    if subtotal < coupon.min_order_value:
        return {
            'valid': False,
            'error': f'Minimum order value should be ₹{format_amount(coupon.min_order_value)} to use this coupon',
            'min_order_value': coupon.min_order_value,
        }

    return {
        'valid': True,
        'coupon': coupon,
        'discount_amount': compute_discount(coupon, subtotal),
    }


def record_usage(coupon):
    Coupon.objects.filter(pk=coupon.pk).update(usage_count=F('usage_count') + 1)
