# orders/services.py
"""
Checkout: price the cart lines against the catalog, apply a coupon, open a
Razorpay order for the total and persist the result.
"""

import logging
import uuid
from decimal import Decimal, InvalidOperation

from django.db import transaction
from django.utils import timezone

from catalog.models import Product
from catalog.packages import effective_price, get_package
from core.exceptions import ApiError
from promotions.services import record_usage, round_total, validate_coupon
from users.models import Address

from .models import Order, OrderItem
from .payment_services import PaymentGatewayError, RazorpayPaymentService

logger = logging.getLogger(__name__)


def order_error(message, status=400, **extra):
    return ApiError(status, message, key='error', extra=extra or None)


def _as_int(value):
    """Whole number from JSON or form input; None for anything fractional."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    try:
        number = Decimal(str(value).strip())
    except (InvalidOperation, TypeError, ValueError):
        return None
    if not number.is_finite() or number != number.to_integral_value():
        return None
    return int(number)


def price_line(item):
    """
    Validate one {productId, quantityIndex, packageIndex, quantity} line and
    return the unsaved OrderItem for it.
    """
    if not isinstance(item, dict):
        raise order_error('Each item must be an object')

    product_id = item.get('productId')
    pk = _as_int(product_id)
    product = None
    if pk is not None:
        product = Product.objects.filter(pk=pk, is_deleted=False).first()
    if product is None or product.status != 'active':
        raise order_error(f'Product {product_id} not available')

    quantity_index = _as_int(item.get('quantityIndex'))
    tiers = product.quantity_details or []
    if quantity_index is None or not 0 <= quantity_index < len(tiers):
        raise order_error('Invalid quantity index')

    package_index = _as_int(item.get('packageIndex'))
    if package_index is None:
        raise order_error('Invalid package index')
    try:
        tier, package = get_package(tiers, quantity_index, package_index)
    except IndexError:
        raise order_error('Invalid package index')

    quantity = _as_int(item.get('quantity'))
    if quantity is None or quantity < 1:
        raise order_error('Quantity must be a positive integer')

    price = effective_price(package)
    if price is None:
        raise order_error('Invalid package index')

    return OrderItem(
        product=product,
        product_name=product.name,
        quantity_index=quantity_index,
        package_index=package_index,
        quantity=quantity,
        price=price,
        total_price=price * quantity,
        package_snapshot={
            'quantityLabel':  tier.get('quantity'),
            'name':           package.get('name', ''),
            'basePrice':      package.get('basePrice', package.get('price')),
            'sellPrice':      package.get('sellPrice', package.get('sellingPrice')),
            'discountType':   package.get('discountType'),
            'discountAmount': package.get('discountAmount', package.get('discountValue')),
        },
    )


def create_order(user, items, delivery_address_id, coupon_code=None):
    """
    Every check runs before the gateway is called and nothing is written
    until the gateway has answered. A failure while saving after that
    leaves the Razorpay order dangling; it is not cancelled.
    """
    address = None
    address_pk = _as_int(delivery_address_id)
    if address_pk is not None:
        address = Address.objects.filter(pk=address_pk, user=user).first()
    if address is None:
        raise order_error('Invalid delivery address')

    if not isinstance(items, list) or not items:
        raise order_error('Order must contain at least one item')

    lines = [price_line(item) for item in items]
    subtotal = sum((line.total_price for line in lines), Decimal('0'))

    coupon = None
    discount = Decimal('0')
    if coupon_code:
        result = validate_coupon(coupon_code, subtotal)
        if not result['valid']:
            raise order_error(result['error'])
        coupon   = result['coupon']
        discount = result['discount_amount']

    total = round_total(subtotal, discount)
    if total <= 0:
        raise order_error('Order total must be greater than zero')

    receipt = f"rcpt_{uuid.uuid4().hex[:20]}"
    try:
        razorpay_order_id = RazorpayPaymentService.create_order(
            amount=int(total * 100),
            receipt=receipt,
            notes={
                'userId':     str(user.id),
                'couponCode': coupon.code if coupon else '',
            },
        )
    except PaymentGatewayError:
        raise order_error('Failed to create payment order', status=502)

    with transaction.atomic():
        order = Order.objects.create(
            user=user,
            subtotal=subtotal,
            coupon_code=coupon.code if coupon else None,
            discount_amount=discount,
            total_amount=total,
            delivery_address=address,
            razorpay_order_id=razorpay_order_id,
        )
        for line in lines:
            line.order = order
        OrderItem.objects.bulk_create(lines)
        if coupon:
            record_usage(coupon)

    logger.info(
        f"Order {order.id} created for user {user.id}: subtotal={subtotal} "
        f"discount={discount} total={total} razorpay={razorpay_order_id}"
    )
    return order


def verify_payment(user, order_id, razorpay_order_id, razorpay_payment_id, razorpay_signature):
    """Mark the order paid if the Razorpay callback signature checks out."""
    if not RazorpayPaymentService.verify_signature(razorpay_order_id, razorpay_payment_id, razorpay_signature):
        logger.warning(f"Signature mismatch for razorpay order {razorpay_order_id}")
        raise order_error('Invalid payment signature')

    order = None
    pk = _as_int(order_id)
    if pk is not None:
        order = Order.objects.filter(pk=pk, user=user).first()
    if order is None:
        raise order_error('Order not found', status=404)
    if order.razorpay_order_id != razorpay_order_id:
        raise order_error('Payment does not belong to this order')

    order.payment_status      = 'paid'
    order.status              = 'confirmed'
    order.razorpay_payment_id = razorpay_payment_id
    order.razorpay_signature  = razorpay_signature
    order.payment_date        = timezone.now()
    order.save()

    logger.info(f"Payment {razorpay_payment_id} verified for order {order.id}")
    return order
