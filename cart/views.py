# cart/views.py
import logging
from decimal import Decimal

from django.db import transaction
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_GET, require_POST

from catalog.models import Product
from catalog.packages import effective_price, resolve_package
from catalog.serializers import product_summary
from core.api import api_response, request_data
from core.exceptions import ApiError
from core.permissions import authorize

from .models import Cart, CartItem

logger = logging.getLogger(__name__)


# ============================================
# HELPER FUNCTIONS
# ============================================

def whole_number(value, field):
    """Non-negative int from JSON or form input."""
    if isinstance(value, bool):
        raise ApiError(400, f'{field} must be a non-negative integer')
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ApiError(400, f'{field} must be a non-negative integer')
    if number < 0 or str(number) != str(value).strip():
        raise ApiError(400, f'{field} must be a non-negative integer')
    return number


def cart_item_to_dict(item):
    product  = item.product
    resolved = resolve_package(product.quantity_details, item.quantity_index, item.package_index)
    price    = effective_price(resolved['package']) or Decimal('0')
    return {
        'id':            item.id,
        'product':       product_summary(product),
        'quantityIndex': item.quantity_index,
        'packageIndex':  item.package_index,
        'quantity':      item.quantity,
        'quantityLabel': resolved['quantityLabel'],
        'package':       resolved['package'],
        'matchReason':   resolved['matchReason'],
        'lineTotal':     price * item.quantity,
    }


def cart_to_dict(cart):
    items = [cart_item_to_dict(item) for item in cart.items.select_related('product')]
    return {
        'id':         cart.id,
        'user':       cart.user_id,
        'items':      items,
        'totalItems': sum(line['quantity'] for line in items),
        'subtotal':   sum((line['lineTotal'] for line in items), Decimal('0')),
        'createdAt':  cart.created_at,
        'updatedAt':  cart.updated_at,
    }


# ============================================
# CART
# ============================================

@csrf_exempt
@require_POST
@authorize('cart', 'manage')
def upsert_cart_item(request):
    """
    Set the quantity of one (product, quantityIndex, packageIndex) line.
    Quantity 0 removes the line.
    """
    data = request_data(request)
    fields = ('productId', 'quantityIndex', 'packageIndex', 'quantity')
    if not data.get('productId') or any(data.get(f) in (None, '') for f in fields):
        raise ApiError(400, 'All fields are required')

    quantity_index = whole_number(data['quantityIndex'], 'quantityIndex')
    package_index  = whole_number(data['packageIndex'], 'packageIndex')
    quantity       = whole_number(data['quantity'], 'quantity')

    product = Product.objects.filter(pk=whole_number(data['productId'], 'productId'), is_deleted=False).first()
    if product is None:
        raise ApiError(404, 'Product not found')

    cart = Cart.objects.filter(user=request.user).first()
    if cart is None and quantity == 0:
        return api_response(None, message='Nothing to remove')

    lookup = {
        'product':        product,
        'quantity_index': quantity_index,
        'package_index':  package_index,
    }

    with transaction.atomic():
        if cart is None:
            cart = Cart.objects.create(user=request.user)
            CartItem.objects.create(cart=cart, quantity=quantity, **lookup)
            message = 'Cart created'
        elif quantity == 0:
            cart.items.filter(**lookup).delete()
            message = 'Item removed'
        else:
            CartItem.objects.update_or_create(cart=cart, defaults={'quantity': quantity}, **lookup)
            message = 'Cart updated'
        cart.save(update_fields=['updated_at'])

    logger.info(f"Cart {cart.id} for user {request.user.id}: {message}")
    return api_response(cart_to_dict(cart), message=message)


@require_GET
@authorize('cart', 'manage')
def cart_view(request):
    cart = Cart.objects.filter(user=request.user).first()
    if cart is None:
        raise ApiError(404, 'Cart not found')
    return api_response(cart_to_dict(cart), message='Cart fetched')
