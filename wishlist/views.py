# wishlist/views.py

import logging

from django.db import transaction
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_GET, require_POST

from catalog.models import Product
from catalog.serializers import product_summary
from core.api import api_response, parse_int, request_data
from core.exceptions import ApiError
from core.permissions import authorize

from .models import Wishlist, WishlistItem

logger = logging.getLogger(__name__)


# ─────────────────────────────────────────────
# HELPERS
# ─────────────────────────────────────────────

def wishlist_to_dict(wishlist):
    return {
        'id':    wishlist.id,
        'user':  wishlist.user_id,
        'items': [
            {'product': product_summary(item.product), 'createdAt': item.created_at}
            for item in wishlist.items.select_related('product')
        ],
        'createdAt': wishlist.created_at,
        'updatedAt': wishlist.updated_at,
    }


# ─────────────────────────────────────────────
# TOGGLE (add / remove)
# ─────────────────────────────────────────────

@csrf_exempt
@require_POST
@authorize('wishlist', 'manage')
def toggle_wishlist(request):
    """
    Add the product if it isn't in the wishlist; remove it if it is.
    """
    product_id = request_data(request).get('productId')
    if not product_id:
        raise ApiError(400, 'Product ID is required')

    product = Product.objects.filter(pk=parse_int(product_id, -1), is_deleted=False).first()
    if product is None:
        raise ApiError(404, 'Product not found')

    with transaction.atomic():
        wishlist, _ = Wishlist.objects.get_or_create(user=request.user)
        removed, _ = WishlistItem.objects.filter(wishlist=wishlist, product=product).delete()
        if removed:
            message = 'Removed from wishlist'
        else:
            WishlistItem.objects.create(wishlist=wishlist, product=product)
            message = 'Added to wishlist'
        wishlist.save(update_fields=['updated_at'])

    logger.info(f"User {request.user.id}: product {product.id} {message.lower()}")
    return api_response(wishlist_to_dict(wishlist), message=message)


# ─────────────────────────────────────────────
# WISHLIST
# ─────────────────────────────────────────────

@require_GET
@authorize('wishlist', 'manage')
def wishlist_view(request):
    wishlist = Wishlist.objects.filter(user=request.user).first()
    if wishlist is None:
        raise ApiError(404, 'Wishlist not found')
    return api_response(wishlist_to_dict(wishlist), message='Wishlist fetched')
