# reviews/views.py
import logging

from django.db import IntegrityError, transaction
from django.db.models import Count, Q
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_GET, require_http_methods, require_POST

from catalog.models import Product
from catalog.serializers import product_summary
from core.api import api_response, get_or_404, paginate, parse_int, request_data
from core.exceptions import ApiError
from core.permissions import authorize
from orders.models import Order

from .models import Review

logger = logging.getLogger(__name__)

REVIEW_STATUSES = {choice for choice, _ in Review.STATUS_CHOICES}

SORT_OPTIONS = {
    'newest':         ('-created_at', '-id'),
    'oldest':         ('created_at', 'id'),
    'highest_rating': ('-rating', '-created_at'),
    'lowest_rating':  ('rating', '-created_at'),
}


def review_to_dict(review):
    user = review.user
    return {
        'id':      review.id,
        'user':    {'id': user.id, 'fullName': user.full_name, 'email': user.email or None},
        'product': product_summary(review.product),
        'order': {
            'id':              review.order_id,
            'razorpayOrderId': review.order.razorpay_order_id,
            'createdAt':       review.order.created_at,
        },
        'rating':             review.rating,
        'message':            review.message,
        'isVerifiedPurchase': review.is_verified_purchase,
        'status':             review.status,
        'createdAt':          review.created_at,
        'updatedAt':          review.updated_at,
    }


def reviews_qs():
    return Review.objects.select_related('user', 'product', 'order')


def sorted_reviews(request, reviews):
    return reviews.order_by(*SORT_OPTIONS.get(request.GET.get('sort'), SORT_OPTIONS['newest']))


# ─────────────────────────────────────────────────────────────
# CUSTOMER
# ─────────────────────────────────────────────────────────────

@csrf_exempt
@require_POST
@authorize('review', 'create')
def create_review(request):
    data       = request_data(request)
    product_id = data.get('productId')
    order_id   = data.get('orderId')
    rating     = data.get('rating')
    message    = data.get('message')

    if not product_id or not order_id or not rating or not message:
        raise ApiError(400, 'Product ID, Order ID, rating, and message are required')

    rating = parse_int(rating, 0)
    if not 1 <= rating <= 5:
        raise ApiError(400, 'Rating must be between 1 and 5')

    message = str(message).strip()
    if len(message) < 10:
        raise ApiError(400, 'Review message must be at least 10 characters long')
    if len(message) > 1000:
        raise ApiError(400, 'Review message cannot exceed 1000 characters')

    product_id = parse_int(product_id, -1)
    if Review.objects.filter(user=request.user, product_id=product_id).exists():
        raise ApiError(400, 'You have already reviewed this product')

    order = Order.objects.filter(pk=parse_int(order_id, -1), user=request.user, status='delivered').first()
    if order is None:
        raise ApiError(400, 'Order not found, not delivered, or does not belong to you')

    if not order.items.filter(product_id=product_id).exists():
        raise ApiError(400, 'Product not found in the specified order')

    product = Product.objects.filter(pk=product_id).first()
    if product is None:
        raise ApiError(400, 'Product not found')

    try:
        with transaction.atomic():
            review = Review.objects.create(
                user=request.user,
                product=product,
                order=order,
                rating=rating,
                message=message,
            )
    except IntegrityError:
        raise ApiError(400, 'You have already reviewed this product')

    logger.info(f"Review {review.id} created by user {request.user.id} for product {product.id}")
    return api_response(review_to_dict(reviews_qs().get(pk=review.pk)), message='Review created successfully', status=201)


@require_GET
@authorize('review', 'read_own')
def my_reviews(request):
    reviews = sorted_reviews(request, reviews_qs().filter(user=request.user))
    return api_response(paginate(request, reviews, review_to_dict), message='User reviews fetched successfully')


# ─────────────────────────────────────────────────────────────
# PUBLIC
# ─────────────────────────────────────────────────────────────

@require_GET
def product_reviews(request, product_id):
    product = get_or_404(Product.objects.all(), 'Product not found', pk=product_id)
    active  = Review.objects.filter(product=product, status='active')

    data = paginate(request, sorted_reviews(request, active.select_related('user', 'product', 'order')), review_to_dict)

    counts = active.aggregate(
        five_star=Count('id', filter=Q(rating=5)),
        four_star=Count('id', filter=Q(rating=4)),
        three_star=Count('id', filter=Q(rating=3)),
        two_star=Count('id', filter=Q(rating=2)),
        one_star=Count('id', filter=Q(rating=1)),
    )
    data['ratingDistribution'] = {
        '1': counts['one_star'],
        '2': counts['two_star'],
        '3': counts['three_star'],
        '4': counts['four_star'],
        '5': counts['five_star'],
    }
    data['product'] = {
        'id':          product.id,
        'name':        product.name,
        'ratingAvg':   product.rating_avg,
        'ratingCount': product.rating_count,
    }
    return api_response(data, message='Product reviews fetched successfully')


# ─────────────────────────────────────────────────────────────
# ADMIN / MODERATION
# ─────────────────────────────────────────────────────────────

@require_GET
@authorize('review', 'list_all')
def admin_review_list(request):
    reviews = reviews_qs()
    status  = request.GET.get('status', 'all')
    if status != 'all':
        reviews = reviews.filter(status=status)
    rating = parse_int(request.GET.get('rating'), 0)
    if 1 <= rating <= 5:
        reviews = reviews.filter(rating=rating)
    if request.GET.get('productId'):
        reviews = reviews.filter(product_id=parse_int(request.GET['productId'], -1))
    reviews = sorted_reviews(request, reviews)
    return api_response(paginate(request, reviews, review_to_dict), message='All reviews fetched successfully')


@csrf_exempt
@require_http_methods(["DELETE"])
@authorize('review', 'moderate')
def admin_delete_review(request, review_id):
    review = get_or_404(Review.objects.all(), 'Review not found', pk=review_id)
    review.delete()
    logger.info(f"Review {review_id} deleted by admin {request.user.id}")
    return api_response(message='Review deleted successfully')


@csrf_exempt
@require_http_methods(["PATCH"])
@authorize('review', 'moderate')
def admin_update_review_status(request, review_id):
    review = get_or_404(reviews_qs(), 'Review not found', pk=review_id)
    status = request_data(request).get('status')
    if status not in REVIEW_STATUSES:
        raise ApiError(400, 'Status must be active, hidden or reported')

    review.status = status
    review.save(update_fields=['status', 'updated_at'])
    return api_response(review_to_dict(review), message='Review status updated successfully')
