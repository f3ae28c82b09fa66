# orders/views.py
import logging

from django.http import JsonResponse
from django.utils import timezone
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_GET, require_http_methods, require_POST

from core.api import ApiJSONEncoder, paginate, parse_int, request_data
from core.permissions import authorize, is_admin

from . import services
from .models import Order
from .serializers import order_to_dict

logger = logging.getLogger(__name__)

ORDER_STATUSES   = {choice for choice, _ in Order.ORDER_STATUS}
PAYMENT_STATUSES = {choice for choice, _ in Order.PAYMENT_STATUS}


def orders_qs():
    return Order.objects.select_related('delivery_address').prefetch_related('items__product')


def order_response(order, message=None, status=200):
    payload = {'order': order_to_dict(order)}
    if message:
        payload = {'message': message, **payload}
    return JsonResponse(payload, status=status, encoder=ApiJSONEncoder)


def order_page_response(request, orders):
    page = paginate(request, orders, order_to_dict)
    return JsonResponse({
        'orders':       page['results'],
        'page':         page['page'],
        'limit':        page['limit'],
        'totalPages':   page['totalPages'],
        'totalResults': page['totalResults'],
    }, encoder=ApiJSONEncoder)


# ─────────────────────────────────────────────────────────────
# CHECKOUT
# ─────────────────────────────────────────────────────────────

@csrf_exempt
@require_POST
@authorize('order', 'create')
def create_order(request):
    data  = request_data(request)
    order = services.create_order(
        request.user,
        data.get('items'),
        data.get('deliveryAddressId'),
        data.get('couponCode'),
    )
    return order_response(orders_qs().get(pk=order.pk), message='Order created successfully', status=201)


@csrf_exempt
@require_POST
@authorize('order', 'pay')
def verify_payment(request):
    """
    Razorpay checkout callback. Field names are accepted in Razorpay's
    snake_case or in camelCase.
    """
    data = request_data(request)

    razorpay_order_id   = data.get('razorpay_order_id') or data.get('razorpayOrderId')
    razorpay_payment_id = data.get('razorpay_payment_id') or data.get('razorpayPaymentId')
    razorpay_signature  = data.get('razorpay_signature') or data.get('razorpaySignature')
    order_id            = data.get('orderId')

    if not all([razorpay_order_id, razorpay_payment_id, razorpay_signature, order_id]):
        raise services.order_error('Missing payment details')

    order = services.verify_payment(
        request.user, order_id, razorpay_order_id, razorpay_payment_id, razorpay_signature,
    )
    return order_response(orders_qs().get(pk=order.pk), message='Payment verified successfully')


# ─────────────────────────────────────────────────────────────
# CUSTOMER
# ─────────────────────────────────────────────────────────────

@require_GET
@authorize('order', 'read')
def my_orders(request):
    orders = orders_qs().filter(user=request.user)
    if request.GET.get('status') in ORDER_STATUSES:
        orders = orders.filter(status=request.GET['status'])
    return order_page_response(request, orders)


@require_GET
@authorize('order', 'read')
def order_detail(request, order_id):
    orders = orders_qs()
    if not is_admin(request.user):
        orders = orders.filter(user=request.user)
    order = orders.filter(pk=order_id).first()
    if order is None:
        raise services.order_error('Order not found', status=404)
    return order_response(order)


# ─────────────────────────────────────────────────────────────
# ADMIN
# ─────────────────────────────────────────────────────────────

@require_GET
@authorize('order', 'list_all')
def admin_order_list(request):
    orders = orders_qs()
    params = request.GET
    if params.get('status') in ORDER_STATUSES:
        orders = orders.filter(status=params['status'])
    if params.get('paymentStatus') in PAYMENT_STATUSES:
        orders = orders.filter(payment_status=params['paymentStatus'])
    if params.get('userId'):
        orders = orders.filter(user_id=parse_int(params['userId'], -1))
    if params.get('sort') == 'old_to_new':
        orders = orders.order_by('created_at', 'id')
    return order_page_response(request, orders)


@csrf_exempt
@require_http_methods(["PATCH"])
@authorize('order', 'update_status')
def admin_update_order_status(request, order_id):
    order = orders_qs().filter(pk=order_id).first()
    if order is None:
        raise services.order_error('Order not found', status=404)

    data           = request_data(request)
    status         = data.get('status')
    payment_status = data.get('paymentStatus')

    if not status and not payment_status:
        raise services.order_error('status or paymentStatus is required')
    if status and status not in ORDER_STATUSES:
        raise services.order_error('Invalid order status')
    if payment_status and payment_status not in PAYMENT_STATUSES:
        raise services.order_error('Invalid payment status')

    if status:
        order.status = status
    if payment_status:
        order.payment_status = payment_status
        if payment_status == 'paid' and order.payment_date is None:
            order.payment_date = timezone.now()
    order.save()

    logger.info(f"Order {order.id} set to {order.status}/{order.payment_status} by admin {request.user.id}")
    return order_response(order, message='Order updated successfully')


@csrf_exempt
@require_http_methods(["GET", "POST"])
def order_collection(request):
    if request.method == 'POST':
        return create_order(request)
    return my_orders(request)
