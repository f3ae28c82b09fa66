# adminpanel/views.py
from datetime import timedelta
from decimal import Decimal, ROUND_HALF_UP

from django.db.models import Avg, Count, Sum
from django.utils import timezone
from django.views.decorators.http import require_GET

from catalog.models import Product
from core.api import api_response
from core.permissions import authorize
from orders.models import Order
from users.models import User


def period_start(period, now=None):
    """Lower bound on created_at for a revenue period; None means all time."""
    now = timezone.localtime(now or timezone.now())
    if period == 'week':
        return now - timedelta(days=7)
    if period == 'month':
        return now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
    if period == 'year':
        return now.replace(month=1, day=1, hour=0, minute=0, second=0, microsecond=0)
    return None


# ============ DASHBOARD ============

@require_GET
@authorize('stats', 'read')
def admin_stats(request):
    """Headline numbers for the admin dashboard"""
    sales = Order.objects.filter(payment_status='paid').aggregate(
        total_revenue=Sum('total_amount'),
        total_sales=Count('id'),
    )

    stats = {
        'totalRevenue':  sales['total_revenue'] or Decimal('0'),
        'totalSales':    sales['total_sales'],
        'totalUsers':    User.objects.filter(is_deleted=False).count(),
        'totalProducts': Product.objects.filter(is_deleted=False, status='active').count(),
    }
    return api_response(stats, message='Admin statistics retrieved successfully', key='success')


# ============ REVENUE ============

@require_GET
@authorize('stats', 'read')
def revenue_stats(request):
    period = request.GET.get('period', 'month')

    orders = Order.objects.filter(payment_status='paid')
    start  = period_start(period)
    if start is not None:
        orders = orders.filter(created_at__gte=start)

    revenue = orders.aggregate(
        total_revenue=Sum('total_amount'),
        total_orders=Count('id'),
        average_order_value=Avg('total_amount'),
    )
    average = revenue['average_order_value'] or Decimal('0')

    data = {
        'period':            period,
        'totalRevenue':      revenue['total_revenue'] or Decimal('0'),
        'totalOrders':       revenue['total_orders'],
        'averageOrderValue': Decimal(average).quantize(Decimal('0.01'), rounding=ROUND_HALF_UP),
    }
    return api_response(data, message=f'Revenue statistics for {period} retrieved successfully', key='success')


# ============ ORDER STATUS ============

@require_GET
@authorize('stats', 'read')
def order_status_stats(request):
    rows = Order.objects.values('status').annotate(count=Count('id')).order_by('-count', 'status')
    data = [{'status': row['status'], 'count': row['count']} for row in rows]
    return api_response(data, message='Order status statistics retrieved successfully', key='success')
