from datetime import timedelta

from django.utils import timezone

from adminpanel.views import period_start
from orders.models import Order


def make_order(user, total, payment_status='paid', status='confirmed', created_at=None):
    order = Order.objects.create(user=user, subtotal=total, total_amount=total, payment_status=payment_status, status=status)
    if created_at:
        Order.objects.filter(pk=order.pk).update(created_at=created_at)
    return order


def test_headline_stats(admin_api, user, product):
    make_order(user, 500)
    make_order(user, 300)
    make_order(user, 999, payment_status='pending', status='pending')

    response = admin_api.get('admin/stats')

    assert response.status_code == 200
    body = response.json()
    assert body['success'] is True
    assert body['data'] == {'totalRevenue': 800, 'totalSales': 2, 'totalUsers': 2, 'totalProducts': 1}


def test_revenue_by_period(admin_api, user):
    make_order(user, 400)
    make_order(user, 100, created_at=timezone.now() - timedelta(days=400))

    week = admin_api.get('admin/stats/revenue', {'period': 'week'}).json()['data']
    everything = admin_api.get('admin/stats/revenue', {'period': 'all'}).json()['data']

    assert week == {'period': 'week', 'totalRevenue': 400, 'totalOrders': 1, 'averageOrderValue': 400}
    assert everything['totalRevenue'] == 500
    assert everything['averageOrderValue'] == 250


def test_revenue_with_no_orders(admin_api):
    data = admin_api.get('admin/stats/revenue').json()['data']
    assert data == {'period': 'month', 'totalRevenue': 0, 'totalOrders': 0, 'averageOrderValue': 0}


def test_order_status_counts(admin_api, user):
    make_order(user, 10, status='delivered')
    make_order(user, 10, status='delivered')
    make_order(user, 10, status='cancelled')

    data = admin_api.get('admin/stats/orders').json()['data']

    assert data == [{'status': 'delivered', 'count': 2}, {'status': 'cancelled', 'count': 1}]


def test_period_start():
    now = timezone.now()
    assert period_start('all', now) is None
    assert period_start('month', now).day == 1
    year = period_start('year', now)
    assert (year.month, year.day) == (1, 1)


def test_stats_are_admin_only(api):
    assert api.get('admin/stats').status_code == 403
