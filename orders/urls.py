# orders/urls.py
from django.urls import path
from . import views

app_name = 'orders'

urlpatterns = [
    # Checkout & payment
    path('orders', views.order_collection, name='order_collection'),
    path('orders/verify-payment', views.verify_payment, name='verify_payment'),
    path('orders/<int:order_id>', views.order_detail, name='order_detail'),

    # Admin
    path('admin/orders', views.admin_order_list, name='admin_order_list'),
    path('admin/orders/<int:order_id>/status', views.admin_update_order_status, name='admin_update_order_status'),
]
