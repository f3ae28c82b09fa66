from django.urls import path
from . import views

app_name = 'promotions'

urlpatterns = [
    path('admin/coupons', views.admin_coupon_collection, name='admin_coupon_collection'),
    path('admin/coupons/<int:coupon_id>', views.admin_coupon_detail, name='admin_coupon_detail'),
    path('admin/coupons/<int:coupon_id>/toggle-status', views.admin_coupon_toggle_status, name='admin_coupon_toggle_status'),

    path('coupons', views.public_coupon_list, name='public_coupon_list'),
    path('orders/apply-coupon', views.apply_coupon, name='apply_coupon'),
]
