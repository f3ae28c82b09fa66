# adminpanel/urls.py
from django.urls import path
from . import views

app_name = 'adminpanel'

urlpatterns = [
    path('admin/stats', views.admin_stats, name='admin_stats'),
    path('admin/stats/revenue', views.revenue_stats, name='revenue_stats'),
    path('admin/stats/orders', views.order_status_stats, name='order_status_stats'),
]
