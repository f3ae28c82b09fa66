from django.urls import path
from . import views

app_name = 'catalog'

urlpatterns = [
    path('products', views.product_collection, name='product_collection'),
    path('products/<int:product_id>', views.product_detail, name='product_detail'),
    path('products/<int:product_id>/toggle-status', views.product_toggle_status, name='product_toggle_status'),

    path('product-categories', views.product_category_collection, name='product_category_collection'),
    path('product-categories/<int:category_id>', views.product_category_detail, name='product_category_detail'),
]
