from django.urls import path
from . import views

app_name = 'reviews'

urlpatterns = [
    # Customer
    path('reviews', views.create_review, name='create_review'),
    path('reviews/me', views.my_reviews, name='my_reviews'),

    # Public
    path('reviews/product/<int:product_id>', views.product_reviews, name='product_reviews'),

    # Moderation
    path('admin/reviews', views.admin_review_list, name='admin_review_list'),
    path('admin/reviews/<int:review_id>', views.admin_delete_review, name='admin_delete_review'),
    path('admin/reviews/<int:review_id>/status', views.admin_update_review_status, name='admin_update_review_status'),
]
