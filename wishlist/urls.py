from django.urls import path
from . import views

app_name = 'wishlist'

urlpatterns = [
    path('wishlist', views.wishlist_view, name='wishlist'),
    # Add/remove, productId in the body
    path('wishlist/toggle', views.toggle_wishlist, name='toggle'),
]
