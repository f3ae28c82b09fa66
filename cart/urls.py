# cart/urls.py
from django.urls import path
from . import views

app_name = 'cart'

urlpatterns = [
    path('cart', views.cart_view, name='cart_view'),
    path('cart/items', views.upsert_cart_item, name='upsert_cart_item'),
]
