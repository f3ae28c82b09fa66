from django.contrib import admin
from django.conf import settings
from django.conf.urls.static import static
from django.urls import path, include

from core import views as core_views

API_PREFIX = 'api/v1/'

urlpatterns = [
    path('admin/', admin.site.urls),
    path('health', core_views.health, name='health'),

    path(API_PREFIX, include('users.urls')),
    path(API_PREFIX, include('content.urls')),
    path(API_PREFIX, include('catalog.urls')),
    path(API_PREFIX, include('cart.urls')),
    path(API_PREFIX, include('wishlist.urls')),
    # promotions before orders: it owns orders/apply-coupon
    path(API_PREFIX, include('promotions.urls')),
    path(API_PREFIX, include('orders.urls')),
    path(API_PREFIX, include('reviews.urls')),
    path(API_PREFIX, include('adminpanel.urls')),
]

handler404 = 'core.views.not_found'
handler500 = 'core.views.server_error'

if settings.DEBUG:
    urlpatterns += static(settings.STATIC_URL, document_root=settings.STATIC_ROOT)
