from django.urls import path
from . import views

app_name = 'users'

urlpatterns = [
    # Authentication
    path('auth/register', views.register, name='register'),
    path('auth/admin-signup', views.admin_signup, name='admin_signup'),
    path('auth/login', views.login, name='login'),
    path('auth/token', views.generate_token, name='generate_token'),
    path('auth/forgot-password', views.forgot_password, name='forgot_password'),

    # Profile
    path('users/me', views.update_me, name='update_me'),
    path('users/<int:user_id>/soft-delete', views.soft_delete_user, name='soft_delete_user'),
    path('users/<int:user_id>', views.delete_user, name='delete_user'),

    # Admin
    path('admin/users', views.admin_user_list, name='admin_user_list'),
    path('admin/users/<int:user_id>', views.admin_user_detail, name='admin_user_detail'),
    path('admin/users/<int:user_id>/block-status', views.admin_toggle_block, name='admin_toggle_block'),

    # Addresses
    path('addresses', views.address_collection, name='address_collection'),
    path('addresses/<int:address_id>', views.address_detail, name='address_detail'),
    path('addresses/<int:address_id>/default', views.set_default_address, name='set_default_address'),
]
