from django.urls import path
from . import views

app_name = 'content'

urlpatterns = [
    # Admin / blogs
    path('admin/blogs', views.admin_blog_collection, name='admin_blog_collection'),
    path('admin/blogs/<int:blog_id>', views.admin_blog_detail, name='admin_blog_detail'),
    path('admin/blogs/<int:blog_id>/toggle-status', views.admin_blog_toggle_status, name='admin_blog_toggle_status'),
    path('admin/blogs/<int:blog_id>/toggle-featured', views.admin_blog_toggle_featured, name='admin_blog_toggle_featured'),
    path('admin/blogs/<int:blog_id>/toggle-popular', views.admin_blog_toggle_popular, name='admin_blog_toggle_popular'),

    # Admin / authors
    path('admin/authors', views.admin_author_collection, name='admin_author_collection'),
    path('admin/authors/<int:author_id>', views.admin_author_detail, name='admin_author_detail'),
    path('admin/authors/<int:author_id>/toggle-status', views.admin_author_toggle_status, name='admin_author_toggle_status'),

    # Admin / categories & topics
    path('admin/categories', views.admin_category_collection, name='admin_category_collection'),
    path('admin/categories/<int:category_id>', views.admin_category_detail, name='admin_category_detail'),
    path('admin/topics', views.admin_topic_collection, name='admin_topic_collection'),
    path('admin/topics/<int:topic_id>', views.admin_topic_detail, name='admin_topic_detail'),

    # Admin / contacts & media
    path('admin/contacts', views.admin_contact_list, name='admin_contact_list'),
    path('admin/media', views.admin_media_upload, name='admin_media_upload'),

    # Public / blogs
    path('public/blogs', views.public_blog_list, name='public_blog_list'),
    path('public/blogs/featured', views.public_featured_blogs, name='public_featured_blogs'),
    path('public/blogs/popular', views.public_popular_blogs, name='public_popular_blogs'),
    path('public/blogs/category/<int:category_id>', views.public_blogs_by_category, name='public_blogs_by_category'),
    path('public/blogs/topic/<int:topic_id>', views.public_blogs_by_topic, name='public_blogs_by_topic'),
    path('public/blogs/author/<int:author_id>', views.public_blogs_by_author, name='public_blogs_by_author'),
    path('public/blogs/<int:blog_id>', views.public_blog_detail, name='public_blog_detail'),

    # Public / categories
    path('public/categories', views.public_category_list, name='public_category_list'),
    path('public/categories/featured', views.public_featured_categories, name='public_featured_categories'),
    path('public/categories/popular', views.public_popular_categories, name='public_popular_categories'),

    # Favorites
    path('blogs/<int:blog_id>/favorite', views.blog_favorite, name='blog_favorite'),
    path('users/favorites', views.my_favorites, name='my_favorites'),

    # Contact
    path('contact', views.contact_create, name='contact_create'),
]
