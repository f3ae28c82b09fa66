from django.contrib import admin
from unfold.admin import ModelAdmin
from unfold.decorators import display
from .models import Author, Blog, Category, Contact, Favorite, Topic


@admin.register(Author)
class AuthorAdmin(ModelAdmin):
    list_display = ("name", "instagram_handle", "status", "order")
    list_filter = ("status",)
    search_fields = ("name",)


@admin.register(Category)
class CategoryAdmin(ModelAdmin):
    list_display = ("name", "status", "featured", "popular", "used_count", "order")
    list_filter = ("status", "featured", "popular")
    search_fields = ("name",)
    readonly_fields = ("used_count",)


@admin.register(Topic)
class TopicAdmin(ModelAdmin):
    list_display = ("name", "status", "featured", "popular", "order")
    list_filter = ("status", "featured", "popular")
    search_fields = ("name",)
    filter_horizontal = ("categories",)


@admin.register(Blog)
class BlogAdmin(ModelAdmin):
    list_display = ("title", "author", "status_display", "featured", "popular", "views", "favorites", "published_at")
    list_filter = ("status", "featured", "popular", "author")
    search_fields = ("title", "description")
    readonly_fields = ("slug", "views", "favorites", "published_at")
    filter_horizontal = ("categories", "topics")

    @display(description="Status", label={"published": "success", "draft": "warning", "archived": "danger"})
    def status_display(self, obj):
        return obj.status


@admin.register(Favorite)
class FavoriteAdmin(ModelAdmin):
    list_display = ("user", "blog", "created_at")


@admin.register(Contact)
class ContactAdmin(ModelAdmin):
    list_display = ("fullname", "email", "phonenumber", "is_deleted", "created_at")
    list_filter = ("is_deleted",)
    search_fields = ("fullname", "email")
