from django.contrib import admin
from unfold.admin import ModelAdmin, TabularInline
from unfold.decorators import display

from .models import Wishlist, WishlistItem


class WishlistItemInline(TabularInline):
    model = WishlistItem
    extra = 0
    readonly_fields = ("created_at",)


@admin.register(Wishlist)
class WishlistAdmin(ModelAdmin):
    list_display = ("user", "item_count", "updated_at")
    search_fields = ("user__email",)
    inlines = [WishlistItemInline]

    @display(description="Items")
    def item_count(self, obj):
        return obj.items.count()
