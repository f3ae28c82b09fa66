from django.contrib import admin
from unfold.admin import ModelAdmin, TabularInline
from .models import Cart, CartItem


class CartItemInline(TabularInline):
    model = CartItem
    extra = 0
    fields = ("product", "quantity_index", "package_index", "quantity")


@admin.register(Cart)
class CartAdmin(ModelAdmin):
    list_display = ("user", "item_count", "updated_at")
    search_fields = ("user__email", "user__firebase_uid")
    inlines = [CartItemInline]

    def item_count(self, obj):
        return obj.items.count()
