from django.contrib import admin
from unfold.admin import ModelAdmin
from unfold.decorators import display
from .models import Review


@admin.register(Review)
class ReviewAdmin(ModelAdmin):
    list_display = ("product", "user", "rating", "status_display", "is_verified_purchase", "created_at")
    list_filter = ("status", "rating", "is_verified_purchase")
    search_fields = ("product__name", "user__email", "message")
    raw_id_fields = ("order",)

    @display(description="Status", label={"active": "success", "hidden": "warning", "reported": "danger"})
    def status_display(self, obj):
        return obj.status
