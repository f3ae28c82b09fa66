from django.contrib import admin
from unfold.admin import ModelAdmin
from unfold.decorators import display
from .models import Coupon


@admin.register(Coupon)
class CouponAdmin(ModelAdmin):
    list_display = ("code", "discount_type", "discount_value", "max_discount", "min_order_value", "usage_count", "status_display")
    list_filter = ("discount_type", "status")
    search_fields = ("code",)
    readonly_fields = ("usage_count",)

    @display(description="Status", label={"active": "success", "inactive": "danger"})
    def status_display(self, obj):
        return obj.status
