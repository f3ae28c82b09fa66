from django.contrib import admin
from unfold.admin import ModelAdmin, TabularInline
from unfold.decorators import display
from .models import Order, OrderItem


class OrderItemInline(TabularInline):
    model = OrderItem
    extra = 0
    can_delete = False
    fields = ("product", "product_name", "quantity_index", "package_index", "quantity", "price", "total_price")
    readonly_fields = fields


@admin.register(Order)
class OrderAdmin(ModelAdmin):
    list_display = ("id", "user", "total_amount", "coupon_code", "status_display", "payment_display", "created_at")
    list_filter = ("status", "payment_status", "payment_method")
    search_fields = ("user__email", "razorpay_order_id", "razorpay_payment_id", "coupon_code")
    readonly_fields = (
        "subtotal", "discount_amount", "total_amount", "coupon_code",
        "razorpay_order_id", "razorpay_payment_id", "razorpay_signature", "payment_date",
    )
    inlines = [OrderItemInline]

    @display(description="Status", label={
        "pending": "warning", "confirmed": "info", "processing": "info",
        "shipped": "info", "delivered": "success", "cancelled": "danger",
    })
    def status_display(self, obj):
        return obj.status

    @display(description="Payment", label={
        "pending": "warning", "paid": "success", "failed": "danger", "refunded": "info",
    })
    def payment_display(self, obj):
        return obj.payment_status
