from django.contrib import admin
from django.db.models import Sum
from django.utils.html import format_html
from unfold.admin import ModelAdmin
from unfold.decorators import display
from .models import Product, ProductCategory


@admin.register(ProductCategory)
class ProductCategoryAdmin(ModelAdmin):
    list_display = ("name", "order", "created_at")
    search_fields = ("name", "description")


@admin.register(Product)
class ProductAdmin(ModelAdmin):
    list_display = [
        "product_image_display",
        "name",
        "status_display",
        "tier_count",
        "rating_avg",
        "rating_count",
        "is_published",
        "is_featured",
    ]
    list_filter = ["status", "is_published", "is_popular", "is_featured", "is_deleted", "categories"]
    search_fields = ["name", "description"]
    readonly_fields = ["rating_avg", "rating_count", "count_favorite"]
    filter_horizontal = ["categories"]

    @display(description="Image", header=True)
    def product_image_display(self, obj):
        if obj.images:
            return format_html(
                '<img src="{}" style="width: 50px; height: 50px; object-fit: cover; border-radius: 8px;" />',
                obj.images[0]
            )
        return format_html(
            '<div style="width: 50px; height: 50px; background: #f3f4f6; border-radius: 8px; display: flex; align-items: center; justify-content: center; font-size: 10px; color: #9ca3af;">No Image</div>'
        )

    @display(description="Status", label={"active": "success", "inactive": "danger"})
    def status_display(self, obj):
        return obj.status

    @display(description="Tiers")
    def tier_count(self, obj):
        return len(obj.quantity_details or [])


# Dashboard callback function for custom widgets
def dashboard_callback(request, context):
    """
    Headline numbers for the unfold dashboard
    """
    from content.models import Blog
    from orders.models import Order

    paid = Order.objects.filter(payment_status='paid')

    context.update({
        "total_products": Product.objects.filter(is_deleted=False, status='active').count(),
        "total_blogs": Blog.objects.filter(status='published').count(),
        "total_orders": Order.objects.count(),
        "total_revenue": paid.aggregate(total=Sum('total_amount'))['total'] or 0,
        "recent_products": Product.objects.filter(is_deleted=False).order_by('-id')[:5],
    })

    return context
