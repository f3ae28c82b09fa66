from django.contrib import admin
from unfold.admin import ModelAdmin
from unfold.decorators import display
from .models import User, Address


class AddressInline(admin.TabularInline):
    model = Address
    extra = 0


@admin.register(User)
class UserAdmin(ModelAdmin):
    list_display = ("firebase_uid", "full_name", "email", "role_display", "is_blocked", "is_deleted", "created_at")
    list_filter = ("role", "is_blocked", "is_deleted")
    search_fields = ("full_name", "email", "phone_number", "firebase_uid")
    readonly_fields = ("firebase_uid", "firebase_sign_in_provider", "created_at", "updated_at")
    exclude = ("password", "username", "first_name", "last_name", "user_permissions", "groups")
    inlines = [AddressInline]

    @display(description="Role", label={"admin": "warning", "user": "info"})
    def role_display(self, obj):
        return obj.role


@admin.register(Address)
class AddressAdmin(ModelAdmin):
    list_display = ("user", "label", "city", "state", "zipcode", "is_default")
    list_filter = ("label", "is_default")
    search_fields = ("address", "city", "user__email")
