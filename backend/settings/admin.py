from django.contrib import admin
from .models import BusinessSetup


@admin.register(BusinessSetup)
class BusinessSetupAdmin(admin.ModelAdmin):
    list_display = ("name", "currency", "delivery_charge", "order_number_prefix", "updated_at")
    readonly_fields = ("created_at", "updated_at")
    fieldsets = (
        ("Business", {"fields": ("name", "email", "phone", "notification_email")}),
        ("Financial", {"fields": ("currency", "delivery_charge")}),
        ("Orders", {"fields": ("order_number_prefix",)}),
        ("Timestamps", {"fields": ("created_at", "updated_at"), "classes": ("collapse",)}),
    )

    def has_add_permission(self, request):
        # Single row; the service creates it on first access.
        return not BusinessSetup.objects.exists()
