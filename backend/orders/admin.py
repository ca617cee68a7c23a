from django.contrib import admin
from .models import Order, OrderItem


class OrderItemInline(admin.TabularInline):
    model = OrderItem
    extra = 0
    fields = (
        "position",
        "name",
        "price",
        "quantity",
        "discount",
        "discount_type",
        "addons_amount",
        "variants_amount",
        "total_price",
        "grand_price",
    )
    readonly_fields = fields
    can_delete = False

    def has_add_permission(self, request, obj=None):
        # Items change only through OrderService so the totals stay in sync.
        return False


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    """
    Admin configuration for the Order model.
    """

    list_display = (
        "order_number",
        "customer_display_name",
        "order_type",
        "status",
        "payment_status",
        "grand_total",
        "delivery_date",
        "created_at",
    )
    list_display_links = ("order_number",)
    list_filter = ("status", "payment_status", "order_type", "payment_type", "created_at")
    search_fields = ("order_number", "customer__username", "customer__email")
    ordering = ("-created_at",)
    inlines = [OrderItemInline]

    readonly_fields = (
        "order_number",
        "total_quantity",
        "total",
        "total_tax",
        "total_charges",
        "discount",
        "manual_discount",
        "delivery_charge",
        "specialty_item_shopping_fee",
        "service_charge",
        "grand_total",
        "created_at",
        "updated_at",
        "revision",
    )
    fieldsets = (
        ("Order", {"fields": ("order_number", "revision", "customer", "order_type", "status")}),
        ("Payment", {"fields": ("payment_type", "payment_status", "vendor_cost")}),
        (
            "Totals",
            {
                "fields": (
                    "total_quantity",
                    "total",
                    "discount",
                    "manual_discount",
                    "delivery_charge",
                    "specialty_item_shopping_fee",
                    "service_charge",
                    "total_tax",
                    "total_charges",
                    "grand_total",
                )
            },
        ),
        (
            "Details",
            {
                "fields": (
                    "delivery_date",
                    "delivery_time",
                    "tail_number",
                    "priority",
                    "customer_note",
                    "note",
                    "packaging_note",
                    "dietary_restrictions",
                    "reheat_method",
                )
            },
        ),
        ("Timestamps", {"fields": ("created_at", "updated_at"), "classes": ("collapse",)}),
    )

    @admin.display(description="Customer")
    def customer_display_name(self, obj):
        return obj.customer_display_name
