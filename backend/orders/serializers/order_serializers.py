from django.contrib.auth import get_user_model
from rest_framework import serializers

from orders.models import Order
from orders.statuses import OrderType, OrderStatus, PaymentStatus, PaymentType, statuses_for_type
from core_backend.base import TimestampedSerializer
from .order_item_serializers import OrderLineSerializer, OrderItemSerializer, to_line_requests

User = get_user_model()


class OrderCalculationSerializer(serializers.Serializer):
    """
    Pricing request: order type, optional manual discount and fees, and the
    line items.
    Validated data carries the calculator input under "lines".
    """

    type = serializers.ChoiceField(choices=OrderType.choices, source="order_type")
    manual_discount = serializers.DecimalField(
        max_digits=14, decimal_places=2, min_value=0, required=False, allow_null=True
    )
    specialty_item_shopping_fee = serializers.DecimalField(
        max_digits=14, decimal_places=2, min_value=0, required=False, allow_null=True
    )
    service_charge = serializers.DecimalField(
        max_digits=14, decimal_places=2, min_value=0, required=False, allow_null=True
    )
    order_items = OrderLineSerializer(many=True)

    def validate(self, attrs):
        attrs = super().validate(attrs)
        if "order_items" in attrs:
            attrs["lines"] = to_line_requests(attrs.pop("order_items"))
        return attrs


class OrderCreateSerializer(OrderCalculationSerializer):
    customer = serializers.PrimaryKeyRelatedField(
        queryset=User.objects.all(), required=False, allow_null=True
    )
    payment_type = serializers.ChoiceField(choices=PaymentType.choices, default=PaymentType.CASH)
    status = serializers.ChoiceField(choices=OrderStatus.choices, required=False)
    payment_status = serializers.ChoiceField(choices=PaymentStatus.choices, required=False)
    customer_note = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    note = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    packaging_note = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    dietary_restrictions = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    reheat_method = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=255)
    tail_number = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=50)
    priority = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=50)
    delivery_date = serializers.DateField(required=False, allow_null=True)
    delivery_time = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=20)
    vendor_cost = serializers.DecimalField(
        max_digits=14, decimal_places=2, min_value=0, required=False
    )

    def validate(self, attrs):
        attrs = super().validate(attrs)
        order_type = attrs.get("order_type")
        if order_type is None and self.instance is not None:
            order_type = self.instance.order_type

        status = attrs.get("status")
        if status and status not in statuses_for_type(order_type):
            raise serializers.ValidationError(
                {"status": f"'{status}' is not available for {order_type} orders."}
            )
        return attrs


class OrderUpdateSerializer(OrderCreateSerializer):
    """
    Full update (PUT). Type, payment type and status are required; the items
    are only replaced when order_items is sent.
    """

    payment_type = serializers.ChoiceField(choices=PaymentType.choices)
    status = serializers.ChoiceField(choices=OrderStatus.choices)
    order_items = OrderLineSerializer(many=True, required=False)

    def validate(self, attrs):
        attrs = super().validate(attrs)
        if attrs.get("order_type") == OrderType.DELIVERY and not attrs.get("delivery_date"):
            raise serializers.ValidationError(
                {"delivery_date": "A delivery date is required for delivery orders."}
            )
        return attrs


class OrderSerializer(TimestampedSerializer):
    """Read representation of an order with its items."""

    items = OrderItemSerializer(many=True, read_only=True)
    customer_name = serializers.CharField(source="customer_display_name", read_only=True)
    customer_email = serializers.EmailField(read_only=True)
    status_display = serializers.CharField(source="get_status_display", read_only=True)

    class Meta:
        model = Order
        fields = [
            "id",
            "order_number",
            "customer",
            "customer_name",
            "customer_email",
            "order_type",
            "status",
            "status_display",
            "payment_type",
            "payment_status",
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
            "vendor_cost",
            "revision",
            "customer_note",
            "note",
            "packaging_note",
            "dietary_restrictions",
            "reheat_method",
            "tail_number",
            "priority",
            "delivery_date",
            "delivery_time",
            "items",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields
        select_related_fields = ["customer"]
        prefetch_related_fields = ["items"]
