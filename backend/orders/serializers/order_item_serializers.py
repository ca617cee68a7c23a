from rest_framework import serializers
from orders.calculators import DiscountType, OrderLineRequest
from orders.models import OrderItem
from core_backend.base import BaseModelSerializer


def money_input(**kwargs):
    kwargs.setdefault("min_value", 0)
    return serializers.DecimalField(max_digits=14, decimal_places=2, **kwargs)


class AddonSerializer(serializers.Serializer):
    id = serializers.IntegerField(required=False, allow_null=True)
    name = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    price = money_input()
    quantity = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0)


class VariantOptionSerializer(serializers.Serializer):
    id = serializers.IntegerField(required=False, allow_null=True)
    name = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    price = money_input()
    variant_id = serializers.IntegerField(required=False, allow_null=True)


class VariantSerializer(serializers.Serializer):
    id = serializers.IntegerField(required=False, allow_null=True)
    name = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    # Selected options; each option price is added once per line
    option = VariantOptionSerializer(many=True, required=False)


class OrderLineSerializer(serializers.Serializer):
    """
    One requested line item. Only the pricing inputs are validated here; the
    figures themselves come from the calculator.
    """

    id = serializers.IntegerField(required=False, allow_null=True)
    name = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    description = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    price = money_input()
    quantity = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0)
    discount = serializers.DecimalField(
        max_digits=14, decimal_places=4, min_value=0, required=False, allow_null=True
    )
    discount_type = serializers.ChoiceField(
        choices=[t.value for t in DiscountType], default=DiscountType.AMOUNT.value
    )
    addons = AddonSerializer(many=True, required=False)
    variants = VariantSerializer(many=True, required=False)


def to_line_requests(order_items):
    """Turn validated OrderLineSerializer data into calculator input."""
    return [OrderLineRequest.from_dict(item) for item in order_items or []]


class OrderItemSerializer(BaseModelSerializer):
    class Meta:
        model = OrderItem
        fields = [
            "id",
            "name",
            "description",
            "price",
            "quantity",
            "discount",
            "discount_type",
            "addons",
            "variants",
            "addons_amount",
            "variants_amount",
            "discount_amount",
            "total_price",
            "grand_price",
            "position",
        ]
        read_only_fields = fields
