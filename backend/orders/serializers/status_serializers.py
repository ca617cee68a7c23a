from rest_framework import serializers
from orders.statuses import OrderStatus, PaymentStatus


class OrderCustomUpdateSerializer(serializers.Serializer):
    """
    Partial update of the workflow fields (PATCH). Transition rules are
    enforced by OrderService.update_status.
    """

    status = serializers.ChoiceField(choices=OrderStatus.choices, required=False)
    payment_status = serializers.ChoiceField(choices=PaymentStatus.choices, required=False)
    vendor_cost = serializers.DecimalField(
        max_digits=14, decimal_places=2, min_value=0, required=False
    )

    def validate(self, attrs):
        if not attrs:
            raise serializers.ValidationError("Provide status, payment_status or vendor_cost.")
        return attrs


class OrderBulkUpdateSerializer(serializers.Serializer):
    ids = serializers.ListField(child=serializers.IntegerField(), allow_empty=False)
    status = serializers.ChoiceField(choices=OrderStatus.choices, required=False)
    payment_status = serializers.ChoiceField(choices=PaymentStatus.choices, required=False)

    def validate(self, attrs):
        if "status" not in attrs and "payment_status" not in attrs:
            raise serializers.ValidationError("Provide status or payment_status.")
        return attrs


class OrderBulkDeleteSerializer(serializers.Serializer):
    ids = serializers.ListField(child=serializers.IntegerField(), allow_empty=False)
